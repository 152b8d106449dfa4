"""User configuration: where it lives, how it is saved, and how it is resolved.

Directories
    Linux and the BSDs follow the XDG Base Directory layout
    (``$XDG_CONFIG_HOME/specgraph`` and ``$XDG_DATA_HOME/specgraph``); every
    other platform keeps both under ``~/.specgraph/``.  The data directory
    holds the spec store (``specs/``) and crash logs (``logs/``).

Saved defaults
    A single :class:`~specgraph.models.GlobalConfig` JSON file,
    ``<config_dir>/config.json``.

Precedence
    :func:`resolve_config` layers CLI flags over environment variables over
    the saved defaults.

Files are replaced atomically with :func:`atomic_write`, which
:mod:`specgraph.store` uses as well.
"""

from __future__ import annotations

import contextlib
import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specgraph.exceptions import ConfigError, InvalidUsageError
from specgraph.models import GlobalConfig

_APP_NAME = "specgraph"

ENV_FORMAT = "SPECGRAPH_FORMAT"
ENV_STORE_DIR = "SPECGRAPH_STORE_DIR"


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _xdg_base(env_var: str, *default_parts: str) -> Path:
    """``$env_var`` when set and non-empty, otherwise ``~/<default_parts>``."""
    override = os.environ.get(env_var)
    if override:
        return Path(override)
    return Path.home().joinpath(*default_parts)


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json`` (created on first use)."""
    if _is_xdg_platform():
        return _ensure_dir(_xdg_base("XDG_CONFIG_HOME", ".config") / _APP_NAME)
    return _ensure_dir(Path.home() / f".{_APP_NAME}")


def get_data_dir() -> Path:
    """Directory holding stored specs and crash logs (created on first use)."""
    if _is_xdg_platform():
        return _ensure_dir(_xdg_base("XDG_DATA_HOME", ".local", "share") / _APP_NAME)
    return _ensure_dir(Path.home() / f".{_APP_NAME}" / "data")


def atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a partial file.

    The text goes to a hidden temporary file in the same directory, is
    flushed to disk, and is then renamed over *path* with ``os.replace``.
    If anything fails the temporary file is removed and *path* keeps its
    previous content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handle, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


def global_config_path() -> Path:
    return get_config_dir() / "config.json"


def load_global_config() -> GlobalConfig:
    """Read the saved defaults.

    Returns:
        The saved :class:`~specgraph.models.GlobalConfig`, or a default one
        when nothing has been saved yet.

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except ValueError as exc:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Write *config* as the saved defaults.

    Raises:
        ConfigError: If the config directory or file cannot be written.
    """
    try:
        path = global_config_path()
        atomic_write(path, json.dumps(config.model_dump(mode="json"), indent=2) + "\n")
    except OSError as exc:
        raise ConfigError(f"Could not save config: {exc}") from exc


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    Args:
        config: The current configuration.
        key: ``<section>.<field>``, for example ``output.format`` or
            ``analysis.top_schemas``.
        value: The new value as text; Pydantic coerces it to the field type.

    Raises:
        InvalidUsageError: If the key is unknown or the value fails validation.
    """
    data: dict[str, Any] = config.model_dump()
    section, _, field = key.partition(".")
    if field not in data.get(section, {}) or not field:
        raise InvalidUsageError(f"Unknown config key: {key}")

    data[section][field] = value
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidUsageError(f"Invalid value for {key}: {value!r}") from exc


def resolve_store_dir(config: GlobalConfig, cli_store_dir: Optional[str] = None) -> Path:
    """Spec store directory: CLI > ``SPECGRAPH_STORE_DIR`` > config > ``<data_dir>/specs``."""
    for candidate in (cli_store_dir, os.environ.get(ENV_STORE_DIR), config.store.directory):
        if candidate:
            return Path(candidate).expanduser()
    return get_data_dir() / "specs"


def resolve_config(
    cli_format: Optional[str] = None,
    cli_store_dir: Optional[str] = None,
) -> GlobalConfig:
    """Build the effective configuration for one CLI invocation.

    Highest precedence first: CLI flags, then ``SPECGRAPH_FORMAT`` /
    ``SPECGRAPH_STORE_DIR``, then the saved defaults, then built-in
    defaults.  The output format is not validated here; the caller maps it
    onto :class:`~specgraph.output.OutputFormat`.

    Returns:
        The effective :class:`~specgraph.models.GlobalConfig`, with
        ``store.directory`` always set.
    """
    config = load_global_config()

    fmt = cli_format or os.environ.get(ENV_FORMAT)
    if fmt:
        config.output.format = fmt

    config.store.directory = str(resolve_store_dir(config, cli_store_dir))
    return config
