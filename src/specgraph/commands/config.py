"""Config commands -- view and modify global configuration.

Provides the ``specgraph config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~specgraph.models.GlobalConfig`).
"""

from __future__ import annotations

import typer

from specgraph.commands.common import cli_errors
from specgraph.output import format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the saved configuration.

    Example::

        specgraph config show
        specgraph --json config show
    """
    from specgraph.config import get_config_dir, load_global_config

    with cli_errors():
        config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is validated against :class:`~specgraph.models.GlobalConfig`
    before saving.

    Example::

        specgraph config set output.format json
        specgraph config set analysis.top_schemas 3
    """
    from specgraph.config import load_global_config, save_global_config, set_config_value

    with cli_errors():
        config = set_config_value(load_global_config(), key, value)
        save_global_config(config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset() -> None:
    """Reset configuration to defaults."""
    from specgraph.config import save_global_config
    from specgraph.models import GlobalConfig

    with cli_errors():
        save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
