"""On-disk storage for raw spec documents.

Each spec is kept as one JSON file ``<id>.json`` in the store directory,
holding the identifier, a human-readable name, the raw document text, and
the creation time.  The store never decodes or validates the content;
callers parse it with :func:`~specgraph.parser.parse_spec` when they read
it back (the CLI also parses before saving, to reject invalid uploads).

Writes go through :func:`~specgraph.config.atomic_write`.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from specgraph.config import atomic_write
from specgraph.exceptions import (
    EmptyInputError,
    InvalidUsageError,
    SpecgraphError,
    SpecNotFoundError,
)
from specgraph.models import StoredSpec

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class SpecStore:
    """File-backed collection of :class:`~specgraph.models.StoredSpec` records.

    Args:
        directory: Directory holding the spec files.  Created on first write.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, spec_id: str) -> Path:
        if not _ID_PATTERN.match(spec_id):
            raise SpecNotFoundError(f"Spec '{spec_id}' not found")
        return self._directory / f"{spec_id}.json"

    def save(self, name: str, content: str) -> StoredSpec:
        """Store *content* under a new identifier.

        Args:
            name: Human-readable name; surrounding whitespace is removed.
            content: Raw document text, stored verbatim.

        Returns:
            The stored record.

        Raises:
            InvalidUsageError: If *name* is blank.
            EmptyInputError: If *content* is blank.
        """
        name = name.strip()
        if not name:
            raise InvalidUsageError("Name is required")
        if not content.strip():
            raise EmptyInputError("Specification content is required")

        spec = StoredSpec(
            id=uuid.uuid4().hex,
            name=name,
            content=content,
            created_at=datetime.now(timezone.utc),
        )
        atomic_write(self._path(spec.id), spec.model_dump_json(indent=2) + "\n")
        logger.debug("Stored spec %s (%s) in %s", spec.id, spec.name, self._directory)
        return spec

    def get(self, spec_id: str) -> StoredSpec:
        """Load a stored spec by identifier.

        Raises:
            SpecNotFoundError: If no spec with that identifier exists.
            SpecgraphError: If the stored file is corrupt.
        """
        path = self._path(spec_id)
        if not path.is_file():
            raise SpecNotFoundError(f"Spec '{spec_id}' not found")
        return self._read(path)

    def list_specs(self) -> list[StoredSpec]:
        """Return all stored specs, newest first."""
        if not self._directory.is_dir():
            return []
        specs = [
            self._read(path)
            for path in self._directory.glob("*.json")
            if _ID_PATTERN.match(path.stem)
        ]
        return sorted(specs, key=lambda spec: spec.created_at, reverse=True)

    def delete(self, spec_id: str) -> None:
        """Remove a stored spec.

        Raises:
            SpecNotFoundError: If no spec with that identifier exists.
        """
        path = self._path(spec_id)
        if not path.is_file():
            raise SpecNotFoundError(f"Spec '{spec_id}' not found")
        path.unlink()

    @staticmethod
    def _read(path: Path) -> StoredSpec:
        try:
            return StoredSpec.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            raise SpecgraphError(f"Corrupt stored spec at {path}: {exc}") from exc
