"""Exception hierarchy for specgraph.

All exceptions inherit from :class:`SpecgraphError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specgraph.exit_codes`.
The top-level error handler in :func:`specgraph.app.main` catches
``SpecgraphError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The invalid-input family (:class:`SpecInputError` and its subclasses) is what
the analysis pipeline raises.  Callers that present errors to users should
catch it specifically and report "your document is invalid" rather than a
generic failure.

Subclass hierarchy::

    SpecgraphError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- SpecNotFoundError        (exit 4)
    +-- SourceLoadError          (exit 6)
    +-- ConfigError              (exit 1)
    +-- SpecInputError           (exit 7)
        +-- EmptyInputError
        +-- UnparseableContentError
        +-- InvalidStructureError
        +-- NoEndpointsFoundError
"""

from specgraph.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_SPEC,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SOURCE_ERROR,
)


class SpecgraphError(Exception):
    """Base exception for all specgraph errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specgraph.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecgraphError):
    """Raised for invalid CLI arguments or missing required values."""

    exit_code = EXIT_INVALID_USAGE


class SpecNotFoundError(SpecgraphError):
    """Raised when a stored spec identifier does not exist."""

    exit_code = EXIT_NOT_FOUND


class SourceLoadError(SpecgraphError):
    """Raised when a spec source (file, URL, stdin) cannot be read."""

    exit_code = EXIT_SOURCE_ERROR


class ConfigError(SpecgraphError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecInputError(SpecgraphError):
    """Base class for documents the analysis pipeline cannot accept."""

    exit_code = EXIT_INVALID_SPEC


class EmptyInputError(SpecInputError):
    """Raised when the spec text is blank after trimming."""


class UnparseableContentError(SpecInputError):
    """Raised when the spec text is neither valid JSON nor valid YAML."""


class InvalidStructureError(SpecInputError):
    """Raised when the decoded document is not a mapping or lacks a usable ``paths`` mapping."""


class NoEndpointsFoundError(SpecInputError):
    """Raised when ``paths`` declares no operation with a recognised HTTP method."""
