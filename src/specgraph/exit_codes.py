"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specgraph.exceptions.SpecgraphError` subclass.
Shell scripts can inspect the exit code to tell an invalid document apart
from a missing file or an internal failure without parsing stderr.

Example::

    $ specgraph analyze broken.yaml
    $ echo $?
    7   # EXIT_INVALID_SPEC -- the document could not be analysed
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""The requested stored spec does not exist."""

EXIT_SOURCE_ERROR = 6
"""The spec source could not be read (missing file, network failure, HTTP error)."""

EXIT_INVALID_SPEC = 7
"""The OpenAPI document is empty, unparseable, or structurally unusable."""
