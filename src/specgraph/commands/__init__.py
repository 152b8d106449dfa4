"""Built-in CLI sub-commands for specgraph.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~specgraph.commands.analyze` -- analyse a spec from a file, URL or
  stdin (``analyze``, ``endpoints``, ``schemas``, ``graph``, ``metrics``).
* :mod:`~specgraph.commands.specs` -- store, list, analyse and delete saved
  specs.
* :mod:`~specgraph.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``specs`` and ``config``) or plain callback
functions registered directly on the root app.
"""
