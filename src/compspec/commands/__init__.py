"""Built-in CLI sub-commands for compspec.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~compspec.commands.generate` -- build and write a completion spec.
* :mod:`~compspec.commands.inspect` -- show the topic set and completion
  records derived from a registry.
* :mod:`~compspec.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``generate``).
"""
