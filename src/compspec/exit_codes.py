"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~compspec.exceptions.CompspecError` subclass.
Build scripts that call ``compspec generate`` can inspect the exit code to
tell a broken registry apart from a broken summary template without parsing
stderr.

Example::

    $ compspec generate registry.yaml -o sf.yaml
    $ echo $?
    8   # EXIT_INTERPOLATION_ERROR -- a summary template failed to render
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_REGISTRY_ERROR = 7
"""The command registry could not be loaded, parsed, or imported."""

EXIT_INTERPOLATION_ERROR = 8
"""A summary or topic description template failed to render."""

EXIT_TREE_ERROR = 9
"""The topic hierarchy is inconsistent (colliding topics, malformed aliases)."""
