"""Exception hierarchy for compspec.

All exceptions inherit from :class:`CompspecError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`compspec.exit_codes`.
The top-level error handler in :func:`compspec.app.main` catches
``CompspecError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Every error is fatal to the generation run: no partial spec is ever written.

Subclass hierarchy::

    CompspecError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- RegistryError        (exit 7)
    +-- InterpolationError   (exit 8)
    +-- TopicCollisionError  (exit 9)
    +-- MalformedAliasError  (exit 9)
    +-- ConfigError          (exit 1)
"""

from __future__ import annotations

from compspec.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INTERPOLATION_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_REGISTRY_ERROR,
    EXIT_TREE_ERROR,
)


class CompspecError(Exception):
    """Base exception for all compspec errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`compspec.exit_codes`. The entry point catches
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


class InvalidUsageError(CompspecError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class RegistryError(CompspecError):
    """Raised when the command registry cannot be read, parsed, or imported."""

    exit_code = EXIT_REGISTRY_ERROR


class InterpolationError(CompspecError):
    """Raised when a summary template references an invalid expression or missing field.

    Args:
        message: Description of the template failure.
        source: The command id, alias, or topic name whose text failed, so the
            offending registry entry can be located.
    """

    exit_code = EXIT_INTERPOLATION_ERROR

    def __init__(self, message: str, source: str | None = None):
        if source:
            message = f"{source}: {message}"
        super().__init__(message)
        self.source = source


class TopicCollisionError(CompspecError):
    """Raised when two declared topics share a name but disagree on content."""

    exit_code = EXIT_TREE_ERROR


class MalformedAliasError(CompspecError):
    """Raised for ids with empty segments when strict alias checking is enabled."""

    exit_code = EXIT_TREE_ERROR


class ConfigError(CompspecError):
    """Raised for configuration problems (invalid JSON, unknown settings values)."""

    exit_code = EXIT_GENERIC_FAILURE
