"""Map a command's flags to the ``--name: description`` pairs of the spec.

Only the long form is emitted. Shorthand (``char``) and value type stay on
:class:`~compspec.models.FlagMeta` but are not rendered: the completion spec
keys flags by their external ``--name`` spelling, and the host's iteration
order is preserved as-is.
"""

from __future__ import annotations

from typing import Mapping

from compspec.models import FlagMeta


def flag_key(flag: FlagMeta) -> str:
    """Return the external spelling of *flag* (``"json"`` becomes ``"--json"``)."""
    return f"--{flag.name}"


def map_flags(flags: Mapping[str, FlagMeta]) -> dict[str, str]:
    """Convert a command's flag set into an ordered ``--name -> description`` mapping.

    Args:
        flags: The host-supplied flags, keyed by flag name, in host order.

    Returns:
        A new dict in the same order. Missing descriptions become ``""``.
        A command with no flags yields ``{}``; the serializer drops it.

    Example::

        >>> map_flags({"json": FlagMeta(name="json", description="output json")})
        {'--json': 'output json'}
    """
    mapped: dict[str, str] = {}
    for flag in flags.values():
        mapped[flag_key(flag)] = flag.description or ""
    return mapped
