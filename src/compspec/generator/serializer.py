"""Render a :class:`~compspec.models.SpecNode` tree to YAML or JSON.

The serializer is the boundary to the completion engine. It converts the
frozen tree into plain mappings and sequences with a fixed key order
(``name``, ``description``, ``aliases``, ``hidden``, ``flags``,
``persistentFlags``, ``commands``) and hands them to PyYAML or ``json``.

Absent fields are omitted rather than rendered as ``null``, and empty flag
mappings and command lists are treated as absent: a command with no flags has
no ``flags`` key at all.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from compspec.models import SpecFormat, SpecNode

_FIELD_ORDER: tuple[tuple[str, str], ...] = (
    ("name", "name"),
    ("description", "description"),
    ("aliases", "aliases"),
    ("hidden", "hidden"),
    ("flags", "flags"),
    ("persistent_flags", "persistentFlags"),
    ("commands", "commands"),
)

# Dropped when empty, not just when None.
_OMIT_WHEN_EMPTY = {"flags", "persistentFlags", "commands"}


def to_document(node: SpecNode) -> dict[str, Any]:
    """Convert *node* (recursively) into an ordered plain dict.

    Args:
        node: The node to convert.

    Returns:
        A dict containing only the fields that are present, in wire order.
    """
    doc: dict[str, Any] = {}
    for attr, key in _FIELD_ORDER:
        value = getattr(node, attr)
        if value is None:
            continue
        if key in _OMIT_WHEN_EMPTY and not value:
            continue
        if key == "commands":
            value = [to_document(child) for child in value]
        elif key == "aliases":
            value = list(value)
        elif isinstance(value, dict):
            value = dict(value)
        doc[key] = value
    return doc


def render_spec(node: SpecNode, fmt: SpecFormat | str = SpecFormat.YAML) -> str:
    """Serialize the tree rooted at *node*.

    Args:
        node: Root of the completion tree.
        fmt: ``"yaml"`` (default) or ``"json"``.

    Returns:
        The document text, ending with a newline.

    Raises:
        ValueError: If *fmt* is not a known format.
    """
    fmt = SpecFormat(fmt)
    doc = to_document(node)
    if fmt == SpecFormat.JSON:
        return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(
        doc,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def write_spec(text: str, path: str | Path) -> Path:
    """Write a rendered spec to *path* in a single atomic replace.

    Returns:
        The path written.
    """
    from compspec.config import atomic_write

    target = Path(path)
    atomic_write(target, text)
    return target
