"""Completion spec generator -- turn a command registry into a spec tree.

This sub-package is the core of compspec: it takes a
:class:`~compspec.models.Registry` (produced by
:mod:`compspec.registry`) and builds the completion tree consumed by the
shell-completion engine.

Typical usage::

    from compspec.generator import build_spec_tree, render_spec

    tree = build_spec_tree(registry.bin, registry)
    print(render_spec(tree, "yaml"))

Sub-modules:

* :mod:`~compspec.generator.sanitizer` -- Interpolate, escape, and truncate
  summaries to one safe line.
* :mod:`~compspec.generator.flag_mapper` -- Map flags to ``--name`` keyed
  descriptions.
* :mod:`~compspec.generator.topics` -- Filter declared topics and synthesize
  missing ancestors of command ids and aliases.
* :mod:`~compspec.generator.command_tree` -- Build completion records and
  the flat or nested spec tree.
* :mod:`~compspec.generator.serializer` -- Render the tree to YAML or JSON.
"""

from compspec.generator.command_tree import (
    build_commands,
    build_spec_tree,
    build_topics,
    generate,
)
from compspec.generator.flag_mapper import map_flags
from compspec.generator.sanitizer import sanitize
from compspec.generator.serializer import render_spec, to_document, write_spec
from compspec.generator.topics import synthesize_topics

__all__ = [
    "build_commands",
    "build_spec_tree",
    "build_topics",
    "generate",
    "map_flags",
    "render_spec",
    "sanitize",
    "synthesize_topics",
    "to_document",
    "write_spec",
]
