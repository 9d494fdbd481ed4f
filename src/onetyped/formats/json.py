"""JSON documents in the ``typeName``-keyed IR layout."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from onetyped.codecs import from_builtins, to_builtins

if TYPE_CHECKING:
    from onetyped.nodes import SchemaNode


def to_json(node: SchemaNode, *, indent: int | None = 2) -> str:
    """Write a schema tree as an IR document.

    Default fields (``optional``, ``description``, ``identity``) only appear
    where they are set, so two structurally equal trees produce the same
    document.

    Args:
        node: Root of the schema tree
        indent: Indentation width; None writes a single line

    """
    return json.dumps(to_builtins(node), indent=indent)


def from_json(document: str) -> SchemaNode:
    """Read a schema tree back from an IR document.

    Raises:
        ValueError: If the document is not a schema node object, or a node
            payload has the wrong layout
        KeyError: If a node lacks ``typeName`` or a required payload field

    """
    data = json.loads(document)
    if not isinstance(data, dict):
        msg = (
            "IR document must hold a schema node object at its root, "
            f"got {type(data).__name__}"
        )
        raise ValueError(msg)
    return from_builtins(data)
