"""Optional-union pattern shared by the importer and the exporter.

An optional object property or tuple element is encoded as a two-member
union whose second member is ``undefined``. Both conversion directions go
through this module so that the encoding round-trips.
"""

from __future__ import annotations

from dataclasses import replace

from onetyped.nodes import SchemaNode, UndefinedNode, UnionNode


def is_optional_pattern(node: SchemaNode) -> bool:
    """Check whether a node is exactly ``union(T, undefined)``.

    Member order matters: ``union(undefined, T)`` is an ordinary union.
    """
    if not isinstance(node, UnionNode) or len(node.types) != 2:  # noqa: PLR2004
        return False
    first, second = node.types
    return isinstance(second, UndefinedNode) and not isinstance(first, UndefinedNode)


def encode_optional(node: SchemaNode) -> SchemaNode:
    """Wrap a node into the optional pattern.

    Idempotent: a node already in the pattern is returned unchanged.
    """
    if is_optional_pattern(node):
        return node
    return UnionNode((node, UndefinedNode()))


def decode_optional(node: SchemaNode) -> tuple[SchemaNode, bool]:
    """Split a node into its inner type and an optional marker.

    ``union(T, undefined)`` decodes to ``(T, True)``. A node carrying the
    ``optional`` default flag decodes to itself without the flag.
    Anything else decodes to ``(node, False)``.

    A pattern union that carries an ``identity`` is a recursion target in
    its own right and is never unwrapped, since that would drop the name
    its back-references point at.
    """
    if is_optional_pattern(node) and node.identity is None:
        return node.types[0], True  # type: ignore[attr-defined]
    if node.optional:
        return replace(node, optional=False), True
    return node, False
