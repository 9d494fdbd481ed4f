"""Builder DSL for hand-authored schemas.

    >>> person = object_({"name": string(), "age": optional(number())})

Every builder accepts the keyword-only defaults ``optional`` and
``description``. Structural mistakes raise ``ConstructionError`` right here,
not later during export.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from onetyped.nodes import (
    ArrayNode,
    BooleanNode,
    FunctionNode,
    IntersectionNode,
    LiteralNode,
    LiteralValue,
    NumberNode,
    ObjectNode,
    RecordNode,
    ReferenceNode,
    SchemaNode,
    StringNode,
    TupleNode,
    UndefinedNode,
    UnionNode,
    VoidNode,
)
from onetyped.optionality import encode_optional


def string(*, optional: bool = False, description: str | None = None) -> StringNode:
    """Build a string node."""
    return StringNode(optional=optional, description=description)


def number(*, optional: bool = False, description: str | None = None) -> NumberNode:
    """Build a number node."""
    return NumberNode(optional=optional, description=description)


def boolean(*, optional: bool = False, description: str | None = None) -> BooleanNode:
    """Build a boolean node."""
    return BooleanNode(optional=optional, description=description)


def void(*, optional: bool = False, description: str | None = None) -> VoidNode:
    """Build a void node."""
    return VoidNode(optional=optional, description=description)


def undefined(
    *,
    optional: bool = False,
    description: str | None = None,
) -> UndefinedNode:
    """Build an undefined node."""
    return UndefinedNode(optional=optional, description=description)


def literal(
    value: LiteralValue,
    *,
    optional: bool = False,
    description: str | None = None,
) -> LiteralNode:
    """Build a literal node holding exactly ``value``."""
    return LiteralNode(value, optional=optional, description=description)


def object_(
    shape: Mapping[str, SchemaNode],
    *,
    optional: bool = False,
    description: str | None = None,
) -> ObjectNode:
    """Build an object node; property order follows ``shape``."""
    return ObjectNode(shape, optional=optional, description=description)


def array(
    element: SchemaNode,
    *,
    optional: bool = False,
    description: str | None = None,
) -> ArrayNode:
    """Build an array node."""
    return ArrayNode(element, optional=optional, description=description)


def tuple_(
    types: Iterable[SchemaNode],
    *,
    optional: bool = False,
    description: str | None = None,
) -> TupleNode:
    """Build a tuple node."""
    return TupleNode(tuple(types), optional=optional, description=description)


def union(
    types: Iterable[SchemaNode],
    *,
    optional: bool = False,
    description: str | None = None,
) -> UnionNode:
    """Build a union node from two or more members."""
    return UnionNode(tuple(types), optional=optional, description=description)


def intersection(
    types: Iterable[SchemaNode],
    *,
    optional: bool = False,
    description: str | None = None,
) -> IntersectionNode:
    """Build an intersection node from two or more members."""
    return IntersectionNode(tuple(types), optional=optional, description=description)


def record(
    key: SchemaNode,
    value: SchemaNode,
    *,
    optional: bool = False,
    description: str | None = None,
) -> RecordNode:
    """Build a record node mapping ``key`` to ``value``."""
    return RecordNode(key, value, optional=optional, description=description)


def function(
    arguments: Iterable[SchemaNode],
    returns: SchemaNode,
    *,
    optional: bool = False,
    description: str | None = None,
) -> FunctionNode:
    """Build a function node."""
    return FunctionNode(
        tuple(arguments),
        returns,
        optional=optional,
        description=description,
    )


def reference(name: str, *, description: str | None = None) -> ReferenceNode:
    """Build a back-reference to the enclosing node with identity ``name``."""
    return ReferenceNode(name, description=description)


def optional(node: SchemaNode) -> SchemaNode:
    """Build the canonical optional pattern ``union(node, undefined)``."""
    return encode_optional(node)
