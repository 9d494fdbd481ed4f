"""Canonical schema node model.

Each variant is a frozen dataclass registered under its ``type_name``
discriminant. The discriminant alone decides how a node is interpreted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, TypeAlias, dataclass_transform

from onetyped.errors import ConstructionError

LiteralValue: TypeAlias = str | int | float | bool


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True, field_specifiers=(field,))
class SchemaNode:
    """Base for schema nodes.

    The keyword-only fields below form the defaults trait shared by every
    variant: optionality, description metadata and the recursion identity
    that ``ReferenceNode`` instances point at.
    """

    type_name: ClassVar[str]
    registry: ClassVar[dict[str, type[SchemaNode]]] = {}

    optional: bool = field(default=False, kw_only=True)
    description: str | None = field(default=None, kw_only=True)
    identity: str | None = field(default=None, kw_only=True)

    def __init_subclass__(cls, type_name: str | None = None, **kwargs: Any) -> None:
        """Register node subclass under its discriminant.

        Intermediate bases pass no ``type_name`` and stay unregistered.
        """
        super().__init_subclass__(**kwargs)
        dataclass(frozen=True)(cls)
        if type_name is None:
            return
        cls.type_name = type_name

        if (existing := SchemaNode.registry.get(type_name)) and existing is not cls:
            msg = (
                f"Type name '{type_name}' already registered to {existing}. "
                "Choose a different type name."
            )
            raise ValueError(msg)

        SchemaNode.registry[type_name] = cls


def _check_child(owner: str, label: str, child: object) -> None:
    if not isinstance(child, SchemaNode):
        msg = f"{owner} {label} must be a schema node, got {type(child).__name__}"
        raise ConstructionError(msg)


def _check_children(owner: str, label: str, children: tuple[object, ...]) -> None:
    for child in children:
        _check_child(owner, label, child)


class PrimitiveNode(SchemaNode):
    """Base for nodes that carry nothing but their discriminant."""

    @property
    def type(self) -> str:
        """Concrete type tag echoing the discriminant."""
        return self.type_name


class StringNode(PrimitiveNode, type_name="string"):
    """String type."""


class NumberNode(PrimitiveNode, type_name="number"):
    """Number type."""


class BooleanNode(PrimitiveNode, type_name="boolean"):
    """Unnarrowed boolean type."""


class VoidNode(PrimitiveNode, type_name="void"):
    """Void type."""


class UndefinedNode(PrimitiveNode, type_name="undefined"):
    """Undefined type, also the second member of the optional pattern."""


class LiteralNode(SchemaNode, type_name="literal"):
    """Exact literal: 'admin' → LiteralNode(value='admin')."""

    value: LiteralValue

    def __post_init__(self) -> None:
        if not isinstance(self.value, str | int | float | bool):
            msg = (
                "Literal value must be str, int, float or bool, "
                f"got {type(self.value).__name__}"
            )
            raise ConstructionError(msg)

    def _key(self) -> tuple[object, ...]:
        # Python equates True with 1 and 1 with 1.0; literal types do not.
        return (
            type(self.value),
            self.value,
            self.optional,
            self.description,
            self.identity,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LiteralNode):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class ObjectNode(SchemaNode, type_name="object"):
    """Fixed shape: { name: string } → ObjectNode(shape={'name': StringNode()}).

    ``shape`` is copied into a read-only mapping; insertion order is kept.
    """

    shape: Mapping[str, SchemaNode]

    def __post_init__(self) -> None:
        if not isinstance(self.shape, Mapping):
            msg = f"Object shape must be a mapping, got {type(self.shape).__name__}"
            raise ConstructionError(msg)
        for name, child in self.shape.items():
            if not isinstance(name, str):
                msg = f"Object property names must be strings, got {name!r}"
                raise ConstructionError(msg)
            _check_child("Object", f"property '{name}'", child)
        object.__setattr__(self, "shape", MappingProxyType(dict(self.shape)))

    def __hash__(self) -> int:
        return hash(
            (
                self.type_name,
                tuple(self.shape.items()),
                self.optional,
                self.description,
                self.identity,
            ),
        )


class ArrayNode(SchemaNode, type_name="array"):
    """Homogeneous array: string[] → ArrayNode(element=StringNode())."""

    element: SchemaNode

    def __post_init__(self) -> None:
        _check_child("Array", "element", self.element)

    @property
    def types(self) -> tuple[SchemaNode, ...]:
        """Element type as a one-member sequence."""
        return (self.element,)


class TupleNode(SchemaNode, type_name="tuple"):
    """Fixed-length tuple: [string, number] → TupleNode(types=(...))."""

    types: tuple[SchemaNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", tuple(self.types))
        _check_children("Tuple", "element", self.types)


class UnionNode(SchemaNode, type_name="union"):
    """Union: 'admin' | 'user' → UnionNode(types=(...)), order preserved."""

    types: tuple[SchemaNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", tuple(self.types))
        if len(self.types) < 2:  # noqa: PLR2004
            msg = f"Union needs at least two members, got {len(self.types)}"
            raise ConstructionError(msg)
        _check_children("Union", "member", self.types)


class IntersectionNode(SchemaNode, type_name="intersection"):
    """Intersection: A & B → IntersectionNode(types=(A, B))."""

    types: tuple[SchemaNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", tuple(self.types))
        if len(self.types) < 2:  # noqa: PLR2004
            msg = f"Intersection needs at least two members, got {len(self.types)}"
            raise ConstructionError(msg)
        _check_children("Intersection", "member", self.types)


class RecordNode(SchemaNode, type_name="record"):
    """Keyed collection: Record<string, number> → RecordNode(key=..., value=...)."""

    key: SchemaNode
    value: SchemaNode

    def __post_init__(self) -> None:
        _check_child("Record", "key", self.key)
        _check_child("Record", "value", self.value)


class FunctionNode(SchemaNode, type_name="function"):
    """Call signature: (a: number) => string → FunctionNode(arguments=..., returns=...)."""

    arguments: tuple[SchemaNode, ...]
    returns: SchemaNode

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))
        _check_children("Function", "argument", self.arguments)
        _check_child("Function", "return type", self.returns)


class ReferenceNode(SchemaNode, type_name="reference"):
    """Back-reference to the enclosing node whose ``identity`` equals ``name``.

    Non-owning: it stands in for an ancestor to break a recursive cycle.
    """

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            msg = "Reference name must be a non-empty string"
            raise ConstructionError(msg)


def children(node: SchemaNode) -> tuple[SchemaNode, ...]:
    """Return the direct children of a node in declaration order."""
    match node:
        case ObjectNode(shape=shape):
            return tuple(shape.values())
        case ArrayNode(element=element):
            return (element,)
        case TupleNode(types=types) | UnionNode(types=types):
            return types
        case IntersectionNode(types=types):
            return types
        case RecordNode(key=key, value=value):
            return (key, value)
        case FunctionNode(arguments=arguments, returns=returns):
            return (*arguments, returns)
        case _:
            return ()
