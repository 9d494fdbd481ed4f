"""Query interface onto a type-checking engine.

The importer only talks to the engine through ``TypeChecker``. ``H`` is the
engine's opaque type handle; the importer never inspects it directly.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from enum import IntFlag
from typing import Generic, Protocol, TypeVar

from onetyped.nodes import LiteralValue

H = TypeVar("H")


class TypeFlags(IntFlag):
    """Classification flags reported for a type handle."""

    NONE = 0
    ANY = 1 << 0
    UNKNOWN = 1 << 1
    NEVER = 1 << 2
    STRING = 1 << 3
    NUMBER = 1 << 4
    BOOLEAN = 1 << 5
    STRING_LITERAL = 1 << 6
    NUMBER_LITERAL = 1 << 7
    BOOLEAN_LITERAL = 1 << 8
    VOID = 1 << 9
    UNDEFINED = 1 << 10
    NULL = 1 << 11
    OBJECT = 1 << 12
    UNION = 1 << 13
    INTERSECTION = 1 << 14

    LITERAL = STRING_LITERAL | NUMBER_LITERAL | BOOLEAN_LITERAL
    PRIMITIVE = STRING | NUMBER | BOOLEAN | VOID | UNDEFINED


@dataclass(frozen=True)
class Property(Generic[H]):
    """Own property of an object type with its resolved type."""

    name: str
    type: H
    optional: bool = False


@dataclass(frozen=True)
class Parameter(Generic[H]):
    """Call signature parameter."""

    name: str
    type: H
    optional: bool = False


@dataclass(frozen=True)
class Signature(Generic[H]):
    """Call signature: parameters in declared order and the return type."""

    parameters: tuple[Parameter[H], ...]
    return_type: H


@dataclass(frozen=True)
class IndexSignature(Generic[H]):
    """Index signature: [key: K]: V."""

    key_type: H
    value_type: H


@dataclass(frozen=True)
class TupleElement(Generic[H]):
    """Tuple position with its element type."""

    type: H
    optional: bool = False


class TypeChecker(Protocol[H]):
    """Capabilities the importer needs from the engine.

    ``location`` is the originating program context (a source file) that
    the engine may use to resolve names and print types.
    """

    def type_id(self, type_: H) -> Hashable:
        """Stable identity usable as a recursion key."""
        ...

    def type_flags(self, type_: H) -> TypeFlags:
        """Classification flags of the type."""
        ...

    def type_to_string(self, type_: H, location: object | None = None) -> str:
        """Textual representation used in error messages."""
        ...

    def literal_value(self, type_: H) -> LiteralValue:
        """Value of a literal type."""
        ...

    def constituents(self, type_: H) -> Sequence[H]:
        """Members of a union or intersection in reported order."""
        ...

    def properties(
        self,
        type_: H,
        location: object | None = None,
    ) -> Sequence[Property[H]]:
        """Own enumerable properties in declaration order."""
        ...

    def call_signatures(self, type_: H) -> Sequence[Signature[H]]:
        """Call signatures in declaration order."""
        ...

    def index_signatures(self, type_: H) -> Sequence[IndexSignature[H]]:
        """Index signatures of an object type."""
        ...

    def tuple_elements(self, type_: H) -> Sequence[TupleElement[H]] | None:
        """Element types of a tuple, or None when the type is not a tuple."""
        ...

    def array_element(self, type_: H) -> H | None:
        """Element type of an array, or None when the type is not an array."""
        ...

    def alias_name(self, type_: H) -> str | None:
        """Name of the declaration the type was reached through, if any."""
        ...
