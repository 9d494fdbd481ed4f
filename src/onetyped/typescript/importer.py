"""Type handle → schema node conversion.

The walk is a closed dispatcher over the engine's type flags. Rules are
tried in a fixed order and the first match wins, since one type can look
like several kinds at once:

1. literal singleton (string, number, ``true``/``false``)
2. primitive (string, number, boolean, void, undefined)
3. call signature → function
4. tuple, then array
5. union / intersection
6. record (a lone index signature)
7. object shape
8. anything else → ``UnsupportedTypeError``

Recursion is checked before descending into a structured type.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Generic, TypeVar

from onetyped.errors import UnsupportedTypeError
from onetyped.nodes import (
    ArrayNode,
    BooleanNode,
    FunctionNode,
    IntersectionNode,
    LiteralNode,
    NumberNode,
    ObjectNode,
    PrimitiveNode,
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
from onetyped.tracker import RecursionTracker
from onetyped.typescript.protocol import Signature, TypeChecker, TypeFlags

logger = logging.getLogger(__name__)

H = TypeVar("H")

_PRIMITIVES: tuple[tuple[TypeFlags, type[PrimitiveNode]], ...] = (
    (TypeFlags.STRING, StringNode),
    (TypeFlags.NUMBER, NumberNode),
    (TypeFlags.BOOLEAN, BooleanNode),
    (TypeFlags.VOID, VoidNode),
    (TypeFlags.UNDEFINED, UndefinedNode),
)


class SignaturePolicy(StrEnum):
    """How a function type with several call signatures is imported."""

    FIRST = "first"
    """The first declared signature wins."""

    STRICT = "strict"
    """Overloaded function types are rejected."""


@dataclass(frozen=True)
class ImportOptions:
    """Importer configuration.

    Attributes:
        signature_policy: Tie-break for function types with several signatures
        reference_prefix: Prefix of names generated for anonymous recursive types

    """

    signature_policy: SignaturePolicy = SignaturePolicy.FIRST
    reference_prefix: str = "Ref"


class TypeImporter(Generic[H]):
    """Synchronous walk from an engine type handle to a schema node.

    One importer converts one top-level type; its recursion tracker is never
    shared with another conversion.
    """

    def __init__(
        self,
        checker: TypeChecker[H],
        location: object | None = None,
        options: ImportOptions | None = None,
    ) -> None:
        self.checker = checker
        self.location = location
        self.options = options if options is not None else ImportOptions()
        self._tracker: RecursionTracker[Hashable] = RecursionTracker()

    def convert(self, type_: H) -> SchemaNode:
        """Import ``type_`` and everything reachable from it.

        Raises:
            UnsupportedTypeError: If some reachable type has no mapping rule
            RecursionIntegrityError: If a back-reference was left dangling

        """
        self._tracker = RecursionTracker(prefix=self.options.reference_prefix)
        with self._tracker:
            return self._import(type_)

    def _import(self, type_: H) -> SchemaNode:
        flags = self.checker.type_flags(type_)

        if flags & TypeFlags.LITERAL:
            return LiteralNode(self.checker.literal_value(type_))
        for flag, node_cls in _PRIMITIVES:
            if flags & flag:
                return node_cls()

        key = self.checker.type_id(type_)
        if self._tracker.is_active(key):
            return ReferenceNode(self._tracker.back_reference(key))

        self._tracker.enter(key, self.checker.alias_name(type_))
        try:
            node = self._import_structured(type_, flags)
        finally:
            identity = self._tracker.leave(key)
        if identity is not None:
            node = replace(node, identity=identity)
        return node

    def _import_structured(self, type_: H, flags: TypeFlags) -> SchemaNode:
        checker = self.checker

        if signatures := checker.call_signatures(type_):
            return self._function(type_, signatures)

        if (elements := checker.tuple_elements(type_)) is not None:
            return TupleNode(
                tuple(self._import_member(e.type, e.optional) for e in elements),
            )
        if (element := checker.array_element(type_)) is not None:
            return ArrayNode(self._import(element))

        if flags & (TypeFlags.UNION | TypeFlags.INTERSECTION):
            members = tuple(self._import(t) for t in checker.constituents(type_))
            if not members:
                raise UnsupportedTypeError(self._describe(type_), "no constituents")
            if len(members) == 1:
                return members[0]
            if flags & TypeFlags.UNION:
                return UnionNode(members)
            return IntersectionNode(members)

        if flags & TypeFlags.OBJECT:
            properties = checker.properties(type_, self.location)
            indexes = checker.index_signatures(type_)
            if len(indexes) == 1 and not properties:
                (index,) = indexes
                logger.debug("Inferred record from index signature")
                return RecordNode(
                    self._import(index.key_type),
                    self._import(index.value_type),
                )
            if indexes:
                raise UnsupportedTypeError(
                    self._describe(type_),
                    "index signatures combined with properties",
                )
            return ObjectNode(
                {p.name: self._import_member(p.type, p.optional) for p in properties},
            )

        raise UnsupportedTypeError(self._describe(type_))

    def _import_member(self, type_: H, optional: bool) -> SchemaNode:
        node = self._import(type_)
        return encode_optional(node) if optional else node

    def _function(
        self,
        type_: H,
        signatures: Sequence[Signature[H]],
    ) -> FunctionNode:
        if len(signatures) > 1:
            if self.options.signature_policy is SignaturePolicy.STRICT:
                raise UnsupportedTypeError(
                    self._describe(type_),
                    f"{len(signatures)} call signatures",
                )
            logger.debug(
                "Using first of %d call signatures for %s",
                len(signatures),
                self._describe(type_),
            )
        signature = signatures[0]
        return FunctionNode(
            tuple(self._import_member(p.type, p.optional) for p in signature.parameters),
            self._import(signature.return_type),
        )

    def _describe(self, type_: H) -> str:
        return self.checker.type_to_string(type_, self.location)


async def from_type(
    type_: H,
    location: object,
    checker: TypeChecker[H],
    *,
    options: ImportOptions | None = None,
) -> SchemaNode:
    """Convert a resolved type handle into a schema node.

    The walk itself is synchronous; the coroutine boundary sits only at this
    entry point. Each call builds its own importer and recursion tracker, so
    concurrent calls never observe each other.

    Args:
        type_: Type handle reported by the engine
        location: Originating source file used by the engine for lookups
        checker: Query interface onto the engine
        options: Importer configuration

    Returns:
        A complete schema tree

    Raises:
        UnsupportedTypeError: If a reachable type has no mapping rule
        RecursionIntegrityError: If a back-reference was left dangling

    """
    return TypeImporter(checker, location, options).convert(type_)
