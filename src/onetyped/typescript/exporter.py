"""Schema node → type-syntax node conversion."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import TypeVar

from onetyped.nodes import (
    ArrayNode,
    BooleanNode,
    FunctionNode,
    IntersectionNode,
    LiteralNode,
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
from onetyped.optionality import decode_optional, encode_optional, is_optional_pattern
from onetyped.tracker import IdentityScope
from onetyped.typescript.syntax import (
    ArrayTypeNode,
    FunctionTypeNode,
    IntersectionTypeNode,
    Keyword,
    KeywordTypeNode,
    LiteralTypeNode,
    OptionalTypeNode,
    ParameterDeclaration,
    PropertySignature,
    SyntaxNode,
    TupleTypeNode,
    TypeAliasDeclaration,
    TypeLiteralNode,
    TypeNode,
    TypeReferenceNode,
    UnionTypeNode,
)

T = TypeVar("T", bound=SyntaxNode)

logger = logging.getLogger(__name__)

_KEYWORDS: dict[type[SchemaNode], Keyword] = {
    StringNode: Keyword.STRING,
    NumberNode: Keyword.NUMBER,
    BooleanNode: Keyword.BOOLEAN,
    VoidNode: Keyword.VOID,
    UndefinedNode: Keyword.UNDEFINED,
}


@dataclass(frozen=True)
class ExportOptions:
    """Exporter configuration.

    Attributes:
        parameter_prefix: Prefix of synthesized parameter names (arg0, arg1, ...)
        record_name: Generic type used to render record nodes

    """

    parameter_prefix: str = "arg"
    record_name: str = "Record"


@dataclass
class TypeExporter:
    """Walk a schema tree and build the equivalent type-syntax tree.

    The input tree is never mutated. Nodes carrying an ``identity`` establish
    a name that nested ``ReferenceNode`` instances render as a type
    reference; the referenced structure is never expanded again.

    When ``hoist`` is set, nested identity targets are emitted as separate
    alias declarations (collected in ``hoisted``) and replaced in place by a
    reference.
    """

    options: ExportOptions = field(default_factory=ExportOptions)
    hoist: bool = False
    hoisted: dict[str, TypeAliasDeclaration] = field(default_factory=dict)
    _scope: IdentityScope = field(default_factory=IdentityScope, repr=False)
    _renames: dict[str, str] = field(default_factory=dict, repr=False)
    _hoisting: set[str] = field(default_factory=set, repr=False)

    def convert(self, node: SchemaNode) -> TypeNode:
        """Export a whole tree in a fresh identity scope."""
        with IdentityScope() as scope:
            self._scope = scope
            return self._export(node, root=True)

    def _export(self, node: SchemaNode, *, root: bool = False) -> TypeNode:
        if node.optional:
            # Outside a property or trailing position the flag has no syntax
            # of its own, so it becomes the explicit union.
            node = replace(
                encode_optional(replace(node, optional=False, identity=None)),
                identity=node.identity,
            )
        identity = node.identity
        if identity is None:
            return self._dispatch(node)

        if self.hoist and not root:
            name = self._renames.get(identity, identity)
            if name not in self.hoisted and name not in self._hoisting:
                logger.debug("Hoisting recursive target %s", name)
                self._hoisting.add(name)
                body = self._within(identity, node)
                self.hoisted[name] = TypeAliasDeclaration(name, body)
            return TypeReferenceNode(name)

        return self._within(identity, node)

    def _within(self, identity: str, node: SchemaNode) -> TypeNode:
        self._scope.push(identity)
        try:
            return self._dispatch(node)
        finally:
            self._scope.pop()

    def _dispatch(self, node: SchemaNode) -> TypeNode:
        if (keyword := _KEYWORDS.get(type(node))) is not None:
            return KeywordTypeNode(keyword)

        match node:
            case LiteralNode(value=value):
                return LiteralTypeNode(value)
            case ObjectNode(shape=shape):
                return TypeLiteralNode(
                    tuple(self._property(name, child) for name, child in shape.items()),
                )
            case ArrayNode(element=element):
                return ArrayTypeNode(self._export(element))
            case TupleNode(types=types):
                return TupleTypeNode(self._optional_tail(types, self._element))
            case UnionNode(types=types):
                return UnionTypeNode(tuple(self._export(member) for member in types))
            case IntersectionNode(types=types):
                return IntersectionTypeNode(
                    tuple(self._export(member) for member in types),
                )
            case RecordNode(key=key, value=value):
                return TypeReferenceNode(
                    self.options.record_name,
                    (self._export(key), self._export(value)),
                )
            case FunctionNode(arguments=arguments, returns=returns):
                return FunctionTypeNode(
                    self._optional_tail(arguments, self._parameter),
                    self._export(returns),
                )
            case ReferenceNode(name=name):
                resolved = self._scope.resolve(name)
                return TypeReferenceNode(self._renames.get(resolved, resolved))
            case _:
                msg = f"Cannot export schema node of type {type(node).__name__}"
                raise TypeError(msg)

    def _property(self, name: str, child: SchemaNode) -> PropertySignature:
        inner, optional = decode_optional(child)
        return PropertySignature(name, self._export(inner), optional=optional)

    def _optional_tail(
        self,
        nodes: Sequence[SchemaNode],
        build: Callable[[int, TypeNode, bool], T],
    ) -> tuple[T, ...]:
        """Build positional items; only the trailing optional run is marked optional.

        A required position may not follow an optional one, so optional
        patterns before the last required position keep their union form.
        """
        decoded = [decode_optional(node) for node in nodes]
        last_required = max(
            (index for index, (_, optional) in enumerate(decoded) if not optional),
            default=-1,
        )
        items: list[T] = []
        pairs = zip(nodes, decoded, strict=True)
        for index, (node, (inner, optional)) in enumerate(pairs):
            if optional and index > last_required:
                items.append(build(index, self._export(inner), True))
            elif optional and not is_optional_pattern(node):
                items.append(build(index, self._export(encode_optional(inner)), False))
            else:
                items.append(build(index, self._export(node), False))
        return tuple(items)

    def _element(self, _index: int, type_: TypeNode, optional: bool) -> SyntaxNode:
        return OptionalTypeNode(type_) if optional else type_

    def _parameter(
        self,
        index: int,
        type_: TypeNode,
        optional: bool,
    ) -> ParameterDeclaration:
        name = f"{self.options.parameter_prefix}{index}"
        return ParameterDeclaration(name, type_, optional=optional)

    def declarations(
        self,
        node: SchemaNode,
        name: str | None = None,
    ) -> tuple[TypeAliasDeclaration, ...]:
        """Export a tree as alias declarations, root first.

        Args:
            node: The root schema node
            name: Alias name for the root; defaults to the root's identity

        Raises:
            ValueError: If no name is given and the root has no identity

        """
        root_name = name if name is not None else node.identity
        if root_name is None:
            msg = "A declaration name is required when the root node has no identity"
            raise ValueError(msg)

        self.hoist = True
        self.hoisted = {}
        self._hoisting = set()
        self._renames = {}
        if node.identity is not None:
            self._renames[node.identity] = root_name
        root = TypeAliasDeclaration(root_name, self.convert(node))
        return (root, *self.hoisted.values())


def to_type_node(node: SchemaNode, *, options: ExportOptions | None = None) -> TypeNode:
    """Convert a schema node into a type-syntax node.

    Args:
        node: The schema tree to export
        options: Exporter configuration

    Returns:
        A structural syntax tree suitable for ``print_node``

    Raises:
        RecursionIntegrityError: If a reference names no enclosing identity

    """
    exporter = TypeExporter(options if options is not None else ExportOptions())
    return exporter.convert(node)


def to_declarations(
    node: SchemaNode,
    name: str | None = None,
    *,
    options: ExportOptions | None = None,
) -> tuple[TypeAliasDeclaration, ...]:
    """Convert a schema node into self-contained alias declarations.

    Nested recursion targets are hoisted into their own aliases so the
    printed declarations parse back into the same type graph.
    """
    exporter = TypeExporter(options if options is not None else ExportOptions())
    return exporter.declarations(node, name)
