"""Reference type-checking engine for parsed declarations.

``DeclarationChecker`` resolves syntax nodes into interned type handles and
answers the ``TypeChecker`` protocol queries the importer relies on. Object
members are resolved lazily, so a declaration may refer to itself through a
property, tuple element, array element or signature.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from itertools import count
from typing import TypeAlias

from onetyped.errors import TypeResolutionError
from onetyped.nodes import LiteralValue
from onetyped.typescript.parser import create_source_file
from onetyped.typescript.printer import print_node
from onetyped.typescript.protocol import (
    IndexSignature,
    Parameter,
    Property,
    Signature,
    TupleElement,
    TypeFlags,
)
from onetyped.typescript.syntax import (
    ArrayTypeNode,
    FunctionTypeNode,
    IndexSignature as IndexSignatureNode,
    InterfaceDeclaration,
    IntersectionTypeNode,
    Keyword,
    KeywordTypeNode,
    LiteralTypeNode,
    OptionalTypeNode,
    PropertySignature,
    SourceFile,
    SyntaxNode,
    TupleTypeNode,
    TypeAliasDeclaration,
    TypeLiteralNode,
    TypeReferenceNode,
    UnionTypeNode,
)

logger = logging.getLogger(__name__)

Declaration: TypeAlias = TypeAliasDeclaration | InterfaceDeclaration

_KEYWORD_FLAGS: dict[Keyword, TypeFlags] = {
    Keyword.STRING: TypeFlags.STRING,
    Keyword.NUMBER: TypeFlags.NUMBER,
    Keyword.BOOLEAN: TypeFlags.BOOLEAN,
    Keyword.VOID: TypeFlags.VOID,
    Keyword.UNDEFINED: TypeFlags.UNDEFINED,
    Keyword.NULL: TypeFlags.NULL,
    Keyword.ANY: TypeFlags.ANY,
    Keyword.UNKNOWN: TypeFlags.UNKNOWN,
    Keyword.NEVER: TypeFlags.NEVER,
}

# Flags of types that may carry the name of the declaration they came from.
_ALIASABLE = TypeFlags.OBJECT | TypeFlags.UNION | TypeFlags.INTERSECTION


@dataclass
class _Structure:
    """Resolved members of an object type."""

    properties: tuple[Property[ResolvedType], ...] = ()
    call_signatures: tuple[Signature[ResolvedType], ...] = ()
    index_signatures: tuple[IndexSignature[ResolvedType], ...] = ()
    tuple_elements: tuple[TupleElement[ResolvedType], ...] | None = None
    array_element: ResolvedType | None = None


@dataclass(eq=False)
class ResolvedType:
    """Type handle produced by ``DeclarationChecker``.

    Handles compare by identity; ``id`` is unique within one checker.
    """

    id: int
    flags: TypeFlags
    source: SyntaxNode
    value: LiteralValue | None = None
    types: tuple[ResolvedType, ...] = ()
    alias_name: str | None = None
    structure: _Structure | None = field(default=None, repr=False)

    def __repr__(self) -> str:
        return f"ResolvedType(id={self.id}, flags={self.flags!r})"


class DeclarationChecker:
    """Resolve declarations of a ``Program`` into type handles."""

    def __init__(self, program: Program) -> None:
        self._program = program
        self._ids = count(1)
        self._by_node: dict[int, ResolvedType] = {}
        self._literals: dict[tuple[type, LiteralValue], ResolvedType] = {}
        self._declared: dict[str, ResolvedType] = {}
        self._resolving: set[str] = set()
        self._intrinsics = {
            keyword: self._new(flags, KeywordTypeNode(keyword))
            for keyword, flags in _KEYWORD_FLAGS.items()
        }

    def _new(
        self,
        flags: TypeFlags,
        source: SyntaxNode,
        **kwargs: object,
    ) -> ResolvedType:
        return ResolvedType(next(self._ids), flags, source, **kwargs)  # type: ignore[arg-type]

    # Entry points

    def get_type_at_location(self, declaration: Declaration) -> ResolvedType:
        """Resolve the type declared by a statement of the program."""
        return self.get_declared_type(declaration.name)

    def get_declared_type(self, name: str) -> ResolvedType:
        """Resolve a declared type alias or interface by name.

        Raises:
            TypeResolutionError: If the name is undeclared or the alias is circular

        """
        if (resolved := self._declared.get(name)) is not None:
            return resolved
        declaration = self._program.declarations.get(name)
        if declaration is None:
            msg = f"Cannot find name '{name}'"
            raise TypeResolutionError(msg)
        if name in self._resolving:
            msg = f"Type alias '{name}' circularly references itself"
            raise TypeResolutionError(msg)

        self._resolving.add(name)
        try:
            if isinstance(declaration, InterfaceDeclaration):
                members = TypeLiteralNode(declaration.members)
                resolved = self._new(TypeFlags.OBJECT, members)
            else:
                resolved = self.get_type_from_type_node(declaration.type)
        finally:
            self._resolving.discard(name)

        if resolved.alias_name is None and resolved.flags & _ALIASABLE:
            resolved.alias_name = name
        self._declared[name] = resolved
        logger.debug("Declared %s resolved to type %d", name, resolved.id)
        return resolved

    def get_type_from_type_node(self, node: SyntaxNode) -> ResolvedType:
        """Resolve a type-syntax node; the same node always yields the same handle."""
        if (cached := self._by_node.get(id(node))) is not None:
            return cached
        resolved = self._resolve(node)
        self._by_node[id(node)] = resolved
        return resolved

    def _resolve(self, node: SyntaxNode) -> ResolvedType:  # noqa: PLR0911
        match node:
            case KeywordTypeNode(keyword=keyword):
                return self._intrinsics[keyword]
            case LiteralTypeNode(value=value):
                return self._literal(value, node)
            case TypeReferenceNode():
                return self._reference(node)
            case UnionTypeNode(types=types):
                return self._composite(TypeFlags.UNION, node, types)
            case IntersectionTypeNode(types=types):
                return self._composite(TypeFlags.INTERSECTION, node, types)
            case TypeLiteralNode() | FunctionTypeNode() | TupleTypeNode() | ArrayTypeNode():
                return self._new(TypeFlags.OBJECT, node)
            case OptionalTypeNode():
                msg = "Optional type is only allowed as a tuple element"
                raise TypeResolutionError(msg)
            case _:
                msg = f"Cannot resolve syntax node of kind {node.kind}"
                raise TypeResolutionError(msg)

    def _literal(self, value: LiteralValue, node: SyntaxNode) -> ResolvedType:
        key = (type(value), value)
        if (interned := self._literals.get(key)) is None:
            if isinstance(value, bool):
                flags = TypeFlags.BOOLEAN_LITERAL
            elif isinstance(value, str):
                flags = TypeFlags.STRING_LITERAL
            else:
                flags = TypeFlags.NUMBER_LITERAL
            interned = self._new(flags, node, value=value)
            self._literals[key] = interned
        return interned

    def _reference(self, node: TypeReferenceNode) -> ResolvedType:
        arguments = node.type_arguments
        if node.name == "Record" and node.name not in self._program.declarations:
            if len(arguments) != 2:  # noqa: PLR2004
                msg = f"Generic type 'Record' requires 2 type arguments, got {len(arguments)}"
                raise TypeResolutionError(msg)
            key, value = arguments
            members = (IndexSignatureNode("key", key, value),)
            return self._new(TypeFlags.OBJECT, TypeLiteralNode(members))
        if node.name == "Array" and node.name not in self._program.declarations:
            if len(arguments) != 1:
                msg = f"Generic type 'Array' requires 1 type argument, got {len(arguments)}"
                raise TypeResolutionError(msg)
            return self._new(TypeFlags.OBJECT, ArrayTypeNode(arguments[0]))
        if arguments:
            msg = f"Type '{node.name}' is not generic"
            raise TypeResolutionError(msg)
        return self.get_declared_type(node.name)

    def _composite(
        self,
        flags: TypeFlags,
        node: SyntaxNode,
        members: Sequence[SyntaxNode],
    ) -> ResolvedType:
        """Build a union or intersection; nested ones of the same kind are flattened."""
        constituents: list[ResolvedType] = []
        for member in members:
            resolved = self.get_type_from_type_node(member)
            nested = resolved.types if resolved.flags & flags else (resolved,)
            constituents.extend(t for t in nested if t not in constituents)
        if len(constituents) == 1:
            return constituents[0]
        return self._new(flags, node, types=tuple(constituents))

    def _structure(self, type_: ResolvedType) -> _Structure:
        if type_.structure is None:
            type_.structure = self._build_structure(type_.source)
        return type_.structure

    def _build_structure(self, node: SyntaxNode) -> _Structure:
        resolve = self.get_type_from_type_node
        match node:
            case TypeLiteralNode(members=members):
                properties: list[Property[ResolvedType]] = []
                indexes: list[IndexSignature[ResolvedType]] = []
                for member in members:
                    if isinstance(member, PropertySignature):
                        if any(p.name == member.name for p in properties):
                            msg = f"Duplicate identifier '{member.name}'"
                            raise TypeResolutionError(msg)
                        properties.append(
                            Property(member.name, resolve(member.type), member.optional),
                        )
                    else:
                        indexes.append(
                            IndexSignature(resolve(member.key_type), resolve(member.type)),
                        )
                return _Structure(
                    properties=tuple(properties),
                    index_signatures=tuple(indexes),
                )
            case FunctionTypeNode(parameters=parameters, return_type=return_type):
                signature = Signature(
                    tuple(
                        Parameter(p.name, resolve(p.type), p.optional) for p in parameters
                    ),
                    resolve(return_type),
                )
                return _Structure(call_signatures=(signature,))
            case TupleTypeNode(elements=elements):
                return _Structure(
                    tuple_elements=tuple(
                        TupleElement(resolve(e.type), optional=True)
                        if isinstance(e, OptionalTypeNode)
                        else TupleElement(resolve(e))
                        for e in elements
                    ),
                )
            case ArrayTypeNode(element_type=element):
                return _Structure(array_element=resolve(element))
            case _:
                return _Structure()

    # TypeChecker protocol

    def type_id(self, type_: ResolvedType) -> int:
        """Identity of the handle, stable for the checker's lifetime."""
        return type_.id

    def type_flags(self, type_: ResolvedType) -> TypeFlags:
        """Classification flags of the handle."""
        return type_.flags

    def type_to_string(
        self,
        type_: ResolvedType,
        location: object | None = None,  # noqa: ARG002
    ) -> str:
        """Alias name when the type has one, otherwise its printed syntax."""
        if type_.alias_name is not None:
            return type_.alias_name
        return print_node(type_.source)

    def literal_value(self, type_: ResolvedType) -> LiteralValue:
        """Value of a literal type."""
        if not type_.flags & TypeFlags.LITERAL or type_.value is None:
            msg = f"Type '{self.type_to_string(type_)}' is not a literal type"
            raise TypeError(msg)
        return type_.value

    def constituents(self, type_: ResolvedType) -> Sequence[ResolvedType]:
        """Members of a union or intersection."""
        return type_.types

    def properties(
        self,
        type_: ResolvedType,
        location: object | None = None,  # noqa: ARG002
    ) -> Sequence[Property[ResolvedType]]:
        """Own properties of an object type, in declaration order."""
        if not type_.flags & TypeFlags.OBJECT:
            return ()
        return self._structure(type_).properties

    def call_signatures(self, type_: ResolvedType) -> Sequence[Signature[ResolvedType]]:
        """Call signatures of a function type."""
        if not type_.flags & TypeFlags.OBJECT:
            return ()
        return self._structure(type_).call_signatures

    def index_signatures(
        self,
        type_: ResolvedType,
    ) -> Sequence[IndexSignature[ResolvedType]]:
        """Index signatures of an object type."""
        if not type_.flags & TypeFlags.OBJECT:
            return ()
        return self._structure(type_).index_signatures

    def tuple_elements(
        self,
        type_: ResolvedType,
    ) -> Sequence[TupleElement[ResolvedType]] | None:
        """Elements of a tuple type, or None for any other type."""
        if not type_.flags & TypeFlags.OBJECT:
            return None
        return self._structure(type_).tuple_elements

    def array_element(self, type_: ResolvedType) -> ResolvedType | None:
        """Element of an array type, or None for any other type."""
        if not type_.flags & TypeFlags.OBJECT:
            return None
        return self._structure(type_).array_element

    def alias_name(self, type_: ResolvedType) -> str | None:
        """Name of the declaration the type was first reached through."""
        return type_.alias_name


class Program:
    """A set of parsed source files sharing one declaration namespace."""

    def __init__(self, source_files: Iterable[SourceFile]) -> None:
        self.source_files = tuple(source_files)
        declarations: dict[str, Declaration] = {}
        for source_file in self.source_files:
            for statement in source_file.statements:
                if statement.name in declarations:
                    msg = f"Duplicate identifier '{statement.name}'"
                    raise TypeResolutionError(msg)
                declarations[statement.name] = statement
        self.declarations = declarations

    @classmethod
    def from_source(cls, text: str, file_name: str = "input.ts") -> Program:
        """Parse ``text`` and build a single-file program."""
        return cls([create_source_file(file_name, text)])

    def get_source_file(self, file_name: str) -> SourceFile:
        """Find a source file by name.

        Raises:
            KeyError: If the program holds no such file

        """
        for source_file in self.source_files:
            if source_file.file_name == file_name:
                return source_file
        msg = f"Source file '{file_name}' not found in program"
        raise KeyError(msg)

    @cached_property
    def type_checker(self) -> DeclarationChecker:
        """Checker bound to this program, created on first access."""
        return DeclarationChecker(self)

    def get_type_checker(self) -> DeclarationChecker:
        """Return the checker bound to this program."""
        return self.type_checker
