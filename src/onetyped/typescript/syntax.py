"""Type-syntax nodes: the structural AST a printer renders as source text.

These mirror the type grammar of TypeScript declarations. The exporter
produces them, the parser front-end produces them, ``print_node`` renders
them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar, TypeAlias, dataclass_transform

from onetyped.nodes import LiteralValue


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class SyntaxNode:
    """Base for syntax nodes."""

    kind: ClassVar[str]
    registry: ClassVar[dict[str, type[SyntaxNode]]] = {}

    def __init_subclass__(cls, kind: str | None = None) -> None:
        """Register syntax node subclass with automatic kind derivation."""
        dataclass(frozen=True)(cls)
        cls.kind = kind if kind is not None else cls.__name__

        if (existing := SyntaxNode.registry.get(cls.kind)) and existing is not cls:
            msg = (
                f"Kind '{cls.kind}' already registered to {existing}. "
                "Choose a different kind."
            )
            raise ValueError(msg)

        SyntaxNode.registry[cls.kind] = cls


class Keyword(StrEnum):
    """Keyword types."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    VOID = "void"
    UNDEFINED = "undefined"
    NULL = "null"
    ANY = "any"
    UNKNOWN = "unknown"
    NEVER = "never"


class KeywordTypeNode(SyntaxNode):
    """Keyword type: string → KeywordTypeNode(Keyword.STRING)."""

    keyword: Keyword


class LiteralTypeNode(SyntaxNode):
    """Literal type: 'admin', 42, true."""

    value: LiteralValue


class TypeReferenceNode(SyntaxNode):
    """Named reference, optionally generic: Record<string, number>."""

    name: str
    type_arguments: tuple[SyntaxNode, ...] = ()


class ArrayTypeNode(SyntaxNode):
    """Array type: string[]."""

    element_type: SyntaxNode


class OptionalTypeNode(SyntaxNode):
    """Optional tuple element: the `boolean?` in [string, boolean?]."""

    type: SyntaxNode


class TupleTypeNode(SyntaxNode):
    """Tuple type: [string, number]."""

    elements: tuple[SyntaxNode, ...]


class UnionTypeNode(SyntaxNode):
    """Union type: A | B."""

    types: tuple[SyntaxNode, ...]


class IntersectionTypeNode(SyntaxNode):
    """Intersection type: A & B."""

    types: tuple[SyntaxNode, ...]


class PropertySignature(SyntaxNode):
    """Type literal member: name?: type."""

    name: str
    type: SyntaxNode
    optional: bool = False


class IndexSignature(SyntaxNode):
    """Type literal member: [key: K]: V."""

    parameter_name: str
    key_type: SyntaxNode
    type: SyntaxNode


class TypeLiteralNode(SyntaxNode):
    """Object type literal: { name: string; [key: string]: number }."""

    members: tuple[PropertySignature | IndexSignature, ...]


class ParameterDeclaration(SyntaxNode):
    """Function type parameter: name?: type."""

    name: str
    type: SyntaxNode
    optional: bool = False


class FunctionTypeNode(SyntaxNode):
    """Function type: (a: number, b: string) => string."""

    parameters: tuple[ParameterDeclaration, ...]
    return_type: SyntaxNode


class TypeAliasDeclaration(SyntaxNode):
    """Statement: type Name = type."""

    name: str
    type: SyntaxNode


class InterfaceDeclaration(SyntaxNode):
    """Statement: interface Name { members }."""

    name: str
    members: tuple[PropertySignature | IndexSignature, ...]


class SourceFile(SyntaxNode):
    """Parsed declarations of one file."""

    file_name: str
    statements: tuple[TypeAliasDeclaration | InterfaceDeclaration, ...]

    def find_declaration(
        self,
        name: str,
    ) -> TypeAliasDeclaration | InterfaceDeclaration:
        """Find the statement declaring ``name``.

        Raises:
            KeyError: If no statement declares ``name``

        """
        for statement in self.statements:
            if statement.name == name:
                return statement
        available = [statement.name for statement in self.statements]
        msg = (
            f"Declaration '{name}' not found in {self.file_name}. "
            f"Available: {available}"
        )
        raise KeyError(msg)


TypeNode: TypeAlias = (
    KeywordTypeNode
    | LiteralTypeNode
    | TypeReferenceNode
    | ArrayTypeNode
    | TupleTypeNode
    | UnionTypeNode
    | IntersectionTypeNode
    | TypeLiteralNode
    | FunctionTypeNode
)
