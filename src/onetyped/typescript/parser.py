"""Parse type declaration source text into syntax nodes."""

from __future__ import annotations

import ast
import logging
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput, VisitError

from onetyped.errors import DeclarationSyntaxError
from onetyped.typescript.syntax import (
    ArrayTypeNode,
    FunctionTypeNode,
    IndexSignature,
    InterfaceDeclaration,
    IntersectionTypeNode,
    Keyword,
    KeywordTypeNode,
    LiteralTypeNode,
    OptionalTypeNode,
    ParameterDeclaration,
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

_GRAMMAR_PATH = Path(__file__).with_name("typescript.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    start="start",
    propagate_positions=True,
    maybe_placeholders=False,
)


def _is_optional_marker(child: object) -> bool:
    return isinstance(child, Token) and child.type == "OPTIONAL"


class _SyntaxBuilder(Transformer[Token, SyntaxNode]):
    """Turn the parse tree into syntax nodes, bottom-up."""

    def __init__(self, file_name: str) -> None:
        super().__init__()
        self.file_name = file_name

    def start(self, children: list[SyntaxNode]) -> SourceFile:
        return SourceFile(self.file_name, tuple(children))  # type: ignore[arg-type]

    def type_alias(self, children: list[object]) -> TypeAliasDeclaration:
        name, type_ = children
        return TypeAliasDeclaration(str(name), type_)  # type: ignore[arg-type]

    def interface_decl(self, children: list[object]) -> InterfaceDeclaration:
        name, members = children
        return InterfaceDeclaration(str(name), members)  # type: ignore[arg-type]

    def function_type(self, children: list[object]) -> FunctionTypeNode:
        *parameters, return_type = children
        return FunctionTypeNode(tuple(parameters), return_type)  # type: ignore[arg-type]

    def parameter(self, children: list[object]) -> ParameterDeclaration:
        name, *rest = children
        optional = any(_is_optional_marker(child) for child in rest)
        type_ = rest[-1]
        return ParameterDeclaration(str(name), type_, optional=optional)  # type: ignore[arg-type]

    def union_type(self, children: list[SyntaxNode]) -> UnionTypeNode:
        return UnionTypeNode(tuple(_flatten(children, UnionTypeNode)))

    def intersection_type(self, children: list[SyntaxNode]) -> IntersectionTypeNode:
        return IntersectionTypeNode(tuple(_flatten(children, IntersectionTypeNode)))

    def array_type(self, children: list[SyntaxNode]) -> ArrayTypeNode:
        (element,) = children
        return ArrayTypeNode(element)

    def keyword_type(self, children: list[Token]) -> KeywordTypeNode:
        (token,) = children
        return KeywordTypeNode(Keyword(str(token)))

    def literal_type(self, children: list[LiteralTypeNode]) -> LiteralTypeNode:
        # `as const` carries no extra meaning in type position
        return children[0]

    def string_literal(self, children: list[Token]) -> LiteralTypeNode:
        (token,) = children
        return LiteralTypeNode(_unquote(token))

    def number_literal(self, children: list[Token]) -> LiteralTypeNode:
        (token,) = children
        text = str(token)
        if any(marker in text for marker in ".eE"):
            return LiteralTypeNode(float(text))
        return LiteralTypeNode(int(text))

    def true_literal(self, _children: list[object]) -> LiteralTypeNode:
        return LiteralTypeNode(value=True)

    def false_literal(self, _children: list[object]) -> LiteralTypeNode:
        return LiteralTypeNode(value=False)

    def type_reference(self, children: list[object]) -> TypeReferenceNode:
        name, *arguments = children
        return TypeReferenceNode(str(name), tuple(arguments))  # type: ignore[arg-type]

    def tuple_type(self, children: list[SyntaxNode]) -> TupleTypeNode:
        return TupleTypeNode(tuple(children))

    def tuple_element(self, children: list[object]) -> SyntaxNode:
        type_, *rest = children
        if any(_is_optional_marker(child) for child in rest):
            return OptionalTypeNode(type_)  # type: ignore[arg-type]
        return type_  # type: ignore[return-value]

    def type_literal(self, children: list[object]) -> TypeLiteralNode:
        (members,) = children
        return TypeLiteralNode(members)  # type: ignore[arg-type]

    def members(
        self,
        children: list[PropertySignature | IndexSignature],
    ) -> tuple[PropertySignature | IndexSignature, ...]:
        return tuple(children)

    def property_signature(self, children: list[object]) -> PropertySignature:
        name, *rest = children
        optional = any(_is_optional_marker(child) for child in rest)
        type_ = rest[-1]
        return PropertySignature(str(name), type_, optional=optional)  # type: ignore[arg-type]

    def quoted_name(self, children: list[Token]) -> str:
        (token,) = children
        return _unquote(token)

    def index_signature(self, children: list[object]) -> IndexSignature:
        name, key_type, type_ = children
        return IndexSignature(str(name), key_type, type_)  # type: ignore[arg-type]


def _flatten(
    children: list[SyntaxNode],
    kind: type[UnionTypeNode | IntersectionTypeNode],
) -> list[SyntaxNode]:
    flat: list[SyntaxNode] = []
    for child in children:
        if isinstance(child, kind):
            flat.extend(child.types)
        else:
            flat.append(child)
    return flat


def _unquote(token: Token) -> str:
    text = str(token)
    value = ast.literal_eval(text)
    if not isinstance(value, str):
        msg = f"Expected a string literal, got {text}"
        raise DeclarationSyntaxError(msg)
    return value


def create_source_file(file_name: str, text: str) -> SourceFile:
    """Parse declaration source text.

    Args:
        file_name: Name recorded on the resulting source file
        text: Source containing ``type`` and ``interface`` declarations

    Returns:
        The parsed source file

    Raises:
        DeclarationSyntaxError: If the text does not parse

    """
    try:
        tree = _PARSER.parse(text)
    except UnexpectedInput as err:
        line = getattr(err, "line", "?")
        column = getattr(err, "column", "?")
        msg = f"{file_name}:{line}:{column}: cannot parse declaration\n{err}"
        raise DeclarationSyntaxError(msg) from err

    try:
        source_file = _SyntaxBuilder(file_name).transform(tree)
    except VisitError as err:
        msg = f"{file_name}: invalid declaration: {err.orig_exc}"
        raise DeclarationSyntaxError(msg) from err.orig_exc
    logger.debug(
        "Parsed %s: %d declaration(s)",
        file_name,
        len(source_file.statements),
    )
    return source_file


def parse_type(text: str) -> SyntaxNode:
    """Parse a single type expression, e.g. ``"string | number"``."""
    source_file = create_source_file("<type>", f"type __T = {text}")
    (declaration,) = source_file.statements
    if not isinstance(declaration, TypeAliasDeclaration):
        msg = f"Expected a type expression, got {text!r}"
        raise DeclarationSyntaxError(msg)
    return declaration.type
