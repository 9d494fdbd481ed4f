"""Render type-syntax nodes as declaration source text."""

from __future__ import annotations

import json
import re

from onetyped.typescript.syntax import (
    ArrayTypeNode,
    FunctionTypeNode,
    IndexSignature,
    InterfaceDeclaration,
    IntersectionTypeNode,
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

_INDENT = "    "
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def print_node(node: SyntaxNode) -> str:
    """Render a syntax node (type, member, declaration or source file) as text.

    Type literals print one member per line, four-space indented, each
    member terminated by a semicolon.
    """
    return _print(node, 0)


def _print(node: SyntaxNode, level: int) -> str:  # noqa: C901, PLR0911, PLR0912
    match node:
        case KeywordTypeNode(keyword=keyword):
            return str(keyword)
        case LiteralTypeNode(value=value):
            return _print_literal(value)
        case TypeReferenceNode(name=name, type_arguments=()):
            return name
        case TypeReferenceNode(name=name, type_arguments=arguments):
            printed = ", ".join(_print(arg, level) for arg in arguments)
            return f"{name}<{printed}>"
        case ArrayTypeNode(element_type=element):
            return f"{_operand(element, level, _POSTFIX_PARENS)}[]"
        case OptionalTypeNode(type=inner):
            return f"{_operand(inner, level, _POSTFIX_PARENS)}?"
        case TupleTypeNode(elements=elements):
            return "[" + ", ".join(_print(e, level) for e in elements) + "]"
        case UnionTypeNode(types=types):
            return " | ".join(_operand(t, level, _UNION_PARENS) for t in types)
        case IntersectionTypeNode(types=types):
            return " & ".join(_operand(t, level, _INTERSECTION_PARENS) for t in types)
        case TypeLiteralNode(members=members):
            return _print_members(members, level)
        case FunctionTypeNode(parameters=parameters, return_type=return_type):
            printed = ", ".join(_print(p, level) for p in parameters)
            return f"({printed}) => {_print(return_type, level)}"
        case ParameterDeclaration(name=name, type=type_, optional=optional):
            marker = "?" if optional else ""
            return f"{name}{marker}: {_print(type_, level)}"
        case PropertySignature(name=name, type=type_, optional=optional):
            marker = "?" if optional else ""
            return f"{_property_name(name)}{marker}: {_print(type_, level)};"
        case IndexSignature(parameter_name=param, key_type=key, type=type_):
            return f"[{param}: {_print(key, level)}]: {_print(type_, level)};"
        case TypeAliasDeclaration(name=name, type=type_):
            return f"type {name} = {_print(type_, level)};"
        case InterfaceDeclaration(name=name, members=members):
            return f"interface {name} {_print_members(members, level)}"
        case SourceFile(statements=statements):
            return "\n".join(_print(statement, level) for statement in statements)
        case _:
            msg = f"Cannot print syntax node of kind {node.kind}"
            raise TypeError(msg)


_POSTFIX_PARENS = (UnionTypeNode, IntersectionTypeNode, FunctionTypeNode)
_UNION_PARENS = (FunctionTypeNode,)
_INTERSECTION_PARENS = (UnionTypeNode, FunctionTypeNode)


def _operand(
    node: SyntaxNode,
    level: int,
    parenthesize: tuple[type[SyntaxNode], ...],
) -> str:
    printed = _print(node, level)
    return f"({printed})" if isinstance(node, parenthesize) else printed


def _print_members(
    members: tuple[PropertySignature | IndexSignature, ...],
    level: int,
) -> str:
    if not members:
        return "{}"
    inner = _INDENT * (level + 1)
    lines = [f"{inner}{_print(member, level + 1)}" for member in members]
    return "{\n" + "\n".join(lines) + "\n" + _INDENT * level + "}"


def _print_literal(value: str | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    return repr(value)


def _property_name(name: str) -> str:
    return name if _IDENTIFIER.match(name) else json.dumps(name)
