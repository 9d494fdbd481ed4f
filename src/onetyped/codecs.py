"""Conversion between schema nodes and JSON-compatible builtins.

Layout follows the language-neutral IR: every node is a dict keyed by
``typeName``; primitives echo their discriminant under ``type`` and literals
store their value there.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from onetyped.nodes import (
    ArrayNode,
    FunctionNode,
    IntersectionNode,
    LiteralNode,
    ObjectNode,
    PrimitiveNode,
    RecordNode,
    ReferenceNode,
    SchemaNode,
    TupleNode,
    UnionNode,
)

_TYPE_NAME_KEY = "typeName"
_MAX_NAMES_IN_ERROR = 10  # Maximum number of type names to show in error messages


def to_builtins(node: SchemaNode) -> dict[str, Any]:
    """Serialize a schema node to a JSON-compatible dictionary.

    Args:
        node: The schema node to serialize

    Returns:
        Nested dictionaries and lists; defaults appear only when set

    Raises:
        TypeError: If ``node`` is not a registered schema node

    """
    result: dict[str, Any] = {_TYPE_NAME_KEY: node.type_name}

    match node:
        case PrimitiveNode():
            result["type"] = node.type
        case LiteralNode(value=value):
            result["type"] = value
        case ObjectNode(shape=shape):
            result["shape"] = {name: to_builtins(child) for name, child in shape.items()}
        case ArrayNode(element=element):
            result["types"] = [to_builtins(element)]
        case TupleNode(types=types) | UnionNode(types=types):
            result["types"] = [to_builtins(member) for member in types]
        case IntersectionNode(types=types):
            result["types"] = [to_builtins(member) for member in types]
        case RecordNode(key=key, value=value):
            result["key"] = to_builtins(key)
            result["value"] = to_builtins(value)
        case FunctionNode(arguments=arguments, returns=returns):
            result["arguments"] = [to_builtins(arg) for arg in arguments]
            result["return"] = to_builtins(returns)
        case ReferenceNode(name=name):
            result["name"] = name
        case _:
            msg = f"Cannot serialize object of type {type(node).__name__}"
            raise TypeError(msg)

    if node.optional:
        result["optional"] = True
    if node.description is not None:
        result["description"] = node.description
    if node.identity is not None:
        result["identity"] = node.identity
    return result


def from_builtins(data: dict[str, Any]) -> SchemaNode:
    """Deserialize a schema node from a dictionary produced by ``to_builtins``.

    Args:
        data: Dictionary with a ``typeName`` field

    Returns:
        The reconstructed schema node

    Raises:
        KeyError: If ``typeName`` or a required payload field is missing
        ValueError: If ``typeName`` is not recognized or a payload field has
            the wrong layout
        ConstructionError: If the payload describes an invalid node

    """
    if not isinstance(data, Mapping):
        msg = f"Schema node data must be a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    if _TYPE_NAME_KEY not in data:
        msg = f"Missing required '{_TYPE_NAME_KEY}' field in data"
        raise KeyError(msg)

    type_name = data[_TYPE_NAME_KEY]
    node_cls = SchemaNode.registry.get(type_name)
    if node_cls is None:
        available = list(SchemaNode.registry)[:_MAX_NAMES_IN_ERROR]
        msg = f"Unknown typeName '{type_name}'. Available type names: {available}"
        raise ValueError(msg)

    defaults = {
        "optional": data.get("optional", False),
        "description": data.get("description"),
        "identity": data.get("identity"),
    }

    if issubclass(node_cls, PrimitiveNode):
        return node_cls(**defaults)
    if node_cls is LiteralNode:
        return LiteralNode(_require(data, "type"), **defaults)
    if node_cls is ObjectNode:
        shape = {
            name: from_builtins(child)
            for name, child in _require_mapping(data, "shape").items()
        }
        return ObjectNode(shape, **defaults)
    if node_cls is ArrayNode:
        types = _require_list(data, "types")
        if len(types) != 1:
            msg = f"Array takes a single element type, got {len(types)}"
            raise ValueError(msg)
        return ArrayNode(from_builtins(types[0]), **defaults)
    if node_cls in (TupleNode, UnionNode, IntersectionNode):
        members = tuple(
            from_builtins(member) for member in _require_list(data, "types")
        )
        return node_cls(members, **defaults)
    if node_cls is RecordNode:
        return RecordNode(
            from_builtins(_require(data, "key")),
            from_builtins(_require(data, "value")),
            **defaults,
        )
    if node_cls is FunctionNode:
        return FunctionNode(
            tuple(from_builtins(arg) for arg in _require_list(data, "arguments")),
            from_builtins(_require(data, "return")),
            **defaults,
        )
    if node_cls is ReferenceNode:
        return ReferenceNode(_require(data, "name"), **defaults)

    msg = f"No decoder for typeName '{type_name}'"
    raise ValueError(msg)


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        msg = f"Missing required '{key}' field for {data[_TYPE_NAME_KEY]}"
        raise KeyError(msg)
    return data[key]


def _require_list(data: dict[str, Any], key: str) -> list[Any]:
    value = _require(data, key)
    if not isinstance(value, list | tuple):
        msg = (
            f"Field '{key}' of {data[_TYPE_NAME_KEY]} must be a list, "
            f"got {type(value).__name__}"
        )
        raise ValueError(msg)
    return list(value)


def _require_mapping(data: dict[str, Any], key: str) -> Mapping[str, Any]:
    value = _require(data, key)
    if not isinstance(value, Mapping):
        msg = (
            f"Field '{key}' of {data[_TYPE_NAME_KEY]} must be a mapping, "
            f"got {type(value).__name__}"
        )
        raise ValueError(msg)
    return value
