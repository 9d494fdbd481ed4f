"""onetyped - Canonical schema nodes and their bridge to TypeScript-style types."""

from onetyped.builders import (
    array,
    boolean,
    function,
    intersection,
    literal,
    number,
    object_,
    optional,
    record,
    reference,
    string,
    tuple_,
    undefined,
    union,
    void,
)
from onetyped.codecs import (
    from_builtins,
    to_builtins,
)
from onetyped.errors import (
    ConstructionError,
    DeclarationSyntaxError,
    OnetypedError,
    RecursionIntegrityError,
    TypeResolutionError,
    UnsupportedTypeError,
)
from onetyped.formats.json import (
    from_json,
    to_json,
)
from onetyped.nodes import (
    ArrayNode,
    BooleanNode,
    FunctionNode,
    IntersectionNode,
    LiteralNode,
    LiteralValue,
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
    children,
)
from onetyped.optionality import (
    decode_optional,
    encode_optional,
    is_optional_pattern,
)
from onetyped.tracker import (
    IdentityScope,
    RecursionTracker,
)

__all__ = [
    # Nodes
    "ArrayNode",
    "BooleanNode",
    # Errors
    "ConstructionError",
    "DeclarationSyntaxError",
    "FunctionNode",
    # Recursion
    "IdentityScope",
    "IntersectionNode",
    "LiteralNode",
    "LiteralValue",
    "NumberNode",
    "ObjectNode",
    "OnetypedError",
    "PrimitiveNode",
    "RecordNode",
    "RecursionIntegrityError",
    "RecursionTracker",
    "ReferenceNode",
    "SchemaNode",
    "StringNode",
    "TupleNode",
    "TypeResolutionError",
    "UndefinedNode",
    "UnionNode",
    "UnsupportedTypeError",
    "VoidNode",
    # Builders
    "array",
    "boolean",
    "children",
    # Optionality
    "decode_optional",
    "encode_optional",
    # Serialization
    "from_builtins",
    "from_json",
    "function",
    "intersection",
    "is_optional_pattern",
    "literal",
    "number",
    "object_",
    "optional",
    "record",
    "reference",
    "string",
    "to_builtins",
    "to_json",
    "tuple_",
    "undefined",
    "union",
    "void",
]
