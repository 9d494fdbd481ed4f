"""Tests for exporting schema nodes as type-syntax nodes."""

import pytest

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
from onetyped.errors import RecursionIntegrityError
from onetyped.nodes import ObjectNode, UnionNode
from onetyped.typescript.exporter import (
    ExportOptions,
    to_declarations,
    to_type_node,
)
from onetyped.typescript.printer import print_node
from onetyped.typescript.syntax import (
    Keyword,
    KeywordTypeNode,
    LiteralTypeNode,
    PropertySignature,
    TypeLiteralNode,
    TypeReferenceNode,
    UnionTypeNode,
)


def render(node: object, **kwargs: object) -> str:
    return print_node(to_type_node(node, **kwargs))  # type: ignore[arg-type]


class TestBasicExport:
    """Test the mapping of each node kind."""

    def test_object_with_record(self) -> None:
        """Test the canonical object and record rendering."""
        person = object_(
            {
                "name": string(),
                "items": record(union([string(), number()]), number()),
            },
        )
        assert render(person) == (
            "{\n    name: string;\n    items: Record<string | number, number>;\n}"
        )

    def test_primitives_become_keywords(self) -> None:
        """Test keyword nodes for primitives."""
        assert to_type_node(string()) == KeywordTypeNode(Keyword.STRING)
        assert to_type_node(undefined()) == KeywordTypeNode(Keyword.UNDEFINED)
        assert render(void()) == "void"
        assert render(boolean()) == "boolean"

    def test_literals(self) -> None:
        """Test literal nodes."""
        assert to_type_node(literal("admin")) == LiteralTypeNode("admin")
        assert render(literal(True)) == "true"  # noqa: FBT003

    def test_union_order(self) -> None:
        """Test that union member order is kept."""
        node = union([literal("admin"), literal("user")])
        assert to_type_node(node) == UnionTypeNode(
            (LiteralTypeNode("admin"), LiteralTypeNode("user")),
        )

    def test_intersection_and_array(self) -> None:
        """Test intersection and array rendering."""
        node = array(intersection([string(), object_({"length": number()})]))
        assert render(node) == "(string & {\n    length: number;\n})[]"

    def test_function_parameter_names(self) -> None:
        """Test synthesized parameter names."""
        node = function([number(), string()], string())
        assert render(node) == "(arg0: number, arg1: string) => string"

    def test_options(self) -> None:
        """Test configurable parameter prefix and record name."""
        options = ExportOptions(parameter_prefix="p", record_name="Map")
        assert render(function([number()], void()), options=options) == (
            "(p0: number) => void"
        )
        assert render(record(string(), number()), options=options) == (
            "Map<string, number>"
        )

    def test_input_not_mutated(self) -> None:
        """Test that exporting leaves the input tree unchanged."""
        node = object_({"age": optional(number())})
        before = node.shape["age"]
        to_type_node(node)
        assert node.shape["age"] is before


class TestOptionalExport:
    """Test decode-optional during export."""

    def test_optional_property(self) -> None:
        """Test that union(T, undefined) renders as an optional property."""
        node = object_({"age": optional(number())})
        assert to_type_node(node) == TypeLiteralNode(
            (PropertySignature("age", KeywordTypeNode(Keyword.NUMBER), optional=True),),
        )

    def test_flagged_property(self) -> None:
        """Test that a node flagged optional renders as an optional property."""
        assert render(object_({"age": number(optional=True)})) == (
            "{\n    age?: number;\n}"
        )

    def test_wider_union_stays_union(self) -> None:
        """Test that a union with more than one non-undefined member is not optional."""
        node = object_({"a": union([string(), number(), undefined()])})
        assert render(node) == "{\n    a: string | number | undefined;\n}"

    def test_trailing_tuple_elements(self) -> None:
        """Test that trailing optional tuple elements become optional elements."""
        node = tuple_([string(), number(), optional(boolean())])
        assert render(node) == "[string, number, boolean?]"

    def test_non_trailing_tuple_element_keeps_union(self) -> None:
        """Test that an optional element before a required one stays a union."""
        node = tuple_([optional(string()), number()])
        assert render(node) == "[string | undefined, number]"

    def test_non_trailing_flagged_parameter(self) -> None:
        """Test that a flagged parameter before a required one becomes a union."""
        node = function([string(optional=True), number()], void())
        assert render(node) == "(arg0: string | undefined, arg1: number) => void"

    def test_optional_parameters(self) -> None:
        """Test that trailing optional parameters are marked optional."""
        node = function([number(), optional(string())], string())
        assert render(node) == "(arg0: number, arg1?: string) => string"

    def test_undefined_first_stays_union(self) -> None:
        """Test that undefined before the type is an ordinary union in order."""
        node = object_({"a": union([undefined(), string()])})
        assert render(node) == "{\n    a: undefined | string;\n}"

    def test_flag_at_root(self) -> None:
        """Test that a flagged root renders its undefined member."""
        assert render(string(optional=True)) == "string | undefined"

    def test_flag_inside_union_member(self) -> None:
        """Test that a flagged union member keeps its undefined member."""
        node = union([string(optional=True), number()])
        assert render(node) == "string | undefined | number"

    def test_flag_on_array_element(self) -> None:
        """Test that a flagged array element renders as a parenthesized union."""
        assert render(array(number(optional=True))) == "(number | undefined)[]"


class TestRecursiveExport:
    """Test references and identities."""

    TREE = ObjectNode(
        {"value": number(), "children": array(reference("Tree"))},
        identity="Tree",
    )

    def test_reference_renders_name(self) -> None:
        """Test that a reference renders as a type reference."""
        node = to_type_node(self.TREE)
        assert isinstance(node, TypeLiteralNode)
        children = node.members[1]
        assert isinstance(children, PropertySignature)
        assert print_node(children.type) == "Tree[]"

    def test_unresolved_reference(self) -> None:
        """Test that a reference with no enclosing identity fails."""
        with pytest.raises(RecursionIntegrityError) as exc_info:
            to_type_node(object_({"next": reference("Missing")}))
        assert exc_info.value.names == ("Missing",)

    def test_reference_outside_its_target(self) -> None:
        """Test that a reference next to, not inside, its target fails."""
        node = object_({"tree": self.TREE, "other": reference("Tree")})
        with pytest.raises(RecursionIntegrityError):
            to_type_node(node)

    def test_declarations_use_identity(self) -> None:
        """Test that the root identity names the declaration."""
        (declaration,) = to_declarations(self.TREE)
        assert print_node(declaration) == (
            "type Tree = {\n    value: number;\n    children: Tree[];\n};"
        )

    def test_declarations_rename_root(self) -> None:
        """Test that an explicit name replaces the root identity everywhere."""
        (declaration,) = to_declarations(self.TREE, "Node")
        assert declaration.name == "Node"
        assert "children: Node[];" in print_node(declaration)

    def test_nested_target_is_hoisted(self) -> None:
        """Test that a nested recursion target gets its own declaration."""
        root = object_({"tree": self.TREE, "label": string()})
        declarations = to_declarations(root, "Root")
        assert [d.name for d in declarations] == ["Root", "Tree"]
        assert declarations[0].type == TypeLiteralNode(
            (
                PropertySignature("tree", TypeReferenceNode("Tree")),
                PropertySignature("label", KeywordTypeNode(Keyword.STRING)),
            ),
        )

    def test_declarations_need_a_name(self) -> None:
        """Test that an anonymous root without a name is rejected."""
        with pytest.raises(ValueError, match="declaration name"):
            to_declarations(string())

    def test_optional_recursive_property(self) -> None:
        """Test a recursive property combined with the optional pattern."""
        node = ObjectNode(
            {"next": UnionNode((reference("List"), undefined()))},
            identity="List",
        )
        assert render(node) == "{\n    next?: List;\n}"


class TestNamedOptionalTarget:
    """Test recursion targets that are themselves the optional pattern."""

    OPT = UnionNode(
        (object_({"child": reference("Opt")}), undefined()),
        identity="Opt",
    )

    def test_property_keeps_union(self) -> None:
        """Test that the named pattern renders as a union, not an optional property."""
        assert render(object_({"o": self.OPT})) == (
            "{\n    o: {\n        child: Opt;\n    } | undefined;\n}"
        )

    def test_tuple_element_keeps_union(self) -> None:
        """Test that a named pattern in a trailing tuple slot keeps its name."""
        assert render(tuple_([string(), self.OPT])) == (
            "[string, {\n    child: Opt;\n} | undefined]"
        )

    def test_parameter_keeps_union(self) -> None:
        """Test that a named pattern in a trailing parameter keeps its name."""
        rendered = render(function([self.OPT], void()))
        assert rendered.startswith("(arg0: {")
        assert "child: Opt;" in rendered

    def test_named_pattern_is_hoisted(self) -> None:
        """Test that the named pattern is hoisted under its own alias."""
        root, target = to_declarations(object_({"o": self.OPT}), "Root")
        assert print_node(root) == "type Root = {\n    o: Opt;\n};"
        assert print_node(target) == (
            "type Opt = {\n    child: Opt;\n} | undefined;"
        )

    def test_flagged_target_wraps_identity(self) -> None:
        """Test that a flagged root target moves its name onto the union."""
        node = ObjectNode({"next": reference("List")}, identity="List", optional=True)
        (declaration,) = to_declarations(node)
        assert print_node(declaration) == (
            "type List = {\n    next: List;\n} | undefined;"
        )
