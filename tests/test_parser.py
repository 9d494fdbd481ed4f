"""Tests for the declaration parser."""

import pytest

from onetyped.errors import DeclarationSyntaxError
from onetyped.typescript.parser import create_source_file, parse_type
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
    TupleTypeNode,
    TypeAliasDeclaration,
    TypeLiteralNode,
    TypeReferenceNode,
    UnionTypeNode,
)

STRING = KeywordTypeNode(Keyword.STRING)
NUMBER = KeywordTypeNode(Keyword.NUMBER)
BOOLEAN = KeywordTypeNode(Keyword.BOOLEAN)


class TestSourceFile:
    """Test parsing whole declaration files."""

    def test_type_alias(self) -> None:
        """Test a single type alias."""
        source_file = create_source_file("test.ts", "type Name = string")
        assert source_file.file_name == "test.ts"
        assert source_file.statements == (TypeAliasDeclaration("Name", STRING),)

    def test_interface(self) -> None:
        """Test an interface with an optional member."""
        source_file = create_source_file(
            "test.ts",
            "interface Person { name: string; age?: number }",
        )
        assert source_file.statements == (
            InterfaceDeclaration(
                "Person",
                (
                    PropertySignature("name", STRING),
                    PropertySignature("age", NUMBER, optional=True),
                ),
            ),
        )

    def test_several_statements_with_comments(self) -> None:
        """Test that comments are ignored between statements."""
        source_file = create_source_file(
            "test.ts",
            """
            // people
            type A = string;
            /* ids */
            type B = number;
            """,
        )
        assert [statement.name for statement in source_file.statements] == ["A", "B"]

    def test_find_declaration(self) -> None:
        """Test looking up a declaration by name."""
        source_file = create_source_file("test.ts", "type A = string\ntype B = A")
        assert source_file.find_declaration("B") == TypeAliasDeclaration(
            "B",
            TypeReferenceNode("A"),
        )
        with pytest.raises(KeyError, match="Available"):
            source_file.find_declaration("C")

    def test_syntax_error_has_location(self) -> None:
        """Test that a parse failure reports file, line and column."""
        with pytest.raises(DeclarationSyntaxError, match=r"bad\.ts:2:"):
            create_source_file("bad.ts", "type A = string\ntype = number")


class TestTypeExpressions:
    """Test parsing individual type expressions."""

    def test_union_order(self) -> None:
        """Test that union members keep source order."""
        assert parse_type("'admin' | 'user'") == UnionTypeNode(
            (LiteralTypeNode("admin"), LiteralTypeNode("user")),
        )

    def test_leading_union_operator(self) -> None:
        """Test that a leading pipe is accepted."""
        assert parse_type("| string | number") == UnionTypeNode((STRING, NUMBER))

    def test_intersection_binds_tighter(self) -> None:
        """Test operator precedence between & and |."""
        assert parse_type("string & number | boolean") == UnionTypeNode(
            (IntersectionTypeNode((STRING, NUMBER)), BOOLEAN),
        )

    def test_parenthesized_union_array(self) -> None:
        """Test an array of a parenthesized union."""
        assert parse_type("(string | number)[]") == ArrayTypeNode(
            UnionTypeNode((STRING, NUMBER)),
        )

    def test_nested_array(self) -> None:
        """Test postfix array suffixes chain."""
        assert parse_type("string[][]") == ArrayTypeNode(ArrayTypeNode(STRING))

    def test_tuple_with_optional_element(self) -> None:
        """Test a tuple with a trailing optional element."""
        assert parse_type("[string, number, boolean?]") == TupleTypeNode(
            (STRING, NUMBER, OptionalTypeNode(BOOLEAN)),
        )

    def test_empty_tuple(self) -> None:
        """Test a zero-length tuple."""
        assert parse_type("[]") == TupleTypeNode(())

    def test_function_type(self) -> None:
        """Test a function type with named parameters."""
        assert parse_type("(a: number, b?: string) => string") == FunctionTypeNode(
            (
                ParameterDeclaration("a", NUMBER),
                ParameterDeclaration("b", STRING, optional=True),
            ),
            STRING,
        )

    def test_function_without_parameters(self) -> None:
        """Test a nullary function type."""
        assert parse_type("() => void") == FunctionTypeNode(
            (),
            KeywordTypeNode(Keyword.VOID),
        )

    def test_generic_reference(self) -> None:
        """Test a generic type reference."""
        assert parse_type("Record<string | number, number>") == TypeReferenceNode(
            "Record",
            (UnionTypeNode((STRING, NUMBER)), NUMBER),
        )

    def test_literals(self) -> None:
        """Test string, number and boolean literals, with and without as const."""
        assert parse_type('"literal_string" as const') == LiteralTypeNode(
            "literal_string",
        )
        assert parse_type("true as const") == LiteralTypeNode(value=True)
        assert parse_type("false") == LiteralTypeNode(value=False)
        assert parse_type("42") == LiteralTypeNode(42)
        assert parse_type("-1.5") == LiteralTypeNode(-1.5)

    def test_type_literal_separators(self) -> None:
        """Test that members may be separated by newlines, commas or semicolons."""
        expected = TypeLiteralNode(
            (
                PropertySignature("a", STRING),
                PropertySignature("b", NUMBER),
                PropertySignature("c", BOOLEAN),
            ),
        )
        assert parse_type("{ a: string, b: number; c: boolean }") == expected
        assert parse_type("{\n  a: string\n  b: number\n  c: boolean,\n}") == expected

    def test_index_signature(self) -> None:
        """Test an index signature member."""
        assert parse_type("{ [key: string]: number }") == TypeLiteralNode(
            (IndexSignature("key", STRING, NUMBER),),
        )

    def test_newline_before_index_signature(self) -> None:
        """Test an index signature on the line after a property type."""
        expected = TypeLiteralNode(
            (
                PropertySignature("a", STRING),
                IndexSignature("k", STRING, NUMBER),
            ),
        )
        assert parse_type("{\n  a: string\n  [k: string]: number\n}") == expected
        assert parse_type("{ a: string; [k: string]: number }") == expected

    def test_array_suffix_before_index_signature(self) -> None:
        """Test an array-typed property followed by an index signature."""
        assert parse_type("{\n  a: string[ ]\n  [k: string]: number\n}") == (
            TypeLiteralNode(
                (
                    PropertySignature("a", ArrayTypeNode(STRING)),
                    IndexSignature("k", STRING, NUMBER),
                ),
            )
        )

    def test_nested_array_suffix(self) -> None:
        """Test that array suffixes chain, with or without inner spaces."""
        assert parse_type("string[][ ]") == ArrayTypeNode(ArrayTypeNode(STRING))

    def test_quoted_property_name(self) -> None:
        """Test that quoted names are unquoted."""
        assert parse_type("{ 'first-name': string }") == TypeLiteralNode(
            (PropertySignature("first-name", STRING),),
        )

    def test_keyword_named_property(self) -> None:
        """Test that keyword-like names are accepted as property names."""
        assert parse_type("{ string: number }") == TypeLiteralNode(
            (PropertySignature("string", NUMBER),),
        )

    def test_unterminated_literal(self) -> None:
        """Test that malformed input raises DeclarationSyntaxError."""
        with pytest.raises(DeclarationSyntaxError):
            parse_type("{ name: string")
