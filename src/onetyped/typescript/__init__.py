"""TypeScript-style type bridge: importer, exporter and a reference engine."""

from onetyped.typescript.checker import (
    DeclarationChecker,
    Program,
    ResolvedType,
)
from onetyped.typescript.exporter import (
    ExportOptions,
    TypeExporter,
    to_declarations,
    to_type_node,
)
from onetyped.typescript.importer import (
    ImportOptions,
    SignaturePolicy,
    TypeImporter,
    from_type,
)
from onetyped.typescript.parser import (
    create_source_file,
    parse_type,
)
from onetyped.typescript.printer import print_node
from onetyped.typescript.protocol import (
    IndexSignature,
    Parameter,
    Property,
    Signature,
    TupleElement,
    TypeChecker,
    TypeFlags,
)
from onetyped.typescript.syntax import (
    SourceFile,
    SyntaxNode,
    TypeAliasDeclaration,
    TypeNode,
)

__all__ = [
    # Reference engine
    "DeclarationChecker",
    # Exporter
    "ExportOptions",
    # Importer
    "ImportOptions",
    # Engine protocol
    "IndexSignature",
    "Parameter",
    "Program",
    "Property",
    "ResolvedType",
    "Signature",
    "SignaturePolicy",
    # Syntax
    "SourceFile",
    "SyntaxNode",
    "TupleElement",
    "TypeAliasDeclaration",
    "TypeChecker",
    "TypeExporter",
    "TypeFlags",
    "TypeImporter",
    "TypeNode",
    "create_source_file",
    "from_type",
    "parse_type",
    "print_node",
    "to_declarations",
    "to_type_node",
]
