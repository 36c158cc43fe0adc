"""Resolve the declaration enclosing a caret position with tree-sitter.

Node types are classified through an explicit table into ``NodeCategory``
values, and every category maps to at most one reported ``SymbolKind``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from ide_bridge.models import SymbolKind

SNIPPET_MAX_LINES = 5
SNIPPET_MAX_CHARS = 500
ELLIPSIS = "..."


class NodeCategory(Enum):
    FUNCTION = "function"
    METHOD = "method"
    CLASS = "class"
    INTERFACE = "interface"
    VARIABLE = "variable"
    FIELD = "field"
    PROPERTY = "property"
    PARAMETER = "parameter"
    TYPE_ALIAS = "type_alias"
    ENUM = "enum"
    MODULE = "module"
    NAMESPACE = "namespace"
    IMPORT = "import"
    OTHER = "other"


_CATEGORY_KINDS: dict[NodeCategory, SymbolKind | None] = {
    NodeCategory.FUNCTION: SymbolKind.FUNCTION,
    NodeCategory.METHOD: SymbolKind.FUNCTION,
    NodeCategory.CLASS: SymbolKind.CLASS,
    NodeCategory.INTERFACE: SymbolKind.INTERFACE,
    NodeCategory.VARIABLE: SymbolKind.VARIABLE,
    NodeCategory.FIELD: SymbolKind.VARIABLE,
    NodeCategory.PROPERTY: SymbolKind.PROPERTY,
    NodeCategory.PARAMETER: SymbolKind.PARAMETER,
    NodeCategory.TYPE_ALIAS: SymbolKind.TYPE,
    NodeCategory.ENUM: SymbolKind.ENUM,
    NodeCategory.MODULE: SymbolKind.MODULE,
    NodeCategory.NAMESPACE: SymbolKind.MODULE,
    NodeCategory.IMPORT: SymbolKind.IMPORT,
    NodeCategory.OTHER: None,
}

_NODE_CATEGORIES: dict[str, NodeCategory] = {
    # functions and methods
    "function_definition": NodeCategory.FUNCTION,
    "function_declaration": NodeCategory.FUNCTION,
    "generator_function_declaration": NodeCategory.FUNCTION,
    "function_item": NodeCategory.FUNCTION,
    "method_definition": NodeCategory.METHOD,
    "method_declaration": NodeCategory.METHOD,
    "method_signature": NodeCategory.METHOD,
    "abstract_method_signature": NodeCategory.METHOD,
    "constructor_declaration": NodeCategory.METHOD,
    "method": NodeCategory.METHOD,
    "singleton_method": NodeCategory.METHOD,
    # classes
    "class_definition": NodeCategory.CLASS,
    "class_declaration": NodeCategory.CLASS,
    "abstract_class_declaration": NodeCategory.CLASS,
    "class_specifier": NodeCategory.CLASS,
    "struct_specifier": NodeCategory.CLASS,
    "struct_item": NodeCategory.CLASS,
    "struct_declaration": NodeCategory.CLASS,
    "record_declaration": NodeCategory.CLASS,
    "class": NodeCategory.CLASS,
    # interfaces
    "interface_declaration": NodeCategory.INTERFACE,
    "trait_item": NodeCategory.INTERFACE,
    # variables and fields
    "variable_declarator": NodeCategory.VARIABLE,
    "lexical_declaration": NodeCategory.VARIABLE,
    "variable_declaration": NodeCategory.VARIABLE,
    "local_variable_declaration": NodeCategory.VARIABLE,
    "assignment": NodeCategory.VARIABLE,
    "let_declaration": NodeCategory.VARIABLE,
    "const_item": NodeCategory.VARIABLE,
    "static_item": NodeCategory.VARIABLE,
    "var_spec": NodeCategory.VARIABLE,
    "const_spec": NodeCategory.VARIABLE,
    "short_var_declaration": NodeCategory.VARIABLE,
    "field_declaration": NodeCategory.FIELD,
    "field_definition": NodeCategory.FIELD,
    "public_field_definition": NodeCategory.FIELD,
    # properties
    "property_signature": NodeCategory.PROPERTY,
    "property_declaration": NodeCategory.PROPERTY,
    "pair": NodeCategory.PROPERTY,
    # parameters
    "parameter": NodeCategory.PARAMETER,
    "formal_parameter": NodeCategory.PARAMETER,
    "required_parameter": NodeCategory.PARAMETER,
    "optional_parameter": NodeCategory.PARAMETER,
    "default_parameter": NodeCategory.PARAMETER,
    "typed_default_parameter": NodeCategory.PARAMETER,
    "parameter_declaration": NodeCategory.PARAMETER,
    # type aliases
    "type_alias_declaration": NodeCategory.TYPE_ALIAS,
    "type_alias_statement": NodeCategory.TYPE_ALIAS,
    "type_item": NodeCategory.TYPE_ALIAS,
    "type_alias": NodeCategory.TYPE_ALIAS,
    "type_spec": NodeCategory.TYPE_ALIAS,
    # enums
    "enum_declaration": NodeCategory.ENUM,
    "enum_item": NodeCategory.ENUM,
    "enum_specifier": NodeCategory.ENUM,
    # modules and namespaces
    "module": NodeCategory.MODULE,
    "mod_item": NodeCategory.MODULE,
    "internal_module": NodeCategory.NAMESPACE,
    "namespace_declaration": NodeCategory.NAMESPACE,
    "namespace_definition": NodeCategory.NAMESPACE,
    # imports
    "import_statement": NodeCategory.IMPORT,
    "import_from_statement": NodeCategory.IMPORT,
    "import_declaration": NodeCategory.IMPORT,
    "import_spec": NodeCategory.IMPORT,
    "use_declaration": NodeCategory.IMPORT,
}

# Fields that carry a declaration's name, in lookup order.
_NAME_FIELDS = ("name", "property", "declarator", "pattern", "left", "key", "module_name", "source", "path", "argument")
_NESTED_NAME_FIELDS = ("name", "declarator")


@dataclass(frozen=True)
class ResolvedSymbol:
    name: str
    kind: SymbolKind
    line: int
    text: str


def categorize(node_type: str) -> NodeCategory:
    return _NODE_CATEGORIES.get(node_type, NodeCategory.OTHER)


def kind_for(category: NodeCategory) -> SymbolKind | None:
    return _CATEGORY_KINDS[category]


def snippet(text: str) -> str:
    """First five physical lines of *text*, capped at 500 characters including the ellipsis."""
    head = "\n".join(text.split("\n")[:SNIPPET_MAX_LINES])
    if len(head) > SNIPPET_MAX_CHARS:
        return head[: SNIPPET_MAX_CHARS - len(ELLIPSIS)] + ELLIPSIS
    return head


def _name_node(node: Node) -> Node | None:
    for field in _NAME_FIELDS:
        child = node.child_by_field_name(field)
        if child is None:
            continue
        while True:
            nested = next(
                (n for n in (child.child_by_field_name(f) for f in _NESTED_NAME_FIELDS) if n is not None),
                None,
            )
            if child.type == "attribute":
                nested = child.child_by_field_name("attribute")
            if nested is None:
                return child
            child = nested
    return None


def resolve_symbol(source: str, offset: int, language: str) -> ResolvedSymbol | None:
    """Walk from the node at character *offset* toward the root and return the first classifiable declaration."""
    parser = get_parser(cast(SupportedLanguage, language))
    source_bytes = source.encode("utf-8")
    tree = parser.parse(source_bytes)

    offset = max(0, min(offset, len(source)))
    byte_offset = len(source[:offset].encode("utf-8"))

    def _text(node: Node) -> str:
        return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    current: Node | None = tree.root_node.descendant_for_byte_range(byte_offset, byte_offset)
    while current is not None and current.parent is not None:
        # Decorators hang off a wrapper; classify the wrapped definition.
        target = current.child_by_field_name("definition") if current.type == "decorated_definition" else current
        name_node = _name_node(target) if target is not None else None
        if name_node is not None and target is not None:
            kind = kind_for(categorize(target.type))
            name = _text(name_node).strip("\"'`")
            if kind is not None and name:
                return ResolvedSymbol(
                    name=name,
                    kind=kind,
                    line=name_node.start_point[0] + 1,
                    text=snippet(_text(current)),
                )
        current = current.parent
    return None
