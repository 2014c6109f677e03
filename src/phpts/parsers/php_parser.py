import re

import tree_sitter_php
from tree_sitter import Language, Parser

from phpts.docblock import clean_doc_comment, extract_param_type, extract_var_type, is_docblock
from phpts.models import EntityDescriptor, EntityKind, EnumMember, FieldDescriptor
from phpts.parsers.base import BaseParser
from phpts.type_mapper import short_name

# Node types that can hold a declared property / parameter type
TYPE_NODE_TYPES = frozenset({
    "named_type",
    "primitive_type",
    "optional_type",
    "union_type",
    "intersection_type",
    "disjunctive_normal_form_type",
    "type_list",
})

EXCLUDE_ATTRIBUTE = "Exclude"

_USE_STATEMENT = re.compile(r"^\s*use\s+(?:(function|const)\s+)?(.*?)\s*;?\s*$", re.IGNORECASE | re.DOTALL)
_GROUP_USE = re.compile(r"^(.*?)\\?\{(.*)\}$", re.DOTALL)


def _text(node) -> str:
    return node.text.decode("utf8")


def parse_use_declaration(statement: str) -> dict[str, str]:
    """Parse a PHP ``use`` statement into an alias -> qualified name mapping.

    Handles aliases (``as``), comma lists and group uses. Function and
    constant imports are ignored.

    Examples:
        >>> parse_use_declaration("use App\\\\Dto\\\\{AddressDTO, CityDTO as City};")
        {'AddressDTO': 'App\\\\Dto\\\\AddressDTO', 'City': 'App\\\\Dto\\\\CityDTO'}
    """
    match = _USE_STATEMENT.match(statement)
    if not match or match.group(1):
        return {}

    body = match.group(2).strip()
    group = _GROUP_USE.match(body)
    if group:
        prefix = group.group(1).strip().strip("\\")
        clauses = [f"{prefix}\\{clause.strip()}" for clause in group.group(2).split(",") if clause.strip()]
    else:
        clauses = [clause.strip() for clause in body.split(",") if clause.strip()]

    aliases = {}
    for clause in clauses:
        parts = re.split(r"\s+as\s+", clause, flags=re.IGNORECASE)
        qualified = parts[0].strip().lstrip("\\")
        alias = parts[1].strip() if len(parts) > 1 else short_name(qualified)
        aliases[alias] = qualified
    return aliases


def split_signature_type(declared: str | None) -> tuple[str, bool]:
    """Split a declared PHP type into (type name, allows null).

    ``?Foo`` and ``Foo|null`` are nullable; other unions keep their first
    non-null member. ``mixed`` already includes null and is never reported
    as nullable.
    """
    if not declared:
        return "mixed", False

    text = declared.strip()
    nullable = False
    if text.startswith("?"):
        nullable = True
        text = text[1:].strip()

    members = [member.strip() for member in text.split("|") if member.strip()]
    non_null = [member for member in members if member.lower() != "null"]
    if len(non_null) < len(members):
        nullable = True

    if not non_null:
        return "null", False

    type_name = non_null[0].strip("()")
    if type_name.lower() == "mixed":
        nullable = False
    return type_name, nullable


def parse_literal(text: str) -> str | int:
    """Convert a PHP enum case value literal to a Python value."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        quote = text[0]
        return text[1:-1].replace("\\" + quote, quote).replace("\\\\", "\\")
    try:
        return int(text.replace("_", ""), 0)
    except ValueError:
        return text


class PhpParser(BaseParser):
    """Parser for extracting classes and enums from PHP source code using tree-sitter."""

    def __init__(self):
        self.language = Language(tree_sitter_php.language_php())
        self.parser = Parser(self.language)

    def extract_entities(self, source_code: str, file_path: str) -> list[EntityDescriptor]:
        """Extract classes and enums from PHP source code.

        Args:
            source_code: PHP source code to parse
            file_path: Path to the file

        Returns:
            List of EntityDescriptor objects in declaration order
        """
        tree = self.parser.parse(bytes(source_code, "utf8"))
        return self._collect(tree.root_node.children, "", {}, file_path)

    def _collect(self, nodes, namespace: str, uses: dict[str, str], file_path: str) -> list[EntityDescriptor]:
        """Walk top-level statements, tracking the current namespace and imports."""
        entities = []

        for node in nodes:
            if node.type == "namespace_definition":
                name_node = self._child(node, "name", "namespace_name")
                namespace = _text(name_node) if name_node else ""
                uses = {}
                body = self._child(node, "body", "compound_statement")
                if body is not None:
                    entities.extend(self._collect(body.children, namespace, uses, file_path))

            elif node.type == "namespace_use_declaration":
                uses.update(parse_use_declaration(_text(node)))

            elif node.type == "class_declaration":
                entities.append(self._build_class(node, namespace, uses, file_path))

            elif node.type == "enum_declaration":
                entities.append(self._build_enum(node, namespace, uses, file_path))

        return entities

    def _descriptor(self, node, kind: EntityKind, namespace: str, uses: dict[str, str], file_path: str) -> EntityDescriptor:
        name = _text(self._child(node, "name", "name"))
        return EntityDescriptor(
            short_name=name,
            qualified_name=f"{namespace}\\{name}" if namespace else name,
            kind=kind,
            doc_summary=clean_doc_comment(self._preceding_docblock(node)),
            namespace=namespace,
            uses=uses,
            path=file_path,
        )

    def _build_class(self, node, namespace: str, uses: dict[str, str], file_path: str) -> EntityDescriptor:
        """Build an EntityDescriptor from a class_declaration node.

        Fields are public non-static properties plus public promoted
        constructor parameters, in source order.
        """
        entity = self._descriptor(node, EntityKind.RECORD, namespace, uses, file_path)

        body = self._child(node, "body", "declaration_list")
        if body is None:
            return entity

        constructor = None
        for member in body.children:
            if member.type == "method_declaration" and self._name(member).lower() == "__construct":
                constructor = member
                break
        constructor_doc = self._preceding_docblock(constructor) if constructor is not None else None

        for member in body.children:
            if member.type == "property_declaration":
                entity.fields.extend(self._property_fields(member, constructor_doc, uses))
            elif constructor is not None and member == constructor:
                entity.fields.extend(self._promoted_fields(member, constructor_doc, uses))

        return entity

    def _build_enum(self, node, namespace: str, uses: dict[str, str], file_path: str) -> EntityDescriptor:
        """Build an EntityDescriptor from an enum_declaration node."""
        entity = self._descriptor(node, EntityKind.ENUM, namespace, uses, file_path)

        body = self._child(node, "body", "enum_declaration_list")
        if body is None:
            return entity

        for member in body.children:
            if member.type != "enum_case":
                continue

            name_node = member.child_by_field_name("name")
            value_node = member.child_by_field_name("value")
            if name_node is None or value_node is None:
                name_node, value_node = self._enum_case_parts(member)
            if name_node is None:
                continue

            value = parse_literal(_text(value_node)) if value_node is not None else None
            entity.enum_members.append(EnumMember(name=_text(name_node), value=value))

        return entity

    def _enum_case_parts(self, node):
        """Find the name and value nodes of an enum_case by position."""
        name_node = None
        value_node = None
        seen_equals = False
        for child in node.children:
            if child.type == "name" and name_node is None:
                name_node = child
            elif child.type == "=":
                seen_equals = True
            elif seen_equals and child.is_named and value_node is None:
                value_node = child
        return name_node, value_node

    def _property_fields(self, node, constructor_doc: str | None, uses: dict[str, str]) -> list[FieldDescriptor]:
        """Extract fields from a property_declaration (one per property_element)."""
        modifiers = self._modifiers(node)
        if "static" in modifiers or not self._is_public(modifiers):
            return []

        type_node = self._type_node(node)
        docblock = self._preceding_docblock(node)
        excluded = self._has_exclude_attribute(node, uses)

        fields = []
        for element in node.children:
            if element.type != "property_element":
                continue
            variable = self._variable_name(element)
            if variable is None:
                continue

            annotation = extract_var_type(docblock) or extract_param_type(constructor_doc, variable)
            fields.append(self._field(variable, type_node, annotation, docblock, excluded))

        return fields

    def _promoted_fields(self, node, constructor_doc: str | None, uses: dict[str, str]) -> list[FieldDescriptor]:
        """Extract fields from public promoted constructor parameters."""
        parameters = self._child(node, "parameters", "formal_parameters")
        if parameters is None:
            return []

        fields = []
        for parameter in parameters.children:
            if parameter.type != "property_promotion_parameter":
                continue
            if not self._is_public(self._modifiers(parameter)):
                continue
            variable = self._variable_name(parameter)
            if variable is None:
                continue

            docblock = self._preceding_docblock(parameter)
            annotation = extract_var_type(docblock) or extract_param_type(constructor_doc, variable)
            fields.append(self._field(
                variable,
                self._type_node(parameter),
                annotation,
                docblock,
                self._has_exclude_attribute(parameter, uses),
            ))

        return fields

    def _field(self, name: str, type_node, annotation: str | None, docblock: str | None, excluded: bool) -> FieldDescriptor:
        declared_type, nullable = split_signature_type(_text(type_node) if type_node is not None else None)
        return FieldDescriptor(
            name=name,
            declared_type=declared_type,
            raw_annotation=annotation,
            is_nullable_by_signature=nullable,
            is_excluded=excluded,
            doc=clean_doc_comment(docblock),
        )

    def _name(self, node) -> str:
        name_node = node.child_by_field_name("name")
        return _text(name_node) if name_node else ""

    def _child(self, node, field_name: str, node_type: str):
        """Return a child by field name, falling back to the first child of a type."""
        child = node.child_by_field_name(field_name)
        if child is not None:
            return child
        for child in node.children:
            if child.type == node_type:
                return child
        return None

    def _modifiers(self, node) -> set[str]:
        return {_text(child).lower() for child in node.children if child.type.endswith("_modifier")}

    def _is_public(self, modifiers: set[str]) -> bool:
        # No visibility keyword (or `var`) means public
        return not modifiers & {"private", "protected"}

    def _type_node(self, node):
        type_node = node.child_by_field_name("type")
        if type_node is not None:
            return type_node
        for child in node.children:
            if child.type in TYPE_NODE_TYPES:
                return child
        return None

    def _variable_name(self, node) -> str | None:
        """Return the variable name (without ``$``) declared by a node."""
        for child in node.children:
            if child.type == "variable_name":
                return _text(child).lstrip("$")
            if child.type == "by_ref":
                return self._variable_name(child)
        return None

    def _preceding_docblock(self, node) -> str | None:
        """Return the ``/** */`` comment directly before a node, if any."""
        sibling = node.prev_named_sibling
        if sibling is not None and sibling.type == "comment":
            text = _text(sibling)
            if is_docblock(text):
                return text
        return None

    def _has_exclude_attribute(self, node, uses: dict[str, str]) -> bool:
        """Check for an ``#[Exclude]`` attribute, under any import alias."""
        for child in node.children:
            if child.type != "attribute_list":
                continue
            for name in self._attribute_names(child):
                if short_name(uses.get(name.lstrip("\\"), name)) == EXCLUDE_ATTRIBUTE:
                    return True
        return False

    def _attribute_names(self, node) -> list[str]:
        names = []
        for child in node.children:
            if child.type == "attribute":
                if child.named_children:
                    names.append(_text(child.named_children[0]))
            else:
                names.extend(self._attribute_names(child))
        return names
