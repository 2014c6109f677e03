"""Per-entity type rendering and dependency discovery.

For every field of a class this module decides the TypeScript type token
and collects the other classes / enums the field refers to, at any depth
of a shaped or generic array annotation.
"""

import re
from dataclasses import replace

from phpts.models import EntityDescriptor, ExtractionResult, FieldDescriptor, RenderableField
from phpts.type_mapper import is_builtin, is_date_time, map_primitive, short_name, wrap_nullable
from phpts.type_nodes import (
    Array,
    Dictionary,
    Named,
    Nullable,
    Primitive,
    Record,
    TypeNode,
    is_nullable,
    nullable,
)
from phpts.type_parser import parse


def field_type_node(field: FieldDescriptor) -> TypeNode:
    """Parse the authoritative type of a field.

    The docblock annotation wins over the declared PHP type because it is
    usually more specific (``array`` vs ``array<AddressDTO>``). Signature
    nullability is folded in unless the annotation already carries it.
    """
    source = field.raw_annotation if field.raw_annotation else field.declared_type
    node = parse(source)

    if field.is_nullable_by_signature and not is_nullable(node):
        node = nullable(node)

    return node


_IDENTIFIER = re.compile(r"[A-Za-z_\$][\w\$]*")


def property_key(key: str) -> str:
    """Quote a shaped array key unless it is a valid TypeScript identifier or index."""
    if _IDENTIFIER.fullmatch(key) or key.isdigit():
        return key
    return "'" + key.replace("\\", "\\\\").replace("'", "\\'") + "'"


def render_type(node: TypeNode) -> str:
    """Render a TypeNode as a TypeScript type expression."""
    if isinstance(node, (Primitive, Named)):
        return map_primitive(node.name)

    if isinstance(node, Nullable):
        return wrap_nullable(render_type(node.inner))

    if isinstance(node, Array):
        item = render_type(node.item)
        if isinstance(node.item, Nullable) or (isinstance(node.item, Primitive) and " | " in item):
            item = f"({item})"
        return f"{item}[]"

    if isinstance(node, Dictionary):
        return f"Record<{render_type(node.key)}, {render_type(node.value)}>"

    if isinstance(node, Record):
        if not node.entries:
            return "{}"
        entries = [
            f"{property_key(entry.key)}{'?' if entry.optional else ''}: {render_type(entry.type)}"
            for entry in node.entries
        ]
        return "{ " + "; ".join(entries) + " }"

    raise TypeError(f"Unknown type node: {node!r}")


# Names that refer to the class they appear in
SELF_REFERENCES = frozenset({"self", "static"})


def resolve_self_references(node: TypeNode, owner: str) -> TypeNode:
    """Replace ``self`` and ``static`` references with ``Named(owner)``."""
    if isinstance(node, Named):
        return Named(owner) if node.name.lower() in SELF_REFERENCES else node
    if isinstance(node, Nullable):
        return replace(node, inner=resolve_self_references(node.inner, owner))
    if isinstance(node, Array):
        return replace(node, item=resolve_self_references(node.item, owner))
    if isinstance(node, Dictionary):
        return replace(
            node,
            key=resolve_self_references(node.key, owner),
            value=resolve_self_references(node.value, owner),
        )
    if isinstance(node, Record):
        entries = tuple(replace(entry, type=resolve_self_references(entry.type, owner)) for entry in node.entries)
        return replace(node, entries=entries)
    return node


def iter_named(node: TypeNode):
    """Yield every Named leaf of a type tree, depth first, in source order."""
    if isinstance(node, Named):
        yield node
    elif isinstance(node, Nullable):
        yield from iter_named(node.inner)
    elif isinstance(node, Array):
        yield from iter_named(node.item)
    elif isinstance(node, Dictionary):
        yield from iter_named(node.key)
        yield from iter_named(node.value)
    elif isinstance(node, Record):
        for entry in node.entries:
            yield from iter_named(entry.type)


def collect_dependencies(node: TypeNode) -> dict[str, str]:
    """Return referenced class names of a type tree.

    Returns:
        Mapping of short name to the name as written, in first-seen order.
        Built-in and date/time names are skipped.
    """
    dependencies: dict[str, str] = {}
    for named in iter_named(node):
        if is_builtin(named.name) or is_date_time(named.name):
            continue
        dependencies.setdefault(short_name(named.name), named.name)
    return dependencies


def extract(entity: EntityDescriptor) -> ExtractionResult:
    """Compute renderable fields and the dependency set of one entity.

    Enums are not walked: their dependency set is always empty and their
    members are passed through unchanged.
    """
    if entity.is_enum:
        return ExtractionResult(enum_members=list(entity.enum_members))

    result = ExtractionResult()
    for field in entity.fields:
        if field.is_excluded:
            continue

        node = resolve_self_references(field_type_node(field), entity.qualified_name)
        result.fields.append(RenderableField(name=field.name, type=render_type(node), doc=field.doc))

        for name, written in collect_dependencies(node).items():
            if name not in result.written_names:
                result.dependencies.append(name)
                result.written_names[name] = written

    return result
