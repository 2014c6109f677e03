"""TypeScript output for extracted entities.

Interfaces and enums are rendered from the Jinja2 templates in
``phpts/templates``. Text that needs escaping (JSDoc bodies, enum values) is
prepared by the filters defined here.
"""

from jinja2 import Environment, PackageLoader

from phpts.models import EntityDescriptor, EnumMember, ExtractionResult

INDENT = "  "

INTERFACE_TEMPLATE = "interface.ts.jinja"
ENUM_TEMPLATE = "enum.ts.jinja"


def format_doc_comment(doc: str | None, indent: str = "") -> list[str]:
    """Format documentation text as JSDoc comment lines."""
    if not doc:
        return []

    lines = [f"{indent}/**"]
    for line in doc.splitlines():
        line = line.replace("*/", "*\\/").rstrip()
        lines.append(f"{indent} * {line}" if line else f"{indent} *")
    lines.append(f"{indent} */")
    return lines


def format_enum_value(member: EnumMember) -> str:
    """Render an enum case value: strings quoted, integers bare.

    Pure enum cases have no value and use their own name as a string.
    """
    value = member.name if member.value is None else member.value
    if isinstance(value, int):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def create_environment() -> Environment:
    """Build the template environment.

    Output is TypeScript, not HTML, so autoescaping stays off.
    """
    environment = Environment(
        loader=PackageLoader("phpts", "templates"),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    environment.filters["doc_comment"] = format_doc_comment
    environment.filters["enum_value"] = format_enum_value
    return environment


class TypeScriptRenderer:
    """Renders one entity as the contents of a ``<ShortName>.ts`` file."""

    def __init__(self, add_ts_extension_to_imports: bool = False, environment: Environment | None = None):
        self.add_ts_extension_to_imports = add_ts_extension_to_imports
        self.environment = environment or create_environment()

    def __call__(self, entity: EntityDescriptor, extraction: ExtractionResult) -> str:
        return self.render(entity, extraction)

    def render(self, entity: EntityDescriptor, extraction: ExtractionResult) -> str:
        if entity.is_enum:
            return self.render_enum(entity, extraction.enum_members)
        return self.render_interface(entity, extraction)

    def render_interface(self, entity: EntityDescriptor, extraction: ExtractionResult) -> str:
        template = self.environment.get_template(INTERFACE_TEMPLATE)
        return template.render(
            entity_name=entity.short_name,
            doc=entity.doc_summary,
            imports=[name for name in extraction.dependencies if name != entity.short_name],
            extension=".ts" if self.add_ts_extension_to_imports else "",
            fields=extraction.fields,
            indent=INDENT,
        )

    def render_enum(self, entity: EntityDescriptor, members: list[EnumMember]) -> str:
        template = self.environment.get_template(ENUM_TEMPLATE)
        return template.render(
            entity_name=entity.short_name,
            doc=entity.doc_summary,
            members=members,
            indent=INDENT,
        )
