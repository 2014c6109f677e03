from dataclasses import dataclass, field
from enum import Enum


class EntityKind(str, Enum):
    """Kind of generatable PHP declaration."""
    RECORD = "record"
    ENUM = "enum"


@dataclass
class FieldDescriptor:
    """One public property of a PHP class."""
    name: str
    declared_type: str = "mixed"  # Type from the PHP signature, "mixed" if untyped
    raw_annotation: str | None = None  # @var / @param type expression, None if absent
    is_nullable_by_signature: bool = False
    is_excluded: bool = False  # Marked with #[Exclude]
    doc: str | None = None  # Cleaned docblock text for the generated field


@dataclass
class EnumMember:
    """One enum case. ``value`` is None for pure (non-backed) enums."""
    name: str
    value: str | int | None = None


@dataclass
class EntityDescriptor:
    """A PHP class or enum that can be generated as one TypeScript file."""
    short_name: str
    qualified_name: str
    kind: EntityKind = EntityKind.RECORD
    fields: list[FieldDescriptor] = field(default_factory=list)
    enum_members: list[EnumMember] = field(default_factory=list)
    doc_summary: str | None = None
    namespace: str = ""  # Declaring namespace, "" for the global namespace
    uses: dict[str, str] = field(default_factory=dict)  # `use` alias -> qualified name
    path: str | None = None  # Source file, informational only

    @property
    def is_enum(self) -> bool:
        return self.kind is EntityKind.ENUM


@dataclass
class RenderableField:
    """A field ready for rendering: name, TypeScript type token and docs."""
    name: str
    type: str
    doc: str | None = None


@dataclass
class ExtractionResult:
    """Per-entity output of the dependency extractor."""
    fields: list[RenderableField] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)  # Short names, first-seen order
    written_names: dict[str, str] = field(default_factory=dict)  # Short name -> name as written
    enum_members: list[EnumMember] = field(default_factory=list)


class GenerationResult(dict):
    """Mapping of entity short name to generated TypeScript.

    Besides the mapping itself, records the dependency names that could not
    be loaded (``unresolved``) and the short-name collisions that were
    skipped (``collisions``, as ``(short_name, kept, dropped)`` qualified
    name triples).
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.unresolved: list[str] = []
        self.collisions: list[tuple[str, str, str]] = []
