from dataclasses import asdict

from phpts.errors import EntityNotFoundError, PhpTsError
from phpts.models import (
    EntityDescriptor,
    EntityKind,
    EnumMember,
    ExtractionResult,
    FieldDescriptor,
    GenerationResult,
)


def test_field_descriptor_defaults():
    field = FieldDescriptor(name="metadata")

    assert field.declared_type == "mixed"
    assert field.raw_annotation is None
    assert field.is_nullable_by_signature is False
    assert field.is_excluded is False


def test_entity_descriptor_defaults_to_record():
    entity = EntityDescriptor(short_name="UserDTO", qualified_name="App\\Dto\\UserDTO")

    assert entity.kind == EntityKind.RECORD
    assert not entity.is_enum
    assert entity.fields == []
    assert entity.uses == {}


def test_enum_descriptor():
    entity = EntityDescriptor(
        short_name="UserStatus",
        qualified_name="App\\Dto\\UserStatus",
        kind=EntityKind.ENUM,
        enum_members=[EnumMember("ACTIVE", "active")],
    )

    assert entity.is_enum
    assert entity.enum_members[0].value == "active"


def test_entity_kind_is_string_valued():
    assert EntityKind.ENUM == "enum"
    assert asdict(EntityDescriptor("A", "A"))["kind"] == "record"


def test_extraction_result_defaults_are_independent():
    first = ExtractionResult()
    second = ExtractionResult()

    first.dependencies.append("AddressDTO")

    assert second.dependencies == []


def test_generation_result_is_a_mapping():
    result = GenerationResult()
    result["UserDTO"] = "export interface UserDTO {}"

    assert dict(result) == {"UserDTO": "export interface UserDTO {}"}
    assert result.unresolved == []
    assert result.collisions == []


def test_entity_not_found_error():
    error = EntityNotFoundError("App\\Dto\\MissingDTO")

    assert error.name == "App\\Dto\\MissingDTO"
    assert str(error) == "Entity not found: App\\Dto\\MissingDTO"
    assert isinstance(error, PhpTsError)
    assert isinstance(error, LookupError)


def test_entity_not_found_error_custom_message():
    error = EntityNotFoundError("UserDTO", "Class file not found: src/UserDTO.php")

    assert str(error) == "Class file not found: src/UserDTO.php"
