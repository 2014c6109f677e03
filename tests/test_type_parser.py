"""Tests for the PHPDoc type expression parser."""

import logging

import pytest

from phpts.type_nodes import (
    ANY,
    NULL,
    Array,
    Dictionary,
    Named,
    Nullable,
    Primitive,
    Record,
    RecordEntry,
)
from phpts.type_parser import parse


class TestPrimitives:
    """Tests for bare type names."""

    @pytest.mark.parametrize("annotation,expected", [
        ("int", "integer"),
        ("integer", "integer"),
        ("string", "string"),
        ("float", "float"),
        ("double", "float"),
        ("bool", "boolean"),
        ("true", "boolean"),
        ("array", "array"),
        ("list", "array"),
        ("positive-int", "integer"),
        ("non-empty-string", "string"),
        ("void", "void"),
    ])
    def test_builtin_names_are_canonicalized(self, annotation, expected):
        assert parse(annotation) == Primitive(expected)

    def test_builtin_names_are_case_insensitive(self):
        assert parse("Int") == Primitive("integer")

    def test_mixed_is_any(self):
        assert parse("mixed") == ANY

    def test_null_alone(self):
        assert parse("null") == NULL

    def test_date_time_classes_are_strings(self):
        assert parse("DateTimeImmutable") == Primitive("string")
        assert parse("\\DateTimeInterface") == Primitive("string")

    def test_class_name(self):
        assert parse("AddressDTO") == Named("AddressDTO")

    def test_leading_backslash_is_stripped(self):
        assert parse("\\App\\Dto\\AddressDTO") == Named("App\\Dto\\AddressDTO")

    def test_surrounding_whitespace_is_ignored(self):
        assert parse("  string  ") == Primitive("string")


class TestNullable:
    """Tests for ?T and T|null."""

    def test_question_mark_prefix(self):
        assert parse("?string") == Nullable(Primitive("string"))

    def test_union_with_null(self):
        assert parse("string|null") == Nullable(Primitive("string"))

    def test_null_first(self):
        assert parse("null|AddressDTO") == Nullable(Named("AddressDTO"))

    def test_spaces_around_pipe(self):
        assert parse("int | null") == Nullable(Primitive("integer"))

    def test_nullable_is_not_applied_twice(self):
        assert parse("?string|null") == Nullable(Primitive("string"))

    def test_nullable_any_stays_any(self):
        assert parse("?mixed") == ANY
        assert parse("mixed|null") == ANY

    def test_union_keeps_first_non_null_member(self):
        assert parse("int|string") == Primitive("integer")
        assert parse("int|string|null") == Nullable(Primitive("integer"))


class TestArrays:
    """Tests for T[] and generic arrays."""

    def test_bracket_suffix(self):
        assert parse("AddressDTO[]") == Array(Named("AddressDTO"))

    def test_nested_bracket_suffix(self):
        assert parse("int[][]") == Array(Array(Primitive("integer")))

    def test_generic_one_parameter(self):
        assert parse("array<AddressDTO>") == Array(Named("AddressDTO"))

    def test_list_generic(self):
        assert parse("list<int>") == Array(Primitive("integer"))

    def test_generic_two_parameters(self):
        assert parse("array<string, int>") == Dictionary(Primitive("string"), Primitive("integer"))

    def test_generic_with_array_suffix(self):
        assert parse("array<int>[]") == Array(Array(Primitive("integer")))

    def test_nullable_generic(self):
        assert parse("array<string>|null") == Nullable(Array(Primitive("string")))

    def test_array_of_nullable(self):
        assert parse("array<?int>") == Array(Nullable(Primitive("integer")))

    def test_grouped_union_array(self):
        assert parse("(int|null)[]") == Array(Nullable(Primitive("integer")))

    def test_generic_value_can_be_a_shape(self):
        node = parse("array<string, array{id: int}>")

        assert node == Dictionary(
            Primitive("string"),
            Record((RecordEntry("id", Primitive("integer")),))
        )


class TestShapes:
    """Tests for shaped arrays."""

    def test_simple_shape(self):
        node = parse("array{id: int, name: string}")

        assert node == Record((
            RecordEntry("id", Primitive("integer")),
            RecordEntry("name", Primitive("string")),
        ))

    def test_optional_key(self):
        node = parse("array{id: int, name?: string}")

        assert node.entries[0].optional is False
        assert node.entries[1].optional is True

    def test_optional_key_with_space_before_marker(self):
        node = parse("array{name ?: string}")

        assert node == Record((RecordEntry("name", Primitive("string"), optional=True),))

    def test_bare_braces(self):
        assert parse("{id: int}") == Record((RecordEntry("id", Primitive("integer")),))

    def test_empty_shape(self):
        assert parse("array{}") == Record()

    def test_trailing_comma(self):
        assert parse("array{id: int,}") == Record((RecordEntry("id", Primitive("integer")),))

    def test_multiline_shape(self):
        node = parse("array{\n    id: int,\n    email: string|null\n}")

        assert [entry.key for entry in node.entries] == ["id", "email"]
        assert node.entries[1].type == Nullable(Primitive("string"))

    def test_quoted_keys(self):
        node = parse("array{'first-name': string, \"last name\": string}")

        assert [entry.key for entry in node.entries] == ["first-name", "last name"]

    def test_nested_shapes(self):
        node = parse("array{user: array{id: int, name: string}, meta: array{created: string}}")

        assert [entry.key for entry in node.entries] == ["user", "meta"]
        assert [entry.key for entry in node.entries[0].type.entries] == ["id", "name"]
        assert node.entries[1].type == Record((RecordEntry("created", Primitive("string")),))

    def test_shape_values_keep_class_names(self):
        node = parse("array{user: UserDTO, tags: string[]}")

        assert node.entries[0].type == Named("UserDTO")
        assert node.entries[1].type == Array(Primitive("string"))

    def test_duplicate_key_keeps_last_type(self, caplog):
        with caplog.at_level(logging.WARNING, logger="phpts.type_parser"):
            node = parse("array{id: int, name: string, id: string}")

        assert [entry.key for entry in node.entries] == ["id", "name"]
        assert node.entries[0].type == Primitive("string")
        assert "declared twice" in caplog.text

    def test_nullable_shape(self):
        node = parse("?array{id: int}")

        assert node == Nullable(Record((RecordEntry("id", Primitive("integer")),)))


class TestMalformed:
    """Unrecognized expressions degrade to any instead of raising."""

    @pytest.mark.parametrize("annotation", [
        "",
        "   ",
        "array{id: int",
        "array<int",
        "array<int, string, bool>",
        "array{int, string}",
        "Foo&Bar",
        "int string",
        "|",
    ])
    def test_malformed_is_any(self, annotation):
        assert parse(annotation) == ANY

    def test_none_is_any(self):
        assert parse(None) == ANY

    def test_deep_nesting_does_not_raise(self):
        annotation = "array<" * 2000 + "int" + ">" * 2000

        assert parse(annotation) == ANY
