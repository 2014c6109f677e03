"""Mapping of PHP type names to TypeScript type tokens."""

# PHP built-in name -> TypeScript token. Canonical names produced by the
# type parser ("integer", "any", ...) are included so both spellings map.
TYPE_MAP = {
    "string": "string",
    "int": "number",
    "integer": "number",
    "float": "number",
    "double": "number",
    "bool": "boolean",
    "boolean": "boolean",
    "true": "boolean",
    "false": "boolean",
    "array": "any[]",
    "mixed": "any",
    "object": "any",
    "any": "any",
    "void": "void",
    "null": "null",
    "list": "any[]",
    "iterable": "any[]",
    "non-empty-array": "any[]",
    "non-empty-list": "any[]",
    "positive-int": "number",
    "negative-int": "number",
    "non-negative-int": "number",
    "non-empty-string": "string",
    "numeric-string": "string",
    "class-string": "string",
    "array-key": "string | number",
    "scalar": "any",
    "callable": "any",
    "resource": "any",
}

# PHP built-in name -> canonical Primitive name used in parsed type trees.
CANONICAL_PRIMITIVES = {
    "string": "string",
    "int": "integer",
    "integer": "integer",
    "float": "float",
    "double": "float",
    "bool": "boolean",
    "boolean": "boolean",
    "true": "boolean",
    "false": "boolean",
    "array": "array",
    "mixed": "any",
    "object": "any",
    "any": "any",
    "void": "void",
    "null": "null",
    "list": "array",
    "iterable": "array",
    "non-empty-array": "array",
    "non-empty-list": "array",
    "positive-int": "integer",
    "negative-int": "integer",
    "non-negative-int": "integer",
    "non-empty-string": "string",
    "numeric-string": "string",
    "class-string": "string",
    "array-key": "array-key",
    "scalar": "any",
    "callable": "any",
    "resource": "any",
}

DATE_TIME_MARKER = "DateTime"

NULLABLE_SUFFIX = " | null"


def short_name(name: str) -> str:
    """Return the identifier after the last namespace separator.

    Examples:
        >>> short_name("App\\\\Dto\\\\AddressDTO")
        'AddressDTO'
        >>> short_name("AddressDTO")
        'AddressDTO'
    """
    return name.rstrip("\\").rsplit("\\", 1)[-1]


def is_date_time(name: str) -> bool:
    """True for DateTime, DateTimeImmutable, DateTimeInterface and friends."""
    return DATE_TIME_MARKER in name


def is_builtin(name: str) -> bool:
    """True when ``name`` is a PHP built-in type rather than a class reference."""
    return name.lower() in CANONICAL_PRIMITIVES


def canonical_primitive(name: str) -> str | None:
    """Return the canonical primitive name for ``name``, or None for classes.

    Date/time classes count as primitives and canonicalize to ``string``.
    """
    if is_date_time(name):
        return "string"
    return CANONICAL_PRIMITIVES.get(name.lower())


def map_primitive(name: str) -> str:
    """Map a PHP type name to a TypeScript token.

    Unknown names are assumed to be class or enum references and map to
    their short name.
    """
    if is_date_time(name):
        return "string"

    token = TYPE_MAP.get(name.lower())
    if token is not None:
        return token

    return short_name(name.lstrip("\\"))


def wrap_nullable(token: str) -> str:
    """Add the ``| null`` alternative to a TypeScript token.

    Idempotent, and ``any`` / ``null`` are returned unchanged.
    """
    if token in ("any", "null") or token.endswith(NULLABLE_SUFFIX):
        return token

    return token + NULLABLE_SUFFIX
