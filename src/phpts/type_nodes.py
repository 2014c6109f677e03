"""Normalized representation of a parsed PHPDoc type expression.

A type expression parses into a small tree of frozen dataclasses:

- ``Primitive``: a built-in scalar (``string``, ``integer``, ``float``,
  ``boolean``, ``array``, ``array-key``, ``any``, ``void``, ``null``)
- ``Named``: a reference to another class or enum
- ``Array``: a homogeneous list
- ``Record``: a shaped array with ordered, uniquely keyed entries
- ``Dictionary``: a key/value map
- ``Nullable``: any of the above that also admits ``null``

``Nullable`` nodes should be created through :func:`nullable`, which keeps
nullability idempotent and never wraps ``any``.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Primitive:
    """A built-in type, stored under its canonical name."""
    name: str


@dataclass(frozen=True)
class Named:
    """A class or enum reference, as written (possibly namespace qualified)."""
    name: str


@dataclass(frozen=True)
class Array:
    """A list of ``item`` values."""
    item: "TypeNode"


@dataclass(frozen=True)
class RecordEntry:
    """One key of a shaped array."""
    key: str
    type: "TypeNode"
    optional: bool = False


@dataclass(frozen=True)
class Record:
    """A shaped array: ``array{id: int, name?: string}``."""
    entries: tuple[RecordEntry, ...] = ()


@dataclass(frozen=True)
class Dictionary:
    """A two-parameter generic array: ``array<K, V>``."""
    key: "TypeNode"
    value: "TypeNode"


@dataclass(frozen=True)
class Nullable:
    """A type that also admits ``null``. Build with :func:`nullable`."""
    inner: "TypeNode"


TypeNode = Primitive | Named | Array | Record | Dictionary | Nullable

ANY = Primitive("any")
NULL = Primitive("null")


def nullable(node: TypeNode) -> TypeNode:
    """Wrap ``node`` in ``Nullable`` unless that would be redundant.

    ``any`` already admits null, a ``Nullable`` is already nullable and
    ``null`` itself is left alone.
    """
    if isinstance(node, Nullable) or node == ANY or node == NULL:
        return node
    return Nullable(node)


def is_nullable(node: TypeNode) -> bool:
    """True when ``node`` admits null without further wrapping."""
    return isinstance(node, Nullable) or node == ANY or node == NULL
