"""Recursive-descent parser for PHPDoc type expressions.

Turns informal docblock types into :mod:`phpts.type_nodes` trees:

- ``array{id: int, name?: string}`` and ``{...}`` -> ``Record``
- ``array<T>`` -> ``Array``, ``array<K, V>`` -> ``Dictionary``
- ``T[]`` -> ``Array``
- ``?T`` and ``T|null`` -> ``Nullable``
- bare names -> ``Primitive`` or ``Named``

Parsing never raises: anything outside the grammar (unbalanced brackets,
trailing text, intersection types) degrades to ``any`` so one odd docblock
cannot abort generation of a whole class.

Unions with more than one non-null member are reduced to their first
non-null member (``int|string`` parses as ``int``). This is a known
approximation, not a faithful union type.
"""

import logging

from phpts.type_mapper import canonical_primitive
from phpts.type_nodes import (
    ANY,
    NULL,
    Array,
    Dictionary,
    Named,
    Primitive,
    Record,
    RecordEntry,
    TypeNode,
    nullable,
)

logger = logging.getLogger(__name__)

# Names that accept a shape ``{...}`` or generic ``<...>`` suffix.
ARRAY_KEYWORDS = frozenset({"array", "list", "iterable", "non-empty-array", "non-empty-list"})


class _MalformedAnnotation(Exception):
    """The annotation does not match the type grammar."""


class _TypeExpressionParser:
    """Single-use parser over one annotation string with a position cursor."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def parse(self) -> TypeNode:
        node = self._union()
        self._skip_whitespace()
        if self.pos != len(self.text):
            raise _MalformedAnnotation(f"unexpected {self.text[self.pos]!r} at offset {self.pos}")
        return node

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self) -> str:
        self._skip_whitespace()
        if self.pos < len(self.text):
            return self.text[self.pos]
        return ""

    def _accept(self, token: str) -> bool:
        self._skip_whitespace()
        if self.text.startswith(token, self.pos):
            self.pos += len(token)
            return True
        return False

    def _expect(self, token: str) -> None:
        if not self._accept(token):
            raise _MalformedAnnotation(f"expected {token!r} at offset {self.pos}")

    def _union(self) -> TypeNode:
        members = [self._postfix()]
        while self._accept("|"):
            members.append(self._postfix())

        non_null = [member for member in members if member != NULL]
        if not non_null:
            return NULL

        if len(non_null) > 1:
            logger.debug("Union in %r reduced to its first non-null member", self.text)

        node = non_null[0]
        if len(non_null) < len(members):
            node = nullable(node)
        return node

    def _postfix(self) -> TypeNode:
        if self._accept("?"):
            return nullable(self._postfix())

        node = self._primary()
        while self._accept("[]"):
            node = Array(node)
        return node

    def _primary(self) -> TypeNode:
        char = self._peek()
        if char == "{":
            return self._shape()
        if char == "(":
            self.pos += 1
            node = self._union()
            self._expect(")")
            return node

        name = self._identifier()
        if name.lower() in ARRAY_KEYWORDS:
            following = self._peek()
            if following == "{":
                return self._shape()
            if following == "<":
                return self._generic()

        name = name.lstrip("\\")
        primitive = canonical_primitive(name)
        if primitive is not None:
            return Primitive(primitive)
        return Named(name)

    def _identifier(self) -> str:
        self._skip_whitespace()
        start = self.pos
        while self.pos < len(self.text) and (self.text[self.pos].isalnum() or self.text[self.pos] in "_\\-"):
            self.pos += 1
        if start == self.pos:
            found = self.text[self.pos] if self.pos < len(self.text) else "end of input"
            raise _MalformedAnnotation(f"expected a type name at offset {self.pos}, found {found!r}")
        return self.text[start:self.pos]

    def _generic(self) -> TypeNode:
        self._expect("<")
        params = [self._union()]
        while self._accept(","):
            params.append(self._union())
        self._expect(">")

        if len(params) == 1:
            return Array(params[0])
        if len(params) == 2:
            return Dictionary(params[0], params[1])
        raise _MalformedAnnotation(f"generic array takes one or two parameters, got {len(params)}")

    def _shape(self) -> TypeNode:
        self._expect("{")
        entries: dict[str, RecordEntry] = {}

        if self._accept("}"):
            return Record()

        while True:
            key = self._shape_key()
            # Accepts both "name?: T" and "name ?: T"
            optional = self._accept("?")
            self._expect(":")
            value = self._union()

            if key in entries:
                logger.warning("Shaped array key %r declared twice in %r, keeping the last type", key, self.text)
            entries[key] = RecordEntry(key=key, type=value, optional=optional)

            if self._accept(","):
                if self._accept("}"):
                    break
                continue
            self._expect("}")
            break

        return Record(tuple(entries.values()))

    def _shape_key(self) -> str:
        quote = self._peek()
        if quote in ("'", '"'):
            end = self.text.find(quote, self.pos + 1)
            if end == -1:
                raise _MalformedAnnotation(f"unterminated key at offset {self.pos}")
            key = self.text[self.pos + 1:end]
            self.pos = end + 1
            return key
        return self._identifier()


def parse(annotation: str | None) -> TypeNode:
    """Parse a PHPDoc type expression into a TypeNode.

    Args:
        annotation: Type expression, e.g. ``array{id: int, tags?: string[]}``

    Returns:
        The normalized TypeNode, or ``Primitive('any')`` when the expression
        is empty or not recognized.
    """
    text = annotation.strip() if annotation else ""
    if not text:
        return ANY

    try:
        return _TypeExpressionParser(text).parse()
    except (_MalformedAnnotation, RecursionError) as e:
        logger.debug("Unrecognized type annotation %r (%s), using any", annotation, e)
        return ANY
