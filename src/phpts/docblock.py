"""PHPDoc docblock helpers.

Cleans docblocks into TSDoc-friendly text and pulls ``@var`` / ``@param``
type expressions out of them. Type expressions can span several lines
(multi-line shaped arrays), so they are read with bracket balancing rather
than a single regular expression.
"""

import re

# Tags that still mean something in TSDoc
PRESERVED_TAGS = ("@deprecated", "@see", "@link", "@example")

_TYPE_START = re.compile(r"[A-Za-z_\\?({]")
_IDENTIFIER_CHAR = re.compile(r"\w")


def docblock_lines(raw: str) -> list[str]:
    """Strip comment delimiters and leading asterisks from each line."""
    lines = []
    for line in raw.splitlines():
        line = line.strip()
        if line.startswith("/**"):
            line = line[3:]
        elif line.startswith("/*"):
            line = line[2:]
        if line.endswith("*/"):
            line = line[:-2]
        line = re.sub(r"^\*+\s?", "", line.strip())
        lines.append(line.strip())
    return lines


def is_docblock(raw: str) -> bool:
    return raw.lstrip().startswith("/**")


def read_type_expression(text: str, start: int = 0) -> tuple[str, int] | None:
    """Read one type expression from ``text`` starting at ``start``.

    Whitespace ends the expression at bracket depth zero, except around a
    ``|`` so that ``int | null`` is read whole.

    Returns:
        Tuple of (expression, end offset), or None if no balanced
        expression starts there.
    """
    i = start
    length = len(text)
    while i < length and text[i].isspace():
        i += 1

    begin = i
    depth = 0
    while i < length:
        char = text[i]
        if char in "{<(":
            depth += 1
        elif char in "}>)":
            if depth == 0:
                break
            depth -= 1
        elif char.isspace() and depth == 0:
            j = i
            while j < length and text[j].isspace():
                j += 1
            previous = text[:i].rstrip()[-1:]
            if previous == "|" or text[j:j + 1] == "|":
                i = j
                continue
            break
        i += 1

    if depth != 0:
        return None

    expression = text[begin:i].strip()
    if not expression or not _TYPE_START.match(expression):
        return None
    return expression, i


def _tag_types(body: str, tag: str):
    """Yield (type expression, end offset) for each occurrence of ``tag``."""
    for match in re.finditer(re.escape(tag) + r"(?![\w-])", body):
        found = read_type_expression(body, match.end())
        if found is not None:
            yield found


def extract_var_type(raw: str | None) -> str | None:
    """Return the type of the first ``@var`` tag of a docblock."""
    if not raw:
        return None

    body = "\n".join(docblock_lines(raw))
    for expression, _ in _tag_types(body, "@var"):
        return expression
    return None


def extract_param_type(raw: str | None, param_name: str) -> str | None:
    """Return the type of ``@param <type> $param_name`` in a docblock."""
    if not raw:
        return None

    body = "\n".join(docblock_lines(raw))
    variable = "$" + param_name
    for expression, end in _tag_types(body, "@param"):
        rest = body[end:].lstrip()
        if rest.startswith("..."):
            rest = rest[3:]
        if rest.startswith(variable) and not _IDENTIFIER_CHAR.match(rest[len(variable):len(variable) + 1]):
            return expression
    return None


def clean_doc_comment(raw: str | None) -> str | None:
    """Turn a PHPDoc block into plain documentation text.

    Tag lines are dropped except those listed in ``PRESERVED_TAGS``. For
    ``@var`` lines the type is dropped and any trailing description is kept.

    Returns:
        Cleaned text, or None if nothing remains.
    """
    if not raw:
        return None

    body = _strip_var_types("\n".join(docblock_lines(raw)))

    cleaned = []
    for line in body.splitlines():
        line = line.strip()
        if not line:
            continue
        if line.startswith("@") and not line.startswith(PRESERVED_TAGS):
            continue
        cleaned.append(line)

    return "\n".join(cleaned) or None


def _strip_var_types(body: str) -> str:
    """Remove ``@var <type> [$name]`` prefixes, keeping any description."""
    pieces = []
    last = 0
    for match in re.finditer(r"@var(?![\w-])", body):
        if match.start() < last:
            continue
        found = read_type_expression(body, match.end())
        end = found[1] if found is not None else match.end()
        variable = re.match(r"[ \t]*\$\w+", body[end:])
        if variable:
            end += variable.end()
        pieces.append(body[last:match.start()])
        last = end
    pieces.append(body[last:])
    return "".join(pieces)
