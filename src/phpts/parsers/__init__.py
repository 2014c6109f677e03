from pathlib import Path

from phpts.parsers.base import BaseParser
from phpts.parsers.php_parser import PhpParser

PARSERS_BY_SUFFIX = {
    ".php": PhpParser,
}

# Parser instances are reused for every file with the same suffix
_parsers: dict[str, BaseParser] = {}


def get_parser_for_file(file_path: Path) -> BaseParser | None:
    """Return a parser for the file's language, or None if unsupported."""
    suffix = file_path.suffix.lower()
    parser_class = PARSERS_BY_SUFFIX.get(suffix)
    if parser_class is None:
        return None
    if suffix not in _parsers:
        _parsers[suffix] = parser_class()
    return _parsers[suffix]
