"""Locating PHP entities on disk.

``NamespaceResolver`` maps namespaces to files with the PSR-4 convention
(one class per file, namespace segments as directories under a base
directory, an optional namespace prefix stripped first). ``SourceIndex``
parses files on demand and serves as the entity loader for the closure
engine.
"""

import logging
from pathlib import Path

from phpts.errors import EntityNotFoundError
from phpts.models import EntityDescriptor
from phpts.parsers import get_parser_for_file

logger = logging.getLogger(__name__)

PHP_SUFFIX = ".php"


def find_php_files(path: Path, recursive: bool = True) -> list[Path]:
    """Find PHP files at or under ``path``, sorted for deterministic output."""
    if path.is_file():
        return [path] if path.suffix.lower() == PHP_SUFFIX else []
    if not path.is_dir():
        return []

    candidates = path.rglob("*") if recursive else path.glob("*")
    return sorted(p for p in candidates if p.is_file() and p.suffix.lower() == PHP_SUFFIX)


class NamespaceResolver:
    """Resolve namespaces and namespace patterns to PHP files (PSR-4)."""

    def __init__(self, base_dir: Path | str, namespace_prefix: str | None = None):
        """
        Args:
            base_dir: Directory the (prefix-stripped) namespace root maps to
            namespace_prefix: Namespace prefix to remove before mapping, e.g.
                ``App\\Tests`` with base dir ``tests``

        Raises:
            ValueError: If the base directory does not exist
        """
        self.base_dir = Path(base_dir)
        if not self.base_dir.is_dir():
            raise ValueError(f"Base directory does not exist: {base_dir}")
        self.namespace_prefix = namespace_prefix.strip("\\") if namespace_prefix else None

    def relative_namespace(self, namespace: str) -> str:
        """Remove the configured prefix from a namespace."""
        namespace = namespace.strip("\\")
        if not self.namespace_prefix:
            return namespace
        if namespace == self.namespace_prefix:
            return ""
        prefix = self.namespace_prefix + "\\"
        if namespace.startswith(prefix):
            return namespace[len(prefix):]
        return namespace

    def directory_path(self, namespace: str) -> Path:
        """Map a namespace to its directory, e.g. ``App\\Dto`` -> ``<base>/App/Dto``."""
        parts = [part for part in self.relative_namespace(namespace).split("\\") if part]
        return self.base_dir.joinpath(*parts)

    def file_path(self, qualified_name: str) -> Path:
        """Map a class name to its file, e.g. ``App\\Dto\\User`` -> ``<base>/App/Dto/User.php``."""
        parts = [part for part in self.relative_namespace(qualified_name).split("\\") if part]
        if not parts:
            raise ValueError(f"Not a class name: {qualified_name!r}")
        return self.base_dir.joinpath(*parts[:-1], parts[-1] + PHP_SUFFIX)

    def find_files(self, pattern: str) -> list[Path]:
        """Find the files matching a class name or namespace pattern.

        Args:
            pattern: ``App\\Dto\\UserDTO`` (one class), ``App\\Dto\\*``
                (direct children) or ``App\\Dto\\*\\*`` (recursive)

        Returns:
            Matching files; empty for a glob over a missing directory

        Raises:
            EntityNotFoundError: If a specific class has no file
        """
        pattern = pattern.strip().lstrip("\\")

        if "*" not in pattern:
            path = self.file_path(pattern)
            if not path.is_file():
                raise EntityNotFoundError(pattern, f"Class file not found: {path} for namespace: {pattern}")
            return [path]

        base, _, suffix = pattern.partition("*")
        if (base and not base.endswith("\\")) or suffix not in ("", "\\*"):
            logger.warning("Unsupported namespace pattern: %s", pattern)
            return []

        directory = self.directory_path(base.rstrip("\\"))
        return find_php_files(directory, recursive=suffix == "\\*")


class SourceIndex:
    """Parsed PHP entities keyed by qualified name.

    Files are parsed at most once. With a resolver, unknown names are looked
    up on disk through PSR-4 before giving up.
    """

    def __init__(self, resolver: NamespaceResolver | None = None):
        self.resolver = resolver
        self._entities: dict[str, EntityDescriptor] = {}
        self._files: dict[Path, list[EntityDescriptor]] = {}

    def parse_file(self, path: Path | str) -> list[EntityDescriptor]:
        """Parse one file and register its entities.

        Raises:
            ValueError: If the file type is not supported
            OSError: If the file cannot be read
        """
        path = Path(path).resolve()
        if path in self._files:
            return self._files[path]

        parser = get_parser_for_file(path)
        if parser is None:
            raise ValueError(f"Unsupported file type: {path}")

        entities = parser.extract_entities(path.read_text(encoding="utf-8"), str(path))
        self._files[path] = entities
        logger.debug("Parsed %s: %d entities", path, len(entities))

        for entity in entities:
            kept = self._entities.get(entity.qualified_name)
            if kept is not None:
                logger.warning("%s is declared in both %s and %s, keeping the first", entity.qualified_name, kept.path, path)
                continue
            self._entities[entity.qualified_name] = entity

        return entities

    def add_path(self, path: Path | str) -> list[str]:
        """Parse every PHP file at or under ``path``.

        Returns:
            Qualified names declared in those files, in file order
        """
        names = []
        for file_path in find_php_files(Path(path)):
            names.extend(entity.qualified_name for entity in self.parse_file(file_path))
        return names

    def resolve(self, pattern: str) -> list[str]:
        """Resolve a class name or namespace pattern to qualified names.

        Raises:
            ValueError: If the index has no resolver
            EntityNotFoundError: If a specific class has no file
        """
        if self.resolver is None:
            raise ValueError("Resolving namespace patterns requires a base directory")

        names = []
        for path in self.resolver.find_files(pattern):
            names.extend(entity.qualified_name for entity in self.parse_file(path))

        target = pattern.strip().lstrip("\\")
        if "*" not in pattern and target in names:
            return [target]
        return names

    def load(self, name: str) -> EntityDescriptor:
        """Return the entity with a qualified name.

        Raises:
            EntityNotFoundError: If no known or resolvable file declares it
        """
        name = name.strip().lstrip("\\")
        entity = self._entities.get(name)
        if entity is not None:
            return entity

        if self.resolver is not None and name:
            try:
                path = self.resolver.file_path(name)
            except ValueError:
                # The name is the namespace prefix itself
                raise EntityNotFoundError(name) from None
            if path.is_file():
                self.parse_file(path)
                entity = self._entities.get(name)
                if entity is not None:
                    return entity

        raise EntityNotFoundError(name)
