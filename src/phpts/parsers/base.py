from abc import ABC, abstractmethod

from phpts.models import EntityDescriptor


class BaseParser(ABC):
    """Abstract base class for language-specific source model parsers."""

    @abstractmethod
    def extract_entities(self, source_code: str, file_path: str) -> list[EntityDescriptor]:
        """Extract all generatable entities (classes and enums) from source code.

        Args:
            source_code: The source code to parse
            file_path: Path to the file (for EntityDescriptor.path)

        Returns:
            List of EntityDescriptor objects in declaration order
        """
        pass
