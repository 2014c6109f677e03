"""Exceptions raised by phpts."""


class PhpTsError(Exception):
    """Base class for phpts errors."""


class EntityNotFoundError(PhpTsError, LookupError):
    """Raised by an entity loader when no entity exists under a name."""

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f"Entity not found: {name}")
