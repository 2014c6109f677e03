"""phpts - Generate TypeScript declarations from PHP DTO classes."""

try:
    from importlib.metadata import version

    __version__ = version("phpts")
except Exception:
    __version__ = "0.0.0.dev0+local"  # Fallback for development
