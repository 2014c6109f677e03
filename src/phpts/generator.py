"""Entry points for generating TypeScript from PHP entities."""

from phpts.closure import generate_closure, generate_one
from phpts.models import GenerationResult
from phpts.renderer import TypeScriptRenderer
from phpts.resolver import NamespaceResolver, SourceIndex


class Generator:
    """Generates TypeScript for entities known to a SourceIndex.

    Example:
        >>> index = SourceIndex()
        >>> index.add_path("src/Dto")  # doctest: +SKIP
        >>> Generator(index).generate_closure("App\\\\Dto\\\\UserDTO")  # doctest: +SKIP
    """

    def __init__(self, index: SourceIndex, renderer: TypeScriptRenderer | None = None):
        self.index = index
        self.renderer = renderer or TypeScriptRenderer()

    @classmethod
    def for_base_dir(
        cls,
        base_dir,
        namespace_prefix: str | None = None,
        add_ts_extension_to_imports: bool = False
    ) -> "Generator":
        """Build a generator that resolves classes through PSR-4 under ``base_dir``."""
        index = SourceIndex(NamespaceResolver(base_dir, namespace_prefix))
        return cls(index, TypeScriptRenderer(add_ts_extension_to_imports))

    def generate_one(self, name: str) -> str:
        """Generate TypeScript for one class or enum, without its dependencies."""
        return generate_one(name, self.index.load, self.renderer)

    def generate_closure(self, name: str) -> GenerationResult:
        """Generate TypeScript for a class or enum and everything it references."""
        return generate_closure(name, self.index.load, self.renderer)
