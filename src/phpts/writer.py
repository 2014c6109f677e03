"""Writing generated TypeScript to disk."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def typescript_file_path(output_dir: Path, name: str) -> Path:
    return output_dir / f"{name}.ts"


def write_typescript_files(output_dir: Path | str, files: dict[str, str]) -> list[Path]:
    """Write each generated entity to ``<output_dir>/<name>.ts``.

    The output directory is created if needed and existing files are
    overwritten.

    Args:
        output_dir: Target directory
        files: Mapping of entity short name to TypeScript source

    Returns:
        Paths written, in mapping order
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, content in files.items():
        path = typescript_file_path(output_dir, name)
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)
        written.append(path)

    return written
