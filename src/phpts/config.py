"""Configuration management for phpts generation."""

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

CONFIG_FILE_NAME = ".phpts"


@dataclass
class GenerateConfig:
    """Defaults for the ``generate`` command.

    Attributes:
        output_dir: Directory the ``.ts`` files are written to.
        base_dir: Base directory for PSR-4 resolution. When set, the source
            argument is read as a namespace pattern instead of a path.
        namespace_prefix: Namespace prefix stripped before mapping a
            namespace onto ``base_dir``.
        add_ts_extension_to_imports: Write ``./User.ts`` instead of
            ``./User`` in import statements.
        generate_dependencies: Also generate every referenced class/enum.
    """
    output_dir: str = "./types"
    base_dir: str | None = None
    namespace_prefix: str | None = None
    add_ts_extension_to_imports: bool = False
    generate_dependencies: bool = True


def load_generate_config(root: Path | None = None) -> GenerateConfig:
    """Load generation defaults from the .phpts file in ``root``.

    Args:
        root: Directory containing the config file. If None, uses current directory.

    Returns:
        GenerateConfig object with loaded or default values.

    Notes:
        If .phpts doesn't exist or can't be parsed, returns default config.
        Unknown keys are ignored. Expected YAML structure:

        ```yaml
        generate:
          output_dir: ./frontend/src/types
          base_dir: src
          namespace_prefix: App
          add_ts_extension_to_imports: true
          generate_dependencies: true
        ```
    """
    if root is None:
        root = Path.cwd()

    config_path = root / CONFIG_FILE_NAME

    if not config_path.exists():
        return GenerateConfig()

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            return GenerateConfig()

        generate_config = data.get("generate", {})
        if not isinstance(generate_config, dict):
            return GenerateConfig()

        known = {f.name for f in fields(GenerateConfig)}
        return GenerateConfig(**{
            key: value for key, value in generate_config.items() if key in known
        })
    except (yaml.YAMLError, OSError, KeyError, TypeError, ValueError):
        # Return default config on any parsing errors
        return GenerateConfig()
