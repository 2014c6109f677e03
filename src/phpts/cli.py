import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from phpts import __version__
from phpts.config import load_generate_config
from phpts.errors import EntityNotFoundError
from phpts.extractor import render_type
from phpts.generator import Generator
from phpts.renderer import TypeScriptRenderer
from phpts.resolver import NamespaceResolver, SourceIndex, find_php_files
from phpts.type_parser import parse
from phpts.writer import write_typescript_files

app = typer.Typer(
    help="phpts - generate TypeScript interfaces and enums from PHP DTO classes",
    no_args_is_help=True,
)

console = Console()


def _index_source_path(source_path: Path, index: SourceIndex) -> list[str]:
    """Parse every PHP file under a path, warning about files that fail."""
    names = []
    for file_path in find_php_files(source_path):
        try:
            names.extend(entity.qualified_name for entity in index.parse_file(file_path))
        except (OSError, ValueError) as e:
            console.print(f"[yellow]Warning:[/yellow] Error processing {escape(str(file_path))}: {escape(str(e))}")
    return names


@app.command()
def generate(
    source: str = typer.Argument(
        ...,
        help="Source directory or file containing PHP classes, or a namespace pattern when --base-dir is set",
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output directory for TypeScript files [default: ./types]"
    ),
    no_dependencies: bool = typer.Option(
        False, "--no-dependencies", help="Do not generate referenced classes and enums"
    ),
    add_ts_extension_to_imports: bool = typer.Option(
        False, "--add-ts-extension-to-imports", help="Import from './User.ts' instead of './User'"
    ),
    base_dir: Optional[str] = typer.Option(
        None, "--base-dir", "-b", help="Base directory for PSR-4 namespace resolution (e.g. src)"
    ),
    namespace_prefix: Optional[str] = typer.Option(
        None, "--namespace-prefix", "-p", help="Namespace prefix removed when mapping to file paths"
    ),
):
    """Generate TypeScript files from PHP classes and enums.

    Examples:
        phpts generate src/Dto -o frontend/types
        phpts generate 'App\\Dto\\*' --base-dir src --namespace-prefix App
    """
    config = load_generate_config()
    output_dir = output or config.output_dir
    base_dir = base_dir or config.base_dir
    namespace_prefix = namespace_prefix or config.namespace_prefix
    add_extension = add_ts_extension_to_imports or config.add_ts_extension_to_imports
    generate_dependencies = config.generate_dependencies and not no_dependencies

    if base_dir:
        try:
            index = SourceIndex(NamespaceResolver(base_dir, namespace_prefix))
            names = index.resolve(source)
        except (ValueError, EntityNotFoundError, OSError) as e:
            typer.echo(f"Error resolving namespace pattern: {e}", err=True)
            raise typer.Exit(code=1)
        except Exception as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=2)
    else:
        source_path = Path(source)
        if not source_path.exists():
            typer.echo(f"Error: Source path '{source}' does not exist", err=True)
            raise typer.Exit(code=1)
        index = SourceIndex()
        names = _index_source_path(source_path, index)
        if source_path.is_file():
            # Siblings are indexed so dependencies of a single file resolve
            _index_source_path(source_path.parent, index)

    if not names:
        console.print("[yellow]No classes found[/yellow]")
        return

    generator = Generator(index, TypeScriptRenderer(add_extension))
    files: dict[str, str] = {}
    unresolved: list[str] = []
    errors: list[str] = []

    for name in names:
        try:
            if generate_dependencies:
                result = generator.generate_closure(name)
                for short_name, typescript in result.items():
                    files.setdefault(short_name, typescript)
                unresolved.extend(n for n in result.unresolved if n not in unresolved)
            else:
                entity = index.load(name)
                files.setdefault(entity.short_name, generator.generate_one(name))
        except Exception as e:
            errors.append(f"Error processing {name}: {e}")

    try:
        written = write_typescript_files(output_dir, files)
    except OSError as e:
        typer.echo(f"Error: Failed to write output directory '{output_dir}': {e}", err=True)
        raise typer.Exit(code=1)

    if written:
        console.print(f"[green]Generated {len(written)} TypeScript file(s) in {escape(output_dir)}[/green]")

    if unresolved:
        console.print(
            f"[yellow]Skipped {len(unresolved)} unresolved reference(s):[/yellow] {escape(', '.join(unresolved))}"
        )

    if errors:
        console.print("[yellow]Some classes had errors:[/yellow]")
        for error in errors:
            console.print(f"  - {escape(error)}")


@app.command("type")
def show_type(annotation: str):
    """Print the TypeScript type for a PHPDoc type expression.

    Args:
        annotation: Type expression, e.g. "array{id: int, tags?: string[]}"
    """
    typer.echo(render_type(parse(annotation)))


def _version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"phpts version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
):
    """Generate TypeScript interfaces and enums from PHP DTO classes."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )
