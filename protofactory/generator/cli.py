"""Command-line interface for protofactory code generation."""

from __future__ import annotations

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from protofactory.generator import collect, emit, proto_list
from protofactory.generator.collector import DEFAULT_EXTENSION
from protofactory.generator.emitter import LANGUAGES
from protofactory.generator.types import GeneratorError, ProtoMessageInfo


def _collect(input_dir: str, extension: str) -> list[ProtoMessageInfo]:
    try:
        return collect(input_dir, extension)
    except GeneratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


@click.group()
def cli() -> None:
    """Protofactory message id factory generator."""


@cli.command()
@click.option("--language", "-l", default="rust", help="Target language (rust, python)")
@click.option("--input", "-i", "input_dir", required=True, help="Directory of .proto files")
@click.option("--output", "-o", "output_dir", required=True, help="Output directory")
@click.option("--extension", default=DEFAULT_EXTENSION, help="Schema file extension")
@click.option(
    "--registry",
    type=click.Choice(["shared", "thread"]),
    default="shared",
    help="Registry scope: one process-wide registry, or one per thread",
)
@click.option("--module-prefix", default="crate", help="Rust path prefix for imports (rust only)")
@click.option(
    "--source-root",
    default=None,
    help="Directory the Rust module path starts from. Omit=first output directory (rust only)",
)
@click.option(
    "--runtime-import",
    default="protofactory.runtime",
    help="Import path for the registry runtime (python only)",
)
def gen(
    language: str,
    input_dir: str,
    output_dir: str,
    extension: str,
    registry: str,
    module_prefix: str,
    source_root: str | None,
    runtime_import: str,
) -> None:
    """Generate the message factory for a directory of schema files."""
    if language not in LANGUAGES:
        print(f"Unknown language: {language}")
        sys.exit(1)

    if language == "rust":
        options = {"module_prefix": module_prefix, "source_root": source_root}
    else:
        options = {"runtime_import": runtime_import}

    protos = _collect(input_dir, extension)

    try:
        paths = emit(output_dir, protos, language=language, registry=registry, **options)
    except GeneratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for path in paths:
        print(f"Generated {path}")


@cli.command(name="list")
@click.option("--input", "-i", "input_dir", required=True, help="Directory of .proto files")
@click.option("--extension", default=DEFAULT_EXTENSION, help="Schema file extension")
def list_files(input_dir: str, extension: str) -> None:
    """List the schema files in discovery order."""
    for path in proto_list(_collect(input_dir, extension)):
        print(path)


@cli.command()
@click.option("--input", "-i", "input_dir", required=True, help="Directory of .proto files")
@click.option("--extension", default=DEFAULT_EXTENSION, help="Schema file extension")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_dir: str, extension: str, output_json: bool) -> None:
    """Display the messages and ids found in each schema file."""
    protos = _collect(input_dir, extension)

    if output_json:
        print(json.dumps([proto.to_dict() for proto in protos], indent=2))
    else:
        _output_plain(protos)


def _output_plain(protos: list[ProtoMessageInfo]) -> None:
    """Output message ids using rich text formatting."""
    console = Console()

    console.print("[bold cyan]Messages[/bold cyan]")
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("File", style="dim")
    table.add_column("Message", style="white")
    table.add_column("ID", style="green", justify="right")
    table.add_column("Line", style="dim", justify="right")

    total = 0
    for proto in protos:
        for message in proto.messages:
            table.add_row(proto.file_name, message.name, message.id, str(message.line))
            total += 1

    console.print(table)
    console.print()
    console.print(f"{total} message{'s' if total != 1 else ''} in {len(protos)} file(s)")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
