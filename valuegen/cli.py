"""
Command-line interface for valuegen.

Subcommands:

- ``generate``: read a descriptor document and emit one source file per target
- ``languages``: list the registered generators
- ``info``: show one generator's details and default configuration
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .codegen import BatchResult, generate_from_descriptors
from .codegen.core.config import ConfigError, GeneratorConfig, get_config_manager, load_config
from .codegen.core.descriptors import DescriptorError
from .codegen.core.diagnostics import Severity
from .codegen.registry import (
    RegistryError,
    get_language_info,
    list_all_language_info,
    is_language_supported,
    list_supported_languages,
)
from .logging_config import configure_logging, get_logger
from .utils import DescriptorLoadError, load_descriptors, write_source

logger = get_logger(__name__)

console = Console()


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="valuegen",
        description="Generate immutable value types and builders from target descriptors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  valuegen generate targets.json --language java --output-dir src/main/java
  valuegen generate - -l python < targets.json
  valuegen languages
  valuegen info python
        """.strip(),
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser(
        "generate", help="Generate builders from a descriptor document"
    )
    input_group = generate.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        "file", nargs="?", help="Descriptor JSON file ('-' reads standard input)"
    )
    input_group.add_argument("--url", help="URL to fetch the descriptor document from")
    generate.add_argument(
        "--language", "-l", default="java", help="Target language (default: java)"
    )
    generate.add_argument(
        "--output-dir", "-o", help="Directory to write files to (default: print them)"
    )
    generate.add_argument("--config", help="Configuration file path (JSON)")
    generate.add_argument(
        "--no-comments", action="store_true", help="Don't add a header comment"
    )
    generate.add_argument("--indent-size", type=int, help="Spaces per indentation level")
    generate.add_argument(
        "--workers", type=int, help="Plan targets on this many threads"
    )
    generate.add_argument(
        "--known-type",
        action="append",
        dest="known_types",
        metavar="TYPE",
        help="Qualified type name that resolves (repeatable); "
        "when given, other declared types do not",
    )
    generate.add_argument(
        "--verbose", action="store_true", help="Show generation result metadata"
    )
    generate.set_defaults(func=_handle_generate)

    languages = subparsers.add_parser("languages", help="List supported languages")
    languages.set_defaults(func=_handle_languages)

    info = subparsers.add_parser("info", help="Show details about a language")
    info.add_argument("language", help="Language name or alias")
    info.set_defaults(func=_handle_info)

    return parser


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge language defaults, the config file and command-line overrides."""
    overrides: dict[str, Any] = {}
    if args.no_comments:
        overrides["add_comments"] = False
    if args.indent_size is not None:
        overrides["indent_size"] = args.indent_size
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.known_types:
        overrides["known_types"] = args.known_types
    if args.output_dir:
        overrides["output_dir"] = args.output_dir

    language = get_language_info(args.language)["name"]
    config = load_config(language, custom_config=overrides, config_file=args.config)

    problems = get_config_manager().validate_config(config, language)
    if problems:
        raise CLIError("Invalid configuration: " + "; ".join(problems))
    return config


def _handle_generate(args: argparse.Namespace) -> int:
    if not is_language_supported(args.language):
        console.print(f"[red]✗ Unsupported language '{args.language}'[/red]")
        console.print(
            f"[dim]Supported languages: {', '.join(list_supported_languages())}[/dim]"
        )
        return 1

    config = _build_config(args)
    source, data = load_descriptors(file_path=args.file, url=args.url)
    logger.info(f"Loaded descriptors from {source}")

    batch = generate_from_descriptors(data, args.language, config)
    _report_diagnostics(batch)

    if config.output_dir:
        _write_outputs(batch, Path(config.output_dir))
    else:
        _print_outputs(batch, args.language)

    if args.verbose:
        _print_metadata(batch)

    if not batch.success:
        console.print(
            f"[red]✗ {len(batch.failed_targets)} target(s) failed:[/red] "
            + ", ".join(batch.failed_targets)
        )
        return 1
    return 0


def _report_diagnostics(batch: BatchResult):
    for diagnostic in batch.diagnostics.diagnostics:
        style = "red" if diagnostic.severity is Severity.ERROR else "yellow"
        console.print(f"[{style}]{diagnostic}[/{style}]", highlight=False)
    for target, result in zip(batch.targets, batch.results):
        if result is None:
            continue
        if not result.success:
            console.print(f"[red]{target.ref}: {result.error_message}[/red]")
        for warning in result.warnings:
            console.print(f"[yellow]⚠️  {warning}[/yellow]")


def _write_outputs(batch: BatchResult, output_dir: Path):
    for _, result in batch.generated:
        path = write_source(output_dir, result.metadata["relative_path"], result.code)
        console.print(f"[green]✓[/green] Wrote {path}")


def _print_outputs(batch: BatchResult, language: str):
    lexer = get_language_info(language)["name"]
    for _, result in batch.generated:
        console.print(
            Panel(
                Syntax(result.code, lexer, theme="monokai", line_numbers=False),
                title=result.metadata["relative_path"],
                border_style="blue",
            )
        )


def _print_metadata(batch: BatchResult):
    table = Table(title="Generation Results", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Target", style="bold")
    table.add_column("File")
    table.add_column("Fields", justify="right")
    table.add_column("Status")

    for target, result in zip(batch.targets, batch.results):
        if result is None:
            table.add_row(target.ref, "-", "-", "[red]invalid[/red]")
        elif not result.success:
            table.add_row(target.ref, "-", "-", "[red]failed[/red]")
        else:
            table.add_row(
                target.ref,
                result.metadata["relative_path"],
                str(result.metadata.get("field_count", "")),
                "[green]ok[/green]",
            )
    console.print(table)


def _handle_languages(args: argparse.Namespace) -> int:
    language_info = list_all_language_info()
    if not language_info:
        console.print("[yellow]⚠️ No code generators available[/yellow]")
        return 0

    table = Table(title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(lang_name, info["file_extension"], info["class"], aliases)

    console.print(table)
    return 0


def _handle_info(args: argparse.Namespace) -> int:
    if not is_language_supported(args.language):
        console.print(f"[red]✗ Language '{args.language}' is not supported[/red]")
        console.print("[dim]Use 'valuegen languages' to see available options[/dim]")
        return 1

    info = get_language_info(args.language)
    info_text = (
        f"[bold]Language:[/bold] {info['name']}\n"
        f"[bold]File Extension:[/bold] {info['file_extension']}\n"
        f"[bold]Generator Class:[/bold] {info['class']}\n"
        f"[bold]Module:[/bold] {info['module']}"
    )
    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"
    console.print(Panel(info_text, title=f"🔧 {info['name'].title()} Generator", border_style="green"))

    config = load_config(info["name"])
    config_table = Table(
        title="⚙️  Default Configuration", box=box.SIMPLE, header_style="bold cyan"
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")
    config_table.add_row("Indent Size", str(config.indent_size))
    config_table.add_row("Add Comments", str(config.add_comments))
    if info["name"] == "java":
        config_table.add_row("Generated Annotation", str(config.generated_annotation))
    if info["name"] == "python":
        config_table.add_row("Runtime Module", config.runtime_module)
    for key, value in sorted(config.custom.items()):
        config_table.add_row(key, str(value))
    console.print(config_table)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except FileNotFoundError as e:
        console.print(f"[red]✗ {e}[/red]")
    except (
        CLIError,
        ConfigError,
        DescriptorError,
        DescriptorLoadError,
        RegistryError,
        OSError,
    ) as e:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]✗ Error:[/red] {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
