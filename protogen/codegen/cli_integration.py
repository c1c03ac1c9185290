"""
CLI integration for code generation functionality.

Provides the command-line interface for the codegen module. Generated source
goes to stdout or the output file; diagnostics go to stderr.
"""

import argparse
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..logging_config import get_logger
from ..utils import SpecLoaderError, load_spec_from_file
from . import (
    ConfigError,
    GeneratorConfig,
    RegistryError,
    generate_code,
    get_generator,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
    load_config,
)
from .core.config import get_config_manager
from .core.generator import GenerationMode

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Informational output
console = Console()

# Diagnostics, kept off stdout so generated code can be piped
error_console = Console(stderr=True)


def add_codegen_args(parser: argparse.ArgumentParser):
    """Add code generation arguments to a CLI parser."""
    codegen_group = parser.add_argument_group("code generation")

    codegen_group.add_argument(
        "--mode",
        "-m",
        choices=[mode.value for mode in GenerationMode],
        help="What to generate: the full protocol, the route tree, or path records",
    )

    codegen_group.add_argument(
        "--input",
        "-i",
        metavar="FILE",
        help="YAML specification to compile",
    )

    codegen_group.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        help="Output file for generated code (default: stdout)",
    )

    codegen_group.add_argument(
        "--language",
        "-l",
        default="python",
        help="Target language (default: python)",
    )

    codegen_group.add_argument(
        "--config", metavar="FILE", help="JSON configuration file for code generation"
    )

    # Common generation options
    common_group = parser.add_argument_group("common generation options")
    common_group.add_argument(
        "--label-prefix",
        metavar="PREFIX",
        help="Prefix for route labels; routes are unlabelled without one",
    )

    common_group.add_argument(
        "--runtime-module",
        metavar="MODULE",
        help="Import path of the runtime support package",
    )

    common_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't generate comments in output code",
    )

    common_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show generation result metadata",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )

    info_group.add_argument(
        "--language-info",
        metavar="LANGUAGE",
        help="Show detailed information about a specific language and exit",
    )


def handle_codegen_command(args: argparse.Namespace) -> int:
    """
    Handle code generation command from CLI arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        if args.list_languages:
            return _list_languages()

        if args.language_info:
            return _show_language_info(args.language_info)

        if not args.mode:
            raise CLIError("--mode is required for code generation")

        if not args.input:
            raise CLIError("--input is required for code generation")

        if not _validate_language(args.language):
            return 1

        text = _get_input_text(args)
        config = _build_config(args, args.language)

        return _generate_and_output(text, args.language, config, args)

    except CLIError as e:
        error_console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        return 1


def _list_languages() -> int:
    """List supported languages with details."""
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
        table.add_row(f"🔧 {lang_name}", info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "[bold]Usage:[/bold] protogen --mode [cyan]protocol[/cyan] --input [dim]api.yaml[/dim]\n"
            "[bold]Info:[/bold] protogen --language-info [cyan]LANGUAGE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _show_language_info(language: str) -> int:
    """Show detailed information about a specific language."""
    if not _validate_language(language):
        error_console.print("[dim]Use --list-languages to see available options[/dim]")
        return 1

    info = get_language_info(language)

    info_text = (
        f"[bold]Language:[/bold] {info['name']}\n"
        f"[bold]File Extension:[/bold] {info['file_extension']}\n"
        f"[bold]Generator Class:[/bold] {info['class']}\n"
        f"[bold]Module:[/bold] {info['module']}"
    )
    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(
        Panel(info_text, title=f"🔧 {info['name'].title()} Generator", border_style="green")
    )

    config = get_generator(language).config
    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")
    config_table.add_row("Indent Size", str(config.indent_size))
    config_table.add_row("Add Comments", str(config.add_comments))
    config_table.add_row("Runtime Module", config.runtime_module)
    config_table.add_row("Label Prefix", str(config.label_prefix))
    for key, value in sorted(config.custom.items()):
        config_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(config_table)
    return 0


def _validate_language(language: str) -> bool:
    """Validate that a language is supported, reporting it otherwise."""
    try:
        get_language_info(language)
    except RegistryError:
        supported = list_supported_languages()
        error_console.print(f"[red]✗ Unsupported language '{escape(language)}'[/red]")
        error_console.print(f"[dim]Supported languages: {', '.join(supported)}[/dim]")
        return False
    return True


def _get_input_text(args: argparse.Namespace) -> str:
    """Read the specification named on the command line."""
    try:
        return load_spec_from_file(args.input)
    except SpecLoaderError as e:
        raise CLIError(f"Failed to load input: {e}") from e


def _build_config(args: argparse.Namespace, language: str) -> GeneratorConfig:
    """Build configuration from the config file and CLI overrides."""
    overrides = {}

    if getattr(args, "no_comments", False):
        overrides["add_comments"] = False
    if getattr(args, "label_prefix", None) is not None:
        overrides["label_prefix"] = args.label_prefix
    if getattr(args, "runtime_module", None):
        overrides["runtime_module"] = args.runtime_module

    # Defaults are keyed by primary name, not alias
    language = get_language_info(language)["name"]

    try:
        config = load_config(language, custom_config=overrides, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    for warning in get_config_manager().validate_config(config, language):
        logger.warning(warning)

    return config


def _generate_and_output(
    text: str, language: str, config: GeneratorConfig, args: argparse.Namespace
) -> int:
    """Generate code and write it to the requested destination."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=error_console,
        transient=True,
    ) as progress:
        gen_task = progress.add_task(f"[green]Generating {language} code...", total=None)
        generator = get_generator(language, config)
        result = generate_code(generator, text, args.mode)
        progress.remove_task(gen_task)

    if not result.success:
        error_console.print(f"[red]✗ {escape(result.error_message)}[/red]")
        return 1

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.write_text(result.code, encoding="utf-8")
        except OSError as e:
            error_console.print(f"[red]✗ Failed to write to {output_path}:[/red] {escape(str(e))}")
            return 1
        error_console.print(
            f"[green]✓[/green] Generated {language} code saved to [cyan]{output_path}[/cyan]"
        )
    else:
        sys.stdout.write(result.code)
        sys.stdout.flush()

    if args.verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")

        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))

        error_console.print()
        error_console.print(metadata_table)

    return 0
