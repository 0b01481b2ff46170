#!/usr/bin/env python3
# Path: catalog_validator/cli/validate_cli.py
"""
Catalog Validator CLI
=====================

Command-line interface: enumerate documents, supply schema catalogs,
validate, report.

Exit codes:
    0    validation passed (or skipped)
    1    validation failed
    2    configuration error (catalog, schema artifact, base directory)
    3    infrastructure error (unreadable document, resolver failure)
    130  interrupted
"""

import sys
import argparse
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.logging import RichHandler

from catalog_validator.core.config_loader import ConfigLoader
from catalog_validator.core.logger import configure_logging, get_logger
from catalog_validator.artifacts.file_enumerator import enumerate_files
from catalog_validator.artifacts.supplier import SchemaArtifactSupplier
from catalog_validator.engine.errors import (
    CatalogConfigurationError,
    ValidationInfrastructureError,
)
from catalog_validator.engine.orchestrator import RunResult, ValidationRun
from catalog_validator.engine.report import format_locator
from catalog_validator.constants import (
    EXIT_PASSED,
    EXIT_VALIDATION_FAILED,
    EXIT_CONFIGURATION_ERROR,
    EXIT_INFRASTRUCTURE_ERROR,
    EXIT_INTERRUPTED,
    POLICY_EXPLICIT_VERSION,
    POLICY_DECLARED_DEPENDENCIES,
)


console = Console()
logger = get_logger(__name__, 'cli')

_SEVERITY_STYLES = {
    'warning': 'yellow',
    'error': 'red',
    'fatal': 'red bold',
}


def setup_logging(config: ConfigLoader, verbose: bool = False) -> None:
    """Route package logging to a rich console handler."""
    configure_logging(
        config,
        log_level='DEBUG' if verbose else None,
        handler=RichHandler(rich_tracebacks=True, console=console, show_path=False)
    )


def display_result(result: RunResult) -> None:
    """Display run result with rich formatting."""

    if result.records:
        table = Table(title="Diagnostics", show_header=True, header_style="bold")
        table.add_column("#", style="dim", width=4)
        table.add_column("Severity")
        table.add_column("Location", style="cyan")
        table.add_column("Message", style="white")

        for i, record in enumerate(result.records, 1):
            style = _SEVERITY_STYLES.get(record.severity.value, 'white')
            table.add_row(
                str(i),
                f"[{style}]{record.severity.value.upper()}[/{style}]",
                format_locator(record.locator) or "N/A",
                record.message
            )

        console.print(table)

    status_color = "green" if result.passed else "red"
    status_symbol = "✓" if result.passed else "✗"
    status_text = "PASSED" if result.passed else "FAILED"

    panel = Panel(
        f"[{status_color} bold]{status_symbol} {status_text}[/{status_color} bold]\n"
        f"Files validated: {result.files_validated}\n"
        f"Errors: {result.error_count} | Fatal: {result.fatal_count} | "
        f"Warnings: {result.warning_count}",
        title="Validation Result",
        border_style=status_color
    )
    console.print(panel)


def write_report(result: RunResult, output_report: Path) -> None:
    """Write the plain-text report."""
    output_report.parent.mkdir(parents=True, exist_ok=True)
    with open(output_report, 'w', encoding='utf-8') as f:
        if result.message:
            f.write(result.message)
            f.write("\n")
        f.write(result.summary())
        f.write("\n")
    console.print(f"\n[green]Report saved:[/green] {output_report}")


def resolve_schema_roots(args: argparse.Namespace, config: ConfigLoader, catalogs: list[Path]) -> list[Path]:
    """
    Directories to scan for catalogs.

    With explicit catalogs and no schema source, no artifact is supplied.
    """
    schema_source = (
        args.schema_dir or args.schema_version or args.dependency
        or config.get('schema_dir') or config.get('schema_version') or config.get('dependencies')
    )
    if catalogs and not schema_source:
        return []

    supplier = SchemaArtifactSupplier(config=config)
    return supplier.schema_roots(
        schema_dir=args.schema_dir,
        schema_version=args.schema_version,
        dependencies=args.dependency or None,
        selection_policy=args.selection_policy
    )


def validate_command(args: argparse.Namespace) -> int:
    """Run the validate command."""

    config = ConfigLoader()
    setup_logging(config, args.verbose)

    if args.skip or config.get('skip', False):
        console.print("[yellow]XML validation skipped[/yellow]")
        return EXIT_PASSED

    base_dir = args.base_dir or config.get('base_dir') or Path.cwd()
    includes = args.include or config.get('includes')
    excludes = args.exclude or config.get('excludes')
    catalogs = args.catalog or config.get('catalog_files', [])

    try:
        schema_roots = resolve_schema_roots(args, config, catalogs)
        files = enumerate_files(base_dir, includes, excludes)

        console.print(f"\n[bold]Catalog XML Validation[/bold]")
        console.print(f"Base directory: {base_dir}")
        console.print(f"Files found: {len(files)}")
        for root in schema_roots:
            console.print(f"Schemas: {root}")
        console.print()

        run = ValidationRun(
            files,
            catalog_files=catalogs,
            catalog_dirs=schema_roots,
            config=config
        )
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console
        ) as progress:
            task = progress.add_task("Validating...", total=None)
            result = run.execute()
            progress.update(task, completed=True)

    except CatalogConfigurationError as e:
        console.print(f"\n[red bold]Configuration error:[/red bold] {e}")
        return EXIT_CONFIGURATION_ERROR

    except ValidationInfrastructureError as e:
        console.print(f"\n[red bold]Infrastructure error:[/red bold] {e}")
        if args.verbose:
            console.print_exception()
        return EXIT_INFRASTRUCTURE_ERROR

    display_result(result)

    if args.output:
        write_report(result, args.output)

    return EXIT_PASSED if result.passed else EXIT_VALIDATION_FAILED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='catalog-validator',
        description="Validate XML documents against schemas resolved through OASIS XML catalogs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate every XML file under docs/ with schemas from a local directory
  catalog-validator validate --base-dir docs --include "**/*.xml" --schema-dir schemas

  # Use an explicit catalog file only
  catalog-validator validate --base-dir docs --catalog schemas/catalog.xml

  # Fetch and unpack the schema artifact of a given version
  catalog-validator validate --base-dir docs --schema-version 1.2.0 --output report.txt
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version='Catalog Validator 1.0.0'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    validate_parser = subparsers.add_parser(
        'validate',
        help='Validate XML documents'
    )
    validate_parser.add_argument(
        '-b', '--base-dir',
        type=Path,
        help='Directory containing the documents (default: current directory)'
    )
    validate_parser.add_argument(
        '-i', '--include',
        action='append',
        help='Include pattern, repeatable (default: **)'
    )
    validate_parser.add_argument(
        '-e', '--exclude',
        action='append',
        help='Exclude pattern, repeatable'
    )
    validate_parser.add_argument(
        '-c', '--catalog',
        action='append',
        type=Path,
        help='Catalog file, repeatable'
    )
    validate_parser.add_argument(
        '-s', '--schema-dir',
        type=Path,
        help='Directory scanned for catalogs instead of a schema artifact'
    )
    validate_parser.add_argument(
        '--schema-version',
        help='Schema artifact version'
    )
    validate_parser.add_argument(
        '-d', '--dependency',
        action='append',
        help='Declared schema dependency group:artifact:version, repeatable'
    )
    validate_parser.add_argument(
        '--selection-policy',
        choices=[POLICY_EXPLICIT_VERSION, POLICY_DECLARED_DEPENDENCIES],
        help='How schema artifacts are selected'
    )
    validate_parser.add_argument(
        '--skip',
        action='store_true',
        help='Skip validation'
    )
    validate_parser.add_argument(
        '-o', '--output',
        type=Path,
        help='Output report file path'
    )
    validate_parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_PASSED

    try:
        if args.command == 'validate':
            return validate_command(args)

    except KeyboardInterrupt:
        console.print("\n[yellow]Validation interrupted by user[/yellow]")
        return EXIT_INTERRUPTED

    except Exception as e:
        logger.error(f"Unexpected failure: {e}")
        console.print(f"\n[red bold]Error:[/red bold] {str(e)}")
        if args.verbose:
            console.print_exception()
        return EXIT_INFRASTRUCTURE_ERROR

    return EXIT_PASSED


if __name__ == "__main__":
    sys.exit(main())
