"""
Command line entry point for preserveorder.

Merges label sequences given on the command line or in a JSON file, and
merges or combines CSV files by their header rows.
"""

import json
import sys
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from preserveorder import __version__
from preserveorder.core.config import configuration_summary, get_settings
from preserveorder.core.exceptions import InvalidInputError, PreserveOrderError
from preserveorder.core.logging import get_logger, set_correlation_id, setup_logging
from preserveorder.core.models import MergeReport
from preserveorder.data.csv_headers import CSVHeaderProcessor
from preserveorder.ordering.api import merge_with_report

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def _fail(ctx, title: str, error: Exception) -> None:
    err_console.print(f"[red]{title}:[/red] {escape(str(error))}", highlight=False)
    if ctx.obj and ctx.obj.get("debug"):
        import traceback

        err_console.print(traceback.format_exc())
    sys.exit(1)


def _parse_sequences(values: Tuple[str, ...], separator: str, input_path: Optional[str]) -> List[list]:
    """Collect sequences from separator-joined arguments and an optional JSON file."""
    sequences = [[part.strip() for part in value.split(separator) if part.strip()] for value in values]

    if input_path:
        try:
            with open(input_path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"{input_path} is not valid JSON: {e}") from e
        if not isinstance(loaded, list):
            raise InvalidInputError(f"{input_path} must contain a JSON array of arrays")
        sequences.extend(loaded)

    return sequences


def _emit_report(report: MergeReport, as_json: bool) -> None:
    if as_json:
        click.echo(report.model_dump_json(indent=2))
        return
    for label in report.labels:
        click.echo(label)


@click.group()
@click.version_option(version=__version__, prog_name="preserveorder")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.option("--correlation-id", help="Set correlation ID for log tracing")
@click.pass_context
def main(ctx, debug: bool, json_logs: bool, correlation_id: Optional[str]):
    """Merge ordered sequences into one ordering that honours all of them."""
    ctx.ensure_object(dict)

    try:
        settings = get_settings()
    except PreserveOrderError as e:
        _fail(ctx, "Configuration Error", e)

    debug = debug or settings.debug
    setup_logging(debug=debug, rich_output=not (json_logs or settings.json_logs))

    if correlation_id:
        set_correlation_id(correlation_id)

    ctx.obj["debug"] = debug
    ctx.obj["settings"] = settings


@main.command("merge")
@click.argument("sequences", nargs=-1)
@click.option(
    "--input",
    "input_path",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file holding an array of label arrays",
)
@click.option("--separator", default=",", show_default=True, help="Label separator in arguments")
@click.option("--json", "as_json", is_flag=True, help="Print the merge report as JSON")
@click.pass_context
def merge_command(ctx, sequences: Tuple[str, ...], input_path: Optional[str], separator: str, as_json: bool):
    """Merge SEQUENCES, each a separator-joined list of labels.

    Example: preserveorder merge a,b b,c
    """
    settings = ctx.obj["settings"]
    try:
        parsed = _parse_sequences(sequences, separator, input_path)
        report = merge_with_report(parsed)
    except PreserveOrderError as e:
        _fail(ctx, "Invalid input", e)

    logger.info("Sequences merged", sources=report.source_count, labels=report.label_count)
    _emit_report(report, as_json or settings.output_format == "json")


def _processor(settings, delimiter: Optional[str], encoding: Optional[str], lenient: bool):
    return CSVHeaderProcessor(
        strict_validation=settings.strict_validation and not lenient,
        delimiter=delimiter or settings.csv_delimiter,
        encoding=encoding or settings.csv_encoding,
    )


csv_options = [
    click.option("--delimiter", help="CSV field delimiter (default from CSV_DELIMITER)"),
    click.option("--encoding", help="CSV file encoding (default from CSV_ENCODING)"),
    click.option("--lenient", is_flag=True, help="Skip unreadable files instead of failing"),
]


def with_csv_options(func):
    for option in reversed(csv_options):
        func = option(func)
    return func


@main.command()
@click.argument("csv_files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@with_csv_options
@click.option("--json", "as_json", is_flag=True, help="Print the merge report as JSON")
@click.pass_context
def headers(ctx, csv_files, delimiter: Optional[str], encoding: Optional[str], lenient: bool, as_json: bool):
    """Print the merged header of CSV_FILES, one column per line."""
    settings = ctx.obj["settings"]
    try:
        report = _processor(settings, delimiter, encoding, lenient).merge_headers(csv_files)
    except PreserveOrderError as e:
        _fail(ctx, "Header Merge Error", e)

    _emit_report(report, as_json or settings.output_format == "json")


@main.command()
@click.argument("csv_files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False), help="Combined CSV path")
@with_csv_options
@click.pass_context
def combine(ctx, csv_files, output: str, delimiter: Optional[str], encoding: Optional[str], lenient: bool):
    """Combine the rows of CSV_FILES under their merged header."""
    settings = ctx.obj["settings"]
    try:
        combined = _processor(settings, delimiter, encoding, lenient).combine(csv_files, output)
    except PreserveOrderError as e:
        _fail(ctx, "Combine Error", e)

    console.print(
        f"[green]Wrote {len(combined)} rows x {len(combined.columns)} columns to {escape(str(output))}[/green]",
        highlight=False,
    )


@main.command()
def config():
    """Display current configuration."""
    table = Table(title="preserveorder Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    for name, value in configuration_summary().items():
        table.add_row(name, value)

    console.print(table)


if __name__ == "__main__":
    main()
