"""CLI for sheetschema.

Provides commands for inspecting and validating delimited table files.

Usage:
    sheetschema inspect items.csv categories.csv
    sheetschema inspect items.csv --header-rows 3 --delimiter ";"
    sheetschema validate items.csv
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table as RichTable

from sheetschema.core.config import Settings, load_settings
from sheetschema.core.logging import configure_logging
from sheetschema.core.models.base import ValidationWarning, WarningLevel

app = typer.Typer(
    name="sheetschema",
    help="Sheetschema - turn spreadsheet-style tables into typed schemas.",
    no_args_is_help=True,
)
console = Console()

FilesArgument = Annotated[
    list[Path],
    typer.Argument(
        help="CSV or TXT files, one table per file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML import profile",
        exists=True,
        dir_okay=False,
    ),
]

_LEVEL_STYLES = {
    WarningLevel.INFO: "dim",
    WarningLevel.WARNING: "yellow",
    WarningLevel.ERROR: "red",
}


def _settings(config: Path | None, **overrides: Any) -> Settings:
    """Load settings and apply command-line overrides that were given."""
    update = {k: v for k, v in overrides.items() if v is not None}
    try:
        settings = load_settings(config)
        if update:
            settings = Settings(**(settings.model_dump() | update))
    except (ValueError, yaml.YAMLError) as e:
        # pydantic's ValidationError is a ValueError
        console.print(f"[red]Invalid settings:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(2) from e

    configure_logging(log_level=settings.log_level, log_format=settings.log_format)
    return settings


def _print_warnings(warnings: list[ValidationWarning]) -> None:
    if not warnings:
        return
    console.print(f"\n[bold]Warnings ({len(warnings)}):[/bold]")
    for warning in warnings:
        style = _LEVEL_STYLES[warning.level]
        console.print(f"  [{style}]{escape(str(warning))}[/{style}]", highlight=False)


@app.command()
def inspect(
    files: FilesArgument,
    delimiter: Annotated[
        str | None,
        typer.Option(
            "--delimiter",
            "-d",
            help="Field delimiter, or 'auto' to detect",
        ),
    ] = None,
    comment_prefix: Annotated[
        str | None,
        typer.Option(
            "--comment-prefix",
            help="Prefix marking comment lines ('//' is always a comment)",
        ),
    ] = None,
    header_rows: Annotated[
        int | None,
        typer.Option(
            "--header-rows",
            "-r",
            min=1,
            max=3,
            help="1 = headers, 2 = + type hints, 3 = + flags",
        ),
    ] = None,
    raw_names: Annotated[
        bool,
        typer.Option(
            "--raw-names",
            help="Keep headers as field names instead of sanitizing them",
        ),
    ] = False,
    config: ConfigOption = None,
) -> None:
    """Build schemas for a batch of tables and show their creation order.

    Examples:

        sheetschema inspect items.csv categories.csv

        sheetschema inspect data.txt --delimiter ";" --header-rows 3
    """
    from sheetschema.pipeline.runner import TableSource, run_import
    from sheetschema.sources.csv.loader import CSVSource

    settings = _settings(
        config,
        delimiter=delimiter,
        comment_prefix=comment_prefix,
        header_row_count=header_rows,
        sanitize_field_names=False if raw_names else None,
    )

    sources: list[TableSource] = []
    for path in files:
        source = CSVSource(path, settings)
        text_result = source.read_text()
        if not text_result.success:
            console.print(f"[red]{text_result.error}[/red]")
            raise typer.Exit(1)
        sources.append(TableSource(name=source.table_name, text=text_result.unwrap()))

    result = run_import(sources, settings)

    if not result.success:
        console.print(f"[red]Import failed:[/red] {result.error}")
        _print_warnings(result.warnings)
        raise typer.Exit(1)

    console.print(f"\n[bold]Creation order:[/bold] {' → '.join(result.creation_order)}")

    for imported in result.tables:
        schema = imported.schema
        title = f"{schema.source_table_name} ({schema.class_name}, {len(schema.rows)} rows)"
        table = RichTable(title=title, show_header=True, header_style="bold")
        table.add_column("Field")
        table.add_column("Header")
        table.add_column("Type")
        table.add_column("Flags")

        for column in schema.columns:
            flags = [
                name
                for name, on in (
                    ("key", column.is_key),
                    ("name", column.is_name),
                    ("optional", column.is_optional),
                    ("skip", column.is_skipped),
                    ("list", column.is_list),
                )
                if on
            ]
            if column.is_foreign_key:
                flags.append(f"fk -> {column.foreign_key_table}")
            if column.enum_values:
                flags.append("values: " + ", ".join(column.enum_values))
            flags.extend(
                f"{k}({v})" if v else k for k, v in sorted(column.attributes.items())
            )
            table.add_row(
                column.field_name,
                column.original_header,
                column.resolved_type.value,
                " | ".join(flags),
            )

        console.print(table)

    _print_warnings(result.warnings)
    console.print(f"\nDone in {result.duration_seconds:.2f}s")


@app.command()
def validate(
    files: FilesArgument,
    config: ConfigOption = None,
) -> None:
    """Check that files can be read and parsed.

    Exits with status 1 if any file is invalid.
    """
    from sheetschema.sources.csv.loader import CSVSource

    settings = _settings(config)

    table = RichTable(show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("Rows", justify="right")
    table.add_column("Columns", justify="right")
    table.add_column("Warnings", justify="right")

    all_valid = True
    all_warnings: list[ValidationWarning] = []
    for path in files:
        validation = CSVSource(path, settings).validate_full()
        all_valid = all_valid and validation.is_valid
        all_warnings.extend(validation.warnings)

        status_color = "green" if validation.is_valid else "red"
        status = validation.status.value
        if validation.error_message:
            status = f"{status}: {validation.error_message}"
        table.add_row(
            path.name,
            f"[{status_color}]{status}[/{status_color}]",
            f"{validation.total_row_count:,}",
            str(validation.total_column_count),
            str(len(validation.warnings)),
        )

    console.print(table)
    _print_warnings(all_warnings)
    raise typer.Exit(0 if all_valid else 1)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
