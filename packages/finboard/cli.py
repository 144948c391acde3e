"""CLI for the ``finboard`` package.

Command handlers (``cmd_*``) hold the logic and return a process exit code;
the Typer commands at the bottom of the module are thin wrappers. The root
callback loads a local ``.env`` with ``python-dotenv`` and configures
logging once before any command runs.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .logging_setup import configure_logging, get_logger
from .models import Currency, StorageTransaction, StoredTransactionIn

_logger = get_logger("finboard.cli")

_STORED_LIST = TypeAdapter(list[StoredTransactionIn])


# ---- Small module-level helpers ----------------------------------------------


def _resolve_output(output: Path | None, default_name: str) -> Path | None:
    """Return the file to write, treating an existing directory as a parent."""

    if output is None:
        return None
    if output.is_dir():
        return output / default_name
    return output


def _write_or_print(text: str, target: Path | None) -> None:
    if target is None:
        print(text)
        return
    target.write_text(text + "\n", encoding="utf-8")
    print(f"Wrote {target}", file=sys.stderr)


def load_storage_json(json_path: str | Path) -> list[StorageTransaction]:
    """Read a JSON array of storage-shape transactions.

    Raises ``OSError`` when the file cannot be read and
    ``pydantic.ValidationError`` when the content does not match the shape.
    """

    text = Path(json_path).read_text(encoding="utf-8")
    return [item.to_storage() for item in _STORED_LIST.validate_json(text)]


# ---- Command handlers --------------------------------------------------------


def cmd_template(output: Path | None = None) -> int:
    """Print (or write) the sample CSV template."""

    from .csv_codec import TEMPLATE_FILENAME, generate_csv_template

    _write_or_print(generate_csv_template(), _resolve_output(output, TEMPLATE_FILENAME))
    return 0


def cmd_import_csv(csv_path: str, *, output: Path | None = None, assume_yes: bool = False) -> int:
    """Validate a CSV file and emit the accepted rows in storage shape as JSON.

    Errors and warnings are written to stderr verbatim. A batch that parsed
    successfully but carries warnings (potential duplicates) is only emitted
    after confirmation, or when ``assume_yes`` is set.
    """

    from .csv_codec import read_csv_file, to_storage_transactions

    result = read_csv_file(csv_path)

    for message in result.errors:
        print(f"Error: {message}", file=sys.stderr)
    for message in result.warnings:
        print(f"Warning: {message}", file=sys.stderr)

    if not result.success:
        return 1

    print(f"Ready to import {len(result.data)} transactions", file=sys.stderr)
    if result.requires_confirmation and not assume_yes:
        if not typer.confirm("Import anyway?", default=False):
            print("Import cancelled.", file=sys.stderr)
            return 1

    records = to_storage_transactions(result.data)
    payload = json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)
    _write_or_print(payload, output)
    _logger.info("Imported %d transactions from %s", len(records), csv_path)
    return 0


def cmd_export_csv(json_path: str, *, output: Path | None = None) -> int:
    """Convert stored transactions (JSON) into the CSV interchange format."""

    from .csv_codec import export_filename, generate_csv

    try:
        records = load_storage_json(json_path)
    except FileNotFoundError:
        print(f"Error: File not found: {json_path}", file=sys.stderr)
        return 1
    except (OSError, ValidationError) as e:
        print(f"Error: Failed to read transactions: {e}", file=sys.stderr)
        return 1

    settings = load_settings()
    _write_or_print(
        generate_csv(records),
        _resolve_output(output, export_filename(settings.default_currency)),
    )
    return 0


def cmd_classify(
    title: str, *, description: str = "", simple: bool = False, use_ai: bool = False
) -> int:
    """Print a category suggestion for ``title``/``description``."""

    from .classifier import classify_transaction, predict_category_offline

    if use_ai:
        from .ai import predict_category

        prediction = predict_category(title, description)
        print(f"{prediction.category}\t{prediction.confidence:.2f}\t{prediction.reasoning}")
        return 0

    if simple:
        prediction = predict_category_offline(title, description)
        print(f"{prediction.category}\t{prediction.confidence:.2f}\t{prediction.reasoning}")
        return 0

    result = classify_transaction(title, description)
    print(
        f"{result.category}\t{result.type.value}\t{result.confidence:.2f}\t{result.reasoning}"
    )
    return 0


def cmd_report(json_path: str, *, currency: Currency | None = None) -> int:
    """Render totals, category breakdown and monthly summary as tables."""

    from .reports import (
        calculate_totals,
        category_breakdown,
        filter_by_currency,
        format_currency,
        monthly_summary,
    )

    try:
        records = load_storage_json(json_path)
    except FileNotFoundError:
        print(f"Error: File not found: {json_path}", file=sys.stderr)
        return 1
    except (OSError, ValidationError) as e:
        print(f"Error: Failed to read transactions: {e}", file=sys.stderr)
        return 1

    cur = currency or load_settings().default_currency
    records = filter_by_currency(records, cur)
    console = Console()

    totals = calculate_totals(records)
    summary = Table(title=f"Totals ({cur.value})")
    summary.add_column("Income", justify="right")
    summary.add_column("Expenses", justify="right")
    summary.add_column("Net", justify="right")
    summary.add_row(
        format_currency(totals.income, cur),
        format_currency(totals.expenses, cur),
        format_currency(totals.net, cur),
    )
    console.print(summary)

    by_category = Table(title="By category")
    by_category.add_column("Category")
    by_category.add_column("Amount", justify="right")
    by_category.add_column("Count", justify="right")
    by_category.add_column("Share", justify="right")
    for row in category_breakdown(records):
        by_category.add_row(
            row.category,
            format_currency(row.amount, cur),
            str(row.count),
            f"{row.percentage:.1f}%",
        )
    console.print(by_category)

    by_month = Table(title="By month")
    by_month.add_column("Month")
    by_month.add_column("Income", justify="right")
    by_month.add_column("Expenses", justify="right")
    for m in monthly_summary(records):
        by_month.add_row(m.month, format_currency(m.income, cur), format_currency(m.expenses, cur))
    console.print(by_month)
    return 0


def cmd_insights(json_path: str) -> int:
    """Print AI spending insights for stored transactions (needs OPENAI_API_KEY)."""

    from .ai import generate_insights

    try:
        records = load_storage_json(json_path)
    except FileNotFoundError:
        print(f"Error: File not found: {json_path}", file=sys.stderr)
        return 1
    except (OSError, ValidationError) as e:
        print(f"Error: Failed to read transactions: {e}", file=sys.stderr)
        return 1

    insights = generate_insights(records)
    if not insights:
        print("No insights available.", file=sys.stderr)
        return 0
    for item in insights:
        trend = f" [{item.trend}]" if item.trend else ""
        print(f"{item.category} ({item.confidence:.2f}){trend}: {item.suggestion}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import, export, classify and report on personal-finance transactions. "
        "Loads settings (e.g. OPENAI_API_KEY) from a local .env before running."
    ),
)


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


@app.command("template")
def template_cmd(
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="File or directory to write to.")
    ] = None,
) -> None:
    """Print the sample CSV template (or write it to a file)."""

    raise typer.Exit(cmd_template(output))


@app.command("import-csv")
def import_csv_cmd(
    csv_path: Annotated[
        Path, typer.Option("--csv-path", help="CSV file to validate and import.", dir_okay=False)
    ],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write JSON here instead of stdout.")
    ] = None,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Import even when warnings were raised.")
    ] = False,
) -> None:
    """Validate a CSV file and emit accepted rows as storage-shape JSON."""

    raise typer.Exit(cmd_import_csv(str(csv_path), output=output, assume_yes=yes))


@app.command("export-csv")
def export_csv_cmd(
    json_path: Annotated[
        Path, typer.Option("--json-path", help="JSON array of stored transactions.")
    ],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="File or directory to write to.")
    ] = None,
) -> None:
    """Export stored transactions to CSV."""

    raise typer.Exit(cmd_export_csv(str(json_path), output=output))


@app.command("classify")
def classify_cmd(
    title: Annotated[str, typer.Argument(help="Transaction title.")],
    description: Annotated[str, typer.Option("--description", "-d")] = "",
    simple: Annotated[
        bool, typer.Option("--simple", help="Use the flat category list (no type).")
    ] = False,
    ai: Annotated[
        bool, typer.Option("--ai", help="Ask the AI predictor (falls back to rules).")
    ] = False,
) -> None:
    """Suggest a category for a transaction."""

    raise typer.Exit(cmd_classify(title, description=description, simple=simple, use_ai=ai))


@app.command("report")
def report_cmd(
    json_path: Annotated[
        Path, typer.Option("--json-path", help="JSON array of stored transactions.")
    ],
    currency: Annotated[
        Currency | None,
        typer.Option("--currency", help="Currency to report on (default FINBOARD_CURRENCY)."),
    ] = None,
) -> None:
    """Show totals, a category breakdown and monthly income/expenses."""

    raise typer.Exit(cmd_report(str(json_path), currency=currency))


@app.command("insights")
def insights_cmd(
    json_path: Annotated[
        Path, typer.Option("--json-path", help="JSON array of stored transactions.")
    ],
) -> None:
    """Ask the AI for spending insights."""

    raise typer.Exit(cmd_insights(str(json_path)))


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
