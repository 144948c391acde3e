"""CSV import/export for interchange transactions.

Wire format
-----------
Header (exact, on export)::

    title,description,amount,currency,date,type

- ``title`` and ``description`` are always double-quoted on export, with
  embedded quotes doubled. Other fields are unquoted.
- ``amount`` is an unsigned decimal magnitude; direction comes from ``type``.
- ``date`` is ``YYYY-MM-DD``.
- Import accepts the columns in any order, quoted or unquoted, plus an
  optional ``category`` column. Blank lines and a trailing newline are
  ignored.

Import never raises for malformed content: every failure is reported on the
returned :class:`~finboard.models.CSVImportResult`.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from datetime import date as _date
from datetime import datetime
from decimal import Decimal, InvalidOperation
from os import PathLike
from pathlib import Path

from .errors import DecodeErrorKind, RowError, RowField, RowValidationError
from .logging_setup import get_logger
from .models import (
    Currency,
    CSVImportResult,
    CSVTransaction,
    StorageTransaction,
    TransactionType,
)

CSV_TEMPLATE_HEADERS: tuple[str, ...] = (
    "title",
    "description",
    "amount",
    "currency",
    "date",
    "type",
)

REQUIRED_HEADERS: tuple[str, ...] = ("title", "amount", "currency", "date", "type")

TEMPLATE_FILENAME = "expense-template.csv"

# (title, description, amount, currency, date, type)
CSV_TEMPLATE_SAMPLE: tuple[tuple[str, str, str, str, str, str], ...] = (
    ("Coffee Shop", "Morning coffee", "5.50", "USD", "2024-01-15", "expense"),
    ("Grocery Shopping", "Weekly groceries", "85.00", "USD", "2024-01-14", "expense"),
    ("Salary", "Monthly salary", "5000.00", "USD", "2024-01-01", "income"),
    ("Uber Ride", "Airport pickup", "25.00", "USD", "2024-01-13", "expense"),
)

_MSG_EMPTY = "CSV file is empty"
_MSG_NO_ROWS = "No valid transaction data found"
_MSG_MALFORMED = "Failed to parse CSV"

_logger = get_logger("finboard.csv_codec")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _row(title: str, description: str, amount: str, currency: str, date: str, type_: str) -> str:
    return ",".join((_quote(title), _quote(description), amount, currency, date, type_))


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line into trimmed fields.

    Commas inside double quotes are literal and ``""`` inside a quoted field
    is an escaped quote. Parsing is delegated to the stdlib :mod:`csv` reader;
    whitespace after a separator is skipped so ``a, "b"`` still unquotes.

    Raises :class:`csv.Error` for lines the reader rejects, such as a field
    over :func:`csv.field_size_limit`.
    """

    reader = csv.reader([line], skipinitialspace=True)
    fields = next(reader, [])
    return [f.strip() for f in fields]


def _split_row(line: str) -> list[str]:
    try:
        return split_csv_line(line)
    except csv.Error as e:
        raise RowValidationError(RowField.LINE, f"{_MSG_MALFORMED}: {e}") from e


def _parse_amount(raw: str) -> Decimal | None:
    try:
        d = Decimal(raw)
    except InvalidOperation:
        return None
    if not d.is_finite():
        return None
    return d


def _is_calendar_date(raw: str) -> bool:
    try:
        datetime.strptime(raw, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def default_category(type_: TransactionType) -> str:
    """Category used when an imported row leaves ``category`` blank."""

    return "Other Income" if type_ is TransactionType.INCOME else "Other Expense"


def _parse_transaction_row(headers: Sequence[str], values: Sequence[str]) -> CSVTransaction:
    """Validate one data row; raise :class:`RowValidationError` on the first failure."""

    def get(name: str) -> str:
        try:
            idx = headers.index(name)
        except ValueError:
            return ""
        return values[idx].strip() if idx < len(values) else ""

    title = get("title")
    description = get("description")
    amount_raw = get("amount")
    currency_raw = get("currency").upper()
    date_raw = get("date")
    category = get("category")
    type_raw = get("type").lower()

    if not title:
        raise RowValidationError(RowField.TITLE, "Title is required")
    if not amount_raw:
        raise RowValidationError(RowField.AMOUNT, "Amount is required")
    if currency_raw not in Currency.__members__:
        raise RowValidationError(RowField.CURRENCY, "Currency must be USD or INR")
    if not date_raw:
        raise RowValidationError(RowField.DATE, "Date is required")
    if type_raw not in {t.value for t in TransactionType}:
        raise RowValidationError(RowField.TYPE, 'Type must be "income" or "expense"')

    type_ = TransactionType(type_raw)

    amount = _parse_amount(amount_raw)
    if amount is None or amount <= 0:
        raise RowValidationError(RowField.AMOUNT, "Amount must be a positive number")
    if not _is_calendar_date(date_raw):
        raise RowValidationError(RowField.DATE, "Date must be in YYYY-MM-DD format")

    return CSVTransaction(
        title=title,
        description=description or None,
        amount=amount,
        currency=Currency(currency_raw),
        date=date_raw,
        category=category or default_category(type_),
        type=type_,
    )


def _duplicate_key(tx: CSVTransaction) -> str:
    # normalize() so 5.5 and 5.50 collide like the numeric values they are
    return f"{tx.title}|{tx.amount.normalize()}|{tx.date}"


def find_duplicates(transactions: Iterable[CSVTransaction]) -> list[int]:
    """Return 1-based positions of records whose ``title|amount|date`` repeats."""

    seen: set[str] = set()
    duplicates: list[int] = []
    for pos, tx in enumerate(transactions, start=1):
        key = _duplicate_key(tx)
        if key in seen:
            duplicates.append(pos)
        else:
            seen.add(key)
    return duplicates


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


def parse_csv(csv_content: str) -> CSVImportResult:
    """Decode CSV text into interchange records plus diagnostics.

    Fatal conditions (empty input, a header the reader rejects, missing
    required headers, no valid rows) set ``success=False``. A bad data row
    is reported as ``"Row <n>: <message>"`` (header is row 1) and the
    remaining rows are still processed. Repeated ``title|amount|date``
    keys produce a single advisory warning.
    """

    result = CSVImportResult()

    # Rows end at "\n" only: str.splitlines() also breaks on \x0c and \u2028.
    lines = [line.strip() for line in csv_content.split("\n") if line.strip()]
    if not lines:
        result.errors.append(_MSG_EMPTY)
        result.success = False
        result.fatal = DecodeErrorKind.EMPTY_INPUT
        return result

    try:
        headers = split_csv_line(lines[0])
    except csv.Error as e:
        result.errors.append(f"{_MSG_MALFORMED}: {e}")
        result.success = False
        result.fatal = DecodeErrorKind.MALFORMED_INPUT
        _logger.info("CSV rejected: unreadable header (%s)", e)
        return result
    missing = [h for h in REQUIRED_HEADERS if h not in headers]
    if missing:
        result.errors.append(f"Missing required headers: {', '.join(missing)}")
        result.success = False
        result.fatal = DecodeErrorKind.MISSING_HEADER
        _logger.info("CSV rejected: missing headers %s", missing)
        return result

    for i, line in enumerate(lines[1:], start=1):
        row_number = i + 1
        try:
            tx = _parse_transaction_row(headers, _split_row(line))
        except RowValidationError as err:
            row_error = RowError(row=row_number, field=err.field, message=err.message)
            result.row_errors.append(row_error)
            result.errors.append(str(row_error))
            _logger.debug("Rejected %s", row_error)
            continue
        result.data.append(tx)

    if not result.data:
        result.errors.append(_MSG_NO_ROWS)
        result.success = False
        result.fatal = DecodeErrorKind.NO_VALID_ROWS

    duplicates = find_duplicates(result.data)
    if duplicates:
        result.warnings.append(f"Found {len(duplicates)} potential duplicate transactions")

    _logger.info(
        "Parsed CSV: %d accepted, %d rejected, %d warnings",
        len(result.data),
        len(result.row_errors),
        len(result.warnings),
    )
    return result


def read_csv_file(csv_path: str | PathLike[str]) -> CSVImportResult:
    """Read a UTF-8 ``.csv`` file from disk and decode it with :func:`parse_csv`.

    File-level problems are reported on the result rather than raised.
    """

    p = Path(csv_path)
    if p.suffix.lower() != ".csv":
        return CSVImportResult(success=False, errors=["Please select a CSV file"])
    try:
        content = p.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError):
        _logger.exception("Failed to read CSV file %s", p)
        return CSVImportResult(success=False, errors=["Failed to read file"])
    return parse_csv(content)


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def generate_csv(transactions: Iterable[CSVTransaction | StorageTransaction]) -> str:
    """Serialize records to CSV text under the fixed header.

    Storage records are accepted too; their signed amounts are written as
    magnitudes since direction travels in ``type``.
    """

    rows = [",".join(CSV_TEMPLATE_HEADERS)]
    for tx in transactions:
        rows.append(
            _row(
                tx.title,
                tx.description or "",
                str(abs(tx.amount)),
                tx.currency.value,
                tx.date,
                tx.type.value,
            )
        )
    return "\n".join(rows)


def generate_csv_template() -> str:
    """Return the header plus a handful of illustrative sample rows."""

    rows = [",".join(CSV_TEMPLATE_HEADERS)]
    rows.extend(_row(*sample) for sample in CSV_TEMPLATE_SAMPLE)
    return "\n".join(rows)


def export_filename(currency: Currency, today: _date | None = None) -> str:
    """File name offered for an export, e.g. ``expenses-USD-2024-01-31.csv``."""

    day = today or _date.today()
    return f"expenses-{currency.value}-{day.isoformat()}.csv"


# ---------------------------------------------------------------------------
# Storage conversion
# ---------------------------------------------------------------------------


def to_storage_transactions(
    transactions: Iterable[CSVTransaction],
) -> list[StorageTransaction]:
    """Map interchange records to the signed storage shape (1:1, order kept)."""

    out: list[StorageTransaction] = []
    for tx in transactions:
        magnitude = abs(tx.amount)
        out.append(
            StorageTransaction(
                title=tx.title,
                description=tx.description or "",
                amount=magnitude if tx.type is TransactionType.INCOME else -magnitude,
                currency=tx.currency,
                date=tx.date,
                category=tx.category,
                type=tx.type,
            )
        )
    return out


__all__ = [
    "CSV_TEMPLATE_HEADERS",
    "CSV_TEMPLATE_SAMPLE",
    "REQUIRED_HEADERS",
    "TEMPLATE_FILENAME",
    "default_category",
    "export_filename",
    "find_duplicates",
    "generate_csv",
    "generate_csv_template",
    "parse_csv",
    "read_csv_file",
    "split_csv_line",
    "to_storage_transactions",
]
