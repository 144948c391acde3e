"""Closed error vocabulary for CSV decoding.

Decoding never raises for malformed content. Fatal conditions are reported on
the result as a :class:`DecodeErrorKind`; per-row failures are raised
internally as :class:`RowValidationError`, caught by the decoder, and recorded
as :class:`RowError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class DecodeErrorKind(StrEnum):
    """Failures that abort the whole batch."""

    EMPTY_INPUT = "empty_input"
    MISSING_HEADER = "missing_header"
    NO_VALID_ROWS = "no_valid_rows"
    MALFORMED_INPUT = "malformed_input"


class RowField(StrEnum):
    """Field whose validation rejected a row."""

    TITLE = "title"
    AMOUNT = "amount"
    CURRENCY = "currency"
    DATE = "date"
    TYPE = "type"
    # the line itself could not be split into fields
    LINE = "line"


class RowValidationError(ValueError):
    """A single data row failed validation.

    ``str(err)`` is the user-facing message (e.g. ``"Title is required"``).
    """

    def __init__(self, field: RowField, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class RowError:
    """A rejected row: 1-based row number (header is row 1), field and message."""

    row: int
    field: RowField
    message: str

    def __str__(self) -> str:
        return f"Row {self.row}: {self.message}"


__all__ = ["DecodeErrorKind", "RowField", "RowValidationError", "RowError"]
