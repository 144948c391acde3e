"""Data models for ``finboard``.

Two transaction shapes live here:

- :class:`CSVTransaction` is the interchange record used for CSV import and
  export. ``amount`` is always a positive magnitude; direction is carried by
  ``type`` alone.
- :class:`StorageTransaction` is the signed-amount record handed to the
  document store (income positive, expense negative).

Neither shape carries identity or audit fields; those are assigned by the
persistence layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import DecodeErrorKind, RowError

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Currency(StrEnum):
    USD = "USD"
    INR = "INR"


class TransactionType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"


# ---------------------------------------------------------------------------
# Transaction shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CSVTransaction:
    """A validated interchange record decoded from (or destined for) CSV.

    Attributes
    ----------
    title:
        Non-empty, trimmed title.
    description:
        Optional free text; ``None`` when the cell was blank.
    amount:
        Unsigned magnitude (> 0).
    currency:
        One of :class:`Currency`.
    date:
        Calendar date as ``YYYY-MM-DD``.
    category:
        Category label; defaulted by ``type`` when the CSV cell was blank.
    type:
        :class:`TransactionType` carrying the direction of the amount.
    """

    title: str
    description: str | None
    amount: Decimal
    currency: Currency
    date: str
    category: str
    type: TransactionType


@dataclass(frozen=True, slots=True)
class StorageTransaction:
    """Signed-amount record as submitted to the persistence layer."""

    title: str
    description: str
    amount: Decimal
    currency: Currency
    date: str
    category: str
    type: TransactionType

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly mapping (amount rendered as a string)."""

        return {
            "title": self.title,
            "description": self.description,
            "amount": str(self.amount),
            "currency": self.currency.value,
            "date": self.date,
            "category": self.category,
            "type": self.type.value,
        }


class StoredTransactionIn(BaseModel):
    """Validated view of a storage record read back from JSON.

    Used by the export and report commands, which receive documents from the
    store rather than from the CSV decoder.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    title: str
    description: str = ""
    amount: Decimal
    currency: Currency
    date: str
    category: str = ""
    type: TransactionType

    @field_validator("description", "category", mode="before")
    @classmethod
    def _none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    def to_storage(self) -> StorageTransaction:
        return StorageTransaction(
            title=self.title,
            description=self.description,
            amount=self.amount,
            currency=self.currency,
            date=self.date,
            category=self.category,
            type=self.type,
        )


# ---------------------------------------------------------------------------
# Decode result
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class CSVImportResult:
    """Outcome of decoding CSV text.

    ``errors`` and ``warnings`` hold the human-readable messages shown to the
    user verbatim. ``fatal`` and ``row_errors`` carry the same information in
    typed form so callers never need to inspect message text.
    """

    success: bool = True
    data: list[CSVTransaction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    fatal: DecodeErrorKind | None = None
    row_errors: list[RowError] = field(default_factory=list)

    @property
    def requires_confirmation(self) -> bool:
        """True when the batch is importable but carries warnings."""

        return self.success and bool(self.warnings)


# ---------------------------------------------------------------------------
# Classification outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Classification:
    """Category and direction guessed from free text.

    ``confidence`` and ``reasoning`` are advisory; they exist for a human
    reviewing the suggestion and drive no control flow.
    """

    category: str
    type: TransactionType
    confidence: float
    reasoning: str


@dataclass(frozen=True, slots=True)
class CategoryPrediction:
    """Single-output category guess (no income/expense direction)."""

    category: str
    confidence: float
    reasoning: str


@dataclass(frozen=True, slots=True)
class SpendingInsight:
    category: str
    confidence: float
    suggestion: str
    spending_pattern: str | None = None
    trend: str | None = None


__all__ = [
    "Currency",
    "TransactionType",
    "CSVTransaction",
    "StorageTransaction",
    "StoredTransactionIn",
    "CSVImportResult",
    "Classification",
    "CategoryPrediction",
    "SpendingInsight",
]
