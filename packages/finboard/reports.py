"""Aggregations behind the dashboard and reports views.

All functions take storage-shape records (signed amounts) and work on
magnitudes, so the sign convention never leaks into totals.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from .models import Currency, StorageTransaction, TransactionType

_ZERO = Decimal("0")

_CURRENCY_SYMBOLS: dict[Currency, str] = {
    Currency.USD: "$",
    Currency.INR: "₹",
}


@dataclass(frozen=True, slots=True)
class Totals:
    income: Decimal
    expenses: Decimal
    net: Decimal


@dataclass(frozen=True, slots=True)
class CategorySummary:
    category: str
    amount: Decimal
    count: int
    percentage: float


@dataclass(frozen=True, slots=True)
class MonthlySummary:
    month: str  # YYYY-MM
    income: Decimal
    expenses: Decimal


def filter_by_currency(
    transactions: Iterable[StorageTransaction], currency: Currency
) -> list[StorageTransaction]:
    return [t for t in transactions if t.currency is currency]


def calculate_totals(transactions: Iterable[StorageTransaction]) -> Totals:
    """Sum income and expense magnitudes; ``net = income - expenses``."""

    income = _ZERO
    expenses = _ZERO
    for t in transactions:
        if t.type is TransactionType.INCOME:
            income += abs(t.amount)
        else:
            expenses += abs(t.amount)
    return Totals(income=income, expenses=expenses, net=income - expenses)


def category_breakdown(transactions: Iterable[StorageTransaction]) -> list[CategorySummary]:
    """Group by category with totals, counts and share of the overall amount.

    Sorted by amount, largest first; equal amounts keep first-seen order.
    """

    amounts: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    for t in transactions:
        amounts[t.category] = amounts.get(t.category, _ZERO) + abs(t.amount)
        counts[t.category] = counts.get(t.category, 0) + 1

    total = sum(amounts.values(), _ZERO)
    rows = [
        CategorySummary(
            category=category,
            amount=amount,
            count=counts[category],
            percentage=float(amount / total * 100) if total > 0 else 0.0,
        )
        for category, amount in amounts.items()
    ]
    rows.sort(key=lambda r: r.amount, reverse=True)
    return rows


def monthly_summary(transactions: Iterable[StorageTransaction]) -> list[MonthlySummary]:
    """Income and expense magnitudes per ``YYYY-MM`` month, oldest first."""

    buckets: dict[str, tuple[Decimal, Decimal]] = {}
    for t in transactions:
        month = t.date[:7]
        income, expenses = buckets.get(month, (_ZERO, _ZERO))
        if t.type is TransactionType.INCOME:
            income += abs(t.amount)
        else:
            expenses += abs(t.amount)
        buckets[month] = (income, expenses)
    return [
        MonthlySummary(month=m, income=inc, expenses=exp)
        for m, (inc, exp) in sorted(buckets.items())
    ]


def format_currency(amount: Decimal, currency: Currency) -> str:
    """Render e.g. ``$1,234.50`` or ``-₹12.00``."""

    sign = "-" if amount < 0 else ""
    return f"{sign}{_CURRENCY_SYMBOLS[currency]}{abs(amount):,.2f}"


__all__ = [
    "CategorySummary",
    "MonthlySummary",
    "Totals",
    "calculate_totals",
    "category_breakdown",
    "filter_by_currency",
    "format_currency",
    "monthly_summary",
]
