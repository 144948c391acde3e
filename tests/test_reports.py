from decimal import Decimal

import pytest

from finboard.models import Currency, StorageTransaction, TransactionType
from finboard.reports import (
    calculate_totals,
    category_breakdown,
    filter_by_currency,
    format_currency,
    monthly_summary,
)


def _t(amount: str, category: str, date: str, currency: Currency = Currency.USD) -> StorageTransaction:
    d = Decimal(amount)
    return StorageTransaction(
        title=category,
        description="",
        amount=d,
        currency=currency,
        date=date,
        category=category,
        type=TransactionType.INCOME if d > 0 else TransactionType.EXPENSE,
    )


SAMPLE = [
    _t("5000", "Salary", "2024-01-01"),
    _t("-60", "Food & Dining", "2024-01-05"),
    _t("-40", "Food & Dining", "2024-02-03"),
    _t("-100", "Shopping", "2024-02-10"),
    _t("-999", "Travel", "2024-02-11", Currency.INR),
]


def test_filter_by_currency():
    assert len(filter_by_currency(SAMPLE, Currency.USD)) == 4
    assert [t.category for t in filter_by_currency(SAMPLE, Currency.INR)] == ["Travel"]


def test_totals_use_magnitudes():
    totals = calculate_totals(filter_by_currency(SAMPLE, Currency.USD))
    assert totals.income == Decimal("5000")
    assert totals.expenses == Decimal("200")
    assert totals.net == Decimal("4800")


def test_totals_empty():
    totals = calculate_totals([])
    assert (totals.income, totals.expenses, totals.net) == (0, 0, 0)


def test_category_breakdown_sorted_with_percentages():
    rows = category_breakdown(filter_by_currency(SAMPLE, Currency.USD)[1:])
    assert [(r.category, r.amount, r.count) for r in rows] == [
        ("Food & Dining", Decimal("100"), 2),
        ("Shopping", Decimal("100"), 1),
    ]
    assert rows[0].percentage == pytest.approx(50.0)
    assert sum(r.percentage for r in rows) == pytest.approx(100.0)


def test_category_breakdown_empty():
    assert category_breakdown([]) == []


def test_monthly_summary_groups_by_month():
    months = monthly_summary(filter_by_currency(SAMPLE, Currency.USD))
    assert [(m.month, m.income, m.expenses) for m in months] == [
        ("2024-01", Decimal("5000"), Decimal("60")),
        ("2024-02", Decimal("0"), Decimal("140")),
    ]


@pytest.mark.parametrize(
    ("amount", "currency", "expected"),
    [
        (Decimal("1234.5"), Currency.USD, "$1,234.50"),
        (Decimal("-12"), Currency.INR, "-₹12.00"),
        (Decimal("0"), Currency.USD, "$0.00"),
    ],
)
def test_format_currency(amount, currency, expected):
    assert format_currency(amount, currency) == expected
