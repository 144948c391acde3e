import pytest

from finboard.classifier import (
    CATEGORIES,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    classify_transaction,
    predict_category_offline,
)
from finboard.models import TransactionType


def test_category_vocabularies_keep_table_order():
    assert INCOME_CATEGORIES == (
        "Salary",
        "Freelance",
        "Investment Returns",
        "Business Income",
        "Rental Income",
        "Bonus",
        "Gift",
        "Refund",
        "Other Income",
    )
    assert EXPENSE_CATEGORIES[0] == "Food & Dining"
    assert EXPENSE_CATEGORIES[-1] == "Other Expense"
    assert len(EXPENSE_CATEGORIES) == 13
    assert CATEGORIES[-1] == "Other"
    assert "Investment" in CATEGORIES


# ---- classify_transaction: income branch -------------------------------------


def test_income_first_match_wins_over_later_categories():
    # Matches both Salary and Bonus; Salary comes first in table order.
    result = classify_transaction("Monthly Salary Bonus", "")
    assert result.category == "Salary"
    assert result.type is TransactionType.INCOME


def test_income_short_circuits_even_when_later_category_has_more_hits():
    # Bonus would get 3 hits (bonus, incentive, commission) vs Salary's 1.
    result = classify_transaction("Salary", "bonus incentive commission")
    assert result.category == "Salary"
    assert result.confidence == pytest.approx(0.3)


def test_income_confidence_is_capped():
    result = classify_transaction("Salary paycheck payroll wage", "")
    assert result.category == "Salary"
    assert result.confidence == pytest.approx(0.8)


def test_income_beats_expense_signal():
    result = classify_transaction("Refund", "restaurant dinner coffee")
    assert result.type is TransactionType.INCOME
    assert result.category == "Refund"


# ---- classify_transaction: expense branch ------------------------------------


def test_expense_best_of_all_categories():
    # Two Food & Dining hits (restaurant, dinner) vs one Shopping hit (amazon).
    result = classify_transaction("Evening out", "restaurant dinner, then amazon order")
    assert result.category == "Food & Dining"
    assert result.type is TransactionType.EXPENSE
    assert result.confidence == pytest.approx(0.4)
    assert "2" in result.reasoning and "Food & Dining" in result.reasoning


def test_expense_higher_count_wins_regardless_of_order():
    # One Food & Dining hit (coffee) vs two Shopping hits (amazon, electronics).
    result = classify_transaction("Coffee", "amazon electronics")
    assert result.category == "Shopping"


def test_expense_tie_keeps_first_seen_category():
    # One hit each: Food & Dining (pizza) precedes Shopping (mall).
    result = classify_transaction("Pizza at the mall", "")
    assert result.category == "Food & Dining"
    assert result.confidence == pytest.approx(0.2)


def test_expense_confidence_is_capped():
    result = classify_transaction("Restaurant dining coffee cafe pizza lunch", "")
    assert result.category == "Food & Dining"
    assert result.confidence == pytest.approx(0.7)


def test_no_signal_defaults_to_other_expense():
    result = classify_transaction("xyzzy plugh", "")
    assert result.category == "Other Expense"
    assert result.type is TransactionType.EXPENSE
    assert result.confidence == pytest.approx(0.3)
    assert "No specific keywords" in result.reasoning


def test_matching_is_case_insensitive_and_spans_description():
    result = classify_transaction("Weekly run", "SUPERMARKET GROCERIES")
    assert result.category == "Groceries"


def test_none_description_is_tolerated():
    result = classify_transaction("Uber to airport", None)
    assert result.category == "Transportation"


# ---- predict_category_offline ------------------------------------------------


def test_flat_prediction_best_of():
    prediction = predict_category_offline("Coffee at Starbucks", "")
    assert prediction.category == "Food & Dining"
    assert prediction.confidence == pytest.approx(0.4)
    assert prediction.reasoning == "Matched 2 keyword(s) related to Food & Dining"


def test_flat_prediction_has_its_own_vocabulary():
    # The flat table has a single "Income" bucket instead of typed income categories.
    prediction = predict_category_offline("Monthly salary", "")
    assert prediction.category == "Income"


def test_flat_prediction_tie_keeps_first_seen():
    # "food" appears under both Food & Dining and Groceries; Food & Dining is first.
    prediction = predict_category_offline("food", "")
    assert prediction.category == "Food & Dining"


def test_flat_prediction_default():
    prediction = predict_category_offline("xyzzy plugh", "")
    assert prediction.category == "Other"
    assert prediction.confidence == pytest.approx(0.3)
    assert prediction.reasoning == "No specific keywords found, defaulting to Other"
