"""Deterministic, offline transaction classification.

Used when the AI predictor is unavailable or fails. Matching is
case-insensitive substring search over ``"<title> <description>"``.

Two entry points serve different call sites with different vocabularies:

- :func:`classify_transaction` guesses both the income/expense type and a
  category from :data:`INCOME_CATEGORIES` / :data:`EXPENSE_CATEGORIES`.
  The income table is scanned first and the first category with any hit
  wins; only when no income category matches is the expense table scanned,
  and there the category with the most hits wins (ties keep the earlier
  entry).
- :func:`predict_category_offline` returns a single category from the flat
  :data:`CATEGORIES` list, best hit count wins.

Table order is significant in both cases.
"""

from __future__ import annotations

from .logging_setup import get_logger
from .models import CategoryPrediction, Classification, TransactionType

KeywordTable = tuple[tuple[str, tuple[str, ...]], ...]

# Ordering matters: the first income category with a hit wins.
INCOME_KEYWORDS: KeywordTable = (
    ("Salary", ("salary", "paycheck", "payroll", "wage")),
    ("Freelance", ("freelance", "consulting", "contract work", "upwork", "fiverr")),
    (
        "Investment Returns",
        ("dividend", "interest earned", "interest credit", "capital gain", "investment return"),
    ),
    ("Business Income", ("business income", "sales revenue", "revenue", "client payment")),
    ("Rental Income", ("rental income", "rent received", "tenant")),
    ("Bonus", ("bonus", "incentive", "commission")),
    ("Gift", ("gift received", "received gift", "gifted")),
    ("Refund", ("refund", "cashback", "cash back", "reimbursement", "rebate")),
    ("Other Income", ("income", "deposit", "credited")),
)

# Ordering matters: ties on hit count keep the earlier category.
EXPENSE_KEYWORDS: KeywordTable = (
    (
        "Food & Dining",
        (
            "restaurant",
            "dining",
            "coffee",
            "cafe",
            "starbucks",
            "mcdonalds",
            "pizza",
            "lunch",
            "dinner",
            "breakfast",
            "takeout",
            "swiggy",
            "zomato",
        ),
    ),
    ("Groceries", ("grocery", "groceries", "supermarket", "produce", "vegetables")),
    (
        "Transportation",
        ("uber", "lyft", "taxi", "fuel", "petrol", "parking", "metro", "bus fare", "toll"),
    ),
    ("Entertainment", ("movie", "cinema", "netflix", "concert", "theater", "theatre", "game")),
    (
        "Shopping",
        ("shopping", "amazon", "store", "mall", "clothing", "shoes", "electronics", "flipkart"),
    ),
    (
        "Bills & Utilities",
        ("bill", "utility", "electric", "water", "internet", "phone", "cable", "broadband"),
    ),
    (
        "Healthcare",
        ("doctor", "medical", "pharmacy", "hospital", "clinic", "medicine", "dental"),
    ),
    ("Education", ("school", "tuition", "course", "university", "college", "textbook")),
    ("Travel", ("travel", "hotel", "flight", "airline", "vacation", "airbnb")),
    ("Subscriptions", ("subscription", "spotify", "membership", "renewal")),
    ("Insurance", ("insurance", "premium", "policy")),
    ("Rent/Mortgage", ("rent", "mortgage", "landlord")),
    ("Other Expense", ("misc", "miscellaneous")),
)

# Flat vocabulary used by the transaction form's category picker.
CATEGORY_KEYWORDS: KeywordTable = (
    (
        "Food & Dining",
        (
            "food",
            "restaurant",
            "dining",
            "coffee",
            "cafe",
            "starbucks",
            "mcdonalds",
            "pizza",
            "lunch",
            "dinner",
            "breakfast",
        ),
    ),
    (
        "Transportation",
        ("uber", "lyft", "taxi", "gas", "fuel", "parking", "metro", "bus", "train", "flight", "airline"),
    ),
    (
        "Shopping",
        ("shopping", "store", "amazon", "walmart", "target", "clothing", "shoes", "electronics"),
    ),
    (
        "Entertainment",
        ("movie", "cinema", "netflix", "spotify", "game", "entertainment", "concert", "theater"),
    ),
    (
        "Bills & Utilities",
        ("bill", "utility", "electric", "water", "internet", "phone", "cable", "rent", "mortgage"),
    ),
    (
        "Healthcare",
        ("doctor", "medical", "pharmacy", "hospital", "clinic", "medicine", "health", "dental"),
    ),
    (
        "Education",
        ("school", "education", "course", "university", "college", "book", "tuition", "learning"),
    ),
    ("Travel", ("travel", "hotel", "flight", "vacation", "trip", "booking", "airbnb")),
    ("Groceries", ("grocery", "supermarket", "market", "food", "produce", "meat", "vegetables")),
    ("Income", ("salary", "wage", "bonus", "income", "paycheck", "freelance", "payment")),
    (
        "Investment",
        ("investment", "stock", "bond", "mutual fund", "retirement", "401k", "savings"),
    ),
)

INCOME_CATEGORIES: tuple[str, ...] = tuple(name for name, _ in INCOME_KEYWORDS)
EXPENSE_CATEGORIES: tuple[str, ...] = tuple(name for name, _ in EXPENSE_KEYWORDS)
CATEGORIES: tuple[str, ...] = (*(name for name, _ in CATEGORY_KEYWORDS), "Other")

_DEFAULT_EXPENSE = "Other Expense"
_DEFAULT_CATEGORY = "Other"

_logger = get_logger("finboard.classifier")


def _text(title: str, description: str | None) -> str:
    return f"{title or ''} {description or ''}".lower()


def _hits(text: str, keywords: tuple[str, ...]) -> int:
    return sum(1 for kw in keywords if kw in text)


def _best_of(text: str, table: KeywordTable, default: str) -> tuple[str, int]:
    best, best_hits = default, 0
    for category, keywords in table:
        n = _hits(text, keywords)
        if n > best_hits:
            best, best_hits = category, n
    return best, best_hits


def classify_transaction(title: str, description: str | None = "") -> Classification:
    """Guess category and income/expense type from free text.

    Never fails: without any keyword signal the result is
    ``Other Expense``/``expense`` with confidence ``0.3``.
    """

    text = _text(title, description)

    for category, keywords in INCOME_KEYWORDS:
        n = _hits(text, keywords)
        if n > 0:
            _logger.debug("Income match %r (%d hit(s)) for %r", category, n, title)
            return Classification(
                category=category,
                type=TransactionType.INCOME,
                confidence=min(0.8, n * 0.3),
                reasoning=f"Matched {n} income keyword(s) related to {category}",
            )

    category, n = _best_of(text, EXPENSE_KEYWORDS, _DEFAULT_EXPENSE)
    if n == 0:
        return Classification(
            category=_DEFAULT_EXPENSE,
            type=TransactionType.EXPENSE,
            confidence=0.3,
            reasoning=f"No specific keywords found, defaulting to {_DEFAULT_EXPENSE}",
        )
    return Classification(
        category=category,
        type=TransactionType.EXPENSE,
        confidence=min(0.7, n * 0.2),
        reasoning=f"Matched {n} keyword(s) related to {category}",
    )


def predict_category_offline(title: str, description: str | None = "") -> CategoryPrediction:
    """Pick one category from :data:`CATEGORIES` by keyword hit count."""

    category, n = _best_of(_text(title, description), CATEGORY_KEYWORDS, _DEFAULT_CATEGORY)
    if n == 0:
        return CategoryPrediction(
            category=_DEFAULT_CATEGORY,
            confidence=0.3,
            reasoning=f"No specific keywords found, defaulting to {_DEFAULT_CATEGORY}",
        )
    return CategoryPrediction(
        category=category,
        confidence=min(0.7, n * 0.2),
        reasoning=f"Matched {n} keyword(s) related to {category}",
    )


__all__ = [
    "CATEGORIES",
    "CATEGORY_KEYWORDS",
    "EXPENSE_CATEGORIES",
    "EXPENSE_KEYWORDS",
    "INCOME_CATEGORIES",
    "INCOME_KEYWORDS",
    "classify_transaction",
    "predict_category_offline",
]
