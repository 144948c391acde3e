"""Public interface for the ``finboard`` package.

Symbol re-exports only; no runtime logic lives here.
"""

from .classifier import (
    CATEGORIES,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    classify_transaction,
    predict_category_offline,
)
from .csv_codec import (
    generate_csv,
    generate_csv_template,
    parse_csv,
    read_csv_file,
    to_storage_transactions,
)
from .errors import DecodeErrorKind, RowError, RowField, RowValidationError
from .models import (
    Classification,
    CategoryPrediction,
    CSVImportResult,
    CSVTransaction,
    Currency,
    SpendingInsight,
    StorageTransaction,
    TransactionType,
)

__all__ = [
    # CSV codec
    "generate_csv",
    "generate_csv_template",
    "parse_csv",
    "read_csv_file",
    "to_storage_transactions",
    # Classifier
    "CATEGORIES",
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "classify_transaction",
    "predict_category_offline",
    # Errors
    "DecodeErrorKind",
    "RowError",
    "RowField",
    "RowValidationError",
    # Models / types
    "Classification",
    "CategoryPrediction",
    "CSVImportResult",
    "CSVTransaction",
    "Currency",
    "SpendingInsight",
    "StorageTransaction",
    "TransactionType",
]
