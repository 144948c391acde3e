"""AI-assisted category prediction and spending insights (OpenAI chat API).

Both entry points degrade instead of failing:

- :func:`predict_category` falls back to
  :func:`finboard.classifier.predict_category_offline` when no API key or
  client is available, or when the call or response parsing fails.
- :func:`generate_insights` returns an empty list on any failure.

No client is created at import time. Callers may pass their own client
(anything exposing ``chat.completions.create``); otherwise one is built per
call from :class:`~finboard.config.Settings`.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from typing import Any, Literal

from openai import OpenAI
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .classifier import CATEGORIES, predict_category_offline
from .config import Settings, load_settings
from .logging_setup import get_logger
from .models import CategoryPrediction, SpendingInsight, StorageTransaction

_PREDICT_SYSTEM = (
    "You are a financial AI assistant that categorizes transactions. "
    "Always respond with valid JSON only."
)
_INSIGHTS_SYSTEM = (
    "You are a financial AI advisor that analyzes spending patterns and provides "
    "actionable insights. Always respond with valid JSON only."
)

_logger = get_logger("finboard.ai")


# ---- Response models ---------------------------------------------------------


class _PredictionBody(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    category: str | None = None
    confidence: float | None = None
    reasoning: str | None = None

    def to_prediction(self) -> CategoryPrediction:
        confidence = 0.5 if self.confidence is None else self.confidence
        return CategoryPrediction(
            category=self.category or "Other",
            confidence=min(max(confidence, 0.0), 1.0),
            reasoning=self.reasoning or "No reasoning provided",
        )


class _InsightItem(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, populate_by_name=True)

    category: str
    confidence: float
    suggestion: str
    spending_pattern: str | None = Field(default=None, alias="spendingPattern")
    trend: Literal["increasing", "decreasing", "stable"] | None = None

    @field_validator("confidence")
    @classmethod
    def _clamp(cls, v: float) -> float:
        return min(max(float(v), 0.0), 1.0)

    def to_insight(self) -> SpendingInsight:
        return SpendingInsight(
            category=self.category,
            confidence=self.confidence,
            suggestion=self.suggestion,
            spending_pattern=self.spending_pattern,
            trend=self.trend,
        )


# ---- Prompt construction -----------------------------------------------------


def build_prediction_prompt(title: str, description: str) -> str:
    categories = ", ".join(CATEGORIES)
    return (
        "Analyze this financial transaction and predict the most appropriate category.\n\n"
        f'Transaction Title: "{title}"\n'
        f'Description: "{description}"\n\n'
        "Please respond with a JSON object containing:\n"
        f"- category: The most appropriate category from this list: {categories}\n"
        "- confidence: A number between 0 and 1 representing your confidence in this prediction\n"
        "- reasoning: A brief explanation of why you chose this category\n"
    )


def build_insights_prompt(transactions: Sequence[StorageTransaction]) -> str:
    lines = [
        f"- {t.title}: {t.description} ({t.amount} {t.currency.value}, {t.category}, {t.type.value})"
        for t in transactions
    ]
    return (
        "Analyze these financial transactions and provide insights about spending patterns "
        "and suggestions for improvement.\n\n"
        "Transactions:\n" + "\n".join(lines) + "\n\n"
        "Please respond with a JSON array of insights, each containing:\n"
        "- category: The spending category this insight relates to\n"
        "- confidence: A number between 0 and 1 representing your confidence\n"
        "- suggestion: A helpful suggestion for this category\n"
        "- spendingPattern: Optional description of the spending pattern observed\n"
        "- trend: Optional trend indicator (increasing, decreasing, stable)\n"
    )


# ---- Internal helpers --------------------------------------------------------


def _resolve_client(client: Any | None, settings: Settings) -> Any | None:
    if client is not None:
        return client
    if not settings.ai_enabled:
        return None
    return OpenAI(api_key=settings.openai_api_key)


def _complete(
    client: Any,
    *,
    model: str,
    system: str,
    prompt: str,
    temperature: float,
    max_tokens: int,
) -> str:
    completion = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        temperature=temperature,
        max_tokens=max_tokens,
    )
    choices = getattr(completion, "choices", None) or []
    content = choices[0].message.content if choices else None
    if not content:
        raise ValueError("No response from OpenAI")
    return content


# ---- Public API --------------------------------------------------------------


def predict_category(
    title: str,
    description: str = "",
    *,
    client: Any | None = None,
    settings: Settings | None = None,
) -> CategoryPrediction:
    """Predict a category for a transaction, falling back to keyword rules."""

    settings = settings or load_settings()
    resolved = _resolve_client(client, settings)
    if resolved is None:
        _logger.debug("AI predictor disabled; using keyword rules for %r", title)
        return predict_category_offline(title, description)

    try:
        content = _complete(
            resolved,
            model=settings.openai_model,
            system=_PREDICT_SYSTEM,
            prompt=build_prediction_prompt(title, description),
            temperature=0.3,
            max_tokens=200,
        )
        return _PredictionBody.model_validate_json(content).to_prediction()
    except Exception as e:  # noqa: BLE001 - any provider/parse failure degrades to rules
        _logger.warning("AI category prediction failed (%s); using keyword rules", e)
        return predict_category_offline(title, description)


def generate_insights(
    transactions: Iterable[StorageTransaction],
    *,
    client: Any | None = None,
    settings: Settings | None = None,
) -> list[SpendingInsight]:
    """Ask the model for spending insights; ``[]`` when unavailable or on failure."""

    items = list(transactions)
    if not items:
        return []

    settings = settings or load_settings()
    resolved = _resolve_client(client, settings)
    if resolved is None:
        return []

    try:
        content = _complete(
            resolved,
            model=settings.openai_model,
            system=_INSIGHTS_SYSTEM,
            prompt=build_insights_prompt(items),
            temperature=0.4,
            max_tokens=500,
        )
        parsed = json.loads(content)
    except Exception as e:  # noqa: BLE001 - insights are optional
        _logger.warning("AI insights generation failed: %s", e)
        return []

    if not isinstance(parsed, list):
        return []

    insights: list[SpendingInsight] = []
    for raw in parsed:
        try:
            insights.append(_InsightItem.model_validate(raw).to_insight())
        except ValidationError as e:
            _logger.debug("Skipping malformed insight %r: %s", raw, e)
    return insights


__all__ = [
    "build_insights_prompt",
    "build_prediction_prompt",
    "generate_insights",
    "predict_category",
]
