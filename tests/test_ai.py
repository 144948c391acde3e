import json
from decimal import Decimal

import pytest

import finboard.ai as ai_mod
from finboard.ai import generate_insights, predict_category
from finboard.config import Settings
from finboard.models import Currency, StorageTransaction, TransactionType
from tests.helpers.openai_stub import ChatStub

_SETTINGS = Settings(openai_api_key="sk-test", openai_model="gpt-test")


def _stored(title: str = "Coffee", amount: str = "-5.50") -> StorageTransaction:
    return StorageTransaction(
        title=title,
        description="Morning",
        amount=Decimal(amount),
        currency=Currency.USD,
        date="2024-01-15",
        category="Food & Dining",
        type=TransactionType.EXPENSE,
    )


# ---- predict_category --------------------------------------------------------


def test_predict_without_key_uses_rules_and_builds_no_client(monkeypatch: pytest.MonkeyPatch):
    def _boom(*a, **kw):
        raise AssertionError("OpenAI client must not be constructed without an API key")

    monkeypatch.setattr(ai_mod, "OpenAI", _boom)
    prediction = predict_category("Coffee at Starbucks", "", settings=Settings())
    assert prediction.category == "Food & Dining"
    assert prediction.reasoning.startswith("Matched")


def test_predict_parses_model_json():
    stub = ChatStub(
        json.dumps({"category": "Travel", "confidence": 0.91, "reasoning": "Hotel booking"})
    )
    prediction = predict_category("Hilton", "two nights", client=stub, settings=_SETTINGS)
    assert prediction.category == "Travel"
    assert prediction.confidence == pytest.approx(0.91)
    assert prediction.reasoning == "Hotel booking"

    (call,) = stub.calls
    assert call["model"] == "gpt-test"
    assert call["temperature"] == pytest.approx(0.3)
    assert call["max_tokens"] == 200
    assert call["messages"][0]["role"] == "system"
    assert '"Hilton"' in call["messages"][1]["content"]


def test_predict_fills_defaults_and_clamps_confidence():
    stub = ChatStub(json.dumps({"confidence": 7}))
    prediction = predict_category("Thing", client=stub, settings=_SETTINGS)
    assert prediction.category == "Other"
    assert prediction.confidence == pytest.approx(1.0)
    assert prediction.reasoning == "No reasoning provided"


def test_predict_defaults_confidence_when_missing():
    stub = ChatStub(json.dumps({"category": "Shopping"}))
    prediction = predict_category("Thing", client=stub, settings=_SETTINGS)
    assert prediction.confidence == pytest.approx(0.5)


@pytest.mark.parametrize(
    "stub",
    [
        ChatStub(error=RuntimeError("rate limited")),
        ChatStub("not json at all"),
        ChatStub(None),
        ChatStub(json.dumps(["not", "an", "object"])),
    ],
)
def test_predict_falls_back_to_rules_on_failure(stub):
    prediction = predict_category("Uber ride", "", client=stub, settings=_SETTINGS)
    assert prediction.category == "Transportation"
    assert prediction.reasoning == "Matched 1 keyword(s) related to Transportation"


def test_predict_builds_client_from_settings(monkeypatch: pytest.MonkeyPatch):
    stub = ChatStub(json.dumps({"category": "Education", "confidence": 0.8, "reasoning": "r"}))
    seen: dict[str, str] = {}

    def _factory(*, api_key: str):
        seen["api_key"] = api_key
        return stub

    monkeypatch.setattr(ai_mod, "OpenAI", _factory)
    prediction = predict_category("Udemy", settings=_SETTINGS)
    assert prediction.category == "Education"
    assert seen == {"api_key": "sk-test"}


# ---- generate_insights -------------------------------------------------------


def test_insights_empty_input_makes_no_call():
    stub = ChatStub("[]")
    assert generate_insights([], client=stub, settings=_SETTINGS) == []
    assert stub.calls == []


def test_insights_without_key_is_empty():
    assert generate_insights([_stored()], settings=Settings()) == []


def test_insights_parse_and_skip_malformed_items():
    reply = json.dumps(
        [
            {
                "category": "Food & Dining",
                "confidence": 0.85,
                "suggestion": "Plan meals",
                "spendingPattern": "Weekend spikes",
                "trend": "increasing",
            },
            {"category": "Shopping"},
            {"category": "Travel", "confidence": 0.4, "suggestion": "Book early", "trend": "sideways"},
            {"category": "Bills & Utilities", "confidence": 0.6, "suggestion": "Compare plans"},
        ]
    )
    stub = ChatStub(reply)
    insights = generate_insights([_stored(), _stored("Lunch", "-12")], client=stub, settings=_SETTINGS)

    assert [i.category for i in insights] == ["Food & Dining", "Bills & Utilities"]
    first = insights[0]
    assert first.spending_pattern == "Weekend spikes"
    assert first.trend == "increasing"
    assert insights[1].trend is None

    (call,) = stub.calls
    assert call["max_tokens"] == 500
    assert "- Lunch: Morning (-12 USD, Food & Dining, expense)" in call["messages"][1]["content"]


@pytest.mark.parametrize(
    "stub",
    [ChatStub(error=RuntimeError("boom")), ChatStub("{"), ChatStub(json.dumps({"a": 1}))],
)
def test_insights_failures_return_empty(stub):
    assert generate_insights([_stored()], client=stub, settings=_SETTINGS) == []
