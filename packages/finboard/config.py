"""Environment-backed settings.

Values come from the process environment. Entrypoints load a local ``.env``
with ``python-dotenv`` (``override=False``) before calling
:func:`load_settings`, so explicitly exported variables always win.

Recognized variables:

- ``OPENAI_API_KEY``: enables the AI predictor; without it callers fall back
  to the rule-based classifier.
- ``FINBOARD_OPENAI_MODEL``: chat model name (default ``gpt-4o``).
- ``FINBOARD_CURRENCY``: default display/export currency (``USD`` or ``INR``,
  default ``INR``).
- ``FINBOARD_LOG_LEVEL``: see :mod:`finboard.logging_setup`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .logging_setup import get_logger
from .models import Currency

DEFAULT_MODEL = "gpt-4o"
DEFAULT_CURRENCY = Currency.INR

_logger = get_logger("finboard.config")


@dataclass(frozen=True, slots=True)
class Settings:
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_MODEL
    default_currency: Currency = DEFAULT_CURRENCY
    log_level: str | None = None

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key)


def _resolve_currency(raw: str | None) -> Currency:
    if not raw:
        return DEFAULT_CURRENCY
    value = raw.strip().upper()
    try:
        return Currency(value)
    except ValueError:
        _logger.warning(
            "Ignoring FINBOARD_CURRENCY=%r; expected USD or INR, using %s",
            raw,
            DEFAULT_CURRENCY.value,
        )
        return DEFAULT_CURRENCY


def load_settings() -> Settings:
    """Build :class:`Settings` from the current environment."""

    api_key = (os.getenv("OPENAI_API_KEY") or "").strip() or None
    model = (os.getenv("FINBOARD_OPENAI_MODEL") or "").strip() or DEFAULT_MODEL
    return Settings(
        openai_api_key=api_key,
        openai_model=model,
        default_currency=_resolve_currency(os.getenv("FINBOARD_CURRENCY")),
        log_level=os.getenv("FINBOARD_LOG_LEVEL"),
    )


__all__ = ["Settings", "load_settings", "DEFAULT_MODEL", "DEFAULT_CURRENCY"]
