"""Logging for the ``finboard`` package.

Library modules log through ``get_logger("finboard.<module>")`` and never add
handlers of their own. The CLI root callback installs the single real handler
with :func:`configure_logging`; until that happens records reach a
``NullHandler`` and stay silent.

The level comes from the ``level`` argument, then ``FINBOARD_LOG_LEVEL``, then
INFO. A level name that ``logging`` does not know resolves to INFO so a typo in
``.env`` cannot stop an import.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

ROOT_LOGGER = "finboard"
LEVEL_ENV_VAR = "FINBOARD_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Handler installed by configure_logging(); None until the CLI runs.
_handler: logging.Handler | None = None


def resolve_level(value: int | str | None = None) -> int:
    """Turn ``DEBUG``/``"10"``/``10``/``None`` into a numeric logging level."""

    if value is None:
        value = os.getenv(LEVEL_ENV_VAR, "").strip() or logging.INFO
    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> logging.Handler:
    """Attach one ``StreamHandler`` to the ``finboard`` logger.

    Only the first call has an effect; later calls return the handler it
    installed and leave level and format untouched.
    """

    global _handler
    if _handler is not None:
        return _handler

    root = logging.getLogger(ROOT_LOGGER)
    for placeholder in [h for h in root.handlers if isinstance(h, logging.NullHandler)]:
        root.removeHandler(placeholder)

    _handler = logging.StreamHandler(stream)
    _handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    root.setLevel(resolve_level(level))
    root.addHandler(_handler)
    # records stop here instead of reaching the host's root logger
    root.propagate = False
    return _handler


def reset_logging() -> None:
    """Undo :func:`configure_logging` so the next call installs afresh."""

    global _handler
    root = logging.getLogger(ROOT_LOGGER)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(logging.NOTSET)
    root.propagate = True
    _handler = None


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if _handler is None and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "DEFAULT_FORMAT",
    "LEVEL_ENV_VAR",
    "ROOT_LOGGER",
    "configure_logging",
    "get_logger",
    "reset_logging",
    "resolve_level",
]
