"""Pytest configuration for test isolation.

Settings are read from the process environment (and the CLI loads a local
``.env``), so a developer's exported ``OPENAI_API_KEY`` or ``FINBOARD_*``
variables would otherwise leak into assertions. Each test starts from a clean
environment and a working directory without a ``.env``.

The CLI root callback also configures the ``finboard`` logger once per
process; the logging state is reset after every test so configuration made by
one test never changes what another observes.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

import finboard.logging_setup as logging_setup

_ENV_VARS = (
    "OPENAI_API_KEY",
    "FINBOARD_OPENAI_MODEL",
    "FINBOARD_CURRENCY",
    "FINBOARD_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    logging_setup.reset_logging()
