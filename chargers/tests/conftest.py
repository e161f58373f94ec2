"""
Shared test fixtures for the observation parser tests.

All parser env vars are cleaned before each test to ensure isolation.

CHANGELOG:
- 2026-10-13: Initial creation

TODO:
- None
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

# All ParserSettings environment variable names, used for cleanup.
_ALL_PARSER_ENV_VARS = (
    "OBSERVATION_MATCH_MODE",
    "CHARGER_ONLINE_WINDOW_S",
    "MESSAGE_TOPIC_PREFIX",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_parser_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all parser env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_PARSER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def fixed_now() -> datetime:
    """A fixed 'current time' for clock-dependent code paths."""
    return datetime(2023, 12, 31, 12, 5, 0, tzinfo=UTC)
