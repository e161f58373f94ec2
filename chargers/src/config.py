"""
Observation parser configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Every field has a default, so the parser works with no environment at all.

CHANGELOG:
- 2026-10-13: Initial creation

TODO:
- None
"""

import logging
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings


class ParserSettings(BaseSettings):
    """Configuration for the observation parser and its CLI.

    Attributes:
        observation_match_mode: Default key resolution mode, ``"id"`` for
            streaming readings or ``"name"`` for REST readings.
        charger_online_window_s: A charger whose newest observation is
            older than this many seconds is reported offline.
        message_topic_prefix: First topic segment of outbound messages.
        log_level: Root log level name for the CLI.
    """

    observation_match_mode: Literal["id", "name"] = "id"
    charger_online_window_s: int = 300
    message_topic_prefix: str = "easee"
    log_level: str = "INFO"

    @field_validator("charger_online_window_s")
    @classmethod
    def online_window_must_be_positive(cls, v: int) -> int:
        """Validate the online window is a positive number of seconds."""
        if v <= 0:
            raise ValueError("CHARGER_ONLINE_WINDOW_S must be > 0")
        return v

    @field_validator("message_topic_prefix")
    @classmethod
    def topic_prefix_must_not_be_empty(cls, v: str) -> str:
        """Strip surrounding slashes and reject an empty prefix."""
        prefix = v.strip().strip("/")
        if not prefix:
            raise ValueError("MESSAGE_TOPIC_PREFIX must not be empty")
        return prefix

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Upper-case the level and validate it against stdlib level names."""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL must be a logging level name (got: '{v}')")
        return level

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
