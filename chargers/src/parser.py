"""
Observation parser bound to settings and a logger.

Collaborators (streaming client, REST client) hold one ObservationParser
and call it per message or per batch.  It fills in the configured match
mode, online window and topic prefix, and logs each call at DEBUG.

CHANGELOG:
- 2026-10-13: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from chargers.src.config import ParserSettings
from chargers.src.models import CanonicalRecord, ChargerConfig, ChargerStatus, ObservationMessage
from chargers.src.normalizer import parse_observation, parse_observations
from chargers.src.resolver import ResolveMode
from chargers.src.status import extract_charger_status, format_message, parse_charger_config


class ObservationParser:
    """Stateless parser facade; safe to share between threads.

    Args:
        settings: Parser settings.  Loaded from the environment when omitted.
        logger: Logger for call tracing.  Defaults to this module's logger.
    """

    def __init__(
        self,
        settings: ParserSettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings if settings is not None else ParserSettings()
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def parse_observation(
        self,
        reading: Any,
        mode: ResolveMode | str | None = None,
        *,
        now: datetime | None = None,
    ) -> CanonicalRecord | None:
        """Normalize one reading; *mode* defaults to the configured match mode."""
        return parse_observation(
            reading,
            mode if mode is not None else self.settings.observation_match_mode,
            now=now,
        )

    def parse_observations(
        self,
        readings: Any,
        *,
        now: datetime | None = None,
    ) -> dict[str, list[CanonicalRecord]]:
        size = len(readings) if isinstance(readings, Sequence) else 0
        self._logger.debug("Parsing %d observations", size)
        return parse_observations(readings, now=now)

    def extract_charger_status(
        self,
        records: Sequence[CanonicalRecord],
        charger_id: str,
        *,
        now: datetime | None = None,
    ) -> ChargerStatus | None:
        self._logger.debug("Extracting status for charger: %s", charger_id)
        return extract_charger_status(
            records,
            charger_id,
            now=now,
            online_window_s=self.settings.charger_online_window_s,
        )

    def parse_charger_config(self, data: Any) -> ChargerConfig | None:
        charger_id = data.get("id") if isinstance(data, dict) else None
        self._logger.debug("Parsing charger config: %s", charger_id)
        return parse_charger_config(data)

    def format_message(self, record: CanonicalRecord) -> ObservationMessage:
        return format_message(record, topic_prefix=self.settings.message_topic_prefix)
