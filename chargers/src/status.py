"""
Derived views over canonical records: charger status, charger config and
outbound messages.

All functions are pure.  ``extract_charger_status`` compares observation
times against ``now``, which callers may inject.

CHANGELOG:
- 2026-10-13: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from chargers.src.models import CanonicalRecord, ChargerConfig, ChargerStatus, ObservationMessage
from chargers.src.normalizer import (
    device_id_from_reading_id,
    from_epoch_ms,
    to_epoch_ms,
    to_iso,
)

logger = logging.getLogger(__name__)

DEFAULT_ONLINE_WINDOW_S = 300
DEFAULT_TOPIC_PREFIX = "easee"

# Observation name -> line key within ChargerStatus.voltage
_VOLTAGE_LINES: dict[str, str] = {
    "InVolt_T1_T2": "l1",
    "InVolt_T1_T3": "l2",
    "InVolt_T1_T4": "l3",
}


def extract_charger_status(
    records: Sequence[CanonicalRecord],
    charger_id: str,
    *,
    now: datetime | None = None,
    online_window_s: int = DEFAULT_ONLINE_WINDOW_S,
) -> ChargerStatus | None:
    """Summarise a charger's parsed observations into a :class:`ChargerStatus`.

    Later records win for every field.  The charger counts as online when
    its newest observation is less than *online_window_s* seconds older
    than *now*.

    Returns:
        The status, or ``None`` when *records* is not a list or tuple.
    """
    if not isinstance(records, (list, tuple)):
        return None

    status = ChargerStatus(id=charger_id, name=charger_id)
    latest_ms: int | None = None

    for record in records:
        if record.timestamp_ms is not None and (
            latest_ms is None or record.timestamp_ms > latest_ms
        ):
            latest_ms = record.timestamp_ms

        if record.data_name == "ChargerOpMode":
            status.state = record.value_text or record.value
        elif record.data_name == "TotalPower":
            status.power = record.value
        elif record.data_name == "OutputCurrent":
            status.current = record.value
        elif record.data_name in _VOLTAGE_LINES:
            if status.voltage is None:
                status.voltage = {}
            status.voltage[_VOLTAGE_LINES[record.data_name]] = record.value

    if latest_ms is not None:
        current = now if now is not None else datetime.now(tz=UTC)
        cutoff_ms = to_epoch_ms(current) - online_window_s * 1000
        status.online = latest_ms > cutoff_ms
        try:
            status.last_seen = to_iso(from_epoch_ms(latest_ms))
        except OverflowError:
            logger.debug("Charger %s: newest timestamp %d out of range", charger_id, latest_ms)

    logger.debug(
        "Charger %s status: state=%s online=%s", charger_id, status.state, status.online
    )
    return status


def parse_charger_config(data: Any) -> ChargerConfig | None:
    """Build a :class:`ChargerConfig` from a REST charger object.

    Returns ``None`` when *data* is not a mapping.
    """
    if not isinstance(data, Mapping):
        return None
    return ChargerConfig.model_validate(dict(data))


def format_message(
    record: CanonicalRecord,
    *,
    topic_prefix: str = DEFAULT_TOPIC_PREFIX,
) -> ObservationMessage:
    """Shape a canonical record as an outbound message.

    The topic is ``<prefix>/<chargerId>/<dataName>`` where the charger id
    is the leading segment of the record's id.
    """
    charger_id = device_id_from_reading_id(str(record.id))
    label = record.data_name or record.data_type
    return ObservationMessage(
        charger_id=charger_id,
        data_type=label,
        data_name=record.data_name,
        value=record.value,
        value_text=record.value_text,
        unit=record.unit or record.value_unit,
        timestamp=record.timestamp,
        payload=record.value,
        topic=f"{topic_prefix}/{charger_id}/{label}",
    )
