"""
Pure normalizer that converts raw charger readings into CanonicalRecords.

A raw reading arrives from either transport as a loosely-typed mapping with
an ``id`` (numeric observation id, or a composite REST id), an optional
``dataName``, a ``value`` of any type and an optional ISO-8601
``timestamp``.  The normalizer resolves the observation definition, coerces
the value to the declared type, derives display text and unit, and returns
a freshly allocated :class:`CanonicalRecord`.

Malformed or unknown domain data never raises; it degrades to the unknown
record shape.  The only "no result" case is input that is not a mapping.

The clock is only read when a reading carries no timestamp, and can be
injected through ``now`` so callers and tests stay deterministic.

CHANGELOG:
- 2026-10-18: Treat zero and NaN timestamps as absent; out-of-range offsets as unparseable
- 2026-10-13: Group batch results by device id from composite reading ids
- 2026-10-11: Keep numeric ids as observationId for unknown streaming keys
- 2026-10-10: Initial creation

TODO:
- None
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from chargers.src.coercer import coerce_value
from chargers.src.models import CanonicalRecord
from chargers.src.observations import UNKNOWN_TYPE_NAME
from chargers.src.resolver import ResolveMode, numeric_key, resolve
from chargers.src.value_text import map_value_text

logger = logging.getLogger(__name__)

UNKNOWN_ID = "unknown"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _detached(value: Any) -> Any:
    """Deep copy *value* so the record shares no mutable state with the caller."""
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error):
        logger.debug("Could not deep copy %s; keeping a shallow copy", type(value).__name__)
        return copy.copy(value)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def to_iso(moment: datetime) -> str:
    """Format *moment* as UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    return _as_utc(moment).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_epoch_ms(moment: datetime) -> int:
    return (_as_utc(moment) - _EPOCH) // _ONE_MS


def from_epoch_ms(epoch_ms: int) -> datetime:
    return _EPOCH + epoch_ms * _ONE_MS


def parse_timestamp_ms(timestamp: Any) -> int | None:
    """Return epoch milliseconds for *timestamp*, or ``None`` if unparseable.

    Strings are read as ISO-8601 (naive values are taken as UTC), numbers as
    epoch milliseconds.
    """
    if isinstance(timestamp, bool):
        return None
    if isinstance(timestamp, (int, float)):
        return int(timestamp) if math.isfinite(timestamp) else None
    try:
        if isinstance(timestamp, datetime):
            return to_epoch_ms(timestamp)
        if isinstance(timestamp, str):
            return to_epoch_ms(datetime.fromisoformat(timestamp.strip()))
    except (ValueError, OverflowError):
        # Overflow: offset pushes the moment past datetime.min/max in UTC.
        logger.debug("Unparseable observation timestamp: %r", timestamp)
    return None


def device_id_from_reading_id(reading_id: Any) -> str:
    """Extract the device id from a composite ``<device>_<session>_<epoch>_<obs>`` id.

    The device id is everything before the first ``_``.  Non-string ids and
    ids with an empty leading segment map to ``"unknown"``.
    """
    if not isinstance(reading_id, str):
        return UNKNOWN_ID
    head = reading_id.split("_", 1)[0]
    return head or UNKNOWN_ID


def _unknown_name(reading: Mapping[str, Any]) -> str:
    data_name = reading.get("dataName")
    if isinstance(data_name, str) and data_name:
        return data_name
    raw_id = reading.get("id")
    return f"unknown_{'undefined' if raw_id is None else raw_id}"


def _is_missing_timestamp(timestamp: Any) -> bool:
    """Empty, null, zero and NaN timestamps count as absent."""
    if timestamp is None or timestamp is False or timestamp == "":
        return True
    if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
        return timestamp == 0 or math.isnan(timestamp)
    return False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_observation(
    reading: Any,
    mode: ResolveMode | str = ResolveMode.ID,
    *,
    now: datetime | None = None,
) -> CanonicalRecord | None:
    """Normalize one raw reading into a :class:`CanonicalRecord`.

    Args:
        reading: Raw reading mapping with ``id`` and/or ``dataName``,
            ``value`` and optional ``timestamp``.  Never mutated.
        mode: ``"id"`` (default) to match on the numeric observation id,
            ``"name"`` to match on ``dataName``.
        now: Time used when the reading has no timestamp.  Defaults to the
            current UTC time.

    Returns:
        The canonical record, or ``None`` when *reading* is not a mapping.

    Raises:
        ValueError: If *mode* is not a known resolution mode.
    """
    if not isinstance(reading, Mapping):
        logger.debug("Ignoring non-record observation input: %s", type(reading).__name__)
        return None

    mode = ResolveMode(mode)
    raw: dict[Any, Any] = _detached(dict(reading))
    definition = resolve(raw, mode)
    raw_id = raw.get("id")

    if definition is not None:
        data_name = definition.name
        observation_id: int | None = definition.observation_id
        data_type: int | None = int(definition.data_type)
        data_type_name = definition.data_type_name
        unit = definition.unit
    else:
        logger.debug(
            "Unknown observation id=%s dataName=%s (mode=%s)",
            raw_id,
            raw.get("dataName"),
            mode.value,
        )
        data_name = _unknown_name(raw)
        # Streaming keys are numeric; keep them even when not in the registry.
        observation_id = numeric_key(raw_id)
        data_type = None
        data_type_name = UNKNOWN_TYPE_NAME
        unit = ""

    coerced = coerce_value(
        definition.data_type if definition is not None else None,
        _detached(raw.get("value")),
    )
    value_text = map_value_text(definition, coerced.value, coerced.value_text)

    timestamp = raw.get("timestamp")
    if _is_missing_timestamp(timestamp):
        moment = now if now is not None else datetime.now(tz=UTC)
        timestamp = to_iso(moment)
        timestamp_ms: int | None = to_epoch_ms(moment)
    else:
        timestamp_ms = parse_timestamp_ms(timestamp)

    return CanonicalRecord(
        id=UNKNOWN_ID if raw_id is None else raw_id,
        data_name=data_name,
        observation_id=observation_id,
        data_type=data_type,
        data_type_name=data_type_name,
        value=coerced.value,
        value_text=value_text,
        value_unit=unit,
        unit=unit,
        timestamp=timestamp,
        timestamp_ms=timestamp_ms,
        raw=raw,
    )


def parse_observations(
    readings: Any,
    *,
    now: datetime | None = None,
) -> dict[str, list[CanonicalRecord]]:
    """Normalize a batch of REST readings and group them by device.

    Each reading is normalized in ``id`` mode, in input order.  The device
    id is the leading segment of the reading's composite id
    (``"EH123456_1_t_120"`` -> ``"EH123456"``).  Both the device keys and
    the records within each device keep encounter order.

    Returns:
        Mapping of device id to its records; ``{}`` when *readings* is not
        a sequence of readings.
    """
    if isinstance(readings, (str, bytes, Mapping)) or not isinstance(readings, Iterable):
        logger.debug("Ignoring non-sequence observation batch: %s", type(readings).__name__)
        return {}

    grouped: dict[str, list[CanonicalRecord]] = {}
    count = 0
    for reading in readings:
        record = parse_observation(reading, ResolveMode.ID, now=now)
        if record is None:
            continue
        grouped.setdefault(device_id_from_reading_id(record.id), []).append(record)
        count += 1

    logger.debug("Parsed %d observations into %d device groups", count, len(grouped))
    return grouped
