"""
Value coercion for raw observation values.

Turns the loosely-typed ``value`` of a raw reading into the Python type its
observation declares.  Coercion never raises: input that does not fit the
declared type is passed through unchanged, and JSON parse failures are
reported inline in the returned text.

This is a pure function of ``(data_type, raw_value)``.

CHANGELOG:
- 2026-10-18: Reject NaN and Infinity literals in JSON values
- 2026-10-11: Treat non-finite numeric strings as non-numeric
- 2026-10-10: Initial creation

TODO:
- None
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, NamedTuple

from chargers.src.observations import DataType

logger = logging.getLogger(__name__)

JSON_PARSED_TEXT = "JSON data parsed successfully"
JSON_OBJECT_TEXT = "JSON object"
JSON_ERROR_PREFIX = "JSON parse error: "

_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")
_NUMBER_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")


class Coerced(NamedTuple):
    """Result of coercing one raw value.

    Attributes:
        value: The typed value (or the raw value when it did not fit).
        value_text: Diagnostic text set by the JSON path, ``""`` otherwise.
    """

    value: Any
    value_text: str = ""


# ---------------------------------------------------------------------------
# Per-type helpers
# ---------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_boolean(raw: Any) -> Any:
    if isinstance(raw, bool):
        return raw
    if raw == "true":
        return True
    if raw == "false":
        return False
    if _is_number(raw):
        return raw != 0
    return raw


def _to_integer(raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    if _INTEGER_RE.match(raw):
        try:
            return int(raw)
        except ValueError:
            # Beyond the interpreter's int string-conversion limit.
            return raw
    if _NUMBER_RE.match(raw):
        parsed = float(raw)
        if math.isfinite(parsed):
            # Decimal forms truncate toward zero ("12.7" -> 12).
            return int(parsed)
    return raw


def _to_double(raw: Any) -> Any:
    if not isinstance(raw, str) or not _NUMBER_RE.match(raw):
        return raw
    parsed = float(raw)
    if not math.isfinite(parsed):
        return raw
    return parsed


def _to_string(raw: Any) -> Any:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (bool, dict, list)):
        try:
            return json.dumps(raw)
        except (TypeError, ValueError):
            return str(raw)
    return str(raw)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} is not valid JSON")


def _to_json(raw: Any) -> Coerced:
    if isinstance(raw, str):
        try:
            return Coerced(json.loads(raw, parse_constant=_reject_constant), JSON_PARSED_TEXT)
        except (ValueError, RecursionError) as exc:
            logger.debug("JSON observation value did not parse: %s", exc)
            return Coerced(raw, f"{JSON_ERROR_PREFIX}{exc}")
    if isinstance(raw, (dict, list)):
        return Coerced(raw, JSON_OBJECT_TEXT)
    return Coerced(raw)


_SIMPLE_COERCERS = {
    DataType.BOOLEAN: _to_boolean,
    DataType.INTEGER: _to_integer,
    DataType.DOUBLE: _to_double,
    DataType.STRING: _to_string,
}

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def coerce_value(data_type: DataType | None, raw: Any) -> Coerced:
    """Coerce *raw* to the Python type declared by *data_type*.

    Args:
        data_type: Declared type of the resolved observation, or ``None``
            when the observation is unknown (value passes through).
        raw: The raw reading's value, of any type.

    Returns:
        A :class:`Coerced` pair.  ``None`` input always yields
        ``Coerced(None, "")``.
    """
    if raw is None or data_type is None:
        return Coerced(raw)
    if data_type is DataType.JSON:
        return _to_json(raw)
    convert = _SIMPLE_COERCERS.get(data_type)
    if convert is None:
        return Coerced(raw)
    return Coerced(convert(raw))
