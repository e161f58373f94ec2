"""
Key resolution: raw reading -> observation definition.

Two strategies share one interface and are selected explicitly by
:class:`ResolveMode`; the shape of the input is never used to pick one.

- ``id``: the reading's ``id`` must be numeric or numeric-shaped.  Composite
  ids such as ``"EH123456_1_t_120"`` do not resolve.
- ``name``: the reading's ``dataName`` (or its ``id`` as a string) is looked
  up by name with the registry's exact -> case-insensitive -> alternate ->
  normalized precedence.

CHANGELOG:
- 2026-10-10: Initial creation

TODO:
- None
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol

from chargers.src.observations import ObservationDef, lookup_by_id, lookup_by_name

_DIGITS_RE = re.compile(r"^\s*\d+\s*$")


class ResolveMode(str, Enum):
    """How a raw reading's key is matched against the registry."""

    ID = "id"
    NAME = "name"


def numeric_key(value: Any) -> int | None:
    """Return *value* as a positive observation id, or ``None``.

    Accepts ints, integral floats and digit-only strings.  Booleans are
    rejected even though they are ints.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        candidate = value
    elif isinstance(value, float) and value.is_integer():
        candidate = int(value)
    elif isinstance(value, str) and _DIGITS_RE.match(value):
        try:
            candidate = int(value)
        except ValueError:
            return None
    else:
        return None
    return candidate if candidate > 0 else None


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class KeyResolver(Protocol):
    def resolve(self, reading: Mapping[str, Any]) -> ObservationDef | None: ...


class IdResolver:
    """Resolve by numeric observation id."""

    def resolve(self, reading: Mapping[str, Any]) -> ObservationDef | None:
        key = numeric_key(reading.get("id"))
        if key is None:
            return None
        return lookup_by_id(key)


class NameResolver:
    """Resolve by canonical or alternate observation name."""

    def resolve(self, reading: Mapping[str, Any]) -> ObservationDef | None:
        candidate = reading.get("dataName")
        if candidate is None:
            candidate = reading.get("id")
        if candidate is None:
            return None
        return lookup_by_name(candidate if isinstance(candidate, str) else str(candidate))


_RESOLVERS: dict[ResolveMode, KeyResolver] = {
    ResolveMode.ID: IdResolver(),
    ResolveMode.NAME: NameResolver(),
}

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve(
    reading: Mapping[str, Any],
    mode: ResolveMode | str = ResolveMode.ID,
) -> ObservationDef | None:
    """Return the definition *reading* refers to, or ``None`` when unmatched.

    Raises:
        ValueError: If *mode* is not ``"id"`` or ``"name"``.
    """
    return _RESOLVERS[ResolveMode(mode)].resolve(reading)
