"""
Pydantic models for normalized charger observations.

Defines the canonical observation record produced by the normalizer, plus
the charger status, charger configuration and outbound message shapes built
from it.  Attributes are snake_case; serialising with ``by_alias=True``
yields the camelCase field names consumers expect (``dataName``,
``valueText``, ``timestampMs``, ...).

CHANGELOG:
- 2026-10-13: Add ChargerStatus, ChargerConfig and ObservationMessage
- 2026-10-10: Initial creation

TODO:
- None
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

DataTypeName = Literal["Boolean", "Integer", "Double", "String", "JSON", "Unknown"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CanonicalRecord(_CamelModel):
    """One raw reading after resolution, coercion and enrichment.

    Attributes:
        id: The raw ``id`` echoed back, or ``"unknown"`` when absent.
        data_name: Canonical observation name, the input ``dataName`` for
            unknown observations, or ``unknown_<id>``.
        observation_id: Resolved id; the raw numeric id for unknown
            numeric keys; ``None`` for unknown names.
        data_type: Declared data type code, ``None`` when unresolved.
        data_type_name: Symbolic name of *data_type*, ``"Unknown"`` when
            unresolved.
        value: The coerced value.
        value_text: Display text (enum text or JSON diagnostics), else ``""``.
        value_unit: Unit of the observation, ``""`` when none.
        unit: Alias of *value_unit*, always equal to it.
        timestamp: Input timestamp or the generated ISO-8601 time.
        timestamp_ms: Epoch milliseconds of *timestamp*, ``None`` when the
            input timestamp could not be parsed.
        raw: Deep copy of the raw reading.
    """

    model_config = ConfigDict(frozen=True)

    id: Any
    data_name: str
    observation_id: int | None = None
    data_type: int | None = None
    data_type_name: DataTypeName = "Unknown"
    value: Any = None
    value_text: str = ""
    value_unit: str = ""
    unit: str = ""
    timestamp: Any
    timestamp_ms: int | None = None
    raw: dict[Any, Any]

    @model_validator(mode="after")
    def _unit_alias_matches(self) -> CanonicalRecord:
        if self.value_unit != self.unit:
            raise ValueError("unit must equal value_unit")
        return self


class ChargerStatus(_CamelModel):
    """Summary of a charger's state derived from its parsed observations.

    Attributes:
        id: Charger identifier (e.g. ``"EH123456"``).
        name: Display name, defaults to *id*.
        online: True when the newest observation is inside the online window.
        state: Op-mode display text or raw op-mode value; ``"unknown"``.
        power: Latest ``TotalPower`` value.
        current: Latest ``OutputCurrent`` value.
        voltage: Line voltages keyed ``l1``/``l2``/``l3``.
        last_seen: ISO-8601 time of the newest observation.
    """

    id: str
    name: str
    online: bool = False
    state: Any = "unknown"
    power: Any = None
    current: Any = None
    voltage: dict[str, Any] | None = None
    last_seen: str | None = None


class ChargerConfig(_CamelModel):
    """Charger configuration as returned by the REST charger listing."""

    model_config = ConfigDict(extra="ignore")

    id: Any = None
    name: Any = None
    site_id: Any = None
    site_name: Any = None
    circuit_id: Any = None
    product_code: Any = None
    back_plate: Any = None
    level_of_access: Any = None
    location: Any = None
    address: Any = None
    created_on: Any = None
    updated_on: Any = None

    @model_validator(mode="after")
    def _default_name(self) -> ChargerConfig:
        """Default name to id when the charger has no display name."""
        if not self.name:
            self.name = self.id
        return self


class ObservationMessage(_CamelModel):
    """Outbound message for one canonical record, keyed by topic."""

    charger_id: str
    data_type: Any
    data_name: str
    value: Any = None
    value_text: str = ""
    unit: str = ""
    timestamp: Any = None
    payload: Any = None
    topic: str
