"""
Display text for coerced observation values.

Looks up enum-like observation values (LED mode, op mode, pilot mode, ...)
in the definition's value table.  Keys are compared in string form, so the
number ``3`` and the string ``"3"`` resolve to the same entry.

CHANGELOG:
- 2026-10-10: Initial creation

TODO:
- None
"""

from __future__ import annotations

from typing import Any

from chargers.src.observations import ObservationDef


def map_value_text(
    definition: ObservationDef | None,
    value: Any,
    preset_text: str = "",
) -> str:
    """Return the display text for *value*.

    Text already produced during coercion (the JSON path) takes precedence
    over any value table.  Unknown observations, observations without a
    value table, and values missing from the table all yield ``""``.
    """
    if preset_text:
        return preset_text
    if definition is None:
        return ""
    return definition.text_for(value)
