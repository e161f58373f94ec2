"""
Tests for display text derivation from value tables.

CHANGELOG:
- 2026-10-10: Initial creation

TODO:
- None
"""

from __future__ import annotations

from chargers.src.observations import lookup_by_id
from chargers.src.value_text import map_value_text


class TestMapValueText:
    def test_enum_value(self) -> None:
        assert map_value_text(lookup_by_id(46), 24) == "Normal mode (Charging)"

    def test_number_and_string_yield_same_text(self) -> None:
        phase_mode = lookup_by_id(38)
        assert map_value_text(phase_mode, 3) == map_value_text(phase_mode, "3") == "Locked to 3-phase"

    def test_preset_text_takes_precedence(self) -> None:
        assert map_value_text(lookup_by_id(46), 24, "JSON object") == "JSON object"

    def test_unmapped_value(self) -> None:
        assert map_value_text(lookup_by_id(89), 8) == ""

    def test_definition_without_table(self) -> None:
        assert map_value_text(lookup_by_id(120), 3) == ""

    def test_unknown_definition(self) -> None:
        assert map_value_text(None, 3) == ""

    def test_none_value(self) -> None:
        assert map_value_text(lookup_by_id(38), None) == ""
