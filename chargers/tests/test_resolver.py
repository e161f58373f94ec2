"""
Tests for key resolution -- raw readings to observation definitions.

CHANGELOG:
- 2026-10-10: Initial creation

TODO:
- None
"""

from __future__ import annotations

import pytest
from chargers.src.observations import lookup_by_id
from chargers.src.resolver import (
    IdResolver,
    NameResolver,
    ResolveMode,
    numeric_key,
    resolve,
)


class TestNumericKey:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(120, 120), (120.0, 120), ("120", 120), (" 38 ", 38), (999, 999)],
    )
    def test_numeric_shapes(self, value: object, expected: int) -> None:
        assert numeric_key(value) == expected

    @pytest.mark.parametrize(
        "value",
        [None, True, False, 0, -5, 1.5, "EH123456_1_t_120", "12a", "", "-3", {"id": 1}],
    )
    def test_non_numeric_shapes(self, value: object) -> None:
        assert numeric_key(value) is None


class TestIdMode:
    def test_numeric_id(self) -> None:
        assert resolve({"id": 120}) is lookup_by_id(120)

    def test_numeric_shaped_string_id(self) -> None:
        assert resolve({"id": "120"}, ResolveMode.ID) is lookup_by_id(120)

    def test_composite_id_does_not_resolve(self) -> None:
        assert resolve({"id": "EH123456_1_t_120"}) is None

    def test_data_name_ignored_in_id_mode(self) -> None:
        assert resolve({"dataName": "TotalPower"}, "id") is None

    def test_unknown_numeric_id(self) -> None:
        assert resolve({"id": 999}) is None


class TestNameMode:
    def test_exact_name(self) -> None:
        assert resolve({"dataName": "TotalPower"}, "name") is lookup_by_id(120)

    def test_case_insensitive_name(self) -> None:
        assert resolve({"dataName": "totalpower"}, "name") is lookup_by_id(120)

    def test_alt_name(self) -> None:
        assert resolve({"dataName": "inVoltageT1T2"}, "name") is lookup_by_id(190)

    def test_separator_stripped_name(self) -> None:
        assert resolve({"dataName": "incurrentt2"}, "name") is lookup_by_id(182)

    def test_falls_back_to_id_as_string(self) -> None:
        assert resolve({"id": "SessionEnergy"}, "name") is lookup_by_id(121)

    def test_numeric_id_does_not_match_by_name(self) -> None:
        assert resolve({"id": 120}, "name") is None

    def test_data_name_takes_precedence_over_id(self) -> None:
        reading = {"id": "TotalPower", "dataName": "SessionEnergy"}
        assert resolve(reading, "name") is lookup_by_id(121)

    def test_unknown_name(self) -> None:
        assert resolve({"dataName": "NotAnObservation"}, "name") is None

    def test_no_key(self) -> None:
        assert resolve({"value": 1}, "name") is None


class TestStrategies:
    def test_strategies_share_interface(self) -> None:
        reading = {"id": 120, "dataName": "SessionEnergy"}
        assert IdResolver().resolve(reading) is lookup_by_id(120)
        assert NameResolver().resolve(reading) is lookup_by_id(121)

    def test_unknown_mode_raises(self) -> None:
        with pytest.raises(ValueError):
            resolve({"id": 120}, "fuzzy")
