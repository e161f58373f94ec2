"""
Tests for derived views: charger status, charger config and outbound messages.

CHANGELOG:
- 2026-10-13: Initial creation

TODO:
- None
"""

from __future__ import annotations

from datetime import datetime

import pytest
from chargers.src.models import ChargerConfig, ChargerStatus, ObservationMessage
from chargers.src.normalizer import parse_observation
from chargers.src.status import extract_charger_status, format_message, parse_charger_config

_RECENT = "2023-12-31T12:04:00Z"
_STALE = "2023-12-31T11:00:00Z"


def _record(obs_id: object, value: object, timestamp: str = _RECENT):
    record = parse_observation({"id": obs_id, "value": value, "timestamp": timestamp})
    assert record is not None
    return record


# ===========================================================================
# extract_charger_status
# ===========================================================================


class TestExtractChargerStatus:
    def test_full_status(self, fixed_now: datetime) -> None:
        records = [
            _record(109, 3),
            _record(120, "7200"),
            _record(114, "16.0"),
            _record(190, "230.1"),
            _record(191, "231.2"),
            _record(192, "229.8"),
        ]
        status = extract_charger_status(records, "EH123456", now=fixed_now)
        assert isinstance(status, ChargerStatus)
        assert status.id == "EH123456"
        assert status.name == "EH123456"
        assert status.online is True
        assert status.state == "Charging - \tCharging."
        assert status.power == 7200.0
        assert status.current == 16.0
        assert status.voltage == {"l1": 230.1, "l2": 231.2, "l3": 229.8}
        assert status.last_seen == "2023-12-31T12:04:00.000Z"

    def test_stale_observations_are_offline(self, fixed_now: datetime) -> None:
        status = extract_charger_status([_record(120, 1, _STALE)], "EH1", now=fixed_now)
        assert status is not None
        assert status.online is False
        assert status.last_seen == "2023-12-31T11:00:00.000Z"

    def test_online_window_is_configurable(self, fixed_now: datetime) -> None:
        records = [_record(120, 1, _STALE)]
        status = extract_charger_status(records, "EH1", now=fixed_now, online_window_s=7200)
        assert status is not None
        assert status.online is True

    def test_newest_timestamp_decides(self, fixed_now: datetime) -> None:
        records = [_record(120, 1, _RECENT), _record(121, 2, _STALE)]
        status = extract_charger_status(records, "EH1", now=fixed_now)
        assert status is not None
        assert status.online is True
        assert status.last_seen == "2023-12-31T12:04:00.000Z"

    def test_later_records_win(self, fixed_now: datetime) -> None:
        records = [_record(120, "100"), _record(120, "200")]
        status = extract_charger_status(records, "EH1", now=fixed_now)
        assert status is not None
        assert status.power == 200.0

    def test_unmapped_op_mode_uses_raw_value(self, fixed_now: datetime) -> None:
        status = extract_charger_status([_record(109, 42)], "EH1", now=fixed_now)
        assert status is not None
        assert status.state == 42

    def test_empty_records(self, fixed_now: datetime) -> None:
        status = extract_charger_status([], "EH1", now=fixed_now)
        assert status is not None
        assert status.online is False
        assert status.state == "unknown"
        assert status.power is None
        assert status.voltage is None
        assert status.last_seen is None

    def test_unparseable_timestamps_leave_last_seen_empty(self, fixed_now: datetime) -> None:
        status = extract_charger_status([_record(120, 1, "soon")], "EH1", now=fixed_now)
        assert status is not None
        assert status.online is False
        assert status.last_seen is None

    @pytest.mark.parametrize("records", [None, "records", {"a": 1}])
    def test_non_sequence_returns_none(self, records: object) -> None:
        assert extract_charger_status(records, "EH1") is None  # type: ignore[arg-type]

    def test_camel_case_serialization(self, fixed_now: datetime) -> None:
        status = extract_charger_status([_record(120, 1)], "EH1", now=fixed_now)
        assert status is not None
        assert "lastSeen" in status.model_dump(by_alias=True)


# ===========================================================================
# parse_charger_config
# ===========================================================================


class TestParseChargerConfig:
    def test_full_config(self) -> None:
        data = {
            "id": "EH123456",
            "name": "Garage",
            "siteId": 1,
            "siteName": "Home",
            "circuitId": 7,
            "productCode": 100,
            "backPlate": {"id": "BP1"},
            "levelOfAccess": 1,
            "location": {"lat": 59.9},
            "address": "Test Street 123",
            "createdOn": "2023-01-01T00:00:00Z",
            "updatedOn": "2023-06-01T00:00:00Z",
            "color": "white",
        }
        config = parse_charger_config(data)
        assert isinstance(config, ChargerConfig)
        assert config.id == "EH123456"
        assert config.name == "Garage"
        assert config.site_id == 1
        assert config.site_name == "Home"
        assert config.circuit_id == 7
        assert config.back_plate == {"id": "BP1"}
        assert config.updated_on == "2023-06-01T00:00:00Z"
        assert "color" not in config.model_dump()

    def test_name_defaults_to_id(self) -> None:
        config = parse_charger_config({"id": "EH123456"})
        assert config is not None
        assert config.name == "EH123456"
        assert config.site_id is None

    def test_empty_mapping(self) -> None:
        config = parse_charger_config({})
        assert config is not None
        assert config.id is None
        assert config.name is None

    @pytest.mark.parametrize("data", [None, "EH123456", 5, ["EH123456"]])
    def test_non_mapping_returns_none(self, data: object) -> None:
        assert parse_charger_config(data) is None


# ===========================================================================
# format_message
# ===========================================================================


class TestFormatMessage:
    def test_composite_id(self) -> None:
        record = _record("EH123456_1_t_120", "7200")
        message = format_message(record)
        assert isinstance(message, ObservationMessage)
        assert message.charger_id == "EH123456"
        assert message.topic == "easee/EH123456/unknown_EH123456_1_t_120"
        assert message.payload == message.value == "7200"

    def test_known_observation(self) -> None:
        record = _record(120, "7200")
        message = format_message(record, topic_prefix="chargers")
        assert message.charger_id == "120"
        assert message.data_name == "TotalPower"
        assert message.data_type == "TotalPower"
        assert message.unit == "W"
        assert message.value == 7200.0
        assert message.timestamp == _RECENT
        assert message.topic == "chargers/120/TotalPower"

    def test_value_text_carried(self) -> None:
        message = format_message(_record(38, 2))
        assert message.value_text == "Auto phase mode"

    def test_camel_case_serialization(self) -> None:
        dumped = format_message(_record(120, 1)).model_dump(by_alias=True)
        assert {"chargerId", "dataType", "dataName", "valueText", "topic"} <= set(dumped)
