"""
Charger observation registry -- single source of truth.

Defines every observation a charger can report over the streaming or REST
transport: numeric observation id, canonical name, alternate names used by
the REST field naming, declared data type, unit, and (for enum-like
observations) the value-to-text table.

The table is built once at import time and never mutated.  Lookups go
through precomputed indexes (by id, by exact / lower-cased / normalized
name) so no caller ever scans the table.

References:
    - https://developer.easee.com/docs/observation-ids
    - https://developer.easee.com/docs/enumerations

CHANGELOG:
- 2026-10-18: Restore upstream value texts and the InCurrent_T5 unit verbatim
- 2026-10-12: Declare upstream Binary/Position observations as String
- 2026-10-10: Initial creation

TODO:
- None
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType

# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------


class DataType(IntEnum):
    """Declared observation data type.

    The numeric codes are part of the external contract and must not change.
    """

    BOOLEAN = 2
    DOUBLE = 3
    INTEGER = 4
    STRING = 6
    JSON = 8

    @property
    def type_name(self) -> str:
        """Symbolic name as exposed in canonical records (e.g. ``"Double"``)."""
        return VALUE_TYPES[int(self)]


VALUE_TYPES: Mapping[int, str] = MappingProxyType(
    {
        2: "Boolean",
        3: "Double",
        4: "Integer",
        6: "String",
        8: "JSON",
    }
)
"""Data type code -> symbolic name."""

UNKNOWN_TYPE_NAME = "Unknown"

_NON_ALNUM = re.compile(r"[^0-9a-z]")


def normalize_name(name: str) -> str:
    """Lower-case *name* and strip every non-alphanumeric character.

    ``"InVolt_T1_T2"`` and ``"inVoltT1T2"`` both become ``"involtt1t2"``.
    """
    return _NON_ALNUM.sub("", name.lower())


def _text_key(value: object) -> str | None:
    """Return the string form used to match *value* against a value table.

    Integral floats collapse to their int form so ``3.0`` matches key ``3``.
    Booleans and structured values never match.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (int, str)):
        return str(value)
    return None


@dataclass(frozen=True, slots=True)
class ObservationDef:
    """Definition of a single charger observation.

    Attributes:
        observation_id: Unique positive observation id (streaming key).
        name: Unique canonical name (e.g. ``"TotalPower"``).
        data_type: Declared :class:`DataType` of the value.
        unit: Engineering unit (``"W"``, ``"kWh"``, ``"A"``) or ``""``.
        alt_names: Ordered synonyms used by other producers for this field.
        value_mapping: Optional enum table, raw value -> display text.
            Keys may be ints or strings.
    """

    observation_id: int
    name: str
    data_type: DataType
    unit: str = ""
    alt_names: tuple[str, ...] = ()
    value_mapping: Mapping[int | str, str] | None = field(
        default=None, compare=False
    )
    _texts: Mapping[str, str] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:  # noqa: D105
        if self.value_mapping is None:
            return
        # frozen=True requires object.__setattr__
        object.__setattr__(
            self, "value_mapping", MappingProxyType(dict(self.value_mapping))
        )
        texts = {str(key): text for key, text in self.value_mapping.items()}
        object.__setattr__(self, "_texts", MappingProxyType(texts))

    @property
    def data_type_name(self) -> str:
        return self.data_type.type_name

    def text_for(self, value: object) -> str:
        """Return the display text for *value*, or ``""`` when not mapped."""
        if self._texts is None:
            return ""
        key = _text_key(value)
        if key is None:
            return ""
        return self._texts.get(key, "")


def _obs(
    observation_id: int,
    name: str,
    data_type: DataType,
    unit: str = "",
    *,
    alt: tuple[str, ...] = (),
    mapping: Mapping[int | str, str] | None = None,
) -> ObservationDef:
    return ObservationDef(
        observation_id=observation_id,
        name=name,
        data_type=data_type,
        unit=unit,
        alt_names=alt,
        value_mapping=mapping,
    )


B = DataType.BOOLEAN
D = DataType.DOUBLE
I = DataType.INTEGER  # noqa: E741
S = DataType.STRING
J = DataType.JSON

# ---------------------------------------------------------------------------
# Value tables
# ---------------------------------------------------------------------------

_PHASE_MODE = {
    0: "Ignore,no phase mode reported",
    1: "Locked to 1-phase",
    2: "Auto phase mode",
    3: "Locked to 3-phase",
}

_OFFLINE_CHARGING_MODE = {
    0: "Always allow charging if offline",
    1: "Only allow charging if token is whitelisted in the local token cache",
    2: "Never allow charging if offline",
}

_LED_MODE = {
    0: "Charger is disabled",
    **{n: "Charger is updating" for n in range(1, 16)},
    16: "Charger is faulty",
    17: "Charger is faulty",
    18: "Standby Master",
    19: "Standby Secondary",
    20: "Secondary unit searching for master",
    21: "Smart mode (Not charging)",
    22: "Smart mode (Charging)",
    23: "Normal mode (Not charging)",
    24: "Normal mode (Charging)",
    25: "Waiting for authorization",
    26: "Verifying with backend",
    27: "Check configuration (Backplate chip defect)",
    29: "Pairing RFID Keys",
    43: "Self test mode",
    44: "Self test mode",
}

_REBOOT_REASON = {
    0: "FirewallReset",
    1: "OptionByteLoaderReset",
    2: "PinReset",
    3: "BOR",
    4: "SoftwareReset",
    5: "IndependentWindowWatchdogReset",
    6: "WindowWatchdogReset",
    7: "LowPowerReset",
    12: "Brownout",
    20: "Reboot",
}

_REASON_FOR_NO_CURRENT = {
    0: "Charger Fine - Charger is OK, use main charger status",
    1: "Loadbalancing - Max circuit current too low, adjust power circuit up.",
    2: "Loadbalancing - Max dynamic circuit current too low (Partner Loadbalancing)",
    3: "Loadbalancing - Max dynamic offline fallback circuit current too low",
    4: "Loadbalancing - Circuit fuse too low",
    5: "Loadbalancing - Waiting in queue",
    6: "Loadbalancing - Waiting in fully charged queue (Assumes a connected EV uses delated charging, EV Charging complete",
    7: "Error - illegal grid type (Error - Fault in automatic grid type detection)",
    8: "Error - primary unit has not received current request from secondary unit (car)",
    9: "Error - Master communication lost (Error)",
    10: "Error - No current from equalizer to low",
    11: "Error - No current, phase not connected",
    25: "Error - Current limited by circuit fuse",
    26: "Error - Current limited by circuit max current",
    27: "Error - Current limited by dynamic circuit current",
    28: "Error - Current limited by equalizer",
    29: "Error - Current limited by circuit load balancing",
    50: "Load balancing circuit - Secondary unit not requesting current (No car connected)",
    51: "Load balancing circuit - Max charger current too low",
    52: "Load balancing circuit - Max Dynamic charger current too low",
    53: "Informational - Charger disabled",
    54: "Waiting - Pending scheduled charging",
    55: "Waiting - Pending authorization",
    56: "Error - Charger in error state",
    57: "Error - Erratic EV",
    75: "Cable - Current limited by cable rating",
    76: "Schedule - Current limited by schedule",
    77: "Charger Limit - Current limited by charger max current",
    78: "Charger Limit - Current limited by dynamic charger current",
    79: "Car Limit - Current limited by car not charging",
    80: "??? - Current limited by local adjustment",
    81: "Car Limit - Current limited by car",
    100: "UndefinedError",
}

_PILOT_MODE = {
    "A": "Car disconnected",
    "B": "Car connected",
    "C": "Car charging",
    "D": "Car needs ventilation",
    "F": "Fault detected (LED goes Red and charging stops)",
}

_CHARGER_OP_MODE = {
    0: "Offline - Offline.",
    1: "Disconnected - No car connected.",
    2: "AwaitingStart - Car connected, charger is waiting for EV or load balancing. SuspendedEVSE.",
    3: "Charging - \tCharging.",
    4: "Completed - Car has paused/stopped charging.",
    5: "Error - Error in charger.",
    6: "ReadyToCharge - Charger is waiting for car to take energy. SuspendedEV.",
    7: "Awaiting Authentication - Charger is waiting for authentication.",
    8: "De-authenticating - Charger is de-authenticating.",
}

_OUTPUT_PHASE = {
    0: "Unassigned",
    10: "1-phase (N+L1)",
    11: "1-phase (L1+L2)",
    12: "1-phase (N+L2)",
    13: "1-phase (L1+L3)",
    14: "1-phase (N+L3)",
    15: "1-phase (L2+L3)",
    20: "2-phases on TN (N+L1, N+L2)",
    21: "2-phases on TN (N+L2, N+L3)",
    22: "2-phases on IT (L1+L2, L2+L3)",
    30: "3-phases (N+L1, N+L2, N+L3)",
}

# ---------------------------------------------------------------------------
# Configuration and site observations (1-99)
# ---------------------------------------------------------------------------

_CONFIG_OBSERVATIONS: list[ObservationDef] = [
    _obs(1, "SelfTestResult", S),
    _obs(2, "SelfTestDetails", J),
    _obs(10, "WiFiEvent", I),
    _obs(11, "ChargerOfflineReason", I),
    _obs(15, "LocalPreAuthorizeEnabled", B),
    _obs(16, "LocalAuthorizeOfflineEnabled", B),
    _obs(17, "AllowOfflineTxForUnknownId", B),
    _obs(18, "ErraticEvMaxToggles", I),
    _obs(19, "BackplateType", I),
    _obs(20, "SiteStructure", J),
    _obs(21, "DetectedPowerGridType", I),
    _obs(22, "CircuitMaxCurrentP1", D, "A"),
    _obs(23, "CircuitMaxCurrentP2", D, "A"),
    _obs(24, "CircuitMaxCurrentP3", D, "A"),
    _obs(25, "Location", S),
    _obs(26, "SiteIDString", S),
    _obs(27, "SiteIDNumeric", I),
    _obs(28, "RfidTimeoutAuth", I),
    _obs(30, "LockCablePermanently", B),
    _obs(31, "IsEnabled", B),
    _obs(32, "TemperatureMonitorState", I),
    _obs(33, "CircuitSequenceNumber", I),
    _obs(34, "SinglePhaseNumber", I),
    _obs(35, "Enable3Phases_DEPRECATED", B),
    _obs(36, "WiFiSSID", S),
    _obs(37, "EnableIdleCurrent", B),
    _obs(38, "PhaseMode", I, mapping=_PHASE_MODE),
    _obs(40, "LedStripBrightness", I),
    _obs(41, "LocalAuthorizationRequired", B),
    _obs(42, "AuthorizationRequired", B),
    _obs(43, "RemoteStartRequired", B),
    _obs(44, "SmartButtonEnabled", B),
    _obs(45, "OfflineChargingMode", I, mapping=_OFFLINE_CHARGING_MODE),
    _obs(46, "LEDMode", I, mapping=_LED_MODE),
    _obs(47, "MaxChargerCurrent", D, "A"),
    _obs(48, "DynamicChargerCurrent", D, "A"),
    _obs(50, "MaxCurrentOfflineFallback_P1", I),
    _obs(51, "MaxCurrentOfflineFallback_P2", I),
    _obs(52, "MaxCurrentOfflineFallback_P3", I),
    _obs(54, "ReleaseCableAtPowerOff", B),
    _obs(62, "ChargingSchedule", J),
    _obs(65, "PairedEqualizer", S),
    _obs(68, "WiFiAPEnabled", B),
    _obs(69, "PairedUserIDToken", S),
    _obs(70, "CircuitTotalAllocatedPhaseConductorCurrent_L1", D, "A"),
    _obs(71, "CircuitTotalAllocatedPhaseConductorCurrent_L2", D, "A"),
    _obs(72, "CircuitTotalAllocatedPhaseConductorCurrent_L3", D, "A"),
    _obs(73, "CircuitTotalPhaseConductorCurrent_L1", D, "A"),
    _obs(74, "CircuitTotalPhaseConductorCurrent_L2", D, "A"),
    _obs(75, "CircuitTotalPhaseConductorCurrent_L3", D, "A"),
    _obs(76, "NumberOfCarsConnected", I),
    _obs(77, "NumberOfCarsCharging", I),
    _obs(78, "NumberOfCarsInQueue", I),
    _obs(79, "NumberOfCarsFullyCharged", I),
    _obs(80, "SoftwareRelease", I, alt=("chargerFirmware",)),
    _obs(81, "ICCID", S),
    _obs(82, "ModemFwId", S),
    _obs(83, "OTAErrorCode", I),
    _obs(84, "MobileNetworkOperator", S),
    _obs(89, "RebootReason", I, mapping=_REBOOT_REASON),
    _obs(90, "PowerPCBVersion", I),
    _obs(91, "ComPCBVersion", I),
    _obs(96, "ReasonForNoCurrent", I, mapping=_REASON_FOR_NO_CURRENT),
    _obs(97, "LoadBalancingNumberOfConnectedChargers", I),
    _obs(98, "UDPNumOfConnectedNodes", I),
    _obs(99, "LocalConnection", I),
]

# ---------------------------------------------------------------------------
# Charging state and session observations (100-149)
# ---------------------------------------------------------------------------

_STATE_OBSERVATIONS: list[ObservationDef] = [
    _obs(100, "PilotMode", S, mapping=_PILOT_MODE),
    _obs(101, "CarConnected_DEPRECATED", B),
    _obs(102, "SmartCharging", B),
    _obs(103, "CableLocked", B),
    _obs(104, "CableRating", D),
    _obs(105, "PilotHigh", D),
    _obs(106, "PilotLow", D),
    _obs(107, "BackPlateID", S),
    _obs(108, "UserIDTokenReversed", S),
    _obs(109, "ChargerOpMode", I, mapping=_CHARGER_OP_MODE),
    _obs(110, "OutputPhase", I, mapping=_OUTPUT_PHASE),
    _obs(111, "DynamicCircuitCurrentP1", D, "A"),
    _obs(112, "DynamicCircuitCurrentP2", D, "A"),
    _obs(113, "DynamicCircuitCurrentP3", D, "A"),
    _obs(114, "OutputCurrent", D, "A"),
    _obs(115, "DeratedCurrent", D, "A"),
    _obs(116, "DeratingActive", B),
    _obs(117, "DebugString", S),
    _obs(118, "ErrorString", S),
    _obs(119, "ErrorCode", I),
    _obs(120, "TotalPower", D, "W"),
    _obs(121, "SessionEnergy", D, "kWh"),
    _obs(122, "EnergyPerHour", D, "kWh"),
    _obs(123, "LegacyEvStatus", I),
    _obs(124, "LifetimeEnergy", D, "kWh"),
    _obs(125, "LifetimeRelaySwitches", I),
    _obs(126, "LifetimeHours", I),
    _obs(
        127,
        "DynamicCurrentOfflineFallback_DEPRICATED",
        I,
        alt=("DynamicCurrentOfflineFallback_DEPRECATED",),
    ),
    _obs(128, "UserIDToken", S),
    _obs(129, "ChargingSession", J),
    _obs(130, "CellRSSI", I),
    _obs(131, "CellRAT", I),
    _obs(132, "WiFiRSSI", I),
    _obs(133, "CellAddress", S),
    _obs(134, "WiFiAddress", S),
    _obs(135, "WiFiType", S),
    _obs(136, "LocalRSSI", I),
    _obs(137, "MasterBackPlateID", S),
    _obs(138, "LocalTxPower", I),
    _obs(139, "LocalState", S),
    _obs(140, "FoundWiFi", S),
    _obs(141, "ChargerRAT", I),
    _obs(142, "CellularInterfaceErrorCount", I),
    _obs(143, "CellularInterfaceResetCount", I),
    _obs(144, "WifiInterfaceErrorCount", I),
    _obs(145, "WifiInterfaceResetCount", I),
    _obs(146, "LocalNodeType", I),
    _obs(147, "LocalRadioChannel", I),
    _obs(148, "LocalShortAddress", I),
    _obs(149, "LocalParentAddrOrNumOfNodes", I),
]

# ---------------------------------------------------------------------------
# Sensor observations (150-251)
# ---------------------------------------------------------------------------

_SENSOR_OBSERVATIONS: list[ObservationDef] = [
    _obs(150, "TempMax", D, "°C"),
    _obs(151, "TempAmbientPowerBoard", D, "°C"),
    _obs(152, "TempInputT2", D, "°C"),
    _obs(153, "TempInputT3", D, "°C"),
    _obs(154, "TempInputT4", D, "°C"),
    _obs(155, "TempInputT5", D, "°C"),
    _obs(160, "TempOutputN", D, "°C"),
    _obs(161, "TempOutputL1", D, "°C"),
    _obs(162, "TempOutputL2", D, "°C"),
    _obs(163, "TempOutputL3", D, "°C"),
    _obs(170, "TempAmbient", D, "°C"),
    _obs(171, "LightAmbient", I),
    _obs(172, "IntRelHumidity", I),
    _obs(173, "BackPlateLocked", D),
    _obs(174, "CurrentMotor", D),
    _obs(175, "BackPlateHallSensor", I),
    _obs(182, "InCurrent_T2", D, "A"),
    _obs(183, "InCurrent_T3", D, "A"),
    _obs(184, "InCurrent_T4", D, "A"),
    _obs(185, "InCurrent_T5", D, "V"),
    _obs(190, "InVolt_T1_T2", D, "V", alt=("inVoltageT1T2",)),
    _obs(191, "InVolt_T1_T3", D, "V", alt=("inVoltageT1T3",)),
    _obs(192, "InVolt_T1_T4", D, "V", alt=("inVoltageT1T4",)),
    _obs(193, "InVolt_T1_T5", D, "V", alt=("inVoltageT1T5",)),
    _obs(194, "InVolt_T2_T3", D, "V", alt=("inVoltageT2T3",)),
    _obs(195, "InVolt_T2_T4", D, "V", alt=("inVoltageT2T4",)),
    _obs(196, "InVolt_T2_T5", D, "V", alt=("inVoltageT2T5",)),
    _obs(197, "InVolt_T3_T4", D, "V", alt=("inVoltageT3T4",)),
    _obs(198, "InVolt_T3_T5", D, "V", alt=("inVoltageT3T5",)),
    _obs(199, "InVolt_T4_T5", D, "V", alt=("inVoltageT4T5",)),
    _obs(202, "OutVoltPin1_2", D, "V"),
    _obs(203, "OutVoltPin1_3", D, "V"),
    _obs(204, "OutVoltPin1_4", D, "V"),
    _obs(205, "OutVoltPin1_5", D, "V"),
    _obs(206, "OutVoltPin2And3", D, "V"),
    _obs(210, "VoltLevel33", D, "V"),
    _obs(211, "VoltLevel5", D, "V"),
    _obs(212, "VoltLevel12", D, "V"),
    _obs(223, "ChargeSessionStart", J),
    _obs(230, "EqAvailableCurrentP1", D, "A"),
    _obs(231, "EqAvailableCurrentP2", D, "A"),
    _obs(232, "EqAvailableCurrentP3", D, "A"),
    _obs(250, "ConnectedToCloud", B),
    _obs(251, "CloudDisconnectReason", S),
]

# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------

ALL_OBSERVATIONS: tuple[ObservationDef, ...] = (
    *_CONFIG_OBSERVATIONS,
    *_STATE_OBSERVATIONS,
    *_SENSOR_OBSERVATIONS,
)
"""Every observation definition, ordered by id."""

_BY_ID: Mapping[int, ObservationDef] = MappingProxyType(
    {obs.observation_id: obs for obs in ALL_OBSERVATIONS}
)
_BY_NAME: Mapping[str, ObservationDef] = MappingProxyType(
    {obs.name: obs for obs in ALL_OBSERVATIONS}
)
_BY_LOWER_NAME: Mapping[str, ObservationDef] = MappingProxyType(
    {obs.name.lower(): obs for obs in ALL_OBSERVATIONS}
)


def _build_alt_index() -> dict[str, ObservationDef]:
    index: dict[str, ObservationDef] = {}
    for obs in ALL_OBSERVATIONS:
        for alt in obs.alt_names:
            index.setdefault(alt, obs)
            index.setdefault(alt.lower(), obs)
    return index


def _build_normalized_index() -> dict[str, ObservationDef]:
    # Canonical names are folded first so an alternate name can never shadow
    # another observation's canonical name.
    index: dict[str, ObservationDef] = {}
    for obs in ALL_OBSERVATIONS:
        index.setdefault(normalize_name(obs.name), obs)
    for obs in ALL_OBSERVATIONS:
        for alt in obs.alt_names:
            index.setdefault(normalize_name(alt), obs)
    return index


_BY_ALT_NAME: Mapping[str, ObservationDef] = MappingProxyType(_build_alt_index())
_BY_NORMALIZED_NAME: Mapping[str, ObservationDef] = MappingProxyType(
    _build_normalized_index()
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def lookup_by_id(observation_id: int) -> ObservationDef | None:
    """Return the definition with *observation_id*, or ``None``."""
    return _BY_ID.get(observation_id)


def lookup_by_name(name: str) -> ObservationDef | None:
    """Return the definition matching *name*, or ``None``.

    Matching precedence, first hit wins:

    1. exact canonical name;
    2. case-insensitive canonical name;
    3. exact or case-insensitive alternate name;
    4. normalized name (lower-cased, non-alphanumerics stripped) against
       canonical and alternate names.

    Only whole-string equality is used at every stage.
    """
    if not name:
        return None
    lowered = name.lower()
    return (
        _BY_NAME.get(name)
        or _BY_LOWER_NAME.get(lowered)
        or _BY_ALT_NAME.get(name)
        or _BY_ALT_NAME.get(lowered)
        or _BY_NORMALIZED_NAME.get(normalize_name(name))
    )
