"""Component classification heuristics.

These are rules of thumb used to group parts for review. A wrong guess only
changes which section of the report a part lands in.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, Optional


class ComponentType(str, Enum):
    RESISTOR = "RESISTOR"
    CAPACITOR = "CAPACITOR"
    INDUCTOR = "INDUCTOR"
    DIODE = "DIODE"
    TRANSISTOR = "TRANSISTOR"
    LED = "LED"
    CRYSTAL = "CRYSTAL"
    TESTPOINT = "TESTPOINT"
    MOUNTING_HOLE = "MOUNTING_HOLE"
    SWITCH = "SWITCH"
    FUSE = "FUSE"
    FERRITE_BEAD = "FERRITE_BEAD"
    CONNECTOR = "CONNECTOR"
    CONNECTOR_USB = "CONNECTOR_USB"
    CONNECTOR_RJ45 = "CONNECTOR_RJ45"
    CONNECTOR_SD = "CONNECTOR_SD"
    CONNECTOR_AUDIO = "CONNECTOR_AUDIO"
    CONNECTOR_HEADER = "CONNECTOR_HEADER"
    IC = "IC"
    IC_MCU = "IC_MCU"
    IC_MEMORY = "IC_MEMORY"
    IC_POWER = "IC_POWER"
    IC_LOGIC = "IC_LOGIC"
    IC_TRANSCEIVER = "IC_TRANSCEIVER"
    IC_USB = "IC_USB"
    IC_ANALOG = "IC_ANALOG"
    IC_COMM = "IC_COMM"
    UNKNOWN = "UNKNOWN"


# Multi-letter prefixes come before the single letters they start with.
REFERENCE_PREFIX_RULES: list[tuple[str, ComponentType]] = [
    ("LED", ComponentType.LED),
    ("FB", ComponentType.FERRITE_BEAD),
    ("SW", ComponentType.SWITCH),
    ("TP", ComponentType.TESTPOINT),
    ("R", ComponentType.RESISTOR),
    ("C", ComponentType.CAPACITOR),
    ("L", ComponentType.INDUCTOR),
    ("D", ComponentType.DIODE),
    ("Q", ComponentType.TRANSISTOR),
    ("Y", ComponentType.CRYSTAL),
    ("X", ComponentType.CRYSTAL),
    ("H", ComponentType.MOUNTING_HOLE),
    ("F", ComponentType.FUSE),
]
MULTI_LETTER_CONNECTOR_PREFIXES = ("CON",)
CONNECTOR_PREFIXES = ("J", "P")

CONNECTOR_VALUE_RULES: list[tuple[re.Pattern, ComponentType]] = [
    (re.compile(r"usb", re.I), ComponentType.CONNECTOR_USB),
    (re.compile(r"rj45|ethernet", re.I), ComponentType.CONNECTOR_RJ45),
    (re.compile(r"sd|microsd|tf", re.I), ComponentType.CONNECTOR_SD),
    (re.compile(r"audio|jack", re.I), ComponentType.CONNECTOR_AUDIO),
    (re.compile(r"header", re.I), ComponentType.CONNECTOR_HEADER),
]

IC_VALUE_RULES: list[tuple[re.Pattern, ComponentType]] = [
    (re.compile(r"rp2040|rp2350|stm32|esp32|atmega|pic|samd|nrf", re.I), ComponentType.IC_MCU),
    (re.compile(r"flash|w25q|mx25|at25|eeprom|fram", re.I), ComponentType.IC_MEMORY),
    (re.compile(r"tps|ldo|regulator|buck|boost|me6217|ams1117|ap2112", re.I), ComponentType.IC_POWER),
    (re.compile(r"sn74|lvc|hc|hct|245|125|buffer|driver", re.I), ComponentType.IC_LOGIC),
    (re.compile(r"lvds|ds90|sn65", re.I), ComponentType.IC_TRANSCEIVER),
    (re.compile(r"usb|ch340|cp210|ft232|ft2232", re.I), ComponentType.IC_USB),
    (re.compile(r"adc|dac|mcp3", re.I), ComponentType.IC_ANALOG),
    (re.compile(r"can|rs485|rs232|uart", re.I), ComponentType.IC_COMM),
]

LDO_VALUE_PATTERN = re.compile(
    r"ldo|regulator|ld1117|ams1117|me6211|me6217|ap2112|xc6206|ht7333|rt9013|tps7a|lp2985|mic5205",
    re.I,
)
LINEAR_SERIES_PATTERN = re.compile(r"78[0-9]{2}|79[0-9]{2}|l78|l79", re.I)
SWITCHER_VALUE_PATTERN = re.compile(
    r"tps6[0-9]|mp[12][0-9]{3}|ap62|lm267|mt36|sy8|rt6|aoz|lmr|tps5|mp2[0-9]",
    re.I,
)
POWER_PACKAGE_PATTERN = re.compile(r"sot-?223|dpak|d2pak|to-?252|to-?263", re.I)
QFN_PACKAGE_PATTERN = re.compile(r"qfn|dfn", re.I)
QFN_POWER_VALUE_PATTERN = re.compile(r"tps|mp[0-9]|lm[0-9]|lt[0-9]|aoz|sy[0-9]", re.I)
SMALL_SOT_PATTERN = re.compile(r"sot-?23|sot-?89|sot-?353|sc-?70", re.I)
VOLTAGE_NET_PATTERN = re.compile(r"^\+?[0-9V]+|VCC|VDD|VBUS|VIN|VOUT", re.I)

THERMAL_PAD_PATTERNS = [
    re.compile(r"qfn|dfn|mlp|vqfn|wqfn", re.I),
    POWER_PACKAGE_PATTERN,
    re.compile(r"powerso|hso|psop", re.I),
    re.compile(r"(?:^|[_\-:])ep(?:[_\-\d]|$)|epad|exposed", re.I),
]

POWER_NET_KEYWORDS = ("+", "VCC", "VDD", "VBUS", "GND", "VSS", "VBAT")
# Wider list used when collecting a part's power connections for thermal review
THERMAL_POWER_NET_KEYWORDS = POWER_NET_KEYWORDS + ("V3", "V5", "V12")


def _connector_type(value: str) -> ComponentType:
    for pattern, component_type in CONNECTOR_VALUE_RULES:
        if pattern.search(value):
            return component_type
    return ComponentType.CONNECTOR


def detect_component_type(reference: str, value: str = "", footprint: str = "") -> ComponentType:
    """Classify a part from its reference prefix, refined by its value.

    Rules are tried in order and the first match wins. Multi-letter prefixes
    (LED, FB, SW, TP, CON) are tried before the single letters they start
    with, so LED1 is an LED and CON1 a connector.
    """
    if reference.startswith(MULTI_LETTER_CONNECTOR_PREFIXES):
        return _connector_type(value)

    for prefix, component_type in REFERENCE_PREFIX_RULES:
        if reference.startswith(prefix):
            return component_type

    if reference.startswith(CONNECTOR_PREFIXES):
        return _connector_type(value)

    if reference.startswith("U"):
        for pattern, component_type in IC_VALUE_RULES:
            if pattern.search(value):
                return component_type
        return ComponentType.IC

    return ComponentType.UNKNOWN


def is_power_regulator(
    reference: str,
    value: str,
    footprint: str,
    connected_nets: Optional[Iterable[str]] = None,
) -> bool:
    """Guess whether an IC is a voltage regulator worth a thermal review."""
    if not reference.startswith("U"):
        return False

    if LDO_VALUE_PATTERN.search(value) or LINEAR_SERIES_PATTERN.search(value):
        return True
    if SWITCHER_VALUE_PATTERN.search(value):
        return True
    if POWER_PACKAGE_PATTERN.search(footprint):
        return True
    if QFN_PACKAGE_PATTERN.search(footprint) and QFN_POWER_VALUE_PATTERN.search(value):
        return True

    # Placeholder values: fall back to how the part is wired
    nets = {n.upper() for n in connected_nets or ()}
    if nets:
        has_ground = "GND" in nets or "VSS" in nets
        voltage_nets = {n for n in nets if VOLTAGE_NET_PATTERN.search(n)}
        if has_ground and len(voltage_nets) >= 2 and SMALL_SOT_PATTERN.search(footprint):
            return True

    return False


def has_thermal_pad(footprint: str) -> bool:
    """Whether the package usually carries an exposed/thermal pad."""
    return any(pattern.search(footprint) for pattern in THERMAL_PAD_PATTERNS)


def is_power_net(name: str, keywords: Iterable[str] = POWER_NET_KEYWORDS) -> bool:
    upper = name.upper()
    return any(kw.upper() in upper for kw in keywords)
