"""
Color resolution for Hue lights.

Turns a free-form color token into the bridge's native representation:

- hex strings ("#FF8800", "ff8800")     -> Chromaticity (CIE xy)
- temperatures ("warm", "2700K", "4000") -> Temperature (mireds)
- color names ("red", "purple")          -> Chromaticity via the name table

Classification is ordered: hex first, then temperature, then names. Unknown
names and malformed hex strings fall back to white unless ``strict=True``.

Notes:
  - Hue ct range: 153-500 mireds (153=6500K cold, 500=2000K warm)
  - xy is derived with the sRGB inverse gamma and the sRGB->XYZ (D65) matrix
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple, Union

MIN_MIREDS = 153
MAX_MIREDS = 500
NEUTRAL_MIREDS = 285
_MAX_KELVIN_DIGITS = 7
WHITE_HEX = "FFFFFF"
WHITE_POINT = (0.33, 0.33)

COLOR_NAMES: Mapping[str, str] = MappingProxyType({
    "red": "#FF0000",
    "green": "#00FF00",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "orange": "#FFA500",
    "purple": "#800080",
    "pink": "#FFC0CB",
    "white": "#FFFFFF",
    "cyan": "#00FFFF",
    "magenta": "#FF00FF",
})

NAMED_TEMPERATURES: Mapping[str, int] = MappingProxyType({
    "warm": 454,      # 2200K
    "soft": 400,      # 2500K
    "neutral": 285,   # 3500K
    "cool": 200,      # 5000K
    "daylight": 153,  # 6500K
})

_HEX_RE = re.compile(r"^[0-9a-fA-F]{6}$")
_KELVIN_RE = re.compile(r"^(\d+)K?$", re.IGNORECASE)


class UnknownColorError(ValueError):
    """Raised in strict mode when a token names no known color."""


class ColorKind(Enum):
    HEX = "hex"
    TEMPERATURE = "temperature"
    NAME = "name"


@dataclass(frozen=True)
class Temperature:
    """White light expressed in mireds."""

    mireds: int

    def to_attributes(self) -> Dict[str, Any]:
        return {"ct": self.mireds}


@dataclass(frozen=True)
class Chromaticity:
    """Color expressed as CIE 1931 xy coordinates."""

    x: float
    y: float

    def to_attributes(self) -> Dict[str, Any]:
        return {"xy": [self.x, self.y]}


ColorSpec = Union[Temperature, Chromaticity]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _gamma(channel: float) -> float:
    # sRGB companding -> linear
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def _is_hex(value: str) -> bool:
    return bool(_HEX_RE.match(value))


def hex_to_xy(hex_color: str) -> Tuple[float, float]:
    """Convert a 6-digit hex color (with or without '#') to Hue xy.

    Raises:
        ValueError: if the string is not 6 hex digits
    """
    digits = hex_color.strip().lstrip("#")
    if not _is_hex(digits):
        raise ValueError(f"Invalid hex color: {hex_color}")

    r = _gamma(int(digits[0:2], 16) / 255.0)
    g = _gamma(int(digits[2:4], 16) / 255.0)
    b = _gamma(int(digits[4:6], 16) / 255.0)

    X = r * 0.4124 + g * 0.3576 + b * 0.1805
    Y = r * 0.2126 + g * 0.7152 + b * 0.0722
    Z = r * 0.0193 + g * 0.1192 + b * 0.9505

    total = X + Y + Z
    if total == 0:
        return WHITE_POINT

    return (_clamp(X / total, 0.0, 1.0), _clamp(Y / total, 0.0, 1.0))


def color_name_to_hex(name: str, strict: bool = False) -> str:
    """Look up a color name (case-insensitive); unknown names map to white."""
    key = name.strip().lower()
    if key in COLOR_NAMES:
        return COLOR_NAMES[key]
    if strict:
        raise UnknownColorError(
            f"Unknown color: {name}. Use hex (#FF0000), a name ({', '.join(COLOR_NAMES)}) "
            f"or a temperature ({', '.join(NAMED_TEMPERATURES)}, 2700K)"
        )
    return "#" + WHITE_HEX


def kelvin_to_mireds(kelvin: int) -> int:
    """Kelvin to mireds, saturating at the Hue ct range."""
    if kelvin <= 0:
        return MAX_MIREDS
    return int(_clamp(round(1_000_000 / kelvin), MIN_MIREDS, MAX_MIREDS))


def color_temp_to_mireds(temp: str) -> int:
    """Convert "warm"/"cool"/... or "2700K"/"2700" to mireds."""
    key = temp.strip().lower()
    if key in NAMED_TEMPERATURES:
        return NAMED_TEMPERATURES[key]

    match = _KELVIN_RE.match(key)
    if match:
        digits = match.group(1).lstrip("0")
        # anything past 7 digits is far above 6500K
        if len(digits) > _MAX_KELVIN_DIGITS:
            return MIN_MIREDS
        return kelvin_to_mireds(int(digits or "0"))

    return NEUTRAL_MIREDS


def classify(token: str) -> ColorKind:
    """Decide which representation a color token uses. First match wins."""
    value = token.strip()
    if value.startswith("#") or _is_hex(value.lstrip("#")):
        return ColorKind.HEX
    if _KELVIN_RE.match(value) or value.lower() in NAMED_TEMPERATURES:
        return ColorKind.TEMPERATURE
    return ColorKind.NAME


def resolve(token: str, strict: bool = False) -> ColorSpec:
    """Resolve a color token to a Temperature or Chromaticity.

    Args:
        token: Hex string, color name, or temperature expression
        strict: Raise UnknownColorError instead of falling back to white

    Returns:
        Temperature or Chromaticity
    """
    kind = classify(token)

    if kind is ColorKind.TEMPERATURE:
        return Temperature(mireds=color_temp_to_mireds(token))

    if kind is ColorKind.HEX:
        hex_color = token.strip()
        if not _is_hex(hex_color.lstrip("#")):
            if strict:
                raise UnknownColorError(f"Invalid hex color: {token}. Expected 6 digits like #FF0000")
            hex_color = WHITE_HEX
    else:
        hex_color = color_name_to_hex(token, strict=strict)

    x, y = hex_to_xy(hex_color)
    return Chromaticity(x=x, y=y)


def describe(spec: ColorSpec) -> Dict[str, Any]:
    """Plain-dict view of a resolved color, for tool results."""
    if isinstance(spec, Temperature):
        return {"mode": "ct", "ct": spec.mireds}
    return {"mode": "xy", "xy": [round(spec.x, 4), round(spec.y, 4)]}
