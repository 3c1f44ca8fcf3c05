"""Dimension and weight conversion between store units."""

from typing import Union

from .exceptions import UnitError

Number = Union[int, float, str, None]

# Length factors relative to centimetres
_TO_CM = {"cm": 1.0, "in": 2.54, "m": 100.0, "mm": 0.1, "yd": 91.44}
_FROM_CM = {"cm": 1.0, "in": 0.3937, "m": 0.01, "mm": 10.0, "yd": 0.010936133}

# Weight factors relative to kilograms
_TO_KG = {"kg": 1.0, "g": 0.001, "lbs": 0.453592, "oz": 0.0283495}
_FROM_KG = {"kg": 1.0, "g": 1000.0, "lbs": 2.20462, "oz": 35.274}


def format_decimal(raw: Number) -> float:
    """Parse a raw store value. Empty values map to 0."""
    if raw is None or raw == "":
        return 0.0
    if isinstance(raw, str):
        raw = raw.strip().replace(",", ".")
        if not raw:
            return 0.0
    return float(raw)


def _convert(value: Number, to_unit: str, from_unit: str, to_base: dict, from_base: dict) -> float:
    to_unit = (to_unit or "").lower()
    from_unit = (from_unit or "").lower()
    if to_unit not in from_base:
        raise UnitError(f"Unknown unit: {to_unit}")
    if from_unit not in to_base:
        raise UnitError(f"Unknown unit: {from_unit}")

    value = format_decimal(value)
    if from_unit != to_unit:
        value = value * to_base[from_unit] * from_base[to_unit]
    return 0.0 if value < 0 else value


def get_dimension(value: Number, to_unit: str, from_unit: str) -> float:
    return _convert(value, to_unit, from_unit, _TO_CM, _FROM_CM)


def get_weight(value: Number, to_unit: str, from_unit: str) -> float:
    return _convert(value, to_unit, from_unit, _TO_KG, _FROM_KG)
