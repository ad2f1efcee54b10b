"""Measurement units and the directed conversion table."""

from collections.abc import Callable
from enum import StrEnum

OUNCE_IN_GRAMS = 28.3495
POUND_IN_KILOGRAMS = 0.453592
UPSCALE_THRESHOLD = 1000


class Unit(StrEnum):
    """Canonical unit tokens."""

    GRAM = "g"
    KILOGRAM = "kg"
    MILLILITER = "ml"
    LITER = "l"
    OUNCE = "oz"
    POUND = "lb"
    EACH = "each"
    BUNCH = "bunch"
    SPRIG = "sprig"
    PINCH = "pinch"
    TABLESPOON = "tbsp"
    TEASPOON = "tsp"
    CUP = "cup"


_SYNONYMS: dict[str, Unit] = {
    "gram": Unit.GRAM,
    "grams": Unit.GRAM,
    "g": Unit.GRAM,
    "kilogram": Unit.KILOGRAM,
    "kilograms": Unit.KILOGRAM,
    "kg": Unit.KILOGRAM,
    "milliliter": Unit.MILLILITER,
    "milliliters": Unit.MILLILITER,
    "ml": Unit.MILLILITER,
    "liter": Unit.LITER,
    "liters": Unit.LITER,
    "litre": Unit.LITER,
    "litres": Unit.LITER,
    "l": Unit.LITER,
    "ounce": Unit.OUNCE,
    "ounces": Unit.OUNCE,
    "oz": Unit.OUNCE,
    "pound": Unit.POUND,
    "pounds": Unit.POUND,
    "lb": Unit.POUND,
    "lbs": Unit.POUND,
    "each": Unit.EACH,
    "ea": Unit.EACH,
    "piece": Unit.EACH,
    "pieces": Unit.EACH,
    "bunch": Unit.BUNCH,
    "sprig": Unit.SPRIG,
    "pinch": Unit.PINCH,
    "tbsp": Unit.TABLESPOON,
    "tablespoon": Unit.TABLESPOON,
    "tsp": Unit.TEASPOON,
    "teaspoon": Unit.TEASPOON,
    "cup": Unit.CUP,
    "cups": Unit.CUP,
}

_UNIT_VALUES = frozenset(unit.value for unit in Unit)

# Directed pairs only. ml<->g and l<->kg treat liquids as water (1:1 by mass).
_CONVERSIONS: dict[tuple[Unit, Unit], Callable[[float], float]] = {
    (Unit.GRAM, Unit.KILOGRAM): lambda value: value / 1000,
    (Unit.KILOGRAM, Unit.GRAM): lambda value: value * 1000,
    (Unit.MILLILITER, Unit.LITER): lambda value: value / 1000,
    (Unit.LITER, Unit.MILLILITER): lambda value: value * 1000,
    (Unit.OUNCE, Unit.GRAM): lambda value: value * OUNCE_IN_GRAMS,
    (Unit.GRAM, Unit.OUNCE): lambda value: value / OUNCE_IN_GRAMS,
    (Unit.POUND, Unit.KILOGRAM): lambda value: value * POUND_IN_KILOGRAMS,
    (Unit.KILOGRAM, Unit.POUND): lambda value: value / POUND_IN_KILOGRAMS,
    (Unit.MILLILITER, Unit.GRAM): lambda value: value,
    (Unit.GRAM, Unit.MILLILITER): lambda value: value,
    (Unit.LITER, Unit.KILOGRAM): lambda value: value,
    (Unit.KILOGRAM, Unit.LITER): lambda value: value,
}


def normalize_unit(raw: str) -> str:
    """Map a unit as entered to its canonical token.

    Unknown units come back lower-cased and trimmed rather than rejected.
    """
    cleaned = (raw or "").strip().lower()
    unit = _SYNONYMS.get(cleaned)
    if unit is None:
        return cleaned
    return unit.value


def convert_units(quantity: float, from_unit: str, to_unit: str) -> float | None:
    """Convert a quantity between units, or return None if no path exists."""
    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)
    if source == target:
        return quantity
    if source not in _UNIT_VALUES or target not in _UNIT_VALUES:
        return None
    conversion = _CONVERSIONS.get((Unit(source), Unit(target)))
    if conversion is None:
        return None
    return conversion(quantity)


def upscale_quantity(quantity: float, unit: str) -> tuple[float, str]:
    """Promote large gram and millilitre totals to kg and L."""
    normalized = normalize_unit(unit)
    if normalized == Unit.GRAM and quantity >= UPSCALE_THRESHOLD:
        return quantity / 1000, "kg"
    if normalized == Unit.MILLILITER and quantity >= UPSCALE_THRESHOLD:
        return quantity / 1000, "L"
    return quantity, unit

