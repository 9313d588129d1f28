"""Unit constants and conversion factors.

Mass units convert to grams and volume units to millilitres.  Pieces (pcs)
have no factor and can only be priced against other pieces.
"""

from typing import Optional

UNITS = ("g", "kg", "oz", "lb", "ml", "l", "cup", "tbsp", "tsp", "pcs")

MASS_UNITS = {"g", "kg", "oz", "lb"}
VOLUME_UNITS = {"ml", "l", "cup", "tbsp", "tsp"}
COUNT_UNIT = "pcs"

# Factor to the family base unit (g for mass, ml for volume). 0 means no conversion.
UNIT_CONVERSION = {
    "g": 1,
    "kg": 1000,
    "oz": 28.3495,
    "lb": 453.592,
    "ml": 1,
    "l": 1000,
    "cup": 236.588,
    "tbsp": 14.787,
    "tsp": 4.929,
    "pcs": 0,
}

UNIT_LABELS = {
    "g": "gram/s",
    "kg": "kilogram/s",
    "oz": "ounce/s",
    "lb": "pound/s",
    "ml": "millilitre/s",
    "l": "litre/s",
    "cup": "cup/s",
    "tbsp": "tablespoon/s",
    "tsp": "teaspoon/s",
    "pcs": "piece/s",
}

# Free-text unit spellings (lowercase) -> canonical unit
UNIT_SYNONYMS = {
    "g": "g", "gram": "g", "grams": "g", "gr": "g",
    "kg": "kg", "kilogram": "kg", "kilograms": "kg", "kilo": "kg", "kilos": "kg",
    "oz": "oz", "ounce": "oz", "ounces": "oz",
    "lb": "lb", "lbs": "lb", "pound": "lb", "pounds": "lb",
    "ml": "ml", "milliliter": "ml", "milliliters": "ml", "millilitre": "ml", "millilitres": "ml",
    "l": "l", "liter": "l", "liters": "l", "litre": "l", "litres": "l",
    "cup": "cup", "cups": "cup",
    "tbsp": "tbsp", "tablespoon": "tbsp", "tablespoons": "tbsp", "tbs": "tbsp",
    "tsp": "tsp", "teaspoon": "tsp", "teaspoons": "tsp",
    "pcs": "pcs", "pc": "pcs", "piece": "pcs", "pieces": "pcs", "each": "pcs", "ea": "pcs",
}


def conversion_factor(unit: Optional[str]) -> float:
    """Return the base-unit factor for a unit, or 0 when it has none."""
    return UNIT_CONVERSION.get(unit, 0)


def is_mass(unit: Optional[str]) -> bool:
    return unit in MASS_UNITS


def is_volume(unit: Optional[str]) -> bool:
    return unit in VOLUME_UNITS


def normalize_unit(value) -> str:
    """Map a free-text unit to a canonical unit. Unrecognized units become 'pcs'."""
    key = str(value).lower().strip().rstrip(".") if value is not None else ""
    return UNIT_SYNONYMS.get(key, COUNT_UNIT)
