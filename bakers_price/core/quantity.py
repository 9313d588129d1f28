"""Quantity parsing: turn user-entered amounts like '1 1/2' or '0.25' into numbers.

Quantities are stored as the text the user typed so fractions survive an
edit round trip.  They are only converted to numbers at calculation time,
and the conversion never raises: anything unparseable counts as 0.
"""

import math
import re
from dataclasses import dataclass
from typing import Union

# Plain ASCII decimal with optional exponent; no underscores or non-ASCII digits
_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def _finite(text: str) -> float:
    """Parse a plain decimal, returning NaN when it is not a finite number."""
    if not isinstance(text, str) or not _DECIMAL.fullmatch(text.strip()):
        return math.nan
    value = float(text)
    return value if math.isfinite(value) else math.nan


def parse_quantity(value: Union[str, int, float, None]) -> float:
    """Parse an integer, decimal, fraction ('1/4') or mixed fraction ('1 1/2').

    Returns 0 for empty or unparseable input.  Numbers pass through unchanged.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if not value:
        return 0
    clean = str(value).strip()
    if not clean:
        return 0

    # Mixed fraction: whole part and fraction separated by whitespace
    if " " in clean:
        parts = [p for p in clean.split(" ") if p.strip()]
        if len(parts) == 2:
            return parse_quantity(parts[0]) + parse_quantity(parts[1])

    if "/" in clean:
        num, den = clean.split("/", 1)
        numerator = _finite(num)
        denominator = _finite(den)
        if not math.isnan(numerator) and not math.isnan(denominator) and denominator != 0:
            return numerator / denominator

    parsed = _finite(clean)
    return 0 if math.isnan(parsed) else parsed


@dataclass(frozen=True)
class Quantity:
    """A quantity exactly as the user entered it (e.g. '1/2', '1 1/2', '250')."""

    text: str = "0"

    @classmethod
    def coerce(cls, value) -> "Quantity":
        """Build a Quantity from a string, number, None, or another Quantity."""
        if isinstance(value, Quantity):
            return value
        if value is None:
            return cls("0")
        if isinstance(value, float) and value.is_integer():
            return cls(str(int(value)))
        return cls(str(value))

    def to_number(self) -> float:
        return parse_quantity(self.text)

    def __str__(self) -> str:
        return self.text
