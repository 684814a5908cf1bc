from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Optional

# One currency unit is stored as 10^4 integer units.
SCALE = 10_000
FRACTION_DIGITS = 4
MAX_UNITS = 2**64 - 1

_SMALLEST_UNIT = Decimal(1).scaleb(-FRACTION_DIGITS)
_AMOUNT_CHARS = frozenset("0123456789.")


def parse_amount(text: Optional[str]) -> Optional[int]:
    """
    Decode decimal text into fixed-point units.

    The fraction is truncated, not rounded, to 4 digits.
    Returns None for empty, negative, malformed or out-of-range input.
    """
    if text is None:
        return None

    # Plain digits with an optional point: no sign, exponent, NaN or Infinity.
    text = text.strip()
    if not text or not set(text) <= _AMOUNT_CHARS:
        return None

    try:
        value = Decimal(text).quantize(_SMALLEST_UNIT, rounding=ROUND_DOWN)
    except InvalidOperation:
        # Malformed text, or more digits than the context precision holds.
        return None

    units = int(value.scaleb(FRACTION_DIGITS))
    if units > MAX_UNITS:
        return None
    return units


def format_amount(units: int) -> str:
    """Format fixed-point units as decimal text, removing trailing zeros."""
    normalized = Decimal(units).scaleb(-FRACTION_DIGITS).normalize()
    return f"{normalized:f}"
