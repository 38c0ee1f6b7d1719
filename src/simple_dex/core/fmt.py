"""
Formatting helpers and Decimal-based conversions (non-core arithmetic).

Core arithmetic uses plain integers. Decimal here is only for formatting
and convenience (e.g., tests, logs, scripts).
"""

from decimal import Decimal, getcontext, InvalidOperation

from .exc import InvalidAmount
from .constants import DEFAULT_DECIMALS, PRICE_DECIMALS


# ---------------------------------------------------------------------------
# Global Decimal precision (formatting only)
# ---------------------------------------------------------------------------

#: Default global precision for Decimal-based formatting. 78 digits cover any
#: 256-bit amount. This does not affect core arithmetic which uses integers.
DEFAULT_DECIMAL_PRECISION: int = 78
getcontext().prec = DEFAULT_DECIMAL_PRECISION


# ---------------------------------------------------------------------------
# Unit conversions
# ---------------------------------------------------------------------------

def to_decimal(units: int, decimals: int = DEFAULT_DECIMALS) -> Decimal:
    """Convert an integer amount of smallest units into whole-token Decimal."""
    if units < 0:
        raise InvalidAmount("to_decimal(): negative amounts are not allowed")
    return Decimal(units).scaleb(-decimals)


def format_units(units: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Format smallest units as a whole-token string, e.g. 1500000000000000000 -> '1.5'.

    Integral values keep a trailing '.0' so that output is stable in logs.
    """
    d = to_decimal(units, decimals)
    if d == d.to_integral_value():
        return f"{d.quantize(Decimal(1))}.0"
    return format(d.normalize(), "f")


def parse_units(text: str, decimals: int = DEFAULT_DECIMALS) -> int:
    """Parse a whole-token string into smallest units, e.g. '1.5' -> 1500000000000000000.

    Raises InvalidAmount for negative values or values finer than one unit.
    """
    try:
        d = Decimal(str(text).strip())
    except InvalidOperation:
        raise InvalidAmount(f"parse_units(): not a number: {text!r}") from None
    if d < 0:
        raise InvalidAmount("parse_units(): negative amounts are not allowed")
    scaled = d.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidAmount(f"parse_units(): {text!r} has more than {decimals} decimals")
    return int(scaled)


def format_price(price: int) -> str:
    """Format a PRICE_SCALE fixed-point price for display."""
    return format_units(price, PRICE_DECIMALS)


__all__ = [
    "DEFAULT_DECIMAL_PRECISION",
    "to_decimal",
    "format_units",
    "parse_units",
    "format_price",
]
