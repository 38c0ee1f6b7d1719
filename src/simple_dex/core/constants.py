"""
Simple DEX Core Constants (integer domain)
==========================================

Only integer constants used by pool arithmetic live here. Decimal helpers
used for display are kept in `fmt.py`.
"""

# NOTE: All reserve and trade amounts are integers in the smallest unit of each asset.

from decimal import Decimal

# ---------------------------------------------------------------------------
# Constant-product fee (0.3% on the input side)
# ---------------------------------------------------------------------------

#: Portion of the input that reaches the curve, in thousandths (1000 - 3).
FEE_NUMERATOR: int = 997
FEE_DENOMINATOR: int = 1000

#: Fixed-point scale of spot prices (18 decimal places).
PRICE_DECIMALS: int = 18
PRICE_SCALE: int = 10 ** PRICE_DECIMALS


# ---------------------------------------------------------------------------
# Swap direction tags (published verbatim in Swapped records)
# ---------------------------------------------------------------------------

DIRECTION_A_TO_B: str = "A->B"
DIRECTION_B_TO_A: str = "B->A"


# ---------------------------------------------------------------------------
# Display defaults (formatting helpers)
# ---------------------------------------------------------------------------

#: Default number of decimals of an asset's smallest unit (1 token = 10^18 units).
DEFAULT_DECIMALS: int = 18

#: Fee rate as a Decimal, for display only.
FEE_RATE: Decimal = Decimal(FEE_DENOMINATOR - FEE_NUMERATOR) / Decimal(FEE_DENOMINATOR)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

__all__ = [
    "FEE_NUMERATOR",
    "FEE_DENOMINATOR",
    "PRICE_DECIMALS",
    "PRICE_SCALE",
    "DIRECTION_A_TO_B",
    "DIRECTION_B_TO_A",
    "DEFAULT_DECIMALS",
    "FEE_RATE",
]
