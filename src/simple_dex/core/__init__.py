"""
Simple DEX Core
===============

Unified exports for integer-domain constants, exceptions, datatypes and
display helpers. All pool arithmetic is done on plain ints; Decimal is used
only for formatting.
"""

# Integer-domain constants
from .constants import (
    FEE_NUMERATOR,
    FEE_DENOMINATOR,
    PRICE_DECIMALS,
    PRICE_SCALE,
    DIRECTION_A_TO_B,
    DIRECTION_B_TO_A,
    DEFAULT_DECIMALS,
    FEE_RATE,
)

# Core exceptions
from .exc import (
    DexError,
    NotAuthorized,
    InvalidAmount,
    InvalidRatio,
    InsufficientReserves,
    InvalidToken,
    EmptyReserves,
    InvalidDirection,
    LedgerFailure,
    InsufficientBalance,
    InsufficientAllowance,
    UnknownAsset,
    SettlementFailure,
)

# Datatypes: directions, notification records, read-only views
from .datatypes import (
    Direction,
    LiquidityAdded,
    LiquidityRemoved,
    Swapped,
    Notification,
    SwapQuote,
    PoolSnapshot,
)

# Decimal formatting helpers (non-core arithmetic)
from .fmt import (
    to_decimal,
    format_units,
    parse_units,
    format_price,
)

__all__ = [
    # constants
    "FEE_NUMERATOR",
    "FEE_DENOMINATOR",
    "PRICE_DECIMALS",
    "PRICE_SCALE",
    "DIRECTION_A_TO_B",
    "DIRECTION_B_TO_A",
    "DEFAULT_DECIMALS",
    "FEE_RATE",
    # exceptions
    "DexError",
    "NotAuthorized",
    "InvalidAmount",
    "InvalidRatio",
    "InsufficientReserves",
    "InvalidToken",
    "EmptyReserves",
    "InvalidDirection",
    "LedgerFailure",
    "InsufficientBalance",
    "InsufficientAllowance",
    "UnknownAsset",
    "SettlementFailure",
    # datatypes
    "Direction",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swapped",
    "Notification",
    "SwapQuote",
    "PoolSnapshot",
    # fmt
    "to_decimal",
    "format_units",
    "parse_units",
    "format_price",
]
