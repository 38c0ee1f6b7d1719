# Top-level API for simple_dex (integer-domain).
"""
Top-level API for simple_dex (integer-domain).

This module exposes the stable interface of the two-asset exchange engine:
  - Pool: reserves, liquidity (operator only), swaps and price queries
  - swap_output / spot_price: pure constant-product pricing
  - AssetLedger / InMemoryLedger: the ledger collaborator and a reference implementation
  - EventLog: append-only notification records

All amounts are ints in the smallest unit of their asset.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .pool import Pool
from .amm import swap_output, spot_price
from .ledger import AssetLedger, InMemoryLedger
from .events import EventLog
from .quote import quote, quote_pool, quote_table

# Core data types and exceptions
from .core import (
    Direction,
    LiquidityAdded,
    LiquidityRemoved,
    Swapped,
    SwapQuote,
    PoolSnapshot,
    DexError,
    NotAuthorized,
    InvalidAmount,
    InvalidRatio,
    InsufficientReserves,
    InvalidToken,
    InvalidDirection,
    EmptyReserves,
    LedgerFailure,
    InsufficientBalance,
    InsufficientAllowance,
    UnknownAsset,
    SettlementFailure,
)

__all__ = [
    # engine
    "Pool",
    "swap_output",
    "spot_price",
    "AssetLedger",
    "InMemoryLedger",
    "EventLog",
    "quote",
    "quote_pool",
    "quote_table",
    # datatypes
    "Direction",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swapped",
    "SwapQuote",
    "PoolSnapshot",
    # exceptions
    "DexError",
    "NotAuthorized",
    "InvalidAmount",
    "InvalidRatio",
    "InsufficientReserves",
    "InvalidToken",
    "InvalidDirection",
    "EmptyReserves",
    "LedgerFailure",
    "InsufficientBalance",
    "InsufficientAllowance",
    "UnknownAsset",
    "SettlementFailure",
]
