"""
Core datatypes used by the pool, its notification log and quoting helpers.

These datatypes are intentionally minimal and immutable so that pool
arithmetic and event handling remain deterministic and testable.

Notes:
- Amounts are plain ints in the smallest unit of their asset.
- `seq` on notification records is stamped by the event log when the
  record is published; records built by hand carry 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .constants import DIRECTION_A_TO_B, DIRECTION_B_TO_A
from .exc import InvalidDirection


# ---------------------------------------------------------------------------
# Swap direction
# ---------------------------------------------------------------------------

class Direction(Enum):
    """Side of the pool a trade sells into. The value is the published tag."""
    A_TO_B = DIRECTION_A_TO_B
    B_TO_A = DIRECTION_B_TO_A

    @property
    def tag(self) -> str:
        return self.value

    def reverse(self) -> "Direction":
        return Direction.B_TO_A if self is Direction.A_TO_B else Direction.A_TO_B

    @classmethod
    def parse(cls, direction: Union["Direction", str]) -> "Direction":
        """Accept a Direction or its tag; anything else raises InvalidDirection."""
        try:
            return cls(direction)
        except ValueError:
            raise InvalidDirection(f"Invalid direction: {direction!r}") from None


# ---------------------------------------------------------------------------
# Notification records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LiquidityAdded:
    """Operator deposited `amount_a` of asset A and `amount_b` of asset B."""

    amount_a: int
    amount_b: int
    seq: int = 0


@dataclass(frozen=True)
class LiquidityRemoved:
    """Operator withdrew `amount_a` of asset A and `amount_b` of asset B."""

    amount_a: int
    amount_b: int
    seq: int = 0


@dataclass(frozen=True)
class Swapped:
    """A trade executed against the pool.

    Fields:
    - trader: identity that sold `amount_in` and received `amount_out`.
    - direction: published tag, "A->B" or "B->A".
    - amount_in: input actually pulled from the trader.
    - amount_out: output actually pushed to the trader.
    """

    trader: str
    direction: str
    amount_in: int
    amount_out: int
    seq: int = 0


Notification = Union[LiquidityAdded, LiquidityRemoved, Swapped]


# ---------------------------------------------------------------------------
# Quotes and snapshots (read-only views)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SwapQuote:
    """Simulated trade against a given pair of reserves (no state touched)."""

    direction: Direction
    amount_in: int
    amount_out: int
    reserve_in: int
    reserve_out: int
    fee_paid: int
    # shortfall versus spot price, scaled by PRICE_SCALE
    price_impact: int = 0

    @property
    def reserves_after(self) -> tuple[int, int]:
        """(reserve_in, reserve_out) once the trade is applied."""
        return self.reserve_in + self.amount_in, self.reserve_out - self.amount_out

    @property
    def invariant_before(self) -> int:
        return self.reserve_in * self.reserve_out

    @property
    def invariant_after(self) -> int:
        r_in, r_out = self.reserves_after
        return r_in * r_out


@dataclass(frozen=True)
class PoolSnapshot:
    """Point-in-time view of a pool.

    Prices are None while either reserve is zero.
    """

    address: str
    operator: str
    asset_a: str
    asset_b: str
    reserve_a: int
    reserve_b: int
    price_a: Optional[int] = None
    price_b: Optional[int] = None

    @property
    def invariant(self) -> int:
        return self.reserve_a * self.reserve_b

    def is_empty(self) -> bool:
        return self.reserve_a == 0 or self.reserve_b == 0


__all__ = [
    "Direction",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swapped",
    "Notification",
    "SwapQuote",
    "PoolSnapshot",
]
