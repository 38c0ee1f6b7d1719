"""
Constant-product pricing (fee on input): **pool math only**.

This module holds the pure arithmetic used by the pool; it never touches
reserves or the ledger. The 0.3% fee is deducted on the *input* side before
the curve is applied, and the single floor division in `swap_output` is the
only place where value is rounded away (always in favour of the pool).
"""
from __future__ import annotations

from .core.constants import FEE_NUMERATOR, FEE_DENOMINATOR, PRICE_SCALE
from .core.exc import InvalidAmount, EmptyReserves


def _require_int(name: str, value: int) -> None:
    # bool is an int subclass; reject it so True/False never act as amounts
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"{name} must be an integer amount, got {type(value).__name__}")


def swap_output(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Return the OUT amount for selling `amount_in` into (reserve_in, reserve_out).

        amount_in_with_fee = amount_in * 997
        amount_out = (amount_in_with_fee * reserve_out) // (reserve_in * 1000 + amount_in_with_fee)

    For positive reserves the result is strictly below `reserve_out`. The
    reserves need not be a live pool's: callers quote against arbitrary
    values.
    """
    _require_int("amount_in", amount_in)
    _require_int("reserve_in", reserve_in)
    _require_int("reserve_out", reserve_out)
    if amount_in <= 0:
        raise InvalidAmount("Amount must be > 0")
    if reserve_in < 0 or reserve_out < 0:
        raise InvalidAmount("Reserves must be >= 0")
    amount_in_with_fee = amount_in * FEE_NUMERATOR
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


def fee_paid(amount_in: int) -> int:
    """Fee portion of `amount_in` (floor), in input units. Display only."""
    return amount_in * (FEE_DENOMINATOR - FEE_NUMERATOR) // FEE_DENOMINATOR


def spot_price(reserve_this: int, reserve_other: int) -> int:
    """Price of one unit of the asset held in `reserve_this`, in the other asset.

    Fixed point with PRICE_SCALE (10^18), floored. Both reserves must be nonzero.
    """
    if reserve_this <= 0 or reserve_other <= 0:
        raise EmptyReserves()
    return reserve_other * PRICE_SCALE // reserve_this


def price_impact(amount_in: int, amount_out: int, reserve_in: int, reserve_out: int) -> int:
    """Relative shortfall of the execution price versus the pre-trade spot price.

    Scaled by PRICE_SCALE: 0 means the trade filled at spot, PRICE_SCALE means
    nothing was received. Fee and curve slippage are both included.
    """
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        return 0
    # ideal = amount_in * reserve_out / reserve_in; impact = 1 - amount_out / ideal
    ideal_num = amount_in * reserve_out
    return (ideal_num - amount_out * reserve_in) * PRICE_SCALE // ideal_num


__all__ = ["swap_output", "fee_paid", "spot_price", "price_impact"]
