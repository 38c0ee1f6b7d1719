"""
Off-engine quoting helpers.

Everything here is a read: quotes are computed from a pool's current
reserves (or from caller-supplied reserves) and nothing is written back.
Quotes are only valid until the next mutation of the pool.
"""
from __future__ import annotations

from typing import Iterable, List, Tuple, Union

from .amm import swap_output, fee_paid, price_impact
from .core.datatypes import Direction, SwapQuote
from .core.exc import InsufficientReserves
from .pool import Pool


def quote(direction: Direction, amount_in: int, reserve_in: int, reserve_out: int) -> SwapQuote:
    """Simulate selling `amount_in` into (reserve_in, reserve_out)."""
    amount_out = swap_output(amount_in, reserve_in, reserve_out)
    return SwapQuote(
        direction=direction,
        amount_in=amount_in,
        amount_out=amount_out,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        fee_paid=fee_paid(amount_in),
        price_impact=price_impact(amount_in, amount_out, reserve_in, reserve_out),
    )


def quote_pool(pool: Pool, direction: Union[Direction, str], amount_in: int) -> SwapQuote:
    """Quote a swap against the pool's current reserves. `direction` may be a tag."""
    direction = Direction.parse(direction)
    ra, rb = pool.reserves()
    if ra == 0 or rb == 0:
        raise InsufficientReserves()
    if direction is Direction.A_TO_B:
        return quote(direction, amount_in, ra, rb)
    return quote(direction, amount_in, rb, ra)


def quote_table(pool: Pool, amounts: Iterable[int]) -> List[Tuple[int, SwapQuote, SwapQuote]]:
    """For each input size, the A->B and B->A quotes on the same reserves.

    Reserves are read once so that every row is priced against one state.
    """
    ra, rb = pool.reserves()
    if ra == 0 or rb == 0:
        raise InsufficientReserves()
    rows = []
    for amount in amounts:
        rows.append((
            amount,
            quote(Direction.A_TO_B, amount, ra, rb),
            quote(Direction.B_TO_A, amount, rb, ra),
        ))
    return rows


def round_trip(amount_in: int, reserve_a: int, reserve_b: int) -> Tuple[int, int]:
    """Sell `amount_in` of A for B, then sell all of that B back for A.

    Returns (b_received, a_returned). With the fee retained by the pool,
    a_returned < amount_in for any positive input and reserves.
    """
    b_out = swap_output(amount_in, reserve_a, reserve_b)
    ra, rb = reserve_a + amount_in, reserve_b - b_out
    if b_out == 0:
        return 0, 0
    a_back = swap_output(b_out, rb, ra)
    return b_out, a_back


__all__ = ["quote", "quote_pool", "quote_table", "round_trip"]
