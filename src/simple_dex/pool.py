"""
Two-asset constant-product pool: reserves, liquidity, swaps and access control.

Every mutating entry point follows the same sequence under the pool lock:

  1. validate caller and amounts against the current reserves
  2. check every leg (balances, allowances) against the ledger, then move
     assets (journalled, reversed if a transfer still fails)
  3. commit both reserves together
  4. publish one notification record

Reads (`reserve_a`, `get_price`, `snapshot`, ...) are open to any caller.
There is no minimum-output guard on swaps: the trader receives whatever the
curve yields at execution time.
"""
from __future__ import annotations

import threading
from typing import Callable, List, Optional, Union

from structlog import get_logger

from .amm import swap_output, spot_price
from .core.datatypes import Direction, LiquidityAdded, LiquidityRemoved, Swapped, PoolSnapshot
from .core.exc import (
    DexError,
    NotAuthorized,
    InvalidAmount,
    InvalidRatio,
    InsufficientReserves,
    InvalidToken,
    EmptyReserves,
    InsufficientBalance,
    InsufficientAllowance,
    SettlementFailure,
)
from .events import EventLog
from .ledger import AssetLedger

logger = get_logger()

DirectionLike = Union[Direction, str]


def _is_amount(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class _Settlement:
    """Journal of the ledger transfers made by one operation.

    `check_pull` / `check_push` verify every leg against the ledger before
    the first transfer, so an operation that cannot settle moves nothing.
    Each completed transfer then registers its inverse; `rollback` replays
    them in reverse order if a transfer still fails. Inverses are plain
    pushes and never spend an allowance.
    """

    def __init__(self, ledger: AssetLedger, pool_address: str, log) -> None:
        self._ledger = ledger
        self._pool = pool_address
        self._undo: List[Callable[[], None]] = []
        self.log = log

    def check_pull(self, asset: str, holder: str, amount: int) -> None:
        if self._ledger.allowance(asset, holder, self._pool) < amount:
            raise InsufficientAllowance(asset=asset, holder=holder, amount=amount)
        if self._ledger.balance_of(asset, holder) < amount:
            raise InsufficientBalance(asset=asset, holder=holder, amount=amount)

    def check_push(self, asset: str, amount: int) -> None:
        if self._ledger.balance_of(asset, self._pool) < amount:
            raise InsufficientBalance(asset=asset, holder=self._pool, amount=amount)

    def pull(self, asset: str, holder: str, amount: int) -> None:
        self._ledger.pull_transfer(asset, holder, self._pool, amount)
        self._undo.append(lambda: self._ledger.push_transfer(asset, self._pool, holder, amount))

    def push(self, asset: str, recipient: str, amount: int) -> None:
        if amount == 0:
            return
        self._ledger.push_transfer(asset, self._pool, recipient, amount)
        self._undo.append(lambda: self._ledger.push_transfer(asset, recipient, self._pool, amount))

    def rollback(self, cause: BaseException) -> None:
        """Reverse completed transfers; raise SettlementFailure if any inverse fails."""
        errors = []
        while self._undo:
            undo = self._undo.pop()
            try:
                undo()
            except Exception as e:
                self.log.error('settlement rollback step failed', exc_info=True)
                errors.append(e)
        if errors:
            raise SettlementFailure(undo_errors=errors) from cause


class Pool:
    """Constant-product pool over two assets with a single liquidity operator.

    Orientation: asset A / asset B are fixed at creation. Swaps sell into one
    side ("A->B" sells A for B). Amounts are ints in smallest units.
    """

    def __init__(self,
                 operator: str,
                 asset_a: str,
                 asset_b: str,
                 ledger: AssetLedger,
                 *,
                 address: Optional[str] = None,
                 events: Optional[EventLog] = None) -> None:
        if asset_a == asset_b:
            raise InvalidToken("Tokens must differ")
        self._operator = operator
        self._asset_a = asset_a
        self._asset_b = asset_b
        self._ledger = ledger
        self._address = address if address is not None else f"pool:{asset_a}/{asset_b}"
        self.events = events if events is not None else EventLog()

        self._reserve_a = 0
        self._reserve_b = 0

        # One writer at a time per pool; reentrant so subscribers may read.
        self._lock = threading.RLock()
        self.log = logger.new(pool=self._address)

    # --- Identity and reserve queries ---
    @property
    def address(self) -> str:
        return self._address

    @property
    def operator(self) -> str:
        return self._operator

    def owner(self) -> str:
        return self._operator

    @property
    def asset_a(self) -> str:
        return self._asset_a

    @property
    def asset_b(self) -> str:
        return self._asset_b

    @property
    def reserve_a(self) -> int:
        return self._reserve_a

    @property
    def reserve_b(self) -> int:
        return self._reserve_b

    def reserves(self) -> tuple[int, int]:
        """(reserve_a, reserve_b) read together."""
        with self._lock:
            return self._reserve_a, self._reserve_b

    # --- Pricing ---
    def get_price(self, token: str) -> int:
        """Price of `token` in the other asset, scaled by 10^18 (floor)."""
        with self._lock:
            if token == self._asset_a:
                this_reserve, other_reserve = self._reserve_a, self._reserve_b
            elif token == self._asset_b:
                this_reserve, other_reserve = self._reserve_b, self._reserve_a
            else:
                raise InvalidToken()
            if this_reserve == 0 or other_reserve == 0:
                raise EmptyReserves()
            return spot_price(this_reserve, other_reserve)

    @staticmethod
    def get_swap_result(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Stateless simulation against arbitrary reserves (not necessarily this pool's)."""
        return swap_output(amount_in, reserve_in, reserve_out)

    def snapshot(self) -> PoolSnapshot:
        with self._lock:
            ra, rb = self._reserve_a, self._reserve_b
        price_a = price_b = None
        if ra > 0 and rb > 0:
            price_a = spot_price(ra, rb)
            price_b = spot_price(rb, ra)
        return PoolSnapshot(
            address=self._address,
            operator=self._operator,
            asset_a=self._asset_a,
            asset_b=self._asset_b,
            reserve_a=ra,
            reserve_b=rb,
            price_a=price_a,
            price_b=price_b,
        )

    # --- Liquidity (operator only) ---
    def add_liquidity(self, caller: str, amount_a: int, amount_b: int) -> LiquidityAdded:
        """Deposit both assets from the operator.

        The first deposit into an empty pool sets the ratio. Later deposits
        must match it exactly: amount_a * reserve_b == amount_b * reserve_a.
        """
        with self._lock:
            self._require_operator(caller, 'add_liquidity')
            if not (_is_amount(amount_a) and _is_amount(amount_b)) or amount_a <= 0 or amount_b <= 0:
                raise self._reject(InvalidAmount("Amounts must be > 0"), 'add_liquidity',
                                   amount_a=amount_a, amount_b=amount_b)
            ra, rb = self._reserve_a, self._reserve_b
            if not (ra == 0 and rb == 0) and amount_a * rb != amount_b * ra:
                raise self._reject(InvalidRatio(), 'add_liquidity', amount_a=amount_a, amount_b=amount_b,
                                   reserve_a=ra, reserve_b=rb)

            settlement = _Settlement(self._ledger, self._address, self.log)
            try:
                settlement.check_pull(self._asset_a, caller, amount_a)
                settlement.check_pull(self._asset_b, caller, amount_b)
                settlement.pull(self._asset_a, caller, amount_a)
                settlement.pull(self._asset_b, caller, amount_b)
            except Exception as exc:
                settlement.rollback(exc)
                self.log.debug('add_liquidity rejected by ledger', exc_info=True)
                raise

            self._reserve_a = ra + amount_a
            self._reserve_b = rb + amount_b
            self.log.info('liquidity added', amount_a=amount_a, amount_b=amount_b,
                          reserve_a=self._reserve_a, reserve_b=self._reserve_b)
            return self.events.publish(LiquidityAdded(amount_a, amount_b))

    def remove_liquidity(self, caller: str, amount_a: int, amount_b: int) -> LiquidityRemoved:
        """Withdraw both assets to the operator. No ratio check is applied."""
        with self._lock:
            self._require_operator(caller, 'remove_liquidity')
            if not (_is_amount(amount_a) and _is_amount(amount_b)) or amount_a <= 0 or amount_b <= 0:
                raise self._reject(InvalidAmount("Amounts must be > 0"), 'remove_liquidity',
                                   amount_a=amount_a, amount_b=amount_b)
            ra, rb = self._reserve_a, self._reserve_b
            if amount_a > ra or amount_b > rb:
                raise self._reject(InsufficientReserves(), 'remove_liquidity', amount_a=amount_a,
                                   amount_b=amount_b, reserve_a=ra, reserve_b=rb)

            settlement = _Settlement(self._ledger, self._address, self.log)
            try:
                settlement.check_push(self._asset_a, amount_a)
                settlement.check_push(self._asset_b, amount_b)
                settlement.push(self._asset_a, caller, amount_a)
                settlement.push(self._asset_b, caller, amount_b)
            except Exception as exc:
                settlement.rollback(exc)
                self.log.debug('remove_liquidity rejected by ledger', exc_info=True)
                raise

            self._reserve_a = ra - amount_a
            self._reserve_b = rb - amount_b
            self.log.info('liquidity removed', amount_a=amount_a, amount_b=amount_b,
                          reserve_a=self._reserve_a, reserve_b=self._reserve_b)
            return self.events.publish(LiquidityRemoved(amount_a, amount_b))

    # --- Swaps (open to any caller) ---
    def swap(self, caller: str, direction: DirectionLike, amount_in: int) -> Swapped:
        """Sell `amount_in` into the pool and receive the curve output.

        The output is computed on the reserves as they stand before the trade.
        Ledger failures (balance, allowance) propagate unchanged.
        """
        direction = Direction.parse(direction)
        with self._lock:
            if not _is_amount(amount_in) or amount_in <= 0:
                raise self._reject(InvalidAmount("Amount must be > 0"), 'swap', direction=direction.tag,
                                   amount_in=amount_in)
            if direction is Direction.A_TO_B:
                asset_in, asset_out = self._asset_a, self._asset_b
                reserve_in, reserve_out = self._reserve_a, self._reserve_b
            else:
                asset_in, asset_out = self._asset_b, self._asset_a
                reserve_in, reserve_out = self._reserve_b, self._reserve_a
            if reserve_in == 0 or reserve_out == 0:
                raise self._reject(InsufficientReserves(), 'swap', direction=direction.tag,
                                   reserve_in=reserve_in, reserve_out=reserve_out)

            amount_out = swap_output(amount_in, reserve_in, reserve_out)

            settlement = _Settlement(self._ledger, self._address, self.log)
            try:
                settlement.check_pull(asset_in, caller, amount_in)
                settlement.check_push(asset_out, amount_out)
                # payout first: a failed leg leaves the trader's allowance untouched
                settlement.push(asset_out, caller, amount_out)
                settlement.pull(asset_in, caller, amount_in)
            except Exception as exc:
                settlement.rollback(exc)
                self.log.debug('swap rejected by ledger', trader=caller, direction=direction.tag,
                               amount_in=amount_in, exc_info=True)
                raise

            if direction is Direction.A_TO_B:
                self._reserve_a = reserve_in + amount_in
                self._reserve_b = reserve_out - amount_out
            else:
                self._reserve_b = reserve_in + amount_in
                self._reserve_a = reserve_out - amount_out
            self.log.info('swapped', trader=caller, direction=direction.tag, amount_in=amount_in,
                          amount_out=amount_out, reserve_a=self._reserve_a, reserve_b=self._reserve_b)
            return self.events.publish(Swapped(caller, direction.tag, amount_in, amount_out))

    def swap_a_for_b(self, caller: str, amount_in: int) -> Swapped:
        return self.swap(caller, Direction.A_TO_B, amount_in)

    def swap_b_for_a(self, caller: str, amount_in: int) -> Swapped:
        return self.swap(caller, Direction.B_TO_A, amount_in)

    # --- internals ---
    def _require_operator(self, caller: str, op: str) -> None:
        if caller != self._operator:
            raise self._reject(NotAuthorized(), op, caller=caller)

    def _reject(self, exc: DexError, op: str, **kw) -> DexError:
        self.log.debug('rejected', op=op, reason=str(exc), kind=type(exc).__name__, **kw)
        return exc


__all__ = ["Pool"]
