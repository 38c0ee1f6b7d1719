"""
Asset ledger collaborator.

The pool never tracks per-holder balances itself. It moves assets through an
object implementing `AssetLedger`:

  - pull_transfer: debit a holder who pre-authorised the recipient (the pool)
  - push_transfer: credit a holder from the sender's (the pool's) balance
  - balance_of:    read-only balance query
  - allowance:     how much a holder lets a spender pull

The pool checks balances and allowances for every leg before it moves
anything, and reverses a payout with a plain push back from the recipient.

Failures are raised as `LedgerFailure` subclasses and are never masked by the
pool. `InMemoryLedger` is a reference implementation with ERC-20 style
allowances, used by tests and scripts.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, Protocol, Tuple, runtime_checkable

from structlog import get_logger

from .core.exc import InvalidAmount, InsufficientBalance, InsufficientAllowance, UnknownAsset, LedgerFailure

logger = get_logger()


@runtime_checkable
class AssetLedger(Protocol):
    def pull_transfer(self, asset: str, holder: str, recipient: str, amount: int) -> None:
        ...

    def push_transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        ...

    def balance_of(self, asset: str, holder: str) -> int:
        ...

    def allowance(self, asset: str, owner: str, spender: str) -> int:
        ...


@dataclass
class AssetRecord:
    """Book of one fungible asset: metadata, balances and allowances."""

    name: str
    symbol: str
    decimals: int = 18
    total_supply: int = 0
    balances: Dict[str, int] = field(default_factory=dict)
    # (owner, spender) -> remaining allowance
    allowances: Dict[Tuple[str, str], int] = field(default_factory=dict)


class InMemoryLedger:
    """Multi-asset in-memory ledger with ERC-20 semantics.

    Every asset is created with an initial supply credited to one holder.
    Mutations are serialised by a single lock, so the ledger may be shared
    by several pools.
    """

    def __init__(self) -> None:
        self._assets: Dict[str, AssetRecord] = {}
        self._lock = threading.RLock()
        self.log = logger.new(component='ledger')

    # --- Asset registry ---
    def create_asset(self, asset: str, name: str, symbol: str, initial_supply: int, holder: str,
                     *, decimals: int = 18) -> AssetRecord:
        """Register `asset` and mint `initial_supply` to `holder`."""
        self._check_amount(initial_supply, allow_zero=True)
        with self._lock:
            if asset in self._assets:
                raise LedgerFailure(f"Asset already exists: {asset}", asset=asset)
            record = AssetRecord(name=name, symbol=symbol, decimals=decimals, total_supply=initial_supply)
            if initial_supply:
                record.balances[holder] = initial_supply
            self._assets[asset] = record
        self.log.info('asset created', asset=asset, symbol=symbol, supply=initial_supply, holder=holder)
        return record

    def has_asset(self, asset: str) -> bool:
        return asset in self._assets

    def name(self, asset: str) -> str:
        return self._record(asset).name

    def symbol(self, asset: str) -> str:
        return self._record(asset).symbol

    def decimals(self, asset: str) -> int:
        return self._record(asset).decimals

    def total_supply(self, asset: str) -> int:
        return self._record(asset).total_supply

    # --- ERC-20 style surface ---
    def balance_of(self, asset: str, holder: str) -> int:
        return self._record(asset).balances.get(holder, 0)

    def allowance(self, asset: str, owner: str, spender: str) -> int:
        return self._record(asset).allowances.get((owner, spender), 0)

    def approve(self, asset: str, owner: str, spender: str, amount: int) -> None:
        """Set (not add to) the amount `spender` may pull from `owner`."""
        self._check_amount(amount, allow_zero=True)
        with self._lock:
            self._record(asset).allowances[(owner, spender)] = amount
        self.log.debug('approve', asset=asset, owner=owner, spender=spender, amount=amount)

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        """Move `amount` from `sender` to `recipient` on the sender's own authority."""
        self._check_amount(amount, allow_zero=True)
        with self._lock:
            self._move(self._record(asset), asset, sender, recipient, amount)
        self.log.debug('transfer', asset=asset, sender=sender, recipient=recipient, amount=amount)

    def transfer_from(self, asset: str, spender: str, owner: str, recipient: str, amount: int) -> None:
        """Move `amount` from `owner` to `recipient`, consuming `spender`'s allowance."""
        self._check_amount(amount, allow_zero=True)
        with self._lock:
            record = self._record(asset)
            allowed = record.allowances.get((owner, spender), 0)
            if allowed < amount:
                raise InsufficientAllowance(asset=asset, holder=owner, amount=amount)
            self._move(record, asset, owner, recipient, amount)
            record.allowances[(owner, spender)] = allowed - amount
        self.log.debug('transfer_from', asset=asset, spender=spender, owner=owner,
                       recipient=recipient, amount=amount)

    # --- AssetLedger interface ---
    def pull_transfer(self, asset: str, holder: str, recipient: str, amount: int) -> None:
        """The recipient (the pool) pulls `amount` from `holder` using its allowance."""
        self.transfer_from(asset, recipient, holder, recipient, amount)

    def push_transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        self.transfer(asset, sender, recipient, amount)

    # --- internals ---
    def _record(self, asset: str) -> AssetRecord:
        record = self._assets.get(asset)
        if record is None:
            raise UnknownAsset(f"Unknown asset: {asset}", asset=asset)
        return record

    @staticmethod
    def _check_amount(amount: int, *, allow_zero: bool) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmount(f"amount must be an integer, got {type(amount).__name__}")
        if amount < 0 or (amount == 0 and not allow_zero):
            raise InvalidAmount("Amount must be > 0" if not allow_zero else "Amount must be >= 0")

    @staticmethod
    def _move(record: AssetRecord, asset: str, sender: str, recipient: str, amount: int) -> None:
        balance = record.balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(asset=asset, holder=sender, amount=amount)
        record.balances[sender] = balance - amount
        record.balances[recipient] = record.balances.get(recipient, 0) + amount


__all__ = ["AssetLedger", "AssetRecord", "InMemoryLedger"]
