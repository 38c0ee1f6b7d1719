from __future__ import annotations
from typing import List

import pytest

# Import project primitives
from simple_dex import Pool, InMemoryLedger
from simple_dex.core import InsufficientBalance, Notification


OPERATOR = "0xoperator"
ALICE = "0xalice"
BOB = "0xbob"
TOKEN_A = "0xtokenA"
TOKEN_B = "0xtokenB"
STRANGER_TOKEN = "0xstranger"

# Raw-unit supply; tests that need 18-decimal amounts build their own.
SUPPLY = 10 ** 12
TRADER_FUNDS = 10 ** 9


# -----------------------------
# Test helpers
# -----------------------------


class FlakyLedger(InMemoryLedger):
    """In-memory ledger whose next push transfers can be made to fail.

    - fail_push_after: number of successful push transfers before the next one raises.
      None disables the failure.
    - failures: how many consecutive pushes fail once triggered.
    - fail_next_pull: make the next pull transfer raise.
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_push_after = None
        self.failures = 1
        self.fail_next_pull = False

    def pull_transfer(self, asset, holder, recipient, amount):
        if self.fail_next_pull:
            self.fail_next_pull = False
            raise InsufficientBalance("forced pull failure", asset=asset, holder=holder, amount=amount)
        super().pull_transfer(asset, holder, recipient, amount)

    def push_transfer(self, asset, sender, recipient, amount):
        if self.fail_push_after is not None:
            if self.fail_push_after == 0:
                self.failures -= 1
                if self.failures <= 0:
                    self.fail_push_after = None
                raise InsufficientBalance("forced push failure", asset=asset, holder=sender, amount=amount)
            self.fail_push_after -= 1
        super().push_transfer(asset, sender, recipient, amount)


def make_ledger(cls=InMemoryLedger) -> InMemoryLedger:
    ledger = cls()
    ledger.create_asset(TOKEN_A, "Token A", "TKA", SUPPLY, OPERATOR)
    ledger.create_asset(TOKEN_B, "Token B", "TKB", SUPPLY, OPERATOR)
    for trader in (ALICE, BOB):
        ledger.transfer(TOKEN_A, OPERATOR, trader, TRADER_FUNDS)
        ledger.transfer(TOKEN_B, OPERATOR, trader, TRADER_FUNDS)
    return ledger


def make_pool(ledger: InMemoryLedger) -> Pool:
    pool = Pool(OPERATOR, TOKEN_A, TOKEN_B, ledger)
    ledger.approve(TOKEN_A, OPERATOR, pool.address, SUPPLY)
    ledger.approve(TOKEN_B, OPERATOR, pool.address, SUPPLY)
    ledger.approve(TOKEN_A, ALICE, pool.address, TRADER_FUNDS)
    ledger.approve(TOKEN_B, ALICE, pool.address, TRADER_FUNDS)
    return pool


def pool_holdings(pool: Pool) -> tuple[int, int]:
    ledger = pool._ledger
    return ledger.balance_of(pool.asset_a, pool.address), ledger.balance_of(pool.asset_b, pool.address)


# -----------------------------
# Pytest fixtures
# -----------------------------

@pytest.fixture()
def ledger() -> InMemoryLedger:
    return make_ledger()


@pytest.fixture()
def pool(ledger) -> Pool:
    """Empty pool; operator and Alice have approved it, Bob has not."""
    return make_pool(ledger)


@pytest.fixture()
def seeded_pool(pool) -> Pool:
    """Pool holding reserves (1000, 2000)."""
    pool.add_liquidity(OPERATOR, 1000, 2000)
    return pool


@pytest.fixture()
def flaky_ledger() -> FlakyLedger:
    return make_ledger(FlakyLedger)


@pytest.fixture()
def flaky_pool(flaky_ledger) -> Pool:
    pool = make_pool(flaky_ledger)
    pool.add_liquidity(OPERATOR, 1000, 2000)
    return pool


@pytest.fixture()
def recorded(pool) -> List[Notification]:
    """Live list of records delivered to a subscriber of `pool`."""
    seen: List[Notification] = []
    pool.events.subscribe(seen.append)
    return seen
