"""Walkthrough demo: one pool on an in-memory ledger, operator + two traders.

Scenarios covered:
S1) Provision: initial deposit sets the 1:2 ratio, a matching top-up succeeds
S2) Rejections: wrong ratio, non-operator deposit, over-withdrawal
S3) Trading: A->B then B->A, invariant k grows with the retained fee
S4) Round trip: A->B->A returns less A than was sold
S5) Quote table: simulated swaps of several sizes on the current reserves
S6) Missing allowance: ledger failure propagates, nothing changes
S7) Withdrawal: operator removes part of the liquidity (ratio-breaking allowed)
"""
from __future__ import annotations

from typing import Callable, List
import argparse
import sys

from simple_dex import Pool, InMemoryLedger, DexError, quote_table
from simple_dex.core import Direction, format_units, format_price, parse_units
from simple_dex.core.log import configure_logging

OPERATOR = "0xoperator"
ALICE = "0xalice"
BOB = "0xbob"
TOKEN_A = "0xtokenA"
TOKEN_B = "0xtokenB"

# ---------- pretty printers ----------

def brief_pool(pool: Pool, ledger: InMemoryLedger) -> str:
    snap = pool.snapshot()
    sym_a, sym_b = ledger.symbol(snap.asset_a), ledger.symbol(snap.asset_b)
    parts = [
        f"reserve {sym_a}={format_units(snap.reserve_a)}",
        f"reserve {sym_b}={format_units(snap.reserve_b)}",
    ]
    if snap.is_empty():
        parts.append("price=(empty pool)")
    else:
        parts.append(f"price {sym_a}={format_price(snap.price_a)} {sym_b}")
        parts.append(f"price {sym_b}={format_price(snap.price_b)} {sym_a}")
    parts.append(f"k={snap.invariant}")
    return "Pool: " + ", ".join(parts)


def brief_balances(ledger: InMemoryLedger, holder: str) -> str:
    return (f"{holder}: {ledger.symbol(TOKEN_A)}={format_units(ledger.balance_of(TOKEN_A, holder))}, "
            f"{ledger.symbol(TOKEN_B)}={format_units(ledger.balance_of(TOKEN_B, holder))}")


def attempt(label: str, fn: Callable[[], object]) -> None:
    try:
        record = fn()
        print(f"  ✓ {label}: {record}")
    except DexError as e:
        print(f"  ✗ {label}: {type(e).__name__}('{e}')")


# ---------- build common fixtures ----------

def setup() -> tuple[InMemoryLedger, Pool]:
    ledger = InMemoryLedger()
    supply = parse_units("1000000")
    ledger.create_asset(TOKEN_A, "Token A", "TKA", supply, OPERATOR)
    ledger.create_asset(TOKEN_B, "Token B", "TKB", supply, OPERATOR)
    pool = Pool(OPERATOR, TOKEN_A, TOKEN_B, ledger)
    for trader in (ALICE, BOB):
        ledger.transfer(TOKEN_A, OPERATOR, trader, parse_units("10000"))
        ledger.transfer(TOKEN_B, OPERATOR, trader, parse_units("10000"))
    ledger.approve(TOKEN_A, OPERATOR, pool.address, supply)
    ledger.approve(TOKEN_B, OPERATOR, pool.address, supply)
    ledger.approve(TOKEN_A, ALICE, pool.address, parse_units("1000"))
    ledger.approve(TOKEN_B, ALICE, pool.address, parse_units("1000"))
    return ledger, pool


def run_scenarios(ids: List[str], *, events: bool) -> None:
    ledger, pool = setup()
    seen = 0

    def header(title: str) -> None:
        print("\n" + "=" * 80)
        print(f"Scenario: {title}")

    def footer() -> None:
        nonlocal seen
        print("- " + brief_pool(pool, ledger))
        if events:
            for record in pool.events.query(since=seen):
                print(f"  event #{record.seq}: {record}")
        if len(pool.events):
            seen = pool.events.last()[0].seq

    # Scenarios share one pool and run in order; filtered ones are skipped.
    if "S1" in ids:
        header("S1) Provision 1000 TKA / 2000 TKB, then top up 500 / 1000")
        attempt("addLiquidity(1000, 2000)", lambda: pool.add_liquidity(OPERATOR, parse_units("1000"), parse_units("2000")))
        attempt("addLiquidity(500, 1000)", lambda: pool.add_liquidity(OPERATOR, parse_units("500"), parse_units("1000")))
        footer()
    if "S2" in ids:
        header("S2) Rejected liquidity operations")
        attempt("addLiquidity(500, 999)", lambda: pool.add_liquidity(OPERATOR, parse_units("500"), parse_units("999")))
        attempt("alice addLiquidity(10, 20)", lambda: pool.add_liquidity(ALICE, parse_units("10"), parse_units("20")))
        attempt("removeLiquidity(beyond reserves)", lambda: pool.remove_liquidity(OPERATOR, pool.reserve_a + 1, pool.reserve_b))
        footer()
    if "S3" in ids and pool.reserve_a > 0:
        header("S3) Alice swaps 10 TKA -> TKB, then 15 TKB -> TKA")
        k0 = pool.reserve_a * pool.reserve_b
        attempt("swapAforB(10)", lambda: pool.swap_a_for_b(ALICE, parse_units("10")))
        attempt("swapBforA(15)", lambda: pool.swap_b_for_a(ALICE, parse_units("15")))
        k1 = pool.reserve_a * pool.reserve_b
        print(f"  k grew: {k1 > k0} (Δk={k1 - k0})")
        footer()
    if "S4" in ids and pool.reserve_a > 0:
        header("S4) Alice round trip 10 TKA -> TKB -> TKA")
        a_before = ledger.balance_of(TOKEN_A, ALICE)
        b_before = ledger.balance_of(TOKEN_B, ALICE)
        attempt("swapAforB(10)", lambda: pool.swap_a_for_b(ALICE, parse_units("10")))
        gained_b = ledger.balance_of(TOKEN_B, ALICE) - b_before
        attempt(f"swapBforA({format_units(gained_b)})", lambda: pool.swap_b_for_a(ALICE, gained_b))
        lost = a_before - ledger.balance_of(TOKEN_A, ALICE)
        print(f"  TKA lost to fees/rounding: {format_units(lost)}")
        footer()
    if "S5" in ids and pool.reserve_a > 0:
        header("S5) Quote table on current reserves")
        for amount, ab, ba in quote_table(pool, [parse_units(x) for x in ("1", "10", "100")]):
            print(f"  {format_units(amount)} TKA → {format_units(ab.amount_out)} TKB "
                  f"(fee {format_units(ab.fee_paid)}, impact {format_price(ab.price_impact)})")
            print(f"  {format_units(amount)} TKB → {format_units(ba.amount_out)} TKA "
                  f"(fee {format_units(ba.fee_paid)}, impact {format_price(ba.price_impact)})")
        footer()
    if "S6" in ids and pool.reserve_a > 0:
        header("S6) Bob swaps without approving the pool")
        attempt("bob swap A->B(100)", lambda: pool.swap(BOB, Direction.A_TO_B, parse_units("100")))
        print("- " + brief_balances(ledger, BOB))
        footer()
    if "S7" in ids and pool.reserve_a > 0:
        header("S7) Operator withdraws 500 TKA / 900 TKB")
        attempt("removeLiquidity(500, 900)", lambda: pool.remove_liquidity(OPERATOR, parse_units("500"), parse_units("900")))
        print("- " + brief_balances(ledger, OPERATOR))
        footer()


# ---------- run scenarios ----------
ALL_IDS = ["S1", "S2", "S3", "S4", "S5", "S6", "S7"]

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Two-asset constant-product pool demo")
    parser.add_argument("--only", type=str, default=None, help="Comma-separated scenario ids to run (e.g., S1,S3)")
    parser.add_argument("--skip", type=str, default=None, help="Comma-separated scenario ids to skip")
    parser.add_argument("--events", action="store_true", help="Print the notification records of each scenario")
    parser.add_argument("--debug", action="store_true", help="Log pool and ledger activity at DEBUG level")
    args = parser.parse_args(sys.argv[1:])

    configure_logging(debug=True if args.debug else None)

    ids = list(ALL_IDS)
    if args.only:
        only_set = set([s.strip() for s in args.only.split(',') if s.strip()])
        ids = [sid for sid in ids if sid in only_set]
    if args.skip:
        skip_set = set([s.strip() for s in args.skip.split(',') if s.strip()])
        ids = [sid for sid in ids if sid not in skip_set]

    run_scenarios(ids, events=args.events)
