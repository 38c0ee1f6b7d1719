import pytest

from simple_dex.amm import swap_output
from simple_dex.core import (
    Direction,
    Swapped,
    InvalidAmount,
    InvalidDirection,
    InsufficientReserves,
    InsufficientAllowance,
    InsufficientBalance,
)

from conftest import OPERATOR, ALICE, BOB, TOKEN_A, TOKEN_B, pool_holdings


def _k(pool) -> int:
    return pool.reserve_a * pool.reserve_b


def test_swap_a_for_b_moves_funds_and_reserves(seeded_pool, ledger):
    a0, b0 = ledger.balance_of(TOKEN_A, ALICE), ledger.balance_of(TOKEN_B, ALICE)
    expected = seeded_pool.get_swap_result(100, 1000, 2000)
    record = seeded_pool.swap_a_for_b(ALICE, 100)
    print(f"\n[swap A->B] {record} reserves=({seeded_pool.reserve_a}, {seeded_pool.reserve_b})")
    assert record == Swapped(ALICE, "A->B", 100, expected, seq=2)
    assert ledger.balance_of(TOKEN_A, ALICE) == a0 - 100
    assert ledger.balance_of(TOKEN_B, ALICE) == b0 + expected
    assert (seeded_pool.reserve_a, seeded_pool.reserve_b) == (1100, 2000 - expected)
    assert pool_holdings(seeded_pool) == (seeded_pool.reserve_a, seeded_pool.reserve_b)


def test_swap_b_for_a_uses_reversed_reserves(seeded_pool, ledger):
    expected = swap_output(200, 2000, 1000)
    record = seeded_pool.swap_b_for_a(ALICE, 200)
    assert record.direction == "B->A"
    assert record.amount_out == expected
    assert (seeded_pool.reserve_a, seeded_pool.reserve_b) == (1000 - expected, 2200)


@pytest.mark.parametrize("direction", [Direction.A_TO_B, "A->B", Direction.B_TO_A, "B->A"])
def test_swap_accepts_enum_or_tag(seeded_pool, direction):
    record = seeded_pool.swap(ALICE, direction, 50)
    assert record.direction == Direction(direction).tag


def test_unknown_direction_rejected(seeded_pool):
    with pytest.raises(InvalidDirection):
        seeded_pool.swap(ALICE, "A->C", 50)


def test_invariant_grows_across_swaps(seeded_pool):
    k0 = _k(seeded_pool)
    seeded_pool.swap_a_for_b(ALICE, 10)
    k1 = _k(seeded_pool)
    seeded_pool.swap_b_for_a(ALICE, 15)
    k2 = _k(seeded_pool)
    print(f"\n[k] {k0} -> {k1} -> {k2} reserves=({seeded_pool.reserve_a}, {seeded_pool.reserve_b})")
    assert (seeded_pool.reserve_a, seeded_pool.reserve_b) == (1003, 1996)
    assert k0 < k1 < k2


def test_invariant_non_decreasing_over_many_swaps(seeded_pool):
    k = _k(seeded_pool)
    for i in range(1, 60):
        if i % 3:
            seeded_pool.swap_a_for_b(ALICE, 7 * i)
        else:
            seeded_pool.swap_b_for_a(ALICE, 11 * i)
        assert _k(seeded_pool) >= k
        k = _k(seeded_pool)
        assert seeded_pool.reserve_a > 0 and seeded_pool.reserve_b > 0


@pytest.mark.parametrize("x", [1, 10, 100, 999, 10 ** 6])
def test_round_trip_loses_input(seeded_pool, ledger, x):
    a0, b0 = ledger.balance_of(TOKEN_A, ALICE), ledger.balance_of(TOKEN_B, ALICE)
    gained_b = seeded_pool.swap_a_for_b(ALICE, x).amount_out
    assert ledger.balance_of(TOKEN_B, ALICE) - b0 == gained_b
    if gained_b > 0:
        seeded_pool.swap_b_for_a(ALICE, gained_b)
    final_a = ledger.balance_of(TOKEN_A, ALICE)
    print(f"[round-trip] x={x} gained_b={gained_b} lost_a={a0 - final_a}")
    assert final_a < a0


def test_large_swap_never_drains(seeded_pool):
    seeded_pool.swap_a_for_b(ALICE, 10 ** 9)
    assert seeded_pool.reserve_b >= 1


def test_dust_swap_accepted_with_zero_output(pool, ledger):
    # 1 unit into (10^6, 10^6) floors to 0.996 -> 0; no minimum-output guard applies
    pool.add_liquidity(OPERATOR, 10 ** 6, 10 ** 6)
    b0 = ledger.balance_of(TOKEN_B, ALICE)
    record = pool.swap_a_for_b(ALICE, 1)
    assert record.amount_out == 0
    assert ledger.balance_of(TOKEN_B, ALICE) == b0
    assert (pool.reserve_a, pool.reserve_b) == (10 ** 6 + 1, 10 ** 6)


@pytest.mark.parametrize("amount", [0, -5, 2.5])
def test_non_positive_amount_rejected(seeded_pool, amount):
    with pytest.raises(InvalidAmount, match="Amount must be > 0"):
        seeded_pool.swap_a_for_b(ALICE, amount)
    assert (seeded_pool.reserve_a, seeded_pool.reserve_b) == (1000, 2000)


def test_swap_on_empty_pool_rejected(pool):
    with pytest.raises(InsufficientReserves):
        pool.swap_a_for_b(ALICE, 10)


def test_swap_after_one_sided_removal_rejected(seeded_pool):
    seeded_pool.remove_liquidity(OPERATOR, 1000, 1)
    with pytest.raises(InsufficientReserves):
        seeded_pool.swap_b_for_a(ALICE, 10)


def test_missing_allowance_propagates_unchanged(seeded_pool, ledger):
    # Bob holds funds but never approved the pool
    b0 = ledger.balance_of(TOKEN_A, BOB)
    with pytest.raises(InsufficientAllowance):
        seeded_pool.swap_a_for_b(BOB, 100)
    assert ledger.balance_of(TOKEN_A, BOB) == b0
    assert (seeded_pool.reserve_a, seeded_pool.reserve_b) == (1000, 2000)
    assert len(seeded_pool.events) == 1


def test_insufficient_balance_propagates(seeded_pool, ledger):
    ledger.approve(TOKEN_A, "0xpoor", seeded_pool.address, 10 ** 6)
    with pytest.raises(InsufficientBalance):
        seeded_pool.swap_a_for_b("0xpoor", 100)
    assert (seeded_pool.reserve_a, seeded_pool.reserve_b) == (1000, 2000)


def test_failed_payout_moves_nothing(flaky_pool, flaky_ledger):
    a0 = flaky_ledger.balance_of(TOKEN_A, ALICE)
    allowance = flaky_ledger.allowance(TOKEN_A, ALICE, flaky_pool.address)
    flaky_ledger.fail_push_after = 0
    with pytest.raises(InsufficientBalance, match="forced push failure"):
        flaky_pool.swap_a_for_b(ALICE, 100)
    assert flaky_ledger.balance_of(TOKEN_A, ALICE) == a0
    assert flaky_ledger.allowance(TOKEN_A, ALICE, flaky_pool.address) == allowance
    assert (flaky_pool.reserve_a, flaky_pool.reserve_b) == (1000, 2000)
    assert pool_holdings(flaky_pool) == (1000, 2000)
    assert len(flaky_pool.events) == 1


def test_swap_consumes_allowance(seeded_pool, ledger):
    allowance = ledger.allowance(TOKEN_A, ALICE, seeded_pool.address)
    seeded_pool.swap_a_for_b(ALICE, 100)
    assert ledger.allowance(TOKEN_A, ALICE, seeded_pool.address) == allowance - 100


def test_failed_input_pull_reverses_payout(flaky_pool, flaky_ledger):
    a0 = flaky_ledger.balance_of(TOKEN_A, ALICE)
    b0 = flaky_ledger.balance_of(TOKEN_B, ALICE)
    allowance = flaky_ledger.allowance(TOKEN_A, ALICE, flaky_pool.address)
    flaky_ledger.fail_next_pull = True
    with pytest.raises(InsufficientBalance, match="forced pull failure"):
        flaky_pool.swap_a_for_b(ALICE, 100)
    assert flaky_ledger.balance_of(TOKEN_A, ALICE) == a0
    assert flaky_ledger.balance_of(TOKEN_B, ALICE) == b0
    assert flaky_ledger.allowance(TOKEN_A, ALICE, flaky_pool.address) == allowance
    assert pool_holdings(flaky_pool) == (1000, 2000)
    assert flaky_pool.reserves() == (1000, 2000)


def test_missing_allowance_checked_before_payout(seeded_pool, ledger):
    b0 = ledger.balance_of(TOKEN_B, BOB)
    with pytest.raises(InsufficientAllowance):
        seeded_pool.swap_a_for_b(BOB, 100)
    assert ledger.balance_of(TOKEN_B, BOB) == b0
    assert pool_holdings(seeded_pool) == (1000, 2000)
