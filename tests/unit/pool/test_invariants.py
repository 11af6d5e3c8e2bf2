"""Randomized operation sequences checked against the pool's ledger invariants."""

import random

import pytest

from dexpool.errors import PoolError
from dexpool.safe_int import SafeIntError
from tests.helpers import (
    ALICE,
    BOB,
    CAROL,
    ETH,
    INITIAL_ETH,
    INITIAL_TOKENS,
    STARTING_ETH,
    TOKEN,
    assert_ledger_consistent,
    bootstrap,
    make_exchange,
    world_view,
)

ACCOUNTS = [ALICE, BOB, CAROL]
OPERATIONS = ["eth_to_token", "token_to_eth", "deposit", "withdraw"]


def _random_step(exchange, rng):
    account = rng.choice(ACCOUNTS)
    operation = rng.choice(OPERATIONS)
    if operation == "withdraw":
        owned = exchange.pool.get_liquidity(account)
        # Occasionally ask for more than is owned
        amount = rng.randint(0, owned + ETH // 10)
        return operation, lambda: exchange.withdraw(account, amount)
    amount = rng.randint(0, 2 * ETH)
    return operation, lambda: getattr(exchange, operation)(account, amount)


@pytest.mark.parametrize("seed", range(8))
def test_random_sequences_preserve_invariants(seed):
    """Ledger stays consistent; failed steps change nothing; swaps never shrink k."""
    rng = random.Random(seed)
    exchange = make_exchange(funded=ACCOUNTS)
    bootstrap(exchange, ALICE, eth=INITIAL_ETH, tokens=INITIAL_TOKENS)
    total_native = exchange.chain.balance_of(exchange.pool.address) + sum(
        exchange.chain.balance_of(a) for a in ACCOUNTS
    )

    for _ in range(60):
        operation, step = _random_step(exchange, rng)
        before = world_view(exchange, ACCOUNTS)
        product_before = exchange.pool.reserves().product
        try:
            step()
        except (PoolError, SafeIntError):
            assert world_view(exchange, ACCOUNTS) == before
            continue

        assert_ledger_consistent(exchange)
        if operation in ("eth_to_token", "token_to_eth"):
            assert exchange.pool.reserves().product >= product_before
        assert exchange.chain.balance_of(exchange.pool.address) + sum(
            exchange.chain.balance_of(a) for a in ACCOUNTS
        ) == total_native


def test_lp_units_never_exceed_pool_claims():
    """Redeeming every LP unit never pays out more than the pool holds."""
    exchange = make_exchange(funded=ACCOUNTS)
    bootstrap(exchange, ALICE, eth=INITIAL_ETH, tokens=INITIAL_TOKENS)
    exchange.deposit(BOB, 3 * ETH)
    exchange.eth_to_token(CAROL, 2 * ETH)
    exchange.token_to_eth(CAROL, 1 * TOKEN)
    exchange.deposit(CAROL, 1 * ETH)

    for account in ACCOUNTS:
        owned = exchange.pool.get_liquidity(account)
        if owned:
            exchange.withdraw(account, owned)

    assert exchange.pool.total_liquidity == 0
    assert exchange.pool.reserves().eth >= 0
    assert exchange.pool.reserves().token >= 0
    assert sum(exchange.chain.balance_of(a) for a in ACCOUNTS) <= 3 * STARTING_ETH
