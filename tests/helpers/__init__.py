"""Test helpers module for shared test utilities.

- constants: Account addresses and common amounts
- factories: Exchange builders and state-capture helpers
- contracts: Receiver and token doubles for external-call edge cases
- pricing: Reference formulas for pricing checks
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    ETH,
    INITIAL_ETH,
    INITIAL_TOKENS,
    MALLORY,
    STARTING_ETH,
    STARTING_TOKENS,
    TOKEN,
)
from tests.helpers.factories import (
    assert_ledger_consistent,
    bootstrap,
    make_exchange,
    world_view,
)

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "MALLORY",
    "ETH",
    "TOKEN",
    "INITIAL_ETH",
    "INITIAL_TOKENS",
    "STARTING_ETH",
    "STARTING_TOKENS",
    # Factories
    "make_exchange",
    "bootstrap",
    "world_view",
    "assert_ledger_consistent",
]
