"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
import structlog

from dexpool.exchange import Exchange
from tests.helpers import (
    ALICE,
    BOB,
    CAROL,
    INITIAL_ETH,
    INITIAL_TOKENS,
    bootstrap,
    make_exchange,
)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Keep structlog configuration changes from leaking between tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def exchange() -> Exchange:
    """Fresh exchange; ALICE, BOB and CAROL funded and approved."""
    return make_exchange(funded=[ALICE, BOB, CAROL])


@pytest.fixture
def seeded(exchange: Exchange) -> Exchange:
    """Exchange whose pool ALICE bootstrapped with 5 native units and 5 tokens."""
    bootstrap(exchange, ALICE, eth=INITIAL_ETH, tokens=INITIAL_TOKENS)
    return exchange
