"""Exchange facade: one chain, one token and one pool wired together.

The Exchange is the entry point used by the HTTP layer and by tests that
want to drive the pool the way an external account would: every operation
goes through Chain.call, so it is atomic and globally serialized.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

import structlog

from dexpool.chain import Chain
from dexpool.config import DEFAULT_CONFIG, ServerConfig
from dexpool.pool import Pool
from dexpool.token import Token

logger = structlog.get_logger()


@dataclass(frozen=True)
class AccountBalances:
    """Balances of one account across the native asset, the token and the pool."""

    account: str
    eth: int
    tokens: int
    liquidity: int
    allowance: int


class Exchange:
    """Deployed pool plus its collaborators.

    Args:
        chain: Execution environment
        token: Token traded by the pool (must be deployed on ``chain``)
        pool: The pool (must be deployed on ``chain``)
    """

    def __init__(self, chain: Chain, token: Token, pool: Pool) -> None:
        self.chain = chain
        self.token = token
        self.pool = pool

    @classmethod
    def create(cls, token_name: str = "Balloons", token_symbol: str = "BAL") -> Exchange:
        """Deploy a fresh token and pool on a new chain."""
        chain = Chain()
        token = chain.deploy(Token(token_name, token_symbol))
        pool = chain.deploy(Pool(chain, token))
        logger.info(
            "exchange_created",
            token=token.address,
            token_symbol=token_symbol,
            pool=pool.address,
        )
        return cls(chain=chain, token=token, pool=pool)

    # --- Account helpers ---

    def fund(self, account: str, eth: int = 0, tokens: int = 0) -> AccountBalances:
        """Mint native asset and/or tokens to an account."""
        with self.chain.lock:
            if eth:
                self.chain.mint_native(account, eth)
            if tokens:
                self.token.mint(account, tokens)
        logger.info("account_funded", account=account, eth=eth, tokens=tokens)
        return self.balances(account)

    def approve(self, account: str, amount: int) -> bool:
        """Let the pool pull up to ``amount`` tokens from ``account``."""
        return self.chain.call(account, self.token, "approve", self.pool.address, amount)

    def balances(self, account: str) -> AccountBalances:
        with self.chain.lock:
            return AccountBalances(
                account=account,
                eth=self.chain.balance_of(account),
                tokens=self.token.balance_of(account),
                liquidity=self.pool.get_liquidity(account),
                allowance=self.token.allowance(account, self.pool.address),
            )

    # --- Pool operations ---

    def init(self, sender: str, eth: int, tokens: int) -> int:
        return self.chain.call(sender, self.pool, "init", tokens, value=eth)

    def eth_to_token(self, sender: str, eth: int) -> int:
        return self.chain.call(sender, self.pool, "eth_to_token", value=eth)

    def token_to_eth(self, sender: str, tokens: int) -> int:
        return self.chain.call(sender, self.pool, "token_to_eth", tokens)

    def deposit(self, sender: str, eth: int) -> int:
        return self.chain.call(sender, self.pool, "deposit", value=eth)

    def withdraw(self, sender: str, amount: int) -> tuple[int, int]:
        return self.chain.call(sender, self.pool, "withdraw", amount)


_default_exchange: Exchange | None = None
_default_lock = threading.Lock()


def get_default_exchange(config: ServerConfig = DEFAULT_CONFIG) -> Exchange:
    """Process-wide exchange used by the API (created on first use)."""
    global _default_exchange
    with _default_lock:
        if _default_exchange is None:
            _default_exchange = Exchange.create(config.token_name, config.token_symbol)
        return _default_exchange


__all__ = ["AccountBalances", "Exchange", "get_default_exchange"]
