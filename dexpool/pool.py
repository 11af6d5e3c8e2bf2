"""Pool ledger: reserves, constant-product swaps and LP-unit accounting.

The pool holds the native asset (its balance on the chain) and one token
(its balance on the token contract). Neither reserve is cached: both are
read live at call time, and the native amount sent with the current call is
subtracted wherever the pre-call reserve is required.

LP units are the only state the pool stores itself (see PoolState). Every
state-changing operation:
1. Runs under a reentrancy guard
2. Validates its preconditions
3. Reads reserves and computes amounts with checked uint256 math
4. Mutates PoolState
5. Only then calls the token contract or sends the native asset

Rounding always favors the pool: swap outputs and LP shares truncate, and
the token amount required for a deposit is rounded up by one unit.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from dexpool.constants import DEPOSIT_ROUNDING_GUARD
from dexpool.errors import (
    AlreadyInitialized,
    InsufficientLiquidity,
    InsufficientLPBalance,
    NativeTransferFailed,
    NonPayable,
    NotInitialized,
    ReentrancyError,
    TokenTransferFailed,
    ZeroAmount,
)
from dexpool.events import (
    EthToTokenSwap,
    LiquidityProvided,
    LiquidityRemoved,
    TokenToEthSwap,
)
from dexpool.interfaces import Msg, TokenInterface
from dexpool.pricing import price
from dexpool.safe_int import S

if TYPE_CHECKING:
    from dexpool.chain import Chain

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class PoolState:
    """Mutable LP-unit ledger.

    Invariant: total_liquidity == sum(liquidity.values()).
    """

    total_liquidity: int = 0
    liquidity: dict[str, int] = field(default_factory=dict)

    def copy(self) -> PoolState:
        return PoolState(total_liquidity=self.total_liquidity, liquidity=dict(self.liquidity))


@dataclass(frozen=True)
class Reserves:
    """Reserve reading taken at one point in time."""

    eth: int
    token: int

    @property
    def product(self) -> int:
        return self.eth * self.token


def non_reentrant(method: F) -> F:
    """Reject re-entry into any guarded operation of the same pool."""

    @functools.wraps(method)
    def wrapper(self: Pool, *args: Any, **kwargs: Any) -> Any:
        if self._entered:
            raise ReentrancyError(f"{method.__name__} called while another operation is running")
        self._entered = True
        try:
            return method(self, *args, **kwargs)
        finally:
            self._entered = False

    return wrapper  # type: ignore[return-value]


class Pool:
    """Constant-product pool between the native asset and one token.

    Args:
        chain: Execution environment holding native balances
        token: Token traded against the native asset
        address: Pool address (assigned by Chain.deploy when None)
    """

    def __init__(self, chain: Chain, token: TokenInterface, address: str | None = None) -> None:
        self.chain = chain
        self.token = token
        self.address = address
        self.state = PoolState()
        self._entered = False

    def __repr__(self) -> str:
        return f"Pool({self.address}, total_liquidity={self.state.total_liquidity})"

    # --- Contract protocol ---

    def snapshot(self) -> PoolState:
        return self.state.copy()

    def restore(self, snapshot: PoolState) -> None:
        self.state = snapshot.copy()

    # --- Views ---

    @property
    def total_liquidity(self) -> int:
        return self.state.total_liquidity

    @property
    def initialized(self) -> bool:
        return self.state.total_liquidity > 0

    def get_liquidity(self, account: str) -> int:
        """LP units held by ``account`` (0 if it never held any)."""
        return self.state.liquidity.get(account, 0)

    def eth_reserve(self) -> int:
        return self.chain.balance_of(self.address)

    def token_reserve(self) -> int:
        return self.token.balance_of(self.address)

    def reserves(self) -> Reserves:
        return Reserves(eth=self.eth_reserve(), token=self.token_reserve())

    def quote_eth_to_token(self, eth_input: int) -> int:
        """Tokens that eth_to_token would pay for ``eth_input`` right now."""
        return price(eth_input, self.eth_reserve(), self.token_reserve())

    def quote_token_to_eth(self, token_input: int) -> int:
        """Native amount that token_to_eth would pay for ``token_input`` right now."""
        return price(token_input, self.token_reserve(), self.eth_reserve())

    def current_price(self) -> Decimal | None:
        """Spot price in tokens per native unit, for display only."""
        reserves = self.reserves()
        if reserves.eth == 0:
            return None
        return Decimal(reserves.token) / Decimal(reserves.eth)

    # --- Operations ---

    @non_reentrant
    def init(self, msg: Msg, tokens: int) -> int:
        """Seed the pool with ``msg.value`` native units and ``tokens`` tokens.

        The caller receives LP units equal to the native balance now held by
        the pool. The ratio the caller chooses becomes the initial price.

        Returns:
            The resulting total liquidity

        Raises:
            AlreadyInitialized: If any liquidity exists
            ZeroAmount: If either amount is zero
            TokenTransferFailed: If the token pull is rejected
        """
        if self.state.total_liquidity != 0:
            raise AlreadyInitialized(
                f"Pool already has {self.state.total_liquidity} liquidity units"
            )
        if not S(msg.value) or not S(tokens):
            raise ZeroAmount("init requires a positive native value and token amount")

        total = self.eth_reserve()
        self.state.liquidity[msg.sender] = total
        self.state.total_liquidity = total

        self._pull_tokens(msg.sender, tokens)

        logger.info(
            "pool_initialized",
            pool=self.address,
            provider=msg.sender,
            eth_input=msg.value,
            tokens_input=tokens,
            total_liquidity=total,
        )
        return total

    @non_reentrant
    def eth_to_token(self, msg: Msg) -> int:
        """Sell ``msg.value`` native units for tokens.

        Returns:
            Tokens sent to the caller

        Raises:
            ZeroAmount: If no native value was sent
            NotInitialized: If the pool has no liquidity
            InsufficientLiquidity: If the token reserve cannot cover the quote
            TokenTransferFailed: If the token payout is rejected
        """
        if not S(msg.value):
            raise ZeroAmount("eth_to_token requires a positive native value")
        self._require_initialized()

        # The incoming value is already part of the pool balance
        eth_reserve = (S(self.eth_reserve()) - msg.value).value
        token_reserve = self.token_reserve()
        token_output = price(msg.value, eth_reserve, token_reserve)
        if token_reserve < token_output:
            raise InsufficientLiquidity(
                f"Quote of {token_output} tokens exceeds reserve of {token_reserve}"
            )

        self._send_tokens(msg.sender, token_output)

        self.chain.emit(
            EthToTokenSwap(
                account=msg.sender,
                amount=token_output,
                eth_amount=msg.value,
                token_amount=token_output,
            )
        )
        logger.info(
            "eth_to_token_swap",
            pool=self.address,
            swapper=msg.sender,
            eth_input=msg.value,
            token_output=token_output,
        )
        return token_output

    @non_reentrant
    def token_to_eth(self, msg: Msg, token_input: int) -> int:
        """Sell ``token_input`` tokens for the native asset.

        The caller must have approved the pool for at least ``token_input``.

        Returns:
            Native amount sent to the caller

        Raises:
            NonPayable: If native value was attached
            ZeroAmount: If token_input is zero
            NotInitialized: If the pool has no liquidity
            InsufficientLiquidity: If the native reserve cannot cover the quote
            TokenTransferFailed: If the token pull is rejected
            NativeTransferFailed: If the caller refuses the native payout
        """
        self._require_no_value(msg, "token_to_eth")
        if not S(token_input):
            raise ZeroAmount("token_to_eth requires a positive token amount")
        self._require_initialized()

        token_reserve = self.token_reserve()
        eth_reserve = self.eth_reserve()
        eth_output = price(token_input, token_reserve, eth_reserve)
        if eth_reserve < eth_output:
            raise InsufficientLiquidity(
                f"Quote of {eth_output} native units exceeds reserve of {eth_reserve}"
            )

        self._pull_tokens(msg.sender, token_input)
        self._send_eth(msg.sender, eth_output)

        self.chain.emit(
            TokenToEthSwap(
                account=msg.sender,
                amount=eth_output,
                eth_amount=eth_output,
                token_amount=token_input,
            )
        )
        logger.info(
            "token_to_eth_swap",
            pool=self.address,
            swapper=msg.sender,
            token_input=token_input,
            eth_output=eth_output,
        )
        return eth_output

    @non_reentrant
    def deposit(self, msg: Msg) -> int:
        """Add liquidity: ``msg.value`` native units plus a proportional token amount.

        The token amount is ``value * token_reserve / eth_reserve`` rounded up
        by one unit, so the pool never under-collects tokens. The caller is
        minted ``value * total_liquidity / eth_reserve`` LP units.

        Returns:
            Tokens pulled from the caller

        Raises:
            ZeroAmount: If no native value was sent
            NotInitialized: If the pool was never bootstrapped or is drained
            TokenTransferFailed: If the token pull is rejected
        """
        if not S(msg.value):
            raise ZeroAmount("deposit requires a positive native value")

        eth_reserve = S(self.eth_reserve()) - msg.value
        if not eth_reserve or self.state.total_liquidity == 0:
            raise NotInitialized("deposit requires a bootstrapped pool")
        token_reserve = S(self.token_reserve())

        value = S(msg.value)
        token_deposit = (value * token_reserve // eth_reserve + DEPOSIT_ROUNDING_GUARD).value
        liquidity_minted = (value * self.state.total_liquidity // eth_reserve).value

        self._credit(msg.sender, liquidity_minted)
        self._pull_tokens(msg.sender, token_deposit)

        self.chain.emit(
            LiquidityProvided(
                account=msg.sender,
                amount=liquidity_minted,
                eth_amount=msg.value,
                token_amount=token_deposit,
            )
        )
        logger.info(
            "liquidity_provided",
            pool=self.address,
            provider=msg.sender,
            eth_input=msg.value,
            tokens_input=token_deposit,
            liquidity_minted=liquidity_minted,
            total_liquidity=self.state.total_liquidity,
        )
        return token_deposit

    @non_reentrant
    def withdraw(self, msg: Msg, amount: int) -> tuple[int, int]:
        """Redeem ``amount`` LP units for a pro-rata share of both reserves.

        LP units are burned before any asset leaves the pool.

        Returns:
            Tuple of (native amount, token amount) sent to the caller

        Raises:
            NonPayable: If native value was attached
            ZeroAmount: If amount is zero
            InsufficientLPBalance: If the caller owns fewer than ``amount`` units
            NativeTransferFailed: If the caller refuses the native payout
            TokenTransferFailed: If the token payout is rejected
        """
        self._require_no_value(msg, "withdraw")
        if not S(amount):
            raise ZeroAmount("withdraw requires a positive LP amount")
        owned = self.get_liquidity(msg.sender)
        if owned < amount:
            raise InsufficientLPBalance(f"{msg.sender} owns {owned} LP units, requested {amount}")

        total = self.state.total_liquidity
        reserves = self.reserves()
        eth_withdrawn = (S(amount) * reserves.eth // total).value
        token_amount = (S(amount) * reserves.token // total).value

        self._debit(msg.sender, amount)

        self._send_eth(msg.sender, eth_withdrawn)
        self._send_tokens(msg.sender, token_amount)

        self.chain.emit(
            LiquidityRemoved(
                account=msg.sender,
                amount=amount,
                eth_amount=eth_withdrawn,
                token_amount=token_amount,
            )
        )
        logger.info(
            "liquidity_removed",
            pool=self.address,
            provider=msg.sender,
            liquidity_burned=amount,
            eth_output=eth_withdrawn,
            tokens_output=token_amount,
            total_liquidity=self.state.total_liquidity,
        )
        return eth_withdrawn, token_amount

    # --- Internal helpers ---

    def _require_no_value(self, msg: Msg, operation: str) -> None:
        if msg.value:
            raise NonPayable(f"{operation} does not accept native value, got {msg.value}")

    def _require_initialized(self) -> None:
        if self.state.total_liquidity == 0:
            raise NotInitialized("pool has no liquidity")

    def _credit(self, account: str, amount: int) -> None:
        if not amount:
            return
        self.state.liquidity[account] = (S(self.get_liquidity(account)) + amount).value
        self.state.total_liquidity = (S(self.state.total_liquidity) + amount).value

    def _debit(self, account: str, amount: int) -> None:
        self.state.liquidity[account] = (S(self.get_liquidity(account)) - amount).value
        self.state.total_liquidity = (S(self.state.total_liquidity) - amount).value

    def _pull_tokens(self, owner: str, amount: int) -> None:
        ok = self.chain.call(self.address, self.token, "transfer_from", owner, self.address, amount)
        if not ok:
            raise TokenTransferFailed(f"transfer_from {owner} of {amount} tokens rejected")

    def _send_tokens(self, to: str, amount: int) -> None:
        ok = self.chain.call(self.address, self.token, "transfer", to, amount)
        if not ok:
            raise TokenTransferFailed(f"transfer of {amount} tokens to {to} rejected")

    def _send_eth(self, to: str, amount: int) -> None:
        if not self.chain.send(self.address, to, amount):
            raise NativeTransferFailed(f"send of {amount} native units to {to} refused")


__all__ = ["Pool", "PoolState", "Reserves", "non_reentrant"]
