"""Minimal ERC20-style token implementing the pool's TokenInterface.

Rejections (insufficient balance or allowance) are reported by returning
False from transfer/transfer_from, which is what the pool must check for.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from dexpool.interfaces import Msg
from dexpool.safe_int import S

logger = structlog.get_logger()


@dataclass
class TokenState:
    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)
    total_supply: int = 0

    def copy(self) -> TokenState:
        return TokenState(
            balances=dict(self.balances),
            allowances=dict(self.allowances),
            total_supply=self.total_supply,
        )


class Token:
    """Fungible token ledger with balances and allowances."""

    def __init__(self, name: str, symbol: str, address: str | None = None) -> None:
        self.name = name
        self.symbol = symbol
        self.address = address
        self.state = TokenState()

    def __repr__(self) -> str:
        return f"Token({self.symbol}, {self.address})"

    # --- Contract protocol ---

    def snapshot(self) -> TokenState:
        return self.state.copy()

    def restore(self, snapshot: TokenState) -> None:
        self.state = snapshot.copy()

    # --- Views ---

    @property
    def total_supply(self) -> int:
        return self.state.total_supply

    def balance_of(self, account: str) -> int:
        return self.state.balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.state.allowances.get((owner, spender), 0)

    # --- Mutations ---

    def mint(self, to: str, amount: int) -> None:
        """Create new tokens for ``to`` (faucet / test setup)."""
        self.state.balances[to] = (S(self.balance_of(to)) + S(amount)).value
        self.state.total_supply = (S(self.state.total_supply) + S(amount)).value

    def approve(self, msg: Msg, spender: str, amount: int) -> bool:
        self.state.allowances[(msg.sender, spender)] = S(amount).value
        logger.debug("token_approval", owner=msg.sender, spender=spender, amount=amount)
        return True

    def transfer(self, msg: Msg, to: str, amount: int) -> bool:
        return self._transfer(msg.sender, to, amount)

    def transfer_from(self, msg: Msg, owner: str, to: str, amount: int) -> bool:
        allowed = self.allowance(owner, msg.sender)
        if allowed < S(amount):
            logger.debug(
                "token_transfer_rejected",
                reason="allowance",
                owner=owner,
                spender=msg.sender,
                allowed=allowed,
                amount=amount,
            )
            return False
        if not self._transfer(owner, to, amount):
            return False
        self.state.allowances[(owner, msg.sender)] = allowed - amount
        return True

    def _transfer(self, sender: str, to: str, amount: int) -> bool:
        balance = self.balance_of(sender)
        if balance < S(amount):
            logger.debug(
                "token_transfer_rejected",
                reason="balance",
                sender=sender,
                balance=balance,
                amount=amount,
            )
            return False
        self.state.balances[sender] = balance - amount
        self.state.balances[to] = (S(self.balance_of(to)) + S(amount)).value
        return True


__all__ = ["Token", "TokenState"]
