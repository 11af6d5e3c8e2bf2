"""Observability records emitted by successful pool operations.

Each record carries the acting account, the primary amount of the operation
(the output for swaps, LP units for liquidity changes) and the native and
token amounts that moved.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class PoolEvent:
    """Base record for pool events."""

    name: ClassVar[str] = "PoolEvent"

    account: str
    amount: int
    eth_amount: int
    token_amount: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the event name included."""
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class EthToTokenSwap(PoolEvent):
    """Native asset sold for tokens. ``amount`` is the token output."""

    name: ClassVar[str] = "EthToTokenSwap"


@dataclass(frozen=True)
class TokenToEthSwap(PoolEvent):
    """Tokens sold for the native asset. ``amount`` is the native output."""

    name: ClassVar[str] = "TokenToEthSwap"


@dataclass(frozen=True)
class LiquidityProvided(PoolEvent):
    """Liquidity added. ``amount`` is the LP units minted."""

    name: ClassVar[str] = "LiquidityProvided"


@dataclass(frozen=True)
class LiquidityRemoved(PoolEvent):
    """Liquidity redeemed. ``amount`` is the LP units burned."""

    name: ClassVar[str] = "LiquidityRemoved"


__all__ = [
    "PoolEvent",
    "EthToTokenSwap",
    "TokenToEthSwap",
    "LiquidityProvided",
    "LiquidityRemoved",
]
