"""Pydantic request/response models for the exchange API.

Amounts travel as uint256 decimal strings and are converted to int at the
edge of the API; the pool itself only ever sees ints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from dexpool.models.types import Address, Uint256


class SenderRequest(BaseModel):
    """Base for requests made on behalf of an account."""

    sender: Address = Field(description="Account making the call")


class InitRequest(SenderRequest):
    value: Uint256 = Field(description="Native amount sent with the call")
    tokens: Uint256 = Field(description="Tokens pulled from the sender")


class ValueRequest(SenderRequest):
    """eth_to_token and deposit: only a native value is attached."""

    value: Uint256 = Field(description="Native amount sent with the call")


class TokenInputRequest(SenderRequest):
    tokens: Uint256 = Field(description="Tokens sold to the pool")


class WithdrawRequest(SenderRequest):
    amount: Uint256 = Field(description="LP units to redeem")


class FaucetRequest(BaseModel):
    eth: Uint256 = "0"
    tokens: Uint256 = "0"


class ApproveRequest(BaseModel):
    amount: Uint256


class AmountResponse(BaseModel):
    """Single-amount result (init, swaps, deposit, quotes, price)."""

    amount: Uint256


class WithdrawResponse(BaseModel):
    eth: Uint256
    tokens: Uint256


class PoolResponse(BaseModel):
    """Snapshot of the pool."""

    address: Address
    token: Address
    token_symbol: str
    eth_reserve: Uint256
    token_reserve: Uint256
    total_liquidity: Uint256
    initialized: bool
    spot_price: str | None = Field(
        default=None, description="Tokens per native unit (display only)"
    )


class LiquidityResponse(BaseModel):
    account: Address
    liquidity: Uint256


class AccountResponse(BaseModel):
    account: Address
    eth: Uint256
    tokens: Uint256
    liquidity: Uint256
    allowance: Uint256


class EventsResponse(BaseModel):
    events: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    detail: str
    error: str
