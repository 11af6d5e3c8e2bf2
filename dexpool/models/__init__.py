"""Pydantic models for the exchange API."""

from dexpool.models.api import (
    AccountResponse,
    AmountResponse,
    ApproveRequest,
    ErrorResponse,
    EventsResponse,
    FaucetRequest,
    InitRequest,
    LiquidityResponse,
    PoolResponse,
    TokenInputRequest,
    ValueRequest,
    WithdrawRequest,
    WithdrawResponse,
)
from dexpool.models.types import Address, Uint256

__all__ = [
    # Types
    "Address",
    "Uint256",
    # Requests
    "InitRequest",
    "ValueRequest",
    "TokenInputRequest",
    "WithdrawRequest",
    "FaucetRequest",
    "ApproveRequest",
    # Responses
    "AmountResponse",
    "WithdrawResponse",
    "PoolResponse",
    "LiquidityResponse",
    "AccountResponse",
    "EventsResponse",
    "ErrorResponse",
]
