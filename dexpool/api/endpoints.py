"""API endpoints for the exchange."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from dexpool.config import DEFAULT_CONFIG
from dexpool.exchange import Exchange, get_default_exchange
from dexpool.models.api import (
    AccountResponse,
    AmountResponse,
    ApproveRequest,
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
from dexpool.models.types import is_valid_address, normalize_address, validate_uint256
from dexpool.pricing import price

logger = structlog.get_logger()

router = APIRouter()


def get_exchange() -> Exchange:
    """Dependency provider for the exchange instance.

    Override this in tests to inject a fresh exchange:
        app.dependency_overrides[get_exchange] = lambda: exchange

    Returns:
        The exchange to operate on.
    """
    return get_default_exchange()


def _account(account: str) -> str:
    if not is_valid_address(account):
        raise HTTPException(status_code=422, detail=f"Invalid address: {account}")
    return normalize_address(account)


def _uint(value: str, name: str) -> int:
    try:
        return int(validate_uint256(value))
    except ValueError as err:
        raise HTTPException(status_code=422, detail=f"{name}: {err}") from err


# --- Read-only ---


@router.get("/pool")
def get_pool(exchange: Exchange = Depends(get_exchange)) -> PoolResponse:
    """Current reserves, LP supply and spot price."""
    pool = exchange.pool
    with exchange.chain.lock:
        reserves = pool.reserves()
        spot = pool.current_price()
        return PoolResponse(
            address=pool.address,
            token=exchange.token.address,
            token_symbol=exchange.token.symbol,
            eth_reserve=reserves.eth,
            token_reserve=reserves.token,
            total_liquidity=pool.total_liquidity,
            initialized=pool.initialized,
            spot_price=None if spot is None else str(spot),
        )


@router.get("/pool/liquidity/{account}")
def get_liquidity(account: str, exchange: Exchange = Depends(get_exchange)) -> LiquidityResponse:
    account = _account(account)
    return LiquidityResponse(account=account, liquidity=exchange.pool.get_liquidity(account))


@router.get("/pool/price")
def get_price(
    input_amount: str = Query(),
    input_reserve: str = Query(),
    output_reserve: str = Query(),
) -> AmountResponse:
    """Evaluate the pricing function on literal inputs."""
    amount = price(
        _uint(input_amount, "input_amount"),
        _uint(input_reserve, "input_reserve"),
        _uint(output_reserve, "output_reserve"),
    )
    return AmountResponse(amount=amount)


@router.get("/pool/quote/eth-to-token")
def quote_eth_to_token(
    amount: str = Query(), exchange: Exchange = Depends(get_exchange)
) -> AmountResponse:
    with exchange.chain.lock:
        return AmountResponse(amount=exchange.pool.quote_eth_to_token(_uint(amount, "amount")))


@router.get("/pool/quote/token-to-eth")
def quote_token_to_eth(
    amount: str = Query(), exchange: Exchange = Depends(get_exchange)
) -> AmountResponse:
    with exchange.chain.lock:
        return AmountResponse(amount=exchange.pool.quote_token_to_eth(_uint(amount, "amount")))


@router.get("/events")
def get_events(exchange: Exchange = Depends(get_exchange)) -> EventsResponse:
    """All events emitted by committed calls, oldest first."""
    return EventsResponse(events=[event.to_dict() for event in exchange.chain.events])


@router.get("/accounts/{account}")
def get_account(account: str, exchange: Exchange = Depends(get_exchange)) -> AccountResponse:
    balances = exchange.balances(_account(account))
    return AccountResponse(
        account=balances.account,
        eth=balances.eth,
        tokens=balances.tokens,
        liquidity=balances.liquidity,
        allowance=balances.allowance,
    )


# --- Account setup ---


@router.post("/accounts/{account}/faucet")
def faucet(
    account: str, request: FaucetRequest, exchange: Exchange = Depends(get_exchange)
) -> AccountResponse:
    """Mint native asset and tokens to an account (simulation only)."""
    account = _account(account)
    eth, tokens = int(request.eth), int(request.tokens)
    limit = DEFAULT_CONFIG.faucet_limit
    if eth > limit or tokens > limit:
        logger.warning("faucet_limit_exceeded", account=account, eth=eth, tokens=tokens, limit=limit)
        raise HTTPException(status_code=400, detail=f"Faucet requests are limited to {limit}")
    exchange.fund(account, eth=eth, tokens=tokens)
    return get_account(account, exchange)


@router.post("/accounts/{account}/approve")
def approve(
    account: str, request: ApproveRequest, exchange: Exchange = Depends(get_exchange)
) -> AccountResponse:
    """Set the pool's token allowance for an account."""
    account = _account(account)
    exchange.approve(account, int(request.amount))
    return get_account(account, exchange)


# --- Pool operations ---


@router.post("/pool/init")
def init(request: InitRequest, exchange: Exchange = Depends(get_exchange)) -> AmountResponse:
    total = exchange.init(
        normalize_address(request.sender), int(request.value), int(request.tokens)
    )
    return AmountResponse(amount=total)


@router.post("/pool/eth-to-token")
def eth_to_token(
    request: ValueRequest, exchange: Exchange = Depends(get_exchange)
) -> AmountResponse:
    tokens = exchange.eth_to_token(normalize_address(request.sender), int(request.value))
    return AmountResponse(amount=tokens)


@router.post("/pool/token-to-eth")
def token_to_eth(
    request: TokenInputRequest, exchange: Exchange = Depends(get_exchange)
) -> AmountResponse:
    eth = exchange.token_to_eth(normalize_address(request.sender), int(request.tokens))
    return AmountResponse(amount=eth)


@router.post("/pool/deposit")
def deposit(request: ValueRequest, exchange: Exchange = Depends(get_exchange)) -> AmountResponse:
    tokens = exchange.deposit(normalize_address(request.sender), int(request.value))
    return AmountResponse(amount=tokens)


@router.post("/pool/withdraw")
def withdraw(
    request: WithdrawRequest, exchange: Exchange = Depends(get_exchange)
) -> WithdrawResponse:
    eth, tokens = exchange.withdraw(normalize_address(request.sender), int(request.amount))
    return WithdrawResponse(eth=eth, tokens=tokens)
