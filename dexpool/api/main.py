"""FastAPI application for the exchange.

Pool errors are translated to JSON bodies of the form
``{"detail": reason, "error": code}``:
- Precondition violations: 400
- Rejected transfers: 402
- Reentrancy: 409
- Arithmetic faults (overflow, division by zero): 422
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dexpool import __version__
from dexpool.api.endpoints import router
from dexpool.config import DEFAULT_CONFIG
from dexpool.errors import (
    InsufficientFunds,
    PoolError,
    PreconditionError,
    ReentrancyError,
    TransferError,
    UnknownContract,
)
from dexpool.log_config import configure_logging
from dexpool.models.api import ErrorResponse
from dexpool.safe_int import SafeIntError

# Maximum request body size (64 KB)
MAX_REQUEST_SIZE = 64 * 1024

app = FastAPI(
    title="dexpool",
    description="Constant-product exchange pool between a native asset and one token",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


def _status_for(exc: PoolError) -> int:
    if isinstance(exc, (PreconditionError, InsufficientFunds)):
        return 400
    if isinstance(exc, TransferError):
        return 402
    if isinstance(exc, ReentrancyError):
        return 409
    if isinstance(exc, UnknownContract):
        return 404
    return 400


@app.exception_handler(PoolError)
async def pool_error_handler(_request: Request, exc: PoolError) -> JSONResponse:
    return JSONResponse(
        status_code=_status_for(exc),
        content=ErrorResponse(detail=exc.reason, error=exc.code).model_dump(),
    )


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(_request: Request, exc: SafeIntError) -> JSONResponse:
    return JSONResponse(
        status_code=422, content=ErrorResponse(detail=str(exc), error=exc.code).model_dump()
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the exchange API server.

    Configuration via environment variables (see dexpool.config):
    - DEX_HOST / DEX_PORT: bind address (default: 0.0.0.0:8000)
    - DEX_DEBUG: enable reload mode (default: false)
    - DEX_LOG_LEVEL / DEX_LOG_FORMAT: logging (default: INFO / console)
    """
    configure_logging(DEFAULT_CONFIG.log_level, DEFAULT_CONFIG.log_format)
    uvicorn.run(
        "dexpool.api.main:app",
        host=DEFAULT_CONFIG.host,
        port=DEFAULT_CONFIG.port,
        reload=DEFAULT_CONFIG.debug,
    )


if __name__ == "__main__":
    run()
