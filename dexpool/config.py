"""Runtime configuration for the exchange service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_TRUE_VALUES = ("true", "1", "yes")


@dataclass(frozen=True)
class ServerConfig:
    """Centralized configuration, read from DEX_* environment variables.

    Attributes:
        host: Interface the API binds to (DEX_HOST)
        port: Port the API binds to (DEX_PORT)
        debug: Enable auto-reload (DEX_DEBUG)
        log_level: structlog filtering level name (DEX_LOG_LEVEL)
        log_format: "console" or "json" (DEX_LOG_FORMAT)
        token_name: Name of the token deployed with the pool (DEX_TOKEN_NAME)
        token_symbol: Symbol of the token deployed with the pool (DEX_TOKEN_SYMBOL)
        faucet_limit: Largest amount of either asset one faucet request may
            mint (DEX_FAUCET_LIMIT)
    """

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = "console"
    token_name: str = "Balloons"
    token_symbol: str = "BAL"
    faucet_limit: int = 10**24

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build a config from the environment, falling back to defaults."""
        log_format = os.environ.get("DEX_LOG_FORMAT", cls.log_format).lower()
        if log_format not in ("console", "json"):
            raise ValueError(f"DEX_LOG_FORMAT must be 'console' or 'json', got {log_format!r}")
        log_level = os.environ.get("DEX_LOG_LEVEL", cls.log_level).upper()
        if log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"DEX_LOG_LEVEL must be a standard level name, got {log_level!r}")
        return cls(
            host=os.environ.get("DEX_HOST", cls.host),
            port=int(os.environ.get("DEX_PORT", str(cls.port))),
            debug=os.environ.get("DEX_DEBUG", "false").lower() in _TRUE_VALUES,
            log_level=log_level,
            log_format=log_format,
            token_name=os.environ.get("DEX_TOKEN_NAME", cls.token_name),
            token_symbol=os.environ.get("DEX_TOKEN_SYMBOL", cls.token_symbol),
            faucet_limit=int(os.environ.get("DEX_FAUCET_LIMIT", str(cls.faucet_limit))),
        )


# Default configuration instance
DEFAULT_CONFIG = ServerConfig.from_env()
