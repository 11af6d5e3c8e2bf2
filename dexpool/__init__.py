"""dexpool - constant-product exchange pool between a native asset and one token."""

from dexpool.chain import Chain
from dexpool.exchange import Exchange, get_default_exchange
from dexpool.pool import Pool, PoolState, Reserves
from dexpool.pricing import price
from dexpool.token import Token

__version__ = "0.1.0"
__all__ = [
    "Chain",
    "Exchange",
    "Pool",
    "PoolState",
    "Reserves",
    "Token",
    "get_default_exchange",
    "price",
    "__version__",
]
