"""Pool constants.

Centralizes the fee parameters and numeric bounds used by the pool.
"""

from dexpool.safe_int import UINT256_MAX

# 0.3% proportional fee expressed as numerator / denominator.
# The numerator scales the trade input; the denominator scales the input reserve.
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Deposits round the required token amount up by this many units
DEPOSIT_ROUNDING_GUARD = 1

# Address format used by the execution environment (0x + 40 hex chars)
ADDRESS_HEX_LENGTH = 40

__all__ = [
    "FEE_NUMERATOR",
    "FEE_DENOMINATOR",
    "DEPOSIT_ROUNDING_GUARD",
    "ADDRESS_HEX_LENGTH",
    "UINT256_MAX",
]
