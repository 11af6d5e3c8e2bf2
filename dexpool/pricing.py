"""Constant-product pricing with a 0.3% fee.

Formula: output = (in * 997 * res_out) / (res_in * 1000 + in * 997)

The fee-scaled input (in * 997) is kept as an intermediate numerator so no
precision is lost before the single final division. Division truncates, so
every quote rounds in the pool's favor.
"""

from __future__ import annotations

from dexpool.constants import FEE_DENOMINATOR, FEE_NUMERATOR
from dexpool.safe_int import S


def price(input_amount: int, input_reserve: int, output_reserve: int) -> int:
    """Calculate the output amount for selling ``input_amount`` into the pool.

    Args:
        input_amount: Amount of the input asset being sold
        input_reserve: Pool reserve of the input asset before the trade
        output_reserve: Pool reserve of the output asset before the trade

    Returns:
        Output asset amount, truncated toward zero

    Raises:
        Underflow: If any argument is negative
        Uint256Overflow: If an intermediate product exceeds 2^256-1
        DivisionByZero: If both input_reserve and input_amount are zero
    """
    input_with_fee = S(input_amount) * S(FEE_NUMERATOR)
    numerator = input_with_fee * S(output_reserve)
    denominator = S(input_reserve) * S(FEE_DENOMINATOR) + input_with_fee

    return (numerator // denominator).value


__all__ = ["price"]
