"""
Uniswap V3 price range calculation utilities.

This package provides exact integer implementations of the math a liquidity
connector needs to open a concentrated liquidity position: integer square
roots, sqrtPriceX96 to price conversions, price range selection around the
current price, and rounding a range to pool ticks.
"""

from .errors import RangeMathError, InvalidInput, InvariantViolation
from .sqrt import sqrt
from .price import to_price, price_x192_to_sqrtpx96, sqrtpx96_to_price, price_to_sqrtpx96
from .range import (
    calculate_range,
    symmetric_split,
    amount_weighted_split,
    relative_width,
    realized_width,
    eps_equal,
)
from .tick import (
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    tick_to_price,
    round_tick_to_spacing,
    range_to_ticks,
)
from .utils import calculate_ticks, calculate_ranges

__all__ = [
    "RangeMathError",
    "InvalidInput",
    "InvariantViolation",
    "sqrt",
    "to_price",
    "price_x192_to_sqrtpx96",
    "sqrtpx96_to_price",
    "price_to_sqrtpx96",
    "calculate_range",
    "symmetric_split",
    "amount_weighted_split",
    "relative_width",
    "realized_width",
    "eps_equal",
    "get_sqrt_ratio_at_tick",
    "get_tick_at_sqrt_ratio",
    "tick_to_price",
    "round_tick_to_spacing",
    "range_to_ticks",
    "calculate_ticks",
    "calculate_ranges",
]
