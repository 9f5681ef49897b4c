"""
Price conversion functions for Uniswap V3 sqrtPriceX96 format.

Uniswap stores prices as square roots in 64.96 fixed-point format
(64 bits integer, 96 bits fractional). Squaring a sqrtPriceX96 gives the
price scaled by 2^192, which is the form the range math works in.
"""

import math
from typing import TypedDict, Union

from .errors import InvalidInput
from .sqrt import sqrt

Q96 = 2 ** 96
Q192 = 2 ** 192


class PriceQuote(TypedDict):
    """Result from to_price function."""
    price: int
    inverted_price: int
    price_x192: int


def as_uint(value: Union[int, str], name: str = "value") -> int:
    """
    Coerce an int or decimal string (as read from slot0 or a CSV) to a non-negative int.

    Floats and bools are rejected rather than truncated.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    try:
        result = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"{name} must be an integer, got {value!r}") from e
    if result < 0:
        raise InvalidInput(f"{name} must be non-negative, got {result}")
    return result


def to_price(sqrtpx96: Union[int, str]) -> PriceQuote:
    """
    Convert a sqrtPriceX96 to its integer linear price in both directions.

    Args:
        sqrtpx96: The Uniswap 64.96 square root price. Must be positive.

    Returns:
        A dict with price (token 1 per token 0, floored), inverted_price
        (token 0 per token 1, floored) and price_x192, the unfloored price
        scaled by 2^192.

    Raises:
        InvalidInput: If sqrtpx96 is zero, negative or not an integer.

    Examples:
        >>> to_price(2 ** 96)
        {'price': 1, 'inverted_price': 1, 'price_x192': 6277101735386680763835789423207666416102355444464034512896}

        >>> to_price(2 ** 97)['price'], to_price(2 ** 97)['inverted_price']
        (4, 0)
    """
    sqrtpx96 = as_uint(sqrtpx96, "sqrtpx96")
    if sqrtpx96 == 0:
        raise InvalidInput("sqrtpx96 must be positive; a zero price is undefined")

    price_x192 = sqrtpx96 * sqrtpx96
    return PriceQuote(
        price=price_x192 // Q192,
        inverted_price=Q192 // price_x192,
        price_x192=price_x192
    )


def price_x192_to_sqrtpx96(price_x192: int) -> int:
    """Floor sqrtPriceX96 for a price already scaled by 2^192."""
    return sqrt(as_uint(price_x192, "price_x192"))


def price_to_sqrtpx96(
    p: float,
    invert: bool = False,
    decimal_adjustment: float = 1.0
) -> int:
    """
    Convert a human-readable price to Uniswap's sqrtPriceX96 format.

    Args:
        p: Price in human readable form (e.g., 65000 USDT/BTC).
        invert: Whether to invert the price. Uniswap uses Token 1 / Token 0.
            You must know which token is which at the pool level. Default False.
        decimal_adjustment: 10^(decimal difference). WBTC has 8 decimals,
            ETH has 18, so it'd be 1e10.

    Returns:
        Big integer price in sqrtPriceX96 format.

    Note:
        Goes through a float, so expect ~1e-15 relative error. Use
        price_x192_to_sqrtpx96 when the price is already an exact integer.

    Examples:
        >>> # 65,000 USDT per BTCB on BSC: both 18 decimals, USDT is token 0
        >>> price_to_sqrtpx96(65000, invert=True)  # about 3.1076e26
    """
    if p <= 0:
        raise InvalidInput(f"Price must be positive, got {p}")

    if invert:
        p = 1.0 / p

    return int(math.sqrt(p * decimal_adjustment) * Q96)


def sqrtpx96_to_price(
    sqrtpx96: Union[int, str],
    invert: bool = False,
    decimal_adjustment: float = 1.0
) -> float:
    """
    Convert Uniswap's sqrtPriceX96 format to a human-readable price.

    Args:
        sqrtpx96: The Uniswap 64.96 square root price to convert.
        invert: Whether to invert the result. Uniswap uses Token 1 / Token 0.
            You must know which token is which at the pool level. Default False.
        decimal_adjustment: 10^(decimal difference). WBTC has 8 decimals,
            ETH has 18, so it'd be 1e10.

    Returns:
        Human readable decimal price in desired format (1/0 or 0/1 if invert=True).

    Examples:
        >>> # For Ethereum Mainnet ETH-USDC 0.05% V3 Pool:
        >>> # 1854219362252931989533640458424264 (Slot0) -> $1,825.732 USDC/ETH
        >>> sqrtpx96_to_price('1854219362252931989533640458424264', invert=True, decimal_adjustment=1e12)
        1825.732...
    """
    sqrtpx96 = as_uint(sqrtpx96, "sqrtpx96")
    if sqrtpx96 == 0:
        raise InvalidInput("sqrtpx96 must be positive; a zero price is undefined")

    p = sqrtpx96 / Q96

    if invert:
        return (1.0 / (p ** 2)) * decimal_adjustment
    else:
        return (p ** 2) / decimal_adjustment
