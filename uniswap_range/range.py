"""
Price range selection for concentrated liquidity positions.

Given a pool's current sqrtPriceX96, derive a lower/upper sqrtPriceX96 band
whose relative width

    (price_upper - price_lower) * 10000 / (price_upper + price_lower)

matches a target in basis points, with the current price strictly inside.

Any band with price_upper / price_lower = r, r = (10000 + w) / (10000 - w),
has relative width exactly w. The band is placed around the current price P
by the share s of that log-width that goes above it:

    price_upper = P * r ** s
    price_lower = price_upper / r

s = 1/2 puts P at the geometric mid-price of the band. Bounds are carried as
price * 2^192 (i.e. squared sqrtPriceX96) and brought back with an integer
square root, so the fixed-point convention is preserved end to end.
"""

import logging
from decimal import Decimal, localcontext
from fractions import Fraction
from typing import Callable, TypedDict, Union

from .errors import InvalidInput, InvariantViolation
from .price import as_uint, price_x192_to_sqrtpx96, to_price
from .sqrt import sqrt
from .tick import MAX_SQRT_RATIO, MIN_SQRT_RATIO

logger = logging.getLogger(__name__)

BPS_DENOMINATOR = 10_000

# Fixed-point precision of the r ** s factor
RATIO_PRECISION_BITS = 128

# Bounds on the upper share, so neither leg collapses onto the current price
MIN_UPPER_SHARE = Fraction(1, 10)
MAX_UPPER_SHARE = Fraction(9, 10)

SplitPolicy = Callable[[int, int], Fraction]


class PriceRange(TypedDict):
    """Result from calculate_range function."""
    sqrtpx96_lower: int
    sqrtpx96_upper: int


def symmetric_split(amount0: int, amount1: int) -> Fraction:
    """Always center the band on the current price, whatever the amounts."""
    return Fraction(1, 2)


def amount_weighted_split(amount0: int, amount1: int) -> Fraction:
    """
    Give the upper leg a share of the width proportional to amount0.

    Holding comparatively more token 0 extends the upper bound (the side that
    sells token 0 as the price rises), and vice versa. Equal amounts give 1/2.
    Raw amounts are compared as given, without pricing them against each other.

    Examples:
        >>> amount_weighted_split(10 ** 18, 10 ** 18)
        Fraction(1, 2)
        >>> amount_weighted_split(3, 1)
        Fraction(3, 4)
        >>> amount_weighted_split(0, 5)
        Fraction(1, 10)
    """
    share = Fraction(amount0, amount0 + amount1)
    return min(max(share, MIN_UPPER_SHARE), MAX_UPPER_SHARE)


def _upper_factor(width_bps: int, upper_share: Fraction) -> int:
    """r ** upper_share in Q128, r = (10000 + width_bps) / (10000 - width_bps)."""
    num = BPS_DENOMINATOR + width_bps
    den = BPS_DENOMINATOR - width_bps

    if upper_share == Fraction(1, 2):
        return sqrt((num << (2 * RATIO_PRECISION_BITS)) // den)

    with localcontext() as ctx:
        ctx.prec = 80
        exponent = Decimal(upper_share.numerator) / Decimal(upper_share.denominator)
        factor = (Decimal(num) / Decimal(den)) ** exponent
        return int(factor * (1 << RATIO_PRECISION_BITS))


def calculate_range(
    sqrtpx96: Union[int, str],
    amount0: Union[int, str],
    amount1: Union[int, str],
    width_bps: int,
    split: SplitPolicy = amount_weighted_split
) -> PriceRange:
    """
    Calculate a sqrtPriceX96 band of a given relative width around the current price.

    Args:
        sqrtpx96: Current pool price in uint160 format, read once from slot0.
        amount0: Amount of token 0 the caller is putting in. Used as a weight only.
        amount1: Amount of token 1 the caller is putting in. Used as a weight only.
        width_bps: Target relative width in basis points, 0 < width_bps < 10000.
        split: Policy mapping (amount0, amount1) to the upper leg's share of the
            width. Default amount_weighted_split.

    Returns:
        A dict with sqrtpx96_lower and sqrtpx96_upper, where
        0 < sqrtpx96_lower < sqrtpx96 < sqrtpx96_upper.

    Raises:
        InvalidInput: On a price outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO), a width
            outside (0, 10000), negative amounts, both amounts zero, or a split
            share outside (0, 1).
        InvariantViolation: If the computed band does not strictly contain the
            current price.

    Examples:
        >>> # 50% wide band around price 1, equal amounts
        >>> # prices 1/sqrt(3) and sqrt(3), i.e. sqrtpx96 of about 6.020e28 and 1.0427e29
        >>> calculate_range(2 ** 96, 10 ** 18, 10 ** 18, 5000)
    """
    sqrtpx96 = as_uint(sqrtpx96, "sqrtpx96")
    amount0 = as_uint(amount0, "amount0")
    amount1 = as_uint(amount1, "amount1")
    width_bps = as_uint(width_bps, "width_bps")

    if not MIN_SQRT_RATIO <= sqrtpx96 < MAX_SQRT_RATIO:
        raise InvalidInput(
            f"sqrtpx96 {sqrtpx96} outside [{MIN_SQRT_RATIO}, {MAX_SQRT_RATIO})"
        )
    if not 0 < width_bps < BPS_DENOMINATOR:
        raise InvalidInput(f"width_bps must be in (0, {BPS_DENOMINATOR}), got {width_bps}")
    if amount0 == 0 and amount1 == 0:
        raise InvalidInput("amount0 and amount1 cannot both be zero")

    upper_share = Fraction(split(amount0, amount1))
    if not 0 < upper_share < 1:
        raise InvalidInput(f"Split policy returned share {upper_share}, expected (0, 1)")

    price_x192 = to_price(sqrtpx96)["price_x192"]
    factor = _upper_factor(width_bps, upper_share)

    upper_x192 = (price_x192 * factor) >> RATIO_PRECISION_BITS
    lower_x192 = (price_x192 * factor * (BPS_DENOMINATOR - width_bps)) // (
        (BPS_DENOMINATOR + width_bps) << RATIO_PRECISION_BITS
    )

    sqrtpx96_lower = price_x192_to_sqrtpx96(lower_x192)
    sqrtpx96_upper = price_x192_to_sqrtpx96(upper_x192)

    if not 0 < sqrtpx96_lower < sqrtpx96 < sqrtpx96_upper:
        logger.error(
            f"Range {sqrtpx96_lower}-{sqrtpx96_upper} does not bracket {sqrtpx96} "
            f"(width_bps={width_bps}, upper_share={upper_share})"
        )
        raise InvariantViolation(
            f"Computed range [{sqrtpx96_lower}, {sqrtpx96_upper}] does not strictly "
            f"contain current sqrtpx96 {sqrtpx96}"
        )

    logger.debug(
        f"sqrtpx96={sqrtpx96} width_bps={width_bps} upper_share={upper_share} "
        f"-> [{sqrtpx96_lower}, {sqrtpx96_upper}]"
    )

    return PriceRange(
        sqrtpx96_lower=sqrtpx96_lower,
        sqrtpx96_upper=sqrtpx96_upper
    )


def relative_width(price_a: int, price_b: int) -> int:
    """
    Relative width of two prices in basis points, floored.

    |price_b - price_a| * 10000 // (price_a + price_b). Order does not matter,
    so it works on prices read in either direction.

    Examples:
        >>> relative_width(150, 50)
        5000
    """
    total = price_a + price_b
    if total <= 0:
        raise InvalidInput("relative_width needs at least one positive price")
    return abs(price_b - price_a) * BPS_DENOMINATOR // total


def realized_width(price_range: PriceRange) -> int:
    """
    Exact relative width of a sqrtPriceX96 band, rounded to the nearest bps.

    Computed on the squared sqrt prices, so no linear price flooring is involved.
    The metric is the same whether prices are read as token 1 / token 0 or
    inverted.
    """
    lower = to_price(price_range["sqrtpx96_lower"])["price_x192"]
    upper = to_price(price_range["sqrtpx96_upper"])["price_x192"]
    diff = abs(upper - lower) * BPS_DENOMINATOR
    total = upper + lower
    return (2 * diff + total) // (2 * total)


def eps_equal(
    a: int,
    b: int,
    eps: int = 1,
    decimals: int = 10 ** 4,
    zero_thresh: int = 10
) -> bool:
    """
    Whether a and b agree to within eps / decimals of a.

    With the defaults that is 1 basis point. A zero on either side compares
    against zero_thresh instead.

    Examples:
        >>> eps_equal(4999, 5000, eps=10)  # within 0.1%
        True
        >>> eps_equal(4900, 5000, eps=10)
        False
    """
    if a == b:
        return True
    if a == 0:
        return abs(b) <= zero_thresh
    if b == 0:
        return abs(a) <= zero_thresh
    return abs(a - b) * decimals / abs(a) < eps
