"""
Tick-related conversion functions for Uniswap V3.

Exact integer versions of the pool's TickMath, used to turn a calculated
sqrtPriceX96 band into ticks a position manager will accept.
"""

import math
from typing import TypedDict

from .errors import InvalidInput

MIN_TICK = -887272
MAX_TICK = 887272

# sqrt ratios at MIN_TICK and MAX_TICK; MAX_SQRT_RATIO itself is exclusive
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

# 1 / sqrt(1.0001) ** (2 ** i) in Q128, for i = 1..19
_RATIO_MULTIPLIERS = (
    0xfff97272373d413259a46990580e213a,
    0xfff2e50f5f656932ef12357cf3c7fdcc,
    0xffe5caca7e10e4e61c3624eaa0941cd0,
    0xffcb9843d60f6159c9db58835c926644,
    0xff973b41fa98c081472e6896dfb254c0,
    0xff2ea16466c96a3843ec78b326b52861,
    0xfe5dee046a99a2a811c461f1969c3053,
    0xfcbe86c7900a88aedcffc83b479aa3a4,
    0xf987a7253ac413176f2b074cf7815e54,
    0xf3392b0822b70005940c7a398e4b70f3,
    0xe7159475a2c29b7443b29c7fa6e889d9,
    0xd097f3bdfd2022b8845ad8f792aa5825,
    0xa9f746462d870fdf8a65dc1f90e061e5,
    0x70d869a156d2a1b890bb3df62baf32f7,
    0x31be135f97d08fd981231505542fcfa6,
    0x9aa508b5b7a84e1c677de54f3e99bc9,
    0x5d6af8dedb81196699c329225ee604,
    0x2216e584f5fa1ea926041bedfe98,
    0x48a170391f7dc42444e8fa2,
)


class TickRange(TypedDict):
    """Result from range_to_ticks function."""
    tick_lower: int
    tick_upper: int
    sqrtpx96_lower: int
    sqrtpx96_upper: int


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """
    Calculate sqrtPriceX96 at a tick, rounded up as the pool does.

    Args:
        tick: The numeric tick, between MIN_TICK and MAX_TICK.

    Returns:
        sqrt(1.0001 ** tick) * 2^96 as a big integer.

    Raises:
        InvalidInput: If the tick is out of range.

    Examples:
        >>> get_sqrt_ratio_at_tick(0)
        79228162514264337593543950336
        >>> get_sqrt_ratio_at_tick(MIN_TICK)
        4295128739
    """
    if isinstance(tick, bool) or not isinstance(tick, int):
        raise InvalidInput(f"tick must be an integer, got {tick!r}")
    if tick < MIN_TICK or tick > MAX_TICK:
        raise InvalidInput(f"tick {tick} outside [{MIN_TICK}, {MAX_TICK}]")

    abs_tick = abs(tick)
    ratio = 0xfffcb933bd6fad37aa2d162d1a594001 if abs_tick & 0x1 else 1 << 128
    for i, multiplier in enumerate(_RATIO_MULTIPLIERS, start=1):
        if abs_tick & (1 << i):
            ratio = (ratio * multiplier) >> 128

    if tick > 0:
        ratio = (2 ** 256 - 1) // ratio

    # Q128.128 -> Q64.96, rounding up
    return (ratio >> 32) + (1 if ratio % (1 << 32) else 0)


def get_tick_at_sqrt_ratio(sqrtpx96: int) -> int:
    """
    Get the greatest tick whose sqrt ratio is <= sqrtpx96.

    Args:
        sqrtpx96: Price in uint160 format, in [MIN_SQRT_RATIO, MAX_SQRT_RATIO).

    Returns:
        The tick.

    Raises:
        InvalidInput: If sqrtpx96 is outside the pool's price domain.
    """
    if sqrtpx96 < MIN_SQRT_RATIO or sqrtpx96 >= MAX_SQRT_RATIO:
        raise InvalidInput(
            f"sqrtpx96 {sqrtpx96} outside [{MIN_SQRT_RATIO}, {MAX_SQRT_RATIO})"
        )

    ratio = sqrtpx96 << 32
    msb = ratio.bit_length() - 1

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    # log2(ratio) in Q64.64, 14 fractional bits are enough to pin the tick
    log_2 = (msb - 128) << 64
    for i in range(14):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << (63 - i)
        r >>= f

    log_sqrt10001 = log_2 * 255738958999603826347141

    tick_low = (log_sqrt10001 - 3402992956809132418596140100660247210) >> 128
    tick_high = (log_sqrt10001 + 291339464771989622907027621153398088495) >> 128

    if tick_low == tick_high:
        return tick_low
    return tick_high if get_sqrt_ratio_at_tick(tick_high) <= sqrtpx96 else tick_low


def tick_to_price(tick: int, decimal_adjustment: float = 1.0, yx: bool = True) -> float:
    """
    Convert a Uniswap V3 tick to a human readable price.

    Args:
        tick: The numeric tick, e.g., 204232.
        decimal_adjustment: The difference in the tokens decimals, e.g., 1e10 for ETH vs BTC,
            1e12 for USDC vs ETH.
        yx: Whether to return the price in Token 1 / Token 0 format or inverted. Default True.

    Returns:
        A numeric price in desired format.

    Examples:
        >>> # 1,351.327 USDC per ETH (yx=False because pool is actually ETH/USDC)
        >>> tick_to_price(204232, decimal_adjustment=1e12, yx=False)
        1351.327...
    """
    p = math.sqrt(1.0001) ** (2 * tick)

    if yx:
        return p / decimal_adjustment
    return (1.0 / p) * decimal_adjustment


def round_tick_to_spacing(tick: int, tick_spacing: int, round_up: bool = False) -> int:
    """
    Round a tick down (or up) to a multiple of the pool's tick spacing.

    The result is clamped to the usable range, the outermost multiples of
    tick_spacing inside [MIN_TICK, MAX_TICK].

    Examples:
        >>> round_tick_to_spacing(-887272, 60)
        -887220
        >>> round_tick_to_spacing(205, 10, round_up=True)
        210
    """
    if isinstance(tick_spacing, bool) or not isinstance(tick_spacing, int) or tick_spacing <= 0:
        raise InvalidInput(f"tick_spacing must be a positive integer, got {tick_spacing!r}")

    rounded = (tick // tick_spacing) * tick_spacing
    if round_up and rounded != tick:
        rounded += tick_spacing

    min_usable = -(-MIN_TICK // tick_spacing) * tick_spacing
    max_usable = (MAX_TICK // tick_spacing) * tick_spacing
    return min(max(rounded, min_usable), max_usable)


def range_to_ticks(sqrtpx96_lower: int, sqrtpx96_upper: int, tick_spacing: int) -> TickRange:
    """
    Widen a sqrtPriceX96 band outward to the nearest usable ticks.

    The lower bound is rounded down and the upper bound up, so the tick range
    contains the band it was built from (up to the usable tick limits).

    Args:
        sqrtpx96_lower: Lower bound of the band in uint160 format.
        sqrtpx96_upper: Upper bound of the band in uint160 format.
        tick_spacing: The pool's tick spacing, e.g., 10 for 0.05% pools.

    Returns:
        A dict with tick_lower, tick_upper and the sqrt ratios at those ticks.
    """
    if sqrtpx96_lower >= sqrtpx96_upper:
        raise InvalidInput("sqrtpx96_lower must be below sqrtpx96_upper")

    lower = min(max(sqrtpx96_lower, MIN_SQRT_RATIO), MAX_SQRT_RATIO - 1)
    upper = min(max(sqrtpx96_upper, MIN_SQRT_RATIO), MAX_SQRT_RATIO - 1)

    tick_lower = round_tick_to_spacing(get_tick_at_sqrt_ratio(lower), tick_spacing)

    tick_upper = get_tick_at_sqrt_ratio(upper)
    if get_sqrt_ratio_at_tick(tick_upper) < upper:
        tick_upper += 1
    tick_upper = round_tick_to_spacing(tick_upper, tick_spacing, round_up=True)

    if tick_lower >= tick_upper:
        raise InvalidInput(
            f"tick_spacing {tick_spacing} leaves no usable ticks around the range"
        )

    return TickRange(
        tick_lower=tick_lower,
        tick_upper=tick_upper,
        sqrtpx96_lower=get_sqrt_ratio_at_tick(tick_lower),
        sqrtpx96_upper=get_sqrt_ratio_at_tick(tick_upper)
    )
