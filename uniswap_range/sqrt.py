"""
Integer square root for fixed-point price math.

Squared sqrtPriceX96 values reach 2^256 and beyond, well past what a float
can hold exactly, so the root is taken on Python ints.
"""

from .errors import InvalidInput


def sqrt(n: int) -> int:
    """
    Floor square root of a non-negative integer.

    Newton-Raphson on integers, seeded from the bit length so the first guess
    is never below the root. From there the iterates decrease until they reach
    floor(sqrt(n)); the next step then either repeats it or jumps one above it
    (the one-step oscillation near perfect squares minus one), which is where
    the loop stops.

    Args:
        n: Value to take the root of. Any size.

    Returns:
        The largest integer r with r * r <= n.

    Raises:
        InvalidInput: If n is negative or not an integer.

    Examples:
        >>> sqrt(15)
        3
        >>> sqrt(2 ** 192)
        79228162514264337593543950336
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidInput(f"sqrt expects an integer, got {type(n).__name__}")
    if n < 0:
        raise InvalidInput(f"sqrt of negative value: {n}")
    if n < 2:
        return n

    x0 = 1 << ((n.bit_length() + 1) // 2)
    while True:
        x1 = (n // x0 + x0) // 2
        if x1 >= x0:
            return x0
        x0 = x1
