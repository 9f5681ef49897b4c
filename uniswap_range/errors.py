"""
Exceptions raised by the range calculation functions.
"""


class RangeMathError(Exception):
    """Base exception for sqrt price and range calculations."""
    pass


class InvalidInput(RangeMathError, ValueError):
    """Raised when a caller passes a zero price, a bad width or bad amounts."""
    pass


class InvariantViolation(RangeMathError, ArithmeticError):
    """Raised when a computed range fails its own postcondition."""
    pass
