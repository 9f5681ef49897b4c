"""
Utility functions combining range selection with tick rounding.
"""

from typing import TypedDict, Union
import pandas as pd

from .range import SplitPolicy, amount_weighted_split, calculate_range, realized_width
from .tick import range_to_ticks


class TicksResult(TypedDict):
    """Result from calculate_ticks function."""
    sqrtpx96_lower: int
    sqrtpx96_upper: int
    tick_lower: int
    tick_upper: int
    tick_sqrtpx96_lower: int
    tick_sqrtpx96_upper: int


def calculate_ticks(
    sqrtpx96: Union[int, str],
    amount0: Union[int, str],
    amount1: Union[int, str],
    width_bps: int,
    tick_spacing: int,
    split: SplitPolicy = amount_weighted_split
) -> TicksResult:
    """
    Calculate a price range and the pool ticks to mint it with.

    Args:
        sqrtpx96: Current pool price in uint160 format.
        amount0: Amount of token 0 going in.
        amount1: Amount of token 1 going in.
        width_bps: Target relative width in basis points.
        tick_spacing: The pool's tick spacing. 1 for 0.01% pools, 10 for 0.05%,
            60 for 0.3%, 200 for 1%.
        split: Policy for sharing the width between the two legs.

    Returns:
        A dict with the calculated sqrtpx96 band, the rounded ticks, and the
        sqrt ratios at those ticks (tick_sqrtpx96_lower/upper).

    Examples:
        >>> # 50% wide range around price 1 in a 0.05% pool
        >>> calculate_ticks(2 ** 96, 10 ** 18, 10 ** 18, width_bps=5000, tick_spacing=10)
    """
    price_range = calculate_range(sqrtpx96, amount0, amount1, width_bps, split=split)
    ticks = range_to_ticks(
        price_range["sqrtpx96_lower"], price_range["sqrtpx96_upper"], tick_spacing
    )

    return TicksResult(
        sqrtpx96_lower=price_range["sqrtpx96_lower"],
        sqrtpx96_upper=price_range["sqrtpx96_upper"],
        tick_lower=ticks["tick_lower"],
        tick_upper=ticks["tick_upper"],
        tick_sqrtpx96_lower=ticks["sqrtpx96_lower"],
        tick_sqrtpx96_upper=ticks["sqrtpx96_upper"]
    )


def calculate_ranges(
    snapshots: pd.DataFrame,
    width_bps: int,
    amount0: Union[int, str] = 1,
    amount1: Union[int, str] = 1,
    split: SplitPolicy = amount_weighted_split
) -> pd.DataFrame:
    """
    Calculate a range for every pool snapshot in a table.

    Args:
        snapshots: Table with a sqrtpx96 column (int or decimal string, as read
            from slot0 or swap logs). Optional amount0 / amount1 columns override
            the amount arguments per row; an optional tick_spacing column adds
            tick_lower / tick_upper.
        width_bps: Target relative width in basis points.
        amount0: Amount of token 0 for rows without an amount0 column.
        amount1: Amount of token 1 for rows without an amount1 column.
        split: Policy for sharing the width between the two legs.

    Returns:
        A copy of the table with sqrtpx96_lower, sqrtpx96_upper and
        realized_width_bps columns (plus tick_lower and tick_upper when
        tick_spacing is present). Sqrt prices are kept as Python ints.

    Examples:
        >>> import pandas as pd
        >>> snapshots = pd.DataFrame({
        ...     'block_number': [145813952, 145813953],
        ...     'sqrtpx96': ['8342924127496250623015486190045', '8340041809950568377873650817750'],
        ... })
        >>> calculate_ranges(snapshots, width_bps=2000)
    """
    if "sqrtpx96" not in snapshots.columns:
        raise ValueError("Expected sqrtpx96 column")

    has_ticks = "tick_spacing" in snapshots.columns
    columns = {"sqrtpx96_lower": [], "sqrtpx96_upper": [], "realized_width_bps": []}
    if has_ticks:
        columns.update({"tick_lower": [], "tick_upper": []})

    # to_dict keeps each column's own type, iterrows would upcast ints to float
    for row in snapshots.to_dict("records"):
        price_range = calculate_range(
            row["sqrtpx96"],
            row.get("amount0", amount0),
            row.get("amount1", amount1),
            width_bps,
            split=split
        )
        columns["sqrtpx96_lower"].append(price_range["sqrtpx96_lower"])
        columns["sqrtpx96_upper"].append(price_range["sqrtpx96_upper"])
        columns["realized_width_bps"].append(realized_width(price_range))

        if has_ticks:
            ticks = range_to_ticks(
                price_range["sqrtpx96_lower"],
                price_range["sqrtpx96_upper"],
                int(row["tick_spacing"])
            )
            columns["tick_lower"].append(ticks["tick_lower"])
            columns["tick_upper"].append(ticks["tick_upper"])

    result = snapshots.copy()
    for name, values in columns.items():
        # uint160 values overflow int64, keep them as Python ints
        dtype = object if name.startswith("sqrtpx96") else "int64"
        result[name] = pd.Series(values, index=snapshots.index, dtype=dtype)

    return result
