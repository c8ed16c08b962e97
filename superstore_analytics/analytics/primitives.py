"""
Aggregation Primitives

Partition-then-order-then-scan building blocks shared by every report:
- group sums with null-key exclusion
- competition ranking (SQL RANK: 1, 1, 3)
- lag within a partition
- running totals reset per partition
- null-safe ratios and growth percentages

A ratio with a zero or null denominator is null ("undefined"), never an
error, zero, or infinity.
"""

from typing import List, Optional, Sequence, Union

import polars as pl

ColumnsArg = Union[str, Sequence[str], None]
ExprArg = Union[str, pl.Expr]

DEFAULT_MEASURES = ("sales", "profit", "quantity")


def _as_list(columns: ColumnsArg) -> List[str]:
    if columns is None:
        return []
    if isinstance(columns, str):
        return [columns]
    return list(columns)


def _as_expr(value: ExprArg) -> pl.Expr:
    return pl.col(value) if isinstance(value, str) else value


def safe_ratio(numerator: ExprArg, denominator: ExprArg, scale: float = 1.0) -> pl.Expr:
    """numerator / denominator * scale, null when the denominator is zero or null"""
    num = _as_expr(numerator)
    den = _as_expr(denominator)
    return (
        pl.when(den.is_null() | (den == 0))
        .then(None)
        .otherwise(num / den * scale)
        .cast(pl.Float64)
    )


def growth_pct(current: ExprArg, previous: ExprArg) -> pl.Expr:
    """Percentage change from previous to current; null without a usable previous value"""
    cur = _as_expr(current)
    prev = _as_expr(previous)
    return safe_ratio(cur - prev, prev, scale=100.0)


def month_start(column: str = "order_date") -> pl.Expr:
    """Truncate a date column to the first day of its month"""
    return pl.col(column).dt.truncate("1mo")


def group_sum(
    df: pl.DataFrame,
    keys: ColumnsArg,
    measures: Sequence[str] = DEFAULT_MEASURES,
    prefix: str = "total_",
) -> pl.DataFrame:
    """
    Sum measures per distinct key.

    Rows with a null in any key column are excluded. Null measure values
    count as zero. The result is sorted by the keys.

    Args:
        df: Order line frame
        keys: Grouping column(s)
        measures: Columns to sum
        prefix: Prefix for the summed column names

    Returns:
        One row per key with `{prefix}{measure}` columns
    """
    key_cols = _as_list(keys)
    return (
        df.drop_nulls(subset=key_cols)
        .group_by(key_cols)
        .agg([pl.col(m).fill_null(0).sum().alias(f"{prefix}{m}") for m in measures])
        .sort(key_cols)
    )


def rank(
    df: pl.DataFrame,
    order_by: str,
    partition_by: ColumnsArg = None,
    descending: bool = True,
    tie_break: ColumnsArg = None,
    alias: str = "rank",
) -> pl.DataFrame:
    """
    Add a standard competition rank within each partition.

    Equal values share a rank and the following value skips ahead
    (1, 1, 3), matching SQL RANK() rather than ROW_NUMBER or DENSE_RANK.
    `tie_break` columns only fix the output order of tied rows.

    Returns:
        The frame with `alias` added, sorted by partition, rank, tie_break
    """
    partition = _as_list(partition_by)
    ranked = pl.col(order_by).rank(method="min", descending=descending)
    if partition:
        ranked = ranked.over(partition)

    sort_cols = partition + [alias] + _as_list(tie_break)
    return (
        df.with_columns(ranked.cast(pl.Int64).alias(alias))
        .sort(sort_cols, nulls_last=True)
    )


def lag(
    df: pl.DataFrame,
    column: str,
    order_by: ColumnsArg,
    partition_by: ColumnsArg = None,
    offset: int = 1,
    alias: Optional[str] = None,
) -> pl.DataFrame:
    """
    Add the value `offset` rows earlier in the same partition.

    The first `offset` rows of each partition get null.

    Returns:
        The frame sorted by partition then order, with the lagged column added
    """
    partition = _as_list(partition_by)
    shifted = pl.col(column).shift(offset)
    if partition:
        shifted = shifted.over(partition)

    return (
        df.sort(partition + _as_list(order_by))
        .with_columns(shifted.alias(alias or f"prev_{column}"))
    )


def running_total(
    df: pl.DataFrame,
    column: str,
    order_by: ColumnsArg,
    partition_by: ColumnsArg = None,
    alias: Optional[str] = None,
) -> pl.DataFrame:
    """
    Add the cumulative sum of `column` in order, reset per partition.

    Returns:
        The frame sorted by partition then order, with the running total added
    """
    partition = _as_list(partition_by)
    cumulative = pl.col(column).fill_null(0).cum_sum()
    if partition:
        cumulative = cumulative.over(partition)

    return (
        df.sort(partition + _as_list(order_by))
        .with_columns(cumulative.alias(alias or f"running_{column}"))
    )
