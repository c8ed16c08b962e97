"""
Sales Report Functions

Fifteen independent analyses over the order line frame. Every report is a
pure function: it reads the frame, never mutates it, and returns a new frame
with a deterministic row order.

Undefined ratios (zero or null denominators) are nulls in the output.
"""

import polars as pl

from .primitives import (
    growth_pct,
    group_sum,
    lag,
    month_start,
    rank,
    running_total,
    safe_ratio,
)

MONTH_LABEL_FORMAT = "%Y-%m"


def _with_month(df: pl.DataFrame) -> pl.DataFrame:
    return df.drop_nulls(subset=["order_date"]).with_columns(
        month_start("order_date").alias("month_start")
    )


def _month_label() -> pl.Expr:
    return pl.col("month_start").dt.strftime(MONTH_LABEL_FORMAT).alias("month")


def _monthly_growth(df: pl.DataFrame) -> pl.DataFrame:
    """Monthly sales/profit with month-over-month growth, keyed by month_start"""
    monthly = group_sum(_with_month(df), "month_start", measures=("sales", "profit"))
    monthly = lag(monthly, "total_sales", order_by="month_start", alias="prev_sales")
    monthly = lag(monthly, "total_profit", order_by="month_start", alias="prev_profit")
    return monthly.with_columns([
        growth_pct("total_sales", "prev_sales").alias("sales_growth_pct"),
        growth_pct("total_profit", "prev_profit").alias("profit_growth_pct"),
    ])


def _top_per_month(df: pl.DataFrame, dimension: str) -> pl.DataFrame:
    """Highest-selling value of `dimension` per month, one row per month"""
    sales = group_sum(_with_month(df), ["month_start", dimension], measures=("sales",))
    ranked = rank(
        sales,
        order_by="total_sales",
        partition_by="month_start",
        tie_break=dimension,
        alias="sales_rank",
    )
    return (
        ranked.filter(pl.col("sales_rank") == 1)
        .unique(subset=["month_start"], keep="first", maintain_order=True)
        .select([
            "month_start",
            pl.col(dimension).alias(f"top_{dimension}"),
            pl.col("total_sales").alias(f"top_{dimension}_sales"),
        ])
    )


# =============================================================================
# REPORTS
# =============================================================================

def overview_metrics(df: pl.DataFrame) -> pl.DataFrame:
    """
    Headline KPIs for the whole dataset.

    Columns: total_orders, unique_customers, total_sales, total_profit,
    avg_profit_margin (profit / sales, null when sales sum to zero).
    """
    return df.select([
        pl.col("order_id").drop_nulls().n_unique().cast(pl.Int64).alias("total_orders"),
        pl.col("customer_id").drop_nulls().n_unique().cast(pl.Int64).alias("unique_customers"),
        pl.col("sales").fill_null(0).sum().cast(pl.Float64).alias("total_sales"),
        pl.col("profit").fill_null(0).sum().cast(pl.Float64).alias("total_profit"),
    ]).with_columns(
        safe_ratio("total_profit", "total_sales").alias("avg_profit_margin")
    )


def top_products_by_sales(df: pl.DataFrame, limit: int = 10) -> pl.DataFrame:
    """Best-selling products with quantity and profit margin"""
    products = group_sum(df, ["product_id", "product_name"], measures=("sales", "quantity", "profit"))
    return (
        products.with_columns(safe_ratio("total_profit", "total_sales").alias("profit_margin"))
        .sort(["total_sales", "product_id", "product_name"], descending=[True, False, False])
        .head(limit)
        .select(["product_id", "product_name", "total_sales", "total_quantity", "profit_margin"])
    )


def segment_performance(df: pl.DataFrame) -> pl.DataFrame:
    """
    Sales, profit and average order value per customer segment.

    The average order value divides by the number of order LINES, not by
    distinct orders.
    """
    return (
        df.drop_nulls(subset=["segment"])
        .group_by("segment")
        .agg([
            pl.col("sales").fill_null(0).sum().alias("total_sales"),
            pl.col("profit").fill_null(0).sum().alias("total_profit"),
            pl.col("order_id").is_not_null().sum().cast(pl.Int64).alias("line_count"),
        ])
        .with_columns(safe_ratio("total_sales", "line_count").alias("avg_order_value"))
        .sort(["total_sales", "segment"], descending=[True, False])
        .select(["segment", "total_sales", "total_profit", "avg_order_value"])
    )


def monthly_sales_growth(df: pl.DataFrame) -> pl.DataFrame:
    """Month-over-month growth of sales and profit; the first month has no growth"""
    return _monthly_growth(df).select([
        _month_label(),
        "total_sales",
        "total_profit",
        "sales_growth_pct",
        "profit_growth_pct",
    ])


def state_profitability(df: pl.DataFrame, limit: int = 5) -> pl.DataFrame:
    """States with the highest profit margin percentage"""
    states = group_sum(df, "state", measures=("sales", "profit"))
    return (
        states.with_columns(
            safe_ratio("total_profit", "total_sales", scale=100.0).alias("profit_margin_pct")
        )
        .sort(["profit_margin_pct", "state"], descending=[True, False], nulls_last=True)
        .head(limit)
    )


def shipping_duration(df: pl.DataFrame) -> pl.DataFrame:
    """Average days from order to shipment per (ship_mode, city), fastest first"""
    return (
        df.drop_nulls(subset=["ship_mode", "city", "order_date", "ship_date"])
        .with_columns(
            (pl.col("ship_date") - pl.col("order_date")).dt.total_days().alias("shipping_days")
        )
        .group_by(["ship_mode", "city"])
        .agg(pl.col("shipping_days").mean().alias("avg_shipping_days"))
        .sort(["avg_shipping_days", "ship_mode", "city"])
    )


def discount_impact(df: pl.DataFrame) -> pl.DataFrame:
    """Average profit per category, split by whether the line was discounted"""
    return (
        df.drop_nulls(subset=["category"])
        .with_columns(
            pl.when(pl.col("discount") > 0)
            .then(pl.lit("Discounted"))
            .otherwise(pl.lit("No Discount"))
            .alias("discount_flag")
        )
        .group_by(["category", "discount_flag"])
        .agg([
            pl.col("profit").mean().alias("avg_profit"),
            pl.len().cast(pl.Int64).alias("line_count"),
        ])
        .sort(["category", "discount_flag"])
    )


def top_customers_by_state(df: pl.DataFrame, top_n: int = 3) -> pl.DataFrame:
    """
    Highest-spending customers in each state.

    Uses competition ranking, so ties at the cutoff can return more than
    `top_n` customers for a state.
    """
    customers = group_sum(df, ["state", "customer_id", "customer_name"], measures=("sales",))
    ranked = rank(
        customers,
        order_by="total_sales",
        partition_by="state",
        tie_break=["customer_name", "customer_id"],
        alias="sales_rank",
    )
    return (
        ranked.filter(pl.col("sales_rank") <= top_n)
        .select(["state", "customer_id", "customer_name", "total_sales", "sales_rank"])
    )


def running_monthly_sales(df: pl.DataFrame) -> pl.DataFrame:
    monthly = group_sum(_with_month(df), "month_start", measures=("sales",))
    monthly = running_total(monthly, "total_sales", order_by="month_start", alias="running_total")
    return monthly.select([
        _month_label(),
        pl.col("total_sales").alias("monthly_sales"),
        "running_total",
    ])


def year_over_year_sales(df: pl.DataFrame) -> pl.DataFrame:
    """
    Same-month sales compared with the previous year on record.

    Partitioned by calendar month, ordered by year; the earliest year of each
    month has no previous value.
    """
    dated = df.drop_nulls(subset=["order_date"]).with_columns([
        pl.col("order_date").dt.month().cast(pl.Int64).alias("month_of_year"),
        pl.col("order_date").dt.year().cast(pl.Int64).alias("year"),
    ])
    yearly = group_sum(dated, ["month_of_year", "year"], measures=("sales",))
    yearly = lag(
        yearly,
        "total_sales",
        order_by="year",
        partition_by="month_of_year",
        alias="prev_year_sales",
    )
    return yearly.with_columns(
        growth_pct("total_sales", "prev_year_sales").alias("yoy_growth_pct")
    )


def customer_lifetime_value(df: pl.DataFrame) -> pl.DataFrame:
    """Per-customer spend, distinct orders, and tenure between first and last order"""
    return (
        df.drop_nulls(subset=["customer_id", "customer_name"])
        .group_by(["customer_id", "customer_name"])
        .agg([
            pl.col("sales").fill_null(0).sum().alias("total_sales"),
            pl.col("order_id").drop_nulls().n_unique().cast(pl.Int64).alias("order_count"),
            pl.col("order_date").min().alias("first_order_date"),
            pl.col("order_date").max().alias("last_order_date"),
        ])
        .with_columns(
            (pl.col("last_order_date") - pl.col("first_order_date"))
            .dt.total_days()
            .alias("customer_lifespan_days")
        )
        .sort(["total_sales", "customer_id"], descending=[True, False])
    )


def products_above_category_average(df: pl.DataFrame) -> pl.DataFrame:
    """
    Products whose total sales exceed their category's average line sales.

    Only strictly greater products are returned, highest percentage first.
    """
    category_avg = (
        df.drop_nulls(subset=["category"])
        .group_by("category")
        .agg(pl.col("sales").mean().alias("category_avg_sales"))
    )
    products = group_sum(df, ["category", "product_id", "product_name"], measures=("sales",))
    return (
        products.rename({"total_sales": "product_sales"})
        .join(category_avg, on="category", how="inner")
        .filter(pl.col("product_sales") > pl.col("category_avg_sales"))
        .with_columns(
            safe_ratio(
                pl.col("product_sales") - pl.col("category_avg_sales"),
                "category_avg_sales",
                scale=100.0,
            ).alias("pct_above_avg")
        )
        .sort(
            ["pct_above_avg", "category", "product_id"],
            descending=[True, False, False],
            nulls_last=True,
        )
    )


def loss_making_orders(df: pl.DataFrame) -> pl.DataFrame:
    """Lines with negative profit per category, biggest total loss first"""
    return (
        df.filter(pl.col("profit") < 0)
        .drop_nulls(subset=["category"])
        .group_by("category")
        .agg([
            pl.len().cast(pl.Int64).alias("loss_order_count"),
            pl.col("profit").sum().alias("total_loss"),
            pl.col("discount").mean().alias("avg_discount"),
        ])
        .sort(["total_loss", "category"])
    )


def subcategory_pairs(df: pl.DataFrame, limit: int = 10) -> pl.DataFrame:
    """
    Sub-categories bought together in the same order.

    Self-join of the lines of each order; a pair is counted once per pair of
    lines, always as (subcat_1, subcat_2) with subcat_1 < subcat_2.
    """
    lines = df.select(["order_id", "sub_category"]).drop_nulls()
    return (
        lines.rename({"sub_category": "subcat_1"})
        .join(lines.rename({"sub_category": "subcat_2"}), on="order_id", how="inner")
        .filter(pl.col("subcat_1") < pl.col("subcat_2"))
        .group_by(["subcat_1", "subcat_2"])
        .agg(pl.len().cast(pl.Int64).alias("pair_count"))
        .sort(["pair_count", "subcat_1", "subcat_2"], descending=[True, False, False])
        .head(limit)
    )


def monthly_composite_report(df: pl.DataFrame) -> pl.DataFrame:
    """
    Monthly growth joined with the month's top category and top segment.

    Left-join semantics: a month keeps its row with null top columns when no
    category or segment could be ranked for it. Ties for the top spot go to
    the alphabetically first name.
    """
    monthly = _monthly_growth(df)
    return (
        monthly.join(_top_per_month(df, "category"), on="month_start", how="left")
        .join(_top_per_month(df, "segment"), on="month_start", how="left")
        .sort("month_start")
        .select([
            _month_label(),
            "total_sales",
            "total_profit",
            "sales_growth_pct",
            "profit_growth_pct",
            "top_category",
            "top_category_sales",
            "top_segment",
            "top_segment_sales",
        ])
    )
