"""
Sales Analytics Module
"""
from .engine import REPORTS, ReportDefinition, ReportResult, SalesAnalyticsEngine
from .primitives import growth_pct, group_sum, lag, rank, running_total, safe_ratio
from .reports import (
    customer_lifetime_value,
    discount_impact,
    loss_making_orders,
    monthly_composite_report,
    monthly_sales_growth,
    overview_metrics,
    products_above_category_average,
    running_monthly_sales,
    segment_performance,
    shipping_duration,
    state_profitability,
    subcategory_pairs,
    top_customers_by_state,
    top_products_by_sales,
    year_over_year_sales,
)

__all__ = [
    "REPORTS",
    "ReportDefinition",
    "ReportResult",
    "SalesAnalyticsEngine",
    "growth_pct",
    "group_sum",
    "lag",
    "rank",
    "running_total",
    "safe_ratio",
    "customer_lifetime_value",
    "discount_impact",
    "loss_making_orders",
    "monthly_composite_report",
    "monthly_sales_growth",
    "overview_metrics",
    "products_above_category_average",
    "running_monthly_sales",
    "segment_performance",
    "shipping_duration",
    "state_profitability",
    "subcategory_pairs",
    "top_customers_by_state",
    "top_products_by_sales",
    "year_over_year_sales",
]
