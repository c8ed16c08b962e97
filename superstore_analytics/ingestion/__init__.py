"""
Data Ingestion Module
"""
from .cleaners import CleaningStats, OrderLineCleaner, normalize_column_name
from .loader import (
    FileFormat,
    LoadConfig,
    LoadResult,
    OrderLineLoader,
    load_order_lines,
    order_lines_from_records,
)

__all__ = [
    "CleaningStats",
    "OrderLineCleaner",
    "normalize_column_name",
    "FileFormat",
    "LoadConfig",
    "LoadResult",
    "OrderLineLoader",
    "load_order_lines",
    "order_lines_from_records",
]
