"""
Order Line Data Model

The super_store dataset is one denormalized table with one row per product
line within a customer order. `order_id` groups the lines of one order and is
NOT unique across the dataset, even though the source DDL declares it as the
primary key.
"""

from enum import Enum
from typing import Dict, Iterable, List

import polars as pl

from superstore_analytics.exceptions import SchemaMismatchError


# =============================================================================
# ENUMERATIONS
# =============================================================================

class Segment(str, Enum):
    """Customer segment enumeration"""
    CONSUMER = "Consumer"
    CORPORATE = "Corporate"
    HOME_OFFICE = "Home Office"


class ShipMode(str, Enum):
    """Shipping mode enumeration"""
    STANDARD_CLASS = "Standard Class"
    SECOND_CLASS = "Second Class"
    FIRST_CLASS = "First Class"
    SAME_DAY = "Same Day"


# =============================================================================
# SCHEMA
# =============================================================================

ORDER_LINE_SCHEMA: Dict[str, pl.DataType] = {
    "row_id": pl.Int64,
    "order_id": pl.Utf8,
    "order_date": pl.Date,
    "ship_date": pl.Date,
    "ship_mode": pl.Utf8,
    "customer_id": pl.Utf8,
    "customer_name": pl.Utf8,
    "segment": pl.Utf8,
    "country": pl.Utf8,
    "city": pl.Utf8,
    "state": pl.Utf8,
    "postal_code": pl.Utf8,
    "region": pl.Utf8,
    "product_id": pl.Utf8,
    "category": pl.Utf8,
    "sub_category": pl.Utf8,
    "product_name": pl.Utf8,
    "sales": pl.Float64,
    "quantity": pl.Int64,
    "discount": pl.Float64,
    "profit": pl.Float64,
}

# row_id and the geography columns no report reads are optional
OPTIONAL_COLUMNS = {"row_id", "country", "postal_code", "region"}

REQUIRED_COLUMNS: List[str] = [
    col for col in ORDER_LINE_SCHEMA if col not in OPTIONAL_COLUMNS
]

DATE_COLUMNS = ["order_date", "ship_date"]


def require_columns(
    df: pl.DataFrame,
    columns: Iterable[str] = REQUIRED_COLUMNS,
    source: str = "dataset",
) -> None:
    """Raise SchemaMismatchError if any column is absent from the frame"""
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise SchemaMismatchError(missing, source=source)
