"""
Test Suite Configuration
"""
from typing import Any, Callable, Dict

import pytest
import polars as pl

from superstore_analytics.config import Settings
from superstore_analytics.ingestion import order_lines_from_records


def make_line(**overrides: Any) -> Dict[str, Any]:
    """One order line record with sensible defaults"""
    line = {
        "order_id": "CA-2024-100001",
        "order_date": "01/15/2024",
        "ship_date": "01/19/2024",
        "ship_mode": "Standard Class",
        "customer_id": "AA-10001",
        "customer_name": "Alice Adams",
        "segment": "Consumer",
        "country": "United States",
        "city": "Springfield",
        "state": "Illinois",
        "postal_code": "62701",
        "region": "Central",
        "product_id": "FUR-CH-10000001",
        "category": "Furniture",
        "sub_category": "Chairs",
        "product_name": "Task Chair",
        "sales": 100.0,
        "quantity": 2,
        "discount": 0.0,
        "profit": 20.0,
    }
    line.update(overrides)
    return line


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def make_order_lines() -> Callable[..., pl.DataFrame]:
    """Build a cleaned order line frame from per-line overrides"""
    def _make(*overrides: Dict[str, Any]) -> pl.DataFrame:
        return order_lines_from_records([make_line(**o) for o in overrides])
    return _make


@pytest.fixture
def sample_order_lines(make_order_lines) -> pl.DataFrame:
    """Small multi-month dataset touching every report"""
    return make_order_lines(
        {"order_id": "O-1", "sub_category": "Chairs", "sales": 100.0, "profit": 20.0},
        {"order_id": "O-1", "product_id": "FUR-TA-1", "sub_category": "Tables",
         "product_name": "Oak Table", "sales": 400.0, "profit": -40.0, "discount": 0.2},
        {"order_id": "O-2", "order_date": "02/03/2024", "ship_date": "02/04/2024",
         "ship_mode": "First Class", "customer_id": "BB-10002", "customer_name": "Bob Brown",
         "segment": "Corporate", "city": "Austin", "state": "Texas",
         "product_id": "OFF-PA-1", "category": "Office Supplies", "sub_category": "Paper",
         "product_name": "Copy Paper", "sales": 25.0, "quantity": 5, "profit": 12.5},
        {"order_id": "O-2", "order_date": "02/03/2024", "ship_date": "02/04/2024",
         "ship_mode": "First Class", "customer_id": "BB-10002", "customer_name": "Bob Brown",
         "segment": "Corporate", "city": "Austin", "state": "Texas",
         "product_id": "TEC-PH-1", "category": "Technology", "sub_category": "Phones",
         "product_name": "Desk Phone", "sales": 300.0, "quantity": 1, "profit": 60.0},
        {"order_id": "O-3", "order_date": "01/20/2025", "ship_date": "01/27/2025",
         "customer_id": "CC-10003", "customer_name": "Cara Cole", "segment": "Home Office",
         "state": "Texas", "city": "Dallas",
         "product_id": "TEC-PH-1", "category": "Technology", "sub_category": "Phones",
         "product_name": "Desk Phone", "sales": 150.0, "quantity": 1, "discount": 0.5,
         "profit": -15.0},
        {"order_id": "O-4", "order_date": "03/10/2024", "ship_date": "03/12/2024",
         "ship_mode": "Second Class", "sales": 80.0, "profit": 8.0},
    )
