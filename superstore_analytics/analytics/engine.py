"""
Sales Analytics Engine

Holds one immutable order line snapshot and runs registered reports on it.

Example:
    engine = SalesAnalyticsEngine(load_order_lines("data/super_store.csv"))
    overview = engine.run("overview_metrics").rows
    results = engine.run_all(parallel=True)
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import time

import polars as pl
import structlog

from superstore_analytics.config import get_settings
from superstore_analytics.exceptions import UnknownReportError
from superstore_analytics.models import REQUIRED_COLUMNS, require_columns
from . import reports

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReportDefinition:
    """A registered report"""
    name: str
    title: str
    func: Callable[..., pl.DataFrame]
    # Maps keyword parameters to AnalyticsSettings attributes
    settings_params: Dict[str, str] = field(default_factory=dict)


@dataclass
class ReportResult:
    """Output of one report run"""
    name: str
    title: str
    rows: pl.DataFrame
    duration_seconds: float
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def row_count(self) -> int:
        return self.rows.height


REPORTS: List[ReportDefinition] = [
    ReportDefinition("overview_metrics", "Overview metrics", reports.overview_metrics),
    ReportDefinition(
        "top_products_by_sales",
        "Top products by sales",
        reports.top_products_by_sales,
        {"limit": "top_products_limit"},
    ),
    ReportDefinition("segment_performance", "Segment performance", reports.segment_performance),
    ReportDefinition("monthly_sales_growth", "Monthly sales growth", reports.monthly_sales_growth),
    ReportDefinition(
        "state_profitability",
        "Most profitable states",
        reports.state_profitability,
        {"limit": "top_states_limit"},
    ),
    ReportDefinition("shipping_duration", "Average shipping duration", reports.shipping_duration),
    ReportDefinition("discount_impact", "Discount impact on profit", reports.discount_impact),
    ReportDefinition(
        "top_customers_by_state",
        "Top customers by state",
        reports.top_customers_by_state,
        {"top_n": "top_customers_per_state"},
    ),
    ReportDefinition("running_monthly_sales", "Running monthly sales", reports.running_monthly_sales),
    ReportDefinition("year_over_year_sales", "Year-over-year sales", reports.year_over_year_sales),
    ReportDefinition("customer_lifetime_value", "Customer lifetime value", reports.customer_lifetime_value),
    ReportDefinition(
        "products_above_category_average",
        "Products above category average",
        reports.products_above_category_average,
    ),
    ReportDefinition("loss_making_orders", "Loss-making orders by category", reports.loss_making_orders),
    ReportDefinition(
        "subcategory_pairs",
        "Sub-category co-occurrence",
        reports.subcategory_pairs,
        {"limit": "top_pairs_limit"},
    ),
    ReportDefinition("monthly_composite_report", "Monthly composite report", reports.monthly_composite_report),
]

REPORT_REGISTRY: Dict[str, ReportDefinition] = {r.name: r for r in REPORTS}


class SalesAnalyticsEngine:
    """
    Runs reports over an immutable order line frame.

    The frame's schema is checked once at construction; a missing required
    column raises SchemaMismatchError before any report runs.
    """

    def __init__(self, data: pl.DataFrame, max_workers: Optional[int] = None):
        require_columns(data, REQUIRED_COLUMNS)
        self._data = data
        self._settings = get_settings().analytics
        self.max_workers = max_workers or self._settings.max_workers

    @property
    def data(self) -> pl.DataFrame:
        return self._data

    @staticmethod
    def available_reports() -> List[ReportDefinition]:
        return list(REPORTS)

    def get_definition(self, name: str) -> ReportDefinition:
        try:
            return REPORT_REGISTRY[name]
        except KeyError:
            raise UnknownReportError(name) from None

    def _resolve_params(self, definition: ReportDefinition, overrides: Dict[str, Any]) -> Dict[str, Any]:
        params = {
            param: getattr(self._settings, attr)
            for param, attr in definition.settings_params.items()
        }
        params.update(overrides)
        return params

    def run(self, name: str, **params: Any) -> ReportResult:
        """
        Run a single report.

        Args:
            name: Registered report name
            **params: Overrides for the report's parameters (e.g. limit)

        Raises:
            UnknownReportError: no report with that name
        """
        definition = self.get_definition(name)
        resolved = self._resolve_params(definition, params)

        start_time = time.perf_counter()
        rows = definition.func(self._data, **resolved)
        duration = time.perf_counter() - start_time

        logger.info(
            "Report computed",
            report=name,
            rows=rows.height,
            duration_ms=round(duration * 1000, 2),
        )

        return ReportResult(
            name=definition.name,
            title=definition.title,
            rows=rows,
            duration_seconds=duration,
            params=resolved,
        )

    def run_many(self, names: List[str], parallel: bool = False) -> List[ReportResult]:
        """Run the named reports, results in the order requested"""
        definitions = [self.get_definition(name) for name in names]

        logger.info(
            f"Running {len(definitions)} reports",
            parallel=parallel,
            rows=self._data.height,
        )

        if not parallel or len(definitions) < 2:
            return [self.run(d.name) for d in definitions]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(lambda d: self.run(d.name), definitions))

    def run_all(self, parallel: bool = False) -> List[ReportResult]:
        """Run every registered report in registry order"""
        return self.run_many([r.name for r in REPORTS], parallel=parallel)
