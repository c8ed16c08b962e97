"""
Report API Endpoints

REST API serving the analytics reports as JSON rows.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
import structlog

from superstore_analytics.analytics.engine import SalesAnalyticsEngine
from superstore_analytics.exceptions import UnknownReportError
from superstore_analytics.serving.api.dependencies import get_engine

router = APIRouter()
logger = structlog.get_logger(__name__)


class ReportInfo(BaseModel):
    """Registered report"""
    name: str
    title: str
    parameters: List[str]


class ReportResponse(BaseModel):
    """Computed report"""
    name: str
    title: str
    row_count: int
    duration_ms: float
    params: Dict[str, Any]
    rows: List[Dict[str, Any]]


@router.get("", response_model=List[ReportInfo])
async def list_reports() -> List[ReportInfo]:
    """List every available report."""
    return [
        ReportInfo(name=d.name, title=d.title, parameters=sorted(d.settings_params))
        for d in SalesAnalyticsEngine.available_reports()
    ]


@router.get("/{name}", response_model=ReportResponse)
def get_report(
    name: str,
    limit: Optional[int] = Query(default=None, ge=1, description="Row limit / rank cutoff"),
    engine: SalesAnalyticsEngine = Depends(get_engine),
) -> ReportResponse:
    """
    Compute one report.

    `limit` maps to the report's size parameter (limit or top_n); reports
    without one reject it.
    """
    try:
        definition = engine.get_definition(name)
    except UnknownReportError as e:
        raise HTTPException(status_code=404, detail=str(e))

    params: Dict[str, Any] = {}
    if limit is not None:
        if not definition.settings_params:
            raise HTTPException(status_code=400, detail=f"Report '{name}' does not accept a limit")
        params[next(iter(definition.settings_params))] = limit

    result = engine.run(name, **params)
    logger.debug("Serving report", report=name, rows=result.row_count)

    return ReportResponse(
        name=result.name,
        title=result.title,
        row_count=result.row_count,
        duration_ms=round(result.duration_seconds * 1000, 3),
        params=result.params,
        rows=result.rows.to_dicts(),
    )
