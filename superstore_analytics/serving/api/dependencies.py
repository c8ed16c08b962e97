"""
API Dependencies
"""

from fastapi import HTTPException, Request

from superstore_analytics.analytics.engine import SalesAnalyticsEngine


def get_engine(request: Request) -> SalesAnalyticsEngine:
    """Engine loaded at startup; 503 until a dataset is available"""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Dataset not loaded")
    return engine
