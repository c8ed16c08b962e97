"""
ASGI entry point for the Superstore Sales Analytics API.

    uvicorn superstore_analytics.main:app
"""

from superstore_analytics.config.logging import configure_logging
from superstore_analytics.serving.api import create_app

configure_logging()

app = create_app()
