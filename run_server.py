#!/usr/bin/env python
"""
API Server Entry Point

Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py

    Or with Gunicorn:
    gunicorn superstore_analytics.main:app -c gunicorn.conf.py
"""

import argparse
import os


def run_dev_server(port: int):
    """Run development server with auto-reload."""
    import uvicorn

    uvicorn.run(
        "superstore_analytics.main:app",
        host="127.0.0.1",
        port=port,
        reload=True,
        reload_dirs=["superstore_analytics"],
        log_level="debug",
    )


def run_prod_server(port: int):
    """Run production server with Uvicorn directly."""
    import uvicorn

    uvicorn.run(
        "superstore_analytics.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=port,
        workers=int(os.getenv("WORKERS", 2)),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        proxy_headers=True,
        server_header=False,
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Superstore Sales Analytics API Server")
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Run in development mode with auto-reload"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("API_PORT", 8000)),
        help="Port to run on (default: 8000)"
    )

    args = parser.parse_args()

    if args.dev:
        print("Starting development server...")
        run_dev_server(args.port)
    else:
        print("Starting production server with Uvicorn...")
        run_prod_server(args.port)
