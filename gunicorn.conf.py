"""
Gunicorn Configuration

Runs the reporting API with Uvicorn workers. Each worker loads its own copy
of the dataset at startup.
"""

import os

# Server socket
bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = int(os.getenv("WORKERS", 2))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 10000
max_requests_jitter = 1000
timeout = 120
keepalive = 5
graceful_timeout = 30

proc_name = "superstore-analytics-api"

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
