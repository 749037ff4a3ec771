"""
Gunicorn Configuration for Production

Run with: gunicorn main:app -c gunicorn.conf.py

Each submission launches its own Chromium (~300MB) unless BROWSERLESS_API_KEY
points at a remote browser, so keep workers low on small instances.

RECOMMENDED SETTINGS BY INSTANCE (local Chromium):
- 1GB RAM:  GUNICORN_WORKERS=1
- 2GB RAM:  GUNICORN_WORKERS=2
- 4GB RAM:  GUNICORN_WORKERS=3
"""

import multiprocessing
import os

# =============================================================================
# Server Socket
# =============================================================================

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"
backlog = 2048

# =============================================================================
# Worker Processes
# =============================================================================

# LOW_MEMORY_MODE: Set to "false" when browsers run remotely
LOW_MEMORY_MODE = os.getenv("LOW_MEMORY_MODE", "true").lower() == "true"

if LOW_MEMORY_MODE:
    workers = int(os.getenv("GUNICORN_WORKERS", "1"))
else:
    workers = int(os.getenv("GUNICORN_WORKERS", min(2 * multiprocessing.cpu_count() + 1, 4)))

# Use Uvicorn worker for async support
worker_class = "uvicorn.workers.UvicornWorker"

# A submission with three retries can take well over a minute:
# up to 4 attempts of ~60s navigation plus 5s + 10s + 15s backoff
timeout = 300
graceful_timeout = 30
keepalive = 5

max_requests = 500 if LOW_MEMORY_MODE else 1000
max_requests_jitter = 50 if LOW_MEMORY_MODE else 100

# =============================================================================
# Logging
# =============================================================================

accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = os.getenv("LOG_LEVEL", "info")

access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# =============================================================================
# Process Naming
# =============================================================================

proc_name = "tcvs-api"
