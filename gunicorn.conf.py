# Gunicorn configuration for the Job Board API
# gunicorn jobboard.main:app -c gunicorn.conf.py

import os

# Bind to the port provided by the host
bind = f"0.0.0.0:{os.getenv('PORT', '10000')}"

# Request handlers are short CRUD calls; scale workers with the box
workers = int(os.getenv("WEB_CONCURRENCY", "2"))

# FastAPI needs an ASGI worker
worker_class = "uvicorn.workers.UvicornWorker"

timeout = 30

# Graceful timeout
graceful_timeout = 30

# Keep alive
keepalive = 5

# Log level
loglevel = "info"

# Access log
accesslog = "-"

# Error log
errorlog = "-"
