# backend/gunicorn_conf.py

# Gunicorn config file for the check-in API
import os

bind = f"0.0.0.0:{os.getenv('PORT', '8000')}"

# Live sessions are held in process memory, so every request for a session
# must reach the worker that started it.
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "checkin.main:app"

# Settings for running behind a reverse proxy like Nginx
forwarded_allow_ips = "*"

# --- Logging ---
# Access and error logs go to stdout/stderr; the app logs through structlog
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
