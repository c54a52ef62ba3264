"""
Gunicorn configuration for production deployment.
Run with: gunicorn app.main:app -c gunicorn.conf.py
"""
import os

# Server socket
bind = f"{os.getenv('HOST', '0.0.0.0')}:{os.getenv('PORT', '5000')}"
backlog = 2048

# Worker processes
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 100

# Worker lifecycle
max_requests = 1000  # Restart worker after 1000 requests
max_requests_jitter = 100  # Stagger restarts

# Timeouts (external job searches wait up to EXTERNAL_JOBS_TIMEOUT)
timeout = 30
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "job_portal_api"

# Server mechanics
daemon = False  # Docker/systemd supervise the process
pidfile = None

# Logging
accesslog = "-"  # Log to stdout
errorlog = "-"   # Log to stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'


# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting job portal API")


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Job portal API ready, spawning %s workers", workers)


def worker_abort(worker):
    """Called when a worker is aborted (usually a request timeout)."""
    worker.log.warning("Worker %s aborted", worker.pid)
