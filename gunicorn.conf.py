import os

# Bind to the port provided via the PORT environment variable, defaulting to
# 5000.
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"

# Requests are short form submissions, so plain sync workers are enough.
# The in-process SimpleCache is per worker; set CACHE_TYPE to a shared
# backend before raising the worker count.
worker_class = "sync"
workers = int(os.getenv("WEB_CONCURRENCY", "1"))
timeout = 30

wsgi_app = "run:app"
