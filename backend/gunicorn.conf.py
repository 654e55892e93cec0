import os

# Entry point: the app factory, built once per worker
wsgi_app = "signin:create_app()"

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
# Must exceed IDP_TIMEOUT_SECONDS so a slow key fetch surfaces as a 504
timeout = 30
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust proxy headers (ProxyFix handles one hop in the app)
forwarded_allow_ips = "*"
proxy_protocol = False
