import os

wsgi_app = 'app:app'
bind = f"0.0.0.0:{os.getenv('PORT', '10000')}"
workers = int(os.getenv('GUNICORN_WORKERS', '2'))
threads = int(os.getenv('GUNICORN_THREADS', '4'))
worker_class = os.getenv('GUNICORN_WORKER_CLASS', 'gthread')
# one outbound provider call per request; the provider's own timeout applies first
timeout = int(os.getenv('GUNICORN_TIMEOUT', '30'))
graceful_timeout = 15
keepalive = 5
accesslog = '-'
errorlog = '-'
loglevel = os.getenv('GUNICORN_LOG_LEVEL', 'info')
