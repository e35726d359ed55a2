import os

port = os.environ.get('GUNICORN_BINDPORT', '8000')
bind = '0.0.0.0:' + port

# Each worker runs its own space weather scheduler, so keep a single one by default
workers = int(os.environ.get('GUNICORN_PROCESSES', '1'))
worker_class = 'uvicorn.workers.UvicornWorker'
timeout = int(os.environ.get('GUNICORN_TIMEOUT', '60'))

forwarded_allow_ips = '*'
secure_scheme_headers = {'X-Forwarded-Proto': 'https'}
