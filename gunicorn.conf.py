# use in gunicorn as: env/bin/gunicorn blobtree.api:app -c gunicorn.conf.py

# Workers
workers = 5
worker_class = "uvicorn.workers.UvicornWorker"

# Socket
bind = "localhost:5001"

# Logging
# loglevel = 'debug'
# accesslog = '/tmp/blobtree_access_log'
# errorlog =  '/tmp/blobtree_error_log'
