from .base import *

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

INTERNAL_IPS = [
    '127.0.0.1',
]

# logs detallados de las apps
LOGGING['loggers']['apps']['level'] = os.environ.get("LOG_LEVEL", "DEBUG")
LOGGING['loggers']['django.db.backends'] = {
    'handlers': ['console'],
    'level': os.environ.get("SQL_LOG_LEVEL", "INFO"),  # DEBUG para ver las consultas SQL
}
