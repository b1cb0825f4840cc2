import os
from .base import *

DEBUG = False

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('SECRET_KEY') # Must be set as an environment variable in production

ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',') # Must be set in production env

# Database configuration for production (PostgreSQL), holds Celery task results
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get("DB_NAME"),
        'USER': os.environ.get("DB_USER"),
        'PASSWORD': os.environ.get("DB_PASSWORD"),
        'HOST': os.environ.get("DB_HOST", "localhost"),
        'PORT': os.environ.get("DB_PORT", "5432"),
    }
}

# Always use HTTPS in production
SECURE_SSL_REDIRECT = True
SECURE_HSTS_SECONDS = 31536000 # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

# CORS for production: Only allow from your actual frontend domain
CORS_ALLOWED_ORIGINS = [origin for origin in os.environ.get('FRONTEND_URL', '').split(',') if origin]

ENVIRONMENT = 'staging'

# Celery for production
CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL')
CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND', 'django-db')

# Logging in production: keep info/error files next to the project
LOG_DIR = BASE_DIR / 'logs'
LOG_DIR.mkdir(exist_ok=True)

LOGGING['handlers']['file_info'] = {
    'level': 'INFO',
    'class': 'logging.FileHandler',
    'filename': LOG_DIR / 'info.log',
    'formatter': 'verbose',
}
LOGGING['handlers']['file_error'] = {
    'level': 'ERROR',
    'class': 'logging.FileHandler',
    'filename': LOG_DIR / 'error.log',
    'formatter': 'verbose',
}
for _name in ('django', 'reminders', 'notifications_app', 'firebase'):
    LOGGING['loggers'][_name]['handlers'] = ['console', 'file_info', 'file_error']
    LOGGING['loggers'][_name]['level'] = 'INFO'
