from .base import *

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

# SECURITY WARNING: keep the secret key used in production secret!
# Use a development-specific key or a placeholder for local dev
SECRET_KEY = os.environ.get('SECRET_KEY', 'django-insecure-medilens-development-key')

ALLOWED_HOSTS = ['localhost', '127.0.0.1', 'testserver']

# Example: If you have different CORS origins for local development
CORS_ALLOWED_ORIGINS = [
    'http://localhost:5173', # Vite dev server
    'http://127.0.0.1:5173',
]

# Celery for local development uses a local Redis
CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', default='redis://localhost:6379/0')

# More verbose logging in development
LOGGING['loggers']['reminders']['level'] = 'DEBUG'
LOGGING['loggers']['notifications_app']['level'] = 'DEBUG'
