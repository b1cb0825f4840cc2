import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env variables for local development.
# In production, environment variables will be set by the CI/CD system or server config.
load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent # Adjusted path for settings directory


def env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# Application definition

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'rest_framework',
    'corsheaders',
    'django_celery_results',  # For storing task results in the database

    #Local Apps
    'reminders',
    'notifications_app',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

X_FRAME_OPTIONS = 'DENY' # Prevent Clickjacking

ROOT_URLCONF = 'medilens.urls'

TEMPLATES = []

WSGI_APPLICATION = 'medilens.wsgi.application'
ASGI_APPLICATION = 'medilens.asgi.application'

# Database (will be overridden in env-specific settings)
# Only Celery task results live here; medication data lives in Firestore.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}


# Rest Framework Settings
REST_FRAMEWORK = {
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'reminders.authentication.FirebaseAuthentication',
    ),
    'DEFAULT_RENDERER_CLASSES': (
        'rest_framework.renderers.JSONRenderer',
    ),
    'UNAUTHENTICATED_USER': None,
}

# Internationalization
LANGUAGE_CODE = 'en-us'

# Reminder times are wall-clock HH:MM strings in this zone.
TIME_ZONE = os.environ.get('MEDILENS_TIME_ZONE', 'UTC')

USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

APPEND_SLASH = True

# CORS (will be refined in staging.py)
CORS_ALLOWED_ORIGINS = [origin for origin in os.environ.get('FRONTEND_URL', '').split(',') if origin]


# Firebase settings
# FIREBASE_SERVICE_ACCOUNT_KEY holds the JSON key itself (manual runs / CI),
# FIREBASE_CREDENTIALS_PATH points to a key file. With neither set the
# scheduled task falls back to Application Default Credentials.
FIREBASE_SERVICE_ACCOUNT_KEY = os.environ.get('FIREBASE_SERVICE_ACCOUNT_KEY')
FIREBASE_CREDENTIALS_PATH = os.environ.get('FIREBASE_CREDENTIALS_PATH')
FIREBASE_PROJECT_ID = os.environ.get('FIREBASE_PROJECT_ID')
FIRESTORE_DB_ID = os.environ.get('FIRESTORE_DB_ID')  # None means (default)

# Reminder settings
MEDILENS_APP_NAME = os.environ.get('MEDILENS_APP_NAME', 'MediLens')
REMINDERS_QUERY_TIMEOUT = float(os.environ.get('REMINDERS_QUERY_TIMEOUT', '5'))  # seconds
FCM_HTTP_TIMEOUT = float(os.environ.get('FCM_HTTP_TIMEOUT', '5'))  # seconds
REMINDERS_SKIP_TAKEN_DOSES = env_flag('REMINDERS_SKIP_TAKEN_DOSES')
REMINDERS_PRUNE_STALE_TOKENS = env_flag('REMINDERS_PRUNE_STALE_TOKENS')
REMINDERS_TRIGGER_TOKEN = os.environ.get('REMINDERS_TRIGGER_TOKEN')  # unset disables the HTTP trigger

# Celery configuration (common parts)
CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', default='redis://localhost:6379/0')
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE
CELERY_ENABLE_UTC = True
CELERY_RESULT_BACKEND = 'django-db'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,

    'formatters': {
        'verbose': {
            'format': '{asctime} [{levelname}] {name} - {message}',
            'style': '{',
        },
        'simple': {
            'format': '[{levelname}] {name} - {message}',
            'style': '{',
        },
    },

    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },

    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': True,
        },
        'reminders': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'notifications_app': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'firebase': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}
