"""
WSGI config for medilens project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'medilens.settings')

application = get_wsgi_application()
