"""
ASGI config for medilens project.

It exposes the ASGI callable as a module-level variable named ``application``.
The only HTTP surface is the reminders API (dose acknowledgement and the
backup dispatch trigger).
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'medilens.settings')

application = get_asgi_application()
