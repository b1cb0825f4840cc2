import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'medilens.settings')

app = Celery('medilens')

# namespace='CELERY' means all celery-related configuration keys
# should have a `CELERY_` prefix.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat is the time-based trigger for medicine reminders.
app.conf.beat_schedule = {
    # Scan schedules and push due reminders at the start of every minute
    'send-medicine-reminders': {
        'task': 'reminders.tasks.send_medicine_reminders',
        'schedule': crontab(),  # every minute
        # A run that has not started within the minute is stale: the next
        # beat tick covers the next minute's doses.
        'options': {'expires': 55},
    },
}
