from celery import shared_task
import logging

from firebase import FirebaseSetupError, firebase_clients
from .service import run_reminder_pass

# Set up logging for the task
logger = logging.getLogger(__name__)


@shared_task(soft_time_limit=50)  # finish well inside the one-minute beat interval
def send_medicine_reminders():
    """
    Scheduled every minute by Celery Beat.

    No retries: a missed minute is not replayed, the next tick is the retry.
    Setup and schedule-query failures fail the task; per-user send failures
    are only logged. The pass summary is kept as the task result.
    """
    try:
        clients = firebase_clients()
    except FirebaseSetupError as exc:
        logger.critical(f"Firebase setup failed, no reminders sent: {exc}")
        raise

    with clients:
        summary = run_reminder_pass(clients)
    return summary.as_dict()
