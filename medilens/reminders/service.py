import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from django.conf import settings
from django.utils import timezone

from notifications_app.devices import DeviceRegistry
from notifications_app.dispatcher import (
    DispatchResult, NotificationDispatcher, STATUS_FAILED, STATUS_NO_DEVICES, STATUS_SENT,
)
from .scanner import format_dose_time, scan_due_doses
from .store import MedicationStore, ScheduleQueryError

logger = logging.getLogger(__name__)


@dataclass
class ReminderPassSummary:
    checked_at: datetime
    dose_time: str
    due: int = 0
    results: List[DispatchResult] = field(default_factory=list)

    def _count(self, status):
        return sum(1 for result in self.results if result.status == status)

    @property
    def sent(self):
        return self._count(STATUS_SENT)

    @property
    def failed(self):
        return self._count(STATUS_FAILED)

    @property
    def skipped(self):
        return self._count(STATUS_NO_DEVICES)

    def as_dict(self):
        return {
            'checkedAt': self.checked_at.isoformat(),
            'doseTime': self.dose_time,
            'due': self.due,
            'sent': self.sent,
            'failed': self.failed,
            'skipped': self.skipped,
            'results': [result.as_dict() for result in self.results],
        }


def run_reminder_pass(clients, now=None):
    """
    One scan-and-dispatch pass over every user's medicine schedules.

    ``clients`` is an initialised FirebaseClients handle owned by the caller.
    A failed schedule query aborts the pass before anything is sent.
    """
    now = now or timezone.now()
    summary = ReminderPassSummary(checked_at=now, dose_time=format_dose_time(now))
    logger.info(f"Checking for due medicine reminders at {summary.dose_time}")

    store = MedicationStore(clients.db, query_timeout=settings.REMINDERS_QUERY_TIMEOUT)
    registry = DeviceRegistry(clients.db, query_timeout=settings.REMINDERS_QUERY_TIMEOUT)
    dispatcher = NotificationDispatcher(
        registry,
        app=clients.app,
        app_name=settings.MEDILENS_APP_NAME,
        prune_stale_tokens=settings.REMINDERS_PRUNE_STALE_TOKENS,
    )

    try:
        events = scan_due_doses(store, now=now, skip_taken=settings.REMINDERS_SKIP_TAKEN_DOSES)
    except ScheduleQueryError as e:
        logger.error(f"Error sending medicine reminders: {e}")
        raise

    summary.due = len(events)
    logger.info(f"Found {summary.due} reminders to send")

    summary.results = dispatcher.dispatch_all(events)
    logger.info(
        f"Medicine reminder pass complete: {summary.sent} sent, "
        f"{summary.failed} failed, {summary.skipped} without devices"
    )
    return summary
