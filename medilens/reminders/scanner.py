import logging

from django.utils import timezone

from .records import MalformedRecord, Medication, ReminderEvent, local_date

logger = logging.getLogger(__name__)


def format_dose_time(moment=None):
    """Wall-clock ``HH:MM`` of ``moment`` (default: now) in the configured time zone."""
    moment = moment or timezone.now()
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    return moment.strftime('%H:%M')


def scan_due_doses(store, now=None, skip_taken=False):
    """
    Find every dose, across all users, scheduled for the current minute.

    Matching is exact: the current time formatted as ``HH:MM`` must appear in
    the medication's ``scheduleTimes``. A minute that is never scanned is
    never reminded about. Records that cannot be parsed are skipped.

    With ``skip_taken`` a dose already marked taken today is left out.

    Raises ScheduleQueryError if the store query fails.
    """
    now = now or timezone.now()
    dose_time = format_dose_time(now)
    today = local_date(now)

    events = []
    for snapshot in store.notification_enabled_medications():
        try:
            medication = Medication.from_snapshot(snapshot)
        except MalformedRecord as e:
            logger.debug(f"Skipping medicine record: {e}")
            continue

        if not medication.enable_notifications or dose_time not in medication.schedule_times:
            continue

        if skip_taken and medication.is_dose_taken(dose_time, on_date=today):
            logger.debug(f"Dose {dose_time} of medicine {medication.id} already taken, not reminding")
            continue

        events.append(ReminderEvent(
            user_id=medication.user_id,
            medicine_id=medication.id,
            dose_time=dose_time,
            medication=medication,
        ))

    return events
