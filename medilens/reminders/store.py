"""
Firestore access for medication schedules.

Layout: ``users/{userId}/medicines/{medicineId}``. The reminder scan reads
across every user with a collection-group query; the only write is the dose
acknowledgement, which comes from a user action.
"""
import logging

from django.utils import timezone
from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .records import DoseStatus, MalformedRecord, Medication, STATUS_TAKEN

logger = logging.getLogger(__name__)

MEDICINES_COLLECTION = 'medicines'


class ScheduleQueryError(RuntimeError):
    """The schedule store could not be queried; the pass is abandoned."""


class MedicationNotFound(LookupError):
    pass


class MedicationStore:
    def __init__(self, db, query_timeout=None):
        self.db = db
        self.query_timeout = query_timeout

    def medicine_ref(self, user_id, medicine_id):
        return (
            self.db.collection('users').document(user_id)
            .collection(MEDICINES_COLLECTION).document(medicine_id)
        )

    def notification_enabled_medications(self):
        """
        Snapshots of every user's medicines with notifications enabled.

        A single bounded query; any failure is raised as ScheduleQueryError.
        """
        query = self.db.collection_group(MEDICINES_COLLECTION).where(
            filter=FieldFilter('enableNotifications', '==', True)
        )
        try:
            return list(query.get(timeout=self.query_timeout))
        except Exception as e:
            raise ScheduleQueryError(f"Error querying medicine schedules: {e}") from e

    def get_medication(self, user_id, medicine_id):
        snapshot = self.medicine_ref(user_id, medicine_id).get(timeout=self.query_timeout)
        if not snapshot.exists:
            return None
        return Medication.from_snapshot(snapshot)

    def mark_dose_taken(self, user_id, medicine_id, dose_time, taken_at=None, on_date=None):
        """
        Record a dose as taken, replacing any earlier record for the same slot.

        Runs in a transaction so concurrent acknowledgements from several
        devices leave exactly one record per slot.
        """
        dose = DoseStatus(
            time=dose_time,
            status=STATUS_TAKEN,
            taken_at=taken_at or timezone.now(),
            date=on_date,
        )
        ref = self.medicine_ref(user_id, medicine_id)

        @firestore.transactional
        def upsert_dose(transaction, medicine_ref):
            snapshot = medicine_ref.get(transaction=transaction, timeout=self.query_timeout)
            if not snapshot.exists:
                raise MedicationNotFound(f"Medicine {medicine_id} not found for user {user_id}")

            kept = []
            for entry in (snapshot.to_dict() or {}).get('doses') or []:
                try:
                    if DoseStatus.from_dict(entry).matches(dose_time, on_date):
                        continue
                except MalformedRecord:
                    pass
                kept.append(entry)
            kept.append(dose.to_document())

            transaction.update(medicine_ref, {'doses': kept})

        upsert_dose(self.db.transaction(), ref)
        logger.info(f"Marked dose {dose_time} of medicine {medicine_id} as taken for user {user_id}")
        return dose
