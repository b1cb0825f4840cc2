"""
Typed views of the medication documents stored in Firestore.

Documents live at ``users/{userId}/medicines/{medicineId}`` and have no
enforced schema, so everything is validated here, at the read boundary, with
the document serializers. A document that cannot be used raises
:class:`MalformedRecord`, which callers treat as "skip this record" rather
than as a failure of the whole batch.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from django.utils import timezone

from .serializers import DOSE_TIME_RE, DoseDocumentSerializer, MedicineDocumentSerializer

STATUS_PENDING = 'pending'
STATUS_TAKEN = 'taken'
DOSE_STATUSES = (STATUS_PENDING, STATUS_TAKEN)


class MalformedRecord(ValueError):
    """A stored document is missing fields we need."""


def is_dose_time(value) -> bool:
    return isinstance(value, str) and bool(DOSE_TIME_RE.match(value))


def owner_id(snapshot) -> str:
    """Recover the user id from a ``users/{userId}/<collection>/{docId}`` snapshot."""
    parent_doc = snapshot.reference.parent.parent
    if parent_doc is None:
        raise MalformedRecord(f"Document {snapshot.id} is not nested under a user")
    return parent_doc.id


def validated_document(serializer_class, data, label):
    """Run a document serializer over raw Firestore data, raising MalformedRecord on errors."""
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise MalformedRecord(f"{label} is malformed: {serializer.errors}")
    return serializer.validated_data


def local_date(moment: datetime) -> str:
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    return moment.date().isoformat()


@dataclass(frozen=True)
class DoseStatus:
    time: str
    status: str = STATUS_PENDING
    taken_at: Optional[datetime] = None
    date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DoseStatus':
        data = validated_document(DoseDocumentSerializer, data, "Dose entry")
        status = data.get('status')
        return cls(
            time=data['time'],
            status=status if status in DOSE_STATUSES else STATUS_PENDING,
            taken_at=data.get('takenAt'),
            date=data.get('date') or None,
        )

    @property
    def is_taken(self) -> bool:
        return self.status == STATUS_TAKEN

    @property
    def day(self) -> Optional[str]:
        """The day this record is about: its ``date``, else the local day of ``takenAt``."""
        if self.date is not None:
            return self.date
        if self.taken_at is not None:
            return local_date(self.taken_at)
        return None

    def matches(self, time: str, on_date: Optional[str] = None) -> bool:
        if self.time != time:
            return False
        return on_date is None or self.day == on_date

    def to_document(self) -> Dict[str, Any]:
        doc = {'time': self.time, 'status': self.status}
        if self.taken_at is not None:
            doc['takenAt'] = self.taken_at
        if self.date is not None:
            doc['date'] = self.date
        return doc


@dataclass(frozen=True)
class Medication:
    id: str
    user_id: str
    name: str
    dosage: str
    schedule_times: Tuple[str, ...]
    enable_notifications: bool = False
    doses: Tuple[DoseStatus, ...] = field(default_factory=tuple)

    @classmethod
    def from_snapshot(cls, snapshot) -> 'Medication':
        data = snapshot.to_dict()
        if not data:
            raise MalformedRecord(f"Medicine {snapshot.id} has no data")
        return cls.from_dict(snapshot.id, owner_id(snapshot), data)

    @classmethod
    def from_dict(cls, medicine_id: str, user_id: str, data: Dict[str, Any]) -> 'Medication':
        data = validated_document(MedicineDocumentSerializer, data, f"Medicine {medicine_id}")

        doses = []
        for entry in data.get('doses') or ():
            try:
                doses.append(DoseStatus.from_dict(entry))
            except MalformedRecord:
                continue

        return cls(
            id=medicine_id,
            user_id=user_id,
            name=data.get('name') or '',
            dosage=data.get('dosage') or '',
            # A list of slots, but each distinct time is one slot.
            schedule_times=tuple(dict.fromkeys(data['scheduleTimes'])),
            enable_notifications=bool(data.get('enableNotifications')),
            doses=tuple(doses),
        )

    def dose_status(self, time: str, on_date: Optional[str] = None) -> Optional[DoseStatus]:
        """The record governing one dose slot; later entries win."""
        governing = None
        for dose in self.doses:
            if dose.matches(time, on_date):
                governing = dose
        return governing

    def is_dose_taken(self, time: str, on_date: Optional[str] = None) -> bool:
        dose = self.dose_status(time, on_date)
        return dose is not None and dose.is_taken


@dataclass(frozen=True)
class ReminderEvent:
    """A dose that is due now. Lives only for the duration of one pass."""
    user_id: str
    medicine_id: str
    dose_time: str
    medication: Medication

    @property
    def name(self) -> str:
        return self.medication.name

    @property
    def dosage(self) -> str:
        return self.medication.dosage
