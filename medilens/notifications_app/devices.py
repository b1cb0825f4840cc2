"""
Device registry: push endpoints per user, stored at ``users/{userId}/devices/{deviceId}``.

Clients register and refresh their own tokens directly in Firestore; this
module only reads them, and can flag tokens the push service rejected.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.utils import timezone

from reminders.records import MalformedRecord, owner_id, validated_document
from .serializers import DeviceDocumentSerializer

logger = logging.getLogger(__name__)

DEVICES_COLLECTION = 'devices'


@dataclass(frozen=True)
class DeviceToken:
    device_id: str
    user_id: str
    token: str
    platform: Optional[str] = None
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    active: bool = True

    @classmethod
    def from_snapshot(cls, snapshot) -> 'DeviceToken':
        data = validated_document(DeviceDocumentSerializer, snapshot.to_dict() or {}, f"Device {snapshot.id}")
        return cls(
            device_id=snapshot.id,
            user_id=owner_id(snapshot),
            token=data['token'],
            platform=data.get('platform'),
            created_at=data.get('createdAt'),
            last_updated=data.get('lastUpdated'),
            active=data.get('active') is not False,
        )


class DeviceRegistry:
    def __init__(self, db, query_timeout=None):
        self.db = db
        self.query_timeout = query_timeout

    def _devices(self, user_id):
        return self.db.collection('users').document(user_id).collection(DEVICES_COLLECTION)

    def devices_for_user(self, user_id):
        devices = []
        for snapshot in self._devices(user_id).get(timeout=self.query_timeout):
            try:
                devices.append(DeviceToken.from_snapshot(snapshot))
            except MalformedRecord as e:
                logger.debug(f"Skipping device record: {e}")
        return devices

    def tokens_for_user(self, user_id):
        """Distinct tokens of the user's active devices, in registry order."""
        tokens = (device.token for device in self.devices_for_user(user_id) if device.active)
        return list(dict.fromkeys(tokens))

    def deactivate_tokens(self, user_id, tokens):
        """Flag devices holding any of ``tokens`` as inactive. Documents are kept."""
        stale = set(tokens)
        if not stale:
            return 0

        updated = 0
        now = timezone.now()
        for device in self.devices_for_user(user_id):
            if device.token in stale and device.active:
                self._devices(user_id).document(device.device_id).update({
                    'active': False,
                    'lastUpdated': now,
                })
                updated += 1
        if updated:
            logger.info(f"Deactivated {updated} stale device(s) for user {user_id}")
        return updated
