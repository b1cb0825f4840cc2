import logging
from dataclasses import dataclass, field
from typing import List

from firebase_admin import exceptions, messaging

logger = logging.getLogger(__name__)

# FCM rejects multicast messages addressed to more than 500 tokens.
MAX_MULTICAST_TOKENS = 500

# Per-token errors meaning the token will never work again.
STALE_TOKEN_ERRORS = (messaging.UnregisteredError, messaging.SenderIdMismatchError)

STATUS_SENT = 'sent'
STATUS_NO_DEVICES = 'no_devices'
STATUS_FAILED = 'failed'


@dataclass
class DispatchResult:
    user_id: str
    medicine_id: str
    dose_time: str
    status: str
    success_count: int = 0
    failure_count: int = 0
    failed_tokens: List[str] = field(default_factory=list)

    def as_dict(self):
        return {
            'userId': self.user_id,
            'medicineId': self.medicine_id,
            'doseTime': self.dose_time,
            'status': self.status,
            'successCount': self.success_count,
            'failureCount': self.failure_count,
        }


def _token_prefix(token):
    return token[:10] + '...'


def build_reminder_message(event, tokens, app_name='MediLens'):
    """
    The multicast push for one due dose.

    The data payload lets the service worker's notification-click handler
    tie the notification back to the exact dose.
    """
    return messaging.MulticastMessage(
        notification=messaging.Notification(
            title=f"{app_name} Reminder",
            body=f"Time to take {event.name} ({event.dosage})",
        ),
        data={
            'medicineId': str(event.medicine_id),
            'doseTime': str(event.dose_time),
            'userId': str(event.user_id),
        },
        tokens=list(tokens),
    )


class NotificationDispatcher:
    """
    Fans reminder events out to each owner's registered devices.

    Each event gets one delivery attempt per device. Failures stay local to
    the token or the user they happened on.
    """

    def __init__(self, registry, app=None, app_name='MediLens', prune_stale_tokens=False, send=None):
        self.registry = registry
        self.app = app
        self.app_name = app_name
        self.prune_stale_tokens = prune_stale_tokens
        self._send = send or messaging.send_each_for_multicast

    def dispatch(self, event):
        result = DispatchResult(event.user_id, event.medicine_id, event.dose_time, STATUS_SENT)

        try:
            tokens = self.registry.tokens_for_user(event.user_id)
        except Exception as e:
            logger.error(f"Error resolving devices for user {event.user_id}: {e}")
            result.status = STATUS_FAILED
            return result

        if not tokens:
            logger.info(f"No FCM tokens found for user {event.user_id}")
            result.status = STATUS_NO_DEVICES
            return result

        stale_tokens = []
        for start in range(0, len(tokens), MAX_MULTICAST_TOKENS):
            chunk = tokens[start:start + MAX_MULTICAST_TOKENS]
            message = build_reminder_message(event, chunk, self.app_name)
            try:
                response = self._send(message, app=self.app)
            except exceptions.FirebaseError as e:
                logger.error(f"Error sending notification for medicine {event.medicine_id} to user {event.user_id}: {e}")
                result.status = STATUS_FAILED
                result.failure_count += len(chunk)
                result.failed_tokens.extend(chunk)
                continue

            result.success_count += response.success_count
            result.failure_count += response.failure_count
            if response.failure_count > 0:
                for token, resp in zip(chunk, response.responses):
                    if resp.success:
                        continue
                    logger.warning(f"Failed to send to device {_token_prefix(token)} of user {event.user_id}: {resp.exception}")
                    result.failed_tokens.append(token)
                    if isinstance(resp.exception, STALE_TOKEN_ERRORS):
                        stale_tokens.append(token)

        logger.info(
            f"Sent notification to {result.success_count} devices for medicine {event.medicine_id} "
            f"(user {event.user_id}, {result.failure_count} failed)"
        )

        if stale_tokens and self.prune_stale_tokens:
            try:
                self.registry.deactivate_tokens(event.user_id, stale_tokens)
            except Exception as e:
                logger.error(f"Error deactivating stale tokens for user {event.user_id}: {e}")

        return result

    def dispatch_all(self, events):
        """Dispatch every event; one event blowing up never stops the others."""
        results = []
        for event in events:
            try:
                results.append(self.dispatch(event))
            except Exception:
                logger.exception(f"Error sending notification for medicine {event.medicine_id}")
                results.append(DispatchResult(event.user_id, event.medicine_id, event.dose_time, STATUS_FAILED))
        return results
