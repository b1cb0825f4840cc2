import logging

from django.conf import settings
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from firebase import FirebaseSetupError, firebase_clients
from .authentication import ClosesFirebaseHandle, HasTriggerToken
from .serializers import MarkDoseTakenSerializer
from .service import run_reminder_pass
from .store import MedicationNotFound, MedicationStore, ScheduleQueryError

logger = logging.getLogger(__name__)


class MarkDoseTakenView(ClosesFirebaseHandle, APIView):
    """
    Marks one scheduled dose as taken for the authenticated user.

    Called by the service worker's "Mark as Taken" notification action with
    the ``medicineId`` / ``doseTime`` / ``userId`` carried in the push data.
    The write goes through the Firebase handle that verified the caller
    (``request.auth``).
    URL: /api/v1/reminders/doses/taken/
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        # The service worker may send the notification data as query params.
        serializer = MarkDoseTakenSerializer(data=request.data or request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user_id = request.user.uid
        if data.get('userId') and data['userId'] != user_id:
            return Response({"detail": "Cannot update another user's doses."}, status=status.HTTP_403_FORBIDDEN)

        on_date = data['date'].isoformat() if data.get('date') else None
        store = MedicationStore(request.auth.db, settings.REMINDERS_QUERY_TIMEOUT)
        try:
            dose = store.mark_dose_taken(user_id, data['medicineId'], data['doseTime'], on_date=on_date)
        except MedicationNotFound:
            return Response({"detail": "Medicine not found."}, status=status.HTTP_404_NOT_FOUND)

        return Response({
            "medicineId": data['medicineId'],
            "time": dose.time,
            "status": dose.status,
            "takenAt": dose.taken_at.isoformat() if dose.taken_at else None,
            "date": dose.date,
        }, status=status.HTTP_200_OK)


class TriggerReminderPassView(APIView):
    """
    Runs one reminder pass synchronously. Backup for the scheduled task,
    e.g. for an external cron hitting this URL with the service token.
    URL: /api/v1/reminders/dispatch/
    """
    authentication_classes = []
    permission_classes = [HasTriggerToken]

    def post(self, request):
        try:
            clients = firebase_clients()
        except FirebaseSetupError as e:
            logger.error(f"Firebase setup failed, no reminders sent: {e}")
            return Response({"detail": "Firebase setup failed."}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        with clients:
            try:
                summary = run_reminder_pass(clients)
            except ScheduleQueryError:
                return Response({"detail": "Schedule query failed."}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(summary.as_dict(), status=status.HTTP_200_OK)
