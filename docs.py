# Description: This file contains the API documentation for the project.

# api/v1/reminders/ doses/taken/ [name='mark-dose-taken'] : This endpoint is used to mark a scheduled dose as taken.
#   POST {medicineId, doseTime (HH:MM), date (YYYY-MM-DD, optional), userId (optional)}
#   Auth: Authorization: Bearer <Firebase ID token>. Also accepts the fields as query params (service worker).
#   Client change: the service worker's "Mark as Taken" fetch must now send the Authorization header
#   (the user's current ID token); unauthenticated calls get 401.

# api/v1/reminders/ dispatch/ [name='dispatch-reminders'] : This endpoint is used to run one reminder pass now.
#   POST, header X-Reminders-Trigger-Token: <REMINDERS_TRIGGER_TOKEN>. Returns the pass summary.

# Scheduled task: reminders.tasks.send_medicine_reminders, every minute via Celery Beat.
#   celery -A medilens worker -l info
#   celery -A medilens beat -l info

# Management command: python manage.py send_reminders [--credentials PATH] [--at HH:MM]
#   Manual/backup run authenticated with FIREBASE_SERVICE_ACCOUNT_KEY or a key file.
#   Exits non-zero if setup or the schedule query fails.

# Push payload (FCM multicast, one per due dose):
#   notification: {title: "<MEDILENS_APP_NAME> Reminder", body: "Time to take <name> (<dosage>)"}
#   data: {medicineId, doseTime, userId}
