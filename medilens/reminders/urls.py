from django.urls import path
from .views import MarkDoseTakenView, TriggerReminderPassView

app_name = 'reminders'

urlpatterns = [
    # --- Service worker callback ---
    path('doses/taken/', MarkDoseTakenView.as_view(), name='mark-dose-taken'),

    # --- Backup trigger for the reminder pass ---
    path('dispatch/', TriggerReminderPassView.as_view(), name='dispatch-reminders'),
]
