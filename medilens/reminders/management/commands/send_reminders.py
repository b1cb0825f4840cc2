from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from firebase import FirebaseSetupError, firebase_clients
from reminders.records import is_dose_time
from reminders.service import run_reminder_pass
from reminders.store import ScheduleQueryError


class Command(BaseCommand):
    help = (
        'Run one medicine reminder pass now. Manual/backup path for the '
        'scheduled task; authenticates with a service account key.'
    )

    def add_arguments(self, parser):
        parser.add_argument(
            '--credentials',
            type=str,
            help='Path to a service account key file (default: FIREBASE_SERVICE_ACCOUNT_KEY / FIREBASE_CREDENTIALS_PATH)',
        )
        parser.add_argument(
            '--at',
            type=str,
            help='Check doses for this HH:MM today instead of the current minute',
        )

    def handle(self, *args, **options):
        now = timezone.now()
        if options['at']:
            if not is_dose_time(options['at']):
                raise CommandError('Invalid --at format. Use HH:MM')
            hour, minute = (int(part) for part in options['at'].split(':'))
            now = timezone.localtime(now).replace(hour=hour, minute=minute, second=0, microsecond=0)

        self.stdout.write('Checking for due medicine reminders')
        try:
            clients = firebase_clients(
                credentials_path=options['credentials'],
                allow_default=False,
            )
        except FirebaseSetupError as e:
            raise CommandError(f'Firebase setup failed: {e}')

        with clients:
            try:
                summary = run_reminder_pass(clients, now=now)
            except ScheduleQueryError as e:
                raise CommandError(f'Reminder pass failed: {e}')

        self.stdout.write(
            f'Found {summary.due} reminders for {summary.dose_time}: '
            f'{summary.sent} sent, {summary.failed} failed, {summary.skipped} without devices.'
        )
        self.stdout.write(self.style.SUCCESS('Script completed.'))
