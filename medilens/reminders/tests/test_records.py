from datetime import datetime, timezone as dt_timezone

from django.test import SimpleTestCase, override_settings

from reminders.records import (
    DoseStatus, MalformedRecord, Medication, ReminderEvent, is_dose_time,
)
from reminders.tests.helpers import make_snapshot, medicine


class MedicationParsingTest(SimpleTestCase):
    def test_from_snapshot_reads_owner_from_document_path(self):
        med = Medication.from_snapshot(make_snapshot('med1', 'user1', medicine()))

        self.assertEqual(med.id, 'med1')
        self.assertEqual(med.user_id, 'user1')
        self.assertEqual(med.name, 'Aspirin')
        self.assertEqual(med.dosage, '81mg')
        self.assertEqual(med.schedule_times, ('08:00',))
        self.assertTrue(med.enable_notifications)

    def test_missing_schedule_times_is_malformed(self):
        data = {'name': 'Aspirin', 'dosage': '81mg', 'enableNotifications': True}
        with self.assertRaises(MalformedRecord):
            Medication.from_snapshot(make_snapshot('med1', 'user1', data))

    def test_empty_document_is_malformed(self):
        with self.assertRaises(MalformedRecord):
            Medication.from_snapshot(make_snapshot('med1', 'user1', None))

    def test_schedule_times_must_be_a_list(self):
        with self.assertRaises(MalformedRecord):
            Medication.from_dict('med1', 'user1', {'scheduleTimes': '08:00'})

    def test_null_schedule_entry_is_malformed(self):
        with self.assertRaises(MalformedRecord):
            Medication.from_dict('med1', 'user1', medicine(times=['08:00', None]))

    def test_schedule_times_are_distinct_slots(self):
        data = medicine(times=['20:00', '08:00', '20:00'])
        med = Medication.from_dict('med1', 'user1', data)
        self.assertEqual(med.schedule_times, ('20:00', '08:00'))

    def test_null_enable_notifications_is_off(self):
        data = medicine()
        data['enableNotifications'] = None
        self.assertFalse(Medication.from_dict('med1', 'user1', data).enable_notifications)

    def test_missing_display_fields_default_to_empty(self):
        med = Medication.from_dict('med1', 'user1', {'scheduleTimes': ['08:00']})
        self.assertEqual(med.name, '')
        self.assertEqual(med.dosage, '')
        self.assertFalse(med.enable_notifications)

    def test_malformed_dose_entries_are_dropped(self):
        data = medicine(doses=[{'status': 'taken'}, 'junk', {'time': '08:00', 'status': 'taken'}])
        med = Medication.from_dict('med1', 'user1', data)
        self.assertEqual(len(med.doses), 1)


@override_settings(TIME_ZONE='UTC')
class DoseStatusTest(SimpleTestCase):
    def test_last_written_record_governs(self):
        data = medicine(doses=[
            {'time': '08:00', 'status': 'taken'},
            {'time': '08:00', 'status': 'pending'},
        ])
        med = Medication.from_dict('med1', 'user1', data)
        self.assertEqual(med.dose_status('08:00').status, 'pending')
        self.assertFalse(med.is_dose_taken('08:00'))

    def test_dated_records_only_match_their_day(self):
        data = medicine(doses=[{'time': '08:00', 'status': 'taken', 'date': '2025-01-05'}])
        med = Medication.from_dict('med1', 'user1', data)
        self.assertFalse(med.is_dose_taken('08:00', on_date='2025-01-06'))
        self.assertTrue(med.is_dose_taken('08:00', on_date='2025-01-05'))

    def test_undated_record_belongs_to_the_day_it_was_taken(self):
        data = medicine(doses=[{'time': '08:00', 'status': 'taken', 'takenAt': datetime(2025, 1, 5, 8, 2, tzinfo=dt_timezone.utc)}])
        med = Medication.from_dict('med1', 'user1', data)
        self.assertTrue(med.is_dose_taken('08:00', on_date='2025-01-05'))
        self.assertFalse(med.is_dose_taken('08:00', on_date='2025-01-06'))
        self.assertTrue(med.is_dose_taken('08:00'))

    @override_settings(TIME_ZONE='America/New_York')
    def test_taken_at_day_uses_local_time(self):
        # 02:00 UTC on the 6th is still the evening of the 5th in New York.
        dose = DoseStatus('22:00', 'taken', datetime(2025, 1, 6, 2, 0, tzinfo=dt_timezone.utc))
        self.assertTrue(dose.matches('22:00', on_date='2025-01-05'))

    def test_undated_record_without_taken_at_matches_no_day(self):
        dose = DoseStatus('08:00', 'taken')
        self.assertFalse(dose.matches('08:00', on_date='2025-01-06'))
        self.assertTrue(dose.matches('08:00'))

    def test_unknown_status_is_pending(self):
        dose = DoseStatus.from_dict({'time': '08:00', 'status': 'skipped'})
        self.assertEqual(dose.status, 'pending')

    def test_taken_at_string_is_parsed(self):
        dose = DoseStatus.from_dict({'time': '08:00', 'status': 'taken', 'takenAt': '2025-01-06T08:01:00+00:00'})
        self.assertEqual(dose.taken_at, datetime(2025, 1, 6, 8, 1, tzinfo=dt_timezone.utc))

    def test_to_document_omits_unset_fields(self):
        self.assertEqual(DoseStatus('08:00').to_document(), {'time': '08:00', 'status': 'pending'})


class HelpersTest(SimpleTestCase):
    def test_is_dose_time(self):
        self.assertTrue(is_dose_time('08:00'))
        self.assertTrue(is_dose_time('23:59'))
        self.assertFalse(is_dose_time('8:00'))
        self.assertFalse(is_dose_time('24:00'))
        self.assertFalse(is_dose_time(None))

    def test_reminder_event_exposes_display_fields(self):
        med = Medication.from_dict('med1', 'user1', medicine())
        event = ReminderEvent('user1', 'med1', '08:00', med)
        self.assertEqual((event.name, event.dosage), ('Aspirin', '81mg'))
