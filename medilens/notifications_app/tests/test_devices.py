from unittest.mock import MagicMock

from django.test import SimpleTestCase

from notifications_app.devices import DeviceRegistry, DeviceToken
from reminders.records import MalformedRecord
from reminders.tests.helpers import make_snapshot


class DeviceRegistryTest(SimpleTestCase):
    def setUp(self):
        self.db = MagicMock()
        self.devices = self.db.collection.return_value.document.return_value.collection.return_value

    def registered(self, *snapshots):
        self.devices.get.return_value = list(snapshots)

    def test_tokens_for_user_reads_device_subcollection(self):
        self.registered(
            make_snapshot('chrome', 'user1', {'token': 'tokA', 'platform': 'web'}),
            make_snapshot('firefox', 'user1', {'token': 'tokB', 'platform': 'web'}),
        )

        tokens = DeviceRegistry(self.db, query_timeout=5).tokens_for_user('user1')

        self.assertEqual(tokens, ['tokA', 'tokB'])
        self.db.collection.assert_called_with('users')
        self.db.collection.return_value.document.assert_called_with('user1')
        self.db.collection.return_value.document.return_value.collection.assert_called_with('devices')
        self.devices.get.assert_called_once_with(timeout=5)

    def test_skips_devices_without_token_and_inactive_devices(self):
        self.registered(
            make_snapshot('a', 'user1', {'platform': 'web'}),
            make_snapshot('b', 'user1', {'token': ''}),
            make_snapshot('c', 'user1', {'token': 'tokC', 'active': False}),
            make_snapshot('d', 'user1', {'token': 'tokD'}),
        )
        self.assertEqual(DeviceRegistry(self.db).tokens_for_user('user1'), ['tokD'])

    def test_same_token_on_two_devices_is_sent_once(self):
        self.registered(
            make_snapshot('a', 'user1', {'token': 'tokA'}),
            make_snapshot('b', 'user1', {'token': 'tokA'}),
        )
        self.assertEqual(DeviceRegistry(self.db).tokens_for_user('user1'), ['tokA'])

    def test_no_devices(self):
        self.registered()
        self.assertEqual(DeviceRegistry(self.db).tokens_for_user('user1'), [])

    def test_deactivate_tokens_flags_matching_devices(self):
        self.registered(
            make_snapshot('chrome', 'user1', {'token': 'tokA'}),
            make_snapshot('firefox', 'user1', {'token': 'tokB'}),
        )

        updated = DeviceRegistry(self.db).deactivate_tokens('user1', ['tokB'])

        self.assertEqual(updated, 1)
        self.devices.document.assert_called_once_with('firefox')
        update = self.devices.document.return_value.update.call_args.args[0]
        self.assertIs(update['active'], False)
        self.assertIn('lastUpdated', update)

    def test_deactivate_nothing(self):
        self.assertEqual(DeviceRegistry(self.db).deactivate_tokens('user1', []), 0)
        self.devices.get.assert_not_called()


class DeviceTokenTest(SimpleTestCase):
    def test_from_snapshot(self):
        device = DeviceToken.from_snapshot(make_snapshot('chrome', 'user1', {'token': 'tokA', 'platform': 'web'}))
        self.assertEqual((device.device_id, device.user_id, device.token), ('chrome', 'user1', 'tokA'))
        self.assertEqual(device.platform, 'web')
        self.assertTrue(device.active)

    def test_missing_token_is_malformed(self):
        with self.assertRaises(MalformedRecord):
            DeviceToken.from_snapshot(make_snapshot('chrome', 'user1', {'platform': 'web'}))

    def test_null_active_flag_counts_as_active(self):
        device = DeviceToken.from_snapshot(make_snapshot('chrome', 'user1', {'token': 'tokA', 'active': None}))
        self.assertTrue(device.active)

    def test_unreadable_timestamp_is_malformed(self):
        with self.assertRaises(MalformedRecord):
            DeviceToken.from_snapshot(make_snapshot('chrome', 'user1', {'token': 'tokA', 'createdAt': 'yesterday'}))
