from unittest.mock import MagicMock


def make_snapshot(doc_id, user_id, data, exists=True):
    """A stand-in for a Firestore DocumentSnapshot at users/{user_id}/<collection>/{doc_id}."""
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = exists
    snapshot.reference.parent.parent.id = user_id
    snapshot.to_dict.return_value = data
    return snapshot


def medicine(name='Aspirin', dosage='81mg', times=('08:00',), enabled=True, doses=None):
    data = {
        'name': name,
        'dosage': dosage,
        'scheduleTimes': list(times),
        'enableNotifications': enabled,
    }
    if doses is not None:
        data['doses'] = doses
    return data


def fake_store(snapshots=None, error=None):
    store = MagicMock()
    if error is not None:
        store.notification_enabled_medications.side_effect = error
    else:
        store.notification_enabled_medications.return_value = list(snapshots or [])
    return store


def multicast_response(*outcomes):
    """Build a BatchResponse-like object; each outcome is True or an exception."""
    responses = []
    for outcome in outcomes:
        resp = MagicMock()
        resp.success = outcome is True
        resp.exception = None if outcome is True else outcome
        responses.append(resp)
    response = MagicMock()
    response.responses = responses
    response.success_count = sum(1 for r in responses if r.success)
    response.failure_count = len(responses) - response.success_count
    return response
