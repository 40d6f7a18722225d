from urllib.parse import urlparse

import pytest

from bloodconnect.models.session import DONOR


def notification(id, patient):
    return {
        'id': id,
        'status': 'pending',
        'request_details': {
            'patient_name': patient, 'hospital_name': 'City Hospital', 'hospital_city': 'Chennai',
            'units_required': 2, 'urgency_level': 'high', 'diagnosis': 'Surgery',
        },
    }


@pytest.fixture
def donor(login_as):
    login_as(DONOR, 'dina', {'blood_group': 'O-'})


def test_dashboard_joins_profile_and_history(client, backend, donor):
    backend.add('GET', '/donors/donor/profile/', 200, {'full_name': 'Dina', 'blood_group': 'O-'})
    backend.add('GET', '/donors/donor/donation-history/', 200, {'donations': [
        {'id': 1, 'patient_name': 'Ravi', 'hospital_name': 'City Hospital', 'units_donated': 2},
        {'id': 2, 'patient_name': 'Mira', 'hospital_name': 'General', 'units_donated': 1},
    ]})
    backend.add('GET', '/requests/notifications/donor/', 200, {'notifications': [notification(5, 'Asha')]})

    response = client.get('/donor/dashboard')

    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert 'Donation for Ravi' in html
    assert '<h3>3</h3>' in html
    assert '<h3>9</h3>' in html
    assert '<h3>O-</h3>' in html


def test_dashboard_survives_backend_failure(client, backend, donor):
    backend.add('GET', '/donors/donor/profile/', 500, {'error': 'boom'})
    backend.add('GET', '/donors/donor/donation-history/', 200, {'donations': []})

    response = client.get('/donor/dashboard')

    assert response.status_code == 200
    assert b'Failed to load dashboard data' in response.data
    assert b'No donations yet.' in response.data


def test_notifications_list(client, backend, donor):
    backend.add('GET', '/requests/notifications/donor/', 200, {'notifications': [
        notification(1, 'Asha'), notification(2, 'Bala'),
    ]})

    response = client.get('/donor/notifications')

    html = response.get_data(as_text=True)
    assert 'Blood Request for Asha' in html
    assert 'Blood Request for Bala' in html
    assert 'HIGH' in html


def test_accepting_removes_exactly_that_notification(client, backend, donor):
    # The list endpoint still returns the answered entry; the view must drop it
    backend.add('GET', '/requests/notifications/donor/', 200, {'notifications': [
        notification(1, 'Asha'), notification(2, 'Bala'), notification(3, 'Chitra'),
    ]})
    backend.add('POST', '/requests/notifications/2/respond/', 200, {'message': 'ok'})

    response = client.post('/donor/notifications/2/respond', data={'response': 'accept'})

    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert 'id="notification-1"' in html
    assert 'id="notification-2"' not in html
    assert 'id="notification-3"' in html
    assert backend.calls_to('POST', '/requests/notifications/2/respond/')[0].json == {'response': 'accept'}


def test_decline_is_sent_as_decline(client, backend, donor):
    backend.add('GET', '/requests/notifications/donor/', 200, {'notifications': [notification(4, 'Dev')]})
    backend.add('POST', '/requests/notifications/4/respond/', 200, {})

    response = client.post('/donor/notifications/4/respond', data={'response': 'decline'})

    assert b'You declined the request.' in response.data
    assert b'id="notification-4"' not in response.data
    assert backend.calls_to('POST', '/requests/notifications/4/respond/')[0].json == {'response': 'decline'}


def test_failed_response_keeps_the_notification(client, backend, donor):
    backend.add('GET', '/requests/notifications/donor/', 200, {'notifications': [notification(1, 'Asha')]})
    backend.add('POST', '/requests/notifications/1/respond/', 400, {'error': 'Request already fulfilled'})

    response = client.post('/donor/notifications/1/respond', data={'response': 'accept'})

    assert b'Request already fulfilled' in response.data
    assert b'id="notification-1"' in response.data


def test_unknown_response_is_rejected_without_calling_backend(client, backend, donor):
    backend.add('GET', '/requests/notifications/donor/', 200, {'notifications': [notification(1, 'Asha')]})

    response = client.post('/donor/notifications/1/respond', data={'response': 'maybe'})

    assert b'Invalid response.' in response.data
    assert backend.calls_to('POST', '/requests/notifications/1/respond/') == []


def test_profile_is_prefilled(client, backend, donor):
    backend.add('GET', '/donors/donor/profile/', 200, {
        'full_name': 'Dina Das', 'phone_number': '9876543210', 'city': 'Madurai', 'blood_group': 'O-',
    })

    response = client.get('/donor/profile')

    html = response.get_data(as_text=True)
    assert 'value="Dina Das"' in html
    assert 'value="Madurai"' in html


def test_profile_update(client, backend, donor):
    backend.add('PUT', '/donors/donor/profile/', 200, {})
    backend.add('GET', '/donors/donor/profile/', 200, {'full_name': 'Dina D', 'phone_number': '9876543210'})

    response = client.post('/donor/profile', data={
        'full_name': 'Dina D', 'phone_number': '9876543210', 'city': 'Madurai', 'is_available': 'y',
    }, follow_redirects=True)

    assert b'Profile updated successfully!' in response.data
    payload = backend.calls_to('PUT', '/donors/donor/profile/')[0].json
    assert payload['full_name'] == 'Dina D'
    assert payload['is_available'] is True
    assert payload['city'] == 'Madurai'


def test_profile_update_failure(client, backend, donor):
    backend.add('PUT', '/donors/donor/profile/', 400, {'phone_number': ['Invalid phone.']})

    response = client.post('/donor/profile', data={'full_name': 'Dina D', 'phone_number': '9876543210'})

    assert response.status_code == 200
    assert b'Error updating profile' in response.data
    assert b'value="Dina D"' in response.data


def test_history(client, backend, donor):
    backend.add('GET', '/donors/donor/donation-history/', 200, {'donations': [
        {'id': 1, 'patient_name': 'Ravi', 'hospital_name': 'City Hospital', 'units_donated': 1,
         'donation_date': '2024-03-02T09:30:00Z', 'notes': 'Smooth donation'},
    ]})

    response = client.get('/donor/history')

    html = response.get_data(as_text=True)
    assert 'Donation for Ravi' in html
    assert '02 Mar 2024' in html
    assert 'Smooth donation' in html


def test_history_read_failure_shows_banner(client, backend, donor):
    backend.add('GET', '/donors/donor/donation-history/', 503, None)

    response = client.get('/donor/history')

    assert response.status_code == 200
    assert b'Failed to load donation history' in response.data
    assert b'No donations recorded yet.' in response.data


def test_token_expiring_mid_session_forces_logout(client, backend, donor, stored_keys):
    backend.add('GET', '/donors/donor/donation-history/', 401, {'detail': 'Token expired'})

    response = client.get('/donor/history')

    assert urlparse(response.headers['Location']).path == '/auth/login'
    assert stored_keys() == set()
