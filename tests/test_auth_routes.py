import json
from urllib.parse import urlparse

from bloodconnect.models.session import DONOR, HOSPITAL_STAFF, BLOOD_BANK_MANAGER


def login_response(user_type):
    return {'access': 'access-1', 'refresh': 'refresh-1', 'user_type': user_type, 'is_verified': True}


def test_login_page_renders(client):
    response = client.get('/auth/login')
    assert response.status_code == 200
    assert b'Login' in response.data


def test_login_redirects_to_role_dashboard_and_stores_session(client, backend):
    backend.add('POST', '/auth/login/', 200, login_response(BLOOD_BANK_MANAGER))

    response = client.post('/auth/login', data={'username': 'manager', 'password': 'pw'})

    assert response.status_code == 302
    assert urlparse(response.headers['Location']).path == '/admin/dashboard'
    assert backend.calls_to('POST', '/auth/login/')[0].json == {'username': 'manager', 'password': 'pw'}
    with client.session_transaction() as sess:
        assert sess['access_token'] == 'access-1'
        assert sess['refresh_token'] == 'refresh-1'
        assert json.loads(sess['user'])['user_type'] == BLOOD_BANK_MANAGER


def test_login_honours_local_next(client, backend):
    backend.add('POST', '/auth/login/', 200, login_response(DONOR))

    response = client.post('/auth/login?next=/donor/history', data={'username': 'd', 'password': 'pw'})

    assert response.headers['Location'].endswith('/donor/history')


def test_login_ignores_external_next(client, backend):
    backend.add('POST', '/auth/login/', 200, login_response(DONOR))

    response = client.post('/auth/login?next=https://evil.example/', data={'username': 'd', 'password': 'pw'})

    assert urlparse(response.headers['Location']).path == '/donor/dashboard'


def test_login_failure_shows_server_message(client, backend, stored_keys):
    backend.add('POST', '/auth/login/', 401, {'error': 'Invalid username or password'})

    response = client.post('/auth/login', data={'username': 'd', 'password': 'bad'})

    assert response.status_code == 200
    assert b'Invalid username or password' in response.data
    assert stored_keys() == set()


def test_logout_clears_session_and_next_request_is_anonymous(client, backend, login_as, stored_keys):
    login_as(DONOR)

    response = client.get('/auth/logout')

    assert urlparse(response.headers['Location']).path == '/'
    assert stored_keys() == set()
    profile_checks = len(backend.calls_to('GET', '/auth/profile/'))

    response = client.get('/donor/dashboard')

    assert urlparse(response.headers['Location']).path == '/auth/login'
    assert len(backend.calls_to('GET', '/auth/profile/')) == profile_checks


def test_authenticated_user_skips_login_page(client, login_as):
    login_as(DONOR)
    response = client.get('/auth/login')
    assert urlparse(response.headers['Location']).path == '/'


def test_registration_selection(client):
    response = client.post('/auth/register', data={'role': 'hospital'})
    assert urlparse(response.headers['Location']).path == '/auth/register/hospital'


DONOR_FORM = {
    'username': 'newdonor', 'email': 'donor@mail.com', 'phone_number': '9876543210',
    'password': 'Secret123!', 'password2': 'Secret123!', 'full_name': 'New Donor',
    'date_of_birth': '1990-01-15', 'gender': 'F', 'blood_group': 'B+', 'weight': '60',
    'height': '165', 'emergency_contact': '9123456780', 'address': '12 Lake Road',
    'city': 'Chennai', 'state': 'TN', 'country': 'India', 'pincode': '600001',
}


def test_register_donor_posts_payload(client, backend):
    backend.add('POST', '/auth/register/donor/', 201, {'message': 'Donor registered'})

    response = client.post('/auth/register/donor', data=DONOR_FORM)

    assert urlparse(response.headers['Location']).path == '/auth/login'
    payload = backend.calls_to('POST', '/auth/register/donor/')[0].json
    assert payload['date_of_birth'] == '1990-01-15'
    assert payload['blood_group'] == 'B+'
    assert payload['has_chronic_disease'] is False
    assert 'submit' not in payload


def test_register_donor_shows_field_errors_and_keeps_input(client, backend):
    backend.add('POST', '/auth/register/donor/', 400, {
        'username': ['A user with that username already exists.'],
    })

    response = client.post('/auth/register/donor', data=DONOR_FORM)

    assert response.status_code == 200
    assert b'A user with that username already exists.' in response.data
    assert b'Registration failed' in response.data
    assert b'value="New Donor"' in response.data


HOSPITAL_FORM = {
    'name': 'City Hospital', 'username': 'cityhosp', 'email': 'info@cityhospital.org',
    'phone_number': '0441234567', 'license_number': 'LIC-12345', 'address': '1 Main Street',
    'city': 'Chennai', 'state': 'TN', 'country': 'India',
    'staff_username': 'nurse1', 'staff_email': 'nurse@cityhospital.org', 'staff_phone_number': '9000000001',
    'password': 'Secret123!', 'password2': 'Secret123!',
}


def test_register_hospital_sends_nested_staff_user(client, backend):
    backend.add('POST', '/auth/register/hospital/', 201, {'message': 'Hospital registered successfully'})

    response = client.post('/auth/register/hospital', data=HOSPITAL_FORM)

    assert urlparse(response.headers['Location']).path == '/auth/login'
    payload = backend.calls_to('POST', '/auth/register/hospital/')[0].json
    assert payload['name'] == 'City Hospital'
    assert payload['license_number'] == 'LIC-12345'
    assert payload['user'] == {
        'username': 'nurse1', 'email': 'nurse@cityhospital.org', 'phone_number': '9000000001',
        'password': 'Secret123!', 'password2': 'Secret123!', 'user_type': HOSPITAL_STAFF,
    }


def test_register_hospital_maps_nested_errors_to_staff_fields(client, backend):
    backend.add('POST', '/auth/register/hospital/', 400, {
        'error': 'Registration failed',
        'user': {'email': ['Staff email already registered.']},
        'license_number': ['License already registered.'],
    })

    response = client.post('/auth/register/hospital', data=HOSPITAL_FORM)

    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert 'Staff email already registered.' in html
    assert 'License already registered.' in html
    assert 'value="nurse1"' in html


def test_register_hospital_network_failure(client, backend):
    import requests
    backend.fail('POST', '/auth/register/hospital/', requests.ConnectionError('down'))

    response = client.post('/auth/register/hospital', data=HOSPITAL_FORM)

    assert response.status_code == 200
    assert b'Unable to reach the server' in response.data
