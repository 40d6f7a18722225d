from collections import namedtuple
import json as jsonlib

import pytest

from bloodconnect import create_app

BASE_URL = 'http://api.test'

Call = namedtuple('Call', ['method', 'path', 'json', 'params', 'headers'])


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body
        self.content = b'' if body is None else jsonlib.dumps(body).encode()

    def json(self):
        if self._body is None:
            raise ValueError('No JSON body')
        return self._body


class FakeBackend:
    """Stands in for requests.Session, answering from a table of canned responses."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, status=200, body=None):
        self.routes[(method, path)] = (status, body)

    def fail(self, method, path, exc):
        self.routes[(method, path)] = (exc, None)

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append(Call(method, path, json, params, headers or {}))
        if (method, path) not in self.routes:
            return FakeResponse(404, {'error': 'Not found'})
        status, body = self.routes[(method, path)]
        if isinstance(status, Exception):
            raise status
        if callable(body):
            body = body(json)
        return FakeResponse(status, body)

    def calls_to(self, method, path):
        return [call for call in self.calls if call.method == method and call.path == path]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def app(backend):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'WTF_CSRF_ENABLED': False,
        'API_BASE_URL': BASE_URL,
        'API_SESSION': backend,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client, backend):
    """Put a stored session in the cookie and make the profile check accept it."""
    def _login(user_type, username='tester', profile=None):
        fetched = {'username': username, 'user_type': user_type}
        fetched.update(profile or {})
        backend.add('GET', '/auth/profile/', 200, fetched)
        with client.session_transaction() as sess:
            sess['access_token'] = 'access-token'
            sess['refresh_token'] = 'refresh-token'
            sess['user'] = jsonlib.dumps({'username': username, 'user_type': user_type, 'is_verified': True})
    return _login


@pytest.fixture
def stored_keys(client):
    """Auth entries currently held in the session cookie."""
    def _keys():
        with client.session_transaction() as sess:
            return {key for key in ('access_token', 'refresh_token', 'user') if key in sess}
    return _keys
