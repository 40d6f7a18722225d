from collections import namedtuple
import logging

from bloodconnect.utils.api import ApiError

logger = logging.getLogger(__name__)


class Result(namedtuple('Result', ['success', 'data', 'error', 'field_errors'])):
    """Uniform outcome of an auth call. Never carries an exception."""

    @classmethod
    def ok(cls, data=None):
        return cls(True, data, None, {})

    @classmethod
    def failure(cls, error, field_errors=None):
        return cls(False, None, error, field_errors or {})

    @classmethod
    def from_error(cls, error):
        return cls.failure(error.message, error.field_errors)


class AuthGateway:
    """Login, registration and profile calls, normalized into ``Result``."""

    def __init__(self, api):
        self.api = api

    def _call(self, method, path, payload=None, default_error='Request failed'):
        try:
            data = self.api.request(method, path, json=payload, default_error=default_error)
        except ApiError as e:
            return Result.from_error(e)
        except Exception as e:
            logger.exception(f"Unexpected error calling {path}: {str(e)}")
            return Result.failure(default_error)
        return Result.ok(data)

    def login(self, credentials):
        return self._call('POST', '/auth/login/', credentials, default_error='Login failed')

    def register_donor(self, donor_data):
        return self._call('POST', '/auth/register/donor/', donor_data, default_error='Registration failed')

    def register_hospital(self, hospital_data):
        return self._call('POST', '/auth/register/hospital/', hospital_data, default_error='Registration failed')

    def fetch_profile(self):
        return self._call('GET', '/auth/profile/', default_error='Unable to load profile')
