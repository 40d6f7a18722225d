from concurrent.futures import ThreadPoolExecutor
import logging

import requests

# Configure logging
logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    The single error shape raised by the REST layer.

    ``message`` is the backend's ``error`` string when it sends one, otherwise
    the default supplied by the caller. ``field_errors`` maps field names
    (``parent.child`` for nested payloads) to lists of messages.
    """

    def __init__(self, message, status_code=None, field_errors=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.field_errors = field_errors or {}

    def __repr__(self):
        return f"ApiError({self.status_code}, '{self.message}')"


class SessionExpired(ApiError):
    """Raised when the backend rejects the access token (HTTP 401)."""


def _collect_field_errors(body, prefix=''):
    errors = {}
    for key, value in body.items():
        if key == 'error' and not prefix:
            continue
        name = f"{prefix}{key}"
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            errors[name] = list(value)
        elif isinstance(value, dict) and not prefix:
            errors.update(_collect_field_errors(value, prefix=f"{name}."))
    return errors


def parse_error(response, default_message):
    """Build an ``ApiError`` from a non-2xx response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    message = default_message
    field_errors = {}
    if isinstance(body, dict):
        if isinstance(body.get('error'), str) and body['error']:
            message = body['error']
        field_errors = _collect_field_errors(body)

    error_class = SessionExpired if response.status_code == 401 else ApiError
    return error_class(message, status_code=response.status_code, field_errors=field_errors)


class ApiClient:
    """
    Thin wrapper over a ``requests.Session`` pointed at the REST backend.
    Adds the bearer token read from durable storage to every call.
    """

    def __init__(self, base_url, token_getter=None, http=None, timeout=10):
        self.base_url = base_url.rstrip('/')
        self.token_getter = token_getter
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def _headers(self):
        headers = {'Accept': 'application/json'}
        token = self.token_getter() if self.token_getter else None
        if token:
            headers['Authorization'] = f"Bearer {token}"
        return headers

    def request(self, method, path, json=None, params=None, default_error='Request failed'):
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {str(e)}")
            raise ApiError('Unable to reach the server') from e

        if not 200 <= response.status_code < 300:
            error = parse_error(response, default_error)
            logger.warning(f"{method} {path} returned {response.status_code}: {error.message}")
            raise error

        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    def get(self, path, **kwargs):
        return self.request('GET', path, **kwargs)

    def post(self, path, json=None, **kwargs):
        return self.request('POST', path, json=json, **kwargs)

    def put(self, path, json=None, **kwargs):
        return self.request('PUT', path, json=json, **kwargs)


def gather(*calls):
    """
    Run zero-argument callables concurrently and return their results in
    argument order once every call has finished.
    """
    if not calls:
        return []
    with ThreadPoolExecutor(max_workers=len(calls)) as executor:
        futures = [executor.submit(call) for call in calls]
    # Leaving the executor block waits for all of them
    return [future.result() for future in futures]
