"""
Session state for the signed-in user.

``SessionStore`` is the only writer of the auth entries kept in durable
storage (the signed session cookie). Everything else reads an immutable
``Session`` snapshot.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional
import json
import logging

from flask_login import UserMixin

from bloodconnect.services.auth import Result

logger = logging.getLogger(__name__)

DONOR = 'donor'
HOSPITAL_STAFF = 'hospital_staff'
BLOOD_BANK_MANAGER = 'blood_bank_manager'
USER_TYPES = (DONOR, HOSPITAL_STAFF, BLOOD_BANK_MANAGER)

ACCESS_TOKEN_KEY = 'access_token'
REFRESH_TOKEN_KEY = 'refresh_token'
USER_KEY = 'user'
STORAGE_KEYS = (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY)


class UserSummary(UserMixin):
    """Read-only identity of the signed-in user plus any merged profile fields."""

    def __init__(self, username, user_type, is_verified=False, profile=None):
        self._username = username
        self._user_type = user_type
        self._is_verified = bool(is_verified)
        extra = {k: v for k, v in (profile or {}).items()
                 if k not in ('username', 'user_type', 'is_verified')}
        self._profile = MappingProxyType(extra)

    @property
    def id(self):
        return self._username

    @property
    def username(self):
        return self._username

    @property
    def user_type(self):
        return self._user_type

    @property
    def is_verified(self):
        return self._is_verified

    @property
    def profile(self):
        return self._profile

    def is_donor(self):
        return self._user_type == DONOR

    def is_hospital_staff(self):
        return self._user_type == HOSPITAL_STAFF

    def is_admin(self):
        return self._user_type == BLOOD_BANK_MANAGER

    def merged(self, fields):
        """Return a new summary with ``fields`` laid over this one."""
        data = self.to_dict()
        data.update(fields or {})
        return UserSummary.from_dict(data)

    def to_dict(self):
        data = dict(self._profile)
        data.update({
            'username': self._username,
            'user_type': self._user_type,
            'is_verified': self._is_verified,
        })
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            username=data.get('username'),
            user_type=data.get('user_type'),
            is_verified=data.get('is_verified', False),
            profile=data,
        )

    def __eq__(self, other):
        if not isinstance(other, UserSummary):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self._username, self._user_type))

    def __repr__(self):
        return f"UserSummary('{self._username}', '{self._user_type}')"


@dataclass(frozen=True)
class Session:
    user: Optional[UserSummary] = None
    token: Optional[str] = None
    loading: bool = False

    @property
    def is_authenticated(self):
        return self.token is not None and self.user is not None


class SessionStorage:
    """The three auth entries kept in a mutable mapping such as the session cookie."""

    def __init__(self, backend):
        self.backend = backend

    @property
    def access_token(self):
        return self.backend.get(ACCESS_TOKEN_KEY)

    def load_user(self):
        raw = self.backend.get(USER_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            return None
        return data if isinstance(data, dict) else None

    def has_entries(self):
        return any(key in self.backend for key in STORAGE_KEYS)

    def save(self, access_token, refresh_token, user):
        self.backend[ACCESS_TOKEN_KEY] = access_token
        self.backend[REFRESH_TOKEN_KEY] = refresh_token or ''
        self.backend[USER_KEY] = json.dumps(user.to_dict())

    def clear(self):
        for key in STORAGE_KEYS:
            self.backend.pop(key, None)


class SessionStore:
    """
    Owns the current ``Session``. State changes only through ``login``,
    ``logout`` and ``restore``.
    """

    def __init__(self, storage, gateway):
        self._storage = storage
        self._gateway = gateway
        self._state = Session()

    def snapshot(self):
        return self._state

    def login(self, credentials):
        """
        Authenticate through the gateway. Returns a ``Result``; on failure the
        current session and storage are left exactly as they were.
        """
        result = self._gateway.login(credentials)
        if not result.success:
            logger.info(f"Login failed for {credentials.get('username')}")
            return result

        data = result.data or {}
        access = data.get('access')
        if not access:
            logger.warning(f"Login response for {credentials.get('username')} carried no access token")
            return Result.failure('Login failed')

        user = UserSummary(
            username=credentials.get('username'),
            user_type=data.get('user_type'),
            is_verified=data.get('is_verified', False),
        )
        self._storage.save(access, data.get('refresh'), user)
        self._state = Session(user=user, token=access)
        logger.info(f"User {user.username} logged in as {user.user_type}")
        return Result.ok(user)

    def logout(self):
        self._storage.clear()
        self._state = Session()

    def restore(self):
        """
        Rebuild the session from durable storage, confirming the token with a
        profile fetch. Any failure clears storage and leaves the session empty.
        """
        token = self._storage.access_token
        cached = self._storage.load_user()
        if not token or cached is None:
            if self._storage.has_entries():
                self._storage.clear()
            self._state = Session()
            return self._state

        self._state = Session(loading=True)
        result = self._gateway.fetch_profile()
        if result.success and not isinstance(result.data, dict):
            result = Result.failure('Unexpected profile response')
        if result.success:
            user = UserSummary.from_dict(cached).merged(result.data)
            self._state = Session(user=user, token=token)
        else:
            logger.info(f"Stored session for {cached.get('username')} is no longer valid: {result.error}")
            self._storage.clear()
            self._state = Session()
        return self._state
