"""
Application-scoped authentication session.

:class:`SessionContext` is attached to every request by
``directory.middleware.AppSessionMiddleware``.  It keeps the API token and the
cached user record in the Django session (the persisted client state), builds
API clients that carry the token, and performs the login, register, logout
and expiry flows.  Navigation is an injected :class:`Navigator`, so flows can
be exercised without a live request.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import MutableMapping, Optional, Protocol

from django.http import HttpResponseRedirect

from directory.exceptions import ApiError
from directory.models import OWNER_ROLES
from directory.services.api import ApiClient
from directory.services.audit import log_action
from directory.services.auth import AuthAPI, token_and_user

logger = logging.getLogger(__name__)

TOKEN_KEY = 'token'
USER_KEY = 'user'

HOME_URL = '/'
LOGIN_URL = '/login'
DASHBOARD_URL = '/dashboard'


class Navigator(Protocol):
    def go(self, path: str): ...


class RedirectNavigator:
    """Navigation as an HTTP redirect response."""

    def go(self, path: str) -> HttpResponseRedirect:
        return HttpResponseRedirect(path)


@dataclass
class AuthResult:
    success: bool
    message: str = ''
    errors: list = field(default_factory=list)


class SessionContext:
    def __init__(self, storage: MutableMapping, navigator: Optional[Navigator] = None):
        self.storage = storage
        self.navigator = navigator or RedirectNavigator()

    # ------------------------------------------------------------------
    # state
    # ------------------------------------------------------------------
    @property
    def token(self) -> Optional[str]:
        return self.storage.get(TOKEN_KEY)

    @property
    def user(self) -> Optional[dict]:
        return self.storage.get(USER_KEY)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def role(self) -> Optional[str]:
        return (self.user or {}).get('role')

    @property
    def is_owner(self) -> bool:
        return self.role in OWNER_ROLES

    def store(self, token: Optional[str], user: Optional[dict]) -> None:
        if token:
            self.storage[TOKEN_KEY] = token
        if user is not None:
            self.storage[USER_KEY] = user

    def clear(self) -> None:
        self.storage.pop(TOKEN_KEY, None)
        self.storage.pop(USER_KEY, None)

    def client(self) -> ApiClient:
        return ApiClient(token=self.token, on_unauthorized=self.clear)

    # ------------------------------------------------------------------
    # flows
    # ------------------------------------------------------------------
    def login(self, credentials: dict) -> AuthResult:
        return self._authenticate('login', credentials, 'Login failed')

    def register(self, user_data: dict) -> AuthResult:
        return self._authenticate('register', user_data, 'Registration failed')

    def _authenticate(self, action: str, payload: dict, fallback: str) -> AuthResult:
        api = AuthAPI(ApiClient(on_unauthorized=self.clear))
        try:
            body = getattr(api, action)(payload)
        except ApiError as e:
            log_action(user=None, action=action, object_type='user',
                       detail={'result': 'fail', 'email': payload.get('email'), 'status': e.status})
            if e.errors:
                return AuthResult(False, errors=e.errors)
            return AuthResult(False, message=e.message_or(fallback))

        token, user = token_and_user(body if isinstance(body, dict) else {})
        if not token:
            return AuthResult(False, message=fallback)
        self.store(token, user)
        log_action(user=user, action=action, object_type='user',
                   object_id=(user or {}).get('_id'), detail={'result': 'ok'})
        return AuthResult(True)

    def logout(self):
        log_action(user=self.user, action='logout', object_type='user')
        self.clear()
        return self.navigator.go(HOME_URL)

    def expire(self):
        """Global 401 handling: forget everything and send the user to login."""
        log_action(user=self.user, action='session_expired', object_type='user')
        self.clear()
        return self.navigator.go(LOGIN_URL)

    def rehydrate(self) -> None:
        """Resolve a stored token that has no cached user yet.

        A 401 here propagates as ``SessionExpired``; other failures keep the
        token and retry on the next request.
        """
        if not self.token or self.user is not None:
            return
        try:
            user = AuthAPI(self.client()).me()
        except ApiError as e:
            logger.warning('could not load current user: %s', e)
            return
        if user is not None:
            self.storage[USER_KEY] = user

    def refresh_user(self) -> None:
        self.storage.pop(USER_KEY, None)
        self.rehydrate()
