"""
Error types shared by the API wrappers, the session store and the views.

``ApiError`` covers every failed call that the calling view handles itself
(generic banner, field errors, 404 empty states).  ``SessionExpired`` is
deliberately not an ``ApiError``: a 401 is handled once, globally, by
``directory.middleware.AppSessionMiddleware``.
"""
from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """A non-401 failure from the directory API or the network.

    ``status`` is ``None`` when no response was received at all.
    """

    def __init__(self, status: Optional[int], message: str = '', errors: Optional[list] = None,
                 payload: Any = None):
        super().__init__(message or f'API error ({status})')
        self.status = status
        self.message = message
        self.errors = normalize_field_errors(errors)
        self.payload = payload

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    def message_or(self, fallback: str) -> str:
        """Banner text: the body's message if the backend sent one."""
        return self.message or fallback


class SessionExpired(Exception):
    """The backend answered 401; the local session has been cleared."""


class ValidationFailed(Exception):
    """Client-side validation rejected a form before any network call."""

    def __init__(self, message: str, errors: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


def normalize_field_errors(errors: Any) -> list[dict]:
    """Return field errors as a list of ``{'param', 'msg'}`` dicts.

    Older express-validator payloads name the field ``param``, newer ones
    ``path``; both are accepted.
    """
    if not isinstance(errors, list):
        return []
    out = []
    for e in errors:
        if not isinstance(e, dict):
            continue
        param = e.get('param') or e.get('path') or e.get('field')
        msg = e.get('msg') or e.get('message')
        if param and msg:
            out.append({'param': str(param), 'msg': str(msg)})
    return out


def errors_by_field(errors: list[dict]) -> dict[str, str]:
    """First message per field, for rendering next to each input."""
    out: dict[str, str] = {}
    for e in errors:
        out.setdefault(e['param'], e['msg'])
    return out


class ActionFailed(Exception):
    """The backend refused an owner submission; shown as a blocking alert."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
