"""
HTTP client wrapper for the directory API.

Every call made by this project goes through :class:`ApiClient`.  It sends
JSON, attaches ``Authorization: Bearer <token>`` when a token is present and
turns any 401 into a cleared session plus :class:`SessionExpired`, whichever
endpoint produced it.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import requests
from django.conf import settings

from directory.exceptions import ApiError, SessionExpired

logger = logging.getLogger(__name__)


class ApiClient:
    def __init__(self, base_url: Optional[str] = None, *, token: Optional[str] = None,
                 timeout: Optional[float] = None, on_unauthorized: Optional[Callable[[], None]] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.API_URL).rstrip('/')
        self.token = token
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self.on_unauthorized = on_unauthorized
        self.session = session or requests.Session()

    def headers(self) -> dict[str, str]:
        headers = {'Content-Type': 'application/json', 'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        logger.debug('%s %s params=%s', method, url, params)
        try:
            r = self.session.request(method, url, params=params or None, json=json,
                                     headers=self.headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning('%s %s failed: %s', method, url, exc)
            raise ApiError(None, '') from exc

        if r.status_code == 401:
            logger.info('%s %s answered 401; clearing session', method, url)
            self.token = None
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            raise SessionExpired(f'{method} {path}')

        body = _json_body(r)
        if r.status_code >= 400:
            message = body.get('message') if isinstance(body, dict) else ''
            errors = body.get('errors') if isinstance(body, dict) else None
            logger.warning('%s %s -> %s %s', method, url, r.status_code, message or '')
            raise ApiError(r.status_code, message or '', errors, payload=body)
        return body

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request('GET', path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request('POST', path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request('PUT', path, json=json)


def _json_body(r: requests.Response) -> Any:
    if not r.content:
        return {}
    try:
        return r.json()
    except ValueError:
        return {}


def unwrap(body: Any, default: Any = None) -> Any:
    """Return ``body['data']``: the envelope every list/detail call uses."""
    if isinstance(body, dict) and 'data' in body:
        return body['data']
    return default
