"""
Shared fixtures: a scripted stand-in for the directory API.

``backend`` replaces ``requests.Session`` with :class:`FakeBackend`, which
answers from a route table and records every call, so tests can assert
exactly which endpoints a page hit (and which it did not).
"""
import json as jsonlib
from dataclasses import dataclass, field
from urllib.parse import urlsplit

import pytest
import requests

API_URL = 'http://api.test/api'

USER = {'_id': 'u1', 'name': 'Asha', 'email': 'asha@example.com', 'role': 'user'}
SHOP_OWNER = {'_id': 'u2', 'name': 'Ravi', 'email': 'ravi@example.com', 'role': 'medical_shop_owner'}
HOSPITAL_OWNER = {'_id': 'u3', 'name': 'Meera', 'email': 'meera@example.com', 'role': 'hospital_owner'}


def shop(sid, lng, lat, **extra):
    return {'_id': sid, 'name': f'Shop {sid}', 'address': f'{sid} Main Road', 'phone': '555',
            'location': {'type': 'Point', 'coordinates': [lng, lat]}, 'medicines': [], 'reviews': [],
            **extra}


def hospital(hid, lng, lat, **extra):
    return {'_id': hid, 'name': f'Hospital {hid}', 'address': f'{hid} Ring Road', 'phone': '911',
            'location': {'type': 'Point', 'coordinates': [lng, lat]}, 'doctors': [], 'tests': [],
            'services': [], **extra}


@dataclass
class Call:
    method: str
    path: str
    params: dict
    json: object
    headers: dict = field(default_factory=dict)


class FakeBackend:
    def __init__(self):
        self.routes = {}
        self.calls: list[Call] = []

    def on(self, method, path, body=None, status=200, exc=None):
        self.routes[(method.upper(), path)] = (status, body, exc)
        return self

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = urlsplit(url).path[len(urlsplit(API_URL).path):]
        self.calls.append(Call(method, path, dict(params or {}), json, dict(headers or {})))
        status, body, exc = self.routes.get((method, path), (404, {'success': False, 'message': 'Route not found'}, None))
        if exc is not None:
            raise exc
        if callable(body):
            body = body(params, json)
        r = requests.Response()
        r.status_code = status
        r._content = jsonlib.dumps(body).encode() if body is not None else b''
        r.headers['Content-Type'] = 'application/json'
        r.url = url
        return r

    def paths(self, method=None):
        return [c.path for c in self.calls if method is None or c.method == method]

    def last(self, method, path):
        for c in reversed(self.calls):
            if c.method == method and c.path == path:
                return c
        raise AssertionError(f'no {method} {path} in {self.paths()}')


@pytest.fixture(autouse=True)
def api_settings(settings):
    settings.API_URL = API_URL
    settings.API_TIMEOUT = 1
    settings.DEFAULT_RADIUS_KM = 10


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(requests, 'Session', lambda: fake)
    return fake


def sign_in(client, user=None, token='tok-123'):
    s = client.session
    s['token'] = token
    s['user'] = dict(user or USER)
    s.save()
    return s


@pytest.fixture
def user_client(client):
    sign_in(client, USER)
    return client


@pytest.fixture
def shop_owner_client(client):
    sign_in(client, SHOP_OWNER)
    return client


@pytest.fixture
def hospital_owner_client(client):
    sign_in(client, HOSPITAL_OWNER)
    return client


@pytest.fixture
def make_shop():
    return shop


@pytest.fixture
def make_hospital():
    return hospital


@pytest.fixture
def login_as():
    return sign_in
