import pytest
import requests
from django.core.management import call_command
from django.core.management.base import CommandError


def test_home_is_public(client):
    r = client.get('/')
    assert r.status_code == 200
    assert b'Welcome to WellnessWay' in r.content
    assert b'href="/register"' in r.content


@pytest.mark.parametrize('path', ['/nowhere', '/medical-shops/extra', '/admin', '/metricsfoo'])
def test_unknown_paths_redirect_home(client, path):
    r = client.get(path)
    assert r.status_code == 302
    assert r['Location'] == '/'


def test_navbar_shows_owner_link_only_for_owners(user_client, backend):
    r = user_client.get('/')
    assert b'Owner Panel' not in r.content
    assert b'Asha' in r.content


def test_dashboard_reports_location_failure_with_retry(user_client, backend):
    r = user_client.get('/dashboard', {'geo_error': 'unsupported'})
    assert b'Geolocation is not supported by your browser.' in r.content
    assert b'Try Again' in r.content
    assert backend.calls == []


def test_dashboard_saves_location(user_client, backend):
    backend.on('PUT', '/auth/update-location', {'success': True})
    backend.on('GET', '/auth/me', {'success': True, 'data': {
        '_id': 'u1', 'name': 'Asha', 'role': 'user', 'location': {'coordinates': [77.59, 12.97]},
    }})

    r = user_client.post('/dashboard', {'lat': '12.97', 'lng': '77.59'})

    assert r.status_code == 302
    assert backend.last('PUT', '/auth/update-location').json == {'coordinates': [77.59, 12.97]}
    assert user_client.session['user']['location'] == {'coordinates': [77.59, 12.97]}


def test_dashboard_shows_owner_link(shop_owner_client, backend):
    r = shop_owner_client.get('/dashboard', {'lat': '1', 'lng': '2'})
    assert b'Manage My Medical Shop' in r.content
    assert b'Save my location' in r.content


def test_healthz_reports_backend(client, monkeypatch):
    def answer(url, timeout=None):
        r = requests.Response()
        r.status_code = 404
        return r
    monkeypatch.setattr(requests, 'get', answer)

    r = client.get('/healthz')
    assert r.status_code == 200
    assert r.json()['api'] is True


def test_healthz_reports_unreachable_backend(client, monkeypatch):
    def refuse(*args, **kwargs):
        raise requests.ConnectionError('refused')
    monkeypatch.setattr(requests, 'get', refuse)

    r = client.get('/healthz')

    assert r.status_code == 503
    assert r.json()['ok'] is False


def test_seed_demo_accounts_registers_missing_accounts(backend, settings):
    settings.DEMO_PASSWORD = 'demo123'

    backend.on('POST', '/auth/login', {'success': False, 'message': 'Invalid credentials'}, status=400)
    backend.on('POST', '/auth/register', {'success': True, 'token': 't'}, status=201)

    call_command('seed_demo_accounts')

    registered = [c.json for c in backend.calls if c.path == '/auth/register']
    assert [r['role'] for r in registered] == ['user', 'medical_shop_owner', 'hospital_owner']
    assert all(r['password'] == 'demo123' for r in registered)


def test_seed_demo_accounts_stops_when_backend_is_down(backend):
    backend.on('POST', '/auth/login', exc=requests.ConnectionError('refused'))
    with pytest.raises(CommandError):
        call_command('seed_demo_accounts')


def test_seed_demo_accounts_skips_existing_accounts(backend):
    backend.on('POST', '/auth/login', {'success': True, 'token': 't', 'user': {'name': 'Demo'}})
    call_command('seed_demo_accounts')
    assert backend.paths('POST') == ['/auth/login'] * 3
