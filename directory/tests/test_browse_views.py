import pytest


def ok(data):
    return {'success': True, 'data': data}


def test_listing_pages_require_a_session(client):
    for path in ('/medical-shops', '/hospitals', '/dashboard', '/owner-dashboard'):
        r = client.get(path)
        assert r.status_code == 302
        assert r['Location'] == '/login'


def test_mount_waits_for_location_without_fetching(user_client, backend):
    r = user_client.get('/medical-shops')
    assert r.status_code == 200
    assert r.context['locating'] is True
    assert b'data-locating' in r.content
    assert backend.calls == []


def test_located_visit_fetches_nearby_only(user_client, backend, make_shop):
    backend.on('GET', '/medical-shops/nearby', ok([make_shop('s1', 77.59, 12.97)]))

    r = user_client.get('/medical-shops', {'lat': '12.97', 'lng': '77.59'})

    assert r.status_code == 200
    assert backend.paths() == ['/medical-shops/nearby']
    call = backend.last('GET', '/medical-shops/nearby')
    assert call.params == {'latitude': 12.97, 'longitude': 77.59, 'maxDistance': 10000}
    assert call.headers['Authorization'] == 'Bearer tok-123'


def test_denied_location_fetches_full_list_only(user_client, backend, make_hospital):
    backend.on('GET', '/hospitals', ok([make_hospital('h1', 77.1, 12.1)]))

    r = user_client.get('/hospitals', {'geo_error': 'denied'})

    assert r.status_code == 200
    assert backend.paths() == ['/hospitals']
    assert b'Unable to retrieve your location' in r.content


def test_cards_and_map_without_location(user_client, backend, make_shop):
    items = [make_shop('s1', 77.5, 12.9), make_shop('s2', 77.6, 13.0), make_shop('s3', 77.7, 13.1)]
    backend.on('GET', '/medical-shops', ok(items))

    r = user_client.get('/medical-shops', {'geo_error': 'unsupported'})

    assert r.content.count(b'data-card=') == 3
    assert r.context['map_center'] == [12.9, 77.5]
    assert [m['id'] for m in r.context['markers']] == ['s1', 's2', 's3']
    assert b'id="map"' in r.content
    # the radius selector needs a device location
    assert b'name="radius"' not in r.content


def test_no_results_shows_empty_state_and_no_map(user_client, backend):
    backend.on('GET', '/medical-shops', ok([]))

    r = user_client.get('/medical-shops', {'geo_error': 'denied'})

    assert b'No Medical Shops Found' in r.content
    assert b'data-fetch-error' not in r.content
    assert b'id="map"' not in r.content


def test_selecting_a_card_does_not_refetch(user_client, backend, make_shop):
    backend.on('GET', '/medical-shops', ok([make_shop('s1', 77.5, 12.9), make_shop('s2', 77.6, 13.0)]))
    user_client.get('/medical-shops', {'geo_error': 'denied'})
    backend.calls.clear()

    r = user_client.get('/medical-shops', {'selected': 's2'})

    assert backend.calls == []
    assert r.context['browser'].selected_id == 's2'
    assert b'data-detail="s2"' in r.content
    # the card link and the marker use the same selection parameter
    assert b'href="?selected=s2"' in r.content
    assert [m['selected'] for m in r.context['markers']] == [False, True]


def test_selecting_with_location_still_in_the_query_does_not_refetch(user_client, backend, make_shop):
    backend.on('GET', '/medical-shops/nearby', ok([make_shop('s1', 77.59, 12.97), make_shop('s2', 77.6, 12.98)]))
    user_client.get('/medical-shops', {'lat': '12.97', 'lng': '77.59'})

    r = user_client.get('/medical-shops', {'lat': '12.97', 'lng': '77.59', 'selected': 's2'})

    assert backend.paths() == ['/medical-shops/nearby']
    assert r.context['browser'].selected_id == 's2'


def test_review_redirect_encodes_the_shop_id(user_client, backend, make_shop):
    backend.on('GET', '/medical-shops', ok([make_shop('s1', 77.5, 12.9)]))
    user_client.get('/medical-shops', {'geo_error': 'denied'})

    r = user_client.post('/medical-shops', {'shop': 's1&dismiss=1', 'rating': '9'})

    assert r['Location'] == '/medical-shops?selected=s1%26dismiss%3D1'


def test_radius_change_refetches_with_new_distance(user_client, backend, make_shop):
    backend.on('GET', '/medical-shops/nearby', ok([make_shop('s1', 77.5, 12.9)]))
    user_client.get('/medical-shops', {'lat': '12.9', 'lng': '77.5'})

    r = user_client.get('/medical-shops', {'radius': '50'})

    assert r.status_code == 200
    assert backend.last('GET', '/medical-shops/nearby').params['maxDistance'] == 50000
    assert b'within 50 km' in r.content


def test_fetch_failure_shows_dismissible_error(user_client, backend):
    backend.on('GET', '/medical-shops', {'success': False, 'message': 'db down'}, status=500)

    r = user_client.get('/medical-shops', {'geo_error': 'timeout'})

    assert r.status_code == 200
    assert b'Failed to fetch shops' in r.content
    assert b'No Medical Shops Found' in r.content

    r = user_client.get('/medical-shops', {'dismiss': '1'})
    assert b'Failed to fetch shops' not in r.content


def test_unauthorized_fetch_clears_session_and_redirects_to_login(user_client, backend):
    backend.on('GET', '/medical-shops', {'success': False, 'message': 'Token expired'}, status=401)

    r = user_client.get('/medical-shops', {'geo_error': 'denied'})

    assert r.status_code == 302
    assert r['Location'] == '/login'
    session = user_client.session
    assert 'token' not in session
    assert 'user' not in session


def test_review_is_posted_and_detail_refreshed(user_client, backend, make_shop):
    backend.on('GET', '/medical-shops', ok([make_shop('s1', 77.5, 12.9)]))
    backend.on('POST', '/medical-shops/s1/reviews', ok({'rating': 4}), status=201)
    reviewed = make_shop('s1', 77.5, 12.9, reviews=[{'rating': 4, 'comment': 'Helpful staff'}], averageRating=4)
    backend.on('GET', '/medical-shops/s1', ok(reviewed))
    user_client.get('/medical-shops', {'geo_error': 'denied'})

    r = user_client.post('/medical-shops', {'shop': 's1', 'rating': '4', 'comment': '<b>Helpful</b> staff'})

    assert r.status_code == 302
    assert r['Location'] == '/medical-shops?selected=s1'
    assert backend.last('POST', '/medical-shops/s1/reviews').json == {'rating': 4, 'comment': 'Helpful staff'}

    r = user_client.get(r['Location'])
    assert b'Helpful staff' in r.content


def test_review_rating_out_of_range_makes_no_call(user_client, backend, make_shop):
    backend.on('GET', '/medical-shops', ok([make_shop('s1', 77.5, 12.9)]))
    user_client.get('/medical-shops', {'geo_error': 'denied'})
    backend.calls.clear()

    r = user_client.post('/medical-shops', {'shop': 's1', 'rating': '9'})

    assert r.status_code == 302
    assert backend.calls == []


def test_hospital_doctors_filter_by_specialization(user_client, backend, make_hospital):
    doctors = [
        {'name': 'Dr. Rao', 'specialization': 'Cardiology', 'isAvailable': True},
        {'name': 'Dr. Iyer', 'specialization': 'Dermatology', 'isAvailable': False},
    ]
    backend.on('GET', '/hospitals', ok([make_hospital('h1', 77.5, 12.9, doctors=doctors)]))
    backend.on('GET', '/hospitals/h1/doctors', ok(doctors[:1]))
    user_client.get('/hospitals', {'geo_error': 'denied'})

    r = user_client.get('/hospitals', {'selected': 'h1', 'specialization': 'Cardiology'})

    assert backend.last('GET', '/hospitals/h1/doctors').params == {'specialization': 'Cardiology'}
    assert [d['name'] for d in r.context['doctors']] == ['Dr. Rao']
    assert r.context['specializations'] == ['Cardiology', 'Dermatology']


@pytest.mark.parametrize('path', ['/medical-shops', '/hospitals'])
def test_relocate_returns_to_locating(user_client, backend, path):
    r = user_client.get(path, {'relocate': '1', 'radius': '20'})
    assert r.context['locating'] is True
    assert backend.calls == []
