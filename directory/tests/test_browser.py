import pytest

from directory.browser import RADIUS_CHOICES, GeofencedBrowser
from directory.exceptions import ApiError
from directory.geolocation import DENIED, UNSUPPORTED, LocationFailure, Position, QueryLocationProvider, acquire_position
from directory.presenters import HOSPITALS, MEDICAL_SHOPS


class FakeSource:
    def __init__(self, items=None, fail=False):
        self.items = items or []
        self.fail = fail
        self.calls = []

    def nearby(self, latitude, longitude, max_distance):
        self.calls.append(('nearby', latitude, longitude, max_distance))
        if self.fail:
            raise ApiError(500, 'boom')
        return list(self.items)

    def all(self):
        self.calls.append(('all',))
        if self.fail:
            raise ApiError(None, '')
        return list(self.items)


@pytest.mark.parametrize('radius', RADIUS_CHOICES)
def test_max_distance_is_radius_in_meters(radius, make_shop):
    source = FakeSource([make_shop('s1', 77.59, 12.97)])
    browser = GeofencedBrowser(source, MEDICAL_SHOPS.presenter)
    browser.location_found(Position(latitude=12.97, longitude=77.59))
    browser.set_radius(radius)

    assert browser.max_distance == radius * 1000
    assert source.calls[-1] == ('nearby', 12.97, 77.59, radius * 1000)


def test_default_radius_is_ten_km():
    browser = GeofencedBrowser(FakeSource(), MEDICAL_SHOPS.presenter)
    assert browser.radius_km == 10
    assert browser.max_distance == 10000


def test_invalid_radius_is_rejected():
    browser = GeofencedBrowser(FakeSource(), MEDICAL_SHOPS.presenter)
    with pytest.raises(ValueError):
        browser.set_radius(15)


def test_location_success_fetches_nearby_only():
    source = FakeSource()
    browser = GeofencedBrowser(source, MEDICAL_SHOPS.presenter)
    provider = QueryLocationProvider({'lat': '12.5', 'lng': '77.25'})

    assert acquire_position(provider, browser.location_found, browser.location_failed)
    assert source.calls == [('nearby', 12.5, 77.25, 10000)]


@pytest.mark.parametrize('reason', [DENIED, UNSUPPORTED, 'timeout', 'unavailable'])
def test_location_failure_fetches_full_list_only(reason):
    source = FakeSource()
    browser = GeofencedBrowser(source, HOSPITALS.presenter)
    provider = QueryLocationProvider({'geo_error': reason})

    assert acquire_position(provider, browser.location_found, browser.location_failed)
    assert source.calls == [('all',)]
    assert browser.location is None
    assert browser.location_failure.reason == reason


def test_pending_location_fetches_nothing():
    source = FakeSource()
    browser = GeofencedBrowser(source, MEDICAL_SHOPS.presenter)

    assert not acquire_position(QueryLocationProvider({}), browser.location_found, browser.location_failed)
    assert source.calls == []


def test_out_of_range_coordinates_count_as_failure():
    outcome = QueryLocationProvider({'lat': '123', 'lng': '10'}).current_position(None)
    assert isinstance(outcome, LocationFailure)


def test_card_and_marker_selection_are_the_same_reference(make_shop):
    items = [make_shop('s1', 77.1, 12.1), make_shop('s2', 77.2, 12.2)]
    browser = GeofencedBrowser(FakeSource(items), MEDICAL_SHOPS.presenter)
    browser.location_failed(LocationFailure(DENIED))

    from_card = browser.select('s2')
    from_marker = browser.select_marker('s2')

    assert from_card is from_marker
    assert from_card is browser.items[1]
    assert [m.selected for m in browser.markers()] == [False, True]


def test_selection_is_cleared_by_a_new_fetch(make_shop):
    browser = GeofencedBrowser(FakeSource([make_shop('s1', 77.1, 12.1)]), MEDICAL_SHOPS.presenter)
    browser.refresh()
    browser.select('s1')
    browser.refresh()
    assert browser.selected is None


def test_unknown_selection_selects_nothing(make_shop):
    browser = GeofencedBrowser(FakeSource([make_shop('s1', 77.1, 12.1)]), MEDICAL_SHOPS.presenter)
    browser.refresh()
    assert browser.select('nope') is None


def test_map_centres_on_first_item_without_location(make_shop):
    items = [make_shop('s1', 77.5, 12.9), make_shop('s2', 78.0, 13.0), make_shop('s3', 76.0, 11.0)]
    browser = GeofencedBrowser(FakeSource(items), MEDICAL_SHOPS.presenter)
    browser.location_failed(LocationFailure(UNSUPPORTED))

    assert len(browser.items) == 3
    assert browser.show_map
    assert browser.map_center() == [12.9, 77.5]
    assert browser.map_zoom == 10
    assert len(browser.markers()) == 3


def test_map_centres_on_device_when_located(make_shop):
    browser = GeofencedBrowser(FakeSource([make_shop('s1', 77.5, 12.9)]), MEDICAL_SHOPS.presenter)
    browser.location_found(Position(latitude=12.0, longitude=77.0))
    assert browser.map_center() == [12.0, 77.0]
    assert browser.map_zoom == 13


def test_zero_results_is_an_empty_state_not_an_error():
    browser = GeofencedBrowser(FakeSource([]), MEDICAL_SHOPS.presenter)
    browser.refresh()
    assert browser.items == []
    assert browser.error == ''
    assert not browser.show_map
    assert browser.map_center() is None


def test_fetch_failure_keeps_previous_list(make_shop):
    source = FakeSource([make_shop('s1', 77.1, 12.1)])
    browser = GeofencedBrowser(source, MEDICAL_SHOPS.presenter)
    browser.refresh()

    source.fail = True
    browser.refresh()

    assert browser.error == 'Failed to fetch shops'
    assert [i['_id'] for i in browser.items] == ['s1']

    browser.dismiss_error()
    assert browser.error == ''


def test_nearby_failure_uses_nearby_message():
    browser = GeofencedBrowser(FakeSource(fail=True), HOSPITALS.presenter)
    browser.location_found(Position(latitude=1.0, longitude=2.0))
    assert browser.error == 'Failed to fetch nearby hospitals'


def test_stale_result_is_discarded(make_shop):
    browser = GeofencedBrowser(FakeSource(), MEDICAL_SHOPS.presenter)
    older = browser.begin_fetch()
    newer = browser.begin_fetch()

    assert browser.apply(newer, [make_shop('new', 1, 1)])
    assert not browser.apply(older, [make_shop('old', 2, 2)])
    assert not browser.fail(older, 'late failure')
    assert [i['_id'] for i in browser.items] == ['new']
    assert browser.error == ''


def test_directions_link_points_at_marker(make_shop):
    browser = GeofencedBrowser(FakeSource([make_shop('s1', 77.5, 12.9)]), MEDICAL_SHOPS.presenter)
    browser.refresh()
    marker = browser.markers()[0]
    assert marker.directions_url.startswith('https://www.google.com/maps/dir/?')
    assert 'destination=12.9%2C77.5' in marker.directions_url
