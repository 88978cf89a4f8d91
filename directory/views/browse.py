"""
Medical shop and hospital listing pages.

Both pages are the same view over a :class:`GeofencedBrowser`.  The query
string carries what the page's controls did:

* no parameters (or ``relocate``): mount; the page script looks up the
  device location and reloads with ``lat``/``lng`` or ``geo_error``;
* ``radius``: a new search radius in km;
* ``selected``: a card or marker was clicked;
* ``dismiss``: the inline error was closed;
* ``specialization``: hospital doctors filter for the selected hospital.

The browser state (location, radius, last-fetched list, error) is kept in
the session between these requests, so selecting a resource never re-fetches.
"""
from __future__ import annotations

import logging
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from directory.browser import RADIUS_CHOICES, GeofencedBrowser
from directory.exceptions import ApiError
from directory.geolocation import GeoOptions, QueryLocationProvider, acquire_position
from directory.permissions import session_required
from directory.presenters import HOSPITALS, MEDICAL_SHOPS, ResourceKind
from directory.serializers.fields import clean_input, field_errors
from directory.serializers.items import ReviewSerializer

logger = logging.getLogger(__name__)

LOCATION_PARAMS = ('lat', 'lng', 'geo_error')


def _radius(params) -> int | None:
    try:
        radius = int(params.get('radius', ''))
    except ValueError:
        return None
    return radius if radius in RADIUS_CHOICES else None


def _selected_url(request, resource_id: str) -> str:
    return f'{request.path}?{urlencode({"selected": resource_id})}'


def build_browser(request, kind: ResourceKind) -> GeofencedBrowser:
    source = kind.api_class(request.app_session.client())
    return GeofencedBrowser(source, kind.presenter, radius_km=settings.DEFAULT_RADIUS_KM)


def drive_browser(browser: GeofencedBrowser, params, state: dict | None) -> bool:
    """Apply one request's parameters; returns True while locating."""
    mounting = not params or 'relocate' in params
    if not mounting:
        browser.load_state(state)

    radius = _radius(params)
    # a selection on a loaded list never re-runs a stale location outcome
    selecting = 'selected' in params and browser.loaded
    if not selecting and any(p in params for p in LOCATION_PARAMS):
        if radius:
            browser.radius_km = radius
        # exactly one fetch: nearby on success, full list on failure
        acquire_position(QueryLocationProvider(params), browser.location_found, browser.location_failed,
                         GeoOptions.from_settings())
    elif mounting:
        return True
    elif radius:
        browser.set_radius(radius)
    elif not browser.loaded:
        browser.refresh()

    if 'dismiss' in params:
        browser.dismiss_error()
    if 'selected' in params:
        browser.select(params.get('selected'))
    return False


def _hospital_doctors(browser: GeofencedBrowser, specialization: str):
    """Doctors of the selected hospital, optionally by specialization."""
    hospital = browser.selected
    if not hospital:
        return None, ''
    if not specialization:
        return hospital.get('doctors') or [], ''
    try:
        return browser.source.get_doctors(browser.selected_id, specialization), ''
    except ApiError as e:
        logger.warning('doctor filter failed for %s: %s', browser.selected_id, e)
        return hospital.get('doctors') or [], 'Failed to fetch doctors'


def _specializations(hospital: dict | None) -> list[str]:
    if not hospital:
        return []
    found = list(hospital.get('specializations') or [])
    for d in hospital.get('doctors') or []:
        s = d.get('specialization')
        if s and s not in found:
            found.append(s)
    return found


def _page(request, kind: ResourceKind):
    browser = build_browser(request, kind)
    params = request.GET
    locating = drive_browser(browser, params, request.session.get(kind.state_key))
    if locating:
        request.session.pop(kind.state_key, None)
    else:
        request.session[kind.state_key] = browser.to_state()

    context = {
        'kind': kind,
        'presenter': kind.presenter,
        'browser': browser,
        'locating': locating,
        'radius_choices': RADIUS_CHOICES,
        'geo_options': GeoOptions.from_settings().as_js(),
        'markers': [m.as_dict() for m in browser.markers()] if browser.show_map else [],
        'map_center': browser.map_center(),
    }
    if kind is HOSPITALS:
        specialization = (params.get('specialization') or '').strip()
        doctors, doctors_error = _hospital_doctors(browser, specialization)
        context.update({
            'doctors': doctors,
            'doctors_error': doctors_error,
            'specialization': specialization,
            'specializations': _specializations(browser.selected),
        })
    return render(request, 'directory/browse/page.html', context)


def _post_review(request, kind: ResourceKind):
    browser = build_browser(request, kind)
    browser.load_state(request.session.get(kind.state_key))
    shop_id = request.POST.get('shop') or ''
    s = ReviewSerializer(data=clean_input(request.POST))
    if not s.is_valid():
        errors = field_errors(s.errors)
        messages.error(request, errors.get('rating') or 'Please choose a rating between 1 and 5')
        return redirect(_selected_url(request, shop_id))
    try:
        browser.source.add_review(shop_id, dict(s.validated_data))
        updated = browser.source.get(shop_id)
    except ApiError as e:
        messages.error(request, e.message_or('Failed to add review'))
        return redirect(_selected_url(request, shop_id))
    if updated:
        browser.select(shop_id)
        browser.replace_item(updated)
        request.session[kind.state_key] = browser.to_state()
    messages.success(request, 'Thanks for your review!')
    return redirect(_selected_url(request, shop_id))


@session_required
@require_http_methods(['GET', 'POST'])
def medical_shops(request):
    if request.method == 'POST':
        return _post_review(request, MEDICAL_SHOPS)
    return _page(request, MEDICAL_SHOPS)


@session_required
@require_http_methods(['GET'])
def hospitals(request):
    return _page(request, HOSPITALS)
