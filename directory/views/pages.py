"""
Home page and the signed-in user's dashboard.

The dashboard looks up the device location the same way the listing pages
do (see ``directory.geolocation``) and lets the user store it on their
profile through ``PUT /auth/update-location``.
"""
from __future__ import annotations

import logging
from urllib.parse import urlencode

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from directory.exceptions import ApiError
from directory.geolocation import GeoOptions, LocationFailure, Position, QueryLocationProvider, acquire_position
from directory.models import Coordinates
from directory.permissions import session_required
from directory.services.audit import log_action
from directory.services.auth import AuthAPI

logger = logging.getLogger(__name__)


def home(request):
    return render(request, 'directory/home.html', {})


def _locate(params) -> dict:
    """Dashboard location state from the page script's reload parameters."""
    state = {'locating': False, 'position': None, 'location_error': ''}

    def found(position: Position):
        state['position'] = position

    def failed(failure: LocationFailure):
        state['location_error'] = failure.message

    if not acquire_position(QueryLocationProvider(params), found, failed, GeoOptions.from_settings()):
        state['locating'] = True
    return state


def _save_location(request):
    try:
        lat, lng = float(request.POST['lat']), float(request.POST['lng'])
    except (KeyError, TypeError, ValueError):
        messages.error(request, 'Location is not available yet')
        return redirect('/dashboard')
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        messages.error(request, 'Location is not available yet')
        return redirect('/dashboard')

    session = request.app_session
    coordinates = Coordinates(lng=lng, lat=lat)
    try:
        AuthAPI(session.client()).update_location(coordinates.as_lnglat())
    except ApiError as e:
        messages.error(request, e.message_or('Failed to update location'))
    else:
        log_action(user=session.user, action='update_location', object_type='user',
                   object_id=(session.user or {}).get('_id'))
        session.refresh_user()
        messages.success(request, 'Location saved')
    return redirect('/dashboard?' + urlencode({'lat': lat, 'lng': lng}))


@session_required
@require_http_methods(['GET', 'POST'])
def dashboard(request):
    if request.method == 'POST':
        return _save_location(request)

    user = request.app_session.user or {}
    context = {
        'user': user,
        'saved_location': Coordinates.from_record(user),
        'is_owner': request.app_session.is_owner,
        'geo_options': GeoOptions.from_settings().as_js(),
    }
    context.update(_locate(request.GET))
    return render(request, 'directory/dashboard.html', context)
