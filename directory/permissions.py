"""
Route guards.

``session_required`` protects the private pages: without a stored token the
visitor is sent to ``/login``.  ``owner_required`` additionally limits a page
to shop and hospital owners.
"""
from functools import wraps

from django.contrib import messages

from directory.session import DASHBOARD_URL, LOGIN_URL


def session_required(view):
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.app_session.is_authenticated:
            return request.app_session.navigator.go(LOGIN_URL)
        return view(request, *args, **kwargs)
    return wrapper


def owner_required(view):
    @wraps(view)
    @session_required
    def wrapper(request, *args, **kwargs):
        if not request.app_session.is_owner:
            messages.info(request, 'Only shop and hospital owners can open the owner panel.')
            return request.app_session.navigator.go(DASHBOARD_URL)
        return view(request, *args, **kwargs)
    return wrapper
