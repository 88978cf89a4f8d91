"""
Login, registration and logout pages.

The forms post back to themselves.  Client-side checks (required fields,
password match and length) run through the serializers in
``directory.serializers.auth`` and stop the request before any network call;
the backend's own field errors are shown next to the inputs, anything else as
one banner.
"""
from __future__ import annotations

from django.shortcuts import render
from django.views.decorators.http import require_http_methods

from directory.exceptions import errors_by_field
from directory.geolocation import GeoOptions
from directory.models import ROLE_CHOICES, ROLE_USER
from directory.serializers.auth import LoginSerializer, RegisterSerializer
from directory.serializers.fields import clean_input, field_errors
from directory.session import DASHBOARD_URL


def _form_errors(serializer) -> tuple[str, dict]:
    errors = field_errors(serializer.errors)
    message = errors.pop('non_field_errors', '')
    return message, errors


def _redirect_if_signed_in(request):
    if request.app_session.is_authenticated:
        return request.app_session.navigator.go(DASHBOARD_URL)
    return None


@require_http_methods(['GET', 'POST'])
def login_view(request):
    if request.method == 'GET':
        return _redirect_if_signed_in(request) or render(request, 'directory/auth/login.html', {})

    form = request.POST
    s = LoginSerializer(data=clean_input(form))
    if not s.is_valid():
        message, errors = _form_errors(s)
        return render(request, 'directory/auth/login.html', {
            'form': form, 'error': message, 'errors': errors,
        }, status=400)

    result = request.app_session.login(dict(s.validated_data))
    if not result.success:
        return render(request, 'directory/auth/login.html', {
            'form': form, 'error': result.message, 'errors': errors_by_field(result.errors),
        }, status=400)
    return request.app_session.navigator.go(DASHBOARD_URL)


@require_http_methods(['GET', 'POST'])
def register_view(request):
    context = {
        'roles': ROLE_CHOICES,
        'default_role': ROLE_USER,
        'geo_options': GeoOptions.from_settings().as_js(),
    }
    if request.method == 'GET':
        return _redirect_if_signed_in(request) or render(request, 'directory/auth/register.html', context)

    form = request.POST
    context['form'] = form
    s = RegisterSerializer(data=clean_input(form))
    if not s.is_valid():
        message, errors = _form_errors(s)
        context.update(error=message, errors=errors)
        return render(request, 'directory/auth/register.html', context, status=400)

    result = request.app_session.register(s.payload())
    if not result.success:
        context.update(error=result.message, errors=errors_by_field(result.errors))
        return render(request, 'directory/auth/register.html', context, status=400)
    return request.app_session.navigator.go(DASHBOARD_URL)


@require_http_methods(['GET', 'POST'])
def logout_view(request):
    return request.app_session.logout()
