from directory.models import role_label


def app_session(request):
    """Expose the signed-in user to every template (navbar, dashboards)."""
    session = getattr(request, 'app_session', None)
    user = session.user if session else None
    return {
        'app_session': session,
        'current_user': user,
        'current_role_label': role_label((user or {}).get('role')) if user else '',
    }
