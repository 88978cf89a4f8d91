"""
URL mappings for the WellnessWay client.

Page paths mirror the single-page client's routes, so trailing slashes are
deliberately omitted.  Private pages carry their own session guard (see
``directory.permissions``).  Anything not listed here redirects home.
"""
from django.urls import path, re_path
from django.views.generic import RedirectView

from .auth_views import login_view, logout_view, register_view
from .views import health
from .views.browse import hospitals, medical_shops
from .views.owner import owner_dashboard
from .views.pages import dashboard, home


urlpatterns = [
    path('', home, name='home'),
    path('healthz', health.healthz),
    # Authentication
    path('login', login_view, name='login'),
    path('register', register_view, name='register'),
    path('logout', logout_view, name='logout'),
    # Directory
    path('medical-shops', medical_shops, name='medical-shops'),
    path('hospitals', hospitals, name='hospitals'),
    # Account
    path('dashboard', dashboard, name='dashboard'),
    path('owner-dashboard', owner_dashboard, name='owner-dashboard'),
    # Unknown paths (static files and /metrics are matched before this)
    re_path(r'^(?!static/|metrics$).*$', RedirectView.as_view(url='/', permanent=False)),
]
