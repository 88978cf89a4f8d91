"""
Device location acquisition.

The page script (``static/directory/geolocate.js``) calls the browser's
``navigator.geolocation.getCurrentPosition`` with :data:`GeoOptions` and
reloads the page with either ``lat``/``lng`` or ``geo_error=<reason>``.
On the server side a provider turns those parameters into an outcome and
:func:`acquire_position` hands it to the caller's success or failure
continuation.  Nothing here retries; pages expose a manual retry instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Protocol, Union

from django.conf import settings

from directory.models import Coordinates

UNSUPPORTED = 'unsupported'
DENIED = 'denied'
TIMEOUT = 'timeout'
UNAVAILABLE = 'unavailable'

FAILURE_MESSAGES = {
    UNSUPPORTED: 'Geolocation is not supported by your browser.',
    DENIED: 'Unable to retrieve your location. Please enable location services.',
    TIMEOUT: 'Locating took too long. Please try again.',
    UNAVAILABLE: 'Unable to retrieve your location. Please enable location services.',
}


@dataclass(frozen=True)
class GeoOptions:
    enable_high_accuracy: bool = True
    timeout_ms: int = 10000

    @classmethod
    def from_settings(cls) -> 'GeoOptions':
        return cls(enable_high_accuracy=settings.GEOLOCATION_HIGH_ACCURACY,
                   timeout_ms=settings.GEOLOCATION_TIMEOUT_MS)

    def as_js(self) -> dict:
        return {'enableHighAccuracy': self.enable_high_accuracy, 'timeout': self.timeout_ms}


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float

    def coordinates(self) -> Coordinates:
        return Coordinates(lng=self.longitude, lat=self.latitude)

    def as_dict(self) -> dict:
        return {'latitude': self.latitude, 'longitude': self.longitude}

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> Optional['Position']:
        if not data:
            return None
        try:
            return cls(latitude=float(data['latitude']), longitude=float(data['longitude']))
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class LocationFailure:
    reason: str

    @property
    def message(self) -> str:
        return FAILURE_MESSAGES.get(self.reason, FAILURE_MESSAGES[UNAVAILABLE])


Outcome = Union[Position, LocationFailure]


class LocationProvider(Protocol):
    def current_position(self, options: GeoOptions) -> Optional[Outcome]:
        """Return the outcome, or ``None`` while the lookup is still pending."""


class QueryLocationProvider:
    """Reads the result the page script put into the query string."""

    def __init__(self, params: Mapping[str, str]):
        self.params = params

    def current_position(self, options: GeoOptions) -> Optional[Outcome]:
        reason = (self.params.get('geo_error') or '').strip().lower()
        if reason:
            return LocationFailure(reason if reason in FAILURE_MESSAGES else UNAVAILABLE)
        lat, lng = self.params.get('lat'), self.params.get('lng')
        if lat in (None, '') or lng in (None, ''):
            return None
        try:
            latitude, longitude = float(lat), float(lng)
        except (TypeError, ValueError):
            return LocationFailure(UNAVAILABLE)
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            return LocationFailure(UNAVAILABLE)
        return Position(latitude=latitude, longitude=longitude)


def acquire_position(provider: LocationProvider,
                     on_success: Callable[[Position], None],
                     on_failure: Callable[[LocationFailure], None],
                     options: Optional[GeoOptions] = None) -> bool:
    """Run one lookup; returns False while the outcome is still pending."""
    outcome = provider.current_position(options or GeoOptions.from_settings())
    if outcome is None:
        return False
    if isinstance(outcome, Position):
        on_success(outcome)
    else:
        on_failure(outcome)
    return True
