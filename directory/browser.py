"""
Geofenced resource browser.

One :class:`GeofencedBrowser` drives both the medical shop and the hospital
pages.  It is parameterized by

* a fetch strategy, the :class:`ResourceSource` (``nearby`` / ``all``), and
* a render-item capability, the :class:`ItemPresenter` (templates, labels and
  what a map marker shows).

State per page: the device location (if any), the search radius, the
last-fetched list, the selected resource and a dismissible error.  Card
clicks and marker clicks both go through :meth:`GeofencedBrowser.select`, so
the detail pane, the list highlight and the map stay in step.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol
from urllib.parse import urlencode

from directory.exceptions import ApiError
from directory.geolocation import LocationFailure, Position
from directory.models import Coordinates, record_id
from directory.services.resources import km_to_meters

logger = logging.getLogger(__name__)

RADIUS_CHOICES = (5, 10, 20, 50)
DEFAULT_RADIUS_KM = 10

ZOOM_NEAR_DEVICE = 13
ZOOM_OVERVIEW = 10


class ResourceSource(Protocol):
    def nearby(self, latitude: float, longitude: float, max_distance: int) -> list[dict]: ...

    def all(self) -> list[dict]: ...


@dataclass(frozen=True)
class ItemPresenter:
    """How one resource type is rendered in the list, detail pane and map."""
    slug: str
    title: str
    subtitle: str
    noun_plural: str
    card_template: str
    detail_template: str
    empty_title: str
    placeholder_text: str
    loading_text: str
    nearby_error: str
    list_error: str

    def marker_title(self, item: dict) -> str:
        return item.get('name') or ''

    def marker_subtitle(self, item: dict) -> str:
        return item.get('address') or ''


@dataclass(frozen=True)
class Marker:
    id: str
    lat: float
    lng: float
    title: str
    address: str
    selected: bool

    @property
    def directions_url(self) -> str:
        return 'https://www.google.com/maps/dir/?' + urlencode({
            'api': 1, 'destination': f'{self.lat},{self.lng}', 'travelmode': 'driving',
        })

    def as_dict(self) -> dict:
        return {
            'id': self.id, 'lat': self.lat, 'lng': self.lng, 'title': self.title,
            'address': self.address, 'selected': self.selected, 'directions': self.directions_url,
        }


class GeofencedBrowser:
    def __init__(self, source: ResourceSource, presenter: ItemPresenter, *,
                 radius_km: int = DEFAULT_RADIUS_KM):
        self.source = source
        self.presenter = presenter
        self.radius_km = radius_km if radius_km in RADIUS_CHOICES else DEFAULT_RADIUS_KM
        self.location: Optional[Position] = None
        self.location_failure: Optional[LocationFailure] = None
        self.items: list[dict] = []
        self.selected: Optional[dict] = None
        self.error = ''
        self.loaded = False
        self.generation = 0
        self.applied_generation = 0

    # ------------------------------------------------------------------
    # location & radius
    # ------------------------------------------------------------------
    def location_found(self, position: Position) -> None:
        self.location = position
        self.location_failure = None
        self.refresh()

    def location_failed(self, failure: LocationFailure) -> None:
        self.location = None
        self.location_failure = failure
        self.refresh()

    def set_radius(self, radius_km: int) -> None:
        if radius_km not in RADIUS_CHOICES:
            raise ValueError(f'radius must be one of {RADIUS_CHOICES}')
        if radius_km == self.radius_km and self.loaded:
            return
        self.radius_km = radius_km
        self.refresh()

    @property
    def max_distance(self) -> int:
        return km_to_meters(self.radius_km)

    # ------------------------------------------------------------------
    # fetching
    # ------------------------------------------------------------------
    def refresh(self) -> None:
        """Fetch nearby when a location is known, else the full list."""
        generation = self.begin_fetch()
        if self.location is not None:
            fetch: Callable[[], list[dict]] = lambda: self.source.nearby(
                self.location.latitude, self.location.longitude, self.max_distance)
            failure = self.presenter.nearby_error
        else:
            fetch = self.source.all
            failure = self.presenter.list_error
        try:
            items = fetch()
        except ApiError as e:
            logger.warning('%s fetch failed: %s', self.presenter.slug, e)
            self.fail(generation, failure)
            return
        self.apply(generation, items)

    def begin_fetch(self) -> int:
        self.generation += 1
        return self.generation

    def apply(self, generation: int, items: list[dict]) -> bool:
        """Install a fetched list unless a newer fetch has already landed."""
        if generation < self.applied_generation:
            logger.debug('%s: dropping stale result %s < %s', self.presenter.slug,
                         generation, self.applied_generation)
            return False
        self.applied_generation = generation
        self.items = list(items or [])
        self.selected = None
        self.error = ''
        self.loaded = True
        return True

    def fail(self, generation: int, message: str) -> bool:
        """Record a failed fetch; the previous list stays on screen."""
        if generation < self.applied_generation:
            return False
        self.applied_generation = generation
        self.error = message
        self.loaded = True
        return True

    def dismiss_error(self) -> None:
        self.error = ''

    # ------------------------------------------------------------------
    # selection
    # ------------------------------------------------------------------
    def select(self, resource_id: Optional[str]) -> Optional[dict]:
        """Select by id within the last-fetched list (cards and markers)."""
        self.selected = None
        if resource_id:
            for item in self.items:
                if record_id(item) == str(resource_id):
                    self.selected = item
                    break
        return self.selected

    select_marker = select

    @property
    def selected_id(self) -> Optional[str]:
        return record_id(self.selected)

    def replace_item(self, item: dict) -> None:
        """Swap in a fresher copy of one listed resource, keeping selection."""
        rid = record_id(item)
        for i, existing in enumerate(self.items):
            if record_id(existing) == rid:
                self.items[i] = item
                if self.selected_id == rid:
                    self.selected = item
                return

    # ------------------------------------------------------------------
    # map
    # ------------------------------------------------------------------
    @property
    def show_map(self) -> bool:
        return bool(self.items)

    def map_center(self) -> Optional[list[float]]:
        """``[lat, lng]``: the device, else the first resource."""
        if self.location is not None:
            return [self.location.latitude, self.location.longitude]
        for item in self.items[:1]:
            coords = Coordinates.from_record(item)
            if coords is not None:
                return coords.as_latlng()
        return None

    @property
    def map_zoom(self) -> int:
        return ZOOM_NEAR_DEVICE if self.location is not None else ZOOM_OVERVIEW

    def markers(self) -> list[Marker]:
        out = []
        selected = self.selected_id
        for item in self.items:
            coords = Coordinates.from_record(item)
            rid = record_id(item)
            if coords is None or rid is None:
                continue
            out.append(Marker(
                id=rid, lat=coords.lat, lng=coords.lng,
                title=self.presenter.marker_title(item),
                address=self.presenter.marker_subtitle(item),
                selected=rid == selected,
            ))
        return out

    # ------------------------------------------------------------------
    # persistence between requests
    # ------------------------------------------------------------------
    def to_state(self) -> dict:
        return {
            'radius_km': self.radius_km,
            'location': self.location.as_dict() if self.location else None,
            'location_failure': self.location_failure.reason if self.location_failure else None,
            'items': self.items,
            'selected': self.selected_id,
            'error': self.error,
            'loaded': self.loaded,
            'generation': self.generation,
            'applied_generation': self.applied_generation,
        }

    def load_state(self, state: Optional[dict]) -> None:
        if not state:
            return
        radius = state.get('radius_km')
        self.radius_km = radius if radius in RADIUS_CHOICES else self.radius_km
        self.location = Position.from_dict(state.get('location'))
        reason = state.get('location_failure')
        self.location_failure = LocationFailure(reason) if reason else None
        self.items = list(state.get('items') or [])
        self.error = state.get('error') or ''
        self.loaded = bool(state.get('loaded'))
        self.generation = int(state.get('generation') or 0)
        self.applied_generation = int(state.get('applied_generation') or 0)
        self.select(state.get('selected'))
