"""
Record helpers for the directory client.

The client owns no tables: users, medical shops and hospitals are plain
dicts exchanged verbatim with the directory API.  This module only holds the
role vocabulary, the nested collections each resource type carries and the
coordinate value object used to talk to the geospatial endpoints.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

ROLE_USER = 'user'
ROLE_SHOP_OWNER = 'medical_shop_owner'
ROLE_HOSPITAL_OWNER = 'hospital_owner'

ROLE_CHOICES = [
    (ROLE_USER, 'Regular User'),
    (ROLE_SHOP_OWNER, 'Medical Shop Owner'),
    (ROLE_HOSPITAL_OWNER, 'Hospital Owner'),
]

OWNER_ROLES = {ROLE_SHOP_OWNER, ROLE_HOSPITAL_OWNER}

# Nested line-item collections, always replaced as a whole
SHOP_COLLECTIONS = ('medicines',)
HOSPITAL_COLLECTIONS = ('doctors', 'tests', 'services')

HOSPITAL_TYPES = ['Private', 'Government', 'Clinic', 'Multi-specialty']


@dataclass(frozen=True)
class Coordinates:
    """A point in the backend's GeoJSON order: longitude first."""
    lng: float
    lat: float

    @classmethod
    def from_record(cls, record: Optional[dict]) -> Optional['Coordinates']:
        """Read ``record['location']['coordinates'] == [lng, lat]``."""
        location = (record or {}).get('location') or {}
        coords = location.get('coordinates') or []
        if len(coords) < 2 or coords[0] is None or coords[1] is None:
            return None
        try:
            return cls(lng=float(coords[0]), lat=float(coords[1]))
        except (TypeError, ValueError):
            return None

    def as_lnglat(self) -> list[float]:
        return [self.lng, self.lat]

    def as_latlng(self) -> list[float]:
        # Leaflet and Google Maps take latitude first
        return [self.lat, self.lng]


def record_id(record: Optional[dict]) -> Optional[str]:
    """Return the identity of a backend record (``_id``, else ``id``)."""
    if not record:
        return None
    value: Any = record.get('_id', record.get('id'))
    return str(value) if value is not None else None


def role_label(role: Optional[str]) -> str:
    return dict(ROLE_CHOICES).get(role or '', (role or '').replace('_', ' ').title())
