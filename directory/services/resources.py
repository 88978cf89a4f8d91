"""
Wrappers around the medical shop and hospital endpoints.

Both resource types share the same surface (list, nearby search, detail,
the owner's own record, create/update and whole-collection replacement of a
nested line-item list); hospitals and shops only add their own extras.
"""
from __future__ import annotations

from typing import Optional

from directory.models import HOSPITAL_COLLECTIONS, SHOP_COLLECTIONS
from directory.services.api import ApiClient, unwrap


def km_to_meters(radius_km: float) -> int:
    return int(round(radius_km * 1000))


class ResourceAPI:
    base_path = ''
    mine_path = ''
    collections: tuple = ()

    def __init__(self, client: ApiClient):
        self.client = client

    def nearby(self, latitude: float, longitude: float, max_distance: int) -> list[dict]:
        """Resources within ``max_distance`` meters of the point."""
        body = self.client.get(f'{self.base_path}/nearby', {
            'latitude': latitude, 'longitude': longitude, 'maxDistance': max_distance,
        })
        return list(unwrap(body, []) or [])

    def all(self) -> list[dict]:
        return list(unwrap(self.client.get(self.base_path), []) or [])

    def get(self, resource_id: str) -> Optional[dict]:
        return unwrap(self.client.get(f'{self.base_path}/{resource_id}'))

    def mine(self) -> Optional[dict]:
        return unwrap(self.client.get(self.mine_path))

    def create(self, data: dict) -> Optional[dict]:
        return unwrap(self.client.post(self.base_path, data))

    def update(self, resource_id: str, data: dict) -> Optional[dict]:
        return unwrap(self.client.put(f'{self.base_path}/{resource_id}', data))

    def replace_collection(self, resource_id: str, collection: str, items: list[dict]) -> Optional[dict]:
        """Send the entire nested list; the backend has no per-item update."""
        if collection not in self.collections:
            raise ValueError(f'{collection!r} is not a collection of {self.base_path}')
        return unwrap(self.client.put(f'{self.base_path}/{resource_id}/{collection}', {collection: items}))


class MedicalShopsAPI(ResourceAPI):
    base_path = '/medical-shops'
    mine_path = '/medical-shops/my-shop'
    collections = SHOP_COLLECTIONS

    def add_review(self, shop_id: str, review: dict):
        return unwrap(self.client.post(f'{self.base_path}/{shop_id}/reviews', review))


class HospitalsAPI(ResourceAPI):
    base_path = '/hospitals'
    mine_path = '/hospitals/my-hospital'
    collections = HOSPITAL_COLLECTIONS

    def get_doctors(self, hospital_id: str, specialization: Optional[str] = None) -> list[dict]:
        body = self.client.get(f'{self.base_path}/{hospital_id}/doctors', {'specialization': specialization or None})
        return list(unwrap(body, []) or [])
