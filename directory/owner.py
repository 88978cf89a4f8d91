"""
Owner management panel.

An owner (``medical_shop_owner`` or ``hospital_owner``) manages exactly one
resource.  :class:`OwnerPanel` loads it (a 404 means "not created yet" and
switches the page to the creation form), and a :class:`CollectionEditor`
edits each nested line-item list.

The backend only accepts whole collections, so every add, edit, delete or
stock change computes the complete new list and submits it as one
:class:`ReplaceCollection` command.  Local state changes only after the
backend has accepted the command.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from directory.exceptions import ActionFailed, ApiError, ValidationFailed
from directory.models import ROLE_HOSPITAL_OWNER, ROLE_SHOP_OWNER, record_id
from directory.serializers.fields import clean_input, field_errors
from directory.serializers.items import (
    DoctorSerializer,
    LabTestSerializer,
    MedicineSerializer,
    ServiceSerializer,
    StockSerializer,
)
from directory.serializers.resources import (
    CREATE_REQUIRED,
    HospitalCreateSerializer,
    HospitalDetailsSerializer,
    ShopCreateSerializer,
    ShopDetailsSerializer,
)
from directory.services.api import ApiClient
from directory.services.resources import HospitalsAPI, MedicalShopsAPI, ResourceAPI

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    label: str
    noun: str
    serializer_class: type

    @property
    def required_message(self) -> str:
        return self.serializer_class.REQUIRED

    @property
    def fields_template(self) -> str:
        return f'directory/owner/_{self.noun}_fields.html'


MEDICINES = CollectionSpec('medicines', 'Medicines', 'medicine', MedicineSerializer)
DOCTORS = CollectionSpec('doctors', 'Doctors', 'doctor', DoctorSerializer)
TESTS = CollectionSpec('tests', 'Tests', 'test', LabTestSerializer)
SERVICES = CollectionSpec('services', 'Services', 'service', ServiceSerializer)

COLLECTION_SPECS = {spec.name: spec for spec in (MEDICINES, DOCTORS, TESTS, SERVICES)}


def validate_item(spec: CollectionSpec, raw: Any) -> dict:
    """Validate one submitted line item and parse its numbers."""
    s = spec.serializer_class(data=clean_input(raw))
    if not s.is_valid():
        raise ValidationFailed(spec.required_message, field_errors(s.errors))
    return dict(s.validated_data)


@dataclass(frozen=True)
class ReplaceCollection:
    """Replace ``collection`` of ``resource_id`` with exactly ``items``.

    Running the same command twice leaves the backend in the same state.
    """
    resource_id: str
    collection: str
    items: tuple

    def execute(self, api: ResourceAPI) -> Optional[dict]:
        return api.replace_collection(self.resource_id, self.collection, self.payload())

    def payload(self) -> list[dict]:
        return [dict(item) for item in self.items]


class CollectionEditor:
    def __init__(self, api: ResourceAPI, resource: dict, spec: CollectionSpec):
        self.api = api
        self.resource = resource
        self.spec = spec
        self.items: list[dict] = list(resource.get(spec.name) or [])

    def command(self, items: list[dict]) -> ReplaceCollection:
        return ReplaceCollection(record_id(self.resource), self.spec.name, tuple(items))

    def _index(self, index: Any) -> int:
        try:
            i = int(index)
        except (TypeError, ValueError):
            raise ValidationFailed(f'Unknown {self.spec.noun}')
        if not 0 <= i < len(self.items):
            raise ValidationFailed(f'Unknown {self.spec.noun}')
        return i

    # Each builder returns the command without sending it.
    def add_command(self, raw: Any) -> ReplaceCollection:
        return self.command([*self.items, validate_item(self.spec, raw)])

    def edit_command(self, index: Any, raw: Any) -> ReplaceCollection:
        i = self._index(index)
        # the form owns its fields; a blanked optional field is dropped
        owned = self.spec.serializer_class().fields.keys()
        kept = {k: v for k, v in self.items[i].items() if k not in owned}
        edited = {**kept, **validate_item(self.spec, raw)}
        return self.command([*self.items[:i], edited, *self.items[i + 1:]])

    def delete_command(self, index: Any) -> ReplaceCollection:
        i = self._index(index)
        return self.command([*self.items[:i], *self.items[i + 1:]])

    def stock_command(self, index: Any, stock: Any) -> ReplaceCollection:
        i = self._index(index)
        s = StockSerializer(data={'stock': stock})
        if not s.is_valid():
            raise ValidationFailed('Stock must be a whole number', field_errors(s.errors))
        updated = {**self.items[i], 'stock': s.validated_data['stock']}
        return self.command([*self.items[:i], updated, *self.items[i + 1:]])

    def submit(self, command: ReplaceCollection, verb: str) -> list[dict]:
        """Send ``command``; on failure nothing local changes."""
        try:
            command.execute(self.api)
        except ApiError as e:
            logger.warning('replace %s of %s failed: %s', command.collection, command.resource_id, e)
            raise ActionFailed(f'Failed to {verb} {self.spec.noun}')
        self.items = command.payload()
        self.resource = {**self.resource, self.spec.name: self.items}
        return self.items

    def add(self, raw: Any) -> list[dict]:
        return self.submit(self.add_command(raw), 'add')

    def edit(self, index: Any, raw: Any) -> list[dict]:
        return self.submit(self.edit_command(index, raw), 'save')

    def delete(self, index: Any) -> list[dict]:
        return self.submit(self.delete_command(index), 'delete')

    def set_stock(self, index: Any, stock: Any) -> list[dict]:
        return self.submit(self.stock_command(index, stock), 'update stock of')


@dataclass(frozen=True)
class OwnerKind:
    role: str
    noun: str
    api_class: type
    collections: tuple
    create_serializer: type
    details_serializer: type


SHOP_KIND = OwnerKind(ROLE_SHOP_OWNER, 'medical shop', MedicalShopsAPI, (MEDICINES,),
                      ShopCreateSerializer, ShopDetailsSerializer)
HOSPITAL_KIND = OwnerKind(ROLE_HOSPITAL_OWNER, 'hospital', HospitalsAPI, (DOCTORS, TESTS, SERVICES),
                          HospitalCreateSerializer, HospitalDetailsSerializer)

OWNER_KINDS = {k.role: k for k in (SHOP_KIND, HOSPITAL_KIND)}


class OwnerPanel:
    def __init__(self, client: ApiClient, role: Optional[str]):
        if role not in OWNER_KINDS:
            raise ValueError(f'{role!r} does not own a resource')
        self.kind = OWNER_KINDS[role]
        self.api: ResourceAPI = self.kind.api_class(client)
        self.resource: Optional[dict] = None
        self.needs_creation = False
        self.error = ''

    def load(self) -> Optional[dict]:
        try:
            self.resource = self.api.mine()
        except ApiError as e:
            self.resource = None
            if e.is_not_found:
                self.needs_creation = True
                return None
            logger.warning('loading own %s failed: %s', self.kind.noun, e)
            self.error = 'Failed to load data'
            return None
        if self.resource is None:
            self.needs_creation = True
        return self.resource

    @property
    def not_created_message(self) -> str:
        return f'You have not created your {self.kind.noun} yet.'

    @property
    def tabs(self) -> list[tuple[str, str]]:
        if self.resource is None:
            return []
        return [('overview', 'Overview')] + [(c.name, f'Manage {c.label}') for c in self.kind.collections]

    def spec(self, name: str) -> CollectionSpec:
        for c in self.kind.collections:
            if c.name == name:
                return c
        raise ValidationFailed(f'Unknown collection {name!r}')

    def editor(self, name: str) -> CollectionEditor:
        if self.resource is None:
            raise ValidationFailed(self.not_created_message)
        return CollectionEditor(self.api, self.resource, self.spec(name))

    def create(self, raw: Any, drafts: Optional[dict] = None) -> Optional[dict]:
        s = self.kind.create_serializer(data=clean_input(raw))
        if not s.is_valid():
            raise ValidationFailed(CREATE_REQUIRED, field_errors(s.errors))
        payload = s.payload()
        for name, items in (drafts or {}).items():
            payload[name] = list(items)
        try:
            created = self.api.create(payload)
        except ApiError as e:
            raise ActionFailed(e.message_or(f'Failed to create {self._short_noun}'))
        self.resource = created
        self.needs_creation = created is None
        return created

    def update_details(self, raw: Any) -> Optional[dict]:
        if self.resource is None:
            raise ValidationFailed(self.not_created_message)
        s = self.kind.details_serializer(data=clean_input(raw))
        if not s.is_valid():
            raise ValidationFailed(CREATE_REQUIRED, field_errors(s.errors))
        payload = s.payload()
        try:
            updated = self.api.update(record_id(self.resource), payload)
        except ApiError as e:
            raise ActionFailed(e.message_or(f'Failed to update {self._short_noun}'))
        self.resource = updated or {**self.resource, **payload}
        return self.resource

    @property
    def _short_noun(self) -> str:
        return 'shop' if self.kind is SHOP_KIND else 'hospital'


class HospitalDraft:
    """Doctors, tests and services collected before the hospital exists."""

    def __init__(self, state: Optional[dict] = None):
        state = state or {}
        self.items = {c.name: list(state.get(c.name) or []) for c in HOSPITAL_KIND.collections}

    def add(self, name: str, raw: Any) -> dict:
        if name not in self.items:
            raise ValidationFailed(f'Unknown collection {name!r}')
        item = validate_item(COLLECTION_SPECS[name], raw)
        self.items[name].append(item)
        return item

    def remove(self, name: str, index: Any) -> None:
        items = self.items.get(name)
        if items is None:
            raise ValidationFailed(f'Unknown collection {name!r}')
        try:
            del items[int(index)]
        except (IndexError, TypeError, ValueError):
            raise ValidationFailed(f'Unknown {COLLECTION_SPECS[name].noun}')

    def to_state(self) -> dict:
        return {k: list(v) for k, v in self.items.items()}

