"""
The two resource types shown by the geofenced browser.

A :class:`ResourceKind` pairs the fetch strategy (an API wrapper class) with
the render-item capability (an :class:`~directory.browser.ItemPresenter`).
"""
from dataclasses import dataclass

from directory.browser import ItemPresenter
from directory.services.resources import HospitalsAPI, MedicalShopsAPI


@dataclass(frozen=True)
class ResourceKind:
    presenter: ItemPresenter
    api_class: type

    @property
    def slug(self) -> str:
        return self.presenter.slug

    @property
    def state_key(self) -> str:
        return f'browser:{self.presenter.slug}'


MEDICAL_SHOPS = ResourceKind(
    presenter=ItemPresenter(
        slug='medical-shops',
        title='Medical Shops',
        subtitle='Find nearby pharmacies and medical stores with available medicines and supplies',
        noun_plural='shops',
        card_template='directory/browse/_shop_card.html',
        detail_template='directory/browse/_shop_detail.html',
        empty_title='No Medical Shops Found',
        placeholder_text='Select a medical shop from the list to view detailed information '
                         'including available medicines and reviews',
        loading_text='Finding nearby medical shops...',
        nearby_error='Failed to fetch nearby shops',
        list_error='Failed to fetch shops',
    ),
    api_class=MedicalShopsAPI,
)

HOSPITALS = ResourceKind(
    presenter=ItemPresenter(
        slug='hospitals',
        title='Hospitals',
        subtitle='Browse hospitals, doctors, diagnostic tests and services near you',
        noun_plural='hospitals',
        card_template='directory/browse/_hospital_card.html',
        detail_template='directory/browse/_hospital_detail.html',
        empty_title='No Hospitals Found',
        placeholder_text='Select a hospital from the list to view doctors, tests and services',
        loading_text='Finding nearby hospitals...',
        nearby_error='Failed to fetch nearby hospitals',
        list_error='Failed to fetch hospitals',
    ),
    api_class=HospitalsAPI,
)
