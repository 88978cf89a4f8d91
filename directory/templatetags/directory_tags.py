from django import template

from directory.models import Coordinates, record_id as _record_id, role_label

register = template.Library()


@register.filter
def record_id(record):
    """``{{ shop|record_id }}``: templates cannot read ``_id`` directly."""
    return _record_id(record) or ''


@register.filter
def lnglat(record):
    coords = Coordinates.from_record(record)
    return f'{coords.lat:.5f}, {coords.lng:.5f}' if coords else ''


@register.filter
def role_name(role):
    return role_label(role)


@register.filter
def get_item(mapping, key):
    try:
        return mapping.get(key)
    except AttributeError:
        return None


@register.filter
def as_csv(value):
    if isinstance(value, (list, tuple)):
        return ', '.join(str(v) for v in value)
    return value or ''
