import bleach
from rest_framework import serializers


class CleanCharField(serializers.CharField):
    """CharField that strips markup before the text is sent upstream."""

    def to_internal_value(self, data):
        v = super().to_internal_value(data)
        return bleach.clean(v.strip(), tags=[], strip=True)


def clean_input(data) -> dict:
    """Plain dict of a submitted form with blank values dropped.

    Blank optional inputs are omitted from payloads rather than sent as
    empty strings, so a missing required value fails as "required".
    """
    if hasattr(data, 'dict'):
        data = data.dict()
    out = {}
    for k, v in (data or {}).items():
        if isinstance(v, str):
            if v.strip() == '':
                continue
            if not k.lower().endswith('password'):
                v = v.strip()
        out[k] = v
    return out


def field_errors(errors) -> dict:
    """First message per field from ``serializer.errors``."""
    out = {}
    for field, msgs in (errors or {}).items():
        if isinstance(msgs, (list, tuple)) and msgs:
            out[field] = str(msgs[0])
        elif isinstance(msgs, dict):
            out[field] = str(next(iter(msgs.values()), ''))
        else:
            out[field] = str(msgs)
    return out
