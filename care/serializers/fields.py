import bleach
from rest_framework import serializers


def required_messages(label: str) -> dict:
    msg = f'{label} is required'
    return {'required': msg, 'blank': msg, 'null': msg}


class CleanCharField(serializers.CharField):
    """CharField that strips any HTML markup from the submitted text."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return bleach.clean(value, tags=[], strip=True)


def text(label: str, *, required: bool = True, max_length: int = 255, **kwargs) -> CleanCharField:
    if required:
        return CleanCharField(max_length=max_length, error_messages=required_messages(label), **kwargs)
    return CleanCharField(max_length=max_length, required=False, allow_blank=True, default='', **kwargs)
