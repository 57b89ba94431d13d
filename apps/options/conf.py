from dataclasses import dataclass, replace

from django.conf import settings


@dataclass(frozen=True)
class StorefrontSettings:
    currency_symbol: str = '$'
    number_min: int = 0
    number_max: int = 99
    notice_timeout_ms: int = 3000
    select_placeholder: str = 'Please select...'
    text_placeholder: str = 'Please enter any characters except numbers'


def get_storefront_settings(**overrides):
    """
    Storefront rendering settings from ``settings.PRODUCT_OPTIONS``.

    Keys are the upper-case field names, e.g. ``CURRENCY_SYMBOL``.
    """
    configured = getattr(settings, 'PRODUCT_OPTIONS', {}) or {}
    values = {
        name.lower(): value
        for name, value in configured.items()
        if name.lower() in StorefrontSettings.__dataclass_fields__
    }
    values.update(overrides)
    return replace(StorefrontSettings(), **values)
