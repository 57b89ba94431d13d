from django.db import models


class OptionType(models.TextChoices):
    TEXT = 'text', 'Text'
    NUMBER = 'number', 'Number'
    DROPDOWN = 'dropdown', 'Dropdown'
    DROPDOWN_THUMBNAIL = 'dropdown_thumbnail', 'Dropdown with thumbnails'
    RADIO = 'radio', 'Radio buttons'


MULTI_VALUE_TYPES = frozenset({
    OptionType.DROPDOWN,
    OptionType.DROPDOWN_THUMBNAIL,
    OptionType.RADIO,
})

# A single option-level price applies regardless of the entered/chosen value
FLAT_PRICE_TYPES = frozenset({
    OptionType.TEXT,
    OptionType.NUMBER,
    OptionType.DROPDOWN,
})
