"""
Option models for storefront product customisation.

Model Hierarchy:
- OptionSet: Shop-scoped collection, applied to all products or by product tag
- Option: One control (text, number, dropdown, dropdown_thumbnail, radio)
  with its values stored inline and an optional radio dependency
"""

from .option_set import OptionSet
from .option import Option
from apps.options.choices import OptionType, MULTI_VALUE_TYPES, FLAT_PRICE_TYPES

__all__ = [
    'OptionSet',
    'Option',
    'OptionType',
    'MULTI_VALUE_TYPES',
    'FLAT_PRICE_TYPES',
]
