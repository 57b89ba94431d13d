"""
Immutable option definitions consumed by the visibility resolver, the
renderers and the surcharge calculator.

Definitions come either from ``Option.to_definition()`` or straight from the
storefront JSON shape (``dependOnOptionId``, ``showWhenValue``, ``values``
possibly serialized as a JSON string).
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from apps.options.choices import OptionType, MULTI_VALUE_TYPES, FLAT_PRICE_TYPES
from apps.options.exceptions import OptionDefinitionError
from .money import parse_amount


@dataclass(frozen=True)
class OptionValueDefinition:
    id: str
    label: str
    image: Optional[str] = None
    price: Optional[Decimal] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int) -> 'OptionValueDefinition':
        if not isinstance(data, dict):
            raise OptionDefinitionError(f"Option value #{index} is not an object")
        label = str(data.get('label') or '').strip()
        if not label:
            raise OptionDefinitionError(f"Option value #{index} has no label")
        return cls(
            id=str(data.get('id') or index),
            label=label,
            image=data.get('image') or None,
            price=parse_amount(data.get('price')),
        )


@dataclass(frozen=True)
class OptionDefinition:
    id: str
    type: OptionType
    name: str
    required: bool = False
    values: Tuple[OptionValueDefinition, ...] = field(default_factory=tuple)
    price: Optional[Decimal] = None
    depend_on_option_id: Optional[str] = None
    show_when_value: Optional[str] = None

    @property
    def uses_flat_price(self) -> bool:
        return self.type in FLAT_PRICE_TYPES

    @property
    def uses_value_prices(self) -> bool:
        return self.type == OptionType.DROPDOWN_THUMBNAIL

    @property
    def is_radio(self) -> bool:
        return self.type == OptionType.RADIO

    @property
    def field_name(self) -> str:
        """Form field name; the storefront cart stores it as a line item property."""
        return f"properties[{self.name}]"

    @property
    def flat_price(self) -> Optional[Decimal]:
        """The option-level surcharge, only for types that use one."""
        if self.uses_flat_price and self.price is not None and self.price > 0:
            return self.price
        return None

    def get_value(self, label: Optional[str]) -> Optional[OptionValueDefinition]:
        for value in self.values:
            if value.label == label:
                return value
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OptionDefinition':
        """
        Build a definition from its JSON shape.

        Raises:
            OptionDefinitionError: unknown type, missing id/name or bad values
        """
        if not isinstance(data, dict):
            raise OptionDefinitionError("Option definition must be an object")

        try:
            option_type = OptionType(data.get('type'))
        except ValueError:
            raise OptionDefinitionError(f"Unknown option type: {data.get('type')!r}")

        option_id = data.get('id')
        name = str(data.get('name') or '').strip()
        if option_id in (None, '') or not name:
            raise OptionDefinitionError("Option definition needs an id and a name")

        values = ()
        if option_type in MULTI_VALUE_TYPES:
            values = tuple(
                OptionValueDefinition.from_dict(value, index)
                for index, value in enumerate(_load_values(data.get('values')))
            )

        depend_on = data.get('dependOnOptionId', data.get('depend_on_option_id'))
        show_when = data.get('showWhenValue', data.get('show_when_value'))

        return cls(
            id=str(option_id),
            type=option_type,
            name=name,
            required=bool(data.get('required')),
            values=values,
            price=parse_amount(data.get('price')),
            depend_on_option_id=str(depend_on) if depend_on not in (None, '') else None,
            show_when_value=str(show_when) if show_when is not None else None,
        )


def _load_values(raw: Any) -> List[Any]:
    if raw in (None, ''):
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raise OptionDefinitionError("Option values are not valid JSON")
    if not isinstance(raw, list):
        raise OptionDefinitionError("Option values must be a list")
    return raw


def load_definitions(items: Iterable[Dict[str, Any]]) -> List[OptionDefinition]:
    """Parse a list of option payloads, preserving order."""
    return [OptionDefinition.from_dict(item) for item in items]
