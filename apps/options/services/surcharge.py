"""
Turns a customer's answers into cart line properties and the additional-price
signal read by the cart transform.
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional

from apps.options.choices import OptionType
from apps.options.conf import get_storefront_settings
from .cart_transform import PRICE_ATTRIBUTE, PROPERTIES_ATTRIBUTE
from .definitions import OptionDefinition
from .money import format_amount
from .renderers import clamp_number_input, filter_text_input
from .visibility import VisibilityResolver


@dataclass
class LineSelection:
    properties: Dict[str, str] = field(default_factory=dict)
    additional_price: Decimal = Decimal('0')
    notices: Dict[str, str] = field(default_factory=dict)

    def attributes(self) -> Dict[str, str]:
        """Cart line attributes carrying the answers and the surcharge."""
        attributes = {PROPERTIES_ATTRIBUTE: json.dumps(self.properties, ensure_ascii=False)}
        if self.additional_price > 0:
            attributes[PRICE_ATTRIBUTE] = format_amount(self.additional_price)
        return attributes


def normalise_answer(option: OptionDefinition, raw, settings=None):
    """
    Normalise one raw answer the way the storefront input handlers do.

    Returns:
        Tuple of (value or None when unanswered, correction notice or None)
    """
    if raw is None:
        return None, None

    if option.type == OptionType.TEXT:
        value = filter_text_input(str(raw)).strip()
        return (value or None), None

    if option.type == OptionType.NUMBER:
        settings = settings or get_storefront_settings()
        result = clamp_number_input(raw, settings.number_min, settings.number_max)
        if result.value is None:
            return None, None
        return str(result.value), result.notice

    # dropdown, dropdown_thumbnail and radio only accept declared labels
    chosen = option.get_value(str(raw))
    return (chosen.label if chosen else None), None


def option_surcharge(option: OptionDefinition, value: Optional[str]) -> Decimal:
    """Surcharge for one normalised answer."""
    if value is None:
        return Decimal('0')
    if option.uses_value_prices:
        chosen = option.get_value(value)
        if chosen is not None and chosen.price is not None and chosen.price > 0:
            return chosen.price
        return Decimal('0')
    if option.flat_price is not None:
        return option.flat_price
    return Decimal('0')


def build_line_properties(
    options: Iterable[OptionDefinition],
    selections: Mapping[str, object],
    settings=None
) -> LineSelection:
    """
    Build the cart line for the given answers.

    Args:
        options: Option definitions of the product page
        selections: Raw answers keyed by option name, as posted in
            ``properties[<name>]``

    Hidden options contribute neither a property nor a surcharge.
    """
    options = list(options)
    settings = settings or get_storefront_settings()
    # only declared labels drive visibility, as only those are stored
    radio_selections = {}
    for option in options:
        if option.is_radio:
            value, _ = normalise_answer(option, selections.get(option.name), settings)
            if value is not None:
                radio_selections[option.id] = value
    resolver = VisibilityResolver(options, radio_selections)

    line = LineSelection()
    for option in options:
        if not resolver.is_visible(option.id):
            continue
        value, notice = normalise_answer(option, selections.get(option.name), settings)
        if notice:
            line.notices[option.name] = notice
        if value is None:
            continue
        line.properties[option.name] = value
        line.additional_price += option_surcharge(option, value)
    return line
