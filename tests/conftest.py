"""Pytest fixtures for product option tests."""

import json
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.options.models import Option, OptionSet, OptionType
from apps.options.services.definitions import OptionDefinition


def make_definition(option_id, option_type, name=None, **kwargs):
    """Build a definition from the storefront JSON shape."""
    data = {
        'id': option_id,
        'type': option_type,
        'name': name or f"Option {option_id}",
    }
    data.update(kwargs)
    return OptionDefinition.from_dict(data)


def make_line(line_id='gid://shopify/CartLine/1', amount='20.00', properties=None, price=None, blob=None):
    """Build one line of the checkout function input."""
    if blob is None and properties is not None:
        blob = json.dumps(properties)
    return {
        'id': line_id,
        'quantity': 2,
        'merchandise': {'id': 'gid://shopify/ProductVariant/42'},
        'cost': {'amountPerQuantity': {'amount': amount}},
        'attribute': {'value': blob} if blob is not None else None,
        'priceAttribute': {'value': price} if price is not None else None,
    }


@pytest.fixture
def engraving_options():
    """A gift wrap radio governing a message field and a ribbon dropdown."""
    return [
        make_definition('wrap', 'radio', 'Gift wrap', required=True, values=[
            {'id': 'no', 'label': 'No'},
            {'id': 'yes', 'label': 'Yes'},
        ]),
        make_definition('message', 'text', 'Message', required=True, price='2.50',
                        dependOnOptionId='wrap', showWhenValue='Yes'),
        make_definition('ribbon', 'dropdown', 'Ribbon', price='1.00', values=[
            {'label': 'Red'},
            {'label': 'Gold', 'image': 'https://cdn.example.com/gold.png'},
        ], dependOnOptionId='wrap', showWhenValue='Yes'),
        make_definition('size', 'number', 'Size', price='3.00'),
        make_definition('finish', 'dropdown_thumbnail', 'Finish', values=[
            {'label': 'Matte', 'price': '4.00', 'image': 'https://cdn.example.com/matte.png'},
            {'label': 'Gloss', 'price': '6.50'},
            {'label': 'Raw'},
        ]),
    ]


@pytest.fixture
def option_set(db):
    option_set = OptionSet.objects.create(
        name='Engraving',
        shop='demo.myshopify.com',
        apply_to_all=False,
        product_tags='engravable, gifts',
    )
    wrap = Option.objects.create(
        option_set=option_set,
        name='Gift wrap',
        type=OptionType.RADIO,
        required=True,
        values=[{'id': 'no', 'label': 'No'}, {'id': 'yes', 'label': 'Yes'}],
        position=0,
    )
    Option.objects.create(
        option_set=option_set,
        name='Message',
        type=OptionType.TEXT,
        required=True,
        price=Decimal('2.50'),
        depend_on=wrap,
        show_when_value='Yes',
        position=1,
    )
    Option.objects.create(
        option_set=option_set,
        name='Finish',
        type=OptionType.DROPDOWN_THUMBNAIL,
        values=[{'label': 'Matte', 'price': '4.00'}, {'label': 'Gloss', 'price': '6.50'}],
        position=2,
    )
    return option_set


@pytest.fixture
def global_option_set(db):
    option_set = OptionSet.objects.create(
        name='Notes',
        shop='demo.myshopify.com',
        apply_to_all=True,
    )
    Option.objects.create(option_set=option_set, name='Note', type=OptionType.TEXT)
    return option_set


@pytest.fixture
def api_client():
    return APIClient()
