import json
from decimal import Decimal

import pytest

from apps.options.services.cart_transform import (
    PROCESSED_MARKER,
    PROPERTIES_ATTRIBUTE,
    LineState,
    CartLine,
    apply_operations,
    cart_transform_run,
    classify_line,
    parse_attribute_blob,
)
from conftest import make_line


def cart(*lines):
    return {'cart': {'lines': list(lines)}}


def expanded_item(operation):
    items = operation['lineExpand']['expandedCartItems']
    assert len(items) == 1
    return items[0]


class TestEmptyCart:

    def test_empty_cart_returns_no_operations(self):
        assert cart_transform_run({'cart': {'lines': []}}) == {'operations': []}

    def test_missing_cart_returns_no_operations(self):
        assert cart_transform_run({}) == {'operations': []}


class TestAdjustment:

    def test_signal_is_added_to_unit_price(self):
        payload = cart(make_line(amount='20.00', properties={'Message': 'Ana'}, price='5.50'))

        result = cart_transform_run(payload)

        assert len(result['operations']) == 1
        operation = result['operations'][0]
        assert operation['lineExpand']['cartLineId'] == 'gid://shopify/CartLine/1'
        item = expanded_item(operation)
        assert item['merchandiseId'] == 'gid://shopify/ProductVariant/42'
        assert item['quantity'] == 1
        assert item['price']['adjustment']['fixedPricePerUnit']['amount'] == Decimal('25.50')

    def test_replacement_carries_processed_marker_privately(self):
        payload = cart(make_line(properties={'Message': 'Ana'}, price='5.50'))

        item = expanded_item(cart_transform_run(payload)['operations'][0])

        attributes = {attr['key']: attr['value'] for attr in item['attributes']}
        assert PROCESSED_MARKER not in attributes
        assert json.loads(attributes[PROPERTIES_ATTRIBUTE])[PROCESSED_MARKER] == 'true'

    def test_reserved_attributes_do_not_leak(self):
        properties = {
            'Message': 'Ana',
            'Size': '12',
            '_price': '5.50',
            '_all_properties': '{}',
        }
        payload = cart(make_line(properties=properties, price='5.50'))

        item = expanded_item(cart_transform_run(payload)['operations'][0])

        visible = [attr for attr in item['attributes'] if attr['key'] != PROPERTIES_ATTRIBUTE]
        assert visible == [
            {'key': 'Message', 'value': 'Ana'},
            {'key': 'Size', 'value': '12'},
        ]
        private = json.loads(item['attributes'][-1]['value'])
        assert '_price' not in private

    @pytest.mark.parametrize('base, signal, expected', [
        ('20.00', '5.50', Decimal('25.50')),
        ('0', '0.01', Decimal('0.01')),
        ('19.99', '10', Decimal('29.99')),
        ('7', ' 3.25 ', Decimal('10.25')),
    ])
    def test_new_price_is_base_plus_signal(self, base, signal, expected):
        payload = cart(make_line(amount=base, properties={}, price=signal))

        item = expanded_item(cart_transform_run(payload)['operations'][0])

        assert item['price']['adjustment']['fixedPricePerUnit']['amount'] == expected


class TestNoSignal:

    @pytest.mark.parametrize('signal', ['0', '0.00', '-5', 'abc', '', 'NaN', 'Infinity', None])
    def test_no_operation_without_positive_signal(self, signal):
        payload = cart(make_line(properties={'Message': 'Ana'}, price=signal))

        assert cart_transform_run(payload) == {'operations': []}

    def test_malformed_base_price_suppresses_adjustment(self):
        payload = cart(make_line(amount='twenty', properties={}, price='5.00'))

        assert cart_transform_run(payload) == {'operations': []}


class TestIdempotence:

    def test_second_pass_is_a_no_op(self):
        payload = cart(make_line(amount='20.00', properties={'Message': 'Ana'}, price='5.50'))

        first = cart_transform_run(payload)
        next_cart = apply_operations(payload, first)
        second = cart_transform_run(next_cart)

        assert next_cart['cart']['lines'][0]['cost']['amountPerQuantity']['amount'] == '25.50'
        assert next_cart['cart']['lines'][0]['quantity'] == 2
        assert second == {'operations': []}

    def test_repeated_passes_over_mixed_cart(self):
        payload = cart(
            make_line('line-1', '10.00', {'Message': 'Ana'}, '2.00'),
            make_line('line-2', '15.00', {'Note': 'hi'}),
            make_line('line-3', '8.00', {}, '1.50'),
        )

        current = payload
        results = []
        for _ in range(3):
            result = cart_transform_run(current)
            results.append(result)
            current = apply_operations(current, result)

        assert len(results[0]['operations']) == 2
        assert results[1] == {'operations': []}
        assert results[2] == {'operations': []}
        amounts = [line['cost']['amountPerQuantity']['amount'] for line in current['cart']['lines']]
        assert amounts == ['12.00', '15.00', '9.50']

    def test_line_with_marker_is_skipped(self):
        properties = {'Message': 'Ana', PROCESSED_MARKER: 'true'}
        payload = cart(make_line(properties=properties, price='5.50'))

        assert cart_transform_run(payload) == {'operations': []}


class TestMalformedInput:

    def test_malformed_blob_is_treated_as_empty(self):
        payload = cart(make_line(blob='{not json', price='5.00'))

        item = expanded_item(cart_transform_run(payload)['operations'][0])

        assert item['attributes'] == [
            {'key': PROPERTIES_ATTRIBUTE, 'value': json.dumps({PROCESSED_MARKER: 'true'})},
        ]

    @pytest.mark.parametrize('raw', [None, '', '[1, 2]', '"text"', 'null', '{oops'])
    def test_parse_attribute_blob_never_raises(self, raw):
        assert parse_attribute_blob(raw) == {}

    def test_parse_attribute_blob_stringifies_values(self):
        assert parse_attribute_blob('{"Size": 12, "Note": null}') == {'Size': '12', 'Note': ''}

    def test_broken_line_does_not_abort_the_batch(self):
        broken = {'quantity': 1, 'priceAttribute': {'value': '3.00'}}
        payload = cart(broken, make_line('line-2', '10.00', {}, '1.00'))

        result = cart_transform_run(payload)

        assert [op['lineExpand']['cartLineId'] for op in result['operations']] == ['line-2']

    def test_unreadable_quantity_does_not_block_the_adjustment(self):
        line = make_line(price='5.00')
        line['quantity'] = 'n/a'

        result = cart_transform_run(cart(line))
        next_cart = apply_operations(cart(line), result)

        price = expanded_item(result['operations'][0])['price']
        assert price['adjustment']['fixedPricePerUnit']['amount'] == Decimal('25.00')
        assert next_cart['cart']['lines'][0]['quantity'] == 1


class TestClassifyLine:

    def test_states(self):
        unprocessed = CartLine.from_dict(make_line(properties={}, price='1.00'))
        no_signal = CartLine.from_dict(make_line(properties={}))

        assert classify_line(unprocessed, {}) == (LineState.UNPROCESSED, Decimal('1.00'))
        assert classify_line(unprocessed, {PROCESSED_MARKER: 'true'}) == (LineState.PROCESSED, None)
        assert classify_line(no_signal, {}) == (LineState.NO_SIGNAL, None)
