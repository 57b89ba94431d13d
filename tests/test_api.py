import json

import pytest
from django.urls import reverse

from apps.options.models import OptionSet
from conftest import make_line

pytestmark = pytest.mark.django_db

SHOP = 'demo.myshopify.com'


def post_json(api_client, url, data):
    return api_client.post(url, data, format='json')


class TestOptionSetEndpoints:

    def test_list_and_filter_by_tag(self, api_client, option_set, global_option_set):
        response = api_client.get('/api/option-sets/', {'shop': SHOP})

        assert response.status_code == 200
        counts = {item['name']: item['option_count'] for item in response.json()}
        assert counts == {'Engraving': 3, 'Notes': 1}

        response = api_client.get('/api/option-sets/', {'tag': 'sale'})
        assert [item['name'] for item in response.json()] == ['Notes']

        response = api_client.get('/api/option-sets/', {'tag': 'gifts'})
        assert sorted(item['name'] for item in response.json()) == ['Engraving', 'Notes']

    def test_retrieve_uses_storefront_shape(self, api_client, option_set):
        response = api_client.get(f'/api/option-sets/{option_set.pk}/')

        data = response.json()
        wrap, message, finish = data['options']
        assert data['applyToAll'] is False
        assert data['productTags'] == 'engravable, gifts'
        assert wrap['id'] == str(option_set.options.get(name='Gift wrap').pk)
        assert message['dependOnOptionId'] == wrap['id']
        assert message['showWhenValue'] == 'Yes'
        assert finish['type'] == 'dropdown_thumbnail'

    def test_active_requires_shop(self, api_client):
        response = api_client.get('/api/option-sets/active/')

        assert response.status_code == 400
        assert response.json() == {'error': 'Shop parameter is required'}

    def test_active_filters_by_product_tags(self, api_client, option_set, global_option_set):
        OptionSet.objects.create(name='Inactive', shop=SHOP, active=False)
        OptionSet.objects.create(name='Elsewhere', shop='other.myshopify.com')

        tagged = api_client.get('/api/option-sets/active/', {'shop': SHOP, 'productTags': 'engravable,new'})
        untagged = api_client.get('/api/option-sets/active/', {'shop': SHOP, 'productTags': 'sale'})
        everything = api_client.get('/api/option-sets/active/', {'shop': SHOP})

        assert [s['name'] for s in tagged.json()['optionSets']] == ['Engraving', 'Notes']
        assert [s['name'] for s in untagged.json()['optionSets']] == ['Notes']
        assert [s['name'] for s in everything.json()['optionSets']] == ['Engraving', 'Notes']

    def test_visibility(self, api_client, option_set):
        wrap_id = str(option_set.options.get(name='Gift wrap').pk)
        message_id = str(option_set.options.get(name='Message').pk)
        url = f'/api/option-sets/{option_set.pk}/visibility/'

        default = post_json(api_client, url, {}).json()
        chosen = post_json(api_client, url, {'selections': {wrap_id: 'Yes'}}).json()

        assert default['selections'] == {wrap_id: 'No'}
        assert default['visibility'][message_id] is False
        assert default['required'][message_id] is False
        assert chosen['visibility'][message_id] is True
        assert chosen['required'][message_id] is True
        assert chosen['required'][wrap_id] is True

    def test_line_properties(self, api_client, option_set):
        url = f'/api/option-sets/{option_set.pk}/line-properties/'

        response = post_json(api_client, url, {'selections': {
            'Gift wrap': 'Yes',
            'Message': 'Ana',
            'Finish': 'Gloss',
        }})

        data = response.json()
        assert response.status_code == 200
        assert data['additionalPrice'] == '9.00'
        assert data['attributes']['_price'] == '9.00'
        assert json.loads(data['attributes']['_all_properties']) == data['properties']

    def test_line_properties_rejects_non_mapping(self, api_client, option_set):
        url = f'/api/option-sets/{option_set.pk}/line-properties/'

        response = post_json(api_client, url, {'selections': ['Gift wrap']})

        assert response.status_code == 400


class TestStorefrontViews:

    def test_render_requires_shop(self, api_client):
        response = api_client.get(reverse('options:render'))

        assert response.status_code == 400

    def test_render_product_options(self, api_client, option_set, global_option_set):
        response = api_client.get(reverse('options:render'), {'shop': SHOP, 'productTags': 'gifts'})

        html = response.content.decode()
        assert response.status_code == 200
        assert response['Content-Type'].startswith('text/html')
        assert html.count('<style') == 1
        assert 'name="properties[Gift wrap]"' in html
        assert 'name="properties[Note]"' in html

    def test_render_without_matching_sets_is_empty(self, api_client, option_set):
        response = api_client.get(reverse('options:render'), {'shop': SHOP, 'productTags': 'sale'})

        assert response.status_code == 200
        assert response.content == b''


class TestCartTransformView:

    url = '/options/cart-transform/run/'

    def test_empty_cart(self, api_client):
        response = post_json(api_client, self.url, {'cart': {'lines': []}})

        assert response.status_code == 200
        assert response.json() == {'operations': []}

    def test_adjusts_price(self, api_client):
        payload = {'cart': {'lines': [make_line(amount='20.00', properties={'Message': 'Ana'}, price='5.50')]}}

        response = post_json(api_client, self.url, payload)

        operation = response.json()['operations'][0]['lineExpand']
        item = operation['expandedCartItems'][0]
        assert operation['cartLineId'] == 'gid://shopify/CartLine/1'
        assert item['quantity'] == 1
        assert item['price']['adjustment']['fixedPricePerUnit']['amount'] == '25.50'

    def test_invalid_json(self, api_client):
        response = api_client.post(self.url, data='{nope', content_type='application/json')

        assert response.status_code == 400
        assert response.json() == {'error': 'Invalid JSON'}

    def test_non_object_payload(self, api_client):
        response = post_json(api_client, self.url, ['cart'])

        assert response.status_code == 400

    def test_get_is_not_allowed(self, api_client):
        assert api_client.get(self.url).status_code == 405
