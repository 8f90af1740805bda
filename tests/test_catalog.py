import json
import pytest
from users.catalog import PRODUCTS, list_products


def test_catalog_prices_by_category():
    assert len(PRODUCTS) == 29
    assert str(PRODUCTS['1']['sale_price']) == '500.00'
    assert str(PRODUCTS['24']['mrp']) == '500.00'
    assert str(PRODUCTS['24']['sale_price']) == '450.00'


def test_category_filter_is_case_insensitive():
    assert {p['id'] for p in list_products('packages')} == {'26', '27', '28', '29'}


def test_product_endpoints(client):
    response = client.get('/api/products/20')
    assert response.json()['data']['name'] == 'VAT Registration'
    assert response.json()['data']['salePrice'] == '500.00'

    assert client.get('/api/products/404').status_code == 404


def test_cart_summary_endpoint(client):
    body = {'cart': [{'product': {'id': '24'}, 'count': 2}]}
    response = client.post('/api/cart/summary', data=json.dumps(body), content_type='application/json')

    assert response.status_code == 200
    assert response.json()['data']['total'] == '900.00'
    assert response.json()['data']['item_name'] == '24, 24'


@pytest.mark.django_db
def test_unknown_api_route_is_json(client):
    response = client.get('/api/does-not-exist')

    assert response.status_code == 404
    assert response.json()['success'] is False
