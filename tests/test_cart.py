import pytest

from orders.models import CartItem

pytestmark = pytest.mark.django_db

URL = '/orders/cart/'


def test_cart_lists_lines_with_total(api, customer, cart):
    response = api.get(URL, customer)

    assert response.status_code == 200
    body = response.json()
    assert [item['id'] for item in body['items']] == [cart['A'].id, cart['B'].id, cart['C'].id]
    assert body['items'][0]['line_total'] == 100.0
    assert body['items'][0]['vendor_username'] == 'mama_mboga'
    assert body['total'] == 1020.0


def test_add_item(api, customer, products):
    response = api.post(URL, customer, {'product_id': products['B'].id, 'quantity': 3})

    assert response.status_code == 201
    assert response.json()['item']['quantity'] == 3
    assert CartItem.objects.get(user=customer).product == products['B']


def test_add_existing_product_merges_quantities(api, customer, cart, products):
    response = api.post(URL, customer, {'product_id': products['A'].id, 'quantity': 3})

    assert response.status_code == 201
    assert response.json()['item']['id'] == cart['A'].id
    assert response.json()['item']['quantity'] == 5
    assert CartItem.objects.filter(user=customer).count() == 3


def test_add_defaults_to_one(api, customer, products):
    response = api.post(URL, customer, {'product_id': products['C'].id})
    assert response.json()['item']['quantity'] == 1


@pytest.mark.parametrize('quantity', [0, -1, 1.5, '2', True])
def test_add_rejects_invalid_quantity(api, customer, products, quantity):
    response = api.post(URL, customer, {'product_id': products['A'].id, 'quantity': quantity})
    assert response.status_code == 400


def test_add_unknown_product(api, customer):
    response = api.post(URL, customer, {'product_id': 999})
    assert response.status_code == 404


def test_update_quantity(api, customer, cart):
    response = api.patch(f"{URL}{cart['B'].id}/", customer, {'quantity': 4})

    assert response.status_code == 200
    cart['B'].refresh_from_db()
    assert cart['B'].quantity == 4


def test_remove_item(api, customer, cart):
    response = api.delete(f"{URL}{cart['C'].id}/", customer)

    assert response.status_code == 200
    assert not CartItem.objects.filter(pk=cart['C'].pk).exists()


def test_cannot_touch_another_customers_line(api, other_customer, cart):
    assert api.patch(f"{URL}{cart['A'].id}/", other_customer, {'quantity': 9}).status_code == 404
    assert api.delete(f"{URL}{cart['A'].id}/", other_customer).status_code == 404
    cart['A'].refresh_from_db()
    assert cart['A'].quantity == 2


def test_cart_is_customer_only(api, vendor):
    assert api.get(URL, vendor).status_code == 403


def test_admin_sees_every_cart(api, admin_user, other_customer, cart, products):
    CartItem.objects.create(user=other_customer, product=products['A'], quantity=1)

    response = api.get(f'{URL}all/', admin_user)

    assert response.status_code == 200
    assert len(response.json()['items']) == 4


def test_all_carts_is_admin_only(api, customer, cart):
    assert api.get(f'{URL}all/', customer).status_code == 403
