import pytest

from orders.models import ShippingOrder

pytestmark = pytest.mark.django_db


def status_url(order_id):
    return f'/orders/shipping/{order_id}/status/'


def test_vendor_ships_with_tracking_number(api, vendor, shipping_order):
    response = api.patch(status_url(shipping_order.id), vendor, {
        'shipping_status': 'shipped', 'tracking_number': 'G4S-000123',
    })

    assert response.status_code == 200
    body = response.json()['order']
    assert body['shipping_status'] == 'shipped'
    assert body['tracking_number'] == 'G4S-000123'
    assert body['verification_requested_at'] is None


def test_delivery_opens_customer_verification(api, vendor, shipping_order):
    api.patch(status_url(shipping_order.id), vendor, {'shipping_status': 'shipped'})
    response = api.patch(status_url(shipping_order.id), vendor, {'shipping_status': 'delivered'})

    assert response.status_code == 200
    shipping_order.refresh_from_db()
    assert shipping_order.shipping_status == ShippingOrder.DELIVERED
    assert shipping_order.verification_requested_at is not None
    assert shipping_order.awaiting_verification


def test_verification_timestamp_is_set_once(api, vendor, shipping_order):
    api.patch(status_url(shipping_order.id), vendor, {'shipping_status': 'delivered'})
    shipping_order.refresh_from_db()
    first = shipping_order.verification_requested_at

    response = api.patch(status_url(shipping_order.id), vendor, {
        'shipping_status': 'delivered', 'tracking_number': 'G4S-1',
    })

    assert response.status_code == 200
    shipping_order.refresh_from_db()
    assert shipping_order.verification_requested_at == first
    assert shipping_order.tracking_number == 'G4S-1'


def test_status_is_case_insensitive(api, vendor, shipping_order):
    response = api.patch(status_url(shipping_order.id), vendor, {'shipping_status': ' Shipped '})
    assert response.status_code == 200
    assert response.json()['order']['shipping_status'] == 'shipped'


def test_cancel_pending_order(api, vendor, shipping_order):
    response = api.patch(status_url(shipping_order.id), vendor, {'shipping_status': 'cancelled'})
    assert response.status_code == 200


@pytest.mark.parametrize('current, target', [
    ('delivered', 'shipped'),
    ('delivered', 'pending'),
    ('delivered', 'cancelled'),
    ('shipped', 'pending'),
    ('cancelled', 'shipped'),
    ('cancelled', 'delivered'),
])
def test_illegal_transitions_are_rejected(api, vendor, shipping_order, current, target):
    ShippingOrder.objects.filter(pk=shipping_order.pk).update(shipping_status=current)

    response = api.patch(status_url(shipping_order.id), vendor, {'shipping_status': target})

    assert response.status_code == 400
    shipping_order.refresh_from_db()
    assert shipping_order.shipping_status == current


@pytest.mark.parametrize('status', ['lost', '', None, 3])
def test_unknown_status_is_rejected(api, vendor, shipping_order, status):
    response = api.patch(status_url(shipping_order.id), vendor, {'shipping_status': status})
    assert response.status_code == 400


def test_other_vendor_cannot_update(api, other_vendor, shipping_order):
    response = api.patch(status_url(shipping_order.id), other_vendor, {'shipping_status': 'shipped'})

    assert response.status_code == 403
    shipping_order.refresh_from_db()
    assert shipping_order.shipping_status == ShippingOrder.PENDING


def test_customer_cannot_update(api, customer, shipping_order):
    response = api.patch(status_url(shipping_order.id), customer, {'shipping_status': 'shipped'})
    assert response.status_code == 403


def test_unknown_order(api, vendor):
    response = api.patch(status_url(999), vendor, {'shipping_status': 'shipped'})
    assert response.status_code == 404


def test_shipping_list_is_scoped_by_role(api, customer, other_customer, vendor, other_vendor, admin_user,
                                          shipping_order):
    assert [o['id'] for o in api.get('/orders/shipping/', customer).json()['orders']] == [shipping_order.id]
    assert [o['id'] for o in api.get('/orders/shipping/', vendor).json()['orders']] == [shipping_order.id]
    assert api.get('/orders/shipping/', other_customer).json()['orders'] == []
    assert api.get('/orders/shipping/', other_vendor).json()['orders'] == []
    assert len(api.get('/orders/shipping/', admin_user).json()['orders']) == 1


def test_shipping_list_status_filter(api, vendor, shipping_order):
    assert api.get('/orders/shipping/', vendor, {'status': 'shipped'}).json()['orders'] == []
    assert len(api.get('/orders/shipping/', vendor, {'status': 'pending'}).json()['orders']) == 1
