import json
from unittest.mock import Mock

import pytest
from django.apps import apps

from accounts.models import Profile
from accounts.tokens import make_token
from orders.models import CartItem, ShippingOrder
from products.models import Product
from tests.helpers import create_user


class ApiClient:
    """Client de test qui envoie du JSON avec un jeton Bearer"""

    def __init__(self, client):
        self.client = client

    def _headers(self, user):
        return {'HTTP_AUTHORIZATION': f'Bearer {make_token(user)}'} if user is not None else {}

    def get(self, url, user=None, params=None):
        return self.client.get(url, data=params, **self._headers(user))

    def _send(self, method, url, user, data):
        body = json.dumps(data) if data is not None else ''
        return getattr(self.client, method)(
            url, data=body, content_type='application/json', **self._headers(user))

    def post(self, url, user=None, data=None):
        return self._send('post', url, user, data)

    def patch(self, url, user=None, data=None):
        return self._send('patch', url, user, data)

    def delete(self, url, user=None):
        return self._send('delete', url, user, None)

    def upload(self, url, user=None, files=None):
        """Envoi multipart (fichiers)"""
        return self.client.post(url, data=files or {}, **self._headers(user))


@pytest.fixture
def api(client):
    return ApiClient(client)


@pytest.fixture
def customer(db):
    return create_user('alice', address='Moi Avenue, Nairobi')


@pytest.fixture
def other_customer(db):
    return create_user('bob')


@pytest.fixture
def vendor(db):
    return create_user('mama_mboga', role=Profile.VENDOR, verified=True)


@pytest.fixture
def other_vendor(db):
    return create_user('shamba_fresh', role=Profile.VENDOR, verified=True)


@pytest.fixture
def admin_user(db):
    return create_user('admin', role=Profile.ADMIN, verified=True)


@pytest.fixture
def products(vendor):
    return {
        'A': Product.objects.create(vendor=vendor, name='Sukuma wiki', price=50.0, category='Légumes', quantity=10),
        'B': Product.objects.create(vendor=vendor, name='Tomates', price=120.0, category='Légumes', quantity=5),
        'C': Product.objects.create(vendor=vendor, name='Miel', price=800.0, category='Épicerie', quantity=1),
    }


@pytest.fixture
def cart(customer, products):
    """Panier A x2, B x1, C x1"""
    return {
        'A': CartItem.objects.create(user=customer, product=products['A'], quantity=2),
        'B': CartItem.objects.create(user=customer, product=products['B'], quantity=1),
        'C': CartItem.objects.create(user=customer, product=products['C'], quantity=1),
    }


@pytest.fixture
def mpesa(monkeypatch):
    """Client M-Pesa configuré dont l'appel STK push réussit"""
    service = Mock()
    service.is_configured = True
    service.stk_push.return_value = (True, {
        'merchant_request_id': '29115-34620561-1',
        'checkout_request_id': 'ws_CO_191220191020363925',
        'response_code': '0',
        'response_description': 'Success. Request accepted for processing',
        'customer_message': 'Success. Request accepted for processing',
    })
    monkeypatch.setattr(apps.get_app_config('payments'), 'mpesa_service', service)
    return service


@pytest.fixture
def unconfigured_mpesa(monkeypatch):
    service = Mock()
    service.is_configured = False
    monkeypatch.setattr(apps.get_app_config('payments'), 'mpesa_service', service)
    return service


@pytest.fixture
def shipping_order(customer, vendor, products):
    """Commande payée de 2 x Sukuma wiki, en attente d'expédition"""
    product = products['A']
    return ShippingOrder.objects.create(
        customer=customer,
        vendor=vendor,
        product=product,
        product_name=product.name,
        product_category=product.category,
        quantity=2,
        total_amount=100.0,
        shipping_address='Moi Avenue, Nairobi',
    )
