import pytest
from django.contrib.auth.models import User
from django.test import override_settings

from accounts.models import Profile
from accounts.tokens import make_token, get_user_from_token

pytestmark = pytest.mark.django_db


def signup_payload(**overrides):
    payload = {
        'username': 'wanjiru',
        'email': 'wanjiru@example.com',
        'password': 'motdepasse123',
        'mpesa_number': '0712345678',
        'role': 'Vendor',
        'location': 'Nakuru',
    }
    payload.update(overrides)
    return payload


def test_signup_creates_profile_and_returns_token(api):
    response = api.post('/auth/signup/', data=signup_payload())

    assert response.status_code == 201
    body = response.json()
    assert body['user']['role'] == Profile.VENDOR
    assert body['user']['mpesa_number'] == '254712345678'
    assert body['user']['verified'] is False
    user = User.objects.get(username='wanjiru')
    assert get_user_from_token(body['token']) == user


def test_signup_defaults_to_customer(api):
    payload = signup_payload()
    del payload['role']
    response = api.post('/auth/signup/', data=payload)
    assert response.json()['user']['role'] == Profile.CUSTOMER


@pytest.mark.parametrize('overrides', [
    {'role': 'Admin'},
    {'role': 'superhero'},
    {'mpesa_number': '0812345678'},
    {'email': 'pas-un-email'},
    {'password': 'court'},
    {'username': ''},
])
def test_signup_rejects_invalid_data(api, overrides):
    response = api.post('/auth/signup/', data=signup_payload(**overrides))

    assert response.status_code == 400
    assert not User.objects.filter(email='wanjiru@example.com').exists()


def test_signup_rejects_duplicate_username_and_email(api, customer):
    assert api.post('/auth/signup/', data=signup_payload(username='alice')).status_code == 400
    assert api.post('/auth/signup/', data=signup_payload(email='alice@example.com')).status_code == 400


def test_login_with_username_or_email(api, customer):
    by_name = api.post('/auth/login/', data={'username': 'alice', 'password': 'motdepasse123'})
    by_email = api.post('/auth/login/', data={'username': 'alice@example.com', 'password': 'motdepasse123'})

    assert by_name.status_code == 200
    assert by_email.status_code == 200
    assert by_name.json()['user']['id'] == customer.id


def test_login_with_wrong_password(api, customer):
    response = api.post('/auth/login/', data={'username': 'alice', 'password': 'mauvais'})
    assert response.status_code == 401


def test_banned_user_cannot_login_or_use_token(api, customer):
    token_user = customer
    Profile.objects.filter(user=customer).update(banned=True)

    response = api.post('/auth/login/', data={'username': 'alice', 'password': 'motdepasse123'})
    assert response.status_code == 403
    assert api.get('/auth/profile/', token_user).status_code == 403


def test_profile_requires_valid_token(client, customer):
    assert client.get('/auth/profile/').status_code == 401
    response = client.get('/auth/profile/', HTTP_AUTHORIZATION='Bearer nimportequoi')
    assert response.status_code == 401


@override_settings(AUTH_TOKEN_MAX_AGE=-1)
def test_expired_token_is_rejected(client, customer):
    token = make_token(customer)
    assert get_user_from_token(token) is None
    assert client.get('/auth/profile/', HTTP_AUTHORIZATION=f'Bearer {token}').status_code == 401


def test_profile_get(api, customer):
    response = api.get('/auth/profile/', customer)

    assert response.status_code == 200
    assert response.json()['user']['username'] == 'alice'
    assert response.json()['user']['address'] == 'Moi Avenue, Nairobi'


def test_profile_patch_keeps_missing_fields(api, customer):
    response = api.patch('/auth/profile/', customer, {'location': 'Mombasa', 'mpesa_number': '+254722000111'})

    assert response.status_code == 200
    user = response.json()['user']
    assert user['location'] == 'Mombasa'
    assert user['mpesa_number'] == '254722000111'
    assert user['address'] == 'Moi Avenue, Nairobi'
    assert user['email'] == 'alice@example.com'


def test_profile_patch_rejects_invalid_number(api, customer):
    response = api.patch('/auth/profile/', customer, {'mpesa_number': '12345'})

    assert response.status_code == 400
    assert Profile.objects.get(user=customer).mpesa_number == '254712345678'


def test_profile_patch_rejects_taken_email(api, customer, other_customer):
    response = api.patch('/auth/profile/', customer, {'email': 'bob@example.com'})
    assert response.status_code == 400


def test_superuser_gets_admin_profile(db):
    user = User.objects.create_superuser('root', 'root@example.com', 'motdepasse123')
    assert user.profile.role == Profile.ADMIN


# Modération

def test_admin_lists_users_by_role(api, admin_user, customer, vendor, other_vendor):
    response = api.get('/admin-api/users/', admin_user, {'role': 'Vendor'})

    assert response.status_code == 200
    assert {u['username'] for u in response.json()['users']} == {'mama_mboga', 'shamba_fresh'}
    assert api.get('/admin-api/users/', admin_user, {'role': 'pirate'}).status_code == 400


def test_admin_endpoints_require_admin(api, customer, vendor):
    assert api.get('/admin-api/users/', customer).status_code == 403
    assert api.patch(f'/admin-api/users/{customer.id}/ban/', vendor, {'banned': True}).status_code == 403


def test_pending_vendors(api, admin_user, vendor):
    from tests.helpers import create_user
    create_user('nouveau', role=Profile.VENDOR)

    response = api.get('/admin-api/vendors/pending/', admin_user)

    assert [u['username'] for u in response.json()['users']] == ['nouveau']


def test_admin_updates_role(api, admin_user, customer):
    response = api.patch(f'/admin-api/users/{customer.id}/role/', admin_user, {'role': 'Vendor'})

    assert response.status_code == 200
    assert Profile.objects.get(user=customer).role == Profile.VENDOR
    assert api.patch(f'/admin-api/users/{customer.id}/role/', admin_user, {'role': 'x'}).status_code == 400


def test_admin_verifies_vendor(api, admin_user):
    from tests.helpers import create_user
    pending = create_user('nouveau', role=Profile.VENDOR)

    response = api.patch(f'/admin-api/users/{pending.id}/verify/', admin_user, {'verified': True})

    assert response.status_code == 200
    assert Profile.objects.get(user=pending).verified


def test_admin_bans_and_unbans(api, admin_user, customer):
    api.patch(f'/admin-api/users/{customer.id}/ban/', admin_user, {'banned': True})
    assert Profile.objects.get(user=customer).banned
    assert api.get('/auth/profile/', customer).status_code == 403

    api.patch(f'/admin-api/users/{customer.id}/ban/', admin_user, {'banned': False})
    assert not Profile.objects.get(user=customer).banned


def test_admin_cannot_ban_or_delete_self(api, admin_user):
    assert api.patch(f'/admin-api/users/{admin_user.id}/ban/', admin_user, {'banned': True}).status_code == 400
    assert api.delete(f'/admin-api/users/{admin_user.id}/', admin_user).status_code == 400
    assert not Profile.objects.get(user=admin_user).banned


def test_admin_deletes_user(api, admin_user, customer):
    response = api.delete(f'/admin-api/users/{customer.id}/', admin_user)

    assert response.status_code == 200
    assert not User.objects.filter(pk=customer.pk).exists()
    assert api.delete('/admin-api/users/999/', admin_user).status_code == 404


# Signalements

def test_customer_reports_vendor(api, customer, vendor, admin_user, products):
    response = api.post('/reports/', customer, {
        'vendor_id': vendor.id, 'product_id': products['A'].id,
        'report_type': 'fraude', 'description': 'Produit jamais reçu',
    })

    assert response.status_code == 201
    report_id = response.json()['report']['id']
    assert api.get('/vendor/reports/count/', vendor).json() == {'total': 1, 'pending': 1}

    response = api.patch(f'/admin-api/reports/{report_id}/', admin_user, {
        'status': 'resolved', 'admin_notes': 'Vendeur averti',
    })
    assert response.status_code == 200
    assert response.json()['report']['status'] == 'resolved'
    assert api.get('/vendor/reports/count/', vendor).json() == {'total': 1, 'pending': 0}

    listed = api.get('/admin-api/reports/', admin_user, {'status': 'resolved'}).json()['reports']
    assert [r['id'] for r in listed] == [report_id]


def test_report_must_target_a_vendor(api, customer, other_customer):
    response = api.post('/reports/', customer, {'vendor_id': other_customer.id, 'report_type': 'fraude'})
    assert response.status_code == 400


def test_report_product_must_belong_to_vendor(api, customer, other_vendor, products):
    response = api.post('/reports/', customer, {
        'vendor_id': other_vendor.id, 'product_id': products['A'].id, 'report_type': 'fraude',
    })
    assert response.status_code == 400


def test_admin_rejects_unknown_report_status(api, customer, vendor, admin_user):
    report_id = api.post('/reports/', customer, {'vendor_id': vendor.id, 'report_type': 'retard'}).json()['report']['id']
    response = api.patch(f'/admin-api/reports/{report_id}/', admin_user, {'status': 'oublié'})
    assert response.status_code == 400
