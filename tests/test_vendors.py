import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from accounts.models import Follow, Profile
from orders.models import ShippingOrder

pytestmark = pytest.mark.django_db

DOCUMENT_URL = '/vendor/verification-document/'


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path
    return tmp_path


def document(name='kra_pin.pdf', content=b'%PDF-1.4 certificat', content_type='application/pdf'):
    return SimpleUploadedFile(name, content, content_type=content_type)


# Abonnements

def test_follow_and_unfollow_vendor(api, customer, vendor):
    response = api.post('/follows/', customer, {'vendor_id': vendor.id})

    assert response.status_code == 201
    follow = response.json()['follow']
    assert follow['follower_username'] == 'alice'
    assert follow['vendor_username'] == 'mama_mboga'
    assert api.get(f'/follows/{vendor.id}/', customer).json()['is_following'] is True

    response = api.delete(f'/follows/{vendor.id}/', customer)

    assert response.status_code == 200
    assert api.get(f'/follows/{vendor.id}/', customer).json()['is_following'] is False
    assert not Follow.objects.exists()


def test_follow_twice_is_a_conflict(api, customer, vendor):
    api.post('/follows/', customer, {'vendor_id': vendor.id})

    response = api.post('/follows/', customer, {'vendor_id': vendor.id})

    assert response.status_code == 409
    assert Follow.objects.count() == 1


def test_invalid_follow_targets(api, customer, other_customer, vendor):
    assert api.post('/follows/', customer, {}).status_code == 400
    assert api.post('/follows/', customer, {'vendor_id': 'abc'}).status_code == 400
    assert api.post('/follows/', customer, {'vendor_id': 999}).status_code == 404
    assert api.post('/follows/', customer, {'vendor_id': other_customer.id}).status_code == 400
    assert api.post('/follows/', vendor, {'vendor_id': vendor.id}).status_code == 400
    assert not Follow.objects.exists()


def test_unfollow_without_follow_is_not_found(api, customer, vendor):
    assert api.delete(f'/follows/{vendor.id}/', customer).status_code == 404


def test_user_follows_and_vendor_followers(api, customer, other_customer, vendor, other_vendor):
    api.post('/follows/', customer, {'vendor_id': vendor.id})
    api.post('/follows/', customer, {'vendor_id': other_vendor.id})
    api.post('/follows/', other_customer, {'vendor_id': vendor.id})

    follows = api.get('/follows/', customer).json()['follows']
    assert {f['vendor_id'] for f in follows} == {vendor.id, other_vendor.id}

    body = api.get(f'/vendors/{vendor.id}/followers/', customer).json()
    assert body['follower_count'] == 2
    assert {f['follower_username'] for f in body['followers']} == {'alice', 'bob'}

    assert api.get(f'/vendors/{customer.id}/followers/', customer).status_code == 404


def test_follows_require_authentication(api, vendor):
    assert api.get('/follows/').status_code == 401
    assert api.post('/follows/', data={'vendor_id': vendor.id}).status_code == 401
    assert api.get(f'/vendors/{vendor.id}/followers/').status_code == 401


# Profil public

def test_public_vendor_profile(api, customer, other_customer, vendor, products):
    def order(amount, **fields):
        ShippingOrder.objects.create(
            customer=customer, vendor=vendor, product=products['A'], product_name='Sukuma wiki',
            product_category='Légumes', quantity=1, total_amount=amount, **fields)

    order(100.0)
    order(50.0, shipping_status=ShippingOrder.DELIVERED)
    order(800.0, shipping_status=ShippingOrder.CANCELLED)
    Follow.objects.create(follower=customer, vendor=vendor)
    Follow.objects.create(follower=other_customer, vendor=vendor)

    response = api.get(f'/vendors/{vendor.id}/profile/')

    assert response.status_code == 200
    body = response.json()
    assert body['username'] == 'mama_mboga'
    assert body['verified'] is True
    assert body['total_purchases'] == 2
    assert body['total_revenue'] == 150.0
    assert body['follower_count'] == 2


def test_profile_of_new_vendor(api, other_vendor):
    body = api.get(f'/vendors/{other_vendor.id}/profile/').json()

    assert body['total_purchases'] == 0
    assert body['total_revenue'] == 0.0
    assert body['follower_count'] == 0


def test_profile_of_non_vendor_is_not_found(api, customer):
    assert api.get(f'/vendors/{customer.id}/profile/').status_code == 404
    assert api.get('/vendors/999/profile/').status_code == 404


# Pièces justificatives

def test_vendor_uploads_verification_document(api, vendor, admin_user):
    response = api.upload(DOCUMENT_URL, vendor, {'verification_document': document()})

    assert response.status_code == 201
    profile = Profile.objects.get(user=vendor)
    assert profile.verification_submitted_at is not None
    assert profile.verification_document.name.startswith('verification_documents/kra_pin')

    response = api.get(DOCUMENT_URL, vendor)
    assert response.status_code == 200
    assert b''.join(response.streaming_content) == b'%PDF-1.4 certificat'

    response = api.get(f'/admin-api/users/{vendor.id}/verification-document/', admin_user)
    assert response.status_code == 200
    assert 'attachment' in response['Content-Disposition']

    pending = api.get('/admin-api/users/', admin_user, params={'role': 'vendor'}).json()['users']
    submitted = {u['username']: u['verification_submitted_at'] for u in pending}
    assert submitted['mama_mboga'] is not None


def test_new_document_replaces_previous_one(api, vendor, media_root):
    api.upload(DOCUMENT_URL, vendor, {'verification_document': document('ancien.pdf')})
    api.upload(DOCUMENT_URL, vendor, {'verification_document': document('nouveau.png', b'png', 'image/png')})

    profile = Profile.objects.get(user=vendor)
    assert profile.verification_document.name.startswith('verification_documents/nouveau')
    assert [p.name for p in (media_root / 'verification_documents').iterdir()] == [
        profile.verification_document.name.split('/')[-1]]


def test_invalid_verification_documents(api, vendor, settings):
    settings.VERIFICATION_DOCUMENT_MAX_SIZE = 10

    assert api.upload(DOCUMENT_URL, vendor, {}).status_code == 400
    response = api.upload(DOCUMENT_URL, vendor, {'verification_document': document('script.exe', b'MZ')})
    assert response.status_code == 400
    response = api.upload(DOCUMENT_URL, vendor, {'verification_document': document(content=b'x' * 11)})
    assert response.status_code == 400

    assert Profile.objects.get(user=vendor).verification_submitted_at is None


def test_missing_verification_document(api, vendor, admin_user):
    assert api.get(DOCUMENT_URL, vendor).status_code == 404
    assert api.get(f'/admin-api/users/{vendor.id}/verification-document/', admin_user).status_code == 404


def test_verification_document_access_is_role_scoped(api, customer, vendor):
    assert api.upload(DOCUMENT_URL, customer, {'verification_document': document()}).status_code == 403
    assert api.get(f'/admin-api/users/{vendor.id}/verification-document/', vendor).status_code == 403


# Réinitialisation du mot de passe

def test_admin_resets_password(api, admin_user, customer, caplog):
    response = api.patch(f'/admin-api/users/{customer.id}/reset-password/', admin_user)

    assert response.status_code == 200
    temporary_password = response.json()['temporary_password']
    assert len(temporary_password) == 12
    assert temporary_password not in caplog.text

    customer.refresh_from_db()
    assert not customer.check_password('motdepasse123')
    assert customer.check_password(temporary_password)

    response = api.post('/auth/login/', data={'username': 'alice', 'password': temporary_password})
    assert response.status_code == 200


def test_reset_password_rules(api, admin_user, customer):
    assert api.patch(f'/admin-api/users/{customer.id}/reset-password/', customer).status_code == 403
    assert api.patch('/admin-api/users/999/reset-password/', admin_user).status_code == 404
    assert api.patch(f'/admin-api/users/{admin_user.id}/reset-password/', admin_user).status_code == 400
