import pytest

from accounts.models import Profile
from payments.escrow import WalletService
from payments.models import WalletWithdrawal

pytestmark = pytest.mark.django_db

WITHDRAW_URL = '/payments/wallet/withdraw/'


@pytest.fixture
def funded_vendor(vendor):
    Profile.objects.filter(user=vendor).update(wallet_balance=500.0)
    return vendor


def test_wallet_shows_balance_and_withdrawals(api, funded_vendor):
    api.post(WITHDRAW_URL, funded_vendor, {'amount': 100, 'mpesa_number': '0712345678'})

    response = api.get('/payments/wallet/', funded_vendor)

    assert response.status_code == 200
    body = response.json()
    assert body['balance'] == 400.0
    assert len(body['withdrawals']) == 1
    assert body['withdrawals'][0]['amount'] == 100.0
    assert body['withdrawals'][0]['status'] == WalletWithdrawal.PENDING


def test_withdrawal_debits_balance(api, funded_vendor):
    response = api.post(WITHDRAW_URL, funded_vendor, {'amount': 150.5, 'mpesa_number': '+254712345678'})

    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert body['new_balance'] == 349.5
    assert body['transaction_id'].startswith('WD-')

    withdrawal = WalletWithdrawal.objects.get()
    assert withdrawal.reference == body['transaction_id']
    assert withdrawal.mpesa_number == '254712345678'
    assert withdrawal.balance_after == 349.5


def test_withdrawal_of_whole_balance(api, funded_vendor):
    response = api.post(WITHDRAW_URL, funded_vendor, {'amount': 500, 'mpesa_number': '0712345678'})

    assert response.status_code == 200
    assert response.json()['new_balance'] == 0.0


def test_insufficient_balance_leaves_wallet_untouched(api, funded_vendor):
    response = api.post(WITHDRAW_URL, funded_vendor, {'amount': 500.01, 'mpesa_number': '0712345678'})

    assert response.status_code == 400
    body = response.json()
    assert body['success'] is False
    assert body['new_balance'] == 500.0
    assert not WalletWithdrawal.objects.exists()


@pytest.mark.parametrize('amount', [9.99, 0, -50, 'dix', None])
def test_amount_below_minimum_is_rejected(api, funded_vendor, amount):
    response = api.post(WITHDRAW_URL, funded_vendor, {'amount': amount, 'mpesa_number': '0712345678'})

    assert response.status_code == 400
    assert Profile.objects.get(user=funded_vendor).wallet_balance == 500.0


def test_invalid_number_is_rejected(api, funded_vendor):
    response = api.post(WITHDRAW_URL, funded_vendor, {'amount': 100, 'mpesa_number': '0812345678'})

    assert response.status_code == 400
    assert Profile.objects.get(user=funded_vendor).wallet_balance == 500.0


def test_wallet_is_vendor_only(api, customer):
    assert api.get('/payments/wallet/', customer).status_code == 403
    assert api.post(WITHDRAW_URL, customer, {'amount': 100, 'mpesa_number': '0712345678'}).status_code == 403


def test_reported_balance_comes_from_locked_row(funded_vendor, monkeypatch):
    # Une relecture du solde après le débit verrait un crédit concurrent
    monkeypatch.setattr(WalletService, 'get_balance', staticmethod(lambda vendor: 9999.0))

    success, response = WalletService.withdraw(funded_vendor, 100, '0712345678')

    assert success
    assert response['new_balance'] == 400.0
    assert WalletWithdrawal.objects.get().balance_after == 400.0
    assert Profile.objects.get(user=funded_vendor).wallet_balance == 400.0


def test_withdrawal_above_ceiling_is_rejected(api, funded_vendor):
    response = api.post(WITHDRAW_URL, funded_vendor, {'amount': '1e400', 'mpesa_number': '0712345678'})

    assert response.status_code == 400
    assert Profile.objects.get(user=funded_vendor).wallet_balance == 500.0
