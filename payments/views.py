"""
Vues pour les paiements M-Pesa et le portefeuille vendeur
"""
import json
import logging

from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_GET, require_POST

from accounts.decorators import customer_only, vendor_only, api_login_required
from accounts.utils import load_json, error_message
from .apps import get_mpesa_service
from .checkout import CheckoutService
from .escrow import WalletService
from .exceptions import PaymentGatewayError
from .models import PaymentTransaction, WalletWithdrawal
from .reconciliation import PaymentReconciler

logger = logging.getLogger(__name__)

# Réponse attendue par M-Pesa, quel que soit le résultat du traitement
CALLBACK_ACK = {'ResultCode': 0, 'ResultDesc': 'Accepted'}


def _serialize_transaction(payment):
    return {
        'id': payment.id,
        'transaction_id': payment.checkout_request_id,
        'merchant_request_id': payment.merchant_request_id,
        'mpesa_receipt_number': payment.mpesa_receipt_number,
        'phone_number': payment.phone_number,
        'amount': str(payment.amount),
        'paid_amount': str(payment.paid_amount) if payment.paid_amount is not None else None,
        'status': payment.status,
        'status_display': str(payment.get_status_display()),
        'transaction_date': payment.transaction_date,
        'result_desc': payment.result_desc,
        'cart_item_ids': payment.snapshot_ids() or [],
        'created_at': payment.created_at.isoformat(),
        'updated_at': payment.updated_at.isoformat(),
    }


@require_POST
@customer_only
def checkout(request):
    """
    Lance le paiement du panier (STK push)
    """
    try:
        data = load_json(request)
        result = CheckoutService.initiate_checkout(
            user=request.user,
            mpesa_number=data.get('mpesa_number'),
            total_amount=data.get('total_amount'),
            selected_items=data.get('selected_items'),
            shipping_address=data.get('shipping_address'),
            mpesa_service=get_mpesa_service(),
        )
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)
    except PaymentGatewayError as e:
        return JsonResponse({'error': str(e), 'retryable': True}, status=502)
    except Exception as e:
        logger.exception(f"Erreur dans checkout: {str(e)}")
        return JsonResponse({'error': 'Erreur interne, veuillez réessayer'}, status=500)

    return JsonResponse(result)


@csrf_exempt
@require_http_methods(["POST"])
def mpesa_callback(request):
    """
    Callback STK de M-Pesa. Répond toujours 200 pour que M-Pesa cesse ses envois.
    """
    try:
        payload = json.loads(request.body.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.error("Callback M-Pesa : JSON invalide")
        payload = {'raw': request.body.decode('utf-8', errors='replace')}

    try:
        outcome = PaymentReconciler.reconcile_stk_callback(payload)
        logger.info(f"Callback M-Pesa traité: {outcome}")
    except Exception as e:
        logger.exception(f"Erreur dans mpesa_callback: {str(e)}")

    return JsonResponse(CALLBACK_ACK)


@require_GET
@api_login_required
def transaction_list(request):
    payments = PaymentTransaction.objects.filter(user=request.user)
    return JsonResponse({'transactions': [_serialize_transaction(p) for p in payments]})


@require_GET
@api_login_required
def transaction_detail(request, checkout_request_id):
    payment = get_object_or_404(PaymentTransaction, checkout_request_id=checkout_request_id, user=request.user)
    data = _serialize_transaction(payment)
    data['shipping_order_ids'] = list(payment.shipping_orders.values_list('id', flat=True))
    return JsonResponse({'transaction': data})


@require_GET
@vendor_only
def wallet(request):
    withdrawals = WalletWithdrawal.objects.filter(vendor=request.user)[:20]
    return JsonResponse({
        'balance': WalletService.get_balance(request.user),
        'withdrawals': [
            {
                'transaction_id': w.reference,
                'amount': w.amount,
                'mpesa_number': w.mpesa_number,
                'status': w.status,
                'balance_after': w.balance_after,
                'created_at': w.created_at.isoformat(),
            }
            for w in withdrawals
        ],
    })


@require_POST
@vendor_only
def withdraw(request):
    """
    Retrait du portefeuille vers un numéro M-Pesa
    """
    try:
        data = load_json(request)
        success, response = WalletService.withdraw(
            request.user, data.get('amount'), data.get('mpesa_number'))
    except ValidationError as e:
        return JsonResponse({'success': False, 'error': error_message(e)}, status=400)
    except Exception as e:
        logger.exception(f"Erreur dans withdraw: {str(e)}")
        return JsonResponse({'success': False, 'error': 'Erreur interne, veuillez réessayer'}, status=500)

    return JsonResponse(response, status=200 if success else 400)
