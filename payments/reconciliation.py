"""
Rapprochement des callbacks STK M-Pesa avec les transactions initiées
"""
import logging

from django.db import transaction
from django.utils import timezone

from orders.services import CartService, ShippingOrderService
from .models import PaymentTransaction, MpesaCallbackLog
from .services.mpesa import parse_stk_callback, extract_callback_data, RESULT_SUCCESS, RESULT_CANCELLED_BY_USER

logger = logging.getLogger(__name__)


class PaymentReconciler:
    """
    Applique le résultat d'un callback à la transaction correspondante.
    Un callback rejoué pour une transaction déjà terminée n'a aucun effet.
    """

    MALFORMED = 'malformed'
    UNKNOWN = 'unknown'
    DUPLICATE = 'duplicate'

    @staticmethod
    def reconcile_stk_callback(payload) -> str:
        """
        Traite un callback STK et l'enregistre dans MpesaCallbackLog

        Returns:
            Le résultat : 'malformed', 'unknown', 'duplicate' ou le nouveau
            statut de la transaction ('completed', 'failed', 'cancelled')
        """
        callback = parse_stk_callback(payload)
        log = MpesaCallbackLog.objects.create(
            payload=payload,
            checkout_request_id=callback['checkout_request_id'] if callback else None,
            result_code=callback['result_code'] if callback else None,
        )

        if callback is None:
            logger.error("Callback M-Pesa mal formé, ignoré")
            log.outcome = PaymentReconciler.MALFORMED
            log.error_message = 'Payload stkCallback invalide'
            log.save(update_fields=['outcome', 'error_message'])
            return PaymentReconciler.MALFORMED

        try:
            outcome, payment = PaymentReconciler._apply(callback)
        except Exception as e:
            log.error_message = str(e)
            log.save(update_fields=['error_message'])
            raise

        log.transaction = payment
        log.outcome = outcome
        log.processed = outcome not in (PaymentReconciler.UNKNOWN, PaymentReconciler.DUPLICATE)
        log.save(update_fields=['transaction', 'outcome', 'processed'])
        return outcome

    @staticmethod
    @transaction.atomic
    def _apply(callback):
        checkout_request_id = callback['checkout_request_id']
        payment = (
            PaymentTransaction.objects.select_for_update()
            .select_related('user')
            .filter(checkout_request_id=checkout_request_id)
            .first()
        )
        if payment is None:
            logger.warning(f"Callback M-Pesa pour une transaction inconnue: {checkout_request_id}")
            return PaymentReconciler.UNKNOWN, None

        result_code = callback['result_code']
        if result_code == RESULT_SUCCESS:
            details = extract_callback_data(callback['metadata'])
            new_status = PaymentTransaction.COMPLETED
            changes = {
                'mpesa_receipt_number': details['mpesa_receipt_number'],
                'transaction_date': details['transaction_date'],
                'paid_amount': details['amount'],
            }
        else:
            new_status = (
                PaymentTransaction.CANCELLED if result_code == RESULT_CANCELLED_BY_USER
                else PaymentTransaction.FAILED
            )
            changes = {}

        # Seule une transaction encore 'initiated' peut changer de statut
        updated = PaymentTransaction.objects.filter(
            pk=payment.pk, status=PaymentTransaction.INITIATED
        ).update(status=new_status, result_desc=callback['result_desc'], updated_at=timezone.now(), **changes)
        if not updated:
            logger.info(f"Callback M-Pesa rejoué pour {checkout_request_id} (statut {payment.status}), ignoré")
            return PaymentReconciler.DUPLICATE, payment

        if new_status != PaymentTransaction.COMPLETED:
            logger.info(f"Paiement {checkout_request_id} {new_status}: {callback['result_desc']}")
            return new_status, payment

        paid = changes['paid_amount']
        if paid is not None and paid != payment.amount:
            logger.warning(
                f"Montant réglé {paid} différent du montant demandé {payment.amount} pour {checkout_request_id}")

        lines = list(CartService.get_lines(payment.user, payment.snapshot_ids()))
        ShippingOrderService.create_from_cart_lines(
            payment.user, lines, shipping_address=payment.shipping_address, payment_transaction=payment)
        logger.info(f"Paiement {checkout_request_id} confirmé (reçu {changes['mpesa_receipt_number']})")
        return new_status, payment
