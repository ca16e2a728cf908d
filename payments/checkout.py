"""
Initialisation du paiement d'un panier par STK push M-Pesa
"""
import logging
import uuid
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from accounts.utils import normalize_mpesa_number, parse_amount
from orders.services import CartService, ShippingOrderService
from .exceptions import PaymentGatewayError
from .models import PaymentTransaction

logger = logging.getLogger(__name__)


def parse_selected_items(value):
    """Liste d'identifiants de lignes de panier, ou None pour tout le panier"""
    if value is None:
        return None
    if not isinstance(value, list) or any(isinstance(i, bool) or not isinstance(i, int) for i in value):
        raise ValidationError('selected_items doit être une liste d\'identifiants de lignes de panier')
    return value


class CheckoutService:
    """Service de paiement du panier"""

    @staticmethod
    def initiate_checkout(user, mpesa_number, total_amount, selected_items=None,
                          shipping_address: Optional[str] = None, mpesa_service=None) -> dict:
        """
        Valide la demande puis lance le STK push sur le téléphone du client.
        Le montant n'est pas comparé au total du panier (paiement libre).

        Args:
            user: Client authentifié
            mpesa_number: Numéro qui recevra la demande de paiement
            total_amount: Montant à payer (entre MIN_CHECKOUT_AMOUNT et MAX_CHECKOUT_AMOUNT)
            selected_items: Identifiants des lignes de panier à payer (tout le panier si None)
            shipping_address: Adresse de livraison (adresse du profil par défaut)
            mpesa_service: Client M-Pesa ; s'il n'est pas configuré, le mode démo s'applique

        Returns:
            Dictionnaire transaction_id, message, status

        Raises:
            ValidationError: téléphone, montant ou sélection invalide, panier vide
            PaymentGatewayError: M-Pesa a refusé ou n'a pas répondu (rien n'est enregistré)
        """
        phone = normalize_mpesa_number(mpesa_number)
        amount = parse_amount(
            total_amount, minimum=settings.MIN_CHECKOUT_AMOUNT, maximum=settings.MAX_CHECKOUT_AMOUNT)
        item_ids = parse_selected_items(selected_items)

        lines = list(CartService.get_lines(user, item_ids))
        if not lines:
            raise ValidationError('Aucun article du panier à payer')

        if not shipping_address:
            shipping_address = user.profile.address

        if mpesa_service is None or not mpesa_service.is_configured:
            return CheckoutService._complete_demo_checkout(user, lines, amount, shipping_address)

        success, response = mpesa_service.stk_push(
            phone, amount, account_reference=f"CART{user.id}", description="Achat panier")
        if not success:
            logger.error(f"STK push échoué pour {user.username}: {response.get('error')}")
            raise PaymentGatewayError(
                "Le service M-Pesa n'a pas pu traiter la demande. Veuillez réessayer.", response)

        payment = PaymentTransaction.objects.create(
            user=user,
            checkout_request_id=response['checkout_request_id'],
            merchant_request_id=response.get('merchant_request_id'),
            phone_number=phone,
            amount=amount,
            cart_item_ids=PaymentTransaction.join_ids(line.id for line in lines),
            shipping_address=shipping_address,
        )
        logger.info(f"Paiement {payment.checkout_request_id} initié pour {user.username} ({amount} KSh)")
        return {
            'transaction_id': payment.checkout_request_id,
            'message': response.get('customer_message') or 'Demande de paiement envoyée sur votre téléphone',
            'status': payment.status,
        }

    @staticmethod
    @transaction.atomic
    def _complete_demo_checkout(user, lines, amount, shipping_address) -> dict:
        """
        Mode démo (M-Pesa non configuré) : les commandes sont créées immédiatement
        """
        orders = ShippingOrderService.create_from_cart_lines(user, lines, shipping_address=shipping_address)
        reference = f"DEMO-{uuid.uuid4().hex[:12].upper()}"
        logger.warning(f"M-Pesa non configuré : paiement démo {reference} ({amount} KSh) pour {user.username}")
        return {
            'transaction_id': reference,
            'message': f'Paiement de démonstration accepté, {len(orders)} commande(s) créée(s)',
            'status': PaymentTransaction.COMPLETED,
        }
