"""
Service de séquestre : libération des fonds au vendeur après confirmation de
livraison par le client, et retraits du portefeuille vendeur
"""
import logging
import uuid
from typing import Tuple

from django.conf import settings
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import F
from django.http import Http404
from django.utils import timezone

from accounts.models import Profile
from accounts.utils import normalize_mpesa_number, parse_amount
from orders.exceptions import SettlementNotAllowed
from orders.models import ShippingOrder
from .models import WalletWithdrawal

logger = logging.getLogger(__name__)


class EscrowService:
    """Service pour gérer l'escrow des commandes d'expédition"""

    @staticmethod
    @transaction.atomic
    def settle_delivery(order_id, customer, verified: bool) -> dict:
        """
        Enregistre la décision du client sur une commande livrée.

        Si la livraison est confirmée, la commande est marquée vérifiée et son
        montant est crédité au vendeur, dans la même transaction. Une seconde
        confirmation ne crédite rien.

        Args:
            order_id: Identifiant de la commande d'expédition
            customer: Client authentifié
            verified: True si le client confirme la réception

        Returns:
            Dictionnaire success, message, credited, order_id

        Raises:
            Http404: commande inconnue
            PermissionDenied: la commande appartient à un autre client
            SettlementNotAllowed: le vendeur n'a pas encore marqué la commande livrée
        """
        try:
            order = ShippingOrder.objects.select_for_update().get(pk=order_id)
        except ShippingOrder.DoesNotExist:
            raise Http404("Commande d'expédition introuvable")

        if order.customer_id != customer.id:
            logger.warning(f"Le client {customer.id} a tenté de confirmer l'expédition {order.id}")
            raise PermissionDenied("Cette commande ne vous appartient pas")

        if not verified:
            # Litige : traitement manuel par un administrateur
            logger.warning(f"Livraison contestée par le client {customer.id} pour l'expédition {order.id}")
            return {
                'success': True,
                'order_id': order.id,
                'credited': False,
                'message': "Votre signalement a été enregistré, un administrateur va vous contacter",
            }

        if order.verification_requested_at is None:
            raise SettlementNotAllowed("Le vendeur n'a pas encore marqué cette commande comme livrée")

        released = ShippingOrder.objects.filter(pk=order.pk, payment_released=False).update(
            customer_verified=True, payment_released=True, verified_at=timezone.now(), updated_at=timezone.now())
        if not released:
            return {
                'success': True,
                'order_id': order.id,
                'credited': False,
                'message': 'Livraison déjà confirmée, paiement déjà libéré',
            }

        Profile.objects.filter(user_id=order.vendor_id).update(
            wallet_balance=F('wallet_balance') + order.total_amount)
        logger.info(f"Expédition {order.id} confirmée : {order.total_amount} KSh crédités au vendeur {order.vendor_id}")
        return {
            'success': True,
            'order_id': order.id,
            'credited': True,
            'message': 'Livraison confirmée, paiement libéré au vendeur',
        }


class WalletService:
    """Portefeuille vendeur (solde comptable uniquement)"""

    @staticmethod
    def get_balance(vendor) -> float:
        return Profile.objects.values_list('wallet_balance', flat=True).get(user=vendor)

    @staticmethod
    @transaction.atomic
    def withdraw(vendor, amount, mpesa_number) -> Tuple[bool, dict]:
        """
        Débite le portefeuille si le solde est suffisant. Le virement B2C
        vers le numéro M-Pesa n'est pas effectué ici.

        Returns:
            Tuple (success, response_data) ; en cas d'échec le solde est inchangé

        Raises:
            ValidationError: montant hors des bornes ou numéro invalide
        """
        amount = parse_amount(
            amount, minimum=settings.MIN_WITHDRAWAL_AMOUNT, maximum=settings.MAX_WITHDRAWAL_AMOUNT)
        phone = normalize_mpesa_number(mpesa_number)
        value = float(amount)

        # Profil verrouillé jusqu'à la fin de la transaction
        profile = Profile.objects.select_for_update().get(user=vendor)
        if profile.wallet_balance < value:
            balance = profile.wallet_balance
            logger.info(f"Retrait refusé pour {vendor.username}: solde {balance} < {value}")
            return False, {
                'success': False,
                'message': 'Solde insuffisant',
                'transaction_id': None,
                'new_balance': balance,
            }

        Profile.objects.filter(pk=profile.pk).update(wallet_balance=F('wallet_balance') - value)
        balance = profile.wallet_balance - value

        withdrawal = WalletWithdrawal.objects.create(
            vendor=vendor,
            amount=value,
            mpesa_number=phone,
            reference=f"WD-{uuid.uuid4().hex[:12].upper()}",
            balance_after=balance,
        )
        logger.info(f"Retrait {withdrawal.reference} de {value} KSh pour {vendor.username}")
        return True, {
            'success': True,
            'message': f'Retrait de {value:.2f} KSh vers {phone} enregistré',
            'transaction_id': withdrawal.reference,
            'new_balance': balance,
        }
