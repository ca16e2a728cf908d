"""
Cycle de vie des expéditions, piloté par le vendeur
"""
import logging
from typing import Optional

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.http import Http404
from django.utils import timezone

from .exceptions import InvalidTransition
from .models import ShippingOrder

logger = logging.getLogger(__name__)


class FulfillmentService:

    @staticmethod
    @transaction.atomic
    def update_shipping_status(order_id, vendor, new_status, tracking_number: Optional[str] = None) -> ShippingOrder:
        """
        Fait avancer une expédition : pending -> shipped -> delivered, ou
        annulation tant qu'elle n'est pas livrée. Le passage à 'delivered'
        ouvre la confirmation de réception côté client.

        Args:
            order_id: Identifiant de la commande d'expédition
            vendor: Vendeur authentifié
            new_status: Statut demandé
            tracking_number: Numéro de suivi optionnel, enregistré avec le statut

        Returns:
            La commande mise à jour

        Raises:
            Http404: commande inconnue
            PermissionDenied: la commande appartient à un autre vendeur
            ValidationError: statut inconnu
            InvalidTransition: transition interdite depuis le statut actuel
        """
        try:
            order = ShippingOrder.objects.select_for_update().get(pk=order_id)
        except ShippingOrder.DoesNotExist:
            raise Http404("Commande d'expédition introuvable")

        if order.vendor_id != vendor.id:
            logger.warning(f"Le vendeur {vendor.id} a tenté de modifier l'expédition {order.id}")
            raise PermissionDenied("Cette commande ne vous appartient pas")

        status = ShippingOrder.parse_status(new_status)
        if status is None:
            raise ValidationError(
                f"Statut d'expédition invalide. Valeurs possibles : {', '.join(ShippingOrder.STATUSES)}")

        if not order.can_transition_to(status):
            raise InvalidTransition(
                f"Impossible de passer de '{order.shipping_status}' à '{status}'")

        previous = order.shipping_status
        order.shipping_status = status
        update_fields = ['shipping_status', 'updated_at']

        if tracking_number is not None:
            order.tracking_number = tracking_number.strip() or None
            update_fields.append('tracking_number')

        if status == ShippingOrder.DELIVERED and order.verification_requested_at is None:
            order.verification_requested_at = timezone.now()
            update_fields.append('verification_requested_at')
            logger.info(f"Expédition {order.id} livrée : confirmation demandée au client {order.customer_id}")

        order.save(update_fields=update_fields)
        logger.info(f"Expédition {order.id}: {previous} -> {status}")
        return order
