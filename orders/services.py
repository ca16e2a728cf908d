"""
Services du panier et de création des commandes d'expédition
"""
import logging
from typing import Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.db.models.functions import Greatest
from django.http import Http404

from products.models import Product
from .models import CartItem, ShippingOrder

logger = logging.getLogger(__name__)


def parse_quantity(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError('La quantité doit être un entier supérieur ou égal à 1')
    return value


class CartService:
    """Opérations sur le panier d'un client"""

    @staticmethod
    def get_lines(user, item_ids: Optional[Iterable[int]] = None):
        """
        Lignes du panier de l'utilisateur, éventuellement limitées à ``item_ids``.
        Les identifiants qui ne sont pas dans son panier sont ignorés.
        """
        lines = CartItem.objects.filter(user=user).select_related('product', 'product__vendor')
        if item_ids is not None:
            lines = lines.filter(id__in=list(item_ids))
        return lines.order_by('created_at', 'id')

    @staticmethod
    @transaction.atomic
    def add_item(user, product_id, quantity=1) -> CartItem:
        """Ajoute un produit ; si la ligne existe déjà, les quantités s'additionnent"""
        quantity = parse_quantity(quantity)
        try:
            product = Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise Http404('Produit introuvable')

        line, created = CartItem.objects.select_for_update().get_or_create(
            user=user, product=product, defaults={'quantity': quantity})
        if not created:
            line.quantity = F('quantity') + quantity
            line.save(update_fields=['quantity', 'updated_at'])
            line.refresh_from_db()
        return line

    @staticmethod
    def update_quantity(user, item_id, quantity) -> CartItem:
        quantity = parse_quantity(quantity)
        try:
            line = CartItem.objects.select_related('product', 'product__vendor').get(pk=item_id, user=user)
        except CartItem.DoesNotExist:
            raise Http404('Article du panier introuvable')
        line.quantity = quantity
        line.save(update_fields=['quantity', 'updated_at'])
        return line

    @staticmethod
    def remove_item(user, item_id):
        deleted, _ = CartItem.objects.filter(pk=item_id, user=user).delete()
        if not deleted:
            raise Http404('Article du panier introuvable')


class ShippingOrderService:
    """Transforme des lignes de panier payées en commandes d'expédition"""

    @staticmethod
    def create_from_cart_lines(user, lines, shipping_address=None, payment_transaction=None) -> List[ShippingOrder]:
        """
        Crée une commande d'expédition par ligne, décrémente le stock (sans
        descendre sous zéro) et supprime les lignes du panier.

        Doit être appelé dans une transaction (transaction.atomic).

        Args:
            user: Client propriétaire des lignes
            lines: Lignes de panier à convertir (avec leur produit)
            shipping_address: Adresse de livraison à recopier sur chaque commande
            payment_transaction: Transaction M-Pesa d'origine, si elle existe

        Returns:
            Liste des commandes créées
        """
        orders = []
        for line in lines:
            product = line.product
            orders.append(ShippingOrder.objects.create(
                customer=user,
                product=product,
                vendor_id=product.vendor_id,
                product_name=product.name,
                product_category=product.category,
                quantity=line.quantity,
                # Prix courant du produit au moment du paiement
                total_amount=product.price * line.quantity,
                shipping_address=shipping_address,
                payment_transaction=payment_transaction,
            ))
            Product.objects.filter(pk=product.pk).update(
                quantity=Greatest(F('quantity') - line.quantity, 0))

        CartItem.objects.filter(pk__in=[line.pk for line in lines]).delete()
        logger.info(f"{len(orders)} commande(s) d'expédition créée(s) pour {user}")
        return orders
