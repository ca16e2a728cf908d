from django.db import models
from django.contrib.auth.models import User
from django.core.validators import MinValueValidator
from django.utils.translation import gettext_lazy as _

from products.models import Product


class CartItem(models.Model):
    user = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='cart_items', verbose_name=_("Client"))
    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name='cart_items', verbose_name=_("Produit"))
    quantity = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)], verbose_name=_("Quantité"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date d'ajout"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))

    class Meta:
        ordering = ('created_at', 'id')
        verbose_name = _("Article du panier")
        verbose_name_plural = _("Articles du panier")
        constraints = [
            models.UniqueConstraint(fields=['user', 'product'], name='unique_cart_line_per_product'),
        ]

    def __str__(self):
        return f"{self.user} - {self.product} x{self.quantity}"

    @property
    def line_total(self):
        return self.product.price * self.quantity


class ShippingOrder(models.Model):
    """
    Unité d'expédition : une ligne de panier payée, pour un seul produit.
    Le montant est figé à la création, même si le prix du produit change ensuite.
    """
    PENDING = 'pending'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (PENDING, _('En attente')),
        (SHIPPED, _('Expédiée')),
        (DELIVERED, _('Livrée')),
        (CANCELLED, _('Annulée')),
    ]
    STATUSES = (PENDING, SHIPPED, DELIVERED, CANCELLED)

    # Statuts atteignables depuis chaque statut (rester sur place = mise à jour du suivi)
    TRANSITIONS = {
        PENDING: {PENDING, SHIPPED, DELIVERED, CANCELLED},
        SHIPPED: {SHIPPED, DELIVERED, CANCELLED},
        DELIVERED: {DELIVERED},
        CANCELLED: {CANCELLED},
    }

    customer = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='shipping_orders', verbose_name=_("Client"))
    product = models.ForeignKey(
        Product, on_delete=models.SET_NULL, blank=True, null=True,
        related_name='shipping_orders', verbose_name=_("Produit"))
    vendor = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='sales_orders', verbose_name=_("Vendeur"))
    product_name = models.CharField(max_length=255, blank=True, default='', verbose_name=_("Nom du produit"))
    product_category = models.CharField(max_length=100, blank=True, default='', verbose_name=_("Catégorie"))
    quantity = models.PositiveIntegerField(default=1, verbose_name=_("Quantité"))
    total_amount = models.FloatField(verbose_name=_("Montant total (KSh)"))
    shipping_status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=PENDING, verbose_name=_("Statut d'expédition"))
    tracking_number = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("Numéro de suivi"))
    shipping_address = models.TextField(blank=True, null=True, verbose_name=_("Adresse de livraison"))

    # Séquestre
    customer_verified = models.BooleanField(default=False, verbose_name=_("Livraison confirmée par le client"))
    payment_released = models.BooleanField(default=False, verbose_name=_("Paiement libéré au vendeur"))
    verification_requested_at = models.DateTimeField(
        blank=True, null=True, verbose_name=_("Date de demande de confirmation"))
    verified_at = models.DateTimeField(blank=True, null=True, verbose_name=_("Date de confirmation"))

    payment_transaction = models.ForeignKey(
        'payments.PaymentTransaction', on_delete=models.SET_NULL, blank=True, null=True,
        related_name='shipping_orders', verbose_name=_("Transaction M-Pesa"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de création"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))

    class Meta:
        ordering = ('-created_at', '-id')
        verbose_name = _("Commande d'expédition")
        verbose_name_plural = _("Commandes d'expédition")
        indexes = [
            models.Index(fields=['customer'], name='orders_ship_customer_idx'),
            models.Index(fields=['vendor'], name='orders_ship_vendor_idx'),
            models.Index(fields=['shipping_status'], name='orders_ship_status_idx'),
        ]

    def __str__(self):
        return f"Expédition {self.id} - {self.product_name} ({self.get_shipping_status_display()})"

    @classmethod
    def parse_status(cls, value):
        """Statut normalisé, ou None si la valeur ne fait pas partie des statuts connus"""
        if not isinstance(value, str):
            return None
        status = value.strip().lower()
        return status if status in cls.STATUSES else None

    def can_transition_to(self, status) -> bool:
        # Un statut hérité inconnu n'empêche pas le vendeur de corriger la commande
        allowed = self.TRANSITIONS.get(self.shipping_status, set(self.STATUSES))
        return status in allowed

    @property
    def awaiting_verification(self) -> bool:
        return self.verification_requested_at is not None and not self.payment_released
