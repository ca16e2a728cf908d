from django.db import models
from django.contrib.auth.models import User
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    vendor = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='products', verbose_name=_("Vendeur"))
    name = models.CharField(max_length=255, verbose_name=_("Nom du produit"))
    price = models.FloatField(validators=[MinValueValidator(0.01)], verbose_name=_("Prix (KSh)"))
    category = models.CharField(max_length=100, verbose_name=_("Catégorie"))
    description = models.TextField(blank=True, null=True, verbose_name=_("Description"))
    quantity = models.PositiveIntegerField(default=0, verbose_name=_("Stock disponible"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de création"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Produit")
        verbose_name_plural = _("Produits")
        indexes = [
            models.Index(fields=['category'], name='products_pr_categor_idx'),
            models.Index(fields=['vendor'], name='products_pr_vendor_idx'),
        ]

    def __str__(self):
        return self.name


class Review(models.Model):
    """Avis d'un client sur un produit acheté (un seul avis par produit)"""
    customer = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='reviews_written', verbose_name=_("Client"))
    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name='reviews', verbose_name=_("Produit"))
    vendor = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='reviews_received', verbose_name=_("Vendeur"))
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)], verbose_name=_("Note"))
    comment = models.TextField(blank=True, null=True, verbose_name=_("Commentaire"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de l'avis"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Avis")
        verbose_name_plural = _("Avis")
        constraints = [
            models.UniqueConstraint(fields=['customer', 'product'], name='unique_review_per_customer_product'),
        ]

    def __str__(self):
        return f"{self.product} - {self.rating}/5 par {self.customer}"
