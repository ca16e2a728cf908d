"""
Modèles pour les paiements M-Pesa et le portefeuille vendeur
"""
from django.db import models
from django.contrib.auth.models import User
from django.utils.translation import gettext_lazy as _


class PaymentTransaction(models.Model):
    """
    Une tentative de paiement STK push, identifiée par le CheckoutRequestID
    renvoyé par M-Pesa (clé de rapprochement du callback)
    """
    INITIATED = 'initiated'
    COMPLETED = 'completed'
    FAILED = 'failed'
    CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (INITIATED, _('Initiée')),
        (COMPLETED, _('Terminée')),
        (FAILED, _('Échouée')),
        (CANCELLED, _('Annulée')),
    ]
    TERMINAL_STATUSES = (COMPLETED, FAILED, CANCELLED)

    user = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='payment_transactions', verbose_name=_("Client"))

    # Identifiants M-Pesa
    checkout_request_id = models.CharField(
        max_length=100, unique=True, verbose_name=_("CheckoutRequestID"))
    merchant_request_id = models.CharField(
        max_length=100, blank=True, null=True, verbose_name=_("MerchantRequestID"))
    mpesa_receipt_number = models.CharField(
        max_length=50, blank=True, null=True, verbose_name=_("Reçu M-Pesa"))

    # Informations de paiement
    phone_number = models.CharField(max_length=15, verbose_name=_("Téléphone"))
    amount = models.DecimalField(max_digits=12, decimal_places=2, verbose_name=_("Montant demandé"))
    paid_amount = models.DecimalField(
        max_digits=12, decimal_places=2, blank=True, null=True, verbose_name=_("Montant réglé"))
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=INITIATED, verbose_name=_("Statut"))
    transaction_date = models.CharField(
        max_length=20, blank=True, null=True, verbose_name=_("Date de transaction M-Pesa"))
    result_desc = models.TextField(blank=True, null=True, verbose_name=_("Description du résultat"))

    # Lignes de panier payées, séparées par des virgules
    cart_item_ids = models.TextField(blank=True, default='', verbose_name=_("Lignes de panier"))
    shipping_address = models.TextField(blank=True, null=True, verbose_name=_("Adresse de livraison"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de création"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Transaction M-Pesa")
        verbose_name_plural = _("Transactions M-Pesa")
        indexes = [
            models.Index(fields=['status'], name='payments_tx_status_idx'),
            models.Index(fields=['user'], name='payments_tx_user_idx'),
        ]

    def __str__(self):
        return f"Transaction {self.checkout_request_id} - {self.amount} KSh - {self.get_status_display()}"

    @staticmethod
    def join_ids(ids) -> str:
        return ','.join(str(i) for i in ids)

    def snapshot_ids(self):
        """
        Identifiants des lignes de panier payées, ou None si aucun
        instantané n'a été enregistré
        """
        ids = [part.strip() for part in (self.cart_item_ids or '').split(',')]
        ids = [int(part) for part in ids if part.isdigit()]
        return ids or None

    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES


class MpesaCallbackLog(models.Model):
    """
    Log des callbacks M-Pesa pour le débogage
    """
    transaction = models.ForeignKey(
        PaymentTransaction, on_delete=models.SET_NULL, blank=True, null=True,
        related_name='callback_logs', verbose_name=_("Transaction"))
    checkout_request_id = models.CharField(
        max_length=100, blank=True, null=True, verbose_name=_("CheckoutRequestID"))
    payload = models.JSONField(blank=True, null=True, verbose_name=_("Payload reçu"))
    result_code = models.IntegerField(blank=True, null=True, verbose_name=_("Code résultat"))
    outcome = models.CharField(max_length=20, blank=True, default='', verbose_name=_("Résultat du traitement"))
    processed = models.BooleanField(default=False, verbose_name=_("Traité"))
    error_message = models.TextField(blank=True, null=True, verbose_name=_("Message d'erreur"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de réception"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Log callback M-Pesa")
        verbose_name_plural = _("Logs callbacks M-Pesa")

    def __str__(self):
        return f"Callback {self.checkout_request_id or '?'} - {self.created_at}"


class WalletWithdrawal(models.Model):
    """
    Demande de retrait du portefeuille vendeur. Seul le débit du solde est
    enregistré ; le virement M-Pesa B2C reste à effectuer.
    """
    PENDING = 'pending'
    PAID = 'paid'

    STATUS_CHOICES = [
        (PENDING, _('En attente')),
        (PAID, _('Payé')),
    ]

    vendor = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='withdrawals', verbose_name=_("Vendeur"))
    amount = models.FloatField(verbose_name=_("Montant demandé"))
    mpesa_number = models.CharField(max_length=15, verbose_name=_("Numéro M-Pesa"))
    reference = models.CharField(max_length=50, unique=True, verbose_name=_("Référence"))
    status = models.CharField(
        max_length=13, choices=STATUS_CHOICES, default=PENDING, verbose_name=_("Statut"))
    balance_after = models.FloatField(verbose_name=_("Solde après retrait"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de la demande"))

    class Meta:
        ordering = ('-created_at', '-id')
        verbose_name = _("Retrait vendeur")
        verbose_name_plural = _("Retraits vendeurs")

    def __str__(self):
        return f"Retrait {self.reference} - {self.vendor} - {self.amount}"
