from django.core.validators import FileExtensionValidator
from django.db import models
from django.contrib.auth.models import User
from django.utils.translation import gettext_lazy as _


VERIFICATION_DOCUMENT_EXTENSIONS = ['pdf', 'jpg', 'jpeg', 'png']


class Profile(models.Model):
    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name='profile', verbose_name=_("Utilisateur"))

    CUSTOMER = 'customer'
    VENDOR = 'vendor'
    ADMIN = 'admin'
    ROLE_CHOICES = [
        (CUSTOMER, _('Client')),
        (VENDOR, _('Vendeur')),
        (ADMIN, _('Administrateur')),
    ]
    ROLES = (CUSTOMER, VENDOR, ADMIN)

    role = models.CharField(
        max_length=13, choices=ROLE_CHOICES, default=CUSTOMER, verbose_name=_("Rôle"))
    mpesa_number = models.CharField(
        max_length=20, blank=True, null=True, verbose_name=_("Numéro M-Pesa"))
    location = models.CharField(max_length=150, blank=True, null=True, verbose_name=_("Localisation"))
    address = models.CharField(max_length=255, blank=True, null=True, verbose_name=_("Adresse de livraison"))
    verified = models.BooleanField(default=False, verbose_name=_("Vérifié"))
    banned = models.BooleanField(default=False, verbose_name=_("Banni"))
    verification_document = models.FileField(
        upload_to='verification_documents/', blank=True, null=True, max_length=500,
        validators=[FileExtensionValidator(VERIFICATION_DOCUMENT_EXTENSIONS)],
        verbose_name=_("Pièce justificative"))
    verification_submitted_at = models.DateTimeField(
        blank=True, null=True, verbose_name=_("Date de dépôt de la pièce"))
    wallet_balance = models.FloatField(default=0.00, verbose_name=_("Solde du portefeuille"))
    date = models.DateTimeField(auto_now_add=True, verbose_name=_("Date d'inscription"))
    date_update = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))

    class Meta:
        verbose_name = _("Profil")
        verbose_name_plural = _("Profils")

    def __str__(self):
        return self.user.username

    @classmethod
    def parse_role(cls, value):
        """
        Convertit un rôle reçu de l'extérieur ('Vendor', 'customer'...) en valeur stockée

        Returns:
            Le rôle normalisé, ou None si la valeur est inconnue
        """
        if not isinstance(value, str):
            return None
        role = value.strip().lower()
        return role if role in cls.ROLES else None

    @property
    def is_vendor(self):
        return self.role == self.VENDOR

    @property
    def is_admin(self):
        return self.role == self.ADMIN or self.user.is_superuser


class Message(models.Model):
    """Message direct entre deux utilisateurs"""
    sender = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='sent_messages', verbose_name=_("Expéditeur"))
    receiver = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='received_messages', verbose_name=_("Destinataire"))
    content = models.TextField(verbose_name=_("Contenu"))
    is_read = models.BooleanField(default=False, verbose_name=_("Lu"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date d'envoi"))

    class Meta:
        ordering = ('created_at',)
        verbose_name = _("Message")
        verbose_name_plural = _("Messages")
        indexes = [
            models.Index(fields=['sender', 'receiver'], name='accounts_msg_pair_idx'),
            models.Index(fields=['receiver', 'is_read'], name='accounts_msg_unread_idx'),
        ]

    def __str__(self):
        return f"{self.sender} -> {self.receiver} ({self.created_at:%Y-%m-%d %H:%M})"


class VendorReport(models.Model):
    """Signalement d'un vendeur par un client"""
    PENDING = 'pending'
    REVIEWED = 'reviewed'
    RESOLVED = 'resolved'
    DISMISSED = 'dismissed'

    STATUS_CHOICES = [
        (PENDING, _('En attente')),
        (REVIEWED, _('Examiné')),
        (RESOLVED, _('Résolu')),
        (DISMISSED, _('Rejeté')),
    ]

    customer = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='reports_sent', verbose_name=_("Client"))
    vendor = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='reports_received', verbose_name=_("Vendeur"))
    product = models.ForeignKey(
        'products.Product', on_delete=models.SET_NULL, blank=True, null=True,
        related_name='reports', verbose_name=_("Produit"))
    report_type = models.CharField(max_length=50, verbose_name=_("Type de signalement"))
    description = models.TextField(blank=True, null=True, verbose_name=_("Description"))
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=PENDING, verbose_name=_("Statut"))
    admin_notes = models.TextField(blank=True, null=True, verbose_name=_("Notes de l'administrateur"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de création"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Signalement vendeur")
        verbose_name_plural = _("Signalements vendeurs")

    def __str__(self):
        return f"Signalement {self.id} - {self.vendor} ({self.get_status_display()})"


class Follow(models.Model):
    """Abonnement d'un utilisateur à un vendeur"""
    follower = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='follows', verbose_name=_("Abonné"))
    vendor = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='followers', verbose_name=_("Vendeur"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date d'abonnement"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Abonnement")
        verbose_name_plural = _("Abonnements")
        constraints = [
            models.UniqueConstraint(fields=['follower', 'vendor'], name='unique_follow_per_vendor'),
        ]

    def __str__(self):
        return f"{self.follower} suit {self.vendor}"
