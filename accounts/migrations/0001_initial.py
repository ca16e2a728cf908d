# Generated manually: profils, messagerie et signalements de vendeurs

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('products', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(
                    choices=[('customer', 'Client'), ('vendor', 'Vendeur'), ('admin', 'Administrateur')],
                    default='customer',
                    max_length=13,
                    verbose_name='Rôle',
                )),
                ('mpesa_number', models.CharField(blank=True, max_length=20, null=True, verbose_name='Numéro M-Pesa')),
                ('location', models.CharField(blank=True, max_length=150, null=True, verbose_name='Localisation')),
                ('address', models.CharField(blank=True, max_length=255, null=True, verbose_name='Adresse de livraison')),
                ('verified', models.BooleanField(default=False, verbose_name='Vérifié')),
                ('banned', models.BooleanField(default=False, verbose_name='Banni')),
                ('wallet_balance', models.FloatField(default=0.0, verbose_name='Solde du portefeuille')),
                ('date', models.DateTimeField(auto_now_add=True, verbose_name="Date d'inscription")),
                ('date_update', models.DateTimeField(auto_now=True, verbose_name='Date de mise à jour')),
                ('user', models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='profile',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Utilisateur',
                )),
            ],
            options={
                'verbose_name': 'Profil',
                'verbose_name_plural': 'Profils',
            },
        ),
        migrations.CreateModel(
            name='Message',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('content', models.TextField(verbose_name='Contenu')),
                ('is_read', models.BooleanField(default=False, verbose_name='Lu')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name="Date d'envoi")),
                ('receiver', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='received_messages',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Destinataire',
                )),
                ('sender', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='sent_messages',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Expéditeur',
                )),
            ],
            options={
                'verbose_name': 'Message',
                'verbose_name_plural': 'Messages',
                'ordering': ('created_at',),
            },
        ),
        migrations.AddIndex(
            model_name='message',
            index=models.Index(fields=['sender', 'receiver'], name='accounts_msg_pair_idx'),
        ),
        migrations.AddIndex(
            model_name='message',
            index=models.Index(fields=['receiver', 'is_read'], name='accounts_msg_unread_idx'),
        ),
        migrations.CreateModel(
            name='VendorReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('report_type', models.CharField(max_length=50, verbose_name='Type de signalement')),
                ('description', models.TextField(blank=True, null=True, verbose_name='Description')),
                ('status', models.CharField(
                    choices=[
                        ('pending', 'En attente'),
                        ('reviewed', 'Examiné'),
                        ('resolved', 'Résolu'),
                        ('dismissed', 'Rejeté'),
                    ],
                    default='pending',
                    max_length=20,
                    verbose_name='Statut',
                )),
                ('admin_notes', models.TextField(blank=True, null=True, verbose_name="Notes de l'administrateur")),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de création')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Date de mise à jour')),
                ('customer', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='reports_sent',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Client',
                )),
                ('product', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='reports',
                    to='products.product',
                    verbose_name='Produit',
                )),
                ('vendor', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='reports_received',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Vendeur',
                )),
            ],
            options={
                'verbose_name': 'Signalement vendeur',
                'verbose_name_plural': 'Signalements vendeurs',
                'ordering': ('-created_at',),
            },
        ),
    ]
