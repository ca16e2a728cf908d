# Generated manually: transactions M-Pesa, logs de callback et retraits vendeurs

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PaymentTransaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('checkout_request_id', models.CharField(max_length=100, unique=True, verbose_name='CheckoutRequestID')),
                ('merchant_request_id', models.CharField(
                    blank=True, max_length=100, null=True, verbose_name='MerchantRequestID')),
                ('mpesa_receipt_number', models.CharField(
                    blank=True, max_length=50, null=True, verbose_name='Reçu M-Pesa')),
                ('phone_number', models.CharField(max_length=15, verbose_name='Téléphone')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Montant demandé')),
                ('paid_amount', models.DecimalField(
                    blank=True, decimal_places=2, max_digits=12, null=True, verbose_name='Montant réglé')),
                ('status', models.CharField(
                    choices=[
                        ('initiated', 'Initiée'),
                        ('completed', 'Terminée'),
                        ('failed', 'Échouée'),
                        ('cancelled', 'Annulée'),
                    ],
                    default='initiated',
                    max_length=20,
                    verbose_name='Statut',
                )),
                ('transaction_date', models.CharField(
                    blank=True, max_length=20, null=True, verbose_name='Date de transaction M-Pesa')),
                ('result_desc', models.TextField(blank=True, null=True, verbose_name='Description du résultat')),
                ('cart_item_ids', models.TextField(blank=True, default='', verbose_name='Lignes de panier')),
                ('shipping_address', models.TextField(blank=True, null=True, verbose_name='Adresse de livraison')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de création')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Date de mise à jour')),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='payment_transactions',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Client',
                )),
            ],
            options={
                'verbose_name': 'Transaction M-Pesa',
                'verbose_name_plural': 'Transactions M-Pesa',
                'ordering': ('-created_at',),
            },
        ),
        migrations.AddIndex(
            model_name='paymenttransaction',
            index=models.Index(fields=['status'], name='payments_tx_status_idx'),
        ),
        migrations.AddIndex(
            model_name='paymenttransaction',
            index=models.Index(fields=['user'], name='payments_tx_user_idx'),
        ),
        migrations.CreateModel(
            name='MpesaCallbackLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('checkout_request_id', models.CharField(
                    blank=True, max_length=100, null=True, verbose_name='CheckoutRequestID')),
                ('payload', models.JSONField(blank=True, null=True, verbose_name='Payload reçu')),
                ('result_code', models.IntegerField(blank=True, null=True, verbose_name='Code résultat')),
                ('outcome', models.CharField(
                    blank=True, default='', max_length=20, verbose_name='Résultat du traitement')),
                ('processed', models.BooleanField(default=False, verbose_name='Traité')),
                ('error_message', models.TextField(blank=True, null=True, verbose_name="Message d'erreur")),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de réception')),
                ('transaction', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='callback_logs',
                    to='payments.paymenttransaction',
                    verbose_name='Transaction',
                )),
            ],
            options={
                'verbose_name': 'Log callback M-Pesa',
                'verbose_name_plural': 'Logs callbacks M-Pesa',
                'ordering': ('-created_at',),
            },
        ),
        migrations.CreateModel(
            name='WalletWithdrawal',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.FloatField(verbose_name='Montant demandé')),
                ('mpesa_number', models.CharField(max_length=15, verbose_name='Numéro M-Pesa')),
                ('reference', models.CharField(max_length=50, unique=True, verbose_name='Référence')),
                ('status', models.CharField(
                    choices=[('pending', 'En attente'), ('paid', 'Payé')],
                    default='pending',
                    max_length=13,
                    verbose_name='Statut',
                )),
                ('balance_after', models.FloatField(verbose_name='Solde après retrait')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de la demande')),
                ('vendor', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='withdrawals',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Vendeur',
                )),
            ],
            options={
                'verbose_name': 'Retrait vendeur',
                'verbose_name_plural': 'Retraits vendeurs',
                'ordering': ('-created_at', '-id'),
            },
        ),
    ]
