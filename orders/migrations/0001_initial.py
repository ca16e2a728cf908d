# Generated manually: panier et commandes d'expédition avec séquestre

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('products', '0001_initial'),
        ('payments', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CartItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField(
                    default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Quantité')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name="Date d'ajout")),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Date de mise à jour')),
                ('product', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='cart_items',
                    to='products.product',
                    verbose_name='Produit',
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='cart_items',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Client',
                )),
            ],
            options={
                'verbose_name': 'Article du panier',
                'verbose_name_plural': 'Articles du panier',
                'ordering': ('created_at', 'id'),
            },
        ),
        migrations.AddConstraint(
            model_name='cartitem',
            constraint=models.UniqueConstraint(fields=('user', 'product'), name='unique_cart_line_per_product'),
        ),
        migrations.CreateModel(
            name='ShippingOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_name', models.CharField(blank=True, default='', max_length=255, verbose_name='Nom du produit')),
                ('product_category', models.CharField(blank=True, default='', max_length=100, verbose_name='Catégorie')),
                ('quantity', models.PositiveIntegerField(default=1, verbose_name='Quantité')),
                ('total_amount', models.FloatField(verbose_name='Montant total (KSh)')),
                ('shipping_status', models.CharField(
                    choices=[
                        ('pending', 'En attente'),
                        ('shipped', 'Expédiée'),
                        ('delivered', 'Livrée'),
                        ('cancelled', 'Annulée'),
                    ],
                    default='pending',
                    max_length=20,
                    verbose_name="Statut d'expédition",
                )),
                ('tracking_number', models.CharField(blank=True, max_length=100, null=True, verbose_name='Numéro de suivi')),
                ('shipping_address', models.TextField(blank=True, null=True, verbose_name='Adresse de livraison')),
                ('customer_verified', models.BooleanField(default=False, verbose_name='Livraison confirmée par le client')),
                ('payment_released', models.BooleanField(default=False, verbose_name='Paiement libéré au vendeur')),
                ('verification_requested_at', models.DateTimeField(
                    blank=True, null=True, verbose_name='Date de demande de confirmation')),
                ('verified_at', models.DateTimeField(blank=True, null=True, verbose_name='Date de confirmation')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de création')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Date de mise à jour')),
                ('customer', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='shipping_orders',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Client',
                )),
                ('payment_transaction', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='shipping_orders',
                    to='payments.paymenttransaction',
                    verbose_name='Transaction M-Pesa',
                )),
                ('product', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='shipping_orders',
                    to='products.product',
                    verbose_name='Produit',
                )),
                ('vendor', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='sales_orders',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Vendeur',
                )),
            ],
            options={
                'verbose_name': "Commande d'expédition",
                'verbose_name_plural': "Commandes d'expédition",
                'ordering': ('-created_at', '-id'),
            },
        ),
        migrations.AddIndex(
            model_name='shippingorder',
            index=models.Index(fields=['customer'], name='orders_ship_customer_idx'),
        ),
        migrations.AddIndex(
            model_name='shippingorder',
            index=models.Index(fields=['vendor'], name='orders_ship_vendor_idx'),
        ),
        migrations.AddIndex(
            model_name='shippingorder',
            index=models.Index(fields=['shipping_status'], name='orders_ship_status_idx'),
        ),
    ]
