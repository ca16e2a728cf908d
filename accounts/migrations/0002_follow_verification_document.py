# Generated manually: abonnements aux vendeurs et pièces justificatives

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='profile',
            name='verification_document',
            field=models.FileField(
                blank=True,
                max_length=500,
                null=True,
                upload_to='verification_documents/',
                validators=[django.core.validators.FileExtensionValidator(['pdf', 'jpg', 'jpeg', 'png'])],
                verbose_name='Pièce justificative',
            ),
        ),
        migrations.AddField(
            model_name='profile',
            name='verification_submitted_at',
            field=models.DateTimeField(blank=True, null=True, verbose_name='Date de dépôt de la pièce'),
        ),
        migrations.CreateModel(
            name='Follow',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name="Date d'abonnement")),
                ('follower', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='follows',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Abonné',
                )),
                ('vendor', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='followers',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Vendeur',
                )),
            ],
            options={
                'verbose_name': 'Abonnement',
                'verbose_name_plural': 'Abonnements',
                'ordering': ('-created_at',),
            },
        ),
        migrations.AddConstraint(
            model_name='follow',
            constraint=models.UniqueConstraint(fields=('follower', 'vendor'), name='unique_follow_per_vendor'),
        ),
    ]
