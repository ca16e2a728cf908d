"""
Signaux du compte utilisateur
"""
from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile


@receiver(post_save, sender=User)
def create_profile(sender, instance, created, **kwargs):
    """Chaque utilisateur reçoit un profil à sa création"""
    if created:
        role = Profile.ADMIN if instance.is_superuser else Profile.CUSTOMER
        Profile.objects.get_or_create(user=instance, defaults={'role': role})
