"""
Jetons d'authentification Bearer signés (identifiant utilisateur horodaté)
"""
from django.conf import settings
from django.contrib.auth.models import User
from django.core import signing

TOKEN_SALT = 'accounts.bearer-token'


def _signer():
    return signing.TimestampSigner(salt=TOKEN_SALT)


def make_token(user) -> str:
    return _signer().sign(str(user.pk))


def get_user_from_token(token: str):
    """
    Retourne l'utilisateur actif associé au jeton, ou None si le jeton est
    invalide, expiré ou si l'utilisateur n'existe plus
    """
    try:
        user_id = _signer().unsign(token, max_age=settings.AUTH_TOKEN_MAX_AGE)
    except signing.BadSignature:
        return None
    return User.objects.filter(pk=user_id, is_active=True).select_related('profile').first()
