"""
Middleware d'authentification par jeton Bearer
"""
import logging
from typing import NamedTuple, Optional

from .models import Profile
from .tokens import get_user_from_token

logger = logging.getLogger(__name__)


class Principal(NamedTuple):
    """Identité de l'appelant, résolue une seule fois par requête"""
    user_id: int
    role: str
    verified: bool
    banned: bool


def build_principal(user) -> Optional[Principal]:
    if user is None or not user.is_authenticated:
        return None
    profile, _ = Profile.objects.get_or_create(user=user)
    role = Profile.ADMIN if profile.is_admin else profile.role
    return Principal(user_id=user.pk, role=role, verified=profile.verified, banned=profile.banned)


class BearerTokenMiddleware:
    """
    Authentifie l'en-tête ``Authorization: Bearer <jeton>`` et expose
    ``request.principal``. Les requêtes authentifiées par jeton ne passent pas
    par la vérification CSRF (pas de cookie de session).
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.auth_error = None
        header = request.headers.get('Authorization', '')
        if header.startswith('Bearer '):
            user = get_user_from_token(header[len('Bearer '):].strip())
            if user is None:
                request.auth_error = 'Jeton invalide ou expiré'
            else:
                request.user = user
                request._dont_enforce_csrf_checks = True
        request.principal = build_principal(getattr(request, 'user', None))
        return self.get_response(request)
