"""
Décorateurs de contrôle d'accès pour les vues JSON
"""
from functools import wraps

from django.http import JsonResponse

from .models import Profile


def api_login_required(view_func):
    """Refuse les appelants anonymes (401) et les comptes bannis (403)"""
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        principal = getattr(request, 'principal', None)
        if principal is None:
            message = getattr(request, 'auth_error', None) or 'Authentification requise'
            return JsonResponse({'error': message}, status=401)
        if principal.banned:
            return JsonResponse({'error': 'Votre compte a été suspendu'}, status=403)
        return view_func(request, *args, **kwargs)
    return _wrapped_view


def role_required(*roles):
    def decorator(view_func):
        @wraps(view_func)
        @api_login_required
        def _wrapped_view(request, *args, **kwargs):
            if request.principal.role not in roles:
                return JsonResponse({'error': 'Accès non autorisé pour ce rôle'}, status=403)
            return view_func(request, *args, **kwargs)
        return _wrapped_view
    return decorator


customer_only = role_required(Profile.CUSTOMER)
vendor_only = role_required(Profile.VENDOR)
admin_only = role_required(Profile.ADMIN)
