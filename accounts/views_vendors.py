"""
Vendeurs : profil public, abonnements, pièces justificatives et
réinitialisation des mots de passe par un administrateur
"""
import logging

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db.models import Count, Sum
from django.http import JsonResponse, FileResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.crypto import get_random_string
from django.views.decorators.http import require_http_methods, require_GET

from orders.models import ShippingOrder

from .decorators import api_login_required, admin_only, vendor_only
from .forms import VerificationDocumentForm
from .models import Follow, Profile
from .utils import load_json, error_message

logger = logging.getLogger(__name__)

TEMPORARY_PASSWORD_LENGTH = 12


def _serialize_follow(follow):
    return {
        'id': follow.id,
        'follower_id': follow.follower_id,
        'follower_username': follow.follower.username,
        'vendor_id': follow.vendor_id,
        'vendor_username': follow.vendor.username,
        'created_at': follow.created_at.isoformat(),
    }


def _get_vendor(vendor_id):
    return get_object_or_404(
        User.objects.select_related('profile'), pk=vendor_id, profile__role=Profile.VENDOR)


# ---------------------------------------------------------------------------
# Profil public
# ---------------------------------------------------------------------------

@require_GET
def vendor_profile(request, vendor_id):
    vendor = _get_vendor(vendor_id)
    # Les expéditions annulées ne comptent ni dans les ventes ni dans le chiffre d'affaires
    sales = ShippingOrder.objects.filter(vendor=vendor).exclude(
        shipping_status=ShippingOrder.CANCELLED).aggregate(
            total_purchases=Count('id'), total_revenue=Sum('total_amount'))
    return JsonResponse({
        'id': vendor.id,
        'username': vendor.username,
        'email': vendor.email,
        'location': vendor.profile.location,
        'verified': vendor.profile.verified,
        'total_purchases': sales['total_purchases'],
        'total_revenue': sales['total_revenue'] or 0.0,
        'follower_count': vendor.followers.count(),
        'created_at': vendor.profile.date.isoformat() if vendor.profile.date else None,
    })


# ---------------------------------------------------------------------------
# Abonnements
# ---------------------------------------------------------------------------

@require_http_methods(["GET", "POST"])
@api_login_required
def follows_root(request):
    if request.method == 'GET':
        follows = Follow.objects.filter(follower=request.user).select_related('follower', 'vendor')
        return JsonResponse({'follows': [_serialize_follow(f) for f in follows]})

    try:
        data = load_json(request)
        vendor_id = int(data.get('vendor_id'))
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)
    except (TypeError, ValueError):
        return JsonResponse({'error': 'Le champ vendor_id est requis'}, status=400)

    vendor = get_object_or_404(User.objects.select_related('profile'), pk=vendor_id)
    if vendor.profile.role != Profile.VENDOR:
        return JsonResponse({'error': "Cet utilisateur n'est pas un vendeur"}, status=400)
    if vendor.id == request.user.id:
        return JsonResponse({'error': 'Vous ne pouvez pas vous suivre vous-même'}, status=400)

    follow, created = Follow.objects.get_or_create(follower=request.user, vendor=vendor)
    if not created:
        return JsonResponse({'error': 'Vous suivez déjà ce vendeur'}, status=409)
    logger.info(f"{request.user.username} suit désormais {vendor.username}")
    return JsonResponse({'follow': _serialize_follow(follow)}, status=201)


@require_http_methods(["GET", "DELETE"])
@api_login_required
def follow_detail(request, vendor_id):
    follows = Follow.objects.filter(follower=request.user, vendor_id=vendor_id)
    if request.method == 'GET':
        return JsonResponse({'vendor_id': vendor_id, 'is_following': follows.exists()})

    deleted, _ = follows.delete()
    if not deleted:
        return JsonResponse({'error': 'Vous ne suivez pas ce vendeur'}, status=404)
    logger.info(f"{request.user.username} ne suit plus le vendeur {vendor_id}")
    return JsonResponse({'success': True})


@require_GET
@api_login_required
def vendor_followers(request, vendor_id):
    vendor = _get_vendor(vendor_id)
    follows = vendor.followers.select_related('follower', 'vendor')
    return JsonResponse({
        'vendor_id': vendor.id,
        'follower_count': follows.count(),
        'followers': [_serialize_follow(f) for f in follows],
    })


# ---------------------------------------------------------------------------
# Pièces justificatives des vendeurs
# ---------------------------------------------------------------------------

def _document_response(profile):
    if not profile.verification_document:
        return JsonResponse({'error': 'Aucune pièce justificative déposée'}, status=404)
    return FileResponse(profile.verification_document.open('rb'), as_attachment=True)


@require_http_methods(["GET", "POST"])
@vendor_only
def verification_document(request):
    profile = request.user.profile
    if request.method == 'GET':
        return _document_response(profile)

    previous = profile.verification_document.name if profile.verification_document else None
    form = VerificationDocumentForm(request.POST, request.FILES, instance=profile)
    if not form.is_valid():
        return JsonResponse({
            'error': 'Données invalides',
            'fields': {field: [str(e) for e in errors] for field, errors in form.errors.items()},
        }, status=400)

    profile = form.save(commit=False)
    profile.verification_submitted_at = timezone.now()
    profile.save(update_fields=['verification_document', 'verification_submitted_at', 'date_update'])
    if previous and previous != profile.verification_document.name:
        profile.verification_document.storage.delete(previous)

    logger.info(f"Pièce justificative déposée par le vendeur {request.user.username}")
    return JsonResponse({
        'success': True,
        'verification_submitted_at': profile.verification_submitted_at.isoformat(),
    }, status=201)


@require_GET
@admin_only
def admin_verification_document(request, user_id):
    target = get_object_or_404(User.objects.select_related('profile'), pk=user_id)
    return _document_response(target.profile)


# ---------------------------------------------------------------------------
# Réinitialisation du mot de passe (administrateurs)
# ---------------------------------------------------------------------------

@require_http_methods(["PATCH"])
@admin_only
def admin_reset_password(request, user_id):
    if int(user_id) == request.user.id:
        return JsonResponse({'error': 'Vous ne pouvez pas réinitialiser votre propre mot de passe'}, status=400)
    target = get_object_or_404(User, pk=user_id)

    # Le mot de passe temporaire est transmis à l'administrateur, jamais journalisé
    temporary_password = get_random_string(TEMPORARY_PASSWORD_LENGTH)
    target.set_password(temporary_password)
    target.save(update_fields=['password'])

    logger.warning(f"Mot de passe de {target.username} réinitialisé par {request.user.username}")
    return JsonResponse({
        'success': True,
        'message': f'Mot de passe de {target.username} réinitialisé',
        'temporary_password': temporary_password,
    })
