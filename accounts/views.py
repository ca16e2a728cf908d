"""
Vues JSON des comptes : inscription, connexion, profil, modération admin et signalements
"""
import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db import transaction
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_GET, require_POST

from .decorators import api_login_required, admin_only, customer_only, vendor_only
from .forms import SignupForm, LoginForm, ProfileForm, VendorReportForm, ReportStatusForm
from .models import Profile, VendorReport
from .tokens import make_token
from .utils import load_json, parse_bool, error_message, normalize_mpesa_number

logger = logging.getLogger(__name__)


def serialize_user(user):
    profile = user.profile
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'role': Profile.ADMIN if profile.is_admin else profile.role,
        'mpesa_number': profile.mpesa_number,
        'location': profile.location,
        'address': profile.address,
        'verified': profile.verified,
        'banned': profile.banned,
        'verification_submitted_at': (
            profile.verification_submitted_at.isoformat() if profile.verification_submitted_at else None),
        'wallet_balance': profile.wallet_balance,
        'created_at': profile.date.isoformat() if profile.date else None,
    }


def _form_errors(form):
    return JsonResponse({
        'error': 'Données invalides',
        'fields': {field: [str(e) for e in errors] for field, errors in form.errors.items()},
    }, status=400)


def _serialize_report(report):
    return {
        'id': report.id,
        'customer_id': report.customer_id,
        'customer_username': report.customer.username,
        'vendor_id': report.vendor_id,
        'vendor_username': report.vendor.username,
        'product_id': report.product_id,
        'report_type': report.report_type,
        'description': report.description,
        'status': report.status,
        'admin_notes': report.admin_notes,
        'created_at': report.created_at.isoformat(),
        'updated_at': report.updated_at.isoformat(),
    }


# ---------------------------------------------------------------------------
# Authentification
# ---------------------------------------------------------------------------

@csrf_exempt
@require_POST
def signup(request):
    try:
        data = load_json(request)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)

    form = SignupForm(data)
    if not form.is_valid():
        return _form_errors(form)

    cd = form.cleaned_data
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=cd['username'], email=cd['email'], password=cd['password'])
            # Le profil est créé par le signal post_save
            profile = user.profile
            profile.role = cd['role']
            profile.mpesa_number = normalize_mpesa_number(cd['mpesa_number'])
            profile.location = cd.get('location') or None
            profile.save()
    except Exception as e:
        logger.exception(f"Erreur lors de l'inscription de {cd['username']}: {str(e)}")
        return JsonResponse({'error': "Erreur lors de la création du compte"}, status=500)

    logger.info(f"Nouvel utilisateur {user.username} ({profile.role})")
    return JsonResponse({'token': make_token(user), 'user': serialize_user(user)}, status=201)


@csrf_exempt
@require_POST
def login(request):
    try:
        data = load_json(request)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)

    form = LoginForm(data)
    if not form.is_valid():
        return _form_errors(form)

    identifier = form.cleaned_data['username']
    password = form.cleaned_data['password']
    # Connexion possible avec le nom d'utilisateur ou l'email
    if '@' in identifier:
        match = User.objects.filter(email__iexact=identifier).first()
        if match:
            identifier = match.username

    user = authenticate(request, username=identifier, password=password)
    if user is None:
        return JsonResponse({'error': 'Identifiants invalides'}, status=401)

    profile, _ = Profile.objects.get_or_create(user=user)
    if profile.banned:
        logger.warning(f"Tentative de connexion d'un compte banni: {user.username}")
        return JsonResponse({'error': 'Votre compte a été suspendu'}, status=403)

    return JsonResponse({'token': make_token(user), 'user': serialize_user(user)})


@require_http_methods(["GET", "PATCH"])
@api_login_required
def profile(request):
    user = request.user
    if request.method == 'GET':
        return JsonResponse({'user': serialize_user(user)})

    try:
        data = load_json(request)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)

    instance = user.profile
    # PATCH : les champs absents gardent leur valeur actuelle
    merged = {
        'email': user.email,
        'mpesa_number': instance.mpesa_number,
        'location': instance.location,
        'address': instance.address,
    }
    merged.update({key: value for key, value in data.items() if key in merged})

    form = ProfileForm(merged, instance=instance)
    if not form.is_valid():
        return _form_errors(form)

    with transaction.atomic():
        updated = form.save(commit=False)
        if updated.mpesa_number:
            updated.mpesa_number = normalize_mpesa_number(updated.mpesa_number)
        updated.save()
        email = form.cleaned_data.get('email')
        if email and email != user.email:
            user.email = email
            user.save(update_fields=['email'])

    return JsonResponse({'user': serialize_user(user)})


# ---------------------------------------------------------------------------
# Modération (administrateurs)
# ---------------------------------------------------------------------------

@require_GET
@admin_only
def admin_list_users(request):
    users = User.objects.select_related('profile').order_by('-date_joined')
    role = request.GET.get('role')
    if role:
        parsed = Profile.parse_role(role)
        if parsed is None:
            return JsonResponse({'error': 'Rôle invalide'}, status=400)
        users = users.filter(profile__role=parsed)
    return JsonResponse({'users': [serialize_user(u) for u in users]})


@require_GET
@admin_only
def admin_pending_vendors(request):
    users = User.objects.select_related('profile').filter(
        profile__role=Profile.VENDOR, profile__verified=False).order_by('date_joined')
    return JsonResponse({'users': [serialize_user(u) for u in users]})


def _admin_update_profile(request, user_id, apply):
    """Charge le profil ciblé, applique ``apply(profile, data)`` puis sauvegarde"""
    target = get_object_or_404(User.objects.select_related('profile'), pk=user_id)
    try:
        data = load_json(request)
        apply(target.profile, data)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)
    target.profile.save()
    logger.info(f"Profil {target.username} modifié par l'administrateur {request.user.username}")
    return JsonResponse({'user': serialize_user(target)})


@require_http_methods(["PATCH"])
@admin_only
def admin_update_role(request, user_id):
    def apply(profile, data):
        role = Profile.parse_role(data.get('role'))
        if role is None:
            raise ValidationError('Rôle invalide : Customer, Vendor ou Admin')
        profile.role = role
    return _admin_update_profile(request, user_id, apply)


@require_http_methods(["PATCH"])
@admin_only
def admin_verify_user(request, user_id):
    def apply(profile, data):
        profile.verified = parse_bool(data.get('verified'), 'verified', default=True)
    return _admin_update_profile(request, user_id, apply)


@require_http_methods(["PATCH"])
@admin_only
def admin_ban_user(request, user_id):
    if int(user_id) == request.user.id:
        return JsonResponse({'error': 'Vous ne pouvez pas vous bannir vous-même'}, status=400)

    def apply(profile, data):
        profile.banned = parse_bool(data.get('banned'), 'banned', default=True)
    return _admin_update_profile(request, user_id, apply)


@require_http_methods(["DELETE"])
@admin_only
def admin_delete_user(request, user_id):
    if int(user_id) == request.user.id:
        return JsonResponse({'error': 'Vous ne pouvez pas supprimer votre propre compte'}, status=400)
    target = get_object_or_404(User, pk=user_id)
    username = target.username
    target.delete()
    logger.info(f"Utilisateur {username} supprimé par {request.user.username}")
    return JsonResponse({'success': True, 'message': f'Utilisateur {username} supprimé'})


# ---------------------------------------------------------------------------
# Signalements de vendeurs
# ---------------------------------------------------------------------------

@require_POST
@customer_only
def create_vendor_report(request):
    try:
        data = load_json(request)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)

    form = VendorReportForm({
        'vendor': data.get('vendor_id'),
        'product': data.get('product_id'),
        'report_type': data.get('report_type'),
        'description': data.get('description'),
    })
    if not form.is_valid():
        return _form_errors(form)

    report = form.save(commit=False)
    report.customer = request.user
    report.save()
    logger.warning(f"Vendeur {report.vendor_id} signalé par {request.user.username} ({report.report_type})")
    return JsonResponse({'report': _serialize_report(report)}, status=201)


@require_GET
@vendor_only
def vendor_report_count(request):
    reports = VendorReport.objects.filter(vendor=request.user)
    return JsonResponse({
        'total': reports.count(),
        'pending': reports.filter(status=VendorReport.PENDING).count(),
    })


@require_GET
@admin_only
def admin_list_reports(request):
    reports = VendorReport.objects.select_related('customer', 'vendor')
    status = request.GET.get('status')
    if status:
        reports = reports.filter(status=status)
    return JsonResponse({'reports': [_serialize_report(r) for r in reports]})


@require_http_methods(["PATCH"])
@admin_only
def admin_update_report(request, report_id):
    report = get_object_or_404(VendorReport.objects.select_related('customer', 'vendor'), pk=report_id)
    try:
        data = load_json(request)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)

    form = ReportStatusForm({
        'status': data.get('status', report.status),
        'admin_notes': data.get('admin_notes', report.admin_notes),
    }, instance=report)
    if not form.is_valid():
        return _form_errors(form)
    report = form.save()
    return JsonResponse({'report': _serialize_report(report)})
