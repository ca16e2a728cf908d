"""
Fonctions utilitaires partagées par les applications
"""
import json
import re
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError

# Formats kényans acceptés par M-Pesa
MPESA_NUMBER_PATTERNS = (
    re.compile(r'^07\d{8}$'),
    re.compile(r'^254\d{9}$'),
    re.compile(r'^\+254\d{9}$'),
)


def is_valid_mpesa_number(phone) -> bool:
    """Vérifie un numéro au format 07XXXXXXXX, 254XXXXXXXXX ou +254XXXXXXXXX"""
    if not isinstance(phone, str):
        return False
    return any(pattern.fullmatch(phone) for pattern in MPESA_NUMBER_PATTERNS)


def normalize_mpesa_number(phone: str) -> str:
    """
    Convertit un numéro valide au format international sans '+' (254XXXXXXXXX)

    Raises:
        ValidationError: si le numéro n'est pas dans un format accepté
    """
    if not is_valid_mpesa_number(phone):
        raise ValidationError(
            'Numéro M-Pesa invalide. Formats acceptés : 07XXXXXXXX, 254XXXXXXXXX ou +254XXXXXXXXX')
    if phone.startswith('+'):
        return phone[1:]
    if phone.startswith('0'):
        return f"254{phone[1:]}"
    return phone


def parse_amount(value, minimum=None, maximum=None) -> Decimal:
    """
    Lit un montant reçu en JSON (nombre ou chaîne)

    Raises:
        ValidationError: montant absent, non numérique ou hors des bornes
    """
    if value is None or isinstance(value, bool):
        raise ValidationError('Montant manquant ou invalide')
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError('Montant manquant ou invalide')
    if not amount.is_finite():
        raise ValidationError('Montant manquant ou invalide')
    if minimum is not None and amount < Decimal(str(minimum)):
        raise ValidationError(f'Le montant minimum est de {minimum} KSh')
    if maximum is not None and amount > Decimal(str(maximum)):
        raise ValidationError(f'Le montant maximum est de {maximum} KSh')
    return amount


def parse_bool(value, field_name, default=None) -> bool:
    """Booléen JSON strict ; None retourne la valeur par défaut si elle existe"""
    if value is None and default is not None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f'Le champ {field_name} doit être un booléen')
    return value


def load_json(request) -> dict:
    """
    Lit le corps JSON d'une requête (ou request.POST pour un formulaire classique)

    Raises:
        ValidationError: corps JSON invalide ou qui n'est pas un objet
    """
    if request.content_type != 'application/json':
        return request.POST.dict()
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError('Corps JSON invalide')
    if not isinstance(data, dict):
        raise ValidationError('Le corps de la requête doit être un objet JSON')
    return data


def error_message(exc: ValidationError) -> str:
    """Premier message lisible d'une ValidationError"""
    return exc.messages[0] if exc.messages else 'Requête invalide'
