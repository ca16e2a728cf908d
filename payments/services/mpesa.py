"""
Service d'intégration M-Pesa (API Daraja de Safaricom)
Gère l'authentification OAuth, le mot de passe STK et l'analyse des callbacks
"""
import base64
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional, Tuple

import requests
from django.conf import settings

from accounts.utils import normalize_mpesa_number

logger = logging.getLogger(__name__)

# Codes résultat du callback STK
RESULT_SUCCESS = 0
RESULT_CANCELLED_BY_USER = 1032


class MpesaService:
    """
    Client de l'API M-Pesa Daraja
    Documentation: https://developer.safaricom.co.ke/
    """

    BASE_URL_SANDBOX = "https://sandbox.safaricom.co.ke"
    BASE_URL_PRODUCTION = "https://api.safaricom.co.ke"

    TOKEN_ENDPOINT = "/oauth/v1/generate?grant_type=client_credentials"
    STK_PUSH_ENDPOINT = "/mpesa/stkpush/v1/processrequest"

    def __init__(self, consumer_key=None, consumer_secret=None, shortcode=None, passkey=None,
                 callback_url=None, environment=None, timeout=None):
        """Initialise le client avec les credentials (settings par défaut)"""
        self.consumer_key = consumer_key if consumer_key is not None else getattr(settings, 'MPESA_CONSUMER_KEY', '')
        self.consumer_secret = (
            consumer_secret if consumer_secret is not None else getattr(settings, 'MPESA_CONSUMER_SECRET', ''))
        self.shortcode = shortcode or getattr(settings, 'MPESA_SHORTCODE', '174379')
        self.passkey = passkey or getattr(settings, 'MPESA_PASSKEY', '')
        self.callback_url = callback_url or getattr(settings, 'MPESA_CALLBACK_URL', '')
        self.environment = environment or getattr(settings, 'MPESA_ENVIRONMENT', 'sandbox')  # 'sandbox' ou 'production'
        self.timeout = timeout or getattr(settings, 'MPESA_TIMEOUT', 30)

        if self.environment == 'production':
            self.base_url = self.BASE_URL_PRODUCTION
        else:
            self.base_url = self.BASE_URL_SANDBOX

        if not self.is_configured:
            logger.warning("M-Pesa credentials not configured: checkout will use demo mode")

    @property
    def is_configured(self) -> bool:
        return bool(self.consumer_key and self.consumer_secret)

    @staticmethod
    def _timestamp() -> str:
        return datetime.now().strftime('%Y%m%d%H%M%S')

    def _generate_password(self, timestamp: str) -> str:
        """
        Mot de passe STK : base64(shortcode + passkey + timestamp)
        """
        raw = f"{self.shortcode}{self.passkey}{timestamp}"
        return base64.b64encode(raw.encode('utf-8')).decode('ascii')

    def _get_access_token(self) -> Tuple[bool, Dict]:
        """
        Obtient un jeton OAuth (authentification Basic consumer_key:consumer_secret)

        Returns:
            Tuple (success, response_data) avec access_token en cas de succès
        """
        url = f"{self.base_url}{self.TOKEN_ENDPOINT}"
        try:
            response = requests.get(url, auth=(self.consumer_key, self.consumer_secret), timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"M-Pesa OAuth - Error: {str(e)}")
            return False, {'error': str(e), 'status_code': getattr(e.response, 'status_code', None)}
        except ValueError as e:
            logger.error(f"M-Pesa OAuth response JSON decode error: {str(e)}")
            return False, {'error': 'Invalid JSON response'}

        token = data.get('access_token')
        if not token:
            logger.error("M-Pesa OAuth - access_token absent de la réponse")
            return False, {'error': 'Missing access token'}
        return True, {'access_token': token}

    def stk_push(self, phone_number: str, amount, account_reference: str, description: str) -> Tuple[bool, Dict]:
        """
        Lance un paiement STK push (Lipa na M-Pesa Online)

        Args:
            phone_number: Téléphone du client (07..., 254... ou +254...)
            amount: Montant en KSh (arrondi au shilling)
            account_reference: Référence affichée au client
            description: Description de la transaction

        Returns:
            Tuple (success, response_data) avec checkout_request_id et merchant_request_id
        """
        party = normalize_mpesa_number(phone_number)
        whole_amount = int(Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

        success, auth = self._get_access_token()
        if not success:
            return False, auth

        timestamp = self._timestamp()
        data = {
            'BusinessShortCode': self.shortcode,
            'Password': self._generate_password(timestamp),
            'Timestamp': timestamp,
            'TransactionType': 'CustomerPayBillOnline',
            'Amount': whole_amount,
            'PartyA': party,
            'PartyB': self.shortcode,
            'PhoneNumber': party,
            'CallBackURL': self.callback_url,
            'AccountReference': account_reference[:12],
            'TransactionDesc': description[:13],
        }
        headers = {
            'Authorization': f"Bearer {auth['access_token']}",
            'Content-Type': 'application/json',
        }

        url = f"{self.base_url}{self.STK_PUSH_ENDPOINT}"
        try:
            response = requests.post(url, json=data, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            response_data = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"M-Pesa STK push - Error: {str(e)}")
            return False, {'error': str(e), 'status_code': getattr(e.response, 'status_code', None)}
        except ValueError as e:
            logger.error(f"M-Pesa STK push response JSON decode error: {str(e)}")
            return False, {'error': 'Invalid JSON response'}

        if str(response_data.get('ResponseCode')) != '0' or not response_data.get('CheckoutRequestID'):
            logger.error(f"M-Pesa STK push refusé: {response_data}")
            return False, {'error': response_data.get('errorMessage')
                           or response_data.get('ResponseDescription')
                           or 'STK push refusé'}

        logger.info(f"M-Pesa STK push accepté - {response_data.get('CheckoutRequestID')}")
        return True, {
            'merchant_request_id': response_data.get('MerchantRequestID'),
            'checkout_request_id': response_data['CheckoutRequestID'],
            'response_code': str(response_data.get('ResponseCode')),
            'response_description': response_data.get('ResponseDescription'),
            'customer_message': response_data.get('CustomerMessage'),
        }


def parse_stk_callback(payload) -> Optional[Dict]:
    """
    Lit l'enveloppe ``Body.stkCallback`` envoyée par M-Pesa

    Returns:
        Dictionnaire (checkout_request_id, merchant_request_id, result_code,
        result_desc, metadata) ou None si le payload n'a pas la forme attendue
    """
    if not isinstance(payload, dict):
        return None
    body = payload.get('Body')
    callback = body.get('stkCallback') if isinstance(body, dict) else None
    if not isinstance(callback, dict):
        return None

    checkout_request_id = callback.get('CheckoutRequestID')
    if not isinstance(checkout_request_id, str) or not checkout_request_id:
        return None
    try:
        result_code = int(callback.get('ResultCode'))
    except (TypeError, ValueError):
        return None

    return {
        'checkout_request_id': checkout_request_id,
        'merchant_request_id': callback.get('MerchantRequestID'),
        'result_code': result_code,
        'result_desc': callback.get('ResultDesc'),
        'metadata': callback.get('CallbackMetadata'),
    }


def extract_callback_data(metadata) -> Dict:
    """
    Extrait le reçu, la date et le montant des éléments ``CallbackMetadata.Item``.
    Un élément absent ou mal formé donne None.
    """
    data = {'mpesa_receipt_number': None, 'transaction_date': None, 'amount': None}
    items = metadata.get('Item') if isinstance(metadata, dict) else None
    if not isinstance(items, list):
        return data

    for item in items:
        if not isinstance(item, dict):
            continue
        name, value = item.get('Name'), item.get('Value')
        if value is None or isinstance(value, (dict, list, bool)):
            continue
        if name == 'MpesaReceiptNumber':
            data['mpesa_receipt_number'] = str(value)
        elif name == 'TransactionDate':
            # M-Pesa envoie la date sous forme de nombre (20240101120000)
            data['transaction_date'] = str(value)
        elif name == 'Amount':
            try:
                amount = Decimal(str(value))
            except ArithmeticError:
                continue
            data['amount'] = amount if amount.is_finite() else None
    return data
