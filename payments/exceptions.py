"""
Erreurs du module de paiement
"""


class PaymentGatewayError(Exception):
    """La passerelle M-Pesa a refusé ou n'a pas pu traiter la demande (réessayable)"""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}
