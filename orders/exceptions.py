"""
Erreurs métier des commandes d'expédition
"""


class InvalidTransition(Exception):
    """Changement de statut d'expédition non autorisé"""


class SettlementNotAllowed(Exception):
    """La livraison ne peut pas encore être confirmée par le client"""
