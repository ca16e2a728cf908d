from django.apps import AppConfig, apps


class PaymentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'payments'
    verbose_name = 'Paiements'

    def ready(self):
        """Construire le client M-Pesa une seule fois, partagé par toutes les requêtes"""
        from .services.mpesa import MpesaService
        self.mpesa_service = MpesaService()


def get_mpesa_service():
    return apps.get_app_config('payments').mpesa_service
