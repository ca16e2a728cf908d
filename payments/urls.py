"""
URLs pour les paiements M-Pesa
"""
from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    path('checkout/', views.checkout, name='checkout'),
    path('mpesa/callback/', views.mpesa_callback, name='mpesa-callback'),
    path('transactions/', views.transaction_list, name='transactions'),
    path('transactions/<str:checkout_request_id>/', views.transaction_detail, name='transaction-detail'),
    path('wallet/', views.wallet, name='wallet'),
    path('wallet/withdraw/', views.withdraw, name='wallet-withdraw'),
]
