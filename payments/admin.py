from django.contrib import admin
from .models import PaymentTransaction, MpesaCallbackLog, WalletWithdrawal


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):
    list_display = (
        'checkout_request_id', 'user', 'phone_number', 'amount', 'paid_amount',
        'status', 'mpesa_receipt_number', 'created_at'
    )
    list_filter = ('status', 'created_at')
    search_fields = ('checkout_request_id', 'merchant_request_id', 'mpesa_receipt_number',
                     'phone_number', 'user__username')
    readonly_fields = ('checkout_request_id', 'merchant_request_id', 'created_at', 'updated_at')
    list_per_page = 20

    fieldsets = (
        ('Identifiants M-Pesa', {
            'fields': ('checkout_request_id', 'merchant_request_id', 'mpesa_receipt_number')
        }),
        ('Paiement', {
            'fields': ('user', 'phone_number', 'amount', 'paid_amount', 'status',
                       'transaction_date', 'result_desc')
        }),
        ('Panier', {
            'fields': ('cart_item_ids', 'shipping_address')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at')
        }),
    )


@admin.register(MpesaCallbackLog)
class MpesaCallbackLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'checkout_request_id', 'result_code', 'outcome', 'processed', 'created_at')
    list_filter = ('processed', 'outcome', 'created_at')
    search_fields = ('checkout_request_id',)
    readonly_fields = ('transaction', 'checkout_request_id', 'payload', 'result_code',
                       'outcome', 'processed', 'error_message', 'created_at')
    list_per_page = 20


@admin.register(WalletWithdrawal)
class WalletWithdrawalAdmin(admin.ModelAdmin):
    list_display = ('id', 'reference', 'vendor', 'amount', 'mpesa_number', 'status', 'created_at')
    list_filter = ('status', )
    list_editable = ('status',)
    list_display_links = ('id', 'reference')
    search_fields = ('reference', 'vendor__username', 'mpesa_number')
    readonly_fields = ('reference', 'balance_after', 'created_at')
    list_per_page = 10
