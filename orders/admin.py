from django.contrib import admin
from .models import CartItem, ShippingOrder


class CartItemAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'product', 'quantity', 'created_at')
    list_display_links = ('id', 'user')
    search_fields = ('user__username', 'product__name')
    list_per_page = 20

admin.site.register(CartItem, CartItemAdmin)


class ShippingOrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'product_name', 'customer', 'vendor', 'quantity', 'total_amount',
                    'shipping_status', 'customer_verified', 'payment_released', 'created_at')
    list_filter = ('shipping_status', 'customer_verified', 'payment_released', 'created_at')
    list_display_links = ('id', 'product_name')
    search_fields = ('id', 'product_name', 'customer__username', 'vendor__username', 'tracking_number')
    readonly_fields = ('total_amount', 'payment_released', 'verification_requested_at',
                       'verified_at', 'created_at', 'updated_at')
    list_per_page = 20

    fieldsets = (
        ('Commande', {
            'fields': ('customer', 'vendor', 'product', 'product_name', 'product_category',
                       'quantity', 'total_amount', 'payment_transaction')
        }),
        ('Livraison', {
            'fields': ('shipping_status', 'tracking_number', 'shipping_address')
        }),
        ('Séquestre', {
            'fields': ('verification_requested_at', 'customer_verified', 'payment_released', 'verified_at')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at')
        }),
    )

admin.site.register(ShippingOrder, ShippingOrderAdmin)
