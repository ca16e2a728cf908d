from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    path('cart/', views.cart, name='cart'),
    path('cart/<int:item_id>/', views.cart_item, name='cart-item'),
    path('cart/all/', views.admin_cart_items, name='admin-cart-items'),

    path('shipping/', views.shipping_orders, name='shipping-orders'),
    path('shipping/<int:order_id>/status/', views.update_shipping_status, name='update-shipping-status'),
    path('verify-delivery/', views.verify_delivery, name='verify-delivery'),

    path('reports/vendor/sales/', views.vendor_sales_report, name='vendor-sales-report'),
    path('reports/customer/purchases/', views.customer_purchase_report, name='customer-purchase-report'),
]
