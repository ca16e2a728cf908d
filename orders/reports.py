"""
Rapports de ventes (vendeur) et d'achats (client)
"""
from django.db.models import Count, Sum

from .models import ShippingOrder


class ReportService:

    @staticmethod
    def vendor_sales(vendor) -> dict:
        """Ventes du vendeur, hors commandes annulées"""
        orders = ShippingOrder.objects.filter(vendor=vendor).exclude(shipping_status=ShippingOrder.CANCELLED)
        totals = orders.aggregate(total_sales=Sum('total_amount'), total_orders=Count('id'))
        total_sales = totals['total_sales'] or 0.0

        by_product = (
            orders.values('product_id', 'product_name')
            .annotate(quantity_sold=Sum('quantity'), revenue=Sum('total_amount'), orders=Count('id'))
            .order_by('-revenue')
        )
        released = orders.filter(payment_released=True).aggregate(total=Sum('total_amount'))['total'] or 0.0

        return {
            'total_sales': total_sales,
            'total_orders': totals['total_orders'],
            # Pas de coût d'achat enregistré : le profit correspond aux ventes
            'total_profit': total_sales,
            'released_amount': released,
            'pending_amount': total_sales - released,
            'sales_by_product': [
                {
                    'product_id': row['product_id'],
                    'product_name': row['product_name'],
                    'quantity_sold': row['quantity_sold'],
                    'revenue': row['revenue'],
                    'orders': row['orders'],
                }
                for row in by_product
            ],
        }

    @staticmethod
    def customer_purchases(customer) -> dict:
        orders = ShippingOrder.objects.filter(customer=customer).exclude(shipping_status=ShippingOrder.CANCELLED)
        totals = orders.aggregate(total_spent=Sum('total_amount'), total_orders=Count('id'))

        by_category = (
            orders.values('product_category')
            .annotate(amount=Sum('total_amount'), orders=Count('id'))
            .order_by('-amount')
        )
        by_vendor = (
            orders.values('vendor_id', 'vendor__username')
            .annotate(amount=Sum('total_amount'), orders=Count('id'))
            .order_by('-amount')
        )

        return {
            'total_spent': totals['total_spent'] or 0.0,
            'total_orders': totals['total_orders'],
            'purchases_by_category': [
                {'category': row['product_category'], 'amount': row['amount'], 'orders': row['orders']}
                for row in by_category
            ],
            'purchases_by_vendor': [
                {
                    'vendor_id': row['vendor_id'],
                    'vendor_username': row['vendor__username'],
                    'amount': row['amount'],
                    'orders': row['orders'],
                }
                for row in by_vendor
            ],
        }
