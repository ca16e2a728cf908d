"""
Vues du panier, des expéditions et des rapports
"""
import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404, JsonResponse
from django.views.decorators.http import require_http_methods, require_GET, require_POST

from accounts.decorators import api_login_required, customer_only, vendor_only, admin_only
from accounts.models import Profile
from accounts.utils import load_json, parse_bool, error_message
from payments.escrow import EscrowService
from .exceptions import InvalidTransition, SettlementNotAllowed
from .fulfillment import FulfillmentService
from .models import CartItem, ShippingOrder
from .reports import ReportService
from .services import CartService

logger = logging.getLogger(__name__)


def _serialize_cart_item(line):
    product = line.product
    return {
        'id': line.id,
        'user_id': line.user_id,
        'product_id': product.id,
        'product_name': product.name,
        'price': product.price,
        'category': product.category,
        'vendor_id': product.vendor_id,
        'vendor_username': product.vendor.username,
        'quantity': line.quantity,
        'line_total': line.line_total,
        'created_at': line.created_at.isoformat(),
    }


def _serialize_shipping_order(order):
    return {
        'id': order.id,
        'customer_id': order.customer_id,
        'customer_username': order.customer.username,
        'vendor_id': order.vendor_id,
        'vendor_username': order.vendor.username,
        'product_id': order.product_id,
        'product_name': order.product_name,
        'quantity': order.quantity,
        'total_amount': order.total_amount,
        'shipping_status': order.shipping_status,
        'tracking_number': order.tracking_number,
        'shipping_address': order.shipping_address,
        'customer_verified': order.customer_verified,
        'payment_released': order.payment_released,
        'verification_requested_at': (
            order.verification_requested_at.isoformat() if order.verification_requested_at else None),
        'verified_at': order.verified_at.isoformat() if order.verified_at else None,
        'created_at': order.created_at.isoformat(),
        'updated_at': order.updated_at.isoformat(),
    }


# ---------------------------------------------------------------------------
# Panier
# ---------------------------------------------------------------------------

@require_http_methods(["GET", "POST"])
@customer_only
def cart(request):
    if request.method == 'GET':
        lines = list(CartService.get_lines(request.user))
        return JsonResponse({
            'items': [_serialize_cart_item(line) for line in lines],
            'total': sum(line.line_total for line in lines),
        })

    try:
        data = load_json(request)
        line = CartService.add_item(request.user, data.get('product_id'), data.get('quantity', 1))
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)
    except Http404 as e:
        return JsonResponse({'error': str(e)}, status=404)
    return JsonResponse({'item': _serialize_cart_item(line)}, status=201)


@require_http_methods(["PATCH", "DELETE"])
@customer_only
def cart_item(request, item_id):
    try:
        if request.method == 'DELETE':
            CartService.remove_item(request.user, item_id)
            return JsonResponse({'success': True})
        data = load_json(request)
        line = CartService.update_quantity(request.user, item_id, data.get('quantity'))
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)
    except Http404 as e:
        return JsonResponse({'error': str(e)}, status=404)
    return JsonResponse({'item': _serialize_cart_item(line)})


@require_GET
@admin_only
def admin_cart_items(request):
    lines = CartItem.objects.select_related('product', 'product__vendor', 'user').order_by('user_id', 'id')
    return JsonResponse({'items': [_serialize_cart_item(line) for line in lines]})


# ---------------------------------------------------------------------------
# Expéditions
# ---------------------------------------------------------------------------

@require_GET
@api_login_required
def shipping_orders(request):
    """Commandes du client, ou ventes du vendeur"""
    orders = ShippingOrder.objects.select_related('customer', 'vendor')
    if request.principal.role == Profile.VENDOR:
        orders = orders.filter(vendor=request.user)
    elif request.principal.role == Profile.CUSTOMER:
        orders = orders.filter(customer=request.user)
    status = request.GET.get('status')
    if status:
        orders = orders.filter(shipping_status=status)
    return JsonResponse({'orders': [_serialize_shipping_order(o) for o in orders]})


@require_http_methods(["PATCH", "POST"])
@vendor_only
def update_shipping_status(request, order_id):
    try:
        data = load_json(request)
        tracking_number = data.get('tracking_number')
        if tracking_number is not None and not isinstance(tracking_number, str):
            raise ValidationError('tracking_number doit être une chaîne')
        order = FulfillmentService.update_shipping_status(
            order_id, request.user, data.get('shipping_status'), tracking_number)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)
    except InvalidTransition as e:
        return JsonResponse({'error': str(e)}, status=400)
    except PermissionDenied as e:
        return JsonResponse({'error': str(e)}, status=403)
    except Http404 as e:
        return JsonResponse({'error': str(e)}, status=404)
    except Exception as e:
        logger.exception(f"Erreur dans update_shipping_status: {str(e)}")
        return JsonResponse({'error': 'Erreur interne, veuillez réessayer'}, status=500)

    order = ShippingOrder.objects.select_related('customer', 'vendor').get(pk=order.pk)
    return JsonResponse({'order': _serialize_shipping_order(order)})


@require_POST
@customer_only
def verify_delivery(request):
    """
    Confirmation de réception par le client (libération du séquestre)
    """
    try:
        data = load_json(request)
        order_id = data.get('order_id')
        if isinstance(order_id, bool) or not isinstance(order_id, int):
            raise ValidationError('order_id doit être un entier')
        verified = parse_bool(data.get('verified'), 'verified')
        result = EscrowService.settle_delivery(order_id, request.user, verified)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)
    except SettlementNotAllowed as e:
        return JsonResponse({'error': str(e)}, status=409)
    except PermissionDenied as e:
        return JsonResponse({'error': str(e)}, status=403)
    except Http404 as e:
        return JsonResponse({'error': str(e)}, status=404)
    except Exception as e:
        logger.exception(f"Erreur dans verify_delivery: {str(e)}")
        return JsonResponse({'error': 'Erreur interne, veuillez réessayer'}, status=500)

    return JsonResponse(result)


# ---------------------------------------------------------------------------
# Rapports
# ---------------------------------------------------------------------------

@require_GET
@vendor_only
def vendor_sales_report(request):
    return JsonResponse(ReportService.vendor_sales(request.user))


@require_GET
@customer_only
def customer_purchase_report(request):
    return JsonResponse(ReportService.customer_purchases(request.user))
