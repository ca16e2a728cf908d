"""
Catalogue produits et avis clients
"""
import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods, require_GET, require_POST

from accounts.decorators import vendor_only, customer_only
from accounts.utils import load_json, error_message
from orders.models import ShippingOrder
from .forms import ProductForm, ReviewForm
from .models import Product, Review

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ('name', 'price', 'category', 'description', 'quantity')


def serialize_product(product):
    return {
        'id': product.id,
        'name': product.name,
        'price': product.price,
        'category': product.category,
        'description': product.description,
        'quantity': product.quantity,
        'vendor_id': product.vendor_id,
        'vendor_username': product.vendor.username,
        'created_at': product.created_at.isoformat(),
        'updated_at': product.updated_at.isoformat(),
    }


def _serialize_review(review):
    return {
        'id': review.id,
        'product_id': review.product_id,
        'customer_id': review.customer_id,
        'customer_username': review.customer.username,
        'vendor_id': review.vendor_id,
        'rating': review.rating,
        'comment': review.comment,
        'created_at': review.created_at.isoformat(),
    }


def _form_errors(form):
    return JsonResponse({
        'error': 'Données invalides',
        'fields': {field: [str(e) for e in errors] for field, errors in form.errors.items()},
    }, status=400)


@require_http_methods(["GET", "POST"])
def products_root(request):
    if request.method == 'POST':
        return create_product(request)

    products = Product.objects.select_related('vendor')
    vendor_id = request.GET.get('vendor_id')
    if vendor_id:
        if not vendor_id.isdigit():
            return JsonResponse({'error': 'vendor_id invalide'}, status=400)
        products = products.filter(vendor_id=int(vendor_id))
    category = request.GET.get('category')
    if category:
        products = products.filter(category__iexact=category)
    return JsonResponse({'products': [serialize_product(p) for p in products]})


@vendor_only
def create_product(request):
    if not request.principal.verified:
        return JsonResponse({'error': "Votre compte vendeur doit être vérifié par un administrateur"}, status=403)
    try:
        data = load_json(request)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)

    initial = {'quantity': 0}
    initial.update({key: value for key, value in data.items() if key in PRODUCT_FIELDS})
    form = ProductForm(initial)
    if not form.is_valid():
        return _form_errors(form)
    product = form.save(commit=False)
    product.vendor = request.user
    product.save()
    logger.info(f"Produit {product.id} créé par {request.user.username}")
    return JsonResponse({'product': serialize_product(product)}, status=201)


@require_http_methods(["GET", "PATCH", "DELETE"])
def product_detail(request, product_id):
    if request.method == 'GET':
        product = get_object_or_404(Product.objects.select_related('vendor'), pk=product_id)
        stats = product.reviews.aggregate(average=Avg('rating'), count=Count('id'))
        data = serialize_product(product)
        data['average_rating'] = stats['average']
        data['review_count'] = stats['count']
        return JsonResponse({'product': data})
    return _modify_product(request, product_id)


@vendor_only
def _modify_product(request, product_id):
    product = get_object_or_404(Product.objects.select_related('vendor'), pk=product_id)
    if product.vendor_id != request.user.id:
        return JsonResponse({'error': "Ce produit ne vous appartient pas"}, status=403)

    if request.method == 'DELETE':
        product.delete()
        logger.info(f"Produit {product_id} supprimé par {request.user.username}")
        return JsonResponse({'success': True})

    try:
        data = load_json(request)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)

    merged = {key: getattr(product, key) for key in PRODUCT_FIELDS}
    merged.update({key: value for key, value in data.items() if key in merged})
    form = ProductForm(merged, instance=product)
    if not form.is_valid():
        return _form_errors(form)
    product = form.save()
    return JsonResponse({'product': serialize_product(product)})


@require_POST
@customer_only
def create_review(request):
    try:
        data = load_json(request)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)

    form = ReviewForm({
        'product': data.get('product_id'),
        'rating': data.get('rating'),
        'comment': data.get('comment'),
    })
    if not form.is_valid():
        return _form_errors(form)

    product = form.cleaned_data['product']
    if not ShippingOrder.objects.filter(customer=request.user, product=product).exists():
        return JsonResponse({'error': "Vous ne pouvez noter qu'un produit que vous avez acheté"}, status=403)
    if Review.objects.filter(customer=request.user, product=product).exists():
        return JsonResponse({'error': 'Vous avez déjà noté ce produit'}, status=409)

    review = form.save(commit=False)
    review.customer = request.user
    review.vendor_id = product.vendor_id
    try:
        with transaction.atomic():
            review.save()
    except IntegrityError:
        return JsonResponse({'error': 'Vous avez déjà noté ce produit'}, status=409)
    return JsonResponse({'review': _serialize_review(review)}, status=201)


@require_GET
def product_reviews(request, product_id):
    product = get_object_or_404(Product, pk=product_id)
    reviews = product.reviews.select_related('customer')
    return JsonResponse({'reviews': [_serialize_review(r) for r in reviews]})


@require_GET
@customer_only
def my_reviews(request):
    reviews = Review.objects.filter(customer=request.user).select_related('customer')
    return JsonResponse({'reviews': [_serialize_review(r) for r in reviews]})
