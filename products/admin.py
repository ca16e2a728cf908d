from django.contrib import admin
from .models import Product, Review


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'vendor', 'category', 'price', 'quantity', 'created_at')
    list_filter = ('category', 'created_at')
    list_display_links = ('id', 'name')
    search_fields = ('name', 'vendor__username', 'category')
    readonly_fields = ('created_at', 'updated_at')
    list_per_page = 20


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'product', 'customer', 'vendor', 'rating', 'created_at')
    list_filter = ('rating', 'created_at')
    search_fields = ('product__name', 'customer__username', 'comment')
    readonly_fields = ('created_at',)
    list_per_page = 20
