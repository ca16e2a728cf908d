from django.urls import path
from . import views

app_name = 'products'

urlpatterns = [
    path('', views.products_root, name='products'),
    path('<int:product_id>/', views.product_detail, name='product-detail'),
    path('<int:product_id>/reviews/', views.product_reviews, name='product-reviews'),
    path('reviews/', views.create_review, name='create-review'),
    path('reviews/mine/', views.my_reviews, name='my-reviews'),
]
