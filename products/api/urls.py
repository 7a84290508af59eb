"""
商品API URL配置。
定义RESTful API的路由映射。
"""
from django.urls import path
from products.api import views

# API URL模式
urlpatterns = [
    path('products/', views.ProductCreateView.as_view(), name='product-create'),
    path('products/<uuid:product_id>/', views.ProductDetailView.as_view(), name='product-detail'),
]
