"""
URL configuration for tienda project.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    path('admin/', admin.site.urls),
    # 商品模块API
    path('', include('products.urls')),
    # 订单模块API
    path('', include('orders.urls')),
]

# 在开发环境中提供静态文件服务
if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
