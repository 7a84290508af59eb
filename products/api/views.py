"""
商品API视图。
商品的创建、修改和删除仅限管理员，变更会推送给实时通知订阅者。
"""
import logging

from rest_framework.permissions import IsAdminUser, IsAuthenticated

from core.infrastructure.api_view import ApiBaseView
from core.infrastructure.response import StatusCode
from products.api.serializers import ProductCreateSerializer, ProductUpdateSerializer
from products.application import (
    CreateProductCommand,
    DeleteProductCommand,
    GetProductQuery,
    UpdateProductCommand,
)
from products.infrastructure.factory import get_product_service

logger = logging.getLogger(__name__)


class ProductCreateView(ApiBaseView):
    """商品创建接口"""
    
    permission_classes = [IsAdminUser]
    
    def post(self, request):
        """创建商品"""
        serializer = ProductCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.failed_response(
                message="数据验证失败",
                code=StatusCode.VALIDATION_ERROR,
                data=serializer.errors
            )
        
        data = serializer.validated_data
        command = CreateProductCommand(
            name=data['name'],
            description=data['description'],
            price=data['price'],
            stock=data['stock'],
            active=data['active']
        )
        product = get_product_service().create_product(command)
        logger.info(f"管理员 {request.user.pk} 创建商品 {product.id}")
        return self.created_response(data=product.to_dict(), message="商品创建成功")


class ProductDetailView(ApiBaseView):
    """商品详情、更新和删除接口"""
    
    def get_permissions(self):
        if self.request.method == 'GET':
            return [IsAuthenticated()]
        return [IsAdminUser()]
    
    def get(self, request, product_id):
        """获取商品详情"""
        product = get_product_service().get_product(GetProductQuery(id=str(product_id)))
        return self.success_response(data=product.to_dict(), message="获取商品成功")
    
    def put(self, request, product_id):
        """更新商品"""
        serializer = ProductUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.failed_response(
                message="数据验证失败",
                code=StatusCode.VALIDATION_ERROR,
                data=serializer.errors
            )
        
        data = serializer.validated_data
        command = UpdateProductCommand(
            id=str(product_id),
            name=data.get('name'),
            description=data.get('description'),
            price=data.get('price'),
            stock=data.get('stock'),
            active=data.get('active')
        )
        product = get_product_service().update_product(command)
        return self.success_response(data=product.to_dict(), message="商品更新成功", code=StatusCode.UPDATED)
    
    def delete(self, request, product_id):
        """删除商品"""
        product = get_product_service().delete_product(DeleteProductCommand(id=str(product_id)))
        logger.info(f"管理员 {request.user.pk} 删除商品 {product_id}")
        return self.success_response(data=product.to_dict(), message="商品删除成功", code=StatusCode.DELETED)
