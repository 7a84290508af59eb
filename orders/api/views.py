"""
订单API视图。
提供RESTful API接口，处理HTTP请求并调用订单应用服务。
订单领域异常交给异常处理器统一转换为响应。
"""
import logging

from core.infrastructure.api_view import ApiBaseView
from core.infrastructure.response import StatusCode
from orders.api.serializers import OrderCreateSerializer, OrderUpdateSerializer
from orders.application import (
    CreateOrderCommand,
    DeleteOrderCommand,
    GetOrderQuery,
    ListCustomerOrdersQuery,
    UpdateOrderCommand,
)
from orders.infrastructure.factory import get_order_service

logger = logging.getLogger(__name__)


class OrderListCreateView(ApiBaseView):
    """订单列表和创建接口"""
    
    def get(self, request):
        """获取客户的订单列表，管理员可以通过customer_id查询任意客户"""
        customer_id = request.user.pk
        if request.user.is_staff and request.query_params.get('customer_id'):
            customer_id = request.query_params['customer_id']
        
        query = ListCustomerOrdersQuery(
            customer_id=customer_id,
            user_id=request.user.pk,
            is_staff=request.user.is_staff
        )
        orders = get_order_service().list_customer_orders(query)
        return self.success_response(
            data=[order.to_dict() for order in orders],
            message="获取订单列表成功"
        )
    
    def post(self, request):
        """创建订单"""
        serializer = OrderCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.failed_response(
                message="数据验证失败",
                code=StatusCode.VALIDATION_ERROR,
                data=serializer.errors
            )
        
        command = CreateOrderCommand(
            customer_id=serializer.validated_data.get('customer_id') or request.user.pk,
            customer=serializer.to_customer(),
            lines=serializer.to_requested_lines(),
            user_id=request.user.pk,
            is_staff=request.user.is_staff,
            timeout=serializer.validated_data.get('timeout')
        )
        order = get_order_service().create_order(command)
        logger.info(f"用户 {request.user.pk} 创建订单 {order.id}")
        return self.created_response(data=order.to_dict(), message="订单创建成功")


class OrderDetailView(ApiBaseView):
    """订单详情、更新和删除接口"""
    
    def get(self, request, order_id):
        """获取订单详情"""
        query = GetOrderQuery(
            order_id=order_id,
            user_id=request.user.pk,
            is_staff=request.user.is_staff
        )
        order = get_order_service().get_order(query)
        return self.success_response(data=order.to_dict(), message="获取订单成功")
    
    def put(self, request, order_id):
        """更新订单（整体替换订单行）"""
        serializer = OrderUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.failed_response(
                message="数据验证失败",
                code=StatusCode.VALIDATION_ERROR,
                data=serializer.errors
            )
        
        command = UpdateOrderCommand(
            order_id=order_id,
            lines=serializer.to_requested_lines(),
            customer=serializer.to_customer(),
            user_id=request.user.pk,
            is_staff=request.user.is_staff,
            timeout=serializer.validated_data.get('timeout')
        )
        order = get_order_service().update_order(command)
        return self.success_response(data=order.to_dict(), message="订单更新成功", code=StatusCode.UPDATED)
    
    def delete(self, request, order_id):
        """删除订单"""
        command = DeleteOrderCommand(
            order_id=order_id,
            user_id=request.user.pk,
            is_staff=request.user.is_staff
        )
        result = get_order_service().delete_order(command)
        logger.info(f"用户 {request.user.pk} 删除订单 {order_id}")
        return self.success_response(data=result.to_dict(), message=result.message, code=StatusCode.DELETED)
