"""
订单应用服务层。
"""

from orders.application.commands import CreateOrderCommand, UpdateOrderCommand, DeleteOrderCommand
from orders.application.dtos import OrderDTO, DeleteOrderResultDTO
from orders.application.order_service import OrderApplicationService, OrderPipelineState
from orders.application.queries import GetOrderQuery, ListCustomerOrdersQuery

__all__ = [
    'CreateOrderCommand',
    'UpdateOrderCommand',
    'DeleteOrderCommand',
    'OrderDTO',
    'DeleteOrderResultDTO',
    'OrderApplicationService',
    'OrderPipelineState',
    'GetOrderQuery',
    'ListCustomerOrdersQuery',
]
