"""
订单领域模型包。
提供订单聚合根、值对象、构建器、仓储接口和领域异常。
"""

from orders.domain.aggregates import OrderAggregate
from orders.domain.builder import OrderAggregateBuilder
from orders.domain.events import OrderChangedEvent
from orders.domain.exceptions import (
    OrderErrorKind,
    OrderException,
    NoLinesException,
    BadPriceException,
    NotFoundException,
    UnavailableProductException,
    InvalidOrderException,
)
from orders.domain.repositories import OrderRepository
from orders.domain.totals import compute_order_totals
from orders.domain.validators import CustomerValidator
from orders.domain.value_objects import Address, Customer, LineItem, RequestedLine

__all__ = [
    'OrderAggregate',
    'OrderAggregateBuilder',
    'OrderChangedEvent',
    'OrderErrorKind',
    'OrderException',
    'NoLinesException',
    'BadPriceException',
    'NotFoundException',
    'UnavailableProductException',
    'InvalidOrderException',
    'OrderRepository',
    'compute_order_totals',
    'CustomerValidator',
    'Address',
    'Customer',
    'LineItem',
    'RequestedLine',
]
