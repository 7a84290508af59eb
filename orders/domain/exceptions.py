"""
订单领域异常。
订单相关错误是一个封闭的异常族：每个子类对应一个OrderErrorKind，
调用方按kind穷尽匹配，而不是依赖开放的继承层次。
"""
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from core.domain.exceptions import DomainException


class OrderErrorKind(str, Enum):
    """订单错误种类"""
    NO_LINES = "NO_LINES"          # 订单没有订单行
    BAD_PRICE = "BAD_PRICE"        # 价格与商品目录不一致
    NOT_FOUND = "NOT_FOUND"        # 商品或订单不存在
    UNAVAILABLE = "UNAVAILABLE"    # 商品不可售或库存不足
    INVALID = "INVALID"            # 请求字段不合法


class OrderException(DomainException):
    """
    订单异常基类。
    只能通过下面定义的子类实例化。
    """
    
    kind: OrderErrorKind = None


class NoLinesException(OrderException):
    """订单没有任何订单行"""
    
    kind = OrderErrorKind.NO_LINES
    
    def __init__(self):
        super().__init__("订单必须至少包含一个订单行")


class BadPriceException(OrderException):
    """请求中提供的价格与商品目录价格不一致"""
    
    kind = OrderErrorKind.BAD_PRICE
    
    def __init__(self, product_id: Any, requested_price: Decimal, catalog_price: Decimal):
        """
        初始化价格不一致异常。
        
        Args:
            product_id: 商品ID
            requested_price: 请求中的价格
            catalog_price: 商品目录中的价格
        """
        message = (
            f"商品(ID={product_id})价格不一致，请求价格:{requested_price}，当前价格:{catalog_price}"
        )
        super().__init__(message)
        self.product_id = product_id
        self.requested_price = requested_price
        self.catalog_price = catalog_price


class NotFoundException(OrderException):
    """引用的商品或订单不存在"""
    
    kind = OrderErrorKind.NOT_FOUND
    
    PRODUCT = "商品"
    ORDER = "订单"
    
    def __init__(self, entity_name: str, entity_id: Any):
        """
        初始化不存在异常。
        
        Args:
            entity_name: 实体名称，NotFoundException.PRODUCT 或 NotFoundException.ORDER
            entity_id: 实体ID
        """
        super().__init__(f"无法找到{entity_name}: ID={entity_id}")
        self.entity_name = entity_name
        self.entity_id = entity_id


class UnavailableProductException(OrderException):
    """商品未上架或库存不足以满足订单"""
    
    kind = OrderErrorKind.UNAVAILABLE
    
    def __init__(self, product_id: Any, requested: int, available: int, reason: Optional[str] = None):
        """
        初始化商品不可售异常。
        
        Args:
            product_id: 商品ID
            requested: 请求数量
            available: 可用数量
            reason: 额外原因
        """
        message = f"商品(ID={product_id})不可售，请求:{requested}，可用:{available}"
        if reason:
            message = f"{message}，原因: {reason}"
        super().__init__(message)
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidOrderException(OrderException):
    """订单请求字段不合法（客户信息、地址、数量等）"""
    
    kind = OrderErrorKind.INVALID
    
    def __init__(self, field_name: str, reason: str, value: Any = None):
        """
        初始化订单字段不合法异常。
        
        Args:
            field_name: 字段名称
            reason: 原因
            value: 字段值
        """
        super().__init__(f"字段'{field_name}'不合法: {reason}。值: {value!r}")
        self.field_name = field_name
        self.reason = reason
        self.value = value
