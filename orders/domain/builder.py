"""
订单聚合构建器。
把请求中的订单行对照商品目录逐项校验，计算总额，组装出订单聚合根。
构建过程没有副作用：商品目录只读，任何一行失败都不会产生部分订单。
"""
from collections import defaultdict
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from core.infrastructure.timeouts import Deadline
from orders.domain.aggregates import OrderAggregate
from orders.domain.exceptions import (
    BadPriceException,
    InvalidOrderException,
    NoLinesException,
    NotFoundException,
    UnavailableProductException,
)
from orders.domain.validators import CustomerValidator
from orders.domain.value_objects import Customer, LineItem, RequestedLine
from products.domain import ProductCatalog


def _to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        # float先转字符串，避免二进制浮点误差
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidOrderException(field_name, "价格格式不正确", value)


class OrderAggregateBuilder:
    """
    订单聚合构建器。
    
    校验顺序：
    1. 订单行为空时直接拒绝，不访问商品目录；
    2. 客户信息和各行数量；
    3. 逐行查询商品目录：商品不存在、价格不一致、商品不可售或库存不足。
    """
    
    def __init__(self, catalog: ProductCatalog, customer_validator: Optional[CustomerValidator] = None):
        """
        初始化订单聚合构建器。
        
        Args:
            catalog: 商品目录
            customer_validator: 客户信息校验器
        """
        self.catalog = catalog
        self.customer_validator = customer_validator or CustomerValidator()
    
    def build(
        self,
        customer_id: Any,
        customer: Customer,
        requested_lines: Sequence[RequestedLine],
        deadline: Optional[Deadline] = None,
    ) -> OrderAggregate:
        """
        构建新订单。
        
        Args:
            customer_id: 客户ID
            customer: 客户快照
            requested_lines: 请求中的订单行
            deadline: 截止时间
            
        Returns:
            已校验、已定价的订单聚合根（尚未持久化）
            
        Raises:
            NoLinesException: 没有订单行
            InvalidOrderException: 客户信息或数量不合法
            NotFoundException: 商品不存在
            BadPriceException: 价格与商品目录不一致
            UnavailableProductException: 商品不可售或库存不足
            TransientInfrastructureException: 超时或商品目录不可用
        """
        lines = self.build_lines(customer, requested_lines, deadline=deadline)
        return OrderAggregate.place(customer_id=customer_id, customer=customer, lines=lines)
    
    def build_lines(
        self,
        customer: Customer,
        requested_lines: Sequence[RequestedLine],
        deadline: Optional[Deadline] = None,
    ) -> List[LineItem]:
        """
        校验客户信息和请求订单行，返回定价后的订单行。
        更新订单时也使用此方法重建完整的订单行。
        
        Args:
            customer: 客户快照
            requested_lines: 请求中的订单行
            deadline: 截止时间
            
        Returns:
            订单行列表，顺序与请求一致
        """
        if not requested_lines:
            raise NoLinesException()
        
        deadline = deadline or Deadline.unbounded()
        self.customer_validator.validate(customer)
        
        for index, requested in enumerate(requested_lines):
            if requested.product_id is None or not str(requested.product_id).strip():
                raise InvalidOrderException(f"lines[{index}].product_id", "商品ID不能为空", requested.product_id)
            if not isinstance(requested.quantity, int) or requested.quantity < 1:
                raise InvalidOrderException(f"lines[{index}].quantity", "数量必须至少为1", requested.quantity)
        
        lines = []
        requested_per_product: Dict[str, int] = defaultdict(int)
        
        for index, requested in enumerate(requested_lines):
            product = deadline.call("商品目录查询", self.catalog.get_by_id, requested.product_id)
            
            if product is None:
                logger.info(f"订单校验失败，商品不存在: {requested.product_id}")
                raise NotFoundException(NotFoundException.PRODUCT, requested.product_id)
            
            catalog_price = product.price.amount
            if requested.unit_price is not None:
                requested_price = _to_decimal(requested.unit_price, f"lines[{index}].unit_price")
                if requested_price != catalog_price:
                    logger.info(f"订单校验失败，商品价格不一致: {requested.product_id}")
                    raise BadPriceException(requested.product_id, requested_price, catalog_price)
            
            product_key = str(product.id)
            requested_per_product[product_key] += requested.quantity
            total_requested = requested_per_product[product_key]
            if not product.is_available(total_requested):
                reason = None if product.is_available() else f"商品状态为 {product.state}"
                logger.info(f"订单校验失败，商品不可售: {requested.product_id}")
                raise UnavailableProductException(product.id, total_requested, product.stock, reason)
            
            lines.append(
                LineItem(
                    product_id=product_key,
                    product_name=product.name,
                    unit_price=catalog_price,
                    quantity=requested.quantity,
                )
            )
        
        return lines
