"""
订单合计计算。
"""
from decimal import Decimal
from typing import Iterable, Tuple

from orders.domain.value_objects import LineItem


def compute_order_totals(lines: Iterable[LineItem]) -> Tuple[int, Decimal]:
    """
    计算订单的商品总数和总金额。
    纯函数：相同的订单行总是得到相同的结果，使用Decimal精确求和。
    
    Args:
        lines: 订单行
        
    Returns:
        (商品总数, 总金额) 元组
    """
    total_items = 0
    total_amount = Decimal("0")
    for line in lines:
        total_items += line.quantity
        total_amount += line.total
    return total_items, total_amount
