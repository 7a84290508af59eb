"""
订单应用服务层的数据传输对象(DTOs)。
"""
from typing import Any, Dict, List

from orders.domain.aggregates import OrderAggregate


class OrderDTO:
    """订单DTO"""
    
    def __init__(self, data: Dict[str, Any]):
        """
        初始化订单DTO。
        
        Args:
            data: 订单的字典表示
        """
        self.id = data["id"]
        self.customer_id = data["customer_id"]
        self.customer = data["customer"]
        self.lines: List[Dict[str, Any]] = data["lines"]
        self.total_items = data["total_items"]
        self.total_amount = data["total_amount"]
        self.created_at = data["created_at"]
        self.updated_at = data["updated_at"]
        self.is_deleted = data["is_deleted"]
        self.version = data["version"]
    
    @classmethod
    def from_aggregate(cls, order: OrderAggregate) -> 'OrderDTO':
        """
        从订单聚合根创建DTO。
        
        Args:
            order: 订单聚合根
            
        Returns:
            订单DTO
        """
        return cls(order.to_dict())
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "customer": self.customer,
            "lines": self.lines,
            "total_items": self.total_items,
            "total_amount": self.total_amount,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "is_deleted": self.is_deleted,
            "version": self.version,
        }


class DeleteOrderResultDTO:
    """删除订单结果DTO，包含删除前的最后快照"""
    
    def __init__(self, order: OrderDTO, message: str):
        self.order = order
        self.message = message
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order.to_dict(),
            "message": self.message,
        }
