"""
订单领域模型中的仓储接口。
"""
from abc import abstractmethod
from typing import Any, List

from core.domain.repositories import Repository
from orders.domain.aggregates import OrderAggregate


class OrderRepository(Repository[OrderAggregate]):
    """
    订单仓储接口。
    
    实现约定：
    - save 在首次保存时分配订单ID，并整体替换订单行（后写者胜出）；
    - 在提交前检查截止时间，超时的保存必须回滚；
    - 已删除的订单对所有查询不可见。
    """
    
    @abstractmethod
    def find_by_customer(self, customer_id: Any, deadline: Any = None) -> List[OrderAggregate]:
        """
        查找客户的所有订单。
        
        Args:
            customer_id: 客户ID
            deadline: 截止时间
            
        Returns:
            订单列表，按创建时间倒序
        """
        pass
