"""
订单仓储的内存实现。
用于单元测试和不需要数据库的场景，保存和返回的都是订单的副本。
"""
import copy
import threading
import uuid
from typing import Any, Dict, List, Optional

from core.infrastructure.timeouts import Deadline
from orders.domain.aggregates import OrderAggregate
from orders.domain.exceptions import NotFoundException
from orders.domain.repositories import OrderRepository


class InMemoryOrderRepository(OrderRepository):
    """基于字典的订单仓储实现"""
    
    def __init__(self, soft_delete: bool = True):
        self.soft_delete = soft_delete
        self._orders: Dict[str, OrderAggregate] = {}
        self._lock = threading.Lock()
        self.save_count = 0
    
    def find_by_id(self, id: Any, deadline: Optional[Deadline] = None) -> Optional[OrderAggregate]:
        (deadline or Deadline.unbounded()).check("查询订单")
        with self._lock:
            order = self._orders.get(str(id))
            if order is None or order.is_deleted:
                return None
            return copy.deepcopy(order)
    
    def find_by_customer(self, customer_id: Any, deadline: Optional[Deadline] = None) -> List[OrderAggregate]:
        (deadline or Deadline.unbounded()).check("查询客户订单")
        with self._lock:
            orders = [
                copy.deepcopy(order) for order in self._orders.values()
                if str(order.customer_id) == str(customer_id) and not order.is_deleted
            ]
        return sorted(orders, key=lambda order: order.created_at, reverse=True)
    
    def save(self, order: OrderAggregate, deadline: Optional[Deadline] = None) -> OrderAggregate:
        deadline = deadline or Deadline.unbounded()
        with self._lock:
            if order.is_transient:
                order_id = uuid.uuid4()
            else:
                order_id = order.id
                existing = self._orders.get(str(order_id))
                if existing is None or existing.is_deleted:
                    raise NotFoundException(NotFoundException.ORDER, order_id)
            
            # 提交前检查，超时则不写入
            deadline.check("保存订单")
            
            order.id = order_id
            stored = copy.deepcopy(order)
            stored.clear_domain_events()
            self._orders[str(order_id)] = stored
            self.save_count += 1
        return order
    
    def delete_by_id(self, id: Any, deadline: Optional[Deadline] = None) -> bool:
        deadline = deadline or Deadline.unbounded()
        with self._lock:
            order = self._orders.get(str(id))
            if order is None or order.is_deleted:
                return False
            deadline.check("删除订单")
            if self.soft_delete:
                order.is_deleted = True
            else:
                del self._orders[str(id)]
        return True
    
    def __len__(self) -> int:
        with self._lock:
            return sum(1 for order in self._orders.values() if not order.is_deleted)
