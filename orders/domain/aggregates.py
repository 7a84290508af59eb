"""
订单领域模型中的聚合根。
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from core.domain import AggregateRoot, EventType
from orders.domain.events import OrderChangedEvent
from orders.domain.exceptions import NoLinesException
from orders.domain.totals import compute_order_totals
from orders.domain.value_objects import Customer, LineItem


class OrderAggregate(AggregateRoot):
    """
    订单聚合根。
    
    不变性规则：
    - 订单行不能为空；
    - total_items 和 total_amount 总是由订单行推导，不能由外部设置；
    - 订单行只能通过 replace_lines 整体替换。
    """
    
    def __init__(
        self,
        customer_id: Any,
        customer: Customer,
        lines: Iterable[LineItem],
        id: Any = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        is_deleted: bool = False,
        version: int = 0,
    ):
        """
        初始化订单聚合根。
        
        Args:
            customer_id: 客户（用户）ID
            customer: 客户快照
            lines: 订单行
            id: 订单ID，由仓储在创建时分配
            created_at: 创建时间
            updated_at: 更新时间
            is_deleted: 是否已（软）删除
            version: 版本号
        """
        super().__init__(id, version)
        self._lines = self._freeze_lines(lines)
        self.customer_id = customer_id
        self.customer = customer
        now = datetime.now(timezone.utc)
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at
        self.is_deleted = is_deleted
    
    @staticmethod
    def _freeze_lines(lines: Iterable[LineItem]) -> Tuple[LineItem, ...]:
        frozen = tuple(lines)
        if not frozen:
            raise NoLinesException()
        return frozen
    
    @classmethod
    def place(cls, customer_id: Any, customer: Customer, lines: Iterable[LineItem]) -> 'OrderAggregate':
        """
        创建一个新订单，并记录创建事件。
        
        Args:
            customer_id: 客户ID
            customer: 客户快照
            lines: 已校验的订单行
            
        Returns:
            新的订单聚合根（尚未持久化）
        """
        order = cls(customer_id=customer_id, customer=customer, lines=lines)
        order.add_domain_event(OrderChangedEvent(None, EventType.CREATED))
        return order
    
    @property
    def lines(self) -> Tuple[LineItem, ...]:
        """订单行（不可变元组）"""
        return self._lines
    
    @property
    def total_items(self) -> int:
        """商品总数"""
        return compute_order_totals(self._lines)[0]
    
    @property
    def total_amount(self) -> Decimal:
        """订单总金额"""
        return compute_order_totals(self._lines)[1]
    
    def replace_lines(self, lines: Iterable[LineItem], customer: Optional[Customer] = None) -> None:
        """
        整体替换订单行（以及可选的客户快照），并记录更新事件。
        
        Args:
            lines: 新的已校验订单行
            customer: 新的客户快照，None表示不变
            
        Raises:
            NoLinesException: 新订单行为空
        """
        self._lines = self._freeze_lines(lines)
        if customer is not None:
            self.customer = customer
        self.updated_at = datetime.now(timezone.utc)
        self.increment_version()
        self.add_domain_event(OrderChangedEvent(self.id, EventType.UPDATED))
    
    def mark_deleted(self) -> None:
        """
        标记订单已删除，并记录删除事件。
        软删除还是硬删除由仓储决定。
        """
        self.is_deleted = True
        self.updated_at = datetime.now(timezone.utc)
        self.add_domain_event(OrderChangedEvent(self.id, EventType.DELETED))
    
    def check_invariants(self) -> bool:
        return len(self._lines) > 0 and all(line.quantity >= 1 for line in self._lines)
    
    def to_dict(self) -> Dict[str, Any]:
        """
        将订单转换为字典表示，用作响应数据和通知负载。
        
        Returns:
            订单的字典表示
        """
        return {
            "id": str(self.id) if self.id is not None else None,
            "customer_id": str(self.customer_id),
            "customer": self.customer.to_dict(),
            "lines": [line.to_dict() for line in self._lines],
            "total_items": self.total_items,
            "total_amount": str(self.total_amount),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "is_deleted": self.is_deleted,
            "version": self.version,
        }
