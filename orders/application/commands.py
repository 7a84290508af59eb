"""
订单应用服务层的命令对象。
定义用于修改系统状态的命令。

每个命令都带有发起者信息（user_id、is_staff）和可选的超时时间。
user_id为None表示系统内部调用，不做权限检查。
"""
from typing import Any, List, Optional

from orders.domain.value_objects import Customer, RequestedLine


class CreateOrderCommand:
    """创建订单命令"""
    
    def __init__(
        self,
        customer_id: Any,
        customer: Customer,
        lines: List[RequestedLine],
        user_id: Any = None,
        is_staff: bool = False,
        timeout: Optional[float] = None
    ):
        """
        初始化创建订单命令。
        
        Args:
            customer_id: 下单客户ID
            customer: 客户快照
            lines: 请求的订单行
            user_id: 发起者ID
            is_staff: 发起者是否为管理员
            timeout: 超时时间（秒）
        """
        self.customer_id = customer_id
        self.customer = customer
        self.lines = lines
        self.user_id = user_id
        self.is_staff = is_staff
        self.timeout = timeout


class UpdateOrderCommand:
    """更新订单命令，订单行整体替换"""
    
    def __init__(
        self,
        order_id: Any,
        lines: List[RequestedLine],
        customer: Optional[Customer] = None,
        user_id: Any = None,
        is_staff: bool = False,
        timeout: Optional[float] = None
    ):
        """
        初始化更新订单命令。
        
        Args:
            order_id: 订单ID
            lines: 新的完整订单行
            customer: 新的客户快照，None表示不变
            user_id: 发起者ID
            is_staff: 发起者是否为管理员
            timeout: 超时时间（秒）
        """
        self.order_id = order_id
        self.lines = lines
        self.customer = customer
        self.user_id = user_id
        self.is_staff = is_staff
        self.timeout = timeout


class DeleteOrderCommand:
    """删除订单命令"""
    
    def __init__(self, order_id: Any, user_id: Any = None, is_staff: bool = False, timeout: Optional[float] = None):
        self.order_id = order_id
        self.user_id = user_id
        self.is_staff = is_staff
        self.timeout = timeout
