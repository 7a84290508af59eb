"""
订单应用服务层的查询对象。
"""
from typing import Any, Optional


class GetOrderQuery:
    """获取订单查询"""
    
    def __init__(self, order_id: Any, user_id: Any = None, is_staff: bool = False, timeout: Optional[float] = None):
        """
        初始化获取订单查询。
        
        Args:
            order_id: 订单ID
            user_id: 发起者ID
            is_staff: 发起者是否为管理员
            timeout: 超时时间（秒）
        """
        self.order_id = order_id
        self.user_id = user_id
        self.is_staff = is_staff
        self.timeout = timeout


class ListCustomerOrdersQuery:
    """获取客户订单列表查询"""
    
    def __init__(self, customer_id: Any, user_id: Any = None, is_staff: bool = False, timeout: Optional[float] = None):
        self.customer_id = customer_id
        self.user_id = user_id
        self.is_staff = is_staff
        self.timeout = timeout
