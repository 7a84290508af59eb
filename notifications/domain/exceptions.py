"""
通知异常。
"""
from typing import Optional

from core.domain.exceptions import DomainException


class NotificationDeliveryException(DomainException):
    """
    通知投递失败。
    只记录日志和计数，不会传播给发布者，分发器也不会重试。
    """
    
    def __init__(self, subscriber_name: str, envelope, cause: Optional[BaseException] = None):
        """
        初始化通知投递失败异常。
        
        Args:
            subscriber_name: 订阅者名称
            envelope: 投递失败的信封
            cause: 原始异常
        """
        message = (
            f"订阅者 {subscriber_name} 投递 "
            f"{envelope.entity_kind.value}:{envelope.event_type.value} 失败: {cause}"
        )
        super().__init__(message)
        self.subscriber_name = subscriber_name
        self.envelope = envelope
        self.cause = cause
