"""
通知领域模型包。
"""

from notifications.domain.envelope import NotificationEnvelope
from notifications.domain.exceptions import NotificationDeliveryException

__all__ = [
    'NotificationEnvelope',
    'NotificationDeliveryException',
]
