"""
通知订阅者。
"""

from notifications.subscribers.email import (
    DjangoEmailSender,
    DjangoNewProductsEmailSender,
    DjangoOrderEmailSender,
    OrderEmailNotifier,
    OrderEmailSender,
)
from notifications.subscribers.realtime import (
    InMemoryRealtimeChannel,
    RealtimeChannel,
    RealtimeNotifier,
    RealtimeSession,
    RedisRealtimeChannel,
)

__all__ = [
    'OrderEmailSender',
    'DjangoEmailSender',
    'DjangoOrderEmailSender',
    'DjangoNewProductsEmailSender',
    'OrderEmailNotifier',
    'RealtimeChannel',
    'RealtimeSession',
    'InMemoryRealtimeChannel',
    'RedisRealtimeChannel',
    'RealtimeNotifier',
]
