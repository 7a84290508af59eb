"""
通知基础设施工厂。
按配置组装通知分发器和订阅者，进程内共享一个分发器实例。
"""
import threading
from typing import Optional

from loguru import logger

from notifications import config
from notifications.dispatcher import DropPolicy, NotificationDispatcher
from notifications.subscribers import (
    DjangoOrderEmailSender,
    InMemoryRealtimeChannel,
    OrderEmailNotifier,
    RealtimeChannel,
    RealtimeNotifier,
    RedisRealtimeChannel,
)

_lock = threading.Lock()
_dispatcher: Optional[NotificationDispatcher] = None
_realtime_channel: Optional[RealtimeChannel] = None


def create_realtime_channel(backend: str = None) -> RealtimeChannel:
    """
    创建实时推送通道。
    
    Args:
        backend: redis 或 memory，默认读取配置
        
    Returns:
        实时推送通道
    """
    backend = backend or config.REALTIME_BACKEND
    if backend == 'redis':
        return RedisRealtimeChannel(channel_prefix=config.CHANNEL_PREFIX)
    if backend == 'memory':
        return InMemoryRealtimeChannel(buffer_size=config.SESSION_BUFFER_SIZE)
    raise ValueError(f"不支持的实时推送后端: {backend}")


def create_notification_dispatcher(realtime_channel: RealtimeChannel = None) -> NotificationDispatcher:
    """
    按配置创建通知分发器并注册订阅者。
    
    Args:
        realtime_channel: 实时推送通道，默认按配置创建
        
    Returns:
        通知分发器
    """
    dispatcher = NotificationDispatcher(
        inbox_capacity=config.INBOX_CAPACITY,
        drop_policy=DropPolicy(config.DROP_POLICY),
    )
    if config.EMAIL_ENABLED:
        dispatcher.register(OrderEmailNotifier(DjangoOrderEmailSender(max_attempts=config.EMAIL_MAX_ATTEMPTS)))
    dispatcher.register(RealtimeNotifier(realtime_channel or create_realtime_channel()))
    return dispatcher


def get_realtime_channel() -> RealtimeChannel:
    """获取进程内共享的实时推送通道"""
    global _realtime_channel
    with _lock:
        if _realtime_channel is None:
            _realtime_channel = create_realtime_channel()
        return _realtime_channel


def get_notification_dispatcher() -> NotificationDispatcher:
    """获取进程内共享的通知分发器"""
    global _dispatcher
    channel = get_realtime_channel()
    with _lock:
        if _dispatcher is None:
            _dispatcher = create_notification_dispatcher(channel)
            logger.info(
                f"通知分发器已创建，收件箱容量 {config.INBOX_CAPACITY}，丢弃策略 {config.DROP_POLICY}"
            )
        return _dispatcher


def reset_notification_dispatcher(timeout: float = 1.0) -> None:
    """
    关闭并丢弃共享的分发器和推送通道，下次获取时重新创建。
    
    Args:
        timeout: 等待待处理通知的时间（秒）
    """
    global _dispatcher, _realtime_channel
    with _lock:
        dispatcher, _dispatcher = _dispatcher, None
        _realtime_channel = None
    if dispatcher is not None:
        dispatcher.shutdown(timeout)
