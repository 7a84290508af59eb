"""
通知分发器。

每个订阅者拥有一个有界收件箱和一个独立的后台线程。发布时只做非阻塞投递，
收件箱满时按丢弃策略处理，因此慢或卡死的订阅者不会拖住发布者，也不会影响其他订阅者。
"""
import queue
import threading
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from loguru import logger

from core.domain.events import EntityKind, EventType
from notifications.domain import NotificationDeliveryException, NotificationEnvelope


class DropPolicy(str, Enum):
    """收件箱已满时的丢弃策略"""
    DROP_OLDEST = "DROP_OLDEST"  # 丢弃最早的待处理信封，接收新信封
    DROP_NEWEST = "DROP_NEWEST"  # 丢弃新到达的信封


class Subscriber(ABC):
    """
    订阅者基类。
    子类通过entity_kinds和event_types声明关心的信封，None表示全部接收。
    """
    
    entity_kinds: Optional[FrozenSet[EntityKind]] = None
    event_types: Optional[FrozenSet[EventType]] = None
    
    @property
    def name(self) -> str:
        return self.__class__.__name__
    
    def accepts(self, envelope: NotificationEnvelope) -> bool:
        """
        判断是否接收该信封。
        
        Args:
            envelope: 通知信封
            
        Returns:
            如果订阅者关心该实体种类和变更类型则返回True
        """
        if self.entity_kinds is not None and envelope.entity_kind not in self.entity_kinds:
            return False
        if self.event_types is not None and envelope.event_type not in self.event_types:
            return False
        return True
    
    @abstractmethod
    def deliver(self, envelope: NotificationEnvelope) -> None:
        """
        处理信封。在订阅者自己的线程中调用，抛出的异常只会被记录。
        
        Args:
            envelope: 通知信封（订阅者独占的副本）
        """
        pass


_STOP = object()


class SubscriberInbox:
    """
    订阅者收件箱。
    有界队列加一个后台线程，计数器由收件箱自己的锁保护。
    """
    
    def __init__(self, subscriber: Subscriber, capacity: int, drop_policy: DropPolicy):
        if capacity < 1:
            raise ValueError(f"收件箱容量必须至少为1: {capacity}")
        self.subscriber = subscriber
        self.capacity = capacity
        self.drop_policy = DropPolicy(drop_policy)
        self._queue = queue.Queue(maxsize=capacity)
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._pending = 0
        self._closed = False
        self.delivered = 0
        self.failed = 0
        self.dropped = 0
        self._thread = threading.Thread(
            target=self._run,
            name=f"notification-{subscriber.name}",
            daemon=True,
        )
    
    def start(self) -> None:
        self._thread.start()
    
    @property
    def closed(self) -> bool:
        return self._closed
    
    @property
    def pending(self) -> int:
        with self._lock:
            return self._pending
    
    def offer(self, envelope: NotificationEnvelope) -> bool:
        """
        非阻塞地投递信封。
        
        Args:
            envelope: 通知信封
            
        Returns:
            信封进入收件箱时返回True；收件箱已关闭或按DROP_NEWEST丢弃时返回False
        """
        with self._lock:
            if self._closed:
                return False
            try:
                self._queue.put_nowait(envelope)
            except queue.Full:
                if self.drop_policy == DropPolicy.DROP_NEWEST:
                    self.dropped += 1
                    logger.warning(f"订阅者 {self.subscriber.name} 收件箱已满，丢弃新信封")
                    return False
                try:
                    self._queue.get_nowait()
                    self._pending -= 1
                    self.dropped += 1
                    logger.warning(f"订阅者 {self.subscriber.name} 收件箱已满，丢弃最早的信封")
                except queue.Empty:
                    pass
                self._queue.put_nowait(envelope)
            self._pending += 1
            return True
    
    def _run(self) -> None:
        while True:
            envelope = self._queue.get()
            if envelope is _STOP:
                break
            try:
                self.subscriber.deliver(envelope)
            except Exception as e:
                failure = NotificationDeliveryException(self.subscriber.name, envelope, e)
                logger.opt(exception=e).error(str(failure))
                with self._lock:
                    self.failed += 1
            else:
                with self._lock:
                    self.delivered += 1
            finally:
                with self._idle:
                    self._pending -= 1
                    if self._pending <= 0:
                        self._idle.notify_all()
    
    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        等待收件箱中的信封全部处理完毕。
        
        Args:
            timeout: 最长等待时间（秒），None表示一直等待
            
        Returns:
            在超时前处理完毕返回True
        """
        with self._idle:
            return self._idle.wait_for(lambda: self._pending <= 0, timeout)
    
    def close(self, timeout: Optional[float] = None) -> None:
        """
        关闭收件箱，丢弃尚未处理的信封并停止后台线程。
        正在投递的信封会投递完毕，关闭后offer一律返回False。
        
        Args:
            timeout: 等待后台线程退出的时间（秒）
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            discarded = 0
            while True:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    break
                discarded += 1
            self._pending -= discarded
            self.dropped += discarded
            if self._pending <= 0:
                self._idle.notify_all()
            self._queue.put_nowait(_STOP)
        if discarded:
            logger.info(f"订阅者 {self.subscriber.name} 收件箱关闭，丢弃 {discarded} 个未处理的信封")
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)
    
    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "pending": self._pending,
                "delivered": self.delivered,
                "failed": self.failed,
                "dropped": self.dropped,
            }


class NotificationDispatcher:
    """
    通知分发器。
    
    订阅者注册表是一个不可变元组，注册和注销在锁内整体替换（写时复制），
    发布时遍历的是当时的快照，不需要加锁。
    """
    
    def __init__(self, inbox_capacity: int = 100, drop_policy: DropPolicy = DropPolicy.DROP_OLDEST):
        """
        初始化通知分发器。
        
        Args:
            inbox_capacity: 每个订阅者收件箱的容量
            drop_policy: 收件箱已满时的丢弃策略
        """
        if inbox_capacity < 1:
            raise ValueError(f"收件箱容量必须至少为1: {inbox_capacity}")
        self.inbox_capacity = inbox_capacity
        self.drop_policy = DropPolicy(drop_policy)
        self._registry: Tuple[SubscriberInbox, ...] = ()
        self._lock = threading.Lock()
        self._closed = False
    
    @property
    def inboxes(self) -> Tuple[SubscriberInbox, ...]:
        return self._registry
    
    @property
    def subscribers(self) -> Tuple[Subscriber, ...]:
        return tuple(inbox.subscriber for inbox in self._registry)
    
    def register(self, subscriber: Subscriber) -> SubscriberInbox:
        """
        注册订阅者，为其创建收件箱并启动后台线程。
        重复注册同一订阅者返回已有的收件箱。
        
        Args:
            subscriber: 订阅者
            
        Returns:
            订阅者的收件箱
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("通知分发器已关闭")
            for inbox in self._registry:
                if inbox.subscriber is subscriber:
                    return inbox
            inbox = SubscriberInbox(subscriber, self.inbox_capacity, self.drop_policy)
            inbox.start()
            self._registry = self._registry + (inbox,)
        logger.info(f"注册通知订阅者: {subscriber.name}")
        return inbox
    
    def unregister(self, subscriber: Subscriber) -> bool:
        """
        注销订阅者并关闭其收件箱。
        
        Args:
            subscriber: 订阅者
            
        Returns:
            订阅者存在并被注销时返回True
        """
        with self._lock:
            removed = [inbox for inbox in self._registry if inbox.subscriber is subscriber]
            if not removed:
                return False
            self._registry = tuple(inbox for inbox in self._registry if inbox.subscriber is not subscriber)
        for inbox in removed:
            inbox.close(timeout=0)
        logger.info(f"注销通知订阅者: {subscriber.name}")
        return True
    
    def publish(self, envelope: NotificationEnvelope) -> int:
        """
        发布信封。不阻塞，不抛出订阅者的异常。
        
        Args:
            envelope: 通知信封
            
        Returns:
            接收了该信封的收件箱数量
        """
        if self._closed:
            logger.warning(f"通知分发器已关闭，忽略 {envelope.entity_kind.value}:{envelope.event_type.value}")
            return 0
        
        handed_off = 0
        for inbox in self._registry:
            try:
                if not inbox.subscriber.accepts(envelope):
                    continue
                if inbox.offer(envelope.copy()):
                    handed_off += 1
            except Exception as e:
                failure = NotificationDeliveryException(inbox.subscriber.name, envelope, e)
                logger.opt(exception=e).error(str(failure))
        
        logger.debug(
            f"发布通知 {envelope.entity_kind.value}:{envelope.event_type.value}，投递给 {handed_off} 个订阅者"
        )
        return handed_off
    
    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        等待所有收件箱处理完毕。
        
        Args:
            timeout: 总的最长等待时间（秒），None表示一直等待
            
        Returns:
            所有收件箱在超时前处理完毕返回True
        """
        expires_at = None if timeout is None else time.monotonic() + timeout
        for inbox in self._registry:
            remaining = None if expires_at is None else max(0.0, expires_at - time.monotonic())
            if not inbox.wait_idle(remaining):
                return False
        return True
    
    def shutdown(self, timeout: Optional[float] = None) -> None:
        """
        关闭分发器：先等待已投递的信封处理完毕（至多timeout秒），再关闭所有收件箱。
        
        Args:
            timeout: 最长等待时间（秒）
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            inboxes = self._registry
            self._registry = ()
        
        expires_at = None if timeout is None else time.monotonic() + timeout
        for inbox in inboxes:
            remaining = None if expires_at is None else max(0.0, expires_at - time.monotonic())
            inbox.wait_idle(remaining)
            remaining = None if expires_at is None else max(0.0, expires_at - time.monotonic())
            inbox.close(remaining)
        logger.info("通知分发器已关闭")
    
    def stats(self) -> Dict[str, Dict[str, int]]:
        return {inbox.subscriber.name: inbox.stats() for inbox in self._registry}
