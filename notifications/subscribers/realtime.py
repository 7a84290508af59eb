"""
实时推送订阅者。
把订单和商品的变更推送给已连接的客户端。
"""
import threading
import uuid
from abc import ABC, abstractmethod
from collections import deque
from typing import FrozenSet, List, Optional

import redis
from loguru import logger

from core.domain.events import EntityKind
from notifications.dispatcher import Subscriber
from notifications.domain import NotificationEnvelope


class RealtimeChannel(ABC):
    """实时推送通道接口"""
    
    @abstractmethod
    def broadcast(self, envelope: NotificationEnvelope) -> int:
        """
        广播信封。
        
        Args:
            envelope: 通知信封
            
        Returns:
            接收到消息的会话（或Redis订阅者）数量
        """
        pass


class RedisRealtimeChannel(RealtimeChannel):
    """
    基于Redis发布/订阅的实时推送通道。
    频道名为 "<前缀>:<实体种类>"，消息体为信封的JSON表示。
    """
    
    def __init__(self, client: Optional[redis.Redis] = None, channel_prefix: str = "tienda"):
        """
        初始化Redis推送通道。
        
        Args:
            client: Redis客户端，默认使用django-redis的default连接
            channel_prefix: 频道名前缀
        """
        self._client = client
        self.channel_prefix = channel_prefix
    
    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            from django_redis import get_redis_connection
            self._client = get_redis_connection("default")
        return self._client
    
    def channel_for(self, envelope: NotificationEnvelope) -> str:
        return f"{self.channel_prefix}:{envelope.entity_kind.value}"
    
    def broadcast(self, envelope: NotificationEnvelope) -> int:
        channel = self.channel_for(envelope)
        try:
            receivers = self.client.publish(channel, envelope.to_json())
        except redis.RedisError as e:
            logger.error(f"推送到Redis频道 {channel} 失败: {e}")
            return 0
        logger.debug(f"推送到Redis频道 {channel}，接收者 {receivers} 个")
        return receivers


class RealtimeSession:
    """
    实时推送会话。
    每个会话有一个有界缓冲区，客户端读取不及时时丢弃最早的消息。
    """
    
    def __init__(self, session_id: Optional[str] = None, buffer_size: int = 100):
        self.session_id = session_id or uuid.uuid4().hex
        self._messages = deque(maxlen=buffer_size)
        self._lock = threading.Lock()
        self.open = True
    
    def send(self, message: dict) -> bool:
        with self._lock:
            if not self.open:
                return False
            self._messages.append(message)
            return True
    
    def receive_all(self) -> List[dict]:
        """取出并清空缓冲区中的所有消息"""
        with self._lock:
            messages = list(self._messages)
            self._messages.clear()
            return messages
    
    def close(self) -> None:
        with self._lock:
            self.open = False


class InMemoryRealtimeChannel(RealtimeChannel):
    """
    进程内实时推送通道。
    已连接会话保存在不可变集合中，连接和断开时在锁内整体替换。
    """
    
    WELCOME_MESSAGE = {"type": "WELCOME", "message": "已连接实时通知"}
    
    def __init__(self, buffer_size: int = 100):
        self.buffer_size = buffer_size
        self._sessions: FrozenSet[RealtimeSession] = frozenset()
        self._lock = threading.Lock()
    
    @property
    def sessions(self) -> FrozenSet[RealtimeSession]:
        return self._sessions
    
    def connect(self, session_id: Optional[str] = None) -> RealtimeSession:
        """
        建立会话并发送欢迎消息。
        
        Args:
            session_id: 会话ID，默认随机生成
            
        Returns:
            新会话
        """
        session = RealtimeSession(session_id, self.buffer_size)
        with self._lock:
            self._sessions = self._sessions | {session}
        session.send(dict(self.WELCOME_MESSAGE))
        logger.info(f"实时会话已连接: {session.session_id}")
        return session
    
    def disconnect(self, session: RealtimeSession) -> None:
        """
        断开会话。
        
        Args:
            session: 会话
        """
        session.close()
        with self._lock:
            self._sessions = self._sessions - {session}
        logger.info(f"实时会话已断开: {session.session_id}")
    
    def broadcast(self, envelope: NotificationEnvelope) -> int:
        sent = 0
        for session in self._sessions:
            # 每个会话持有独立的消息副本
            if session.open and session.send(envelope.copy().to_dict()):
                sent += 1
        return sent


class RealtimeNotifier(Subscriber):
    """
    实时推送通知者。
    接收订单和商品的所有变更。
    """
    
    entity_kinds = frozenset({EntityKind.ORDER, EntityKind.PRODUCT})
    
    def __init__(self, channel: RealtimeChannel):
        self.channel = channel
    
    def deliver(self, envelope: NotificationEnvelope) -> None:
        self.channel.broadcast(envelope)
