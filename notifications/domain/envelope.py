"""
通知信封。
"""
import copy
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generic, TypeVar

from django.core.serializers.json import DjangoJSONEncoder

from core.domain.events import EntityChangedEvent, EntityKind, EventType

T = TypeVar('T')


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class NotificationEnvelope(Generic[T]):
    """
    通知信封。
    携带实体种类、变更类型和负载（实体快照）。信封不可变，
    分发器交给每个订阅者的是各自独立的副本。
    """
    entity_kind: EntityKind
    event_type: EventType
    payload: T
    emitted_at: datetime = field(default_factory=_utc_now)
    
    def __post_init__(self):
        # 接受字符串形式的枚举值
        object.__setattr__(self, 'entity_kind', EntityKind(self.entity_kind))
        object.__setattr__(self, 'event_type', EventType(self.event_type))
    
    @classmethod
    def from_event(cls, event: EntityChangedEvent, payload: T) -> 'NotificationEnvelope[T]':
        """
        根据实体变更事件创建信封。
        
        Args:
            event: 实体变更事件
            payload: 实体快照
            
        Returns:
            通知信封
        """
        return cls(entity_kind=event.entity_kind, event_type=event.event_type, payload=payload)
    
    def copy(self) -> 'NotificationEnvelope[T]':
        """返回负载深拷贝后的新信封"""
        return NotificationEnvelope(
            entity_kind=self.entity_kind,
            event_type=self.event_type,
            payload=copy.deepcopy(self.payload),
            emitted_at=self.emitted_at,
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """
        转换为推送给客户端的字典表示。
        
        Returns:
            包含entity、type、data、createdAt的字典
        """
        return {
            "entity": self.entity_kind.value,
            "type": self.event_type.value,
            "data": self.payload,
            "createdAt": self.emitted_at.isoformat(),
        }
    
    def to_json(self) -> str:
        """序列化为JSON字符串"""
        return json.dumps(self.to_dict(), cls=DjangoJSONEncoder, ensure_ascii=False)
