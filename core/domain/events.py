"""
领域事件模块。
包含DomainEvent基类以及实体变更事件，变更事件在聚合持久化后
被转换为通知信封并交给通知分发器。
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any
import uuid


class EventType(str, Enum):
    """实体变更类型（封闭集合）"""
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


class EntityKind(str, Enum):
    """可被通知的实体种类"""
    ORDER = "order"
    PRODUCT = "product"


class DomainEvent:
    """
    领域事件基类。
    领域事件表示领域模型中发生的重要事件，通常用于跨聚合的业务流程。
    """
    
    def __init__(self):
        """
        初始化领域事件。
        自动设置事件ID和发生时间。
        """
        self.id = uuid.uuid4()
        self.occurred_on = datetime.now(timezone.utc)


class EntityChangedEvent(DomainEvent):
    """
    实体变更事件。
    子类通过类属性entity_kind声明实体种类，实例携带变更类型。
    """
    
    entity_kind: EntityKind = None
    
    def __init__(self, entity_id: Any, event_type: EventType):
        """
        初始化实体变更事件。
        
        Args:
            entity_id: 实体ID（新建实体在持久化前可能为None）
            event_type: 变更类型
        """
        super().__init__()
        self.entity_id = entity_id
        self.event_type = EventType(event_type)
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.entity_kind.value}:{self.event_type.value}, id={self.entity_id})"
