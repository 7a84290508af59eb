"""
订单领域模型中的事件。
"""
from core.domain.events import EntityChangedEvent, EntityKind


class OrderChangedEvent(EntityChangedEvent):
    """订单变更事件（创建、更新、删除）"""
    
    entity_kind = EntityKind.ORDER
