"""
商品领域模型中的事件。
"""
from core.domain.events import EntityChangedEvent, EntityKind


class ProductChangedEvent(EntityChangedEvent):
    """商品变更事件（创建、更新、删除）"""
    
    entity_kind = EntityKind.PRODUCT
