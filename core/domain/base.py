"""
核心领域模型基类模块。
包含Entity基类，用于所有具有唯一标识的领域对象。
"""
from typing import Any


class Entity:
    """
    实体基类。
    实体是具有唯一标识的领域对象，其相等性通过标识而非属性值判断。
    标识由仓储在首次保存时分配，保存之前实体处于瞬时状态。
    """
    def __init__(self, id: Any = None):
        """
        初始化实体。
        
        Args:
            id: 实体标识，未持久化的实体为None
        """
        self.id = id
    
    @property
    def is_transient(self) -> bool:
        """实体是否尚未被仓储分配标识"""
        return self.id is None
    
    def __eq__(self, other: Any) -> bool:
        """
        判断两个实体是否相等，通过比较它们的标识。
        瞬时实体只与自身相等。
        
        Args:
            other: 另一个实体
            
        Returns:
            如果两个实体标识相等，则返回True；否则返回False
        """
        if not isinstance(other, Entity):
            return False
        if self.is_transient or other.is_transient:
            return self is other
        return type(self) is type(other) and self.id == other.id
    
    def __hash__(self) -> int:
        """
        计算实体的哈希值，基于其标识。
        
        Returns:
            实体标识的哈希值
        """
        if self.is_transient:
            return id(self)
        return hash(self.id)
