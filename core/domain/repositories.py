"""
仓储接口模块。
定义仓储接口，用于持久化和检索领域对象。
"""
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

T = TypeVar('T')


class Repository(Generic[T], ABC):
    """
    仓储接口。
    定义了所有仓储必须实现的基本操作。
    所有方法都接受一个可选的截止时间(Deadline)，实现必须保证
    超时时不会留下部分写入的数据。
    """
    
    @abstractmethod
    def find_by_id(self, id: Any, deadline: Any = None) -> Optional[T]:
        """
        根据ID获取实体。
        
        Args:
            id: 实体ID
            deadline: 截止时间
            
        Returns:
            找到的实体，如果不存在则返回None
        """
        pass
    
    @abstractmethod
    def save(self, entity: T, deadline: Any = None) -> T:
        """
        保存实体。
        如果实体已存在则更新，否则创建并分配ID。
        
        Args:
            entity: 要保存的实体
            deadline: 截止时间
            
        Returns:
            保存后的实体
        """
        pass
    
    @abstractmethod
    def delete_by_id(self, id: Any, deadline: Any = None) -> bool:
        """
        删除实体。
        
        Args:
            id: 实体ID
            deadline: 截止时间
            
        Returns:
            实体存在并被删除时返回True，不存在时返回False
        """
        pass


class ReadOnlyRepository(Generic[T], ABC):
    """
    只读仓储接口。
    适用于只需要查询的协作方，例如订单校验时使用的商品目录。
    """
    
    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[T]:
        """
        根据ID获取实体。
        
        Args:
            id: 实体ID
            
        Returns:
            找到的实体，如果不存在则返回None
        """
        pass
