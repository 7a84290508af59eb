"""
商品领域模型中的仓储接口。
"""
from abc import abstractmethod
from datetime import datetime
from typing import Any, List, Optional

from core.domain.repositories import ReadOnlyRepository, Repository
from products.domain.entities import Product


class ProductCatalog(ReadOnlyRepository[Product]):
    """
    商品目录。
    订单校验使用的只读查询接口，返回商品当前的价格和库存。
    """
    
    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[Product]:
        """
        根据ID获取商品。
        
        Args:
            id: 商品ID
            
        Returns:
            找到的商品，如果不存在（或已删除）则返回None
        """
        pass


class ProductRepository(Repository[Product], ProductCatalog):
    """
    商品仓储接口。
    在商品目录之上增加写操作。
    """
    
    def get_by_id(self, id: Any) -> Optional[Product]:
        return self.find_by_id(id)
    
    @abstractmethod
    def find_created_between(self, start: datetime, end: datetime) -> List[Product]:
        """
        查询在[start, end)期间创建且处于激活状态的商品，按创建时间排序。
        
        Args:
            start: 开始时间（包含）
            end: 结束时间（不包含）
            
        Returns:
            商品列表
        """
        pass
