"""
商品领域模型中的实体。
商品是订单校验时使用的商品目录条目：当前价格、库存和上架状态。
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.domain import AggregateRoot, DomainException, EventType, Money
from products.domain.events import ProductChangedEvent


class ProductState:
    """商品状态枚举"""
    DRAFT = "draft"        # 草稿状态，未发布
    ACTIVE = "active"      # 激活状态，可销售
    INACTIVE = "inactive"  # 未激活状态，暂不可销售
    DELETED = "deleted"    # 已删除状态，不可见


class ProductStateException(DomainException):
    """商品状态异常"""
    def __init__(self, current_state: str, target_state: str):
        message = f"商品状态不能从 {current_state} 变更为 {target_state}"
        super().__init__(message)
        self.current_state = current_state
        self.target_state = target_state


class Product(AggregateRoot):
    """
    商品聚合根。
    代表系统中的商品及其库存。
    """
    
    def __init__(
        self,
        id: Any = None,
        name: str = "",
        description: str = "",
        price: Money = None,
        stock: int = 0,
        state: str = ProductState.ACTIVE,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        version: int = 0,
    ):
        """
        初始化商品。
        
        Args:
            id: 商品ID，由仓储在创建时分配
            name: 商品名称
            description: 商品描述
            price: 商品价格
            stock: 可用库存
            state: 商品状态
            created_at: 创建时间
            updated_at: 更新时间
            version: 版本号
        """
        super().__init__(id, version)
        self.name = name
        self.description = description
        self.price = price or Money(0)
        self.stock = stock
        self.state = state
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at
    
    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        price: Money,
        stock: int = 0,
        state: str = ProductState.ACTIVE,
    ) -> 'Product':
        """
        创建新商品，并记录创建事件。
        
        Args:
            name: 商品名称
            description: 商品描述
            price: 商品价格
            stock: 初始库存
            state: 初始状态
            
        Returns:
            新商品（尚未持久化）
        """
        if price.is_negative():
            raise ValueError(f"商品价格不能为负数: {price}")
        if stock < 0:
            raise ValueError(f"库存不能为负数: {stock}")
        product = cls(name=name, description=description, price=price, stock=stock, state=state)
        product.add_domain_event(ProductChangedEvent(None, EventType.CREATED))
        return product
    
    def mark_deleted(self) -> None:
        """标记商品已删除，并记录删除事件"""
        self.state = ProductState.DELETED
        self.updated_at = datetime.now(timezone.utc)
        self.add_domain_event(ProductChangedEvent(self.id, EventType.DELETED))
    
    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
        self.increment_version()
        self.add_domain_event(ProductChangedEvent(self.id, EventType.UPDATED))
    
    def activate(self) -> None:
        """
        激活商品，使其可被购买。
        
        Raises:
            ProductStateException: 如果商品已删除
        """
        if self.state == ProductState.DELETED:
            raise ProductStateException(self.state, ProductState.ACTIVE)
        self.state = ProductState.ACTIVE
        self._touch()
    
    def deactivate(self) -> None:
        """
        停用商品。
        
        Raises:
            ProductStateException: 如果当前状态不允许停用
        """
        if self.state not in [ProductState.ACTIVE, ProductState.DRAFT]:
            raise ProductStateException(self.state, ProductState.INACTIVE)
        self.state = ProductState.INACTIVE
        self._touch()
    
    def update_price(self, new_price: Money) -> None:
        """
        更新商品价格。已下的订单保存了价格快照，不受影响。
        
        Args:
            new_price: 新价格
        """
        if new_price.is_negative():
            raise ValueError(f"商品价格不能为负数: {new_price}")
        self.price = new_price
        self._touch()
    
    def update_stock(self, new_stock: int) -> None:
        """
        更新可用库存。
        
        Args:
            new_stock: 新的可用库存
        """
        if new_stock < 0:
            raise ValueError(f"库存不能为负数: {new_stock}")
        self.stock = new_stock
        self._touch()
    
    def update_basic_info(self, name: Optional[str] = None, description: Optional[str] = None) -> None:
        """
        更新商品基本信息。
        """
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        self._touch()
    
    def is_available(self, quantity: int = 1) -> bool:
        """
        检查商品是否可以按指定数量销售。
        
        Args:
            quantity: 购买数量
            
        Returns:
            商品处于激活状态且库存足够时返回True
        """
        return self.state == ProductState.ACTIVE and self.stock >= quantity
    
    def to_dict(self) -> Dict[str, Any]:
        """
        将商品转换为字典表示。
        """
        return {
            "id": str(self.id) if self.id is not None else None,
            "name": self.name,
            "description": self.description,
            "price": self.price.to_dict(),
            "stock": self.stock,
            "state": self.state,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "version": self.version,
        }
