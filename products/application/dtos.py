"""
商品应用服务层的数据传输对象(DTOs)。
"""
from typing import Any, Dict

from products.domain.entities import Product


class ProductDTO:
    """商品DTO"""
    
    def __init__(
        self,
        id: str,
        name: str,
        description: str,
        price: str,
        currency: str,
        stock: int,
        state: str,
        is_available: bool,
        created_at: str,
        updated_at: str,
        version: int
    ):
        self.id = id
        self.name = name
        self.description = description
        self.price = price
        self.currency = currency
        self.stock = stock
        self.state = state
        self.is_available = is_available
        self.created_at = created_at
        self.updated_at = updated_at
        self.version = version
    
    @classmethod
    def from_entity(cls, product: Product) -> 'ProductDTO':
        """
        从商品实体创建DTO。
        
        Args:
            product: 商品实体
            
        Returns:
            商品DTO
        """
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=str(product.price.amount),
            currency=product.price.currency,
            stock=product.stock,
            state=product.state,
            is_available=product.is_available(),
            created_at=product.created_at.isoformat(),
            updated_at=product.updated_at.isoformat(),
            version=product.version,
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "currency": self.currency,
            "stock": self.stock,
            "state": self.state,
            "is_available": self.is_available,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "version": self.version,
        }
