"""
商品应用服务层的命令对象。
定义用于修改系统状态的命令。
"""
from decimal import Decimal
from typing import Optional


class CreateProductCommand:
    """创建商品命令"""
    
    def __init__(
        self,
        name: str,
        description: str,
        price: Decimal,
        stock: int = 0,
        active: bool = True
    ):
        """
        初始化创建商品命令。
        
        Args:
            name: 商品名称
            description: 商品描述
            price: 商品价格
            stock: 初始库存
            active: 是否立即上架
        """
        self.name = name
        self.description = description
        self.price = price
        self.stock = stock
        self.active = active


class UpdateProductCommand:
    """更新商品命令，None表示不修改"""
    
    def __init__(
        self,
        id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Optional[Decimal] = None,
        stock: Optional[int] = None,
        active: Optional[bool] = None
    ):
        """
        初始化更新商品命令。
        
        Args:
            id: 商品ID
            name: 商品名称
            description: 商品描述
            price: 商品价格
            stock: 可用库存
            active: 上架或下架
        """
        self.id = id
        self.name = name
        self.description = description
        self.price = price
        self.stock = stock
        self.active = active


class DeleteProductCommand:
    """删除商品命令"""
    
    def __init__(self, id: str):
        self.id = id
