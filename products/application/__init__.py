"""
商品应用服务层。
"""

from products.application.commands import CreateProductCommand, UpdateProductCommand, DeleteProductCommand
from products.application.dtos import ProductDTO
from products.application.product_service import ProductApplicationService
from products.application.queries import GetProductQuery

__all__ = [
    'CreateProductCommand',
    'UpdateProductCommand',
    'DeleteProductCommand',
    'ProductDTO',
    'ProductApplicationService',
    'GetProductQuery',
]
