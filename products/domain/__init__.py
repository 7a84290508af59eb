"""
商品领域模型包。
提供商品实体、商品目录和仓储接口、领域事件。
"""

from products.domain.entities import Product, ProductState, ProductStateException
from products.domain.events import ProductChangedEvent
from products.domain.repositories import ProductCatalog, ProductRepository

__all__ = [
    'Product',
    'ProductState',
    'ProductStateException',
    'ProductChangedEvent',
    'ProductCatalog',
    'ProductRepository',
]
