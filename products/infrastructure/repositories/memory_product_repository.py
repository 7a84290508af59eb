"""
商品仓储的内存实现。
用于单元测试和不需要数据库的场景。
"""
import copy
import threading
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.infrastructure.timeouts import Deadline
from products.domain.entities import Product, ProductState
from products.domain.repositories import ProductRepository


class InMemoryProductRepository(ProductRepository):
    """基于字典的商品仓储实现"""
    
    def __init__(self, products: Optional[list] = None):
        self._products: Dict[str, Product] = {}
        self._lock = threading.Lock()
        self.lookups = 0
        for product in products or []:
            self.save(product)
    
    def find_by_id(self, id: Any, deadline: Optional[Deadline] = None) -> Optional[Product]:
        (deadline or Deadline.unbounded()).check("查询商品")
        with self._lock:
            self.lookups += 1
            product = self._products.get(str(id))
            if product is None or product.state == ProductState.DELETED:
                return None
            return copy.deepcopy(product)
    
    def save(self, product: Product, deadline: Optional[Deadline] = None) -> Product:
        deadline = deadline or Deadline.unbounded()
        with self._lock:
            product_id = product.id if not product.is_transient else uuid.uuid4()
            deadline.check("保存商品")
            product.id = product_id
            stored = copy.deepcopy(product)
            stored.clear_domain_events()
            self._products[str(product_id)] = stored
        return product
    
    def delete_by_id(self, id: Any, deadline: Optional[Deadline] = None) -> bool:
        deadline = deadline or Deadline.unbounded()
        with self._lock:
            product = self._products.get(str(id))
            if product is None or product.state == ProductState.DELETED:
                return False
            deadline.check("删除商品")
            product.state = ProductState.DELETED
        return True
    
    def find_created_between(self, start: datetime, end: datetime) -> List[Product]:
        with self._lock:
            found = [
                copy.deepcopy(product) for product in self._products.values()
                if product.state == ProductState.ACTIVE and start <= product.created_at < end
            ]
        return sorted(found, key=lambda product: product.created_at)
