"""
商品仓储的Django实现。
"""
from datetime import datetime
from typing import Any, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from core.domain.value_objects import Money
from core.infrastructure.timeouts import Deadline, statement_timeout
from products.domain.entities import Product, ProductState
from products.domain.repositories import ProductRepository
from products.infrastructure.models.product_models import Product as ProductModel


class DjangoProductRepository(ProductRepository):
    """
    基于Django ORM的商品仓储实现。
    已删除的商品对查询不可见。
    """
    
    def find_by_id(self, id: Any, deadline: Optional[Deadline] = None) -> Optional[Product]:
        """
        根据ID获取商品。
        
        Args:
            id: 商品ID
            deadline: 截止时间
            
        Returns:
            找到的商品，如果不存在则返回None
        """
        deadline = deadline or Deadline.unbounded()
        with deadline.guard("查询商品"), statement_timeout(deadline):
            try:
                product_model = ProductModel.objects.exclude(state=ProductState.DELETED).get(id=str(id))
            except (ProductModel.DoesNotExist, ValidationError, ValueError, TypeError):
                return None
            return self._to_domain(product_model)
    
    def save(self, product: Product, deadline: Optional[Deadline] = None) -> Product:
        """
        保存商品。首次保存时分配商品ID。
        
        Args:
            product: 商品
            deadline: 截止时间
            
        Returns:
            带有ID的商品
        """
        deadline = deadline or Deadline.unbounded()
        with deadline.guard("保存商品", check_after=False):
            with statement_timeout(deadline), transaction.atomic():
                if product.is_transient:
                    product_model = ProductModel()
                else:
                    product_model = ProductModel.objects.select_for_update().filter(id=str(product.id)).first()
                    if product_model is None:
                        product_model = ProductModel(id=product.id)
                
                product_model.name = product.name
                product_model.description = product.description
                product_model.price_amount = product.price.amount
                product_model.price_currency = product.price.currency
                product_model.stock = product.stock
                product_model.state = product.state
                product_model.version = product.version
                product_model.created_at = product.created_at
                product_model.updated_at = product.updated_at
                product_model.save()
                
                deadline.check("保存商品")
        
        product.id = product_model.id
        return product
    
    def delete_by_id(self, id: Any, deadline: Optional[Deadline] = None) -> bool:
        """
        删除商品。商品只做状态删除，已下订单中的快照不受影响。
        
        Args:
            id: 商品ID
            deadline: 截止时间
            
        Returns:
            商品存在并被删除时返回True
        """
        deadline = deadline or Deadline.unbounded()
        with deadline.guard("删除商品", check_after=False):
            with statement_timeout(deadline), transaction.atomic():
                updated = ProductModel.objects.filter(id=str(id)).exclude(
                    state=ProductState.DELETED
                ).update(state=ProductState.DELETED)
                deadline.check("删除商品")
        return updated > 0
    
    def find_created_between(self, start: datetime, end: datetime) -> List[Product]:
        """
        查询在[start, end)期间创建且处于激活状态的商品。
        
        Args:
            start: 开始时间（包含）
            end: 结束时间（不包含）
            
        Returns:
            按创建时间排序的商品列表
        """
        queryset = ProductModel.objects.filter(
            state=ProductState.ACTIVE,
            created_at__gte=start,
            created_at__lt=end,
        ).order_by("created_at")
        return [self._to_domain(product_model) for product_model in queryset]
    
    def _to_domain(self, product_model: ProductModel) -> Product:
        """
        将数据库模型转换为商品实体。
        """
        return Product(
            id=product_model.id,
            name=product_model.name,
            description=product_model.description,
            price=Money(product_model.price_amount, product_model.price_currency),
            stock=product_model.stock,
            state=product_model.state,
            created_at=product_model.created_at,
            updated_at=product_model.updated_at,
            version=product_model.version,
        )
