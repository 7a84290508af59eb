"""
订单仓储的Django实现。
"""
from typing import Any, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from loguru import logger

from core.infrastructure.timeouts import Deadline, statement_timeout
from orders.domain.aggregates import OrderAggregate
from orders.domain.exceptions import NotFoundException
from orders.domain.repositories import OrderRepository
from orders.domain.value_objects import Address, Customer, LineItem
from orders.infrastructure.models.order_models import Order as OrderModel, OrderLine as OrderLineModel


class DjangoOrderRepository(OrderRepository):
    """
    基于Django ORM的订单仓储实现。
    
    写操作在atomic块中锁定订单行(select_for_update)，每次保存都整体替换订单行，
    并在提交前检查截止时间，超时则整个事务回滚。
    """
    
    def __init__(self, soft_delete: bool = True):
        """
        初始化订单仓储。
        
        Args:
            soft_delete: 删除时是否只标记is_deleted
        """
        self.soft_delete = soft_delete
    
    def find_by_id(self, id: Any, deadline: Optional[Deadline] = None) -> Optional[OrderAggregate]:
        """
        根据ID获取订单。
        
        Args:
            id: 订单ID
            deadline: 截止时间
            
        Returns:
            找到的订单，如果不存在或已删除则返回None
        """
        deadline = deadline or Deadline.unbounded()
        with deadline.guard("查询订单"), statement_timeout(deadline):
            try:
                order_model = OrderModel.objects.prefetch_related('lines').get(id=str(id), is_deleted=False)
            except (OrderModel.DoesNotExist, ValidationError, ValueError, TypeError):
                return None
            return self._to_domain(order_model)
    
    def find_by_customer(self, customer_id: Any, deadline: Optional[Deadline] = None) -> List[OrderAggregate]:
        deadline = deadline or Deadline.unbounded()
        with deadline.guard("查询客户订单"), statement_timeout(deadline):
            queryset = OrderModel.objects.prefetch_related('lines').filter(
                customer_id=str(customer_id),
                is_deleted=False
            ).order_by('-created_at')
            return [self._to_domain(order_model) for order_model in queryset]
    
    def save(self, order: OrderAggregate, deadline: Optional[Deadline] = None) -> OrderAggregate:
        """
        保存订单。首次保存时分配订单ID。
        
        Args:
            order: 订单聚合根
            deadline: 截止时间
            
        Returns:
            带有ID的订单聚合根
        """
        deadline = deadline or Deadline.unbounded()
        with deadline.guard("保存订单", check_after=False):
            with statement_timeout(deadline), transaction.atomic():
                if order.is_transient:
                    order_model = OrderModel()
                else:
                    order_model = OrderModel.objects.select_for_update().filter(
                        id=str(order.id),
                        is_deleted=False
                    ).first()
                    if order_model is None:
                        # 订单在加载之后被并发删除
                        raise NotFoundException(NotFoundException.ORDER, order.id)
                
                self._apply(order, order_model)
                order_model.save()
                
                # 整体替换订单行
                OrderLineModel.objects.filter(order=order_model).delete()
                OrderLineModel.objects.bulk_create([
                    OrderLineModel(
                        order=order_model,
                        position=position,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        unit_price=line.unit_price,
                        quantity=line.quantity,
                    )
                    for position, line in enumerate(order.lines)
                ])
                
                # 超时则抛出异常，atomic块回滚
                deadline.check("保存订单")
        
        order.id = order_model.id
        logger.debug(f"订单已保存: {order.id}，版本 {order.version}")
        return order
    
    def delete_by_id(self, id: Any, deadline: Optional[Deadline] = None) -> bool:
        """
        删除订单。
        
        Args:
            id: 订单ID
            deadline: 截止时间
            
        Returns:
            订单存在并被删除时返回True
        """
        deadline = deadline or Deadline.unbounded()
        with deadline.guard("删除订单", check_after=False):
            with statement_timeout(deadline), transaction.atomic():
                order_model = OrderModel.objects.select_for_update().filter(
                    id=str(id),
                    is_deleted=False
                ).first()
                if order_model is None:
                    return False
                
                if self.soft_delete:
                    order_model.is_deleted = True
                    order_model.updated_at = timezone.now()
                    order_model.save(update_fields=['is_deleted', 'updated_at'])
                else:
                    order_model.delete()
                
                deadline.check("删除订单")
        
        logger.debug(f"订单已删除: {id}，软删除: {self.soft_delete}")
        return True
    
    def _apply(self, order: OrderAggregate, order_model: OrderModel) -> None:
        customer = order.customer
        address = customer.address
        order_model.customer_id = str(order.customer_id)
        order_model.full_name = customer.full_name
        order_model.email = customer.email
        order_model.phone = customer.phone
        order_model.street = address.street
        order_model.number = address.number
        order_model.city = address.city
        order_model.province = address.province
        order_model.country = address.country
        order_model.postal_code = address.postal_code
        order_model.total_items = order.total_items
        order_model.total_amount = order.total_amount
        order_model.is_deleted = order.is_deleted
        order_model.version = order.version
        order_model.created_at = order.created_at
        order_model.updated_at = order.updated_at
    
    def _to_domain(self, order_model: OrderModel) -> OrderAggregate:
        """
        将数据库模型转换为订单聚合根。
        """
        customer = Customer(
            full_name=order_model.full_name,
            email=order_model.email,
            phone=order_model.phone,
            address=Address(
                street=order_model.street,
                number=order_model.number,
                city=order_model.city,
                province=order_model.province,
                country=order_model.country,
                postal_code=order_model.postal_code,
            ),
        )
        lines = [
            LineItem(
                product_id=line.product_id,
                product_name=line.product_name,
                unit_price=line.unit_price,
                quantity=line.quantity,
            )
            for line in order_model.lines.all()
        ]
        return OrderAggregate(
            customer_id=order_model.customer_id,
            customer=customer,
            lines=lines,
            id=order_model.id,
            created_at=order_model.created_at,
            updated_at=order_model.updated_at,
            is_deleted=order_model.is_deleted,
            version=order_model.version,
        )
