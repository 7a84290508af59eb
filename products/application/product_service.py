"""
商品应用服务。
处理商品的创建、更新和删除，并把商品变更发布给实时推送订阅者。
"""
from typing import List, Optional

from loguru import logger

from core.domain import Money
from core.domain.events import DomainEvent
from core.infrastructure.transaction import TransactionManager
from notifications.dispatcher import NotificationDispatcher
from notifications.domain import NotificationEnvelope
from orders.domain.exceptions import NotFoundException
from products.application.commands import CreateProductCommand, DeleteProductCommand, UpdateProductCommand
from products.application.dtos import ProductDTO
from products.application.queries import GetProductQuery
from products.domain.entities import Product, ProductState
from products.domain.repositories import ProductRepository


class ProductApplicationService:
    """
    商品应用服务。
    处理商品相关的应用层逻辑，协调仓储和通知分发器。
    """
    
    def __init__(
        self,
        product_repository: ProductRepository,
        dispatcher: NotificationDispatcher,
        transaction_manager: TransactionManager
    ):
        """
        初始化商品应用服务。
        
        Args:
            product_repository: 商品仓储
            dispatcher: 通知分发器
            transaction_manager: 事务管理器
        """
        self.product_repository = product_repository
        self.dispatcher = dispatcher
        self.transaction_manager = transaction_manager
    
    def _load(self, product_id: str) -> Product:
        product = self.product_repository.find_by_id(product_id)
        if product is None:
            raise NotFoundException(NotFoundException.PRODUCT, product_id)
        return product
    
    def _publish(self, product: Product, events: List[DomainEvent]) -> None:
        """
        发布商品变更通知，同一类型的多个事件只发布一次。
        """
        payload = ProductDTO.from_entity(product).to_dict()
        published = set()
        for event in events:
            if event.event_type in published:
                continue
            published.add(event.event_type)
            try:
                self.dispatcher.publish(NotificationEnvelope.from_event(event, payload))
            except Exception as e:
                logger.opt(exception=e).error(f"发布商品 {product.id} 变更通知失败: {e}")
    
    # ==================== 命令处理方法 ====================
    
    def create_product(self, command: CreateProductCommand) -> ProductDTO:
        """
        创建商品。
        
        Args:
            command: 创建商品命令
            
        Returns:
            创建的商品DTO
        """
        try:
            product = Product.create(
                name=command.name,
                description=command.description,
                price=Money(command.price),
                stock=command.stock,
                state=ProductState.ACTIVE if command.active else ProductState.INACTIVE,
            )
            events = product.clear_domain_events()
            with self.transaction_manager.start("创建商品"):
                product = self.product_repository.save(product)
        except Exception as e:
            logger.error(f"创建商品失败: {e}")
            raise
        
        logger.info(f"商品已创建: {product.id}")
        self._publish(product, events)
        return ProductDTO.from_entity(product)
    
    def update_product(self, command: UpdateProductCommand) -> ProductDTO:
        """
        更新商品。
        
        Args:
            command: 更新商品命令
            
        Returns:
            更新后的商品DTO
        """
        try:
            product = self._load(command.id)
            if command.name is not None or command.description is not None:
                product.update_basic_info(command.name, command.description)
            if command.price is not None:
                product.update_price(Money(command.price, product.price.currency))
            if command.stock is not None:
                product.update_stock(command.stock)
            if command.active is True:
                product.activate()
            elif command.active is False:
                product.deactivate()
            
            events = product.clear_domain_events()
            with self.transaction_manager.start("更新商品"):
                product = self.product_repository.save(product)
        except Exception as e:
            logger.error(f"更新商品失败: {e}")
            raise
        
        self._publish(product, events)
        return ProductDTO.from_entity(product)
    
    def delete_product(self, command: DeleteProductCommand) -> ProductDTO:
        """
        删除商品。
        
        Args:
            command: 删除商品命令
            
        Returns:
            删除前的商品DTO
        """
        try:
            product = self._load(command.id)
            product.mark_deleted()
            events = product.clear_domain_events()
            with self.transaction_manager.start("删除商品"):
                deleted = self.product_repository.delete_by_id(product.id)
            if not deleted:
                raise NotFoundException(NotFoundException.PRODUCT, command.id)
        except Exception as e:
            logger.error(f"删除商品失败: {e}")
            raise
        
        self._publish(product, events)
        return ProductDTO.from_entity(product)
    
    # ==================== 查询处理方法 ====================
    
    def get_product(self, query: GetProductQuery) -> ProductDTO:
        """
        获取商品。
        
        Args:
            query: 获取商品查询
            
        Returns:
            商品DTO
        """
        return ProductDTO.from_entity(self._load(query.id))
