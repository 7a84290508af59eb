"""
商品基础设施层工厂。
负责创建和管理基础设施层对象，包括仓储和应用服务实例。
"""
from core.infrastructure.transaction import DjangoTransactionManager, TransactionManager
from notifications.dispatcher import NotificationDispatcher
from notifications.factory import get_notification_dispatcher
from products.application.product_service import ProductApplicationService
from products.domain import ProductRepository
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository


class ProductInfrastructureFactory:
    """
    商品基础设施层工厂类。
    负责创建商品领域的基础设施层对象，如仓储和服务实例。
    """
    
    def __init__(self, transaction_manager: TransactionManager, dispatcher: NotificationDispatcher):
        """
        初始化商品基础设施层工厂。
        
        Args:
            transaction_manager: 事务管理器
            dispatcher: 通知分发器
        """
        self.transaction_manager = transaction_manager
        self.dispatcher = dispatcher
        
        # 存储已创建的实例
        self._product_repository = None
    
    def create_product_repository(self) -> ProductRepository:
        """
        创建商品仓储。
        
        Returns:
            商品仓储实例
        """
        if not self._product_repository:
            self._product_repository = DjangoProductRepository()
        
        return self._product_repository
    
    def create_product_service(self) -> ProductApplicationService:
        """
        创建商品应用服务。
        
        Returns:
            商品应用服务实例
        """
        return ProductApplicationService(
            product_repository=self.create_product_repository(),
            dispatcher=self.dispatcher,
            transaction_manager=self.transaction_manager
        )


def get_product_service() -> ProductApplicationService:
    """获取商品应用服务实例"""
    factory = ProductInfrastructureFactory(
        transaction_manager=DjangoTransactionManager(),
        dispatcher=get_notification_dispatcher()
    )
    return factory.create_product_service()
