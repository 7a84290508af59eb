"""
订单基础设施层工厂。
负责按配置组装订单应用服务：构建器、仓储、通知分发器和事务管理器。
"""
from core.infrastructure.transaction import DjangoTransactionManager, TransactionManager
from notifications.dispatcher import NotificationDispatcher
from notifications.factory import get_notification_dispatcher
from orders.application.order_service import OrderApplicationService
from orders.domain import config
from orders.domain.builder import OrderAggregateBuilder
from orders.domain.repositories import OrderRepository
from orders.infrastructure.repositories.django_order_repository import DjangoOrderRepository
from products.domain import ProductCatalog
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository


class OrderInfrastructureFactory:
    """
    订单基础设施层工厂类。
    """
    
    def __init__(self, transaction_manager: TransactionManager, dispatcher: NotificationDispatcher):
        """
        初始化订单基础设施层工厂。
        
        Args:
            transaction_manager: 事务管理器
            dispatcher: 通知分发器
        """
        self.transaction_manager = transaction_manager
        self.dispatcher = dispatcher
        
        # 存储已创建的实例
        self._order_repository = None
        self._catalog = None
    
    def create_order_repository(self) -> OrderRepository:
        """
        创建订单仓储。
        
        Returns:
            订单仓储实例
        """
        if not self._order_repository:
            self._order_repository = DjangoOrderRepository(soft_delete=config.SOFT_DELETE)
        
        return self._order_repository
    
    def create_product_catalog(self) -> ProductCatalog:
        """
        创建商品目录。
        
        Returns:
            商品目录实例
        """
        if not self._catalog:
            self._catalog = DjangoProductRepository()
        
        return self._catalog
    
    def create_order_service(self) -> OrderApplicationService:
        """
        创建订单应用服务。
        
        Returns:
            订单应用服务实例
        """
        return OrderApplicationService(
            builder=OrderAggregateBuilder(self.create_product_catalog()),
            order_repository=self.create_order_repository(),
            dispatcher=self.dispatcher,
            transaction_manager=self.transaction_manager,
            default_timeout=config.OPERATION_TIMEOUT
        )


def get_order_service() -> OrderApplicationService:
    """获取订单应用服务实例"""
    factory = OrderInfrastructureFactory(
        transaction_manager=DjangoTransactionManager(),
        dispatcher=get_notification_dispatcher()
    )
    return factory.create_order_service()
