"""
订单应用服务。
编排订单的校验、持久化和变更通知：
构建器（纯校验）-> 仓储（持久写入）-> 通知分发器（异步扇出）。
"""
from enum import Enum
from typing import Any, List, Optional

from loguru import logger

from core.domain.events import DomainEvent
from core.domain.exceptions import AuthorizationException, TransientInfrastructureException
from core.infrastructure.timeouts import Deadline
from core.infrastructure.transaction import TransactionManager
from notifications.dispatcher import NotificationDispatcher
from notifications.domain import NotificationEnvelope
from orders.application.commands import CreateOrderCommand, DeleteOrderCommand, UpdateOrderCommand
from orders.application.dtos import DeleteOrderResultDTO, OrderDTO
from orders.application.queries import GetOrderQuery, ListCustomerOrdersQuery
from orders.domain.aggregates import OrderAggregate
from orders.domain.builder import OrderAggregateBuilder
from orders.domain.exceptions import NotFoundException, OrderException
from orders.domain.repositories import OrderRepository


class OrderPipelineState(str, Enum):
    """订单处理流水线状态"""
    REQUESTED = "REQUESTED"
    VALIDATED = "VALIDATED"
    PERSISTED = "PERSISTED"
    NOTIFIED = "NOTIFIED"
    REJECTED_VALIDATION = "REJECTED_VALIDATION"  # 校验失败，未做任何持久化
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"    # 持久化失败，不发送通知
    TRANSIENT_FAILURE = "TRANSIENT_FAILURE"      # 商品目录超时或不可用，可重试


class OrderApplicationService:
    """
    订单应用服务。
    处理订单的创建、更新、删除和查询。
    
    持久化成功后才发布通知；通知发布失败只记录日志，不会撤销已持久化的订单。
    """
    
    def __init__(
        self,
        builder: OrderAggregateBuilder,
        order_repository: OrderRepository,
        dispatcher: NotificationDispatcher,
        transaction_manager: TransactionManager,
        default_timeout: Optional[float] = None
    ):
        """
        初始化订单应用服务。
        
        Args:
            builder: 订单聚合构建器
            order_repository: 订单仓储
            dispatcher: 通知分发器
            transaction_manager: 事务管理器
            default_timeout: 命令未指定超时时使用的默认超时时间（秒）
        """
        self.builder = builder
        self.order_repository = order_repository
        self.dispatcher = dispatcher
        self.transaction_manager = transaction_manager
        self.default_timeout = default_timeout
    
    def _deadline(self, timeout: Optional[float]) -> Deadline:
        return Deadline(timeout if timeout is not None else self.default_timeout)
    
    @staticmethod
    def _transition(operation: str, order_id: Any, state: OrderPipelineState) -> None:
        if state in (
            OrderPipelineState.REJECTED_VALIDATION,
            OrderPipelineState.PERSISTENCE_FAILED,
            OrderPipelineState.TRANSIENT_FAILURE,
        ):
            logger.warning(f"{operation} 订单 {order_id}: {state.value}")
        else:
            logger.info(f"{operation} 订单 {order_id}: {state.value}")
    
    @staticmethod
    def _check_access(user_id: Any, is_staff: bool, customer_id: Any, operation: str, order_id: Any = None) -> None:
        """
        非管理员只能访问自己的订单。
        
        Raises:
            AuthorizationException: 无权访问
        """
        if user_id is None or is_staff:
            return
        if str(user_id) != str(customer_id):
            resource = f"订单 {order_id}" if order_id is not None else f"客户 {customer_id} 的订单"
            raise AuthorizationException(user_id, operation, resource)
    
    def _load(self, order_id: Any, deadline: Deadline) -> OrderAggregate:
        with deadline.guard("查询订单"):
            order = self.order_repository.find_by_id(order_id, deadline=deadline)
        if order is None:
            raise NotFoundException(NotFoundException.ORDER, order_id)
        return order
    
    def _publish(self, order: OrderAggregate, events: List[DomainEvent]) -> None:
        """
        把持久化后的订单变更事件发布给通知分发器。
        负载是发布时订单的快照。
        """
        if not events:
            return
        payload = order.to_dict()
        for event in events:
            try:
                envelope = NotificationEnvelope.from_event(event, payload)
                self.dispatcher.publish(envelope)
            except Exception as e:
                logger.opt(exception=e).error(f"发布订单 {order.id} 变更通知失败: {e}")
    
    # ==================== 命令处理方法 ====================
    
    def create_order(self, command: CreateOrderCommand) -> OrderDTO:
        """
        创建订单。
        
        Args:
            command: 创建订单命令
            
        Returns:
            创建的订单DTO
            
        Raises:
            AuthorizationException: 非管理员为其他客户下单
            OrderException: 订单校验失败
            TransientInfrastructureException: 超时或依赖不可用
        """
        operation = "创建订单"
        self._check_access(command.user_id, command.is_staff, command.customer_id, operation)
        deadline = self._deadline(command.timeout)
        self._transition(operation, None, OrderPipelineState.REQUESTED)
        
        try:
            order = self.builder.build(
                command.customer_id,
                command.customer,
                command.lines,
                deadline=deadline,
            )
        except OrderException as e:
            self._transition(operation, None, OrderPipelineState.REJECTED_VALIDATION)
            logger.info(f"{operation}被拒绝: {e}")
            raise
        except TransientInfrastructureException as e:
            self._transition(operation, None, OrderPipelineState.TRANSIENT_FAILURE)
            logger.warning(f"{operation}暂时失败: {e}")
            raise
        self._transition(operation, None, OrderPipelineState.VALIDATED)
        
        events = order.clear_domain_events()
        try:
            with self.transaction_manager.start(operation):
                order = self.order_repository.save(order, deadline=deadline)
        except Exception as e:
            self._transition(operation, None, OrderPipelineState.PERSISTENCE_FAILED)
            logger.error(f"{operation}失败: {e}")
            raise
        self._transition(operation, order.id, OrderPipelineState.PERSISTED)
        
        self._publish(order, events)
        self._transition(operation, order.id, OrderPipelineState.NOTIFIED)
        return OrderDTO.from_aggregate(order)
    
    def update_order(self, command: UpdateOrderCommand) -> OrderDTO:
        """
        更新订单，整体替换订单行（以及可选的客户快照）。
        总额总是根据完整的新订单行重新计算。
        
        Args:
            command: 更新订单命令
            
        Returns:
            更新后的订单DTO
            
        Raises:
            NotFoundException: 订单不存在
            AuthorizationException: 无权修改该订单
            OrderException: 订单校验失败
            TransientInfrastructureException: 超时或依赖不可用
        """
        operation = "更新订单"
        deadline = self._deadline(command.timeout)
        self._transition(operation, command.order_id, OrderPipelineState.REQUESTED)
        
        order = self._load(command.order_id, deadline)
        self._check_access(command.user_id, command.is_staff, order.customer_id, operation, order.id)
        
        customer = command.customer or order.customer
        try:
            lines = self.builder.build_lines(customer, command.lines, deadline=deadline)
            order.replace_lines(lines, command.customer)
        except OrderException as e:
            self._transition(operation, order.id, OrderPipelineState.REJECTED_VALIDATION)
            logger.info(f"{operation}被拒绝: {e}")
            raise
        except TransientInfrastructureException as e:
            self._transition(operation, order.id, OrderPipelineState.TRANSIENT_FAILURE)
            logger.warning(f"{operation}暂时失败: {e}")
            raise
        self._transition(operation, order.id, OrderPipelineState.VALIDATED)
        
        events = order.clear_domain_events()
        try:
            with self.transaction_manager.start(operation):
                order = self.order_repository.save(order, deadline=deadline)
        except Exception as e:
            self._transition(operation, order.id, OrderPipelineState.PERSISTENCE_FAILED)
            logger.error(f"{operation}失败: {e}")
            raise
        self._transition(operation, order.id, OrderPipelineState.PERSISTED)
        
        self._publish(order, events)
        self._transition(operation, order.id, OrderPipelineState.NOTIFIED)
        return OrderDTO.from_aggregate(order)
    
    def delete_order(self, command: DeleteOrderCommand) -> DeleteOrderResultDTO:
        """
        删除订单，并以删除前的最后快照发布删除通知。
        
        Args:
            command: 删除订单命令
            
        Returns:
            删除结果DTO
            
        Raises:
            NotFoundException: 订单不存在（或已被并发删除）
            AuthorizationException: 无权删除该订单
            TransientInfrastructureException: 超时或依赖不可用
        """
        operation = "删除订单"
        deadline = self._deadline(command.timeout)
        self._transition(operation, command.order_id, OrderPipelineState.REQUESTED)
        
        order = self._load(command.order_id, deadline)
        self._check_access(command.user_id, command.is_staff, order.customer_id, operation, order.id)
        order.mark_deleted()
        self._transition(operation, order.id, OrderPipelineState.VALIDATED)
        
        events = order.clear_domain_events()
        try:
            with self.transaction_manager.start(operation):
                deleted = self.order_repository.delete_by_id(order.id, deadline=deadline)
        except Exception as e:
            self._transition(operation, order.id, OrderPipelineState.PERSISTENCE_FAILED)
            logger.error(f"{operation}失败: {e}")
            raise
        if not deleted:
            self._transition(operation, order.id, OrderPipelineState.PERSISTENCE_FAILED)
            raise NotFoundException(NotFoundException.ORDER, order.id)
        self._transition(operation, order.id, OrderPipelineState.PERSISTED)
        
        self._publish(order, events)
        self._transition(operation, order.id, OrderPipelineState.NOTIFIED)
        return DeleteOrderResultDTO(OrderDTO.from_aggregate(order), f"订单 {order.id} 已删除")
    
    # ==================== 查询处理方法 ====================
    
    def get_order(self, query: GetOrderQuery) -> OrderDTO:
        """
        获取订单。
        
        Args:
            query: 获取订单查询
            
        Returns:
            订单DTO
        """
        order = self._load(query.order_id, self._deadline(query.timeout))
        self._check_access(query.user_id, query.is_staff, order.customer_id, "查看订单", order.id)
        return OrderDTO.from_aggregate(order)
    
    def list_customer_orders(self, query: ListCustomerOrdersQuery) -> List[OrderDTO]:
        """
        获取客户的订单列表。
        
        Args:
            query: 获取客户订单列表查询
            
        Returns:
            订单DTO列表
        """
        self._check_access(query.user_id, query.is_staff, query.customer_id, "查看订单列表")
        deadline = self._deadline(query.timeout)
        with deadline.guard("查询客户订单"):
            orders = self.order_repository.find_by_customer(query.customer_id, deadline=deadline)
        return [OrderDTO.from_aggregate(order) for order in orders]
