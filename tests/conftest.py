"""
测试公共夹具。
"""
import threading
from decimal import Decimal

import pytest

from core.domain import Money
from core.infrastructure.transaction import NoOpTransactionManager
from notifications.dispatcher import NotificationDispatcher, Subscriber
from notifications.factory import reset_notification_dispatcher
from orders.application import OrderApplicationService
from orders.domain import Address, Customer, OrderAggregateBuilder, RequestedLine
from orders.infrastructure.repositories.memory_order_repository import InMemoryOrderRepository
from products.domain import Product, ProductState
from products.infrastructure.repositories.memory_product_repository import InMemoryProductRepository


class RecordingSubscriber(Subscriber):
    """记录收到的所有信封"""
    
    def __init__(self, name="recorder", entity_kinds=None, event_types=None):
        self._name = name
        self.entity_kinds = entity_kinds
        self.event_types = event_types
        self.received = []
        self._lock = threading.Lock()
    
    @property
    def name(self):
        return self._name
    
    def deliver(self, envelope):
        with self._lock:
            self.received.append(envelope)


class BlockedSubscriber(Subscriber):
    """在release之前一直阻塞"""
    
    def __init__(self, name="blocked"):
        self._name = name
        self.release = threading.Event()
        self.started = threading.Event()
        self.received = []
    
    @property
    def name(self):
        return self._name
    
    def deliver(self, envelope):
        self.started.set()
        self.release.wait()
        self.received.append(envelope)


@pytest.fixture(autouse=True)
def _reset_shared_dispatcher():
    yield
    reset_notification_dispatcher(timeout=1.0)


@pytest.fixture
def address():
    return Address(
        street="Calle Mayor",
        number="12",
        city="Madrid",
        province="Madrid",
        country="España",
        postal_code="28013",
    )


@pytest.fixture
def customer(address):
    return Customer(
        full_name="Ana García",
        email="ana@example.com",
        phone="600123123",
        address=address,
    )


@pytest.fixture
def widget():
    return Product(id="p1", name="Widget", price=Money("10.00"), stock=10)


@pytest.fixture
def gadget():
    return Product(id="p2", name="Gadget", price=Money("5.50"), stock=5)


@pytest.fixture
def retired():
    return Product(id="p3", name="Retired", price=Money("1.00"), stock=100, state=ProductState.INACTIVE)


@pytest.fixture
def catalog(widget, gadget, retired):
    return InMemoryProductRepository([widget, gadget, retired])


@pytest.fixture
def builder(catalog):
    return OrderAggregateBuilder(catalog)


@pytest.fixture
def order_repository():
    return InMemoryOrderRepository()


@pytest.fixture
def transaction_manager():
    return NoOpTransactionManager()


@pytest.fixture
def recorder():
    return RecordingSubscriber()


@pytest.fixture
def dispatcher(recorder):
    dispatcher = NotificationDispatcher(inbox_capacity=16)
    dispatcher.register(recorder)
    yield dispatcher
    dispatcher.shutdown(timeout=1.0)


@pytest.fixture
def order_service(builder, order_repository, dispatcher, transaction_manager):
    return OrderApplicationService(
        builder=builder,
        order_repository=order_repository,
        dispatcher=dispatcher,
        transaction_manager=transaction_manager,
    )


@pytest.fixture
def two_lines():
    """10.00 x 2 + 5.50 x 1"""
    return [
        RequestedLine(product_id="p1", quantity=2, unit_price=Decimal("10.00")),
        RequestedLine(product_id="p2", quantity=1),
    ]
