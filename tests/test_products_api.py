"""
商品API和商品应用服务测试。
"""
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from core.domain.events import EntityKind, EventType
from core.infrastructure.authentication import JwtService
from core.infrastructure.response import StatusCode
from core.infrastructure.transaction import NoOpTransactionManager
from orders.domain.exceptions import NotFoundException
from products.application import (
    CreateProductCommand,
    DeleteProductCommand,
    GetProductQuery,
    ProductApplicationService,
    UpdateProductCommand,
)
from products.infrastructure.repositories.memory_product_repository import InMemoryProductRepository


@pytest.fixture
def product_service(dispatcher):
    return ProductApplicationService(
        product_repository=InMemoryProductRepository(),
        dispatcher=dispatcher,
        transaction_manager=NoOpTransactionManager(),
    )


class TestProductApplicationService:
    
    def test_create_publishes_product_envelope(self, product_service, dispatcher, recorder):
        product = product_service.create_product(
            CreateProductCommand(name="Widget", description="", price=Decimal("10.00"), stock=3)
        )
        
        assert dispatcher.wait_idle(timeout=2)
        envelope = recorder.received[0]
        assert envelope.entity_kind is EntityKind.PRODUCT
        assert envelope.event_type is EventType.CREATED
        assert envelope.payload["id"] == product.id
        assert product.is_available
    
    def test_update_publishes_single_envelope(self, product_service, dispatcher, recorder):
        product = product_service.create_product(
            CreateProductCommand(name="Widget", description="", price=Decimal("10.00"), stock=3)
        )
        
        updated = product_service.update_product(UpdateProductCommand(
            id=product.id, name="Widget 2", description=None, price=Decimal("12.00"), stock=1, active=None
        ))
        
        assert dispatcher.wait_idle(timeout=2)
        assert [envelope.event_type for envelope in recorder.received] == [EventType.CREATED, EventType.UPDATED]
        assert updated.price == "12.00"
        assert updated.name == "Widget 2"
    
    def test_delete_hides_product(self, product_service, dispatcher, recorder):
        product = product_service.create_product(
            CreateProductCommand(name="Widget", description="", price=Decimal("10.00"))
        )
        
        product_service.delete_product(DeleteProductCommand(id=product.id))
        
        with pytest.raises(NotFoundException):
            product_service.get_product(GetProductQuery(id=product.id))
        assert dispatcher.wait_idle(timeout=2)
        assert recorder.received[-1].event_type is EventType.DELETED
    
    def test_unknown_product(self, product_service):
        with pytest.raises(NotFoundException):
            product_service.delete_product(DeleteProductCommand(id="missing"))


@pytest.mark.django_db
class TestProductApi:
    
    def _client(self, django_user_model, is_staff):
        user = django_user_model.objects.create_user(username="staff" if is_staff else "ana", password="x",
                                                     is_staff=is_staff)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {JwtService().issue(user)}")
        return client
    
    def test_admin_manages_products(self, django_user_model):
        admin = self._client(django_user_model, is_staff=True)
        
        created = admin.post("/api/products/", {"name": "Widget", "price": "10.00", "stock": 3}, format="json")
        product_id = created.data["data"]["id"]
        updated = admin.put(f"/api/products/{product_id}/", {"stock": 7}, format="json")
        deleted = admin.delete(f"/api/products/{product_id}/")
        
        assert created.status_code == 201
        assert updated.data["data"]["stock"] == 7
        assert deleted.data["code"] == StatusCode.DELETED
        assert admin.get(f"/api/products/{product_id}/").status_code == 404
    
    def test_customers_cannot_create_products(self, django_user_model):
        client = self._client(django_user_model, is_staff=False)
        
        response = client.post("/api/products/", {"name": "Widget", "price": "10.00"}, format="json")
        
        assert response.status_code == 403
