"""
订单API测试。
"""
import pytest
from rest_framework.test import APIClient

from core.domain import Money
from core.infrastructure.authentication import JwtService
from core.infrastructure.response import StatusCode
from notifications.factory import get_notification_dispatcher, get_realtime_channel
from products.domain import Product, ProductState
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository

pytestmark = pytest.mark.django_db

UNKNOWN_ID = "00000000-0000-4000-8000-000000000000"


@pytest.fixture
def products():
    repository = DjangoProductRepository()
    return {
        "widget": repository.save(Product.create("Widget", "", Money("10.00"), stock=10)),
        "gadget": repository.save(Product.create("Gadget", "", Money("5.50"), stock=5)),
        "retired": repository.save(
            Product.create("Retired", "", Money("1.00"), stock=100, state=ProductState.INACTIVE)
        ),
    }


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="ana", password="x")


def _client_for(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {JwtService().issue(user)}")
    return client


@pytest.fixture
def client(user):
    return _client_for(user)


@pytest.fixture
def order_body(customer, products):
    return {
        "customer": customer.to_dict(),
        "lines": [
            {"product_id": str(products["widget"].id), "quantity": 2, "unit_price": "10.00"},
            {"product_id": str(products["gadget"].id), "quantity": 1},
        ],
    }


def _create(client, body):
    response = client.post("/api/orders/", body, format="json")
    assert response.status_code == 201, response.data
    return response.data["data"]


def test_create_order(client, user, order_body, mailoutbox):
    session = get_realtime_channel().connect()
    
    response = client.post("/api/orders/", order_body, format="json")
    
    assert response.status_code == 201
    assert response.data["code"] == StatusCode.CREATED
    order = response.data["data"]
    assert order["customer_id"] == str(user.pk)
    assert order["total_items"] == 3
    assert order["total_amount"] == "25.50"
    assert [line["product_name"] for line in order["lines"]] == ["Widget", "Gadget"]
    
    assert get_notification_dispatcher().wait_idle(timeout=5)
    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == ["ana@example.com"]
    pushed = [message for message in session.receive_all() if message.get("entity") == "order"]
    assert pushed[0]["type"] == "CREATED"
    assert pushed[0]["data"]["id"] == order["id"]


def test_requires_authentication(order_body):
    response = APIClient().post("/api/orders/", order_body, format="json")
    
    assert response.status_code == 401
    assert response.data["code"] == StatusCode.UNAUTHORIZED


def test_empty_lines_are_rejected(client, order_body):
    order_body["lines"] = []
    
    response = client.post("/api/orders/", order_body, format="json")
    
    assert response.status_code == 400
    assert response.data["code"] == StatusCode.ORDER_NO_LINES
    assert response.data["data"]["kind"] == "NO_LINES"


def test_stale_price_is_rejected(client, order_body, mailoutbox):
    order_body["lines"][0]["unit_price"] = "9.99"
    
    response = client.post("/api/orders/", order_body, format="json")
    
    assert response.status_code == 409
    assert response.data["code"] == StatusCode.ORDER_BAD_PRICE
    assert get_notification_dispatcher().wait_idle(timeout=5)
    assert mailoutbox == []


@pytest.mark.parametrize("unit_price", ["10.001", "9.999"])
def test_price_with_extra_decimals_is_a_price_mismatch(client, order_body, unit_price):
    order_body["lines"][0]["unit_price"] = unit_price
    
    response = client.post("/api/orders/", order_body, format="json")
    
    assert response.status_code == 409
    assert response.data["code"] == StatusCode.ORDER_BAD_PRICE
    assert response.data["data"]["kind"] == "BAD_PRICE"


def test_equal_price_with_extra_zeros_is_accepted(client, order_body):
    order_body["lines"][0]["unit_price"] = "10.000"
    
    response = client.post("/api/orders/", order_body, format="json")
    
    assert response.status_code == 201
    assert response.data["data"]["lines"][0]["unit_price"] == "10.00"


def test_unknown_product_is_rejected(client, order_body):
    order_body["lines"][1]["product_id"] = UNKNOWN_ID
    
    response = client.post("/api/orders/", order_body, format="json")
    
    assert response.status_code == 404
    assert response.data["code"] == StatusCode.PRODUCT_NOT_FOUND
    assert response.data["data"]["entity_id"] == UNKNOWN_ID


@pytest.mark.parametrize("product, quantity", [("gadget", 6), ("retired", 1)])
def test_unavailable_product_is_rejected(client, order_body, products, product, quantity):
    order_body["lines"] = [{"product_id": str(products[product].id), "quantity": quantity}]
    
    response = client.post("/api/orders/", order_body, format="json")
    
    assert response.status_code == 409
    assert response.data["code"] == StatusCode.PRODUCT_STOCK_INSUFFICIENT


def test_invalid_customer_is_rejected(client, order_body):
    order_body["customer"]["email"] = "not-an-email"
    
    response = client.post("/api/orders/", order_body, format="json")
    
    assert response.status_code == 400
    assert response.data["code"] == StatusCode.VALIDATION_ERROR
    assert response.data["data"]["field_name"] == "customer.email"


def test_malformed_body_is_rejected(client):
    response = client.post("/api/orders/", {"lines": "nope"}, format="json")
    
    assert response.status_code == 400
    assert response.data["code"] == StatusCode.VALIDATION_ERROR


def test_get_and_list_orders(client, order_body):
    order = _create(client, order_body)
    
    detail = client.get(f"/api/orders/{order['id']}/")
    listing = client.get("/api/orders/")
    
    assert detail.status_code == 200
    assert detail.data["data"]["total_amount"] == "25.50"
    assert [item["id"] for item in listing.data["data"]] == [order["id"]]


def test_update_replaces_lines(client, order_body, products):
    order = _create(client, order_body)
    
    response = client.put(
        f"/api/orders/{order['id']}/",
        {"lines": [{"product_id": str(products["gadget"].id), "quantity": 4}]},
        format="json",
    )
    
    assert response.status_code == 200
    assert response.data["code"] == StatusCode.UPDATED
    assert response.data["data"]["total_amount"] == "22.00"
    assert response.data["data"]["version"] == 1


def test_delete_order(client, order_body):
    order = _create(client, order_body)
    
    response = client.delete(f"/api/orders/{order['id']}/")
    
    assert response.status_code == 200
    assert response.data["code"] == StatusCode.DELETED
    assert response.data["data"]["order"]["id"] == order["id"]
    assert client.get(f"/api/orders/{order['id']}/").status_code == 404


def test_delete_unknown_order(client):
    response = client.delete(f"/api/orders/{UNKNOWN_ID}/")
    
    assert response.status_code == 404
    assert response.data["code"] == StatusCode.ORDER_NOT_FOUND


def test_other_users_order_is_forbidden(client, order_body, django_user_model):
    order = _create(client, order_body)
    intruder = _client_for(django_user_model.objects.create_user(username="eve", password="x"))
    
    assert intruder.get(f"/api/orders/{order['id']}/").status_code == 403
    assert intruder.delete(f"/api/orders/{order['id']}/").status_code == 403


def test_staff_can_read_any_order(client, order_body, django_user_model):
    order = _create(client, order_body)
    admin = _client_for(django_user_model.objects.create_user(username="root", password="x", is_staff=True))
    
    assert admin.get(f"/api/orders/{order['id']}/").status_code == 200
