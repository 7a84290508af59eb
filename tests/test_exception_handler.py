"""
异常处理器测试。
"""
import pytest
from django.http import Http404
from rest_framework.exceptions import NotAuthenticated
from rest_framework.test import APIRequestFactory

from core.domain.exceptions import AuthorizationException, DomainException, TransientInfrastructureException
from core.infrastructure.response import StatusCode
from orders.api.exception_handlers import ORDER_ERROR_RESPONSES, api_exception_handler
from orders.domain import (
    BadPriceException,
    InvalidOrderException,
    NoLinesException,
    NotFoundException,
    OrderErrorKind,
    UnavailableProductException,
)


@pytest.fixture
def context():
    return {"request": APIRequestFactory().post("/api/orders/")}


def test_every_order_error_kind_has_a_response():
    assert set(ORDER_ERROR_RESPONSES) == set(OrderErrorKind)


@pytest.mark.parametrize("exc, http_code, code", [
    (NoLinesException(), 400, StatusCode.ORDER_NO_LINES),
    (BadPriceException("p1", "9.99", "10.00"), 409, StatusCode.ORDER_BAD_PRICE),
    (NotFoundException(NotFoundException.ORDER, "o1"), 404, StatusCode.ORDER_NOT_FOUND),
    (NotFoundException(NotFoundException.PRODUCT, "p1"), 404, StatusCode.PRODUCT_NOT_FOUND),
    (UnavailableProductException("p1", 3, 1), 409, StatusCode.PRODUCT_STOCK_INSUFFICIENT),
    (InvalidOrderException("customer.email", "格式错误"), 400, StatusCode.VALIDATION_ERROR),
])
def test_order_errors_map_by_kind(context, exc, http_code, code):
    response = api_exception_handler(exc, context)
    
    assert response.status_code == http_code
    assert response.data["code"] == code
    assert response.data["success"] is False
    assert response.data["data"]["kind"] == exc.kind.value


def test_transient_error_is_retryable_service_unavailable(context):
    response = api_exception_handler(TransientInfrastructureException("保存订单", "超时"), context)
    
    assert response.status_code == 503
    assert response.data["code"] == StatusCode.SERVICE_UNAVAILABLE
    assert response.data["data"] == {"retryable": True, "operation": "保存订单"}


@pytest.mark.parametrize("exc, http_code, code", [
    (AuthorizationException(7, "查看订单", "o1"), 403, StatusCode.FORBIDDEN),
    (DomainException("商品名称不能为空"), 400, StatusCode.BAD_REQUEST),
    (Http404(), 404, StatusCode.NOT_FOUND),
    (NotAuthenticated(), 401, StatusCode.UNAUTHORIZED),
    (RuntimeError("boom"), 500, StatusCode.SERVER_ERROR),
])
def test_other_errors_use_unified_handler(context, exc, http_code, code):
    response = api_exception_handler(exc, context)
    
    assert response.status_code == http_code
    assert response.data["code"] == code
