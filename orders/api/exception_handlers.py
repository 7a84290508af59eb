"""
订单API异常处理器。
按OrderErrorKind把订单异常映射为HTTP状态码和业务状态码，其他异常交给统一异常处理器。
"""
import logging

from django.core.exceptions import ImproperlyConfigured
from rest_framework import status

from core.infrastructure.exception_handler import unified_exception_handler
from core.infrastructure.response import ApiResponseBuilder, StatusCode
from orders.domain.exceptions import NotFoundException, OrderErrorKind, OrderException

logger = logging.getLogger(__name__)


# 每个OrderErrorKind都必须有一项映射
ORDER_ERROR_RESPONSES = {
    OrderErrorKind.NO_LINES: (status.HTTP_400_BAD_REQUEST, StatusCode.ORDER_NO_LINES),
    OrderErrorKind.BAD_PRICE: (status.HTTP_409_CONFLICT, StatusCode.ORDER_BAD_PRICE),
    OrderErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, StatusCode.ORDER_NOT_FOUND),
    OrderErrorKind.UNAVAILABLE: (status.HTTP_409_CONFLICT, StatusCode.PRODUCT_STOCK_INSUFFICIENT),
    OrderErrorKind.INVALID: (status.HTTP_400_BAD_REQUEST, StatusCode.VALIDATION_ERROR),
}

_unmapped = set(OrderErrorKind) - set(ORDER_ERROR_RESPONSES)
if _unmapped:
    raise ImproperlyConfigured(f"订单错误种类缺少响应映射: {sorted(kind.value for kind in _unmapped)}")


def order_error_response(exc: OrderException):
    """
    把订单异常转换为统一格式的响应。
    
    Args:
        exc: 订单异常
        
    Returns:
        Response: 统一格式的API响应
    """
    http_code, code = ORDER_ERROR_RESPONSES[exc.kind]
    if isinstance(exc, NotFoundException) and exc.entity_name == NotFoundException.PRODUCT:
        code = StatusCode.PRODUCT_NOT_FOUND
    
    data = {"kind": exc.kind.value}
    for attr in ("field_name", "product_id", "entity_id"):
        value = getattr(exc, attr, None)
        if value is not None:
            data[attr] = str(value)
    
    return ApiResponseBuilder.fail(message=str(exc), code=code, data=data, http_code=http_code)


def api_exception_handler(exc, context):
    """
    DRF异常处理入口。
    
    Args:
        exc: 异常对象
        context: 异常上下文
        
    Returns:
        Response: 统一格式的API响应
    """
    if isinstance(exc, OrderException):
        request = context.get('request')
        if request:
            logger.info(f"订单请求被拒绝: {request.method} {request.path} {exc.kind.value}: {exc}")
        return order_error_response(exc)
    
    return unified_exception_handler(exc, context)
