"""
统一响应封装模块。
提供API响应的标准化结构，包括业务状态码、成功标志、消息、数据等。
"""
import time
import uuid
import typing as t
from dataclasses import dataclass, field

from rest_framework.response import Response
from rest_framework import status as http_status


# 状态码枚举
class StatusCode:
    """业务状态码定义"""
    
    # 成功状态码 (1xxxx)
    SUCCESS = 10000                # 通用成功
    CREATED = 10001                # 创建成功
    UPDATED = 10002                # 更新成功
    DELETED = 10003                # 删除成功
    
    # 通用客户端错误 (400xx)
    BAD_REQUEST = 40000            # 错误的请求
    VALIDATION_ERROR = 40001       # 数据验证错误
    
    # 认证和授权错误 (401xx-403xx)
    UNAUTHORIZED = 40100           # 未认证
    TOKEN_INVALID = 40102          # 无效的令牌
    FORBIDDEN = 40300              # 权限不足
    
    # 资源错误 (404xx)
    NOT_FOUND = 40400              # 资源不存在
    PRODUCT_NOT_FOUND = 40403      # 商品不存在
    ORDER_NOT_FOUND = 40404        # 订单不存在
    
    # 商品模块错误 (410xx)
    PRODUCT_STOCK_INSUFFICIENT = 41001  # 商品库存不足或已下线
    
    # 订单模块错误 (411xx)
    ORDER_NO_LINES = 41103         # 订单没有订单行
    ORDER_BAD_PRICE = 41104        # 订单行价格与商品目录不一致
    
    # 服务端错误 (5xxxx)
    SERVER_ERROR = 50000           # 服务器内部错误
    SERVICE_UNAVAILABLE = 50001    # 服务不可用（可重试）


# 状态码对应的默认消息
STATUS_MESSAGE_MAPPING = {
    StatusCode.SUCCESS: "操作成功",
    StatusCode.CREATED: "创建成功",
    StatusCode.UPDATED: "更新成功",
    StatusCode.DELETED: "删除成功",
    
    StatusCode.BAD_REQUEST: "请求参数错误",
    StatusCode.VALIDATION_ERROR: "数据验证失败",
    
    StatusCode.UNAUTHORIZED: "请先登录",
    StatusCode.TOKEN_INVALID: "无效的令牌",
    StatusCode.FORBIDDEN: "权限不足",
    
    StatusCode.NOT_FOUND: "资源不存在",
    StatusCode.PRODUCT_NOT_FOUND: "商品不存在",
    StatusCode.ORDER_NOT_FOUND: "订单不存在",
    
    StatusCode.PRODUCT_STOCK_INSUFFICIENT: "商品库存不足",
    
    StatusCode.ORDER_NO_LINES: "订单至少需要一个订单行",
    StatusCode.ORDER_BAD_PRICE: "订单行价格与商品价格不一致",
    
    StatusCode.SERVER_ERROR: "服务器内部错误",
    StatusCode.SERVICE_UNAVAILABLE: "服务暂时不可用，请稍后重试",
}


def get_status_message(code: int) -> str:
    """
    根据状态码获取对应的消息
    
    Args:
        code: 业务状态码
        
    Returns:
        str: 状态消息
    """
    return STATUS_MESSAGE_MAPPING.get(code, "未知状态")


@dataclass
class ApiResponse:
    """API响应数据结构"""
    code: int = StatusCode.SUCCESS  # 业务状态码
    success: bool = True  # 是否成功
    message: str = "操作成功"  # 响应消息
    data: t.Any = None  # 响应数据
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))  # 时间戳，毫秒级
    trace_id: str = field(default_factory=lambda: str(uuid.uuid4()))  # 追踪ID
    metadata: t.Dict[str, t.Any] = field(default_factory=dict)  # 元数据

    def to_dict(self) -> dict:
        """转换为字典"""
        result = {
            "code": self.code,
            "success": self.success,
            "message": self.message,
            "timestamp": self.timestamp,
            "traceId": self.trace_id,
        }
        
        # 只有在有数据时才添加data字段
        if self.data is not None:
            result["data"] = self.data
            
        # 只有在有元数据时才添加metadata字段
        if self.metadata:
            result["metadata"] = self.metadata
            
        return result


class ApiResponseBuilder:
    """API响应构建器"""
    
    @staticmethod
    def success(
        data: t.Any = None, 
        message: str = "操作成功", 
        code: int = StatusCode.SUCCESS,
        metadata: t.Dict[str, t.Any] = None
    ) -> Response:
        """
        创建成功响应
        
        Args:
            data: 响应数据
            message: 响应消息
            code: 业务状态码
            metadata: 元数据
            
        Returns:
            Response: DRF响应对象
        """
        response = ApiResponse(code=code, success=True, message=message, data=data, metadata=metadata or {})
        return Response(response.to_dict(), status=http_status.HTTP_200_OK)
    
    @staticmethod
    def created(
        data: t.Any = None, 
        message: str = "创建成功", 
        code: int = StatusCode.CREATED,
        metadata: t.Dict[str, t.Any] = None
    ) -> Response:
        """
        创建资源成功响应
        """
        response = ApiResponse(code=code, success=True, message=message, data=data, metadata=metadata or {})
        return Response(response.to_dict(), status=http_status.HTTP_201_CREATED)
    
    @staticmethod
    def fail(
        message: str = "操作失败", 
        code: int = StatusCode.SERVER_ERROR, 
        data: t.Any = None,
        http_code: int = http_status.HTTP_400_BAD_REQUEST,
        metadata: t.Dict[str, t.Any] = None
    ) -> Response:
        """
        创建失败响应
        
        Args:
            message: 错误消息
            code: 业务状态码
            data: 错误详情数据
            http_code: HTTP状态码
            metadata: 元数据
            
        Returns:
            Response: DRF响应对象
        """
        response = ApiResponse(code=code, success=False, message=message, data=data, metadata=metadata or {})
        return Response(response.to_dict(), status=http_code)
