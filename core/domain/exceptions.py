"""
领域异常模块。
包含领域模型中使用的各种异常类。
"""
from typing import Any, Optional


class DomainException(Exception):
    """
    领域异常基类。
    所有领域模型中的异常都应继承自此类。
    """
    
    def __init__(self, message: str):
        """
        初始化领域异常。
        
        Args:
            message: 异常消息
        """
        self.message = message
        super().__init__(self.message)


class AuthorizationException(DomainException):
    """
    授权异常。
    当用户没有执行操作的权限时抛出。
    """
    
    def __init__(self, user_id: Any, operation: str, resource: Optional[str] = None):
        """
        初始化授权异常。
        
        Args:
            user_id: 用户ID
            operation: 操作名称
            resource: 资源名称
        """
        if resource:
            message = f"用户(ID={user_id})没有权限执行'{operation}'操作，资源: {resource}"
        else:
            message = f"用户(ID={user_id})没有权限执行'{operation}'操作"
        super().__init__(message)
        self.user_id = user_id
        self.operation = operation
        self.resource = resource


class TransientInfrastructureException(DomainException):
    """
    临时性基础设施异常。
    外部依赖（商品目录、仓储）超时或不可用时抛出。
    抛出时不会有任何部分提交的状态，调用方可以安全重试。
    """
    
    retryable = True
    
    def __init__(self, operation: str, reason: str):
        """
        初始化临时性基础设施异常。
        
        Args:
            operation: 失败的操作名称
            reason: 失败原因
        """
        message = f"操作'{operation}'暂时失败，可重试: {reason}"
        super().__init__(message)
        self.operation = operation
        self.reason = reason
