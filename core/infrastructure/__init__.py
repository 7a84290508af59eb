"""
基础设施层包。
提供事务管理、超时控制、认证和统一响应等基础设施组件。
"""

# 事务管理
from core.infrastructure.transaction import (
    TransactionManager,
    DjangoTransactionManager,
    NoOpTransactionManager
)

# 超时控制
from core.infrastructure.timeouts import Deadline

__all__ = [
    # 事务管理
    'TransactionManager',
    'DjangoTransactionManager',
    'NoOpTransactionManager',
    
    # 超时控制
    'Deadline',
]
