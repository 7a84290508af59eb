"""
事务管理器模块。
提供事务控制的接口和实现。
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generator, Optional

from django.db import transaction as django_transaction
from loguru import logger


class TransactionManager(ABC):
    """
    事务管理器接口。
    应用服务通过它界定持久化操作的边界，作用域内抛出异常即回滚。
    """
    
    @abstractmethod
    @contextmanager
    def start(self, name: str = "") -> Generator[None, None, None]:
        """
        开启一个事务。
        返回一个上下文管理器，用于在作用域结束时自动提交或回滚事务。
        
        Args:
            name: 事务名称，仅用于日志
        
        Yields:
            None
        """
        pass
    
    @abstractmethod
    def rollback(self) -> None:
        """
        将当前事务标记为回滚。
        """
        pass


class DjangoTransactionManager(TransactionManager):
    """
    基于Django的事务管理器实现。
    使用Django的atomic()管理事务。
    """
    
    def __init__(self, using: Optional[str] = None):
        """
        初始化Django事务管理器。
        
        Args:
            using: 数据库别名，默认使用default
        """
        self.using = using
    
    @contextmanager
    def start(self, name: str = "") -> Generator[None, None, None]:
        """
        使用Django的事务机制开启一个事务。
        
        Yields:
            None
        """
        try:
            with django_transaction.atomic(using=self.using):
                logger.debug(f"事务已开启 {name}")
                yield
            logger.debug(f"事务已提交 {name}")
        except Exception as e:
            logger.error(f"事务回滚 {name}: {e}")
            raise
    
    def rollback(self) -> None:
        """
        将当前atomic块标记为回滚，块结束时Django执行回滚。
        """
        logger.debug("显式回滚事务")
        django_transaction.set_rollback(True, using=self.using)


class NoOpTransactionManager(TransactionManager):
    """
    空操作事务管理器。
    用于单元测试或不需要事务的场景，只记录事务的开启、提交和回滚次数。
    """
    
    def __init__(self):
        self.started = 0
        self.committed = 0
        self.rolled_back = 0
    
    @contextmanager
    def start(self, name: str = "") -> Generator[None, None, None]:
        """
        模拟开启一个事务，但实际上不做任何操作。
        
        Yields:
            None
        """
        self.started += 1
        try:
            logger.debug(f"模拟事务已开启 {name}")
            yield
        except Exception:
            self.rolled_back += 1
            logger.debug(f"模拟事务已回滚 {name}")
            raise
        self.committed += 1
        logger.debug(f"模拟事务已提交 {name}")
    
    def rollback(self) -> None:
        """
        模拟回滚事务，只做计数。
        """
        self.rolled_back += 1
