"""
超时控制模块。
提供Deadline，用于把调用方给出的超时时间约束到商品目录查询和仓储调用上。

两种约束方式：
- Deadline.call：在工作线程中执行调用，超过剩余时间立即返回超时错误，
  不再等待被放弃的调用（该调用会在工作线程中自行结束）；
- statement_timeout：把剩余时间下推到数据库连接，由数据库中断超时的语句。
"""
import threading
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional

from django.db import DEFAULT_DB_ALIAS, DatabaseError, close_old_connections, connections
from loguru import logger

from core.domain.exceptions import TransientInfrastructureException

# 执行受限调用的工作线程数
CALL_WORKERS = 8

# SQLite每执行多少条虚拟机指令检查一次截止时间
SQLITE_PROGRESS_STEPS = 1000

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=CALL_WORKERS, thread_name_prefix="deadline")
        return _executor


def _run_in_worker(fn: Callable, args: tuple, kwargs: dict) -> Any:
    # 工作线程有自己的数据库连接，调用前后按CONN_MAX_AGE清理
    close_old_connections()
    try:
        return fn(*args, **kwargs)
    finally:
        close_old_connections()


class Deadline:
    """
    截止时间。
    基于单调时钟，timeout为None时永不过期。
    """
    
    def __init__(self, timeout: Optional[float] = None, clock=time.monotonic):
        """
        初始化截止时间。
        
        Args:
            timeout: 超时时间（秒），None表示不限制
            clock: 时钟函数，测试时可替换
        """
        if timeout is not None and timeout <= 0:
            raise ValueError(f"超时时间必须为正数: {timeout}")
        self.timeout = timeout
        self._clock = clock
        self._expires_at = clock() + timeout if timeout is not None else None
    
    @classmethod
    def unbounded(cls) -> 'Deadline':
        """创建一个永不过期的截止时间"""
        return cls(None)
    
    def remaining(self) -> Optional[float]:
        """
        获取剩余时间。
        
        Returns:
            剩余秒数（不小于0），不限制时返回None
        """
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())
    
    @property
    def expired(self) -> bool:
        """是否已过期"""
        return self._expires_at is not None and self._clock() >= self._expires_at
    
    def _timed_out(self, operation: str) -> TransientInfrastructureException:
        logger.warning(f"操作超时: {operation}，超时时间 {self.timeout}s")
        return TransientInfrastructureException(operation, f"超过 {self.timeout}s 的超时时间")
    
    def check(self, operation: str) -> None:
        """
        检查是否已过期。
        
        Args:
            operation: 当前操作名称，用于错误消息
        
        Raises:
            TransientInfrastructureException: 已超过截止时间
        """
        if self.expired:
            raise self._timed_out(operation)
    
    @contextmanager
    def guard(self, operation: str, check_after: bool = True) -> Generator[None, None, None]:
        """
        在截止时间约束下执行外部调用。
        数据库错误和网络错误被转换为可重试的临时性基础设施异常。
        guard本身不会中断执行中的调用，需要中断时使用call或statement_timeout。
        
        Args:
            operation: 操作名称
            check_after: 调用结束后是否再次检查超时。写操作在提交前由仓储自行检查，
                提交后不能再报告失败，因此应传False
        
        Raises:
            TransientInfrastructureException: 超时或依赖不可用
        """
        self.check(operation)
        try:
            yield
        except DatabaseError as e:
            logger.error(f"操作 {operation} 数据库错误: {e}")
            raise TransientInfrastructureException(operation, f"数据库不可用: {e}") from e
        except OSError as e:
            logger.error(f"操作 {operation} 网络错误: {e}")
            raise TransientInfrastructureException(operation, f"依赖服务不可用: {e}") from e
        if check_after:
            self.check(operation)
    
    def call(self, operation: str, fn: Callable, *args, **kwargs) -> Any:
        """
        在截止时间内执行只读调用。
        有超时限制时调用在工作线程中执行，最多等待剩余时间；
        超时后调用方立即得到异常，工作线程中的调用被放弃，其结果不会被使用。
        
        Args:
            operation: 操作名称
            fn: 被调用的函数
        
        Returns:
            fn的返回值
        
        Raises:
            TransientInfrastructureException: 超时或依赖不可用
        """
        remaining = self.remaining()
        if remaining is None:
            with self.guard(operation):
                return fn(*args, **kwargs)
        
        with self.guard(operation):
            future = _get_executor().submit(_run_in_worker, fn, args, kwargs)
            try:
                return future.result(timeout=remaining)
            except FutureTimeoutError:
                future.cancel()
                raise self._timed_out(operation)


@contextmanager
def statement_timeout(deadline: Deadline, using: str = DEFAULT_DB_ALIAS) -> Generator[None, None, None]:
    """
    把截止时间的剩余时间设置为数据库语句超时。
    超时的语句由数据库中断并抛出DatabaseError，配合Deadline.guard转换为临时性异常。
    
    - MySQL: SET SESSION max_execution_time（只对SELECT生效），结束后恢复为0；
    - PostgreSQL: set_config('statement_timeout')，在事务中时只作用于当前事务；
    - SQLite: 在连接上注册进度回调，截止时间一过即中断当前语句。
    
    Args:
        deadline: 截止时间
        using: 数据库别名
    """
    remaining = deadline.remaining()
    if remaining is None:
        yield
        return
    
    connection = connections[using]
    millis = max(1, int(remaining * 1000))
    
    if connection.vendor == 'sqlite':
        connection.ensure_connection()
        raw_connection = connection.connection
        raw_connection.set_progress_handler(lambda: 1 if deadline.expired else 0, SQLITE_PROGRESS_STEPS)
        try:
            yield
        finally:
            raw_connection.set_progress_handler(None, 0)
    
    elif connection.vendor == 'mysql':
        with connection.cursor() as cursor:
            cursor.execute("SET SESSION max_execution_time = %s", [millis])
        try:
            yield
        finally:
            with connection.cursor() as cursor:
                cursor.execute("SET SESSION max_execution_time = 0")
    
    elif connection.vendor == 'postgresql':
        is_local = connection.in_atomic_block
        with connection.cursor() as cursor:
            cursor.execute("SELECT set_config('statement_timeout', %s, %s)", [str(millis), is_local])
        try:
            yield
        finally:
            if not is_local:
                with connection.cursor() as cursor:
                    cursor.execute("RESET statement_timeout")
    
    else:
        logger.debug(f"数据库 {connection.vendor} 不支持语句超时，只在调用前后检查截止时间")
        yield
