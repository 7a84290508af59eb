"""
超时控制测试。
"""
import threading
import time

import pytest
from django.db import DatabaseError, OperationalError, connection

from core.domain.exceptions import TransientInfrastructureException
from core.infrastructure.timeouts import Deadline, statement_timeout


class FakeClock:
    
    def __init__(self):
        self.now = 100.0
    
    def __call__(self):
        return self.now


def test_unbounded_deadline_never_expires():
    deadline = Deadline.unbounded()
    
    assert deadline.remaining() is None
    assert not deadline.expired
    deadline.check("任意操作")


@pytest.mark.parametrize("timeout", [0, -1])
def test_timeout_must_be_positive(timeout):
    with pytest.raises(ValueError):
        Deadline(timeout)


def test_deadline_expires_with_clock():
    clock = FakeClock()
    deadline = Deadline(2.0, clock=clock)
    
    assert deadline.remaining() == 2.0
    clock.now += 1.5
    assert deadline.remaining() == 0.5
    clock.now += 0.5
    assert deadline.expired
    assert deadline.remaining() == 0.0
    
    with pytest.raises(TransientInfrastructureException) as exc_info:
        deadline.check("订单保存")
    assert exc_info.value.operation == "订单保存"
    assert exc_info.value.retryable


def test_guard_rejects_expired_deadline_before_running():
    clock = FakeClock()
    deadline = Deadline(1.0, clock=clock)
    clock.now += 5
    calls = []
    
    with pytest.raises(TransientInfrastructureException):
        with deadline.guard("商品目录查询"):
            calls.append(1)
    
    assert calls == []


def test_guard_reports_call_that_outlived_deadline():
    clock = FakeClock()
    deadline = Deadline(1.0, clock=clock)
    
    with pytest.raises(TransientInfrastructureException):
        with deadline.guard("商品目录查询"):
            clock.now += 2


def test_guard_can_skip_check_after_call():
    clock = FakeClock()
    deadline = Deadline(1.0, clock=clock)
    
    with deadline.guard("订单保存", check_after=False):
        clock.now += 2
    
    assert deadline.expired


@pytest.mark.parametrize("error", [DatabaseError("gone"), OperationalError("locked"), ConnectionRefusedError()])
def test_guard_maps_infrastructure_errors(error):
    with pytest.raises(TransientInfrastructureException) as exc_info:
        with Deadline(5.0).guard("商品目录查询"):
            raise error
    
    assert exc_info.value.__cause__ is error


def test_guard_lets_domain_errors_through():
    with pytest.raises(KeyError):
        with Deadline(5.0).guard("商品目录查询"):
            raise KeyError("p1")


class TestDeadlineCall:
    
    def test_unbounded_call_runs_inline(self):
        caller = threading.current_thread()
        
        result = Deadline.unbounded().call("商品目录查询", lambda: threading.current_thread())
        
        assert result is caller
    
    def test_bounded_call_returns_result(self):
        assert Deadline(5.0).call("商品目录查询", lambda a, b=0: a + b, 1, b=2) == 3
    
    def test_hung_call_is_cut_short(self):
        release = threading.Event()
        deadline = Deadline(0.2)
        started_at = time.monotonic()
        try:
            with pytest.raises(TransientInfrastructureException) as exc_info:
                deadline.call("商品目录查询", release.wait, 5)
            elapsed = time.monotonic() - started_at
        finally:
            release.set()
        
        assert elapsed < 1.0
        assert exc_info.value.operation == "商品目录查询"
    
    def test_expired_deadline_does_not_start_call(self):
        clock = FakeClock()
        deadline = Deadline(1.0, clock=clock)
        clock.now += 5
        calls = []
        
        with pytest.raises(TransientInfrastructureException):
            deadline.call("商品目录查询", calls.append, 1)
        
        assert calls == []
    
    def test_call_maps_infrastructure_errors(self):
        def refuse():
            raise ConnectionRefusedError()
        
        with pytest.raises(TransientInfrastructureException) as exc_info:
            Deadline(5.0).call("商品目录查询", refuse)
        
        assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)


@pytest.mark.django_db
class TestStatementTimeout:
    
    COUNT_QUERY = (
        "WITH RECURSIVE cnt(x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM cnt LIMIT 50000000) "
        "SELECT count(*) FROM cnt"
    )
    
    def test_unbounded_deadline_sets_nothing(self):
        with statement_timeout(Deadline.unbounded()):
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                assert cursor.fetchone() == (1,)
    
    def test_statement_past_deadline_is_interrupted(self):
        clock = FakeClock()
        deadline = Deadline(1.0, clock=clock)
        
        with pytest.raises(TransientInfrastructureException):
            with deadline.guard("慢查询", check_after=False), statement_timeout(deadline):
                clock.now += 5
                with connection.cursor() as cursor:
                    cursor.execute(self.COUNT_QUERY)
        
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            assert cursor.fetchone() == (1,)
