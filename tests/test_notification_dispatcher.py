"""
通知分发器测试。
"""
import threading
import time

import pytest

from core.domain.events import EntityKind, EventType
from notifications.dispatcher import DropPolicy, NotificationDispatcher, Subscriber
from notifications.domain import NotificationEnvelope
from tests.conftest import BlockedSubscriber, RecordingSubscriber


def _envelope(payload=None, kind=EntityKind.ORDER, event_type=EventType.CREATED):
    return NotificationEnvelope(kind, event_type, payload if payload is not None else {"id": "1"})


class FailingSubscriber(Subscriber):
    
    def deliver(self, envelope):
        raise RuntimeError("smtp down")


class TestNotificationDispatcher:
    
    def test_blocked_subscriber_does_not_stall_publisher_or_others(self):
        dispatcher = NotificationDispatcher(inbox_capacity=4)
        blocked = BlockedSubscriber()
        healthy = RecordingSubscriber()
        dispatcher.register(blocked)
        dispatcher.register(healthy)
        try:
            publish_time = 0.0
            for i in range(20):
                started_at = time.monotonic()
                dispatcher.publish(_envelope({"id": str(i)}))
                publish_time += time.monotonic() - started_at
                assert dispatcher.inboxes[1].wait_idle(timeout=2)
            
            assert publish_time < 1.0
            assert len(healthy.received) == 20
            assert not dispatcher.inboxes[0].wait_idle(timeout=0.05)
            assert dispatcher.inboxes[0].stats()["dropped"] > 0
        finally:
            blocked.release.set()
            dispatcher.shutdown(timeout=2)
    
    def test_drop_oldest_keeps_latest_envelopes(self):
        dispatcher = NotificationDispatcher(inbox_capacity=2, drop_policy=DropPolicy.DROP_OLDEST)
        blocked = BlockedSubscriber()
        dispatcher.register(blocked)
        try:
            dispatcher.publish(_envelope({"id": "0"}))
            assert blocked.started.wait(timeout=2)
            for i in range(1, 6):
                dispatcher.publish(_envelope({"id": str(i)}))
            blocked.release.set()
            assert dispatcher.wait_idle(timeout=2)
        finally:
            dispatcher.shutdown(timeout=2)
        
        assert [envelope.payload["id"] for envelope in blocked.received] == ["0", "4", "5"]
    
    def test_drop_newest_keeps_earliest_envelopes(self):
        dispatcher = NotificationDispatcher(inbox_capacity=2, drop_policy=DropPolicy.DROP_NEWEST)
        blocked = BlockedSubscriber()
        dispatcher.register(blocked)
        try:
            dispatcher.publish(_envelope({"id": "0"}))
            assert blocked.started.wait(timeout=2)
            handed_off = [dispatcher.publish(_envelope({"id": str(i)})) for i in range(1, 6)]
            blocked.release.set()
            assert dispatcher.wait_idle(timeout=2)
        finally:
            dispatcher.shutdown(timeout=2)
        
        assert handed_off == [1, 1, 0, 0, 0]
        assert [envelope.payload["id"] for envelope in blocked.received] == ["0", "1", "2"]
    
    def test_failing_subscriber_is_isolated(self, dispatcher, recorder):
        failing = FailingSubscriber()
        dispatcher.register(failing)
        
        assert dispatcher.publish(_envelope()) == 2
        assert dispatcher.wait_idle(timeout=2)
        
        assert len(recorder.received) == 1
        assert dispatcher.stats()["FailingSubscriber"]["failed"] == 1
    
    def test_each_subscriber_gets_its_own_copy(self, dispatcher, recorder):
        other = RecordingSubscriber(name="other")
        dispatcher.register(other)
        payload = {"id": "1", "lines": [{"quantity": 1}]}
        
        dispatcher.publish(_envelope(payload))
        assert dispatcher.wait_idle(timeout=2)
        
        recorder.received[0].payload["lines"][0]["quantity"] = 99
        assert other.received[0].payload["lines"][0]["quantity"] == 1
        assert payload["lines"][0]["quantity"] == 1
    
    def test_subscriber_filters(self, dispatcher, recorder):
        emails = RecordingSubscriber(
            name="emails",
            entity_kinds=frozenset({EntityKind.ORDER}),
            event_types=frozenset({EventType.CREATED}),
        )
        dispatcher.register(emails)
        
        dispatcher.publish(_envelope(event_type=EventType.UPDATED))
        dispatcher.publish(_envelope(kind=EntityKind.PRODUCT))
        dispatcher.publish(_envelope())
        assert dispatcher.wait_idle(timeout=2)
        
        assert len(recorder.received) == 3
        assert len(emails.received) == 1
    
    def test_unregister_closes_inbox(self, dispatcher, recorder):
        inbox = dispatcher.inboxes[0]
        
        assert dispatcher.unregister(recorder) is True
        assert dispatcher.unregister(recorder) is False
        assert inbox.closed
        assert dispatcher.publish(_envelope()) == 0
        assert inbox.offer(_envelope()) is False
    
    def test_close_discards_pending_and_wakes_waiters(self):
        dispatcher = NotificationDispatcher(inbox_capacity=8)
        blocked = BlockedSubscriber()
        inbox = dispatcher.register(blocked)
        waited = []
        try:
            dispatcher.publish(_envelope({"id": "0"}))
            assert blocked.started.wait(timeout=2)
            for i in range(1, 4):
                dispatcher.publish(_envelope({"id": str(i)}))
            waiter = threading.Thread(target=lambda: waited.append(inbox.wait_idle(timeout=5)))
            waiter.start()
            
            dispatcher.unregister(blocked)
            
            assert inbox.stats()["dropped"] == 3
            assert inbox.pending == 1
            blocked.release.set()
            waiter.join(timeout=5)
        finally:
            blocked.release.set()
            dispatcher.shutdown(timeout=2)
        
        assert waited == [True]
        assert [envelope.payload["id"] for envelope in blocked.received] == ["0"]
    
    def test_no_envelope_reaches_subscriber_after_unregister(self):
        dispatcher = NotificationDispatcher(inbox_capacity=1000)
        healthy = RecordingSubscriber(name="healthy")
        dispatcher.register(healthy)
        seq_lock = threading.Lock()
        seq = [0]
        stop = threading.Event()
        cutoffs = []
        
        def publish_loop():
            while not stop.is_set():
                with seq_lock:
                    seq[0] += 1
                    current = seq[0]
                dispatcher.publish(_envelope({"seq": current}))
        
        def churn_loop():
            for i in range(30):
                subscriber = RecordingSubscriber(name=f"churn-{i}")
                dispatcher.register(subscriber)
                time.sleep(0.002)
                dispatcher.unregister(subscriber)
                with seq_lock:
                    cutoffs.append((subscriber, seq[0]))
        
        publishers = [threading.Thread(target=publish_loop) for _ in range(3)]
        churner = threading.Thread(target=churn_loop)
        try:
            for thread in publishers:
                thread.start()
            churner.start()
            churner.join(timeout=10)
        finally:
            stop.set()
            for thread in publishers:
                thread.join(timeout=5)
        
        assert len(cutoffs) == 30
        assert dispatcher.wait_idle(timeout=5)
        for subscriber, cutoff in cutoffs:
            assert all(envelope.payload["seq"] <= cutoff for envelope in subscriber.received), subscriber.name
        stats = dispatcher.inboxes[0].stats()
        assert stats["delivered"] + stats["dropped"] == seq[0]
        assert dispatcher.subscribers == (healthy,)
        dispatcher.shutdown(timeout=2)
    
    def test_register_is_idempotent(self, dispatcher, recorder):
        assert dispatcher.register(recorder) is dispatcher.inboxes[0]
        assert len(dispatcher.subscribers) == 1
    
    def test_publish_after_shutdown_is_ignored(self, recorder):
        dispatcher = NotificationDispatcher()
        dispatcher.register(RecordingSubscriber())
        dispatcher.shutdown(timeout=1)
        
        assert dispatcher.publish(_envelope()) == 0
        with pytest.raises(RuntimeError):
            dispatcher.register(recorder)
    
    def test_invalid_capacity_rejected(self):
        with pytest.raises(ValueError):
            NotificationDispatcher(inbox_capacity=0)


class TestNotificationEnvelope:
    
    def test_envelope_is_immutable(self):
        envelope = _envelope()
        
        with pytest.raises(AttributeError):
            envelope.payload = {}
    
    def test_to_dict(self):
        envelope = NotificationEnvelope("product", "DELETED", {"id": "p1"})
        
        data = envelope.to_dict()
        
        assert data["entity"] == "product"
        assert data["type"] == "DELETED"
        assert data["data"] == {"id": "p1"}
        assert "createdAt" in data
