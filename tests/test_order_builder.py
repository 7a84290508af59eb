"""
订单聚合构建器测试。
"""
import threading
import time
from decimal import Decimal

import pytest

from core.domain.exceptions import TransientInfrastructureException
from core.infrastructure.timeouts import Deadline
from orders.domain import (
    BadPriceException,
    InvalidOrderException,
    LineItem,
    NoLinesException,
    NotFoundException,
    OrderAggregateBuilder,
    OrderErrorKind,
    RequestedLine,
    UnavailableProductException,
    compute_order_totals,
)


class TestOrderAggregateBuilder:
    
    def test_build_prices_lines_from_catalog(self, builder, customer, two_lines):
        order = builder.build("42", customer, two_lines)
        
        assert order.is_transient
        assert order.total_items == 3
        assert order.total_amount == Decimal("25.50")
        assert [line.product_name for line in order.lines] == ["Widget", "Gadget"]
        assert order.lines[1].unit_price == Decimal("5.50")
    
    def test_build_records_created_event(self, builder, customer, two_lines):
        order = builder.build("42", customer, two_lines)
        
        events = order.pending_events
        assert len(events) == 1
        assert events[0].event_type.value == "CREATED"
    
    def test_empty_lines_rejected_before_catalog_lookup(self, builder, catalog, customer):
        with pytest.raises(NoLinesException) as exc_info:
            builder.build("42", customer, [])
        
        assert exc_info.value.kind == OrderErrorKind.NO_LINES
        assert catalog.lookups == 0
    
    def test_unknown_product_fails_fast(self, builder, customer):
        lines = [
            RequestedLine(product_id="p1", quantity=1),
            RequestedLine(product_id="missing", quantity=1),
        ]
        
        with pytest.raises(NotFoundException) as exc_info:
            builder.build("42", customer, lines)
        
        assert exc_info.value.entity_id == "missing"
        assert exc_info.value.entity_name == NotFoundException.PRODUCT
    
    def test_mismatched_price_rejected(self, builder, customer):
        lines = [RequestedLine(product_id="p1", quantity=1, unit_price=Decimal("9.99"))]
        
        with pytest.raises(BadPriceException) as exc_info:
            builder.build("42", customer, lines)
        
        assert exc_info.value.catalog_price == Decimal("10.00")
        assert exc_info.value.requested_price == Decimal("9.99")
    
    def test_float_price_compared_exactly(self, builder, customer):
        lines = [RequestedLine(product_id="p2", quantity=1, unit_price=5.5)]
        
        order = builder.build("42", customer, lines)
        
        assert order.total_amount == Decimal("5.50")
    
    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_below_one_rejected(self, builder, catalog, customer, quantity):
        with pytest.raises(InvalidOrderException) as exc_info:
            builder.build("42", customer, [RequestedLine(product_id="p1", quantity=quantity)])
        
        assert exc_info.value.field_name == "lines[0].quantity"
        assert catalog.lookups == 0
    
    def test_inactive_product_unavailable(self, builder, customer):
        with pytest.raises(UnavailableProductException):
            builder.build("42", customer, [RequestedLine(product_id="p3", quantity=1)])
    
    def test_cumulative_quantity_checked_against_stock(self, builder, customer):
        lines = [
            RequestedLine(product_id="p2", quantity=3),
            RequestedLine(product_id="p2", quantity=3),
        ]
        
        with pytest.raises(UnavailableProductException) as exc_info:
            builder.build("42", customer, lines)
        
        assert exc_info.value.requested == 6
        assert exc_info.value.available == 5
    
    def test_expired_deadline_becomes_transient_error(self, builder, customer, two_lines):
        now = [0.0]
        deadline = Deadline(1.0, clock=lambda: now[0])
        now[0] = 2.0
        
        with pytest.raises(TransientInfrastructureException) as exc_info:
            builder.build("42", customer, two_lines, deadline=deadline)
        
        assert exc_info.value.retryable is True
    
    def test_hung_catalog_lookup_is_bounded_by_deadline(self, catalog, customer, two_lines):
        release = threading.Event()
        
        class HungCatalog:
            def get_by_id(self, id):
                release.wait(2)
                return catalog.get_by_id(id)
        
        builder = OrderAggregateBuilder(HungCatalog())
        started_at = time.monotonic()
        try:
            with pytest.raises(TransientInfrastructureException) as exc_info:
                builder.build("42", customer, two_lines, deadline=Deadline(0.2))
            elapsed = time.monotonic() - started_at
        finally:
            release.set()
        
        assert elapsed < 1.0
        assert exc_info.value.operation == "商品目录查询"
    
    def test_invalid_customer_rejected(self, builder, customer, two_lines):
        bad_customer = customer.__class__(
            full_name="Al",
            email=customer.email,
            phone=customer.phone,
            address=customer.address,
        )
        
        with pytest.raises(InvalidOrderException) as exc_info:
            builder.build("42", bad_customer, two_lines)
        
        assert exc_info.value.field_name == "customer.full_name"


class TestComputeOrderTotals:
    
    def test_totals_are_exact_and_repeatable(self):
        lines = [
            LineItem("a", "A", Decimal("0.10"), 3),
            LineItem("b", "B", Decimal("0.20"), 1),
        ]
        
        first = compute_order_totals(lines)
        second = compute_order_totals(lines)
        
        assert first == (4, Decimal("0.50"))
        assert first == second
    
    def test_line_item_rejects_float_price(self):
        with pytest.raises(TypeError):
            LineItem("a", "A", 0.1, 1)
