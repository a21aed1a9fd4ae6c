"""Tests for Order aggregate creation, totals and structural invariants."""

import pytest
from ordering.order.events import OrderPlaced
from ordering.order.order import DeliveryLocation, Order, OrderStatus, OrderType
from protean.exceptions import ValidationError


def _lines(**overrides):
    line = {
        "product_id": "P1",
        "name": "House Blend",
        "category": "Coffee",
        "unit_price": 4.50,
        "quantity": 2,
    }
    line.update(overrides)
    return [line]


def _place(**overrides):
    defaults = {
        "customer_name": "Maya Chen",
        "order_type": OrderType.PICKUP.value,
        "lines": _lines(),
        "placed_by": "cashier-1",
    }
    defaults.update(overrides)
    return Order.place(**defaults)


class TestOrderPlacement:
    def test_new_order_is_pending(self):
        order = _place()
        assert order.status == OrderStatus.PENDING.value

    def test_total_is_sum_of_lines(self):
        order = _place()
        assert order.total == 9.00

    def test_total_over_multiple_lines_is_rounded_to_cents(self):
        lines = _lines(quantity=3, unit_price=3.90) + [
            {"product_id": "P2", "name": "Oat Cookie", "category": "Bakery", "unit_price": 2.25, "quantity": 1}
        ]
        order = _place(lines=lines)
        assert order.total == 13.95

    def test_lines_keep_their_sequence(self):
        lines = _lines() + [
            {"product_id": "P2", "name": "Oat Cookie", "category": "Bakery", "unit_price": 2.25, "quantity": 1}
        ]
        order = _place(lines=lines)
        assert [item.product_id for item in order.ordered_items()] == ["P1", "P2"]
        assert [item.line_sequence for item in order.ordered_items()] == [0, 1]

    def test_new_order_has_no_courier(self):
        order = _place()
        assert order.courier_id is None
        assert order.courier_name is None

    def test_new_order_starts_at_version_one(self):
        assert _place().version == 1

    def test_created_at_is_set(self):
        order = _place()
        assert order.created_at is not None
        assert order.updated_at == order.created_at

    def test_placement_raises_order_placed(self):
        order = _place()
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_id == str(order.id)
        assert event.total == 9.00
        assert event.placed_by == "cashier-1"

    def test_empty_order_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _place(lines=[])
        assert "items" in exc.value.messages

    def test_zero_quantity_is_rejected(self):
        with pytest.raises(ValidationError):
            _place(lines=_lines(quantity=0))

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            _place(lines=_lines(unit_price=-1.0))

    def test_unknown_order_type_is_rejected(self):
        with pytest.raises(ValidationError):
            _place(order_type="Drive-through")


class TestDeliveryLocation:
    def test_delivery_order_keeps_location(self):
        order = _place(
            order_type=OrderType.DELIVERY.value,
            delivery_location={"address": "12 Harbour St", "city": "Lisbon"},
        )
        assert order.delivery_location == DeliveryLocation(address="12 Harbour St", city="Lisbon")
        assert order.is_delivery

    def test_delivery_order_without_location_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _place(order_type=OrderType.DELIVERY.value)
        assert "delivery_location" in exc.value.messages

    def test_pickup_order_with_location_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _place(delivery_location={"address": "12 Harbour St", "city": "Lisbon"})
        assert "delivery_location" in exc.value.messages

    def test_location_requires_city(self):
        with pytest.raises(ValidationError):
            _place(order_type=OrderType.DELIVERY.value, delivery_location={"address": "12 Harbour St"})


class TestTotalInvariant:
    def test_assigning_total_directly_is_rejected(self):
        order = _place()
        with pytest.raises(ValidationError) as exc:
            order.total = 1.00
        assert "total" in exc.value.messages

    def test_courier_on_pickup_order_is_rejected(self):
        order = _place()
        with pytest.raises(ValidationError) as exc:
            order.courier_id = "courier-ana"
        assert "courier_id" in exc.value.messages


class TestReorderLines:
    def test_reorder_lines_drop_prices(self):
        order = _place()
        assert order.reorder_lines() == [{"product_id": "P1", "quantity": 2}]
