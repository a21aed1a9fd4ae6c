"""Tests for the Order state machine — legal and illegal transitions."""

import pytest
from ordering.order.events import CourierAssigned, OrderStatusChanged
from ordering.order.order import Order, OrderStatus, OrderType
from protean.exceptions import ValidationError
from shared.errors import Conflict, ConflictReason


def _make_order(order_type=OrderType.PICKUP.value):
    location = {"address": "12 Harbour St", "city": "Lisbon"} if order_type == OrderType.DELIVERY.value else None
    order = Order.place(
        customer_name="Maya Chen",
        order_type=order_type,
        lines=[{"product_id": "P1", "name": "House Blend", "category": "Coffee", "unit_price": 4.5, "quantity": 2}],
        placed_by="cashier-1",
        delivery_location=location,
    )
    order._events.clear()
    return order


def _advance_to(order, status):
    if status in (OrderStatus.PROCESSING, OrderStatus.COMPLETED):
        order.change_status(OrderStatus.PROCESSING)
    if status == OrderStatus.COMPLETED:
        order.change_status(OrderStatus.COMPLETED)
    if status == OrderStatus.CANCELLED:
        order.change_status(OrderStatus.CANCELLED)
    order._events.clear()
    return order


class TestValidTransitions:
    def test_pending_to_processing(self):
        order = _make_order()
        order.change_status(OrderStatus.PROCESSING)
        assert order.status == OrderStatus.PROCESSING.value

    def test_processing_to_completed(self):
        order = _advance_to(_make_order(), OrderStatus.PROCESSING)
        order.change_status(OrderStatus.COMPLETED)
        assert order.status == OrderStatus.COMPLETED.value

    def test_pending_to_cancelled(self):
        order = _make_order()
        order.change_status(OrderStatus.CANCELLED)
        assert order.status == OrderStatus.CANCELLED.value

    def test_processing_to_cancelled(self):
        order = _advance_to(_make_order(), OrderStatus.PROCESSING)
        order.change_status(OrderStatus.CANCELLED)
        assert order.status == OrderStatus.CANCELLED.value

    def test_each_change_bumps_version(self):
        order = _make_order()
        order.change_status(OrderStatus.PROCESSING)
        order.change_status(OrderStatus.COMPLETED)
        assert order.version == 3

    def test_change_raises_status_changed_event(self):
        order = _make_order()
        order.change_status(OrderStatus.PROCESSING, changed_by="admin-1")
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "Pending"
        assert event.new_status == "Processing"
        assert event.changed_by == "admin-1"


class TestInvalidTransitions:
    @pytest.mark.parametrize(
        "start, target",
        [
            (OrderStatus.PENDING, OrderStatus.COMPLETED),
            (OrderStatus.PROCESSING, OrderStatus.PENDING),
            (OrderStatus.COMPLETED, OrderStatus.PROCESSING),
            (OrderStatus.COMPLETED, OrderStatus.CANCELLED),
            (OrderStatus.CANCELLED, OrderStatus.PENDING),
            (OrderStatus.CANCELLED, OrderStatus.PROCESSING),
        ],
    )
    def test_illegal_edge_is_rejected(self, start, target):
        order = _advance_to(_make_order(), start)
        with pytest.raises(ValidationError) as exc:
            order.change_status(target)
        assert "Cannot transition" in str(exc.value)
        assert order.status == start.value

    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_same_state_is_rejected(self, status):
        order = _advance_to(_make_order(), status)
        with pytest.raises(ValidationError) as exc:
            order.change_status(status)
        assert "already" in str(exc.value)

    def test_rejected_transition_leaves_version_unchanged(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.change_status(OrderStatus.COMPLETED)
        assert order.version == 1
        assert order._events == []


class TestCourierAssignment:
    def test_assignment_moves_order_to_processing(self):
        order = _make_order(OrderType.DELIVERY.value)
        order.assign_courier("courier-ana", "Ana Ribeiro")
        assert order.status == OrderStatus.PROCESSING.value
        assert order.courier_id == "courier-ana"
        assert order.courier_name == "Ana Ribeiro"
        assert order.version == 2

    def test_assignment_raises_events(self):
        order = _make_order(OrderType.DELIVERY.value)
        order.assign_courier("courier-ana", "Ana Ribeiro")
        assert [type(e) for e in order._events] == [CourierAssigned, OrderStatusChanged]

    def test_second_assignment_conflicts(self):
        order = _make_order(OrderType.DELIVERY.value)
        order.assign_courier("courier-ana", "Ana Ribeiro")
        with pytest.raises(Conflict) as exc:
            order.assign_courier("courier-ben", "Ben Okafor")
        assert exc.value.reason is ConflictReason.ALREADY_ASSIGNED
        assert order.courier_id == "courier-ana"

    def test_pickup_order_cannot_be_assigned(self):
        order = _make_order()
        with pytest.raises(ValidationError) as exc:
            order.assign_courier("courier-ana", "Ana Ribeiro")
        assert "order_type" in exc.value.messages

    def test_processing_delivery_gains_courier_without_transition(self):
        order = _advance_to(_make_order(OrderType.DELIVERY.value), OrderStatus.PROCESSING)
        order.assign_courier("courier-ana", "Ana Ribeiro")
        assert order.status == OrderStatus.PROCESSING.value
        assert order.courier_id == "courier-ana"
        assert order.version == 3
        assert [type(e) for e in order._events] == [CourierAssigned]

    def test_cancelled_delivery_cannot_be_assigned(self):
        order = _advance_to(_make_order(OrderType.DELIVERY.value), OrderStatus.CANCELLED)
        with pytest.raises(ValidationError):
            order.assign_courier("courier-ana", "Ana Ribeiro")
        assert order.courier_id is None


class TestItemQuantity:
    def test_quantity_change_recomputes_total(self):
        order = _make_order()
        order.update_item_quantity("P1", 3)
        assert order.total == 13.50
        assert order.version == 2

    def test_quantity_below_one_is_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.update_item_quantity("P1", 0)
        assert order.total == 9.00

    def test_unknown_product_is_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError) as exc:
            order.update_item_quantity("P9", 2)
        assert "product_id" in exc.value.messages

    def test_only_pending_orders_can_be_edited(self):
        order = _advance_to(_make_order(), OrderStatus.PROCESSING)
        with pytest.raises(ValidationError) as exc:
            order.update_item_quantity("P1", 3)
        assert "status" in exc.value.messages


class TestDeletion:
    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CANCELLED])
    def test_deletable_statuses(self, status):
        order = _advance_to(_make_order(), status)
        order.ensure_deletable()

    @pytest.mark.parametrize("status", [OrderStatus.PROCESSING, OrderStatus.COMPLETED])
    def test_undeletable_statuses(self, status):
        order = _advance_to(_make_order(), status)
        with pytest.raises(ValidationError):
            order.ensure_deletable()
