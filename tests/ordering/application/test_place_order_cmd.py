"""Application tests for placing orders through the FulfillmentEngine."""

import pytest
from ordering.engine import OrderDraft
from protean.exceptions import ValidationError
from shared.errors import PermissionDenied


def _draft(**overrides):
    defaults = {
        "customer_name": "Maya Chen",
        "order_type": "Pickup",
        "items": [{"product_id": "P1", "quantity": 2}],
    }
    defaults.update(overrides)
    return OrderDraft(**defaults)


class TestPlaceOrder:
    def test_cashier_places_pickup_order(self, engine, cashier):
        order = engine.create_order(cashier, _draft())
        assert order.status == "Pending"
        assert order.total == 9.00
        assert order.courier_id is None

    def test_order_is_persisted(self, engine, cashier):
        order = engine.create_order(cashier, _draft())
        assert engine.get_order(order.id) == order

    def test_lines_are_priced_from_catalog(self, engine, cashier):
        order = engine.create_order(
            cashier,
            _draft(items=[{"product_id": "P1", "quantity": 1, "unit_price": 0.01}, {"product_id": "P2", "quantity": 2}]),
        )
        assert [(line.product_id, line.unit_price) for line in order.items] == [("P1", 4.50), ("P2", 2.25)]
        assert order.total == 9.00

    def test_delivery_order_keeps_location(self, engine, cashier):
        order = engine.create_order(
            cashier,
            _draft(order_type="Delivery", delivery_location={"address": "12 Harbour St", "city": "Lisbon"}),
        )
        assert order.delivery_address == "12 Harbour St"
        assert order.delivery_city == "Lisbon"

    def test_customer_id_is_kept(self, engine, cashier):
        order = engine.create_order(cashier, _draft(customer_id="cust-7"))
        assert order.customer_id == "cust-7"

    def test_admin_may_place_orders(self, engine, admin):
        assert engine.create_order(admin, _draft()).status == "Pending"

    def test_courier_may_not_place_orders(self, engine, courier_a):
        with pytest.raises(PermissionDenied):
            engine.create_order(courier_a, _draft())
        assert engine.list_orders() == []

    def test_empty_order_is_rejected(self, engine, cashier):
        with pytest.raises(ValidationError):
            engine.create_order(cashier, _draft(items=[]))

    def test_unknown_product_is_rejected(self, engine, cashier):
        with pytest.raises(ValidationError) as exc:
            engine.create_order(cashier, _draft(items=[{"product_id": "nope", "quantity": 1}]))
        assert "items" in exc.value.messages
        assert engine.list_orders() == []

    def test_delivery_without_location_is_rejected(self, engine, cashier):
        with pytest.raises(ValidationError):
            engine.create_order(cashier, _draft(order_type="Delivery"))

    def test_each_order_gets_a_new_id(self, engine, cashier):
        first = engine.create_order(cashier, _draft())
        second = engine.create_order(cashier, _draft())
        assert first.id != second.id
        assert [o.id for o in engine.list_orders()] == [first.id, second.id]
