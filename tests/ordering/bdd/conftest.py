"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.engine import OrderDraft
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from shared.actors import Actor, Role
from shared.errors import BeanStreamError

ACTORS = {
    "the admin": Actor("admin-1", Role.ADMIN),
    "the cashier": Actor("cashier-1", Role.CASHIER),
    "courier A": Actor("courier-ana", Role.COURIER),
    "courier B": Actor("courier-ben", Role.COURIER),
}


@pytest.fixture()
def error():
    """Container for the failure a When step ran into."""
    return {"exc": None}


@pytest.fixture()
def actors():
    return dict(ACTORS)


@pytest.fixture()
def attempt(error):
    """Run a step's operation, capturing the failure for a later Then step."""

    def run(operation):
        try:
            return operation()
        except (ValidationError, BeanStreamError) as exc:
            error["exc"] = exc
            return None

    return run


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the menu lists "{product_id}" at {price:f}'))
def _(menu, product_id, price):
    menu.add_product(product_id, product_id, price)


@given(
    parsers.cfparse('a pickup order for {quantity:d} x "{product_id}" was placed'),
    target_fixture="order",
)
def _(engine, quantity, product_id):
    draft = OrderDraft(
        customer_name="Maya Chen",
        order_type="Pickup",
        items=[{"product_id": product_id, "quantity": quantity}],
    )
    return engine.create_order(ACTORS["the cashier"], draft)


@given(
    parsers.cfparse('a delivery order to "{city}" was placed'),
    target_fixture="order",
)
def _(engine, city):
    draft = OrderDraft(
        customer_name="Leo Park",
        order_type="Delivery",
        items=[{"product_id": "P1", "quantity": 1}],
        delivery_location={"address": "3 Rua Nova", "city": city},
    )
    return engine.create_order(ACTORS["the cashier"], draft)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(engine, order, status):
    assert engine.get_order(order.id).status == status


@then(parsers.cfparse("the order total is {total:f}"))
def _(engine, order, total):
    assert engine.get_order(order.id).total == pytest.approx(total)


@then(parsers.cfparse("the order is at version {version:d}"))
def _(engine, order, version):
    assert engine.get_order(order.id).version == version


@then("the request is rejected as invalid")
def _(error):
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the request fails with "{code}"'))
def _(error, code):
    assert isinstance(error["exc"], BeanStreamError)
    assert error["exc"].code == code
