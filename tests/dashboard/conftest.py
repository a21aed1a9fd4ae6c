from datetime import UTC, datetime
from types import SimpleNamespace

import pytest


def make_line(product_id="P1", name="House Blend", category="Coffee", unit_price=4.5, quantity=1):
    return SimpleNamespace(
        product_id=product_id,
        name=name,
        category=category,
        unit_price=unit_price,
        quantity=quantity,
    )


def make_order(total=9.0, status="Pending", order_type="Pickup", created_at=None, items=None):
    return SimpleNamespace(
        status=status,
        order_type=order_type,
        total=total,
        created_at=created_at or datetime(2024, 1, 1, 12, 0, tzinfo=UTC),
        items=items if items is not None else [make_line(quantity=2)],
    )


@pytest.fixture()
def order_factory():
    return make_order


@pytest.fixture()
def line_factory():
    return make_line
