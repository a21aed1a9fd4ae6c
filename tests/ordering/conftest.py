import pytest
from protean import current_domain

from shared.actors import Actor, Role


def _reset_data():
    for _, provider in current_domain.providers.items():
        provider._data_reset()
    current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield
        _reset_data()


@pytest.fixture(autouse=True)
def menu():
    """The seeded café menu plus two fixed-price test products."""
    from ordering.catalog import get_catalog

    catalog = get_catalog()
    catalog.add_product("P1", "House Blend", 4.50, category="Coffee")
    catalog.add_product("P2", "Oat Cookie", 2.25, category="Bakery")
    return catalog


@pytest.fixture()
def engine(ordering_bed):
    from ordering.domain import ordering
    from ordering.engine import FulfillmentEngine
    from ordering.store import OrderStore

    return FulfillmentEngine(OrderStore(ordering, lock_timeout=2.0))


@pytest.fixture()
def admin():
    return Actor("admin-1", Role.ADMIN)


@pytest.fixture()
def cashier():
    return Actor("cashier-1", Role.CASHIER)


@pytest.fixture()
def courier_a():
    return Actor("courier-ana", Role.COURIER)


@pytest.fixture()
def courier_b():
    return Actor("courier-ben", Role.COURIER)
