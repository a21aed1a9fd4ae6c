"""Fixtures for cross-domain integration tests.

These tests follow an order from the ordering context through the change
feed into the dashboard and the loyalty ledger, so both domains are set up
and their data is reset after every test.
"""

import pytest
from protean import current_domain


def _reset(domain):
    with domain.domain_context():
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _domains(ordering_bed, loyalty_bed):
    from loyalty.domain import loyalty
    from ordering.domain import ordering

    yield

    _reset(ordering)
    _reset(loyalty)


@pytest.fixture()
def menu():
    from ordering.catalog import get_catalog

    catalog = get_catalog()
    catalog.add_product("P1", "House Blend", 4.50, category="Coffee")
    catalog.add_product("P2", "Oat Cookie", 2.25, category="Bakery")
    return catalog


@pytest.fixture()
def wired(menu):
    """A fulfillment engine feeding a dashboard and a loyalty rewarder."""
    from dashboard.engine import AggregationEngine
    from loyalty.domain import loyalty
    from loyalty.ledger import LoyaltyLedger
    from loyalty.rewards import CompletedOrderRewarder
    from ordering.domain import ordering
    from ordering.engine import FulfillmentEngine
    from ordering.store import OrderStore

    engine = FulfillmentEngine(OrderStore(ordering, lock_timeout=2.0))
    dashboard = AggregationEngine()
    ledger = LoyaltyLedger(loyalty, lock_timeout=2.0)
    dashboard.attach(engine.store)
    engine.subscribe(CompletedOrderRewarder(ledger))
    return engine, dashboard, ledger
