import pytest
from protean import current_domain

from shared.actors import Actor, Role


def _reset_data():
    for _, provider in current_domain.providers.items():
        provider._data_reset()
    current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _ctx(loyalty_bed):
    with loyalty_bed.domain_context():
        yield
        _reset_data()


@pytest.fixture()
def ledger(loyalty_bed):
    from loyalty.domain import loyalty
    from loyalty.ledger import LoyaltyLedger

    return LoyaltyLedger(loyalty, lock_timeout=2.0)


@pytest.fixture()
def admin():
    return Actor("admin-1", Role.ADMIN)


@pytest.fixture()
def cashier():
    return Actor("cashier-1", Role.CASHIER)
