import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the configuration overlay before any domain module is imported.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering
    from protean.integrations.pytest import DomainFixture

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session")
def loyalty_bed():
    from loyalty.domain import loyalty
    from protean.integrations.pytest import DomainFixture

    bed = DomainFixture(loyalty)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def reset_singletons():
    """Drop adapter and engine singletons after every test."""
    yield

    from dashboard.engine import reset_aggregation_engine
    from loyalty.ledger import reset_loyalty_ledger
    from ordering.catalog import reset_catalog
    from ordering.couriers import reset_courier_directory
    from ordering.engine import reset_fulfillment_engine

    reset_catalog()
    reset_courier_directory()
    reset_fulfillment_engine()
    reset_loyalty_ledger()
    reset_aggregation_engine()
