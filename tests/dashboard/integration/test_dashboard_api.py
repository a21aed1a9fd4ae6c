"""Integration tests for the Dashboard API via TestClient."""

from types import SimpleNamespace

import pytest
from dashboard.api.routes import dashboard_router
from dashboard.engine import get_aggregation_engine
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(dashboard_router)
    return TestClient(app)


class TestStatsEndpoint:
    def test_empty_stats(self, client):
        body = client.get("/dashboard/stats").json()
        assert body["total_orders"] == 0
        assert body["average_order_value"] == 0
        assert body["daily_revenue"] == []

    def test_stats_reflect_latest_snapshot(self, client, order_factory):
        get_aggregation_engine().on_snapshot(
            SimpleNamespace(sequence=1, orders=(order_factory(total=10.0), order_factory(total=5.0)))
        )
        body = client.get("/dashboard/stats").json()
        assert body["total_revenue"] == 15.0
        assert body["daily_revenue"] == [{"date": "2024-01-01", "revenue": 15.0}]
        assert body["top_products"] == [{"product_id": "P1", "name": "House Blend", "count": 2}]
