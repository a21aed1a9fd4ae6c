"""Contention scenarios for the serialized writers.

CourierRaceUser makes several couriers claim the same delivery at once and
verifies that exactly one claim wins. DashboardReaderUser polls the stats
endpoint while writers are busy.
"""

from concurrent.futures import ThreadPoolExecutor

from locust import HttpUser, between, constant_pacing, task

from loadtests.data_generators import COURIER_IDS, actor_headers, order_data
from loadtests.helpers.response import is_conflict

CASHIER = actor_headers("Cashier", "cashier-lt")


class CourierRaceUser(HttpUser):
    """Stress test: concurrent claims on one delivery order.

    Every iteration places a delivery order and fires one claim per courier
    in parallel. Any outcome other than one 200 and the rest 409
    AlreadyAssigned is reported as a failure.
    """

    wait_time = constant_pacing(0.5)

    def _claim(self, order_id: str, courier_id: str):
        return self.client.put(
            f"/orders/{order_id}/courier",
            json={},
            headers=actor_headers("Courier", courier_id),
            name="[RACE] PUT /orders/{id}/courier",
        )

    @task
    def race(self):
        created = self.client.post(
            "/orders",
            json=order_data("Delivery", num_items=1),
            headers=CASHIER,
            name="[RACE] POST /orders",
        )
        if created.status_code != 201:
            return
        order_id = created.json()["order_id"]

        with ThreadPoolExecutor(max_workers=len(COURIER_IDS)) as pool:
            responses = list(pool.map(lambda courier_id: self._claim(order_id, courier_id), COURIER_IDS))

        winners = [r for r in responses if r.status_code == 200]
        losers = [r for r in responses if is_conflict(r, "AlreadyAssigned")]
        if len(winners) != 1 or len(losers) != len(COURIER_IDS) - 1:
            self.environment.events.request.fire(
                request_type="RACE",
                name="claim outcome",
                response_time=0,
                response_length=0,
                response=None,
                context={},
                exception=AssertionError(f"{len(winners)} winners, {len(losers)} conflicts"),
            )


class DashboardReaderUser(HttpUser):
    """Read-only dashboard polling alongside the writers."""

    wait_time = between(0.2, 1.0)

    @task(4)
    def stats(self):
        self.client.get("/dashboard/stats", name="GET /dashboard/stats")

    @task(1)
    def deliveries(self):
        self.client.get("/orders/deliveries", name="GET /orders/deliveries")
