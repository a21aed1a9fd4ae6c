"""Ordering load test scenarios.

Stateful SequentialTaskSet journeys covering the counter order lifecycle,
cancellation with a stale-version retry, and courier dispatch of a delivery
order.
"""

import random

from locust import SequentialTaskSet, task

from loadtests.data_generators import COURIER_IDS, actor_headers, order_data
from loadtests.helpers.response import extract_error_detail, is_conflict
from loadtests.helpers.state import OrderState

CASHIER = actor_headers("Cashier", "cashier-lt")


class CounterOrderJourney(SequentialTaskSet):
    """Create Pickup Order -> Processing -> Completed.

    The happy path at the counter. The completed order credits loyalty
    points through the change feed.
    """

    def on_start(self):
        self.state = OrderState()

    @task
    def create_order(self):
        payload = order_data("Pickup")
        with self.client.post(
            "/orders",
            json=payload,
            headers=CASHIER,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.customer_id = body["customer_id"]
                self.state.version = body["version"]
            else:
                resp.failure(f"Create order failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    def _move_to(self, status: str):
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json={"status": status, "expected_version": self.state.version},
            headers=CASHIER,
            catch_response=True,
            name="PUT /orders/{id}/status",
        ) as resp:
            if resp.status_code == 200:
                self.state.version = resp.json()["version"]
                self.state.current_status = status
            else:
                resp.failure(f"Move to {status} failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def start_processing(self):
        self._move_to("Processing")

    @task
    def complete(self):
        self._move_to("Completed")

    @task
    def check_loyalty(self):
        self.client.get(f"/loyalty/accounts/{self.state.customer_id}", name="GET /loyalty/accounts/{id}")

    @task
    def done(self):
        self.interrupt()


class OrderEditAndCancelJourney(SequentialTaskSet):
    """Create Order -> Edit Quantity -> Cancel with a stale version -> Re-read -> Cancel.

    Exercises the optimistic version check: the first cancel deliberately
    sends the pre-edit version and must come back as a retryable conflict.
    """

    def on_start(self):
        self.state = OrderState()

    @task
    def create_order(self):
        with self.client.post(
            "/orders",
            json=order_data("Pickup", num_items=1),
            headers=CASHIER,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.version = body["version"]
                self.product_id = body["items"][0]["product_id"]
            else:
                resp.failure(f"Create order failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def edit_quantity(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/items/{self.product_id}",
            json={"quantity": random.randint(2, 4)},
            headers=CASHIER,
            catch_response=True,
            name="PUT /orders/{id}/items/{product_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Edit quantity failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def cancel_with_stale_version(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json={"status": "Cancelled", "expected_version": self.state.version},
            headers=CASHIER,
            catch_response=True,
            name="PUT /orders/{id}/status [stale]",
        ) as resp:
            if is_conflict(resp, "StaleVersion"):
                resp.success()
            else:
                resp.failure(f"Expected a stale version conflict, got {resp.status_code}")

    @task
    def reread_and_cancel(self):
        current = self.client.get(f"/orders/{self.state.order_id}", name="GET /orders/{id}").json()
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json={"status": "Cancelled", "expected_version": current["version"]},
            headers=CASHIER,
            catch_response=True,
            name="PUT /orders/{id}/status",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class DeliveryDispatchJourney(SequentialTaskSet):
    """Create Delivery Order -> Courier Claims -> Courier Completes -> Delivery Board."""

    def on_start(self):
        self.state = OrderState()
        self.courier = actor_headers("Courier", random.choice(COURIER_IDS))

    @task
    def create_order(self):
        with self.client.post(
            "/orders",
            json=order_data("Delivery"),
            headers=CASHIER,
            catch_response=True,
            name="POST /orders [delivery]",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order_id"]
            else:
                resp.failure(f"Create delivery failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def claim(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/courier",
            json={},
            headers=self.courier,
            catch_response=True,
            name="PUT /orders/{id}/courier",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Claim failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def complete(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json={"status": "Completed"},
            headers=self.courier,
            catch_response=True,
            name="PUT /orders/{id}/status [courier]",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Complete failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def delivery_board(self):
        self.client.get("/orders/deliveries", params={"status": "Processing"}, name="GET /orders/deliveries")

    @task
    def done(self):
        self.interrupt()
