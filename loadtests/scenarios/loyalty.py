"""Loyalty load test scenarios."""

from locust import SequentialTaskSet, task

from loadtests.data_generators import actor_headers, customer_id, points_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import LoyaltyState

CASHIER = actor_headers("Cashier", "cashier-lt")


class PointsJourney(SequentialTaskSet):
    """Accrue -> Redeem within balance -> Redeem beyond balance -> Read account."""

    def on_start(self):
        self.state = LoyaltyState(customer_id=customer_id())

    @task
    def accrue(self):
        with self.client.post(
            f"/loyalty/accounts/{self.state.customer_id}/accrue",
            json=points_data(10, 50),
            headers=CASHIER,
            catch_response=True,
            name="POST /loyalty/accounts/{id}/accrue",
        ) as resp:
            if resp.status_code == 200:
                self.state.balance = resp.json()["points"]
            else:
                resp.failure(f"Accrue failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def redeem_within_balance(self):
        points = max(1, self.state.balance // 2)
        with self.client.post(
            f"/loyalty/accounts/{self.state.customer_id}/redeem",
            json={"points": points},
            headers=CASHIER,
            catch_response=True,
            name="POST /loyalty/accounts/{id}/redeem",
        ) as resp:
            if resp.status_code == 200 and resp.json()["redeemed"]:
                self.state.balance -= points
                self.state.redemptions.append(points)
            else:
                resp.failure(f"Redeem failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def redeem_beyond_balance(self):
        with self.client.post(
            f"/loyalty/accounts/{self.state.customer_id}/redeem",
            json={"points": self.state.balance + 1},
            headers=CASHIER,
            catch_response=True,
            name="POST /loyalty/accounts/{id}/redeem [overdraw]",
        ) as resp:
            if resp.status_code == 200 and resp.json()["redeemed"] is False:
                resp.success()
            else:
                resp.failure(f"Overdraw was not declined: {resp.status_code}")

    @task
    def read_account(self):
        with self.client.get(
            f"/loyalty/accounts/{self.state.customer_id}",
            catch_response=True,
            name="GET /loyalty/accounts/{id}",
        ) as resp:
            if resp.status_code != 200 or resp.json()["points"] != self.state.balance:
                resp.failure(f"Balance drifted: expected {self.state.balance}")

    @task
    def done(self):
        self.interrupt()
