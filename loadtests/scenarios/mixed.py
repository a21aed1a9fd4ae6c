"""Mixed café workload scenario.

Combines the ordering and loyalty journeys with weights that model a
busy counter with a steady stream of deliveries. This is the recommended
scenario for a load baseline.
"""

from locust import HttpUser, between

from loadtests.scenarios.loyalty import PointsJourney
from loadtests.scenarios.ordering import (
    CounterOrderJourney,
    DeliveryDispatchJourney,
    OrderEditAndCancelJourney,
)


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Ordering (80%):
    - Counter orders: most common
    - Deliveries: claimed and completed by couriers
    - Edits and cancellations: occasional, with a stale-version retry

    Loyalty (20%):
    - Accrual and redemption at the till
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        CounterOrderJourney: 8,
        DeliveryDispatchJourney: 5,
        OrderEditAndCancelJourney: 3,
        PointsJourney: 4,
    }
