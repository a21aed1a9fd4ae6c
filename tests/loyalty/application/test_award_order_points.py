"""Application tests for crediting completed orders exactly once."""

from types import SimpleNamespace

from loyalty.rewards import CompletedOrderRewarder
from shared.errors import Unavailable


def _snapshot(*orders, sequence=1):
    return SimpleNamespace(sequence=sequence, orders=orders)


def _order(order_id="order-1", status="Completed", customer_id="cust-1", total=9.0):
    return SimpleNamespace(id=order_id, status=status, customer_id=customer_id, total=total)


class TestAwardForOrder:
    def test_award_uses_program_rate(self, ledger, admin):
        ledger.update_program(admin, 2.0, [])
        assert ledger.award_for_order("cust-1", "order-1", 9.75) == 19
        assert ledger.get_account_balance("cust-1") == 19

    def test_award_is_idempotent_per_order(self, ledger):
        assert ledger.award_for_order("cust-1", "order-1", 9.0) == 9
        assert ledger.award_for_order("cust-1", "order-1", 9.0) == 0
        assert ledger.get_account_balance("cust-1") == 9

    def test_distinct_orders_accumulate(self, ledger):
        ledger.award_for_order("cust-1", "order-1", 9.0)
        ledger.award_for_order("cust-1", "order-2", 4.5)
        assert ledger.get_account_balance("cust-1") == 13

    def test_rate_change_does_not_rewrite_past_awards(self, ledger, admin):
        ledger.award_for_order("cust-1", "order-1", 10.0)
        ledger.update_program(admin, 3.0, [])
        ledger.award_for_order("cust-1", "order-1", 10.0)
        assert ledger.get_account_balance("cust-1") == 10

    def test_sub_point_total_credits_nothing(self, ledger):
        assert ledger.award_for_order("cust-1", "order-1", 0.5) == 0


class TestCompletedOrderRewarder:
    def test_completed_orders_are_rewarded(self, ledger):
        rewarder = CompletedOrderRewarder(ledger)
        rewarder(_snapshot(_order()))
        assert ledger.get_account_balance("cust-1") == 9

    def test_replayed_snapshots_reward_once(self, ledger):
        rewarder = CompletedOrderRewarder(ledger)
        snapshot = _snapshot(_order())
        rewarder(snapshot)
        rewarder(snapshot)
        CompletedOrderRewarder(ledger)(snapshot)
        assert ledger.get_account_balance("cust-1") == 9

    def test_other_statuses_are_ignored(self, ledger):
        rewarder = CompletedOrderRewarder(ledger)
        rewarder(_snapshot(_order(status="Processing"), _order("order-2", status="Cancelled")))
        assert ledger.redeem("cust-1", 1) is False

    def test_anonymous_orders_are_ignored(self, ledger):
        rewarder = CompletedOrderRewarder(ledger)
        rewarder(_snapshot(_order(customer_id=None)))
        assert ledger.redeem("cust-1", 1) is False

    def test_failed_award_does_not_block_later_orders(self, ledger):
        class BusyOnce:
            def __init__(self, ledger, busy_order_id):
                self.ledger = ledger
                self.busy_order_id = busy_order_id

            def award_for_order(self, customer_id, order_id, order_total):
                if order_id == self.busy_order_id:
                    self.busy_order_id = None
                    raise Unavailable("loyalty ledger is busy")
                return self.ledger.award_for_order(customer_id, order_id, order_total)

        rewarder = CompletedOrderRewarder(BusyOnce(ledger, "order-1"))
        snapshot = _snapshot(_order("order-1", customer_id="cust-1"), _order("order-2", customer_id="cust-2"))

        rewarder(snapshot)
        assert ledger.get_account_balance("cust-2") == 9
        assert ledger.redeem("cust-1", 1) is False

        rewarder(_snapshot(*snapshot.orders, sequence=2))
        assert ledger.get_account_balance("cust-1") == 9
        assert ledger.get_account_balance("cust-2") == 9

    def test_awarded_ids_follow_the_latest_snapshot(self, ledger):
        rewarder = CompletedOrderRewarder(ledger)
        rewarder(_snapshot(_order("order-1"), _order("order-2")))
        rewarder(_snapshot(_order("order-2"), sequence=2))
        assert rewarder._awarded == {"order-2"}
