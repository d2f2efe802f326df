"""Tests for tick_economy.ledger."""
from __future__ import annotations

import pytest

from tick_economy.ledger import Ledger
from tick_economy.types import InsufficientFundsError


def _history_sum(ledger: Ledger) -> float:
    return sum(t.amount for t in ledger.recent(len(ledger)))


class TestCreditDebit:
    def test_credit_increases_balance(self) -> None:
        ledger = Ledger()
        assert ledger.credit(100, "s1", 0.0) == 100
        assert ledger.balance == 100
        assert ledger.total_earned == 100

    def test_debit_decreases_balance(self) -> None:
        ledger = Ledger()
        ledger.credit(100, "s1")
        assert ledger.debit(30, "shop") == 70
        assert ledger.total_spent == 30

    def test_debit_records_negative_amount(self) -> None:
        ledger = Ledger()
        ledger.credit(100, "s1")
        ledger.debit(30, "shop")
        assert ledger.recent(1)[0].amount == -30

    def test_overspend_leaves_state_untouched(self) -> None:
        ledger = Ledger()
        ledger.credit(50, "s1")
        with pytest.raises(InsufficientFundsError):
            ledger.debit(51, "shop")
        assert ledger.balance == 50
        assert len(ledger) == 1
        assert ledger.total_spent == 0

    def test_spend_entire_balance(self) -> None:
        ledger = Ledger()
        ledger.credit(50, "s1")
        assert ledger.debit(50, "shop") == 0

    def test_negative_amounts_raise(self) -> None:
        ledger = Ledger()
        with pytest.raises(ValueError):
            ledger.credit(-1, "x")
        with pytest.raises(ValueError):
            ledger.debit(-1, "x")

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_amounts_raise(self, amount: float) -> None:
        ledger = Ledger()
        ledger.credit(10, "seed")
        with pytest.raises(ValueError):
            ledger.credit(amount, "x")
        with pytest.raises(ValueError):
            ledger.debit(amount, "x")
        assert ledger.balance == 10
        assert len(ledger) == 1
        assert ledger.total_earned == 10


class TestHistory:
    def test_recent_newest_first(self) -> None:
        ledger = Ledger()
        ledger.credit(1, "a")
        ledger.credit(2, "b")
        ledger.credit(3, "c")
        assert [t.label for t in ledger.recent(2)] == ["c", "b"]

    def test_recent_clamps_to_length(self) -> None:
        ledger = Ledger()
        ledger.credit(1, "a")
        assert len(ledger.recent(50)) == 1

    def test_recent_zero_is_empty(self) -> None:
        ledger = Ledger()
        ledger.credit(1, "a")
        assert ledger.recent(0) == []

    def test_balance_matches_history_sum(self) -> None:
        ledger = Ledger()
        ledger.credit(100, "a")
        ledger.debit(40, "b")
        ledger.credit(15, "c")
        assert ledger.balance == _history_sum(ledger)

    def test_bounded_history_carries_evicted(self) -> None:
        ledger = Ledger(max_entries=2)
        ledger.credit(100, "a")
        ledger.debit(40, "b")
        ledger.credit(15, "c")
        assert len(ledger) == 2
        assert ledger.carried == 100
        assert ledger.balance == ledger.carried + _history_sum(ledger)

    def test_negative_max_entries_raises(self) -> None:
        with pytest.raises(ValueError):
            Ledger(max_entries=-1)


class TestSerialization:
    def test_round_trip(self) -> None:
        ledger = Ledger()
        ledger.credit(100, "a", 1.0)
        ledger.debit(25, "b", 2.0)

        ledger2 = Ledger()
        ledger2.restore(ledger.snapshot())
        assert ledger2.balance == 75
        assert ledger2.total_earned == 100
        assert ledger2.total_spent == 25
        assert [t.label for t in ledger2.recent(5)] == ["b", "a"]
        assert ledger2.recent(1)[0].timestamp == 2.0

    def test_restore_into_tighter_bound_keeps_invariant(self) -> None:
        ledger = Ledger()
        for i in range(5):
            ledger.credit(10, f"s{i}")

        ledger2 = Ledger(max_entries=2)
        ledger2.restore(ledger.snapshot())
        assert len(ledger2) == 2
        assert ledger2.carried == 30
        assert ledger2.balance == ledger2.carried + _history_sum(ledger2)

    @pytest.mark.parametrize("data", [[], "ledger", None, {"history": {}}])
    def test_restore_rejects_wrong_shape(self, data: object) -> None:
        with pytest.raises(ValueError):
            Ledger().restore(data)  # type: ignore[arg-type]

    def test_restore_rejects_negative_balance(self) -> None:
        data = {"balance": -50.0, "carried": -50.0, "history": []}
        with pytest.raises(ValueError):
            Ledger().restore(data)

    def test_restore_rejects_balance_not_matching_history(self) -> None:
        ledger = Ledger()
        ledger.credit(100, "a")
        data = ledger.snapshot()
        data["balance"] = 1_000_000.0

        ledger2 = Ledger()
        ledger2.credit(5, "keep")
        with pytest.raises(ValueError):
            ledger2.restore(data)
        assert ledger2.balance == 5
        assert len(ledger2) == 1

    def test_restore_rejects_non_finite_values(self) -> None:
        data = {"balance": float("nan"), "history": []}
        with pytest.raises(ValueError):
            Ledger().restore(data)

    def test_restore_accepts_balance_with_float_noise(self) -> None:
        ledger = Ledger()
        for _ in range(10):
            ledger.credit(0.1, "drip")
        ledger2 = Ledger()
        ledger2.restore(ledger.snapshot())
        assert ledger2.balance == ledger.balance
