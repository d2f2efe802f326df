"""Ledger: running balance with bounded transaction history."""
from __future__ import annotations

import math
from collections import deque
from typing import Any

from tick_economy.types import InsufficientFundsError, Transaction


class Ledger:
    """Authoritative balance and transaction history for one account.

    ``max_entries`` bounds the history (0 for unbounded). Entries pushed
    out of a bounded history are folded into ``carried`` so that
    ``balance == carried + sum(history amounts)`` always holds.
    """

    def __init__(self, max_entries: int = 0) -> None:
        if max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {max_entries}")
        self._max = max_entries
        maxlen = max_entries if max_entries > 0 else None
        self._history: deque[Transaction] = deque(maxlen=maxlen)
        self._balance = 0.0
        self._carried = 0.0
        self._total_earned = 0.0
        self._total_spent = 0.0

    @property
    def balance(self) -> float:
        return self._balance

    @property
    def carried(self) -> float:
        """Net amount of entries no longer kept in history."""
        return self._carried

    @property
    def total_earned(self) -> float:
        return self._total_earned

    @property
    def total_spent(self) -> float:
        return self._total_spent

    def credit(self, amount: float, label: str, timestamp: float | None = None) -> float:
        """Add *amount* to the balance. Returns the new balance."""
        _check_amount(amount)
        self._record(Transaction(amount=amount, label=label, timestamp=timestamp))
        self._balance += amount
        self._total_earned += amount
        return self._balance

    def debit(self, amount: float, label: str, timestamp: float | None = None) -> float:
        """Subtract *amount*. Raises InsufficientFundsError, leaving state untouched."""
        _check_amount(amount)
        if amount > self._balance:
            raise InsufficientFundsError(amount, self._balance)
        self._record(Transaction(amount=-amount, label=label, timestamp=timestamp))
        self._balance -= amount
        self._total_spent += amount
        return self._balance

    def recent(self, count: int) -> list[Transaction]:
        """The *count* most recent entries, newest first."""
        if count <= 0:
            return []
        entries = list(self._history)
        return entries[::-1][:count]

    def _record(self, tx: Transaction) -> None:
        if self._max > 0 and len(self._history) == self._max:
            self._carried += self._history[0].amount
        self._history.append(tx)

    def __len__(self) -> int:
        return len(self._history)

    # --- Serialization ---

    def snapshot(self) -> dict[str, Any]:
        return {
            "balance": self._balance,
            "carried": self._carried,
            "total_earned": self._total_earned,
            "total_spent": self._total_spent,
            "history": [
                {"amount": t.amount, "label": t.label, "timestamp": t.timestamp}
                for t in self._history
            ],
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Restore from snapshot data. Raises ValueError if it breaks an invariant.

        The balance must be finite, non-negative and equal to
        ``carried + sum(history amounts)``. On error nothing is changed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"ledger data must be a dict, got {type(data).__name__}")
        history = data.get("history", [])
        if not isinstance(history, list):
            raise ValueError("ledger history must be a list")
        entries = [
            Transaction(
                amount=entry["amount"],
                label=entry["label"],
                timestamp=entry.get("timestamp"),
            )
            for entry in history
        ]
        balance = data.get("balance", 0.0)
        carried = data.get("carried", 0.0)
        totals = (data.get("total_earned", 0.0), data.get("total_spent", 0.0))
        for value in (balance, carried, *totals, *(t.amount for t in entries)):
            if not math.isfinite(value):
                raise ValueError(f"ledger values must be finite, got {value!r}")
        if balance < 0:
            raise ValueError(f"balance must be >= 0, got {balance}")
        expected = carried + sum(t.amount for t in entries)
        if not math.isclose(balance, expected, rel_tol=1e-9, abs_tol=1e-9):
            raise ValueError(
                f"balance {balance} does not match carried + history {expected}"
            )

        self._history.clear()
        # Carried first: a tighter bound folds the oldest restored entries in.
        self._carried = carried
        for tx in entries:
            self._record(tx)
        self._balance = balance
        self._total_earned, self._total_spent = totals


def _check_amount(amount: float) -> None:
    if not math.isfinite(amount) or amount < 0:
        raise ValueError(f"amount must be finite and >= 0, got {amount}")
