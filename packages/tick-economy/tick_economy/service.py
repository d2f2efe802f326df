"""EconomyService - load, execute, persist with per-account serialization."""
from __future__ import annotations

import logging
import threading
import time
import weakref
from typing import Any, Callable, TypeVar

from tick_economy.config import EconomyConfig
from tick_economy.engine import CollectionEngine
from tick_economy.store import AccountStore
from tick_economy.types import (
    Collection,
    EconomyError,
    EconomyStats,
    PersistenceError,
    ResourceSource,
    Transaction,
)

LOG = logging.getLogger(__name__)

T = TypeVar("T")


class EconomyService:
    """Runs engine operations against stored account snapshots.

    Each call loads the account (or starts a fresh one), runs exactly one
    operation with a single ``now``, and writes the snapshot back before
    returning. Calls for the same account are serialized; different
    accounts never share a lock.
    """

    def __init__(
        self,
        store: AccountStore,
        config: EconomyConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self.config: EconomyConfig = config if config is not None else EconomyConfig()
        self._clock = clock
        # Entries live only while some call holds a reference to the lock.
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    def _lock_for(self, account_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[account_id] = lock
            return lock

    def _load(self, account_id: str) -> CollectionEngine:
        try:
            data = self._store.load(account_id)
        except (OSError, ValueError) as exc:
            LOG.error("Failed to load account %s: %s", account_id, exc)
            raise PersistenceError(f"Could not load account {account_id!r}") from exc
        engine = CollectionEngine(self.config)
        if data is not None:
            engine.restore(data)
        return engine

    def execute(
        self,
        account_id: str,
        fn: Callable[[CollectionEngine, float], T],
        now: float | None = None,
        persist: bool = True,
    ) -> T:
        """Run ``fn(engine, now)`` for one account under its lock.

        Economy errors propagate and nothing is written. A failed write
        raises PersistenceError even though the operation itself ran.
        """
        if not account_id:
            raise ValueError("account_id is required")
        with self._lock_for(account_id):
            engine = self._load(account_id)
            at = self._clock() if now is None else now
            try:
                result = fn(engine, at)
            except EconomyError as exc:
                LOG.warning("Rejected operation for %s: %s", account_id, exc)
                raise
            if persist:
                try:
                    self._store.save(account_id, engine.snapshot())
                except Exception as exc:
                    LOG.error("Failed to persist account %s: %s", account_id, exc)
                    raise PersistenceError(
                        f"Could not persist account {account_id!r}"
                    ) from exc
            return result

    # --- Mutating operations ---

    def collect(
        self, account_id: str, source_id: str | None = None, now: float | None = None
    ) -> list[Collection]:
        """Collect one source (raising if not ready) or every ready source."""
        if source_id is not None:
            results = [
                self.execute(
                    account_id, lambda e, t: e.collect_from_source(source_id, t), now
                )
            ]
        else:
            results = self.execute(account_id, lambda e, t: e.collect_all(t), now)
        LOG.info("Collected from %d sources for %s", len(results), account_id)
        return results

    def auto_collect(self, account_id: str, now: float | None = None) -> list[Collection]:
        results = self.execute(account_id, lambda e, t: e.auto_collect(t), now)
        LOG.info("Auto-collected from %d passive sources for %s", len(results), account_id)
        return results

    def add_sources(
        self, account_id: str, sources: list[ResourceSource], now: float | None = None
    ) -> EconomyStats:
        """Register several sources. Any duplicate aborts the whole batch."""

        def op(engine: CollectionEngine, at: float) -> EconomyStats:
            for src in sources:
                engine.add_source(src)
            return engine.stats(at)

        stats = self.execute(account_id, op, now)
        LOG.info("Added %d sources for %s", len(sources), account_id)
        return stats

    def remove_source(
        self, account_id: str, source_id: str, now: float | None = None
    ) -> ResourceSource:
        removed = self.execute(account_id, lambda e, t: e.remove_source(source_id), now)
        LOG.info("Removed source %s for %s", source_id, account_id)
        return removed

    def add_money(
        self,
        account_id: str,
        amount: float,
        label: str = "api",
        now: float | None = None,
    ) -> float:
        balance = self.execute(account_id, lambda e, t: e.add_money(amount, label, t), now)
        LOG.info("Added %s to %s, balance %s", amount, account_id, balance)
        return balance

    def spend(
        self,
        account_id: str,
        amount: float,
        label: str = "spend",
        now: float | None = None,
    ) -> float:
        balance = self.execute(
            account_id, lambda e, t: e.spend_money(amount, label, t), now
        )
        LOG.info("Spent %s for %s, balance %s", amount, account_id, balance)
        return balance

    def upgrade(
        self,
        account_id: str,
        tier: object,
        duration_months: int = 1,
        now: float | None = None,
    ) -> dict[str, Any]:
        """Replace the account's plan and return its new state."""

        def op(engine: CollectionEngine, at: float) -> dict[str, Any]:
            engine.upgrade_plan(tier, duration_months, at)
            return _plan_view(engine, at)

        plan = self.execute(account_id, op, now)
        LOG.info("Plan upgraded for %s: %s", account_id, plan["tier"])
        return plan

    # --- Read-only operations ---

    def stats(self, account_id: str, now: float | None = None) -> EconomyStats:
        return self.execute(account_id, lambda e, t: e.stats(t), now, persist=False)

    def history(
        self, account_id: str, count: int = 10, now: float | None = None
    ) -> list[Transaction]:
        return self.execute(account_id, lambda e, t: e.history(count), now, persist=False)

    def sources(self, account_id: str, now: float | None = None) -> list[ResourceSource]:
        return self.execute(
            account_id, lambda e, t: e.active_sources(), now, persist=False
        )

    def plan(self, account_id: str, now: float | None = None) -> dict[str, Any]:
        return self.execute(account_id, _plan_view, now, persist=False)


def _plan_view(engine: CollectionEngine, now: float) -> dict[str, Any]:
    policy = engine.policy
    return {
        "tier": policy.tier.value,
        "current_tier": policy.current_tier(now).value,
        "is_active": policy.is_active(now),
        "started_at": policy.started_at,
        "active_until": policy.active_until,
        "auto_renew": policy.auto_renew,
        "multiplier": policy.active_multiplier(now),
    }
