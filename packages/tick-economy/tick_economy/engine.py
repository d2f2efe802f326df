"""CollectionEngine - turns elapsed time into balance for one account."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable

from tick_economy.config import EconomyConfig
from tick_economy.ledger import Ledger
from tick_economy.sources import SourceRegistry, cooldown_remaining, is_ready
from tick_economy.tiers import TierPolicy
from tick_economy.types import (
    Collection,
    EconomyStats,
    InvalidTierError,
    NotReadyError,
    ResourceSource,
    SnapshotError,
    Transaction,
)

_SNAPSHOT_VERSION = 1


class CollectionEngine:
    """Sources, ledger and tier policy of one account, mutated as a unit.

    Every time-sensitive call takes ``now`` from the caller; the engine
    never reads a clock. Each mutating call either completes fully or
    raises before touching any state.
    """

    def __init__(self, config: EconomyConfig | None = None) -> None:
        self.config: EconomyConfig = config if config is not None else EconomyConfig()
        self._sources = SourceRegistry()
        self._ledger = Ledger(self.config.history_limit)
        self._policy = TierPolicy(month_seconds=self.config.month_seconds)
        if self.config.starting_balance > 0:
            self._ledger.credit(self.config.starting_balance, "starting_balance")

        self._on_collect: list[Callable[[Collection], None]] = []
        self._on_spend: list[Callable[[float, float], None]] = []

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def policy(self) -> TierPolicy:
        return self._policy

    @property
    def balance(self) -> float:
        return self._ledger.balance

    # --- Callback registration ---

    def on_collect(self, cb: Callable[[Collection], None]) -> None:
        """Register callback fired after every realized collection.

        Batch collections notify once every source in the batch has been
        credited, so the state is final when callbacks run.
        """
        self._on_collect.append(cb)

    def on_spend(self, cb: Callable[[float, float], None]) -> None:
        """Register callback fired after a spend.

        Signature: (amount, balance_after) -> None.
        """
        self._on_spend.append(cb)

    # --- Sources ---

    def add_source(self, source: ResourceSource) -> None:
        """Register a copy of *source*. Raises DuplicateIdError."""
        self._sources.add(dataclasses.replace(source))

    def remove_source(self, source_id: str) -> ResourceSource:
        """Unregister a source. Raises NotFoundError."""
        return self._sources.remove(source_id)

    def source(self, source_id: str) -> ResourceSource:
        """Copy of one source. Raises NotFoundError."""
        return dataclasses.replace(self._sources.get(source_id))

    def list_sources(self) -> list[ResourceSource]:
        return self._sources.sources()

    def active_sources(self) -> list[ResourceSource]:
        return self._sources.active()

    def is_ready(self, source_id: str, now: float) -> bool:
        """Is the source active and off cooldown? Raises NotFoundError."""
        src = self._sources.get(source_id)
        return src.active and is_ready(src, now)

    # --- Collection ---

    def collect_from_source(self, source_id: str, now: float) -> Collection:
        """Collect one source.

        Raises NotFoundError for unknown ids and NotReadyError (with the
        remaining wait) while cooling down or inactive.
        """
        src = self._sources.get(source_id)
        if not src.active:
            raise NotReadyError(source_id, float("inf"))
        if not is_ready(src, now):
            raise NotReadyError(source_id, cooldown_remaining(src, now))
        result = self._collect(src, now)
        self._notify([result])
        return result

    def collect_all(self, now: float) -> list[Collection]:
        """Collect every ready source, skipping the rest."""
        return self._collect_where(now, lambda src: True)

    def auto_collect(self, now: float) -> list[Collection]:
        """Collect ready sources of the configured passive kinds."""
        kinds = self.config.passive_kinds
        return self._collect_where(now, lambda src: src.kind in kinds)

    def _collect_where(
        self, now: float, predicate: Callable[[ResourceSource], bool]
    ) -> list[Collection]:
        results: list[Collection] = []
        for source_id in self._sources.ids():
            src = self._sources.get(source_id)
            if not src.active or not predicate(src) or not is_ready(src, now):
                continue
            results.append(self._collect(src, now))
        self._notify(results)
        return results

    def _collect(self, src: ResourceSource, now: float) -> Collection:
        multiplier = self._policy.active_multiplier(now)
        amount = src.base_yield * multiplier
        balance = self._ledger.credit(amount, src.id, now)
        src.last_collected_at = now
        return Collection(
            source_id=src.id,
            amount=amount,
            multiplier=multiplier,
            timestamp=now,
            balance=balance,
        )

    def _notify(self, results: list[Collection]) -> None:
        # Runs once the whole batch is applied; a raising callback cannot
        # leave a batch half collected.
        for result in results:
            for cb in self._on_collect:
                cb(result)

    # --- Direct ledger access ---

    def add_money(
        self, amount: float, label: str = "misc", now: float | None = None
    ) -> float:
        """Credit *amount* outside of any source. Returns the new balance."""
        return self._ledger.credit(amount, label, now)

    def spend_money(
        self, amount: float, label: str = "spend", now: float | None = None
    ) -> float:
        """Debit *amount*. Raises InsufficientFundsError without mutating."""
        balance = self._ledger.debit(amount, label, now)
        for cb in self._on_spend:
            cb(amount, balance)
        return balance

    # --- Plan ---

    def upgrade_plan(self, tier: object, duration_months: int, now: float) -> None:
        """Replace the plan. Raises InvalidTierError."""
        self._policy.upgrade(tier, duration_months, now)

    # --- Queries ---

    def potential_income(self, source_id: str, hours: float, now: float) -> float:
        """Projected income of one source over *hours* at the current multiplier."""
        src = self._sources.get(source_id)
        return self._hourly_rate(src) * hours * self._policy.active_multiplier(now)

    def passive_income_per_hour(self, now: float) -> float:
        kinds = self.config.passive_kinds
        total = sum(
            self._hourly_rate(src)
            for src in self._sources.active()
            if src.kind in kinds
        )
        return total * self._policy.active_multiplier(now)

    @staticmethod
    def _hourly_rate(src: ResourceSource) -> float:
        # Zero-cooldown sources count as one collection per hour.
        per_hour = 3600.0 / src.cooldown if src.cooldown > 0 else 1.0
        return src.base_yield * per_hour

    def stats(self, now: float) -> EconomyStats:
        active = self._sources.active()
        ready = sum(1 for src in active if is_ready(src, now))
        return EconomyStats(
            balance=self._ledger.balance,
            total_earned=self._ledger.total_earned,
            total_spent=self._ledger.total_spent,
            ready_sources=ready,
            cooling_sources=len(active) - ready,
            active_sources=len(active),
            passive_income_per_hour=self.passive_income_per_hour(now),
            tier=self._policy.current_tier(now).value,
        )

    def history(self, count: int = 10) -> list[Transaction]:
        """Most recent transactions, newest first."""
        return self._ledger.recent(count)

    # --- Serialization ---

    def snapshot(self) -> dict[str, Any]:
        """Serialize sources, ledger and plan. JSON-compatible."""
        return {
            "version": _SNAPSHOT_VERSION,
            "sources": self._sources.snapshot(),
            "ledger": self._ledger.snapshot(),
            "plan": self._policy.snapshot(),
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Replace all state from a snapshot. Callbacks are kept.

        Raises SnapshotError on malformed data, leaving current state as is.
        """
        if not isinstance(data, dict):
            raise SnapshotError(
                f"Snapshot must be a dict, got {type(data).__name__}"
            )
        version = data.get("version")
        if version != _SNAPSHOT_VERSION:
            raise SnapshotError(
                f"Unsupported snapshot version {version!r}, expected {_SNAPSHOT_VERSION}"
            )
        sources = SourceRegistry()
        ledger = Ledger(self.config.history_limit)
        policy = TierPolicy(month_seconds=self.config.month_seconds)
        try:
            sources.restore(data.get("sources", []))
            ledger.restore(data.get("ledger", {}))
            policy.restore(data.get("plan", {}))
        except (KeyError, TypeError, ValueError, InvalidTierError) as exc:
            raise SnapshotError(f"Malformed snapshot: {exc}") from exc
        self._sources = sources
        self._ledger = ledger
        self._policy = policy
