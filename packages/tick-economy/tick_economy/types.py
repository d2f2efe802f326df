"""Core data types and errors for the passive income economy."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class SourceKind(str, Enum):
    """Category of an income source."""

    PROPERTY = "property"
    BUSINESS = "business"
    INVESTMENT = "investment"
    MISSION = "mission"
    PASSIVE = "passive"
    BONUS = "bonus"


@dataclass
class ResourceSource:
    """One income-producing unit. Mutable, serializable.

    Attributes:
        id: Unique identifier, stable for the lifetime of the source.
        kind: Category; passive kinds are picked up by auto-collect.
        base_yield: Amount credited per collection before multipliers.
        cooldown: Seconds between collections (0 = always collectible).
        last_collected_at: Timestamp of the last collection, None if never.
        name: Display label. Defaults to the id.
        active: Inactive sources are never collected.
    """

    id: str
    kind: SourceKind
    base_yield: float
    cooldown: float = 0.0
    last_collected_at: float | None = None
    name: str = ""
    active: bool = True

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ResourceSource id must be non-empty")
        if not math.isfinite(self.base_yield) or self.base_yield < 0:
            raise ValueError(f"base_yield must be finite and >= 0, got {self.base_yield}")
        if not math.isfinite(self.cooldown) or self.cooldown < 0:
            raise ValueError(f"cooldown must be finite and >= 0, got {self.cooldown}")
        self.kind = SourceKind(self.kind)
        if not self.name:
            self.name = self.id


@dataclass(frozen=True)
class Transaction:
    """A single ledger entry. Credits are positive, debits negative."""

    amount: float
    label: str
    timestamp: float | None = None


@dataclass(frozen=True)
class Collection:
    """Result of one realized collection."""

    source_id: str
    amount: float
    multiplier: float
    timestamp: float
    balance: float


@dataclass(frozen=True)
class EconomyStats:
    """Aggregate, read-only view of an account."""

    balance: float
    total_earned: float
    total_spent: float
    ready_sources: int
    cooling_sources: int
    active_sources: int
    passive_income_per_hour: float
    tier: str


# --- Errors ---


class EconomyError(Exception):
    """Base class for recoverable economy failures."""


class NotFoundError(EconomyError, KeyError):
    """Raised when a source id is not registered."""

    def __init__(self, source_id: str) -> None:
        self.source_id = source_id
        super().__init__(f"Unknown source {source_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class NotReadyError(EconomyError):
    """Raised when a source is still cooling down (or inactive)."""

    def __init__(self, source_id: str, remaining: float) -> None:
        self.source_id = source_id
        self.remaining = remaining
        super().__init__(
            f"Source {source_id!r} not ready, {remaining:g}s remaining"
        )


class InsufficientFundsError(EconomyError):
    """Raised when a spend exceeds the balance. Nothing is debited."""

    def __init__(self, requested: float, balance: float) -> None:
        self.requested = requested
        self.balance = balance
        super().__init__(
            f"Cannot spend {requested:g} with balance {balance:g}"
        )


class DuplicateIdError(EconomyError):
    """Raised when registering a source id that already exists."""

    def __init__(self, source_id: str) -> None:
        self.source_id = source_id
        super().__init__(f"Source {source_id!r} already registered")


class InvalidTierError(EconomyError):
    """Raised on an unknown tier value or a non-positive plan duration."""

    def __init__(self, value: object, message: str | None = None) -> None:
        self.value = value
        super().__init__(message or f"Invalid plan tier {value!r}")


class SnapshotError(EconomyError):
    """Raised on restore failures (version mismatch, malformed data)."""


class PersistenceError(EconomyError):
    """Raised when account state could not be written back to its store."""
