"""tick-economy - Cooldown-gated passive income with tiered multipliers."""
from tick_economy.config import EconomyConfig
from tick_economy.engine import CollectionEngine
from tick_economy.ledger import Ledger
from tick_economy.presets import property_sources
from tick_economy.service import EconomyService
from tick_economy.sources import SourceRegistry, cooldown_remaining, is_ready
from tick_economy.store import AccountStore, JsonFileStore, MemoryStore
from tick_economy.tiers import PLAN_DEFINITIONS, PlanTier, TierDef, TierPolicy
from tick_economy.types import (
    Collection,
    DuplicateIdError,
    EconomyError,
    EconomyStats,
    InsufficientFundsError,
    InvalidTierError,
    NotFoundError,
    NotReadyError,
    PersistenceError,
    ResourceSource,
    SnapshotError,
    SourceKind,
    Transaction,
)

__all__ = [
    "AccountStore",
    "Collection",
    "CollectionEngine",
    "DuplicateIdError",
    "EconomyConfig",
    "EconomyError",
    "EconomyService",
    "EconomyStats",
    "InsufficientFundsError",
    "InvalidTierError",
    "JsonFileStore",
    "Ledger",
    "MemoryStore",
    "NotFoundError",
    "NotReadyError",
    "PLAN_DEFINITIONS",
    "PersistenceError",
    "PlanTier",
    "ResourceSource",
    "SnapshotError",
    "SourceKind",
    "SourceRegistry",
    "TierDef",
    "TierPolicy",
    "Transaction",
    "cooldown_remaining",
    "is_ready",
    "property_sources",
]
