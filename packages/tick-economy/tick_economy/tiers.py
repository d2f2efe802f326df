"""Plan tiers, their feature table, and the time-bounded TierPolicy."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tick_economy.types import InvalidTierError


class PlanTier(str, Enum):
    """Ordered service levels. Compare with ``rank``."""

    FREE = "free"
    BASIC = "basic"
    LUXURY = "luxury"
    PREMIUM = "premium"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    @classmethod
    def parse(cls, value: object) -> PlanTier:
        """Resolve a member or its string value. Raises InvalidTierError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidTierError(value)


_TIER_ORDER = (PlanTier.FREE, PlanTier.BASIC, PlanTier.LUXURY, PlanTier.PREMIUM)


@dataclass(frozen=True)
class TierDef:
    """Immutable description of one tier.

    Attributes:
        tier: The tier this row describes.
        cost_per_month: Monthly price.
        cost_per_year: Yearly price.
        multiplier: Factor applied to base yield on every collection.
        features: Capability table. Booleans are flags, ints are limits
            where -1 means unlimited.
    """

    tier: PlanTier
    cost_per_month: float
    cost_per_year: float
    multiplier: float
    features: dict[str, bool | int | float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.cost_per_month < 0 or self.cost_per_year < 0:
            raise ValueError("tier costs must be >= 0")
        if self.multiplier <= 0:
            raise ValueError(f"multiplier must be positive, got {self.multiplier}")


PLAN_DEFINITIONS: dict[PlanTier, TierDef] = {
    PlanTier.FREE: TierDef(
        tier=PlanTier.FREE,
        cost_per_month=0.0,
        cost_per_year=0.0,
        multiplier=1.0,
        features={
            "max_save_slots": 1,
            "cloud_save": False,
            "multiplayer": False,
            "customization_level": 0,
            "passive_income_multiplier": 1.0,
            "bonus_starting_money": 0,
            "exclusive_missions": False,
            "advanced_learning_modules": False,
            "premium_interiors": False,
            "friends_limit": 10,
            "create_guilds": False,
            "chat_history_days": 7,
            "priority_support": False,
            "beta_access": False,
            "ad_free": False,
        },
    ),
    PlanTier.BASIC: TierDef(
        tier=PlanTier.BASIC,
        cost_per_month=4.99,
        cost_per_year=49.99,
        multiplier=1.2,
        features={
            "max_save_slots": 3,
            "cloud_save": True,
            "multiplayer": True,
            "customization_level": 1,
            "passive_income_multiplier": 1.25,
            "bonus_starting_money": 1000,
            "exclusive_missions": False,
            "advanced_learning_modules": True,
            "premium_interiors": False,
            "friends_limit": 50,
            "create_guilds": False,
            "chat_history_days": 30,
            "priority_support": False,
            "beta_access": False,
            "ad_free": True,
        },
    ),
    PlanTier.LUXURY: TierDef(
        tier=PlanTier.LUXURY,
        cost_per_month=9.99,
        cost_per_year=99.99,
        multiplier=1.5,
        features={
            "max_save_slots": 10,
            "cloud_save": True,
            "multiplayer": True,
            "customization_level": 2,
            "passive_income_multiplier": 1.5,
            "bonus_starting_money": 5000,
            "exclusive_missions": True,
            "advanced_learning_modules": True,
            "premium_interiors": True,
            "friends_limit": 200,
            "create_guilds": True,
            "chat_history_days": 90,
            "priority_support": True,
            "beta_access": True,
            "ad_free": True,
        },
    ),
    PlanTier.PREMIUM: TierDef(
        tier=PlanTier.PREMIUM,
        cost_per_month=19.99,
        cost_per_year=199.99,
        multiplier=2.0,
        features={
            "max_save_slots": -1,
            "cloud_save": True,
            "multiplayer": True,
            "customization_level": 3,
            "passive_income_multiplier": 2.0,
            "bonus_starting_money": 10000,
            "exclusive_missions": True,
            "advanced_learning_modules": True,
            "premium_interiors": True,
            "friends_limit": -1,
            "create_guilds": True,
            "chat_history_days": -1,
            "priority_support": True,
            "beta_access": True,
            "ad_free": True,
        },
    ),
}

BASE_TIER = PlanTier.FREE


class TierPolicy:
    """Stored tier plus expiry. The effective tier is derived from *now*.

    There is no stored "active" flag: once ``now > active_until`` the
    account behaves as ``BASE_TIER`` with no explicit downgrade.
    """

    def __init__(
        self,
        tier: PlanTier = BASE_TIER,
        active_until: float | None = None,
        started_at: float | None = None,
        auto_renew: bool = False,
        month_seconds: float = 30 * 24 * 3600.0,
    ) -> None:
        if month_seconds <= 0:
            raise ValueError(f"month_seconds must be positive, got {month_seconds}")
        self._tier = PlanTier.parse(tier)
        self._active_until = active_until
        self._started_at = started_at
        self._auto_renew = auto_renew
        self._month_seconds = month_seconds

    @property
    def tier(self) -> PlanTier:
        """The stored (purchased) tier, regardless of expiry."""
        return self._tier

    @property
    def active_until(self) -> float | None:
        return self._active_until

    @property
    def started_at(self) -> float | None:
        return self._started_at

    @property
    def auto_renew(self) -> bool:
        return self._auto_renew

    # --- Queries ---

    def is_active(self, now: float) -> bool:
        """True while the stored tier has not lapsed. No expiry is always active."""
        if self._active_until is None:
            return True
        return now <= self._active_until

    def current_tier(self, now: float) -> PlanTier:
        """The tier in effect at *now*."""
        return self._tier if self.is_active(now) else BASE_TIER

    def active_multiplier(self, now: float) -> float:
        return PLAN_DEFINITIONS[self.current_tier(now)].multiplier

    def remaining(self, now: float) -> float:
        """Seconds of entitlement left. inf without expiry, 0 once lapsed."""
        if self._active_until is None:
            return float("inf")
        return max(0.0, self._active_until - now)

    def feature(self, name: str, now: float) -> bool | int | float:
        """Feature value for the effective tier. Raises KeyError if unknown."""
        features = PLAN_DEFINITIONS[self.current_tier(now)].features
        if name not in features:
            raise KeyError(name)
        return features[name]

    def has_feature(self, name: str, now: float) -> bool:
        """Flags by value; limits count when positive or unlimited (-1)."""
        value = self.feature(name, now)
        if isinstance(value, bool):
            return value
        return value > 0 or value == -1

    # --- Transitions ---

    def upgrade(self, tier: object, duration_months: int, now: float) -> None:
        """Replace the stored tier and expiry.

        Always overwrites: an earlier, longer or higher entitlement is
        discarded rather than extended.
        """
        new_tier = PlanTier.parse(tier)
        if isinstance(duration_months, bool) or not isinstance(duration_months, int):
            raise InvalidTierError(
                duration_months, f"duration_months must be an int, got {duration_months!r}"
            )
        if duration_months < 1:
            raise InvalidTierError(
                duration_months, f"duration_months must be >= 1, got {duration_months}"
            )
        self._tier = new_tier
        self._started_at = now
        self._active_until = now + duration_months * self._month_seconds
        self._auto_renew = False

    # --- Static tables ---

    @staticmethod
    def plan_comparison() -> dict[str, dict[str, Any]]:
        """All tiers' costs, multipliers and features, lowest tier first."""
        return {
            t.value: {
                "rank": t.rank,
                "cost_per_month": PLAN_DEFINITIONS[t].cost_per_month,
                "cost_per_year": PLAN_DEFINITIONS[t].cost_per_year,
                "multiplier": PLAN_DEFINITIONS[t].multiplier,
                "features": dict(PLAN_DEFINITIONS[t].features),
            }
            for t in _TIER_ORDER
        }

    @staticmethod
    def pricing() -> dict[str, dict[str, float]]:
        return {
            t.value: {
                "monthly": PLAN_DEFINITIONS[t].cost_per_month,
                "yearly": PLAN_DEFINITIONS[t].cost_per_year,
            }
            for t in _TIER_ORDER
        }

    # --- Serialization ---

    def snapshot(self) -> dict[str, Any]:
        return {
            "tier": self._tier.value,
            "active_until": self._active_until,
            "started_at": self._started_at,
            "auto_renew": self._auto_renew,
        }

    def restore(self, data: dict[str, Any]) -> None:
        if not isinstance(data, dict):
            raise ValueError(f"plan must be a dict, got {type(data).__name__}")
        self._tier = PlanTier.parse(data.get("tier", BASE_TIER.value))
        self._active_until = data.get("active_until")
        self._started_at = data.get("started_at")
        self._auto_renew = data.get("auto_renew", False)
