"""Economy configuration dataclass."""
from __future__ import annotations

import math
from dataclasses import dataclass, field

from tick_economy.types import SourceKind

DEFAULT_PASSIVE_KINDS = frozenset(
    {SourceKind.PROPERTY, SourceKind.BUSINESS, SourceKind.PASSIVE}
)


@dataclass(frozen=True)
class EconomyConfig:
    """Immutable configuration shared by every account of a service.

    Attributes:
        history_limit: Most recent ledger entries kept (0 for unbounded).
        month_seconds: Length of one plan month in seconds.
        starting_balance: Opening balance credited to new accounts.
        passive_kinds: Source kinds collected by auto-collect.
    """

    history_limit: int = 0
    month_seconds: float = 30 * 24 * 3600.0
    starting_balance: float = 0.0
    passive_kinds: frozenset[SourceKind] = field(
        default_factory=lambda: DEFAULT_PASSIVE_KINDS
    )

    def __post_init__(self) -> None:
        if self.history_limit < 0:
            raise ValueError(
                f"history_limit must be >= 0, got {self.history_limit}"
            )
        if not math.isfinite(self.month_seconds) or self.month_seconds <= 0:
            raise ValueError(
                f"month_seconds must be finite and positive, got {self.month_seconds}"
            )
        if not math.isfinite(self.starting_balance) or self.starting_balance < 0:
            raise ValueError(
                f"starting_balance must be finite and >= 0, got {self.starting_balance}"
            )
