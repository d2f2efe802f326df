"""Stock property sources."""
from __future__ import annotations

from tick_economy.types import ResourceSource, SourceKind

# name -> (yield per collection, cooldown seconds)
PROPERTY_PRESETS: dict[str, tuple[float, float]] = {
    "apartment": (50.0, 3600.0),
    "house": (100.0, 3600.0),
    "shop": (150.0, 1800.0),
    "restaurant": (200.0, 1800.0),
    "factory": (500.0, 3600.0),
    "office": (300.0, 3600.0),
}

DEFAULT_PRESET: tuple[float, float] = (100.0, 3600.0)


def property_sources(names: list[str], now: float) -> list[ResourceSource]:
    """Build PROPERTY sources for owned properties, first payout one cooldown after *now*.

    Ids are ``property_<name>``; repeated names get ``_2``, ``_3``...
    Unknown names pay 100 per hour.
    """
    seen: dict[str, int] = {}
    result: list[ResourceSource] = []
    for name in names:
        base_yield, cooldown = PROPERTY_PRESETS.get(name, DEFAULT_PRESET)
        seen[name] = seen.get(name, 0) + 1
        source_id = f"property_{name}"
        if seen[name] > 1:
            source_id = f"{source_id}_{seen[name]}"
        result.append(
            ResourceSource(
                id=source_id,
                kind=SourceKind.PROPERTY,
                base_yield=base_yield,
                cooldown=cooldown,
                last_collected_at=now,
                name=name,
            )
        )
    return result
