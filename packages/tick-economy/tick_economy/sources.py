"""SourceRegistry and cooldown helpers."""
from __future__ import annotations

import dataclasses
from typing import Any

from tick_economy.types import (
    DuplicateIdError,
    NotFoundError,
    ResourceSource,
    SourceKind,
)


def is_ready(source: ResourceSource, now: float) -> bool:
    """True if never collected or ``now >= last_collected_at + cooldown``."""
    if source.last_collected_at is None:
        return True
    return now >= source.last_collected_at + source.cooldown


def cooldown_remaining(source: ResourceSource, now: float) -> float:
    """Seconds until *source* is ready. 0 exactly when ``is_ready`` holds."""
    if is_ready(source, now):
        return 0.0
    return source.last_collected_at + source.cooldown - now


class SourceRegistry:
    """Catalog of income sources for one account. Insertion order preserved."""

    def __init__(self) -> None:
        self._sources: dict[str, ResourceSource] = {}

    def add(self, source: ResourceSource) -> None:
        """Register a source. Raises DuplicateIdError if the id exists."""
        if source.id in self._sources:
            raise DuplicateIdError(source.id)
        self._sources[source.id] = source

    def remove(self, source_id: str) -> ResourceSource:
        """Unregister and return a source. Raises NotFoundError."""
        if source_id not in self._sources:
            raise NotFoundError(source_id)
        return self._sources.pop(source_id)

    def get(self, source_id: str) -> ResourceSource:
        """Look up a source. Raises NotFoundError."""
        if source_id not in self._sources:
            raise NotFoundError(source_id)
        return self._sources[source_id]

    def has(self, source_id: str) -> bool:
        return source_id in self._sources

    def sources(self) -> list[ResourceSource]:
        """Copies of all sources in registration order."""
        return [dataclasses.replace(s) for s in self._sources.values()]

    def active(self) -> list[ResourceSource]:
        """Copies of active sources in registration order."""
        return [dataclasses.replace(s) for s in self._sources.values() if s.active]

    def ids(self) -> list[str]:
        return list(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    # --- Serialization ---

    def snapshot(self) -> list[dict[str, Any]]:
        return [
            {
                "id": s.id,
                "kind": s.kind.value,
                "base_yield": s.base_yield,
                "cooldown": s.cooldown,
                "last_collected_at": s.last_collected_at,
                "name": s.name,
                "active": s.active,
            }
            for s in self._sources.values()
        ]

    def restore(self, data: list[dict[str, Any]]) -> None:
        """Replace all sources. Raises ValueError on a malformed list."""
        if not isinstance(data, list):
            raise ValueError(f"sources must be a list, got {type(data).__name__}")
        self._sources.clear()
        for src in data:
            if not isinstance(src, dict):
                raise ValueError(f"source entry must be a dict, got {src!r}")
            source = ResourceSource(
                id=src["id"],
                kind=SourceKind(src["kind"]),
                base_yield=src["base_yield"],
                cooldown=src.get("cooldown", 0.0),
                last_collected_at=src.get("last_collected_at"),
                name=src.get("name", ""),
                active=src.get("active", True),
            )
            self._sources[source.id] = source
