"""Tests for tick_economy.sources - SourceRegistry and readiness."""
from __future__ import annotations

import pytest

from tick_economy.sources import SourceRegistry, cooldown_remaining, is_ready
from tick_economy.types import (
    DuplicateIdError,
    NotFoundError,
    ResourceSource,
    SourceKind,
)


def _src(source_id: str, cooldown: float = 3600.0, **kw) -> ResourceSource:
    return ResourceSource(
        id=source_id, kind=SourceKind.PROPERTY, base_yield=100, cooldown=cooldown, **kw
    )


class TestReadiness:
    def test_never_collected_is_ready(self) -> None:
        assert is_ready(_src("s1"), 0.0) is True

    def test_zero_cooldown_always_ready(self) -> None:
        src = _src("s1", cooldown=0, last_collected_at=100.0)
        assert is_ready(src, 100.0) is True

    def test_not_ready_inside_cooldown(self) -> None:
        src = _src("s1", last_collected_at=1000.0)
        assert is_ready(src, 1000.0 + 3599) is False

    def test_ready_at_exact_boundary(self) -> None:
        src = _src("s1", last_collected_at=1000.0)
        assert is_ready(src, 1000.0 + 3600) is True

    def test_remaining(self) -> None:
        src = _src("s1", last_collected_at=1000.0)
        assert cooldown_remaining(src, 2800.0) == 1800.0
        assert cooldown_remaining(src, 9999.0) == 0.0

    def test_remaining_never_collected(self) -> None:
        assert cooldown_remaining(_src("s1"), 5.0) == 0.0

    def test_ready_and_remaining_agree_at_epoch_timestamps(self) -> None:
        last = 1.7e9
        src = _src("s1", cooldown=0.1, last_collected_at=last)
        now = last + 0.1
        assert is_ready(src, now) is True
        assert cooldown_remaining(src, now) == 0.0

    @pytest.mark.parametrize("offset", [0.0, 0.03, 0.05, 0.0999, 0.1, 0.1001])
    def test_not_ready_always_has_positive_remaining(self, offset: float) -> None:
        last = 1.7e9
        src = _src("s1", cooldown=0.1, last_collected_at=last)
        now = last + offset
        assert is_ready(src, now) is (cooldown_remaining(src, now) == 0.0)
        assert cooldown_remaining(src, now) >= 0.0


class TestRegistry:
    def test_add_and_get(self) -> None:
        registry = SourceRegistry()
        src = _src("s1")
        registry.add(src)
        assert registry.get("s1") is src
        assert registry.has("s1") is True
        assert len(registry) == 1

    def test_add_duplicate_raises(self) -> None:
        registry = SourceRegistry()
        registry.add(_src("s1"))
        with pytest.raises(DuplicateIdError):
            registry.add(_src("s1", cooldown=10))
        assert registry.get("s1").cooldown == 3600.0

    def test_get_unknown_raises(self) -> None:
        with pytest.raises(NotFoundError):
            SourceRegistry().get("nope")

    def test_remove(self) -> None:
        registry = SourceRegistry()
        registry.add(_src("s1"))
        removed = registry.remove("s1")
        assert removed.id == "s1"
        assert registry.has("s1") is False

    def test_remove_unknown_raises(self) -> None:
        with pytest.raises(NotFoundError):
            SourceRegistry().remove("nope")

    def test_sources_preserve_insertion_order(self) -> None:
        registry = SourceRegistry()
        for name in ("c", "a", "b"):
            registry.add(_src(name))
        assert [s.id for s in registry.sources()] == ["c", "a", "b"]

    def test_sources_returns_copies(self) -> None:
        registry = SourceRegistry()
        registry.add(_src("s1"))
        listed = registry.sources()
        listed[0].last_collected_at = 42.0
        assert registry.get("s1").last_collected_at is None

    def test_active_filters_inactive(self) -> None:
        registry = SourceRegistry()
        registry.add(_src("on"))
        registry.add(_src("off", active=False))
        assert [s.id for s in registry.active()] == ["on"]

    def test_snapshot_restore(self) -> None:
        registry = SourceRegistry()
        registry.add(_src("s1", last_collected_at=12.5, name="Corner shop"))
        registry.add(_src("s2", active=False))

        registry2 = SourceRegistry()
        registry2.restore(registry.snapshot())
        assert registry2.ids() == ["s1", "s2"]
        restored = registry2.get("s1")
        assert restored.last_collected_at == 12.5
        assert restored.name == "Corner shop"
        assert restored.kind is SourceKind.PROPERTY
        assert registry2.get("s2").active is False

    def test_restore_rejects_non_list(self) -> None:
        with pytest.raises(ValueError):
            SourceRegistry().restore({"s1": {}})  # type: ignore[arg-type]

    def test_restore_rejects_non_dict_entry(self) -> None:
        with pytest.raises(ValueError):
            SourceRegistry().restore(["s1"])  # type: ignore[list-item]
