"""Tests for tick_economy.types."""
from __future__ import annotations

import pytest

from tick_economy.types import (
    EconomyError,
    InsufficientFundsError,
    NotFoundError,
    NotReadyError,
    ResourceSource,
    SourceKind,
)


class TestResourceSource:
    def test_defaults(self) -> None:
        src = ResourceSource(id="s1", kind=SourceKind.PASSIVE, base_yield=10)
        assert src.cooldown == 0.0
        assert src.last_collected_at is None
        assert src.active is True
        assert src.name == "s1"

    def test_kind_accepts_string_value(self) -> None:
        src = ResourceSource(id="s1", kind="business", base_yield=10)  # type: ignore[arg-type]
        assert src.kind is SourceKind.BUSINESS

    def test_empty_id_raises(self) -> None:
        with pytest.raises(ValueError):
            ResourceSource(id="", kind=SourceKind.PASSIVE, base_yield=1)

    def test_negative_yield_raises(self) -> None:
        with pytest.raises(ValueError):
            ResourceSource(id="s1", kind=SourceKind.PASSIVE, base_yield=-1)

    def test_negative_cooldown_raises(self) -> None:
        with pytest.raises(ValueError):
            ResourceSource(id="s1", kind=SourceKind.PASSIVE, base_yield=1, cooldown=-5)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_yield_raises(self, value: float) -> None:
        with pytest.raises(ValueError):
            ResourceSource(id="s1", kind=SourceKind.PASSIVE, base_yield=value)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_cooldown_raises(self, value: float) -> None:
        with pytest.raises(ValueError):
            ResourceSource(id="s1", kind=SourceKind.PASSIVE, base_yield=1, cooldown=value)

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(ValueError):
            ResourceSource(id="s1", kind="lottery", base_yield=1)  # type: ignore[arg-type]


class TestErrors:
    def test_not_ready_carries_remaining(self) -> None:
        err = NotReadyError("s1", 1800.0)
        assert err.remaining == 1800.0
        assert err.source_id == "s1"
        assert "1800" in str(err)

    def test_not_found_is_key_error(self) -> None:
        err = NotFoundError("ghost")
        assert isinstance(err, KeyError)
        assert isinstance(err, EconomyError)
        assert str(err) == "Unknown source 'ghost'"

    def test_insufficient_funds_fields(self) -> None:
        err = InsufficientFundsError(50.0, 10.0)
        assert err.requested == 50.0
        assert err.balance == 10.0
