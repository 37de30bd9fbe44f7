"""Tests for the fertile window estimate."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from auracycle.engine.config_loader import EngineConfig
from auracycle.engine.fertile_window import get_fertile_window

ANCHOR = date(2024, 1, 1)


class TestGetFertileWindow:
    def test_no_anchor(self, engine_config: EngineConfig) -> None:
        assert get_fertile_window(None, 28, ANCHOR, engine_config) is None

    def test_standard_cycle(self, engine_config: EngineConfig) -> None:
        window = get_fertile_window(ANCHOR, 28, ANCHOR, engine_config)
        assert window.ovulation == date(2024, 1, 13)
        assert window.start == date(2024, 1, 11)
        assert window.end == date(2024, 1, 15)

    def test_odd_length_rounds_half_up(self, engine_config: EngineConfig) -> None:
        window = get_fertile_window(ANCHOR, 29, ANCHOR, engine_config)
        assert window.ovulation == date(2024, 1, 14)

    @pytest.mark.parametrize("length", [21, 24, 27.5, 28, 31, 35, 45])
    def test_window_always_five_days(self, engine_config: EngineConfig, length: float) -> None:
        window = get_fertile_window(ANCHOR, length, ANCHOR, engine_config)
        assert (window.end - window.start).days == 4
        assert window.start < window.ovulation < window.end

    def test_active_inside_window(self, engine_config: EngineConfig) -> None:
        window = get_fertile_window(ANCHOR, 28, date(2024, 1, 12), engine_config)
        assert window.is_active
        assert window.days_until_start == -1
        assert window.days_until_end == 3

    def test_window_edges_inclusive(self, engine_config: EngineConfig) -> None:
        assert get_fertile_window(ANCHOR, 28, date(2024, 1, 11), engine_config).is_active
        assert get_fertile_window(ANCHOR, 28, date(2024, 1, 15), engine_config).is_active

    def test_before_window(self, engine_config: EngineConfig) -> None:
        window = get_fertile_window(ANCHOR, 28, ANCHOR + timedelta(days=3), engine_config)
        assert not window.is_active
        assert window.days_until_start == 7
        assert window.days_until_end == 11

    def test_after_window(self, engine_config: EngineConfig) -> None:
        window = get_fertile_window(ANCHOR, 28, date(2024, 1, 20), engine_config)
        assert not window.is_active
        assert window.days_until_end == -5
