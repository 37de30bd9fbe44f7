"""Tests for symptom cycle-day timing patterns."""

from __future__ import annotations

from datetime import date, timedelta

from auracycle.engine.config_loader import EngineConfig, SymptomTimingConfig
from auracycle.engine.cycle_builder import build_cycles
from auracycle.engine.symptom_timing import compute_symptom_patterns, locate_cycle
from auracycle.engine.tests.conftest import period, regular_periods, symptom_log

START = date(2024, 1, 1)


def on_day(cycle_day: int, *symptoms: str, start: date = START):
    return symptom_log(start + timedelta(days=cycle_day - 1), *symptoms)


class TestComputeSymptomPatterns:
    def test_no_cycles(self, engine_config: EngineConfig) -> None:
        logs = [on_day(2, "cramps"), on_day(2, "cramps")]
        assert compute_symptom_patterns(logs, [], engine_config) == []

    def test_recurring_symptom_across_cycles(
        self, engine_config: EngineConfig, scenario_c_logs: list
    ) -> None:
        cycles = build_cycles(scenario_c_logs, engine_config)
        patterns = compute_symptom_patterns(scenario_c_logs, cycles, engine_config)
        assert len(patterns) == 1
        cramps = patterns[0]
        assert cramps.key == "cramps"
        assert cramps.count == 3
        assert cramps.avg_day == 2
        assert cramps.typical_range == "day 2"
        assert cramps.spread == 0

    def test_single_occurrence_dropped(self, engine_config: EngineConfig) -> None:
        logs = [period(START), on_day(2, "cramps"), on_day(3, "headache"), on_day(5, "headache")]
        patterns = compute_symptom_patterns(logs, build_cycles(logs, engine_config), engine_config)
        assert [p.key for p in patterns] == ["headache"]
        assert all(p.count >= 2 for p in patterns)

    def test_logs_before_first_cycle_dropped(self, engine_config: EngineConfig) -> None:
        logs = [period(START), on_day(-3, "acne"), on_day(-1, "acne"), on_day(4, "acne")]
        assert compute_symptom_patterns(logs, build_cycles(logs, engine_config), engine_config) == []

    def test_days_beyond_ceiling_dropped(self, engine_config: EngineConfig) -> None:
        logs = [period(START), on_day(41, "fatigue"), on_day(46, "fatigue")]
        assert compute_symptom_patterns(logs, build_cycles(logs, engine_config), engine_config) == []

    def test_day_forty_kept(self, engine_config: EngineConfig) -> None:
        logs = [period(START), on_day(40, "fatigue"), on_day(40, "fatigue")]
        patterns = compute_symptom_patterns(logs, build_cycles(logs, engine_config), engine_config)
        assert patterns[0].avg_day == 40

    def test_last_cycle_is_open_ended(self, engine_config: EngineConfig) -> None:
        logs = regular_periods(2, 28)
        second = START + timedelta(days=28)
        logs += [on_day(20, "bloating", start=second), on_day(22, "bloating", start=second)]
        patterns = compute_symptom_patterns(logs, build_cycles(logs, engine_config), engine_config)
        assert patterns[0].days == [20, 22]
        assert patterns[0].typical_range == "days 20-22"

    def test_typical_range_excludes_outliers(self, engine_config: EngineConfig) -> None:
        logs = [period(START)] + [on_day(d, "cramps") for d in (2, 2, 3, 3, 3, 10)]
        pattern = compute_symptom_patterns(logs, build_cycles(logs, engine_config), engine_config)[0]
        assert pattern.count == 6
        assert (pattern.typical_min, pattern.typical_max) == (2, 3)
        assert pattern.spread == 8

    def test_typical_range_falls_back_to_mean(self, engine_config: EngineConfig) -> None:
        logs = [period(START), on_day(1, "nausea"), on_day(9, "nausea")]
        pattern = compute_symptom_patterns(logs, build_cycles(logs, engine_config), engine_config)[0]
        assert pattern.typical_range == "day 5"
        assert pattern.mean_day == 5.0

    def test_sorted_by_count(self, engine_config: EngineConfig) -> None:
        logs = [period(START)]
        logs += [on_day(1, "cramps"), on_day(2, "cramps")]
        logs += [on_day(20, "headache"), on_day(21, "headache"), on_day(22, "headache")]
        patterns = compute_symptom_patterns(logs, build_cycles(logs, engine_config), engine_config)
        assert [p.key for p in patterns] == ["headache", "cramps"]

    def test_label_replaces_underscores(self, engine_config: EngineConfig) -> None:
        logs = [period(START), on_day(3, "back_pain:mild"), on_day(4, "back_pain")]
        pattern = compute_symptom_patterns(logs, build_cycles(logs, engine_config), engine_config)[0]
        assert pattern.key == "back_pain"
        assert pattern.label == "back pain"

    def test_ceiling_is_configurable(self) -> None:
        config = EngineConfig(
            version="test", symptom_timing=SymptomTimingConfig(max_cycle_day=10)
        )
        logs = [period(START), on_day(12, "acne"), on_day(14, "acne")]
        assert compute_symptom_patterns(logs, build_cycles(logs, config), config) == []


class TestLocateCycle:
    def test_boundaries(self, engine_config: EngineConfig) -> None:
        cycles = build_cycles(regular_periods(2, 28), engine_config)
        assert locate_cycle(START - timedelta(days=1), cycles) is None
        assert locate_cycle(START, cycles) is cycles[0]
        assert locate_cycle(START + timedelta(days=27), cycles) is cycles[0]
        assert locate_cycle(START + timedelta(days=28), cycles) is cycles[1]
        assert locate_cycle(START + timedelta(days=300), cycles) is cycles[1]
