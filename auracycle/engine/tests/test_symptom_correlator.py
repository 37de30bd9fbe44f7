"""Tests for cross-cycle, flow and stress symptom insights."""

from __future__ import annotations

from datetime import date, timedelta

from auracycle.engine.config_loader import EngineConfig, SymptomInsightConfig
from auracycle.engine.cycle_builder import build_cycles
from auracycle.engine.cycle_stats import compute_cycle_stats
from auracycle.engine.symptom_correlator import SymptomCorrelator, summarize_days
from auracycle.engine.tests.conftest import (
    period,
    periods_from_lengths,
    regular_periods,
    symptom_log,
)
from auracycle.models.tracking import FlowIntensity

START = date(2024, 1, 1)


def by_category(insights, category: str):
    return [i for i in insights if i.category == category]


class TestCrossCycle:
    def test_most_cycles(self, engine_config: EngineConfig, scenario_c_logs) -> None:
        cycles = build_cycles(scenario_c_logs, engine_config)
        insights = SymptomCorrelator(engine_config).generate_insights(scenario_c_logs, cycles)
        cross = by_category(insights, "cross_cycle")
        assert len(cross) == 1
        assert cross[0].body == "Cramps showed up in 3 of 4 cycles, typically around day 2"
        assert cross[0].data_points == 3

    def test_every_cycle(self, engine_config: EngineConfig, scenario_c_logs) -> None:
        logs = scenario_c_logs + [symptom_log(date(2024, 3, 26), "cramps")]
        cycles = build_cycles(logs, engine_config)
        cross = by_category(
            SymptomCorrelator(engine_config).generate_insights(logs, cycles), "cross_cycle"
        )
        assert cross[0].body == (
            "Cramps appeared in every one of your 4 tracked cycles, always around day 2"
        )

    def test_single_cycle_symptom_ignored(self, engine_config: EngineConfig) -> None:
        logs = regular_periods(3) + [
            symptom_log(START + timedelta(days=3), "acne"),
            symptom_log(START + timedelta(days=4), "acne"),
        ]
        cycles = build_cycles(logs, engine_config)
        occurrences = SymptomCorrelator(engine_config).cross_cycle_occurrences(logs, cycles)
        assert occurrences == {"acne": {1: [4, 5]}}
        assert by_category(
            SymptomCorrelator(engine_config).generate_insights(logs, cycles), "cross_cycle"
        ) == []


class TestFlowCorrelation:
    def test_heavy_flow_symptom(self, engine_config: EngineConfig) -> None:
        logs = [
            period(START + timedelta(days=i), "heavy", symptoms=["bloating"])
            for i in range(3)
        ]
        cycles = build_cycles(logs, engine_config)
        flow = by_category(
            SymptomCorrelator(engine_config).generate_insights(logs, cycles),
            "flow_correlation",
        )
        assert len(flow) == 1
        assert flow[0].body == "Bloating tends to occur most on heavy-flow days (3 of 3 times)"

    def test_too_few_days(self, engine_config: EngineConfig) -> None:
        logs = [
            period(START + timedelta(days=i), "heavy", symptoms=["bloating"])
            for i in range(2)
        ]
        insights = SymptomCorrelator(engine_config).generate_insights(
            logs, build_cycles(logs, engine_config)
        )
        assert by_category(insights, "flow_correlation") == []

    def test_no_dominant_flow(self, engine_config: EngineConfig) -> None:
        flows = ["spotting", "light", "medium", "heavy"]
        logs = [
            period(START + timedelta(days=i), flow, symptoms=["cramps"])
            for i, flow in enumerate(flows)
        ]
        insights = SymptomCorrelator(engine_config).generate_insights(
            logs, build_cycles(logs, engine_config)
        )
        assert by_category(insights, "flow_correlation") == []

    def test_breakdown_counts(self, engine_config: EngineConfig) -> None:
        logs = [
            period(START, "light", symptoms=["cramps"]),
            period(START + timedelta(days=1), "heavy", symptoms=["cramps"]),
            period(START + timedelta(days=2), "unknown", symptoms=["cramps"]),
        ]
        breakdown = SymptomCorrelator(engine_config).flow_breakdown(summarize_days(logs))
        assert breakdown["cramps"][FlowIntensity.light] == 1
        assert breakdown["cramps"][FlowIntensity.heavy] == 1
        assert sum(breakdown["cramps"].values()) == 2


class TestStressCorrelation:
    def test_high_stress_days(self, engine_config: EngineConfig) -> None:
        logs = [
            symptom_log(START, "headache", stress_level=4),
            symptom_log(START + timedelta(days=5), "headache", stress_level=5),
            symptom_log(START + timedelta(days=9), "headache", stress_level=2),
        ]
        stress = by_category(
            SymptomCorrelator(engine_config).generate_insights(logs, []),
            "stress_correlation",
        )
        assert len(stress) == 1
        assert stress[0].body == "On 2 of 2 high-stress days, you also experienced headache"

    def test_single_stressed_day(self, engine_config: EngineConfig) -> None:
        logs = [symptom_log(START, "headache", stress_level=5)]
        assert SymptomCorrelator(engine_config).generate_insights(logs, []) == []


class TestStability:
    def test_consistent_cycles(self, engine_config: EngineConfig) -> None:
        logs = regular_periods(4)
        cycles = build_cycles(logs, engine_config)
        insights = SymptomCorrelator(engine_config).generate_insights(
            logs, cycles, compute_cycle_stats(cycles)
        )
        stability = by_category(insights, "stability")
        assert len(stability) == 1
        assert "across 3 cycles" in stability[0].body

    def test_variable_cycles(self, engine_config: EngineConfig) -> None:
        logs = periods_from_lengths([24, 28, 33])
        cycles = build_cycles(logs, engine_config)
        insights = SymptomCorrelator(engine_config).generate_insights(
            logs, cycles, compute_cycle_stats(cycles)
        )
        assert by_category(insights, "stability") == []

    def test_without_stats(self, engine_config: EngineConfig) -> None:
        logs = regular_periods(4)
        insights = SymptomCorrelator(engine_config).generate_insights(
            logs, build_cycles(logs, engine_config)
        )
        assert by_category(insights, "stability") == []


def test_insight_cap(scenario_c_logs) -> None:
    config = EngineConfig(
        version="test", symptom_insights=SymptomInsightConfig(max_insights=1)
    )
    cycles = build_cycles(scenario_c_logs, config)
    insights = SymptomCorrelator(config).generate_insights(
        scenario_c_logs, cycles, compute_cycle_stats(cycles)
    )
    assert len(insights) == 1
    assert insights[0].category == "cross_cycle"
