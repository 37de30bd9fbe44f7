"""Symptom correlation insights across cycles, flow and stress.

Surfaces patterns like:
- "Cramps appeared in every one of your 4 tracked cycles, always around day 2"
- "Bloating tends to occur most on heavy-flow days (4 of 5 times)"
- "On 3 of 4 high-stress days, you also experienced headache"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.cycle_builder import Cycle
from auracycle.engine.cycle_stats import CycleStats
from auracycle.engine.stats_utils import round_half_up
from auracycle.engine.symptom_timing import cycle_day_of
from auracycle.models.tracking import FlowIntensity, LogEntry

logger = logging.getLogger("auracycle.engine.symptom_correlator")

# Known flows, lightest first; ties resolve to the lighter flow
FLOW_ORDER = [
    FlowIntensity.spotting,
    FlowIntensity.light,
    FlowIntensity.medium,
    FlowIntensity.heavy,
]


@dataclass
class SymptomInsight:
    """A single generated insight.

    Attributes:
        insight_id:  Stable identifier for this insight.
        category:    'cross_cycle', 'flow_correlation', 'stress_correlation'
                     or 'stability'.
        body:        Insight text for display.
        metric_a:    Primary symptom or metric.
        metric_b:    Secondary metric (flow, stress, ...).
        data_points: Number of observations behind the insight.
    """

    insight_id: str
    category: str
    body: str
    metric_a: str
    metric_b: str = ""
    data_points: int = 0


@dataclass
class DaySummary:
    """Everything logged on one calendar date, merged across entries."""

    date: date
    symptoms: list[str] = field(default_factory=list)
    flow: FlowIntensity | None = None
    stress: int | None = None


def _cap(text: str) -> str:
    return text[:1].upper() + text[1:]


def _label(key: str) -> str:
    return key.replace("_", " ")


def summarize_days(logs: Iterable[LogEntry]) -> dict[date, DaySummary]:
    """Merge same-date entries: all symptoms, the last flow, the first stress."""
    days: dict[date, DaySummary] = {}
    for log in logs:
        if log.date is None:
            continue
        day = days.setdefault(log.date, DaySummary(date=log.date))
        day.symptoms.extend(log.symptom_keys)
        if log.flow_intensity is not None:
            day.flow = log.flow_intensity
        if log.stress_level is not None and day.stress is None:
            day.stress = log.stress_level
    return days


class SymptomCorrelator:
    """Correlate symptoms with cycle position, flow and stress.

    Usage::

        correlator = SymptomCorrelator()
        insights = correlator.generate_insights(logs, cycles, stats)
        for insight in insights:
            print(insight.body)
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    @property
    def _si_config(self):
        return self._config.symptom_insights

    def generate_insights(
        self,
        logs: Sequence[LogEntry],
        cycles: Sequence[Cycle],
        stats: CycleStats | None = None,
    ) -> list[SymptomInsight]:
        """Generate all available insights.

        Args:
            logs:   All log entries.
            cycles: Derived cycles, oldest first.
            stats:  Cycle statistics, for the stability insight.

        Returns:
            At most ``max_insights`` insights: cross-cycle first, then
            flow, stress and stability.
        """
        days = summarize_days(logs)

        insights: list[SymptomInsight] = []
        insights.extend(self._cross_cycle_insights(logs, cycles))
        insights.extend(self._flow_insights(days))
        insights.extend(self._stress_insights(days))
        if stats is not None:
            insights.extend(self._stability_insights(stats))

        if not insights:
            logger.debug("No symptom insights from %d log(s)", len(logs))
        return insights[: self._si_config.max_insights]

    def cross_cycle_occurrences(
        self, logs: Iterable[LogEntry], cycles: Sequence[Cycle]
    ) -> dict[str, dict[int, list[int]]]:
        """Map symptom -> cycle index -> cycle days it was logged on."""
        si = self._si_config
        ordered = sorted(cycles, key=lambda c: c.start)
        occurrences: dict[str, dict[int, list[int]]] = {}
        for log in logs:
            if not log.symptoms or log.date is None:
                continue
            located = cycle_day_of(log.date, ordered)
            if located is None:
                continue
            cycle, cycle_day = located
            if cycle_day < 1 or cycle_day > si.max_cycle_day:
                continue
            for key in log.symptom_keys:
                occurrences.setdefault(key, {}).setdefault(cycle.index, []).append(cycle_day)
        return occurrences

    def _cross_cycle_insights(
        self, logs: Sequence[LogEntry], cycles: Sequence[Cycle]
    ) -> list[SymptomInsight]:
        si = self._si_config
        total_cycles = len(cycles)
        ranked = sorted(
            (
                (key, by_cycle)
                for key, by_cycle in self.cross_cycle_occurrences(logs, cycles).items()
                if len(by_cycle) >= si.min_cycles
            ),
            key=lambda item: len(item[1]),
            reverse=True,
        )

        insights = []
        for key, by_cycle in ranked[:3]:
            all_days = [d for days in by_cycle.values() for d in days]
            avg_day = round_half_up(sum(all_days) / len(all_days))
            seen_in = len(by_cycle)
            if seen_in == total_cycles:
                body = (
                    f"{_cap(_label(key))} appeared in every one of your "
                    f"{total_cycles} tracked cycles, always around day {avg_day}"
                )
            else:
                body = (
                    f"{_cap(_label(key))} showed up in {seen_in} of {total_cycles} "
                    f"cycles, typically around day {avg_day}"
                )
            insights.append(
                SymptomInsight(
                    insight_id=f"cycle_{key}",
                    category="cross_cycle",
                    body=body,
                    metric_a=key,
                    metric_b="cycle_day",
                    data_points=len(all_days),
                )
            )
        return insights

    def flow_breakdown(
        self, days: dict[date, DaySummary]
    ) -> dict[str, dict[FlowIntensity, int]]:
        """Per symptom, how many days it coincided with each known flow."""
        breakdown: dict[str, dict[FlowIntensity, int]] = {}
        for day in days.values():
            if day.flow not in FLOW_ORDER or not day.symptoms:
                continue
            for key in day.symptoms:
                counts = breakdown.setdefault(key, {f: 0 for f in FLOW_ORDER})
                counts[day.flow] += 1
        return breakdown

    def _flow_insights(self, days: dict[date, DaySummary]) -> list[SymptomInsight]:
        si = self._si_config
        totals = [
            (key, counts, sum(counts.values()))
            for key, counts in self.flow_breakdown(days).items()
        ]
        totals = [t for t in totals if t[2] >= si.min_flow_days]
        totals.sort(key=lambda t: t[2], reverse=True)

        insights = []
        for key, counts, total in totals[:2]:
            dominant = max(FLOW_ORDER, key=lambda f: counts[f])
            hits = counts[dominant]
            if hits / total < si.dominant_flow_share:
                continue
            insights.append(
                SymptomInsight(
                    insight_id=f"flow_{key}",
                    category="flow_correlation",
                    body=(
                        f"{_cap(_label(key))} tends to occur most on "
                        f"{dominant.value}-flow days ({hits} of {total} times)"
                    ),
                    metric_a=key,
                    metric_b="flow_intensity",
                    data_points=total,
                )
            )
        return insights

    def _stress_insights(self, days: dict[date, DaySummary]) -> list[SymptomInsight]:
        si = self._si_config
        stressed = [
            d for d in days.values()
            if d.stress is not None and d.stress >= si.high_stress_level
        ]
        if len(stressed) < si.min_stress_days:
            return []

        counts: dict[str, int] = {}
        for day in stressed:
            for key in day.symptoms:
                counts[key] = counts.get(key, 0) + 1

        ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
        return [
            SymptomInsight(
                insight_id=f"stress_{key}",
                category="stress_correlation",
                body=(
                    f"On {count} of {len(stressed)} high-stress days, "
                    f"you also experienced {_label(key)}"
                ),
                metric_a=key,
                metric_b="stress_level",
                data_points=len(stressed),
            )
            for key, count in ranked[:2]
            if count >= si.min_stress_days
        ]

    def _stability_insights(self, stats: CycleStats) -> list[SymptomInsight]:
        si = self._si_config
        if stats.std_dev is None or stats.count < 2 or stats.std_dev > si.stable_std_dev:
            return []
        return [
            SymptomInsight(
                insight_id="cycle_stability",
                category="stability",
                body=(
                    f"Your cycle is very consistent - only ±{stats.std_dev} days "
                    f"of variation across {stats.count} cycles"
                ),
                metric_a="cycle_length",
                data_points=stats.count,
            )
        ]
