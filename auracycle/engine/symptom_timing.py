"""Symptom timing analysis: which cycle days each symptom tends to recur on.

Surfaces patterns like "cramps typically days 1-2 of cycle".
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.cycle_builder import Cycle
from auracycle.engine.stats_utils import days_between, round_half_up
from auracycle.models.tracking import LogEntry

logger = logging.getLogger("auracycle.engine.symptom_timing")


@dataclass
class SymptomPattern:
    """Cycle-day timing of one recurring symptom.

    Attributes:
        key:          Symptom identifier (severity suffix stripped).
        count:        Number of occurrences across all cycles.
        mean_day:     Mean cycle day of the occurrences.
        avg_day:      ``mean_day`` rounded to a whole day.
        typical_min:  Earliest occurrence within the typical band of the mean.
        typical_max:  Latest occurrence within the typical band of the mean.
        spread:       Latest minus earliest occurrence, outliers included.
        days:         Every occurrence's cycle day, in log order.
    """

    key: str
    count: int
    mean_day: float
    avg_day: int
    typical_min: int
    typical_max: int
    spread: int
    days: list[int] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.key.replace("_", " ")

    @property
    def typical_range(self) -> str:
        if self.typical_min == self.typical_max:
            return f"day {self.typical_min}"
        return f"days {self.typical_min}-{self.typical_max}"


def locate_cycle(day: date, cycles: Sequence[Cycle]) -> Cycle | None:
    """Return the cycle whose span contains ``day``.

    A day belongs to cycle *i* when it is on or after its start and before
    the next cycle's start (the latest cycle is open-ended).
    """
    starts = [c.start for c in cycles]
    i = bisect_right(starts, day) - 1
    return cycles[i] if i >= 0 else None


def cycle_day_of(day: date, cycles: Sequence[Cycle]) -> tuple[Cycle, int] | None:
    cycle = locate_cycle(day, cycles)
    if cycle is None:
        return None
    return cycle, days_between(cycle.start, day) + 1


def compute_symptom_patterns(
    logs: Iterable[LogEntry],
    cycles: Sequence[Cycle],
    config: EngineConfig | None = None,
) -> list[SymptomPattern]:
    """Group symptom occurrences by cycle day.

    Args:
        logs:   All log entries; only those carrying symptoms are used.
        cycles: Derived cycles, oldest first.
        config: Engine config (defaults to the global singleton).

    Returns:
        Patterns for symptoms seen at least ``min_occurrences`` times,
        most frequent first.
    """
    if not cycles:
        return []

    st = (config or get_engine_config()).symptom_timing
    ordered = sorted(cycles, key=lambda c: c.start)

    symptom_days: dict[str, list[int]] = {}
    for log in logs:
        if not log.symptoms or log.date is None:
            continue
        located = cycle_day_of(log.date, ordered)
        if located is None:
            continue
        _, cycle_day = located
        if cycle_day < 1 or cycle_day > st.max_cycle_day:
            continue
        for symptom in log.symptoms:
            symptom_days.setdefault(symptom.key, []).append(cycle_day)

    patterns: list[SymptomPattern] = []
    for key, days in symptom_days.items():
        if len(days) < st.min_occurrences:
            continue
        mean_day = sum(days) / len(days)
        typical = [d for d in days if abs(d - mean_day) <= st.typical_band_days]
        if typical:
            typical_min, typical_max = min(typical), max(typical)
        else:
            typical_min = typical_max = round_half_up(mean_day)
        patterns.append(
            SymptomPattern(
                key=key,
                count=len(days),
                mean_day=mean_day,
                avg_day=round_half_up(mean_day),
                typical_min=typical_min,
                typical_max=typical_max,
                spread=max(days) - min(days),
                days=days,
            )
        )

    patterns.sort(key=lambda p: p.count, reverse=True)
    logger.debug(
        "Symptom timing: %d symptom(s) seen, %d recurring",
        len(symptom_days),
        len(patterns),
    )
    return patterns
