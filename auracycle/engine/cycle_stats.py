"""Summary statistics over completed cycles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.cycle_builder import Cycle
from auracycle.engine.stats_utils import population_stats, round_half_up
from auracycle.models.tracking import CycleSettings

logger = logging.getLogger("auracycle.engine.cycle_stats")


class Stability(str, Enum):
    very_stable = "very_stable"
    stable = "stable"
    slightly_variable = "slightly_variable"
    variable = "variable"


@dataclass
class CycleStats:
    """Population statistics over completed cycle lengths.

    Attributes:
        avg:      Mean cycle length (1 decimal).
        variance: Population variance (1 decimal).
        std_dev:  Population standard deviation (1 decimal).
        min:      Shortest completed cycle.
        max:      Longest completed cycle.
        count:    Number of completed cycles.
        last3:    Up to 3 most recent completed lengths, oldest first.
    """

    avg: float | None = None
    variance: float | None = None
    std_dev: float | None = None
    min: int | None = None
    max: int | None = None
    count: int = 0
    last3: list[int] = field(default_factory=list)


def completed_cycles(cycles: Sequence[Cycle]) -> list[Cycle]:
    """Cycles with a known length, in chronological order."""
    return sorted((c for c in cycles if c.is_complete), key=lambda c: c.start)


def compute_cycle_stats(cycles: Sequence[Cycle]) -> CycleStats:
    """Aggregate completed cycles; no completed cycles yields an empty result."""
    completed = completed_cycles(cycles)
    if not completed:
        return CycleStats()

    lengths = [c.cycle_length for c in completed]
    mean, variance, std_dev = population_stats(lengths)

    stats = CycleStats(
        avg=round_half_up(mean, 1),
        variance=round_half_up(variance, 1),
        std_dev=round_half_up(std_dev, 1),
        min=min(lengths),
        max=max(lengths),
        count=len(lengths),
        last3=lengths[-3:],
    )
    logger.debug(
        "Cycle stats: n=%d avg=%s std=%s", stats.count, stats.avg, stats.std_dev
    )
    return stats


def average_period_length(
    cycles: Sequence[Cycle],
    settings: CycleSettings | None = None,
    config: EngineConfig | None = None,
) -> int:
    """Average bleed length in whole days.

    Uses logged cycles once there are enough of them (a single 1-day log
    would otherwise report a 1-day period), else the user's declared
    average, else the configured default.
    """
    cfg = config or get_engine_config()
    if cycles and len(cycles) >= cfg.cycle_length.min_cycles_for_period_average:
        total = sum(c.period_length for c in cycles)
        return round_half_up(total / len(cycles))
    if settings is not None:
        return settings.average_period_length
    return cfg.cycle_length.default_period_length


def stability_label(
    stats: CycleStats, config: EngineConfig | None = None
) -> Stability | None:
    """Coarse stability label for the cycle-length standard deviation."""
    if stats.std_dev is None:
        return None
    thresholds = (config or get_engine_config()).stability
    if stats.std_dev <= thresholds.very_stable_std_dev:
        return Stability.very_stable
    if stats.std_dev <= thresholds.stable_std_dev:
        return Stability.stable
    if stats.std_dev <= thresholds.slightly_variable_std_dev:
        return Stability.slightly_variable
    return Stability.variable
