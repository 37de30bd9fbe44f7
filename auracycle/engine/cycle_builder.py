"""Group raw period logs into discrete menstrual cycles.

Period days logged close together (gap of at most ``merge_gap_days``) are
one bleed; a longer gap starts a new cycle.  A cycle's length is only
known once the next cycle has begun.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.stats_utils import days_between
from auracycle.models.tracking import FlowIntensity, LogEntry

logger = logging.getLogger("auracycle.engine.cycle_builder")


@dataclass
class Cycle:
    """One derived menstrual cycle.

    Attributes:
        index:          1-based chronological ordinal among derived cycles.
        start:          First period-log date of the run.
        end:            Last period-log date of the run.
        period_length:  Inclusive span of the bleed in days.
        cycle_length:   Days to the next cycle's start; None for the latest cycle.
        flows:          Flow intensities logged during the bleed.
        entries:        The period log entries that make up the run.
    """

    index: int
    start: date
    end: date
    period_length: int
    cycle_length: int | None = None
    flows: list[FlowIntensity] = field(default_factory=list)
    entries: list[LogEntry] = field(default_factory=list, repr=False)

    @property
    def is_complete(self) -> bool:
        return self.cycle_length is not None


def build_cycles(
    logs: Iterable[LogEntry],
    config: EngineConfig | None = None,
) -> list[Cycle]:
    """Group period-type logs into chronological cycles.

    Args:
        logs:   Any mix of log entries; non-period entries are ignored.
        config: Engine config (defaults to the global singleton).

    Returns:
        Cycles ordered oldest first.  Empty when no period logs exist.
    """
    cfg = config or get_engine_config()
    merge_gap = cfg.cycle_builder.merge_gap_days

    period_logs = sorted(
        (log for log in logs if log.is_period and log.date is not None),
        key=lambda log: log.date,
    )
    if not period_logs:
        return []

    groups: list[list[LogEntry]] = []
    current = [period_logs[0]]
    for prev, curr in zip(period_logs, period_logs[1:]):
        if days_between(prev.date, curr.date) <= merge_gap:
            current.append(curr)
        else:
            groups.append(current)
            current = [curr]
    groups.append(current)

    cycles: list[Cycle] = []
    for i, group in enumerate(groups):
        start = group[0].date
        end = group[-1].date
        next_start = groups[i + 1][0].date if i + 1 < len(groups) else None
        cycles.append(
            Cycle(
                index=i + 1,
                start=start,
                end=end,
                period_length=days_between(start, end) + 1,
                cycle_length=days_between(start, next_start) if next_start else None,
                flows=[e.flow_intensity for e in group if e.flow_intensity],
                entries=list(group),
            )
        )

    logger.debug(
        "Built %d cycle(s) from %d period log(s)", len(cycles), len(period_logs)
    )
    return cycles
