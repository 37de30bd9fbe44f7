"""Short-window irregularity detection over the last three cycles.

Separate from prediction confidence: this answers "did my last few cycles
swing a lot?" in plain language.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.cycle_builder import Cycle
from auracycle.engine.cycle_stats import completed_cycles
from auracycle.engine.stats_utils import population_stats, round_half_up

logger = logging.getLogger("auracycle.engine.irregularity")


@dataclass
class Irregularity:
    """Variability of the most recent completed cycles.

    Attributes:
        is_irregular: True if std dev or range exceeds its threshold.
        mean:         Mean of the window (1 decimal).
        std_dev:      Population std dev of the window (1 decimal).
        range_days:   Longest minus shortest cycle in the window.
        lengths:      The window's cycle lengths, oldest first.
        message:      Human-readable summary.
    """

    is_irregular: bool
    mean: float
    std_dev: float
    range_days: int
    lengths: list[int] = field(default_factory=list)
    message: str = ""


def detect_irregularity(
    cycles: Sequence[Cycle], config: EngineConfig | None = None
) -> Irregularity | None:
    """Flag abnormal variability in the last ``window`` completed cycles.

    Returns None until enough cycles are complete.
    """
    ir = (config or get_engine_config()).irregularity
    completed = completed_cycles(cycles)
    if len(completed) < ir.window:
        return None

    lengths = [c.cycle_length for c in completed[-ir.window:]]
    mean, _, std_dev = population_stats(lengths)
    range_days = max(lengths) - min(lengths)
    is_irregular = std_dev > ir.max_std_dev or range_days > ir.max_range_days

    if is_irregular:
        message = (
            f"Your last {len(lengths)} cycles varied by {range_days} days "
            f"- more than the typical range."
        )
    else:
        message = (
            f"Your last {len(lengths)} cycles have a {range_days}-day spread, "
            f"which is within a normal range."
        )

    if is_irregular:
        logger.debug("Irregular cycles: lengths=%s std=%.2f", lengths, std_dev)

    return Irregularity(
        is_irregular=is_irregular,
        mean=round_half_up(mean, 1),
        std_dev=round_half_up(std_dev, 1),
        range_days=range_days,
        lengths=lengths,
        message=message,
    )
