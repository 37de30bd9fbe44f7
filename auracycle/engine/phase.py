"""Current cycle day and phase from the declared last period start."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.stats_utils import days_between, round_half_up
from auracycle.models.tracking import CycleSettings


class MenstrualPhase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulatory = "ovulatory"
    luteal = "luteal"


@dataclass
class CyclePosition:
    """Where the user is in the current cycle.

    Attributes:
        cycle_day:        1-indexed day within the current cycle.
        phase:            Phase for ``cycle_day``.
        next_period_in:   Days until the next expected period.
        next_period_date: Expected next period date; None without an anchor.
        anchor:           The last period start used, if any.
    """

    cycle_day: int
    phase: MenstrualPhase
    next_period_in: int
    next_period_date: date | None = None
    anchor: date | None = None


def phase_for_day(
    cycle_day: int, period_length: int, config: EngineConfig | None = None
) -> MenstrualPhase:
    ph = (config or get_engine_config()).phase
    if cycle_day <= period_length:
        return MenstrualPhase.menstrual
    if cycle_day <= period_length + ph.follicular_days:
        return MenstrualPhase.follicular
    if cycle_day <= period_length + ph.follicular_days + ph.ovulatory_days:
        return MenstrualPhase.ovulatory
    return MenstrualPhase.luteal


def current_cycle_position(
    settings: CycleSettings | None,
    cycle_length: float,
    period_length: int,
    reference_date: date,
    config: EngineConfig | None = None,
) -> CyclePosition:
    """Locate ``reference_date`` within the cycle started at the last period.

    A ``last_period_start`` in the future is ignored.  Past the expected
    cycle length the count wraps around, so a missed log still yields a
    plausible day.
    """
    length = max(1, round_half_up(cycle_length))
    anchor = settings.last_period_start if settings is not None else None
    if anchor is not None and anchor > reference_date:
        anchor = None

    if anchor is None:
        return CyclePosition(
            cycle_day=1,
            phase=phase_for_day(1, period_length, config),
            next_period_in=length,
        )

    elapsed = days_between(anchor, reference_date) % length
    next_period_in = length - elapsed
    return CyclePosition(
        cycle_day=elapsed + 1,
        phase=phase_for_day(elapsed + 1, period_length, config),
        next_period_in=next_period_in,
        next_period_date=reference_date + timedelta(days=next_period_in),
        anchor=anchor,
    )
