"""Fertile window estimate.

Ovulation is placed a couple of days before the cycle midpoint and the
fertile window is the five days centred on it.  This is a calendar
heuristic, not a clinical guarantee.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.stats_utils import days_between, round_half_up


@dataclass
class FertileWindow:
    """Estimated fertile window relative to a reference date.

    Attributes:
        start:            First fertile day.
        end:              Last fertile day.
        ovulation:        Estimated ovulation date.
        is_active:        True if the reference date is inside the window.
        days_until_start: Signed days from the reference date to ``start``.
        days_until_end:   Signed days from the reference date to ``end``.
    """

    start: date
    end: date
    ovulation: date
    is_active: bool
    days_until_start: int
    days_until_end: int


def get_fertile_window(
    anchor: date | None,
    avg_cycle_length: float,
    reference_date: date,
    config: EngineConfig | None = None,
) -> FertileWindow | None:
    """Estimate ovulation and the fertile window for the cycle at ``anchor``.

    Args:
        anchor:           Start date of the current period.
        avg_cycle_length: Average cycle length in days.
        reference_date:   "Today" for the active/countdown fields.
        config:           Engine config (defaults to the global singleton).

    Returns:
        FertileWindow, or None without an anchor date.
    """
    if anchor is None:
        return None

    fw = (config or get_engine_config()).fertile_window
    offset = round_half_up(avg_cycle_length / 2) - fw.ovulation_offset_days
    ovulation = anchor + timedelta(days=offset)
    start = ovulation - timedelta(days=fw.half_width_days)
    end = ovulation + timedelta(days=fw.half_width_days)

    return FertileWindow(
        start=start,
        end=end,
        ovulation=ovulation,
        is_active=start <= reference_date <= end,
        days_until_start=days_between(reference_date, start),
        days_until_end=days_between(reference_date, end),
    )
