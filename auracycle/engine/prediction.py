"""Next-period prediction engine.

Recent cycles dominate: once three or more cycles are complete, the
average length is a linearly weighted mean of the last six (newest cycle
weighted highest).  The confidence band is the standard deviation clamped
to 1-7 days, so a prediction always carries some uncertainty.

Confidence tiers, first match wins:
    low     no completed cycle, or std dev > 5
    medium  fewer than 3 completed cycles, or std dev > 2.5
    high    otherwise
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Sequence

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.cycle_builder import Cycle
from auracycle.engine.cycle_stats import CycleStats, completed_cycles, compute_cycle_stats
from auracycle.engine.stats_utils import round_half_up
from auracycle.models.tracking import CycleSettings

logger = logging.getLogger("auracycle.engine.prediction")


class Confidence(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


@dataclass
class Prediction:
    """Forecast of the next period start.

    Attributes:
        predicted_date:   Point estimate.
        range_start:      Earliest plausible start (predicted_date - range_days).
        range_end:        Latest plausible start (predicted_date + range_days).
        confidence:       Coarse reliability tier.
        avg_cycle_length: Cycle length the forecast used (1 decimal).
        std_dev:          Cycle-length standard deviation (0.0 when unknown).
        cycles_analyzed:  Number of completed cycles available.
        range_days:       Half-width of the confidence band.
    """

    predicted_date: date
    range_start: date
    range_end: date
    confidence: Confidence
    avg_cycle_length: float
    std_dev: float
    cycles_analyzed: int
    range_days: int


def _weighted_recent_average(lengths: Sequence[int], window: int) -> float:
    recent = lengths[-window:]
    weights = range(1, len(recent) + 1)
    return sum(length * w for length, w in zip(recent, weights)) / sum(weights)


def estimate_cycle_length(
    cycles: Sequence[Cycle],
    settings: CycleSettings | None = None,
    stats: CycleStats | None = None,
    config: EngineConfig | None = None,
) -> float:
    """Average cycle length used for forecasting.

    Falls back from the weighted recent average, to the plain average, to
    the user's declared length, to the configured default.
    """
    cfg = config or get_engine_config()
    pc = cfg.prediction
    lengths = [c.cycle_length for c in completed_cycles(cycles)]

    if len(lengths) >= pc.weighted_min_cycles:
        return _weighted_recent_average(lengths, pc.weighted_window)

    stats = stats or compute_cycle_stats(cycles)
    if stats.avg:
        return stats.avg
    if settings is not None and settings.average_cycle_length:
        return float(settings.average_cycle_length)
    return float(cfg.cycle_length.default_cycle_length)


def _confidence(completed: int, std_dev: float, config: EngineConfig) -> Confidence:
    pc = config.prediction
    if completed == 0 or std_dev > pc.low_std_dev:
        return Confidence.low
    if completed < pc.high_min_cycles or std_dev > pc.medium_std_dev:
        return Confidence.medium
    return Confidence.high


def predict_next_period(
    cycles: Sequence[Cycle],
    settings: CycleSettings | None = None,
    config: EngineConfig | None = None,
) -> Prediction | None:
    """Forecast the next period start with a confidence band.

    Args:
        cycles:   Derived cycles, oldest first.
        settings: User cycle settings; ``last_period_start`` anchors the
                  forecast when declared.
        config:   Engine config (defaults to the global singleton).

    Returns:
        A Prediction, or None when nothing has been logged yet.
    """
    if not cycles:
        return None

    cfg = config or get_engine_config()
    pc = cfg.prediction
    stats = compute_cycle_stats(cycles)

    avg_length = estimate_cycle_length(cycles, settings, stats, cfg)

    anchor = settings.last_period_start if settings is not None else None
    anchor = anchor or max(cycles, key=lambda c: c.start).start
    if anchor is None:
        return None

    predicted = anchor + timedelta(days=round_half_up(avg_length))

    std_dev = stats.std_dev or 0.0
    range_days = max(pc.range_min_days, min(pc.range_max_days, round_half_up(std_dev)))

    prediction = Prediction(
        predicted_date=predicted,
        range_start=predicted - timedelta(days=range_days),
        range_end=predicted + timedelta(days=range_days),
        confidence=_confidence(stats.count, std_dev, cfg),
        avg_cycle_length=round_half_up(avg_length, 1),
        std_dev=round_half_up(std_dev, 1),
        cycles_analyzed=stats.count,
        range_days=range_days,
    )
    logger.debug(
        "Predicted next period %s (±%d days, %s confidence, %d cycles)",
        prediction.predicted_date,
        range_days,
        prediction.confidence.value,
        stats.count,
    )
    return prediction


def in_prediction_window(
    prediction: Prediction | None,
    reference_date: date,
    settings: CycleSettings | None = None,
) -> bool:
    """True while ``reference_date`` sits inside the predicted range.

    A period already declared on or after the range start means the
    predicted period has arrived, so the window no longer applies.
    """
    if prediction is None:
        return False
    if not prediction.range_start <= reference_date <= prediction.range_end:
        return False
    declared = settings.last_period_start if settings is not None else None
    return not (declared is not None and declared >= prediction.range_start)
