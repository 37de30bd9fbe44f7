"""Late-period classification.

Tiers are deliberately calm: a few days late is normal variance, and only
a long delay suggests talking to a healthcare provider.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.prediction import Prediction
from auracycle.engine.stats_utils import days_between
from auracycle.models.tracking import CycleSettings

logger = logging.getLogger("auracycle.engine.late_status")


class LateSeverity(str, Enum):
    normal = "normal"
    mild = "mild"
    moderate = "moderate"
    high = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = [
    LateSeverity.normal,
    LateSeverity.mild,
    LateSeverity.moderate,
    LateSeverity.high,
]

LATE_MESSAGES: dict[LateSeverity, str] = {
    LateSeverity.normal: "Small variations of a few days are completely normal.",
    LateSeverity.mild: (
        "Cycles often shift due to stress, sleep changes, or travel. "
        "This is a common variation."
    ),
    LateSeverity.moderate: (
        "If you're sexually active, a home pregnancy test is a good idea. "
        "Illness and major stress can also delay cycles."
    ),
    LateSeverity.high: (
        "Cycles can occasionally be significantly delayed. Consider speaking "
        "with a healthcare provider if this is unusual for you."
    ),
}


@dataclass
class LateStatus:
    days_late: int
    severity: LateSeverity
    message: str


def classify_days_late(days_late: int, config: EngineConfig | None = None) -> LateSeverity:
    """Map a positive number of days late to its severity tier."""
    ls = (config or get_engine_config()).late_status
    if days_late <= ls.normal_max_days:
        return LateSeverity.normal
    if days_late <= ls.mild_max_days:
        return LateSeverity.mild
    if days_late <= ls.moderate_max_days:
        return LateSeverity.moderate
    return LateSeverity.high


def get_late_status(
    prediction: Prediction | None,
    settings: CycleSettings | None,
    reference_date: date,
    config: EngineConfig | None = None,
) -> LateStatus | None:
    """Late-period status as of ``reference_date``.

    Returns None without a prediction, without a declared last period
    start, or when the predicted date has not passed yet.
    """
    if prediction is None or settings is None or settings.last_period_start is None:
        return None

    days_late = days_between(prediction.predicted_date, reference_date)
    if days_late <= 0:
        return None

    severity = classify_days_late(days_late, config)
    logger.debug("Period %d day(s) late -> %s", days_late, severity.value)
    return LateStatus(
        days_late=days_late,
        severity=severity,
        message=LATE_MESSAGES[severity],
    )
