"""Small numeric helpers shared by the engine stages."""

from __future__ import annotations

import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence


def round_half_up(value: float, ndigits: int = 0) -> float | int:
    """Round half away from zero (``round()`` rounds half to even).

    Returns an ``int`` when ``ndigits`` is 0.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if ndigits == 0 else float(rounded)


def population_stats(values: Sequence[float]) -> tuple[float, float, float]:
    """Return ``(mean, variance, std_dev)`` with the population divisor n."""
    n = len(values)
    mean = sum(values) / n
    variance = sum((v - mean) ** 2 for v in values) / n
    return mean, variance, math.sqrt(variance)


def days_between(start: date, end: date) -> int:
    """Signed whole days from ``start`` to ``end``."""
    return (end - start).days
