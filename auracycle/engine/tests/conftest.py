"""Shared fixtures and log factories for cycle engine tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from auracycle.engine.config_loader import EngineConfig, load_engine_config
from auracycle.models.tracking import CycleSettings, LogEntry, LogType

# Canonical "today" for tests that need a reference date
TEST_DATE = date(2024, 6, 15)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def period(d: date, flow: str | None = "medium", **kwargs) -> LogEntry:
    return LogEntry(date=d, log_type=LogType.period, flow_intensity=flow, **kwargs)


def period_run(start: date, days: int = 1, flow: str = "medium") -> list[LogEntry]:
    """Consecutive daily period logs starting at ``start``."""
    return [period(start + timedelta(days=i), flow) for i in range(days)]


def symptom_log(d: date, *symptoms: str, **kwargs) -> LogEntry:
    return LogEntry(date=d, log_type=LogType.symptom, symptoms=list(symptoms), **kwargs)


def mood_log(d: date, *moods: str, **kwargs) -> LogEntry:
    return LogEntry(date=d, log_type=LogType.mood, moods=list(moods), **kwargs)


def regular_periods(
    n: int, length: int = 28, start: date = date(2024, 1, 1), bleed_days: int = 1
) -> list[LogEntry]:
    """Period runs for ``n`` cycles of a fixed length."""
    logs: list[LogEntry] = []
    for i in range(n):
        logs.extend(period_run(start + timedelta(days=i * length), bleed_days))
    return logs


def periods_from_lengths(lengths: list[int], start: date = date(2024, 1, 1)) -> list[LogEntry]:
    """Single-day period logs whose successive gaps are ``lengths``.

    Produces ``len(lengths) + 1`` cycles, ``len(lengths)`` of them complete.
    """
    logs = [period(start)]
    current = start
    for length in lengths:
        current += timedelta(days=length)
        logs.append(period(current))
    return logs


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine_config() -> EngineConfig:
    """Load the real bundled engine config for tests."""
    return load_engine_config()


@pytest.fixture
def default_settings() -> CycleSettings:
    return CycleSettings()


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------


@pytest.fixture
def scenario_a_logs() -> list[LogEntry]:
    """A single medium-flow period day."""
    return [period(date(2024, 1, 1), "medium")]


@pytest.fixture
def scenario_b_logs() -> list[LogEntry]:
    """Three single-day periods, 28 then 29 days apart."""
    return [period(date(2024, 1, 1)), period(date(2024, 1, 29)), period(date(2024, 2, 27))]


@pytest.fixture
def scenario_c_logs() -> list[LogEntry]:
    """Four 28-day cycles; cramps on cycle day 2 of the first three."""
    logs = regular_periods(4, 28)
    logs += [
        symptom_log(date(2024, 1, 2), "cramps"),
        symptom_log(date(2024, 1, 30), "cramps:severe"),
        symptom_log(date(2024, 2, 27), "cramps:mild"),
    ]
    return logs
