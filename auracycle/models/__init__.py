"""Pydantic models for the data the cycle engine consumes."""

from auracycle.models.tracking import (
    CycleSettings,
    FlowIntensity,
    LogEntry,
    LogType,
    Mood,
    Severity,
    Symptom,
    SymptomEntry,
    parse_cycle_settings,
    parse_log_entries,
)

__all__ = [
    "CycleSettings",
    "FlowIntensity",
    "LogEntry",
    "LogType",
    "Mood",
    "Severity",
    "Symptom",
    "SymptomEntry",
    "parse_cycle_settings",
    "parse_log_entries",
]
