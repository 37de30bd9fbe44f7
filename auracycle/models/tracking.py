"""Pydantic models for manual cycle tracking: daily log entries and the
per-user cycle settings row.

Category fields (flow, symptoms, moods) are closed enumerations with an
explicit fallback member so that values added by newer clients still load.
"""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Any, Iterable

from pydantic import Field, ValidationError, field_validator, model_validator

from auracycle.models.base import AuraBase

logger = logging.getLogger("auracycle.models.tracking")


# ---------- Enums ----------

class LogType(str, Enum):
    period = "period"
    symptom = "symptom"
    mood = "mood"
    note = "note"


class FlowIntensity(str, Enum):
    spotting = "spotting"
    light = "light"
    medium = "medium"
    heavy = "heavy"
    unknown = "unknown"


class Severity(str, Enum):
    mild = "mild"
    moderate = "moderate"
    severe = "severe"
    unknown = "unknown"


class Symptom(str, Enum):
    cramps = "cramps"
    headache = "headache"
    bloating = "bloating"
    back_pain = "back_pain"
    breast_tenderness = "breast_tenderness"
    fatigue = "fatigue"
    acne = "acne"
    nausea = "nausea"
    cravings = "cravings"
    insomnia = "insomnia"
    dizziness = "dizziness"
    spotting = "spotting"
    other = "other"

    @classmethod
    def from_key(cls, key: str) -> Symptom:
        try:
            return cls(key)
        except ValueError:
            return cls.other


class Mood(str, Enum):
    happy = "happy"
    calm = "calm"
    energetic = "energetic"
    sad = "sad"
    anxious = "anxious"
    irritable = "irritable"
    emotional = "emotional"
    stressed = "stressed"
    other = "other"

    @classmethod
    def from_key(cls, key: str) -> Mood:
        try:
            return cls(key)
        except ValueError:
            return cls.other


def _enum_or_fallback(enum_cls: type[Enum], value: Any, fallback: Enum) -> Any:
    if value is None or isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    try:
        return enum_cls(text)
    except ValueError:
        return fallback


# ---------- Symptoms ----------

class SymptomEntry(AuraBase):
    """A logged symptom: identifier plus optional severity.

    Raw strings in the stored ``name:severity`` form are accepted and split
    on the first colon.
    """

    key: str = Field(min_length=1)
    severity: Severity | None = None

    @model_validator(mode="before")
    @classmethod
    def _parse_compound(cls, data: Any) -> Any:
        if isinstance(data, str):
            name, _, severity = data.partition(":")
            return {"key": name, "severity": severity or None}
        return data

    @field_validator("key")
    @classmethod
    def _normalize_key(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, v: Any) -> Any:
        return _enum_or_fallback(Severity, v, Severity.unknown)

    @property
    def kind(self) -> Symptom:
        return Symptom.from_key(self.key)

    @property
    def label(self) -> str:
        return self.key.replace("_", " ")

    def __str__(self) -> str:
        if self.severity is None:
            return self.key
        return f"{self.key}:{self.severity.value}"


def _is_blank_symptom(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.partition(":")[0].strip()
    if isinstance(value, dict):
        return not str(value.get("key") or "").strip()
    return False


# ---------- Log entries ----------

class LogEntry(AuraBase):
    """One user-recorded event for a calendar date."""

    date: date
    log_type: LogType
    flow_intensity: FlowIntensity | None = None
    is_period_end: bool = False
    symptoms: list[SymptomEntry] = Field(default_factory=list)
    moods: list[str] = Field(default_factory=list)
    notes: str | None = None
    stress_level: int | None = Field(default=None, ge=1, le=5)
    sleep_quality: int | None = Field(default=None, ge=1, le=5)
    sleep_hours: float | None = Field(default=None, ge=0)
    water_intake: float | None = Field(default=None, ge=0)
    exercise: bool = False
    exercise_type: str | None = None

    @field_validator("flow_intensity", mode="before")
    @classmethod
    def _coerce_flow(cls, v: Any) -> Any:
        return _enum_or_fallback(FlowIntensity, v, FlowIntensity.unknown)

    @field_validator("symptoms", "moods", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("symptoms", mode="before")
    @classmethod
    def _drop_blank_symptoms(cls, v: Any) -> Any:
        # A blank name ("", "  ", ":mild") carries no symptom; drop it, keep the row
        if not isinstance(v, list):
            return v
        return [s for s in v if not _is_blank_symptom(s)]

    @field_validator("moods")
    @classmethod
    def _normalize_moods(cls, v: list[str]) -> list[str]:
        return [m.strip().lower() for m in v if m and m.strip()]

    @property
    def symptom_keys(self) -> list[str]:
        return [s.key for s in self.symptoms]

    @property
    def mood_kinds(self) -> list[Mood]:
        return [Mood.from_key(m) for m in self.moods]

    @property
    def is_period(self) -> bool:
        return self.log_type == LogType.period


# ---------- Cycle settings ----------

class CycleSettings(AuraBase):
    """Per-user cycle settings.

    The averages are user-declared priors, only used while there is not
    enough logged history to derive them.
    """

    average_cycle_length: int = Field(default=28, gt=0)
    average_period_length: int = Field(default=5, gt=0)
    last_period_start: date | None = None
    last_period_end: date | None = None


# ---------- Boundary parsing ----------

def parse_log_entries(rows: Iterable[LogEntry | dict[str, Any]]) -> list[LogEntry]:
    """Validate raw log rows, skipping the ones that fail validation.

    One bad row (for example a missing or unparseable date) must not blank
    the user's whole derived view, so invalid rows are logged and dropped.

    Args:
        rows: Persisted rows as dicts, or already-built LogEntry objects.

    Returns:
        The valid entries, in input order.
    """
    entries: list[LogEntry] = []
    skipped = 0
    for row in rows:
        if isinstance(row, LogEntry):
            entries.append(row)
            continue
        try:
            entries.append(LogEntry.model_validate(row))
        except ValidationError as exc:
            skipped += 1
            logger.warning(
                "Skipping malformed log row (%d error(s)): %s",
                exc.error_count(),
                exc.errors(include_url=False)[0]["msg"],
            )
    if skipped:
        logger.info("Parsed %d log entries, skipped %d", len(entries), skipped)
    return entries


def parse_cycle_settings(row: CycleSettings | dict[str, Any] | None) -> CycleSettings | None:
    """Validate a settings row; a missing or malformed row yields ``None``."""
    if row is None or isinstance(row, CycleSettings):
        return row
    try:
        return CycleSettings.model_validate(row)
    except ValidationError as exc:
        logger.warning(
            "Ignoring malformed cycle settings (%d error(s))", exc.error_count()
        )
        return None
