"""Run the whole engine over one user's logs and settings.

The presentation layer calls ``build_snapshot`` once per data refresh and
reads every derived record from the result.  ``render_assistant_context``
flattens a snapshot into the plain-text block handed to the chat
assistant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Sequence

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.cycle_builder import Cycle, build_cycles
from auracycle.engine.cycle_stats import (
    CycleStats,
    Stability,
    average_period_length,
    compute_cycle_stats,
    stability_label,
)
from auracycle.engine.fertile_window import FertileWindow, get_fertile_window
from auracycle.engine.irregularity import Irregularity, detect_irregularity
from auracycle.engine.late_status import LateStatus, get_late_status
from auracycle.engine.phase import CyclePosition, current_cycle_position
from auracycle.engine.prediction import Prediction, in_prediction_window, predict_next_period
from auracycle.engine.stats_utils import days_between
from auracycle.engine.symptom_correlator import SymptomCorrelator, SymptomInsight
from auracycle.engine.symptom_timing import SymptomPattern, compute_symptom_patterns
from auracycle.models.tracking import (
    CycleSettings,
    LogEntry,
    parse_cycle_settings,
    parse_log_entries,
)

logger = logging.getLogger("auracycle.engine.snapshot")


@dataclass
class CycleSnapshot:
    """Every derived record for one user as of ``reference_date``."""

    reference_date: date
    cycles: list[Cycle] = field(default_factory=list)
    stats: CycleStats = field(default_factory=CycleStats)
    cycle_length: float = 28.0
    period_length: int = 5
    stability: Stability | None = None
    prediction: Prediction | None = None
    in_prediction_window: bool = False
    late_status: LateStatus | None = None
    irregularity: Irregularity | None = None
    symptom_patterns: list[SymptomPattern] = field(default_factory=list)
    insights: list[SymptomInsight] = field(default_factory=list)
    fertile_window: FertileWindow | None = None
    position: CyclePosition | None = None


def build_snapshot(
    logs: Iterable[LogEntry | dict[str, Any]],
    settings: CycleSettings | dict[str, Any] | None,
    reference_date: date,
    config: EngineConfig | None = None,
) -> CycleSnapshot:
    """Run every engine stage in dependency order.

    Args:
        logs:           Log entries or raw persisted rows (malformed rows
                        are skipped).
        settings:       Cycle settings, a raw settings row, or None.
        reference_date: "Today" for late, window and phase calculations.
        config:         Engine config (defaults to the global singleton).

    Returns:
        A CycleSnapshot; stages without enough data hold None or empty.
    """
    cfg = config or get_engine_config()
    entries = parse_log_entries(logs)
    user_settings = parse_cycle_settings(settings)

    cycles = build_cycles(entries, cfg)
    stats = compute_cycle_stats(cycles)

    cycle_length = stats.avg or (
        user_settings.average_cycle_length
        if user_settings is not None
        else cfg.cycle_length.default_cycle_length
    )
    period_length = average_period_length(cycles, user_settings, cfg)

    prediction = predict_next_period(cycles, user_settings, cfg)
    anchor = user_settings.last_period_start if user_settings is not None else None

    snapshot = CycleSnapshot(
        reference_date=reference_date,
        cycles=cycles,
        stats=stats,
        cycle_length=float(cycle_length),
        period_length=period_length,
        stability=stability_label(stats, cfg),
        prediction=prediction,
        in_prediction_window=in_prediction_window(prediction, reference_date, user_settings),
        late_status=get_late_status(prediction, user_settings, reference_date, cfg),
        irregularity=detect_irregularity(cycles, cfg),
        symptom_patterns=compute_symptom_patterns(entries, cycles, cfg),
        insights=SymptomCorrelator(cfg).generate_insights(entries, cycles, stats),
        fertile_window=get_fertile_window(anchor, cycle_length, reference_date, cfg),
        position=current_cycle_position(
            user_settings, cycle_length, period_length, reference_date, cfg
        ),
    )
    logger.debug(
        "Snapshot for %s: %d entries, %d cycles, prediction=%s",
        reference_date,
        len(entries),
        len(cycles),
        prediction.predicted_date if prediction else None,
    )
    return snapshot


# ---------------------------------------------------------------------------
# Assistant context
# ---------------------------------------------------------------------------


def _fmt_short(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}"


def _recent(logs: Sequence[LogEntry], limit: int) -> list[LogEntry]:
    return sorted(logs, key=lambda log: log.date, reverse=True)[:limit]


def render_assistant_context(
    snapshot: CycleSnapshot,
    logs: Iterable[LogEntry | dict[str, Any]],
    settings: CycleSettings | dict[str, Any] | None,
) -> str:
    """Flatten a snapshot and recent logs into the assistant's text context.

    Statistics are only listed once two cycles are complete; log sections
    are capped to the most recent entries.
    """
    entries = parse_log_entries(logs)
    user_settings = parse_cycle_settings(settings)
    today = snapshot.reference_date
    lines: list[str] = [
        "=== User's Complete Cycle & Health Data ===",
        f"Today: {today.isoformat()}",
        "",
    ]

    # ── Settings ──
    if user_settings is not None:
        lines.append("--- Settings ---")
        lines.append(f"Cycle length (manual): {user_settings.average_cycle_length} days")
        lines.append(f"Period length (manual): {user_settings.average_period_length} days")
        if user_settings.last_period_start:
            since = days_between(user_settings.last_period_start, today)
            line = f"Last period start: {user_settings.last_period_start.isoformat()}"
            # A start in the future has no cycle day yet
            if since >= 0:
                cycle_day = since % user_settings.average_cycle_length + 1
                line += f" ({since} days ago, cycle day {cycle_day})"
            lines.append(line)
        if user_settings.last_period_end:
            lines.append(f"Last period end: {user_settings.last_period_end.isoformat()}")

    # ── Computed stats ──
    lines.append("")
    lines.append("--- Computed Statistics ---")
    stats = snapshot.stats
    if stats.count >= 2:
        lines.append(f"Average cycle: {stats.avg} days")
        lines.append(f"Cycle variation (std dev): ±{stats.std_dev} days")
        lines.append(f"Range: {stats.min}-{stats.max} days across {stats.count} cycles")
        if stats.last3:
            lines.append(
                f"Last 3 cycle lengths: {', '.join(str(n) for n in stats.last3)} days"
            )
    if snapshot.prediction:
        p = snapshot.prediction
        lines.append(
            f"Predicted next period: {p.predicted_date.isoformat()} "
            f"(range: {p.range_start.isoformat()} - {p.range_end.isoformat()}, "
            f"{p.confidence.value} confidence)"
        )
    if snapshot.late_status:
        late = snapshot.late_status
        lines.append(f"LATE PERIOD: {late.days_late} days late - {late.message}")
    if snapshot.irregularity:
        irr = snapshot.irregularity
        label = "IRREGULAR" if irr.is_irregular else "regular"
        lines.append(f"Cycle regularity: {label} - {irr.message}")
    if snapshot.fertile_window:
        fw = snapshot.fertile_window
        lines.append(
            f"Fertile window this cycle: {_fmt_short(fw.start)} - {_fmt_short(fw.end)} "
            f"(ovulation est. {_fmt_short(fw.ovulation)})"
        )
        if fw.is_active:
            lines.append("Note: User is currently in their fertile window.")

    # ── Symptom patterns ──
    if snapshot.symptom_patterns:
        lines.append("")
        lines.append("--- Symptom Timing Patterns ---")
        for pattern in snapshot.symptom_patterns[:8]:
            lines.append(
                f"  • {pattern.label}: typically {pattern.typical_range} of cycle "
                f"({pattern.count} occurrences)"
            )

    # ── Period logs ──
    period_logs = [e for e in entries if e.is_period]
    if period_logs:
        lines.append("")
        lines.append(f"--- Period Logs ({len(period_logs)} total, showing recent 12) ---")
        for log in _recent(period_logs, 12):
            flow = log.flow_intensity.value if log.flow_intensity else "unspecified"
            line = f"  • {log.date.isoformat()}: flow={flow}"
            if log.symptoms:
                line += f", symptoms: {', '.join(str(s) for s in log.symptoms)}"
            if log.stress_level:
                line += f", stress: {log.stress_level}/5"
            if log.sleep_quality:
                line += f", sleep: {log.sleep_quality}/5"
            lines.append(line)

    # ── Symptom logs ──
    symptom_logs = [e for e in entries if e.symptoms]
    if symptom_logs:
        lines.append("")
        lines.append(
            f"--- Symptom Logs ({len(symptom_logs)} total, showing recent 10) ---"
        )
        for log in _recent(symptom_logs, 10):
            line = f"  • {log.date.isoformat()}: {', '.join(str(s) for s in log.symptoms)}"
            if log.stress_level:
                line += f" | stress: {log.stress_level}/5"
            if log.sleep_quality:
                line += f" | sleep quality: {log.sleep_quality}/5"
            lines.append(line)

    # ── Mood logs ──
    mood_logs = [e for e in entries if e.moods]
    if mood_logs:
        lines.append("")
        lines.append(f"--- Mood Logs ({len(mood_logs)} total, showing recent 10) ---")
        for log in _recent(mood_logs, 10):
            line = f"  • {log.date.isoformat()}: {', '.join(log.moods)}"
            if log.notes:
                line += f' | note: "{log.notes[:60]}"'
            lines.append(line)

    # ── Lifestyle ──
    lifestyle_logs = [e for e in entries if e.sleep_hours or e.stress_level or e.exercise]
    if lifestyle_logs:
        lines.append("")
        lines.append(
            f"--- Lifestyle Logs ({len(lifestyle_logs)} total, showing recent 8) ---"
        )
        for log in _recent(lifestyle_logs, 8):
            parts = []
            if log.sleep_hours:
                parts.append(f"sleep: {log.sleep_hours:g}h")
            if log.sleep_quality:
                parts.append(f"sleep quality: {log.sleep_quality}/5")
            if log.stress_level:
                parts.append(f"stress: {log.stress_level}/5")
            if log.water_intake:
                parts.append(f"water: {log.water_intake:g}ml")
            if log.exercise:
                parts.append(f"exercise: {log.exercise_type or 'yes'}")
            lines.append(f"  • {log.date.isoformat()}: {', '.join(parts)}")

    return "\n".join(lines) + "\n"
