"""Cycle statistics and prediction engine.

Every function here is pure: it receives logs and settings, returns freshly
built records, and never reads the clock ("today" is always passed in as
``reference_date``).

Modules:
    cycle_builder      - Group period logs into cycles
    cycle_stats        - Cycle-length statistics, period length, stability
    prediction         - Next-period forecast with confidence band
    late_status        - Late-period severity tiers
    irregularity       - Last-three-cycles variability flag
    symptom_timing     - Cycle days on which symptoms recur
    symptom_correlator - Cross-cycle, flow and stress symptom insights
    fertile_window     - Ovulation and fertile window estimate
    phase              - Current cycle day and phase
    snapshot           - Full pipeline + assistant context text
    config_loader      - Load/validate/hot-reload engine_config.yaml
"""

from auracycle.engine.config_loader import EngineConfig, get_engine_config
from auracycle.engine.cycle_builder import Cycle, build_cycles
from auracycle.engine.cycle_stats import CycleStats, compute_cycle_stats
from auracycle.engine.fertile_window import FertileWindow, get_fertile_window
from auracycle.engine.irregularity import Irregularity, detect_irregularity
from auracycle.engine.late_status import LateSeverity, LateStatus, get_late_status
from auracycle.engine.prediction import Confidence, Prediction, predict_next_period
from auracycle.engine.snapshot import CycleSnapshot, build_snapshot, render_assistant_context
from auracycle.engine.symptom_timing import SymptomPattern, compute_symptom_patterns

__all__ = [
    "EngineConfig",
    "get_engine_config",
    "Cycle",
    "build_cycles",
    "CycleStats",
    "compute_cycle_stats",
    "Prediction",
    "Confidence",
    "predict_next_period",
    "LateStatus",
    "LateSeverity",
    "get_late_status",
    "Irregularity",
    "detect_irregularity",
    "SymptomPattern",
    "compute_symptom_patterns",
    "FertileWindow",
    "get_fertile_window",
    "CycleSnapshot",
    "build_snapshot",
    "render_assistant_context",
]
