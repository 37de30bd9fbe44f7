"""Load, validate, and hot-reload the AuraCycle engine configuration.

The config lives in ``engine_config.yaml`` alongside this module.  At first
use it is loaded once and cached.  Call ``reload_engine_config()`` to re-read
from disk after a product change; no restart required.

Usage::

    from auracycle.engine.config_loader import get_engine_config

    config = get_engine_config()
    gap = config.cycle_builder.merge_gap_days          # 2
    ceiling = config.symptom_timing.max_cycle_day      # 40
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger("auracycle.engine.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "engine_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class CycleBuilderConfig:
    merge_gap_days: int = 2


@dataclass
class CycleLengthConfig:
    """Fallback lengths used while logged history is too short."""

    default_cycle_length: int = 28
    default_period_length: int = 5
    min_cycles_for_period_average: int = 2


@dataclass
class PredictionConfig:
    """Next-period prediction settings."""

    weighted_min_cycles: int = 3
    weighted_window: int = 6
    range_min_days: int = 1
    range_max_days: int = 7
    low_std_dev: float = 5.0      # > this = low confidence
    medium_std_dev: float = 2.5   # > this = at most medium
    high_min_cycles: int = 3      # fewer completed cycles = at most medium


@dataclass
class LateStatusConfig:
    """Inclusive upper bounds (days late) of the late-period tiers."""

    normal_max_days: int = 3
    mild_max_days: int = 7
    moderate_max_days: int = 14


@dataclass
class IrregularityConfig:
    window: int = 3
    max_std_dev: float = 4.0
    max_range_days: int = 8


@dataclass
class SymptomTimingConfig:
    max_cycle_day: int = 40
    min_occurrences: int = 2
    typical_band_days: int = 2


@dataclass
class SymptomInsightConfig:
    """Thresholds for the cross-cycle, flow and stress symptom insights."""

    max_cycle_day: int = 42
    min_cycles: int = 2
    min_flow_days: int = 3
    dominant_flow_share: float = 0.55
    high_stress_level: int = 4
    min_stress_days: int = 2
    stable_std_dev: float = 1.5
    max_insights: int = 6


@dataclass
class FertileWindowConfig:
    ovulation_offset_days: int = 2
    half_width_days: int = 2


@dataclass
class StabilityConfig:
    very_stable_std_dev: float = 1.0
    stable_std_dev: float = 2.5
    slightly_variable_std_dev: float = 4.5


@dataclass
class PhaseConfig:
    follicular_days: int = 6
    ovulatory_days: int = 4


@dataclass
class EngineConfig:
    """Complete, validated engine configuration.

    This is the single in-memory representation of engine_config.yaml.
    Every engine stage reads its thresholds from this object.
    """

    version: str
    cycle_builder: CycleBuilderConfig = field(default_factory=CycleBuilderConfig)
    cycle_length: CycleLengthConfig = field(default_factory=CycleLengthConfig)
    prediction: PredictionConfig = field(default_factory=PredictionConfig)
    late_status: LateStatusConfig = field(default_factory=LateStatusConfig)
    irregularity: IrregularityConfig = field(default_factory=IrregularityConfig)
    symptom_timing: SymptomTimingConfig = field(default_factory=SymptomTimingConfig)
    symptom_insights: SymptomInsightConfig = field(default_factory=SymptomInsightConfig)
    fertile_window: FertileWindowConfig = field(default_factory=FertileWindowConfig)
    stability: StabilityConfig = field(default_factory=StabilityConfig)
    phase: PhaseConfig = field(default_factory=PhaseConfig)
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when engine_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    try:
        import yaml  # pyyaml
    except ImportError as exc:
        raise ImportError(
            "pyyaml is required for config loading. Install with: pip install pyyaml"
        ) from exc

    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> EngineConfig:
    """Validate the raw YAML dict and construct an EngineConfig.

    Missing sections and keys fall back to the dataclass defaults.  Every
    problem found is collected before raising, so a broken file reports all
    of its errors at once.

    Raises:
        ConfigValidationError: If any value is missing a valid type or range.
    """
    errors: list[str] = []

    def _mapping(value: object, name: str) -> dict:
        value = value or {}
        if not isinstance(value, dict):
            errors.append(f"'{name}' must be a mapping")
            return {}
        return value

    def _section(name: str) -> dict:
        return _mapping(raw.get(name), name)

    def _int(d: dict, key: str, section: str, default: int, minimum: int = 0) -> int:
        value = d.get(key, default)
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{section}.{key} must be an integer, got {value!r}")
            return default
        if number < minimum:
            errors.append(f"{section}.{key} = {number} must be >= {minimum}")
        return number

    def _float(d: dict, key: str, section: str, default: float) -> float:
        value = d.get(key, default)
        try:
            number = float(value)
        except (TypeError, ValueError):
            errors.append(f"{section}.{key} must be a number, got {value!r}")
            return default
        if number < 0:
            errors.append(f"{section}.{key} = {number} must not be negative")
        return number

    version = str(raw.get("version", "1.0"))

    # ── Cycle builder ──
    cb_raw = _section("cycle_builder")
    cycle_builder = CycleBuilderConfig(
        merge_gap_days=_int(cb_raw, "merge_gap_days", "cycle_builder", 2, minimum=1),
    )

    # ── Fallback lengths ──
    cl_raw = _section("cycle_length")
    cycle_length = CycleLengthConfig(
        default_cycle_length=_int(cl_raw, "default_cycle_length", "cycle_length", 28, 1),
        default_period_length=_int(cl_raw, "default_period_length", "cycle_length", 5, 1),
        min_cycles_for_period_average=_int(
            cl_raw, "min_cycles_for_period_average", "cycle_length", 2, 1
        ),
    )

    # ── Prediction ──
    pr_raw = _section("prediction")
    conf_raw = _mapping(pr_raw.get("confidence"), "prediction.confidence")
    prediction = PredictionConfig(
        weighted_min_cycles=_int(pr_raw, "weighted_min_cycles", "prediction", 3, 1),
        weighted_window=_int(pr_raw, "weighted_window", "prediction", 6, 1),
        range_min_days=_int(pr_raw, "range_min_days", "prediction", 1, 1),
        range_max_days=_int(pr_raw, "range_max_days", "prediction", 7, 1),
        low_std_dev=_float(conf_raw, "low_std_dev", "prediction.confidence", 5.0),
        medium_std_dev=_float(conf_raw, "medium_std_dev", "prediction.confidence", 2.5),
        high_min_cycles=_int(conf_raw, "high_min_cycles", "prediction.confidence", 3, 1),
    )
    if prediction.range_min_days > prediction.range_max_days:
        errors.append("prediction.range_min_days must not exceed range_max_days")
    if prediction.medium_std_dev > prediction.low_std_dev:
        errors.append("prediction.confidence.medium_std_dev must not exceed low_std_dev")

    # ── Late status ──
    ls_raw = _section("late_status")
    late_status = LateStatusConfig(
        normal_max_days=_int(ls_raw, "normal_max_days", "late_status", 3, 1),
        mild_max_days=_int(ls_raw, "mild_max_days", "late_status", 7, 1),
        moderate_max_days=_int(ls_raw, "moderate_max_days", "late_status", 14, 1),
    )
    if not (
        late_status.normal_max_days
        < late_status.mild_max_days
        < late_status.moderate_max_days
    ):
        errors.append("late_status tier bounds must be strictly increasing")

    # ── Irregularity ──
    ir_raw = _section("irregularity")
    irregularity = IrregularityConfig(
        window=_int(ir_raw, "window", "irregularity", 3, 2),
        max_std_dev=_float(ir_raw, "max_std_dev", "irregularity", 4.0),
        max_range_days=_int(ir_raw, "max_range_days", "irregularity", 8),
    )

    # ── Symptom timing ──
    st_raw = _section("symptom_timing")
    symptom_timing = SymptomTimingConfig(
        max_cycle_day=_int(st_raw, "max_cycle_day", "symptom_timing", 40, 1),
        min_occurrences=_int(st_raw, "min_occurrences", "symptom_timing", 2, 1),
        typical_band_days=_int(st_raw, "typical_band_days", "symptom_timing", 2),
    )

    # ── Symptom insights ──
    si_raw = _section("symptom_insights")
    symptom_insights = SymptomInsightConfig(
        max_cycle_day=_int(si_raw, "max_cycle_day", "symptom_insights", 42, 1),
        min_cycles=_int(si_raw, "min_cycles", "symptom_insights", 2, 1),
        min_flow_days=_int(si_raw, "min_flow_days", "symptom_insights", 3, 1),
        dominant_flow_share=_float(si_raw, "dominant_flow_share", "symptom_insights", 0.55),
        high_stress_level=_int(si_raw, "high_stress_level", "symptom_insights", 4, 1),
        min_stress_days=_int(si_raw, "min_stress_days", "symptom_insights", 2, 1),
        stable_std_dev=_float(si_raw, "stable_std_dev", "symptom_insights", 1.5),
        max_insights=_int(si_raw, "max_insights", "symptom_insights", 6, 1),
    )
    if symptom_insights.dominant_flow_share > 1.0:
        errors.append("symptom_insights.dominant_flow_share must be within [0.0, 1.0]")

    # ── Fertile window ──
    fw_raw = _section("fertile_window")
    fertile_window = FertileWindowConfig(
        ovulation_offset_days=_int(fw_raw, "ovulation_offset_days", "fertile_window", 2),
        half_width_days=_int(fw_raw, "half_width_days", "fertile_window", 2),
    )

    # ── Stability labels ──
    sb_raw = _section("stability")
    stability = StabilityConfig(
        very_stable_std_dev=_float(sb_raw, "very_stable_std_dev", "stability", 1.0),
        stable_std_dev=_float(sb_raw, "stable_std_dev", "stability", 2.5),
        slightly_variable_std_dev=_float(
            sb_raw, "slightly_variable_std_dev", "stability", 4.5
        ),
    )
    if not (
        stability.very_stable_std_dev
        <= stability.stable_std_dev
        <= stability.slightly_variable_std_dev
    ):
        errors.append("stability thresholds must be non-decreasing")

    # ── Phase ──
    ph_raw = _section("phase")
    phase = PhaseConfig(
        follicular_days=_int(ph_raw, "follicular_days", "phase", 6, 1),
        ovulatory_days=_int(ph_raw, "ovulatory_days", "phase", 4, 1),
    )

    # Warn only: a ceiling below a plausible cycle length silently drops data
    if symptom_timing.max_cycle_day < cycle_length.default_cycle_length:
        logger.warning(
            "symptom_timing.max_cycle_day (%d) is shorter than the default "
            "cycle length (%d); late-cycle symptoms will be ignored",
            symptom_timing.max_cycle_day,
            cycle_length.default_cycle_length,
        )

    if errors:
        raise ConfigValidationError(
            f"engine_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return EngineConfig(
        version=version,
        cycle_builder=cycle_builder,
        cycle_length=cycle_length,
        prediction=prediction,
        late_status=late_status,
        irregularity=irregularity,
        symptom_timing=symptom_timing,
        symptom_insights=symptom_insights,
        fertile_window=fertile_window,
        stability=stability,
        phase=phase,
        _raw=raw,
    )


def _default_path() -> Path:
    from auracycle.config import get_settings

    override = get_settings().engine_config_path
    return Path(override) if override else _CONFIG_PATH


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load and validate the engine config from disk.

    Args:
        path: Override path to YAML.  Defaults to ``ENGINE_CONFIG_PATH`` from
              the environment, else the bundled engine_config.yaml.

    Returns:
        Validated EngineConfig instance.
    """
    target = path or _default_path()
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded engine config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: EngineConfig | None = None
_config_lock = threading.Lock()


def get_engine_config() -> EngineConfig:
    """Return the global EngineConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_engine_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_engine_config()
    return _config


def reload_engine_config(path: Path | None = None) -> EngineConfig:
    """Reload the engine config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is
    re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_engine_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info(
        "Reloaded engine config: %s -> %s",
        old_version,
        new_config.version,
    )
    return new_config
