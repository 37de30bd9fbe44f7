"""AuraCycle cycle engine.

Pure computation over a user's cycle logs and settings: cycle grouping,
statistics, next-period prediction, late/irregular flags, symptom timing
and fertile window estimates.

Subpackages:
    models/ - Pydantic input models (log entries, cycle settings)
    engine/ - Cycle statistics and prediction engine
"""

__version__ = "0.1.0"
