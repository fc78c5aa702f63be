"""Tournament scheduling and results services."""

from .heats import HeatBuilder, LaneAssignment, SeedingStrategy, describe_heats
from .ranking import RankedEntry, ResultEntry, rank_entries
from .results import CorrectionRow, apply_corrections, recalculate_event_ranks, submit_results
from .schedule import build_schedule, generate_schedule

__all__ = [
    "HeatBuilder",
    "LaneAssignment",
    "SeedingStrategy",
    "describe_heats",
    "RankedEntry",
    "ResultEntry",
    "rank_entries",
    "CorrectionRow",
    "apply_corrections",
    "recalculate_event_ranks",
    "submit_results",
    "build_schedule",
    "generate_schedule",
]
