"""Workout plan flattening, lap alignment and execution scoring.

Pure functions with no I/O: flatten() unrolls a plan, align() maps recorded
laps onto the flat steps, score() compares planned and actual totals.
"""

from workout_match.workouts.align import align
from workout_match.workouts.builder_blocks import plan_from_builder_blocks
from workout_match.workouts.flatten import flatten
from workout_match.workouts.scoring import ScoringParams, planned_totals, score

__all__ = [
    "ScoringParams",
    "align",
    "flatten",
    "plan_from_builder_blocks",
    "planned_totals",
    "score",
]
