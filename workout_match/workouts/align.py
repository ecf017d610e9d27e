"""Lap to plan-step alignment.

Maps recorded laps onto the flattened plan by position. Equal counts map
one to one; otherwise laps are spread proportionally so that the mapping
stays chronological (never moves backwards) and every step is reachable.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from workout_match.workouts.labels import UNMATCHED_LABEL, step_display_label
from workout_match.workouts.types import FlatStep, MatchedLap, RecordedLap


def proportional_index(position: int, lap_count: int, step_count: int) -> int:
    """Flat step index for the lap at a 0-based position.

    floor(position * step_count / lap_count), clamped to [0, step_count - 1].
    """
    index = (position * step_count) // lap_count
    return min(max(index, 0), step_count - 1)


def align(laps: Sequence[RecordedLap], flat_steps: Sequence[FlatStep]) -> list[MatchedLap]:
    """Align recorded laps with flat steps.

    Args:
        laps: Recorded laps in chronological order
        flat_steps: Flattened plan

    Returns:
        One MatchedLap per input lap, in input order
    """
    lap_count = len(laps)
    step_count = len(flat_steps)

    if step_count == 0:
        logger.debug(f"No planned steps, leaving {lap_count} laps unmatched")
        return [
            MatchedLap(
                lap_index=lap.lap_index,
                flat_step_index=None,
                step_type="other",
                step_label=UNMATCHED_LABEL,
            )
            for lap in laps
        ]

    if lap_count != step_count:
        logger.debug(f"Lap count {lap_count} differs from step count {step_count}, using proportional mapping")

    matched_laps: list[MatchedLap] = []
    for position, lap in enumerate(laps):
        if lap_count == step_count:
            index = position
        else:
            index = proportional_index(position, lap_count, step_count)

        step = flat_steps[index]
        matched_laps.append(
            MatchedLap(
                lap_index=lap.lap_index,
                flat_step_index=index,
                step_type=step.type,
                step_label=step_display_label(step),
            )
        )

    return matched_laps
