"""Workout plan flattening.

Pure function that unrolls a plan (standalone steps and repeat groups) into
an ordered list of flat steps. Deterministic: no ids are generated and no
clock is read, so identical plans always flatten to identical output.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from workout_match.workouts.types import FlatStep, PlanEntry, RepeatGroup, WorkoutStep


def _to_flat_step(
    step: WorkoutStep,
    sequence_index: int,
    group_id: str | None = None,
    repetition_index: int = 0,
    total_repetitions: int = 1,
) -> FlatStep:
    """Build the flat step for one occurrence of a plan step.

    Planned quantities are only set for positive durations; a step without
    one keeps its place in the sequence but contributes nothing to totals.
    """
    value = step.duration.value
    has_quantity = value is not None and value > 0

    planned_distance: float | None = None
    planned_duration: float | None = None
    if has_quantity and step.duration.kind == "distance":
        planned_distance = value
    elif has_quantity and step.duration.kind == "time":
        planned_duration = value

    return FlatStep(
        sequence_index=sequence_index,
        source_step_id=step.id,
        source_group_id=group_id,
        repetition_index=repetition_index,
        total_repetitions=total_repetitions,
        type=step.type,
        label=step.label,
        duration_kind=step.duration.kind,
        planned_distance_meters=planned_distance,
        planned_duration_seconds=planned_duration,
        target=step.target,
    )


def effective_reps(group: RepeatGroup) -> int:
    """Repetition count used for unrolling; anything below 1 counts as 1."""
    return max(group.reps, 1)


def flatten(plan: Sequence[PlanEntry]) -> list[FlatStep]:
    """Flatten a workout plan into its execution sequence.

    Standalone steps produce one flat step with repetition_index 0. A repeat
    group with r reps produces r consecutive blocks of its members, each
    block tagged with its 0-based repetition and the group id. Sequence
    indexes are assigned globally across the whole walk.

    Args:
        plan: Ordered plan entries

    Returns:
        Flat steps in execution order
    """
    flat_steps: list[FlatStep] = []

    for entry in plan:
        if isinstance(entry, RepeatGroup):
            reps = effective_reps(entry)
            if reps != entry.reps:
                logger.debug(f"Repeat group {entry.group_id} has reps={entry.reps}, unrolling once")

            for repetition in range(reps):
                for member in entry.members:
                    flat_steps.append(
                        _to_flat_step(
                            member,
                            sequence_index=len(flat_steps),
                            group_id=entry.group_id,
                            repetition_index=repetition,
                            total_repetitions=reps,
                        )
                    )
        else:
            flat_steps.append(_to_flat_step(entry, sequence_index=len(flat_steps)))

    logger.debug(f"Flattened {len(plan)} plan entries into {len(flat_steps)} steps")
    return flat_steps
