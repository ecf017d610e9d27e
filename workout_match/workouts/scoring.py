"""Plan vs actual execution scoring.

Pure math over the flattened plan and the recorded laps. Planned totals are
compared with actual totals, deviations are turned into component scores,
and the component scores are blended with more weight on the quantity the
plan is mostly written in (distance or time).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from workout_match.workouts.labels import base_label, match_category
from workout_match.workouts.targets import estimate_step_quantities
from workout_match.workouts.types import (
    ActivityTotals,
    BlockComparison,
    FlatStep,
    MatchedLap,
    MatchQuality,
    NoMatch,
    ObjectiveType,
    RecordedLap,
    TargetPaceRange,
)

if TYPE_CHECKING:
    from workout_match.config.settings import Settings

# Points lost per percent of deviation
DEFAULT_SENSITIVITY = 2.0
# Weight of the objective metric; the other metric gets the remainder
DEFAULT_OBJECTIVE_WEIGHT = 0.7


@dataclass(frozen=True)
class ScoringParams:
    """Tunable scoring constants."""

    sensitivity: float = DEFAULT_SENSITIVITY
    objective_weight: float = DEFAULT_OBJECTIVE_WEIGHT
    fallback_pace_seconds_per_km: float | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ScoringParams:
        return cls(
            sensitivity=settings.score_sensitivity,
            objective_weight=settings.objective_weight,
            fallback_pace_seconds_per_km=settings.fallback_pace_seconds_per_km,
        )


@dataclass(frozen=True)
class PlannedTotals:
    """Planned totals of a flattened plan."""

    distance_meters: float
    duration_seconds: float


def planned_totals(
    flat_steps: Sequence[FlatStep],
    fallback_pace_seconds_per_km: float | None = None,
) -> PlannedTotals:
    """Sum planned distance and duration over all flat steps.

    Each step contributes its own quantity plus the other one estimated
    from its pace target midpoint (or the fallback pace, if set).

    Args:
        flat_steps: Flattened plan
        fallback_pace_seconds_per_km: Pace for steps without a pace target

    Returns:
        PlannedTotals with distance in meters and duration in seconds
    """
    distance = 0.0
    duration = 0.0
    for step in flat_steps:
        step_distance, step_duration = estimate_step_quantities(step, fallback_pace_seconds_per_km)
        distance += step_distance
        duration += step_duration
    return PlannedTotals(distance_meters=distance, duration_seconds=duration)


def actual_totals(laps: Sequence[RecordedLap]) -> ActivityTotals:
    """Sum distance and moving time over all recorded laps."""
    return ActivityTotals(
        distance_meters=sum(lap.distance_meters for lap in laps),
        moving_time_seconds=sum(lap.moving_time_seconds for lap in laps),
    )


def objective_type(flat_steps: Sequence[FlatStep]) -> ObjectiveType:
    """Distance when distance-typed steps are a strict majority, else time."""
    distance_count = sum(1 for step in flat_steps if step.duration_kind == "distance")
    return "distance" if distance_count * 2 > len(flat_steps) else "time"


def percent_diff(actual: float, planned: float | None) -> float | None:
    """Signed deviation of actual from planned, in percent of planned.

    Returns:
        Percentage difference, or None when planned is missing or not positive
    """
    if planned is None or planned <= 0:
        return None
    return ((actual - planned) / planned) * 100.0


def component_score(diff: float, sensitivity: float = DEFAULT_SENSITIVITY) -> float:
    """Score in [0, 100] for one metric's percentage deviation."""
    return max(0.0, 100.0 - sensitivity * abs(diff))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _overall_score(
    objective: ObjectiveType,
    distance_diff: float | None,
    duration_diff: float | None,
    params: ScoringParams,
) -> int:
    if objective == "distance":
        objective_diff, other_diff = distance_diff, duration_diff
    else:
        objective_diff, other_diff = duration_diff, distance_diff

    if objective_diff is not None and other_diff is not None:
        weighted = params.objective_weight * component_score(objective_diff, params.sensitivity) + (
            1.0 - params.objective_weight
        ) * component_score(other_diff, params.sensitivity)
    elif objective_diff is not None:
        weighted = component_score(objective_diff, params.sensitivity)
    elif other_diff is not None:
        weighted = component_score(other_diff, params.sensitivity)
    else:
        weighted = 0.0

    return min(100, max(0, _round_half_up(weighted)))


def block_comparison(
    flat_steps: Sequence[FlatStep],
    matched_laps: Sequence[MatchedLap],
    laps: Sequence[RecordedLap],
    fallback_pace_seconds_per_km: float | None = None,
) -> list[BlockComparison]:
    """Planned vs actual per source plan step.

    Flat steps are grouped by source step id (repetitions collapse into one
    entry), in order of first appearance. matched_laps pairs with laps by
    position; a lap's distance and moving time count towards the block its
    matched flat step belongs to.

    Args:
        flat_steps: Flattened plan
        matched_laps: Output of align() for the same laps
        laps: Recorded laps, in the order passed to align()
        fallback_pace_seconds_per_km: Pace for steps without a pace target

    Returns:
        One BlockComparison per source plan step

    Raises:
        ValueError: If matched_laps and laps differ in length
    """
    blocks: dict[str, list[FlatStep]] = {}
    for step in flat_steps:
        blocks.setdefault(step.source_step_id, []).append(step)

    block_of_index = {step.sequence_index: step.source_step_id for step in flat_steps}

    actual_distance: dict[str, float] = dict.fromkeys(blocks, 0.0)
    actual_duration: dict[str, float] = dict.fromkeys(blocks, 0.0)
    for matched, lap in zip(matched_laps, laps, strict=True):
        if matched.flat_step_index is None:
            continue
        source_step_id = block_of_index.get(matched.flat_step_index)
        if source_step_id is None:
            continue
        actual_distance[source_step_id] += lap.distance_meters
        actual_duration[source_step_id] += lap.moving_time_seconds

    comparisons: list[BlockComparison] = []
    for source_step_id, steps in blocks.items():
        first = steps[0]
        planned_distance = 0.0
        planned_duration = 0.0
        for step in steps:
            step_distance, step_duration = estimate_step_quantities(step, fallback_pace_seconds_per_km)
            planned_distance += step_distance
            planned_duration += step_duration

        pace_range = None
        if first.target.type == "pace":
            pace_range = TargetPaceRange(min=first.target.min, max=first.target.max)

        comparisons.append(
            BlockComparison(
                source_step_id=source_step_id,
                label=base_label(first),
                type=first.type,
                repetitions=len(steps),
                planned_distance_meters=planned_distance or None,
                planned_duration_seconds=planned_duration or None,
                target_pace_range=pace_range,
                actual_distance_meters=actual_distance[source_step_id],
                actual_duration_seconds=actual_duration[source_step_id],
            )
        )

    return comparisons


def score(
    flat_steps: Sequence[FlatStep],
    matched_laps: Sequence[MatchedLap],
    laps: Sequence[RecordedLap],
    *,
    totals: ActivityTotals | None = None,
    params: ScoringParams | None = None,
) -> MatchQuality | NoMatch:
    """Score how well an activity executed a plan.

    Args:
        flat_steps: Flattened plan
        matched_laps: Output of align() for the same laps
        laps: All recorded laps of the activity
        totals: Activity totals; when given they replace the lap sums
        params: Scoring constants (defaults when None)

    Returns:
        MatchQuality, or NoMatch when the plan has neither planned distance
        nor planned duration
    """
    params = params or ScoringParams()

    planned = planned_totals(flat_steps, params.fallback_pace_seconds_per_km)
    if planned.distance_meters <= 0 and planned.duration_seconds <= 0:
        logger.debug(f"Plan of {len(flat_steps)} steps has no planned distance or duration, nothing to compare")
        return NoMatch()

    actual = totals if totals is not None else actual_totals(laps)
    objective = objective_type(flat_steps)

    distance_diff = percent_diff(actual.distance_meters, planned.distance_meters)
    duration_diff = percent_diff(actual.moving_time_seconds, planned.duration_seconds)
    overall = _overall_score(objective, distance_diff, duration_diff, params)

    logger.info(
        f"Match scored: overall={overall} objective={objective} "
        f"distance_diff={distance_diff} duration_diff={duration_diff} laps={len(laps)}"
    )

    return MatchQuality(
        overall_score=overall,
        category=match_category(overall),
        objective_type=objective,
        planned_distance_meters=planned.distance_meters,
        actual_distance_meters=actual.distance_meters,
        distance_percent_diff=distance_diff,
        planned_duration_seconds=planned.duration_seconds,
        actual_duration_seconds=actual.moving_time_seconds,
        duration_percent_diff=duration_diff,
        block_comparison=block_comparison(
            flat_steps,
            matched_laps,
            laps,
            params.fallback_pace_seconds_per_km,
        ),
    )
