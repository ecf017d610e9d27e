"""Workout plan, lap, and match result models.

Plan entries are authored by a coach (standalone steps and repeat groups).
Flat steps, matched laps and match quality are derived per request and never
persisted. JSON uses camelCase keys; snake_case is accepted on input too.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from workout_match.workouts.targets import parse_pace

StepType = Literal["warmup", "active", "recovery", "cooldown", "other"]
ObjectiveType = Literal["distance", "time"]


class EngineModel(BaseModel):
    """Base model: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Duration
# ---------------------------------------------------------------------------


class DistanceDuration(EngineModel):
    """Step ends after a distance (meters)."""

    kind: Literal["distance"] = "distance"
    value: float | None = None


class TimeDuration(EngineModel):
    """Step ends after a time (seconds)."""

    kind: Literal["time"] = "time"
    value: float | None = None


Duration = Annotated[DistanceDuration | TimeDuration, Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Target
# ---------------------------------------------------------------------------


class PaceTarget(EngineModel):
    """Pace range in seconds per kilometre (min is the faster bound)."""

    type: Literal["pace"] = "pace"
    min: float
    max: float

    @field_validator("min", "max", mode="before")
    @classmethod
    def parse_pace_bounds(cls, value: str | float) -> float:
        return parse_pace(value)


class HeartRateTarget(EngineModel):
    type: Literal["heart_rate"] = "heart_rate"
    min: float
    max: float


class HrZoneTarget(EngineModel):
    type: Literal["hr_zone"] = "hr_zone"
    min: int
    max: int


class VamZoneTarget(EngineModel):
    type: Literal["vam_zone"] = "vam_zone"
    min: int
    max: int


class PowerTarget(EngineModel):
    type: Literal["power"] = "power"
    min: float
    max: float


class NoTarget(EngineModel):
    type: Literal["none"] = "none"


Target = Annotated[
    PaceTarget | HeartRateTarget | HrZoneTarget | VamZoneTarget | PowerTarget | NoTarget,
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


class WorkoutStep(EngineModel):
    """Atomic plan node."""

    id: str
    type: StepType
    label: str | None = None
    duration: Duration
    target: Target = Field(default_factory=NoTarget)
    intensity: float | None = Field(default=None, ge=0, le=100)


class RepeatGroup(EngineModel):
    """Steps performed `reps` times consecutively."""

    group_id: str
    reps: int
    members: list[WorkoutStep]


PlanEntry = RepeatGroup | WorkoutStep

plan_adapter: TypeAdapter[list[PlanEntry]] = TypeAdapter(list[PlanEntry])


class FlatStep(EngineModel):
    """One fully unrolled execution unit with provenance back to the plan."""

    sequence_index: int
    source_step_id: str
    source_group_id: str | None = None
    repetition_index: int = 0
    total_repetitions: int = 1
    type: StepType
    label: str | None = None
    duration_kind: ObjectiveType | None = None
    planned_distance_meters: float | None = None
    planned_duration_seconds: float | None = None
    target: Target = Field(default_factory=NoTarget)


# ---------------------------------------------------------------------------
# Activity
# ---------------------------------------------------------------------------


class RecordedLap(EngineModel):
    """One recorded lap of a completed activity."""

    lap_index: int
    distance_meters: float = 0.0
    moving_time_seconds: float = 0.0
    elapsed_time_seconds: float = 0.0
    average_speed_mps: float = 0.0
    average_heartrate: float | None = None
    average_cadence: float | None = None


class ActivityTotals(EngineModel):
    """Aggregate totals reported by the activity source."""

    distance_meters: float = 0.0
    moving_time_seconds: float = 0.0


laps_adapter: TypeAdapter[list[RecordedLap]] = TypeAdapter(list[RecordedLap])


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class MatchedLap(EngineModel):
    lap_index: int
    flat_step_index: int | None
    step_type: StepType
    step_label: str


class TargetPaceRange(EngineModel):
    min: float
    max: float


class BlockComparison(EngineModel):
    """Planned vs actual for one source plan step, all repetitions combined."""

    source_step_id: str
    label: str
    type: StepType
    repetitions: int
    planned_distance_meters: float | None = None
    planned_duration_seconds: float | None = None
    target_pace_range: TargetPaceRange | None = None
    actual_distance_meters: float = 0.0
    actual_duration_seconds: float = 0.0


class MatchQuality(EngineModel):
    matched: Literal[True] = True
    overall_score: int = Field(ge=0, le=100)
    category: str
    objective_type: ObjectiveType
    planned_distance_meters: float
    actual_distance_meters: float
    distance_percent_diff: float | None
    planned_duration_seconds: float
    actual_duration_seconds: float
    duration_percent_diff: float | None
    block_comparison: list[BlockComparison]


class NoMatch(EngineModel):
    """Nothing to compare: the plan has no planned distance or duration."""

    matched: Literal[False] = False


MatchResult = MatchQuality | NoMatch
