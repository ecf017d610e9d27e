"""Workout matching API schemas (Pydantic).

A plan is sent either as engine plan entries (`plan`) or as the builder's
raw block list (`blocks`), never both.
"""

from __future__ import annotations

from typing import Any

from pydantic import model_validator

from workout_match.workouts.types import (
    ActivityTotals,
    EngineModel,
    FlatStep,
    MatchedLap,
    MatchQuality,
    NoMatch,
    PlanEntry,
    RecordedLap,
)


class PlanRequest(EngineModel):
    """Request carrying a workout plan."""

    plan: list[PlanEntry] | None = None
    blocks: list[Any] | None = None

    @model_validator(mode="after")
    def check_plan_source(self) -> PlanRequest:
        if (self.plan is None) == (self.blocks is None):
            raise ValueError("Provide exactly one of 'plan' or 'blocks'")
        return self


class FlattenRequest(PlanRequest):
    """Flatten request."""


class FlattenResponse(EngineModel):
    """Flattened plan with its estimated totals."""

    flat_steps: list[FlatStep]
    planned_distance_meters: float
    planned_duration_seconds: float


class MatchRequest(PlanRequest):
    """Plan plus the recorded activity to compare against it."""

    laps: list[RecordedLap]
    totals: ActivityTotals | None = None


class MatchResponse(EngineModel):
    """Lap annotations and match quality for one plan/activity pair."""

    flat_steps: list[FlatStep]
    matched_laps: list[MatchedLap]
    match: MatchQuality | NoMatch
