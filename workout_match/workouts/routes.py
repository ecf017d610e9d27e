"""Workout matching API routes.

Stateless endpoints: every request carries the plan and the recorded laps,
nothing is read from or written to storage.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from workout_match.config.settings import settings
from workout_match.workouts.align import align
from workout_match.workouts.builder_blocks import plan_from_builder_blocks
from workout_match.workouts.errors import PlanFormatError
from workout_match.workouts.flatten import flatten
from workout_match.workouts.schemas import (
    FlattenRequest,
    FlattenResponse,
    MatchRequest,
    MatchResponse,
    PlanRequest,
)
from workout_match.workouts.scoring import ScoringParams, planned_totals, score
from workout_match.workouts.types import PlanEntry

router = APIRouter(prefix="/workouts", tags=["workouts"])


def get_scoring_params() -> ScoringParams:
    """Scoring constants from application settings."""
    return ScoringParams.from_settings(settings)


def resolve_plan(request: PlanRequest) -> list[PlanEntry]:
    """Get plan entries from a request, converting builder blocks if needed.

    Raises:
        HTTPException: 400 if the builder blocks are malformed
    """
    if request.plan is not None:
        return request.plan

    try:
        return plan_from_builder_blocks(request.blocks)
    except PlanFormatError as e:
        logger.warning(f"Rejected builder blocks: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": e.code, "details": e.details},
        ) from e


@router.post("/flatten", response_model=FlattenResponse)
def flatten_plan(
    request: FlattenRequest,
    params: ScoringParams = Depends(get_scoring_params),
) -> FlattenResponse:
    """Flatten a plan and estimate its total distance and duration."""
    flat_steps = flatten(resolve_plan(request))
    totals = planned_totals(flat_steps, params.fallback_pace_seconds_per_km)

    return FlattenResponse(
        flat_steps=flat_steps,
        planned_distance_meters=totals.distance_meters,
        planned_duration_seconds=totals.duration_seconds,
    )


@router.post("/match", response_model=MatchResponse)
def match_activity(
    request: MatchRequest,
    params: ScoringParams = Depends(get_scoring_params),
) -> MatchResponse:
    """Align an activity's laps with a plan and score the execution."""
    flat_steps = flatten(resolve_plan(request))
    matched_laps = align(request.laps, flat_steps)
    result = score(flat_steps, matched_laps, request.laps, totals=request.totals, params=params)

    logger.info(f"Match request: steps={len(flat_steps)} laps={len(request.laps)} matched={result.matched}")

    return MatchResponse(flat_steps=flat_steps, matched_laps=matched_laps, match=result)
