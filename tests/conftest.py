"""Root conftest for all tests.

Shared plan and lap fixtures. The reference plan is
warmup(600s), 3x [interval(1000m), recovery(120s)], cooldown(600s).
"""

import pytest

from workout_match.workouts.types import (
    DistanceDuration,
    PlanEntry,
    RecordedLap,
    RepeatGroup,
    TimeDuration,
    WorkoutStep,
)


def _make_lap(lap_index: int, distance_meters: float = 1000.0, moving_time_seconds: float = 300.0) -> RecordedLap:
    return RecordedLap(
        lap_index=lap_index,
        distance_meters=distance_meters,
        moving_time_seconds=moving_time_seconds,
        elapsed_time_seconds=moving_time_seconds,
        average_speed_mps=distance_meters / moving_time_seconds if moving_time_seconds else 0.0,
    )


@pytest.fixture
def make_lap():
    """Factory for a lap with consistent elapsed time and speed."""
    return _make_lap


@pytest.fixture
def make_laps():
    """Factory for `count` identical 1 km laps, lap_index starting at 1."""

    def _make_laps(count: int) -> list[RecordedLap]:
        return [_make_lap(i + 1) for i in range(count)]

    return _make_laps


@pytest.fixture
def interval_plan() -> list[PlanEntry]:
    """Warmup, 3x (1000m interval + 120s recovery), cooldown."""
    return [
        WorkoutStep(id="wu", type="warmup", duration=TimeDuration(value=600)),
        RepeatGroup(
            group_id="main",
            reps=3,
            members=[
                WorkoutStep(
                    id="int",
                    type="active",
                    duration=DistanceDuration(value=1000),
                    target={"type": "pace", "min": "3:50", "max": "4:10"},
                ),
                WorkoutStep(id="rec", type="recovery", duration=TimeDuration(value=120)),
            ],
        ),
        WorkoutStep(id="cd", type="cooldown", duration=TimeDuration(value=600)),
    ]
