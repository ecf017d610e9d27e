"""Helpers for step targets.

Pace targets are expressed in seconds per kilometre. The builder stores
them as "m:ss" strings, so both forms are accepted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from workout_match.workouts.types import FlatStep, Target


def parse_pace(value: str | float | int) -> float:
    """Parse a pace value into seconds per kilometre.

    Args:
        value: Seconds per km as a number, or a "m:ss" string (e.g. "4:30")

    Returns:
        Pace in seconds per kilometre

    Raises:
        ValueError: If the value cannot be read as a pace
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid pace: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    text = value.strip()
    if ":" not in text:
        try:
            return float(text)
        except ValueError as e:
            raise ValueError(f"Invalid pace: {value!r}") from e

    parts = text.split(":")
    if len(parts) != 2 or not parts[0].isdigit() or not parts[1].isdigit():
        raise ValueError(f"Invalid pace: {value!r}. Expected 'm:ss'")

    minutes = int(parts[0])
    seconds = int(parts[1])
    if seconds >= 60:
        raise ValueError(f"Invalid pace: {value!r}. Seconds must be below 60")
    return float(minutes * 60 + seconds)


def pace_midpoint_seconds_per_meter(target: Target) -> float | None:
    """Midpoint of a pace target range, in seconds per meter.

    Returns:
        Midpoint pace, or None for non-pace targets and degenerate ranges
    """
    if target.type != "pace":
        return None

    midpoint_per_km = (target.min + target.max) / 2.0
    if midpoint_per_km <= 0:
        return None
    return midpoint_per_km / 1000.0


def estimate_step_quantities(
    step: FlatStep,
    fallback_pace_seconds_per_km: float | None = None,
) -> tuple[float, float]:
    """Planned distance and duration of one flat step, estimating the missing one.

    Distance steps get a duration from the pace midpoint, time steps get a
    distance from it. Without a pace target the fallback pace is used when
    configured; otherwise the missing quantity is 0.

    Args:
        step: Flat step to measure
        fallback_pace_seconds_per_km: Pace used when the step has no pace target

    Returns:
        Tuple of (distance_meters, duration_seconds); (0, 0) if the step has
        no positive planned quantity
    """
    pace = pace_midpoint_seconds_per_meter(step.target)
    if pace is None and fallback_pace_seconds_per_km:
        pace = fallback_pace_seconds_per_km / 1000.0

    if step.planned_distance_meters:
        distance = step.planned_distance_meters
        duration = distance * pace if pace else 0.0
        return distance, duration

    if step.planned_duration_seconds:
        duration = step.planned_duration_seconds
        distance = duration / pace if pace else 0.0
        return distance, duration

    return 0.0, 0.0
