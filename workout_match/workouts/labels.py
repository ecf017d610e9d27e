"""Human-readable labels for flat steps and match scores."""

from __future__ import annotations

from workout_match.workouts.types import FlatStep

STEP_TYPE_NAMES: dict[str, str] = {
    "warmup": "Warmup",
    "active": "Interval",
    "recovery": "Recovery",
    "cooldown": "Cooldown",
    "other": "Step",
}

# Lap label when the plan has no steps to match against
UNMATCHED_LABEL = "Unmatched"

# (minimum score, category), highest first
SCORE_CATEGORIES: tuple[tuple[int, str], ...] = (
    (85, "Excellent"),
    (70, "Good"),
    (50, "Fair"),
)


def base_label(step: FlatStep) -> str:
    """Step label without repetition context."""
    if step.label:
        return step.label
    return STEP_TYPE_NAMES.get(step.type, "Step")


def step_display_label(step: FlatStep) -> str:
    """Label shown next to a lap, e.g. "Interval 2/6".

    Intervals and recoveries inside a repeat group get a 1-based
    repetition counter so consecutive laps can be told apart.
    """
    label = base_label(step)
    if step.source_group_id and step.total_repetitions > 1 and step.type in {"active", "recovery"}:
        label = f"{label} {step.repetition_index + 1}/{step.total_repetitions}"
    return label


def match_category(score: int) -> str:
    """Category label for an overall match score."""
    for threshold, category in SCORE_CATEGORIES:
        if score >= threshold:
            return category
    return "Poor"
