"""Conversion from the plan builder's block list to plan entries.

The builder stores a workout as a flat list of blocks. Blocks belonging to a
repeat group carry `group: {id, reps}`; the group is emitted where its first
block appears and collects every block with the same group id.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import ValidationError

from workout_match.workouts.errors import PlanFormatError
from workout_match.workouts.types import PlanEntry, RepeatGroup, WorkoutStep

BLOCK_TYPE_MAP: dict[str, str] = {
    "warmup": "warmup",
    "interval": "active",
    "active": "active",
    "recovery": "recovery",
    "cooldown": "cooldown",
}

# Builder target types with an engine counterpart; everything else has no target
TARGET_TYPES = {"pace", "heart_rate", "hr_zone", "vam_zone", "power"}


def _convert_target(block_id: str, target: Any) -> dict[str, Any]:
    if not isinstance(target, dict):
        return {"type": "none"}

    target_type = target.get("type")
    if target_type not in TARGET_TYPES:
        return {"type": "none"}

    target_min = target.get("min")
    target_max = target.get("max")
    if target_min in (None, "") or target_max in (None, ""):
        logger.warning(f"Block {block_id} has a {target_type} target without bounds, ignoring target")
        return {"type": "none"}

    return {"type": target_type, "min": target_min, "max": target_max}


def _convert_block(block: dict[str, Any]) -> WorkoutStep:
    block_id = str(block["id"])
    duration = block.get("duration") or {}

    intensity = block.get("intensity")
    if intensity is None and block.get("rpe") is not None:
        intensity = float(block["rpe"]) * 10

    return WorkoutStep(
        id=block_id,
        type=BLOCK_TYPE_MAP.get(block.get("type", ""), "other"),
        label=block.get("stepName") or None,
        duration={"kind": duration.get("type"), "value": duration.get("value")},
        target=_convert_target(block_id, block.get("target")),
        intensity=intensity,
    )


def _group_id(block: dict[str, Any]) -> str | None:
    group = block.get("group")
    if not group:
        return None
    return str(group["id"])


def _check_block(position: int, block: Any) -> list[str]:
    if not isinstance(block, dict):
        return [f"block {position}: expected an object"]

    errors: list[str] = []
    if not block.get("id"):
        errors.append(f"block {position}: missing id")

    duration = block.get("duration")
    if not isinstance(duration, dict) or duration.get("type") not in {"distance", "time"}:
        errors.append(f"block {position}: duration.type must be 'distance' or 'time'")

    group = block.get("group")
    if group is not None and (not isinstance(group, dict) or not group.get("id")):
        errors.append(f"block {position}: group must have an id")
    return errors


def plan_from_builder_blocks(blocks: Any) -> list[PlanEntry]:
    """Convert builder blocks into plan entries.

    Args:
        blocks: Builder block list (parsed JSON)

    Returns:
        Plan entries in builder order

    Raises:
        PlanFormatError: If the payload or any block is malformed
    """
    if not isinstance(blocks, list):
        raise PlanFormatError("INVALID_BLOCKS", ["expected a list of blocks"])

    errors: list[str] = []
    for position, block in enumerate(blocks):
        errors.extend(_check_block(position, block))
    if errors:
        raise PlanFormatError("INVALID_BLOCK", errors)

    plan: list[PlanEntry] = []
    emitted_groups: set[str] = set()

    try:
        for block in blocks:
            group_id = _group_id(block)
            if group_id is None:
                plan.append(_convert_block(block))
                continue

            if group_id in emitted_groups:
                continue
            emitted_groups.add(group_id)

            members = [_convert_block(b) for b in blocks if _group_id(b) == group_id]
            plan.append(
                RepeatGroup(
                    group_id=group_id,
                    reps=int(block["group"].get("reps") or 1),
                    members=members,
                )
            )
    except (ValidationError, ValueError, TypeError) as e:
        raise PlanFormatError("INVALID_BLOCK", [str(e)]) from e

    logger.debug(f"Converted {len(blocks)} builder blocks into {len(plan)} plan entries")
    return plan
