"""Developer CLI for workout matching.

Runs the same flatten → align → score path as the API against local JSON
files, and can serve the API locally.
"""

import json
from pathlib import Path
from typing import Any

import typer
import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.json import JSON
from rich.table import Table

from workout_match.config.settings import settings
from workout_match.core.logger import CLI_LEVEL, setup_logger_from_settings
from workout_match.workouts.align import align
from workout_match.workouts.builder_blocks import plan_from_builder_blocks
from workout_match.workouts.errors import PlanFormatError
from workout_match.workouts.flatten import flatten
from workout_match.workouts.formatting import format_difference, format_distance, format_duration, format_pace
from workout_match.workouts.labels import step_display_label
from workout_match.workouts.scoring import ScoringParams, planned_totals, score
from workout_match.workouts.types import (
    ActivityTotals,
    FlatStep,
    MatchQuality,
    PlanEntry,
    RecordedLap,
    laps_adapter,
    plan_adapter,
)

console = Console()

app = typer.Typer(
    name="workout-match",
    help="Flatten workout plans and score recorded activities against them",
    add_completion=False,
)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _setup_logging(debug: bool = False) -> None:
    """Log to stderr (and LOG_FILE if set); DEBUG level when requested."""
    setup_logger_from_settings(settings, level="DEBUG" if debug else CLI_LEVEL)


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _load_plan(path: Path, builder: bool) -> list[PlanEntry]:
    data = _read_json(path)
    if builder:
        return plan_from_builder_blocks(data)
    return plan_adapter.validate_python(data)


def _load_activity(path: Path) -> tuple[list[RecordedLap], ActivityTotals | None]:
    """Laps file: either a list of laps or {"laps": [...], "totals": {...}}."""
    data = _read_json(path)
    if isinstance(data, dict):
        totals = data.get("totals")
        return (
            laps_adapter.validate_python(data.get("laps", [])),
            ActivityTotals.model_validate(totals) if totals else None,
        )
    return laps_adapter.validate_python(data), None


def _quantity(step: FlatStep) -> str:
    if step.planned_distance_meters:
        return format_distance(step.planned_distance_meters)
    if step.planned_duration_seconds:
        return format_duration(step.planned_duration_seconds)
    return "-"


def _target(step: FlatStep) -> str:
    target = step.target
    if target.type == "none":
        return "-"
    if target.type == "pace":
        return f"{format_pace(target.min)} - {format_pace(target.max)}"
    return f"{target.type} {target.min}-{target.max}"


def _print_steps(flat_steps: list[FlatStep]) -> None:
    table = Table(title="Flat steps")
    table.add_column("#", justify="right")
    table.add_column("Step")
    table.add_column("Type")
    table.add_column("Planned")
    table.add_column("Target")
    for step in flat_steps:
        table.add_row(
            str(step.sequence_index),
            step_display_label(step),
            step.type,
            _quantity(step),
            _target(step),
        )
    console.print(table)


def _print_match(result: MatchQuality) -> None:
    table = Table(title="Blocks")
    table.add_column("Block")
    table.add_column("Reps", justify="right")
    table.add_column("Planned distance")
    table.add_column("Actual distance")
    table.add_column("Planned time")
    table.add_column("Actual time")
    for block in result.block_comparison:
        table.add_row(
            block.label,
            str(block.repetitions),
            format_distance(block.planned_distance_meters) if block.planned_distance_meters else "-",
            format_distance(block.actual_distance_meters),
            format_duration(block.planned_duration_seconds) if block.planned_duration_seconds else "-",
            format_duration(block.actual_duration_seconds),
        )
    console.print(table)

    console.print(
        f"Distance: {format_distance(result.actual_distance_meters)} of "
        f"{format_distance(result.planned_distance_meters)} ({format_difference(result.distance_percent_diff)})"
    )
    console.print(
        f"Duration: {format_duration(result.actual_duration_seconds)} of "
        f"{format_duration(result.planned_duration_seconds)} ({format_difference(result.duration_percent_diff)})"
    )
    console.print(f"Score: {result.overall_score} ({result.category}), objective: {result.objective_type}")


@app.command(name="flatten")
def flatten_command(
    plan_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Plan JSON file"),
    builder: bool = typer.Option(False, "--builder", help="Plan file holds builder blocks"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of tables"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Flatten a plan and show its execution sequence."""
    _setup_logging(debug)
    try:
        flat_steps = flatten(_load_plan(plan_file, builder))
    except (PlanFormatError, ValidationError, ValueError) as e:
        console.print(f"[red]Invalid plan:[/red] {e}")
        raise typer.Exit(code=1) from e

    totals = planned_totals(flat_steps, settings.fallback_pace_seconds_per_km)
    if as_json:
        payload = {
            "flatSteps": [step.model_dump(mode="json", by_alias=True) for step in flat_steps],
            "plannedDistanceMeters": totals.distance_meters,
            "plannedDurationSeconds": totals.duration_seconds,
        }
        console.print(JSON(json.dumps(payload)))
        return

    _print_steps(flat_steps)
    console.print(
        f"Planned: {format_distance(totals.distance_meters)}, {format_duration(totals.duration_seconds)}"
    )


@app.command(name="match")
def match_command(
    plan_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Plan JSON file"),
    laps_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Laps JSON file"),
    builder: bool = typer.Option(False, "--builder", help="Plan file holds builder blocks"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of tables"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Score a recorded activity against a plan."""
    _setup_logging(debug)
    try:
        flat_steps = flatten(_load_plan(plan_file, builder))
        laps, totals = _load_activity(laps_file)
    except (PlanFormatError, ValidationError, ValueError) as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        raise typer.Exit(code=1) from e

    matched_laps = align(laps, flat_steps)
    result = score(
        flat_steps,
        matched_laps,
        laps,
        totals=totals,
        params=ScoringParams.from_settings(settings),
    )

    if as_json:
        payload = {
            "matchedLaps": [lap.model_dump(mode="json", by_alias=True) for lap in matched_laps],
            "match": result.model_dump(mode="json", by_alias=True),
        }
        console.print(JSON(json.dumps(payload)))
        return

    table = Table(title="Laps")
    table.add_column("Lap", justify="right")
    table.add_column("Step")
    table.add_column("Distance")
    table.add_column("Moving time")
    for lap, matched in zip(laps, matched_laps):
        table.add_row(
            str(lap.lap_index),
            matched.step_label,
            format_distance(lap.distance_meters),
            format_duration(lap.moving_time_seconds),
        )
    console.print(table)

    if not isinstance(result, MatchQuality):
        console.print("[yellow]Nothing to compare: the plan has no planned distance or duration[/yellow]")
        return
    _print_match(result)


@app.command(name="serve")
def serve_command(
    host: str = typer.Option(DEFAULT_HOST, "--host", help="Bind address"),
    port: int = typer.Option(DEFAULT_PORT, "--port", help="Bind port"),
) -> None:
    """Serve the matching API."""
    uvicorn.run("workout_match.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
