"""Tests for plan vs actual scoring.

Tests cover:
- Percent differences and the component score curve
- Objective weighting (distance vs time)
- Missing planned data (nothing to compare)
- Planned totals with pace-based estimation
- Block comparison per source plan step
"""

import pytest

from workout_match.workouts.align import align
from workout_match.workouts.flatten import flatten
from workout_match.workouts.labels import match_category
from workout_match.workouts.scoring import (
    block_comparison,
    ScoringParams,
    component_score,
    objective_type,
    percent_diff,
    planned_totals,
    score,
)
from workout_match.workouts.types import (
    ActivityTotals,
    DistanceDuration,
    MatchQuality,
    NoMatch,
    TimeDuration,
    WorkoutStep,
)


@pytest.fixture
def ten_k_plan():
    """10 km at 5:30-6:30/km, i.e. 10000 m and 3600 s planned."""
    return [
        WorkoutStep(
            id="run",
            type="active",
            duration=DistanceDuration(value=10000),
            target={"type": "pace", "min": 330, "max": 390},
        )
    ]


def _score(plan, laps, **kwargs):
    flat_steps = flatten(plan)
    return score(flat_steps, align(laps, flat_steps), laps, **kwargs)


class TestPercentDiff:
    """Percent difference and component score."""

    def test_equal_values(self):
        """Test that executing exactly as planned gives 0% and a full score."""
        diff = percent_diff(3600, 3600)

        assert diff == 0
        assert component_score(diff) == 100

    def test_signed_difference(self):
        """Test shorter is negative, longer is positive."""
        assert percent_diff(9500, 10000) == pytest.approx(-5.0)
        assert percent_diff(3700, 3600) == pytest.approx(2.7778, abs=1e-4)

    @pytest.mark.parametrize("planned", [0, -10, None])
    def test_no_planned_value(self, planned):
        """Test that nothing planned gives no difference."""
        assert percent_diff(100, planned) is None

    @pytest.mark.parametrize(
        ("diff", "expected"),
        [
            (10, 80),
            (-10, 80),
            (50, 0),
            (-120, 0),
        ],
    )
    def test_component_score_curve(self, diff, expected):
        """Test 2 points lost per percent, floored at 0."""
        assert component_score(diff) == expected


class TestScore:
    """End-to-end scoring."""

    def test_distance_objective_example(self, ten_k_plan, make_lap):
        """Test 9.5 km in 3700 s against 10 km / 3600 s scores 91."""
        laps = [make_lap(1, 5000, 1800), make_lap(2, 4500, 1900)]

        result = _score(ten_k_plan, laps)

        assert isinstance(result, MatchQuality)
        assert result.objective_type == "distance"
        assert result.planned_distance_meters == pytest.approx(10000)
        assert result.planned_duration_seconds == pytest.approx(3600)
        assert result.actual_distance_meters == 9500
        assert result.actual_duration_seconds == 3700
        assert result.distance_percent_diff == pytest.approx(-5.0)
        assert result.duration_percent_diff == pytest.approx(2.78, abs=0.01)
        assert result.overall_score == 91
        assert result.category == "Excellent"

    def test_nothing_planned(self, make_laps):
        """Test that a plan without planned quantities cannot be matched."""
        plan = [
            WorkoutStep(id="a", type="active", duration=DistanceDuration(value=0)),
            WorkoutStep(id="b", type="recovery", duration=TimeDuration(value=None)),
        ]

        result = _score(plan, make_laps(2))

        assert isinstance(result, NoMatch)
        assert result.model_dump(by_alias=True) == {"matched": False}

    def test_empty_plan(self, make_laps):
        """Test that an empty plan cannot be matched."""
        assert isinstance(_score([], make_laps(3)), NoMatch)

    def test_no_laps_scores_zero(self, ten_k_plan):
        """Test that an activity without laps is scored, not rejected."""
        result = _score(ten_k_plan, [])

        assert isinstance(result, MatchQuality)
        assert result.actual_distance_meters == 0
        assert result.overall_score == 0
        assert result.category == "Poor"

    def test_time_objective_with_single_metric(self, make_lap):
        """Test that a time-only plan scores on duration at full weight."""
        plan = [WorkoutStep(id="easy", type="active", duration=TimeDuration(value=3600))]

        result = _score(plan, [make_lap(1, 11000, 3960)])

        assert result.objective_type == "time"
        assert result.distance_percent_diff is None
        assert result.duration_percent_diff == pytest.approx(10.0)
        assert result.overall_score == 80
        assert result.category == "Good"

    def test_perfect_execution(self, ten_k_plan, make_lap):
        """Test that matching the plan exactly scores 100."""
        result = _score(ten_k_plan, [make_lap(1, 10000, 3600)])

        assert result.overall_score == 100

    @pytest.mark.parametrize(
        ("distance", "seconds"),
        [
            (0, 0),
            (100000, 100000),
            (1, 99999),
            (9999, 3601),
        ],
    )
    def test_score_bounds(self, ten_k_plan, make_lap, distance, seconds):
        """Test that the overall score stays within [0, 100]."""
        result = _score(ten_k_plan, [make_lap(1, distance, seconds)])

        assert 0 <= result.overall_score <= 100

    def test_totals_replace_lap_sums(self, ten_k_plan, make_lap):
        """Test that activity totals, when given, are used as actuals."""
        laps = [make_lap(1, 1000, 360)]

        result = _score(
            ten_k_plan,
            laps,
            totals=ActivityTotals(distance_meters=10000, moving_time_seconds=3600),
        )

        assert result.actual_distance_meters == 10000
        assert result.overall_score == 100

    def test_sensitivity_param(self, ten_k_plan, make_lap):
        """Test that a softer sensitivity raises the score."""
        laps = [make_lap(1, 9000, 3600)]

        default = _score(ten_k_plan, laps)
        softer = _score(ten_k_plan, laps, params=ScoringParams(sensitivity=1.0))

        # distance -10% -> 80, duration 0% -> 100
        assert default.overall_score == 86
        assert softer.overall_score == 93

    def test_objective_weight_param(self, ten_k_plan, make_lap):
        """Test that full objective weight ignores the other metric."""
        laps = [make_lap(1, 10000, 1800)]

        result = _score(ten_k_plan, laps, params=ScoringParams(objective_weight=1.0))

        assert result.overall_score == 100


class TestPlannedTotals:
    """Planned aggregation with pace estimation."""

    def test_interval_plan_totals(self, interval_plan):
        """Test estimation from the interval pace midpoint (4:00/km)."""
        totals = planned_totals(flatten(interval_plan))

        # intervals: 3 x 1000 m at 240 s/km; time steps have no pace target
        assert totals.distance_meters == pytest.approx(3000)
        assert totals.duration_seconds == pytest.approx(600 + 3 * 240 + 3 * 120 + 600)

    def test_time_step_with_pace_target(self):
        """Test distance estimated for a time step with a pace target."""
        plan = [
            WorkoutStep(
                id="tempo",
                type="active",
                duration=TimeDuration(value=1200),
                target={"type": "pace", "min": "3:50", "max": "4:10"},
            )
        ]

        totals = planned_totals(flatten(plan))

        assert totals.distance_meters == pytest.approx(5000)
        assert totals.duration_seconds == pytest.approx(1200)

    def test_fallback_pace(self, interval_plan):
        """Test that the fallback pace fills in steps without a pace target."""
        totals = planned_totals(flatten(interval_plan), fallback_pace_seconds_per_km=300)

        # 1200 s of warmup/cooldown + 360 s of recoveries at 5:00/km
        assert totals.distance_meters == pytest.approx(3000 + 1560 / 0.3)

    def test_non_pace_target_is_not_used(self):
        """Test that heart rate targets do not drive estimation."""
        plan = [
            WorkoutStep(
                id="z2",
                type="active",
                duration=TimeDuration(value=1800),
                target={"type": "heart_rate", "min": 130, "max": 145},
            )
        ]

        totals = planned_totals(flatten(plan))

        assert totals.distance_meters == 0
        assert totals.duration_seconds == 1800


def test_objective_type_by_majority(interval_plan):
    """Test that the interval plan is time-objective (5 time vs 3 distance steps)."""
    assert objective_type(flatten(interval_plan)) == "time"
    assert objective_type([]) == "time"


class TestBlockComparison:
    """Block comparison per source plan step."""

    def test_blocks_collapse_repetitions(self, interval_plan, make_lap):
        """Test one entry per plan step with repetitions summed."""
        laps = [
            make_lap(1, 1800, 600),
            make_lap(2, 1010, 238),
            make_lap(3, 300, 120),
            make_lap(4, 990, 242),
            make_lap(5, 280, 120),
            make_lap(6, 1000, 240),
            make_lap(7, 290, 120),
            make_lap(8, 1700, 600),
        ]

        result = _score(interval_plan, laps)

        blocks = {b.source_step_id: b for b in result.block_comparison}
        assert [b.source_step_id for b in result.block_comparison] == ["wu", "int", "rec", "cd"]

        interval = blocks["int"]
        assert interval.label == "Interval"
        assert interval.repetitions == 3
        assert interval.planned_distance_meters == pytest.approx(3000)
        assert interval.planned_duration_seconds == pytest.approx(720)
        assert interval.target_pace_range.min == 230
        assert interval.target_pace_range.max == 250
        assert interval.actual_distance_meters == 3000
        assert interval.actual_duration_seconds == 720

        recovery = blocks["rec"]
        assert recovery.planned_distance_meters is None
        assert recovery.planned_duration_seconds == 360
        assert recovery.target_pace_range is None
        assert recovery.actual_distance_meters == 870

        assert blocks["wu"].actual_duration_seconds == 600
        assert blocks["cd"].actual_distance_meters == 1700

    def test_unmatched_blocks_have_zero_actuals(self, interval_plan, make_laps):
        """Test that blocks no lap maps to report zero actuals."""
        result = _score(interval_plan, make_laps(2))

        blocks = {b.source_step_id: b for b in result.block_comparison}
        assert blocks["wu"].actual_distance_meters == 1000
        assert blocks["rec"].actual_distance_meters == 1000
        assert blocks["int"].actual_distance_meters == 0
        assert blocks["cd"].actual_distance_meters == 0

    def test_block_actuals_add_up_with_repeated_lap_indexes(self, interval_plan, make_lap):
        """Test every lap is counted once even when devices repeat a lap index."""
        laps = [make_lap(1, 1000 + i * 4, 300 + i) for i in range(8)]

        result = _score(interval_plan, laps)

        assert sum(b.actual_distance_meters for b in result.block_comparison) == result.actual_distance_meters
        assert sum(b.actual_duration_seconds for b in result.block_comparison) == result.actual_duration_seconds
        assert [b.actual_distance_meters for b in result.block_comparison] == [1000, 3036, 3048, 1028]

    def test_mismatched_lap_lists_are_rejected(self, interval_plan, make_laps):
        """Test that alignment output must pair with the laps it was built from."""
        flat_steps = flatten(interval_plan)
        laps = make_laps(3)

        with pytest.raises(ValueError):
            block_comparison(flat_steps, align(laps[:2], flat_steps), laps)


@pytest.mark.parametrize(
    ("overall", "category"),
    [
        (100, "Excellent"),
        (85, "Excellent"),
        (84, "Good"),
        (70, "Good"),
        (69, "Fair"),
        (50, "Fair"),
        (49, "Poor"),
        (0, "Poor"),
    ],
)
def test_match_category(overall, category):
    """Test category thresholds 85 / 70 / 50."""
    assert match_category(overall) == category
