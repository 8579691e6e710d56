import pytest

from formcheck.models import AngleMetrics, LiftType, RepMetrics, RepSegment, ROMMetrics, SpeedMetrics
from formcheck.rule_checker import (
    BACK_ANGLE_TOO_HORIZONTAL,
    CONCENTRIC_SPEED_OUT_OF_RANGE,
    DEPTH_TOO_SHALLOW,
    ECCENTRIC_SPEED_OUT_OF_RANGE,
    ECCENTRIC_TEMPO_UNSTABLE,
    EXCESSIVE_FORWARD_LEAN,
    HIP_ANGLE_TOO_OPEN,
    KNEE_ANGLE_TOO_OPEN,
    LOCKOUT_INCOMPLETE,
    TOUCH_DEPTH_SHORT,
    RuleChecker,
)
from formcheck.standards import LiftStandards, SpeedRange, SquatStandards

SEGMENT = RepSegment(start=0, bottom=5, end=10)
GOOD_SPEEDS = SpeedMetrics(eccentric_avg=0.5, concentric_avg=0.5, eccentric_std=0.1)


def rep(angles=None, rom=None, speeds=GOOD_SPEEDS):
    return RepMetrics(index=0, angles=angles or AngleMetrics(), rom=rom or ROMMetrics(),
                      speeds=speeds, segment=SEGMENT)


def test_squat_hip_only_issue():
    standards = LiftStandards(squat=SquatStandards(
        depth_threshold=0.02, knee_angle_max=110, hip_angle_max=120, torso_angle_max=55,
        eccentric_range=SpeedRange(low=0.15, high=1.2), concentric_range=SpeedRange(low=0.15, high=1.2),
    ))
    metrics = rep(angles=AngleMetrics(hip=130.0, knee=95.0), rom=ROMMetrics(depth_score=0.05))
    analysis = RuleChecker(standards).assess_rep(metrics, LiftType.SQUAT)
    assert list(analysis.issues) == [HIP_ANGLE_TOO_OPEN]
    assert analysis.rom.depth_pass is True
    assert analysis.rom.depth_score == pytest.approx(0.05)


def test_squat_checklist_order():
    metrics = rep(
        angles=AngleMetrics(hip=150.0, knee=140.0, torso=70.0),
        rom=ROMMetrics(depth_score=-0.1),
        speeds=SpeedMetrics(eccentric_avg=2.0, concentric_avg=0.01, eccentric_std=0.5),
    )
    analysis = RuleChecker().assess_rep(metrics, LiftType.SQUAT)
    assert list(analysis.issues) == [
        DEPTH_TOO_SHALLOW,
        KNEE_ANGLE_TOO_OPEN,
        HIP_ANGLE_TOO_OPEN,
        EXCESSIVE_FORWARD_LEAN,
        ECCENTRIC_SPEED_OUT_OF_RANGE,
        CONCENTRIC_SPEED_OUT_OF_RANGE,
        ECCENTRIC_TEMPO_UNSTABLE,
    ]
    assert analysis.rom.depth_pass is False


def test_absent_metrics_are_skipped():
    analysis = RuleChecker().assess_rep(rep(), LiftType.SQUAT)
    assert analysis.issues == ()
    assert analysis.rom.depth_pass is None


def test_ranges_are_inclusive():
    speeds = SpeedMetrics(eccentric_avg=0.15, concentric_avg=1.2, eccentric_std=0.25)
    analysis = RuleChecker().assess_rep(rep(speeds=speeds), LiftType.SQUAT)
    assert analysis.issues == ()


def test_angle_at_limit_passes():
    analysis = RuleChecker().assess_rep(rep(angles=AngleMetrics(hip=120.0, knee=110.0, torso=55.0)),
                                        LiftType.SQUAT)
    assert analysis.issues == ()


def test_bench_checklist():
    metrics = rep(rom=ROMMetrics(depth_score=0.05, lockout_pass=False),
                  speeds=SpeedMetrics(eccentric_avg=0.1, concentric_avg=0.5, eccentric_std=0.3))
    analysis = RuleChecker().assess_rep(metrics, LiftType.BENCH)
    assert list(analysis.issues) == [
        TOUCH_DEPTH_SHORT,
        LOCKOUT_INCOMPLETE,
        ECCENTRIC_SPEED_OUT_OF_RANGE,
        ECCENTRIC_TEMPO_UNSTABLE,
    ]
    assert analysis.rom.depth_pass is False
    assert analysis.rom.lockout_pass is False


def test_bench_lockout_kept_without_touch_score():
    analysis = RuleChecker().assess_rep(rep(rom=ROMMetrics(lockout_pass=True)), LiftType.BENCH)
    assert analysis.issues == ()
    assert analysis.rom.lockout_pass is True
    assert analysis.rom.depth_pass is None


def test_bench_ignores_lower_body_angles():
    metrics = rep(angles=AngleMetrics(hip=179.0, knee=179.0, torso=90.0),
                  rom=ROMMetrics(depth_score=0.1, lockout_pass=True))
    assert RuleChecker().assess_rep(metrics, LiftType.BENCH).issues == ()


def test_deadlift_checklist():
    metrics = rep(angles=AngleMetrics(torso=60.0), rom=ROMMetrics(lockout_pass=False),
                  speeds=SpeedMetrics(eccentric_avg=0.5, concentric_avg=1.5, eccentric_std=0.0))
    analysis = RuleChecker().assess_rep(metrics, LiftType.DEADLIFT)
    assert list(analysis.issues) == [LOCKOUT_INCOMPLETE, BACK_ANGLE_TOO_HORIZONTAL,
                                     CONCENTRIC_SPEED_OUT_OF_RANGE]
    assert analysis.rom.lockout_pass is False


def test_deadlift_wider_range_than_squat():
    speeds = SpeedMetrics(eccentric_avg=1.3, concentric_avg=1.3, eccentric_std=0.0)
    checker = RuleChecker()
    assert checker.assess_rep(rep(speeds=speeds), LiftType.DEADLIFT).issues == ()
    assert checker.assess_rep(rep(speeds=speeds), LiftType.SQUAT).issues == (
        ECCENTRIC_SPEED_OUT_OF_RANGE, CONCENTRIC_SPEED_OUT_OF_RANGE)


def test_deadlift_drops_depth_score():
    analysis = RuleChecker().assess_rep(rep(rom=ROMMetrics(depth_score=0.3, lockout_pass=True)),
                                        LiftType.DEADLIFT)
    assert analysis.rom.depth_score is None


@pytest.mark.parametrize("lift", list(LiftType))
def test_narrowing_range_only_adds_speed_issues(lift):
    metrics = rep(speeds=SpeedMetrics(eccentric_avg=0.5, concentric_avg=0.9, eccentric_std=0.0))
    previous = set()
    for low, high in [(0.0, 5.0), (0.2, 1.0), (0.45, 0.95), (0.55, 0.85), (0.6, 0.6)]:
        window = SpeedRange(low=low, high=high)
        standards = LiftStandards.model_validate({
            lift.value: {"eccentric_range": window.model_dump(), "concentric_range": window.model_dump()},
        })
        issues = set(RuleChecker(standards).assess_rep(metrics, lift).issues)
        speed_issues = issues & {ECCENTRIC_SPEED_OUT_OF_RANGE, CONCENTRIC_SPEED_OUT_OF_RANGE}
        assert previous <= speed_issues
        previous = speed_issues
    assert previous == {ECCENTRIC_SPEED_OUT_OF_RANGE, CONCENTRIC_SPEED_OUT_OF_RANGE}


def test_evaluate_keeps_order():
    metrics = [rep(), rep(rom=ROMMetrics(depth_score=0.0))]
    metrics[1] = metrics[1].model_copy(update={"index": 1})
    analyses = RuleChecker().evaluate(metrics, "squat")
    assert [a.index for a in analyses] == [0, 1]
    assert analyses[1].issues == (DEPTH_TOO_SHALLOW,)


def test_unknown_lift_rejected():
    with pytest.raises(ValueError):
        RuleChecker().assess_rep(rep(), "curl")
