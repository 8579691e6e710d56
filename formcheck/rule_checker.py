from typing import List, Optional, Sequence, Tuple

from .models import LiftType, RepAnalysis, RepMetrics, ROMMetrics, SpeedMetrics
from .standards import TEMPO_STABILITY_MAX, LiftStandards, SpeedRange

DEPTH_TOO_SHALLOW = "Depth too shallow"
KNEE_ANGLE_TOO_OPEN = "Knee angle too open"
HIP_ANGLE_TOO_OPEN = "Hip angle too open"
EXCESSIVE_FORWARD_LEAN = "Excessive forward lean"
TOUCH_DEPTH_SHORT = "Touch depth short"
LOCKOUT_INCOMPLETE = "Lockout incomplete"
BACK_ANGLE_TOO_HORIZONTAL = "Back angle too horizontal"
ECCENTRIC_SPEED_OUT_OF_RANGE = "Eccentric speed out of range"
CONCENTRIC_SPEED_OUT_OF_RANGE = "Concentric speed out of range"
ECCENTRIC_TEMPO_UNSTABLE = "Eccentric tempo unstable"


def _exceeds(value: Optional[float], limit: float) -> bool:
    """True only for a detected value above the limit."""
    return value is not None and value > limit


def tempo_issues(speeds: SpeedMetrics, eccentric_range: SpeedRange,
                 concentric_range: SpeedRange) -> List[str]:
    """Tempo checks shared by every lift, in checklist order."""
    issues = []
    if not eccentric_range.contains(speeds.eccentric_avg):
        issues.append(ECCENTRIC_SPEED_OUT_OF_RANGE)
    if not concentric_range.contains(speeds.concentric_avg):
        issues.append(CONCENTRIC_SPEED_OUT_OF_RANGE)
    if speeds.eccentric_std > TEMPO_STABILITY_MAX:
        issues.append(ECCENTRIC_TEMPO_UNSTABLE)
    return issues


class RuleChecker:
    """Judges rep metrics against lift standards.

    Each lift has one ordered checklist; the order of the checks is the order
    issues appear for a rep. Metrics that were not detected are skipped.
    """

    def __init__(self, standards: Optional[LiftStandards] = None):
        self.standards = standards if standards is not None else LiftStandards()

    def check_squat(self, metrics: RepMetrics) -> Tuple[ROMMetrics, List[str]]:
        """
        1. Depth score at least the depth threshold.
        2. Knee and hip angles at the bottom no more open than their maxima.
        3. Torso lean from vertical within the maximum.
        4. Tempo within range and stable.
        """
        std = self.standards.squat
        issues = []
        depth_pass = None
        if metrics.rom.depth_score is not None:
            depth_pass = metrics.rom.depth_score >= std.depth_threshold
            if not depth_pass:
                issues.append(DEPTH_TOO_SHALLOW)
        if _exceeds(metrics.angles.knee, std.knee_angle_max):
            issues.append(KNEE_ANGLE_TOO_OPEN)
        if _exceeds(metrics.angles.hip, std.hip_angle_max):
            issues.append(HIP_ANGLE_TOO_OPEN)
        if _exceeds(metrics.angles.torso, std.torso_angle_max):
            issues.append(EXCESSIVE_FORWARD_LEAN)
        issues.extend(tempo_issues(metrics.speeds, std.eccentric_range, std.concentric_range))
        return ROMMetrics(depth_score=metrics.rom.depth_score, depth_pass=depth_pass), issues

    def check_bench(self, metrics: RepMetrics) -> Tuple[ROMMetrics, List[str]]:
        """
        1. Bar brought down far enough (touch score at least the threshold).
        2. Elbows locked out at the top.
        3. Tempo within range and stable.
        """
        std = self.standards.bench
        issues = []
        depth_pass = None
        if metrics.rom.depth_score is not None:
            depth_pass = metrics.rom.depth_score >= std.touch_threshold
            if not depth_pass:
                issues.append(TOUCH_DEPTH_SHORT)
        if metrics.rom.lockout_pass is False:
            issues.append(LOCKOUT_INCOMPLETE)
        issues.extend(tempo_issues(metrics.speeds, std.eccentric_range, std.concentric_range))
        rom = ROMMetrics(
            depth_score=metrics.rom.depth_score,
            depth_pass=depth_pass,
            lockout_pass=metrics.rom.lockout_pass,
        )
        return rom, issues

    def check_deadlift(self, metrics: RepMetrics) -> Tuple[ROMMetrics, List[str]]:
        """
        1. Hips and knees locked out at the top.
        2. Back no further from vertical than the maximum at the bottom.
        3. Tempo within range and stable.
        """
        std = self.standards.deadlift
        issues = []
        if metrics.rom.lockout_pass is False:
            issues.append(LOCKOUT_INCOMPLETE)
        if _exceeds(metrics.angles.torso, std.torso_angle_max):
            issues.append(BACK_ANGLE_TOO_HORIZONTAL)
        issues.extend(tempo_issues(metrics.speeds, std.eccentric_range, std.concentric_range))
        return ROMMetrics(lockout_pass=metrics.rom.lockout_pass), issues

    def assess_rep(self, metrics: RepMetrics, lift_type: LiftType) -> RepAnalysis:
        """Main entry point for judging a single rep."""
        lift_type = LiftType(lift_type)
        if lift_type is LiftType.SQUAT:
            rom, issues = self.check_squat(metrics)
        elif lift_type is LiftType.BENCH:
            rom, issues = self.check_bench(metrics)
        else:
            rom, issues = self.check_deadlift(metrics)
        return RepAnalysis(
            index=metrics.index,
            angles=metrics.angles,
            rom=rom,
            speeds=metrics.speeds,
            segment=metrics.segment,
            issues=tuple(issues),
        )

    def evaluate(self, metrics: Sequence[RepMetrics], lift_type: LiftType) -> List[RepAnalysis]:
        return [self.assess_rep(m, lift_type) for m in metrics]
