import logging
from typing import Callable, Dict, List, Optional, Sequence

from .models import (
    AngleMetrics,
    Joint,
    LiftType,
    PoseFrame,
    PoseSeries,
    RepMetrics,
    RepSegment,
    ROMMetrics,
    SpeedMetrics,
)
from .standards import LiftStandards
from .utils import angle_degrees, angle_from_vertical, standard_deviation

logger = logging.getLogger(__name__)


def joint_angle(frame: PoseFrame, a: Joint, b: Joint, c: Joint) -> Optional[float]:
    """Angle at joint b, or None if any of the three joints is missing."""
    pa, pb, pc = frame.points.get(a), frame.points.get(b), frame.points.get(c)
    if pa is None or pb is None or pc is None:
        return None
    return angle_degrees(pa, pb, pc)


def hip_angle(frame: PoseFrame) -> Optional[float]:
    return joint_angle(frame, Joint.SHOULDER, Joint.HIP, Joint.KNEE)


def knee_angle(frame: PoseFrame) -> Optional[float]:
    return joint_angle(frame, Joint.HIP, Joint.KNEE, Joint.ANKLE)


def elbow_angle(frame: PoseFrame) -> Optional[float]:
    return joint_angle(frame, Joint.SHOULDER, Joint.ELBOW, Joint.WRIST)


def torso_angle(frame: PoseFrame) -> Optional[float]:
    """Lean of the hip->shoulder line away from vertical, in degrees."""
    hip, shoulder = frame.points.get(Joint.HIP), frame.points.get(Joint.SHOULDER)
    if hip is None or shoulder is None:
        return None
    return angle_from_vertical(hip, shoulder)


def vertical_offset(frame: PoseFrame, upper: Joint, lower: Joint) -> Optional[float]:
    """upper.y - lower.y, or None if either joint is missing."""
    p_upper, p_lower = frame.points.get(upper), frame.points.get(lower)
    if p_upper is None or p_lower is None:
        return None
    return p_upper.y - p_lower.y


def phase_velocities(frames: Sequence[PoseFrame], joint: Joint, start: int, stop: int,
                     fps: float) -> List[float]:
    """Signed finite-difference vertical velocities over frames[start..stop].

    Pairs where either frame lacks the joint are skipped.
    """
    velocities = []
    for i in range(start, stop):
        p1, p2 = frames[i].points.get(joint), frames[i + 1].points.get(joint)
        if p1 is None or p2 is None:
            continue
        velocities.append((p2.y - p1.y) * fps)
    return velocities


def _mean_abs(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(abs(v) for v in values) / len(values)


class MetricsCalculator:
    """Per-rep angle, range-of-motion and tempo metrics for one lift type.

    Angles are read at the bottom frame, lockout at the end frame. Lockout
    minima come from the injected standards.
    """

    def __init__(self, standards: Optional[LiftStandards] = None):
        self.standards = standards if standards is not None else LiftStandards()
        self._angles: Dict[LiftType, Callable[[PoseFrame], AngleMetrics]] = {
            LiftType.SQUAT: self._lower_body_angles,
            LiftType.BENCH: self._bench_angles,
            LiftType.DEADLIFT: self._lower_body_angles,
        }
        self._rom: Dict[LiftType, Callable[[PoseFrame, PoseFrame], ROMMetrics]] = {
            LiftType.SQUAT: self._squat_rom,
            LiftType.BENCH: self._bench_rom,
            LiftType.DEADLIFT: self._deadlift_rom,
        }

    def calculate(self, series: PoseSeries, segments: Sequence[RepSegment],
                  lift_type: LiftType) -> List[RepMetrics]:
        lift_type = LiftType(lift_type)
        frames = series.frames
        results = []
        for index, seg in enumerate(segments):
            if seg.end >= len(frames):
                logger.debug("Segment %d ends at frame %d beyond %d frames, skipping",
                             index, seg.end, len(frames))
                continue
            bottom = frames[seg.bottom]
            end = frames[seg.end]
            results.append(RepMetrics(
                index=index,
                angles=self._angles[lift_type](bottom),
                rom=self._rom[lift_type](bottom, end),
                speeds=self.speeds(series, seg, lift_type),
                segment=seg,
            ))
        return results

    @staticmethod
    def speeds(series: PoseSeries, seg: RepSegment, lift_type: LiftType) -> SpeedMetrics:
        joint = LiftType(lift_type).primary_joint
        eccentric = phase_velocities(series.frames, joint, seg.start, seg.bottom, series.fps)
        concentric = phase_velocities(series.frames, joint, seg.bottom, seg.end, series.fps)
        return SpeedMetrics(
            eccentric_avg=_mean_abs(eccentric),
            concentric_avg=_mean_abs(concentric),
            eccentric_std=standard_deviation(eccentric),
        )

    @staticmethod
    def _lower_body_angles(bottom: PoseFrame) -> AngleMetrics:
        return AngleMetrics(hip=hip_angle(bottom), knee=knee_angle(bottom), torso=torso_angle(bottom))

    @staticmethod
    def _bench_angles(bottom: PoseFrame) -> AngleMetrics:
        return AngleMetrics(elbow=elbow_angle(bottom))

    def _squat_rom(self, bottom: PoseFrame, end: PoseFrame) -> ROMMetrics:
        return ROMMetrics(depth_score=vertical_offset(bottom, Joint.HIP, Joint.KNEE))

    def _bench_rom(self, bottom: PoseFrame, end: PoseFrame) -> ROMMetrics:
        elbow = elbow_angle(end)
        lockout = None if elbow is None else elbow >= self.standards.bench.elbow_lockout_min
        return ROMMetrics(
            depth_score=vertical_offset(bottom, Joint.WRIST, Joint.SHOULDER),
            lockout_pass=lockout,
        )

    def _deadlift_rom(self, bottom: PoseFrame, end: PoseFrame) -> ROMMetrics:
        hip, knee = hip_angle(end), knee_angle(end)
        if hip is None or knee is None:
            return ROMMetrics()
        deadlift = self.standards.deadlift
        return ROMMetrics(lockout_pass=hip >= deadlift.hip_lockout_min and knee >= deadlift.knee_lockout_min)
