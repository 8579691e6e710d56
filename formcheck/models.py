from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Joint(str, Enum):
    HIP = "hip"
    KNEE = "knee"
    ANKLE = "ankle"
    SHOULDER = "shoulder"
    ELBOW = "elbow"
    WRIST = "wrist"


class LiftType(str, Enum):
    SQUAT = "squat"
    BENCH = "bench"
    DEADLIFT = "deadlift"

    @property
    def display_name(self) -> str:
        return self.value.title()

    @property
    def primary_joint(self) -> Joint:
        """Joint whose vertical trajectory drives rep segmentation."""
        return Joint.WRIST if self is LiftType.BENCH else Joint.HIP


class Point(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    x: float
    y: float  # y-up: larger is higher in the scene


class JointPoints(BaseModel):
    """One optional point per tracked joint. None means not detected."""
    model_config = ConfigDict(frozen=True)

    hip: Optional[Point] = None
    knee: Optional[Point] = None
    ankle: Optional[Point] = None
    shoulder: Optional[Point] = None
    elbow: Optional[Point] = None
    wrist: Optional[Point] = None

    def get(self, joint: Joint) -> Optional[Point]:
        return getattr(self, joint.value)

    def detected(self) -> List[Joint]:
        return [joint for joint in Joint if self.get(joint) is not None]


class PoseFrame(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    timestamp: float  # seconds
    points: JointPoints = Field(default_factory=JointPoints)


class PoseSeries(BaseModel):
    """Time-ordered pose frames sampled at `fps`. No gap filling is done."""
    model_config = ConfigDict(frozen=True)

    fps: float = Field(gt=0, allow_inf_nan=False)
    frames: Tuple[PoseFrame, ...] = ()

    def __len__(self) -> int:
        return len(self.frames)


class RepSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    bottom: int
    end: int

    @model_validator(mode="after")
    def _check_order(self) -> "RepSegment":
        if not self.start < self.bottom < self.end:
            raise ValueError(
                f"segment indices must satisfy start < bottom < end, got "
                f"{self.start}, {self.bottom}, {self.end}"
            )
        return self


def _format_parts(parts: List[Optional[str]]) -> str:
    present = [part for part in parts if part is not None]
    return ", ".join(present) if present else "n/a"


class AngleMetrics(BaseModel):
    """Joint angles (degrees) at the bottom frame of a rep."""
    model_config = ConfigDict(frozen=True)

    hip: Optional[float] = None
    knee: Optional[float] = None
    elbow: Optional[float] = None
    torso: Optional[float] = None

    def summary(self) -> str:
        return _format_parts([
            f"{name} {value:.0f}°" if value is not None else None
            for name, value in (
                ("Hip", self.hip),
                ("Knee", self.knee),
                ("Elbow", self.elbow),
                ("Torso", self.torso),
            )
        ])


class ROMMetrics(BaseModel):
    """Range of motion. Pass flags are only set by the rule checker."""
    model_config = ConfigDict(frozen=True)

    depth_score: Optional[float] = None
    depth_pass: Optional[bool] = None
    lockout_pass: Optional[bool] = None

    def summary(self) -> str:
        parts: List[Optional[str]] = []
        if self.depth_score is not None:
            parts.append(f"Depth {self.depth_score:.3f}")
        if self.depth_pass is not None:
            parts.append("ROM OK" if self.depth_pass else "ROM Short")
        if self.lockout_pass is not None:
            parts.append("Lockout OK" if self.lockout_pass else "Lockout Short")
        return _format_parts(parts)


class SpeedMetrics(BaseModel):
    """Primary joint tempo in normalized units per second."""
    model_config = ConfigDict(frozen=True)

    eccentric_avg: float = 0.0
    concentric_avg: float = 0.0
    eccentric_std: float = 0.0

    def summary(self) -> str:
        return (
            f"Ecc {self.eccentric_avg:.3f}, "
            f"Con {self.concentric_avg:.3f}, "
            f"Var {self.eccentric_std:.3f}"
        )


class RepMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    angles: AngleMetrics
    rom: ROMMetrics
    speeds: SpeedMetrics
    segment: RepSegment


class RepAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    angles: AngleMetrics
    rom: ROMMetrics
    speeds: SpeedMetrics
    segment: RepSegment
    issues: Tuple[str, ...] = ()


class AnalysisReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    lift_type: LiftType
    reps: Tuple[RepAnalysis, ...] = ()
    summary_issues: Tuple[str, ...] = ()

    @property
    def rep_count(self) -> int:
        return len(self.reps)
