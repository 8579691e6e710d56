"""
Building PoseSeries values from stored pose samples and pose-model output.

The analysis core expects y-up coordinates. Image-space producers (y grows
downwards) must pass their points through `flip_vertical` first.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from .config import get_settings
from .errors import MissingJointError, PoseDataError
from .models import Joint, JointPoints, LiftType, PoseFrame, PoseSeries, Point

logger = logging.getLogger(__name__)

DEFAULT_MIN_CONFIDENCE = 0.3
_JOINT_NAMES = {joint.value for joint in Joint}


def flip_vertical(points: JointPoints) -> JointPoints:
    """Convert image coordinates (y down) to the y-up convention."""
    flipped = {}
    for joint in points.detected():
        p = points.get(joint)
        flipped[joint.value] = Point(x=p.x, y=1.0 - p.y)
    return JointPoints(**flipped)


def _points_from_json(raw: Mapping[str, Sequence[float]]) -> JointPoints:
    points = {}
    for name, value in raw.items():
        if name not in _JOINT_NAMES or len(value) < 2:
            continue
        points[name] = Point(x=float(value[0]), y=float(value[1]))
    return JointPoints(**points)


def parse_pose_series(payload: Mapping[str, Any], flip_y: bool = False) -> PoseSeries:
    """
    Build a PoseSeries from a decoded sample:
        {"fps": 30, "frames": [{"t": 0.0, "points": {"hip": [x, y], ...}}, ...]}
    """
    try:
        fps = float(payload["fps"])
        frames = []
        for i, frame in enumerate(payload["frames"]):
            points = _points_from_json(frame.get("points", {}))
            if flip_y:
                points = flip_vertical(points)
            frames.append(PoseFrame(index=i, timestamp=float(frame["t"]), points=points))
        return PoseSeries(fps=fps, frames=tuple(frames))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise PoseDataError(f"Invalid pose data: {e}") from e


def load_pose_series(path: Union[str, Path], flip_y: bool = False) -> PoseSeries:
    path = Path(path)
    try:
        with open(path) as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PoseDataError(f"Cannot read pose data from {path}: {e}") from e
    series = parse_pose_series(payload, flip_y=flip_y)
    logger.info("Loaded %d frames at %.1f fps from %s", len(series.frames), series.fps, path)
    return series


def load_sample(lift_type: Union[LiftType, str],
                sample_dir: Optional[Union[str, Path]] = None) -> PoseSeries:
    """Load the side-view sample for a lift, from the configured sample_dir by default."""
    lift_type = LiftType(lift_type)
    if sample_dir is None:
        sample_dir = get_settings().sample_dir
    return load_pose_series(Path(sample_dir) / f"sample_{lift_type.value}_side.json")


def _landmark_xy(value: Sequence[float], min_confidence: float) -> Optional[Tuple[float, float]]:
    # (x, y) or (x, y, confidence)
    if len(value) >= 3 and value[2] < min_confidence:
        return None
    return float(value[0]), float(value[1])


def _side_points(landmarks: Mapping[str, Sequence[float]], side: str,
                 min_confidence: float) -> JointPoints:
    points: Dict[str, Point] = {}
    for joint in Joint:
        key = f"{side}_{joint.value}"
        if key not in landmarks:
            raise MissingJointError(joint)
        xy = _landmark_xy(landmarks[key], min_confidence)
        if xy is None:
            raise MissingJointError(joint)
        points[joint.value] = Point(x=xy[0], y=xy[1])
    return JointPoints(**points)


def points_from_landmarks(landmarks: Mapping[str, Sequence[float]], side: str = "right",
                          min_confidence: float = DEFAULT_MIN_CONFIDENCE,
                          flip_y: bool = True) -> Optional[JointPoints]:
    """Map named pose-model landmarks ('right_hip': (x, y, conf), ...) to JointPoints.

    All six joints must come from one body side. The preferred side is tried
    first, then the other; None if neither side is complete.
    """
    fallback = "left" if side == "right" else "right"
    for candidate in (side, fallback):
        try:
            points = _side_points(landmarks, candidate, min_confidence)
        except MissingJointError as e:
            logger.debug("%s side incomplete: %s", candidate, e)
            continue
        return flip_vertical(points) if flip_y else points
    return None
