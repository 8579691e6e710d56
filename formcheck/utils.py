import json
import logging
from typing import List, Sequence, Tuple, Union

import numpy as np

from .models import AnalysisReport, Point

logger = logging.getLogger(__name__)

PointLike = Union[Point, Tuple[float, float]]

# Floor for the magnitude product so coincident points never divide by zero
_MIN_DENOMINATOR = 1e-4
_VERTICAL = np.array([0.0, 1.0])


def _vector(p: PointLike) -> np.ndarray:
    if isinstance(p, Point):
        return np.array([p.x, p.y], dtype=float)
    return np.array(p[:2], dtype=float)


def _angle_between(v1: np.ndarray, v2: np.ndarray) -> float:
    denom = max(float(np.linalg.norm(v1) * np.linalg.norm(v2)), _MIN_DENOMINATOR)
    cos_angle = float(np.dot(v1, v2)) / denom
    return float(np.degrees(np.arccos(np.clip(cos_angle, -1.0, 1.0))))


def angle_degrees(a: PointLike, b: PointLike, c: PointLike) -> float:
    """Return angle ABC (in degrees) between points a, b, c."""
    vb = _vector(b)
    return _angle_between(_vector(a) - vb, _vector(c) - vb)


def angle_from_vertical(a: PointLike, b: PointLike) -> float:
    """Return the angle (degrees) between vector a->b and the upward vertical."""
    return _angle_between(_vector(b) - _vector(a), _VERTICAL)


def moving_average(values: Sequence[float], window: int = 5) -> List[float]:
    """Centered moving average.

    Near the ends the window is clipped to the samples that exist, so edge
    outputs average fewer values instead of padded ones.
    """
    values = [float(v) for v in values]
    if window < 2 or len(values) < 2:
        return values
    half = window // 2
    last = len(values) - 1
    smoothed = []
    for i in range(len(values)):
        start = max(0, i - half)
        end = min(last, i + half)
        smoothed.append(float(np.mean(values[start:end + 1])))
    return smoothed


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation, 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def export_report_json(report: AnalysisReport, path: str) -> None:
    """Export an AnalysisReport to a JSON file."""
    with open(path, "w") as f:
        json.dump(report.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
    logger.info("Wrote %s report with %d reps to %s", report.lift_type.value, report.rep_count, path)
