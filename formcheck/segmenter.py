"""
Repetition segmentation.

A rep runs from one top of the primary joint's trajectory to the next, with the
lowest point in between as its bottom. Tops are maxima of y (y-up).
"""

import logging
import math
from typing import List, Sequence, Tuple

from .models import LiftType, PoseSeries, RepSegment
from .utils import moving_average

logger = logging.getLogger(__name__)

SMOOTHING_WINDOW = 5
MIN_FRAMES = 4
MIN_GAP_FRAMES = 6
MIN_GAP_SECONDS = 0.6


def min_gap_frames(fps: float) -> int:
    """Minimum number of frames between two extrema of the same kind."""
    # halves round up
    return max(MIN_GAP_FRAMES, int(math.floor(MIN_GAP_SECONDS * fps + 0.5)))


def local_extrema(values: Sequence[float]) -> Tuple[List[int], List[int]]:
    """Indices of strict local maxima and minima (endpoints never qualify)."""
    maxima, minima = [], []
    for i in range(1, len(values) - 1):
        if values[i] > values[i - 1] and values[i] > values[i + 1]:
            maxima.append(i)
        if values[i] < values[i - 1] and values[i] < values[i + 1]:
            minima.append(i)
    return maxima, minima


def filter_by_distance(indices: Sequence[int], values: Sequence[float], min_distance: int,
                       prefer_higher: bool) -> List[int]:
    """Keep one dominant extremum per `min_distance` window.

    A candidate too close to the last kept index replaces it only when it is
    strictly better, otherwise it is dropped.
    """
    kept: List[int] = []
    for idx in indices:
        if not kept or idx - kept[-1] >= min_distance:
            kept.append(idx)
            continue
        last = kept[-1]
        better = values[idx] > values[last] if prefer_higher else values[idx] < values[last]
        if better:
            kept[-1] = idx
    return kept


def segment(series: PoseSeries, lift_type: LiftType) -> List[RepSegment]:
    """Split a pose series into reps.

    Returns an empty list when there are too few frames, when the primary
    joint is missing on any frame, or when no complete rep is found yet.
    """
    lift_type = LiftType(lift_type)
    if len(series.frames) < MIN_FRAMES:
        return []

    joint = lift_type.primary_joint
    values = []
    for frame in series.frames:
        point = frame.points.get(joint)
        if point is None:
            logger.debug("No %s on frame %d, skipping segmentation", joint.value, frame.index)
            return []
        values.append(point.y)

    smooth = moving_average(values, SMOOTHING_WINDOW)
    maxima, minima = local_extrema(smooth)
    gap = min_gap_frames(series.fps)
    tops = filter_by_distance(maxima, smooth, gap, prefer_higher=True)
    bottoms = filter_by_distance(minima, smooth, gap, prefer_higher=False)

    if len(tops) < 2:
        return []

    segments = []
    for start, end in zip(tops, tops[1:]):
        if end - start < gap:
            continue
        between = [i for i in bottoms if start < i < end]
        if not between:
            continue
        bottom = min(between, key=lambda i: smooth[i])
        segments.append(RepSegment(start=start, bottom=bottom, end=end))

    logger.debug("Segmented %d %s reps from %d frames (min gap %d)",
                 len(segments), lift_type.value, len(series.frames), gap)
    return segments
