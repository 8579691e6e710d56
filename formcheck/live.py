"""
Rolling-window feedback for a live pose feed.

Frames are buffered for a few seconds and the full analysis is rerun on the
buffer every few frames. Each rerun is independent of the previous one.
"""

import logging
from collections import deque
from typing import Deque, List, Optional

from .config import Settings
from .models import AnalysisReport, JointPoints, LiftType, PoseFrame, PoseSeries
from .pipeline import analyze
from .standards import LiftStandards

logger = logging.getLogger(__name__)

MIN_ANALYSIS_FRAMES = 15
DEFAULT_FPS = 30.0

WAITING = "Waiting..."
KEEP_MOVING = "Keep moving"
GOOD_REP = "Good rep"


def rebase_timestamps(frames: List[PoseFrame]) -> List[PoseFrame]:
    """Shift timestamps so the first frame is at t=0."""
    if not frames:
        return frames
    first = frames[0].timestamp
    return [f.model_copy(update={"timestamp": f.timestamp - first}) for f in frames]


def estimate_fps(frames: List[PoseFrame]) -> Optional[float]:
    """1 / median positive frame interval, or None if it cannot be estimated."""
    if len(frames) <= 4:
        return None
    deltas = [b.timestamp - a.timestamp for a, b in zip(frames, frames[1:])]
    deltas = sorted(d for d in deltas if d > 0)
    if not deltas:
        return None
    # upper median, matching an index of len // 2
    median = deltas[len(deltas) // 2]
    return 1.0 / median


def feedback_message(report: Optional[AnalysisReport]) -> str:
    if report is None:
        return WAITING
    if not report.reps:
        return KEEP_MOVING
    last = report.reps[-1]
    return ", ".join(last.issues) if last.issues else GOOD_REP


class LiveSession:
    """Buffers incoming pose frames and periodically recomputes a report."""

    def __init__(self, lift_type: LiftType, standards: Optional[LiftStandards] = None,
                 buffer_seconds: float = 6.0, feedback_every: int = 15):
        self.lift_type = LiftType(lift_type)
        self.standards = standards if standards is not None else LiftStandards()
        self.buffer_seconds = buffer_seconds
        self.feedback_every = feedback_every
        self._frames: Deque[PoseFrame] = deque()
        self._next_index = 0
        self._received = 0
        self.report: Optional[AnalysisReport] = None

    @classmethod
    def from_settings(cls, lift_type: LiftType, settings: Settings,
                      standards: Optional[LiftStandards] = None) -> "LiveSession":
        if standards is None:
            standards = settings.load_standards()
        return cls(lift_type, standards, buffer_seconds=settings.live_buffer_seconds,
                   feedback_every=settings.live_feedback_every)

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def rep_count(self) -> int:
        return self.report.rep_count if self.report is not None else 0

    @property
    def message(self) -> str:
        return feedback_message(self.report)

    def reset(self) -> None:
        self._frames.clear()
        self._next_index = 0
        self._received = 0
        self.report = None

    def add_frame(self, points: JointPoints, timestamp: float) -> Optional[AnalysisReport]:
        """Append a frame. Returns a fresh report when one was recomputed."""
        self._frames.append(PoseFrame(index=self._next_index, timestamp=timestamp, points=points))
        self._next_index += 1
        cutoff = timestamp - self.buffer_seconds
        while self._frames and self._frames[0].timestamp < cutoff:
            self._frames.popleft()

        self._received += 1
        if self._received % self.feedback_every == 0:
            return self.analyze_recent()
        return None

    def analyze_recent(self) -> Optional[AnalysisReport]:
        """Analyze the buffered window, or None if too few frames are buffered."""
        if len(self._frames) <= MIN_ANALYSIS_FRAMES:
            logger.debug("Only %d frames buffered, not analyzing", len(self._frames))
            return None
        frames = rebase_timestamps(list(self._frames))
        # analysis indexes frames by position in the window
        frames = [f.model_copy(update={"index": i}) for i, f in enumerate(frames)]
        fps = estimate_fps(frames) or DEFAULT_FPS
        series = PoseSeries(fps=fps, frames=tuple(frames))
        self.report = analyze(series, self.lift_type, self.standards)
        logger.debug("Live window: %d frames at %.1f fps, %d reps",
                     len(frames), fps, self.report.rep_count)
        return self.report
