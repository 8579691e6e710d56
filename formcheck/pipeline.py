import logging
from typing import Optional, Union

from .metrics import MetricsCalculator
from .models import AnalysisReport, LiftType, PoseSeries
from .rule_checker import RuleChecker
from .segmenter import segment
from .standards import LiftStandards

logger = logging.getLogger(__name__)


def analyze(series: PoseSeries, lift_type: Union[LiftType, str],
            standards: Optional[LiftStandards] = None) -> AnalysisReport:
    """Segment reps, compute their metrics and judge them against `standards`.

    Holds no state between calls, so it can be rerun freely on overlapping
    windows of a live feed.
    """
    lift_type = LiftType(lift_type.lower() if isinstance(lift_type, str) else lift_type)
    standards = standards if standards is not None else LiftStandards()

    segments = segment(series, lift_type)
    metrics = MetricsCalculator(standards).calculate(series, segments, lift_type)
    reps = RuleChecker(standards).evaluate(metrics, lift_type)
    summary = sorted({issue for rep in reps for issue in rep.issues})

    logger.debug("Analyzed %d frames: %d %s reps, %d distinct issues",
                 len(series.frames), len(reps), lift_type.value, len(summary))
    return AnalysisReport(lift_type=lift_type, reps=tuple(reps), summary_issues=tuple(summary))
