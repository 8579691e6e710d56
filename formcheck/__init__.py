"""
Lift Form Check
---------------
Per-repetition technique analysis for squat, bench press and deadlift from a
time series of 2D joint positions.
"""

from .models import (
    AnalysisReport,
    AngleMetrics,
    Joint,
    JointPoints,
    LiftType,
    Point,
    PoseFrame,
    PoseSeries,
    RepAnalysis,
    RepMetrics,
    RepSegment,
    ROMMetrics,
    SpeedMetrics,
)
from .standards import LiftStandards, SpeedRange
from .segmenter import segment
from .metrics import MetricsCalculator
from .rule_checker import RuleChecker
from .pipeline import analyze
from .pose_data import flip_vertical, load_pose_series, parse_pose_series
from .utils import angle_degrees, angle_from_vertical, moving_average, standard_deviation

__version__ = "0.1.0"
