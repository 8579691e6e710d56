"""
Per-lift technique thresholds.

`LiftStandards()` is the default set. It is a plain value: pass an alternate
instance to the pipeline to judge against different thresholds.
"""

import json
import logging
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import StandardsError

logger = logging.getLogger(__name__)

# Eccentric velocity std above this is flagged for every lift.
TEMPO_STABILITY_MAX = 0.25


class SpeedRange(BaseModel):
    """Closed interval [low, high]."""
    model_config = ConfigDict(frozen=True)

    low: float
    high: float

    @model_validator(mode="after")
    def _check_bounds(self) -> "SpeedRange":
        if self.low > self.high:
            raise ValueError(f"range low {self.low} is above high {self.high}")
        return self

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high


class SquatStandards(BaseModel):
    model_config = ConfigDict(frozen=True)

    depth_threshold: float = 0.02
    knee_angle_max: float = 110.0
    hip_angle_max: float = 120.0
    torso_angle_max: float = 55.0
    eccentric_range: SpeedRange = SpeedRange(low=0.15, high=1.2)
    concentric_range: SpeedRange = SpeedRange(low=0.15, high=1.2)


class BenchStandards(BaseModel):
    model_config = ConfigDict(frozen=True)

    touch_threshold: float = 0.08
    elbow_lockout_min: float = 165.0
    eccentric_range: SpeedRange = SpeedRange(low=0.12, high=1.2)
    concentric_range: SpeedRange = SpeedRange(low=0.12, high=1.2)


class DeadliftStandards(BaseModel):
    model_config = ConfigDict(frozen=True)

    hip_lockout_min: float = 165.0
    knee_lockout_min: float = 170.0
    torso_angle_max: float = 45.0
    eccentric_range: SpeedRange = SpeedRange(low=0.12, high=1.4)
    concentric_range: SpeedRange = SpeedRange(low=0.12, high=1.4)


class LiftStandards(BaseModel):
    model_config = ConfigDict(frozen=True)

    squat: SquatStandards = Field(default_factory=SquatStandards)
    bench: BenchStandards = Field(default_factory=BenchStandards)
    deadlift: DeadliftStandards = Field(default_factory=DeadliftStandards)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "LiftStandards":
        """Load standards from a JSON file. Missing keys keep their defaults."""
        path = Path(path)
        try:
            with open(path) as f:
                payload = json.load(f)
            standards = cls.model_validate(payload)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StandardsError(f"Cannot load lift standards from {path}: {e}") from e
        logger.info("Loaded lift standards from %s", path)
        return standards
