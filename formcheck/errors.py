"""Exceptions raised by the collaborators around the analysis core.

The core itself (segmentation, metrics, rules) never raises for well-typed
input; it degrades to fewer or zero reps instead.
"""


class FormCheckError(Exception):
    """Base class for formcheck errors."""


class PoseDataError(FormCheckError):
    """Pose sample data could not be read or decoded."""


class MissingJointError(PoseDataError):
    def __init__(self, joint):
        self.joint = joint
        name = getattr(joint, "value", joint)
        super().__init__(f"Missing joint data: {name}.")


class StandardsError(FormCheckError):
    """A lift standards override file could not be loaded."""
