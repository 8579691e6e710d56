import math

import numpy as np
import pytest

from formcheck.models import JointPoints, LiftType, Point, PoseFrame, PoseSeries

FPS = 30.0
PERIOD = 40  # frames per rep cycle
CYCLES = 3


def sine_track(cycles=CYCLES, period=PERIOD, center=0.6, amplitude=0.2, noise=0.0, seed=0):
    """Primary joint height: tops at period/4 + k*period, bottoms at 3*period/4 + k*period."""
    n = cycles * period
    i = np.arange(n)
    y = center + amplitude * np.sin(2 * math.pi * i / period)
    if noise:
        y = y + np.random.RandomState(seed).uniform(-noise, noise, size=n)
    return [float(v) for v in y]


def lower_body_points(hip_y, hip_x=0.5):
    """Side-view skeleton with the knee and ankle planted and the torso upright."""
    return JointPoints(
        hip=Point(x=hip_x, y=hip_y),
        knee=Point(x=0.55, y=0.3),
        ankle=Point(x=0.5, y=0.05),
        shoulder=Point(x=hip_x + 0.05, y=hip_y + 0.3),
    )


def bench_points(wrist_y):
    return JointPoints(
        shoulder=Point(x=0.5, y=0.4),
        elbow=Point(x=0.6, y=(wrist_y + 0.4) / 2),
        wrist=Point(x=0.5, y=wrist_y),
    )


def make_series(track, builder=lower_body_points, fps=FPS):
    frames = tuple(
        PoseFrame(index=i, timestamp=i / fps, points=builder(y))
        for i, y in enumerate(track)
    )
    return PoseSeries(fps=fps, frames=frames)


@pytest.fixture
def squat_series():
    return make_series(sine_track())


@pytest.fixture
def noisy_squat_series():
    return make_series(sine_track(noise=0.001, seed=7))


@pytest.fixture
def bench_series():
    return make_series(sine_track(center=0.6, amplitude=0.15), builder=bench_points)


@pytest.fixture(params=list(LiftType))
def lift_type(request):
    return request.param
