import random

import pytest

from heartflow.config import FlowConfig
from heartflow.engine import FlowEngine
from heartflow.landmarks import (
    LEFT_ELBOW,
    LEFT_EYE,
    LEFT_FOOT,
    LEFT_HIP,
    LEFT_KNEE,
    LEFT_SHOULDER,
    LEFT_WRIST,
    MOUTH_LEFT,
    MOUTH_RIGHT,
    RIGHT_ELBOW,
    RIGHT_EYE,
    RIGHT_FOOT,
    RIGHT_HIP,
    RIGHT_KNEE,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    HandLandmarks,
    Landmark,
    LandmarkFrame,
)

# A person standing in the middle of the picture (normalized coords)
STANDING = {
    LEFT_EYE: (0.47, 0.15, -0.6),
    RIGHT_EYE: (0.53, 0.15, -0.6),
    MOUTH_LEFT: (0.48, 0.22, -0.5),
    MOUTH_RIGHT: (0.52, 0.22, -0.5),
    LEFT_SHOULDER: (0.40, 0.30, -0.2),
    RIGHT_SHOULDER: (0.60, 0.30, -0.2),
    LEFT_ELBOW: (0.30, 0.45, -0.1),
    RIGHT_ELBOW: (0.70, 0.45, -0.1),
    LEFT_WRIST: (0.25, 0.60, -0.1),
    RIGHT_WRIST: (0.75, 0.60, -0.1),
    LEFT_HIP: (0.43, 0.60, 0.0),
    RIGHT_HIP: (0.57, 0.60, 0.0),
    LEFT_KNEE: (0.43, 0.78, 0.0),
    RIGHT_KNEE: (0.57, 0.78, 0.0),
    LEFT_FOOT: (0.43, 0.95, 0.1),
    RIGHT_FOOT: (0.57, 0.95, 0.1),
}


def make_pose(overrides=None, n=33):
    points = dict(STANDING)
    points.update(overrides or {})
    return tuple(Landmark(*points.get(i, (0.5, 0.5, 0.0))) for i in range(n))


def make_hand(handedness="Left", x=0.25, y=0.62, z=-0.05):
    """21 landmarks clustered around (x, y); tips spread slightly apart."""
    lms = [Landmark(x, y, z) for _ in range(21)]
    for k, tip in enumerate((4, 8, 12, 16, 20)):
        lms[tip] = Landmark(x + 0.01 * k, y - 0.03, z)
    return HandLandmarks(handedness=handedness, landmarks=tuple(lms))


def make_frame(pose=True, hands=(), t=0.0):
    poses = (make_pose(),) if pose is True else pose
    return LandmarkFrame(hands=tuple(hands) or None, poses=poses, timestamp_ms=t)


@pytest.fixture
def config():
    return FlowConfig()


@pytest.fixture
def engine(config):
    return FlowEngine.default(config, rng=random.Random(7))


class FixedPaths:
    """Stands in for WaypointBuilder with a hand-written path table."""

    def __init__(self, paths):
        self.paths = paths

    def path_for(self, region):
        return self.paths.get(region, [])
