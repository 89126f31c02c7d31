"""
Configuration constants for the heartflow particle simulation.

Every tunable lives here as a module constant; FlowConfig collects them so a
run can override a subset (the CLI does) without touching module state.
"""

from dataclasses import dataclass, field
from pathlib import Path
import tempfile


# --------- Canvas ---------

# 640x480 capture scaled by 1.5
CANVAS_WIDTH = 960
CANVAS_HEIGHT = 720

# Video frames are sampled for color at a tiny resolution (cheap lookups)
SAMPLE_WIDTH = 80
SAMPLE_HEIGHT = 60


# --------- Physics ---------

STEP_MS = 1000.0 / 60.0

# px per physics step
MAX_SPEED = 15.0

# Attraction force: distance [0, FORCE_DISTANCE_MAX] -> [FORCE_MIN, FORCE_MAX]
FORCE_DISTANCE_MAX = 800.0
FORCE_MIN = 0.0001
FORCE_MAX = 0.005

# Below this distance no force is applied (avoids normalizing ~zero vectors)
MIN_FORCE_DISTANCE = 1.0


# --------- Traveler lifecycle ---------

MAX_AGE = 100
CLOSE_DISTANCE = 10.0

# After a leg is finished, age restarts somewhere in this fraction of MAX_AGE
LEG_AGE_RESET = (0.4, 0.6)

# Depth (hand-landmark z scale, negative = nearer) -> visual size in px
DEPTH_NEAR = -0.1
DEPTH_FAR = 0.1
SIZE_NEAR = 16.0
SIZE_FAR = 4.0

# Pose z is on a much larger scale than hand z
POSE_DEPTH_SCALE = 0.1

# Alpha at spawn, fading linearly to 0 at MAX_AGE
ALPHA_START = 180.0


# --------- Waypoints ---------

# Heart sits this far below the shoulder line
HEART_OFFSET = 50.0


# --------- Emission ---------

HAND_EVERY = 2
MOUTH_EVERY = 1
EYES_EVERY = 3
LEGS_EVERY = 3

MOUTH_COUNT = 2
EYES_COUNT = 2
LEGS_COUNT = 1

SPAWN_JITTER = 4.0
VELOCITY_JITTER = 0.5


# --------- Rendering ---------

TRAIL_FADE_ALPHA = 50
# Box blur applied to the trails when enabled (odd kernel size in px)
TRAIL_BLUR_KERNEL = 3
VIDEO_TINT_ALPHA = 3
REPORT_EVERY = 60


# --------- MediaPipe models ---------

MODEL_DIR = Path(tempfile.gettempdir()) / "mediapipe_models"

HAND_LANDMARKER_URL = (
    "https://storage.googleapis.com/mediapipe-models/"
    "hand_landmarker/hand_landmarker/float16/latest/hand_landmarker.task"
)

POSE_LANDMARKER_URLS = {
    "lite": (
        "https://storage.googleapis.com/mediapipe-models/"
        "pose_landmarker/pose_landmarker_lite/float16/latest/pose_landmarker_lite.task"
    ),
    "full": (
        "https://storage.googleapis.com/mediapipe-models/"
        "pose_landmarker/pose_landmarker_full/float16/latest/pose_landmarker_full.task"
    ),
}


@dataclass(frozen=True)
class BodyOptions:
    """Material of a traveler's physics body."""

    friction: float = 0.01
    friction_air: float = 0.03  # gentle glide-down of velocity
    restitution: float = 0.7
    density: float = 0.01


@dataclass
class FlowConfig:
    """
    Tunables for one simulation run.

    Attributes:
        width, height: Display size in px
        step_ms: Duration of one physics step in ms
        max_speed: Spawn velocity clamp in px per step
        max_age: Steps a traveler may spend on one leg before it is stale
        close_distance: Distance at which a waypoint counts as reached
        walls: Keep bodies inside the canvas
        legs: Register the leg emitter
    """

    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT
    step_ms: float = STEP_MS
    max_speed: float = MAX_SPEED
    force_distance_max: float = FORCE_DISTANCE_MAX
    force_min: float = FORCE_MIN
    force_max: float = FORCE_MAX
    max_age: int = MAX_AGE
    close_distance: float = CLOSE_DISTANCE
    leg_age_reset: tuple = LEG_AGE_RESET
    heart_offset: float = HEART_OFFSET
    hand_every: int = HAND_EVERY
    mouth_every: int = MOUTH_EVERY
    eyes_every: int = EYES_EVERY
    legs_every: int = LEGS_EVERY
    mouth_count: int = MOUTH_COUNT
    eyes_count: int = EYES_COUNT
    legs_count: int = LEGS_COUNT
    spawn_jitter: float = SPAWN_JITTER
    velocity_jitter: float = VELOCITY_JITTER
    body: BodyOptions = field(default_factory=BodyOptions)
    walls: bool = False
    legs: bool = True

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"canvas size must be positive, got {self.width}x{self.height}")
        if self.step_ms <= 0:
            raise ValueError(f"step_ms must be positive, got {self.step_ms}")
        if self.max_speed <= 0:
            raise ValueError(f"max_speed must be positive, got {self.max_speed}")
        if self.max_age <= 0:
            raise ValueError(f"max_age must be positive, got {self.max_age}")
        if self.force_distance_max <= 0:
            raise ValueError(f"force_distance_max must be positive, got {self.force_distance_max}")
        if not 0.0 <= self.force_min <= self.force_max:
            raise ValueError(f"force range must satisfy 0 <= min <= max, got ({self.force_min}, {self.force_max})")
        if self.close_distance < 0:
            raise ValueError(f"close_distance must not be negative, got {self.close_distance}")
        for name in ("hand_every", "mouth_every", "eyes_every", "legs_every"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        lo, hi = self.leg_age_reset
        if not 0.0 <= lo <= hi <= 1.0:
            raise ValueError(f"leg_age_reset must satisfy 0 <= lo <= hi <= 1, got {self.leg_age_reset}")
