"""
Landmark data model.

A LandmarkFrame is the immutable snapshot of everything the tracker saw in one
video frame. Absence is explicit: `hands`/`poses` are None when nothing was
detected, never zero-filled.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


# MediaPipe hand landmark indices: thumb tip + the four fingertips
HAND_TIPS = (4, 8, 12, 16, 20)

# MediaPipe pose landmark indices
LEFT_EYE = 2
RIGHT_EYE = 5
MOUTH_LEFT = 9
MOUTH_RIGHT = 10
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_ELBOW = 13
RIGHT_ELBOW = 14
LEFT_WRIST = 15
RIGHT_WRIST = 16
LEFT_HIP = 23
RIGHT_HIP = 24
LEFT_KNEE = 25
RIGHT_KNEE = 26
LEFT_FOOT = 27
RIGHT_FOOT = 28

# Pose skeleton used by the debug overlay
POSE_CONNECTIONS = [
    (11, 12), (11, 13), (13, 15), (12, 14), (14, 16),
    (11, 23), (12, 24), (23, 24),
    (23, 25), (25, 27), (24, 26), (26, 28),
    (9, 10),
]


@dataclass(frozen=True)
class Landmark:
    """Normalized landmark: x, y in [0, 1], z signed depth (negative = nearer)."""

    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class HandLandmarks:
    """One detected hand."""

    handedness: str  # "Left" or "Right"
    landmarks: Tuple[Landmark, ...]


@dataclass(frozen=True)
class LandmarkFrame:
    """
    Everything the tracker produced for one frame.

    Attributes:
        hands: Detected hands, or None when hand tracking found nothing
        poses: Detected poses (each a landmark tuple), or None
        faces: Detected face meshes, or None (not consumed by the simulation)
        timestamp_ms: Capture time of the frame
    """

    hands: Optional[Tuple[HandLandmarks, ...]] = None
    poses: Optional[Tuple[Tuple[Landmark, ...], ...]] = None
    faces: Optional[Tuple[Tuple[Landmark, ...], ...]] = None
    timestamp_ms: float = 0.0

    def first_pose(self) -> Optional[Tuple[Landmark, ...]]:
        """Pose 0, or None if no pose was detected. Extra poses are ignored."""
        if not self.poses:
            return None
        return self.poses[0]


def landmark_at(points: Optional[Sequence[Landmark]], index: int) -> Optional[Landmark]:
    """Return points[index], or None if the sequence is absent or too short."""
    if points is None or index < 0 or index >= len(points):
        return None
    return points[index]


def _to_landmarks(raw) -> Tuple[Landmark, ...]:
    return tuple(Landmark(float(p.x), float(p.y), float(getattr(p, "z", 0.0) or 0.0)) for p in raw)


def frame_from_results(hand_result, pose_result, timestamp_ms: float) -> LandmarkFrame:
    """
    Convert MediaPipe Tasks results into a LandmarkFrame.

    Args:
        hand_result: HandLandmarkerResult (or None if hand tracking is off)
        pose_result: PoseLandmarkerResult (or None if pose tracking is off)
        timestamp_ms: Frame timestamp

    Returns:
        LandmarkFrame with None for every empty detection
    """
    hands = None
    if hand_result is not None and hand_result.hand_landmarks:
        detected = []
        for i, raw in enumerate(hand_result.hand_landmarks):
            label = ""
            if hand_result.handedness and i < len(hand_result.handedness) and hand_result.handedness[i]:
                label = hand_result.handedness[i][0].category_name or ""
            detected.append(HandLandmarks(handedness=label, landmarks=_to_landmarks(raw)))
        hands = tuple(detected)

    poses = None
    if pose_result is not None and pose_result.pose_landmarks:
        poses = tuple(_to_landmarks(raw) for raw in pose_result.pose_landmarks)

    return LandmarkFrame(hands=hands, poses=poses, timestamp_ms=timestamp_ms)
