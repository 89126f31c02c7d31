"""
MediaPipe landmark tracking (Tasks API, VIDEO running mode).

Hands and pose are tracked by two landmarkers fed the same frame; their
results are merged into one LandmarkFrame.
"""

import urllib.request
from pathlib import Path

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks.python import BaseOptions
from mediapipe.tasks.python import vision as mp_vision

from .config import HAND_LANDMARKER_URL, MODEL_DIR, POSE_LANDMARKER_URLS
from .landmarks import LandmarkFrame, frame_from_results


def ensure_model(url: str, model_dir: Path = MODEL_DIR) -> str:
    """
    Download a .task model into model_dir unless it is already there.

    Args:
        url: Model URL
        model_dir: Cache directory

    Returns:
        Local path of the model file
    """
    model_dir = Path(model_dir)
    model_dir.mkdir(parents=True, exist_ok=True)
    model_path = model_dir / url.rsplit("/", 1)[-1]
    if not model_path.exists():
        print(f"Downloading {model_path.name} …")
        try:
            urllib.request.urlretrieve(url, str(model_path))
        except OSError as ex:
            raise RuntimeError(f"Could not download model from {url}: {ex}") from ex
    return str(model_path)


class LandmarkTracker:
    """
    Runs hand and pose landmarkers over a video stream.

    Attributes:
        max_hands: Maximum number of hands to detect
        max_poses: Maximum number of poses (only the first one drives paths)
    """

    def __init__(self, model_dir: Path = MODEL_DIR, pose_model: str = "lite", max_hands: int = 2, max_poses: int = 1,
                 min_confidence: float = 0.5):
        if pose_model not in POSE_LANDMARKER_URLS:
            raise ValueError(f"pose_model must be one of {sorted(POSE_LANDMARKER_URLS)}, got {pose_model!r}")
        self.max_hands = max_hands
        self.max_poses = max_poses
        self._last_ts = -1

        hand_options = mp_vision.HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=ensure_model(HAND_LANDMARKER_URL, model_dir)),
            running_mode=mp_vision.RunningMode.VIDEO,
            num_hands=max_hands,
            min_hand_detection_confidence=min_confidence,
            min_hand_presence_confidence=min_confidence,
            min_tracking_confidence=min_confidence,
        )
        pose_options = mp_vision.PoseLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=ensure_model(POSE_LANDMARKER_URLS[pose_model], model_dir)),
            running_mode=mp_vision.RunningMode.VIDEO,
            num_poses=max_poses,
            min_pose_detection_confidence=min_confidence,
            min_tracking_confidence=min_confidence,
        )
        self._hands = mp_vision.HandLandmarker.create_from_options(hand_options)
        self._pose = mp_vision.PoseLandmarker.create_from_options(pose_options)

    def detect(self, frame_bgr: np.ndarray, timestamp_ms: float) -> LandmarkFrame:
        """
        Track one frame.

        Args:
            frame_bgr: Camera frame as delivered by OpenCV (not mirrored)
            timestamp_ms: Frame time; bumped if not strictly increasing

        Returns:
            LandmarkFrame for this frame
        """
        ts = int(timestamp_ms)
        if ts <= self._last_ts:
            ts = self._last_ts + 1
        self._last_ts = ts

        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        hand_result = self._hands.detect_for_video(image, ts)
        pose_result = self._pose.detect_for_video(image, ts)
        return frame_from_results(hand_result, pose_result, float(ts))

    def close(self):
        for landmarker in (self._hands, self._pose):
            if landmarker is not None:
                landmarker.close()
        self._hands = None
        self._pose = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
