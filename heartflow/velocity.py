"""
Finite-difference velocity for tracked points.

Each tracked point (e.g. the left index fingertip) keeps only its most recent
sample; a velocity is the one-step difference to that sample, rescaled to
px per physics step and clamped.
"""

import math
from dataclasses import dataclass
from typing import Dict, Hashable, Tuple


@dataclass
class TipSample:
    """Last observed canvas position of a tracked point."""

    x: float
    y: float
    t: float  # ms


class VelocityEstimator:
    """
    Per-identity velocity estimation with last-sample semantics.

    Attributes:
        step_ms: Physics step duration used to convert px/ms to px/step
        max_speed: Magnitude clamp in px per step
    """

    def __init__(self, step_ms: float = 1000.0 / 60.0, max_speed: float = 15.0):
        self.step_ms = step_ms
        self.max_speed = max_speed
        self.samples: Dict[Hashable, TipSample] = {}

    def estimate(self, identity: Hashable, pos: Tuple[float, float], now_ms: float) -> Tuple[float, float]:
        """
        Estimate the velocity of a tracked point and store the new sample.

        Args:
            identity: Key of the tracked point, e.g. ("Left", 8)
            pos: Current canvas position (x, y)
            now_ms: Current time in ms

        Returns:
            (vx, vy) in px per step; (0, 0) the first time an identity is seen
        """
        prev = self.samples.get(identity)
        vx, vy = 0.0, 0.0
        if prev is not None:
            dt = max(1.0, now_ms - prev.t)
            vx = (pos[0] - prev.x) / dt * self.step_ms
            vy = (pos[1] - prev.y) / dt * self.step_ms

        self.samples[identity] = TipSample(pos[0], pos[1], now_ms)

        speed = math.hypot(vx, vy)
        if speed > self.max_speed:
            k = self.max_speed / speed
            vx *= k
            vy *= k
        return vx, vy
