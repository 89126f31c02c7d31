"""
Color lookup from the latest video frame.
"""

from typing import Optional, Tuple

import cv2
import numpy as np

from .geometry import map_range

WHITE = (255, 255, 255, 255)


class VideoSampler:
    """
    Samples the camera image under a canvas position.

    The frame is kept at a tiny resolution; lookups mirror x exactly like the
    canvas does, so a traveler takes the color of the body part under it.
    """

    def __init__(self, canvas_width: float, canvas_height: float, sample_size: Tuple[int, int] = (80, 60)):
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.sample_size = sample_size
        self.pixels: Optional[np.ndarray] = None  # RGB, (h, w, 3)

    def update(self, frame_bgr: np.ndarray):
        small = cv2.resize(frame_bgr, self.sample_size, interpolation=cv2.INTER_AREA)
        self.pixels = cv2.cvtColor(small, cv2.COLOR_BGR2RGB)

    def color_at(self, x: float, y: float) -> Tuple[int, int, int, int]:
        """RGBA under canvas point (x, y); opaque white until a frame arrives."""
        if self.pixels is None or self.pixels.size == 0:
            return WHITE
        h, w = self.pixels.shape[:2]
        vx = map_range(x, 0, self.canvas_width, w, 0)
        vy = map_range(y, 0, self.canvas_height, 0, h)
        vx = int(min(max(vx, 0), w - 1))
        vy = int(min(max(vy, 0), h - 1))
        r, g, b = self.pixels[vy, vx]
        return (int(r), int(g), int(b), 255)
