"""
pygame drawing for the traveler simulation.

The canvas is never cleared: each frame lays a translucent black sheet over
the previous one, which leaves fading trails behind the travelers.
"""

from typing import Optional, Sequence

import cv2
import numpy as np
import pygame

from .config import TRAIL_BLUR_KERNEL, TRAIL_FADE_ALPHA, VIDEO_TINT_ALPHA
from .geometry import CoordinateMapper
from .landmarks import POSE_CONNECTIONS, Landmark, landmark_at
from .traveler import Traveler
from .video import VideoSampler


class FlowRenderer:
    """
    Draws travelers onto a pygame surface.

    Attributes:
        surface: Target canvas
        sampler: Video color lookup tinting every disc
        show_video: Blend a faint mirrored camera image under the travelers
        show_skeleton: Draw the pose skeleton for debugging
        show_fps: Draw the smoothed frame rate
        blur_trails: Soften the trails with a small box blur each frame
    """

    def __init__(self, surface: pygame.Surface, sampler: VideoSampler):
        self.surface = surface
        self.sampler = sampler
        self.show_video = False
        self.show_skeleton = False
        self.show_fps = False
        self.blur_trails = False
        self.fps_avg = 60.0
        size = surface.get_size()
        self._fade = pygame.Surface(size, pygame.SRCALPHA)
        self._fade.fill((0, 0, 0, TRAIL_FADE_ALPHA))
        self._layer = pygame.Surface(size, pygame.SRCALPHA)
        self._font = None

    def begin_frame(self, frame_rgb: Optional[np.ndarray] = None):
        self.surface.blit(self._fade, (0, 0))
        if self.blur_trails:
            self._blur()
        if self.show_video and frame_rgb is not None:
            self._draw_video(frame_rgb)
        self._layer.fill((0, 0, 0, 0))

    def draw_traveler(self, traveler: Traveler):
        look = traveler.appearance()
        if look.radius <= 0 or look.alpha <= 0:
            return
        r, g, b, _ = self.sampler.color_at(look.x, look.y)
        pygame.draw.circle(self._layer, (r, g, b, int(look.alpha)), (int(look.x), int(look.y)), max(1, int(round(look.radius))))

    def end_frame(self, pose: Optional[Sequence[Landmark]] = None, mapper: Optional[CoordinateMapper] = None, fps: Optional[float] = None):
        self.surface.blit(self._layer, (0, 0))
        if self.show_skeleton and pose is not None and mapper is not None:
            self._draw_skeleton(pose, mapper)
        if fps is not None:
            self.fps_avg = 0.98 * self.fps_avg + 0.02 * fps
            if self.show_fps:
                self._draw_text(f"FPS: {self.fps_avg:.2f}", (40, 18))

    def _blur(self):
        pixels = pygame.surfarray.array3d(self.surface)
        pygame.surfarray.blit_array(self.surface, cv2.blur(pixels, (TRAIL_BLUR_KERNEL, TRAIL_BLUR_KERNEL)))

    def _draw_video(self, frame_rgb: np.ndarray):
        h, w = frame_rgb.shape[:2]
        image = pygame.image.frombuffer(np.ascontiguousarray(frame_rgb).tobytes(), (w, h), "RGB")
        image = pygame.transform.flip(image, True, False)
        image = pygame.transform.smoothscale(image, self.surface.get_size())
        image.set_alpha(VIDEO_TINT_ALPHA)
        self.surface.blit(image, (0, 0))

    def _draw_skeleton(self, pose: Sequence[Landmark], mapper: CoordinateMapper):
        for a, b in POSE_CONNECTIONS:
            pa = landmark_at(pose, a)
            pb = landmark_at(pose, b)
            if pa is None or pb is None:
                continue
            pygame.draw.line(self.surface, (0, 0, 139), mapper.to_canvas(pa), mapper.to_canvas(pb), 2)

    def _draw_text(self, text: str, pos):
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, 20)
        self.surface.blit(self._font.render(text, True, (255, 255, 255)), pos)


def surface_to_bgr(surface: pygame.Surface) -> np.ndarray:
    """Copy a surface into an OpenCV-ready BGR array of shape (h, w, 3)."""
    rgb = pygame.surfarray.array3d(surface).transpose(1, 0, 2)
    return np.ascontiguousarray(rgb[..., ::-1])
