"""
heartflow - landmark-driven waypoint particles.

Travelers spawn at the hands, mouth, eyes and feet and flow along body paths
into a heart point derived from the shoulders.
"""

from .config import BodyOptions, FlowConfig
from .engine import FlowEngine
from .landmarks import HandLandmarks, Landmark, LandmarkFrame
from .traveler import Traveler
from .waypoints import Region

__version__ = "0.1.0"

__all__ = [
    "BodyOptions",
    "FlowConfig",
    "FlowEngine",
    "HandLandmarks",
    "Landmark",
    "LandmarkFrame",
    "Region",
    "Traveler",
    "__version__",
]
