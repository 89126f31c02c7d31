"""
Waypoint paths from body extremities to the heart point.

The builder owns the path table. Every frame with a pose replaces the whole
table at once; frames without a pose leave it untouched so travelers already
in flight keep their targets.
"""

from enum import Enum
from typing import Dict, List, Optional

from .geometry import CoordinateMapper, Point, midpoint
from .landmarks import (
    LEFT_ELBOW,
    LEFT_FOOT,
    LEFT_HIP,
    LEFT_KNEE,
    LEFT_SHOULDER,
    LEFT_WRIST,
    MOUTH_LEFT,
    MOUTH_RIGHT,
    RIGHT_ELBOW,
    RIGHT_FOOT,
    RIGHT_HIP,
    RIGHT_KNEE,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    LandmarkFrame,
    landmark_at,
)


class Region(Enum):
    """Logical source of a traveler."""

    LEFT_ARM = "left_arm"
    RIGHT_ARM = "right_arm"
    MOUTH = "mouth"
    EYES = "eyes"
    LEFT_LEG = "left_leg"
    RIGHT_LEG = "right_leg"


# Eyes have no path of their own; they enter the mouth path past its first point
PATH_OF = {
    Region.LEFT_ARM: Region.LEFT_ARM,
    Region.RIGHT_ARM: Region.RIGHT_ARM,
    Region.MOUTH: Region.MOUTH,
    Region.EYES: Region.MOUTH,
    Region.LEFT_LEG: Region.LEFT_LEG,
    Region.RIGHT_LEG: Region.RIGHT_LEG,
}

# Regions whose travelers skip the first waypoint
SKIP_FIRST = {Region.MOUTH, Region.EYES}

WaypointPath = List[Point]

_REQUIRED = (
    LEFT_SHOULDER, RIGHT_SHOULDER, LEFT_ELBOW, RIGHT_ELBOW, LEFT_WRIST, RIGHT_WRIST,
    LEFT_HIP, RIGHT_HIP, LEFT_KNEE, RIGHT_KNEE, LEFT_FOOT, RIGHT_FOOT,
    MOUTH_LEFT, MOUTH_RIGHT,
)


def heart_point(left_shoulder: Point, right_shoulder: Point, offset: float = 50.0) -> Point:
    """Midpoint of the shoulders, pushed `offset` px down below the shoulder line."""
    x, y = midpoint(left_shoulder, right_shoulder)
    return (x, y + offset)


def path_for(region: Region, paths: Dict[Region, WaypointPath]) -> WaypointPath:
    """Resolve the path a region's travelers follow (empty before the first pose)."""
    return paths.get(PATH_OF[region], [])


def _empty_paths() -> Dict[Region, WaypointPath]:
    return {region: [] for region in set(PATH_OF.values())}


class WaypointBuilder:
    """
    Builds and holds the current waypoint paths.

    Attributes:
        mapper: Normalized -> canvas coordinate mapper
        heart_offset: Vertical offset of the heart below the shoulder line
        paths: Current table, Region -> path (replaced, never mutated)
        heart: Current heart point, or None before the first pose
    """

    def __init__(self, mapper: CoordinateMapper, heart_offset: float = 50.0):
        self.mapper = mapper
        self.heart_offset = heart_offset
        self.paths: Dict[Region, WaypointPath] = _empty_paths()
        self.heart: Optional[Point] = None

    def path_for(self, region: Region) -> WaypointPath:
        return path_for(region, self.paths)

    def rebuild(self, frame: Optional[LandmarkFrame]) -> Dict[Region, WaypointPath]:
        """
        Refresh every path from the first detected pose of the frame.

        Args:
            frame: Latest landmark frame (None or pose-less frames keep the old paths)

        Returns:
            The current path table
        """
        pose = frame.first_pose() if frame is not None else None
        if pose is None:
            return self.paths
        if any(landmark_at(pose, i) is None for i in _REQUIRED):
            return self.paths

        c = {i: self.mapper.to_canvas(pose[i]) for i in _REQUIRED}
        heart = heart_point(c[LEFT_SHOULDER], c[RIGHT_SHOULDER], self.heart_offset)
        mouth_center = midpoint(c[MOUTH_LEFT], c[MOUTH_RIGHT])

        paths = {
            # wrist first: fingertip travelers are born right next to it
            Region.LEFT_ARM: [c[LEFT_WRIST], c[LEFT_ELBOW], c[LEFT_SHOULDER], heart],
            Region.RIGHT_ARM: [c[RIGHT_WRIST], c[RIGHT_ELBOW], c[RIGHT_SHOULDER], heart],
            Region.MOUTH: [mouth_center, heart],
            Region.LEFT_LEG: [c[LEFT_FOOT], c[LEFT_KNEE], c[LEFT_HIP], c[LEFT_SHOULDER], heart],
            Region.RIGHT_LEG: [c[RIGHT_FOOT], c[RIGHT_KNEE], c[RIGHT_HIP], c[RIGHT_SHOULDER], heart],
        }
        self.paths = paths
        self.heart = heart
        return self.paths
