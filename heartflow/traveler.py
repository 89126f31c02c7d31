"""
Travelers: short-lived particles that follow a waypoint path to the heart.

A traveler is either seeking waypoint `index` of its region's path or dead.
Each step it re-reads the live path (paths are rebuilt every frame), pulls
its body toward the current waypoint, and moves on to the next waypoint once
it is close enough or has spent too long on the current leg.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from . import config
from .config import BodyOptions
from .geometry import Point, distance, map_range
from .physics import Body, PhysicsWorld
from .waypoints import SKIP_FIRST, Region, WaypointBuilder


def depth_to_size(depth: float) -> float:
    """Visual diameter for a landmark depth: nearer (more negative) is bigger."""
    return map_range(depth, config.DEPTH_NEAR, config.DEPTH_FAR, config.SIZE_NEAR, config.SIZE_FAR, clamp=True)


@dataclass(frozen=True)
class Appearance:
    """What the renderer needs to draw one traveler."""

    x: float
    y: float
    radius: float
    alpha: float


class Traveler:
    """
    A particle following its region's waypoint path.

    Attributes:
        region: Source region, selects the path
        body: Physics body handle, owned for the traveler's lifetime
        depth: Landmark depth the size is derived from
        age: Steps spent on the current leg (reset partially on each new leg)
        max_age: Age beyond which the current leg is abandoned
        index: Current waypoint index
        target: Current waypoint, or None while the path is empty
        alive: False once the last waypoint has been passed
    """

    def __init__(
        self,
        world: PhysicsWorld,
        paths: WaypointBuilder,
        region: Region,
        x: float,
        y: float,
        vx: float = 0.0,
        vy: float = 0.0,
        depth: float = 0.0,
        max_age: int = config.MAX_AGE,
        close_distance: float = config.CLOSE_DISTANCE,
        force_distance_max: float = config.FORCE_DISTANCE_MAX,
        force_range: Tuple[float, float] = (config.FORCE_MIN, config.FORCE_MAX),
        age_reset: Tuple[float, float] = config.LEG_AGE_RESET,
        body_options: Optional[BodyOptions] = None,
        rng: Optional[random.Random] = None,
    ):
        self.world = world
        self.paths = paths
        self.region = region
        self.depth = depth
        self.age = 0
        self.max_age = max_age
        self.close_distance = close_distance
        self.force_distance_max = force_distance_max
        self.force_range = force_range
        self.age_reset = age_reset
        self.rng = rng or random

        path = paths.path_for(region)
        self.index = self._first_index(path)
        self.target: Optional[Point] = path[self.index] if self.index < len(path) else None
        self.alive = True

        self.body: Body = world.create_circle(x, y, self.size / 2, body_options)
        world.set_velocity(self.body, vx, vy)

    @property
    def size(self) -> float:
        return depth_to_size(self.depth)

    def _first_index(self, path) -> int:
        return 1 if self.region in SKIP_FIRST and len(path) > 1 else 0

    def set_depth(self, depth: float):
        """
        Change depth; the body is rescaled on the next update.

        The emitters fix depth at spawn and never call this. It is the hook
        for callers that keep a traveler attached to a moving landmark.
        """
        self.depth = depth

    @property
    def state(self):
        """("seeking", index) while alive, "dead" afterwards."""
        return ("seeking", self.index) if self.alive else "dead"

    def update(self):
        """Advance one simulation step."""
        if not self.alive:
            return

        path = self.paths.path_for(self.region)
        # born before the path existed: still never visit the skipped waypoint
        if self.index == 0:
            self.index = self._first_index(path)
        self.target = path[self.index] if self.index < len(path) else None

        x, y = self.body.position
        d = None
        if self.target is not None:
            dx = self.target[0] - x
            dy = self.target[1] - y
            d = distance(self.target, (x, y))
            if d > config.MIN_FORCE_DISTANCE:
                # bounded pursuit: residual momentum is left to the physics step
                f = map_range(min(d, self.force_distance_max), 0.0, self.force_distance_max, *self.force_range)
                self.world.apply_force(self.body, (x, y), dx / d * f, dy / d * f)

        self._sync_radius()

        close = d is not None and d < self.close_distance
        stale = self.age > self.max_age
        if close or stale:
            self.index += 1
            if self.index >= len(path):
                self.alive = False
            else:
                lo, hi = self.age_reset
                self.age = self.rng.uniform(lo, hi) * self.max_age
                self.target = path[self.index]

        self.age += 1

    def _sync_radius(self):
        radius = self.size / 2
        if self.body.radius > 0 and not math.isclose(radius, self.body.radius):
            self.world.scale(self.body, radius / self.body.radius)

    def appearance(self) -> Appearance:
        """Position, radius and alpha, all fading out with age."""
        x, y = self.body.position
        diameter = map_range(self.age, 0, self.max_age, self.size, 0.0, clamp=True)
        alpha = map_range(self.age, 0, self.max_age, config.ALPHA_START, 0.0, clamp=True)
        return Appearance(x, y, diameter / 2, alpha)

    def __repr__(self):
        return f"Traveler({self.region.value}, {self.state}, age={self.age:.0f})"
