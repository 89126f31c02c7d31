"""
Minimal 2-D physics world for circle bodies.

Travelers only need a handful of operations from a physics engine: create a
circle, add/remove it, set its velocity, push it with a force, rescale it,
and read its position. Velocities are in px per step and forces follow the
usual step-based convention: dv = F / m * step_ms ** 2.

Body-body collisions are not simulated. Optional walls keep bodies on the
canvas, bouncing with the body's restitution.
"""

import math
from itertools import count
from typing import List, Optional, Tuple

from .config import BodyOptions

_ids = count(1)


class Body:
    """
    A circle body.

    Attributes:
        id: Unique handle id
        x, y: Position of the center
        vx, vy: Velocity in px per step
        radius: Collision radius
        mass: density * area
        options: Material
    """

    def __init__(self, x: float, y: float, radius: float, options: BodyOptions):
        self.id = next(_ids)
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0
        self.fx = 0.0
        self.fy = 0.0
        self.radius = radius
        self.options = options
        self.mass = options.density * math.pi * radius * radius

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def velocity(self) -> Tuple[float, float]:
        return (self.vx, self.vy)

    def __repr__(self):
        return f"Body(id={self.id}, pos=({self.x:.1f}, {self.y:.1f}), r={self.radius:.2f})"


class PhysicsWorld:
    """
    Holds registered bodies and advances them one step at a time.

    Attributes:
        step_ms: Step duration in ms
        bounds: (width, height) of the walled area, or None for no walls
    """

    def __init__(self, step_ms: float = 1000.0 / 60.0, bounds: Optional[Tuple[float, float]] = None):
        self.step_ms = step_ms
        self.bounds = bounds
        self.bodies: List[Body] = []

    def create_circle(self, x: float, y: float, radius: float, options: Optional[BodyOptions] = None) -> Body:
        """Create a circle body. It is not simulated until add() is called."""
        return Body(x, y, radius, options or BodyOptions())

    def add(self, body: Body):
        self.bodies.append(body)

    def remove(self, body: Body):
        try:
            self.bodies.remove(body)
        except ValueError:
            pass

    def __contains__(self, body: Body) -> bool:
        return body in self.bodies

    def __len__(self) -> int:
        return len(self.bodies)

    def set_velocity(self, body: Body, vx: float, vy: float):
        body.vx = vx
        body.vy = vy

    def apply_force(self, body: Body, point: Tuple[float, float], fx: float, fy: float):
        """
        Accumulate a force for the next step.

        Circles carry no angular state here, so the application point only
        documents where the push happens.
        """
        body.fx += fx
        body.fy += fy

    def scale(self, body: Body, factor: float):
        """Scale a body's radius in place; mass follows the new area."""
        body.radius *= factor
        body.mass *= factor * factor

    def step(self):
        """Integrate every registered body by one step and clear forces."""
        dt2 = self.step_ms * self.step_ms
        for body in self.bodies:
            damping = 1.0 - body.options.friction_air
            ax = body.fx / body.mass if body.mass > 0 else 0.0
            ay = body.fy / body.mass if body.mass > 0 else 0.0
            body.vx = body.vx * damping + ax * dt2
            body.vy = body.vy * damping + ay * dt2
            body.x += body.vx
            body.y += body.vy
            body.fx = 0.0
            body.fy = 0.0
            if self.bounds is not None:
                self._collide_walls(body)

    def _collide_walls(self, body: Body):
        w, h = self.bounds
        r = body.radius
        e = body.options.restitution
        keep = 1.0 - body.options.friction

        if body.x - r < 0:
            body.x = r
            body.vx = abs(body.vx) * e
            body.vy *= keep
        elif body.x + r > w:
            body.x = w - r
            body.vx = -abs(body.vx) * e
            body.vy *= keep
        if body.y - r < 0:
            body.y = r
            body.vy = abs(body.vy) * e
            body.vx *= keep
        elif body.y + r > h:
            body.y = h - r
            body.vy = -abs(body.vy) * e
            body.vx *= keep
