"""
Emission controllers: when, where and how many travelers to spawn.

Each controller watches one body region and is called once per frame. A
per-controller EmissionState carries the frame phase used for cadence
gating. Controllers never talk to each other; they only share the pool, the
path builder and the velocity estimator.
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import POSE_DEPTH_SCALE, FlowConfig
from .geometry import CoordinateMapper, Point, midpoint
from .landmarks import (
    HAND_TIPS,
    LEFT_EYE,
    LEFT_FOOT,
    MOUTH_LEFT,
    MOUTH_RIGHT,
    RIGHT_EYE,
    RIGHT_FOOT,
    LandmarkFrame,
    landmark_at,
)
from .physics import PhysicsWorld
from .pool import TravelerPool
from .traveler import Traveler
from .velocity import VelocityEstimator
from .waypoints import Region, WaypointBuilder


HANDEDNESS_REGION = {
    "left": Region.LEFT_ARM,
    "right": Region.RIGHT_ARM,
}


@dataclass
class EmissionState:
    """Frame phase of one controller, advanced once per tick."""

    phase: int = 0

    def advance(self):
        self.phase += 1


class TravelerFactory:
    """
    Builds travelers wired to the shared world and path table.

    Attributes:
        world: Physics world the bodies are created in
        paths: Live path table
        mapper: Normalized -> canvas mapper used by the controllers
        config: Run configuration
        rng: Random source for jitter and age resets
    """

    def __init__(self, world: PhysicsWorld, paths: WaypointBuilder, mapper: CoordinateMapper,
                 config: FlowConfig, rng: Optional[random.Random] = None):
        self.world = world
        self.paths = paths
        self.mapper = mapper
        self.config = config
        self.rng = rng or random.Random()

    def spawn(self, region: Region, pos: Point, vel: Tuple[float, float], depth: float) -> Traveler:
        cfg = self.config
        return Traveler(
            self.world,
            self.paths,
            region,
            pos[0],
            pos[1],
            vx=vel[0],
            vy=vel[1],
            depth=depth,
            max_age=cfg.max_age,
            close_distance=cfg.close_distance,
            force_distance_max=cfg.force_distance_max,
            force_range=(cfg.force_min, cfg.force_max),
            age_reset=cfg.leg_age_reset,
            body_options=cfg.body,
            rng=self.rng,
        )


class Emitter:
    """
    Base class for emission controllers.

    Subclasses implement emit(); gate() tells whether this frame is one of
    the controller's spawning frames.

    Attributes:
        name: Unique controller name (also keys its EmissionState)
        every: Spawn on every n-th frame
    """

    name: str

    def __init__(self, name: str, factory: TravelerFactory, estimator: VelocityEstimator, every: int = 1):
        if every < 1:
            raise ValueError(f"every must be at least 1, got {every}")
        self.name = name
        self.factory = factory
        self.estimator = estimator
        self.every = every

    def gate(self, state: EmissionState) -> bool:
        return state.phase % self.every == 0

    def emit(self, frame: Optional[LandmarkFrame], pool: TravelerPool, state: EmissionState, now_ms: float) -> int:
        """
        Spawn this frame's travelers into the pool.

        Args:
            frame: Latest landmark frame, or None
            pool: Destination pool
            state: This controller's emission state
            now_ms: Current time in ms (for velocity estimation)

        Returns:
            Number of travelers spawned
        """
        raise NotImplementedError

    def _jittered(self, pos: Point, vel: Tuple[float, float]) -> Tuple[Point, Tuple[float, float]]:
        rng = self.factory.rng
        j = self.factory.config.spawn_jitter
        vj = self.factory.config.velocity_jitter
        return (
            (pos[0] + rng.uniform(-j, j), pos[1] + rng.uniform(-j, j)),
            (vel[0] + rng.uniform(-vj, vj), vel[1] + rng.uniform(-vj, vj)),
        )


class HandEmitter(Emitter):
    """
    One traveler per fingertip (thumb included) of every detected hand.

    Handedness picks the arm path; each fingertip has its own velocity
    history keyed by (handedness, landmark index).
    """

    def __init__(self, factory: TravelerFactory, estimator: VelocityEstimator, every: int = 2):
        super().__init__("hands", factory, estimator, every=every)

    def emit(self, frame, pool, state, now_ms) -> int:
        if frame is None or not frame.hands or not self.gate(state):
            return 0
        spawned = 0
        for hand in frame.hands:
            side = hand.handedness.lower()
            region = HANDEDNESS_REGION.get(side)
            if region is None:
                continue
            for tip_index in HAND_TIPS:
                tip = landmark_at(hand.landmarks, tip_index)
                if tip is None:
                    continue
                pos = self.factory.mapper.to_canvas(tip)
                vel = self.estimator.estimate((side, tip_index), pos, now_ms)
                pool.add(self.factory.spawn(region, pos, vel, tip.z))
                spawned += 1
        return spawned


class MouthEmitter(Emitter):
    """A small puff of travelers from the mouth center on every frame with a pose."""

    def __init__(self, factory: TravelerFactory, estimator: VelocityEstimator, every: int = 1, count: int = 2):
        super().__init__("mouth", factory, estimator, every=every)
        self.count = count

    def emit(self, frame, pool, state, now_ms) -> int:
        if frame is None or not self.gate(state):
            return 0
        pose = frame.first_pose()
        left = landmark_at(pose, MOUTH_LEFT)
        right = landmark_at(pose, MOUTH_RIGHT)
        if left is None or right is None:
            return 0

        mapper = self.factory.mapper
        center = midpoint(mapper.to_canvas(left), mapper.to_canvas(right))
        depth = (left.z + right.z) / 2 * POSE_DEPTH_SCALE
        base = self.estimator.estimate(("mouth", 0), center, now_ms)
        for _ in range(self.count):
            pos, vel = self._jittered(center, base)
            pool.add(self.factory.spawn(Region.MOUTH, pos, vel, depth))
        return self.count


class EyeEmitter(Emitter):
    """Travelers from both eyes; they share the mouth path but skip its first point."""

    def __init__(self, factory: TravelerFactory, estimator: VelocityEstimator, every: int = 3, count: int = 2):
        super().__init__("eyes", factory, estimator, every=every)
        self.count = count

    def emit(self, frame, pool, state, now_ms) -> int:
        if frame is None or not self.gate(state):
            return 0
        pose = frame.first_pose()
        if pose is None:
            return 0
        spawned = 0
        for index in (LEFT_EYE, RIGHT_EYE):
            eye = landmark_at(pose, index)
            if eye is None:
                continue
            pos = self.factory.mapper.to_canvas(eye)
            depth = eye.z * POSE_DEPTH_SCALE
            base = self.estimator.estimate(("eyes", index), pos, now_ms)
            for _ in range(self.count):
                p, v = self._jittered(pos, base)
                pool.add(self.factory.spawn(Region.EYES, p, v, depth))
                spawned += 1
        return spawned


class LegEmitter(Emitter):
    """Travelers rising from each foot through knee, hip and shoulder."""

    FEET = ((LEFT_FOOT, Region.LEFT_LEG), (RIGHT_FOOT, Region.RIGHT_LEG))

    def __init__(self, factory: TravelerFactory, estimator: VelocityEstimator, every: int = 3, count: int = 1):
        super().__init__("legs", factory, estimator, every=every)
        self.count = count

    def emit(self, frame, pool, state, now_ms) -> int:
        if frame is None or not self.gate(state):
            return 0
        pose = frame.first_pose()
        if pose is None:
            return 0
        spawned = 0
        for index, region in self.FEET:
            foot = landmark_at(pose, index)
            if foot is None:
                continue
            pos = self.factory.mapper.to_canvas(foot)
            depth = foot.z * POSE_DEPTH_SCALE
            base = self.estimator.estimate(("legs", index), pos, now_ms)
            for _ in range(self.count):
                p, v = self._jittered(pos, base)
                pool.add(self.factory.spawn(region, p, v, depth))
                spawned += 1
        return spawned
