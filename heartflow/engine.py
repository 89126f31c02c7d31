"""
Flow Engine - per-frame orchestration of the traveler simulation.

One call to FlowEngine.process() is one frame tick, run strictly in order:

- Waypoint rebuild from the newest landmark frame
- Emission by every registered controller (each with its own phase)
- Pool update / render / prune
- Physics step

Nothing in a tick blocks or waits for fresh landmarks: a None frame simply
keeps the previous paths and spawns nothing.
"""

import random
from typing import Dict, List, Optional

from .config import FlowConfig
from .emitters import (
    EmissionState,
    Emitter,
    EyeEmitter,
    HandEmitter,
    LegEmitter,
    MouthEmitter,
    TravelerFactory,
)
from .geometry import CoordinateMapper
from .landmarks import LandmarkFrame
from .physics import PhysicsWorld
from .pool import TravelerPool
from .velocity import VelocityEstimator
from .waypoints import WaypointBuilder


class FlowEngine:
    """
    Main orchestrator for the traveler simulation.

    The FlowEngine owns the shared state every component works on:
    - the coordinate mapper and the waypoint path table
    - the fingertip/face velocity history
    - the physics world and the traveler pool
    - one EmissionState per registered controller

    Attributes:
        config: Run configuration
        frame_count: Ticks processed so far
    """

    def __init__(self, config: Optional[FlowConfig] = None, rng: Optional[random.Random] = None):
        """
        Initialize the engine with no controllers registered.

        Args:
            config: Run configuration (defaults to FlowConfig())
            rng: Random source shared by all spawned travelers
        """
        self.config = config or FlowConfig()
        cfg = self.config
        self.mapper = CoordinateMapper(cfg.width, cfg.height)
        self.paths = WaypointBuilder(self.mapper, heart_offset=cfg.heart_offset)
        self.estimator = VelocityEstimator(step_ms=cfg.step_ms, max_speed=cfg.max_speed)
        bounds = (cfg.width, cfg.height) if cfg.walls else None
        self.world = PhysicsWorld(step_ms=cfg.step_ms, bounds=bounds)
        self.pool = TravelerPool(self.world)
        self.factory = TravelerFactory(self.world, self.paths, self.mapper, cfg, rng=rng)
        self.emitters: List[Emitter] = []
        self.states: Dict[str, EmissionState] = {}
        self.frame_count = 0

    @classmethod
    def default(cls, config: Optional[FlowConfig] = None, rng: Optional[random.Random] = None) -> "FlowEngine":
        """Engine with the hand, mouth, eye (and, unless disabled, leg) controllers."""
        engine = cls(config, rng=rng)
        cfg = engine.config
        engine.register_emitter(HandEmitter(engine.factory, engine.estimator, every=cfg.hand_every))
        engine.register_emitter(MouthEmitter(engine.factory, engine.estimator, every=cfg.mouth_every, count=cfg.mouth_count))
        engine.register_emitter(EyeEmitter(engine.factory, engine.estimator, every=cfg.eyes_every, count=cfg.eyes_count))
        if cfg.legs:
            engine.register_emitter(LegEmitter(engine.factory, engine.estimator, every=cfg.legs_every, count=cfg.legs_count))
        return engine

    def register_emitter(self, emitter: Emitter):
        if emitter.name in self.states:
            raise ValueError(f"emitter {emitter.name!r} is already registered")
        self.emitters.append(emitter)
        self.states[emitter.name] = EmissionState()

    def process(self, frame: Optional[LandmarkFrame], now_ms: float, renderer=None) -> Dict[str, int]:
        """
        Run one frame tick.

        Args:
            frame: Newest landmark frame, or None if the tracker has nothing
            now_ms: Current time in ms
            renderer: Optional object with draw_traveler(traveler)

        Returns:
            Dictionary with:
            - "spawned": travelers created this tick
            - "pruned": travelers removed this tick
            - "live": travelers alive after the tick
        """
        self.paths.rebuild(frame)

        spawned = 0
        for emitter in self.emitters:
            state = self.states[emitter.name]
            spawned += emitter.emit(frame, self.pool, state, now_ms)
            state.advance()

        pruned = self.pool.step(renderer)
        self.world.step()
        self.frame_count += 1

        return {"spawned": spawned, "pruned": pruned, "live": len(self.pool)}

    def reset(self):
        """Drop every traveler and restart the emission phases."""
        self.pool.clear()
        for name in self.states:
            self.states[name] = EmissionState()
        self.frame_count = 0
