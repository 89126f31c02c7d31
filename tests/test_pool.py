import random

from conftest import FixedPaths

from heartflow.physics import PhysicsWorld
from heartflow.pool import TravelerPool
from heartflow.traveler import Traveler
from heartflow.waypoints import Region


class RecordingRenderer:
    def __init__(self):
        self.drawn = []

    def draw_traveler(self, traveler):
        self.drawn.append(traveler)


def make_pool(n=3):
    world = PhysicsWorld()
    paths = FixedPaths({Region.LEFT_ARM: [(500, 0), (600, 0)]})
    pool = TravelerPool(world)
    travelers = [Traveler(world, paths, Region.LEFT_ARM, i * 10.0, 0, rng=random.Random(i)) for i in range(n)]
    for t in travelers:
        pool.add(t)
    return world, pool, travelers


def test_add_registers_the_body():
    world, pool, travelers = make_pool()
    assert len(pool) == 3
    assert len(world) == 3
    assert all(t.body in world for t in travelers)


def test_step_draws_from_the_end():
    _, pool, travelers = make_pool()
    renderer = RecordingRenderer()
    assert pool.step(renderer) == 0
    assert renderer.drawn == travelers[::-1]


def test_dead_travelers_are_pruned_with_their_bodies():
    world, pool, travelers = make_pool()
    travelers[1].alive = False
    renderer = RecordingRenderer()
    assert pool.step(renderer) == 1
    assert list(pool) == [travelers[0], travelers[2]]
    assert travelers[1].body not in world
    assert len(world) == 2
    # drawn once more on the frame it died
    assert travelers[1] in renderer.drawn


def test_clear_unregisters_everything():
    world, pool, _ = make_pool()
    pool.clear()
    assert len(pool) == 0
    assert len(world) == 0
