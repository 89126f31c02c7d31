"""
The live traveler collection.
"""

from typing import List

from .physics import PhysicsWorld
from .traveler import Traveler


class TravelerPool:
    """
    Owns every live traveler and the registration of its body in the world.

    Per frame: update, then draw, then prune. Iteration runs from the end of
    the list so dead travelers can be removed in place.
    """

    def __init__(self, world: PhysicsWorld):
        self.world = world
        self.travelers: List[Traveler] = []

    def add(self, traveler: Traveler):
        self.world.add(traveler.body)
        self.travelers.append(traveler)

    def step(self, renderer=None) -> int:
        """
        Update, draw and prune every traveler once.

        Args:
            renderer: Optional object with draw_traveler(traveler)

        Returns:
            Number of travelers removed this frame
        """
        pruned = 0
        for i in range(len(self.travelers) - 1, -1, -1):
            t = self.travelers[i]
            t.update()
            if renderer is not None:
                renderer.draw_traveler(t)
            if not t.alive:
                self.world.remove(t.body)
                del self.travelers[i]
                pruned += 1
        return pruned

    def clear(self):
        for t in self.travelers:
            self.world.remove(t.body)
        self.travelers = []

    def __len__(self) -> int:
        return len(self.travelers)

    def __iter__(self):
        return iter(self.travelers)
