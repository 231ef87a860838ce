# MIT License (see LICENSE)
"""
Arena of persistent interactions between sphere pairs.

An interaction is created the first time two spheres come within detection
range and carries its LubricationState until the lubrication law reports the
pair as inactive, at which point it is dropped with its state.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

import numpy as np

from ..lubrication.state import LubricationState
from ..materials import PairConstants, pair_constants
from ..types import PeriodicCell, SphereBody
from .broadphase import SpatialHashBroadphase, periodic_pairs, within_detection
from .geometry import SphereContactGeometry

# Tuple[int, int] where id1 < id2
InteractionKey = Tuple[int, int]


@dataclass
class Interaction:
    """
    A persistent sphere pair.
    
    Attributes:
        id1, id2: Body ids, id1 < id2.
        constants: Material-derived constants, fixed for the pair's lifetime.
        state: Persistent lubrication state.
        cell_dist: Periodic image index of body 2 (zero if not periodic).
        prev_normal: Contact normal of the previous step.
        geometry: Geometry of the last evaluated step.
    """
    id1: int
    id2: int
    constants: PairConstants
    state: LubricationState = field(default_factory=LubricationState)
    cell_dist: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.int64))
    prev_normal: np.ndarray | None = None
    geometry: SphereContactGeometry | None = None

    @property
    def key(self) -> InteractionKey:
        return (self.id1, self.id2)


class InteractionManager:
    """
    Creates, stores and drops interactions, keyed by (id1, id2).
    
    Example:
        manager = InteractionManager()
        active = manager.update(bodies, cell=None, viscosity=1e-3, roughness=1e-3)
        ...
        manager.drop(dropped_keys)
    """

    def __init__(self) -> None:
        self.interactions: Dict[InteractionKey, Interaction] = {}

    def __len__(self) -> int:
        return len(self.interactions)

    def __iter__(self) -> Iterator[Interaction]:
        return iter(self.interactions.values())

    def __contains__(self, key: InteractionKey) -> bool:
        return key in self.interactions

    def get(self, id1: int, id2: int) -> Interaction | None:
        """Interaction between two bodies, in either order."""
        key = (id1, id2) if id1 < id2 else (id2, id1)
        return self.interactions.get(key)

    def _create(self, a: SphereBody, b: SphereBody, viscosity: float, roughness: float) -> Interaction:
        consts = pair_constants(a.material, b.material, a.radius, b.radius, viscosity, roughness)
        return Interaction(id1=a.id, id2=b.id, constants=consts)

    def update(
        self,
        bodies: List[SphereBody],
        cell: PeriodicCell | None,
        viscosity: float,
        roughness: float,
        detection_factor: float = 1.5,
    ) -> List[Interaction]:
        """
        Register new pairs within detection range.
        
        Existing interactions are kept whatever the distance; only the law
        drops them.
        
        Returns:
            All interactions, sorted by key for deterministic evaluation order.
        """
        if bodies:
            if cell is None:
                max_r = max(b.radius for b in bodies)
                broadphase = SpatialHashBroadphase(cell_size=2.0 * detection_factor * max_r)
                for a, b in broadphase.pairs(bodies, detection_factor):
                    if (a.id, b.id) in self.interactions:
                        continue
                    if within_detection(a, b, detection_factor):
                        self.interactions[(a.id, b.id)] = self._create(a, b, viscosity, roughness)
            else:
                for a, b, cell_dist in periodic_pairs(bodies, cell, detection_factor):
                    if (a.id, b.id) in self.interactions:
                        continue
                    inter = self._create(a, b, viscosity, roughness)
                    inter.cell_dist = cell_dist
                    self.interactions[(a.id, b.id)] = inter

        return [self.interactions[k] for k in sorted(self.interactions)]

    def drop(self, keys: List[InteractionKey]) -> None:
        """Remove interactions and their state."""
        for key in keys:
            self.interactions.pop(key, None)
