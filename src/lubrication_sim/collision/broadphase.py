# MIT License (see LICENSE)
"""
Broadphase pair search using spatial hashing.

Spheres are hashed into a uniform 3D grid by their enlarged bounding boxes
(radius scaled by the detection factor, so that pairs are found before the
surfaces touch and the film can be resolved). Only spheres sharing a cell
are returned as candidate pairs.

Key concepts:
- AABB (Axis-Aligned Bounding Box): Conservative bounding region of a sphere.
- Spatial hashing: O(1) expected cell lookup for broad phase culling.
- Periodic domains: a minimum-image search replaces the grid.
"""
from __future__ import annotations
from collections import defaultdict
from typing import Iterator

import numpy as np

from ..types import PeriodicCell, SphereBody


def aabb_for_body(body: SphereBody, factor: float = 1.0) -> tuple[np.ndarray, np.ndarray]:
    """
    Bounding box (lower corner, upper corner) of a sphere of radius factor·r.
    """
    r = factor * body.radius
    return body.position - r, body.position + r


def within_detection(b1: SphereBody, b2: SphereBody, factor: float, shift2: np.ndarray | None = None) -> bool:
    """Whether the enlarged spheres of b1 and b2 (image shifted by shift2) overlap."""
    p2 = b2.position if shift2 is None else b2.position + shift2
    d = p2 - b1.position
    reach = factor * (b1.radius + b2.radius)
    return float(np.dot(d, d)) <= reach * reach


class SpatialHashBroadphase:
    """
    Spatial hash grid for broadphase pair search.
    
    Partitions space into cubic cells of uniform size. Spheres are inserted
    into all cells their enlarged AABB overlaps, and pairs are generated
    from spheres sharing at least one cell.
    
    Attributes:
        cell: The size of each grid cell in world units.
        
    Example:
        broadphase = SpatialHashBroadphase(cell_size=2e-3)
        for a, b in broadphase.pairs(scene.bodies, factor=1.5):
            ...
    """
    
    def __init__(self, cell_size: float = 1.0) -> None:
        """
        Initialize the spatial hash grid.
        
        Args:
            cell_size: Size of each grid cell. Best around the largest
                       enlarged diameter.
        """
        if cell_size <= 0:
            raise ValueError(f"Cell size must be positive, got {cell_size}")
        self.cell = float(cell_size)

    def _cells_for_aabb(self, lo: np.ndarray, hi: np.ndarray) -> Iterator[tuple[int, int, int]]:
        """Yield all grid cell coordinates that overlap with an AABB."""
        cs = self.cell
        i0 = np.floor(lo / cs).astype(int)
        i1 = np.floor(hi / cs).astype(int)
        for ix in range(i0[0], i1[0] + 1):
            for iy in range(i0[1], i1[1] + 1):
                for iz in range(i0[2], i1[2] + 1):
                    yield (ix, iy, iz)

    def pairs(self, bodies: list[SphereBody], factor: float = 1.0) -> list[tuple[SphereBody, SphereBody]]:
        """
        Find all candidate pairs among the given spheres.
        
        Returns:
            List of (bodyA, bodyB) with bodyA.id < bodyB.id, in deterministic
            order, without duplicates.
        """
        grid: dict[tuple[int, int, int], list[SphereBody]] = defaultdict(list)
        
        for b in bodies:
            lo, hi = aabb_for_body(b, factor)
            for c in self._cells_for_aabb(lo, hi):
                grid[c].append(b)
        
        seen: set[tuple[int, int]] = set()
        out: list[tuple[SphereBody, SphereBody]] = []
        
        for bs in grid.values():
            bs = sorted(bs, key=lambda x: x.id)
            for i in range(len(bs)):
                for j in range(i + 1, len(bs)):
                    a, b = bs[i], bs[j]
                    key = (a.id, b.id)
                    if key in seen:
                        continue
                    seen.add(key)
                    out.append((a, b))
        
        out.sort(key=lambda p: (p[0].id, p[1].id))
        return out


def periodic_pairs(
    bodies: list[SphereBody],
    cell: PeriodicCell,
    factor: float = 1.0,
) -> list[tuple[SphereBody, SphereBody, np.ndarray]]:
    """
    Candidate pairs in a periodic cell, using the minimum image of body B.
    
    O(N²); periodic samples in this setting are small.
    
    Returns:
        List of (bodyA, bodyB, cell_dist) with bodyA.id < bodyB.id, where
        bodyB's image at bodyB.position + cell.shift(cell_dist) is the one
        within detection range.
    """
    ordered = sorted(bodies, key=lambda x: x.id)
    out = []
    for i in range(len(ordered)):
        a = ordered[i]
        for j in range(i + 1, len(ordered)):
            b = ordered[j]
            cell_dist = cell.nearest_image(a.position, b.position)
            if within_detection(a, b, factor, cell.shift(cell_dist)):
                out.append((a, b, cell_dist))
    return out
