# MIT License (see LICENSE)
"""
Evaluation of all interactions of a step.

Each interaction only reads body states and writes its own LubricationState,
so pairs can be evaluated by parallel workers. Every worker accumulates into
its own ForceBuffer; the partial buffers are merged in batch order once all
workers are done, which is the barrier required before stresses are read.
"""
from __future__ import annotations
import os
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Mapping, Sequence

import numpy as np

from ..collision.geometry import sphere_contact_geometry
from ..core.accumulator import ForceBuffer
from ..types import PeriodicCell, SphereBody
from .law import LubricationLaw

if TYPE_CHECKING:
    from ..collision.manager import Interaction, InteractionKey

# Below this many interactions the pool overhead dominates; run sequentially.
_PARALLEL_MIN_INTERACTIONS = 256


def resolve_n_jobs(n_jobs: int) -> int:
    """-1 means all CPU cores; anything below 1 means sequential."""
    if n_jobs == -1:
        n_jobs = os.cpu_count() or 1
    return max(1, n_jobs)


def _evaluate_batch(
    law: LubricationLaw,
    batch: Sequence["Interaction"],
    bodies: Mapping[int, SphereBody],
    dt: float,
    cell: PeriodicCell | None,
) -> tuple[ForceBuffer, list["InteractionKey"]]:
    buf = ForceBuffer()
    dropped: list["InteractionKey"] = []
    for inter in batch:
        b1, b2 = bodies[inter.id1], bodies[inter.id2]
        if cell is not None:
            shift2 = cell.shift(inter.cell_dist)
            shift_vel = cell.shift_velocity(inter.cell_dist)
        else:
            shift2 = shift_vel = None
        geom = sphere_contact_geometry(b1, b2, dt, inter.prev_normal, shift2, shift_vel)
        inter.prev_normal = geom.normal
        inter.geometry = geom
        if not law.go(inter, geom, dt, buf):
            dropped.append(inter.key)
    return buf, dropped


def evaluate_interactions(
    law: LubricationLaw,
    interactions: Sequence["Interaction"],
    bodies: Mapping[int, SphereBody],
    dt: float,
    cell: PeriodicCell | None = None,
    n_jobs: int = 1,
) -> tuple[ForceBuffer, list["InteractionKey"]]:
    """
    Evaluate every interaction once and reduce their forces.
    
    Args:
        law: The lubrication law.
        interactions: Interactions to evaluate, in a deterministic order.
        bodies: Sphere bodies by id.
        dt: Timestep.
        cell: Periodic cell, None for an open domain.
        n_jobs: Worker threads. 1 = sequential, -1 = all CPU cores.
    
    Returns:
        (forces, dropped): merged force/torque buffer of the step, and the
        keys of interactions the law reported as inactive.
    """
    n_jobs = resolve_n_jobs(n_jobs)
    if n_jobs < 2 or len(interactions) < _PARALLEL_MIN_INTERACTIONS:
        return _evaluate_batch(law, interactions, bodies, dt, cell)

    batch_size = max(1, int(np.ceil(len(interactions) / n_jobs)))
    batches = [interactions[i:i + batch_size] for i in range(0, len(interactions), batch_size)]

    with ThreadPoolExecutor(max_workers=n_jobs) as pool:
        results = list(pool.map(lambda b: _evaluate_batch(law, b, bodies, dt, cell), batches))

    forces = ForceBuffer()
    dropped: list["InteractionKey"] = []
    for buf, keys in results:
        forces.merge(buf)
        dropped.extend(keys)
    return forces, dropped
