# MIT License (see LICENSE)
"""
Utilities for calculating physical invariants and conserved quantities.

Used for verifying simulation correctness. Pair forces obey Newton's third
law, so the net force of a step's buffer must vanish and the total momentum
of free spheres must be conserved.
"""
from __future__ import annotations
import numpy as np

from ..types import SphereBody
from .accumulator import ForceBuffer


def kinetic_energy(bodies: list[SphereBody]) -> float:
    """
    Calculate the total kinetic energy of a system of spheres.
    
    T = Σ (0.5 * m * v² + 0.5 * I * ω²)
    
    Bodies with mass ≤ 0 (prescribed motion) are skipped.
    """
    ke = 0.0
    for b in bodies:
        if b.mass <= 0:
            continue
        ke += 0.5 * b.mass * float(np.dot(b.velocity, b.velocity))
        ke += 0.5 * b.inertia * float(np.dot(b.angular_velocity, b.angular_velocity))
    return ke


def linear_momentum(bodies: list[SphereBody]) -> np.ndarray:
    """
    Calculate the total linear momentum of a system.
    
    P = Σ (m * v)
    """
    p = np.zeros(3, dtype=np.float64)
    for b in bodies:
        if b.mass <= 0:
            continue
        p += b.mass * b.velocity
    return p


def net_force(buffer: ForceBuffer) -> np.ndarray:
    """Sum of all forces in a buffer. Zero up to round-off for pair forces."""
    total = np.zeros(3, dtype=np.float64)
    for f in buffer.forces.values():
        total += f
    return total
