# MIT License (see LICENSE)
"""
Time-stepping of sphere motion.

Available integrators:
- leapfrog_step: Semi-implicit (symplectic) Euler for Newton-Euler
  equations, velocities first then positions. Forces are those merged in
  the step's ForceBuffer.
- kinematic_step: Prescribed motion, positions advance with the current
  velocities whatever the forces.

Reference:
    Semi-implicit Euler: https://en.wikipedia.org/wiki/Semi-implicit_Euler_method
"""
from __future__ import annotations

import numpy as np

from ..types import SphereBody


def leapfrog_step(body: SphereBody, force: np.ndarray, torque: np.ndarray, dt: float) -> None:
    """
    Advance a sphere by dt under constant force and torque.
    
        v(t+dt) = v(t) + F/m dt,        x(t+dt) = x(t) + v(t+dt) dt
        ω(t+dt) = ω(t) + T/I dt
    
    Bodies with mass ≤ 0 keep their velocities (prescribed motion).
    
    Args:
        body: Sphere to integrate (modified in-place).
        force: Net force on the sphere.
        torque: Net torque on the sphere.
        dt: Timestep in seconds.
    """
    body.velocity = body.velocity + force * (body.inv_mass * dt)
    body.angular_velocity = body.angular_velocity + torque * (body.inv_inertia * dt)
    body.position = body.position + body.velocity * dt


def kinematic_step(body: SphereBody, dt: float) -> None:
    """Advance a sphere along its current velocity."""
    body.position = body.position + body.velocity * dt
