# MIT License (see LICENSE)
"""
Shear force of a lubricated pair.

The elastic shear force is carried from step to step. Before being
incremented it is co-rotated with the contact frame so that a rigid rotation
of the pair does not load it. In asperity contact the increment is elastic
and capped by Coulomb friction; in the lubricated regime the spring and the
film viscosity act in series (Maxwell element).
"""
from __future__ import annotations
import math
from dataclasses import dataclass

import numpy as np

from ..util import cross3, norm


@dataclass(frozen=True)
class ShearForces:
    """
    Shear force applied to body 1 (body 2 receives the opposite).

    Attributes:
        total: Force applied and carried to the next step.
        contact: Frictional (asperity) part.
        lubrication: Viscous part.
        slip: Coulomb bound reached.
    """
    total: np.ndarray
    contact: np.ndarray
    lubrication: np.ndarray
    slip: bool


def rotate_shear(
    force: np.ndarray,
    orthonormal_axis: np.ndarray,
    twist_axis: np.ndarray,
) -> np.ndarray:
    """
    Co-rotate a tangential force with the contact frame.

    Applies the small rotation that moves the previous normal onto the
    current one (orthonormal_axis = n_prev × n), then the mean spin of the
    two spheres about the normal (twist_axis). Returns a new vector.
    """
    f = force - cross3(force, orthonormal_axis)
    return f - cross3(f, twist_axis)


def shear_viscosity(viscosity: float, a: float, u: float) -> float:
    """
    Viscous shear coefficient of the film,
    cs = π η / 2 · (-2a + (2a + u) ln((2a + u) / u)).

    Zero without fluid.
    """
    if viscosity <= 0.0:
        return 0.0
    return math.pi * viscosity / 2.0 * (-2.0 * a + (2.0 * a + u) * math.log((2.0 * a + u) / u))


def shear_forces(
    previous: np.ndarray,
    increment: np.ndarray,
    ks: float,
    cs: float,
    dt: float,
    contact: bool,
    normal_contact_force: np.ndarray,
    friction: float,
) -> ShearForces:
    """
    First-order shear force update.

    Contact regime:
        trial = previous + ks·Δus is the frictional force. If
        |trial| > |Fn,contact|·max(0, μ), it is scaled down onto the bound
        (slip) and the applied force blends spring and damper:
            Ft = (F_bound·ks·dt + previous·cs + Δus·ks·cs) / (ks·dt + cs)
        with a viscous part cs·Δus/dt. Without slip there is no viscous part.
    No-contact regime:
        Ft = (previous + ks·Δus) · cs / (cs + ks·dt), all viscous.

    Args:
        previous: Co-rotated shear force of the previous step.
        increment: Tangential displacement increment Δus over dt.
        ks: Shear stiffness.
        cs: Viscous shear coefficient.
        dt: Timestep.
        contact: Asperity contact flag.
        normal_contact_force: Contact part of the normal force.
        friction: Coulomb coefficient μ.
    """
    zero = np.zeros(3, dtype=np.float64)

    if not contact:
        denom = cs + ks * dt
        ft = (previous + ks * increment) * (cs / denom) if denom > 0.0 else zero
        return ShearForces(total=ft, contact=zero, lubrication=ft, slip=False)

    trial = previous + ks * increment
    bound = norm(normal_contact_force) * max(0.0, friction)
    trial_norm = norm(trial)
    if trial_norm <= bound:
        return ShearForces(total=trial, contact=trial, lubrication=zero, slip=False)

    clipped = trial * (bound / trial_norm)
    denom = ks * dt + cs
    if denom > 0.0:
        ft = (clipped * ks * dt + previous * cs + increment * ks * cs) / denom
    else:
        ft = clipped
    return ShearForces(total=ft, contact=clipped, lubrication=cs * increment / dt, slip=True)
