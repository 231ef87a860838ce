# MIT License (see LICENSE)
"""
Geometry and kinematics of a sphere-sphere pair.

Computes, once per pair and per step, everything the lubrication law needs
about the relative configuration of two spheres: contact normal, surface
distance, contact point, relative velocities and the rotation of the contact
frame since the previous step. Body 2 may be a periodic image, in which case
its position and velocity are offset by the cell shift.
"""
from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from ..types import SphereBody
from ..util import cross3, norm, unit, zeros3


@dataclass
class SphereContactGeometry:
    """
    Relative configuration of two spheres for one step.
    
    Attributes:
        normal: Unit normal from body 1 toward body 2.
        penetration: Overlap r1 + r2 - d (negative when apart).
        contact_point: Point between the surfaces, x1 + (r1 - pen/2)·n.
        radius1, radius2: Sphere radii.
        shift2: Periodic offset applied to body 2 (zero if not periodic).
        normal_velocity: Rate of change of the surface distance
                         (positive when separating).
        shear_increment: Tangential relative displacement at the contact
                         point over the step.
        rel_ang_vel: Relative angular velocity ω2 - ω1.
        orthonormal_axis: n_prev × n, rotation of the normal since last step.
        twist_axis: dt/2 · (n·(ω1 + ω2)) · n, mean spin about the normal.
    """
    normal: np.ndarray
    penetration: float
    contact_point: np.ndarray
    radius1: float
    radius2: float
    shift2: np.ndarray
    normal_velocity: float
    shear_increment: np.ndarray
    rel_ang_vel: np.ndarray
    orthonormal_axis: np.ndarray
    twist_axis: np.ndarray

    @property
    def un(self) -> float:
        """Surface distance of the undeformed spheres, -penetration."""
        return -self.penetration

    @property
    def mean_radius(self) -> float:
        return 0.5 * (self.radius1 + self.radius2)


def sphere_contact_geometry(
    b1: SphereBody,
    b2: SphereBody,
    dt: float,
    prev_normal: np.ndarray | None = None,
    shift2: np.ndarray | None = None,
    shift_vel: np.ndarray | None = None,
) -> SphereContactGeometry:
    """
    Build the pair geometry of two spheres.
    
    The normal rate uses lever arms along the center line (r1·n and -r2·n);
    the shear increment uses lever arms to the actual contact point.
    
    Args:
        b1, b2: The two spheres.
        dt: Timestep, for the displacement increment and the twist.
        prev_normal: Normal of the previous step, None for a fresh pair.
        shift2: Position offset of body 2's periodic image.
        shift_vel: Velocity offset of body 2's periodic image.
    """
    shift2 = zeros3() if shift2 is None else shift2
    shift_vel = zeros3() if shift_vel is None else shift_vel

    r1, r2 = b1.radius, b2.radius
    p1 = b1.position
    p2 = b2.position + shift2
    d = p2 - p1
    dist = norm(d)

    n = unit(d) if dist > 1e-12 else np.array([1.0, 0.0, 0.0], dtype=np.float64)
    penetration = r1 + r2 - dist
    cp = p1 + n * (r1 - 0.5 * penetration)

    w1, w2 = b1.angular_velocity, b2.angular_velocity

    # Normal rate from the center-line lever arms
    rel_v = (b2.velocity + cross3(w2, -r2 * n)) - (b1.velocity + cross3(w1, r1 * n)) + shift_vel
    undot = float(np.dot(rel_v, n))

    # Shear increment from the contact-point lever arms
    rel_vc = (b2.velocity + cross3(w2, cp - p2)) - (b1.velocity + cross3(w1, cp - p1)) + shift_vel
    rel_vt = rel_vc - float(np.dot(rel_vc, n)) * n

    orth = zeros3() if prev_normal is None else cross3(prev_normal, n)
    twist = (dt * 0.5 * float(np.dot(n, w1 + w2))) * n

    return SphereContactGeometry(
        normal=n,
        penetration=penetration,
        contact_point=cp,
        radius1=r1,
        radius2=r2,
        shift2=shift2,
        normal_velocity=undot,
        shear_increment=rel_vt * dt,
        rel_ang_vel=w2 - w1,
        orthonormal_axis=orth,
        twist_axis=twist,
    )
