# MIT License (see LICENSE)
"""
Core type definitions for the lubricated sphere simulation.

Defines the fundamental data structures:
- SphereBody: a spherical particle with position, velocity, spin and material.
- PeriodicCell: the parallelepiped of a periodic domain.

The equations of motion of a sphere follow Newton-Euler mechanics:
  - Linear:  F = m·a  →  a = F/m
  - Angular: T = I·α  →  α = T/I,  with I = 2/5 m r²
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .materials import Material
from .util import f64, sphere_volume


# =============================================================================
# Sphere Body
# =============================================================================

@dataclass
class SphereBody:
    """
    A spherical particle with full kinematic state.
    
    Attributes:
        radius: Sphere radius in meters.
        mass: Mass in kg. Use mass ≤ 0 for bodies whose motion is prescribed
              (they keep their velocity whatever the forces).
        position: Center position [x, y, z] in meters.
        velocity: Linear velocity [vx, vy, vz] in m/s.
        angular_velocity: Spin [wx, wy, wz] in rad/s.
        material: Elastic and frictional properties.
        id: Unique identifier assigned by Scene.add_body().
    
    Note:
        Forces are not stored on the body. They are accumulated in the
        scene's ForceBuffer during a step and read back by the integrator.
    """
    radius: float
    mass: float = 0.0
    position: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    velocity: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    angular_velocity: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    material: Material = field(default_factory=Material)
    id: int = -1

    def __post_init__(self) -> None:
        """Convert vectors to float64 arrays for consistent numerics."""
        if self.radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        self.position = f64(self.position)
        self.velocity = f64(self.velocity)
        self.angular_velocity = f64(self.angular_velocity)

    @property
    def volume(self) -> float:
        return sphere_volume(self.radius)

    @property
    def inv_mass(self) -> float:
        """Inverse mass (1/m). Returns 0 for prescribed bodies (mass ≤ 0)."""
        return 0.0 if self.mass <= 0 else 1.0 / self.mass

    @property
    def inertia(self) -> float:
        """Moment of inertia of a solid sphere, I = 2/5 m r²."""
        return 0.4 * self.mass * self.radius * self.radius

    @property
    def inv_inertia(self) -> float:
        I = self.inertia
        return 0.0 if I <= 0 else 1.0 / I


# =============================================================================
# Periodic Cell
# =============================================================================

@dataclass
class PeriodicCell:
    """
    Parallelepiped cell of a periodic domain.
    
    Attributes:
        h_size: 3x3 matrix whose columns are the cell base vectors.
        vel_grad: 3x3 velocity gradient imposed on the cell (homogeneous
                  deformation). Image bodies move with an extra velocity
                  vel_grad · h_size · cell_dist.
    """
    h_size: np.ndarray
    vel_grad: np.ndarray = field(default_factory=lambda: np.zeros((3, 3), dtype=np.float64))

    def __post_init__(self) -> None:
        self.h_size = f64(self.h_size)
        self.vel_grad = f64(self.vel_grad)
        if self.h_size.shape != (3, 3) or self.vel_grad.shape != (3, 3):
            raise ValueError("Periodic cell matrices must be 3x3")
        if abs(float(np.linalg.det(self.h_size))) < 1e-300:
            raise ValueError("Periodic cell is degenerate (zero volume)")

    @classmethod
    def box(cls, lx: float, ly: float, lz: float) -> "PeriodicCell":
        """Axis-aligned cell of the given edge lengths."""
        return cls(h_size=np.diag([lx, ly, lz]))

    @property
    def volume(self) -> float:
        return abs(float(np.linalg.det(self.h_size)))

    def shift(self, cell_dist: np.ndarray) -> np.ndarray:
        """Position offset of the periodic image with integer index cell_dist."""
        return self.h_size @ np.asarray(cell_dist, dtype=np.float64)

    def shift_velocity(self, cell_dist: np.ndarray) -> np.ndarray:
        """Velocity offset of the periodic image with integer index cell_dist."""
        return self.vel_grad @ self.shift(cell_dist)

    def nearest_image(self, p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
        """
        Integer cell index of the image of p2 closest to p1.
        
        Returns cell_dist such that p2 + shift(cell_dist) is the minimum-image
        position of p2 seen from p1.
        """
        frac = np.linalg.solve(self.h_size, p1 - p2)
        return np.rint(frac).astype(np.int64)
