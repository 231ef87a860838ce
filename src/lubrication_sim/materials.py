# MIT License (see LICENSE)
"""
Material properties and the material-to-physics builder.

Materials define the elastic and frictional properties of the spheres. When
two spheres start interacting, pair_constants() turns the two materials and
radii into the constants used by the lubrication law for the whole lifetime
of the interaction.
"""
from __future__ import annotations
import math
from dataclasses import dataclass

from .constants import DEFAULT_ROUGHNESS, DEFAULT_VISCOSITY


@dataclass(frozen=True)
class Material:
    """
    Elastic-frictional material.
    
    Attributes:
        young: Young's modulus E in Pa.
        poisson: Poisson's ratio ν, in [0, 0.5).
        friction_angle: Interparticle friction angle φ in radians.
                        The Coulomb coefficient is tan(φ).
        density: Mass density in kg/m³, used to derive sphere masses.
    
    Note:
        When two spheres interact, moduli are combined as in Hertz-Mindlin
        theory and the smaller friction angle wins.
        See pair_constants() for the combination rules.
    """
    young: float = 1e7
    poisson: float = 0.3
    friction_angle: float = 0.5
    density: float = 2600.0

    def __post_init__(self) -> None:
        if self.young <= 0:
            raise ValueError(f"Young's modulus must be positive, got {self.young}")
        if not (0.0 <= self.poisson < 0.5):
            raise ValueError(f"Poisson's ratio must lie in [0, 0.5), got {self.poisson}")

    @property
    def shear_modulus(self) -> float:
        """G = E / (2 (1 + ν))."""
        return self.young / (2.0 * (1.0 + self.poisson))

    def mass_of(self, radius: float) -> float:
        """Mass of a solid sphere of this material."""
        return self.density * 4.0 / 3.0 * math.pi * radius ** 3


@dataclass(frozen=True)
class PairConstants:
    """
    Material-derived constants of one interaction, fixed at creation.
    
    Attributes:
        kno: Coefficient of the Hertzian normal stiffness, kn = kno·√δ.
        kso: Coefficient of the tangential stiffness, ks = kso·√δ.
        friction: Coulomb friction coefficient μ.
        nun: Normal viscous coefficient 3/2·π·η·a².
        viscosity: Fluid viscosity η in Pa.s.
        roughness: Roughness as a fraction of the mean radius (eps).
    """
    kno: float
    kso: float
    friction: float
    nun: float
    viscosity: float
    roughness: float


def pair_constants(
    mat1: Material,
    mat2: Material,
    r1: float,
    r2: float,
    viscosity: float = DEFAULT_VISCOSITY,
    roughness: float = DEFAULT_ROUGHNESS,
) -> PairConstants:
    """
    Build the lubrication constants of a sphere pair.
    
    Combination rules (Hertz-Mindlin):
        E* = E1 E2 / ((1-ν1²) E2 + (1-ν2²) E1)
        G  = (G1 + G2) / 2,   ν = (ν1 + ν2) / 2
        R  = r1 r2 / (r1 + r2),   a = (r1 + r2) / 2
        kno = 4/3 E* √R
        kso = 2 √(4R) G / (2 - ν)
        μ   = tan(min(φ1, φ2))
        nun = 3/2 π η a²
    
    Args:
        mat1, mat2: Materials of the two spheres.
        r1, r2: Radii of the two spheres.
        viscosity: Fluid viscosity η in Pa.s.
        roughness: Roughness fraction eps.
    """
    E1, E2 = mat1.young, mat2.young
    v1, v2 = mat1.poisson, mat2.poisson

    G = 0.5 * (mat1.shear_modulus + mat2.shear_modulus)
    V = 0.5 * (v1 + v2)
    E = E1 * E2 / ((1.0 - v1 * v1) * E2 + (1.0 - v2 * v2) * E1)
    R = r1 * r2 / (r1 + r2)
    a = 0.5 * (r1 + r2)

    return PairConstants(
        kno=4.0 / 3.0 * E * math.sqrt(R),
        kso=2.0 * math.sqrt(4.0 * R) * G / (2.0 - V),
        friction=math.tan(min(mat1.friction_angle, mat2.friction_angle)),
        nun=math.pi * viscosity * 1.5 * a * a,
        viscosity=viscosity,
        roughness=roughness,
    )
