# MIT License (see LICENSE)
"""
Persistent numeric state of a lubricated interaction.

A LubricationState lives as long as its interaction: created the first time
two spheres come within detection range, updated every step, discarded when
the interaction is dropped. It is a plain record; the law reads and writes
its fields, nothing else holds a reference to it.
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from ..util import zeros3


@dataclass
class LubricationState:
    """
    Film gap, rate estimate, regime flags and the last forces of one pair.
    
    Attributes:
        u: Film gap at the end of the previous step. None until the first
           evaluation, which initializes it to the surface distance.
        prev_un: Surface distance (normal approach) at the previous step.
        prev_dot_u: Rate estimate nu/k·du/dt carried by the theta-method.
        ue: Surface deflection u - un at the previous step.
        contact: Asperity contact (u below the roughness threshold).
        slip: Coulomb slip in the last shear evaluation.
        kn, ks: Normal and shear stiffness of the last step.
        cn, cs: Normal and shear viscous coefficients of the last step.
        normal_force: Total normal force applied to body 1.
        shear_force: Total shear force applied to body 1. Carried to the
                     next step, where it is co-rotated and incremented.
        normal_contact_force, normal_lubrication_force: Split of normal_force.
        shear_contact_force, shear_lubrication_force: Split of shear_force.
        flip_streak: Consecutive steps whose regime differs from the previous one.
        oscillation_reported: Whether the flip streak has been reported.
    """
    u: float | None = None
    prev_un: float = 0.0
    prev_dot_u: float = 0.0
    ue: float = 0.0
    contact: bool = False
    slip: bool = False

    kn: float = 0.0
    ks: float = 0.0
    cn: float = 0.0
    cs: float = 0.0

    normal_force: np.ndarray = field(default_factory=zeros3)
    shear_force: np.ndarray = field(default_factory=zeros3)
    normal_contact_force: np.ndarray = field(default_factory=zeros3)
    normal_lubrication_force: np.ndarray = field(default_factory=zeros3)
    shear_contact_force: np.ndarray = field(default_factory=zeros3)
    shear_lubrication_force: np.ndarray = field(default_factory=zeros3)

    flip_streak: int = 0
    oscillation_reported: bool = False

    @property
    def initialized(self) -> bool:
        return self.u is not None

    def reset_forces(self) -> None:
        """Zero the forces of the current step (shear_force included)."""
        self.normal_force = zeros3()
        self.shear_force = zeros3()
        self.normal_contact_force = zeros3()
        self.normal_lubrication_force = zeros3()
        self.shear_contact_force = zeros3()
        self.shear_lubrication_force = zeros3()
