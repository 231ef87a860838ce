# MIT License (see LICENSE)
"""
Per-body and bulk stress tensors of the lubricated contacts.

Each force component f of a pair contributes f ⊗ l / V to a body's stress,
where l is the lever arm from the body's center to the contact point and V
the body's volume: added for body 1, subtracted for body 2 (whose force is
the opposite). The bulk stress is the volume-weighted mean of the per-body
stresses over a periodic cell.

Stresses must be computed after every pair of the step has been evaluated.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Mapping

import numpy as np

from ..types import PeriodicCell, SphereBody

if TYPE_CHECKING:
    from ..collision.manager import Interaction


def _zeros33() -> np.ndarray:
    return np.zeros((3, 3), dtype=np.float64)


@dataclass
class StressTensors:
    """
    The four stress contributions of the lubrication law.
    
    Attributes:
        normal_contact: From the normal asperity-contact forces.
        shear_contact: From the frictional forces.
        normal_lubrication: From the normal lubrication forces.
        shear_lubrication: From the viscous shear forces.
    """
    normal_contact: np.ndarray = field(default_factory=_zeros33)
    shear_contact: np.ndarray = field(default_factory=_zeros33)
    normal_lubrication: np.ndarray = field(default_factory=_zeros33)
    shear_lubrication: np.ndarray = field(default_factory=_zeros33)

    def as_tuple(self) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        return (self.normal_contact, self.shear_contact, self.normal_lubrication, self.shear_lubrication)

    @property
    def total(self) -> np.ndarray:
        return self.normal_contact + self.shear_contact + self.normal_lubrication + self.shear_lubrication


def stress_per_body(
    interactions: Iterable["Interaction"],
    bodies: Mapping[int, SphereBody],
    cell: PeriodicCell | None = None,
) -> dict[int, StressTensors]:
    """
    Stress tensors of every body.
    
    Interactions that have never been evaluated (no geometry yet) are
    skipped. Body 2's center is taken at its periodic image when a cell is
    given.
    
    Returns:
        StressTensors by body id, one entry per body (zero if untouched).
    """
    out = {body_id: StressTensors() for body_id in bodies}

    for inter in interactions:
        geom = inter.geometry
        if geom is None:
            continue
        b1, b2 = bodies[inter.id1], bodies[inter.id2]
        cp = geom.contact_point

        lv1 = (cp - b1.position) / b1.volume
        p2 = b2.position if cell is None else b2.position + cell.shift(inter.cell_dist)
        lv2 = (cp - p2) / b2.volume

        st = inter.state
        s1, s2 = out[inter.id1], out[inter.id2]
        for name, f in (
            ("normal_contact", st.normal_contact_force),
            ("shear_contact", st.shear_contact_force),
            ("normal_lubrication", st.normal_lubrication_force),
            ("shear_lubrication", st.shear_lubrication_force),
        ):
            getattr(s1, name)[:] += np.outer(f, lv1)
            getattr(s2, name)[:] -= np.outer(f, lv2)

    return out


def bulk_stress(
    interactions: Iterable["Interaction"],
    bodies: Mapping[int, SphereBody],
    cell: PeriodicCell | None,
) -> StressTensors:
    """
    Homogenized stress of a periodic sample.
    
        σ = Σ_bodies V_i σ_i / V_cell
    
    Raises:
        ValueError: If the domain is not periodic. Nothing is computed.
    """
    if cell is None:
        raise ValueError("Bulk stress can only be computed in periodic simulations")

    per_body = stress_per_body(interactions, bodies, cell)
    total = StressTensors()
    for body_id, s in per_body.items():
        vol = bodies[body_id].volume
        total.normal_contact += s.normal_contact * vol
        total.shear_contact += s.shear_contact * vol
        total.normal_lubrication += s.normal_lubrication * vol
        total.shear_lubrication += s.shear_lubrication * vol

    v_cell = cell.volume
    for m in total.as_tuple():
        m /= v_cell
    return total
