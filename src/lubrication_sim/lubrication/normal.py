# MIT License (see LICENSE)
"""
Normal force of a lubricated pair, split into contact and lubrication parts.
"""
from __future__ import annotations
import math
from dataclasses import dataclass

import numpy as np

from ..constants import MIN_DEFLECTION_FRACTION


@dataclass(frozen=True)
class NormalForces:
    """
    Normal force applied to body 1 (body 2 receives the opposite).

    total = contact + lubrication.
    """
    total: np.ndarray
    contact: np.ndarray
    lubrication: np.ndarray


def deflection_floor(a: float) -> float:
    """Smallest deflection used by the stiffness, a/100."""
    return a * MIN_DEFLECTION_FRACTION


def normal_stiffness(kno: float, ue: float, a: float) -> float:
    """
    Hertzian stiffness kn = kno · √max(ue, a/100).

    The floor keeps the stiffness finite at first contact, when the
    deflection is still zero.
    """
    return kno * math.sqrt(max(ue, deflection_floor(a)))


def normal_forces(
    k: float,
    un: float,
    u: float,
    threshold: float,
    contact: bool,
    normal: np.ndarray,
) -> NormalForces:
    """
    Split the normal force for a resolved gap.

    The total force is k·(un - u)·n. In asperity contact its contact part is
    k·(u - eps·a)·n and the rest is lubrication; otherwise it is all
    lubrication.

    Args:
        k: Normal stiffness.
        un: Surface distance of the undeformed spheres.
        u: Resolved film gap.
        threshold: Roughness threshold eps·a.
        contact: Asperity contact flag of the resolved gap.
        normal: Unit normal from body 1 to body 2.
    """
    total = k * (un - u) * normal
    if contact:
        contact_part = k * (u - threshold) * normal
    else:
        contact_part = np.zeros(3, dtype=np.float64)
    return NormalForces(total=total, contact=contact_part, lubrication=total - contact_part)
