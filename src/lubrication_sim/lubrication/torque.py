# MIT License (see LICENSE)
"""
Rolling and twisting lubrication torques.

Both resistances grow like ln(a/u) as the film thins, so they are only
defined for a positive gap.
"""
from __future__ import annotations
import math

import numpy as np

from ..constants import ROLL_CORRECTION


def split_spin(rel_ang_vel: np.ndarray, normal: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Decompose a relative angular velocity into (roll, twist) about the normal."""
    twist = float(np.dot(rel_ang_vel, normal)) * normal
    return rel_ang_vel - twist, twist


def _check_gap(u: float) -> None:
    if u <= 0.0:
        raise ValueError(f"Lubrication torque requires a positive gap, got u={u}")


def roll_torque(viscosity: float, a: float, u: float, roll: np.ndarray) -> np.ndarray:
    """
    Rolling resistance on body 1,
    Cr = π η a³ (3/2 ln(a/u) + 63/500 (u/a) ln(a/u)) ω_roll.
    """
    if viscosity <= 0.0:
        return np.zeros(3, dtype=np.float64)
    _check_gap(u)
    log_au = math.log(a / u)
    return math.pi * viscosity * a ** 3 * (1.5 * log_au + ROLL_CORRECTION * u / a * log_au) * roll


def twist_torque(viscosity: float, a: float, un: float, u: float, twist: np.ndarray) -> np.ndarray:
    """Twisting resistance on body 1, Ct = π η a un ln(a/u) ω_twist."""
    if viscosity <= 0.0:
        return np.zeros(3, dtype=np.float64)
    _check_gap(u)
    return math.pi * viscosity * a * un * math.log(a / u) * twist


def lubrication_torques(
    viscosity: float,
    a: float,
    un: float,
    u: float,
    rel_ang_vel: np.ndarray,
    normal: np.ndarray,
    roll: bool = True,
    twist: bool = True,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Rolling and twisting torques on body 1; body 2 receives the opposite.

    A channel is exactly zero when disabled or when the fluid has no
    viscosity.

    Raises:
        ValueError: If u ≤ 0 while an enabled channel has a viscous fluid.
    """
    w_roll, w_twist = split_spin(rel_ang_vel, normal)
    zero = np.zeros(3, dtype=np.float64)
    cr = roll_torque(viscosity, a, u, w_roll) if roll else zero
    ct = twist_torque(viscosity, a, un, u, w_twist) if twist else zero
    return cr, ct
