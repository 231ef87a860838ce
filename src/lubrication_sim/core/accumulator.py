# MIT License (see LICENSE)
"""
Force/torque reduction buffers.

Pair evaluations never write into bodies. They push their contributions into
a ForceSink; each worker owns a ForceBuffer, and the buffers are merged once
all pairs of the step have been evaluated.
"""
from __future__ import annotations
from typing import Protocol

import numpy as np


class ForceSink(Protocol):
    """Anything that accepts the signed force/torque pair of one interaction."""

    def apply_pair(
        self,
        id1: int,
        id2: int,
        force: np.ndarray,
        torque1: np.ndarray,
        torque2: np.ndarray,
    ) -> None:
        ...


class ForceBuffer:
    """
    Per-body force and torque sums, indexed by body id.
    
    Example:
        buf = ForceBuffer()
        buf.apply_pair(1, 2, f, t1, t2)   # +f on body 1, -f on body 2
        total = ForceBuffer()
        total.merge(buf)
    """

    def __init__(self) -> None:
        self.forces: dict[int, np.ndarray] = {}
        self.torques: dict[int, np.ndarray] = {}

    def add_force(self, body_id: int, f: np.ndarray) -> None:
        acc = self.forces.get(body_id)
        if acc is None:
            self.forces[body_id] = np.array(f, dtype=np.float64)
        else:
            acc += f

    def add_torque(self, body_id: int, t: np.ndarray) -> None:
        acc = self.torques.get(body_id)
        if acc is None:
            self.torques[body_id] = np.array(t, dtype=np.float64)
        else:
            acc += t

    def apply_pair(
        self,
        id1: int,
        id2: int,
        force: np.ndarray,
        torque1: np.ndarray,
        torque2: np.ndarray,
    ) -> None:
        """Apply force to body 1 and its opposite to body 2 (Newton's third law)."""
        self.add_force(id1, force)
        self.add_force(id2, -force)
        self.add_torque(id1, torque1)
        self.add_torque(id2, torque2)

    def force(self, body_id: int) -> np.ndarray:
        """Accumulated force on a body (zero if untouched)."""
        f = self.forces.get(body_id)
        return np.zeros(3, dtype=np.float64) if f is None else f.copy()

    def torque(self, body_id: int) -> np.ndarray:
        """Accumulated torque on a body (zero if untouched)."""
        t = self.torques.get(body_id)
        return np.zeros(3, dtype=np.float64) if t is None else t.copy()

    def merge(self, other: "ForceBuffer") -> None:
        """Add another buffer's sums into this one."""
        for body_id, f in other.forces.items():
            self.add_force(body_id, f)
        for body_id, t in other.torques.items():
            self.add_torque(body_id, t)
