# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

Provides low-level 3D vector operations used by the contact geometry and
the lubrication law. All functions operate on vectors represented as numpy
arrays of shape (3,).
"""
from __future__ import annotations

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.
    
    Used throughout the codebase to ensure consistent numeric precision
    and allow tuple/list inputs for positions and velocities.
    """
    return np.array(x, dtype=np.float64)


def zeros3() -> np.ndarray:
    """Fresh zero vector of shape (3,)."""
    return np.zeros(3, dtype=np.float64)


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a 3D vector. Avoids sqrt for performance."""
    return float(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 3D vector."""
    return float(np.sqrt(norm2(v)))


def unit(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Return a unit (normalized) vector in the same direction as v.
    
    Returns zero vector if |v| < eps to avoid division by zero.
    """
    n = norm(v)
    if n < eps:
        return zeros3()
    return v / n


def cross3(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    3D cross product a × b.
    
    Written out explicitly; np.cross carries noticeable overhead for
    single (3,) vectors in the per-pair loop.
    """
    return np.array([
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    ], dtype=np.float64)


def sphere_volume(radius: float) -> float:
    """Volume of a sphere, V = 4/3 π r³."""
    return 4.0 / 3.0 * np.pi * radius ** 3
