# MIT License (see LICENSE)
"""
Configuration surface of the lubrication law.
"""
from __future__ import annotations
from dataclasses import dataclass

from ..constants import (
    DEFAULT_MAX_SUBSTEPS,
    DEFAULT_RATE_WEIGHT,
    DEFAULT_ROUGHNESS,
    DEFAULT_THETA,
)


@dataclass(frozen=True)
class LubricationConfig:
    """
    Switches and numerical parameters of the lubrication law.
    
    Attributes:
        activate_normal_lubrication: Resolve the film gap and the normal force.
        activate_tangential_lubrication: Compute the shear force.
        activate_twist_lubrication: Compute the twisting torque.
        activate_roll_lubrication: Compute the rolling torque.
        theta: Parameter of the theta-method, in (0, 1].
               1 is backward Euler, 0.5 the trapezoidal rule.
        max_substeps: Maximum bisection depth of the adaptive sub-stepping.
                      Past it, the integrator switches to backward Euler.
        roughness: Roughness as a fraction of the mean radius (eps).
        rate_weight: Blend weight of the carried rate estimate, in (0, 1].
        cutoff_factor: Pairs whose surface distance exceeds cutoff_factor * a
                       are not evaluated.
        oscillation_window: Number of consecutive regime flips after which
                            a pair is reported as oscillating.
        debug: Log every regime switch and sub-stepping event as warnings.
    """
    activate_normal_lubrication: bool = True
    activate_tangential_lubrication: bool = True
    activate_twist_lubrication: bool = True
    activate_roll_lubrication: bool = True
    theta: float = DEFAULT_THETA
    max_substeps: int = DEFAULT_MAX_SUBSTEPS
    roughness: float = DEFAULT_ROUGHNESS
    rate_weight: float = DEFAULT_RATE_WEIGHT
    cutoff_factor: float = 1.0
    oscillation_window: int = 10
    debug: bool = False

    def __post_init__(self) -> None:
        if not (0.0 < self.theta <= 1.0):
            raise ValueError(f"theta must lie in (0, 1], got {self.theta}")
        if self.max_substeps < 0:
            raise ValueError(f"max_substeps must be non-negative, got {self.max_substeps}")
        if self.roughness < 0.0:
            raise ValueError(f"roughness must be non-negative, got {self.roughness}")
        if not (0.0 < self.rate_weight <= 1.0):
            raise ValueError(f"rate_weight must lie in (0, 1], got {self.rate_weight}")
        if self.cutoff_factor <= 0.0:
            raise ValueError(f"cutoff_factor must be positive, got {self.cutoff_factor}")
        if self.oscillation_window < 1:
            raise ValueError(f"oscillation_window must be at least 1, got {self.oscillation_window}")
