# MIT License (see LICENSE)
"""
Default parameters of the lubrication law.

Values are in SI units. They mirror the defaults exposed by
LubricationConfig and the material builder.
"""
from __future__ import annotations

# Parameter of the theta-method used for the film gap.
# 1.0 is backward Euler, 0.5 the trapezoidal rule; 0.55 keeps most of the
# second-order accuracy while damping the oscillations of the pure trapezoid
# on stiff steps.
DEFAULT_THETA: float = 0.55

# Maximum bisection depth of the adaptive sub-stepping. The smallest
# interval is dt / 2**DEFAULT_MAX_SUBSTEPS.
DEFAULT_MAX_SUBSTEPS: int = 4

# Roughness as a fraction of the mean radius: asperity contact starts when
# the film gap drops below DEFAULT_ROUGHNESS * a.
DEFAULT_ROUGHNESS: float = 1e-3

# Fluid viscosity [Pa.s].
DEFAULT_VISCOSITY: float = 1.0

# Blend weight of the rate estimate carried between two integrations.
DEFAULT_RATE_WEIGHT: float = 1.0

# Floor of the surface deflection used by the Hertzian stiffness, as a
# fraction of the mean radius (kn = kno * sqrt(max(ue, a * fraction))).
MIN_DEFLECTION_FRACTION: float = 1e-2

# Second-order correction of the rolling resistance, 63/500 (u/a) ln(a/u).
ROLL_CORRECTION: float = 63.0 / 500.0

# Floor of the film gap as a fraction of the mean radius. u = 0 is a fixed
# point of the gap ODE; repeated thin-film steps must not underflow to it.
MIN_GAP_FRACTION: float = 1e-9
