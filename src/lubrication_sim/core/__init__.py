# MIT License (see LICENSE)
"""
Force reduction, time integration and conserved quantities.
"""
from .accumulator import ForceBuffer, ForceSink
from .integrators import kinematic_step, leapfrog_step
from .invariants import kinetic_energy, linear_momentum, net_force

__all__ = [
    "ForceBuffer",
    "ForceSink",
    "kinematic_step",
    "leapfrog_step",
    "kinetic_energy",
    "linear_momentum",
    "net_force",
]
