# MIT License (see LICENSE)
"""
Implicit lubrication law for sphere pairs.

This subpackage provides:
    - Gap integration: theta-method solver of the film-gap ODE with bounded
      adaptive sub-stepping and a backward Euler fallback.
    - Regime machine: contact / no-contact resolution with a single retry.
    - Force models: normal, shear and torque components.
    - Law: per-pair evaluation pushing forces into a ForceSink.
    - Dispatch: sequential or threaded evaluation of all pairs of a step.
    - Stress: per-body and bulk stress tensors.

Typical usage:
    from lubrication_sim.lubrication import LubricationConfig, LubricationLaw

    law = LubricationLaw(LubricationConfig(theta=0.55))
    forces, dropped = evaluate_interactions(law, interactions, bodies, dt)
"""
from .config import LubricationConfig
from .state import LubricationState
from .gap import GapIntegrator, GapSolution, integrate_gap, quadratic_roots, select_root
from .regime import ContactStateMachine, Regime
from .normal import NormalForces, normal_forces, normal_stiffness
from .shear import ShearForces, rotate_shear, shear_forces, shear_viscosity
from .torque import lubrication_torques, roll_torque, twist_torque
from .law import LubricationLaw
from .dispatch import evaluate_interactions
from .stress import StressTensors, bulk_stress, stress_per_body

__all__ = [
    # Configuration and state
    "LubricationConfig",
    "LubricationState",
    # Gap integration
    "GapIntegrator",
    "GapSolution",
    "integrate_gap",
    "quadratic_roots",
    "select_root",
    # Regime
    "ContactStateMachine",
    "Regime",
    # Force models
    "NormalForces",
    "normal_forces",
    "normal_stiffness",
    "ShearForces",
    "rotate_shear",
    "shear_forces",
    "shear_viscosity",
    "lubrication_torques",
    "roll_torque",
    "twist_torque",
    # Law and dispatch
    "LubricationLaw",
    "evaluate_interactions",
    # Stress
    "StressTensors",
    "bulk_stress",
    "stress_per_body",
]
