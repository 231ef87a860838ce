# MIT License (see LICENSE)
"""
lubrication_sim - Lubricated contacts between spheres for DEM simulations.

This package computes the forces and torques of pairs of spheres immersed in
a viscous fluid: the film gap is integrated implicitly, asperity contact
takes over when the film thins below the surface roughness, and shear,
rolling and twisting resistances follow the gap.

Main entry points:
    - Scene: Spheres, interactions and the step loop.
    - SphereBody: A sphere with position, velocity and spin.
    - Material: Elastic and frictional properties.
    - LubricationConfig / LubricationLaw: The pair law itself.

Submodules:
    - lubrication: Gap integrator, force models, dispatch and stresses.
    - collision: Pair search, pair geometry and interaction bookkeeping.
    - core: Force buffers, integrators and invariants.
    - io: JSON serialization/deserialization.

Example:
    from lubrication_sim import Scene, SphereBody

    scene = Scene(dt=1e-5, viscosity=1e-3)
    scene.add_body(SphereBody(radius=1e-3, mass=1e-5, position=(0, 0, 0)))
    scene.add_body(SphereBody(radius=1e-3, mass=1e-5, position=(2.1e-3, 0, 0), velocity=(-1e-2, 0, 0)))
    scene.step()
"""
from .scene import Scene
from .types import PeriodicCell, SphereBody
from .materials import Material, PairConstants, pair_constants
from .lubrication import LubricationConfig, LubricationLaw

__all__ = [
    # Core simulation
    "Scene",
    "SphereBody",
    "PeriodicCell",
    # Materials
    "Material",
    "PairConstants",
    "pair_constants",
    # Lubrication law
    "LubricationConfig",
    "LubricationLaw",
]
