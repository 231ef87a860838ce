# MIT License (see LICENSE)
"""
Pair detection and interaction bookkeeping.

This subpackage provides:
    - Broadphase: Spatial hashing and periodic minimum-image pair search.
    - Geometry: Normal, surface distance and relative kinematics of a pair.
    - Manager: Persistent interactions carrying the lubrication state.

Typical usage:
    from lubrication_sim.collision import InteractionManager

    manager = InteractionManager()
    interactions = manager.update(bodies, cell=None, viscosity=1e-3, roughness=1e-3)
"""
from .broadphase import SpatialHashBroadphase, aabb_for_body, periodic_pairs, within_detection
from .geometry import SphereContactGeometry, sphere_contact_geometry
from .manager import Interaction, InteractionKey, InteractionManager

__all__ = [
    # Broadphase
    "SpatialHashBroadphase",
    "aabb_for_body",
    "periodic_pairs",
    "within_detection",
    # Geometry
    "SphereContactGeometry",
    "sphere_contact_geometry",
    # Interactions
    "Interaction",
    "InteractionKey",
    "InteractionManager",
]
