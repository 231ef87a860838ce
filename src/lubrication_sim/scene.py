# MIT License (see LICENSE)
"""
The main simulation scene and loop.

The Scene class acts as the world container and simulation controller.
It manages:
- The sphere bodies and the optional periodic cell.
- The persistent interactions and their lubrication state.
- Global simulation parameters (timestep, viscosity, integrator choice).
- The main simulation loop (step):
    1. Interaction update (broadphase, new pairs within detection range).
    2. Pair evaluation by the lubrication law, sequential or threaded.
    3. Removal of the interactions the law reports as inactive.
    4. Integration (leapfrog or prescribed kinematics).

Structure:
    - User creates a Scene.
    - User adds bodies via add_body().
    - User calls scene.step() in a loop, and reads stresses in between.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .types import PeriodicCell, SphereBody
from .collision.manager import InteractionManager
from .core.accumulator import ForceBuffer
from .core.integrators import kinematic_step, leapfrog_step
from .lubrication.config import LubricationConfig
from .lubrication.dispatch import evaluate_interactions
from .lubrication.law import LubricationLaw
from .lubrication.stress import StressTensors, bulk_stress, stress_per_body

logger = logging.getLogger(__name__)

INTEGRATORS = ("leapfrog", "kinematic")


@dataclass
class Scene:
    """
    Lubricated sphere simulation world.
    
    Attributes:
        dt: Simulation timestep in seconds.
        viscosity: Fluid viscosity η in Pa.s. 0 disables all viscous terms.
        detection_factor: Pairs are created when d ≤ detection_factor·(r1+r2).
        lubrication: Switches and numerical parameters of the pair law.
        cell: Periodic cell, None for an open domain.
        n_jobs: Worker threads for pair evaluation. 1 = sequential,
                -1 = all CPU cores.
        integrator: "leapfrog" (forces drive the spheres) or "kinematic"
                    (spheres keep their prescribed velocities).
    """
    dt: float = 1e-5
    viscosity: float = 1e-3
    detection_factor: float = 1.5
    lubrication: LubricationConfig = field(default_factory=LubricationConfig)
    cell: PeriodicCell | None = None
    n_jobs: int = 1
    integrator: str = "leapfrog"

    # Internal state
    bodies: list[SphereBody] = field(default_factory=list)
    interactions: InteractionManager = field(default_factory=InteractionManager)
    forces: ForceBuffer = field(default_factory=ForceBuffer)
    time: float = 0.0

    def __post_init__(self) -> None:
        """Validate parameters and build the pair law."""
        if self.dt <= 0:
            raise ValueError(f"Timestep must be positive, got {self.dt}")
        if self.viscosity < 0:
            raise ValueError(f"Viscosity must be non-negative, got {self.viscosity}")
        if self.detection_factor < 1.0:
            raise ValueError(f"Detection factor must be at least 1, got {self.detection_factor}")
        if self.integrator not in INTEGRATORS:
            raise ValueError(f"Unknown integrator: {self.integrator}")

        self.law = LubricationLaw(self.lubrication)
        self._by_id: dict[int, SphereBody] = {b.id: b for b in self.bodies}
        self._next_id = max(self._by_id, default=0) + 1

    def add_body(self, body: SphereBody) -> int:
        """
        Add a sphere to the simulation.
        
        Assigns a unique ID to the body.
        
        Returns:
            The assigned body ID.
        """
        body.id = self._next_id
        self._next_id += 1
        self.bodies.append(body)
        self._by_id[body.id] = body
        return body.id

    def body(self, body_id: int) -> SphereBody:
        """Body with the given ID. Raises KeyError if unknown."""
        return self._by_id[body_id]

    def step(self, dt: float | None = None) -> None:
        """
        Advance the simulation by one timestep.
        
        Args:
            dt: Timestep override. Uses self.dt if None.
        """
        dt = self.dt if dt is None else dt

        active = self.interactions.update(
            self.bodies, self.cell, self.viscosity,
            self.lubrication.roughness, self.detection_factor,
        )
        self.forces, dropped = evaluate_interactions(
            self.law, active, self._by_id, dt, self.cell, self.n_jobs,
        )
        if dropped:
            logger.debug("dropping %d inactive interactions at t=%g", len(dropped), self.time)
            self.interactions.drop(dropped)

        self._integrate(dt)
        self.time += dt

    def _integrate(self, dt: float) -> None:
        """Advance all spheres and the periodic cell by dt."""
        if self.integrator == "leapfrog":
            for b in self.bodies:
                leapfrog_step(b, self.forces.force(b.id), self.forces.torque(b.id), dt)
        else:
            for b in self.bodies:
                kinematic_step(b, dt)

        if self.cell is not None:
            # Homogeneous deformation of the cell: dh/dt = L·h
            self.cell.h_size = self.cell.h_size + dt * (self.cell.vel_grad @ self.cell.h_size)

    def stress_per_body(self) -> dict[int, StressTensors]:
        """Stress tensors of every sphere, from the last evaluated step."""
        return stress_per_body(self.interactions, self._by_id, self.cell)

    def bulk_stress(self) -> StressTensors:
        """
        Homogenized stress of the periodic cell.
        
        Raises:
            ValueError: If the scene has no periodic cell.
        """
        return bulk_stress(self.interactions, self._by_id, self.cell)

    def run(self, steps: int) -> None:
        """Advance the simulation by a number of steps."""
        for _ in range(steps):
            self.step()
