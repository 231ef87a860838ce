# MIT License (see LICENSE)
"""
Implicit lubrication law for a pair of spheres.

One call of LubricationLaw.go() evaluates one interaction for one step:

1. Interaction cutoff: pairs farther than cutoff_factor·a are not evaluated;
   they carry no force and stay active only while approaching.
2. Normal part: the regime machine resolves the film gap, the normal force
   is split into contact and lubrication parts.
3. Shear part: the carried shear force is co-rotated and updated.
4. Torques: rolling and twisting resistances, plus the moment of the shear
   force about each center.
5. The signed force/torque pair is pushed to the force sink.

The law only mutates the interaction's own LubricationState, so distinct
interactions can be evaluated concurrently.
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from ..collision.geometry import SphereContactGeometry
from ..constants import MIN_GAP_FRACTION
from ..core.accumulator import ForceSink
from ..util import cross3, zeros3
from .config import LubricationConfig
from .normal import deflection_floor, normal_forces, normal_stiffness
from .regime import ContactStateMachine
from .shear import rotate_shear, shear_forces, shear_viscosity
from .torque import lubrication_torques

if TYPE_CHECKING:
    from ..collision.manager import Interaction

logger = logging.getLogger(__name__)


class LubricationLaw:
    """
    Per-pair evaluation of contact and lubrication forces.

    Attributes:
        config: Switches and numerical parameters.
        machine: Regime machine driving the gap integrator.
        warned_once: Set after the first invalid-gap error; reset it to see
                     the next one.

    Example:
        law = LubricationLaw(LubricationConfig(theta=0.55))
        active = law.go(interaction, geom, dt, buffer)
    """

    def __init__(self, config: LubricationConfig | None = None) -> None:
        self.config = config if config is not None else LubricationConfig()
        self.machine = ContactStateMachine(self.config)
        self.warned_once = False

    def go(self, inter: "Interaction", geom: SphereContactGeometry, dt: float, sink: ForceSink) -> bool:
        """
        Evaluate one interaction for one step.

        Args:
            inter: The interaction (constants and persistent state).
            geom: Geometry of the pair for this step.
            dt: Timestep.
            sink: Receives the forces and torques of the two bodies.

        Returns:
            False if the interaction should be dropped (beyond the cutoff and
            separating), True otherwise.
        """
        cfg = self.config
        phys = inter.constants
        st = inter.state

        a = geom.mean_radius
        un = geom.un
        n = geom.normal

        if not self.machine.is_active(un, a):
            # state forces mirror what is applied this step
            st.reset_forces()
            return geom.normal_velocity < 0.0

        delt = max(st.ue, deflection_floor(a))
        st.kn = normal_stiffness(phys.kno, st.ue, a)
        threshold = phys.roughness * a
        min_gap = MIN_GAP_FRACTION * a

        if not st.initialized:
            # start one step back along the current approach, on the
            # quasi-static rate nu/k · dun/dt
            self.machine.initialize(
                st,
                un - geom.normal_velocity * dt,
                rate=phys.nun * geom.normal_velocity / st.kn,
                min_gap=min_gap,
            )

        carried = st.shear_force
        st.reset_forces()
        u = un
        if cfg.activate_normal_lubrication:
            sol = self.machine.advance(
                st, un, nu=phys.nun, k=st.kn, threshold=threshold, dt=dt, min_gap=min_gap
            )
            u = sol.u
            fn = normal_forces(st.kn, un, u, threshold, sol.contact, n)
            st.normal_force = fn.total
            st.normal_contact_force = fn.contact
            st.normal_lubrication_force = fn.lubrication
            st.ue = u - un
        else:
            st.contact = u < threshold

        eta = phys.viscosity
        cr = zeros3()
        ct = zeros3()
        if u > 0.0 or eta <= 0.0:
            st.ks = phys.kso * delt ** 0.5
            st.cs = shear_viscosity(eta, a, u)
            st.cn = phys.nun / u if u > 0.0 else 0.0

            if cfg.activate_tangential_lubrication:
                previous = rotate_shear(carried, geom.orthonormal_axis, geom.twist_axis)
                fs = shear_forces(
                    previous, geom.shear_increment, st.ks, st.cs, dt,
                    st.contact, st.normal_contact_force, phys.friction,
                )
                st.shear_force = fs.total
                st.shear_contact_force = fs.contact
                st.shear_lubrication_force = fs.lubrication
                st.slip = fs.slip

            cr, ct = lubrication_torques(
                eta, a, un, u, geom.rel_ang_vel, n,
                roll=cfg.activate_roll_lubrication,
                twist=cfg.activate_twist_lubrication,
            )
        elif not self.warned_once:
            self.warned_once = True
            logger.error(
                "film gap u=%g <= 0 between bodies %d and %d with a viscous fluid, "
                "shear force and torques disabled for this step",
                u, inter.id1, inter.id2,
            )

        moment = cross3(st.shear_force, n)
        c1 = -(geom.radius1 + un / 2.0) * moment + cr + ct
        c2 = -(geom.radius2 + un / 2.0) * moment - cr - ct

        sink.apply_pair(inter.id1, inter.id2, st.normal_force + st.shear_force, c1, c2)
        return True
