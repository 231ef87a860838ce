# MIT License (see LICENSE)
"""
Lubricated / asperity-contact regime of a pair.

The regime of a step is whatever the resolved gap satisfies: Contact when
u < eps·a, NoContact otherwise. The only transition mechanism is the single
retry inside the gap integrator. This module wraps the integrator with the
per-pair policy: initialization of a fresh pair, the interaction cutoff,
and bookkeeping of regime flips across steps.
"""
from __future__ import annotations
import enum
import logging

from .config import LubricationConfig
from .gap import GapIntegrator, GapSolution
from .state import LubricationState

logger = logging.getLogger(__name__)


class Regime(enum.Enum):
    NO_CONTACT = "no_contact"
    CONTACT = "contact"

    @classmethod
    def of(cls, u: float, threshold: float) -> "Regime":
        return cls.CONTACT if u < threshold else cls.NO_CONTACT


class ContactStateMachine:
    """
    Drives the gap integrator for one pair per step.

    Example:
        machine = ContactStateMachine(LubricationConfig())
        if machine.is_active(un, a):
            sol = machine.advance(state, un, nu=nun, k=kn, threshold=eps * a, dt=dt)
    """

    def __init__(self, config: LubricationConfig) -> None:
        self.config = config
        self.integrator = GapIntegrator(
            theta=config.theta,
            max_depth=config.max_substeps,
            weight=config.rate_weight,
            debug=config.debug,
        )

    def is_active(self, un: float, a: float) -> bool:
        """Whether the pair is close enough for the lubrication law to be evaluated."""
        return un <= self.config.cutoff_factor * a

    def initialize(
        self,
        state: LubricationState,
        un: float,
        rate: float = 0.0,
        min_gap: float = 0.0,
    ) -> None:
        """
        Start a fresh pair from the undeformed configuration (u = un).

        rate seeds prev_dot_u. Passing the quasi-static value nu/k · dun/dt
        lets the theta-method start on its fixed point: with rate = 0 a
        moving pair begins with a decaying step-to-step ripple of the force.
        """
        state.u = max(un, min_gap)
        state.prev_un = un
        state.prev_dot_u = rate

    def advance(
        self,
        state: LubricationState,
        un: float,
        nu: float,
        k: float,
        threshold: float,
        dt: float,
        min_gap: float = 0.0,
    ) -> GapSolution:
        """
        Resolve the gap of this step and update the state in place.

        The regime assumed for the first attempt is the one of the previous
        gap; a fresh pair starts in NoContact unless its initial gap is
        already below the threshold.

        Args:
            state: Persistent state of the pair (u, prev_un, prev_dot_u, contact).
            un: Current surface distance.
            nu: Normal viscous coefficient.
            k: Normal stiffness; also used as the asperity stiffness.
            threshold: Roughness threshold eps·a.
            dt: Timestep.
            min_gap: Floor of the resolved gap.
        """
        if not state.initialized:
            self.initialize(state, un, min_gap=min_gap)

        previous = Regime.of(state.u, threshold)
        sol = self.integrator.integrate(
            state.prev_dot_u, state.prev_un, state.u, un,
            nu, k, k, threshold, dt,
            with_contact=previous is Regime.CONTACT,
            min_gap=min_gap,
        )

        state.prev_dot_u = sol.prev_dot_u
        state.prev_un = un
        state.u = sol.u
        state.contact = sol.contact

        self._track_flips(state, previous, Regime.of(sol.u, threshold))
        return sol

    def _track_flips(self, state: LubricationState, previous: Regime, current: Regime) -> None:
        """
        Count consecutive regime flips and report persistent oscillation once.

        Oscillation is only reported; the regime of each step is left as the
        integrator resolved it.
        """
        if current is previous:
            state.flip_streak = 0
            return
        state.flip_streak += 1
        if state.flip_streak >= self.config.oscillation_window and not state.oscillation_reported:
            state.oscillation_reported = True
            logger.warning(
                "regime flipped on %d consecutive steps (gap %g), pair may be oscillating "
                "between contact and lubrication",
                state.flip_streak, state.u,
            )
