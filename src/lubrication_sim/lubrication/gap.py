# MIT License (see LICENSE)
"""
Implicit integration of the fluid-film gap between two spheres.

The film gap u obeys

    nu · du/dt = k · u · (un - u)

where un is the surface distance of the undeformed spheres, k the normal
stiffness and nu the normal viscous coefficient. The ODE is stiff: the
relaxation time nu / (k u) vanishes with the gap. It is discretized with the
theta-method, which turns every step into the quadratic

    u² + b·u + c = 0

    b = w/θ - un,   c = (-(1-θ)·ṗ - w·u_prev) / θ,   w = nu / (dt·k)

with ṗ = u·(un - u) = nu/k · du/dt carried from the previous step. θ = 1 is
backward Euler (b = w - un, c = -w·u_prev), θ = 0.5 the trapezoidal rule.

Asperity contact (u < eps) adds a second spring keps pulling the gap towards
eps, which keeps the same form with

    k → k + keps,   un → (k·un + keps·eps) / (k + keps)

When a step has no admissible root (negative discriminant or no positive
root), the interval is bisected and the halves are integrated one after the
other. Bisection is bounded by max_depth; intervals that still fail at that
depth are integrated with backward Euler, whose roots always bracket zero.

Roots are computed in the cancellation-free form q = -(b + sign(b)·sqrt(Δ))/2,
c/q, so a positive gap never rounds to zero in a single step.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, replace

from ..constants import DEFAULT_MAX_SUBSTEPS, DEFAULT_RATE_WEIGHT, DEFAULT_THETA

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GapSolution:
    """
    Result of one gap integration.

    Attributes:
        u: Film gap at the end of the step (always ≥ 0).
        prev_dot_u: Updated rate estimate, to be carried to the next step.
        contact: u < eps.
        depth: Deepest bisection level used (0 = no sub-stepping).
        substeps: Number of intervals actually solved.
        fallback: Some interval was solved with the backward Euler fallback.
        switched: The regime assumption was flipped once to match the result.
    """
    u: float
    prev_dot_u: float
    contact: bool
    depth: int = 0
    substeps: int = 1
    fallback: bool = False
    switched: bool = False


def quadratic_roots(b: float, c: float) -> tuple[float, float] | None:
    """
    Roots of u² + b·u + c = 0, the larger one first.

    Returns None when the discriminant is negative.
    """
    delta = b * b - 4.0 * c
    if delta < 0.0:
        return None
    return _stable_roots(b, c, math.sqrt(delta))


def _stable_roots(b: float, c: float, sq: float) -> tuple[float, float]:
    """
    Roots from q = -(b + sign(b)·sq) / 2 and c / q, the larger one first.

    The small root never comes from the difference of two close numbers, so
    a thin film keeps a strictly positive gap whenever c < 0.
    """
    if b >= 0.0:
        q = -0.5 * (b + sq)
        if q == 0.0:
            return 0.0, 0.0
        return c / q, q
    q = -0.5 * (b - sq)
    return q, c / q


def select_root(r0: float, r1: float, u_prev: float) -> float:
    """
    Pick the physical root: the positive one closest to the previous gap.

    r0 is kept if it is positive and closer to u_prev than r1, or if r1 is
    negative; otherwise r1.
    """
    if (abs(r0 - u_prev) < abs(r1 - u_prev) and r0 > 0.0) or r1 < 0.0:
        return r0
    return r1


def theta_coefficients(
    prev_dot_u: float,
    u_prev: float,
    un: float,
    nu: float,
    k: float,
    dt: float,
    theta: float,
) -> tuple[float, float]:
    """
    Coefficients (b, c) of the monic quadratic of one theta-method step.

    θ = 1 selects the first-order branch, which ignores prev_dot_u.
    """
    w = nu / (dt * k)
    if theta == 1.0:
        return w - un, -w * u_prev
    return w / theta - un, (-prev_dot_u * (1.0 - theta) - w * u_prev) / theta


def contact_coefficients(un: float, k: float, keps: float, eps: float) -> tuple[float, float]:
    """Effective stiffness and target distance when asperities are in contact."""
    k_eff = k + keps
    return k_eff, (k * un + keps * eps) / k_eff


def _solve_step(
    prev_dot_u: float,
    u_prev: float,
    un: float,
    nu: float,
    k: float,
    dt: float,
    theta: float,
) -> float | None:
    """One theta-method step. None if no positive root exists."""
    b, c = theta_coefficients(prev_dot_u, u_prev, un, nu, k, dt, theta)
    roots = quadratic_roots(b, c)
    if roots is None:
        return None
    r0, r1 = roots
    if r0 <= 0.0 and r1 <= 0.0:
        return None
    return select_root(r0, r1, u_prev)


def _backward_euler(u_prev: float, un: float, nu: float, k: float, dt: float) -> float:
    """
    Backward Euler step, used once bisection is exhausted.

    With u_prev ≥ 0 the constant term -w·u_prev is non-positive, so the
    discriminant is non-negative and the larger root is ≥ 0. It is > 0
    whenever u_prev > 0.
    """
    b, c = theta_coefficients(0.0, u_prev, un, nu, k, dt, 1.0)
    r0, r1 = _stable_roots(b, c, math.sqrt(max(b * b - 4.0 * c, 0.0)))
    return max(select_root(r0, r1, u_prev), 0.0)


def _integrate_interval(
    prev_dot_u: float,
    un_prev: float,
    u_prev: float,
    un_curr: float,
    nu: float,
    k: float,
    keps: float,
    eps: float,
    dt: float,
    with_contact: bool,
    theta: float,
    max_depth: int,
    weight: float,
    log_level: int,
    min_gap: float = 0.0,
) -> GapSolution:
    """
    Integrate over [t, t+dt] under a fixed regime assumption.

    Failed intervals are split in two and pushed back on a work list, the
    first half on top, so that halves are always solved in time order and
    the gap/rate state is threaded through them sequentially. Every accepted
    root is raised to min_gap.
    """
    u = u_prev
    rate = prev_dot_u
    depth_reached = 0
    substeps = 0
    fallback = False

    pending = [(un_prev, un_curr, dt, 0)]
    while pending:
        un0, un1, h, depth = pending.pop()

        if with_contact:
            k_eff, target = contact_coefficients(un1, k, keps, eps)
        else:
            k_eff, target = k, un1

        root = _solve_step(rate, u, target, nu, k_eff, h, theta)
        if root is None:
            if depth < max_depth:
                un_mid = un0 + 0.5 * (un1 - un0)
                logger.log(
                    log_level,
                    "no admissible gap root (depth %d), sub-stepping with dt=%g",
                    depth, 0.5 * h,
                )
                pending.append((un_mid, un1, 0.5 * h, depth + 1))
                pending.append((un0, un_mid, 0.5 * h, depth + 1))
                continue
            logger.log(
                log_level,
                "sub-stepping exhausted at depth %d, falling back to backward Euler",
                depth,
            )
            root = _backward_euler(u, target, nu, k_eff, h)
            fallback = True

        u = max(root, min_gap)
        rate = weight * u * (target - u) + (1.0 - weight) * rate
        substeps += 1
        depth_reached = max(depth_reached, depth)

    return GapSolution(
        u=u,
        prev_dot_u=rate,
        contact=u < eps,
        depth=depth_reached,
        substeps=substeps,
        fallback=fallback,
    )


def integrate_gap(
    prev_dot_u: float,
    un_prev: float,
    u_prev: float,
    un_curr: float,
    nu: float,
    k: float,
    keps: float,
    eps: float,
    dt: float,
    with_contact: bool,
    theta: float = DEFAULT_THETA,
    max_depth: int = DEFAULT_MAX_SUBSTEPS,
    weight: float = DEFAULT_RATE_WEIGHT,
    log_level: int = logging.DEBUG,
    min_gap: float = 0.0,
) -> GapSolution:
    """
    Resolve the film gap at the end of one timestep.

    Integrates under the with_contact assumption first. If the resulting gap
    contradicts it (u < eps while assuming no contact, or the reverse), the
    rate estimate is restored and the whole step is integrated once more
    under the opposite assumption. There is no second retry: the returned
    contact flag always reflects u < eps.

    The function is pure: identical arguments give identical results.

    Args:
        prev_dot_u: Rate estimate carried from the previous step.
        un_prev: Surface distance at the previous step.
        u_prev: Film gap at the previous step (clamped to ≥ 0).
        un_curr: Surface distance at the end of this step.
        nu: Normal viscous coefficient.
        k: Normal stiffness.
        keps: Stiffness of the asperity contact.
        eps: Roughness threshold (absolute, e.g. eps·a).
        dt: Timestep.
        with_contact: Regime assumed for the first attempt.
        theta: Parameter of the theta-method, in (0, 1].
        max_depth: Maximum bisection depth.
        weight: Blend weight of the new rate estimate.
        log_level: Level of the sub-stepping and regime-switch records.
        min_gap: Smallest gap returned. A positive floor keeps u = 0, which
                 the ODE never leaves, out of reach of floating-point
                 underflow on long contacts.

    Raises:
        ValueError: If dt, k or theta are out of range.
    """
    if dt <= 0.0:
        raise ValueError(f"Timestep must be positive, got {dt}")
    if k <= 0.0:
        raise ValueError(f"Normal stiffness must be positive, got {k}")
    if not (0.0 < theta <= 1.0):
        raise ValueError(f"theta must lie in (0, 1], got {theta}")

    args = (max(u_prev, min_gap), un_curr, nu, k, keps, eps, dt)
    sol = _integrate_interval(
        prev_dot_u, un_prev, *args, with_contact, theta, max_depth, weight, log_level, min_gap
    )
    if sol.contact == with_contact:
        return sol

    logger.log(
        log_level,
        "gap %g contradicts with_contact=%s, integrating again with_contact=%s",
        sol.u, with_contact, not with_contact,
    )
    sol = _integrate_interval(
        prev_dot_u, un_prev, *args, not with_contact, theta, max_depth, weight, log_level, min_gap
    )
    return replace(sol, switched=True)


@dataclass(frozen=True)
class GapIntegrator:
    """
    integrate_gap() bound to a set of numerical parameters.

    Attributes:
        theta: Parameter of the theta-method.
        max_depth: Maximum bisection depth.
        weight: Blend weight of the rate estimate.
        debug: Report sub-stepping and regime switches as warnings.
    """
    theta: float = DEFAULT_THETA
    max_depth: int = DEFAULT_MAX_SUBSTEPS
    weight: float = DEFAULT_RATE_WEIGHT
    debug: bool = False

    def integrate(
        self,
        prev_dot_u: float,
        un_prev: float,
        u_prev: float,
        un_curr: float,
        nu: float,
        k: float,
        keps: float,
        eps: float,
        dt: float,
        with_contact: bool,
        min_gap: float = 0.0,
    ) -> GapSolution:
        return integrate_gap(
            prev_dot_u, un_prev, u_prev, un_curr, nu, k, keps, eps, dt, with_contact,
            theta=self.theta,
            max_depth=self.max_depth,
            weight=self.weight,
            log_level=logging.WARNING if self.debug else logging.DEBUG,
            min_gap=min_gap,
        )
