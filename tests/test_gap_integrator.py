import logging
import math

import numpy as np
import pytest

from lubrication_sim.lubrication.gap import (
    GapIntegrator,
    contact_coefficients,
    integrate_gap,
    quadratic_roots,
    select_root,
    theta_coefficients,
)


def _logistic(t, u0, U, k=1.0, nu=1.0):
    return U * u0 / (u0 + (U - u0) * math.exp(-k * U * t / nu))


def _run_logistic(theta, dt=1e-3, T=2.0, u0=0.2, U=1.0):
    u, p = u0, u0 * (U - u0)
    for _ in range(int(round(T / dt))):
        sol = integrate_gap(p, U, u, U, nu=1.0, k=1.0, keps=1.0, eps=0.0, dt=dt,
                            with_contact=False, theta=theta, weight=1.0)
        u, p = sol.u, sol.prev_dot_u
    return u


def test_trapezoidal_matches_logistic_solution():
    """
    With constant un = U the gap ODE nu du/dt = k u (U - u) is the logistic
    equation:
      u(t) = U u0 / (u0 + (U - u0) exp(-k U t / nu))
    theta = 0.5 is second order: relative error well below 1e-4 at dt = 1e-3.
    """
    u = _run_logistic(theta=0.5)
    exact = _logistic(2.0, 0.2, 1.0)
    rel = abs(u - exact) / exact
    print("u", u, "exact", exact, "relerr", rel)
    assert rel < 1e-4


def test_backward_euler_matches_logistic_solution():
    """theta = 1 (first order): relative error of order dt."""
    u = _run_logistic(theta=1.0)
    exact = _logistic(2.0, 0.2, 1.0)
    rel = abs(u - exact) / exact
    print("u", u, "exact", exact, "relerr", rel)
    assert rel < 5e-3


def test_quadratic_roots_and_selection():
    # u² - 3u + 2 = (u - 1)(u - 2)
    r0, r1 = quadratic_roots(-3.0, 2.0)
    assert (r0, r1) == (2.0, 1.0)
    assert select_root(r0, r1, u_prev=1.9) == 2.0
    assert select_root(r0, r1, u_prev=1.1) == 1.0
    # Negative smaller root is never selected
    assert select_root(0.5, -0.1, u_prev=-0.1) == 0.5
    # Negative discriminant
    assert quadratic_roots(0.0, 1.0) is None


def test_theta_coefficients():
    """
      b = w/θ - un,  c = (-(1-θ) ṗ - w u_prev)/θ,  w = nu/(dt k)
    and for θ = 1: b = w - un, c = -w u_prev (ṗ ignored).
    """
    b, c = theta_coefficients(prev_dot_u=0.3, u_prev=0.5, un=2.0, nu=4.0, k=2.0, dt=0.5, theta=0.5)
    w = 4.0
    assert b == w / 0.5 - 2.0
    assert c == (-0.3 * 0.5 - w * 0.5) / 0.5

    b1, c1 = theta_coefficients(prev_dot_u=123.0, u_prev=0.5, un=2.0, nu=4.0, k=2.0, dt=0.5, theta=1.0)
    assert b1 == w - 2.0
    assert c1 == -w * 0.5


def test_contact_coefficients():
    """k → k + keps, un → (k un + keps eps)/(k + keps)."""
    k_eff, target = contact_coefficients(un=-1.0, k=3.0, keps=1.0, eps=0.2)
    assert k_eff == 4.0
    assert abs(target - (-3.0 + 0.2) / 4.0) < 1e-15


def test_substepping_recovers_without_fallback():
    """
    ṗ = -10, u_prev = 1, un = 2, nu = k = dt = 1, θ = 0.5:
    the full step has discriminant -32, halves keep failing down to depth 3
    where dt = 1/8 admits a positive root. With max_depth = 4 no fallback is needed.
    """
    sol = integrate_gap(-10.0, 2.0, 1.0, 2.0, nu=1.0, k=1.0, keps=1.0, eps=0.0, dt=1.0,
                        with_contact=False, theta=0.5, max_depth=4)
    print(sol)
    assert sol.depth == 3
    assert sol.substeps == 4
    assert not sol.fallback
    assert math.isfinite(sol.u) and sol.u > 0.0


def test_substepping_exhausted_falls_back_to_backward_euler():
    sol = integrate_gap(-10.0, 2.0, 1.0, 2.0, nu=1.0, k=1.0, keps=1.0, eps=0.0, dt=1.0,
                        with_contact=False, theta=0.5, max_depth=2)
    print(sol)
    assert sol.fallback
    assert sol.depth == 2
    assert math.isfinite(sol.u) and sol.u >= 0.0

    sol0 = integrate_gap(-10.0, 2.0, 1.0, 2.0, nu=1.0, k=1.0, keps=1.0, eps=0.0, dt=1.0,
                         with_contact=False, theta=0.5, max_depth=0)
    assert sol0.fallback and sol0.substeps == 1


def test_regime_assumption_is_retried_once():
    """
    Assuming no contact while the gap closes below eps: the step is
    integrated again with the asperity spring, and the flag follows u < eps.
    """
    sol = integrate_gap(0.0, -1.0, 0.05, -1.0, nu=1.0, k=1.0, keps=1.0, eps=0.1, dt=0.1,
                        with_contact=False, theta=0.55)
    print(sol)
    assert sol.switched
    assert sol.contact
    assert 0.0 <= sol.u < 0.1


def test_contact_flag_matches_gap_and_gap_stays_non_negative():
    rng = np.random.default_rng(1234)
    u, p, un_prev, contact = 0.3, 0.0, 0.3, False
    for un in rng.uniform(-0.5, 0.5, size=500):
        sol = integrate_gap(p, un_prev, u, float(un), nu=0.5, k=1.0, keps=1.0, eps=0.1, dt=0.05,
                            with_contact=contact, theta=0.55, max_depth=4)
        assert math.isfinite(sol.u)
        assert sol.u >= 0.0
        assert sol.contact == (sol.u < 0.1)
        u, p, un_prev, contact = sol.u, sol.prev_dot_u, float(un), sol.contact


def test_integration_is_deterministic():
    args = (-10.0, 2.0, 1.0, 2.0)
    kw = dict(nu=1.0, k=1.0, keps=1.0, eps=0.0, dt=1.0, with_contact=False, theta=0.5)
    assert integrate_gap(*args, **kw) == integrate_gap(*args, **kw)


def test_invalid_arguments_raise():
    with pytest.raises(ValueError):
        integrate_gap(0.0, 1.0, 1.0, 1.0, nu=1.0, k=1.0, keps=1.0, eps=0.0, dt=0.0, with_contact=False)
    with pytest.raises(ValueError):
        integrate_gap(0.0, 1.0, 1.0, 1.0, nu=1.0, k=0.0, keps=1.0, eps=0.0, dt=1.0, with_contact=False)
    with pytest.raises(ValueError):
        integrate_gap(0.0, 1.0, 1.0, 1.0, nu=1.0, k=1.0, keps=1.0, eps=0.0, dt=1.0, with_contact=False, theta=0.0)


def test_debug_integrator_reports_substepping(caplog):
    integrator = GapIntegrator(theta=0.5, max_depth=4, debug=True)
    with caplog.at_level(logging.WARNING, logger="lubrication_sim.lubrication.gap"):
        integrator.integrate(-10.0, 2.0, 1.0, 2.0, 1.0, 1.0, 1.0, 0.0, 1.0, False)
    assert "sub-stepping" in caplog.text

    caplog.clear()
    quiet = GapIntegrator(theta=0.5, max_depth=4)
    with caplog.at_level(logging.WARNING, logger="lubrication_sim.lubrication.gap"):
        quiet.integrate(-10.0, 2.0, 1.0, 2.0, 1.0, 1.0, 1.0, 0.0, 1.0, False)
    assert caplog.text == ""


def test_small_root_keeps_its_precision():
    """
    u² + u - 1e-20 = 0 has the roots ≈ 1e-20 and ≈ -1. Written as
    (-b + sqrt(b² - 4c)) / 2 the small one rounds to 0; from c / q it does not.
    """
    r0, r1 = quadratic_roots(1.0, -1e-20)
    print("r0", r0, "r1", r1)
    assert r0 == pytest.approx(1e-20, rel=1e-12)
    assert r1 == pytest.approx(-1.0, rel=1e-12)
    assert quadratic_roots(0.0, 0.0) == (0.0, 0.0)


def _pulled_film(u_prev, **kw):
    """A thin film in asperity contact, pulled towards a negative target."""
    nu, k, eps, dt, un = 4.71e-9, 518.0, 1e-6, 5e-3, -1e-5
    _, target = contact_coefficients(un, k, k, eps)
    sol = integrate_gap(u_prev * (target - u_prev), un, u_prev, un, nu=nu, k=k, keps=k, eps=eps,
                        dt=dt, with_contact=True, theta=0.55, max_depth=0, **kw)
    return sol, nu / (dt * 2 * k), target


def test_fallback_keeps_a_thin_film_open():
    """
    No theta root is positive, so backward Euler decides:
      u ≈ w u_prev / (w - target),   w = nu / (dt (k + keps))
    tiny but strictly positive, so the film can open again later.
    """
    u_prev = 1e-20
    sol, w, target = _pulled_film(u_prev)
    expected = w * u_prev / (w - target)
    print(sol, "expected", expected)
    assert sol.fallback
    assert sol.contact and not sol.switched
    assert sol.u > 0.0
    assert sol.u == pytest.approx(expected, rel=1e-9)


def test_gap_floor_bounds_the_result():
    sol, _, _ = _pulled_film(1e-20, min_gap=1e-15)
    print(sol)
    assert sol.u == 1e-15
    assert sol.contact
