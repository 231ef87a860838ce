import math

import numpy as np
import pytest

from lubrication_sim.lubrication.normal import deflection_floor, normal_forces, normal_stiffness
from lubrication_sim.lubrication.shear import rotate_shear, shear_forces, shear_viscosity
from lubrication_sim.lubrication.torque import (
    lubrication_torques,
    roll_torque,
    split_spin,
    twist_torque,
)

N = np.array([1.0, 0.0, 0.0])


def test_normal_stiffness_uses_deflection_floor():
    """kn = kno √max(ue, a/100)."""
    a, kno = 1e-3, 2.0e5
    assert deflection_floor(a) == pytest.approx(a / 100, rel=1e-14)
    assert normal_stiffness(kno, 0.0, a) == pytest.approx(kno * math.sqrt(a / 100), rel=1e-14)
    assert normal_stiffness(kno, 4e-5, a) == pytest.approx(kno * math.sqrt(4e-5), rel=1e-14)


def test_normal_force_split_in_contact():
    """
    F = k (un - u) n,  contact part k (u - eps a) n,  lubrication = F - contact.
    """
    k, un, u, thr = 500.0, -2e-6, 5e-7, 1e-6
    fn = normal_forces(k, un, u, thr, True, N)
    print(fn)
    assert np.allclose(fn.total, k * (un - u) * N, rtol=1e-14, atol=0)
    assert np.allclose(fn.contact, k * (u - thr) * N, rtol=1e-14, atol=0)
    assert np.allclose(fn.contact + fn.lubrication, fn.total, rtol=1e-14, atol=1e-20)
    # Both parts repulsive: force on body 1 points away from body 2
    assert fn.contact[0] < 0.0 and fn.total[0] < 0.0


def test_normal_force_is_all_lubrication_without_contact():
    fn = normal_forces(500.0, 1e-5, 1.2e-5, 1e-6, False, N)
    assert np.all(fn.contact == 0.0)
    assert np.array_equal(fn.lubrication, fn.total)


def test_shear_viscosity_closed_form():
    """cs = π η / 2 (-2a + (2a + u) ln((2a + u)/u)), zero without fluid."""
    eta, a, u = 1e-3, 1e-3, 1e-6
    expected = math.pi * eta / 2 * (-2 * a + (2 * a + u) * math.log((2 * a + u) / u))
    assert shear_viscosity(eta, a, u) == pytest.approx(expected, rel=1e-14)
    assert shear_viscosity(0.0, a, u) == 0.0


def test_shear_maxwell_update_without_contact():
    """Ft = (F_prev + ks Δus) cs / (cs + ks dt), entirely viscous."""
    prev = np.array([0.0, 1e-3, 0.0])
    inc = np.array([0.0, 2e-6, 1e-6])
    ks, cs, dt = 300.0, 2e-5, 1e-4
    fs = shear_forces(prev, inc, ks, cs, dt, False, np.zeros(3), 0.5)
    expected = (prev + ks * inc) * cs / (cs + ks * dt)
    assert np.allclose(fs.total, expected, rtol=1e-14, atol=0)
    assert np.array_equal(fs.lubrication, fs.total)
    assert np.all(fs.contact == 0.0)
    assert not fs.slip


def test_shear_elastic_below_coulomb_bound():
    prev = np.array([0.0, 1e-4, 0.0])
    inc = np.array([0.0, 1e-7, 0.0])
    fs = shear_forces(prev, inc, 300.0, 2e-5, 1e-4, True, np.array([-1.0, 0.0, 0.0]), 0.5)
    assert not fs.slip
    assert np.allclose(fs.total, prev + 300.0 * inc, rtol=1e-14, atol=0)
    assert np.all(fs.lubrication == 0.0)


def test_shear_slip_respects_coulomb_bound():
    """
    |F_contact| ≤ |Fn,contact| max(0, μ); on slip the viscous part is cs Δus / dt
    and the applied force is (F_bound ks dt + F_prev cs + Δus ks cs)/(ks dt + cs).
    """
    prev = np.array([0.0, 0.4, 0.0])
    inc = np.array([0.0, 1e-3, 1e-3])
    ks, cs, dt, mu = 300.0, 2e-5, 1e-4, 0.5
    fnc = np.array([-1.0, 0.0, 0.0])
    fs = shear_forces(prev, inc, ks, cs, dt, True, fnc, mu)
    bound = 1.0 * mu
    print("contact", np.linalg.norm(fs.contact), "bound", bound)
    assert fs.slip
    assert np.linalg.norm(fs.contact) == pytest.approx(bound, rel=1e-12)
    assert np.allclose(fs.lubrication, cs * inc / dt, rtol=1e-14, atol=0)
    expected = (fs.contact * ks * dt + prev * cs + inc * ks * cs) / (ks * dt + cs)
    assert np.allclose(fs.total, expected, rtol=1e-14, atol=0)

    # Negative friction behaves as a zero bound
    fs0 = shear_forces(prev, inc, ks, cs, dt, True, fnc, -0.2)
    assert np.linalg.norm(fs0.contact) == 0.0


def test_rotate_shear_follows_spin_about_normal():
    """F - F × (0, 0, θ) rotates F by θ about z to first order."""
    f = np.array([1.0, 0.0, 0.0])
    rotated = rotate_shear(f, np.zeros(3), np.array([0.0, 0.0, 1e-3]))
    assert np.allclose(rotated, [1.0, 1e-3, 0.0], rtol=0, atol=1e-15)
    # The input is left untouched
    assert np.array_equal(f, [1.0, 0.0, 0.0])
    assert np.array_equal(rotate_shear(f, np.zeros(3), np.zeros(3)), f)


def test_split_spin():
    w = np.array([3.0, 2.0, -1.0])
    roll, twist = split_spin(w, N)
    assert np.array_equal(twist, [3.0, 0.0, 0.0])
    assert np.array_equal(roll, [0.0, 2.0, -1.0])


def test_roll_and_twist_closed_forms():
    """
      Cr = π η a³ (3/2 ln(a/u) + 63/500 (u/a) ln(a/u)) ω_roll
      Ct = π η a un ln(a/u) ω_twist
    """
    eta, a, un, u = 1e-3, 1e-3, 2e-6, 3e-6
    w = np.array([0.5, 2.0, 0.0])
    log_au = math.log(a / u)
    cr_exp = math.pi * eta * a**3 * (1.5 * log_au + 63 / 500 * u / a * log_au) * np.array([0.0, 2.0, 0.0])
    ct_exp = math.pi * eta * a * un * log_au * np.array([0.5, 0.0, 0.0])
    cr, ct = lubrication_torques(eta, a, un, u, w, N)
    print("Cr", cr, "exp", cr_exp)
    print("Ct", ct, "exp", ct_exp)
    assert np.allclose(cr, cr_exp, rtol=1e-13, atol=0)
    assert np.allclose(ct, ct_exp, rtol=1e-13, atol=0)


def test_torque_channels_can_be_disabled():
    w = np.array([0.5, 2.0, 0.0])
    cr, ct = lubrication_torques(1e-3, 1e-3, 2e-6, 3e-6, w, N, roll=False, twist=False)
    assert np.all(cr == 0.0) and np.all(ct == 0.0)
    cr, ct = lubrication_torques(0.0, 1e-3, 2e-6, 3e-6, w, N)
    assert np.all(cr == 0.0) and np.all(ct == 0.0)


def test_torque_requires_positive_gap():
    with pytest.raises(ValueError):
        roll_torque(1e-3, 1e-3, 0.0, np.array([0.0, 1.0, 0.0]))
    with pytest.raises(ValueError):
        twist_torque(1e-3, 1e-3, 1e-6, -1e-7, np.array([1.0, 0.0, 0.0]))
