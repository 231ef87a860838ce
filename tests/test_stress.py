import numpy as np
import pytest

from lubrication_sim.scene import Scene
from lubrication_sim.types import PeriodicCell, SphereBody
from lubrication_sim.lubrication.stress import StressTensors, bulk_stress, stress_per_body

R = 1e-3
L = 10e-3


def _approaching_pair(cell=None):
    scene = Scene(dt=1e-5, viscosity=1e-3, integrator="kinematic", cell=cell)
    a = SphereBody(radius=R, mass=1e-5, position=(4e-3, 5e-3, 5e-3))
    b = SphereBody(radius=R, mass=1e-5, position=(6.05e-3, 5e-3, 5e-3), velocity=(-1e-3, 0.0, 0.0))
    scene.add_body(a)
    scene.add_body(b)
    for _ in range(10):
        scene.step()
    return scene, a, b


def test_per_body_stress_uses_volume_scaled_lever_arm():
    """
    σ1 += F ⊗ (cp - x1)/V1,   σ2 -= F ⊗ (cp - x2)/V2
    for each of the four force components.
    """
    scene, a, b = _approaching_pair()
    inter = scene.interactions.get(a.id, b.id)
    st = inter.state
    cp = inter.geometry.contact_point
    stresses = scene.stress_per_body()

    f = st.normal_lubrication_force
    assert np.linalg.norm(f) > 0.0
    exp1 = np.outer(f, (cp - a.position) / a.volume)
    exp2 = -np.outer(f, (cp - b.position) / b.volume)
    print("sigma1", stresses[a.id].normal_lubrication[0, 0], "exp", exp1[0, 0])
    assert np.allclose(stresses[a.id].normal_lubrication, exp1, rtol=1e-12, atol=0)
    assert np.allclose(stresses[b.id].normal_lubrication, exp2, rtol=1e-12, atol=0)
    # Separated spheres, no spin: no contact and no shear contributions
    assert np.all(stresses[a.id].normal_contact == 0.0)
    assert np.all(stresses[a.id].shear_lubrication == 0.0)


def test_bulk_stress_of_periodic_cell():
    """
    Σ_i V_i σ_i / V_cell = F ⊗ (x2 - x1) / V_cell, independent of the
    contact point.
    """
    cell = PeriodicCell.box(L, L, L)
    scene, a, b = _approaching_pair(cell)
    st = scene.interactions.get(a.id, b.id).state
    expected = np.outer(st.normal_lubrication_force, b.position - a.position) / L**3

    got = scene.bulk_stress().normal_lubrication
    err = np.abs(got - expected).max() / np.abs(expected).max()
    print("bulk xx", got[0, 0], "exp", expected[0, 0], "relerr", err)
    assert np.abs(expected).max() > 0.0
    assert err < 1e-9


def test_bulk_stress_requires_periodic_cell():
    scene, _, _ = _approaching_pair()
    with pytest.raises(ValueError):
        scene.bulk_stress()
    with pytest.raises(ValueError):
        bulk_stress(scene.interactions, {b.id: b for b in scene.bodies}, None)


def test_untouched_bodies_have_zero_stress():
    bodies = {1: SphereBody(radius=R, id=1)}
    out = stress_per_body([], bodies)
    assert set(out) == {1}
    assert all(np.all(m == 0.0) for m in out[1].as_tuple())
    assert np.all(StressTensors().total == 0.0)


def test_pair_beyond_cutoff_adds_no_stress():
    """
    An approaching pair pushed beyond the cutoff stays registered but gets
    no force this step, so it contributes nothing to the stress either.
    """
    scene, a, b = _approaching_pair()
    inter = scene.interactions.get(a.id, b.id)
    assert np.linalg.norm(inter.state.normal_force) > 0.0

    b.position = np.array([4e-3 + 2 * R + 2e-3, 5e-3, 5e-3])
    scene.step()
    assert scene.interactions.get(a.id, b.id) is inter
    assert inter.geometry.un > R
    assert np.all(inter.state.normal_force == 0.0)
    assert np.all(inter.state.shear_force == 0.0)
    stresses = scene.stress_per_body()
    for body_id in (a.id, b.id):
        assert all(np.all(m == 0.0) for m in stresses[body_id].as_tuple())
