import numpy as np
import pytest

from lubrication_sim.collision.broadphase import SpatialHashBroadphase, periodic_pairs, within_detection
from lubrication_sim.collision.geometry import sphere_contact_geometry
from lubrication_sim.collision.manager import InteractionManager
from lubrication_sim.types import PeriodicCell, SphereBody

R = 1e-3


def _body(i, pos, **kw):
    return SphereBody(radius=R, position=pos, id=i, **kw)


def test_geometry_of_approaching_pair():
    """
    un = d - r1 - r2, contact point midway between the surfaces,
    normal rate = (v2 - v1)·n, shear increment = tangential relative motion · dt.
    """
    b1 = _body(1, (0.0, 0.0, 0.0), velocity=(1e-3, 0.0, 0.0))
    b2 = _body(2, (2 * R + 1e-5, 0.0, 0.0), velocity=(-1e-3, 2e-3, 0.0))
    g = sphere_contact_geometry(b1, b2, dt=1e-4)
    assert np.array_equal(g.normal, [1.0, 0.0, 0.0])
    assert g.un == pytest.approx(1e-5, rel=1e-9)
    assert g.mean_radius == R
    assert np.allclose(g.contact_point, [R + 0.5e-5, 0.0, 0.0], rtol=1e-12, atol=0)
    assert g.normal_velocity == pytest.approx(-2e-3, rel=1e-12)
    assert np.allclose(g.shear_increment, [0.0, 2e-7, 0.0], rtol=1e-12, atol=1e-24)
    assert np.all(g.orthonormal_axis == 0.0)


def test_spin_contributes_to_shear_and_twist():
    b1 = _body(1, (0.0, 0.0, 0.0), angular_velocity=(4.0, 0.0, 10.0))
    b2 = _body(2, (2 * R, 0.0, 0.0), angular_velocity=(2.0, 0.0, 0.0))
    g = sphere_contact_geometry(b1, b2, dt=1e-4, prev_normal=np.array([1.0, 0.0, 0.0]))
    # Contact point of body 1 moves at ω1 × (R n) = (0, 10 R, 0)
    assert np.allclose(g.shear_increment, [0.0, -10 * R * 1e-4, 0.0], rtol=1e-12, atol=1e-24)
    assert np.allclose(g.twist_axis, [1e-4 / 2 * 6.0, 0.0, 0.0], rtol=1e-12, atol=0)
    assert np.array_equal(g.rel_ang_vel, [-2.0, 0.0, -10.0])


def test_spatial_hash_finds_close_pairs_only():
    bodies = [
        _body(1, (0.0, 0.0, 0.0)),
        _body(2, (2.5e-3, 0.0, 0.0)),
        _body(3, (0.0, 10e-3, 0.0)),
    ]
    bp = SpatialHashBroadphase(cell_size=3e-3)
    pairs = [(a.id, b.id) for a, b in bp.pairs(bodies, factor=1.5)]
    assert (1, 2) in pairs
    assert (1, 3) not in pairs
    assert within_detection(bodies[0], bodies[1], 1.5)
    assert not within_detection(bodies[0], bodies[1], 1.0)


def test_periodic_minimum_image():
    cell = PeriodicCell.box(1e-2, 1e-2, 1e-2)
    bodies = [_body(1, (0.5e-3, 5e-3, 5e-3)), _body(2, (9.5e-3, 5e-3, 5e-3))]
    out = periodic_pairs(bodies, cell, factor=1.5)
    assert len(out) == 1
    a, b, cell_dist = out[0]
    assert (a.id, b.id) == (1, 2)
    assert list(cell_dist) == [-1, 0, 0]
    assert np.allclose(b.position + cell.shift(cell_dist), [-0.5e-3, 5e-3, 5e-3], rtol=0, atol=1e-15)


def test_periodic_image_velocity():
    cell = PeriodicCell(h_size=np.diag([1.0, 1.0, 1.0]), vel_grad=np.array([[0.0, 2.0, 0.0], [0, 0, 0], [0, 0, 0]]))
    assert np.array_equal(cell.shift_velocity(np.array([0, 1, 0])), [2.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        PeriodicCell(h_size=np.zeros((3, 3)))


def test_manager_creates_and_drops_interactions():
    bodies = [_body(1, (0.0, 0.0, 0.0)), _body(2, (2.5e-3, 0.0, 0.0))]
    manager = InteractionManager()
    active = manager.update(bodies, None, viscosity=1e-3, roughness=1e-3)
    assert [i.key for i in active] == [(1, 2)]
    assert manager.get(2, 1) is active[0]

    # Moving apart does not remove the interaction; only drop() does
    bodies[1].position = np.array([1.0, 0.0, 0.0])
    assert len(manager.update(bodies, None, 1e-3, 1e-3)) == 1
    manager.drop([(1, 2)])
    assert (1, 2) not in manager
    assert len(manager) == 0
