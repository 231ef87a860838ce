# examples/shear_cell.py
# Simple shear of a periodic suspension; prints the bulk stress.
import numpy as np

from lubrication_sim.scene import Scene
from lubrication_sim.types import PeriodicCell, SphereBody
from lubrication_sim.materials import Material
from lubrication_sim.lubrication.config import LubricationConfig

R = 1e-3
L = 8e-3
rate = 1.0

cell = PeriodicCell(h_size=np.diag([L, L, L]), vel_grad=np.array([[0.0, rate, 0.0], [0, 0, 0], [0, 0, 0]]))
scene = Scene(dt=1e-5, viscosity=1e-1, cell=cell, lubrication=LubricationConfig(theta=0.55), n_jobs=-1)

rng = np.random.default_rng(3)
mat = Material(young=1e7, poisson=0.3, density=1000.0)
spacing = L / 3
for i in range(3):
    for j in range(3):
        for k in range(3):
            pos = (np.array([i, j, k]) + 0.5) * spacing + rng.normal(scale=1e-5, size=3)
            vel = (rate * pos[1], 0.0, 0.0)
            scene.add_body(SphereBody(radius=R, mass=mat.mass_of(R), position=pos, velocity=vel, material=mat))

for n in range(1, 501):
    scene.step()
    if n % 100 == 0:
        s = scene.bulk_stress()
        print(f"t={scene.time:.2e}  pairs={len(scene.interactions):3d}  "
              f"sigma_xy: NL={s.normal_lubrication[0, 1]:+.3e}  SL={s.shear_lubrication[0, 1]:+.3e}  "
              f"NC={s.normal_contact[0, 1]:+.3e}")
