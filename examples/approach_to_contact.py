# examples/approach_to_contact.py
import logging

from lubrication_sim.scene import Scene
from lubrication_sim.types import SphereBody

logging.basicConfig(level=logging.INFO)

R = 1e-3
scene = Scene(dt=5e-3, viscosity=1e-3, integrator="kinematic")

a = SphereBody(radius=R, position=(0.0, 0.0, 0.0), velocity=(5e-5, 0.0, 0.0))
b = SphereBody(radius=R, position=(2 * R + 5e-4, 0.0, 0.0), velocity=(-5e-5, 0.0, 0.0))
scene.add_body(a)
scene.add_body(b)

while scene.time < 5.2:
    scene.step()
    inter = scene.interactions.get(a.id, b.id)
    if inter is None:
        continue
    st = inter.state
    if round(scene.time / scene.dt) % 100 == 0:
        print(f"t={scene.time:6.3f}  un={inter.geometry.un:+.3e}  u={st.u:.3e}  "
              f"contact={st.contact!s:5}  Fn={st.normal_force[0]:+.3e}")
