"""
Microbenchmark: time per step vs number of spheres and worker threads.
Run:
  python benchmarks/bench_steps.py
"""
import time
import numpy as np
from lubrication_sim.scene import Scene
from lubrication_sim.types import SphereBody
from lubrication_sim.materials import Material

R = 1e-3


def run(n: int, n_jobs: int = 1, steps: int = 100):
    scene = Scene(dt=1e-5, viscosity=1e-3, n_jobs=n_jobs)

    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)
    mat = Material()

    # spawn spheres on a cubic lattice with small random jitter
    side = int(np.ceil(n ** (1 / 3)))
    spacing = 2.2 * R
    k = 0
    for iz in range(side):
        for iy in range(side):
            for ix in range(side):
                if k >= n:
                    break
                pos = spacing * np.array([ix, iy, iz]) + 1e-5 * rng.normal(size=3)
                vel = 1e-2 * rng.normal(size=3)
                scene.add_body(SphereBody(radius=R, mass=mat.mass_of(R), position=pos, velocity=vel, material=mat))
                k += 1

    # warmup
    for _ in range(10):
        scene.step()

    t0 = time.perf_counter()
    for _ in range(steps):
        scene.step()
    t1 = time.perf_counter()

    return (t1 - t0) / steps, len(scene.interactions)


if __name__ == "__main__":
    for n in [27, 125, 343, 1000]:
        for n_jobs in [1, 4]:
            per_step, pairs = run(n, n_jobs)
            print(f"N={n:5d}  jobs={n_jobs}  pairs={pairs:5d}  step={1e3*per_step:8.3f} ms  steps/s={1/per_step:8.1f}")
        print()
