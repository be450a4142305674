"""
Microbenchmark: time per logical step vs lattice size.
Run:
  python benchmarks/bench_ticks.py
"""
import time

import numpy as np
from pepper_sim import Simulation, SimulationConfig
from pepper_sim.profiler import Profiler


def run(cols: int, rows: int, steps: int = 120):
    prof = Profiler()
    sim = Simulation(config=SimulationConfig(grid_cols=cols, grid_rows=rows), seed=12345, profiler=prof)
    sim.build(960, 640)

    rng = np.random.default_rng(7)
    # a few pulses so tearing and pulse accumulation are exercised
    for _ in range(5):
        x, y = rng.uniform(100, 860), rng.uniform(100, 540)
        sim.inject_pulse(x, y)
        sim.weaken_near(x, y, aggressive=True)
    sim.tick(0.0)

    # warmup
    for _ in range(10):
        sim.step()

    t0 = time.perf_counter()
    for _ in range(steps):
        sim.step()
    t1 = time.perf_counter()
    return (t1 - t0) / steps, sim.constraint_count, prof.stats.summary()


if __name__ == "__main__":
    for cols, rows in [(12, 8), (26, 17), (52, 34)]:
        per_step, links, summary = run(cols, rows)
        print(f"{cols:3d}x{rows:<3d} links={links:5d}  step={1e3*per_step:8.3f} ms  steps/s={1/per_step:8.1f}")
        for k in ["forces", "integrate", "relax"]:
            if k in summary:
                print(" ", k, summary[k])
        print()
