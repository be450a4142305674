from pepper_sim import Simulation, SimulationConfig

cfg = SimulationConfig(
    grid_cols=3, grid_rows=3,
    jitter_acceleration=0.0, initial_jitter=0.0,
    break_threshold=1.6, tear_impulse=0.0,
)
sim = Simulation(config=cfg, seed=0)
sim.build(248, 248)

print("links before:", sim.constraint_count)
# drag the centre down, at rest, so its top link sits at 1.9x
sim.particles.position[4, 1] += 90.0
sim.particles.previous[4] = sim.particles.position[4]
result = sim.step()
print("breaks:", result.breaks, "links after:", sim.constraint_count)
