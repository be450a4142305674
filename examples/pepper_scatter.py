"""
Headless run: press in the middle of the sheet, drag right, release,
then let it settle. Prints a text frame every half second.
Run:
  python examples/pepper_scatter.py
"""
import logging

from pepper_sim import PointerController, Simulation
from pepper_sim.renderer import DebugRenderer

logging.basicConfig(level=logging.INFO)

sim = Simulation(seed=2024)
sim.build(960, 640)
pointer = PointerController(sim)
renderer = DebugRenderer()

frame_ms = 1000 / 60
pointer.pointer_down(480, 320)
for i in range(120):
    if i < 30:
        pointer.pointer_move(480 + 4 * i, 320)
    elif i == 30:
        pointer.pointer_up()
    sim.tick(frame_ms)
    if i % 30 == 0:
        renderer.render_snapshot(sim.snapshot())

print(sim.snapshot().stats_line())
