# MIT License (see LICENSE)
"""
pepper_sim - a tearable soft-body lattice driven by radial pulses.

A grid of point masses joined by distance constraints floats inside a
rectangular domain. Pointer input drops short-lived "soap pulses" that push
particles outward and locally weaken the links, so the sheet scatters and
tears like pepper on water touched with soap.

Main entry points:
    - Simulation: The simulation context (lattice, pulses, scheduler).
    - SimulationConfig: Static parameters.
    - PointerController: Maps press/drag/release onto simulation requests.
    - LatticeSnapshot: Read-only output for renderers.

Submodules:
    - constraints: Distance constraints, relaxation with tearing, weakening.
    - core: Force accumulation, pulses, Verlet integration, diagnostics.
    - renderer: Optional headless rendering adapters.

Example:
    from pepper_sim import Simulation

    sim = Simulation(seed=7)
    sim.build(960, 640)
    sim.inject_pulse(480, 320)
    sim.tick(16.7)
    snap = sim.snapshot()
"""
from .config import ConfigurationError, SimulationConfig
from .interaction import PointerController
from .lattice import Bounds, build_lattice
from .particles import ParticleField
from .scheduler import FixedStepScheduler
from .simulation import Simulation
from .snapshot import LatticeSnapshot

__all__ = [
    # Simulation
    "Simulation",
    "SimulationConfig",
    "ConfigurationError",
    "FixedStepScheduler",
    # Lattice
    "ParticleField",
    "Bounds",
    "build_lattice",
    # I/O with the front end
    "PointerController",
    "LatticeSnapshot",
]
