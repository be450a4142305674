# MIT License (see LICENSE)
"""
Core per-step physics.

This subpackage provides:
    - Force accumulation: random jitter, gravity.
    - PulseField: decaying radial force sources.
    - Integration: position Verlet with a bounds clamp.
    - Diagnostics: kinetic energy, strain, anchor drift.

Typical usage:
    from pepper_sim.core import apply_jitter, integrate

    apply_jitter(particles, 3.0, rng)
    pulses.apply(particles, now)
    integrate(particles, dt=1/60, damping=0.0035, bounds=bounds)
"""
from .forces import apply_gravity, apply_jitter
from .integrators import clamp_to_bounds, integrate, verlet_step
from .invariants import kinetic_energy, max_strain, pinned_drift
from .pulses import Pulse, PulseField

__all__ = [
    # Forces
    "apply_gravity",
    "apply_jitter",
    "Pulse",
    "PulseField",
    # Integrators
    "verlet_step",
    "clamp_to_bounds",
    "integrate",
    # Diagnostics
    "kinetic_energy",
    "max_strain",
    "pinned_drift",
]
