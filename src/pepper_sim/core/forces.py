# MIT License (see LICENSE)
"""
Force accumulation for the particle lattice.

These functions add acceleration to ``ParticleField.accel`` ahead of the
integrator. Only free particles receive force; pinned anchors are left
alone. Acceleration is consumed (zeroed) by every integrate, so forces act
for one step only and must be re-applied each step.
"""
from __future__ import annotations

import numpy as np

from ..particles import ParticleField


def apply_gravity(particles: ParticleField, gy: float) -> None:
    """
    Add a constant acceleration along +y to free particles.

    Has no effect when ``gy`` is zero.
    """
    if gy != 0.0:
        particles.accel[particles.free, 1] += gy


def apply_jitter(particles: ParticleField, amount: float, rng: np.random.Generator) -> None:
    """
    Add a uniform random acceleration in [-amount, amount]² to free particles.

    Keeps the sheet from settling into an exact, lifeless equilibrium.

    Args:
        particles: Arena to modify in-place.
        amount: Half-range of the draw. Zero disables jitter.
        rng: Random source. A seeded generator makes runs reproducible.
    """
    if amount <= 0.0:
        return
    free = particles.free
    particles.accel[free] += rng.uniform(-amount, amount, size=(int(free.sum()), 2))
