# MIT License (see LICENSE)
"""
Position Verlet integration for the particle arena.

The update uses current and previous position as an implicit velocity:

    next     = x + (x - x_prev) * (1 - damping) + a * dt²
    x_prev   = x
    x        = next

Pinned particles do not move: their previous position is reset to their
position (zero implicit velocity) and their acceleration is discarded.
After the step every free particle is clamped into the domain bounds.

Reference:
    https://en.wikipedia.org/wiki/Verlet_integration#Basic_St%C3%B6rmer%E2%80%93Verlet
"""
from __future__ import annotations
from typing import TYPE_CHECKING

import numpy as np

from ..particles import ParticleField

if TYPE_CHECKING:
    from ..lattice import Bounds


def verlet_step(particles: ParticleField, dt: float, damping: float) -> None:
    """
    Advance every free particle by ``dt`` seconds.

    A pure function of position, previous position, accumulated
    acceleration, ``dt`` and ``damping``; no other state is read.

    Args:
        particles: Arena to integrate (modified in-place).
        dt: Timestep in seconds.
        damping: Fraction of implicit velocity removed, in [0, 1).
    """
    free = particles.free
    x = particles.position
    nxt = x[free] + (x[free] - particles.previous[free]) * (1.0 - damping) + particles.accel[free] * (dt * dt)

    particles.previous[:] = x
    x[free] = nxt
    particles.accel.fill(0.0)


def clamp_to_bounds(particles: ParticleField, bounds: "Bounds") -> None:
    """
    Clamp free particles into ``bounds`` in-place.

    Pinned anchors sit on the bounds by construction and are left untouched,
    so rounding in the grid layout can never nudge them.
    """
    free = particles.free
    lo = (bounds.min_x, bounds.min_y)
    hi = (bounds.max_x, bounds.max_y)
    particles.position[free] = np.clip(particles.position[free], lo, hi)


def integrate(particles: ParticleField, dt: float, damping: float, bounds: "Bounds") -> None:
    """Verlet step followed by the bounds clamp."""
    verlet_step(particles, dt, damping)
    clamp_to_bounds(particles, bounds)
