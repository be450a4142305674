# MIT License (see LICENSE)
"""
Diagnostics for lattice state.

Used by tests and the stats readout to check that the sheet is behaving:
anchors stay put, links stay within their break ratio, and motion dies
down once pulses have decayed.
"""
from __future__ import annotations
import numpy as np

from ..constraints.graph import ConstraintGraph
from ..particles import ParticleField


def kinetic_energy(particles: ParticleField, dt: float) -> float:
    """
    Kinetic energy of the free particles, unit mass each.

    Velocity is recovered from Verlet state as (x - x_prev) / dt.

    Args:
        particles: Particle arena.
        dt: Timestep in seconds that separated ``previous`` and ``position``.

    Returns:
        T = Σ 0.5 |v|² over free particles.
    """
    v = particles.displacement()[particles.free] / dt
    return 0.5 * float(np.einsum("ij,ij->", v, v))


def max_strain(graph: ConstraintGraph, particles: ParticleField) -> float:
    """Largest current/rest ratio over live constraints, or 0.0 when none are left."""
    live = graph.live()
    if not live:
        return 0.0
    return max(c.strain(particles) for c in live)


def pinned_drift(particles: ParticleField, reference: np.ndarray) -> float:
    """
    Largest distance any pinned particle has moved from ``reference``.

    Args:
        particles: Particle arena.
        reference: (N, 2) positions captured earlier, e.g. right after build.
    """
    pinned = particles.pinned
    if not pinned.any():
        return 0.0
    d = particles.position[pinned] - reference[pinned]
    return float(np.sqrt(np.einsum("ij,ij->i", d, d)).max())
