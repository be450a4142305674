# MIT License (see LICENSE)
"""
Point-mass storage for the lattice.

Particles live in a flat arena of parallel numpy arrays; constraints and
callers refer to them by integer index. There is no per-particle object, so
a rebuild simply replaces the arena and nothing holds stale references.

Verlet state is position plus previous position; velocity is implicit:
    v ≈ (position - previous) / dt
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .util import f64


@dataclass
class ParticleField:
    """
    Arena of point masses.

    Attributes:
        position: Current positions, shape (N, 2).
        previous: Positions at the previous step, shape (N, 2).
        accel: Acceleration accumulated for the next integrate, shape (N, 2).
            Cleared by every integrate.
        pinned: Anchor mask, shape (N,). Pinned particles are never moved by
            the integrator or the solver.
    """
    position: np.ndarray
    previous: np.ndarray | None = None
    accel: np.ndarray | None = None
    pinned: np.ndarray | None = None

    def __post_init__(self) -> None:
        self.position = f64(self.position).reshape(-1, 2)
        n = len(self.position)
        self.previous = self.position.copy() if self.previous is None else f64(self.previous).reshape(-1, 2)
        self.accel = np.zeros((n, 2), dtype=np.float64) if self.accel is None else f64(self.accel).reshape(-1, 2)
        if self.pinned is None:
            self.pinned = np.zeros(n, dtype=bool)
        else:
            self.pinned = np.array(self.pinned, dtype=bool).reshape(-1)
        if not (len(self.previous) == len(self.accel) == len(self.pinned) == n):
            raise ValueError("particle arrays must all have the same length")

    def __len__(self) -> int:
        return len(self.position)

    @property
    def free(self) -> np.ndarray:
        """Boolean mask of particles the integrator may move."""
        return ~self.pinned

    def add_accel(self, accel: np.ndarray, mask: np.ndarray | None = None) -> None:
        """
        Accumulate acceleration for the next step.

        Args:
            accel: (N, 2) array, or (M, 2) when ``mask`` selects M particles.
            mask: Optional boolean selector.
        """
        if mask is None:
            self.accel += accel
        else:
            self.accel[mask] += accel

    def displacement(self) -> np.ndarray:
        """Per-step implicit velocity, ``position - previous``."""
        return self.position - self.previous

