# MIT License (see LICENSE)
"""
Read-only view of the simulation handed to renderers and stats readouts.

A snapshot copies everything it exposes, so it stays valid while the
simulation keeps stepping.
"""
from __future__ import annotations
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class LatticeSnapshot:
    """
    State after a tick.

    Attributes:
        time_ms: Simulated time.
        positions: Particle positions in arena order, shape (N, 2).
        pinned: Anchor mask, shape (N,).
        links: Endpoint indices of live constraints in list order, shape (M, 2).
        pulses: Live pulses as rows of (x, y, strength, sigma, age_ms), shape (P, 5).
        broken_total: Constraints removed since the lattice was built.
        show_links: Display toggle carried for the renderer.
    """
    time_ms: float
    positions: np.ndarray
    pinned: np.ndarray
    links: np.ndarray
    pulses: np.ndarray
    broken_total: int
    show_links: bool = True

    @property
    def particle_count(self) -> int:
        return len(self.positions)

    @property
    def constraint_count(self) -> int:
        return len(self.links)

    @property
    def pulse_count(self) -> int:
        return len(self.pulses)

    def segments(self) -> np.ndarray:
        """Endpoint coordinates of every live link, shape (M, 2, 2)."""
        if not len(self.links):
            return np.zeros((0, 2, 2), dtype=np.float64)
        return np.stack(
            [self.positions[self.links[:, 0]], self.positions[self.links[:, 1]]], axis=1
        )

    def stats_line(self) -> str:
        """One-line readout, e.g. ``1768 particles · 6815 links``."""
        return f"{self.particle_count} particles · {self.constraint_count} links"
