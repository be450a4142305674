# MIT License (see LICENSE)
"""
Distance constraints and the graph that owns them.

A constraint joins two particles by arena index and remembers its rest
length, stiffness and fracture state. Fracture state is a base break
threshold, an optional time-limited weakened threshold, and a terminal
``broken`` flag.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from ..particles import ParticleField

STRUCTURAL = "structural"
SHEAR = "shear"


@dataclass(frozen=True)
class WeakState:
    """
    Temporary override of a constraint's break threshold.

    Attributes:
        threshold: Break ratio while the window is open (already floor-clamped).
        expires_at: Simulated time (ms) at which the window closes, inclusive.
    """
    threshold: float
    expires_at: float


@dataclass
class DistanceConstraint:
    """
    Keeps two particles near a rest distance; snaps when overstretched.

    Attributes:
        a: Index of the first particle.
        b: Index of the second particle.
        rest_length: Target distance (> 0).
        stiffness: Fraction of the error corrected per pass, in (0, 1].
        base_break_threshold: Current/rest ratio above which the link snaps.
        kind: ``"structural"`` or ``"shear"``.
        weak: Active or expired weakening window, if any.
        broken: Terminal flag. Broken links are skipped and later removed.
    """
    a: int
    b: int
    rest_length: float
    stiffness: float
    base_break_threshold: float
    kind: str = STRUCTURAL
    weak: WeakState | None = None
    broken: bool = False

    def __post_init__(self) -> None:
        if self.a == self.b:
            raise ValueError(f"constraint endpoints must differ, got {self.a} twice")
        if self.rest_length <= 0.0:
            raise ValueError(f"rest_length must be positive, got {self.rest_length}")
        if not 0.0 < self.stiffness <= 1.0:
            raise ValueError(f"stiffness must be in (0, 1], got {self.stiffness}")

    def break_threshold(self, now: float) -> float:
        """Effective break ratio at simulated time ``now``."""
        if self.weak is not None and now <= self.weak.expires_at:
            return self.weak.threshold
        return self.base_break_threshold

    def mark_weak(self, threshold: float, expires_at: float, floor: float) -> None:
        """
        Lower the break threshold until ``expires_at``.

        Overlapping requests compose: the threshold only ever moves down and
        the expiry only ever moves later. The stored threshold never drops
        below ``floor``.
        """
        proposed = max(threshold, floor)
        if self.weak is None:
            self.weak = WeakState(proposed, expires_at)
        else:
            self.weak = WeakState(
                min(self.weak.threshold, proposed),
                max(self.weak.expires_at, expires_at),
            )

    def length(self, particles: ParticleField) -> float:
        """Current distance between the endpoints."""
        d = particles.position[self.b] - particles.position[self.a]
        return float(np.hypot(d[0], d[1]))

    def strain(self, particles: ParticleField) -> float:
        """Current/rest length ratio."""
        return self.length(particles) / self.rest_length

    def midpoint(self, particles: ParticleField) -> np.ndarray:
        return 0.5 * (particles.position[self.a] + particles.position[self.b])


class ConstraintGraph:
    """
    Ordered collection of distance constraints.

    List order is the relaxation order. Broken constraints stay in the list
    until :meth:`remove_broken` is called at the end of a step.
    """

    def __init__(self, constraints: list[DistanceConstraint] | None = None) -> None:
        self.constraints: list[DistanceConstraint] = list(constraints or [])
        self.broken_total = 0

    def __len__(self) -> int:
        return len(self.constraints)

    def __iter__(self) -> Iterator[DistanceConstraint]:
        return iter(self.constraints)

    def __getitem__(self, i: int) -> DistanceConstraint:
        return self.constraints[i]

    def live(self) -> list[DistanceConstraint]:
        """Constraints not yet flagged broken, in order."""
        return [c for c in self.constraints if not c.broken]

    def remove_broken(self) -> int:
        """
        Drop every broken constraint.

        Returns:
            Number of constraints removed.
        """
        before = len(self.constraints)
        self.constraints = [c for c in self.constraints if not c.broken]
        removed = before - len(self.constraints)
        self.broken_total += removed
        return removed

    def pairs(self) -> np.ndarray:
        """Endpoint indices of live constraints, shape (M, 2)."""
        live = self.live()
        if not live:
            return np.zeros((0, 2), dtype=np.int64)
        return np.array([(c.a, c.b) for c in live], dtype=np.int64)

    def midpoints(self, particles: ParticleField) -> np.ndarray:
        """Midpoints of all constraints (broken included), shape (M, 2)."""
        if not self.constraints:
            return np.zeros((0, 2), dtype=np.float64)
        idx = np.array([(c.a, c.b) for c in self.constraints], dtype=np.int64)
        return 0.5 * (particles.position[idx[:, 0]] + particles.position[idx[:, 1]])
