# MIT License (see LICENSE)
"""
Transient radial force sources ("soap pulses").

A pulse pushes free particles away from its origin. Its acceleration on a
particle at distance r and age t is:

    a = strength * exp(-ln2 / half_life * t) * exp(-r² / (2 σ²)) * r̂

where r̂ is the unit vector from the origin to the particle. The direction
is epsilon-guarded, so a particle sitting exactly on the origin feels no
push from that pulse.

Pulses older than ``lifetime_half_lives`` half-lives are culled lazily at the
start of each step.
"""
from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from ..constants import EPS, LN2
from ..particles import ParticleField
from ..util import f64


@dataclass(frozen=True)
class Pulse:
    """
    A single radial force source.

    Attributes:
        origin: Centre [x, y].
        strength: Peak acceleration at the origin, at age zero.
        sigma: Gaussian radius.
        created_at: Simulated time (ms) the pulse was dropped.
    """
    origin: tuple[float, float]
    strength: float
    sigma: float
    created_at: float

    def decay(self, now: float, half_life_ms: float) -> float:
        """Temporal decay factor in (0, 1]."""
        age = max(0.0, now - self.created_at)
        return float(np.exp(-LN2 / half_life_ms * age))


class PulseField:
    """
    Collection of live pulses.

    Args:
        sigma: Gaussian radius given to new pulses.
        half_life_ms: Decay half-life shared by all pulses.
        lifetime_half_lives: Age, in half-lives, after which a pulse is dropped.
    """

    def __init__(self, sigma: float, half_life_ms: float, lifetime_half_lives: float = 6.0) -> None:
        self.sigma = sigma
        self.half_life_ms = half_life_ms
        self.lifetime_half_lives = lifetime_half_lives
        self.pulses: list[Pulse] = []

    def __len__(self) -> int:
        return len(self.pulses)

    @property
    def max_age_ms(self) -> float:
        return self.half_life_ms * self.lifetime_half_lives

    def add_pulse(self, origin: tuple[float, float], strength: float, now: float) -> Pulse:
        """Append a pulse timestamped at ``now``."""
        pulse = Pulse(
            origin=(float(origin[0]), float(origin[1])),
            strength=float(strength),
            sigma=self.sigma,
            created_at=float(now),
        )
        self.pulses.append(pulse)
        return pulse

    def cull(self, now: float) -> int:
        """
        Drop pulses whose age reached the lifetime limit.

        Returns:
            Number of pulses removed.
        """
        limit = self.max_age_ms
        before = len(self.pulses)
        self.pulses = [p for p in self.pulses if now - p.created_at < limit]
        return before - len(self.pulses)

    def clear(self) -> None:
        self.pulses.clear()

    def accelerations(self, positions: np.ndarray, now: float) -> np.ndarray:
        """
        Summed pulse acceleration at each position.

        Args:
            positions: (N, 2) array of sample points.
            now: Simulated time in ms.

        Returns:
            (N, 2) acceleration array.
        """
        positions = f64(positions).reshape(-1, 2)
        total = np.zeros_like(positions)
        for p in self.pulses:
            base = p.strength * p.decay(now, self.half_life_ms)
            d = positions - np.asarray(p.origin, dtype=np.float64)
            r2 = np.einsum("ij,ij->i", d, d)
            falloff = np.exp(-r2 / (2.0 * p.sigma * p.sigma))
            r = np.sqrt(r2) + EPS
            total += d * (base * falloff / r)[:, None]
        return total

    def apply(self, particles: ParticleField, now: float) -> None:
        """Accumulate pulse acceleration on every free particle."""
        if not self.pulses:
            return
        free = particles.free
        particles.add_accel(self.accelerations(particles.position[free], now), free)
