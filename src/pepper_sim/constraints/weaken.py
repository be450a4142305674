# MIT License (see LICENSE)
"""
Local weakening of constraints around a pointer.

Dropping soap on the surface lowers cohesion nearby for a short window.
Every live constraint whose midpoint lies within the outer radius of the
pointer gets a temporary, lower break threshold. An aggressive weaken
(pointer press) may also snap links inside the inner radius outright:
    - always, if the link is already stretched past ``snap_stretch_ratio``
    - otherwise with probability base + gain * (1 - d / inner_radius),
      rising linearly toward the pointer
"""
from __future__ import annotations

import numpy as np

from ..config import SimulationConfig
from ..particles import ParticleField
from .graph import ConstraintGraph
from .solver import force_break


def weaken_constraints_near(
    graph: ConstraintGraph,
    particles: ParticleField,
    x: float,
    y: float,
    aggressive: bool,
    now: float,
    config: SimulationConfig,
    rng: np.random.Generator,
) -> tuple[int, int]:
    """
    Weaken (and optionally tear) constraints around (x, y).

    Args:
        graph: Constraint graph (modified in-place).
        particles: Particle arena; snapped links push their endpoints apart.
        x, y: Pointer position in domain coordinates.
        aggressive: Allow immediate snapping inside the inner radius.
        now: Simulated time in ms; the window closes at
            ``now + config.weaken_duration_ms``.
        config: Radii, thresholds, tear chances and tear impulse.
        rng: Source for the probabilistic tear.

    Returns:
        (weakened, snapped) counts.
    """
    if not graph.constraints:
        return 0, 0

    outer = config.click_tear_radius
    inner = config.inner_break_radius
    expires_at = now + config.weaken_duration_ms
    weak_thr = config.weak_threshold

    weakened = snapped = 0
    for c in graph.constraints:
        if c.broken:
            continue
        # read live: an earlier snap in this call may have moved the endpoints
        mx, my = c.midpoint(particles)
        d = float(np.hypot(mx - x, my - y))
        if d > outer:
            continue
        c.mark_weak(weak_thr, expires_at, config.min_weak_threshold)
        weakened += 1

        if not aggressive or d > inner:
            continue
        if c.strain(particles) > config.snap_stretch_ratio:
            snapped += int(force_break(c, particles, config.tear_impulse))
            continue
        t = 1.0 - d / inner if inner > 0 else 1.0
        if rng.random() < config.tear_chance_base + config.tear_chance_gain * t:
            snapped += int(force_break(c, particles, config.tear_impulse))
    return weakened, snapped
