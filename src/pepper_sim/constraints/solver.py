# MIT License (see LICENSE)
"""
Iterative relaxation of distance constraints with fracture.

This is a position-based Gauss-Seidel solver: each pass walks the constraint
list in order and moves endpoints directly toward their rest distance. A
constraint stretched past its effective break threshold snaps instead: it is
flagged broken and its endpoints are pushed apart along the link so the tear
opens visibly rather than freezing in place.

Correction for a link from a to b with current length d and rest length L:
    delta = (b - a) * stiffness * (d - L) / d
    both free:  a += delta / 2,  b -= delta / 2
    a pinned:   b -= delta
    b pinned:   a += delta

Pinned particles are never written to.
"""
from __future__ import annotations
from dataclasses import dataclass
import logging

from ..particles import ParticleField
from ..util import safe_length
from .graph import ConstraintGraph, DistanceConstraint

logger = logging.getLogger(__name__)


@dataclass
class RelaxResult:
    """
    Outcome of one call to :func:`relax_constraints`.

    Attributes:
        breaks: Constraints that snapped during the call.
        removed: Broken constraints removed from the graph afterwards.
        capped_passes: Passes that stopped early at the break cap.
    """
    breaks: int = 0
    removed: int = 0
    capped_passes: int = 0


def force_break(c: DistanceConstraint, particles: ParticleField, impulse: float) -> bool:
    """
    Snap a constraint and push its endpoints apart.

    The separation ``impulse`` is a displacement along the link direction,
    split between two free endpoints or given entirely to the single free
    one. Nothing moves if both endpoints are pinned.

    Returns:
        True if the constraint was live and is now broken, False if it was
        already broken.
    """
    if c.broken:
        return False
    c.broken = True

    pos = particles.position
    pinned_a = bool(particles.pinned[c.a])
    pinned_b = bool(particles.pinned[c.b])
    dx = pos[c.b, 0] - pos[c.a, 0]
    dy = pos[c.b, 1] - pos[c.a, 1]
    dist = safe_length(dx, dy)
    nx, ny = dx / dist, dy / dist

    if not pinned_a and not pinned_b:
        half = 0.5 * impulse
        pos[c.a, 0] -= nx * half
        pos[c.a, 1] -= ny * half
        pos[c.b, 0] += nx * half
        pos[c.b, 1] += ny * half
    elif pinned_a and not pinned_b:
        pos[c.b, 0] += nx * impulse
        pos[c.b, 1] += ny * impulse
    elif pinned_b and not pinned_a:
        pos[c.a, 0] -= nx * impulse
        pos[c.a, 1] -= ny * impulse
    return True


def satisfy(
    c: DistanceConstraint,
    particles: ParticleField,
    now: float,
    tear_impulse: float,
) -> bool:
    """
    Apply one correction to a single constraint, or snap it.

    Args:
        c: Constraint to process. Must not be broken.
        particles: Arena the constraint indexes into (modified in-place).
        now: Simulated time in ms, used to decide whether a weakening
            window is still open.
        tear_impulse: Separation displacement used if the constraint snaps.

    Returns:
        True if the constraint held, False if it snapped.
    """
    pos = particles.position
    dx = pos[c.b, 0] - pos[c.a, 0]
    dy = pos[c.b, 1] - pos[c.a, 1]
    dist = safe_length(dx, dy)

    if dist > c.rest_length * c.break_threshold(now):
        force_break(c, particles, tear_impulse)
        return False

    pinned_a = bool(particles.pinned[c.a])
    pinned_b = bool(particles.pinned[c.b])
    if pinned_a and pinned_b:
        return True

    s = c.stiffness * (dist - c.rest_length) / dist
    mx, my = dx * s, dy * s
    if not pinned_a and not pinned_b:
        pos[c.a, 0] += 0.5 * mx
        pos[c.a, 1] += 0.5 * my
        pos[c.b, 0] -= 0.5 * mx
        pos[c.b, 1] -= 0.5 * my
    elif pinned_a:
        pos[c.b, 0] -= mx
        pos[c.b, 1] -= my
    else:
        pos[c.a, 0] += mx
        pos[c.a, 1] += my
    return True


def relax_constraints(
    graph: ConstraintGraph,
    particles: ParticleField,
    iterations: int,
    now: float,
    tear_impulse: float,
    max_breaks_per_pass: int,
) -> RelaxResult:
    """
    Run ``iterations`` Gauss-Seidel passes over the live constraints.

    Each pass stops early once ``max_breaks_per_pass`` constraints have
    snapped; the constraints it did not reach are processed by the next
    pass or the next step. Broken constraints are removed from the graph
    after the final pass.

    Args:
        graph: Constraints to relax (modified in-place).
        particles: Particle arena (positions modified in-place).
        iterations: Number of passes.
        now: Simulated time in ms.
        tear_impulse: Separation displacement applied on snap.
        max_breaks_per_pass: Break cap per pass (>= 1).

    Returns:
        Break and removal counts for the call.
    """
    result = RelaxResult()
    for _ in range(iterations):
        breaks = 0
        for c in graph.constraints:
            if c.broken:
                continue
            if not satisfy(c, particles, now, tear_impulse):
                breaks += 1
                if breaks >= max_breaks_per_pass:
                    result.capped_passes += 1
                    logger.warning(
                        "Relaxation pass hit the break cap (%d); deferring the rest",
                        max_breaks_per_pass,
                    )
                    break
        result.breaks += breaks

    result.removed = graph.remove_broken()
    return result
