# MIT License (see LICENSE)
"""
Distance constraints with fracture.

This subpackage provides:
    - DistanceConstraint / ConstraintGraph: index-based links between particles.
    - relax_constraints: Gauss-Seidel position relaxation with a break cap.
    - weaken_constraints_near: time-limited threshold lowering around a point.

Typical usage:
    from pepper_sim.constraints import relax_constraints

    result = relax_constraints(graph, particles, iterations=3, now=t,
                               tear_impulse=36.0, max_breaks_per_pass=200)
"""
from .graph import ConstraintGraph, DistanceConstraint, WeakState, SHEAR, STRUCTURAL
from .solver import RelaxResult, force_break, relax_constraints, satisfy
from .weaken import weaken_constraints_near

__all__ = [
    "ConstraintGraph",
    "DistanceConstraint",
    "WeakState",
    "SHEAR",
    "STRUCTURAL",
    "RelaxResult",
    "force_break",
    "relax_constraints",
    "satisfy",
    "weaken_constraints_near",
]
