# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

Small helpers shared by the integrator, the constraint solver and the
pulse field. Vectors are numpy arrays of shape (2,) or stacks of shape (N, 2).
"""
from __future__ import annotations

import numpy as np

from .constants import EPS


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Used throughout the codebase so tuple/list inputs for positions are
    accepted and numeric precision is uniform.
    """
    return np.array(x, dtype=np.float64)


def safe_length(dx: float, dy: float, eps: float = EPS) -> float:
    """
    Length of (dx, dy), substituting ``eps`` when it is exactly zero.

    Coincident endpoints must not produce a division by zero in the solver.
    """
    d = float(np.hypot(dx, dy))
    return d if d > 0.0 else eps
