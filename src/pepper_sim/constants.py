# MIT License (see LICENSE)
"""
Numeric constants shared by the lattice engine.

Distances are in domain units (pixels for a canvas front end) and times in
milliseconds unless a name says otherwise.
"""
from __future__ import annotations
import math

# Floor substituted for a zero distance between two particles so that
# normalisation and relative-error terms stay finite.
EPS: float = 1e-6

# ln(2), used to turn a half-life into an exponential decay rate.
LN2: float = math.log(2.0)

# Logical timestep of the fixed-step scheduler (60 Hz).
DEFAULT_FIXED_DT_MS: float = 1000.0 / 60.0

# Maximum wall-clock time credited to the accumulator per frame (20 Hz).
# Anything beyond this is dropped rather than simulated.
DEFAULT_MAX_FRAME_MS: float = 1000.0 / 20.0
