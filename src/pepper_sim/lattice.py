# MIT License (see LICENSE)
"""
Lattice construction.

Builds the rows x cols grid of particles inside the padded domain and links
them with structural (horizontal, vertical) and shear (both diagonals)
distance constraints. The outer ring of particles is pinned so the sheet
stays framed.

For a grid of C columns and R rows the edge counts are:
    structural = (C-1)*R + (R-1)*C
    shear      = 2*(C-1)*(R-1)
"""
from __future__ import annotations
from dataclasses import dataclass
import logging
import operator

import numpy as np

from .config import ConfigurationError, SimulationConfig
from .constraints.graph import ConstraintGraph, DistanceConstraint, SHEAR, STRUCTURAL
from .particles import ParticleField

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle particles are clamped into."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def inset(cls, width: float, height: float, padding: float) -> "Bounds":
        return cls(padding, padding, width - padding, height - padding)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def expected_constraint_count(cols: int, rows: int) -> int:
    """Number of links produced by :func:`build_lattice` for a cols x rows grid."""
    structural = (cols - 1) * rows + (rows - 1) * cols
    shear = 2 * (cols - 1) * (rows - 1)
    return structural + shear


def build_lattice(
    cols: int,
    rows: int,
    width: float,
    height: float,
    padding: float,
    config: SimulationConfig | None = None,
    rng: np.random.Generator | None = None,
) -> tuple[ParticleField, ConstraintGraph, Bounds]:
    """
    Create a fresh particle arena and constraint graph.

    Particles are laid out row-major: index = row * cols + col.

    Args:
        cols: Particles per row.
        rows: Particles per column.
        width: Domain width.
        height: Domain height.
        padding: Border inset for the grid and the bounds clamp.
        config: Stiffness, thresholds and initial jitter. Defaults are used when omitted.
        rng: Source for the initial previous-position jitter. When omitted,
            previous positions equal positions (particles start at rest).

    Returns:
        (particles, constraints, bounds)

    Raises:
        ConfigurationError: If the grid size is not integral or smaller than
            2x2, or the padded domain is non-finite or has no area.
    """
    config = config or SimulationConfig()
    try:
        cols, rows = operator.index(cols), operator.index(rows)
    except TypeError:
        raise ConfigurationError(f"grid size must be integral, got {cols!r}x{rows!r}") from None
    if not np.isfinite([width, height, padding]).all():
        raise ConfigurationError(
            f"domain must be finite, got {width}x{height} with padding {padding}"
        )
    if cols < 2 or rows < 2:
        raise ConfigurationError(f"lattice needs at least 2x2 particles, got {cols}x{rows}")
    if padding < 0:
        raise ConfigurationError(f"padding must be non-negative, got {padding}")
    bounds = Bounds.inset(width, height, padding)
    if bounds.width <= 0 or bounds.height <= 0:
        raise ConfigurationError(
            f"domain {width}x{height} leaves no room inside padding {padding}"
        )

    cell_w = bounds.width / (cols - 1)
    cell_h = bounds.height / (rows - 1)
    diag = float(np.hypot(cell_w, cell_h))

    jj, ii = np.meshgrid(np.arange(rows), np.arange(cols), indexing="ij")
    position = np.stack(
        [padding + ii.ravel() * cell_w, padding + jj.ravel() * cell_h], axis=1
    ).astype(np.float64)
    pinned = ((ii == 0) | (jj == 0) | (ii == cols - 1) | (jj == rows - 1)).ravel()

    previous = position.copy()
    if rng is not None and config.initial_jitter > 0.0:
        j = config.initial_jitter
        previous += rng.uniform(-j, j, size=position.shape)

    particles = ParticleField(position=position, previous=previous, pinned=pinned)

    def link(a: int, b: int, rest: float, stiffness: float, kind: str) -> DistanceConstraint:
        return DistanceConstraint(
            a=a, b=b,
            rest_length=rest,
            stiffness=stiffness,
            base_break_threshold=config.break_threshold,
            kind=kind,
        )

    links: list[DistanceConstraint] = []
    for j in range(rows):
        for i in range(cols):
            idx = j * cols + i
            if i < cols - 1:
                links.append(link(idx, idx + 1, cell_w, config.structural_stiffness, STRUCTURAL))
            if j < rows - 1:
                links.append(link(idx, idx + cols, cell_h, config.structural_stiffness, STRUCTURAL))
            if i < cols - 1 and j < rows - 1:
                links.append(link(idx, idx + cols + 1, diag, config.shear_stiffness, SHEAR))
            if i > 0 and j < rows - 1:
                links.append(link(idx, idx + cols - 1, diag, config.shear_stiffness, SHEAR))

    graph = ConstraintGraph(links)
    logger.info(
        "Built %dx%d lattice: %d particles (%d pinned), %d links",
        cols, rows, len(particles), int(pinned.sum()), len(graph),
    )
    return particles, graph, bounds
