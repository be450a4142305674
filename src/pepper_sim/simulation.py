# MIT License (see LICENSE)
"""
The simulation context and its per-step loop.

The Simulation class owns all mutable state of one soft-body sheet:
- The particle arena and the constraint graph (replaced wholesale on rebuild).
- The live pulses.
- The fixed-step scheduler and the simulated clock.
- Pending pointer requests, applied at the next tick boundary.

One logical step runs, in order:
    1. Force accumulation (pulse culling, jitter, gravity, pulses).
    2. Verlet integration and the bounds clamp.
    3. Constraint relaxation with tearing, then removal of broken links.

Structure:
    - Create a Simulation and call rebuild_lattice() (or build()).
    - Feed pointer input through inject_pulse() / weaken_near().
    - Call tick(elapsed_ms) once per rendered frame and read snapshot().
"""
from __future__ import annotations
from collections import deque
from contextlib import nullcontext
from dataclasses import dataclass, field
import logging

import numpy as np

from .config import SimulationConfig
from .constraints.graph import ConstraintGraph
from .constraints.solver import RelaxResult, relax_constraints
from .constraints.weaken import weaken_constraints_near
from .core.forces import apply_gravity, apply_jitter
from .core.integrators import integrate
from .core.pulses import PulseField
from .lattice import Bounds, build_lattice
from .particles import ParticleField
from .profiler import Profiler
from .scheduler import FixedStepScheduler
from .snapshot import LatticeSnapshot

logger = logging.getLogger(__name__)

_PULSE = "pulse"
_WEAKEN = "weaken"


@dataclass
class Simulation:
    """
    Soft-body lattice world.

    Attributes:
        config: Static parameters. Validated on construction.
        seed: Seed for the default random generator. Ignored when ``rng`` is given.
        rng: Random source for jitter and probabilistic tearing.
        profiler: Optional Profiler for per-phase timings.
        particles: Particle arena, None until the first build.
        graph: Constraint graph.
        pulses: Live pulse sources.
        scheduler: Fixed-step accumulator driving :meth:`step`.
        bounds: Clamp rectangle of the current domain.
        time_ms: Simulated time since the last build.
        show_links: Display toggle passed through to snapshots.
    """
    config: SimulationConfig = field(default_factory=SimulationConfig)
    seed: int | None = None
    rng: np.random.Generator | None = None
    profiler: Profiler | None = None

    # Internal state
    particles: ParticleField | None = None
    graph: ConstraintGraph = field(default_factory=ConstraintGraph)
    pulses: PulseField = field(init=False)
    scheduler: FixedStepScheduler = field(init=False)
    bounds: Bounds | None = None
    time_ms: float = 0.0
    show_links: bool = True

    def __post_init__(self) -> None:
        self.config.validate()
        if self.rng is None:
            self.rng = np.random.default_rng(self.seed)
        cfg = self.config
        self.pulses = PulseField(cfg.pulse_sigma, cfg.pulse_half_life_ms, cfg.pulse_lifetime_half_lives)
        self.scheduler = FixedStepScheduler(cfg.fixed_dt_ms, cfg.max_frame_ms)
        self._pending: deque[tuple] = deque()
        self._domain: tuple[int, int, float, float, float] | None = None
        self.last_relax = RelaxResult()

    # ------------------------------------------------------------------
    # Lattice lifecycle
    # ------------------------------------------------------------------

    def rebuild_lattice(self, cols: int, rows: int, width: float, height: float, padding: float) -> None:
        """
        Replace the particle arena and constraint graph with a fresh lattice.

        Pulses, pending requests, the scheduler backlog and the clock are
        all discarded.

        Raises:
            ConfigurationError: If the grid or padded domain is degenerate.
        """
        particles, graph, bounds = build_lattice(
            cols, rows, width, height, padding, config=self.config, rng=self.rng
        )
        self.particles, self.graph, self.bounds = particles, graph, bounds
        self._domain = (cols, rows, float(width), float(height), float(padding))
        self.pulses.clear()
        self._pending.clear()
        self.scheduler.reset()
        self.time_ms = 0.0
        self.last_relax = RelaxResult()

    def build(self, width: float, height: float) -> None:
        """Rebuild using the grid size and padding from the config."""
        cfg = self.config
        self.rebuild_lattice(cfg.grid_cols, cfg.grid_rows, width, height, cfg.border_padding)

    def reset(self) -> None:
        """Rebuild the lattice over the current domain."""
        if self._domain is None:
            raise RuntimeError("lattice has not been built")
        self.rebuild_lattice(*self._domain)

    def resize(self, width: float, height: float) -> bool:
        """
        Rebuild for a new domain size.

        Returns:
            True if the size changed and the lattice was rebuilt.
        """
        if self._domain is None:
            self.build(width, height)
            return True
        cols, rows, w, h, pad = self._domain
        if (float(width), float(height)) == (w, h):
            return False
        self.rebuild_lattice(cols, rows, width, height, pad)
        return True

    def toggle_links(self) -> bool:
        """Flip the link display flag and return the new value."""
        self.show_links = not self.show_links
        return self.show_links

    # ------------------------------------------------------------------
    # Requests from pointer input
    # ------------------------------------------------------------------

    def inject_pulse(self, x: float, y: float, strength: float | None = None) -> None:
        """
        Queue a pulse at (x, y), applied at the next tick boundary.

        Args:
            x, y: Origin in domain coordinates.
            strength: Peak acceleration. Defaults to ``config.pulse_strength``.
        """
        self._require_lattice()
        s = self.config.pulse_strength if strength is None else float(strength)
        self._pending.append((_PULSE, float(x), float(y), s))

    def weaken_near(self, x: float, y: float, aggressive: bool) -> None:
        """Queue a weaken around (x, y), applied at the next tick boundary."""
        self._require_lattice()
        self._pending.append((_WEAKEN, float(x), float(y), bool(aggressive)))

    @property
    def pending_requests(self) -> int:
        return len(self._pending)

    def _apply_pending(self) -> None:
        """Drain queued requests in arrival order."""
        while self._pending:
            kind, x, y, arg = self._pending.popleft()
            if kind == _PULSE:
                self.pulses.add_pulse((x, y), arg, self.time_ms)
            else:
                weakened, snapped = weaken_constraints_near(
                    self.graph, self.particles, x, y, arg, self.time_ms, self.config, self.rng
                )
                if snapped:
                    logger.debug("Weaken at (%.1f, %.1f) snapped %d links", x, y, snapped)
        # Links snapped by an aggressive weaken leave the graph right away.
        self.graph.remove_broken()

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def _section(self, name: str):
        return self.profiler.section(name) if self.profiler else nullcontext()

    def _apply_forces(self, now: float) -> None:
        """Accumulate jitter, gravity and pulse acceleration on free particles."""
        cfg = self.config
        with self._section("cull"):
            self.pulses.cull(now)
        apply_jitter(self.particles, cfg.jitter_acceleration, self.rng)
        apply_gravity(self.particles, cfg.gravity_y)
        self.pulses.apply(self.particles, now)

    def step(self, dt_ms: float | None = None) -> RelaxResult:
        """
        Run one logical step of ``dt_ms`` (default: the fixed timestep).

        Returns:
            Break statistics from the relaxation phase.
        """
        self._require_lattice()
        cfg = self.config
        dt_ms = cfg.fixed_dt_ms if dt_ms is None else float(dt_ms)
        now = self.time_ms

        with self._section("forces"):
            self._apply_forces(now)
        with self._section("integrate"):
            integrate(self.particles, dt_ms / 1000.0, cfg.damping, self.bounds)
        with self._section("relax"):
            result = relax_constraints(
                self.graph,
                self.particles,
                cfg.constraint_iterations,
                now,
                cfg.tear_impulse,
                cfg.max_breaks_per_pass,
            )

        self.time_ms += dt_ms
        self.last_relax = result
        return result

    def tick(self, elapsed_real_ms: float) -> int:
        """
        Per-frame entry point.

        Applies queued requests, then runs as many fixed steps as the
        accumulated real time pays for.

        Args:
            elapsed_real_ms: Wall-clock time since the previous frame.

        Returns:
            Number of logical steps run.
        """
        self._require_lattice()
        self._apply_pending()
        steps = self.scheduler.advance(elapsed_real_ms, self.step)
        logger.debug(
            "tick: %d steps, t=%.1f ms, %d links, %d pulses",
            steps, self.time_ms, len(self.graph), len(self.pulses),
        )
        return steps

    def frame(self, timestamp_ms: float) -> int:
        """Like :meth:`tick`, driven by an absolute frame timestamp."""
        self._require_lattice()
        self._apply_pending()
        return self.scheduler.frame(timestamp_ms, self.step)

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def particle_count(self) -> int:
        return 0 if self.particles is None else len(self.particles)

    @property
    def constraint_count(self) -> int:
        return len(self.graph.live())

    def snapshot(self) -> LatticeSnapshot:
        """Copy of positions, live links, pulses and counters for the renderer."""
        self._require_lattice()
        now = self.time_ms
        pulses = np.array(
            [(*p.origin, p.strength, p.sigma, now - p.created_at) for p in self.pulses.pulses],
            dtype=np.float64,
        ).reshape(-1, 5)
        return LatticeSnapshot(
            time_ms=now,
            positions=self.particles.position.copy(),
            pinned=self.particles.pinned.copy(),
            links=self.graph.pairs(),
            pulses=pulses,
            broken_total=self.graph.broken_total,
            show_links=self.show_links,
        )

    def _require_lattice(self) -> None:
        if self.particles is None:
            raise RuntimeError("lattice has not been built")
