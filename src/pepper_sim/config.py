# MIT License (see LICENSE)
"""
Static simulation parameters.

All tunables of the lattice engine live in one frozen dataclass supplied at
construction time. Defaults reproduce the "pepper on soapy water" look: a
loose lattice that floats without gravity, tears under pointer pulses and
relaxes back over a few hundred milliseconds.
"""
from __future__ import annotations
from dataclasses import dataclass, fields, replace as _dc_replace
import math
import numbers

from .constants import DEFAULT_FIXED_DT_MS, DEFAULT_MAX_FRAME_MS


class ConfigurationError(ValueError):
    """Raised when parameters cannot produce a valid lattice or schedule."""


@dataclass(frozen=True)
class SimulationConfig:
    """
    Named numeric parameters of the simulation.

    Attributes:
        grid_cols: Particles per lattice row (>= 2).
        grid_rows: Particles per lattice column (>= 2).
        constraint_iterations: Relaxation passes per logical step.
        structural_stiffness: Correction fraction for horizontal/vertical links.
        shear_stiffness: Correction fraction for diagonal links.
        damping: Fraction of implicit velocity removed per step.
        jitter_acceleration: Half-range of the uniform random acceleration
            applied to free particles each step.
        gravity_y: Constant acceleration along +y for free particles.
        pulse_strength: Default peak acceleration of a pulse.
        pulse_sigma: Gaussian radius of a pulse.
        pulse_half_life_ms: Exponential decay half-life of a pulse.
        pulse_lifetime_half_lives: Age, in half-lives, after which a pulse is culled.
        border_padding: Inset from the domain edge for the lattice and the bounds clamp.
        initial_jitter: Half-range of the previous-position offset given at build.
        break_threshold: Base current/rest ratio above which a link snaps.
        min_weak_threshold: Floor for any effective break threshold.
        click_tear_radius: Radius around a pointer inside which links are weakened.
        click_inner_break_radius: Radius inside which an aggressive weaken may
            snap links outright. Clamped to ``click_tear_radius``.
        weaken_factor: Multiplier on ``break_threshold`` while weakened.
        weaken_duration_ms: Length of a weakening window.
        snap_stretch_ratio: Stretch ratio above which an aggressive weaken
            snaps a link deterministically.
        tear_chance_base: Snap probability at the rim of the inner radius.
        tear_chance_gain: Additional snap probability reached at the centre.
        tear_impulse: Separation displacement applied when a link snaps.
        max_breaks_per_pass: Cap on snaps processed by one relaxation pass.
        move_pulse_scale: Strength multiplier for pulses dropped while dragging.
        fixed_dt_ms: Logical timestep.
        max_frame_ms: Largest wall-clock slice credited per frame.
    """
    grid_cols: int = 52
    grid_rows: int = 34
    constraint_iterations: int = 3
    structural_stiffness: float = 0.35
    shear_stiffness: float = 0.25
    damping: float = 0.0035
    jitter_acceleration: float = 3.0
    gravity_y: float = 0.0
    pulse_strength: float = 3000.0
    pulse_sigma: float = 90.0
    pulse_half_life_ms: float = 650.0
    pulse_lifetime_half_lives: float = 6.0
    border_padding: float = 24.0
    initial_jitter: float = 0.25
    break_threshold: float = 1.8
    min_weak_threshold: float = 1.18
    click_tear_radius: float = 60.0
    click_inner_break_radius: float = 24.0
    weaken_factor: float = 0.85
    weaken_duration_ms: float = 450.0
    snap_stretch_ratio: float = 1.22
    tear_chance_base: float = 0.12
    tear_chance_gain: float = 0.30
    tear_impulse: float = 36.0
    max_breaks_per_pass: int = 200
    move_pulse_scale: float = 0.5
    fixed_dt_ms: float = DEFAULT_FIXED_DT_MS
    max_frame_ms: float = DEFAULT_MAX_FRAME_MS

    @property
    def weak_threshold(self) -> float:
        """Threshold requested by a weaken, before the floor is applied."""
        return self.break_threshold * self.weaken_factor

    @property
    def inner_break_radius(self) -> float:
        return min(self.click_inner_break_radius, self.click_tear_radius)

    def validate(self) -> "SimulationConfig":
        """
        Check parameter ranges.

        Returns:
            self, so calls can be chained.

        Raises:
            ConfigurationError: On the first invalid parameter found.
        """
        for name in ("grid_cols", "grid_rows", "constraint_iterations", "max_breaks_per_pass"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise ConfigurationError(f"{f.name} must be finite, got {value}")
        if self.grid_cols < 2 or self.grid_rows < 2:
            raise ConfigurationError(
                f"lattice needs at least 2x2 particles, got {self.grid_cols}x{self.grid_rows}"
            )
        for name in ("structural_stiffness", "shear_stiffness"):
            k = getattr(self, name)
            if not 0.0 < k <= 1.0:
                raise ConfigurationError(f"{name} must be in (0, 1], got {k}")
        if not 0.0 <= self.damping < 1.0:
            raise ConfigurationError(f"damping must be in [0, 1), got {self.damping}")
        if self.constraint_iterations < 1:
            raise ConfigurationError(
                f"constraint_iterations must be >= 1, got {self.constraint_iterations}"
            )
        for name in ("pulse_sigma", "pulse_half_life_ms", "pulse_lifetime_half_lives", "fixed_dt_ms"):
            if getattr(self, name) <= 0.0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")
        if self.max_frame_ms < self.fixed_dt_ms:
            raise ConfigurationError(
                f"max_frame_ms ({self.max_frame_ms}) is shorter than one step ({self.fixed_dt_ms})"
            )
        if self.break_threshold <= 1.0:
            raise ConfigurationError(
                f"break_threshold must exceed 1 (rest length), got {self.break_threshold}"
            )
        if not 1.0 < self.min_weak_threshold <= self.break_threshold:
            raise ConfigurationError(
                "min_weak_threshold must lie in (1, break_threshold], "
                f"got {self.min_weak_threshold}"
            )
        for name in ("border_padding", "initial_jitter", "click_tear_radius",
                     "click_inner_break_radius", "weaken_duration_ms", "tear_impulse"):
            if getattr(self, name) < 0.0:
                raise ConfigurationError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.max_breaks_per_pass < 1:
            raise ConfigurationError(
                f"max_breaks_per_pass must be >= 1, got {self.max_breaks_per_pass}"
            )
        return self

    def replace(self, **changes) -> "SimulationConfig":
        """Return a validated copy with ``changes`` applied."""
        return _dc_replace(self, **changes).validate()
