# MIT License (see LICENSE)
"""
Fixed-timestep scheduling.

Rendering runs at whatever rate the display allows; the simulation always
advances in constant ``fixed_dt_ms`` increments. Real elapsed time is
accumulated, and one logical step runs for each whole timestep contained in
the accumulator. The remainder carries over to the next frame.

The accumulator is clamped to ``max_frame_ms`` before stepping. After a
stall (tab switch, debugger pause), the extra time is dropped instead of
being simulated in a burst that would itself take too long.

Example:
    scheduler = FixedStepScheduler(fixed_dt_ms=1000 / 60, max_frame_ms=50)
    steps = scheduler.advance(elapsed_ms, sim.step)
"""
from __future__ import annotations
from typing import Callable
import logging

from .constants import DEFAULT_FIXED_DT_MS, DEFAULT_MAX_FRAME_MS

logger = logging.getLogger(__name__)


class FixedStepScheduler:
    """
    Accumulator that turns variable frame times into fixed logical steps.

    Args:
        fixed_dt_ms: Logical timestep in milliseconds.
        max_frame_ms: Upper bound on the accumulator before stepping.
    """

    def __init__(
        self,
        fixed_dt_ms: float = DEFAULT_FIXED_DT_MS,
        max_frame_ms: float = DEFAULT_MAX_FRAME_MS,
    ) -> None:
        if fixed_dt_ms <= 0:
            raise ValueError(f"fixed_dt_ms must be positive, got {fixed_dt_ms}")
        if max_frame_ms < fixed_dt_ms:
            raise ValueError("max_frame_ms must be at least one fixed step")
        self.fixed_dt_ms = float(fixed_dt_ms)
        self.max_frame_ms = float(max_frame_ms)
        self.accumulated_ms = 0.0
        self.total_steps = 0
        self._last_timestamp: float | None = None

    @property
    def max_steps_per_frame(self) -> int:
        """Most logical steps a single :meth:`advance` can run."""
        return int(self.max_frame_ms // self.fixed_dt_ms)

    def advance(self, elapsed_ms: float, step: Callable[[float], None]) -> int:
        """
        Credit ``elapsed_ms`` of real time and run the steps it pays for.

        Args:
            elapsed_ms: Real time since the previous frame. Negative values
                are treated as zero.
            step: Called once per logical step with ``fixed_dt_ms``.

        Returns:
            Number of steps run.
        """
        self.accumulated_ms += max(0.0, float(elapsed_ms))
        if self.accumulated_ms > self.max_frame_ms:
            logger.debug(
                "Dropping %.1f ms of backlog (clamp %.1f ms)",
                self.accumulated_ms - self.max_frame_ms, self.max_frame_ms,
            )
            self.accumulated_ms = self.max_frame_ms

        steps = 0
        while self.accumulated_ms >= self.fixed_dt_ms:
            step(self.fixed_dt_ms)
            self.accumulated_ms -= self.fixed_dt_ms
            steps += 1
        self.total_steps += steps
        return steps

    def frame(self, timestamp_ms: float, step: Callable[[float], None]) -> int:
        """
        Advance using an absolute frame timestamp (e.g. a display callback clock).

        The first call only records the timestamp and runs no steps.
        """
        if self._last_timestamp is None:
            self._last_timestamp = timestamp_ms
        elapsed = timestamp_ms - self._last_timestamp
        self._last_timestamp = timestamp_ms
        return self.advance(elapsed, step)

    def reset(self) -> None:
        """Forget accumulated time and the last frame timestamp."""
        self.accumulated_ms = 0.0
        self._last_timestamp = None
