# MIT License (see LICENSE)
"""
Renderer adapters for lattice snapshots.

This module provides an abstract base class for rendering and a few
headless implementations. The engine has no graphics dependency; a canvas,
matplotlib or GPU front end subclasses RendererAdapter and draws from the
snapshot arrays.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TextIO
import sys

import numpy as np

from ..snapshot import LatticeSnapshot


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Usage:
        renderer.begin_frame(snap.time_ms)
        if snap.show_links:
            renderer.draw_links(snap.segments())
        renderer.draw_particles(snap.positions)
        renderer.end_frame(snap)

    Or use the convenience method:
        renderer.render_snapshot(sim.snapshot())
    """

    @abstractmethod
    def begin_frame(self, time_ms: float) -> None:
        ...

    @abstractmethod
    def draw_links(self, segments: np.ndarray) -> None:
        """
        Draw live links.

        Args:
            segments: (M, 2, 2) array of link endpoints.
        """
        ...

    @abstractmethod
    def draw_particles(self, positions: np.ndarray) -> None:
        """
        Draw particles.

        Args:
            positions: (N, 2) array.
        """
        ...

    @abstractmethod
    def end_frame(self, snapshot: LatticeSnapshot) -> None:
        """Finalize the frame; ``snapshot`` is passed for stats readouts."""
        ...

    def render_snapshot(self, snapshot: LatticeSnapshot) -> None:
        self.begin_frame(snapshot.time_ms)
        if snapshot.show_links:
            self.draw_links(snapshot.segments())
        self.draw_particles(snapshot.positions)
        self.end_frame(snapshot)


class DebugRenderer(RendererAdapter):
    """
    Text renderer for development and testing.

    Writes a short summary per frame to a stream (stdout by default).

    Output:
        === Frame t=16.7 ms ===
        links: 6815  mean length 16.21
        particles: 1768  centroid (480.00, 320.00)
        1768 particles · 6815 links, 2 pulses, 0 torn
    """

    def __init__(self, output: TextIO | None = None) -> None:
        self.output = output or sys.stdout

    def begin_frame(self, time_ms: float) -> None:
        self.output.write(f"=== Frame t={time_ms:.1f} ms ===\n")

    def draw_links(self, segments: np.ndarray) -> None:
        if len(segments):
            lengths = np.linalg.norm(segments[:, 1] - segments[:, 0], axis=1)
            self.output.write(f"links: {len(segments)}  mean length {lengths.mean():.2f}\n")
        else:
            self.output.write("links: 0\n")

    def draw_particles(self, positions: np.ndarray) -> None:
        c = positions.mean(axis=0) if len(positions) else np.zeros(2)
        self.output.write(f"particles: {len(positions)}  centroid ({c[0]:.2f}, {c[1]:.2f})\n")

    def end_frame(self, snapshot: LatticeSnapshot) -> None:
        self.output.write(
            f"{snapshot.stats_line()}, {snapshot.pulse_count} pulses, "
            f"{snapshot.broken_total} torn\n\n"
        )
        self.output.flush()


class NullRenderer(RendererAdapter):
    """No-op renderer, for benchmarking without drawing overhead."""

    def begin_frame(self, time_ms: float) -> None:
        pass

    def draw_links(self, segments: np.ndarray) -> None:
        pass

    def draw_particles(self, positions: np.ndarray) -> None:
        pass

    def end_frame(self, snapshot: LatticeSnapshot) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Records frames for playback or export.

    Example:
        renderer = BufferedRenderer()
        for _ in range(100):
            sim.tick(16.7)
            renderer.render_snapshot(sim.snapshot())
        print(len(renderer.frames), renderer.frames[-1]["links"])
    """

    def __init__(self) -> None:
        self.frames: list[dict] = []
        self._current_frame: dict | None = None

    def begin_frame(self, time_ms: float) -> None:
        self._current_frame = {"time_ms": time_ms, "segments": None, "positions": None}

    def draw_links(self, segments: np.ndarray) -> None:
        if self._current_frame is not None:
            self._current_frame["segments"] = segments.copy()

    def draw_particles(self, positions: np.ndarray) -> None:
        if self._current_frame is not None:
            self._current_frame["positions"] = positions.copy()

    def end_frame(self, snapshot: LatticeSnapshot) -> None:
        if self._current_frame is None:
            return
        self._current_frame["particles"] = snapshot.particle_count
        self._current_frame["links"] = snapshot.constraint_count
        self.frames.append(self._current_frame)
        self._current_frame = None

    def clear(self) -> None:
        self.frames.clear()
