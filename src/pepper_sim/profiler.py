# MIT License (see LICENSE)
"""
Simple profiling utilities for per-phase timing.

Measures how long the step phases (force accumulation, integration,
relaxation, pulse culling) take, without external dependencies.

Example:
    profiler = Profiler()
    sim = Simulation(profiler=profiler)
    ...
    print(profiler.stats.summary()["relax"]["mean_ms"])
"""
from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator
import time


@dataclass
class ProfileStats:
    """Timing samples in seconds, keyed by section name."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        self.samples.setdefault(name, []).append(dt)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-section statistics.

        Returns:
            Dict mapping section name to a dict with keys:
            - 'n': sample count
            - 'mean_ms': average time in milliseconds
            - 'max_ms': worst time in milliseconds
            - 'total_ms': summed time in milliseconds
        """
        out = {}
        for name, times in self.samples.items():
            total = sum(times)
            out[name] = {
                "n": len(times),
                "mean_ms": 1e3 * total / len(times),
                "max_ms": 1e3 * max(times),
                "total_ms": 1e3 * total,
            }
        return out


class Profiler:
    """Context-manager profiler; sections may nest."""

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)