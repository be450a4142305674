# MIT License (see LICENSE)
"""
Rendering adapters for lattice snapshots.

This subpackage provides:
    - RendererAdapter: Abstract base class defining the drawing interface.
    - DebugRenderer: Text output for debugging.
    - NullRenderer: No-op renderer for benchmarks.
    - BufferedRenderer: Records frames for playback or export.

The physics engine has no rendering dependency; these adapters are optional.

Typical usage:
    from pepper_sim.renderer import DebugRenderer

    DebugRenderer().render_snapshot(sim.snapshot())
"""
from .adapter import (
    RendererAdapter,
    DebugRenderer,
    NullRenderer,
    BufferedRenderer,
)

__all__ = [
    "RendererAdapter",
    "DebugRenderer",
    "NullRenderer",
    "BufferedRenderer",
]
