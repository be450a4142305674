import numpy as np
import pytest
from pepper_sim.config import SimulationConfig
from pepper_sim.constraints.graph import ConstraintGraph, DistanceConstraint
from pepper_sim.constraints.weaken import weaken_constraints_near
from pepper_sim.lattice import build_lattice
from pepper_sim.particles import ParticleField

FLOOR = 1.18


def _link() -> DistanceConstraint:
    return DistanceConstraint(a=0, b=1, rest_length=10.0, stiffness=0.35, base_break_threshold=1.8)


def test_overlapping_weakens_take_lower_threshold_and_later_expiry():
    c = _link()
    c.mark_weak(1.3, expires_at=500.0, floor=FLOOR)
    c.mark_weak(1.5, expires_at=300.0, floor=FLOOR)
    assert c.weak.threshold == 1.3
    assert c.weak.expires_at == 500.0

    # order does not matter
    d = _link()
    d.mark_weak(1.5, expires_at=300.0, floor=FLOOR)
    d.mark_weak(1.3, expires_at=500.0, floor=FLOOR)
    assert d.weak == c.weak


def test_weak_threshold_never_below_floor():
    c = _link()
    c.mark_weak(0.5, expires_at=100.0, floor=FLOOR)
    assert c.break_threshold(50.0) == FLOOR
    c.mark_weak(0.1, expires_at=200.0, floor=FLOOR)
    assert c.break_threshold(150.0) == FLOOR


def test_weaken_window_expiry_is_inclusive():
    c = _link()
    c.mark_weak(1.4, expires_at=100.0, floor=FLOOR)
    assert c.break_threshold(100.0) == 1.4
    assert c.break_threshold(100.5) == 1.8


def test_weakening_cannot_strengthen():
    c = _link()
    c.mark_weak(1.4, expires_at=100.0, floor=FLOOR)
    c.mark_weak(2.5, expires_at=50.0, floor=FLOOR)
    assert c.break_threshold(60.0) == 1.4


def _lattice(config):
    # 5x5 grid, 50 px cells from 24 to 224
    return build_lattice(5, 5, 248.0, 248.0, 24.0, config=config)


def test_gentle_weaken_marks_links_within_outer_radius():
    cfg = SimulationConfig(grid_cols=5, grid_rows=5)
    particles, graph, _ = _lattice(cfg)
    x, y = 124.0, 124.0

    mids = graph.midpoints(particles)
    inside = np.hypot(mids[:, 0] - x, mids[:, 1] - y) <= cfg.click_tear_radius

    weakened, snapped = weaken_constraints_near(
        graph, particles, x, y, aggressive=False, now=1000.0, config=cfg,
        rng=np.random.default_rng(0),
    )
    assert snapped == 0
    assert weakened == int(inside.sum()) > 0
    for c, hit in zip(graph, inside):
        if hit:
            assert c.weak.threshold == pytest.approx(max(1.8 * 0.85, FLOOR))
            assert c.weak.expires_at == 1000.0 + cfg.weaken_duration_ms
        else:
            assert c.weak is None


def test_aggressive_weaken_snaps_stretched_link():
    cfg = SimulationConfig(grid_cols=5, grid_rows=5, tear_chance_base=0.0, tear_chance_gain=0.0)
    particles, graph, _ = _lattice(cfg)
    # particle 13 sits at (174, 124); drag it right so link 12-13 is at 1.3x rest
    particles.position[13, 0] += 15.0
    target = next(c for c in graph if (c.a, c.b) == (12, 13))
    mx, my = target.midpoint(particles)

    weakened, snapped = weaken_constraints_near(
        graph, particles, mx, my, aggressive=True, now=0.0, config=cfg,
        rng=np.random.default_rng(0),
    )
    assert snapped == 1
    assert target.broken
    assert weakened > 1


def test_gentle_weaken_never_snaps():
    cfg = SimulationConfig(grid_cols=5, grid_rows=5, tear_chance_base=1.0)
    particles, graph, _ = _lattice(cfg)
    particles.position[13, 0] += 15.0
    _, snapped = weaken_constraints_near(
        graph, particles, 156.5, 124.0, aggressive=False, now=0.0, config=cfg,
        rng=np.random.default_rng(0),
    )
    assert snapped == 0
    assert not any(c.broken for c in graph)


def test_certain_tear_chance_snaps_everything_in_inner_radius():
    cfg = SimulationConfig(grid_cols=5, grid_rows=5, tear_chance_base=1.0)
    particles, graph, _ = _lattice(cfg)
    x, y = 149.0, 124.0
    mids = graph.midpoints(particles)
    within_inner = np.hypot(mids[:, 0] - x, mids[:, 1] - y) <= cfg.inner_break_radius

    _, snapped = weaken_constraints_near(
        graph, particles, x, y, aggressive=True, now=0.0, config=cfg,
        rng=np.random.default_rng(0),
    )
    assert snapped == int(within_inner.sum()) >= 1


def test_snap_moves_later_links_out_of_reach():
    cfg = SimulationConfig(tear_chance_base=0.0, tear_chance_gain=0.0)
    # pinned 0 -- free 1 -- pinned 2 along the x axis; link 0-1 is at 1.3x rest
    particles = ParticleField(
        position=[[0.0, 0.0], [13.0, 0.0], [90.0, 0.0]],
        pinned=[True, False, True],
    )
    graph = ConstraintGraph([
        DistanceConstraint(a=0, b=1, rest_length=10.0, stiffness=0.35, base_break_threshold=1.8),
        DistanceConstraint(a=1, b=2, rest_length=77.0, stiffness=0.35, base_break_threshold=1.8),
    ])

    # link 1-2 starts with its midpoint 45 px away; the snap of 0-1 shoves
    # particle 1 right by the tear impulse and takes that midpoint to 63 px
    weakened, snapped = weaken_constraints_near(
        graph, particles, 6.5, 0.0, aggressive=True, now=0.0, config=cfg,
        rng=np.random.default_rng(0),
    )
    assert (weakened, snapped) == (1, 1)
    assert graph[0].broken
    np.testing.assert_allclose(particles.position[1], (49.0, 0.0))
    assert graph[1].weak is None
    assert not graph[1].broken


def test_zero_tear_chance_leaves_unstretched_links():
    cfg = SimulationConfig(grid_cols=5, grid_rows=5, tear_chance_base=0.0, tear_chance_gain=0.0)
    particles, graph, _ = _lattice(cfg)
    _, snapped = weaken_constraints_near(
        graph, particles, 149.0, 124.0, aggressive=True, now=0.0, config=cfg,
        rng=np.random.default_rng(0),
    )
    assert snapped == 0
