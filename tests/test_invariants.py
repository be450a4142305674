import numpy as np
import pytest
from pepper_sim.constraints.graph import ConstraintGraph, DistanceConstraint
from pepper_sim.core.invariants import kinetic_energy, max_strain, pinned_drift
from pepper_sim.particles import ParticleField


def test_kinetic_energy_from_verlet_state():
    p = ParticleField(
        position=[(1.0, 0.0), (5.0, 5.0)],
        previous=[(0.0, 0.0), (0.0, 0.0)],
        pinned=[False, True],
    )
    # v = 1 / 0.5 = 2 -> T = 0.5 * 4; the pinned one is ignored
    assert kinetic_energy(p, dt=0.5) == pytest.approx(2.0)


def test_max_strain_over_live_links():
    p = ParticleField(position=[(0.0, 0.0), (12.0, 0.0), (12.0, 15.0)])
    g = ConstraintGraph([
        DistanceConstraint(0, 1, 10.0, 0.5, 1.8),
        DistanceConstraint(1, 2, 10.0, 0.5, 1.8),
    ])
    assert max_strain(g, p) == pytest.approx(1.5)
    g[1].broken = True
    assert max_strain(g, p) == pytest.approx(1.2)
    g.remove_broken()
    g[0].broken = True
    assert max_strain(g, p) == 0.0


def test_pinned_drift():
    p = ParticleField(position=[(0.0, 0.0), (3.0, 4.0)], pinned=[False, True])
    ref = np.array([(10.0, 10.0), (0.0, 0.0)])
    assert pinned_drift(p, ref) == pytest.approx(5.0)
    assert pinned_drift(ParticleField(position=[(1.0, 1.0)]), np.zeros((1, 2))) == 0.0
