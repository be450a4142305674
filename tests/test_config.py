import pytest
from pepper_sim import ConfigurationError, Simulation, SimulationConfig


def test_defaults_are_valid():
    cfg = SimulationConfig().validate()
    assert cfg.weak_threshold == pytest.approx(1.8 * 0.85)
    assert cfg.inner_break_radius == 24.0


def test_inner_radius_clamped_to_outer():
    cfg = SimulationConfig(click_tear_radius=10.0, click_inner_break_radius=30.0)
    assert cfg.inner_break_radius == 10.0


@pytest.mark.parametrize(
    "field,value",
    [
        ("grid_cols", 1),
        ("grid_rows", 0),
        ("structural_stiffness", 0.0),
        ("shear_stiffness", 1.5),
        ("damping", 1.0),
        ("constraint_iterations", 0),
        ("pulse_sigma", 0.0),
        ("pulse_half_life_ms", -1.0),
        ("fixed_dt_ms", 0.0),
        ("max_frame_ms", 1.0),
        ("break_threshold", 1.0),
        ("min_weak_threshold", 2.0),
        ("min_weak_threshold", 0.9),
        ("border_padding", -1.0),
        ("max_breaks_per_pass", 0),
        ("grid_cols", 2.5),
        ("grid_rows", 8.0),
        ("constraint_iterations", 3.0),
        ("pulse_strength", float("nan")),
        ("tear_impulse", float("inf")),
    ],
)
def test_invalid_parameters_fail_fast(field, value):
    with pytest.raises(ConfigurationError):
        SimulationConfig().replace(**{field: value})
    with pytest.raises(ValueError):
        Simulation(config=SimulationConfig(**{field: value}))


def test_replace_returns_validated_copy():
    base = SimulationConfig()
    cfg = base.replace(grid_cols=10)
    assert cfg.grid_cols == 10
    assert base.grid_cols == 52
