import numpy as np
import pytest
from constants import CLUSTER_CENTERS, MIN_BRUSH_RADIUS, TEMPERATURE_FLOOR
from simulation import Simulation


def run_script(params):
    """Fixed sequence of steps and edits, returning the final buffers."""
    sim = Simulation(params)
    for _ in range(3):
        sim.step()
    sim.spray_add((0.4, -0.3))
    sim.step()
    sim.erase_in_radius((-1.2, 0.9))
    sim.set_params(noise_scale=0.02, temperature=0.5)
    for _ in range(3):
        sim.step()
    return sim.particles.positions.copy(), sim.attractors.points.copy()


def in_bounds(points, bounds):
    return (
        np.all(points[:, 0] >= bounds.min_x) and np.all(points[:, 0] <= bounds.max_x)
        and np.all(points[:, 1] >= bounds.min_y) and np.all(points[:, 1] <= bounds.max_y)
    )


def test_initial_state(sim, small_params):
    assert sim.particles.positions.shape == (small_params["particle_count"], 2)
    assert sim.attractors.count == small_params["base_attractor_count"]
    assert sim.step_count == 0
    assert sim.mean_velocity == 0.0


def test_step_advances_counter_and_moves_particles(sim):
    before = sim.particles.positions.copy()
    sim.step()
    assert sim.step_count == 1
    assert sim.mean_velocity > 0.0
    assert not np.array_equal(before, sim.particles.positions)


def test_step_applies_euler_update_without_noise(sim):
    before = sim.particles.positions.copy()
    sim.step()
    expected = np.clip(before + sim.step_size * sim.particles.velocities, -2.5, 2.5)
    assert np.allclose(sim.particles.positions, expected)


def test_particles_stay_in_domain(small_params):
    small_params.update(step_size=5.0, noise_scale=0.5)
    sim = Simulation(small_params)
    for _ in range(25):
        sim.step()
        assert in_bounds(sim.particles.positions, sim.bounds)


def test_full_runs_are_bit_identical(small_params):
    pos_a, att_a = run_script(small_params)
    pos_b, att_b = run_script(small_params)
    assert np.array_equal(pos_a, pos_b)
    assert np.array_equal(att_a, att_b)


def test_different_seed_changes_run(small_params):
    pos_a, _ = run_script(small_params)
    small_params["seed"] = 8
    pos_b, _ = run_script(small_params)
    assert not np.array_equal(pos_a, pos_b)


def test_live_params_do_not_reset(sim):
    sim.step()
    positions = sim.particles.positions.copy()
    attractors = sim.attractors.points.copy()
    sim.set_params(temperature=0.9, step_size=0.1, noise_scale=0.01, brush_radius=0.2)
    assert sim.step_count == 1
    assert np.array_equal(sim.particles.positions, positions)
    assert np.array_equal(sim.attractors.points, attractors)
    assert sim.brush.radius == 0.2


def test_particle_count_change_resets_particles(sim):
    sim.step()
    sim.set_params(particle_count=40)
    assert sim.particles.positions.shape == (40, 2)
    assert sim.step_count == 0
    sim.step()
    assert sim.workspace.shape == (40, sim.attractors.count + 40)


def test_cluster_params_reset_attractors(sim):
    sim.set_params(cluster_count=2, base_attractor_count=51)
    assert sim.attractors.count == 51
    near_first = np.linalg.norm(sim.attractors.points[:25] - CLUSTER_CENTERS[0], axis=1)
    assert np.all(near_first < 6 * 0.27 * np.sqrt(2))


def test_reset_seed_regenerates_everything(sim):
    sim.step()
    sim.clear_attractors()
    sim.reset_seed(99)
    assert sim.params["seed"] == 99
    assert sim.step_count == 0
    assert sim.attractors.count == sim.params["base_attractor_count"]
    fresh = Simulation(dict(sim.params))
    assert np.array_equal(sim.particles.positions, fresh.particles.positions)
    assert np.array_equal(sim.attractors.points, fresh.attractors.points)


def test_reset_restores_initial_state(small_params):
    sim = Simulation(small_params)
    initial_positions = sim.particles.positions.copy()
    initial_attractors = sim.attractors.points.copy()
    for _ in range(4):
        sim.step()
    sim.spray_add((0.0, 0.0))
    sim.reset()
    assert sim.step_count == 0
    assert np.array_equal(sim.particles.positions, initial_positions)
    assert np.array_equal(sim.attractors.points, initial_attractors)


def test_clear_attractors_then_step(sim):
    sim.clear_attractors()
    assert sim.attractors.count == 0
    sim.step()
    assert np.all(sim.particles.velocities == 0.0)


def test_edit_is_visible_to_next_step(sim):
    sim.clear_attractors()
    sim.spray_add((1.0, 1.0))
    assert sim.attractors.count > 0
    sim.compute_velocity()
    assert sim.mean_velocity > 0.0


def test_spray_and_erase_use_brush_radius(sim):
    sim.clear_attractors()
    sim.set_params(brush_radius=0.1)
    added = sim.spray_add((0.0, 0.0))
    assert added == 4
    assert sim.attractors.count == added
    sim.set_params(brush_radius=0.2)
    assert sim.erase_in_radius((0.0, 0.0)) == added
    assert sim.attractors.count == 0


def test_invalid_values_are_clamped(small_params):
    small_params.update(
        particle_count=0, brush_radius=-1.0, temperature=0.0,
        cluster_count=50, base_attractor_count=-10, step_size=-1.0,
    )
    sim = Simulation(small_params)
    params = sim.get_params()
    assert params["particle_count"] == 1
    assert params["brush_radius"] == MIN_BRUSH_RADIUS
    assert params["temperature"] == TEMPERATURE_FLOOR
    assert params["cluster_count"] == len(CLUSTER_CENTERS)
    assert params["base_attractor_count"] == 0
    assert params["step_size"] == 0.0
    sim.step()
    assert sim.step_count == 1


def test_unknown_param_raises(sim):
    with pytest.raises(KeyError):
        sim.set_params(gravity=1.0)


def test_missing_params_use_defaults():
    sim = Simulation({"particle_count": 10, "base_attractor_count": 20})
    assert sim.params["temperature"] == pytest.approx(0.30)
    assert sim.params["cluster_count"] == 4


def test_stats(sim, small_params):
    sim.step()
    stats = sim.stats
    assert stats["step"] == 1
    assert stats["particle_count"] == small_params["particle_count"]
    assert stats["attractor_count"] == small_params["base_attractor_count"]
    assert stats["attractor_capacity"] == 256
    assert stats["mean_velocity"] == sim.mean_velocity


def test_reset_seed_with_current_seed_still_resets(sim):
    for _ in range(3):
        sim.step()
    sim.clear_attractors()
    sim.reset_seed(sim.params["seed"])
    assert sim.step_count == 0
    fresh = Simulation(dict(sim.params))
    assert np.array_equal(sim.particles.positions, fresh.particles.positions)
    assert np.array_equal(sim.attractors.points, fresh.attractors.points)
