import numpy as np
import pytest
from constants import CLUSTER_STD, MIN_ATTRACTOR_CAPACITY
from particle import AttractorSet, ParticleSystem
from rng import RandomSource


def test_reset_scatters_particles_in_domain():
    particles = ParticleSystem(500, seed=0)
    assert particles.positions.shape == (500, 2)
    assert particles.positions.dtype == np.float64
    assert np.all(particles.positions >= -2.5)
    assert np.all(particles.positions < 2.5)
    assert np.all(particles.velocities == 0.0)


def test_reset_is_deterministic_per_seed():
    a = ParticleSystem(50, seed=11)
    b = ParticleSystem(50, seed=11)
    c = ParticleSystem(50, seed=12)
    assert np.array_equal(a.positions, b.positions)
    assert not np.array_equal(a.positions, c.positions)


def test_reset_reseeds_stream():
    particles = ParticleSystem(10, seed=4)
    first = particles.positions.copy()
    particles.rng.next()
    particles.reset(10, seed=4)
    assert np.array_equal(particles.positions, first)


def test_invalid_particle_count_floored_to_one():
    particles = ParticleSystem(0, seed=0)
    assert particles.particle_count == 1
    assert particles.positions.shape == (1, 2)


def test_capacity_growth_is_power_of_two_multiple():
    attractors = AttractorSet()
    assert attractors.capacity == 0
    attractors.ensure_capacity(0)
    assert attractors.capacity == 0
    attractors.ensure_capacity(1)
    assert attractors.capacity == MIN_ATTRACTOR_CAPACITY
    attractors.ensure_capacity(257)
    assert attractors.capacity == 512
    attractors.ensure_capacity(3000)
    assert attractors.capacity == 4096
    attractors.ensure_capacity(10)
    assert attractors.capacity == 4096


def test_growth_preserves_live_points():
    attractors = AttractorSet()
    points = np.arange(400, dtype=np.float64).reshape(200, 2)
    attractors.append(points)
    attractors.ensure_capacity(1000)
    assert attractors.count == 200
    assert np.array_equal(attractors.points, points)


def test_reset_to_clusters_splits_evenly():
    attractors = AttractorSet()
    centers = [(0.0, 0.0), (1.0, 1.0)]
    attractors.reset_to_clusters(100, centers, RandomSource(0))
    assert attractors.count == 100
    for group, (cx, cy) in zip((attractors.points[:50], attractors.points[50:]), centers):
        assert len(group) == 50
        assert np.all(np.abs(group - (cx, cy)) < 6 * CLUSTER_STD)
        assert np.allclose(group.mean(axis=0), (cx, cy), atol=0.15)


def test_reset_to_clusters_gives_remainder_to_last_center():
    attractors = AttractorSet()
    centers = [(-2.0, -2.0), (0.0, 0.0), (2.0, 2.0)]
    attractors.reset_to_clusters(10, centers, RandomSource(5))
    pts = attractors.points
    nearest = np.argmin(
        [np.linalg.norm(pts - c, axis=1) for c in centers], axis=0
    )
    assert list(nearest) == [0, 0, 0, 1, 1, 1, 2, 2, 2, 2]


def test_reset_to_clusters_replaces_existing_set():
    attractors = AttractorSet()
    attractors.append(np.full((300, 2), 9.0))
    attractors.reset_to_clusters(20, [(0.0, 0.0)], RandomSource(1))
    assert attractors.count == 20
    assert np.all(np.abs(attractors.points) < 6 * CLUSTER_STD)


def test_clear_keeps_capacity_and_buffer():
    attractors = AttractorSet()
    attractors.reset_to_clusters(300, [(0.0, 0.0)], RandomSource(2))
    capacity = attractors.capacity
    before = attractors.buffer.copy()
    attractors.clear()
    assert attractors.count == 0
    assert attractors.capacity == capacity
    assert len(attractors.points) == 0
    assert np.array_equal(attractors.buffer, before)


def test_points_view_is_read_only():
    attractors = AttractorSet()
    attractors.append(np.zeros((3, 2)))
    with pytest.raises(ValueError):
        attractors.points[0, 0] = 1.0
