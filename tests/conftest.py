import pytest
from simulation import Simulation


SMALL_PARAMS = {
    "seed": 7,
    "particle_count": 24,
    "temperature": 0.3,
    "step_size": 0.06,
    "noise_scale": 0.0,
    "brush_radius": 0.1,
    "cluster_count": 3,
    "base_attractor_count": 90,
}


@pytest.fixture
def small_params():
    return dict(SMALL_PARAMS)


@pytest.fixture
def sim(small_params):
    return Simulation(small_params)
