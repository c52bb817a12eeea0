import numpy as np
import pytest

from particle import ParticleSystem
from settings import SimulationSettings


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def settings():
    return SimulationSettings()


@pytest.fixture
def bounds():
    return (800, 600)


@pytest.fixture
def system(rng):
    return ParticleSystem(rng)