"""
Pytest fixtures for neuro app tests.

Provides fixtures for:
- Networks in known states
- Populations
- Environments
- Trainer configurations
"""
import pytest

from apps.neuro.environments import FollowTargetEnvironment
from apps.neuro.evolution import Population

from .factories import (
    NetworkFactory,
    RecordingClock,
    TargetValueEnvironmentFactory,
    TrainerConfigFactory,
)


@pytest.fixture
def zero_network():
    """Return a configured 2-2-1 network with every buffer zero."""
    return NetworkFactory(layer1=2, randomized=False)


@pytest.fixture
def network():
    """Return a randomized 2-3-1 network."""
    return NetworkFactory()


@pytest.fixture
def donor():
    """Return a second randomized 2-3-1 network."""
    return NetworkFactory()


@pytest.fixture
def mismatched_network():
    """Return a randomized network with a different topology."""
    return NetworkFactory(layer0=3)


@pytest.fixture
def population():
    """Return a randomized population of 4 x 2-2-1 networks."""
    pop = Population(size=4, topology=(2, 2, 1), seed=99)
    pop.randomize()
    return pop


@pytest.fixture
def follow_environment():
    """Return a seeded follow-the-target environment for 8 individuals."""
    return FollowTargetEnvironment(num_individuals=8, seed=5)


@pytest.fixture
def target_environment():
    """Return the target-value stand-in environment."""
    return TargetValueEnvironmentFactory()


@pytest.fixture
def trainer_config():
    """Return a small batched trainer configuration."""
    return TrainerConfigFactory()


@pytest.fixture
def recording_clock():
    """Return a clock that records suspensions."""
    return RecordingClock()
