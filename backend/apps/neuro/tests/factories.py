"""
Factory Boy factories and stand-ins for neuro app tests.

These build networks, trainer configurations and a tiny deterministic
environment with sensible defaults for testing.
"""
import math

import factory
import numpy as np

from apps.neuro.environments import BaseEnvironment
from apps.neuro.exceptions import DegenerateScore, ShapeMismatch
from apps.neuro.networks import Network
from apps.neuro.training import TrainerConfig


class TargetValueEnvironment(BaseEnvironment):
    """
    Every individual sees a vector of ones and should output `target`.

    The score is the distance between the first output and the target
    at the end of the window. Individuals listed in `nan_ids` score NaN
    and those in `raise_ids` raise DegenerateScore. Individuals in
    `wide_ids` get an observation one value too long and those in
    `reject_ids` have their action refused with ShapeMismatch.
    """

    def __init__(
        self,
        observation_size=2,
        action_size=1,
        target=0.25,
        nan_ids=(),
        raise_ids=(),
        wide_ids=(),
        reject_ids=(),
        on_advance=None,
    ):
        self.observation_size = observation_size
        self.action_size = action_size
        self.target = target
        self.nan_ids = set(nan_ids)
        self.raise_ids = set(raise_ids)
        self.wide_ids = set(wide_ids)
        self.reject_ids = set(reject_ids)
        self.on_advance = on_advance

        self.outputs = {}
        self.resets = 0
        self.ticks = 0

    def reset(self, individual_ids):
        self.outputs = {individual_id: 0.0 for individual_id in individual_ids}
        self.resets += 1

    def observe(self, individual_id):
        size = self.observation_size + (1 if individual_id in self.wide_ids else 0)
        return np.ones(size, dtype=np.float32)

    def actuate(self, individual_id, outputs):
        if individual_id in self.reject_ids:
            raise ShapeMismatch(f"Individual {individual_id} action rejected")
        self.outputs[individual_id] = float(outputs[0])

    def advance(self, dt):
        self.ticks += 1
        if self.on_advance is not None:
            self.on_advance(self.ticks)

    def score(self, individual_id):
        if individual_id in self.raise_ids:
            raise DegenerateScore(individual_id)
        if individual_id in self.nan_ids:
            return math.nan
        return abs(self.outputs[individual_id] - self.target)


class RecordingClock:
    """Clock that records every suspension instead of sleeping."""

    def __init__(self):
        self.waits = []

    def wait(self, ticks, dt):
        self.waits.append(ticks)


class NetworkFactory(factory.Factory):
    """Factory for randomized 2-3-1 networks."""

    class Meta:
        model = Network

    layer0 = 2
    layer1 = 3
    layer2 = 1
    activation = 'tanh_approx'
    seed = factory.Sequence(lambda n: 1000 + n)

    @factory.post_generation
    def randomized(obj, create, extracted, **kwargs):
        # NetworkFactory(randomized=False) keeps the zero-filled buffers
        if extracted is None or extracted:
            obj.randomize()


class FollowNetworkFactory(NetworkFactory):
    """Factory for networks sized for the follow-the-target task."""

    layer0 = 6
    layer1 = 8
    layer2 = 3


class TrainerConfigFactory(factory.Factory):
    """Factory for small, fast, batched trainer configurations."""

    class Meta:
        model = TrainerConfig

    population_size = 6
    layer0 = 2
    layer1 = 3
    layer2 = 1
    cycle_time = 0.25
    fixed_dt = 0.05
    mode = 'batched'
    batch_ticks = 2
    workers = 1
    seed = factory.Sequence(lambda n: 500 + n)


class TargetValueEnvironmentFactory(factory.Factory):
    """Factory for the target-value stand-in environment."""

    class Meta:
        model = TargetValueEnvironment

    observation_size = 2
    action_size = 1
    target = 0.25
