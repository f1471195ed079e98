"""
Base environment abstraction.

The trainer treats the simulation as an opaque collaborator with a
narrow contract. Per tick it asks for an observation for every
individual, steps the networks, hands every output vector back, and
then advances the simulation once. At the end of a generation it asks
for one scalar score per individual (lower is better).

Individuals are identified by their integer id in the population; the
environment owns the mapping from id to whatever it simulates.
"""
from abc import ABC, abstractmethod
from typing import Iterable, Sequence, Union

import numpy as np
import torch

Vector = Union[np.ndarray, torch.Tensor, Sequence[float]]


class BaseEnvironment(ABC):
    """
    Abstract base class for training environments.

    Attributes:
        observation_size: Length of the vector returned by observe()
                          (must equal the networks' input layer).
        action_size: Minimum number of outputs actuate() reads.

    Example:
        class ConstantEnvironment(BaseEnvironment):
            observation_size = 1
            action_size = 1

            def reset(self, individual_ids):
                self.outputs = {i: 0.0 for i in individual_ids}

            def observe(self, individual_id):
                return np.ones(1, dtype=np.float32)

            def actuate(self, individual_id, outputs):
                self.outputs[individual_id] = float(outputs[0])

            def advance(self, dt):
                pass

            def score(self, individual_id):
                return abs(1.0 - self.outputs[individual_id])
    """

    observation_size: int = 0
    action_size: int = 0

    @abstractmethod
    def reset(self, individual_ids: Iterable[int]) -> None:
        """
        Reposition every individual (and the goal) for a new generation.

        Args:
            individual_ids: Ids of all individuals in the population.
        """
        pass

    @abstractmethod
    def observe(self, individual_id: int) -> Vector:
        """
        Return the input vector for one individual for the current tick.

        Returns:
            Vector of length observation_size.
        """
        pass

    @abstractmethod
    def actuate(self, individual_id: int, outputs: torch.Tensor) -> None:
        """
        Apply one individual's network outputs as its action.

        Args:
            individual_id: Individual the outputs belong to.
            outputs: The network's output layer (state2). Read it during
                     this call; the buffer is overwritten next tick.
        """
        pass

    @abstractmethod
    def advance(self, dt: float) -> None:
        """
        Advance the shared simulation by one fixed tick.

        Called once per tick, after every individual has been actuated.
        """
        pass

    @abstractmethod
    def score(self, individual_id: int) -> float:
        """
        Return the individual's fitness for the finished generation.

        Lower is better, zero is ideal. Implementations may return NaN
        or raise DegenerateScore when no meaningful score exists; the
        trainer records those as the worst possible score.
        """
        pass
