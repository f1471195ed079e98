"""
Follow-the-target environment.

Every individual controls a point mass. At the start of a generation
the masses are scattered on a ring around the origin and each network
has to push its mass towards a shared target. The network sees its own
position and the target position, and outputs an acceleration (plus an
optional brake). The score is the (squared) distance to the target at
the end of the evaluation window.

Positions and velocities for the whole population live in two (N, 3)
arrays; the environment never looks inside the networks.
"""
import logging
from typing import Iterable, Optional, Sequence

import numpy as np
import torch

from ..exceptions import ShapeMismatch
from .base import BaseEnvironment

logger = logging.getLogger(__name__)


class FollowTargetEnvironment(BaseEnvironment):
    """
    Point masses that must reach a target.

    Example:
        env = FollowTargetEnvironment(num_individuals=256, seed=3)
        env.reset(range(256))
        obs = env.observe(0)          # [x, y, z, tx, ty, tz]
        env.actuate(0, outputs)       # outputs[:3] is a force
        env.advance(0.02)
        env.score(0)                  # squared distance to the target
    """

    observation_size = 6
    action_size = 3

    def __init__(
        self,
        num_individuals: int,
        force_scale: float = 10.0,
        spawn_radius: Sequence[float] = (10.0, 20.0),
        spawn_height: Sequence[float] = (1.0, 2.0),
        target: Sequence[float] = (0.0, 0.0, 0.0),
        target_radius: float = 0.0,
        squared: bool = True,
        seed: Optional[int] = None,
    ):
        """
        Initialize the environment.

        Args:
            num_individuals: Number of point masses (population size).
            force_scale: Multiplier applied to the force outputs.
            spawn_radius: Horizontal spawn distance range [low, high).
            spawn_height: Spawn height range [low, high).
            target: Centre of the target.
            target_radius: If > 0, the target is moved to a random point
                           within this horizontal radius on every reset.
            squared: Score is squared distance if True, else Euclidean.
            seed: Seed for spawn positions.
        """
        if num_individuals < 1:
            raise ValueError(f"num_individuals must be at least 1, got {num_individuals}")

        self.num_individuals = num_individuals
        self.force_scale = force_scale
        self.spawn_radius = tuple(spawn_radius)
        self.spawn_height = tuple(spawn_height)
        self.target_center = np.asarray(target, dtype=np.float32)
        self.target_radius = target_radius
        self.squared = squared
        self.rng = np.random.default_rng(seed)

        self.positions = np.zeros((num_individuals, 3), dtype=np.float32)
        self.velocities = np.zeros((num_individuals, 3), dtype=np.float32)
        self.accelerations = np.zeros((num_individuals, 3), dtype=np.float32)
        self.brakes = np.zeros(num_individuals, dtype=np.float32)
        self.target = self.target_center.copy()

    def reset(self, individual_ids: Iterable[int]) -> None:
        """Scatter the masses on a ring and optionally move the target."""
        ids = np.fromiter(individual_ids, dtype=np.int64)

        # random horizontal direction
        angles = self.rng.uniform(0.0, 2.0 * np.pi, size=len(ids))
        radii = self.rng.uniform(*self.spawn_radius, size=len(ids))
        heights = self.rng.uniform(*self.spawn_height, size=len(ids))

        self.positions[ids, 0] = np.cos(angles) * radii
        self.positions[ids, 1] = heights
        self.positions[ids, 2] = np.sin(angles) * radii

        self.velocities[ids] = 0.0
        self.accelerations[ids] = 0.0
        self.brakes[ids] = 0.0

        self.target = self.target_center.copy()
        if self.target_radius > 0.0:
            angle = self.rng.uniform(0.0, 2.0 * np.pi)
            radius = self.target_radius * np.sqrt(self.rng.uniform())
            self.target[0] += np.cos(angle) * radius
            self.target[2] += np.sin(angle) * radius

        logger.debug(f"Reset {len(ids)} individuals, target at {self.target.tolist()}")

    def observe(self, individual_id: int) -> np.ndarray:
        return np.concatenate([self.positions[individual_id], self.target])

    def actuate(self, individual_id: int, outputs: torch.Tensor) -> None:
        """
        Read a force (and optional brake) from the network outputs.

        Raises:
            ShapeMismatch: If fewer than 3 outputs are given.
        """
        values = np.asarray(outputs, dtype=np.float32).reshape(-1)
        if values.size < self.action_size:
            raise ShapeMismatch(
                f"Expected at least {self.action_size} outputs, got {values.size}",
                expected=self.action_size,
                actual=values.size,
            )

        self.accelerations[individual_id] = values[:3] * self.force_scale
        if values.size > 3:
            self.brakes[individual_id] = np.clip(values[3], 0.0, 1.0)

    def advance(self, dt: float) -> None:
        """Semi-implicit Euler step for every mass."""
        self.velocities += self.accelerations * dt
        self.velocities *= (1.0 - self.brakes)[:, None]
        self.positions += self.velocities * dt
        self.accelerations[:] = 0.0

    def distance(self, individual_id: int) -> float:
        """Euclidean distance from the individual to the target."""
        return float(np.linalg.norm(self.positions[individual_id] - self.target))

    def score(self, individual_id: int) -> float:
        offset = self.positions[individual_id] - self.target
        squared = float(np.dot(offset, offset))
        return squared if self.squared else float(np.sqrt(squared))
