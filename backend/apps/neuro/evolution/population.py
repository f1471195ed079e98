"""
Population arena for evolving controllers.

Individuals are addressed by a stable integer id (their index in the
arena). Each individual is one Network plus one FitnessRecord for the
current generation. The champion is a reference by id into the arena,
never a copy, and is excluded from parameter updates for as long as it
stays champion.

Membership is fixed for a run; the environment maps ids to whatever
external handles it needs.
"""
import logging
from typing import Iterator, List, Optional, Sequence

import torch

from ..networks import Network, Topology
from ..seeding import STREAM_INIT, STREAM_UPDATE, derive_seed, fresh_entropy, make_generator
from .selection import Champion, FitnessRecord, rank, sanitize_score

logger = logging.getLogger(__name__)


class Population:
    """
    Ordered, fixed-size collection of networks plus a persistent champion.

    Example:
        pop = Population(size=256, topology=Topology(6, 24, 3), seed=1)
        pop.randomize()
        pop.clear_records()
        ...
        for record in pop.ranked():
            print(record.individual_id, record.score)
    """

    def __init__(
        self,
        size: int,
        topology: Sequence[int],
        activation: str = 'tanh_approx',
        seed: Optional[int] = None,
    ):
        """
        Create and configure every network (zero-filled).

        Args:
            size: Number of individuals.
            topology: Layer sizes (L0, L1, L2).
            activation: Activation name for every network.
            seed: Run seed. None draws one from the OS.

        Raises:
            ValueError: If size or topology is invalid.
        """
        if size < 1:
            raise ValueError(f"Population size must be at least 1, got {size}")

        self.topology = Topology(*topology).validate()
        self.seed = fresh_entropy() if seed is None else seed

        self.networks: List[Network] = [
            Network(
                *self.topology,
                activation=activation,
                seed=derive_seed(self.seed, STREAM_INIT, individual_id),
            )
            for individual_id in range(size)
        ]
        self.records: List[FitnessRecord] = []
        self.champion = Champion()

        logger.debug(
            f"Created population of {size} x {self.topology} (seed={self.seed})"
        )

    def __len__(self) -> int:
        return len(self.networks)

    def __iter__(self) -> Iterator[Network]:
        return iter(self.networks)

    def __getitem__(self, individual_id: int) -> Network:
        return self.networks[individual_id]

    @property
    def ids(self) -> range:
        return range(len(self.networks))

    def randomize(self) -> None:
        """Randomize every network's parameters from its own generator."""
        for network in self.networks:
            network.randomize()

    # Fitness records

    def clear_records(self) -> None:
        """Start a generation: one fresh record with score 0 per individual."""
        self.records = [FitnessRecord(individual_id, 0.0) for individual_id in self.ids]

    def record_score(self, individual_id: int, score: float) -> float:
        """
        Store an individual's score, mapping non-finite values to +inf.

        Returns:
            The score actually stored.
        """
        stored = sanitize_score(score)
        self.records[individual_id].score = stored
        return stored

    def ranked(self) -> List[FitnessRecord]:
        """Records sorted best first (stable)."""
        return rank(self.records)

    # Champion

    @property
    def champion_network(self) -> Optional[Network]:
        if not self.champion.exists:
            return None
        return self.networks[self.champion.individual_id]

    def is_champion(self, individual_id: int) -> bool:
        return self.champion.individual_id == individual_id

    # Randomness

    def update_generator(self, generation: int, individual_id: int) -> torch.Generator:
        """
        Generator for one individual's update chain in one generation.

        Derived from the run seed only, so results do not depend on
        which worker processes the individual.
        """
        return make_generator(derive_seed(self.seed, STREAM_UPDATE, generation, individual_id))
