"""
Generational trainer.

Drives the population through an endless cycle of phases:

    Resetting -> Evaluating -> Scoring -> Selecting -> Updating -> Resetting

- Resetting: fresh fitness records, environment repositions everyone.
- Evaluating: fixed ticks of observe -> parallel step -> actuate -> advance.
- Scoring: one scalar per individual; non-finite scores become +inf,
  as do individuals whose observation or action had the wrong shape.
- Selecting: stable ascending sort, winner vs champion (with slack).
- Updating: every non-champion individual runs the update chain in
  parallel, reading the champion's buffers.

Each call to advance() runs exactly one phase (or one burst of the
Evaluating phase), so an orchestration layer can interleave training
with its own work. Cancellation is checked between advances only,
never in the middle of a parallel fan-out.
"""
import logging
import math
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set

from ..environments import BaseEnvironment
from ..evolution import FitnessRecord, Population
from ..exceptions import DegenerateScore, ShapeMismatch
from ..networks import Network
from .clock import NullClock
from .config import TrainerConfig
from .scheduler import ParallelStepScheduler

logger = logging.getLogger(__name__)


class TrainerPhase(Enum):
    RESETTING = 'resetting'
    EVALUATING = 'evaluating'
    SCORING = 'scoring'
    SELECTING = 'selecting'
    UPDATING = 'updating'


@dataclass
class GenerationStats:
    """Statistics for a generation."""
    generation: int = 0
    winner_id: Optional[int] = None
    best_score: float = math.inf
    mean_score: float = math.inf
    worst_score: float = math.inf
    score_std: float = 0.0
    degenerate_count: int = 0
    champion_id: Optional[int] = None
    champion_score: float = math.inf
    improved: bool = False
    num_updated: int = 0
    num_skipped: int = 0


class GenerationalTrainer:
    """
    Phase state machine for population-based training.

    Example:
        config = TrainerConfig(population_size=64, mode='batched', seed=1)
        env = FollowTargetEnvironment(config.population_size, seed=1)

        with GenerationalTrainer.from_config(config, env) as trainer:
            for stats in trainer.run(max_generations=100):
                print(stats.generation, stats.best_score)
    """

    def __init__(
        self,
        population: Population,
        environment: BaseEnvironment,
        config: Optional[TrainerConfig] = None,
        scheduler: Optional[ParallelStepScheduler] = None,
        clock=None,
    ):
        """
        Initialize the trainer.

        Args:
            population: Configured (and usually randomized) population.
            environment: Environment to evaluate against.
            config: Training configuration. Defaults to TrainerConfig().
            scheduler: Fan-out scheduler. Created from config.workers
                       (and closed by close()) if not given.
            clock: Object with wait(ticks, dt). Defaults to NullClock.

        Raises:
            ShapeMismatch: If the environment's observation or action
                           size does not fit the population topology.
        """
        self.config = config or TrainerConfig()
        self.population = population
        self.environment = environment

        topology = population.topology
        if environment.observation_size and environment.observation_size != topology.layer0:
            raise ShapeMismatch(
                f"Environment observes {environment.observation_size} values "
                f"but networks take {topology.layer0} inputs",
                expected=topology.layer0,
                actual=environment.observation_size,
            )
        if environment.action_size > topology.layer2:
            raise ShapeMismatch(
                f"Environment reads {environment.action_size} outputs "
                f"but networks produce {topology.layer2}",
                expected=environment.action_size,
                actual=topology.layer2,
            )

        self.update_chain = self.config.build_update_chain()
        self.champion_policy = self.config.build_champion_policy()

        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or ParallelStepScheduler(self.config.workers)
        self.clock = clock or NullClock()

        self.phase = TrainerPhase.RESETTING
        self.generation = 0
        self.ticks_elapsed = 0
        self.stats_history: List[GenerationStats] = []

        self._stats: Optional[GenerationStats] = None
        self._ranked: List[FitnessRecord] = []
        self._failed: Set[int] = set()
        self._stop = threading.Event()

        self._handlers = {
            TrainerPhase.RESETTING: self._reset,
            TrainerPhase.EVALUATING: self._evaluate,
            TrainerPhase.SCORING: self._score,
            TrainerPhase.SELECTING: self._select,
            TrainerPhase.UPDATING: self._update,
        }

    @classmethod
    def from_config(
        cls,
        config: TrainerConfig,
        environment: BaseEnvironment,
        clock=None,
    ) -> 'GenerationalTrainer':
        """Build and randomize a population from the config, then the trainer."""
        population = Population(
            size=config.population_size,
            topology=config.topology,
            activation=config.activation,
            seed=config.seed,
        )
        population.randomize()
        return cls(population, environment, config=config, clock=clock)

    def __enter__(self) -> 'GenerationalTrainer':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the scheduler if this trainer created it."""
        if self._owns_scheduler:
            self.scheduler.close()

    # Driving

    def advance(self) -> TrainerPhase:
        """
        Run the current phase and move to the next one.

        Returns:
            The phase that will run on the next call.
        """
        self.phase = self._handlers[self.phase]()
        return self.phase

    def run_generation(self) -> GenerationStats:
        """Advance until the current generation is complete."""
        while True:
            if self.advance() is TrainerPhase.RESETTING:
                return self.stats_history[-1]

    def run(
        self,
        max_generations: Optional[int] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> List[GenerationStats]:
        """
        Run generations until cancelled (or max_generations complete).

        Cancellation (cancel() or stop_event) is honoured at the next
        phase boundary, including a cancel() issued before this call.
        An unfinished generation is discarded and the cancel() request
        is consumed.

        Args:
            max_generations: Stop after this many completed generations.
                             None runs indefinitely.
            stop_event: Optional external cancellation flag.

        Returns:
            Stats of the generations completed by this call.
        """
        completed: List[GenerationStats] = []

        while max_generations is None or len(completed) < max_generations:
            if self._stop.is_set() or (stop_event is not None and stop_event.is_set()):
                logger.info(f"Training cancelled at generation {self.generation}")
                self.discard_generation()
                self._stop.clear()
                break

            if self.advance() is TrainerPhase.RESETTING:
                completed.append(self.stats_history[-1])

        return completed

    def cancel(self) -> None:
        """Request cooperative cancellation; safe to call from any thread."""
        self._stop.set()

    def discard_generation(self) -> None:
        """Drop an unfinished generation and start over at Resetting."""
        if self.phase is TrainerPhase.RESETTING:
            return
        logger.info(
            f"Discarding unfinished generation {self.generation} "
            f"(was {self.phase.value})"
        )
        self.phase = TrainerPhase.RESETTING
        self.ticks_elapsed = 0
        self._stats = None
        self._ranked = []
        self._failed = set()

    # Phases

    def _reset(self) -> TrainerPhase:
        self.population.clear_records()
        self.environment.reset(self.population.ids)
        self.ticks_elapsed = 0
        self._stats = GenerationStats(generation=self.generation)
        self._ranked = []
        self._failed = set()

        logger.debug(f"Cycle {self.generation}: reset {len(self.population)} individuals")
        return TrainerPhase.EVALUATING

    def _evaluate(self) -> TrainerPhase:
        total = self.config.evaluation_ticks
        burst = min(self.config.ticks_per_burst, total - self.ticks_elapsed)

        for _ in range(burst):
            self._tick()
        self.ticks_elapsed += burst

        self.clock.wait(burst, self.config.fixed_dt)

        if self.ticks_elapsed >= total:
            return TrainerPhase.SCORING
        return TrainerPhase.EVALUATING

    def _tick(self) -> None:
        """One simulation tick for the whole population."""
        population = self.population
        environment = self.environment

        for individual_id in self._active_ids():
            try:
                population[individual_id].set_inputs(environment.observe(individual_id))
            except ShapeMismatch as e:
                self._fail(individual_id, 'observation', e)

        active = self._active_ids()

        # barrier: physics must see every individual's action
        self.scheduler.step_all([population[i] for i in active])

        for individual_id in active:
            try:
                environment.actuate(individual_id, population[individual_id].state2)
            except ShapeMismatch as e:
                self._fail(individual_id, 'action', e)

        environment.advance(self.config.fixed_dt)

    def _active_ids(self) -> List[int]:
        """Ids still being evaluated this generation."""
        return [i for i in self.population.ids if i not in self._failed]

    def _fail(self, individual_id: int, stage: str, error: ShapeMismatch) -> None:
        """Drop an individual from the rest of this generation's evaluation."""
        logger.warning(
            f"Cycle {self.generation}: individual {individual_id} {stage} "
            f"failed, scored as worst: {error}"
        )
        self._failed.add(individual_id)

    def _score(self) -> TrainerPhase:
        stats = self._stats
        degenerate = 0

        for individual_id in self.population.ids:
            if individual_id in self._failed:
                self.population.record_score(individual_id, math.inf)
                degenerate += 1
                continue

            try:
                score = self.environment.score(individual_id)
            except DegenerateScore as e:
                logger.warning(str(e))
                score = math.inf

            if math.isinf(self.population.record_score(individual_id, score)):
                degenerate += 1

        if degenerate:
            logger.warning(
                f"Cycle {self.generation}: {degenerate} individual(s) "
                f"with degenerate scores ranked last"
            )

        scores = [record.score for record in self.population.records if not record.is_degenerate]
        stats.degenerate_count = degenerate
        if scores:
            stats.mean_score = sum(scores) / len(scores)
            stats.worst_score = max(scores)
            stats.score_std = self._std(scores)

        return TrainerPhase.SELECTING

    def _select(self) -> TrainerPhase:
        stats = self._stats
        population = self.population

        self._ranked = population.ranked()
        winner = self._ranked[0]
        improved = self.champion_policy.update(population.champion, winner)

        stats.winner_id = winner.individual_id
        stats.best_score = winner.score
        stats.improved = improved
        stats.champion_id = population.champion.individual_id
        stats.champion_score = population.champion.score

        logger.info(
            f"Cycle {self.generation}: winner {winner.individual_id} "
            f"score {winner.score:.4f} | champion {stats.champion_id} "
            f"score {stats.champion_score:.4f}{' (new)' if improved else ''}"
        )
        return TrainerPhase.UPDATING

    def _update(self) -> TrainerPhase:
        stats = self._stats
        population = self.population

        donor = population.champion_network
        targets = [i for i in population.ids if not population.is_champion(i)]

        def update_one(individual_id: int) -> bool:
            return self._update_individual(individual_id, donor)

        results = self.scheduler.map(update_one, targets)

        stats.num_updated = sum(results)
        stats.num_skipped = len(results) - stats.num_updated

        self.stats_history.append(stats)
        self._stats = None
        self.generation += 1
        return TrainerPhase.RESETTING

    def _update_individual(self, individual_id: int, donor: Optional[Network]) -> bool:
        """Run the update chain on one individual; False if it was skipped."""
        generator = self.population.update_generator(self.generation, individual_id)
        try:
            self.update_chain.apply(self.population[individual_id], donor, generator)
        except ShapeMismatch as e:
            logger.warning(f"Skipping update of individual {individual_id}: {e}")
            return False
        return True

    @staticmethod
    def _std(values: List[float]) -> float:
        """Calculate standard deviation."""
        if len(values) < 2:
            return 0.0
        mean = sum(values) / len(values)
        variance = sum((x - mean) ** 2 for x in values) / len(values)
        return variance ** 0.5
