"""
Training infrastructure for controller networks.

This module provides the generational training pipeline:
- TrainerConfig: dataclass configuration (overridable from Django settings)
- ParallelStepScheduler: per-individual fan-out with a barrier per phase
- NullClock / RealTimeClock: pacing of the evaluation window
- GenerationalTrainer: the Reset/Evaluate/Score/Select/Update state machine

Example usage:
    from apps.neuro.environments import FollowTargetEnvironment
    from apps.neuro.training import GenerationalTrainer, TrainerConfig

    config = TrainerConfig(population_size=128, mode='batched', seed=42)
    env = FollowTargetEnvironment(config.population_size, seed=42)

    with GenerationalTrainer.from_config(config, env) as trainer:
        trainer.run(max_generations=50)
"""
from .clock import NullClock, RealTimeClock
from .config import MODE_BATCHED, MODE_REALTIME, MODES, TrainerConfig
from .scheduler import ParallelStepScheduler
from .trainer import GenerationalTrainer, GenerationStats, TrainerPhase

__all__ = [
    # Configuration
    'TrainerConfig',
    'MODES',
    'MODE_REALTIME',
    'MODE_BATCHED',

    # Scheduling
    'ParallelStepScheduler',
    'NullClock',
    'RealTimeClock',

    # Orchestration
    'GenerationalTrainer',
    'GenerationStats',
    'TrainerPhase',
]
