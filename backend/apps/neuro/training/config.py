"""
Trainer configuration.

Defaults can be overridden project-wide through the NEUROEVOLUTION
Django setting (upper-case keys) and per run through keyword overrides:

    NEUROEVOLUTION = {
        'POPULATION_SIZE': 256,
        'LAYER1': 24,
        'MODE': 'batched',
        'BATCH_TICKS': 10,
    }

    config = TrainerConfig.from_settings(seed=7)
"""
import math
from dataclasses import dataclass, fields
from typing import Optional, Tuple

from ..evolution import ChampionPolicy, UpdateChain
from ..networks import ACTIVATIONS, Topology

MODE_REALTIME = 'realtime'
MODE_BATCHED = 'batched'
MODES = (MODE_REALTIME, MODE_BATCHED)


@dataclass
class TrainerConfig:
    """Configuration for a generational training run."""

    # Population
    population_size: int = 256
    layer0: int = 6
    layer1: int = 24
    layer2: int = 3
    activation: str = 'tanh_approx'

    # Evaluation window
    cycle_time: float = 5.0
    fixed_dt: float = 0.02
    mode: str = MODE_REALTIME  # 'realtime' or 'batched'
    batch_ticks: int = 10  # ticks per burst in batched mode

    # Updating
    update_operators: Tuple[str, ...] = ('lerp', 'mutate')
    copy_rate: float = 0.5
    mutate_rate: float = 0.1
    evolve_rate: float = 0.5

    # Champion slack
    accept_slack: float = 0.1
    reject_slack: float = 1.0

    # Execution
    workers: Optional[int] = None  # None = one per CPU
    seed: Optional[int] = None

    def __post_init__(self):
        self.update_operators = tuple(self.update_operators)

        if self.population_size < 1:
            raise ValueError(f"population_size must be at least 1, got {self.population_size}")
        self.topology.validate()
        if self.activation not in ACTIVATIONS:
            raise ValueError(
                f"Unknown activation: {self.activation}. Choose from {sorted(ACTIVATIONS)}"
            )
        if not (self.cycle_time > 0 and self.fixed_dt > 0):
            raise ValueError("cycle_time and fixed_dt must be positive")
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")
        if self.batch_ticks < 1:
            raise ValueError(f"batch_ticks must be at least 1, got {self.batch_ticks}")
        for name in ('accept_slack', 'reject_slack'):
            value = getattr(self, name)
            if not (math.isfinite(value) and value >= 0):
                raise ValueError(f"{name} must be a finite non-negative number, got {value}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

        # Validates operator names and rates
        self.build_update_chain()

    @property
    def topology(self) -> Topology:
        return Topology(self.layer0, self.layer1, self.layer2)

    @property
    def evaluation_ticks(self) -> int:
        """Number of fixed ticks in one evaluation window."""
        return max(1, math.ceil(round(self.cycle_time / self.fixed_dt, 6)))

    @property
    def ticks_per_burst(self) -> int:
        """Ticks executed between two suspension points."""
        return 1 if self.mode == MODE_REALTIME else self.batch_ticks

    def build_update_chain(self) -> UpdateChain:
        return UpdateChain(
            operators=self.update_operators,
            copy_rate=self.copy_rate,
            mutate_rate=self.mutate_rate,
            evolve_rate=self.evolve_rate,
        )

    def build_champion_policy(self) -> ChampionPolicy:
        return ChampionPolicy(
            accept_slack=self.accept_slack,
            reject_slack=self.reject_slack,
        )

    @classmethod
    def from_settings(cls, **overrides) -> 'TrainerConfig':
        """
        Build a config from settings.NEUROEVOLUTION plus overrides.

        Overrides whose value is None are ignored, so optional command
        line arguments can be passed straight through.

        Raises:
            ImproperlyConfigured: On unknown keys or invalid values.
        """
        from django.conf import settings
        from django.core.exceptions import ImproperlyConfigured

        values = {
            key.lower(): value
            for key, value in getattr(settings, 'NEUROEVOLUTION', {}).items()
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        known = {field.name for field in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ImproperlyConfigured(
                f"Unknown NEUROEVOLUTION settings: {sorted(unknown)}"
            )

        try:
            return cls(**values)
        except (TypeError, ValueError) as e:
            raise ImproperlyConfigured(f"Invalid NEUROEVOLUTION settings: {e}") from e
