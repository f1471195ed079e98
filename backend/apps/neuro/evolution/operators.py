"""
Per-individual parameter update chain.

Each non-champion individual receives a configured subset of:
1. lerp: interpolate towards the champion by `copy_rate`
2. mutate: replace parameters with fresh draws with probability `mutate_rate`
3. evolve: copy parameters from the champion with probability `evolve_rate`

The operators always run in that order, sequentially, inside the task
that owns the individual, so evolve sees mutate's effect. The champion
is only ever read.
"""
from typing import Iterable, List, Optional, Tuple

import torch

from ..networks import Network

OPERATOR_ORDER: Tuple[str, ...] = ('lerp', 'mutate', 'evolve')
DONOR_OPERATORS = frozenset({'lerp', 'evolve'})


class UpdateChain:
    """
    Ordered lerp/mutate/evolve operator chain.

    Attributes:
        operators: Enabled operators, in canonical order.
        copy_rate: Interpolation factor for lerp.
        mutate_rate: Per-parameter replacement probability.
        evolve_rate: Per-parameter crossover probability.

    Example:
        chain = UpdateChain(operators=('mutate', 'evolve'), evolve_rate=0.5)
        applied = chain.apply(network, champion_network, generator)
        # applied == ['mutate', 'evolve']
    """

    def __init__(
        self,
        operators: Iterable[str] = ('lerp', 'mutate'),
        copy_rate: float = 0.5,
        mutate_rate: float = 0.1,
        evolve_rate: float = 0.5,
    ):
        """
        Initialize the chain.

        Args:
            operators: Subset of 'lerp', 'mutate', 'evolve' (any order,
                       applied in canonical order).
            copy_rate: Lerp factor in [0, 1].
            mutate_rate: Mutation probability in [0, 1].
            evolve_rate: Crossover probability in [0, 1].

        Raises:
            ValueError: On unknown operators or rates outside [0, 1].
        """
        requested = set(operators)
        unknown = requested.difference(OPERATOR_ORDER)
        if unknown:
            raise ValueError(
                f"Unknown update operators: {sorted(unknown)}. "
                f"Choose from {list(OPERATOR_ORDER)}"
            )
        for name, rate in (('copy_rate', copy_rate), ('mutate_rate', mutate_rate),
                           ('evolve_rate', evolve_rate)):
            if not 0.0 <= rate <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {rate}")

        self.operators = tuple(op for op in OPERATOR_ORDER if op in requested)
        self.copy_rate = copy_rate
        self.mutate_rate = mutate_rate
        self.evolve_rate = evolve_rate

    def __repr__(self) -> str:
        return (
            f'UpdateChain(operators={self.operators}, copy_rate={self.copy_rate}, '
            f'mutate_rate={self.mutate_rate}, evolve_rate={self.evolve_rate})'
        )

    def apply(
        self,
        network: Network,
        donor: Optional[Network],
        generator: Optional[torch.Generator] = None,
    ) -> List[str]:
        """
        Run the chain on one network in place.

        Without a donor (no champion yet) only mutate can run.

        Args:
            network: Individual to update.
            donor: Champion network, read only. May be None.
            generator: Random source for mutate/evolve.

        Returns:
            Names of the operators that were applied.

        Raises:
            ShapeMismatch: If the donor's topology differs. Operators
                           already applied in this call stay applied.
        """
        applied = []

        for name in self.operators:
            if name in DONOR_OPERATORS and donor is None:
                continue

            if name == 'lerp':
                network.lerp_towards(donor, self.copy_rate)
            elif name == 'mutate':
                network.mutate(self.mutate_rate, generator=generator)
            elif name == 'evolve':
                network.evolve(donor, self.evolve_rate, generator=generator)

            applied.append(name)

        return applied
