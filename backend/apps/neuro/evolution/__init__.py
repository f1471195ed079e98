"""
Generational evolution of controller networks.

This module provides:
- Population: fixed arena of networks with a persistent champion
- Fitness records, stable ranking and the champion acceptance policy
- The per-individual lerp/mutate/evolve update chain

Example usage:
    from apps.neuro.evolution import Population, ChampionPolicy, UpdateChain

    pop = Population(size=64, topology=(6, 24, 3), seed=1)
    pop.randomize()
    pop.clear_records()
    for individual_id in pop.ids:
        pop.record_score(individual_id, evaluate(pop[individual_id]))

    winner = pop.ranked()[0]
    ChampionPolicy().update(pop.champion, winner)
"""
from .operators import OPERATOR_ORDER, UpdateChain
from .population import Population
from .selection import (
    Champion,
    ChampionPolicy,
    FitnessRecord,
    rank,
    sanitize_score,
)

__all__ = [
    # Population management
    'Population',

    # Selection
    'Champion',
    'ChampionPolicy',
    'FitnessRecord',
    'rank',
    'sanitize_score',

    # Update operators
    'OPERATOR_ORDER',
    'UpdateChain',
]
