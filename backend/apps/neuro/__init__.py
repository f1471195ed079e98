"""
Neuroevolution of small feedforward controllers.

A population of fixed-topology networks is evaluated against an
environment every generation, ranked by a distance-like score and
pulled towards the best performer through interpolation, random
mutation and partial crossover.
"""
