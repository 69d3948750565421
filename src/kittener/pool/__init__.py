"""
NEAT Pool Package

This package contains classes for managing populations and species in the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Modules:
    species:    Species representation, fitness sharing and reproduction
    population: Top-level population management and evolution
    palette:    Display colors for species

Exported Classes:
    Species:        A cluster of genetically similar genomes
    Population:     Top-level evolutionary coordinator
    SpeciesPalette: Maps species IDs to well-separated colors
"""

from kittener.pool.species    import Species
from kittener.pool.population import Population
from kittener.pool.palette    import SpeciesPalette

__all__ = [
    'Species',
    'Population',
    'SpeciesPalette',
]
