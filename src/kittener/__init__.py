"""
kittener - a NEAT (NeuroEvolution of Augmenting Topologies) engine for evolving game agents.

Genomes start minimal (every input and a bias node connected to every output)
and grow hidden layers over generations. They are grouped into species to
protect new structure, and reproduce through fitness-weighted crossover and
mutation.

Main components:
- genotype:    Genomes, genes, innovation tracking; genomes are directly executable
- pool:        Population, species and species colors
- run:         Configuration and the trial driver
- activations: Activation functions for neural networks

Example:
    >>> from kittener import Config, Population
    >>> config = Config("config.ini")
    >>> population = Population(config)
    >>> outputs = population.get_output(0, [0.0] * config.num_inputs)
    >>> population.assign_fitness(0, 12.5)
    >>> population.advance_generation()
"""

__version__ = "0.1.0"

from kittener.run.config                  import Config
from kittener.run.trial                   import Trial
from kittener.genotype.genome             import Genome
from kittener.genotype.node_gene          import NodeGene, NodeType
from kittener.genotype.connection_gene    import ConnectionGene
from kittener.genotype.innovation_tracker import InnovationTracker
from kittener.pool.species                import Species
from kittener.pool.population             import Population
from kittener.pool.palette                import SpeciesPalette

__all__ = [
    "Config",
    "Trial",
    "Genome",
    "NodeGene",
    "NodeType",
    "ConnectionGene",
    "InnovationTracker",
    "Species",
    "Population",
    "SpeciesPalette",
]
