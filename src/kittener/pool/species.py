"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Classes:
    Species: Represents a single species with members and fitness tracking
"""

import math
import random

from kittener.run.config                  import Config
from kittener.genotype.genome             import Genome
from kittener.genotype.innovation_tracker import InnovationTracker

class Species:
    """
    A species representing a cluster of genetically similar genomes in NEAT.

    In NEAT, the population is divided into species based on genetic similarity,
    allowing different evolutionary niches to develop independently. This protects
    innovative structures from being eliminated by competition with more mature
    solutions, as genomes only compete for offspring within their own species.

    Each species keeps a representative genome used for distance calculations
    during speciation. The representative is a clone of the genome that founded
    the species and stays fixed for the species' whole life; it is never mutated
    and never evaluated. Membership is rebuilt from scratch every generation, so
    a species may be left without members and still exist (it then grows stale
    until it is removed).

    Public Attributes:
        id:               Unique species identifier
        representative:   Genome used for distance calculations during speciation
        members:          The genomes that are part of this species, in assignment order
        avg_fitness:      Average shared fitness of the members, this generation
        best_avg_fitness: Best average fitness ever achieved by this species
        staleness:        Number of generations (roughly) since the species last improved
        fitness_history:  List of average fitness values over generations

    Public Methods:
        distance_to(genome):             Calculate genetic distance to a genome
        share_fitness():                 Apply explicit fitness sharing to the members
        update_staleness():              Track improvement of the average fitness
        cull():                          Keep only the fittest members
        reproduce(num_offspring, tracker): Generate offspring for the next generation

    Life Cycle:
    1. Created when a genome doesn't fit into any existing species
    2. Accumulates members during speciation based on genetic similarity
    3. Shares fitness among its members and tracks its staleness
    4. Is culled, then reproduces in proportion to its average fitness
    5. Removed once it has been stale for too long
    """

    def __init__(self, species_id: int, founder: Genome, config: Config):
        """
        Initialize a new species.

        Parameters:
            species_id: unique species identifier
            founder:    the genome that did not fit into any existing species;
                        it becomes the first member and a clone of it the representative
            config:     stores configuration parameters
        """
        self._config: Config = config

        self.id            : int          = species_id
        self.representative: Genome       = founder.clone()
        self.members       : list[Genome] = [founder]

        self.avg_fitness     : float       = 0.0
        self.best_avg_fitness: float       = 0.0
        self.staleness       : int         = 0
        self.fitness_history : list[float] = []

    @property
    def is_empty(self) -> bool:
        return not self.members

    @property
    def best_member(self) -> Genome | None:
        if not self.members:
            return None
        return max(self.members, key=lambda genome: genome.fitness)

    def add_member(self, genome: Genome) -> None:
        self.members.append(genome)

    def distance_to(self, genome: Genome) -> float:
        """
        Calculate the genetic distance between this species and a given genome.
        Uses the species representative genome for comparison.
        """
        return self.representative.distance(genome)

    def share_fitness(self) -> None:
        """
        Explicit fitness sharing: divide the fitness of each member by the number
        of members, then record the average of the shared values.
        An empty species has an average fitness of 0.
        """
        if not self.members:
            self.avg_fitness = 0.0
        else:
            size = len(self.members)
            for genome in self.members:
                genome.fitness = genome.fitness / size
            self.avg_fitness = sum(genome.fitness for genome in self.members) / size
        self.fitness_history.append(self.avg_fitness)

    def update_staleness(self) -> None:
        """
        A species that improved on its best average fitness is fresh again.
        Otherwise it grows one generation staler (two, when it has no members
        and 'empty_species_double_staleness' is set).
        """
        if self.avg_fitness > self.best_avg_fitness:
            self.best_avg_fitness = self.avg_fitness
            self.staleness        = 0
        elif self.is_empty and self._config.empty_species_double_staleness:
            self.staleness += 2
        else:
            self.staleness += 1

    def cull(self) -> None:
        """
        Sort the members by fitness (highest first) and keep only the top 'cull_fraction' of them.
        """
        self.members.sort(key=lambda genome: genome.fitness, reverse=True)
        num_survivors = math.ceil(len(self.members) * self._config.cull_fraction)
        del self.members[num_survivors:]

    def reproduce(self, num_offspring: int, tracker: InnovationTracker) -> list[Genome]:
        """
        Generate offspring for the next generation.

        The first offspring is an unmutated clone of the best member (elitism).
        Each further offspring is, with probability 'crossover_probability', the
        crossover of two members chosen uniformly at random (with replacement),
        otherwise a clone of one random member; it is then mutated.

        Parameters:
            num_offspring: Number of genomes this species should produce
            tracker:       Run-wide registry of innovation numbers

        Returns:
            List of exactly 'num_offspring' genomes (empty if the species has no members),
            all with fitness reset to 0
        """
        # Trivial case
        if num_offspring <= 0 or not self.members:
            return []

        elite = self.best_member.clone()
        elite.fitness = 0.0
        offspring = [elite]

        while len(offspring) < num_offspring:
            if random.random() < self._config.crossover_probability:
                parent1 = random.choice(self.members)
                parent2 = random.choice(self.members)
                child = parent1.crossover(parent2)
            else:
                child = random.choice(self.members).clone()
            child.mutate(tracker)
            child.fitness = 0.0
            offspring.append(child)

        return offspring

    def __repr__(self):
        return (f"Species(id={self.id}, members={len(self.members)}, "
                f"avg_fitness={self.avg_fitness:.4f}, staleness={self.staleness})")
