"""
NEAT Population Module

This module implements the Population class, the top-level orchestrator for the NEAT
evolutionary algorithm. The population owns the genomes of the current generation,
the species they are divided into, and the innovation tracker of the run.

Classes:
    Population: Top-level evolutionary coordinator managing genomes and generations
"""

import math
import random

from joblib import Parallel, delayed
from loguru import logger

from kittener.run.config                  import Config
from kittener.genotype.genome             import Genome
from kittener.genotype.innovation_tracker import InnovationTracker
from kittener.pool.palette                import SpeciesPalette
from kittener.pool.species                import Species

def _distances_to(genome: Genome, representatives: list[Genome]) -> list[float]:
    return [representative.distance(genome) for representative in representatives]

def _feed_forward(genome: Genome, inputs) -> list[float]:
    return genome.feed_forward(inputs)

class Population:
    """
    A population of evolving genomes in the NEAT algorithm.

    The caller evaluates the genomes (through 'get_output' / 'get_outputs'),
    reports a fitness for each of them ('assign_fitness'), then asks for the next
    generation ('advance_generation'). The number of genomes is the same in
    every generation.

    A generational step:
      1. Speciate:          assign every genome to a species (or found a new one)
      2. Adapt threshold:   nudge the compatibility threshold towards a target species count
      3. Share fitness:     explicit fitness sharing and staleness, per species
      4. Remove stale:      drop species that have not improved for too long
      5. Average fitness:   sum of the species' average fitness, over the population size
      6. Cull:              keep the fittest fraction of every species
      7. Reproduce:         every species produces offspring in proportion to its fitness
      8. Resize:            trim or top up the offspring to the population size

    Public Attributes:
        genomes:                 The genomes of the current generation
        species:                 The species, in order of creation
        tracker:                 The innovation tracker of the run
        palette:                 Display colors of the species
        generation:              Number of generational steps taken so far
        avg_fitness:             Average population fitness of the last step
        compatibility_threshold: Current compatibility threshold

    Public Methods:
        assign_fitness(index, score): Set the fitness of a genome
        get_output(index, inputs):    Evaluate a genome
        get_outputs(inputs):          Evaluate every genome, each on its own input vector
        advance_generation():         Create the next generation
        current_generation():         Number of generational steps taken so far
        get_fittest_genome():         Genome with the highest fitness
        species_of(index):            ID of the species a genome belongs to
        color_of(index):              Display color of the species a genome belongs to
    """

    def __init__(self, config: Config, tracker: InnovationTracker | None = None):
        """
        Create a population of minimal genomes.

        Parameters:
            config:  Stores configuration parameters
            tracker: The innovation tracker of the run (a new one is created if None)
        """
        if config.population_size < 1:
            raise ValueError(f"Population size must be at least 1 (got {config.population_size})")

        self._config          = config
        self._next_species_id = 1

        self.tracker : InnovationTracker = tracker if tracker is not None else InnovationTracker(config)
        self.palette : SpeciesPalette    = SpeciesPalette()
        self.genomes : list[Genome]      = [Genome(config, self.tracker) for _ in range(config.population_size)]
        self.species : list[Species]     = []

        self.generation             : int   = 0
        self.avg_fitness            : float = 0.0
        self.compatibility_threshold: float = config.compatibility_threshold

    def __len__(self):
        return len(self.genomes)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.genomes):
            raise IndexError(f"Genome index {index} out of range [0, {len(self.genomes)})")

    def current_generation(self) -> int:
        return self.generation

    def assign_fitness(self, index: int, score: float) -> None:
        """
        Set the fitness of the genome at position 'index'.

        Raises:
            IndexError: if there is no genome at that position
            ValueError: if the score is negative or NaN (offspring quotas are
                        proportional to fitness)
        """
        self._check_index(index)
        score = float(score)
        if math.isnan(score) or score < 0:
            raise ValueError(f"Fitness must be a non-negative number (got {score})")
        self.genomes[index].fitness = score

    def get_output(self, index: int, inputs) -> list[float]:
        """
        Evaluate the genome at position 'index' on one input vector.

        Raises:
            IndexError: if there is no genome at that position
            ValueError: if the number of inputs is wrong
        """
        self._check_index(index)
        return self.genomes[index].feed_forward(inputs)

    def get_outputs(self, inputs) -> list[list[float]]:
        """
        Evaluate every genome on its own input vector: genome i gets 'inputs[i]'.

        The evaluations are spread over 'num_jobs' processes when that is not 1.
        Work done in other processes does not touch the genomes held here, which
        is fine because a forward pass leaves no state behind.
        """
        if len(inputs) != len(self.genomes):
            raise ValueError(f"Expected {len(self.genomes)} input vectors, got {len(inputs)}")

        if self._config.num_jobs == 1:
            return [genome.feed_forward(x) for genome, x in zip(self.genomes, inputs)]
        return Parallel(self._config.num_jobs)(delayed(_feed_forward)(genome, x)
                                               for genome, x in zip(self.genomes, inputs))

    def get_fittest_genome(self) -> Genome:
        """
        Return the genome with the highest fitness (the first one, on ties).
        """
        return max(self.genomes, key=lambda genome: genome.fitness)

    def _find_species(self, genome: Genome, candidates: list[tuple[Species, float]]) -> Species | None:
        """
        Pick a species for a genome among (species, distance) pairs, given in species order.
        """
        compatible = [(spec, dist) for spec, dist in candidates if dist <= self.compatibility_threshold]
        if not compatible:
            return None
        if self._config.speciation_policy == 'best-match':
            return min(compatible, key=lambda pair: pair[1])[0]
        return compatible[0][0]

    def species_of(self, index: int) -> int | None:
        """
        Return the ID of the species a genome belongs to, or None if it is compatible
        with no species (before the first generational step, or a genome too novel).
        """
        self._check_index(index)
        genome = self.genomes[index]
        for spec in self.species:
            if any(member is genome for member in spec.members):
                return spec.id
        spec = self._find_species(genome, [(s, s.distance_to(genome)) for s in self.species])
        return spec.id if spec is not None else None

    def color_of(self, index: int) -> tuple[float, float, float] | None:
        species_id = self.species_of(index)
        return None if species_id is None else self.palette.color_of(species_id)

    # ------------------------------------------------------------------
    # Generational step
    # ------------------------------------------------------------------

    def advance_generation(self) -> None:
        """
        Create the next generation through speciation, selection and reproduction.
        Assumes that every genome has been assigned its fitness.
        """
        raw_fitness = [genome.fitness for genome in self.genomes]
        fittest     = self.get_fittest_genome()

        self._speciate()
        self._adapt_compatibility_threshold()

        for spec in self.species:
            spec.share_fitness()
            spec.update_staleness()
            logger.debug("[Population] species {:3d} -> members: {:3d}  fitness: {:10.4f}  staleness: {:2d}",
                         spec.id, len(spec.members), spec.avg_fitness, spec.staleness)

        self._remove_stale_species(fittest)

        self.avg_fitness = sum(spec.avg_fitness for spec in self.species) / self._config.population_size

        for spec in self.species:
            spec.cull()

        offspring = self._reproduce(raw_fitness)
        if not offspring:
            logger.warning("[Population] no offspring in generation {}; restarting from the fittest genome",
                           self.generation)
            elite = fittest.clone()
            elite.fitness = 0.0
            offspring = [elite]

        self.genomes = self._resize(offspring)
        self.generation += 1

        logger.info("[Population] generation {} -> species: {}  avg fitness: {:.4f}  threshold: {:.3f}  "
                    "innovations: {}", self.generation, len(self.species), self.avg_fitness,
                    self.compatibility_threshold, self.tracker.num_innovations)

    def _speciate(self) -> None:
        """
        Assign every genome to a species.

        The distances between each genome and the representatives of the existing
        species are computed first (in parallel when 'num_jobs' is not 1). The
        genomes are then assigned in population order, so the outcome does not
        depend on how the distances were computed. A genome that fits no species
        founds a new one, which later genomes can then join.
        """
        for spec in self.species:
            spec.members.clear()

        existing        = list(self.species)
        representatives = [spec.representative for spec in existing]
        if not existing:
            distance_table = [[] for _ in self.genomes]
        elif self._config.num_jobs == 1:
            distance_table = [_distances_to(genome, representatives) for genome in self.genomes]
        else:
            distance_table = Parallel(self._config.num_jobs)(delayed(_distances_to)(genome, representatives)
                                                             for genome in self.genomes)

        new_species: list[Species] = []
        for genome, distances in zip(self.genomes, distance_table):
            candidates  = list(zip(existing, distances))
            candidates += [(spec, spec.distance_to(genome)) for spec in new_species]

            spec = self._find_species(genome, candidates)
            if spec is not None:
                spec.add_member(genome)
            else:
                spec = Species(self._next_species_id, genome, self._config)
                self._next_species_id += 1
                new_species.append(spec)

        self.species.extend(new_species)

    def _adapt_compatibility_threshold(self) -> None:
        """
        Move the compatibility threshold one step towards the target number of (non-empty) species.
        """
        if not self._config.adaptive_threshold:
            return

        num_species = sum(1 for spec in self.species if not spec.is_empty)
        if num_species < self._config.target_species_count:
            self.compatibility_threshold -= self._config.compatibility_threshold_step
        elif num_species > self._config.target_species_count:
            self.compatibility_threshold += self._config.compatibility_threshold_step
        self.compatibility_threshold = max(self.compatibility_threshold,
                                           self._config.min_compatibility_threshold)

    def _remove_stale_species(self, fittest: Genome) -> None:
        """
        Remove the species whose staleness reached 'staleness_threshold'.

        The species holding the fittest genome is spared when 'protect_fittest_species'
        is set. If every species is stale, 'stale_fallback' decides between keeping
        the species with the highest average fitness and removing them all.
        """
        protected = None
        if self._config.protect_fittest_species:
            protected = next((spec for spec in self.species
                              if any(member is fittest for member in spec.members)), None)

        survivors = [spec for spec in self.species
                     if spec is protected or spec.staleness < self._config.staleness_threshold]

        if not survivors and self.species:
            if self._config.stale_fallback == 'keep-best':
                best = max(self.species, key=lambda spec: spec.avg_fitness)
                logger.warning("[Population] every species is stale; keeping species {}", best.id)
                survivors = [best]
            else:
                logger.warning("[Population] every species is stale; culling the whole population")

        for spec in self.species:
            if spec not in survivors:
                self.palette.release(spec.id)
        self.species = survivors

    def _reproduce(self, raw_fitness: list[float]) -> list[Genome]:
        """
        Produce the offspring of every species.

        A species gets round(species average fitness / population average fitness)
        offspring. When the population average fitness is 0, every non-empty species
        gets an equal share. With no species left, the fittest fraction of the whole
        population is carried over instead.
        """
        if not self.species:
            order = sorted(range(len(self.genomes)), key=lambda i: raw_fitness[i], reverse=True)
            num_survivors = math.ceil(len(order) * self._config.cull_fraction)
            survivors = [self.genomes[i] for i in order[:num_survivors]]
            for genome in survivors:
                genome.fitness = 0.0
            return survivors

        non_empty = [spec for spec in self.species if not spec.is_empty]
        offspring = []
        for spec in non_empty:
            if self.avg_fitness == 0:
                num_offspring = self._config.population_size // len(non_empty)
            else:
                num_offspring = math.floor(spec.avg_fitness / self.avg_fitness + 0.5)
            offspring.extend(spec.reproduce(num_offspring, self.tracker))
        return offspring

    def _resize(self, offspring: list[Genome]) -> list[Genome]:
        """
        Drop random genomes while there are too many; add mutated
        clones of random genomes while there are too few.
        """
        while len(offspring) > self._config.population_size:
            offspring.pop(random.randrange(len(offspring)))

        batch_size = len(offspring)
        while len(offspring) < self._config.population_size:
            clone = offspring[random.randrange(batch_size)].clone()
            clone.mutate(self.tracker)
            clone.fitness = 0.0
            offspring.append(clone)

        return offspring

    def __str__(self):
        return '\n'.join(str(genome) for genome in self.genomes)
