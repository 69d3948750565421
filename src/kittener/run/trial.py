"""
NEAT Trial Module

This module defines the abstract base class for NEAT trials with built-in
support for CPU-based parallelization using joblib.

A trial represents one independent run of the NEAT algorithm, evolving a
population through generations until a solution is found or the maximum
number of generations is reached. It plays the part a game plays for the
population: it evaluates every genome, reports their fitness, and asks for
the next generation.
"""

from abc        import ABC, abstractmethod
from joblib     import Parallel, delayed
from statistics import mean

from kittener.run.config                  import Config
from kittener.genotype.genome             import Genome
from kittener.genotype.innovation_tracker import InnovationTracker
from kittener.pool.population             import Population

class Trial(ABC):
    """
    Abstract base class for implementing a NEAT trial.

    Subclasses must implement:
    - _evaluate_fitness(genome): Evaluate fitness for a single genome
    - _report_progress(): Display progress after each generation
    - _final_report(): Display final results

    Subclasses can override:
    - _reset(): Reset trial-specific state (call super()._reset())
    - _terminate(): Custom termination logic (default: max generations + fitness threshold)

    Public Attributes:
        failed: Whether the last run ended without reaching the fitness threshold

    Public Methods:
        run(): Execute a complete NEAT trial

    Parallelization of fitness evaluation for genomes:
        num_jobs=1:  Serial evaluation (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
        """
        self._config            : Config            = config
        self._generation_counter: int               = 0
        self._tracker           : InnovationTracker = None
        self._population        : Population        = None
        self._suppress_output   : bool              = suppress_output
        self.failed             : bool              = True

    def run(self, num_jobs: int = 1):
        """
        Run the trial.

        Resets the trial state and runs the evolutionary
        algorithm until the terminate condition is met.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation of genomes
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of processes
        """
        self._reset()

        # Create the initial population, sharing a fresh innovation tracker
        self._population = Population(self._config, self._tracker)

        self._evaluate_fitness_all(num_jobs)
        if not self._suppress_output:
            self._report_progress()

        # Evolution loop
        while not self._terminate():
            self._generation_counter += 1

            self._population.advance_generation()
            self._evaluate_fitness_all(num_jobs)

            if not self._suppress_output:
                self._report_progress()

        if not self._suppress_output:
            self._final_report()

    def _reset(self):
        """
        Reset the trial state before starting a new run.
        Subclasses that keep their own state should call super()._reset().
        """
        self._tracker = InnovationTracker(self._config)
        self._generation_counter = 0
        self.failed = True

    @abstractmethod
    def _evaluate_fitness(self, genome: Genome) -> float:
        """
        Evaluate and return the fitness of a genome.

        IMPORTANT: The fitness must be a positive number (or zero).

        Parameters:
            genome: The genome (neural network) to evaluate

        Returns:
            float: Fitness score for the genome
        """
        pass

    def _evaluate_fitness_all(self, num_jobs: int):
        """
        Evaluate the fitness of all genomes and assign it through the population.
        """
        genomes   = self._population.genomes
        serialize = num_jobs == 1

        if serialize:
            fitness_all = [self._evaluate_fitness(genome) for genome in genomes]
        else:
            fitness_all = Parallel(num_jobs)(delayed(self._evaluate_fitness)(g) for g in genomes)

        for index, fitness in enumerate(fitness_all):
            self._population.assign_fitness(index, fitness)

    @abstractmethod
    def _report_progress(self):
        """
        Report trial progress after each generation.
        """
        pass

    @abstractmethod
    def _final_report(self):
        """
        Produce final report at the end of the trial.
        """
        pass

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations and (optionally) also stops it if a given measure of
        population fitness has reached a given threshold.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        terminate = self._generation_counter >= self._config.max_number_generations

        if self._config.fitness_termination_check:
            genome_fitness = [genome.fitness for genome in self._population.genomes]

            if self._config.fitness_criterion == "max":
                overall_fitness = max(genome_fitness)
            else:
                overall_fitness = mean(genome_fitness)

            success   = overall_fitness >= self._config.fitness_threshold
            terminate = terminate or success

            if terminate:
                self.failed = not success

        return terminate
