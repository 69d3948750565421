"""
XOR Problem Implementation for NEAT

XOR is a two-input, one-output boolean function where the output is 1 only
when the inputs differ. It cannot be solved without a hidden node, which
makes it the smallest test of a topology-evolving algorithm.

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²

Usage:
    python trial_XOR.py [config_xor.ini]
"""

import sys
from pathlib import Path

from loguru import logger

from kittener.genotype import Genome
from kittener.run      import Config, Trial

class Trial_XOR(Trial):
    """
    NEAT trial for solving the XOR (exclusive OR) problem.

    Implemented Methods:
        _evaluate_fitness(genome): Test network on all 4 XOR cases
        _report_progress():        Log generation statistics and the XOR truth table
        _final_report():           Log the evolved network
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        super().__init__(config, suppress_output)
        self.xor_inputs  = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
        self.xor_outputs = [0.0, 1.0, 1.0, 0.0]

    def _evaluate_fitness(self, genome: Genome) -> float:
        fitness = 4.0  # max possible fitness
        for inputs, expected_output in zip(self.xor_inputs, self.xor_outputs):
            output   = genome.feed_forward(inputs)[0]
            fitness -= (output - expected_output) ** 2
        return fitness

    def _report_progress(self):
        fittest = self._population.get_fittest_genome()

        s  = f"GENERATION {self._generation_counter:04d}  "
        s += f"species = {len(self._population.species)}  "
        s += f"hidden nodes = {len(fittest.hidden_nodes)}  "
        s += f"maximum fitness = {fittest.fitness:.4f}"
        logger.info(s)

        for inputs, target in zip(self.xor_inputs, self.xor_outputs):
            output = fittest.feed_forward(inputs)[0]
            logger.debug("{} -> {:.4f}    {}   {:.4f}", inputs, output, target, abs(output - target))

    def _final_report(self):
        fittest = self._population.get_fittest_genome()
        outcome = "FAILED" if self.failed else "SUCCESS"
        logger.info("[{}] after {} generations\n{}", outcome, self._generation_counter, fittest)

if __name__ == '__main__':
    config_file = sys.argv[1] if len(sys.argv) > 1 else Path(__file__).parent / 'config_xor.ini'
    trial = Trial_XOR(Config(str(config_file)))
    trial.run(num_jobs=1)
