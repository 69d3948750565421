"""
NEAT Connection Gene Module

This module implements the ConnectionGene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    ConnectionGene: Gene encoding a weighted link between two nodes
"""

import numpy as np
import random
from kittener.run.config import Config

class ConnectionGene:
    """
    A gene describing a weighted link between two nodes in a Neural Network.

    Each connection gene represents a directed edge in the network graph, from a
    source node in a lower layer to a destination node in a higher layer. Both
    ends are stored as node IDs (indices into the genome's node table), so a
    connection gene is plain data and copying a genome never has to rewire
    object references.

    Connection genes are uniquely identified by their innovation number, which
    serves as a historical marker enabling gene alignment during crossover and
    when measuring the compatibility distance between genomes.

    Links can be enabled or disabled. A disabled link is kept in the genome (it
    still counts as a connection between its two nodes) but carries no signal.

    Public Attributes:
        node_in:    ID of the source node
        node_out:   ID of the destination node
        weight:     Weight of the link
        enabled:    Whether this link is active in the network
        innovation: Run-wide innovation number uniquely identifying this link

    Public Methods:
        mutate(): Stochastically mutate the link weight
    """

    def __init__(self,
                 node_in   : int,
                 node_out  : int,
                 weight    : float,
                 innovation: int,
                 config    : Config,
                 enabled   : bool = True):
        """
        Initialize a connection gene.

        Parameters:
            node_in:    ID of the source node
            node_out:   ID of the destination node
            weight:     Weight of the link
            innovation: Number uniquely identifying this link across the run
            config:     Stores configuration parameters
            enabled:    Whether this link is active in the network
        """
        self.node_in   : int    = node_in
        self.node_out  : int    = node_out
        self.weight    : float  = weight
        self.enabled   : bool   = enabled
        self.innovation: int    = innovation
        self._config   : Config = config

    def mutate(self) -> None:
        """
        Stochastically mutate the (gene describing the) link.

        With probability 'weight_mutate_prob' the weight is mutated, in one of two ways:
         + with probability 'weight_replace_prob' it is replaced by a new uniform value
         + otherwise it is perturbed by a small Gaussian amount, then clamped
        """
        if random.random() >= self._config.weight_mutate_prob:
            return

        if random.random() < self._config.weight_replace_prob:
            self.weight = random.uniform(self._config.min_weight, self._config.max_weight)
        else:
            chg_weight  = random.gauss(0, self._config.weight_perturb_strength)
            new_weight  = self.weight + chg_weight
            self.weight = float(np.clip(new_weight, self._config.min_weight, self._config.max_weight))

    def __repr__(self):
        return (f"ConnectionGene(node_in={self.node_in:03d}, node_out={self.node_out:03d},"
                f"weight={self.weight:+.6f}, enabled={self.enabled}, innovation={self.innovation:03d})")

    def __str__(self):
        s  = f"[{self.innovation:03d},{'E' if self.enabled else 'D'},"
        s += f"{self.node_in:02d}=>{self.node_out:02d},{self.weight:+.02f}]"
        return s
