"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm. A genome is both the genetic encoding of a layered
feed-forward network and the network itself: it can be evaluated directly.

The NEAT genotype consists of two types of genes:
- Node genes:       Encode individual neurons, the layer they live in and their activation state
- Connection genes: Encode weighted links between neurons, with innovation numbers

Modules:
    node_gene:          NodeType enumeration and NodeGene class
    connection_gene:    ConnectionGene class
    genome:             Genome class
    innovation_tracker: InnovationTracker class

Exported Classes:
    NodeType:          Enumeration for node types (INPUT, BIAS, HIDDEN, OUTPUT)
    NodeGene:          Gene encoding a single network node
    ConnectionGene:    Gene encoding a weighted link between nodes
    Genome:            Complete genome representing a neural network
    InnovationTracker: Run-wide tracker for innovation numbers and node IDs
"""

from kittener.genotype.connection_gene    import ConnectionGene
from kittener.genotype.genome             import Genome
from kittener.genotype.innovation_tracker import InnovationTracker
from kittener.genotype.node_gene          import BIAS_NODE_ID, NodeType, NodeGene

__all__ = ['BIAS_NODE_ID',
           'ConnectionGene',
           'Genome',
           'InnovationTracker',
           'NodeGene',
           'NodeType']
