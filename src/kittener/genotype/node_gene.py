"""
NEAT Node Gene Module.

This module implements the NodeGene class and NodeType enumeration
for the NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    NodeType: Enumeration for node types (INPUT, BIAS, HIDDEN, OUTPUT)
    NodeGene: Gene encoding a single network node and its activation state
"""

from enum   import Enum
from typing import Callable

from kittener.activations import activations, activation_codes
from kittener.run.config  import Config

# Reserved ID of the bias node, in every genome
BIAS_NODE_ID = -1

class NodeType(Enum):
    """
    Nodes come in four types: input, bias, hidden, output.
    """
    INPUT  = "I"
    BIAS   = "B"
    HIDDEN = "H"
    OUTPUT = "O"

class NodeGene:
    """
    A gene describing a node in a Neural Network.

    Besides its identity, a node gene records the layer the node lives in and
    the instantaneous state used during a forward pass. Layer 0 holds the input
    nodes and the bias node; layers increase towards the output nodes, which
    always sit on the last layer. A node's layer never decreases.

    Input and bias nodes pass a value through unchanged. Hidden and output
    nodes compute their output as: activation(input_sum)

    Public Attributes:
        id:        Identifier of this node, unique within its genome
        type:      Type of node (INPUT, BIAS, HIDDEN, or OUTPUT)
        layer:     Layer this node lives in
        input_sum: Accumulated weighted input for the current forward pass
        output:    Output computed during the last activation
        outgoing:  Innovation numbers of the links leaving this node, in insertion order

    Public Methods:
        activate(): Compute the node's output from its accumulated input
        reset(value): Reset the accumulated input ahead of the next forward pass
    """

    def __init__(self,
                 node_id   : int,
                 node_type : NodeType,
                 layer     : int,
                 config    : Config,
                 input_sum : float = 0.0):
        """
        Initialize a node gene.

        Parameters:
            node_id:   Identifier for this node
            node_type: Type of node (INPUT, BIAS, HIDDEN, or OUTPUT)
            layer:     Layer this node lives in (0 for inputs and bias)
            config:    Stores configuration parameters
            input_sum: Initial value of the accumulated input
        """
        self._config  : Config    = config
        self.id       : int       = node_id
        self.type     : NodeType  = node_type
        self.layer    : int       = layer
        self.input_sum: float     = input_sum
        self.output   : float     = config.bias_value if node_type == NodeType.BIAS else 0.0
        self.outgoing : list[int] = []

    @property
    def is_layer_zero(self) -> bool:
        """Whether the node passes its value through without activation."""
        return self.type in (NodeType.INPUT, NodeType.BIAS)

    @property
    def activation(self) -> Callable[[float], float] | None:
        if self.is_layer_zero:
            return None
        return activations[self._config.activation]

    def activate(self) -> float:
        """
        Compute the output of the node.
        Input and bias nodes keep the output that was assigned to them.
        """
        if not self.is_layer_zero:
            self.output = self.activation(self.input_sum)
        return self.output

    def reset(self, value: float) -> None:
        self.input_sum = value

    def __repr__(self):
        return (f"NodeGene(node_id={self.id:+03d}, node_type=NodeType.{self.type.name:6s},"
                f"layer={self.layer}, outgoing={self.outgoing})")

    def __str__(self):
        if self.is_layer_zero:
            return f"[{self.type.value}{self.id},L{self.layer}]"
        act_code = activation_codes.get(self._config.activation, "???")
        return f"[{self.type.value}{self.id},L{self.layer},{act_code}]"
