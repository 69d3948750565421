"""
NEAT Genome Module

This module implements the Genome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Genome: Complete genome representing a layered feed-forward neural network
"""

import copy
import math
import random
from collections import Counter, deque

from kittener.run.config                  import Config
from kittener.genotype.connection_gene    import ConnectionGene
from kittener.genotype.innovation_tracker import InnovationTracker
from kittener.genotype.node_gene          import BIAS_NODE_ID, NodeType, NodeGene

class Genome:
    """
    A NEAT genome representing a neural network as a collection of node and connection genes.

    The genome encodes both the structure and the parameters of a layered
    feed-forward network, and is also directly executable: nodes hold their
    activation state and are activated one layer at a time.
    - Node genes: input, bias, hidden and output nodes, each assigned to a layer
    - Connection genes: weighted links between nodes, each with a run-wide
      innovation number used to align genes during crossover and speciation

    A new genome is minimal: every input node and the bias node (layer 0) is
    linked to every output node (layer 1). Mutations grow it by adding links and
    by splitting links with new hidden nodes. Links always go from a lower layer
    to a strictly higher one, so the network is a DAG by construction.

    Node numbering convention:
        - Bias node:    -1
        - Input nodes:  [0, num_inputs)
        - Output nodes: [num_inputs, num_inputs + num_outputs)
        - Hidden nodes: [num_inputs + num_outputs, ...), allocated by the InnovationTracker

    Attributes:
        node_genes: Dictionary mapping node IDs to NodeGene objects (insertion ordered)
        conn_genes: Dictionary mapping innovation numbers to ConnectionGene objects (insertion ordered)
        num_layers: Index of the last layer (the output layer)
        fitness:    Fitness assigned to this genome for the current generation

    Public Properties:
        input_nodes:  List of all input node genes
        output_nodes: List of all output node genes
        hidden_nodes: List of all hidden node genes
        bias_node:    The bias node gene

    Public Methods:
        feed_forward(inputs):              Evaluate the network
        mutate(tracker):                   Apply all possible mutation operations stochastically
        crossover(other):                  Create offspring by crossing this genome with another
        distance(other):                   Compatibility distance to another genome
        is_fully_connected():              Whether no further link can be added
        clone():                           Independent copy of this genome
    """

    def __init__(self, config: Config, tracker: InnovationTracker):
        """
        Initialize a minimal Genome.

        A minimal genome has one input node per network input and a bias node
        on layer 0, one output node per network output on layer 1, and links
        from every layer-0 node to every output node.

        Parameters:
            config:  Stores configuration parameters
            tracker: Run-wide registry of innovation numbers
        """
        if config.num_inputs < 1 or config.num_outputs < 1:
            raise ValueError(f"A genome needs at least one input and one output "
                             f"(got {config.num_inputs} inputs, {config.num_outputs} outputs)")

        self._config = config

        self.node_genes: dict[int, NodeGene]       = {}  # node ID => node gene
        self.conn_genes: dict[int, ConnectionGene] = {}  # innovation number => connection gene
        self.num_layers: int   = 1
        self.fitness   : float = 0.0

        reset_value = config.input_reset_value

        # Input nodes are numbered: [0, NUMBER INPUT NODES)
        for node_id in range(config.num_inputs):
            self.node_genes[node_id] = NodeGene(node_id, NodeType.INPUT, 0, config, reset_value)

        # The bias node follows the input nodes so that it activates after them
        self.node_genes[BIAS_NODE_ID] = NodeGene(BIAS_NODE_ID, NodeType.BIAS, 0, config, reset_value)

        # Output nodes are numbered: [NUMBER INPUT NODES, NUMBER INPUT NODES + NUMBER OUTPUT NODES)
        for i in range(config.num_outputs):
            node_id = config.num_inputs + i
            self.node_genes[node_id] = NodeGene(node_id, NodeType.OUTPUT, 1, config, reset_value)

        # Fully connect layer 0 to the output layer
        for source in [node for node in self.node_genes.values() if node.layer == 0]:
            for target in self.output_nodes:
                if source.type == NodeType.BIAS and config.bias_link_policy == 'fixed':
                    weight = config.bias_link_weight
                else:
                    weight = self._random_weight()
                self._add_connection(source.id, target.id, weight, tracker)

    @property
    def num_inputs(self) -> int:
        return self._config.num_inputs

    @property
    def num_outputs(self) -> int:
        return self._config.num_outputs

    @property
    def input_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes.values() if node.type == NodeType.INPUT]

    @property
    def output_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes.values() if node.type == NodeType.OUTPUT]

    @property
    def hidden_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes.values() if node.type == NodeType.HIDDEN]

    @property
    def bias_node(self) -> NodeGene:
        return self.node_genes[BIAS_NODE_ID]

    @property
    def enabled_connections(self) -> list[ConnectionGene]:
        return [conn for conn in self.conn_genes.values() if conn.enabled]

    def clone(self) -> 'Genome':
        """
        Create an independent copy of this genome (structure, weights and fitness).
        The configuration object is shared, not copied.
        """
        twin = Genome.__new__(Genome)
        twin._config    = self._config
        twin.num_layers = self.num_layers
        twin.fitness    = self.fitness
        twin.node_genes = {}
        twin.conn_genes = {nid: copy.copy(conn) for nid, conn in self.conn_genes.items()}
        for node_id, node in self.node_genes.items():
            node_copy = copy.copy(node)
            node_copy.outgoing = list(node.outgoing)
            twin.node_genes[node_id] = node_copy
        return twin

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def feed_forward(self, inputs) -> list[float]:
        """
        Evaluate the network on one input vector.

        Input values are assigned to the input nodes, then nodes are activated in
        increasing layer order; each activated node pushes 'weight * output' to the
        targets of its enabled outgoing links. Once the outputs have been read,
        every node's accumulated input is reset for the next pass.

        Parameters:
            inputs: sequence of 'num_inputs' real values

        Returns:
            the output values, one per output node, in construction order

        Raises:
            ValueError: if the number of inputs does not match the number of input nodes
        """
        if len(inputs) != self.num_inputs:
            raise ValueError(f"Expected {self.num_inputs} inputs, got {len(inputs)}")

        for node_id, value in enumerate(inputs):
            self.node_genes[node_id].output = float(value)
        self.bias_node.output = self._config.bias_value

        # A stable sort keeps insertion order within a layer (inputs, then bias, ...)
        for node in sorted(self.node_genes.values(), key=lambda n: n.layer):
            output = node.activate()
            for innovation in node.outgoing:
                conn = self.conn_genes[innovation]
                if conn.enabled:
                    self.node_genes[conn.node_out].input_sum += conn.weight * output

        outputs = [node.output for node in self.output_nodes]

        for node in self.node_genes.values():
            node.reset(self._config.input_reset_value)

        return outputs

    # ------------------------------------------------------------------
    # Structure queries
    # ------------------------------------------------------------------

    def is_fully_connected(self) -> bool:
        """
        Check whether every pair of nodes on different layers is already linked.

        The maximum number of links is the sum, over all pairs of layers i < j,
        of (number of nodes on layer i) * (number of nodes on layer j).
        """
        layer_sizes = Counter(node.layer for node in self.node_genes.values())
        max_links = 0
        nodes_below = 0
        for layer in sorted(layer_sizes):
            max_links   += nodes_below * layer_sizes[layer]
            nodes_below += layer_sizes[layer]
        return max_links == len(self.conn_genes)

    def are_connected(self, node_id1: int, node_id2: int) -> bool:
        """
        Whether a link (enabled or disabled) exists between two nodes, in either direction.
        """
        node1 = self.node_genes[node_id1]
        node2 = self.node_genes[node_id2]
        if any(self.conn_genes[i].node_out == node_id2 for i in node1.outgoing):
            return True
        return any(self.conn_genes[i].node_out == node_id1 for i in node2.outgoing)

    def _is_bad_link(self, node1: NodeGene, node2: NodeGene) -> bool:
        return node1.layer == node2.layer or self.are_connected(node1.id, node2.id)

    def _find_connection(self, node_in: int, node_out: int) -> ConnectionGene | None:
        for innovation in self.node_genes[node_in].outgoing:
            conn = self.conn_genes[innovation]
            if conn.node_out == node_out:
                return conn
        return None

    # ------------------------------------------------------------------
    # Low-level structure edits
    # ------------------------------------------------------------------

    def _random_weight(self) -> float:
        return random.uniform(self._config.min_weight, self._config.max_weight)

    def _add_connection(self,
                        node_in : int,
                        node_out: int,
                        weight  : float,
                        tracker : InnovationTracker,
                        enabled : bool = True) -> ConnectionGene:
        """
        Create a new link, taking its innovation number from the tracker.

        Raises:
            ValueError: if the link would break the genome's structural invariants
        """
        innovation = tracker.get_innovation_number(node_in, node_out)
        conn = ConnectionGene(node_in, node_out, weight, innovation, self._config, enabled)
        self._attach_connection(conn)
        return conn

    def _attach_connection(self, conn: ConnectionGene, check_layers: bool = True) -> None:
        """
        Insert a link into the genome after validating it.

        Parameters:
            conn:         the link to insert
            check_layers: whether to require source layer < target layer
                          (only crossover, which relayers the genome afterwards, skips it)

        Raises:
            ValueError: for links to missing nodes, self links, backward or same-layer
                        links, and links duplicating an existing connection
        """
        if conn.node_in not in self.node_genes or conn.node_out not in self.node_genes:
            raise ValueError(f"Link {conn.node_in}->{conn.node_out} references a node missing from the genome")
        if conn.node_in == conn.node_out:
            raise ValueError(f"Cannot link node {conn.node_in} to itself")

        source = self.node_genes[conn.node_in]
        target = self.node_genes[conn.node_out]
        if check_layers and source.layer >= target.layer:
            raise ValueError(f"Link {source.id}->{target.id} does not go from a lower to a higher layer "
                             f"(layers {source.layer} and {target.layer})")
        if conn.innovation in self.conn_genes or self.are_connected(source.id, target.id):
            raise ValueError(f"Nodes {source.id} and {target.id} are already connected")

        self.conn_genes[conn.innovation] = conn
        source.outgoing.append(conn.innovation)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def mutate(self, tracker: InnovationTracker) -> None:
        """
        Apply to the current genome all possible mutation operations.

        The list of possible mutations is:
          + mutate link weights (link by link)
          + re-enable the first disabled link
          + add a link
          + add a node
        Each mutation is decided by its own, independent, random draw.

        Parameters:
            tracker: Run-wide registry of innovation numbers
        """
        for conn in self.conn_genes.values():
            conn.mutate()

        if random.random() < self._config.connection_toggle_probability:
            self._mutate_toggle_connection()

        if random.random() < self._config.connection_add_probability:
            self._mutate_add_connection(tracker)

        if random.random() < self._config.node_add_probability:
            self._mutate_add_node(tracker)

    def _mutate_toggle_connection(self) -> None:
        """
        Re-enable the first disabled link (in insertion order), if any.
        """
        for conn in self.conn_genes.values():
            if not conn.enabled:
                conn.enabled = True
                return

    def _mutate_add_connection(self, tracker: InnovationTracker) -> None:
        """
        Add a new link between two existing, unconnected nodes on different layers.

        The two nodes are drawn uniformly until a valid pair is found; the link is
        oriented from the lower layer to the higher one. Nothing happens when the
        genome is fully connected, which also guarantees that the draw terminates.
        """
        if self.is_fully_connected():
            return

        nodes = list(self.node_genes.values())
        node1 = random.choice(nodes)
        node2 = random.choice(nodes)
        while self._is_bad_link(node1, node2):
            node1 = random.choice(nodes)
            node2 = random.choice(nodes)

        if node2.layer < node1.layer:
            node1, node2 = node2, node1

        self._add_connection(node1.id, node2.id, self._random_weight(), tracker)

    def _mutate_add_node(self, tracker: InnovationTracker) -> None:
        """
        Split an existing link by adding a new node.

        The link to split is chosen uniformly among the enabled links that do not
        leave the bias node. It is disabled and replaced by:
          + source -> new node  (weight 1)
          + new node -> target  (weight of the split link)
          + bias -> new node    (weight 0)
        The new node goes on layer ceil((source layer + target layer) / 2). When
        that is the target's layer, every node on that layer or above moves up one
        layer, which is how the genome gets deeper.
        """
        candidates = [conn for conn in self.enabled_connections if conn.node_in != BIAS_NODE_ID]
        if not candidates:
            return
        split_conn = random.choice(candidates)
        split_conn.enabled = False

        new_node_id = tracker.get_split_node_id(split_conn.innovation)

        # This link was split before and later re-enabled: the genome already
        # holds the new node, so bring back the links around it instead.
        if new_node_id in self.node_genes:
            for node_in, node_out in ((split_conn.node_in, new_node_id),
                                      (new_node_id, split_conn.node_out),
                                      (BIAS_NODE_ID, new_node_id)):
                conn = self._find_connection(node_in, node_out)
                if conn is not None:
                    conn.enabled = True
            return

        source = self.node_genes[split_conn.node_in]
        target = self.node_genes[split_conn.node_out]
        layer  = math.ceil((source.layer + target.layer) / 2)

        if layer == target.layer:
            for node in self.node_genes.values():
                if node.layer >= layer:
                    node.layer += 1
            self.num_layers += 1

        # Insert the node after the shift, so that its own layer is not incremented
        new_node = NodeGene(new_node_id, NodeType.HIDDEN, layer, self._config, self._config.input_reset_value)
        self.node_genes[new_node_id] = new_node

        self._add_connection(source.id,    new_node_id, 1.0,               tracker)
        self._add_connection(new_node_id,  target.id,   split_conn.weight, tracker)
        self._add_connection(BIAS_NODE_ID, new_node_id, 0.0,               tracker)

    # ------------------------------------------------------------------
    # Crossover
    # ------------------------------------------------------------------

    def crossover(self, other: 'Genome') -> 'Genome':
        """
        Perform NEAT crossover between this genome and another to create offspring.

        The fitter parent is the primary parent (on equal fitness, the one with more
        layers, then 'self'). The offspring starts as a clone of the primary parent,
        so it inherits all of its disjoint and excess genes. Each link that both
        parents share takes, with probability 0.5, the weight and enabled flag of
        the secondary parent.

        When fitness is exactly equal, the nodes and links that only the secondary
        parent has are merged into the offspring as well.

        Parameters:
            other: the other parent genome

        Returns:
            New offspring genome (with fitness 0)
        """
        if self.fitness > other.fitness:
            primary, secondary = self, other
        elif self.fitness < other.fitness:
            primary, secondary = other, self
        elif self.num_layers >= other.num_layers:
            primary, secondary = self, other
        else:
            primary, secondary = other, self

        offspring = primary.clone()
        offspring.fitness = 0.0

        for innovation, conn in offspring.conn_genes.items():
            if innovation in secondary.conn_genes and random.random() < 0.5:
                conn_secondary = secondary.conn_genes[innovation]
                conn.weight    = conn_secondary.weight
                conn.enabled   = conn_secondary.enabled

        if self.fitness == other.fitness:
            offspring._merge_genes(secondary)

        return offspring

    def _merge_genes(self, other: 'Genome') -> None:
        """
        Copy into this genome every node and link of 'other' that it lacks.

        A link whose addition would close a cycle is skipped. Afterwards the layers
        are raised where needed so that every link goes to a higher layer again.
        """
        merged = False
        for node_id, node in other.node_genes.items():
            if node_id not in self.node_genes:
                self.node_genes[node_id] = NodeGene(node_id, node.type, node.layer,
                                                    self._config, self._config.input_reset_value)
                merged = True

        for innovation, conn in other.conn_genes.items():
            if innovation in self.conn_genes:
                continue
            if self.are_connected(conn.node_in, conn.node_out):
                continue
            if self._would_create_cycle(conn.node_in, conn.node_out):
                continue
            self._attach_connection(copy.copy(conn), check_layers=False)
            merged = True

        if merged:
            self._relayer()

    def _would_create_cycle(self, from_node: int, to_node: int) -> bool:
        """
        Check if adding a link from_node -> to_node would create a cycle, i.e. if
        'from_node' can already be reached from 'to_node' (via any link).
        """
        if from_node == to_node:
            return True

        visited = set()
        stack = [to_node]
        while stack:
            current = stack.pop()
            if current == from_node:
                return True
            if current in visited:
                continue
            visited.add(current)
            stack.extend(self.conn_genes[i].node_out for i in self.node_genes[current].outgoing)
        return False

    def _relayer(self) -> None:
        """
        Raise node layers (never lower them) until every link goes from a lower to a
        higher layer and the output nodes share the last layer.
        """
        in_degree = {node_id: 0 for node_id in self.node_genes}
        for conn in self.conn_genes.values():
            in_degree[conn.node_out] += 1

        # Kahn's algorithm: visit the nodes in topological order
        queue = deque(node_id for node_id, degree in in_degree.items() if degree == 0)
        while queue:
            node = self.node_genes[queue.popleft()]
            for innovation in node.outgoing:
                target = self.node_genes[self.conn_genes[innovation].node_out]
                target.layer = max(target.layer, node.layer + 1)
                in_degree[target.id] -= 1
                if in_degree[target.id] == 0:
                    queue.append(target.id)

        deepest_other = max(node.layer for node in self.node_genes.values() if node.type != NodeType.OUTPUT)
        output_layer  = max([deepest_other + 1] + [node.layer for node in self.output_nodes])
        for node in self.output_nodes:
            node.layer = output_layer
        self.num_layers = output_layer

    # ------------------------------------------------------------------
    # Compatibility
    # ------------------------------------------------------------------

    def distance(self, other: 'Genome') -> float:
        """
        Calculate the compatibility distance between this genome and another.

           distance = c_disjoint * D / N + c_weight * W

        Where:
        - D = number of links present in only one of the two genomes (by innovation number)
        - W = average absolute weight difference of the matching links
              ('no_matching_weight_diff' if there are none)
        - N = number of links in the larger genome, or 1 if that is below
              'small_genome_threshold' (small genomes are not normalized)

        Parameters:
            other: the genome relative to which we are calculating the distance

        Returns:
            the compatibility distance between this genome and 'other'
        """
        innovs1 = set(self.conn_genes.keys())
        innovs2 = set(other.conn_genes.keys())

        matching_innovs = innovs1 & innovs2
        num_disjoint    = len(innovs1 ^ innovs2)

        # Sorted, so that the floating point sum does not depend on the argument order
        if matching_innovs:
            weight_diff = sum(abs(self.conn_genes[i].weight - other.conn_genes[i].weight)
                              for i in sorted(matching_innovs))
            avg_weight_diff = weight_diff / len(matching_innovs)
        else:
            avg_weight_diff = self._config.no_matching_weight_diff

        N = max(len(self.conn_genes), len(other.conn_genes))
        if N < self._config.small_genome_threshold:
            N = 1

        return (self._config.distance_disjoint_coeff * num_disjoint / N +
                self._config.distance_weight_coeff   * avg_weight_diff)

    def __str__(self):
        node_genes_str  = ''.join(str(node) for node in self.input_nodes)
        node_genes_str += str(self.bias_node)
        node_genes_str += ''.join(str(node) for node in self.hidden_nodes)
        node_genes_str += ''.join(str(node) for node in self.output_nodes)
        conn_genes_str  = ''.join(str(conn) for conn in self.conn_genes.values())
        return (f"Nodes: {node_genes_str}\nConns: {conn_genes_str}\n"
                f"# Nodes:{len(self.node_genes):4d}  # Links:{len(self.conn_genes):5d}  Fitness: {self.fitness:f}")
