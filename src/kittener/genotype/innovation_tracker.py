"""
NEAT Innovation Tracker Module

This module implements the InnovationTracker class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationTracker: Run-wide tracker for innovation numbers and hidden node IDs
"""

import threading

from kittener.run.config import Config

class InnovationTracker:
    """
    Tracks structural changes across all genomes of a run.
    Ensures the same structural change gets the same innovation
    number (for links) and ID (for nodes created by splitting a link).

    One tracker is created at the start of a run and handed to every
    operation that may create a link: genome construction and mutation.
    It is never reset; a new run simply creates a new tracker.

    Public Methods:
        get_innovation_number(node_in, node_out): innovation number of a link
        get_split_node_id(innovation):            ID of the node that splits a link

    Public Properties:
        num_innovations: how many distinct links have been seen so far
    """

    def __init__(self, config: Config):
        """
        Parameters:
            config: Stores configuration parameters
        """
        # Hidden nodes are numbered after the input and output nodes
        self._first_hidden_id = config.num_inputs + config.num_outputs

        self._next_innovation_number: int = 0
        self._next_node_id          : int = self._first_hidden_id

        # For each link ever created, map its endpoints to its innovation number
        self._innovation_numbers: dict[tuple[int, int], int] = {}    # (node_in, node_out) -> innovation

        # For each link ever split, the ID of the node that was inserted
        self._split_IDs: dict[int, int] = {}                          # innovation -> new node ID

        self._lock = threading.Lock()

    @property
    def num_innovations(self) -> int:
        return len(self._innovation_numbers)

    def get_innovation_number(self, node_in: int, node_out: int) -> int:
        """
        Get innovation number for a link, identified by its endpoints.
        Returns existing innovation number if this link was created
        before anywhere in the run, otherwise assigns the next one.

        Parameters:
            node_in:  node ID for the 'from' end of the link
            node_out: node ID for the 'to'   end of the link

        Returns:
            link ID (a.k.a. innovation number)
        """
        key = (node_in, node_out)
        with self._lock:
            if key not in self._innovation_numbers:
                self._innovation_numbers[key]  = self._next_innovation_number
                self._next_innovation_number += 1
            return self._innovation_numbers[key]

    def get_split_node_id(self, innovation: int) -> int:
        """
        Get the ID of the node inserted when splitting a link.
        If this link has been split before (in any genome) the same ID is returned.

        Parameters:
            innovation: innovation number of the link being split

        Returns:
            the ID of the new node
        """
        with self._lock:
            if innovation not in self._split_IDs:
                self._split_IDs[innovation] = self._next_node_id
                self._next_node_id         += 1
            return self._split_IDs[innovation]

    def __getstate__(self):
        state = self.__dict__.copy()
        del state['_lock']
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._lock = threading.Lock()

    def __repr__(self):
        return (f"InnovationTracker(innovations={len(self._innovation_numbers)}, "
                f"splits={len(self._split_IDs)})")
