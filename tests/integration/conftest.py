"""
Shared fixtures for integration tests.
"""

import pytest

from kittener.run.config import Config


@pytest.fixture
def xor_cases():
    inputs  = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
    outputs = [0.0, 1.0, 1.0, 0.0]
    return list(zip(inputs, outputs))


@pytest.fixture
def xor_config():
    config = Config()
    config.population_size = 60
    config.num_inputs = 2
    config.num_outputs = 1
    config.compatibility_threshold = 1.0
    config.target_species_count = 4
    config.weight_perturb_strength = 0.3
    config.connection_add_probability = 0.2
    config.node_add_probability = 0.1
    config.max_number_generations = 25
    return config
