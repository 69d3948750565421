"""Pytest configuration and shared fixtures."""

import random

import numpy as np
import pytest

from kittener.run.config import Config
from kittener.genotype.innovation_tracker import InnovationTracker


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Seed every random number generator the engine uses."""
    np.random.seed(42)
    random.seed(42)
    yield
    np.random.seed(None)
    random.seed(None)


@pytest.fixture
def small_config():
    """Default configuration, with 2 inputs and 2 outputs."""
    config = Config()
    config.num_inputs = 2
    config.num_outputs = 2
    return config


@pytest.fixture
def tracker(small_config):
    return InnovationTracker(small_config)
