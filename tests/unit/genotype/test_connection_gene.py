"""
Unit tests for ConnectionGene class.

Tests cover initialization, weight mutation and string representations.
"""

import pytest
from unittest.mock import Mock, patch

from kittener.genotype.connection_gene import ConnectionGene
from kittener.run.config import Config


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def basic_config():
    """Config with standard mutation parameters."""
    config = Mock(spec=Config)
    config.min_weight = -1.0
    config.max_weight = 1.0
    config.weight_mutate_prob = 0.8
    config.weight_replace_prob = 0.1
    config.weight_perturb_strength = 0.02
    return config


@pytest.fixture
def always_perturb_config(basic_config):
    basic_config.weight_mutate_prob = 1.0
    basic_config.weight_replace_prob = 0.0
    basic_config.weight_perturb_strength = 5.0   # much wider than the bounds
    return basic_config


# ============================================================================
# Test: Constructor
# ============================================================================

class TestConnectionGeneInit:

    def test_basic_initialization(self, basic_config):
        gene = ConnectionGene(node_in=1, node_out=2, weight=0.5, innovation=10, config=basic_config)

        assert gene.node_in == 1
        assert gene.node_out == 2
        assert gene.weight == 0.5
        assert gene.innovation == 10
        assert gene.enabled is True

    def test_explicit_disabled(self, basic_config):
        gene = ConnectionGene(1, 2, 0.5, 10, basic_config, enabled=False)
        assert gene.enabled is False


# ============================================================================
# Test: Mutation
# ============================================================================

class TestConnectionGeneMutate:

    def test_no_mutation_when_probability_zero(self, basic_config):
        basic_config.weight_mutate_prob = 0.0
        gene = ConnectionGene(1, 2, 0.5, 10, basic_config)
        for _ in range(100):
            gene.mutate()
        assert gene.weight == 0.5

    def test_perturbed_weight_is_clamped(self, always_perturb_config):
        gene = ConnectionGene(1, 2, 0.9, 10, always_perturb_config)
        for _ in range(200):
            gene.mutate()
            assert -1.0 <= gene.weight <= 1.0

    def test_replacement_draws_uniform_value(self, basic_config):
        basic_config.weight_mutate_prob = 1.0
        basic_config.weight_replace_prob = 1.0
        gene = ConnectionGene(1, 2, 0.5, 10, basic_config)
        with patch('kittener.genotype.connection_gene.random.uniform', return_value=-0.25) as uniform:
            gene.mutate()
        uniform.assert_called_once_with(-1.0, 1.0)
        assert gene.weight == -0.25

    def test_perturbation_adds_gaussian_step(self, basic_config):
        basic_config.weight_mutate_prob = 1.0
        basic_config.weight_replace_prob = 0.0
        gene = ConnectionGene(1, 2, 0.5, 10, basic_config)
        with patch('kittener.genotype.connection_gene.random.gauss', return_value=0.1):
            gene.mutate()
        assert gene.weight == pytest.approx(0.6)

    def test_mutation_keeps_enabled_flag(self, always_perturb_config):
        gene = ConnectionGene(1, 2, 0.5, 10, always_perturb_config, enabled=False)
        gene.mutate()
        assert gene.enabled is False

    def test_weight_is_python_float(self, always_perturb_config):
        gene = ConnectionGene(1, 2, 0.5, 10, always_perturb_config)
        gene.mutate()
        assert type(gene.weight) is float


class TestConnectionGeneStr:

    def test_str_enabled(self, basic_config):
        gene = ConnectionGene(1, 2, 0.5, 7, basic_config)
        assert str(gene) == "[007,E,01=>02,+0.50]"

    def test_str_disabled(self, basic_config):
        gene = ConnectionGene(1, 2, -0.5, 7, basic_config, enabled=False)
        assert str(gene) == "[007,D,01=>02,-0.50]"
