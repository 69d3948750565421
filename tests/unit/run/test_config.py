"""
Unit tests for Config class.
"""

import os

import pytest

from kittener.run.config import Config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def test_config_dir():
    """Return the directory containing test configuration files."""
    return os.path.join(os.path.dirname(__file__), 'test_configs')


# ============================================================================
# Test Config Initialization
# ============================================================================

class TestConfigInit:

    def test_defaults_without_file(self):
        config = Config()

        assert config.population_size == 100
        assert config.num_inputs == 10
        assert config.num_outputs == 5
        assert config.bias_link_policy == 'fixed'
        assert config.min_weight == -1.0
        assert config.max_weight == 1.0
        assert config.compatibility_threshold == 0.3
        assert config.small_genome_threshold == 20
        assert config.no_matching_weight_diff == 100.0
        assert config.crossover_probability == 0.75
        assert config.cull_fraction == 0.5
        assert config.staleness_threshold == 15
        assert config.speciation_policy == 'first-match'
        assert config.stale_fallback == 'keep-best'
        assert config.protect_fittest_species is True
        assert config.activation == 'sigmoid'
        assert config.num_jobs == 1

    def test_nonexistent_file_raises_error(self):
        with pytest.raises(FileNotFoundError, match="Configuration file .* not found"):
            Config('nonexistent_file.ini')

    def test_minimal_file_keeps_other_defaults(self, test_config_dir):
        config = Config(os.path.join(test_config_dir, 'minimal.ini'))

        assert config.population_size == 20
        assert config.num_inputs == 3
        assert config.num_outputs == 2
        assert config.weight_mutate_prob == 0.8
        assert config.max_number_generations == 100


# ============================================================================
# Test Config Sections
# ============================================================================

class TestConfigFullFile:

    @pytest.fixture
    def config(self, test_config_dir):
        return Config(os.path.join(test_config_dir, 'full.ini'))

    def test_population_init(self, config):
        assert config.population_size == 50
        assert config.num_inputs == 4
        assert config.num_outputs == 3
        assert config.bias_link_policy == 'random'
        assert config.bias_link_weight == 0.5

    def test_connection(self, config):
        assert config.min_weight == -2.0
        assert config.max_weight == 2.0
        assert config.weight_mutate_prob == 0.9
        assert config.weight_replace_prob == 0.2
        assert config.weight_perturb_strength == 0.1

    def test_structural_mutations(self, config):
        assert config.connection_add_probability == 0.3
        assert config.node_add_probability == 0.1
        assert config.connection_toggle_probability == 0.02

    def test_speciation(self, config):
        assert config.compatibility_threshold == 1.5
        assert config.distance_disjoint_coeff == 2.0
        assert config.distance_weight_coeff == 0.4
        assert config.small_genome_threshold == 10
        assert config.no_matching_weight_diff == 50.0
        assert config.speciation_policy == 'best-match'
        assert config.adaptive_threshold is False
        assert config.target_species_count == 5
        assert config.compatibility_threshold_step == 0.1
        assert config.min_compatibility_threshold == 0.2

    def test_reproduction_and_stagnation(self, config):
        assert config.crossover_probability == 0.6
        assert config.cull_fraction == 0.25
        assert config.staleness_threshold == 20
        assert config.protect_fittest_species is False
        assert config.empty_species_double_staleness is False
        assert config.stale_fallback == 'cull-population'

    def test_evaluation(self, config):
        assert config.activation == 'tanh'
        assert config.input_reset_value == 1.0
        assert config.num_jobs == 2

    def test_termination(self, config):
        assert config.fitness_termination_check is True
        assert config.fitness_criterion == 'mean'
        assert config.fitness_threshold == 3.9
        assert config.max_number_generations == 300


class TestConfigValidation:

    def test_bad_policy(self, test_config_dir):
        with pytest.raises(ValueError, match="speciation_policy"):
            Config(os.path.join(test_config_dir, 'bad_policy.ini'))

    def test_bad_activation(self, test_config_dir):
        with pytest.raises(ValueError, match="activation"):
            Config(os.path.join(test_config_dir, 'bad_activation.ini'))

    @pytest.mark.parametrize("section, option", [
        ('POPULATION_INIT', 'bias_link_policy'),
        ('SPECIATION',      'speciation_policy'),
        ('STAGNATION',      'stale_fallback'),
        ('TERMINATION',     'fitness_criterion'),
        ('EVALUATION',      'activation'),
    ])
    def test_none_choice_is_invalid(self, tmp_path, section, option):
        config_file = tmp_path / 'none_choice.ini'
        config_file.write_text(f"[{section}]\n{option} = none\n")
        with pytest.raises(ValueError):
            Config(str(config_file))

    def test_choice_is_normalized(self):
        assert Config._parse_choice('fitness_criterion', ' MAX ', Config.FITNESS_CRITERIA) == 'max'
