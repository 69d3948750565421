import configparser
import os
from kittener.activations import activations

class Config:

    # Allowed values for the policy options
    BIAS_LINK_POLICIES  = ('fixed', 'random')
    SPECIATION_POLICIES = ('first-match', 'best-match')
    STALE_FALLBACKS     = ('keep-best', 'cull-population')
    FITNESS_CRITERIA    = ('max', 'mean')

    @staticmethod
    def _parse_choice(name, raw_value, allowed):
        """
        Validate a string option against the list of allowed values.

        Parameters:
            name:      Name of the option (used in the error message)
            raw_value: The value to validate
            allowed:   Tuple of allowed values

        Returns:
            The (stripped, lower-cased) value
        """
        value = raw_value.strip().lower() if raw_value is not None else None
        if value not in allowed:
            raise ValueError(f"Invalid value '{raw_value}' for '{name}'; expected one of {list(allowed)}")
        return value

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config holding the defaults.

        Every option has a default, so a configuration file only needs to list
        the options it changes. The defaults are the coefficients used by the
        kittener game.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config with default values only.
        """

        # [POPULATION_INIT]
        self.population_size  = 100
        self.num_inputs       = 10
        self.num_outputs      = 5
        self.bias_link_policy = 'fixed'
        self.bias_link_weight = 1.0
        self.bias_value       = 1.0

        # [CONNECTION]
        self.min_weight              = -1.0
        self.max_weight              = 1.0
        self.weight_mutate_prob      = 0.8
        self.weight_replace_prob     = 0.1
        self.weight_perturb_strength = 0.02

        # [STRUCTURAL_MUTATIONS]
        self.connection_add_probability    = 0.15
        self.node_add_probability          = 0.05
        self.connection_toggle_probability = 0.05

        # [SPECIATION]
        self.compatibility_threshold      = 0.3
        self.distance_disjoint_coeff      = 1.0
        self.distance_weight_coeff        = 0.5
        self.small_genome_threshold       = 20
        self.no_matching_weight_diff      = 100.0
        self.speciation_policy            = 'first-match'
        self.adaptive_threshold           = True
        self.target_species_count         = 8
        self.compatibility_threshold_step = 0.05
        self.min_compatibility_threshold  = 0.05

        # [REPRODUCTION]
        self.crossover_probability = 0.75
        self.cull_fraction         = 0.5

        # [STAGNATION]
        self.staleness_threshold            = 15
        self.protect_fittest_species        = True
        self.empty_species_double_staleness = True
        self.stale_fallback                 = 'keep-best'

        # [EVALUATION]
        self.activation        = 'sigmoid'
        self.input_reset_value = 0.0
        self.num_jobs          = 1

        # [TERMINATION]
        self.fitness_termination_check = False
        self.fitness_criterion         = 'max'
        self.fitness_threshold         = float('inf')
        self.max_number_generations    = 100

        if config_file is None:
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Helper function to read a value, falling back on the current default
        def get_value(section, key, value_type):
            default = getattr(self, key)
            if not parser.has_option(section, key):
                return default
            raw_value = parser.get(section, key)
            if raw_value.lower() == 'none':
                return None
            if value_type == int:
                return parser.getint(section, key)
            elif value_type == float:
                return parser.getfloat(section, key)
            elif value_type == bool:
                return parser.getboolean(section, key)
            return raw_value

        # [POPULATION_INIT]

        # The number of genomes in each generation (constant across generations).
        self.population_size = get_value('POPULATION_INIT', 'population_size', int)

        # The number of input nodes (length of the sensory vector).
        self.num_inputs = get_value('POPULATION_INIT', 'num_inputs', int)

        # The number of output nodes (length of the decision vector).
        self.num_outputs = get_value('POPULATION_INIT', 'num_outputs', int)

        # How the links leaving the bias node are weighted in new genomes.
        # Allowed values:
        #   "fixed"  - every bias link gets 'bias_link_weight'
        #   "random" - bias links get a random weight, like input links
        self.bias_link_policy = self._parse_choice(
            'bias_link_policy', get_value('POPULATION_INIT', 'bias_link_policy', str), self.BIAS_LINK_POLICIES)
        self.bias_link_weight = get_value('POPULATION_INIT', 'bias_link_weight', float)

        # The constant output of the bias node.
        self.bias_value = get_value('POPULATION_INIT', 'bias_value', float)

        # [CONNECTION]

        # The minimum and maximum allowed 'weight' values.
        # Weights outside this range will be clamped to this range.
        self.min_weight = get_value('CONNECTION', 'min_weight', float)
        self.max_weight = get_value('CONNECTION', 'max_weight', float)

        # The probability that a given link has its weight mutated.
        self.weight_mutate_prob = get_value('CONNECTION', 'weight_mutate_prob', float)

        # Once a weight is mutated, the probability that it is replaced
        # by a new random value instead of being perturbed.
        self.weight_replace_prob = get_value('CONNECTION', 'weight_replace_prob', float)

        # The standard deviation of the zero-centered normal distribution
        # from which a 'weight' perturbation value is drawn.
        self.weight_perturb_strength = get_value('CONNECTION', 'weight_perturb_strength', float)

        # [STRUCTURAL_MUTATIONS]

        # The probability that mutation will add a link between two unconnected nodes.
        self.connection_add_probability = get_value('STRUCTURAL_MUTATIONS', 'connection_add_probability', float)

        # The probability that mutation will split an enabled link with a new node.
        self.node_add_probability = get_value('STRUCTURAL_MUTATIONS', 'node_add_probability', float)

        # The probability that mutation will re-enable the first disabled link.
        self.connection_toggle_probability = get_value('STRUCTURAL_MUTATIONS', 'connection_toggle_probability', float)

        # [SPECIATION]

        # Genomes whose distance to a species representative is at most
        # this threshold are compatible with that species.
        self.compatibility_threshold = get_value('SPECIATION', 'compatibility_threshold', float)

        # The coefficients of the disjoint gene count and of the average
        # weight difference in the compatibility distance.
        self.distance_disjoint_coeff = get_value('SPECIATION', 'distance_disjoint_coeff', float)
        self.distance_weight_coeff   = get_value('SPECIATION', 'distance_weight_coeff', float)

        # Genomes with fewer links than this are not normalized by their size.
        self.small_genome_threshold = get_value('SPECIATION', 'small_genome_threshold', int)

        # The weight difference used when two genomes share no links.
        self.no_matching_weight_diff = get_value('SPECIATION', 'no_matching_weight_diff', float)

        # How a genome picks among the compatible species.
        # Allowed values:
        #   "first-match" - the first compatible species, in creation order
        #   "best-match"  - the compatible species with the closest representative
        self.speciation_policy = self._parse_choice(
            'speciation_policy', get_value('SPECIATION', 'speciation_policy', str), self.SPECIATION_POLICIES)

        # Whether to nudge the compatibility threshold after each speciation
        # so that the number of species tends towards 'target_species_count'.
        self.adaptive_threshold           = get_value('SPECIATION', 'adaptive_threshold', bool)
        self.target_species_count         = get_value('SPECIATION', 'target_species_count', int)
        self.compatibility_threshold_step = get_value('SPECIATION', 'compatibility_threshold_step', float)
        self.min_compatibility_threshold  = get_value('SPECIATION', 'min_compatibility_threshold', float)

        # [REPRODUCTION]

        # The probability that an offspring is produced by crossover rather than cloning.
        self.crossover_probability = get_value('REPRODUCTION', 'crossover_probability', float)

        # The fraction of each species (the fittest ones) that survives culling.
        self.cull_fraction = get_value('REPRODUCTION', 'cull_fraction', float)

        # [STAGNATION]

        # Species whose staleness reaches this number of generations are removed.
        self.staleness_threshold = get_value('STAGNATION', 'staleness_threshold', int)

        # Whether the species holding the fittest genome is protected from removal.
        self.protect_fittest_species = get_value('STAGNATION', 'protect_fittest_species', bool)

        # Whether species left without members age twice as fast.
        self.empty_species_double_staleness = get_value('STAGNATION', 'empty_species_double_staleness', bool)

        # What happens when every species is stale.
        # Allowed values:
        #   "keep-best"       - keep the species with the highest average fitness
        #   "cull-population" - drop all species, cull the whole population directly
        self.stale_fallback = self._parse_choice(
            'stale_fallback', get_value('STAGNATION', 'stale_fallback', str), self.STALE_FALLBACKS)

        # [EVALUATION]

        # Activation function of hidden and output nodes.
        self.activation = get_value('EVALUATION', 'activation', str)
        if self.activation not in activations:
            raise ValueError(f"Invalid activation function '{self.activation}'")

        # The value every node's input sum is reset to after a forward pass.
        self.input_reset_value = get_value('EVALUATION', 'input_reset_value', float)

        # Number of parallel jobs for speciation distances and batch evaluation.
        #  1 = serial, -1 = all available CPU cores, >1 = that many processes
        self.num_jobs = get_value('EVALUATION', 'num_jobs', int)

        # [TERMINATION]

        # Whether to use the fitness of the most recent
        # generation as a criterion for stopping the run.
        self.fitness_termination_check = get_value('TERMINATION', 'fitness_termination_check', bool)

        # The function used to compute the termination criterion.
        # Allowed values:
        #   "mean" calculate the mean fitness across the entire population
        #   "max"  get the fitness of the fittest genome in the population
        self.fitness_criterion = self._parse_choice(
            'fitness_criterion', get_value('TERMINATION', 'fitness_criterion', str), self.FITNESS_CRITERIA)

        # The fitness value which when met or exceeded causes the run to end.
        self.fitness_threshold = get_value('TERMINATION', 'fitness_threshold', float)

        # The number of generations after which to stop the run.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int)
