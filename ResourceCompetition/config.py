import copy
import os
import yaml
from typing import Dict, Any, Optional

from .dynamics import ResourceSupply, SimulationConfig
from .exceptions import ConfigError
from .growth import SpeciesParameters


# Define a registry of reference scenarios
# Each entry contains:
# 'description': One-line summary of the expected outcome
# 'config': Configuration dictionary in the YAML layout
scenario_registry: Dict[str, Dict[str, Any]] = {
    'single_species_collapse': {
        'description': 'One species on interactive-essential resources; '
                       'supply too low, population collapses to (0, 10, 40)',
        'config': {
            'simulation': {'law': 'interactive_essential', 't_max': 1000.0, 'dt': 1.0,
                           'method': 'LSODA'},
            'species': [
                {'name': 'N1', 'max_growth_rate': 0.5, 'half_saturation': [30.0, 40.0],
                 'preference_a': 0.6, 'mortality_rate': 0.1},
            ],
            'resources': [
                {'max_supply': 10.0, 'relaxation_time': 10.0},
                {'max_supply': 40.0, 'relaxation_time': 10.0},
            ],
            'initial': {'populations': [10.0], 'resources': [30.0, 60.0]},
        },
    },
    'two_species_exclusion': {
        'description': 'Two species on essential resources; the species with '
                       'lower half-saturations excludes the other',
        'config': {
            'simulation': {'law': 'essential', 't_max': 1000.0, 'dt': 1.0,
                           'method': 'LSODA'},
            'species': [
                {'name': 'N1', 'max_growth_rate': 1.0, 'half_saturation': [5.0, 5.0],
                 'preference_a': 0.5, 'mortality_rate': 0.2},
                {'name': 'N2', 'max_growth_rate': 1.0, 'half_saturation': [20.0, 20.0],
                 'preference_a': 0.5, 'mortality_rate': 0.2},
            ],
            'resources': [
                {'max_supply': 30.0, 'relaxation_time': 10.0},
                {'max_supply': 50.0, 'relaxation_time': 10.0},
            ],
            'initial': {'populations': [1.0, 1.0], 'resources': [30.0, 50.0]},
        },
    },
    'two_species_substitutable': {
        'description': 'Two species on perfectly substitutive resources; the '
                       'species with the lower combined break-even level wins',
        'config': {
            'simulation': {'law': 'perfectly_substitutive', 't_max': 1000.0, 'dt': 1.0,
                           'method': 'LSODA'},
            'species': [
                {'name': 'N1', 'max_growth_rate': 0.8, 'half_saturation': [10.0, 30.0],
                 'mortality_rate': 0.2},
                {'name': 'N2', 'max_growth_rate': 1.0, 'half_saturation': [30.0, 30.0],
                 'mortality_rate': 0.2},
            ],
            'resources': [
                {'max_supply': 40.0, 'relaxation_time': 5.0},
                {'max_supply': 40.0, 'relaxation_time': 5.0},
            ],
            'initial': {'populations': [1.0, 1.0], 'resources': [40.0, 40.0]},
        },
    },
}

_SIMULATION_KEYS = ['t_max', 'dt', 'method', 'rtol', 'atol']


def get_scenario(name: str, **overrides) -> SimulationConfig:
    """
    Build the SimulationConfig of a named reference scenario.

    Keyword overrides are applied with SimulationConfig.replace, so the
    registry itself is never modified.

    Example:
        >>> config = get_scenario('single_species_collapse', method='euler', dt=0.5)
    """
    if name not in scenario_registry:
        raise ConfigError(f"Unknown scenario: {name}. Choose from {list(scenario_registry.keys())}")
    config = config_from_dict(copy.deepcopy(scenario_registry[name]['config']))
    if overrides:
        config = config.replace(**overrides)
    return config


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Dictionary containing configuration parameters

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If config file is malformed or empty
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML config {config_path}: {e}") from e

    if config_dict is None:
        raise ConfigError(f"Empty config file: {config_path}")
    if not isinstance(config_dict, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    return config_dict


def validate_config(config_dict: Dict[str, Any]) -> None:
    """
    Validate the structure of a configuration dictionary.

    Value ranges are checked when the dataclasses are built; this only
    checks that the required sections and keys are present.

    Raises:
        ConfigError: If validation fails
    """
    required_sections = ['simulation', 'species', 'resources']

    # Check required sections exist
    for section in required_sections:
        if section not in config_dict:
            raise ConfigError(f"Missing required config section: '{section}'")

    if not isinstance(config_dict['simulation'], dict) or 'law' not in config_dict['simulation']:
        raise ConfigError("simulation section must be a mapping with a 'law' entry")

    species = config_dict['species']
    if not isinstance(species, list) or len(species) not in (1, 2):
        raise ConfigError("species must be a list of 1 or 2 species")
    for i, entry in enumerate(species):
        if not isinstance(entry, dict):
            raise ConfigError(f"species[{i}] must be a mapping")
        for key in ['max_growth_rate', 'half_saturation']:
            if key not in entry:
                raise ConfigError(f"species[{i}] is missing '{key}'")
        half_saturation = entry['half_saturation']
        if not isinstance(half_saturation, list) or len(half_saturation) != 2:
            raise ConfigError(f"species[{i}].half_saturation must be [K1, K2]")

    resources = config_dict['resources']
    if not isinstance(resources, list) or len(resources) != 2:
        raise ConfigError("resources must be a list of exactly 2 resources")
    for j, entry in enumerate(resources):
        if not isinstance(entry, dict):
            raise ConfigError(f"resources[{j}] must be a mapping")
        for key in ['max_supply', 'relaxation_time']:
            if key not in entry:
                raise ConfigError(f"resources[{j}] is missing '{key}'")

    if 'initial' in config_dict and not isinstance(config_dict['initial'], dict):
        raise ConfigError("initial section must be a mapping")


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries.

    Override config takes precedence. Handles nested dictionaries recursively;
    lists (species, resources) are replaced as a whole.

    Example:
        >>> base = {'simulation': {'law': 'essential', 't_max': 500.0}}
        >>> override = {'simulation': {'t_max': 2000.0}}
        >>> merged = merge_configs(base, override)
        >>> # Result: {'simulation': {'law': 'essential', 't_max': 2000.0}}
    """
    result = base_config.copy()

    for key, value in override_config.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            result[key] = merge_configs(result[key], value)
        else:
            # Override value
            result[key] = value

    return result


def config_from_dict(config_dict: Dict[str, Any]) -> SimulationConfig:
    """Build a SimulationConfig from a dictionary in the YAML layout."""
    validate_config(config_dict)

    species = []
    for entry in config_dict['species']:
        K1, K2 = entry['half_saturation']
        species.append(SpeciesParameters(
            max_growth_rate=entry['max_growth_rate'],
            half_saturation_1=K1,
            half_saturation_2=K2,
            preference_a=entry.get('preference_a', 0.5),
            mortality_rate=entry.get('mortality_rate', 0.0),
            name=str(entry.get('name', '')),
        ))

    resources = [
        ResourceSupply(max_supply=entry['max_supply'], relaxation_time=entry['relaxation_time'])
        for entry in config_dict['resources']
    ]

    simulation = config_dict['simulation']
    params = {key: simulation[key] for key in _SIMULATION_KEYS if key in simulation}

    initial = config_dict.get('initial', {})
    if 'populations' in initial:
        params['initial_populations'] = initial['populations']
    if 'resources' in initial:
        params['initial_resources'] = initial['resources']

    return SimulationConfig(species=species, resources=resources, law=simulation['law'], **params)


def config_to_dict(config: SimulationConfig) -> Dict[str, Any]:
    """Inverse of config_from_dict, using plain Python types only."""
    config_dict = {
        'simulation': {
            'law': config.law.value,
            't_max': config.t_max,
            'dt': config.dt,
            'method': config.method,
            'rtol': config.rtol,
            'atol': config.atol,
        },
        'species': [
            {
                'name': s.name,
                'max_growth_rate': s.max_growth_rate,
                'half_saturation': [s.half_saturation_1, s.half_saturation_2],
                'preference_a': s.preference_a,
                'mortality_rate': s.mortality_rate,
            }
            for s in config.species
        ],
        'resources': [
            {'max_supply': r.max_supply, 'relaxation_time': r.relaxation_time}
            for r in config.resources
        ],
    }

    initial = {}
    if config.initial_populations is not None:
        initial['populations'] = list(config.initial_populations)
    if config.initial_resources is not None:
        initial['resources'] = list(config.initial_resources)
    if initial:
        config_dict['initial'] = initial

    return config_dict


def load_simulation_config(config_path: str,
                           base_config_path: Optional[str] = None,
                           verbose: bool = True) -> SimulationConfig:
    """
    Load a SimulationConfig from a YAML file.

    This is the main entry point for loading configurations. It handles:
    - Loading YAML file
    - Optional inheritance from base config
    - Validation
    - Conversion to SimulationConfig object

    Args:
        config_path: Path to YAML configuration file
        base_config_path: Optional path to base config to inherit from
        verbose: Whether to print loading messages

    Returns:
        SimulationConfig initialized from YAML

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the file structure is invalid
        InvalidParameter: If a parameter value is out of range
        UnknownInteractionLaw: If the law is not recognized

    Example:
        >>> config = load_simulation_config('configs/single_species_collapse.yaml')
        >>> print(config.law)
    """
    if verbose:
        print(f"Loading config from: {config_path}")

    # Load main config
    config_dict = load_yaml_config(config_path)

    # Optionally inherit from base config
    if base_config_path is not None:
        if verbose:
            print(f"  Inheriting from: {base_config_path}")
        base_dict = load_yaml_config(base_config_path)
        config_dict = merge_configs(base_dict, config_dict)

    config = config_from_dict(config_dict)

    if verbose:
        print(f"  ✓ Config loaded successfully")
        print(f"  Law: {config.law.value}, species: {config.n_species}")

    return config


def save_config_to_yaml(config: SimulationConfig, output_path: str) -> None:
    """
    Save SimulationConfig to YAML file.

    Useful for saving the exact configuration used in a run.

    Example:
        >>> save_config_to_yaml(config, 'run_001/config.yaml')
    """
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(output_path, 'w') as f:
        yaml.dump(config_to_dict(config), f, default_flow_style=False, sort_keys=False)
