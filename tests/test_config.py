import os

import numpy as np
import pytest
import yaml

from ResourceCompetition.config import (
    config_from_dict,
    config_to_dict,
    get_scenario,
    load_simulation_config,
    load_yaml_config,
    merge_configs,
    save_config_to_yaml,
    scenario_registry,
    validate_config,
)
from ResourceCompetition.exceptions import ConfigError, InvalidParameter, UnknownInteractionLaw
from ResourceCompetition.growth import InteractionLaw
from ResourceCompetition.integrate import integrate

CONFIG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "configs")


def test_load_single_species_yaml():
    config = load_simulation_config(os.path.join(CONFIG_DIR, "single_species_collapse.yaml"),
                                    verbose=False)
    assert config.law is InteractionLaw.INTERACTIVE_ESSENTIAL
    assert config.n_species == 1
    species = config.species[0]
    assert species.max_growth_rate == 0.5
    assert species.half_saturation == (30.0, 40.0)
    assert species.preference_a == 0.6
    assert species.mortality_rate == 0.1
    assert np.allclose(config.supply_point, [10.0, 40.0])
    assert config.resources[0].relaxation_time == 10.0
    assert np.allclose(config.initial_state(), [10.0, 30.0, 60.0])


def test_yaml_matches_registry():
    from_file = load_simulation_config(os.path.join(CONFIG_DIR, "two_species_exclusion.yaml"),
                                       verbose=False)
    assert from_file == get_scenario('two_species_exclusion')


def test_base_config_inheritance():
    config = load_simulation_config(
        os.path.join(CONFIG_DIR, "euler_override.yaml"),
        base_config_path=os.path.join(CONFIG_DIR, "single_species_collapse.yaml"),
        verbose=False,
    )
    assert config.method == 'euler'
    assert config.dt == 0.5
    assert config.law is InteractionLaw.INTERACTIVE_ESSENTIAL


def test_save_and_reload(tmp_path):
    config = get_scenario('two_species_substitutable', t_max=250.0)
    path = str(tmp_path / "run_001" / "config.yaml")
    save_config_to_yaml(config, path)
    assert load_simulation_config(path, verbose=False) == config


def test_saved_yaml_is_plain(tmp_path):
    path = str(tmp_path / "config.yaml")
    save_config_to_yaml(get_scenario('single_species_collapse'), path)
    with open(path) as f:
        data = yaml.safe_load(f)
    assert data['simulation']['law'] == 'interactive_essential'
    assert data['species'][0]['half_saturation'] == [30.0, 40.0]


def test_config_dict_round_trip():
    config = get_scenario('two_species_exclusion')
    assert config_from_dict(config_to_dict(config)) == config


def test_merge_configs_nested():
    base = {'simulation': {'law': 'essential', 't_max': 500.0}, 'species': [1]}
    override = {'simulation': {'t_max': 2000.0}, 'species': [2]}
    merged = merge_configs(base, override)
    assert merged == {'simulation': {'law': 'essential', 't_max': 2000.0}, 'species': [2]}
    assert base['simulation']['t_max'] == 500.0


def test_get_scenario_overrides():
    config = get_scenario('single_species_collapse', method='euler', dt=0.25)
    assert config.method == 'euler'
    assert config.dt == 0.25
    # The registry is untouched
    assert get_scenario('single_species_collapse').method == 'LSODA'


def test_get_scenario_unknown():
    with pytest.raises(ConfigError):
        get_scenario('three_species_chaos')


@pytest.mark.parametrize("name", list(scenario_registry.keys()))
def test_every_scenario_integrates(name):
    config = get_scenario(name, t_max=50.0)
    trajectory = integrate(config)
    assert np.all(np.isfinite(trajectory.y))


def _valid_dict():
    return {
        'simulation': {'law': 'essential'},
        'species': [{'max_growth_rate': 1.0, 'half_saturation': [1.0, 2.0]}],
        'resources': [{'max_supply': 5.0, 'relaxation_time': 1.0},
                      {'max_supply': 5.0, 'relaxation_time': 1.0}],
    }


def test_minimal_dict_defaults():
    config = config_from_dict(_valid_dict())
    assert config.species[0].preference_a == 0.5
    assert config.species[0].mortality_rate == 0.0
    assert config.method == 'LSODA'
    assert config.initial_populations is None


@pytest.mark.parametrize("mutate", [
    lambda d: d.pop('species'),
    lambda d: d['simulation'].pop('law'),
    lambda d: d.update(species=[]),
    lambda d: d['species'][0].pop('max_growth_rate'),
    lambda d: d['species'][0].update(half_saturation=[1.0]),
    lambda d: d['resources'].pop(),
    lambda d: d['resources'][0].pop('relaxation_time'),
    lambda d: d.update(initial=[1.0]),
])
def test_validate_config_errors(mutate):
    config_dict = _valid_dict()
    mutate(config_dict)
    with pytest.raises(ConfigError):
        validate_config(config_dict)


def test_value_errors_come_from_dataclasses():
    config_dict = _valid_dict()
    config_dict['resources'][1]['max_supply'] = 0.0
    with pytest.raises(InvalidParameter):
        config_from_dict(config_dict)


def test_unknown_law_in_yaml(tmp_path):
    config_dict = _valid_dict()
    config_dict['simulation']['law'] = 'symbiotic'
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.dump(config_dict))
    with pytest.raises(UnknownInteractionLaw):
        load_simulation_config(str(path), verbose=False)


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_yaml_config("does/not/exist.yaml")


def test_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    with pytest.raises(ConfigError):
        load_yaml_config(str(path))


def test_malformed_file(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("simulation: [unclosed\n")
    with pytest.raises(ConfigError):
        load_yaml_config(str(path))
