import numpy as np
import pytest

from ResourceCompetition.config import get_scenario
from ResourceCompetition.dynamics import derivative
from ResourceCompetition.equilibrium import (
    classify_species,
    competition_outcome,
    find_steady_state,
    steady_state_residual,
)
from ResourceCompetition.exceptions import InvalidParameter, SteadyStateNonConvergence
from ResourceCompetition.integrate import integrate


def test_collapse_steady_state_after_relaxation():
    config = get_scenario('single_species_collapse')
    state = find_steady_state(config, relax_time=500.0)

    assert np.allclose(state, [0.0, 10.0, 40.0], atol=1e-6)
    assert steady_state_residual(state, config) < 1e-6


def test_collapse_steady_state_from_nearby_guess():
    config = get_scenario('single_species_collapse')
    state = find_steady_state(config, initial_guess=[0.0, 11.0, 39.0])
    assert np.allclose(state, [0.0, 10.0, 40.0], atol=1e-6)


def test_residual_vanishes_for_all_times():
    config = get_scenario('single_species_collapse')
    state = find_steady_state(config, relax_time=500.0)
    for t in [0.0, 1.0, 1e3, -5.0]:
        assert np.linalg.norm(derivative(t, state, config)) < 1e-6


def test_exclusion_steady_state():
    config = get_scenario('two_species_exclusion')
    state = find_steady_state(config, relax_time=1000.0)

    # N1 holds resource 1 at its break-even level 0.2 * 5 / 0.8
    assert np.allclose(state, [28.75, 0.0, 1.25, 21.25], atol=1e-4)
    assert steady_state_residual(state, config) < 1e-6
    assert classify_species(state, 2) == ('survive', 'extinct')


def test_non_physical_root_rejected():
    # A root with negative N1 exists beyond the supply point
    config = get_scenario('single_species_collapse')
    with pytest.raises(SteadyStateNonConvergence):
        find_steady_state(config, initial_guess=[-25.0, 15.0, 60.0])


def test_invalid_guess_shape():
    config = get_scenario('single_species_collapse')
    with pytest.raises(InvalidParameter):
        find_steady_state(config, initial_guess=[0.0, 10.0])


def test_invalid_relax_time():
    config = get_scenario('single_species_collapse')
    with pytest.raises(InvalidParameter):
        find_steady_state(config, relax_time=-1.0)


def test_exclusion_from_forward_run():
    config = get_scenario('two_species_exclusion')
    final = integrate(config).final_state

    assert final[1] < 0.01
    assert final[0] > 1.0
    assert classify_species(final, 2) == ('survive', 'extinct')
    assert competition_outcome(final, 2) == 'exclusion'


def test_substitutable_exclusion():
    config = get_scenario('two_species_substitutable')
    final = integrate(config).final_state
    assert classify_species(final, 2) == ('survive', 'extinct')


def test_classification_is_pure():
    state = np.array([5.0, 0.005, 1.0, 2.0])
    before = state.copy()
    first = classify_species(state, 2)
    second = classify_species(state, 2)
    assert first == second == ('survive', 'extinct')
    assert np.array_equal(state, before)


@pytest.mark.parametrize("state,n_species,expected", [
    ([5.0, 3.0, 1.0, 1.0], 2, 'coexistence'),
    ([0.001, 3.0, 1.0, 1.0], 2, 'exclusion'),
    ([0.001, 0.0, 1.0, 1.0], 2, 'collapse'),
    ([2.0, 1.0, 1.0], 1, 'persistence'),
    ([0.0, 10.0, 40.0], 1, 'collapse'),
])
def test_competition_outcome(state, n_species, expected):
    assert competition_outcome(state, n_species) == expected


def test_custom_threshold():
    state = [0.05, 3.0, 1.0, 1.0]
    assert classify_species(state, 2) == ('survive', 'survive')
    assert classify_species(state, 2, threshold=0.1) == ('extinct', 'survive')


def test_classify_wrong_size():
    with pytest.raises(ValueError):
        classify_species([1.0, 2.0, 3.0], 2)


def test_verbose_output(capsys):
    config = get_scenario('single_species_collapse')
    find_steady_state(config, initial_guess=[0.0, 11.0, 39.0], verbose=True)
    assert 'Steady state' in capsys.readouterr().out
