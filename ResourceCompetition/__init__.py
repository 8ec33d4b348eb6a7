"""
ResourceCompetition: Tilman-style resource competition dynamics.

This library models one or two consumer species competing for two
resources as a coupled ODE system, under several resource interaction laws,
and provides forward integration and steady-state solving on top of scipy.
"""

__version__ = "0.1.0"

# Core components
from .exceptions import (
    ResourceCompetitionError,
    InvalidParameter,
    UnknownInteractionLaw,
    ConfigError,
    IntegrationFailure,
    SteadyStateNonConvergence,
)
from .growth import (
    InteractionLaw,
    SpeciesParameters,
    evaluate_growth,
    growth_surface,
    zero_net_growth_isocline,
    break_even_concentrations,
)
from .dynamics import (
    ResourceSupply,
    SimulationConfig,
    derivative,
    make_ode,
)
from .integrate import Trajectory, integrate
from .equilibrium import (
    find_steady_state,
    steady_state_residual,
    classify_species,
    competition_outcome,
)
from .config import (
    get_scenario,
    load_simulation_config,
    save_config_to_yaml,
)

__all__ = [
    # Errors
    'ResourceCompetitionError',
    'InvalidParameter',
    'UnknownInteractionLaw',
    'ConfigError',
    'IntegrationFailure',
    'SteadyStateNonConvergence',
    # Growth
    'InteractionLaw',
    'SpeciesParameters',
    'evaluate_growth',
    'growth_surface',
    'zero_net_growth_isocline',
    'break_even_concentrations',
    # Dynamics
    'ResourceSupply',
    'SimulationConfig',
    'derivative',
    'make_ode',
    'Trajectory',
    'integrate',
    # Equilibrium
    'find_steady_state',
    'steady_state_residual',
    'classify_species',
    'competition_outcome',
    # Configuration
    'get_scenario',
    'load_simulation_config',
    'save_config_to_yaml',
]
