"""
Consumer-resource dynamics for one or two species sharing two resources.

The state vector is ordered (N_1[, N_2], R_1, R_2). Populations grow
multiplicatively at their net rate; resources relax toward a supply point
(chemostat-like) and are drawn down by every species in proportion to its
growth and consumption shares:

    dN_i/dt = N_i * (f_i(R) - m_i)
    dR_j/dt = (g_j - R_j) / tau_j - sum_i N_i * f_i(R) * h_ij(R)
"""

import dataclasses
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional, Tuple

import numpy as np

from .exceptions import IntegrationFailure, InvalidParameter
from .growth import InteractionLaw, SpeciesParameters, evaluate_growth


# 'euler' is the fixed-step loop in integrate.py, the rest go to solve_ivp
INTEGRATION_METHODS = ('euler', 'RK45', 'RK23', 'DOP853', 'Radau', 'BDF', 'LSODA')


def _positive(name: str, value: float) -> float:
    value = float(value)
    if not np.isfinite(value) or value <= 0:
        raise InvalidParameter(f"{name} must be a finite value > 0, got {value}")
    return value


def _non_negative_levels(name: str, values, size: int) -> Tuple[float, ...]:
    values = tuple(float(v) for v in values)
    if len(values) != size:
        raise InvalidParameter(f"{name} must have {size} entries, got {len(values)}")
    for v in values:
        if not np.isfinite(v) or v < 0:
            raise InvalidParameter(f"{name} must be finite and >= 0, got {values}")
    return values


def _normalize_method(method: str) -> str:
    for known in INTEGRATION_METHODS:
        if str(method).lower() == known.lower():
            return known
    raise InvalidParameter(
        f"Unknown integration method: {method!r}. Choose from {list(INTEGRATION_METHODS)}"
    )


@dataclass(frozen=True)
class ResourceSupply:
    """
    Supply of one resource.

    Attributes:
        max_supply: Level the resource relaxes to without consumption (g > 0)
        relaxation_time: Time constant of the resupply (tau > 0)
    """
    max_supply: float
    relaxation_time: float

    def __post_init__(self):
        object.__setattr__(self, 'max_supply', _positive('max_supply', self.max_supply))
        object.__setattr__(self, 'relaxation_time',
                           _positive('relaxation_time', self.relaxation_time))


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable description of one simulation run.

    Lists are converted to tuples and the interaction law is parsed from
    its name, so a config can be built straight from YAML data. Use
    replace() to derive a modified copy; the original is never changed.

    Attributes:
        species: One or two SpeciesParameters
        resources: Exactly two ResourceSupply entries, shared by all species
        law: Interaction law applied to every species
        t_max: Time horizon
        dt: Spacing of the output grid, also the Euler step
        method: 'euler' or a scipy.integrate.solve_ivp method name
        rtol, atol: Tolerances of the adaptive solvers
        initial_populations: Initial N_i (default: 1.0 per species)
        initial_resources: Initial (R_1, R_2) (default: the supply point)

    Example:
        >>> config = SimulationConfig(
        ...     species=[SpeciesParameters(0.5, 30, 40, 0.6, 0.1)],
        ...     resources=[ResourceSupply(10, 10), ResourceSupply(40, 10)],
        ...     law='InteractiveEssential',
        ...     initial_populations=[10.0],
        ...     initial_resources=[30.0, 60.0],
        ... )
    """
    species: Tuple[SpeciesParameters, ...]
    resources: Tuple[ResourceSupply, ResourceSupply]
    law: InteractionLaw
    t_max: float = 1000.0
    dt: float = 1.0
    method: str = 'LSODA'
    rtol: float = 1e-8
    atol: float = 1e-10
    initial_populations: Optional[Tuple[float, ...]] = None
    initial_resources: Optional[Tuple[float, float]] = None

    def __post_init__(self):
        species = tuple(self.species)
        if len(species) not in (1, 2):
            raise InvalidParameter(f"Expected 1 or 2 species, got {len(species)}")
        if not all(isinstance(s, SpeciesParameters) for s in species):
            raise InvalidParameter("species entries must be SpeciesParameters")
        object.__setattr__(self, 'species', species)

        resources = tuple(self.resources)
        if len(resources) != 2:
            raise InvalidParameter(f"Expected 2 resources, got {len(resources)}")
        if not all(isinstance(r, ResourceSupply) for r in resources):
            raise InvalidParameter("resources entries must be ResourceSupply")
        object.__setattr__(self, 'resources', resources)

        object.__setattr__(self, 'law', InteractionLaw.parse(self.law))
        object.__setattr__(self, 't_max', _positive('t_max', self.t_max))
        object.__setattr__(self, 'dt', _positive('dt', self.dt))
        object.__setattr__(self, 'method', _normalize_method(self.method))
        object.__setattr__(self, 'rtol', _positive('rtol', self.rtol))
        object.__setattr__(self, 'atol', _positive('atol', self.atol))

        if self.initial_populations is not None:
            object.__setattr__(self, 'initial_populations', _non_negative_levels(
                'initial_populations', self.initial_populations, len(species)))
        if self.initial_resources is not None:
            object.__setattr__(self, 'initial_resources', _non_negative_levels(
                'initial_resources', self.initial_resources, 2))

    @property
    def n_species(self) -> int:
        return len(self.species)

    @property
    def state_size(self) -> int:
        return self.n_species + 2

    @property
    def supply_point(self) -> np.ndarray:
        return np.array([r.max_supply for r in self.resources])

    def initial_state(self) -> np.ndarray:
        """Initial state vector (N_1[, N_2], R_1, R_2)."""
        populations = self.initial_populations
        if populations is None:
            populations = (1.0,) * self.n_species
        resources = self.initial_resources
        if resources is None:
            resources = tuple(self.supply_point)
        return np.array(populations + tuple(resources), dtype=float)

    def time_grid(self) -> np.ndarray:
        """Output times from 0 to t_max, spaced by dt (rounded to fit t_max)."""
        n_steps = max(int(round(self.t_max / self.dt)), 1)
        return np.linspace(0.0, self.t_max, n_steps + 1)

    def replace(self, **changes) -> 'SimulationConfig':
        """Validated copy with some fields changed."""
        return dataclasses.replace(self, **changes)


def derivative(t: float, state: np.ndarray, config: SimulationConfig) -> np.ndarray:
    """
    Time derivative of the state vector.

    Resource levels are clamped at zero inside the growth laws only; the
    resupply term sees the raw value and pushes a negative level back up.
    Populations are not clamped: N * (f - m) extrapolates linearly through
    zero and keeps N = 0 a fixed point.

    Args:
        t: Time (unused, the system is autonomous)
        state: State vector (N_1[, N_2], R_1, R_2)
        config: Simulation configuration

    Returns:
        Array of the same shape as state with the rates of change

    Raises:
        ValueError: If state does not match the number of species
        IntegrationFailure: If state contains NaN or infinite values
    """
    state = np.asarray(state, dtype=float)
    if state.shape != (config.state_size,):
        raise ValueError(
            f"State must have shape ({config.state_size},), got {state.shape}"
        )
    if not np.all(np.isfinite(state)):
        raise IntegrationFailure(f"Non-finite state at t={t}: {state}")

    n = config.n_species
    R1, R2 = state[n], state[n + 1]

    rates = np.empty(config.state_size)
    consumption = np.zeros(2)
    for i, species in enumerate(config.species):
        growth, share1, share2 = evaluate_growth(R1, R2, species, config.law)
        rates[i] = state[i] * (growth - species.mortality_rate)
        uptake = state[i] * growth
        consumption[0] += uptake * share1
        consumption[1] += uptake * share2

    for j, supply in enumerate(config.resources):
        resupply = (supply.max_supply - state[n + j]) / supply.relaxation_time
        rates[n + j] = resupply - consumption[j]

    return rates


def make_ode(config: SimulationConfig) -> Callable[[float, np.ndarray], np.ndarray]:
    """
    Bind a configuration into an f(t, y) callable for scipy solvers.

    Example:
        >>> from scipy.integrate import solve_ivp
        >>> sol = solve_ivp(make_ode(config), [0, 100], config.initial_state())
    """
    return partial(derivative, config=config)
