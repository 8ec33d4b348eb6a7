"""
Growth laws for consumers of two resources.

A species' per-capita growth rate depends on the availability of two
resources through Michaelis-Menten saturation curves. How the two resources
combine is selected by an InteractionLaw. Each law also splits the realized
growth into the fractions drawn from resource 1 and resource 2 (the
consumption shares), which always sum to one.

All functions here are pure: they accept scalars or numpy arrays and never
mutate their inputs, so they can be called from an ODE integrator and from
dense grid sweeps alike.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Tuple, Union

import numpy as np
from scipy.optimize import brentq

from .exceptions import InvalidParameter, UnknownInteractionLaw


ArrayLike = Union[float, np.ndarray]

# Consumption split of the InteractiveEssential law (resource 1, resource 2)
INTERACTIVE_ESSENTIAL_SHARES = (0.2, 0.8)

# Interaction strength of the cross term R1*R2/scale
COMPLEMENTARY_SCALE = 10.0
ANTAGONISTIC_SCALE = 80.0

# Share of resource 1 when R1 + R2 == 0 and the ratio split is 0/0
DEGENERATE_SHARE = 0.5


class InteractionLaw(Enum):
    """How two resources combine into a single growth rate."""
    ESSENTIAL = 'essential'
    INTERACTIVE_ESSENTIAL = 'interactive_essential'
    PERFECTLY_SUBSTITUTIVE = 'perfectly_substitutive'
    COMPLEMENTARY = 'complementary'
    ANTAGONISTIC = 'antagonistic'

    @classmethod
    def parse(cls, value) -> 'InteractionLaw':
        """
        Convert user input to an InteractionLaw.

        Accepts a member, its value ('interactive_essential'), its name
        ('INTERACTIVE_ESSENTIAL') or the CamelCase form ('InteractiveEssential').
        Matching ignores case; spaces and hyphens count as underscores.

        Raises:
            UnknownInteractionLaw: If the input does not name a defined law
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = re.sub(r'(?<=[a-z0-9])(?=[A-Z])', '_', value.strip())
            key = re.sub(r'[\s\-]+', '_', key).lower()
            for law in cls:
                if law.value == key:
                    return law
        raise UnknownInteractionLaw(
            f"Unknown interaction law: {value!r}. Choose from {[law.value for law in cls]}"
        )


def _check_finite(name: str, value: float) -> float:
    value = float(value)
    if not np.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value}")
    return value


def _check_positive(name: str, value: float) -> float:
    value = _check_finite(name, value)
    if value <= 0:
        raise InvalidParameter(f"{name} must be > 0, got {value}")
    return value


@dataclass(frozen=True)
class SpeciesParameters:
    """
    Parameters of one consumer species.

    Attributes:
        max_growth_rate: Saturating per-capita growth rate mu (> 0)
        half_saturation_1: Level of resource 1 giving half-saturated uptake (> 0)
        half_saturation_2: Level of resource 2 giving half-saturated uptake (> 0)
        preference_a: Fixed share of consumption drawn from resource 1,
                      used only by the Essential law (in [0, 1])
        mortality_rate: Per-capita death rate (>= 0)
        name: Optional label used in reports
    """
    max_growth_rate: float
    half_saturation_1: float
    half_saturation_2: float
    preference_a: float = 0.5
    mortality_rate: float = 0.0
    name: str = ''

    def __post_init__(self):
        object.__setattr__(self, 'max_growth_rate',
                           _check_positive('max_growth_rate', self.max_growth_rate))
        object.__setattr__(self, 'half_saturation_1',
                           _check_positive('half_saturation_1', self.half_saturation_1))
        object.__setattr__(self, 'half_saturation_2',
                           _check_positive('half_saturation_2', self.half_saturation_2))

        preference = _check_finite('preference_a', self.preference_a)
        if not 0.0 <= preference <= 1.0:
            raise InvalidParameter(f"preference_a must lie in [0, 1], got {preference}")
        object.__setattr__(self, 'preference_a', preference)

        mortality = _check_finite('mortality_rate', self.mortality_rate)
        if mortality < 0:
            raise InvalidParameter(f"mortality_rate must be >= 0, got {mortality}")
        object.__setattr__(self, 'mortality_rate', mortality)

    @property
    def half_saturation(self) -> Tuple[float, float]:
        return (self.half_saturation_1, self.half_saturation_2)


# =============================================================================
# Growth laws
# =============================================================================

def _saturation(resource: np.ndarray, half_saturation: float) -> np.ndarray:
    """Michaelis-Menten availability R / (R + K), in [0, 1)."""
    return resource / (resource + half_saturation)


def _ratio_shares(R1: np.ndarray, R2: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Split consumption in proportion to resource levels, 50/50 when both are zero."""
    # Scaled by the larger level so R1 + R2 cannot overflow
    scale = np.maximum(R1, R2)
    with np.errstate(invalid='ignore', divide='ignore'):
        r1, r2 = R1 / scale, R2 / scale
        share1 = np.where(scale > 0, r1 / (r1 + r2), DEGENERATE_SHARE)
    return share1, 1.0 - share1


def _saturating_sum(effective: np.ndarray, params: SpeciesParameters) -> np.ndarray:
    """
    mu * E / (E + K1 + K2) for an effective combined resource E >= 0.

    Evaluated as mu / (1 + K/E), which is 0 at E = 0 and mu at E = inf.
    """
    K = params.half_saturation_1 + params.half_saturation_2
    with np.errstate(divide='ignore'):
        return np.where(effective > 0,
                        params.max_growth_rate / (1.0 + K / effective), 0.0)


def _essential(R1, R2, params):
    rate = params.max_growth_rate * np.minimum(
        _saturation(R1, params.half_saturation_1),
        _saturation(R2, params.half_saturation_2),
    )
    share1 = np.full_like(rate, params.preference_a)
    return rate, share1, 1.0 - share1


def _interactive_essential(R1, R2, params):
    rate = (params.max_growth_rate
            * _saturation(R1, params.half_saturation_1)
            * _saturation(R2, params.half_saturation_2))
    share1 = np.full_like(rate, INTERACTIVE_ESSENTIAL_SHARES[0])
    share2 = np.full_like(rate, INTERACTIVE_ESSENTIAL_SHARES[1])
    return rate, share1, share2


def _perfectly_substitutive(R1, R2, params):
    with np.errstate(over='ignore'):
        effective = R1 + R2
    rate = _saturating_sum(effective, params)
    return (rate,) + _ratio_shares(R1, R2)


def _complementary(R1, R2, params):
    # Huge levels overflow to inf, which saturates to mu
    with np.errstate(over='ignore'):
        effective = R1 + R2 + R1 * R2 / COMPLEMENTARY_SCALE
    rate = _saturating_sum(effective, params)
    return (rate,) + _ratio_shares(R1, R2)


def _antagonistic(R1, R2, params):
    # The cross term outgrows R1 + R2 once both resources exceed 160.
    # fmax also maps the inf - inf of overflowing levels to 0.
    with np.errstate(over='ignore', invalid='ignore'):
        effective = np.fmax(R1 + R2 - R1 * R2 / ANTAGONISTIC_SCALE, 0.0)
    rate = _saturating_sum(effective, params)
    return (rate,) + _ratio_shares(R1, R2)


GrowthLaw = Callable[[np.ndarray, np.ndarray, SpeciesParameters],
                     Tuple[np.ndarray, np.ndarray, np.ndarray]]

growth_law_registry: Dict[InteractionLaw, GrowthLaw] = {
    InteractionLaw.ESSENTIAL: _essential,
    InteractionLaw.INTERACTIVE_ESSENTIAL: _interactive_essential,
    InteractionLaw.PERFECTLY_SUBSTITUTIVE: _perfectly_substitutive,
    InteractionLaw.COMPLEMENTARY: _complementary,
    InteractionLaw.ANTAGONISTIC: _antagonistic,
}


def _as_output(value: np.ndarray) -> ArrayLike:
    value = np.asarray(value, dtype=float)
    return float(value) if value.ndim == 0 else value


def evaluate_growth(R1: ArrayLike, R2: ArrayLike, params: SpeciesParameters,
                    law) -> Tuple[ArrayLike, ArrayLike, ArrayLike]:
    """
    Per-capita growth rate and consumption split of one species.

    Negative resource levels are treated as zero. When R1 + R2 == 0 the
    laws that split consumption by resource ratio fall back to 50/50.

    Args:
        R1: Level of resource 1 (scalar or array)
        R2: Level of resource 2 (scalar or array, broadcastable with R1)
        params: Species parameters
        law: InteractionLaw, or a string naming one

    Returns:
        (growth_rate, share1, share2) with share1 + share2 == 1. Scalars
        for scalar input, arrays of the broadcast shape otherwise.

    Raises:
        UnknownInteractionLaw: If law does not name a defined law

    Example:
        >>> params = SpeciesParameters(0.5, 30.0, 40.0, mortality_rate=0.1)
        >>> evaluate_growth(30.0, 40.0, params, 'essential')
        (0.25, 0.5, 0.5)
    """
    law = InteractionLaw.parse(law)
    R1 = np.maximum(np.asarray(R1, dtype=float), 0.0)
    R2 = np.maximum(np.asarray(R2, dtype=float), 0.0)
    R1, R2 = np.broadcast_arrays(R1, R2)

    rate, share1, share2 = growth_law_registry[law](R1, R2, params)
    return _as_output(rate), _as_output(share1), _as_output(share2)


# =============================================================================
# Resource-space analysis
# =============================================================================

def growth_surface(r1_values: np.ndarray, r2_values: np.ndarray,
                   params: SpeciesParameters, law) -> Tuple[np.ndarray, ...]:
    """
    Evaluate a growth law over a 2-D grid of resource levels.

    Args:
        r1_values: 1-D array of resource 1 levels (grid columns)
        r2_values: 1-D array of resource 2 levels (grid rows)
        params: Species parameters
        law: InteractionLaw or its name

    Returns:
        R1_grid, R2_grid, rate, share1, share2, each of shape
        (len(r2_values), len(r1_values))

    Example:
        >>> r = np.linspace(0, 100, 51)
        >>> R1, R2, rate, s1, s2 = growth_surface(r, r, params, 'complementary')
    """
    R1_grid, R2_grid = np.meshgrid(np.asarray(r1_values, dtype=float),
                                   np.asarray(r2_values, dtype=float))
    rate, share1, share2 = evaluate_growth(R1_grid, R2_grid, params, law)
    return R1_grid, R2_grid, rate, share1, share2


def zero_net_growth_isocline(params: SpeciesParameters, law, r2_values: np.ndarray,
                             r1_max: float = 1e4) -> np.ndarray:
    """
    Resource 1 level on the zero net growth isocline for each resource 2 level.

    For every R2 this finds the R1 in [0, r1_max] where the growth rate
    equals the mortality rate. Net growth may cross zero in either
    direction: under the antagonistic law with R2 above the interaction
    scale, growth falls as R1 rises.

    Args:
        params: Species parameters
        law: InteractionLaw or its name
        r2_values: 1-D array of resource 2 levels
        r1_max: Upper end of the search interval for R1

    Returns:
        Array of R1 values, NaN where net growth has the same sign at
        R1 = 0 and R1 = r1_max, so no crossing is bracketed.

    Raises:
        InvalidParameter: If r2_values is not one-dimensional
    """
    law = InteractionLaw.parse(law)
    r2_values = np.atleast_1d(np.asarray(r2_values, dtype=float))
    if r2_values.ndim != 1:
        raise InvalidParameter(
            f"r2_values must be one-dimensional, got shape {r2_values.shape}"
        )
    isocline = np.full(r2_values.shape, np.nan)

    for k, r2 in enumerate(r2_values):
        def net_growth(r1):
            return evaluate_growth(r1, r2, params, law)[0] - params.mortality_rate

        low, high = net_growth(0.0), net_growth(r1_max)
        if low == 0.0:
            isocline[k] = 0.0
        elif np.sign(low) != np.sign(high):
            isocline[k] = brentq(net_growth, 0.0, r1_max)

    return isocline


def break_even_concentrations(params: SpeciesParameters) -> Tuple[float, float]:
    """
    Tilman's R* for each resource when the other one is saturating.

    R*_j = m * K_j / (mu - m). Infinite when mu <= m, since the species
    cannot persist on any resource level.
    """
    mu, m = params.max_growth_rate, params.mortality_rate
    if mu <= m:
        return (np.inf, np.inf)
    return (m * params.half_saturation_1 / (mu - m),
            m * params.half_saturation_2 / (mu - m))
