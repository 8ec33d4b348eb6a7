"""
Forward integration of the consumer-resource system.

Adaptive methods are delegated to scipy.integrate.solve_ivp. The 'euler'
method is a fixed-step explicit Euler loop over the output grid, which
gives step-for-step reproducible trajectories.
"""

import warnings
from typing import Iterator, Optional, Tuple

import numpy as np
from scipy.integrate import solve_ivp

from .dynamics import SimulationConfig, _normalize_method, make_ode
from .exceptions import IntegrationFailure, InvalidParameter


class Trajectory:
    """
    Sampled solution of one simulation run.

    Attributes:
        t: Sample times, shape (n_times,)
        y: States, shape (n_times, n_species + 2)
        n_species: Number of consumer species
        method: Integration method that produced the samples
    """

    def __init__(self, t: np.ndarray, y: np.ndarray, n_species: int, method: str):
        self.t = np.asarray(t, dtype=float)
        self.y = np.asarray(y, dtype=float)
        self.n_species = n_species
        self.method = method

    @property
    def populations(self) -> np.ndarray:
        """Populations over time, shape (n_times, n_species)."""
        return self.y[:, :self.n_species]

    @property
    def resources(self) -> np.ndarray:
        """Resource levels over time, shape (n_times, 2)."""
        return self.y[:, self.n_species:]

    @property
    def final_state(self) -> np.ndarray:
        return self.y[-1].copy()

    @property
    def final_time(self) -> float:
        return float(self.t[-1])

    def __len__(self) -> int:
        return len(self.t)

    def __iter__(self) -> Iterator[Tuple[float, np.ndarray]]:
        for time, state in zip(self.t, self.y):
            yield float(time), state

    def __repr__(self) -> str:
        return (f"Trajectory(n_times={len(self)}, n_species={self.n_species}, "
                f"method='{self.method}', t_final={self.final_time:g})")


def _integrate_euler(ode, t_eval: np.ndarray, y0: np.ndarray) -> np.ndarray:
    """Explicit Euler, one step per interval of t_eval."""
    y = np.empty((len(t_eval), len(y0)))
    y[0] = y0
    for k in range(1, len(t_eval)):
        step = t_eval[k] - t_eval[k - 1]
        y[k] = y[k - 1] + step * ode(t_eval[k - 1], y[k - 1])
        if not np.all(np.isfinite(y[k])):
            raise IntegrationFailure(
                f"Euler step to t={t_eval[k]} produced a non-finite state; reduce dt"
            )

    if np.any(y < 0):
        warnings.warn("Euler integration produced negative populations or resources; "
                      "consider a smaller dt")
    return y


def integrate(config: SimulationConfig,
              initial_state: Optional[np.ndarray] = None,
              t_eval: Optional[np.ndarray] = None,
              method: Optional[str] = None,
              verbose: bool = False) -> Trajectory:
    """
    Integrate the system forward in time.

    Args:
        config: Simulation configuration
        initial_state: Starting state (default: config.initial_state())
        t_eval: Increasing output times (default: config.time_grid())
        method: Overrides config.method
        verbose: Whether to print progress messages

    Returns:
        Trajectory sampled at t_eval

    Raises:
        InvalidParameter: If the initial state or time grid is malformed
        IntegrationFailure: If the solver fails or the state becomes non-finite

    Example:
        >>> from ResourceCompetition.config import get_scenario
        >>> config = get_scenario('single_species_collapse')
        >>> traj = integrate(config)
        >>> traj.final_state  # approximately [0, 10, 40]
    """
    y0 = config.initial_state() if initial_state is None else np.asarray(initial_state, dtype=float)
    if y0.shape != (config.state_size,):
        raise InvalidParameter(
            f"initial_state must have shape ({config.state_size},), got {y0.shape}"
        )
    if not np.all(np.isfinite(y0)):
        raise InvalidParameter(f"initial_state must be finite, got {y0}")

    t_eval = config.time_grid() if t_eval is None else np.asarray(t_eval, dtype=float)
    if t_eval.ndim != 1 or len(t_eval) < 2 or np.any(np.diff(t_eval) <= 0):
        raise InvalidParameter("t_eval must be a 1-D increasing array with at least 2 times")

    method = config.method if method is None else _normalize_method(method)
    ode = make_ode(config)

    if verbose:
        print(f"  Integrating {config.n_species}-species system ({config.law.value}) "
              f"with {method} from t={t_eval[0]:g} to t={t_eval[-1]:g}...")

    if method == 'euler':
        y = _integrate_euler(ode, t_eval, y0)
    else:
        sol = solve_ivp(
            ode,
            (t_eval[0], t_eval[-1]),
            y0,
            method=method,
            t_eval=t_eval,
            rtol=config.rtol,
            atol=config.atol,
        )
        if not sol.success:
            raise IntegrationFailure(f"{method} integration failed: {sol.message}")
        y = sol.y.T

    if verbose:
        print(f"  ✓ Final state at t={t_eval[-1]:g}: {np.array2string(y[-1], precision=4)}")

    return Trajectory(t_eval, y, config.n_species, method)
