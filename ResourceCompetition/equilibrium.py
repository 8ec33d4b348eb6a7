"""
Steady states and competition outcomes.

Equilibria are roots of the state derivative, found with
scipy.optimize.root. Starting far from an equilibrium, the root finder can
be seeded by first relaxing the system with a long forward integration.
"""

from typing import Optional, Tuple

import numpy as np
from scipy.optimize import root

from .dynamics import SimulationConfig, derivative
from .exceptions import IntegrationFailure, InvalidParameter, SteadyStateNonConvergence
from .integrate import integrate


# Populations below this level count as extinct
EXTINCTION_THRESHOLD = 0.01


def steady_state_residual(state: np.ndarray, config: SimulationConfig, t: float = 0.0) -> float:
    """Euclidean norm of the state derivative at state."""
    return float(np.linalg.norm(derivative(t, state, config)))


def find_steady_state(config: SimulationConfig,
                      initial_guess: Optional[np.ndarray] = None,
                      relax_time: Optional[float] = None,
                      method: str = 'hybr',
                      tol: float = 1e-10,
                      residual_tol: float = 1e-6,
                      verbose: bool = False) -> np.ndarray:
    """
    Find a state where every component of the derivative vanishes.

    Args:
        config: Simulation configuration
        initial_guess: Starting point (default: config.initial_state())
        relax_time: If given, integrate for this long first and start the
                    root finder from the final state
        method: Method passed to scipy.optimize.root
        tol: Solver tolerance passed to scipy.optimize.root
        residual_tol: Largest accepted derivative norm at the result, also
                      the largest accepted negative component
        verbose: Whether to print progress messages

    Returns:
        Equilibrium state (N_1[, N_2], R_1, R_2), with round-off negatives
        clipped to zero

    Raises:
        SteadyStateNonConvergence: If the solver fails, the residual is above
                                   residual_tol, or the root is not physical

    Example:
        >>> config = get_scenario('single_species_collapse')
        >>> find_steady_state(config, relax_time=500.0)
        array([ 0., 10., 40.])
    """
    guess = config.initial_state() if initial_guess is None else np.asarray(initial_guess, dtype=float)
    if guess.shape != (config.state_size,):
        raise InvalidParameter(
            f"initial_guess must have shape ({config.state_size},), got {guess.shape}"
        )

    if relax_time is not None:
        if relax_time <= 0:
            raise InvalidParameter(f"relax_time must be > 0, got {relax_time}")
        n_steps = max(int(round(relax_time / config.dt)), 1)
        t_eval = np.linspace(0.0, relax_time, n_steps + 1)
        guess = integrate(config, guess, t_eval=t_eval, verbose=verbose).final_state

    if verbose:
        print(f"  Solving for steady state from {np.array2string(guess, precision=4)}...")

    try:
        sol = root(lambda y: derivative(0.0, y, config), guess, method=method, tol=tol)
    except IntegrationFailure as e:
        raise SteadyStateNonConvergence(f"Root finding left the finite state space: {e}") from e

    if not sol.success:
        raise SteadyStateNonConvergence(f"Root finding failed: {sol.message}")

    state = sol.x
    if np.any(state < -residual_tol):
        raise SteadyStateNonConvergence(f"Root has negative components: {state}")
    state = np.maximum(state, 0.0)

    residual = steady_state_residual(state, config)
    if residual > residual_tol:
        raise SteadyStateNonConvergence(
            f"Residual {residual:.3e} exceeds tolerance {residual_tol:.1e} at {state}"
        )

    if verbose:
        print(f"  ✓ Steady state: {np.array2string(state, precision=4)} "
              f"(residual {residual:.2e})")

    return state


def classify_species(state: np.ndarray, n_species: int,
                     threshold: float = EXTINCTION_THRESHOLD) -> Tuple[str, ...]:
    """
    Label each species 'survive' or 'extinct' from a final state.

    Args:
        state: State vector (N_1[, N_2], R_1, R_2)
        n_species: Number of species in the state
        threshold: Population below which a species counts as extinct

    Returns:
        Tuple with one label per species
    """
    state = np.asarray(state, dtype=float)
    if state.shape != (n_species + 2,):
        raise ValueError(f"State must have shape ({n_species + 2},), got {state.shape}")
    return tuple('survive' if N >= threshold else 'extinct' for N in state[:n_species])


def competition_outcome(state: np.ndarray, n_species: int,
                        threshold: float = EXTINCTION_THRESHOLD) -> str:
    """
    Summarize a final state.

    Returns:
        'coexistence' if both species survive, 'exclusion' if exactly one of
        two survives, 'persistence' if a lone species survives and
        'collapse' if no species survives
    """
    survivors = classify_species(state, n_species, threshold).count('survive')
    if survivors == 0:
        return 'collapse'
    if n_species == 1:
        return 'persistence'
    return 'coexistence' if survivors == 2 else 'exclusion'
