#!/usr/bin/env python3
"""
ResourceCompetition Example 1: a single consumer

One species grows on two interactive-essential resources. The supply of
resource 1 cannot sustain positive net growth, so after a short initial
increase the population declines to zero and the resources relax to the
supply point (10, 40).
"""

import os
import numpy as np

from ResourceCompetition.config import load_simulation_config
from ResourceCompetition.integrate import integrate
from ResourceCompetition.equilibrium import find_steady_state, competition_outcome

config_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "configs")


def main():
    print("ResourceCompetition Example 1: a single consumer")
    print("=======================================")

    # 1. Load the configuration
    print("\n1. Loading configuration...")
    config = load_simulation_config(os.path.join(config_dir, "single_species_collapse.yaml"))

    # 2. Integrate forward with the adaptive solver and with Euler
    print("\n2. Integrating forward...")
    trajectory = integrate(config, verbose=True)
    euler = integrate(config.replace(method='euler', dt=0.5), verbose=True)

    peak = np.argmax(trajectory.populations[:, 0])
    print(f"  Peak population {trajectory.populations[peak, 0]:.3f} at t={trajectory.t[peak]:g}")
    print(f"  LSODA vs Euler final-state gap: "
          f"{np.max(np.abs(trajectory.final_state - euler.final_state)):.2e}")

    # 3. Steady state
    print("\n3. Solving for the steady state...")
    state = find_steady_state(config, relax_time=500.0, verbose=True)
    print(f"  Outcome: {competition_outcome(state, config.n_species)}")


if __name__ == "__main__":
    main()
