#!/usr/bin/env python3
"""
ResourceCompetition Example 2: competitive exclusion

Two species share two essential resources. The species with the lower
break-even concentrations (R*) draws the limiting resource below the level
its competitor needs, and the competitor goes extinct.
"""

import numpy as np

from ResourceCompetition.config import get_scenario
from ResourceCompetition.dynamics import ResourceSupply
from ResourceCompetition.growth import break_even_concentrations
from ResourceCompetition.integrate import integrate
from ResourceCompetition.equilibrium import (
    find_steady_state,
    classify_species,
    competition_outcome,
)


def main():
    print("ResourceCompetition Example 2: competitive exclusion")
    print("=======================================")

    config = get_scenario('two_species_exclusion')

    print("\n1. Break-even concentrations")
    for species in config.species:
        r1_star, r2_star = break_even_concentrations(species)
        print(f"  {species.name}: R1*={r1_star:.3f}, R2*={r2_star:.3f}")

    print("\n2. Integrating forward...")
    trajectory = integrate(config, verbose=True)
    labels = classify_species(trajectory.final_state, config.n_species)
    for species, label in zip(config.species, labels):
        print(f"  {species.name}: {label}")
    print(f"  Outcome: {competition_outcome(trajectory.final_state, config.n_species)}")

    print("\n3. Supply sweep")
    # Each run gets its own config; the scenario itself is never modified
    for supply in [5.0, 15.0, 30.0, 60.0]:
        swept = config.replace(resources=(ResourceSupply(supply, 10.0),
                                          config.resources[1]))
        state = integrate(swept).final_state
        print(f"  g1={supply:5.1f}: {competition_outcome(state, swept.n_species):12s} "
              f"N={np.array2string(state[:2], precision=3)}")

    print("\n4. Steady state")
    find_steady_state(config, relax_time=1000.0, verbose=True)


if __name__ == "__main__":
    main()
