#!/usr/bin/env python3
"""
ResourceCompetition Example 3: growth laws in resource space

Evaluates each interaction law on a grid of resource levels and prints the
zero net growth isocline (ZNGI) of a species under each law.
"""

import numpy as np

from ResourceCompetition.growth import (
    InteractionLaw,
    SpeciesParameters,
    growth_surface,
    zero_net_growth_isocline,
)


def main():
    print("ResourceCompetition Example 3: growth laws")
    print("=======================================")

    params = SpeciesParameters(max_growth_rate=0.5, half_saturation_1=30.0,
                               half_saturation_2=40.0, preference_a=0.6,
                               mortality_rate=0.1)
    r = np.linspace(0.0, 100.0, 101)
    r2_samples = np.array([20.0, 40.0, 60.0, 80.0, 100.0])

    for law in InteractionLaw:
        _, _, rate, share1, _ = growth_surface(r, r, params, law)
        zngi = zero_net_growth_isocline(params, law, r2_samples)
        print(f"\n{law.value}")
        print(f"  max growth on grid: {rate.max():.4f}")
        print(f"  share of resource 1 at (50, 50): {share1[50, 50]:.3f}")
        for r2, r1 in zip(r2_samples, zngi):
            text = "no crossing" if np.isnan(r1) else f"R1={r1:.2f}"
            print(f"  ZNGI at R2={r2:5.1f}: {text}")


if __name__ == "__main__":
    main()
