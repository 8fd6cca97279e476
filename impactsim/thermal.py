from __future__ import annotations
import logging
from math import pi, sqrt

from .constants import J_PER_TON_TNT, FIRST_DEGREE_BURN, SECOND_DEGREE_BURN, THIRD_DEGREE_BURN
from .models import Fireball, ThermalResult

logger = logging.getLogger(__name__)

FIREBALL_TEMPERATURE_K = 6000.0
RADIANT_FRACTION = 0.35


def fireball(energy_J: float) -> Fireball:
    """Empirical fireball scaling in tons of TNT."""
    w = energy_J / J_PER_TON_TNT
    return Fireball(
        radius_m=180.0 * w ** 0.4,
        duration_s=0.4 * w ** 0.25,
        temperature_K=FIREBALL_TEMPERATURE_K,
        radiant_energy_J=energy_J * RADIANT_FRACTION,
    )


def burn_radius_m(fb: Fireball, threshold_J_per_cm2: float) -> float:
    """
    Radius where fluence falls to the threshold, assuming 1/r^2 decay from the
    fireball surface. Never inside the fireball itself.
    """
    if fb.radius_m <= 0.0:
        return 0.0
    surface_fluence = fb.radiant_energy_J / (4.0 * pi * fb.radius_m**2)
    threshold_Jpm2 = threshold_J_per_cm2 * 10_000.0
    r = fb.radius_m * sqrt(surface_fluence / threshold_Jpm2)
    return max(r, fb.radius_m)


def thermal_radiation(energy_J: float, final_diameter_m: float) -> ThermalResult:
    fb = fireball(energy_J)
    r1 = burn_radius_m(fb, FIRST_DEGREE_BURN)
    r2 = burn_radius_m(fb, SECOND_DEGREE_BURN)
    r3 = burn_radius_m(fb, THIRD_DEGREE_BURN)

    # Small fireballs floor every ring at the fireball radius.
    if r1 <= r2 or r2 <= r3:
        logger.warning("[thermal.ordering] burn radii not strictly ordered: 1st=%.1f 2nd=%.1f 3rd=%.1f "
                       "(fireball_m=%.1f projectile_m=%.1f)", r1, r2, r3, fb.radius_m, final_diameter_m)

    return ThermalResult(
        radius_1deg_m=r1,
        radius_2deg_m=r2,
        radius_3deg_m=r3,
        duration_s=fb.duration_s,
        fireball=fb,
    )
