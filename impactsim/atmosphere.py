from __future__ import annotations
import logging
from math import sqrt, log, pi

from .constants import ATMOSPHERE_SCALE_HEIGHT, AIR_DENSITY_SEA_LEVEL, MATERIAL_STRENGTHS
from .models import AtmosphericOutcome

logger = logging.getLogger(__name__)

MIN_AIRBURST_ALTITUDE = 10_000.0  # m
MAX_MASS_LOSS = 0.9
MIN_VELOCITY_RETENTION = 0.5


def survival_diameter_m(velocity_kms: float, density_kgpm3: float) -> float:
    """Minimum diameter (m) that reaches the ground intact (Chyba et al. 1993 style)."""
    strength_factor = sqrt(density_kgpm3 / 3000.0)
    velocity_factor = sqrt(velocity_kms / 20.0)
    return 50.0 * strength_factor / velocity_factor


def material_strength_pa(density_kgpm3: float) -> float:
    for upper, strength in MATERIAL_STRENGTHS:
        if density_kgpm3 < upper:
            return strength
    return MATERIAL_STRENGTHS[-1][1]


def airburst_altitude_m(velocity_kms: float, density_kgpm3: float) -> float:
    """Altitude where sea-level dynamic pressure scaled by the atmosphere matches strength."""
    v = velocity_kms * 1000.0
    dynamic_pressure = 0.5 * AIR_DENSITY_SEA_LEVEL * v * v
    altitude = ATMOSPHERE_SCALE_HEIGHT * log(dynamic_pressure / material_strength_pa(density_kgpm3))
    return max(altitude, MIN_AIRBURST_ALTITUDE)


def mass_loss_ratio(diameter_m: float, velocity_kms: float, density_kgpm3: float) -> float:
    """Ablation + fragmentation loss; weaker, faster, smaller bodies lose more."""
    surface_to_volume = 6.0 / diameter_m
    velocity_factor = (velocity_kms / 20.0) ** 2
    strength_factor = 3000.0 / density_kgpm3
    return min(0.1 * surface_to_volume * velocity_factor * strength_factor, MAX_MASS_LOSS)


def enter(diameter_m: float, velocity_kms: float, angle_deg: float,
          density_kgpm3: float, mass_kg: float) -> AtmosphericOutcome:
    """
    Atmospheric passage. Bodies smaller than the survival diameter airburst;
    the rest reach the ground with reduced mass, velocity and diameter.
    """
    d_survive = survival_diameter_m(velocity_kms, density_kgpm3)
    if diameter_m < d_survive:
        v = velocity_kms * 1000.0
        zb = airburst_altitude_m(velocity_kms, density_kgpm3)
        logger.info("[entry.airburst] diameter_m=%.2f survival_m=%.2f altitude_m=%.0f angle_deg=%.1f",
                    diameter_m, d_survive, zb, angle_deg)
        return AtmosphericOutcome(
            survives=False,
            airburst_altitude_m=zb,
            airburst_energy_J=0.5 * mass_kg * v * v,
        )

    loss = mass_loss_ratio(diameter_m, velocity_kms, density_kgpm3)
    final_mass = mass_kg * (1.0 - loss)
    final_velocity = velocity_kms * max(1.0 - 0.3 * loss, MIN_VELOCITY_RETENTION)
    final_diameter = (final_mass / density_kgpm3 * 6.0 / pi) ** (1.0 / 3.0)
    logger.info("[entry.surface] diameter_m=%.2f survival_m=%.2f mass_loss=%.4f final_v_kms=%.3f",
                diameter_m, d_survive, loss, final_velocity)
    return AtmosphericOutcome(
        survives=True,
        final_velocity_kms=final_velocity,
        final_mass_kg=final_mass,
        final_diameter_m=final_diameter,
    )
