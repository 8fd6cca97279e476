from __future__ import annotations
from math import pi, sin, radians

from .constants import EARTH_CRUST_DENSITY, EARTH_GRAVITY, ROCK_MELTING_ENERGY
from .models import CraterResult, CraterShape, EjectaZone

K_CRATER_ROCK = 1.161             # scaling constant, competent rock
D_SIMPLE_COMPLEX_M = 2000.0       # simple -> complex transition
MELT_FRACTION = 0.01


# ---------- Crater scaling (Collins et al. 2005, Melosh 1989) ----------
def crater_diameter_m(energy_J: float, projectile_mass_kg: float,
                      rho_t: float = EARTH_CRUST_DENSITY, g: float = EARTH_GRAVITY) -> float:
    """D = K * (E/(rho_t g))^(1/4) * L^(-1/4), L = (m/rho_t)^(1/3)."""
    if energy_J <= 0.0 or projectile_mass_kg <= 0.0:
        return 0.0
    L = (projectile_mass_kg / rho_t) ** (1.0 / 3.0)
    return K_CRATER_ROCK * (energy_J / (rho_t * g)) ** 0.25 * L ** -0.25


def crater_depth_m(diameter_m: float) -> float:
    return diameter_m * (0.2 if diameter_m < D_SIMPLE_COMPLEX_M else 0.1)


def crater_volume_m3(diameter_m: float, depth_m: float) -> float:
    """Spherical cap: pi h^2 (3r - h) / 3."""
    r = diameter_m / 2.0
    return pi * depth_m**2 * (3.0 * r - depth_m) / 3.0


def rim_height_m(diameter_m: float) -> float:
    return diameter_m * (0.07 if diameter_m < D_SIMPLE_COMPLEX_M else 0.03)


def ejecta_range_m(diameter_m: float, velocity_kms: float) -> float:
    return 2.5 * diameter_m * min(velocity_kms / 20.0, 2.0)


def crater_shape(angle_deg: float) -> CraterShape:
    if angle_deg >= 60.0:
        return CraterShape.CIRCULAR
    if angle_deg >= 30.0:
        return CraterShape.ELLIPTICAL
    return CraterShape.ELONGATED


def ejecta_distribution(diameter_m: float, angle_deg: float, velocity_kms: float) -> tuple[EjectaZone, ...]:
    pattern = "asymmetric" if angle_deg < 45.0 else "symmetric"
    zones = (
        (diameter_m, 100.0, "Continuous ejecta"),
        (diameter_m * 2.0, 10.0, "Discontinuous ejecta"),
        (ejecta_range_m(diameter_m, velocity_kms), 1.0, "Secondary cratering"),
    )
    return tuple(EjectaZone(range_m=r, thickness_m=t, description=d, pattern=pattern) for r, t, d in zones)


def melt_volume_m3(energy_J: float) -> float:
    return energy_J * MELT_FRACTION / (EARTH_CRUST_DENSITY * ROCK_MELTING_ENERGY)


def form_crater(final_diameter_m: float, final_velocity_kms: float, angle_deg: float,
                density_kgpm3: float, energy_J: float) -> CraterResult:
    """Crater geometry from the post-entry projectile; oblique impacts couple as sin(angle)."""
    efficiency = sin(radians(angle_deg))
    effective_energy = energy_J * efficiency

    mass = (pi / 6.0) * density_kgpm3 * final_diameter_m**3
    D = crater_diameter_m(effective_energy, mass)
    depth = crater_depth_m(D)

    return CraterResult(
        diameter_m=D,
        depth_m=depth,
        volume_m3=crater_volume_m3(D, depth),
        rim_height_m=rim_height_m(D),
        ejecta_range_m=ejecta_range_m(D, final_velocity_kms),
        efficiency=efficiency,
        shape=crater_shape(angle_deg),
        melt_volume_m3=melt_volume_m3(effective_energy),
        ejecta_zones=ejecta_distribution(D, angle_deg, final_velocity_kms),
    )
