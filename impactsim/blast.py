from __future__ import annotations
from math import pi, sin, radians

from .constants import (
    OVERPRESSURE_LIGHT, OVERPRESSURE_MODERATE, OVERPRESSURE_HEAVY,
    OVERPRESSURE_DESTRUCTION, AUXILIARY_PRESSURES,
)
from .models import BlastResult, OverpressureRadius


def effective_energy_J(energy_J: float, angle_deg: float) -> float:
    return energy_J * sin(radians(angle_deg))


def overpressure_radius_m(energy_J: float, p_target_pa: float) -> float:
    """Sedov-Taylor style point-source scaling: R = (E / (4 pi P))^(1/3)."""
    if energy_J <= 0.0:
        return 0.0
    return max((energy_J / (4.0 * pi * p_target_pa)) ** (1.0 / 3.0), 0.0)


def blast_wave(energy_J: float, angle_deg: float) -> BlastResult:
    E = effective_energy_J(energy_J, angle_deg)
    return BlastResult(
        radius_1psi_m=overpressure_radius_m(E, OVERPRESSURE_LIGHT),
        radius_5psi_m=overpressure_radius_m(E, OVERPRESSURE_MODERATE),
        radius_10psi_m=overpressure_radius_m(E, OVERPRESSURE_HEAVY),
        radius_20psi_m=overpressure_radius_m(E, OVERPRESSURE_DESTRUCTION),
        overpressure_radii=tuple(
            OverpressureRadius(pressure_pa=p, radius_m=overpressure_radius_m(E, p))
            for p in AUXILIARY_PRESSURES
        ),
    )
