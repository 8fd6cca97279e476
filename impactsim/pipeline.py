from __future__ import annotations
import asyncio
import logging
from math import sin, cos, radians

from .atmosphere import enter
from .blast import blast_wave
from .constants import J_PER_TON_TNT
from .crater import form_crater
from .models import (
    ImpactParameters, ImpactResult, KinematicState, GroundEffects, Phase2Effects,
)
from .seismic import seismic_effects
from .thermal import thermal_radiation
from .tsunami import OceanClassifier, tsunami_effects

logger = logging.getLogger(__name__)

PRESETS = {
    "tunguska": {"diameter_m": 60.0, "velocity_kms": 27.0, "angle_deg": 30.0, "composition": "rock",
                 "latitude": 60.8858, "longitude": 101.8942},
    "chelyabinsk": {"diameter_m": 20.0, "velocity_kms": 19.0, "angle_deg": 18.0, "composition": "rock",
                    "latitude": 55.1540, "longitude": 61.4291},
    "chicxulub": {"diameter_m": 10000.0, "velocity_kms": 20.0, "angle_deg": 45.0, "composition": "rock",
                  "latitude": 21.4, "longitude": -89.5167},
}


def preset_parameters(name: str) -> ImpactParameters:
    """Historical scenario by name; raises KeyError for unknown names."""
    key = name.lower()
    if key not in PRESETS:
        raise KeyError(f"Unknown preset '{name}'.")
    return ImpactParameters(**PRESETS[key])


def energy_to_tnt_tons(energy_J: float) -> float:
    return energy_J / J_PER_TON_TNT


def angle_effects(angle_deg: float) -> dict:
    a = radians(angle_deg)
    return {
        "efficiency": sin(a),
        "asymmetry": 1.0 - cos(a),
        "ejecta_direction": "downrange" if angle_deg < 45.0 else "symmetric",
    }


class ImpactPipeline:
    """
    Entry -> crater + blast + thermal -> (optional) seismic + tsunami.
    Stateless apart from the injected ocean classifier; each call builds a fresh result.
    """

    def __init__(self, classifier: OceanClassifier | None = None):
        self.classifier = classifier

    async def calculate_impact(self, parameters: ImpactParameters, *, phase2_enabled: bool = True) -> ImpactResult:
        p = parameters
        density = p.density
        kin = KinematicState.from_sphere(p.diameter_m, density, p.velocity_kms)
        logger.info("[impact.start] d_m=%.1f v_kms=%.2f angle=%.1f composition=%s E_J=%.3e (%.3e t TNT)",
                    p.diameter_m, p.velocity_kms, p.angle_deg, p.composition.value,
                    kin.kinetic_energy_J, energy_to_tnt_tons(kin.kinetic_energy_J))

        entry = enter(p.diameter_m, p.velocity_kms, p.angle_deg, density, kin.mass_kg)
        if not entry.survives:
            return ImpactResult(parameters=p, density_kgpm3=density, kinematics=kin, entry=entry)

        # ground stages see the post-entry body only
        E = 0.5 * entry.final_mass_kg * (entry.final_velocity_kms * 1000.0) ** 2
        logger.debug("[impact.final] m_kg=%.3e v_kms=%.3f E_J=%.3e",
                     entry.final_mass_kg, entry.final_velocity_kms, E)

        ground = GroundEffects(
            energy_J=E,
            crater=form_crater(entry.final_diameter_m, entry.final_velocity_kms, p.angle_deg, density, E),
            blast=blast_wave(E, p.angle_deg),
            thermal=thermal_radiation(E, entry.final_diameter_m),
        )

        phase2 = None
        if phase2_enabled:
            location = p.location
            seismic = seismic_effects(E, location, ground.crater.diameter_m)
            tsunami = await tsunami_effects(E, location, ground.crater.diameter_m, classifier=self.classifier)
            phase2 = Phase2Effects(seismic=seismic, tsunami=tsunami)
            logger.info("[impact.phase2] M=%.2f significant=%s zones=%d tsunami=%s coasts=%d",
                        seismic.magnitude, seismic.significant, len(seismic.zones),
                        tsunami.generated, len(tsunami.coastal_effects))

        return ImpactResult(parameters=p, density_kgpm3=density, kinematics=kin, entry=entry,
                            ground=ground, phase2=phase2)


async def calculate_impact(parameters: ImpactParameters, *, phase2_enabled: bool = True,
                           classifier: OceanClassifier | None = None) -> ImpactResult:
    return await ImpactPipeline(classifier).calculate_impact(parameters, phase2_enabled=phase2_enabled)


def calculate_impact_sync(parameters: ImpactParameters, *, phase2_enabled: bool = True,
                          classifier: OceanClassifier | None = None) -> ImpactResult:
    """Blocking wrapper for callers without an event loop."""
    return asyncio.run(calculate_impact(parameters, phase2_enabled=phase2_enabled, classifier=classifier))
