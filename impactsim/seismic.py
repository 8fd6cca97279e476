from __future__ import annotations
import logging
from math import log10, floor, sqrt

from .constants import EARTH_CRUST_DENSITY, SEISMIC_VELOCITY, SEISMIC_EFFICIENCY, MMI_BARELY_FELT
from .geo import is_valid_location
from .models import GeoPoint, IntensityZone, SeismicResult

logger = logging.getLogger(__name__)

SIGNIFICANT_MAGNITUDE = 3.0
MIN_ZONE_RADIUS_M = 500.0
ATTENUATION_MODEL = "Boore-Atkinson"

# MMI = A + B*M - C*log10(R_km) + site
MMI_A = 2.0
MMI_B = 1.5
MMI_C = 3.5

BUILDING_CLASSES = {
    "residential": ("Residential Buildings", 1.0),
    "commercial": ("Commercial Buildings", 0.8),
    "industrial": ("Industrial Facilities", 0.6),
    "critical": ("Critical Infrastructure", 0.4),
}

WAVE_TYPES = {
    "p_wave": ("P-Wave (Primary)", 6000.0),
    "s_wave": ("S-Wave (Secondary)", 3500.0),
    "surface": ("Surface Waves", 2800.0),
}

MMI_DESCRIPTIONS = {
    12: "Extreme Destruction", 11: "Catastrophic", 10: "Disastrous", 9: "Violent",
    8: "Severe", 7: "Very Strong", 6: "Strong", 5: "Moderate",
    4: "Light", 3: "Weak", 2: "Very Weak", 1: "Not Felt",
}

MMI_COLORS = {
    12: "#FF0000", 11: "#FF2200", 10: "#FF4400", 9: "#FF6600",
    8: "#FF8800", 7: "#FFAA00", 6: "#FFCC00", 5: "#FFDD00",
    4: "#FFFF00", 3: "#CCFF33", 2: "#99FF66", 1: "#66FF99",
}


# ---------- Source ----------
def magnitude_from_energy(energy_J: float, seismic_efficiency: float = SEISMIC_EFFICIENCY) -> float:
    """Gutenberg-Richter: log10(E_s) = 1.5 M + 9.1, clamped to [0, 10]."""
    E_s = energy_J * seismic_efficiency
    if E_s <= 0.0:
        return 0.0
    M = (log10(E_s) - 9.1) / 1.5
    return max(0.0, min(M, 10.0))


def site_amplification(location: GeoPoint) -> float:
    # rock site everywhere until a geology layer exists
    return 0.0


def intensity_radius_m(magnitude: float, intensity: int, location: GeoPoint) -> float:
    """Invert the linear attenuation relation for distance."""
    log_r_km = (MMI_A + MMI_B * magnitude + site_amplification(location) - intensity) / MMI_C
    return max(10.0 ** log_r_km * 1000.0, 0.0)


def intensity_to_pga_g(intensity: int) -> float:
    return 10.0 ** (intensity / 3.0 - 1.5)


def base_intensity(magnitude: float) -> int:
    return min(12, max(MMI_BARELY_FELT, floor(magnitude * 1.5 + 2)))


# ---------- Zones ----------
def intensity_zones(magnitude: float, location: GeoPoint, crater_diameter_m: float) -> tuple[IntensityZone, ...]:
    """MMI rings from the base intensity down to barely felt, largest radius first."""
    top = base_intensity(magnitude)
    zones = []
    for index, mmi in enumerate(range(top, MMI_BARELY_FELT - 1, -2)):
        floor_m = max(crater_diameter_m * 2.0 ** ((top - mmi) / 2.0), MIN_ZONE_RADIUS_M)
        radius = intensity_radius_m(magnitude, mmi, location)
        if radius <= floor_m:
            continue
        zones.append(IntensityZone(
            intensity=mmi,
            description=MMI_DESCRIPTIONS.get(mmi, "Unknown"),
            radius_m=radius,
            damage_level=mmi / 12.0,
            peak_ground_acceleration_g=intensity_to_pga_g(mmi),
            center=GeoPoint(location.latitude, location.longitude),
            color=MMI_COLORS.get(mmi, "#CCCCCC"),
            opacity=0.7 - index * 0.1,
        ))
    logger.info("[seismic.zones] M=%.2f base_mmi=%d zones=%s", magnitude, top,
                [f"MMI {z.intensity} ({z.radius_m:.0f}m)" for z in zones])
    return tuple(sorted(zones, key=lambda z: z.radius_m, reverse=True))


def ground_motion(zones: tuple[IntensityZone, ...]) -> dict:
    return {
        "peak_ground_acceleration_g": max((z.peak_ground_acceleration_g for z in zones), default=0.0),
        "max_intensity": max((z.intensity for z in zones), default=0),
        "attenuation_model": ATTENUATION_MODEL,
        "crustal_properties": {"velocity_mps": SEISMIC_VELOCITY, "density_kgpm3": EARTH_CRUST_DENSITY,
                               "quality": 600},
    }


# ---------- Damage ----------
def fragility(intensity: int, vulnerability: float) -> dict:
    a = intensity * vulnerability
    return {
        "light": min(a / 12.0 * 0.8, 0.8),
        "moderate": min(max(a - 4.0, 0.0) / 8.0 * 0.6, 0.6),
        "extensive": min(max(a - 6.0, 0.0) / 6.0 * 0.4, 0.4),
        "complete": min(max(a - 8.0, 0.0) / 4.0 * 0.2, 0.2),
    }


def expected_loss(states: dict) -> float:
    return states["complete"] * 0.6 + states["extensive"] * 0.3 + states["moderate"] * 0.1


def assess_building_damage(zones: tuple[IntensityZone, ...]) -> dict:
    out = []
    for z in zones:
        buildings = {}
        for key, (name, vulnerability) in BUILDING_CLASSES.items():
            states = fragility(z.intensity, vulnerability)
            buildings[key] = {"name": name, "damage_states": states, "expected_loss": expected_loss(states)}
        out.append({"intensity": z.intensity, "radius_m": z.radius_m, "buildings": buildings})
    return {"zones": out}


# ---------- Timing & spectrum ----------
def arrival_times(epicenter: GeoPoint, zones: tuple[IntensityZone, ...]) -> dict:
    arrivals = []
    for z in zones:
        waves = {key: {"name": name, "arrival_s": z.radius_m / v, "velocity_mps": v}
                 for key, (name, v) in WAVE_TYPES.items()}
        arrivals.append({"distance_m": z.radius_m, "intensity": z.intensity, "wave_arrivals": waves})
    return {
        "epicenter": {"latitude": epicenter.latitude, "longitude": epicenter.longitude},
        "wave_types": {key: {"name": name, "velocity_mps": v} for key, (name, v) in WAVE_TYPES.items()},
        "arrivals": arrivals,
    }


def shaking_duration_s(magnitude: float) -> float:
    """Impacts shake for ~30% of an equal-magnitude tectonic event, at least 5 s."""
    tectonic = 10.0 ** (0.5 * magnitude - 1.5)
    return max(tectonic * 0.3, 5.0)


def dominant_frequency_hz(magnitude: float, crater_diameter_m: float) -> float:
    if crater_diameter_m <= 0.0:
        return 50.0
    base = 1.0 / sqrt(crater_diameter_m / 1000.0)
    return max(min(base * 10.0 ** ((5.0 - magnitude) / 3.0), 50.0), 0.1)


def seismic_effects(energy_J: float, location: GeoPoint, crater_diameter_m: float) -> SeismicResult:
    """
    Impact-induced earthquake. Invalid coordinates and sub-M3 events are
    returned as non-significant results with no zones.
    """
    if not is_valid_location(location):
        logger.warning("[seismic.location] invalid location=%r; returning zero effect", location)
        return SeismicResult(magnitude=0.0, significant=False)

    M = magnitude_from_energy(energy_J)
    if M < SIGNIFICANT_MAGNITUDE:
        return SeismicResult(magnitude=M, significant=False)

    zones = intensity_zones(M, location, crater_diameter_m)
    return SeismicResult(
        magnitude=M,
        significant=True,
        effect_radius_m=max((z.radius_m for z in zones), default=0.0),
        zones=zones,
        ground_motion=ground_motion(zones),
        damage_assessment=assess_building_damage(zones),
        arrival_times=arrival_times(location, zones),
        duration_s=shaking_duration_s(M),
        dominant_frequency_hz=dominant_frequency_hz(M, crater_diameter_m),
    )
