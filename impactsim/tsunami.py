from __future__ import annotations
import logging
from dataclasses import dataclass
from math import pi, sqrt, exp
from typing import Optional, Protocol

from .constants import WATER_DENSITY, EARTH_GRAVITY
from .geo import is_valid_location, haversine_m
from .models import (
    GeoPoint, OceanImpact, InitialWave, WaveFront, CoastalEffect, TsunamiResult,
)

logger = logging.getLogger(__name__)

MIN_GENERATION_HEIGHT_M = 0.1
MIN_PROPAGATION_HEIGHT_M = 0.01
MAX_PROPAGATION_M = 20_000_000.0
TIME_STEPS = 24
TIME_INTERVAL_S = 3600.0
MIN_EVENT_DURATION_S = 6 * 3600.0

RUNUP_AMPLIFICATION = {"steep": 1.5, "moderate": 2.0, "flat": 3.0}
INUNDATION_PER_METER = {"steep": 20.0, "moderate": 100.0, "flat": 1000.0}

HAZARD_LEVELS = ((10.0, "extreme"), (5.0, "high"), (2.0, "moderate"), (0.5, "low"))

WAVE_HEIGHT_COLORS = ((5.0, "#8b0000"), (2.0, "#dc143c"), (1.0, "#ff4500"), (0.5, "#ffa500"))
WAVE_HEIGHT_COLOR_SCALE = {0.5: "#ffff00", 1.0: "#ffa500", 2.0: "#ff4500", 5.0: "#dc143c", 10.0: "#8b0000"}


@dataclass(frozen=True)
class Coastline:
    name: str
    coordinates: GeoPoint
    population: int
    topography: str


COASTLINES = (
    Coastline("California Coast", GeoPoint(36.0, -122.0), 25_000_000, "steep"),
    Coastline("Japan Coast", GeoPoint(36.0, 140.0), 50_000_000, "moderate"),
    Coastline("Chile Coast", GeoPoint(-30.0, -71.0), 5_000_000, "steep"),
    Coastline("Indonesia Coast", GeoPoint(-6.0, 106.0), 30_000_000, "flat"),
    Coastline("Hawaii Islands", GeoPoint(21.0, -158.0), 1_500_000, "steep"),
)

# Longitude of the coast used by the nearest-coast heuristic
COAST_REFERENCE = {
    "North America West": (-120.0, None),
    "North America East": (-75.0, None),
    "Europe": (0.0, None),
    "Asia": (140.0, None),
    "Australia": (140.0, -25.0),
}


class OceanLookupError(RuntimeError):
    """Ocean/bathymetry classification could not be obtained."""


class OceanClassifier(Protocol):
    async def classify(self, location: GeoPoint) -> OceanImpact: ...


# ---------- Stage 1: ocean classification ----------
class BandOceanClassifier:
    """
    Coarse longitude/latitude band classifier. Basins:
      Atlantic  lon -80..20,  |lat| < 70
      Pacific   lon -180..-80 or 120..180
      Indian    lon 20..120,  lat -60..30
    """

    @staticmethod
    def is_ocean(lat: float, lon: float) -> bool:
        if -80.0 <= lon <= 20.0 and abs(lat) < 70.0:
            return True
        if -180.0 <= lon <= -80.0 or 120.0 <= lon <= 180.0:
            return True
        return 20.0 <= lon <= 120.0 and -60.0 <= lat <= 30.0

    @staticmethod
    def water_depth_m(lat: float, lon: float) -> float:
        a = abs(lat)
        if a > 60.0:
            return 2000.0  # polar shelves
        if a < 30.0:
            return 4000.0
        return 3000.0

    @staticmethod
    def basin(lat: float, lon: float) -> str:
        if -80.0 <= lon <= 20.0:
            return "Atlantic"
        if -180.0 <= lon <= -80.0 or 120.0 <= lon <= 180.0:
            return "Pacific"
        if 20.0 <= lon <= 120.0:
            return "Indian"
        return "Unknown"

    @staticmethod
    def nearest_coast(lat: float, lon: float) -> str:
        def score(ref):
            ref_lon, ref_lat = ref
            s = abs(lon - ref_lon)
            if ref_lat is not None:
                s += abs(lat - ref_lat)
            return s
        return min(COAST_REFERENCE, key=lambda name: score(COAST_REFERENCE[name]))

    async def classify(self, location: GeoPoint) -> OceanImpact:
        lat, lon = location.latitude, location.longitude
        if not self.is_ocean(lat, lon):
            return OceanImpact(in_ocean=False)
        return OceanImpact(
            in_ocean=True,
            water_depth_m=self.water_depth_m(lat, lon),
            basin=self.basin(lat, lon),
            nearest_coast=self.nearest_coast(lat, lon),
        )


# ---------- Stage 2: initial wave ----------
def transfer_efficiency(water_depth_m: float, crater_diameter_m: float) -> float:
    """0.1%..0.4%; deeper water and larger craters couple better."""
    depth_factor = min(water_depth_m / 1000.0, 1.0)
    size_factor = min(crater_diameter_m / 1000.0, 1.0)
    return 0.001 * (1.0 + depth_factor) * (1.0 + size_factor)


def water_displacement_m3(crater_diameter_m: float, water_depth_m: float) -> float:
    r = crater_diameter_m / 2.0
    depth = min(r * 0.2, water_depth_m)
    return (2.0 / 3.0) * pi * r * r * depth


def initial_wave_height_m(energy_J: float, displacement_m3: float) -> float:
    """E = 1/2 rho g A h^2, with A the area of the circle of equal displaced volume."""
    area = pi * sqrt(displacement_m3 / pi) ** 2
    if area <= 0.0:
        return 0.0
    h2 = (2.0 * energy_J) / (WATER_DENSITY * EARTH_GRAVITY * area)
    return sqrt(max(h2, 0.0))


def is_shallow(wavelength_m: float, water_depth_m: float) -> bool:
    return water_depth_m < wavelength_m / 20.0


def wave_speed_mps(wavelength_m: float, water_depth_m: float) -> float:
    if is_shallow(wavelength_m, water_depth_m):
        return sqrt(EARTH_GRAVITY * water_depth_m)
    return sqrt(EARTH_GRAVITY * wavelength_m / (2.0 * pi))


def wave_period_s(wavelength_m: float, water_depth_m: float) -> float:
    if is_shallow(wavelength_m, water_depth_m):
        return wavelength_m / sqrt(EARTH_GRAVITY * water_depth_m)
    return sqrt(wavelength_m / (2.0 * pi * EARTH_GRAVITY))


def initial_wave(energy_J: float, water_depth_m: float, crater_diameter_m: float) -> InitialWave:
    eff = transfer_efficiency(water_depth_m, crater_diameter_m)
    E_t = energy_J * eff
    V = water_displacement_m3(crater_diameter_m, water_depth_m)
    wavelength = max(crater_diameter_m * 50.0, water_depth_m * 20.0)
    return InitialWave(
        height_m=initial_wave_height_m(E_t, V),
        wavelength_m=wavelength,
        period_s=wave_period_s(wavelength, water_depth_m),
        speed_mps=wave_speed_mps(wavelength, water_depth_m),
        energy_J=E_t,
        displacement_volume_m3=V,
        transfer_efficiency=eff,
        wave_type="shallow-water" if is_shallow(wavelength, water_depth_m) else "deep-water",
    )


# ---------- Stage 3: propagation ----------
def height_at_distance_m(h0: float, distance_m: float, wavelength_m: float) -> float:
    """1/sqrt(r_km) geometric spreading times exponential dissipation."""
    geometric = 1.0 / sqrt(max(distance_m / 1000.0, 1.0))
    dissipation = exp(-distance_m / (wavelength_m * 1000.0))
    return h0 * geometric * dissipation


def propagate(wave: InitialWave) -> tuple[WaveFront, ...]:
    fronts = []
    for step in range(TIME_STEPS):
        t = step * TIME_INTERVAL_S
        r = wave.speed_mps * t
        if r > MAX_PROPAGATION_M:
            break
        h = height_at_distance_m(wave.height_m, r, wave.wavelength_m)
        if h < MIN_PROPAGATION_HEIGHT_M:
            break
        fronts.append(WaveFront(
            time_s=t,
            radius_m=r,
            height_m=h,
            speed_mps=wave.speed_mps,
            energy_J=wave.energy_J / max(r / 1000.0, 1.0),
        ))
    return tuple(fronts)


# ---------- Stage 4: coastal effects ----------
def wave_at_distance(fronts: tuple[WaveFront, ...], distance_m: float) -> Optional[WaveFront]:
    for f in fronts:
        if abs(f.radius_m - distance_m) < f.radius_m * 0.1:
            return f
    return None


def hazard_level(run_up_m: float) -> str:
    for threshold, level in HAZARD_LEVELS:
        if run_up_m > threshold:
            return level
    return "minimal"


def coastal_effects(fronts: tuple[WaveFront, ...], epicenter: GeoPoint) -> tuple[CoastalEffect, ...]:
    effects = []
    for coast in COASTLINES:
        d = haversine_m(epicenter, coast.coordinates)
        wave = wave_at_distance(fronts, d)
        if wave is None or wave.height_m < MIN_GENERATION_HEIGHT_M:
            continue
        amp = RUNUP_AMPLIFICATION.get(coast.topography, 2.0)
        run_up = wave.height_m * amp
        effects.append(CoastalEffect(
            location=coast.name,
            coordinates=coast.coordinates,
            distance_m=d,
            arrival_time_s=wave.time_s,
            wave_height_m=wave.height_m,
            run_up_height_m=run_up,
            inundation_distance_m=run_up * INUNDATION_PER_METER.get(coast.topography, 100.0),
            run_up_velocity_mps=sqrt(2.0 * EARTH_GRAVITY * run_up),
            hazard_level=hazard_level(run_up),
            population_at_risk=coast.population,
        ))
    return tuple(sorted(effects, key=lambda e: e.arrival_time_s))


# ---------- Presentation data ----------
def format_time(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m"


def wave_height_color(height_m: float) -> str:
    for threshold, color in WAVE_HEIGHT_COLORS:
        if height_m > threshold:
            return color
    return "#ffff00"


def visualization(epicenter: GeoPoint, wave: InitialWave, fronts: tuple[WaveFront, ...],
                  effects: tuple[CoastalEffect, ...]) -> dict:
    center = {"latitude": epicenter.latitude, "longitude": epicenter.longitude}
    return {
        "epicenter": center,
        "animation_frames": [{
            "time_s": f.time_s,
            "circles": [{
                "center": center,
                "radius_m": f.radius_m,
                "height_m": f.height_m,
                "opacity": max(0.1, f.height_m / wave.height_m),
                "color": wave_height_color(f.height_m),
            }],
        } for f in fronts],
        "coastal_markers": [{
            "location": {"latitude": e.coordinates.latitude, "longitude": e.coordinates.longitude},
            "arrival_time_s": e.arrival_time_s,
            "height_m": e.wave_height_m,
            "hazard": e.hazard_level,
            "label": f"{e.location}: {e.wave_height_m:.1f}m",
        } for e in effects],
        "color_scale": dict(WAVE_HEIGHT_COLOR_SCALE),
        "duration_s": max((f.time_s for f in fronts), default=0.0),
    }


def energy_distribution(wave: InitialWave, fronts: tuple[WaveFront, ...]) -> dict:
    return {
        "initial_energy_J": wave.energy_J,
        "energy_decay_rate_J": wave.energy_J / (len(fronts) or 1),
        "final_energy_J": fronts[-1].energy_J if fronts else 0.0,
    }


async def tsunami_effects(energy_J: float, location: GeoPoint, crater_diameter_m: float,
                          classifier: OceanClassifier | None = None) -> TsunamiResult:
    """
    Ocean impact -> initial wave -> propagation -> coastal run-up.
    Land impacts, small waves, bad coordinates and failed ocean lookups all
    produce generated=False rather than an exception. max_height_m is the larger of
    the initial wave and the highest coastal arrival.
    """
    if not is_valid_location(location):
        logger.warning("[tsunami.location] invalid location=%r; returning zero effect", location)
        return TsunamiResult(generated=False, reason="Invalid coordinates provided")

    classifier = classifier or BandOceanClassifier()
    try:
        ocean = await classifier.classify(location)
    except OceanLookupError as e:
        logger.warning("[tsunami.lookup] ocean classification failed: %s", e)
        return TsunamiResult(generated=False, reason=f"Ocean lookup failed: {e}")

    if not ocean.in_ocean:
        return TsunamiResult(generated=False, reason="Land impact - no tsunami generation", ocean_impact=ocean)

    wave = initial_wave(energy_J, ocean.water_depth_m, crater_diameter_m)
    if wave.height_m < MIN_GENERATION_HEIGHT_M:
        return TsunamiResult(generated=False, reason="Wave height too small for significant tsunami",
                             ocean_impact=ocean, initial_wave=wave, max_height_m=wave.height_m)

    fronts = propagate(wave)
    effects = coastal_effects(fronts, location)
    logger.info("[tsunami.generated] basin=%s depth_m=%.0f h0_m=%.2f fronts=%d coasts=%d",
                ocean.basin, ocean.water_depth_m, wave.height_m, len(fronts), len(effects))

    return TsunamiResult(
        generated=True,
        ocean_impact=ocean,
        initial_wave=wave,
        wave_fronts=fronts,
        coastal_effects=effects,
        arrival_times=tuple({
            "location": e.location,
            "arrival_time_s": e.arrival_time_s,
            "formatted_time": format_time(e.arrival_time_s),
            "distance_m": e.distance_m,
        } for e in effects),
        visualization=visualization(location, wave, fronts, effects),
        duration_s=max(wave.period_s * 10.0, MIN_EVENT_DURATION_S),
        energy_distribution=energy_distribution(wave, fronts),
        max_height_m=max([wave.height_m, *(e.wave_height_m for e in effects)]),
    )
