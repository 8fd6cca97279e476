from __future__ import annotations
import copy
from dataclasses import dataclass, field, asdict
from enum import Enum
from math import pi
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import COMPOSITION_DENSITIES


class Composition(str, Enum):
    ROCK = "rock"
    IRON = "iron"
    ICE = "ice"
    CUSTOM = "custom"

    def density_for(self, custom_density: float | None = None) -> float:
        """Bulk density (kg/m^3); CUSTOM takes the caller-supplied value."""
        if self is Composition.CUSTOM:
            if custom_density is None:
                raise ValueError("Custom composition requires an explicit density.")
            return float(custom_density)
        return COMPOSITION_DENSITIES[self.value]


class CraterShape(str, Enum):
    CIRCULAR = "circular"
    ELLIPTICAL = "elliptical"
    ELONGATED = "elongated"


class ImpactParameters(BaseModel):
    """Immutable, validated description of the impactor and the ground point."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    diameter_m: float = Field(..., gt=0, description="Impactor diameter in meters")
    velocity_kms: float = Field(..., gt=0, description="Entry velocity in km/s")
    angle_deg: float = Field(..., ge=0, le=90, description="Entry angle to horizontal in degrees")
    composition: Composition = Field(Composition.ROCK)
    density_kgpm3: Optional[float] = Field(None, gt=0, description="Bulk density, custom composition only")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    @model_validator(mode="after")
    def _custom_needs_density(self) -> "ImpactParameters":
        if self.composition is Composition.CUSTOM and self.density_kgpm3 is None:
            raise ValueError("density_kgpm3 is required when composition is 'custom'")
        return self

    @property
    def density(self) -> float:
        return self.composition.density_for(self.density_kgpm3)

    @property
    def location(self) -> "GeoPoint":
        return GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class KinematicState:
    mass_kg: float
    kinetic_energy_J: float
    momentum_kgmps: float

    @classmethod
    def from_sphere(cls, diameter_m: float, density_kgpm3: float, velocity_kms: float) -> "KinematicState":
        mass = (pi / 6.0) * density_kgpm3 * diameter_m**3
        v = velocity_kms * 1000.0
        return cls(mass_kg=mass, kinetic_energy_J=0.5 * mass * v * v, momentum_kgmps=mass * v)


# -----------------------------
# Stage results
# -----------------------------
@dataclass(frozen=True)
class AtmosphericOutcome:
    survives: bool
    final_velocity_kms: float = 0.0
    final_mass_kg: float = 0.0
    final_diameter_m: float = 0.0
    airburst_altitude_m: float = 0.0
    airburst_energy_J: float = 0.0


@dataclass(frozen=True)
class EjectaZone:
    range_m: float
    thickness_m: float
    description: str
    pattern: str


@dataclass(frozen=True)
class CraterResult:
    diameter_m: float
    depth_m: float
    volume_m3: float
    rim_height_m: float
    ejecta_range_m: float
    efficiency: float
    shape: CraterShape
    melt_volume_m3: float = 0.0
    ejecta_zones: tuple[EjectaZone, ...] = ()


@dataclass(frozen=True)
class OverpressureRadius:
    pressure_pa: float
    radius_m: float


@dataclass(frozen=True)
class BlastResult:
    radius_1psi_m: float
    radius_5psi_m: float
    radius_10psi_m: float
    radius_20psi_m: float
    overpressure_radii: tuple[OverpressureRadius, ...]


@dataclass(frozen=True)
class Fireball:
    radius_m: float
    duration_s: float
    temperature_K: float
    radiant_energy_J: float


@dataclass(frozen=True)
class ThermalResult:
    radius_1deg_m: float
    radius_2deg_m: float
    radius_3deg_m: float
    duration_s: float
    fireball: Fireball


@dataclass(frozen=True)
class IntensityZone:
    intensity: int
    description: str
    radius_m: float
    damage_level: float
    peak_ground_acceleration_g: float
    center: GeoPoint
    color: str
    opacity: float


@dataclass(frozen=True)
class SeismicResult:
    magnitude: float
    significant: bool
    effect_radius_m: float = 0.0
    zones: tuple[IntensityZone, ...] = ()
    ground_motion: dict[str, Any] = field(default_factory=dict)
    damage_assessment: dict[str, Any] = field(default_factory=dict)
    arrival_times: dict[str, Any] = field(default_factory=dict)
    duration_s: float = 0.0
    dominant_frequency_hz: float = 0.0


@dataclass(frozen=True)
class OceanImpact:
    in_ocean: bool
    water_depth_m: float = 0.0
    basin: Optional[str] = None
    nearest_coast: Optional[str] = None


@dataclass(frozen=True)
class InitialWave:
    height_m: float
    wavelength_m: float
    period_s: float
    speed_mps: float
    energy_J: float
    displacement_volume_m3: float
    transfer_efficiency: float
    wave_type: str


@dataclass(frozen=True)
class WaveFront:
    time_s: float
    radius_m: float
    height_m: float
    speed_mps: float
    energy_J: float


@dataclass(frozen=True)
class CoastalEffect:
    location: str
    coordinates: GeoPoint
    distance_m: float
    arrival_time_s: float
    wave_height_m: float
    run_up_height_m: float
    inundation_distance_m: float
    run_up_velocity_mps: float
    hazard_level: str
    population_at_risk: int


@dataclass(frozen=True)
class TsunamiResult:
    generated: bool
    reason: Optional[str] = None
    ocean_impact: Optional[OceanImpact] = None
    initial_wave: Optional[InitialWave] = None
    wave_fronts: tuple[WaveFront, ...] = ()
    coastal_effects: tuple[CoastalEffect, ...] = ()
    arrival_times: tuple[dict[str, Any], ...] = ()
    visualization: dict[str, Any] = field(default_factory=dict)
    duration_s: float = 0.0
    energy_distribution: dict[str, Any] = field(default_factory=dict)
    max_height_m: float = 0.0


# -----------------------------
# Aggregate
# -----------------------------
@dataclass(frozen=True)
class GroundEffects:
    energy_J: float
    crater: CraterResult
    blast: BlastResult
    thermal: ThermalResult


@dataclass(frozen=True)
class Phase2Effects:
    seismic: SeismicResult
    tsunami: TsunamiResult


@dataclass(frozen=True)
class ImpactResult:
    parameters: ImpactParameters
    density_kgpm3: float
    kinematics: KinematicState
    entry: AtmosphericOutcome
    ground: Optional[GroundEffects] = None
    phase2: Optional[Phase2Effects] = None

    @property
    def survives_atmosphere(self) -> bool:
        return self.entry.survives

    def to_dict(self) -> dict:
        """
        Flat output contract. Ground and phase-2 keys are omitted (not nulled)
        when their stage did not run.
        """
        p = self.parameters
        out: dict[str, Any] = {
            "diameter": p.diameter_m,
            "velocity": p.velocity_kms,
            "angle": p.angle_deg,
            "density": self.density_kgpm3,
            "mass": self.kinematics.mass_kg,
            "kinetic_energy": self.kinematics.kinetic_energy_J,
            "momentum": self.kinematics.momentum_kgmps,
            "impact_location": {"latitude": p.latitude, "longitude": p.longitude},
            "survives_atmosphere": self.entry.survives,
            "final_velocity": self.entry.final_velocity_kms,
            "final_mass": self.entry.final_mass_kg,
            "final_diameter": self.entry.final_diameter_m,
        }
        if not self.entry.survives:
            out["airburst_altitude"] = self.entry.airburst_altitude_m
            out["airburst_energy"] = self.entry.airburst_energy_J
            return out

        if self.ground is not None:
            c, b, t = self.ground.crater, self.ground.blast, self.ground.thermal
            out.update({
                "crater_diameter": c.diameter_m,
                "crater_depth": c.depth_m,
                "crater_volume": c.volume_m3,
                "crater_shape": c.shape.value,
                "rim_height": c.rim_height_m,
                "ejecta_range": c.ejecta_range_m,
                "blast_radius_1psi": b.radius_1psi_m,
                "blast_radius_5psi": b.radius_5psi_m,
                "blast_radius_10psi": b.radius_10psi_m,
                "overpressure_radii": [asdict(r) for r in b.overpressure_radii],
                "thermal_radius_1deg": t.radius_1deg_m,
                "thermal_radius_2deg": t.radius_2deg_m,
                "thermal_radius_3deg": t.radius_3deg_m,
                "thermal_duration": t.duration_s,
                "fireball": asdict(t.fireball),
            })

        if self.phase2 is not None:
            s, ts = self.phase2.seismic, self.phase2.tsunami
            out.update({
                "seismic_magnitude": s.magnitude,
                "seismic_significant": s.significant,
                "seismic_radius": s.effect_radius_m,
                "seismic_zones": [asdict(z) for z in s.zones],
                "ground_motion": copy.deepcopy(s.ground_motion),
                "building_damage": copy.deepcopy(s.damage_assessment),
                "seismic_arrival_times": copy.deepcopy(s.arrival_times),
                "seismic_duration": s.duration_s,
                "seismic_frequency": s.dominant_frequency_hz,
                "tsunami_generated": ts.generated,
                "tsunami_max_height": ts.max_height_m,
                "tsunami_ocean_impact": None if ts.ocean_impact is None else asdict(ts.ocean_impact),
                "tsunami_initial_wave": None if ts.initial_wave is None else asdict(ts.initial_wave),
                "tsunami_propagation": {"wave_fronts": [asdict(f) for f in ts.wave_fronts]},
                "tsunami_coastal_effects": [asdict(e) for e in ts.coastal_effects],
                "tsunami_visualization": copy.deepcopy(ts.visualization),
                "tsunami_arrival_times": copy.deepcopy(list(ts.arrival_times)),
                "tsunami_duration": ts.duration_s,
            })
        return out
