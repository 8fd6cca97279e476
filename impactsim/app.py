from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .config import load_settings, configure_logging
from .geo import rings_as_geojson
from .models import GeoPoint, ImpactParameters, ImpactResult
from .pipeline import PRESETS, preset_parameters, calculate_impact, energy_to_tnt_tons, angle_effects
from .tsunami import BandOceanClassifier

settings = load_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title="Impact Effects Simulator", version="1.0.0")

# -------------------------------
# Health + small utility endpoint
# -------------------------------
@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/isOcean")
async def is_ocean(
    lat: float = Query(..., ge=-90, le=90, description="Latitude in decimal degrees"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude in decimal degrees")
):
    ocean = await BandOceanClassifier().classify(GeoPoint(lat, lon))
    return {"ocean": ocean.in_ocean, "basin": ocean.basin, "water_depth_m": ocean.water_depth_m}

# -------------------------------
# Impact simulation endpoints
# -------------------------------

class ImpactOptions(BaseModel):
    phase2_enabled: Optional[bool] = Field(None, description="Seismic + tsunami stage; defaults to IMPACT_PHASE2_ENABLED")

class ImpactRequest(BaseModel):
    parameters: ImpactParameters
    options: Optional[ImpactOptions] = None


def _phase2(opts: Optional[ImpactOptions]) -> bool:
    if opts is None or opts.phase2_enabled is None:
        return settings.phase2_enabled
    return opts.phase2_enabled


def _summary(result: ImpactResult) -> dict:
    out = result.to_dict()
    out["energy_tnt_tons"] = energy_to_tnt_tons(result.kinematics.kinetic_energy_J)
    out["angle_effects"] = angle_effects(result.parameters.angle_deg)
    return out


@app.post("/impact/summary")
async def impact_summary(req: ImpactRequest):
    phase2 = _phase2(req.options)
    logger.info("[request] /impact/summary phase2=%s params=%s", phase2, req.parameters.model_dump(mode="json"))
    result = await calculate_impact(req.parameters, phase2_enabled=phase2)
    return _summary(result)


@app.get("/presets")
def list_presets():
    return PRESETS


@app.post("/presets/{name}")
async def run_preset(name: str, options: Optional[ImpactOptions] = None):
    try:
        params = preset_parameters(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown preset '{name}'.")
    result = await calculate_impact(params, phase2_enabled=_phase2(options))
    return _summary(result)

# -------------------------------
# Map layers (GeoJSON rings)
# -------------------------------

def _rings(result: ImpactResult) -> list[tuple[str, float, dict]]:
    rings: list[tuple[str, float, dict]] = []
    if result.ground is None:
        return rings
    b, t = result.ground.blast, result.ground.thermal
    rings += [
        ("blast_1psi", b.radius_1psi_m, {"kind": "blast"}),
        ("blast_5psi", b.radius_5psi_m, {"kind": "blast"}),
        ("blast_10psi", b.radius_10psi_m, {"kind": "blast"}),
        ("thermal_1deg", t.radius_1deg_m, {"kind": "thermal"}),
        ("thermal_2deg", t.radius_2deg_m, {"kind": "thermal"}),
        ("thermal_3deg", t.radius_3deg_m, {"kind": "thermal"}),
        ("crater", result.ground.crater.diameter_m / 2.0, {"kind": "crater"}),
    ]
    if result.phase2 is not None:
        for z in result.phase2.seismic.zones:
            rings.append((f"mmi_{z.intensity}", z.radius_m,
                          {"kind": "seismic", "intensity": z.intensity, "color": z.color, "opacity": z.opacity}))
    return rings


@app.post("/impact/geojson")
async def impact_geojson(req: ImpactRequest):
    result = await calculate_impact(req.parameters, phase2_enabled=_phase2(req.options))
    rings = _rings(result)
    center = result.parameters.location
    logger.info("[geojson] rings=%d center=[%s,%s]", len(rings), center.longitude, center.latitude)
    return rings_as_geojson(center, rings, steps=settings.geojson_steps)
