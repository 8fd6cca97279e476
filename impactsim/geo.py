from __future__ import annotations
import logging
import math
from typing import Any

from .constants import EARTH_RADIUS
from .models import GeoPoint

logger = logging.getLogger(__name__)


def is_valid_location(location: Any) -> bool:
    """True for a GeoPoint-like object with finite, in-range lat/long."""
    lat = getattr(location, "latitude", None)
    lon = getattr(location, "longitude", None)
    if isinstance(lat, bool) or isinstance(lon, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance (m) on a spherical Earth."""
    φ1 = math.radians(a.latitude)
    φ2 = math.radians(b.latitude)
    Δφ = math.radians(b.latitude - a.latitude)
    Δλ = math.radians(b.longitude - a.longitude)
    h = math.sin(Δφ/2)**2 + math.cos(φ1)*math.cos(φ2)*math.sin(Δλ/2)**2
    return EARTH_RADIUS * 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))


def destination_point(lon_deg: float, lat_deg: float, bearing_rad: float, distance_m: float):
    """Point reached from (lon,lat) going 'distance_m' along 'bearing_rad' on a sphere."""
    δ = distance_m / EARTH_RADIUS
    φ1 = math.radians(lat_deg)
    λ1 = math.radians(lon_deg)
    θ = bearing_rad

    sinφ2 = math.sin(φ1)*math.cos(δ) + math.cos(φ1)*math.sin(δ)*math.cos(θ)
    φ2 = math.asin(max(-1.0, min(1.0, sinφ2)))
    y = math.sin(θ)*math.sin(δ)*math.cos(φ1)
    x = math.cos(δ) - math.sin(φ1)*math.sin(φ2)
    λ2 = λ1 + math.atan2(y, x)
    # normalize lon to [-180, 180)
    lon2 = math.degrees((λ2 + math.pi) % (2*math.pi) - math.pi)
    lat2 = math.degrees(φ2)
    return lon2, lat2


def circle_feature(center: GeoPoint, radius_m: float, steps: int = 64, properties: dict | None = None) -> dict:
    """Full-circle polygon approximation as a GeoJSON Feature."""
    coords = []
    for i in range(steps):
        b = 2 * math.pi * (i / steps)
        x, y = destination_point(center.longitude, center.latitude, b, radius_m)
        coords.append([x, y])
    coords.append(list(coords[0]))  # close ring
    logger.debug("[geojson.circle] steps=%d radius_m=%.1f center=[%s,%s]",
                 steps, radius_m, center.longitude, center.latitude)
    return {
        "type": "Feature",
        "properties": dict(properties or {}),
        "geometry": {"type": "Polygon", "coordinates": [coords]},
    }


def rings_as_geojson(center: GeoPoint, rings: list[tuple[str, float, dict]], steps: int = 64) -> dict:
    """
    FeatureCollection of concentric circles. Each ring is (name, radius_m, extra properties);
    zero-radius rings are skipped.
    """
    features = []
    for name, radius_m, extra in rings:
        if radius_m <= 0.0:
            continue
        props = {"name": name, "radius_m": radius_m, **extra}
        features.append(circle_feature(center, radius_m, steps=steps, properties=props))
    return {"type": "FeatureCollection", "features": features}
