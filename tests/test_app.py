"""Tests for the HTTP surface."""
import pytest
from fastapi.testclient import TestClient

from impactsim.app import app

client = TestClient(app)

TUNGUSKA = {"diameter_m": 60.0, "velocity_kms": 27.0, "angle_deg": 30.0, "composition": "rock",
            "latitude": 60.8858, "longitude": 101.8942}


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_is_ocean():
    r = client.get("/isOcean", params={"lat": 0.0, "lon": -150.0})
    assert r.status_code == 200
    assert r.json()["ocean"] is True
    assert r.json()["basin"] == "Pacific"


def test_is_ocean_rejects_bad_latitude():
    assert client.get("/isOcean", params={"lat": 95.0, "lon": 0.0}).status_code == 422


def test_summary_phase1_only():
    r = client.post("/impact/summary", json={"parameters": TUNGUSKA, "options": {"phase2_enabled": False}})
    assert r.status_code == 200
    body = r.json()
    assert body["survives_atmosphere"] is True
    assert body["crater_diameter"] > 0.0
    assert body["energy_tnt_tons"] > 0.0
    assert "seismic_magnitude" not in body


def test_summary_with_phase2():
    r = client.post("/impact/summary", json={"parameters": TUNGUSKA, "options": {"phase2_enabled": True}})
    body = r.json()
    assert "seismic_magnitude" in body
    assert "tsunami_generated" in body


@pytest.mark.parametrize("bad", [
    {**TUNGUSKA, "diameter_m": -1.0},
    {**TUNGUSKA, "composition": "custom"},
    {k: v for k, v in TUNGUSKA.items() if k != "velocity_kms"},
])
def test_summary_validation(bad):
    assert client.post("/impact/summary", json={"parameters": bad}).status_code == 422


def test_presets():
    r = client.get("/presets")
    assert set(r.json()) == {"tunguska", "chelyabinsk", "chicxulub"}


def test_run_preset():
    r = client.post("/presets/chicxulub")
    assert r.status_code == 200
    body = r.json()
    assert body["seismic_significant"] is True
    assert len(body["seismic_zones"]) >= 1


def test_run_unknown_preset():
    assert client.post("/presets/atlantis").status_code == 404


def test_geojson_rings():
    r = client.post("/impact/geojson", json={"parameters": TUNGUSKA})
    fc = r.json()
    assert fc["type"] == "FeatureCollection"
    names = [f["properties"]["name"] for f in fc["features"]]
    assert "blast_1psi" in names
    ring = fc["features"][0]["geometry"]["coordinates"][0]
    assert ring[0] == ring[-1]


def test_geojson_airburst_has_no_rings():
    small = {**TUNGUSKA, "diameter_m": 10.0}
    fc = client.post("/impact/geojson", json={"parameters": small}).json()
    assert fc["features"] == []
