"""Tests for impact tsunami modeling."""
import asyncio
from math import pi, sqrt

import pytest

from impactsim.models import GeoPoint, InitialWave, OceanImpact, WaveFront
from impactsim.tsunami import (
    BandOceanClassifier,
    COASTLINES,
    OceanLookupError,
    coastal_effects,
    format_time,
    hazard_level,
    initial_wave,
    propagate,
    transfer_efficiency,
    tsunami_effects,
    wave_at_distance,
    water_displacement_m3,
)

CENTRAL_PACIFIC = GeoPoint(0.0, -150.0)
CENTRAL_ASIA = GeoPoint(50.0, 60.0)


def _run(coro):
    return asyncio.run(coro)


class _FailingClassifier:
    async def classify(self, location):
        raise OceanLookupError("bathymetry service unavailable")


class _ShallowShelf:
    async def classify(self, location):
        return OceanImpact(in_ocean=True, water_depth_m=200.0, basin="Test", nearest_coast="Nowhere")


# ── ocean classification ────────────────────────────────────────────


class TestBandOceanClassifier:

    def test_pacific(self):
        o = _run(BandOceanClassifier().classify(CENTRAL_PACIFIC))
        assert o.in_ocean is True
        assert o.basin == "Pacific"
        assert o.water_depth_m == 4000.0

    def test_atlantic_mid_latitude(self):
        o = _run(BandOceanClassifier().classify(GeoPoint(40.0, -40.0)))
        assert o.basin == "Atlantic"
        assert o.water_depth_m == 3000.0
        assert o.nearest_coast == "North America East"

    def test_polar_depth(self):
        assert BandOceanClassifier.water_depth_m(65.0, -30.0) == 2000.0

    def test_land(self):
        o = _run(BandOceanClassifier().classify(CENTRAL_ASIA))
        assert o.in_ocean is False
        assert o.basin is None


# ── initial wave ────────────────────────────────────────────────────


class TestInitialWave:

    def test_efficiency_bounds(self):
        assert transfer_efficiency(0.0, 0.0) == pytest.approx(0.001)
        assert transfer_efficiency(5000.0, 5000.0) == pytest.approx(0.004)

    def test_displacement_capped_by_depth(self):
        assert water_displacement_m3(10_000.0, 100.0) == pytest.approx(2.0 / 3.0 * pi * 5000.0**2 * 100.0)

    def test_shallow_water_regime(self):
        w = initial_wave(2.8e23, 4000.0, 6390.0)
        assert w.wave_type == "shallow-water"
        assert w.wavelength_m == pytest.approx(50.0 * 6390.0)
        assert w.speed_mps == pytest.approx(sqrt(9.81 * 4000.0))
        assert w.period_s == pytest.approx(w.wavelength_m / w.speed_mps)

    def test_deep_water_regime(self):
        w = initial_wave(1e15, 4000.0, 10.0)
        assert w.wave_type == "deep-water"
        assert w.wavelength_m == pytest.approx(80_000.0)
        assert w.speed_mps == pytest.approx(sqrt(9.81 * 80_000.0 / (2.0 * pi)))

    def test_zero_crater_has_no_wave(self):
        assert initial_wave(1e20, 4000.0, 0.0).height_m == 0.0


# ── propagation ─────────────────────────────────────────────────────


def _wave(height, wavelength, speed):
    return InitialWave(height_m=height, wavelength_m=wavelength, period_s=wavelength / speed,
                       speed_mps=speed, energy_J=1e18, displacement_volume_m3=1.0,
                       transfer_efficiency=0.001, wave_type="shallow-water")


class TestPropagation:

    def test_distance_cap(self):
        fronts = propagate(_wave(1000.0, 1e6, 1000.0))
        # 3600 km per hour; the 6th hour would pass 20 000 km
        assert len(fronts) == 6
        assert fronts[-1].radius_m == pytest.approx(18_000_000.0)

    def test_height_cutoff(self):
        fronts = propagate(_wave(0.05, 1e5, 200.0))
        assert len(fronts) == 1
        assert fronts[0].time_s == 0.0

    def test_at_most_a_day(self):
        fronts = propagate(_wave(1e4, 1e9, 10.0))
        assert len(fronts) == 24
        heights = [f.height_m for f in fronts[1:]]
        assert heights == sorted(heights, reverse=True)


# ── coastal effects ─────────────────────────────────────────────────


def _dense_fronts(height=3.0):
    return tuple(WaveFront(time_s=r / 200.0, radius_m=r, height_m=height, speed_mps=200.0, energy_J=1.0)
                 for r in (k * 100_000.0 for k in range(1, 201)))


class TestCoastalEffects:

    def test_hazard_levels(self):
        assert hazard_level(12.0) == "extreme"
        assert hazard_level(6.0) == "high"
        assert hazard_level(3.0) == "moderate"
        assert hazard_level(1.0) == "low"
        assert hazard_level(0.5) == "minimal"

    def test_wave_at_distance_window(self):
        fronts = _dense_fronts()
        assert wave_at_distance(fronts, 1_050_000.0).radius_m == pytest.approx(1_000_000.0)
        assert wave_at_distance(fronts[:1], 5_000_000.0) is None

    def test_runup_by_topography(self):
        effects = {e.location: e for e in coastal_effects(_dense_fronts(), CENTRAL_PACIFIC)}
        assert set(effects) == {c.name for c in COASTLINES}
        assert effects["California Coast"].run_up_height_m == pytest.approx(4.5)
        assert effects["California Coast"].inundation_distance_m == pytest.approx(90.0)
        assert effects["Japan Coast"].hazard_level == "high"
        assert effects["Indonesia Coast"].run_up_height_m == pytest.approx(9.0)
        assert effects["Indonesia Coast"].inundation_distance_m == pytest.approx(9000.0)

    def test_sorted_by_arrival(self):
        arrivals = [e.arrival_time_s for e in coastal_effects(_dense_fronts(), CENTRAL_PACIFIC)]
        assert arrivals == sorted(arrivals)

    def test_small_waves_skipped(self):
        assert coastal_effects(_dense_fronts(height=0.05), CENTRAL_PACIFIC) == ()

    def test_format_time(self):
        assert format_time(5400.0) == "1h 30m"


# ── full stage ──────────────────────────────────────────────────────


class TestTsunamiEffects:

    def test_land_impact(self):
        r = _run(tsunami_effects(2.8e23, CENTRAL_ASIA, 6390.0))
        assert r.generated is False
        assert r.ocean_impact.in_ocean is False
        assert "Land impact" in r.reason

    def test_invalid_location(self):
        r = _run(tsunami_effects(2.8e23, GeoPoint(0.0, 200.0), 6390.0))
        assert r.generated is False
        assert r.ocean_impact is None

    def test_lookup_failure_is_degenerate(self):
        r = _run(tsunami_effects(2.8e23, CENTRAL_PACIFIC, 6390.0, classifier=_FailingClassifier()))
        assert r.generated is False
        assert "unavailable" in r.reason

    def test_small_wave_not_generated(self):
        r = _run(tsunami_effects(1.0, CENTRAL_PACIFIC, 10.0))
        assert r.generated is False
        assert r.initial_wave is not None
        assert r.initial_wave.height_m < 0.1

    def test_large_ocean_impact(self):
        r = _run(tsunami_effects(2.8e23, CENTRAL_PACIFIC, 6390.0))
        assert r.generated is True
        assert r.ocean_impact.basin == "Pacific"
        assert 1 <= len(r.wave_fronts) <= 24
        assert r.duration_s >= 6 * 3600.0
        assert len(r.visualization["animation_frames"]) == len(r.wave_fronts)
        assert r.energy_distribution["initial_energy_J"] == pytest.approx(r.initial_wave.energy_J)
        assert len(r.arrival_times) == len(r.coastal_effects)

    def test_max_height_without_coastal_arrivals(self):
        # ~1 m initial wave that decays below run-up significance before any coast
        r = _run(tsunami_effects(6.42e13, CENTRAL_PACIFIC, 1000.0))
        assert r.generated is True
        assert r.coastal_effects == ()
        assert r.initial_wave.height_m == pytest.approx(1.0, rel=0.01)
        assert r.max_height_m == pytest.approx(r.initial_wave.height_m)

    def test_max_height_covers_initial_wave(self):
        r = _run(tsunami_effects(2.8e23, CENTRAL_PACIFIC, 6390.0))
        assert r.max_height_m >= r.initial_wave.height_m
        assert r.max_height_m >= max((e.wave_height_m for e in r.coastal_effects), default=0.0)

    def test_custom_classifier_depth(self):
        r = _run(tsunami_effects(2.8e23, CENTRAL_PACIFIC, 6390.0, classifier=_ShallowShelf()))
        assert r.ocean_impact.water_depth_m == 200.0
        assert r.initial_wave.speed_mps == pytest.approx(sqrt(9.81 * 200.0))
