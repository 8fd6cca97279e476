"""Tests for impact seismicity."""
import pytest

from impactsim.models import GeoPoint
from impactsim.seismic import (
    assess_building_damage,
    base_intensity,
    dominant_frequency_hz,
    fragility,
    intensity_radius_m,
    intensity_to_pga_g,
    intensity_zones,
    magnitude_from_energy,
    seismic_effects,
    shaking_duration_s,
)

YUCATAN = GeoPoint(21.4, -89.5167)
CHICXULUB_E = 2.8e23
CHICXULUB_CRATER = 6390.0


# ── magnitude ───────────────────────────────────────────────────────


class TestMagnitude:

    def test_gutenberg_richter(self):
        # 1% of 1e17 J -> log10 = 15
        assert magnitude_from_energy(1e17) == pytest.approx((15.0 - 9.1) / 1.5)

    def test_clamped_high(self):
        assert magnitude_from_energy(1e40) == 10.0

    def test_clamped_low(self):
        assert magnitude_from_energy(1e8) == 0.0

    def test_zero_energy(self):
        assert magnitude_from_energy(0.0) == 0.0


class TestIntensityRelations:

    def test_base_intensity_bounds(self):
        assert base_intensity(0.5) == 3
        assert base_intensity(4.0) == 8
        assert base_intensity(9.5) == 12

    def test_radius_inverts_attenuation(self):
        # 2 + 1.5*5 - 6 = 3.5 -> log10(R_km) = 1
        assert intensity_radius_m(5.0, 6, YUCATAN) == pytest.approx(10_000.0)

    def test_pga(self):
        assert intensity_to_pga_g(3) == pytest.approx(10 ** -0.5)
        assert intensity_to_pga_g(9) > intensity_to_pga_g(6)


# ── zones ───────────────────────────────────────────────────────────


class TestZones:

    def test_chicxulub_zones(self):
        zones = intensity_zones(magnitude_from_energy(CHICXULUB_E), YUCATAN, CHICXULUB_CRATER)
        # MMI 12 lies inside the crater-scaled floor
        assert [z.intensity for z in zones] == [4, 6, 8, 10]

    def test_sorted_largest_first(self):
        zones = intensity_zones(8.0, YUCATAN, 1000.0)
        radii = [z.radius_m for z in zones]
        assert all(a > b for a, b in zip(radii, radii[1:]))
        intensities = [z.intensity for z in zones]
        assert intensities == sorted(intensities)

    def test_zone_fields(self):
        z = intensity_zones(6.0, YUCATAN, 100.0)[0]
        assert z.center == YUCATAN
        assert 0.0 < z.damage_level <= 1.0
        assert z.color.startswith("#")
        assert z.radius_m > 500.0


# ── damage, timing, spectrum ────────────────────────────────────────


class TestDamage:

    def test_fragility_saturates(self):
        s = fragility(12, 1.0)
        assert s == {"light": 0.8, "moderate": 0.6, "extensive": 0.4, "complete": 0.2}

    def test_critical_infrastructure_is_tougher(self):
        zones = intensity_zones(8.0, YUCATAN, 1000.0)
        a = assess_building_damage(zones)["zones"][-1]["buildings"]
        assert a["critical"]["expected_loss"] < a["residential"]["expected_loss"]
        assert a["residential"]["expected_loss"] == pytest.approx(0.3)


class TestTiming:

    def test_duration_floor(self):
        assert shaking_duration_s(3.0) == 5.0

    def test_duration_scaling(self):
        assert shaking_duration_s(9.0) == pytest.approx(0.3 * 10 ** 3.0)

    def test_frequency_clamped(self):
        assert dominant_frequency_hz(3.0, 1.0) == 50.0
        assert dominant_frequency_hz(10.0, 1e6) == 0.1


# ── full stage ──────────────────────────────────────────────────────


class TestSeismicEffects:

    def test_invalid_location_is_zero_effect(self):
        for bad in (GeoPoint(float("nan"), 0.0), GeoPoint(120.0, 0.0), None):
            r = seismic_effects(CHICXULUB_E, bad, CHICXULUB_CRATER)
            assert r.magnitude == 0.0
            assert r.significant is False
            assert r.zones == ()

    def test_below_significance_floor(self):
        r = seismic_effects(1e12, YUCATAN, 10.0)
        assert r.magnitude < 3.0
        assert r.significant is False
        assert r.zones == ()

    def test_chicxulub(self):
        r = seismic_effects(CHICXULUB_E, YUCATAN, CHICXULUB_CRATER)
        assert r.significant is True
        assert r.magnitude <= 10.0
        assert r.effect_radius_m == r.zones[0].radius_m
        assert r.ground_motion["max_intensity"] == 10
        assert len(r.arrival_times["arrivals"]) == len(r.zones)
        first = r.arrival_times["arrivals"][0]["wave_arrivals"]
        assert first["p_wave"]["arrival_s"] < first["s_wave"]["arrival_s"] < first["surface"]["arrival_s"]
        assert 0.1 <= r.dominant_frequency_hz <= 50.0
