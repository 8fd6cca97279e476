from __future__ import annotations

# -----------------------------
# Physical constants & defaults
# -----------------------------
EARTH_RADIUS = 6_371_000.0       # m
EARTH_GRAVITY = 9.81             # m/s^2
EARTH_CRUST_DENSITY = 2700.0     # kg/m^3
WATER_DENSITY = 1000.0           # kg/m^3

ATMOSPHERE_SCALE_HEIGHT = 8400.0  # m
AIR_DENSITY_SEA_LEVEL = 1.225     # kg/m^3

J_PER_TON_TNT = 4.184e9          # J in 1 ton TNT
ROCK_MELTING_ENERGY = 1.5e6      # J/kg

SEISMIC_VELOCITY = 6000.0        # m/s average crustal P-wave velocity
SEISMIC_EFFICIENCY = 0.01        # fraction of impact energy radiated seismically

# Composition bulk densities (kg/m^3)
COMPOSITION_DENSITIES = {"rock": 2700.0, "iron": 7800.0, "ice": 917.0}

# Material strength tiers (Pa), keyed by density upper bound
MATERIAL_STRENGTHS = (
    (1000.0, 1e6),   # ice
    (5000.0, 1e8),   # rock
    (float("inf"), 1e9),  # iron
)

# -----------------------------
# Damage thresholds
# -----------------------------
# Overpressure (Pa)
OVERPRESSURE_LIGHT = 6895.0          # 1 psi
OVERPRESSURE_MODERATE = 34475.0      # 5 psi
OVERPRESSURE_HEAVY = 68950.0         # 10 psi
OVERPRESSURE_DESTRUCTION = 137900.0  # 20 psi
AUXILIARY_PRESSURES = (1000.0, 5000.0, 10000.0, 20000.0, 50000.0)

# Thermal fluence (J/cm^2)
FIRST_DEGREE_BURN = 25.0
SECOND_DEGREE_BURN = 37.5
THIRD_DEGREE_BURN = 62.5

# Modified Mercalli intensity of the outermost zone
MMI_BARELY_FELT = 3
