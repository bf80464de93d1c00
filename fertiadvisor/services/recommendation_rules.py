"""
Deterministic agronomic rules and thresholds for fertilizer recommendations.

This module centralizes constants so the recommendation engine can remain
deterministic, auditable, and consistent across services and tests.
"""
import math

# Field size unit -> hectares multiplier. Unknown units fall back to 1.0.
AREA_UNIT_TO_HECTARES = {
    "hectares": 1.0,
    "acres": 0.404686,
    "bigha": 0.1338,
}
DEFAULT_AREA_MULTIPLIER = 1.0

# Soil pH bands (exclusive bounds of the optimal band)
PH_ACIDIC_BELOW = 6.0
PH_ALKALINE_ABOVE = 7.5

# Soil moisture bands (%)
MOISTURE_LOW_BELOW = 40.0
MOISTURE_HIGH_ABOVE = 80.0

# Deficiency thresholds in evaluation order N -> P -> K
DEFICIENCY_THRESHOLDS = (
    ("Nitrogen", 30.0),
    ("Phosphorus", 15.0),
    ("Potassium", 120.0),
)

# Application rates in kg/ha
PRIMARY_RATE_KG_HA = 100
DAP_RATE_KG_HA = 50
POTASSIUM_SULFATE_RATE_KG_HA = 40
ORGANIC_COMPOST_RATE_KG_HA = 1000

# Cost rates in INR per hectare
PRIMARY_COST_HA = 4000
SECONDARY_COST_HA = 2500
ORGANIC_COST_HA = 2000

# Soil health score bands: (optimal range, acceptable range)
HEALTH_PH_BANDS = ((6.0, 7.5), (5.5, 8.0))
HEALTH_MOISTURE_BANDS = ((60.0, 80.0), (40.0, 90.0))
# Nutrient minimums: (good, fair)
HEALTH_NITROGEN_MINIMUMS = (40.0, 20.0)
HEALTH_PHOSPHORUS_MINIMUMS = (20.0, 10.0)
HEALTH_POTASSIUM_MINIMUMS = (150.0, 100.0)
HEALTH_POINTS = (20, 15, 5)
MAX_HEALTH_SCORE = 100


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves rounded up.

    Python's built-in round() uses banker's rounding (2.5 -> 2); dosages and
    costs must round 2.5 -> 3.
    """
    return int(math.floor(value + 0.5))


def scale_by_area(rate: float, area_ha: float) -> int:
    """Scale a per-hectare rate to a field and round to whole units."""
    return round_half_up(rate * area_ha)
