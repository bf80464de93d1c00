"""
Static fertilizer catalogs consulted read-only by the recommendation engine.

Crop and soil codes follow the label encoding used when training the
fertilizer classifier (alphabetical order of the category names).
"""
from typing import Dict, Optional

# ==================== CLASSIFIER CATEGORY CODES ====================

CROP_TYPES: Dict[str, int] = {
    "Barley": 0,
    "Cotton": 1,
    "Ground Nuts": 2,
    "Maize": 3,
    "Millets": 4,
    "Oil seeds": 5,
    "Paddy": 6,
    "Pulses": 7,
    "Sugarcane": 8,
    "Tobacco": 9,
    "Wheat": 10,
}

SOIL_TYPES: Dict[str, int] = {
    "Black": 0,
    "Clayey": 1,
    "Loamy": 2,
    "Red": 3,
    "Sandy": 4,
}

UNKNOWN_CATEGORY = "Unknown"


# ==================== FERTILIZER METADATA ====================

FERTILIZER_INFO: Dict[str, Dict[str, str]] = {
    "Urea": {
        "description": "High nitrogen fertilizer that promotes vigorous leaf and stem growth",
        "application": "Apply in split doses as top dressing and irrigate after application",
        "npk": "46-0-0",
    },
    "DAP": {
        "description": "Diammonium phosphate supplies phosphorus for root development with some nitrogen",
        "application": "Apply as basal dose at sowing, placed below the seed",
        "npk": "18-46-0",
    },
    "14-35-14": {
        "description": "Complex fertilizer rich in phosphorus for early root establishment and flowering",
        "application": "Apply as basal dose during final land preparation",
        "npk": "14-35-14",
    },
    "28-28": {
        "description": "Balanced nitrogen and phosphorus for crops with high early nutrient demand",
        "application": "Apply as basal dose or foliar spray during early growth",
        "npk": "28-28-0",
    },
    "17-17-17": {
        "description": "Fully balanced NPK fertilizer for general crop nutrition",
        "application": "Broadcast evenly before sowing and incorporate into the soil",
        "npk": "17-17-17",
    },
    "20-20": {
        "description": "Equal nitrogen and phosphorus for steady vegetative growth",
        "application": "Apply at sowing and side dress during the vegetative stage",
        "npk": "20-20-0",
    },
    "10-26-26": {
        "description": "Phosphorus and potassium rich fertilizer for flowering and fruit quality",
        "application": "Apply as basal dose, especially for potassium demanding crops",
        "npk": "10-26-26",
    },
}

DEFAULT_APPLICATION_METHOD = "Apply as per standard agricultural practices"


# ==================== SECONDARY FERTILIZERS ====================

# Deficiency-driven secondary fertilizers, keyed by the nutrient they address.
SECONDARY_FERTILIZERS: Dict[str, Dict[str, str]] = {
    "Phosphorus": {
        "name": "DAP",
        "reason": "Addresses phosphorus deficiency identified in soil analysis",
        "application_method": "Apply as basal dose during soil preparation",
    },
    "Potassium": {
        "name": "Potassium sulfate",
        "reason": "Addresses potassium deficiency for better fruit quality",
        "application_method": "Apply during fruit development stage",
    },
}

DEFAULT_SECONDARY_FERTILIZER: Dict[str, str] = {
    "name": "Organic Compost",
    "reason": "Improves soil structure and provides slow-release nutrients",
    "application_method": "Apply 2-3 weeks before planting and incorporate into soil",
}


# ==================== ORGANIC AMENDMENTS ====================

# Ordered: Vermicompost, Neem Cake, Bone Meal
ORGANIC_CATALOG = (
    {
        "name": "Vermicompost",
        "base_kg_ha": 1000,
        "benefits": "Rich in nutrients, improves soil structure and water retention",
        "application_timing": "Apply 3-4 weeks before planting",
    },
    {
        "name": "Neem Cake",
        "base_kg_ha": 200,
        "benefits": "Natural pest deterrent and slow-release nitrogen source",
        "application_timing": "Apply at the time of land preparation",
    },
    {
        "name": "Bone Meal",
        "base_kg_ha": 150,
        "benefits": "Excellent source of phosphorus and calcium",
        "application_timing": "Apply as basal dose before sowing",
    },
)

APPLICATION_TIMING = {
    "primary": "Apply 1-2 weeks before planting for optimal nutrient availability",
    "secondary": "Apply during active growth phase or as recommended for specific fertilizer",
    "organic": "Apply 3-4 weeks before planting to allow decomposition",
}


def get_fertilizer_info(label: str) -> Optional[Dict[str, str]]:
    """Look up fertilizer metadata by classifier label; None if unknown."""
    return FERTILIZER_INFO.get(label)


def get_crop_name(code: int) -> str:
    """Resolve a crop code to its name, or 'Unknown'."""
    for name, value in CROP_TYPES.items():
        if value == code:
            return name
    return UNKNOWN_CATEGORY


def get_soil_name(code: int) -> str:
    """Resolve a soil code to its name, or 'Unknown'."""
    for name, value in SOIL_TYPES.items():
        if value == code:
            return name
    return UNKNOWN_CATEGORY
