"""
Fertilizer Recommendation Engine.

Derives a structured fertilizer recommendation from:
- Field size (normalized to hectares)
- Soil readings (pH, N, P, K, moisture)
- The fertilizer classifier's prediction (primary fertilizer)

Pipeline:
1. Normalize field area to hectares
2. Classify soil condition (pH, moisture, nutrient deficiencies)
3. Select primary (classifier) and secondary (deficiency-driven) fertilizers
4. Scale organic amendments to the field area
5. Estimate costs and assemble the final recommendation

The engine performs no I/O and holds no mutable state, so a single instance
can serve concurrent requests.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Sequence, Tuple
import logging
import math

from fertiadvisor.services.fertilizer_catalog import (
    APPLICATION_TIMING,
    DEFAULT_APPLICATION_METHOD,
    DEFAULT_SECONDARY_FERTILIZER,
    ORGANIC_CATALOG,
    SECONDARY_FERTILIZERS,
    get_crop_name,
    get_fertilizer_info,
    get_soil_name,
)
from fertiadvisor.services.recommendation_rules import (
    AREA_UNIT_TO_HECTARES,
    DAP_RATE_KG_HA,
    DEFAULT_AREA_MULTIPLIER,
    DEFICIENCY_THRESHOLDS,
    HEALTH_MOISTURE_BANDS,
    HEALTH_NITROGEN_MINIMUMS,
    HEALTH_PH_BANDS,
    HEALTH_PHOSPHORUS_MINIMUMS,
    HEALTH_POINTS,
    HEALTH_POTASSIUM_MINIMUMS,
    MAX_HEALTH_SCORE,
    MOISTURE_HIGH_ABOVE,
    MOISTURE_LOW_BELOW,
    ORGANIC_COMPOST_RATE_KG_HA,
    ORGANIC_COST_HA,
    PH_ACIDIC_BELOW,
    PH_ALKALINE_ABOVE,
    POTASSIUM_SULFATE_RATE_KG_HA,
    PRIMARY_COST_HA,
    PRIMARY_RATE_KG_HA,
    SECONDARY_COST_HA,
    scale_by_area,
)

logger = logging.getLogger(__name__)


class InvalidInput(ValueError):
    """Raised when a field reading is missing, unparsable, or out of range."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


# ==================== DATA CLASSES ====================

@dataclass(frozen=True)
class FieldInput:
    """Parsed field measurements for one recommendation request."""
    field_size: float
    size_unit: str
    crop_type: int
    soil_type: int
    soil_ph: float
    nitrogen: float
    phosphorus: float
    potassium: float
    temperature: float  # °C
    humidity: float  # %
    soil_moisture: float  # %
    field_name: Optional[str] = None


@dataclass(frozen=True)
class ClassifierPrediction:
    """Fertilizer label and confidence (0-100) returned by the classifier."""
    fertilizer_label: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {"fertilizer": self.fertilizer_label, "confidence": self.confidence}


@dataclass(frozen=True)
class SoilConditionAssessment:
    """Qualitative soil status derived from fixed thresholds."""
    ph_status: str
    moisture_status: str
    nutrient_deficiency: Tuple[str, ...]
    recommendations: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ph_status": self.ph_status,
            "moisture_status": self.moisture_status,
            "nutrient_deficiency": list(self.nutrient_deficiency),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class FertilizerChoice:
    """A fertilizer with its dose for the whole field."""
    name: str
    amount_kg: int
    reason: str
    application_method: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OrganicOption:
    """An organic amendment scaled to the field area."""
    name: str
    amount_kg: int
    benefits: str
    application_timing: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ApplicationTiming:
    """When to apply each recommendation track."""
    primary: str
    secondary: str
    organic: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CostEstimate:
    """Cost per track in INR; total is the sum of the rounded tracks."""
    primary: int
    secondary: int
    organic: int
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Recommendation:
    """Complete fertilizer recommendation for one field."""
    primary_fertilizer: FertilizerChoice
    secondary_fertilizer: FertilizerChoice
    organic_options: Tuple[OrganicOption, ...]
    application_timing: ApplicationTiming
    cost_estimate: CostEstimate
    soil_condition_analysis: SoilConditionAssessment
    ml_prediction: ClassifierPrediction
    area_hectares: float

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-serializable representation."""
        return {
            "primary_fertilizer": self.primary_fertilizer.to_dict(),
            "secondary_fertilizer": self.secondary_fertilizer.to_dict(),
            "organic_options": [option.to_dict() for option in self.organic_options],
            "application_timing": self.application_timing.to_dict(),
            "cost_estimate": self.cost_estimate.to_dict(),
            "soil_condition_analysis": self.soil_condition_analysis.to_dict(),
            "ml_prediction": self.ml_prediction.to_dict(),
            "area_hectares": self.area_hectares,
        }


# ==================== ENGINE ====================

class RecommendationEngine:
    """
    Stateless fertilizer recommendation engine.

    Every method is a pure function of its arguments and the static
    catalogs; identical inputs always produce equal results.
    """

    def normalize_area(self, size: float, unit: str) -> float:
        """
        Convert a field size to hectares.

        Args:
            size: Field size in `unit`
            unit: hectares, acres or bigha. Unknown units are treated as hectares.

        Returns:
            Area in hectares.

        Raises:
            InvalidInput: if size is not a finite positive number.
        """
        if isinstance(size, bool) or not isinstance(size, (int, float)):
            raise InvalidInput("fieldSize", f"expected a number, got {size!r}")
        if not math.isfinite(size) or size <= 0:
            raise InvalidInput("fieldSize", f"must be a finite positive number, got {size}")

        multiplier = AREA_UNIT_TO_HECTARES.get(unit)
        if multiplier is None:
            logger.debug(f"Unknown size unit '{unit}', treating field size as hectares")
            multiplier = DEFAULT_AREA_MULTIPLIER
        return size * multiplier

    def classify_ph(self, ph: float) -> str:
        if ph < PH_ACIDIC_BELOW:
            return "Acidic"
        if ph > PH_ALKALINE_ABOVE:
            return "Alkaline"
        return "Optimal"

    def classify_moisture(self, moisture: float) -> str:
        if moisture < MOISTURE_LOW_BELOW:
            return "Low"
        if moisture > MOISTURE_HIGH_ABOVE:
            return "High"
        return "Optimal"

    def detect_deficiencies(
        self, nitrogen: float, phosphorus: float, potassium: float
    ) -> Tuple[str, ...]:
        """Return deficient nutrients in N, P, K order."""
        levels = {"Nitrogen": nitrogen, "Phosphorus": phosphorus, "Potassium": potassium}
        return tuple(
            nutrient for nutrient, threshold in DEFICIENCY_THRESHOLDS
            if levels[nutrient] < threshold
        )

    def assess_soil_condition(
        self,
        ph: float,
        nitrogen: float,
        phosphorus: float,
        potassium: float,
        moisture: float,
    ) -> SoilConditionAssessment:
        """
        Classify soil readings and build the five-step guidance list.

        Guidance order is fixed: pH, moisture, nutrients, soil testing,
        crop rotation.
        """
        ph_status = self.classify_ph(ph)
        moisture_status = self.classify_moisture(moisture)
        deficiencies = self.detect_deficiencies(nitrogen, phosphorus, potassium)

        if ph_status != "Optimal":
            amendment = "lime" if ph < PH_ACIDIC_BELOW else "sulfur"
            ph_advice = f"Adjust soil pH using {amendment}"
        else:
            ph_advice = "Maintain current pH levels"

        if moisture_status == "Low":
            moisture_advice = "Increase irrigation frequency"
        elif moisture_status == "High":
            moisture_advice = "Improve drainage"
        else:
            moisture_advice = "Maintain current moisture levels"

        if deficiencies:
            nutrient_advice = f"Address {', '.join(deficiencies)} deficiency"
        else:
            nutrient_advice = "Nutrient levels are adequate"

        recommendations = (
            ph_advice,
            moisture_advice,
            nutrient_advice,
            "Regular soil testing every 6 months is recommended",
            "Consider crop rotation to maintain soil health",
        )

        return SoilConditionAssessment(
            ph_status=ph_status,
            moisture_status=moisture_status,
            nutrient_deficiency=deficiencies,
            recommendations=recommendations,
        )

    def select_primary_fertilizer(
        self,
        prediction: ClassifierPrediction,
        area_ha: float,
        crop_type: Optional[int] = None,
        soil_type: Optional[int] = None,
    ) -> FertilizerChoice:
        """
        Primary fertilizer is the classifier's label.

        Labels missing from the metadata table fall back to generic guidance
        naming the crop and soil; this never raises.
        """
        label = prediction.fertilizer_label
        info = get_fertilizer_info(label)

        if info:
            reason = info["description"]
            application_method = info["application"]
        else:
            crop_name = get_crop_name(crop_type) if crop_type is not None else "Unknown"
            soil_name = get_soil_name(soil_type) if soil_type is not None else "Unknown"
            logger.debug(f"No metadata for fertilizer '{label}', using generic guidance")
            reason = f"ML model recommends this fertilizer for {crop_name} in {soil_name} soil"
            application_method = DEFAULT_APPLICATION_METHOD

        return FertilizerChoice(
            name=label,
            amount_kg=scale_by_area(PRIMARY_RATE_KG_HA, area_ha),
            reason=reason,
            application_method=application_method,
        )

    def select_secondary_fertilizer(
        self, deficiencies: Sequence[str], area_ha: float
    ) -> FertilizerChoice:
        """
        Deficiency-driven secondary fertilizer, first match wins:

        1. Phosphorus deficiency -> DAP (50 kg/ha)
        2. Potassium deficiency -> Potassium sulfate (40 kg/ha)
        3. Otherwise -> Organic Compost (1000 kg/ha)

        Nitrogen deficiency alone does not change the choice; the primary
        fertilizer already targets it.
        """
        if "Phosphorus" in deficiencies:
            entry, rate = SECONDARY_FERTILIZERS["Phosphorus"], DAP_RATE_KG_HA
        elif "Potassium" in deficiencies:
            entry, rate = SECONDARY_FERTILIZERS["Potassium"], POTASSIUM_SULFATE_RATE_KG_HA
        else:
            entry, rate = DEFAULT_SECONDARY_FERTILIZER, ORGANIC_COMPOST_RATE_KG_HA

        return FertilizerChoice(
            name=entry["name"],
            amount_kg=scale_by_area(rate, area_ha),
            reason=entry["reason"],
            application_method=entry["application_method"],
        )

    def select_fertilizers(
        self,
        prediction: ClassifierPrediction,
        deficiencies: Sequence[str],
        area_ha: float,
        crop_type: Optional[int] = None,
        soil_type: Optional[int] = None,
    ) -> Tuple[FertilizerChoice, FertilizerChoice]:
        """Return (primary, secondary) fertilizer choices."""
        primary = self.select_primary_fertilizer(prediction, area_ha, crop_type, soil_type)
        secondary = self.select_secondary_fertilizer(deficiencies, area_ha)
        return primary, secondary

    def get_organic_options(self, area_ha: float) -> Tuple[OrganicOption, ...]:
        """Vermicompost, Neem Cake and Bone Meal scaled to the field."""
        return tuple(
            OrganicOption(
                name=entry["name"],
                amount_kg=scale_by_area(entry["base_kg_ha"], area_ha),
                benefits=entry["benefits"],
                application_timing=entry["application_timing"],
            )
            for entry in ORGANIC_CATALOG
        )

    def get_application_timing(self) -> ApplicationTiming:
        return ApplicationTiming(**APPLICATION_TIMING)

    def estimate_cost(self, area_ha: float) -> CostEstimate:
        """
        Estimate costs per track from fixed per-hectare rates.

        Each track is rounded before summing, so the total can differ by up
        to 2 from rounding the unrounded sum.
        """
        primary = scale_by_area(PRIMARY_COST_HA, area_ha)
        secondary = scale_by_area(SECONDARY_COST_HA, area_ha)
        organic = scale_by_area(ORGANIC_COST_HA, area_ha)
        return CostEstimate(
            primary=primary,
            secondary=secondary,
            organic=organic,
            total=primary + secondary + organic,
        )

    def calculate_soil_health_score(
        self,
        ph: Optional[float],
        nitrogen: Optional[float],
        phosphorus: Optional[float],
        potassium: Optional[float],
        moisture: Optional[float],
    ) -> int:
        """
        Score soil health from 0 to 100.

        Each of pH, N, P, K and moisture contributes 20 (optimal), 15
        (acceptable) or 5 points. A missing pH or moisture reading
        contributes nothing; missing nutrients score the minimum.
        """
        best, fair, poor = HEALTH_POINTS

        def band_points(value: Optional[float], bands) -> int:
            (opt_low, opt_high), (ok_low, ok_high) = bands
            if not value:
                return 0
            if opt_low <= value <= opt_high:
                return best
            if ok_low <= value <= ok_high:
                return fair
            return poor

        def minimum_points(value: Optional[float], minimums) -> int:
            good_min, fair_min = minimums
            if value and value >= good_min:
                return best
            if value and value >= fair_min:
                return fair
            return poor

        score = (
            band_points(ph, HEALTH_PH_BANDS)
            + minimum_points(nitrogen, HEALTH_NITROGEN_MINIMUMS)
            + minimum_points(phosphorus, HEALTH_PHOSPHORUS_MINIMUMS)
            + minimum_points(potassium, HEALTH_POTASSIUM_MINIMUMS)
            + band_points(moisture, HEALTH_MOISTURE_BANDS)
        )
        return min(score, MAX_HEALTH_SCORE)

    def assemble(
        self,
        field_input: FieldInput,
        prediction: ClassifierPrediction,
        soil_condition: Optional[SoilConditionAssessment] = None,
    ) -> Recommendation:
        """
        Compose the full recommendation.

        Args:
            field_input: Parsed field measurements
            prediction: Classifier output for the same field
            soil_condition: Pre-computed assessment for the same readings;
                computed here when omitted.

        Returns:
            A new, immutable Recommendation.
        """
        area_ha = self.normalize_area(field_input.field_size, field_input.size_unit)

        if soil_condition is None:
            soil_condition = self.assess_soil_condition(
                field_input.soil_ph,
                field_input.nitrogen,
                field_input.phosphorus,
                field_input.potassium,
                field_input.soil_moisture,
            )

        primary, secondary = self.select_fertilizers(
            prediction,
            soil_condition.nutrient_deficiency,
            area_ha,
            crop_type=field_input.crop_type,
            soil_type=field_input.soil_type,
        )

        return Recommendation(
            primary_fertilizer=primary,
            secondary_fertilizer=secondary,
            organic_options=self.get_organic_options(area_ha),
            application_timing=self.get_application_timing(),
            cost_estimate=self.estimate_cost(area_ha),
            soil_condition_analysis=soil_condition,
            ml_prediction=prediction,
            area_hectares=area_ha,
        )


# Singleton instance
recommendation_engine = RecommendationEngine()
