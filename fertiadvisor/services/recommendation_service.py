"""
Recommendation Service.

Orchestrates one recommendation request:
1. Validate and normalize the field area
2. Assess soil condition and query the classifier (independent steps)
3. Assemble the recommendation from both

The classifier call is the only suspension point. Its failures propagate
as ClassifierUnavailable; no fallback fertilizer is invented.
"""
from typing import Any, Mapping
import logging

from fertiadvisor.services.field_input_parser import parse_field_input
from fertiadvisor.services.fertilizer_classifier import ClassifierFeatures, FertilizerClassifier
from fertiadvisor.services.recommendation_engine import (
    FieldInput,
    Recommendation,
    recommendation_engine,
)

logger = logging.getLogger(__name__)


async def generate_recommendation(
    field_input: FieldInput,
    classifier: FertilizerClassifier,
) -> Recommendation:
    """
    Produce a recommendation for parsed field data.

    Raises:
        InvalidInput: if the field size is not a finite positive number.
        ClassifierUnavailable: if the classifier cannot answer.
    """
    # Rejects a bad field size before the classifier is contacted.
    recommendation_engine.normalize_area(field_input.field_size, field_input.size_unit)

    soil_condition = recommendation_engine.assess_soil_condition(
        field_input.soil_ph,
        field_input.nitrogen,
        field_input.phosphorus,
        field_input.potassium,
        field_input.soil_moisture,
    )

    features = ClassifierFeatures.from_field_input(field_input)
    prediction = await classifier.predict(features)

    recommendation = recommendation_engine.assemble(field_input, prediction, soil_condition)
    logger.info(
        f"Recommendation for {recommendation.area_hectares:.2f} ha: primary={recommendation.primary_fertilizer.name}, "
        f"secondary={recommendation.secondary_fertilizer.name}, "
        f"total_cost={recommendation.cost_estimate.total}"
    )
    return recommendation


async def generate_recommendation_from_form(
    raw: Mapping[str, Any],
    classifier: FertilizerClassifier,
) -> Recommendation:
    """Parse raw form data, then produce a recommendation."""
    field_input = parse_field_input(raw)
    return await generate_recommendation(field_input, classifier)
