"""
Fertilizer Recommendation Router.
Provides endpoints for generating fertilizer recommendations.
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from fertiadvisor.schemas.recommendation_schemas import (
    CatalogResponse,
    FertilizerInfoResult,
    FieldSummary,
    RecommendationRequest,
    RecommendationResponse,
    RecommendationResult,
    SizeUnitEnum,
)
from fertiadvisor.services.fertilizer_catalog import CROP_TYPES, FERTILIZER_INFO, SOIL_TYPES
from fertiadvisor.services.fertilizer_classifier import (
    ClassifierUnavailable,
    FertilizerClassifier,
    get_fertilizer_classifier,
)
from fertiadvisor.services.field_input_parser import parse_field_input
from fertiadvisor.services.recommendation_engine import InvalidInput, recommendation_engine
from fertiadvisor.services.recommendation_service import generate_recommendation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recommendations", tags=["recommendations"])


@router.post("", response_model=RecommendationResponse)
async def create_recommendation(
    request: RecommendationRequest,
    classifier: FertilizerClassifier = Depends(get_fertilizer_classifier),
):
    """
    Generate a fertilizer recommendation for one field.

    Returns 422 when a reading cannot be parsed and 503 when the fertilizer
    classifier is unavailable.
    """
    try:
        field_input = parse_field_input(request.model_dump(by_alias=True))
        recommendation = await generate_recommendation(field_input, classifier)
    except InvalidInput as e:
        logger.warning(f"Rejected recommendation request: {e}")
        raise HTTPException(
            status_code=422,
            detail={"field": e.field, "message": e.message},
        )
    except ClassifierUnavailable as e:
        logger.error(f"Fertilizer classifier unavailable: {e}")
        raise HTTPException(
            status_code=503,
            detail="Fertilizer prediction service is unavailable",
        )

    health_score = recommendation_engine.calculate_soil_health_score(
        field_input.soil_ph,
        field_input.nitrogen,
        field_input.phosphorus,
        field_input.potassium,
        field_input.soil_moisture,
    )

    return RecommendationResponse(
        field=FieldSummary(
            field_name=field_input.field_name,
            field_size=field_input.field_size,
            size_unit=field_input.size_unit,
            area_hectares=recommendation.area_hectares,
        ),
        soil_health_score=health_score,
        recommendation=RecommendationResult(**recommendation.to_dict()),
    )


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog():
    """Crop and soil codes, size units, and fertilizer metadata."""
    return CatalogResponse(
        crop_types=dict(CROP_TYPES),
        soil_types=dict(SOIL_TYPES),
        size_units=[unit.value for unit in SizeUnitEnum],
        fertilizers=[
            FertilizerInfoResult(label=label, **info)
            for label, info in FERTILIZER_INFO.items()
        ],
    )
