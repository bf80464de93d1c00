"""
Pydantic schemas for the fertilizer recommendation API.
"""
from pydantic import BaseModel, Field
from typing import Any, Optional, List, Dict
from enum import Enum


# ==================== ENUMS ====================

class SizeUnitEnum(str, Enum):
    """Supported field size units."""
    HECTARES = "hectares"
    ACRES = "acres"
    BIGHA = "bigha"


# ==================== REQUEST SCHEMAS ====================

NumericInput = Any


class RecommendationRequest(BaseModel):
    """
    Field form data. Numeric fields accept numbers or numeric strings and are
    parsed by the recommendation service; parse errors fail the request.
    """
    field_name: Optional[str] = Field(None, alias="fieldName", max_length=100, description="Field name")
    field_size: Optional[NumericInput] = Field(None, alias="fieldSize", description="Field size in size_unit")
    size_unit: Optional[str] = Field(SizeUnitEnum.HECTARES.value, alias="sizeUnit", description="hectares, acres or bigha")
    crop_type: Optional[NumericInput] = Field(None, alias="cropType", description="Crop type code")
    soil_type: Optional[NumericInput] = Field(None, alias="soilType", description="Soil type code")
    soil_ph: Optional[NumericInput] = Field(None, alias="soilPH", description="Soil pH")
    nitrogen: Optional[NumericInput] = Field(None, description="Soil nitrogen kg/ha")
    phosphorus: Optional[NumericInput] = Field(None, description="Soil phosphorus kg/ha")
    potassium: Optional[NumericInput] = Field(None, description="Soil potassium kg/ha")
    temperature: Optional[NumericInput] = Field(None, description="Air temperature °C")
    humidity: Optional[NumericInput] = Field(None, description="Relative humidity %")
    soil_moisture: Optional[NumericInput] = Field(None, alias="soilMoisture", description="Soil moisture %")

    class Config:
        populate_by_name = True


# ==================== RESPONSE SCHEMAS ====================

class FertilizerChoiceResult(BaseModel):
    """Primary or secondary fertilizer."""
    name: str
    amount_kg: int = Field(ge=0)
    reason: str
    application_method: str


class OrganicOptionResult(BaseModel):
    """Organic amendment scaled to the field."""
    name: str
    amount_kg: int = Field(ge=0)
    benefits: str
    application_timing: str


class ApplicationTimingResult(BaseModel):
    primary: str
    secondary: str
    organic: str


class CostEstimateResult(BaseModel):
    """Costs in INR."""
    primary: int
    secondary: int
    organic: int
    total: int


class SoilConditionResult(BaseModel):
    """Soil condition analysis."""
    ph_status: str
    moisture_status: str
    nutrient_deficiency: List[str]
    recommendations: List[str]


class MLPredictionResult(BaseModel):
    fertilizer: str
    confidence: float


class FieldSummary(BaseModel):
    """Field identification and normalized area."""
    field_name: Optional[str] = None
    field_size: float
    size_unit: str
    area_hectares: float


class RecommendationResult(BaseModel):
    """Complete fertilizer recommendation."""
    primary_fertilizer: FertilizerChoiceResult
    secondary_fertilizer: FertilizerChoiceResult
    organic_options: List[OrganicOptionResult]
    application_timing: ApplicationTimingResult
    cost_estimate: CostEstimateResult
    soil_condition_analysis: SoilConditionResult
    ml_prediction: MLPredictionResult
    area_hectares: float


class RecommendationResponse(BaseModel):
    """Response schema for a recommendation request."""
    field: FieldSummary
    soil_health_score: int = Field(ge=0, le=100)
    recommendation: RecommendationResult


class FertilizerInfoResult(BaseModel):
    label: str
    description: str
    application: str
    npk: str


class CatalogResponse(BaseModel):
    """Category codes and fertilizer metadata used by the recommendation form."""
    crop_types: Dict[str, int]
    soil_types: Dict[str, int]
    size_units: List[str]
    fertilizers: List[FertilizerInfoResult]
