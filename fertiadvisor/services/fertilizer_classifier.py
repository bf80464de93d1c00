"""
Fertilizer Classifier Client.

The classifier is an external model service that maps soil, weather and crop
features to a fertilizer label with a confidence score. This module defines
the feature record, the client protocol, and an HTTP client for a deployed
model endpoint.

Failures are never papered over with a default fertilizer: any transport
error, non-2xx status, or malformed response raises ClassifierUnavailable.
"""
import os
import math
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from fertiadvisor.services.recommendation_engine import ClassifierPrediction, FieldInput

logger = logging.getLogger(__name__)

FERTILIZER_CLASSIFIER_URL = os.environ.get("FERTILIZER_CLASSIFIER_URL")
FERTILIZER_CLASSIFIER_TIMEOUT = float(os.environ.get("FERTILIZER_CLASSIFIER_TIMEOUT", "10.0"))


class ClassifierUnavailable(RuntimeError):
    """Raised when the fertilizer classifier cannot produce a prediction."""
    pass


@dataclass(frozen=True)
class ClassifierFeatures:
    """Feature vector sent to the fertilizer classifier."""
    temperature: float
    humidity: float
    moisture: float
    soil_type: int
    crop_type: int
    nitrogen: float
    potassium: float
    phosphorus: float

    @classmethod
    def from_field_input(cls, field_input: FieldInput) -> "ClassifierFeatures":
        return cls(
            temperature=field_input.temperature,
            humidity=field_input.humidity,
            moisture=field_input.soil_moisture,
            soil_type=field_input.soil_type,
            crop_type=field_input.crop_type,
            nitrogen=field_input.nitrogen,
            potassium=field_input.potassium,
            phosphorus=field_input.phosphorus,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Wire format expected by the model endpoint."""
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "moisture": self.moisture,
            "soilType": self.soil_type,
            "cropType": self.crop_type,
            "nitrogen": self.nitrogen,
            "potassium": self.potassium,
            "phosphorus": self.phosphorus,
        }


class FertilizerClassifier(Protocol):
    """Anything that can predict a fertilizer from classifier features."""

    async def predict(self, features: ClassifierFeatures) -> ClassifierPrediction:
        ...


def parse_prediction(payload: Any) -> ClassifierPrediction:
    """
    Parse a model response of the form {"fertilizer": str, "confidence": number}.

    Raises:
        ClassifierUnavailable: if the payload does not carry a usable label.
    """
    if not isinstance(payload, dict):
        raise ClassifierUnavailable(f"Unexpected classifier response: {payload!r}")

    label = payload.get("fertilizer")
    if not isinstance(label, str) or not label.strip():
        raise ClassifierUnavailable("Classifier response is missing a fertilizer label")

    confidence = payload.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ClassifierUnavailable("Classifier response is missing a numeric confidence")
    if not (0 <= confidence <= 100) or not math.isfinite(confidence):
        raise ClassifierUnavailable(f"Classifier confidence out of range: {confidence!r}")

    return ClassifierPrediction(fertilizer_label=label.strip(), confidence=float(confidence))


class HttpFertilizerClassifier:
    """
    Calls a deployed fertilizer model over HTTP.

    The endpoint receives the feature payload as JSON (POST) and answers with
    the predicted fertilizer and its confidence. No retries are attempted
    here; callers decide how to surface a failure.
    """

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        timeout: float = FERTILIZER_CLASSIFIER_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint_url = endpoint_url or FERTILIZER_CLASSIFIER_URL
        self.timeout = timeout
        self._transport = transport

        if self.endpoint_url:
            logger.info(f"Fertilizer classifier configured at {self.endpoint_url}")
        else:
            logger.warning("Fertilizer classifier disabled - FERTILIZER_CLASSIFIER_URL not configured")

    async def predict(self, features: ClassifierFeatures) -> ClassifierPrediction:
        """Request a prediction for the given features."""
        if not self.endpoint_url:
            raise ClassifierUnavailable("Fertilizer classifier endpoint is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint_url, json=features.to_payload())
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Fertilizer classifier timed out after {self.timeout}s: {e}")
            raise ClassifierUnavailable("Fertilizer classifier timed out") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Fertilizer classifier returned HTTP {e.response.status_code}")
            raise ClassifierUnavailable(
                f"Fertilizer classifier returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Fertilizer classifier request failed: {e}")
            raise ClassifierUnavailable("Fertilizer classifier request failed") from e
        except ValueError as e:
            logger.error(f"Failed to parse fertilizer classifier response: {e}")
            raise ClassifierUnavailable("Fertilizer classifier returned invalid JSON") from e

        prediction = parse_prediction(payload)
        logger.info(
            f"Classifier predicted {prediction.fertilizer_label} "
            f"({prediction.confidence:.1f}% confidence)"
        )
        return prediction


# Singleton instance
_fertilizer_classifier: Optional[HttpFertilizerClassifier] = None


def get_fertilizer_classifier() -> HttpFertilizerClassifier:
    """Get or create the fertilizer classifier client singleton."""
    global _fertilizer_classifier
    if _fertilizer_classifier is None:
        _fertilizer_classifier = HttpFertilizerClassifier()
    return _fertilizer_classifier
