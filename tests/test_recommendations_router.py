"""
Tests for the recommendations API.

The classifier dependency is overridden with a stub; no model service is
contacted.
"""
import pytest
from fastapi.testclient import TestClient

from fertiadvisor.main import app
from fertiadvisor.services.fertilizer_classifier import (
    ClassifierUnavailable,
    get_fertilizer_classifier,
)
from fertiadvisor.services.recommendation_engine import ClassifierPrediction


class StubClassifier:

    def __init__(self, label="Urea", confidence=87.0, error=None):
        self.label = label
        self.confidence = confidence
        self.error = error

    async def predict(self, features):
        if self.error:
            raise self.error
        return ClassifierPrediction(fertilizer_label=self.label, confidence=self.confidence)


@pytest.fixture
def payload():
    return {
        "fieldName": "North plot",
        "fieldSize": "2",
        "sizeUnit": "hectares",
        "cropType": "3",
        "soilType": "2",
        "soilPH": "5.5",
        "nitrogen": "20",
        "phosphorus": "10",
        "potassium": "100",
        "temperature": "25",
        "humidity": "60",
        "soilMoisture": "30",
    }


@pytest.fixture
def client_with():
    """Build a TestClient whose classifier dependency returns the given stub."""
    def factory(classifier):
        app.dependency_overrides[get_fertilizer_classifier] = lambda: classifier
        return TestClient(app)

    yield factory
    app.dependency_overrides.clear()


class TestCreateRecommendation:

    def test_deficient_field(self, client_with, payload):
        response = client_with(StubClassifier()).post("/api/recommendations", json=payload)

        assert response.status_code == 200
        body = response.json()
        rec = body["recommendation"]

        assert body["field"] == {
            "field_name": "North plot",
            "field_size": 2.0,
            "size_unit": "hectares",
            "area_hectares": 2.0,
        }
        assert body["soil_health_score"] == 65
        assert rec["primary_fertilizer"]["name"] == "Urea"
        assert rec["primary_fertilizer"]["amount_kg"] == 200
        assert rec["secondary_fertilizer"]["name"] == "DAP"
        assert rec["secondary_fertilizer"]["amount_kg"] == 100
        assert [o["amount_kg"] for o in rec["organic_options"]] == [2000, 400, 300]
        assert rec["cost_estimate"] == {"primary": 8000, "secondary": 5000, "organic": 4000, "total": 17000}
        assert rec["soil_condition_analysis"]["ph_status"] == "Acidic"
        assert rec["soil_condition_analysis"]["moisture_status"] == "Low"
        assert rec["soil_condition_analysis"]["nutrient_deficiency"] == ["Nitrogen", "Phosphorus", "Potassium"]
        assert rec["ml_prediction"] == {"fertilizer": "Urea", "confidence": 87.0}

    def test_numeric_json_values(self, client_with, payload):
        payload.update({"fieldSize": 5, "sizeUnit": "acres", "nitrogen": 45})

        response = client_with(StubClassifier()).post("/api/recommendations", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["field"]["area_hectares"] == pytest.approx(2.02343)
        assert body["recommendation"]["primary_fertilizer"]["amount_kg"] == 202

    def test_invalid_reading_returns_422(self, client_with, payload):
        payload["soilPH"] = "acidic"

        response = client_with(StubClassifier()).post("/api/recommendations", json=payload)

        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "soilPH"

    @pytest.mark.parametrize("value", [10 ** 400, [20], {"value": 20}, True])
    def test_non_numeric_json_reading_returns_422(self, client_with, payload, value):
        payload["nitrogen"] = value

        response = client_with(StubClassifier()).post("/api/recommendations", json=payload)

        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "nitrogen"

    def test_missing_reading_returns_422(self, client_with, payload):
        del payload["potassium"]

        response = client_with(StubClassifier()).post("/api/recommendations", json=payload)

        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "potassium"

    def test_classifier_unavailable_returns_503(self, client_with, payload):
        classifier = StubClassifier(error=ClassifierUnavailable("down"))

        response = client_with(classifier).post("/api/recommendations", json=payload)

        assert response.status_code == 503
        assert "recommendation" not in response.json()

    def test_unknown_label_still_recommends(self, client_with, payload):
        response = client_with(StubClassifier(label="Fish Emulsion")).post(
            "/api/recommendations", json=payload
        )

        assert response.status_code == 200
        primary = response.json()["recommendation"]["primary_fertilizer"]
        assert primary["reason"] == "ML model recommends this fertilizer for Maize in Loamy soil"
        assert primary["application_method"] == "Apply as per standard agricultural practices"


class TestCatalog:

    def test_catalog(self, client_with):
        response = client_with(StubClassifier()).get("/api/recommendations/catalog")

        assert response.status_code == 200
        body = response.json()
        assert body["crop_types"]["Maize"] == 3
        assert body["soil_types"]["Loamy"] == 2
        assert body["size_units"] == ["hectares", "acres", "bigha"]
        labels = [f["label"] for f in body["fertilizers"]]
        assert "Urea" in labels and "10-26-26" in labels

    def test_health(self, client_with):
        response = client_with(StubClassifier()).get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "OK"
