"""
Tests for the agronomic API endpoints.
"""
import pytest
from fastapi.testclient import TestClient
from farm_insights.main import app

client = TestClient(app)

SOIL = {
    "ph": 6.8,
    "organic_matter_pct": 2.5,
    "phosphorus_ppm": 40,
    "potassium_ppm": 80,
    "cec": 22,
    "sampled_on": "2024-04-02",
}


class TestSoilEndpoints:
    """Tests for /soil endpoints."""

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_classify_soil(self):
        response = client.post("/api/agronomic/soil/classify", json=SOIL)
        assert response.status_code == 200
        data = response.json()
        assert data["ph"]["band"] == "optimal"
        assert data["organic_matter"]["band"] == "moderate"
        assert data["phosphorus"]["band"] == "high"
        assert data["potassium"]["severity"] == "error"
        assert data["cec"]["note"] == "High level"

    def test_negative_measurement_rejected(self):
        response = client.post("/api/agronomic/soil/classify", json={**SOIL, "cec": -1})
        assert response.status_code == 422

    def test_infinite_measurement_rejected(self):
        body = '{"ph": Infinity, "organic_matter_pct": 2.5, "phosphorus_ppm": 40, "potassium_ppm": 80, "cec": 22}'
        response = client.post(
            "/api/agronomic/soil/report", content=body, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "ph must be a finite number"

    def test_out_of_range_nutrient_is_not_an_error(self):
        response = client.post("/api/agronomic/soil/classify", json={**SOIL, "phosphorus_ppm": 250})
        assert response.status_code == 200
        assert response.json()["phosphorus"]["out_of_range"] is True

    def test_soil_report(self):
        response = client.post("/api/agronomic/soil/report", json=SOIL)
        assert response.status_code == 200
        data = response.json()
        assert data["sampled_on"] == "2024-04-02"
        assert set(data["sections"]) == {"ph", "organic_matter", "nutrients", "biology"}
        assert data["sections"]["nutrients"]["status"] == "warning"
        assert "wood ash" in data["sections"]["nutrients"]["recommendation"]


class TestClassificationEndpoints:
    """Tests for pH, nutrient and hours endpoints."""

    def test_ph(self):
        response = client.get("/api/agronomic/ph/7.0")
        assert response.status_code == 200
        data = response.json()
        assert data["classification"]["band"] == "optimal"
        assert data["simplified_severity"] == "success"
        assert data["spectrum_position"] == pytest.approx(0.6)

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
    def test_non_finite_ph_rejected(self, value):
        response = client.get(f"/api/agronomic/ph/{value}")
        assert response.status_code == 400
        assert response.json()["detail"] == "pH must be a finite number"

    def test_nutrient(self):
        response = client.get("/api/agronomic/nutrients/potassium", params={"value": 150})
        assert response.status_code == 200
        data = response.json()
        assert data["band"] == "medium"
        assert data["interpretation"] == "Adequate potassium levels"

    def test_nutrient_out_of_range(self):
        response = client.get("/api/agronomic/nutrients/phosphorus", params={"value": 250})
        assert response.status_code == 200
        assert response.json()["out_of_range"] is True
        assert response.json()["interpretation"] == "Out of range"

    def test_unknown_nutrient(self):
        response = client.get("/api/agronomic/nutrients/nitrogen", params={"value": 10})
        assert response.status_code == 404

    def test_hours(self):
        response = client.post("/api/agronomic/hours/classify", json={"hours_worked": 8.0})
        assert response.status_code == 200
        data = response.json()
        assert data["band"] == "first_overtime"
        assert data["color"] == "yellow"
        assert data["ring_angle_deg"] == pytest.approx(120.0)
        assert data["formatted"] == "8:00"
        assert data["is_overtime"] is False

    def test_hours_from_clock_events(self):
        response = client.post("/api/agronomic/hours/classify", json={
            "clock_in": "2024-05-06T06:00:00",
            "clock_out": "2024-05-06T19:00:00",
        })
        assert response.status_code == 200
        assert response.json()["band"] == "excessive"

    def test_infinite_hours_rejected(self):
        response = client.post(
            "/api/agronomic/hours/classify",
            content='{"hours_worked": Infinity}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_hours_requires_input(self):
        response = client.post("/api/agronomic/hours/classify", json={})
        assert response.status_code == 400


class TestLeaseEndpoints:
    """Tests for lease payment endpoints."""

    def test_payment_due(self):
        response = client.post("/api/agronomic/leases/payment-due", json={
            "lease": {"status": "active", "rent_frequency": "annual", "start_date": "2020-03-01"},
            "as_of": "2024-03-15",
        })
        assert response.status_code == 200
        assert response.json() == {"due": True, "frequency": "annual"}

    def test_payment_not_due_for_inactive(self):
        response = client.post("/api/agronomic/leases/payment-due", json={
            "lease": {"status": "inactive", "rent_frequency": "monthly"},
            "as_of": "2024-03-15",
        })
        assert response.json()["due"] is False

    def test_upcoming_payments(self):
        response = client.post("/api/agronomic/leases/upcoming-payments", json={
            "leases": [
                {"status": "active", "rent_frequency": "annual", "rent_amount": 5000,
                 "start_date": "2020-04-05", "end_date": "2030-04-04", "property_name": "North"},
                {"status": "active", "rent_frequency": "quarterly", "rent_amount": 4000,
                 "start_date": "2023-01-01", "end_date": "2026-01-01", "property_name": "South"},
            ],
            "as_of": "2024-03-20",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [item["property_name"] for item in data["items"]] == ["South", "North"]
        assert data["items"][0]["amount"] == 1000.0
        assert data["items"][0]["is_upcoming"] is True
