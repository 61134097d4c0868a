# tests/test_api.py
"""HTTP-level tests: routing, error mapping and response shapes."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import date, timedelta
from unittest.mock import MagicMock
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from app.database import get_db
from app.main import app
from app.routers.health import health_check

MODEL_FORM = {
    "warranty_engine_years": 10, "warranty_engine_km": 200000,
    "warranty_paint_years": 10, "warranty_paint_km": 200000,
    "warranty_transmission_years": 5, "warranty_transmission_km": 100000,
    "warranty_electrical_years": 5, "warranty_electrical_km": 100000,
    "warranty_battery_years": 8, "warranty_battery_km": 160000,
    "has_hybrid_battery": True,
}


@pytest.fixture
def client_app(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


def client(application):
    return AsyncClient(transport=ASGITransport(app=application), base_url="http://test")


class TestWarrantyConfigurationAPI:
    @pytest.mark.asyncio
    async def test_components_catalog(self, client_app):
        async with client(client_app) as ac:
            resp = await ac.get("/api/v1/warranty-configuration", params={"action": "components"})
        assert resp.status_code == 200
        assert {c["name"] for c in resp.json()} == {
            "Engine", "Car Paint", "Transmission", "Electrical System", "Battery Hybrid",
        }

    @pytest.mark.asyncio
    async def test_update_model_then_read(self, client_app):
        async with client(client_app) as ac:
            created = await ac.post("/api/v1/vehicle-models", json={"name": "KAIN", "has_hybrid_battery": True})
            model_id = created.json()["id"]

            resp = await ac.post("/api/v1/warranty-configuration",
                                 params={"action": "update-model", "id": model_id}, json=MODEL_FORM)
            assert resp.status_code == 200
            assert resp.json()["status"] == "updated"

            detail = await ac.get("/api/v1/warranty-configuration", params={"action": "model", "id": model_id})
        battery = next(w for w in detail.json()["warranties"] if w["component_name"] == "Battery Hybrid")
        assert battery["is_applicable"] is True
        assert battery["display_text"] == "8 Years / 160,000 km"

    @pytest.mark.asyncio
    async def test_update_unknown_model_is_404(self, client_app):
        async with client(client_app) as ac:
            resp = await ac.post("/api/v1/warranty-configuration",
                                 params={"action": "update-model", "id": 9999}, json=MODEL_FORM)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Vehicle model not found"

    @pytest.mark.asyncio
    async def test_missing_required_field_is_422(self, client_app):
        body = {k: v for k, v in MODEL_FORM.items() if k != "warranty_engine_km"}
        async with client(client_app) as ac:
            resp = await ac.post("/api/v1/warranty-configuration",
                                 params={"action": "update-model", "id": 1}, json=body)
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_action(self, client_app):
        async with client(client_app) as ac:
            resp = await ac.get("/api/v1/warranty-configuration", params={"action": "bogus"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_auto_assign_then_conflict(self, client_app, make_model, make_vehicle):
        model = make_model(terms={"Engine": (3, 50000)})
        vehicle = make_vehicle()
        body = {"vehicle_id": vehicle.id, "vehicle_model_id": model.id, "purchase_date": "2024-01-15"}

        async with client(client_app) as ac:
            first = await ac.post("/api/v1/warranty-configuration", params={"action": "auto-assign"}, json=body)
            second = await ac.post("/api/v1/warranty-configuration", params={"action": "auto-assign"}, json=body)

        assert first.status_code == 200
        (part,) = first.json()["assigned_warranties"]
        assert part["component_name"] == "Engine"
        assert part["end_date"] == "2027-01-15"
        assert second.status_code == 409


class TestVehicleFlowAPI:
    @pytest.mark.asyncio
    async def test_register_vehicle_and_read_status(self, client_app, make_model):
        make_model(name="SOBEN", terms={"Engine": (10, 200000), "Car Paint": (10, 200000)})
        purchase = date.today() - timedelta(days=365)

        async with client(client_app) as ac:
            customer = await ac.post("/api/v1/customers", json={"name": "Sok Dara", "phone": "099 111 222"})
            created = await ac.post("/api/v1/vehicles", json={
                "plate_number": "2CF-6609",
                "customer_id": customer.json()["id"],
                "model": "SOBEN",
                "purchase_date": purchase.isoformat(),
                "current_km": 15000,
            })
            assert created.status_code == 201
            vehicle_id = created.json()["vehicle"]["id"]
            assert len(created.json()["assigned_warranties"]) == 2

            status_resp = await ac.get(f"/api/v1/warranty-status/vehicle/{vehicle_id}")
            parts = await ac.get("/api/v1/vehicle_warranty_parts", params={"vehicle_id": vehicle_id})
            listing = await ac.get("/api/v1/warranties", params={"search": "Sok"})

        assert status_resp.status_code == 200
        statuses = status_resp.json()["warranty_status"]
        assert statuses["Engine"]["status"] == "active"
        assert statuses["Battery Hybrid"]["status"] == "not_applicable"
        assert len(parts.json()) == 2
        assert listing.json()["total"] == 2
        assert all(r["live_status"] == "active" for r in listing.json()["rows"])

    @pytest.mark.asyncio
    async def test_unknown_vehicle_status_is_404(self, client_app):
        async with client(client_app) as ac:
            resp = await ac.get("/api/v1/warranty-status/vehicle/9999")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_parts_without_vehicle_id_is_empty(self, client_app):
        async with client(client_app) as ac:
            resp = await ac.get("/api/v1/vehicle_warranty_parts")
        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_cancel_part(self, client_app, make_model, make_vehicle):
        model = make_model(terms={"Engine": (3, 50000)})
        vehicle = make_vehicle(model)

        async with client(client_app) as ac:
            assigned = await ac.post("/api/v1/warranty-configuration", params={"action": "auto-assign"},
                                     json={"vehicle_id": vehicle.id, "vehicle_model_id": model.id})
            part_id = assigned.json()["assigned_warranties"][0]["id"]
            resp = await ac.put(f"/api/v1/vehicle_warranty_parts/{part_id}/status", json={"status": "cancelled"})
            bad = await ac.put(f"/api/v1/vehicle_warranty_parts/{part_id}/status", json={"status": "lost"})

        assert resp.status_code == 200
        assert resp.json()["status"] == "cancelled"
        assert bad.status_code == 422

    @pytest.mark.asyncio
    async def test_manual_parts(self, client_app, make_vehicle):
        vehicle = make_vehicle()
        async with client(client_app) as ac:
            catalog = await ac.get("/api/v1/warranty-configuration", params={"action": "components"})
            engine_id = next(c["id"] for c in catalog.json() if c["name"] == "Engine")
            body = {
                "vehicle_id": vehicle.id,
                "start_date": "2024-01-15",
                "warranty_parts": [
                    {"warranty_component_id": engine_id, "warranty_years": 5, "warranty_kilometers": 150000},
                ],
            }
            created = await ac.post("/api/v1/vehicle_warranty_parts", json=body)
            again = await ac.post("/api/v1/vehicle_warranty_parts", json=body)
            empty = await ac.post("/api/v1/vehicle_warranty_parts",
                                  json={**body, "warranty_parts": []})

        assert created.status_code == 201
        (part,) = created.json()
        assert part["component_name"] == "Engine"
        assert part["end_date"] == "2029-01-15"
        assert part["km_limit"] == 150000
        assert again.status_code == 409
        assert empty.status_code == 422

    @pytest.mark.asyncio
    async def test_first_completed_service_assigns(self, client_app, make_model, make_vehicle):
        model = make_model(terms={"Engine": (3, 50000)})
        vehicle = make_vehicle(model)

        async with client(client_app) as ac:
            created = await ac.post("/api/v1/services", json={
                "vehicle_id": vehicle.id, "service_date": "2024-05-02", "total_amount": "45.00",
            })
            service_id = created.json()["service"]["id"]
            completed = await ac.put(f"/api/v1/services/{service_id}/complete")

        assert created.json()["assigned_warranties"] == []
        assert completed.status_code == 200
        assert completed.json()["service"]["service_status"] == "completed"
        assert completed.json()["assigned_warranties"][0]["start_date"] == "2024-05-02"

    @pytest.mark.asyncio
    async def test_health(self, client_app):
        async with client(client_app) as ac:
            resp = await ac.get("/api/v1/health")
        assert resp.json()["database"] == "ok"
        assert resp.json()["status"] == "ok"
        assert resp.json()["warranty_components"] == 5


class TestHealth:
    def test_database_error_reports_degraded(self):
        db = MagicMock()
        db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

        report = health_check(db)

        assert report["status"] == "degraded"
        assert report["database"].startswith("error")
