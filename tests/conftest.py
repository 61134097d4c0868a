# tests/conftest.py
"""Shared fixtures: in-memory SQLite session with the component catalog seeded."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["API_KEY"] = ""

import pytest
from datetime import date, datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.database import create_tables
from app.models.vehicle import Vehicle
from app.schemas.vehicle_model import VehicleModelCreate
from app.schemas.warranty import ComponentWarrantyTerms, ModelWarrantyConfig
from app.services.model_config_service import create_model, update_config
from app.services.warranty_catalog import seed_components


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    session = sessionmaker(autoflush=False, bind=engine)()
    seed_components(session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_model(db):
    """Register a model; `terms` maps component name → (years, km)."""
    def _make(name="Model X", hybrid=False, terms=None):
        model = create_model(db, VehicleModelCreate(name=name, has_hybrid_battery=hybrid))
        if terms:
            config = ModelWarrantyConfig(
                per_component={n: ComponentWarrantyTerms(years=y, km=k) for n, (y, k) in terms.items()},
                has_hybrid_battery=hybrid,
            )
            update_config(db, model.id, config)
        return model
    return _make


@pytest.fixture
def make_vehicle(db):
    """Insert a vehicle row directly, without triggering warranty assignment."""
    def _make(model=None, plate="2CD-7960", purchase_date=date(2024, 1, 15), current_km=0):
        vehicle = Vehicle(
            plate_number=plate,
            vehicle_model_id=model.id if model else None,
            purchase_date=purchase_date,
            current_km=current_km,
            created_at=datetime.utcnow(),
            updated_at=datetime.utcnow(),
        )
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle
    return _make
