"""
Initialize database — creates all tables and seeds the warranty component catalog.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--with-sample-models]
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import SessionLocal, create_tables, engine
from app.config import settings
from app.schemas.vehicle_model import VehicleModelCreate
from app.schemas.warranty import ComponentWarrantyTerms, ModelWarrantyConfig
from app.services.model_config_service import create_model, find_model_by_name, update_config
from app.services.warranty_catalog import (
    BATTERY_HYBRID, CAR_PAINT, ELECTRICAL_SYSTEM, ENGINE, TRANSMISSION, seed_components,
)
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

# Shop defaults: 10y/200,000 km engine and paint, 5y/100,000 km drivetrain electrics
BASE_TERMS = {
    ENGINE: (10, 200000),
    CAR_PAINT: (10, 200000),
    TRANSMISSION: (5, 100000),
    ELECTRICAL_SYSTEM: (5, 100000),
}

SAMPLE_MODELS = [
    {"name": "SOBEN", "category": "SUV", "hybrid_battery": None},
    {"name": "KAIN", "category": "SUV", "hybrid_battery": (8, 160000)},
    {"name": "KESSOR", "category": "Sedan", "hybrid_battery": None},
    {"name": "KOUPREY", "category": "Pickup", "hybrid_battery": None},
]


def sample_config(hybrid_battery) -> ModelWarrantyConfig:
    per_component = {
        name: ComponentWarrantyTerms(years=years, km=km)
        for name, (years, km) in BASE_TERMS.items()
    }
    if hybrid_battery:
        years, km = hybrid_battery
        per_component[BATTERY_HYBRID] = ComponentWarrantyTerms(years=years, km=km)
    return ModelWarrantyConfig(per_component=per_component, has_hybrid_battery=bool(hybrid_battery))


def seed_sample_models(db) -> int:
    added = 0
    for sample in SAMPLE_MODELS:
        if find_model_by_name(db, sample["name"]):
            print(f"   • {sample['name']} already exists — skipped")
            continue
        model = create_model(db, VehicleModelCreate(
            name=sample["name"],
            category=sample["category"],
            has_hybrid_battery=bool(sample["hybrid_battery"]),
        ))
        update_config(db, model.id, sample_config(sample["hybrid_battery"]))
        print(f"   ✓ {sample['name']}")
        added += 1
    return added


def main():
    parser = argparse.ArgumentParser(description="Create warranty tables and seed reference data")
    parser.add_argument("--with-sample-models", action="store_true",
                        help="Also register SOBEN, KAIN, KESSOR and KOUPREY with default warranty terms")
    args = parser.parse_args()

    print("🗄️  Warranty DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except SQLAlchemyError as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables ready ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    db = SessionLocal()
    try:
        added = seed_components(db)
        print(f"\n🧩 Warranty components seeded: {added} new")

        if args.with_sample_models:
            print("\n🚗 Sample vehicle models:")
            count = seed_sample_models(db)
            print(f"   {count} model(s) added")
    finally:
        db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn app.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
