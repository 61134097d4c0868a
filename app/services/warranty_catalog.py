# app/services/warranty_catalog.py
"""
Warranty component catalog.
Lookup helpers over the seeded warranty_components table, plus the seed itself.
Model configurations reference components by name, so the assignment engine
resolves names through find_by_name() and skips unknown ones.
"""

from datetime import datetime
from sqlalchemy.orm import Session
from app.errors import NotFoundError
from app.models.warranty_component import WarrantyComponent
from app.utils.logger import get_logger

logger = get_logger(__name__)

ENGINE = "Engine"
CAR_PAINT = "Car Paint"
TRANSMISSION = "Transmission"
ELECTRICAL_SYSTEM = "Electrical System"
BATTERY_HYBRID = "Battery Hybrid"

# Always considered for assignment; Battery Hybrid is gated by the model's hybrid flag
BASE_COMPONENTS = (ENGINE, CAR_PAINT, TRANSMISSION, ELECTRICAL_SYSTEM)
ALL_COMPONENTS = BASE_COMPONENTS + (BATTERY_HYBRID,)

DEFAULT_COMPONENTS = [
    {"name": ENGINE, "category": "Engine", "description": "Engine warranty coverage"},
    {"name": CAR_PAINT, "category": "Body", "description": "Paint and body warranty coverage"},
    {"name": TRANSMISSION, "category": "Transmission", "description": "Transmission and gearbox warranty coverage"},
    {"name": ELECTRICAL_SYSTEM, "category": "Electrical", "description": "Electrical components warranty coverage"},
    {"name": BATTERY_HYBRID, "category": "Battery", "description": "Hybrid battery warranty coverage"},
]


def list_components(db: Session) -> list[WarrantyComponent]:
    return (
        db.query(WarrantyComponent)
        .filter(WarrantyComponent.is_active == True)  # noqa: E712
        .order_by(WarrantyComponent.category, WarrantyComponent.name)
        .all()
    )


def find_by_name(db: Session, name: str) -> WarrantyComponent:
    """Return the active component called `name`, or raise NotFoundError."""
    component = (
        db.query(WarrantyComponent)
        .filter(WarrantyComponent.name == name, WarrantyComponent.is_active == True)  # noqa: E712
        .first()
    )
    if not component:
        raise NotFoundError(f"Warranty component '{name}' not found")
    return component


def seed_components(db: Session) -> int:
    """Insert any missing default components. Returns how many were added."""
    existing = {name for (name,) in db.query(WarrantyComponent.name).all()}
    added = 0
    for entry in DEFAULT_COMPONENTS:
        if entry["name"] in existing:
            continue
        db.add(WarrantyComponent(is_active=True, created_at=datetime.utcnow(), **entry))
        added += 1
    db.commit()
    if added:
        logger.info(f"Seeded {added} warranty component(s)")
    return added
