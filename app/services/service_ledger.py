# app/services/service_ledger.py
"""
Service ledger — records shop visits against vehicles.
The first completed service of a vehicle starts its warranty (start date =
service date) when no assignment exists yet. The trigger runs before the new
completion is stored so the "zero completed services so far" check holds, and
its parts are committed in the same transaction as the service row.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.errors import DependencyUnavailableError, NotFoundError
from app.models.service import Service
from app.schemas.service import ServiceCreate
from app.services.vehicle_service import get_vehicle
from app.services.warranty_assignment import assign_on_first_completed_service
from app.utils.logger import get_logger

logger = get_logger(__name__)


def record_service(db: Session, body: ServiceCreate):
    """Insert a service row. Returns (service, warranty parts created by the first-service trigger)."""
    vehicle = get_vehicle(db, body.vehicle_id)

    parts = []
    if body.service_status == "completed":
        parts = assign_on_first_completed_service(db, vehicle, body.service_date, commit=False)

    try:
        service = Service(
            vehicle_id=vehicle.id,
            service_date=body.service_date,
            service_type=body.service_type,
            total_amount=body.total_amount,
            service_status=body.service_status,
            warranty_used=body.warranty_used,
            current_km=body.current_km,
            created_at=datetime.utcnow(),
        )
        db.add(service)
        if body.current_km is not None:
            vehicle.current_km = body.current_km
            vehicle.updated_at = datetime.utcnow()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Ledger] Service for vehicle {body.vehicle_id} not recorded: {e}")
        raise DependencyUnavailableError("Failed to record service") from e
    except Exception:
        db.rollback()
        raise

    if parts:
        logger.info(f"[Ledger] First completed service for vehicle {vehicle.id} started its warranty")
    db.refresh(service)
    return service, parts


def complete_service(db: Session, service_id: int):
    """Mark a service completed. Returns (service, parts from the first-service trigger)."""
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        raise NotFoundError("Service not found")
    if service.service_status == "completed":
        return service, []

    vehicle = get_vehicle(db, service.vehicle_id)
    parts = assign_on_first_completed_service(db, vehicle, service.service_date, commit=False)

    try:
        service.service_status = "completed"
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Ledger] Service {service_id} not completed: {e}")
        raise DependencyUnavailableError("Failed to complete service") from e

    db.refresh(service)
    return service, parts


def list_services(db: Session, vehicle_id: Optional[int] = None, status: Optional[str] = None):
    q = db.query(Service)
    if vehicle_id:
        q = q.filter(Service.vehicle_id == vehicle_id)
    if status:
        q = q.filter(Service.service_status == status)
    return q.order_by(Service.service_date.desc(), Service.id.desc())
